from .gate import RedemptionResult

REDEMPTION_MESSAGES = {
    RedemptionResult.SUCCESS_BASIC: "Basic access unlocked! You now have full access to all courses.",
    RedemptionResult.SUCCESS_PREMIUM: "Premium access unlocked! You now have access to premium content and certifications.",
    RedemptionResult.SUCCESS_FRIEND: "Friend code redeemed! You now have basic access thanks to your friend.",
    RedemptionResult.SUCCESS_INDIVIDUAL: "Individual access unlocked! You now have full access to all basic courses.",
    RedemptionResult.INVALID: "Invalid code. Please check the code and try again.",
    RedemptionResult.ALREADY_USED: "This code has already been used.",
}


def redemption_message(result):
    return REDEMPTION_MESSAGES[result]
