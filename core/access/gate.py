"""
Access Gate
Classifies redeemable access codes and sizes friend-code rewards. Pure
functions; persistence lives in access.services.
"""

from enum import Enum

CODE_LENGTH = 6


class CodeType(str, Enum):
    CLASS_ACCESS = "C"
    PREMIUM = "P"
    FRIEND = "F"
    INDIVIDUAL = "I"


class RedemptionResult(str, Enum):
    SUCCESS_BASIC = "success_basic"
    SUCCESS_PREMIUM = "success_premium"
    SUCCESS_FRIEND = "success_friend"
    SUCCESS_INDIVIDUAL = "success_individual"
    INVALID = "invalid"
    ALREADY_USED = "already_used"

    @property
    def is_success(self):
        return self not in (RedemptionResult.INVALID, RedemptionResult.ALREADY_USED)


SUCCESS_BY_TYPE = {
    CodeType.CLASS_ACCESS: RedemptionResult.SUCCESS_BASIC,
    CodeType.PREMIUM: RedemptionResult.SUCCESS_PREMIUM,
    CodeType.FRIEND: RedemptionResult.SUCCESS_FRIEND,
    CodeType.INDIVIDUAL: RedemptionResult.SUCCESS_INDIVIDUAL,
}

# Friend codes earned per XP tier ordinal; 5 and above get the top quota
FRIEND_CODE_QUOTAS = {1: 1, 2: 2, 3: 4, 4: 8, 5: 16}


def normalize_code(code):
    return (code or "").strip().upper()


def classify(code):
    """Return the CodeType of a normalized code, or None if it is malformed."""
    suffix = code[1:]
    if len(code) != CODE_LENGTH or not (suffix.isascii() and suffix.isdigit()):
        return None
    try:
        return CodeType(code[0])
    except ValueError:
        return None


def redeem(code, used_codes):
    """
    Validate `code` against the learner's `used_codes` set.

    On success the normalized code is added to `used_codes`; that insertion
    is the only side effect. Applying the granted tier is up to the caller.
    """
    code = normalize_code(code)
    if code in used_codes:
        return RedemptionResult.ALREADY_USED

    code_type = classify(code)
    if code_type is None:
        return RedemptionResult.INVALID

    used_codes.add(code)
    return SUCCESS_BY_TYPE[code_type]


def friend_code_quota(level):
    if level < 1:
        return 0
    return FRIEND_CODE_QUOTAS[min(level, 5)]
