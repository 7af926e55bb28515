from .engine import CertificationLevel, XPLevel

XP_LEVEL_DISPLAY = {
    XPLevel.BRONZE: {"name": "Bronze Learner", "icon": "medal_bronze", "color": "brown"},
    XPLevel.SILVER: {"name": "Silver Learner", "icon": "medal_silver", "color": "gray"},
    XPLevel.GOLD: {"name": "Gold Learner", "icon": "medal_gold", "color": "gold"},
    XPLevel.PLATINUM: {"name": "Platinum Learner", "icon": "star", "color": "purple"},
    XPLevel.DIAMOND: {"name": "Diamond Learner", "icon": "diamond", "color": "blue"},
}

CERTIFICATION_LEVEL_DISPLAY = {
    CertificationLevel.NONE: {"name": "Student", "short_name": "Student", "color": "gray"},
    CertificationLevel.FOUNDATION: {
        "name": "EV Foundation Certified",
        "short_name": "Foundation",
        "color": "green",
    },
    CertificationLevel.ASSOCIATE: {
        "name": "EV Associate Technician",
        "short_name": "Associate",
        "color": "blue",
    },
    CertificationLevel.PROFESSIONAL: {
        "name": "EV Professional Technician",
        "short_name": "Professional",
        "color": "orange",
    },
    CertificationLevel.CERTIFIED: {
        "name": "EV Certified Master",
        "short_name": "Certified Master",
        "color": "gold",
    },
}


def xp_level_name(level):
    return XP_LEVEL_DISPLAY[level]["name"]


def certification_level_name(level):
    return CERTIFICATION_LEVEL_DISPLAY[level]["name"]
