"""
Level Engine
Maps XP totals and completed-course counts to learner levels. Pure functions,
no database access.
"""

from dataclasses import dataclass
from enum import Enum


class XPLevel(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"


class CertificationLevel(str, Enum):
    NONE = "none"
    FOUNDATION = "foundation"
    ASSOCIATE = "associate"
    PROFESSIONAL = "professional"
    CERTIFIED = "certified"


# Minimum XP per level, ascending
XP_THRESHOLDS = (
    (XPLevel.BRONZE, 0),
    (XPLevel.SILVER, 1000),
    (XPLevel.GOLD, 2500),
    (XPLevel.PLATINUM, 5000),
    (XPLevel.DIAMOND, 10000),
)

# Minimum completed courses per level, ascending. Three courses is still
# associate; professional starts at four.
CERTIFICATION_THRESHOLDS = (
    (CertificationLevel.NONE, 0),
    (CertificationLevel.FOUNDATION, 1),
    (CertificationLevel.ASSOCIATE, 2),
    (CertificationLevel.PROFESSIONAL, 4),
    (CertificationLevel.CERTIFIED, 5),
)


@dataclass(frozen=True)
class LevelProgress:
    current_progress: int
    needed_for_next: int
    fraction: float


def _clamp(value):
    return max(int(value or 0), 0)


def _band(thresholds, value):
    current = thresholds[0][0]
    for level, minimum in thresholds:
        if value >= minimum:
            current = level
    return current


def xp_level(total_xp) -> XPLevel:
    return _band(XP_THRESHOLDS, _clamp(total_xp))


def min_xp(level: XPLevel) -> int:
    return dict(XP_THRESHOLDS)[level]


def next_xp_level(level: XPLevel) -> XPLevel | None:
    levels = [entry[0] for entry in XP_THRESHOLDS]
    index = levels.index(level)
    return levels[index + 1] if index + 1 < len(levels) else None


def tier_ordinal(level: XPLevel) -> int:
    """1 for bronze up to 5 for diamond."""
    return [entry[0] for entry in XP_THRESHOLDS].index(level) + 1


def progress_to_next_level(total_xp) -> LevelProgress:
    """
    XP gathered inside the current level and the span of that level.

    Diamond is terminal: the whole total is reported as both progress and
    target with a fraction of 1.0.
    """
    total_xp = _clamp(total_xp)
    level = xp_level(total_xp)
    following = next_xp_level(level)
    if following is None:
        return LevelProgress(current_progress=total_xp, needed_for_next=total_xp, fraction=1.0)

    floor = min_xp(level)
    current = total_xp - floor
    needed = min_xp(following) - floor
    return LevelProgress(
        current_progress=current,
        needed_for_next=needed,
        fraction=min(current / needed, 1.0),
    )


def certification_level(completed_course_count) -> CertificationLevel:
    return _band(CERTIFICATION_THRESHOLDS, _clamp(completed_course_count))


