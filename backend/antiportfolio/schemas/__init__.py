from .anti_portfolio import (
    AntiPortfolioData,
    UserData,
    Skill,
    SocialLink,
    Project,
    LessonLearned,
    Failure,
    BackgroundAudio,
    Meta,
    SCHEMA_VERSION,
    validate_anti_portfolio,
    to_wire,
)
from .analysis import ProfileAnalysis

__all__ = [
    "AntiPortfolioData",
    "UserData",
    "Skill",
    "SocialLink",
    "Project",
    "LessonLearned",
    "Failure",
    "BackgroundAudio",
    "Meta",
    "SCHEMA_VERSION",
    "validate_anti_portfolio",
    "to_wire",
    "ProfileAnalysis",
]
