"""
Anti-portfolio schemas - the final structural gate for generated data.

Field names are snake_case in Python and camelCase on the wire.
Scalars are validated strictly: no string-to-number coercion happens here,
that is the sanitizer's job.
"""
from typing import Annotated, Any, List, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, StrictStr, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from ..exceptions import SchemaValidationError, SchemaViolation
from .audio_tracks import BACKGROUND_AUDIO_TRACK_IDS, DEFAULT_TRACK_ID, DEFAULT_VOLUME

SCHEMA_VERSION = "1.0"

ThemeType = Literal["tech", "marketing", "design"]
SocialIcon = Literal["linkedin", "github", "portfolio"]

THEMES = ("tech", "marketing", "design")
SOCIAL_ICONS = ("linkedin", "github", "portfolio")

# Closed ranges shared with the sanitizer.
LEVEL_RANGE = (0, 100)
SKILL_ORBIT_RANGE = (50, 800)
SOCIAL_ORBIT_RANGE = (50, 800)
LESSON_ORBIT_RANGE = (50, 1000)
SPEED_RANGE = (5, 200)
RELEVANCE_RANGE = (1, 10)
YEAR_RANGE = (1900, 2100)
UNIT_RANGE = (0, 1)


def _bounded_int(low: int, high: Optional[int] = None):
    return Annotated[int, Field(strict=True, ge=low, le=high)]


def _bounded_number(low: float, high: float):
    return Annotated[float, Field(strict=True, ge=low, le=high)]


NonNegativeInt = _bounded_int(0)
Relevance = _bounded_int(*RELEVANCE_RANGE)
Speed = _bounded_number(*SPEED_RANGE)
UnitInterval = _bounded_number(*UNIT_RANGE)


class _WireModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


# ============================================================================
# Planets
# ============================================================================

class Skill(_WireModel):
    id: NonNegativeInt
    name: StrictStr
    type: ThemeType
    planet_type: Literal["skill"]
    level: _bounded_number(*LEVEL_RANGE)
    orbit_radius: _bounded_number(*SKILL_ORBIT_RANGE)
    speed: Speed
    description: StrictStr
    relevance: Relevance
    hover_info: StrictStr


class SocialLink(_WireModel):
    id: StrictStr
    name: StrictStr
    planet_type: Literal["social"]
    url: StrictStr
    icon: SocialIcon
    orbit_radius: _bounded_number(*SOCIAL_ORBIT_RANGE)
    speed: Speed
    relevance: Relevance
    hover_info: StrictStr
    preview_description: StrictStr

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        if not is_absolute_url(value):
            raise ValueError("must be an absolute URL with scheme and host")
        return value


class Project(_WireModel):
    id: NonNegativeInt
    title: StrictStr
    skill_id: NonNegativeInt
    description: StrictStr
    outcome: StrictStr
    tags: List[StrictStr]


class LessonLearned(_WireModel):
    id: StrictStr
    title: StrictStr
    year: _bounded_int(*YEAR_RANGE)
    incident_report: StrictStr
    lesson_extracted: StrictStr
    quote: StrictStr
    orbit_radius: _bounded_number(*LESSON_ORBIT_RANGE)
    speed: Speed
    relevance: Relevance
    hover_info: StrictStr


class Failure(_WireModel):
    title: StrictStr
    lesson: StrictStr
    story: StrictStr


class BackgroundAudio(_WireModel):
    track_id: StrictStr
    volume: UnitInterval

    @field_validator("track_id")
    @classmethod
    def _known_track(cls, value: str) -> str:
        if value not in BACKGROUND_AUDIO_TRACK_IDS:
            raise ValueError(f"must be one of {', '.join(BACKGROUND_AUDIO_TRACK_IDS)}")
        return value


# ============================================================================
# Root artifact
# ============================================================================

class UserData(_WireModel):
    name: StrictStr
    role: StrictStr
    theme: ThemeType
    manifesto: StrictStr
    identity_negations: List[StrictStr] = Field(default_factory=list)
    background_audio: BackgroundAudio = Field(
        default_factory=lambda: BackgroundAudio(track_id=DEFAULT_TRACK_ID, volume=DEFAULT_VOLUME)
    )
    core: StrictStr
    core_description: StrictStr
    skills: List[Skill]
    social_links: List[SocialLink]
    lessons_learned: List[LessonLearned]
    projects: List[Project]
    failure: Failure


class SourceSummary(_WireModel):
    files_count: NonNegativeInt
    links_count: NonNegativeInt


class Meta(_WireModel):
    source_summary: SourceSummary
    confidence: UnitInterval
    limitations: List[StrictStr]


class AntiPortfolioData(_WireModel):
    version: Literal["1.0"]
    generated_at: StrictStr
    user_data: UserData
    meta: Meta


# ============================================================================
# Validation entry points
# ============================================================================

def is_absolute_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def _format_path(loc) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "$"


def violations_from_error(exc: ValidationError) -> List[SchemaViolation]:
    return [
        SchemaViolation(path=_format_path(err["loc"]), expected=err["msg"], actual=err.get("input"))
        for err in exc.errors()
    ]


def validate_anti_portfolio(data: Any) -> AntiPortfolioData:
    """
    Validate a wire-shaped dict. Raises SchemaValidationError listing every
    (path, expected, actual) violation; nothing is partially accepted.
    """
    try:
        return AntiPortfolioData.model_validate(data)
    except ValidationError as exc:
        raise SchemaValidationError(violations_from_error(exc)) from exc


def to_wire(model: AntiPortfolioData) -> dict:
    """Dump a validated model back to the camelCase JSON shape."""
    return model.model_dump(by_alias=True)
