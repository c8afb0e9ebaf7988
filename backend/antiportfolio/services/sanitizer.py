"""
Sanitizer for model-generated anti-portfolio data.

Coerces the parsed model output field by field into a shape the schema
validator always accepts: wrong or missing values get a documented fallback,
numbers are clamped into their ranges, collections are truncated to their
target size and the business rules (real name, thematic role, fixed counts)
are enforced on top. Narrative content is not judged here.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from ..schemas.analysis import ProfileAnalysis
from ..schemas.anti_portfolio import (
    LESSON_ORBIT_RANGE,
    LEVEL_RANGE,
    RELEVANCE_RANGE,
    SCHEMA_VERSION,
    SKILL_ORBIT_RANGE,
    SOCIAL_ICONS,
    SOCIAL_ORBIT_RANGE,
    SPEED_RANGE,
    THEMES,
    UNIT_RANGE,
    YEAR_RANGE,
    is_absolute_url,
)
from ..schemas.audio_tracks import BACKGROUND_AUDIO_TRACK_IDS, DEFAULT_TRACK_ID, DEFAULT_VOLUME
from .coercion import (
    coerce_dict,
    coerce_enum,
    coerce_int,
    coerce_list,
    coerce_number,
    coerce_str,
    coerce_str_list,
    hover_text,
    normalize_url,
)
from .names import looks_like_job_title_as_name, resolve_real_name

logger = logging.getLogger(__name__)

# Target sizes: longer arrays are truncated, shorter ones are left alone.
SKILLS_COUNT = 7
PROJECTS_COUNT = 4
LESSONS_COUNT = 2
SOCIAL_LINKS_COUNT = 3
IDENTITY_NEGATIONS_COUNT = 5

DEFAULT_THEME = "tech"
FALLBACK_ROLE = "Navigatore di Missione"

# Per-field numeric fallbacks; each lies inside its range.
SKILL_LEVEL_FALLBACK = 70
SKILL_ORBIT_FALLBACK = 220
SKILL_SPEED_FALLBACK = 40
SKILL_RELEVANCE_FALLBACK = 7
SOCIAL_ORBIT_FALLBACK = 350
SOCIAL_SPEED_FALLBACK = 60
SOCIAL_RELEVANCE_FALLBACK = 7
LESSON_ORBIT_FALLBACK = 500
LESSON_SPEED_FALLBACK = 100
LESSON_RELEVANCE_FALLBACK = 8
CONFIDENCE_FALLBACK = 0.5

DEFAULT_IDENTITY_NEGATIONS = [
    "Non sono il mio [[job title]].",
    "Non sono i miei [[deliverable]].",
    "Non sono gli [[strumenti]] che uso.",
    "Non sono le mie [[certificazioni]].",
    "Non sono il mio [[CV]].",
]

SOCIAL_LABELS = {"linkedin": "LinkedIn", "github": "GitHub", "portfolio": "Portfolio"}
_SOCIAL_HOSTS = {"linkedin.com": "linkedin", "github.com": "github"}

INFO_NOT_AVAILABLE = "info non disponibile"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_generated_at(raw: Any) -> str:
    """Keep a parseable ISO timestamp; stamp the current time otherwise."""
    text = raw.strip() if isinstance(raw, str) else ""
    if text:
        candidate = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        try:
            datetime.fromisoformat(candidate)
            return text
        except ValueError:
            logger.debug("Replacing unparseable generatedAt %r", text)
    return _utc_now_iso()


# ============================================================================
# Planets
# ============================================================================

def sanitize_skill(raw: Any, index: int, theme: str, skill_id: int) -> Dict[str, Any]:
    if isinstance(raw, str):
        raw = {"name": raw}
    raw = coerce_dict(raw)
    n = index + 1
    name = coerce_str(raw.get("name"), f"Skill {n}")
    description = coerce_str(raw.get("description"), f"Come uso {name} nelle mie missioni.")
    return {
        "id": skill_id,
        "name": name,
        "type": coerce_enum(raw.get("type"), THEMES, theme),
        "planetType": "skill",
        "level": coerce_number(raw.get("level"), *LEVEL_RANGE, SKILL_LEVEL_FALLBACK),
        "orbitRadius": coerce_number(raw.get("orbitRadius"), *SKILL_ORBIT_RANGE, SKILL_ORBIT_FALLBACK),
        "speed": coerce_number(raw.get("speed"), *SPEED_RANGE, SKILL_SPEED_FALLBACK),
        "description": description,
        "relevance": coerce_int(raw.get("relevance"), *RELEVANCE_RANGE, SKILL_RELEVANCE_FALLBACK),
        "hoverInfo": coerce_str(raw.get("hoverInfo"), hover_text(description)),
    }


def sanitize_skills(raw: Any, theme: str) -> List[Dict[str, Any]]:
    """Truncate to the target count and keep ids unique and non-negative."""
    skills = []
    seen = set()
    for index, item in enumerate(coerce_list(raw, SKILLS_COUNT)):
        candidate = coerce_int(coerce_dict(item).get("id"), 0, None, index + 1)
        if candidate in seen:
            candidate = max(seen) + 1
        seen.add(candidate)
        skills.append(sanitize_skill(item, index, theme, candidate))
    return skills


def _icon_from_url(url: str) -> Optional[str]:
    host = (urlparse(url).hostname or "").lower()
    for domain, icon in _SOCIAL_HOSTS.items():
        if host == domain or host.endswith("." + domain):
            return icon
    return None


def sanitize_social_link(raw: Any, index: int) -> Optional[Dict[str, Any]]:
    """Returns None when the link has no usable URL; a URL cannot be defaulted."""
    raw = coerce_dict(raw)
    url = normalize_url(coerce_str(raw.get("url"), ""))
    if not is_absolute_url(url):
        logger.warning("Dropping social link %s without a usable URL: %r", index + 1, raw.get("url"))
        return None

    icon = (
        coerce_enum(raw.get("icon"), SOCIAL_ICONS, None)
        or _icon_from_url(url)
        or SOCIAL_ICONS[index % len(SOCIAL_ICONS)]
    )
    name = coerce_str(raw.get("name"), SOCIAL_LABELS[icon])
    preview = coerce_str(raw.get("previewDescription"), f"Apri {name} per i dettagli.")
    return {
        "id": coerce_str(raw.get("id"), icon),
        "name": name,
        "planetType": "social",
        "url": url,
        "icon": icon,
        "orbitRadius": coerce_number(raw.get("orbitRadius"), *SOCIAL_ORBIT_RANGE, SOCIAL_ORBIT_FALLBACK),
        "speed": coerce_number(raw.get("speed"), *SPEED_RANGE, SOCIAL_SPEED_FALLBACK),
        "relevance": coerce_int(raw.get("relevance"), *RELEVANCE_RANGE, SOCIAL_RELEVANCE_FALLBACK),
        "hoverInfo": coerce_str(raw.get("hoverInfo"), hover_text(preview)),
        "previewDescription": preview,
    }


def sanitize_social_links(raw: Any) -> List[Dict[str, Any]]:
    links = []
    for item in coerce_list(raw):
        link = sanitize_social_link(item, len(links))
        if link is not None:
            links.append(link)
        if len(links) == SOCIAL_LINKS_COUNT:
            break
    return links


def sanitize_lesson(raw: Any, index: int, current_year: int) -> Dict[str, Any]:
    raw = coerce_dict(raw)
    n = index + 1
    lesson_extracted = coerce_str(
        raw.get("lessonExtracted"), "Lezione estratta: adattarsi, osservare, migliorare."
    )
    return {
        "id": coerce_str(raw.get("id"), f"lesson-{n}"),
        "title": coerce_str(raw.get("title"), f"Lesson {n}"),
        "year": coerce_int(raw.get("year"), *YEAR_RANGE, current_year),
        "incidentReport": coerce_str(raw.get("incidentReport"), "Evento critico registrato durante la missione."),
        "lessonExtracted": lesson_extracted,
        "quote": coerce_str(raw.get("quote"), "“Ogni errore è un dato.”"),
        "orbitRadius": coerce_number(raw.get("orbitRadius"), *LESSON_ORBIT_RANGE, LESSON_ORBIT_FALLBACK),
        "speed": coerce_number(raw.get("speed"), *SPEED_RANGE, LESSON_SPEED_FALLBACK),
        "relevance": coerce_int(raw.get("relevance"), *RELEVANCE_RANGE, LESSON_RELEVANCE_FALLBACK),
        "hoverInfo": coerce_str(raw.get("hoverInfo"), hover_text(lesson_extracted)),
    }


def sanitize_project(raw: Any, index: int, skill_ids: List[int]) -> Dict[str, Any]:
    raw = coerce_dict(raw)
    n = index + 1
    # Dangling skill references are re-pointed round-robin onto real skills.
    anchor = skill_ids[index % len(skill_ids)] if skill_ids else 0
    skill_id = coerce_int(raw.get("skillId"), 0, None, anchor)
    if skill_ids and skill_id not in skill_ids:
        skill_id = anchor
    return {
        "id": coerce_int(raw.get("id"), 0, None, n),
        "title": coerce_str(raw.get("title"), f"Missione {n}"),
        "skillId": skill_id,
        "description": coerce_str(raw.get("description"), INFO_NOT_AVAILABLE),
        "outcome": coerce_str(raw.get("outcome"), INFO_NOT_AVAILABLE),
        "tags": coerce_str_list(raw.get("tags")),
    }


def sanitize_failure(raw: Any) -> Dict[str, str]:
    raw = coerce_dict(raw)
    return {
        "title": coerce_str(raw.get("title"), "Anomalia di Missione"),
        "lesson": coerce_str(raw.get("lesson"), "Lezione: correggere rotta e ripartire."),
        "story": coerce_str(raw.get("story"), "Un evento critico ha costretto a ricalibrare la traiettoria."),
    }


def sanitize_background_audio(raw: Any) -> Dict[str, Any]:
    raw = coerce_dict(raw)
    return {
        "trackId": coerce_enum(raw.get("trackId"), BACKGROUND_AUDIO_TRACK_IDS, DEFAULT_TRACK_ID),
        "volume": coerce_number(raw.get("volume"), *UNIT_RANGE, DEFAULT_VOLUME),
    }


# ============================================================================
# Root artifact
# ============================================================================

def sanitize_identity_negations(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return list(DEFAULT_IDENTITY_NEGATIONS)
    return coerce_str_list(raw, IDENTITY_NEGATIONS_COUNT)


def sanitize_role(raw: Any) -> str:
    role = coerce_str(raw, FALLBACK_ROLE)
    if looks_like_job_title_as_name(role):
        logger.info("Replacing job-title role %r with thematic fallback", role)
        return FALLBACK_ROLE
    return role


def sanitize_user_data(raw: Any, name_hint: Optional[str] = None, current_year: Optional[int] = None) -> Dict[str, Any]:
    raw = coerce_dict(raw)
    current_year = current_year or datetime.now(timezone.utc).year

    theme = coerce_enum(raw.get("theme"), THEMES, DEFAULT_THEME)
    skills = sanitize_skills(raw.get("skills"), theme)
    skill_ids = [skill["id"] for skill in skills]

    model_name = coerce_str(raw.get("name"), "")
    name = resolve_real_name(model_name, name_hint)
    if name != model_name:
        logger.info("Model name %r rejected, using %r", model_name, name)

    return {
        "name": name,
        "role": sanitize_role(raw.get("role")),
        "theme": theme,
        "manifesto": coerce_str(raw.get("manifesto"), "Trasformo esperienze in traiettorie migliori."),
        "identityNegations": sanitize_identity_negations(raw.get("identityNegations")),
        "backgroundAudio": sanitize_background_audio(raw.get("backgroundAudio")),
        "core": coerce_str(raw.get("core"), "Curiosity"),
        "coreDescription": coerce_str(raw.get("coreDescription"), "Il mio faro quando tutto diventa complesso."),
        "skills": skills,
        "socialLinks": sanitize_social_links(raw.get("socialLinks")),
        "lessonsLearned": [
            sanitize_lesson(item, index, current_year)
            for index, item in enumerate(coerce_list(raw.get("lessonsLearned"), LESSONS_COUNT))
        ],
        "projects": [
            sanitize_project(item, index, skill_ids)
            for index, item in enumerate(coerce_list(raw.get("projects"), PROJECTS_COUNT))
        ],
        "failure": sanitize_failure(raw.get("failure")),
    }


def sanitize_meta(raw: Any, files_count: Optional[int] = None, links_count: Optional[int] = None) -> Dict[str, Any]:
    raw = coerce_dict(raw)
    summary = coerce_dict(raw.get("sourceSummary"))
    return {
        "sourceSummary": {
            "filesCount": coerce_int(files_count if files_count is not None else summary.get("filesCount"), 0, None, 0),
            "linksCount": coerce_int(links_count if links_count is not None else summary.get("linksCount"), 0, None, 0),
        },
        "confidence": coerce_number(raw.get("confidence"), *UNIT_RANGE, CONFIDENCE_FALLBACK),
        "limitations": coerce_str_list(raw.get("limitations")),
    }


def sanitize_anti_portfolio(
    raw: Any,
    name_hint: Optional[str] = None,
    files_count: Optional[int] = None,
    links_count: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Coerce a parsed model response into the wire shape of AntiPortfolioData.

    Args:
        raw: Object returned by the JSON repair stage
        name_hint: Server-side guess of the person's real name
        files_count / links_count: Real source counts; override the model's

    Returns:
        A dict that always passes validate_anti_portfolio(). Sanitizing an
        already-valid object returns an equal object.
    """
    raw = coerce_dict(raw)
    user_data = raw.get("userData")
    if not isinstance(user_data, dict) and ("skills" in raw or "name" in raw):
        # Some models flatten userData into the root object.
        user_data = raw

    return {
        "version": SCHEMA_VERSION,
        "generatedAt": sanitize_generated_at(raw.get("generatedAt")),
        "userData": sanitize_user_data(user_data, name_hint),
        "meta": sanitize_meta(raw.get("meta"), files_count, links_count),
    }


# ============================================================================
# Profile analysis (first model call)
# ============================================================================

MAX_SOURCE_COUNT = 10


def sanitize_profile_analysis(raw: Any, files_count: int = 0, links_count: int = 0) -> ProfileAnalysis:
    raw = coerce_dict(raw)
    experiences = coerce_dict(raw.get("experiences"))
    psych = coerce_dict(raw.get("psychologicalProfile"))
    confidence = coerce_dict(raw.get("confidence"))
    return ProfileAnalysis.model_validate({
        "experiences": {
            "companies": coerce_str_list(experiences.get("companies")),
            "projects": coerce_str_list(experiences.get("projects")),
            "roles": coerce_str_list(experiences.get("roles")),
        },
        "challenges": coerce_str_list(raw.get("challenges")),
        "lessons": coerce_str_list(raw.get("lessons")),
        "psychologicalProfile": {
            "traits": coerce_str_list(psych.get("traits")),
            "motivations": coerce_str_list(psych.get("motivations")),
            "workStyle": coerce_str_list(psych.get("workStyle")),
            "strengths": coerce_str_list(psych.get("strengths")),
        },
        "confidence": {
            "overall": coerce_number(confidence.get("overall"), *UNIT_RANGE, CONFIDENCE_FALLBACK),
            "sources": {
                "files": coerce_int(files_count, 0, MAX_SOURCE_COUNT, 0),
                "web": coerce_int(links_count, 0, MAX_SOURCE_COUNT, 0),
            },
        },
        "limitations": coerce_str_list(raw.get("limitations")),
    })
