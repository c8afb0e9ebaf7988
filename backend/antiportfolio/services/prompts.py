"""
Prompts for the two model calls: profile analysis, then anti-portfolio generation.
"""
import json
from typing import List, Optional

from ..schemas.audio_tracks import BACKGROUND_AUDIO_TRACKS
from .names import FALLBACK_NAME

ANALYSIS_SYSTEM_PROMPT = (
    "Return valid JSON only. No markdown. No extra text. "
    "Do NOT invent facts; if uncertain, omit and note in limitations."
)

GENERATION_SYSTEM_PROMPT = (
    "Return valid JSON only. No markdown. No extra text. "
    "Do NOT invent stories or facts; if unsupported by INPUT, say info not available and add limitations."
)

PROFILE_ANALYSIS_PROMPT = """You are an expert career profile analyzer.

Analyze the provided content and extract comprehensive information about the person's professional profile.

IMPORTANT:
- Work with whatever content is provided, even if incomplete or malformed.
- Make only conservative inferences from implicit information, but DO NOT hallucinate or invent facts.
- Do NOT invent company names, job titles, dates, achievements, events, projects, incidents, metrics, quotes, or personal details.
- If a detail is not clearly supported by the provided content, omit it and add a note in "limitations".
- Always return valid JSON only (no markdown, no extra text).

Return a JSON object with this exact structure:
{
  "experiences": {"companies": ["..."], "projects": ["..."], "roles": ["..."]},
  "challenges": ["..."],
  "lessons": ["..."],
  "psychologicalProfile": {
    "traits": ["..."],
    "motivations": ["..."],
    "workStyle": ["..."],
    "strengths": ["..."]
  },
  "confidence": {"overall": 0.0, "sources": {"files": 0, "web": 0}},
  "limitations": ["..."]
}

Analyze the following content:"""


def _audio_track_lines() -> str:
    return "\n".join(f"- {track['id']} => {track['description']}" for track in BACKGROUND_AUDIO_TRACKS)


ANTI_PORTFOLIO_GENERATION_PROMPT = """You are a creative-but-precise generator for an "Anti-Portfolio" in a COSMIC / SPACE MISSION theme.

GOALS:
- Put the PERSON first: values, motivations, lessons, failures. Projects and titles come AFTER the human narrative.
- Use conventional experiences ONLY as evidence of human patterns (decision-making, collaboration, resilience, curiosity, ownership).
- Choose the professional theme: tech (software, engineering, data, IT), marketing (growth, comms, brand, GTM) or design (product, UX, visual, service).

OUTPUT RULES:
- Return JSON only, no markdown, no extra text. The JSON MUST follow the schema exactly.
- Fill every field. Never output placeholder strings such as "N/A", "TBD" or "Skill name".
- NON-FABRICATION: only rephrase information present in the INPUT. If a story cannot be grounded,
  write "info non disponibile" and add a limitation in meta.limitations.
- userData.role MUST NOT be a real-world job title; it is a sci-fi mission role in Italian,
  e.g. "Navigatore di Dati Orbitali" or "Operatore di Sistemi di Bordo".
- skills are HUMAN CAPABILITIES (e.g. "Chiarezza", "Ascolto attivo"), never tools, technologies or certifications.
  Each description includes one concrete behavioral example.
- projects are "missions" tied to a skillId: what changed, what was learned, the human impact.
  Tags are human signals ("alignment", "feedback loops"), at most one tech tag.
- socialLinks: only recognized linkedin/github/portfolio links (0..3), each with a one-sentence previewDescription.
- identityNegations: 5 Italian lines starting with "Non sono" or "Io non sono", each with 1-2 [[highlighted]] phrases.
- backgroundAudio: one trackId from the list below, volume between 0.2 and 0.4.

BACKGROUND AUDIO TRACKS (allowed trackId):
""" + _audio_track_lines() + """

SCHEMA (must match):
{
  "version": "1.0",
  "generatedAt": "ISO_DATE",
  "userData": {
    "name": "Full Name",
    "role": "Sci-fi mission role (Italian)",
    "theme": "tech|marketing|design",
    "manifesto": "Short first-person sentence",
    "identityNegations": ["Non sono il mio [[job title]]."],
    "backgroundAudio": {"trackId": "gravity_waves_downtempo", "volume": 0.3},
    "core": "One-word core value",
    "coreDescription": "Short description for hover",
    "skills": [{"id": 1, "name": "...", "type": "tech|marketing|design", "planetType": "skill",
                "level": 0, "orbitRadius": 100, "speed": 30, "description": "...", "relevance": 1,
                "hoverInfo": "..."}],
    "socialLinks": [{"id": "linkedin|github|portfolio", "name": "LinkedIn|GitHub|Portfolio",
                     "planetType": "social", "url": "https://...", "icon": "linkedin|github|portfolio",
                     "orbitRadius": 350, "speed": 60, "relevance": 7, "hoverInfo": "...",
                     "previewDescription": "..."}],
    "lessonsLearned": [{"id": "lesson-1", "title": "...", "year": 2024, "incidentReport": "...",
                        "lessonExtracted": "...", "quote": "...", "orbitRadius": 500, "speed": 100,
                        "relevance": 8, "hoverInfo": "..."}],
    "projects": [{"id": 1, "title": "...", "skillId": 1, "description": "...", "outcome": "...",
                  "tags": ["..."]}],
    "failure": {"title": "...", "lesson": "...", "story": "..."}
  },
  "meta": {
    "sourceSummary": {"filesCount": 0, "linksCount": 0},
    "confidence": 0.0,
    "limitations": ["..."]
  }
}
"""


def build_analysis_prompt(content: str) -> str:
    return f"{PROFILE_ANALYSIS_PROMPT}\n\n{content}"


def build_hard_constraints(files_count: int, links_count: int) -> str:
    """Per-request constraint block appended after the inputs."""
    lines = [
        "Hard constraints:",
        "- skills: exactly 7 items",
        "- projects: exactly 4 items",
        "- lessonsLearned: exactly 2 items",
        "- role: MUST NOT be a real-world job title; it must be a sci-fi mission role (Italian)",
        '- identityNegations: exactly 5 items (Italian only, each starts with "Non sono" or "Io non sono"; '
        "include [[highlight]] markers)",
        "- theme: choose exactly one of tech|marketing|design based on the profile",
        "- name: use the real person name if present in the content; NEVER use placeholder names like "
        '"Mario Rossi", "Marco Rossi", "John Doe", "Alex Cosmo"',
        "- skills MUST be human capabilities/principles (NO tool/tech/certification names)",
        '- DO NOT invent incidents, years, companies, metrics, quotes, or story details; if missing, state '
        '"info non disponibile" and add to meta.limitations.',
        f"Set meta.sourceSummary.filesCount={files_count} and meta.sourceSummary.linksCount={links_count}.",
        "Set generatedAt to current ISO date.",
    ]
    return "\n".join(lines) + "\n"


def build_generation_prompt(
    analysis: dict,
    links: List[str],
    files_count: int,
    links_count: int,
    name_hint: Optional[str] = None,
) -> str:
    return (
        f"{ANTI_PORTFOLIO_GENERATION_PROMPT}\n\n"
        f'Name hint (do NOT invent names; if unknown, use the hint or "{FALLBACK_NAME}"): {name_hint or ""}\n\n'
        f"INPUT (ProfileAnalysis JSON):\n{json.dumps(analysis, ensure_ascii=False)}\n\n"
        f"INPUT (links):\n{json.dumps(links)}\n\n"
        f"{build_hard_constraints(files_count, links_count)}"
    )
