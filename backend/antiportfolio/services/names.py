"""
Real-name heuristics.

The model is told to use the person's real name but often falls back to a
placeholder or to a job title. The server guesses a name hint from the CV text
(or a LinkedIn slug) and uses it whenever the model's name fails these checks.
"""
import re
from typing import Iterable, Optional
from urllib.parse import unquote

FALLBACK_NAME = "Anonymous Explorer"

PLACEHOLDER_NAMES = {
    "alex cosmo",
    "marco rossi",
    "mario rossi",
    "john doe",
    "jane doe",
    "full name",
    "nome cognome",
}
# Decoy token used by the sample data; any name containing it is a placeholder.
PLACEHOLDER_TOKEN = "cosmo"

JOB_TITLE_TOKENS = {
    "consultant",
    "engineer",
    "developer",
    "designer",
    "manager",
    "analyst",
    "specialist",
    "director",
    "officer",
    "architect",
    "customer",
    "transformation",
    "marketing",
    "sales",
    "growth",
    "product",
    "data",
}

# Header heuristics also catch the common OCR typo.
_HEADER_JOB_TOKENS = (JOB_TITLE_TOKENS - {"sales", "growth"}) | {"trasformation"}

CV_SECTION_TOKENS = {
    "profilo",
    "personale",
    "istruzione",
    "lingue",
    "contatti",
    "competenze",
    "esperienze",
    "lavorative",
    "curriculum",
    "vitae",
    "resume",
    "cv",
}

_UPPER = "A-ZÀ-ÖØ-Ý"
_LOWER = "a-zà-öø-ÿ"

_LABELED_NAME_RE = re.compile(r"(?:^|\n)\s*(?:nome\s*[:\-]\s*)([^\n]{3,80})", re.IGNORECASE)
_CAPS_SEQUENCE_RE = re.compile(rf"([{_UPPER}]{{2,}}(?:\s+[{_UPPER}]{{2,}}){{1,2}})")
_CONTACT_LINE_RE = re.compile(r"curriculum|resume|cv|email|telefono|phone|linkedin|github", re.IGNORECASE)
_TITLE_CASE_WORD_RE = re.compile(rf"^[{_UPPER}][{_LOWER}'’\-]+$")
_ALL_CAPS_WORD_RE = re.compile(rf"^[{_UPPER}'’\-]+$")
_LINKEDIN_SLUG_RE = re.compile(r"linkedin\.com/in/([^/?#]+)", re.IGNORECASE)


def is_placeholder_name(name: str) -> bool:
    n = name.strip().lower()
    if not n:
        return True
    return n in PLACEHOLDER_NAMES or PLACEHOLDER_TOKEN in n


def looks_like_job_title_as_name(name: str) -> bool:
    tokens = name.strip().lower().split()
    if not tokens:
        return True
    return any(token in JOB_TITLE_TOKENS for token in tokens)


def is_valid_name(name: Optional[str]) -> bool:
    return bool(name) and not is_placeholder_name(name) and not looks_like_job_title_as_name(name)


def resolve_real_name(model_name: str, name_hint: Optional[str] = None) -> str:
    """Keep the model's name if plausible, else the (validated) hint, else a fixed identity."""
    if is_valid_name(model_name):
        return model_name.strip()
    if is_valid_name(name_hint):
        return name_hint.strip()
    return FALLBACK_NAME


def _titleize(text: str) -> str:
    words = text.replace("#", " ").split()
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def guess_name_from_cv_text(text: str) -> Optional[str]:
    """First matching heuristic wins: labeled line, early caps run, header line."""
    cleaned = text.replace("\r", "\n")

    labeled = _LABELED_NAME_RE.search(cleaned)
    if labeled:
        candidate = labeled.group(1).strip()
        if len(candidate.split()) >= 2:
            return candidate

    # PDF text often arrives as one long line; look for an early NAME SURNAME.
    head = " ".join(cleaned[:800].replace("#", " ").split())
    for match in _CAPS_SEQUENCE_RE.finditer(head):
        words = match.group(1).split()
        if not 2 <= len(words) <= 3:
            continue
        lowered = [w.lower() for w in words]
        if any(w in _HEADER_JOB_TOKENS or w in CV_SECTION_TOKENS for w in lowered):
            continue
        return _titleize(match.group(1))

    header_lines = [line.strip() for line in cleaned.split("\n") if line.strip()][:12]
    for line in header_lines:
        if _CONTACT_LINE_RE.search(line):
            continue
        words = line.split()
        if not 2 <= len(words) <= 4:
            continue
        if all(_TITLE_CASE_WORD_RE.match(w) for w in words):
            return line
        if all(_ALL_CAPS_WORD_RE.match(w) for w in words):
            has_job_token = any(w.lower() in _HEADER_JOB_TOKENS for w in words)
            if len(words) in (2, 3) and not has_job_token:
                return _titleize(line)

    return None


def guess_name_from_linkedin(links: Iterable[str]) -> Optional[str]:
    for link in links:
        match = _LINKEDIN_SLUG_RE.search(link)
        if not match:
            continue
        slug = re.sub(r"[^a-zA-Z0-9\-_]", "", unquote(match.group(1))).replace("_", "-").strip()
        parts = [p for p in slug.split("-") if p]
        # Very short slugs are handles, not names.
        if len(parts) < 2:
            continue
        name = " ".join(p[:1].upper() + p[1:].lower() for p in parts[:4])
        if len(name) >= 5:
            return name
    return None


def guess_name_hint(cv_text: str, links: Iterable[str]) -> Optional[str]:
    return guess_name_from_cv_text(cv_text) or guess_name_from_linkedin(links)
