"""
Best-effort recovery of a JSON object from raw model text.

Each repair strategy is a pure ``text -> text`` function. The parse stages are
tried in order and the first candidate that ``json.loads`` accepts as an
object wins; the model is never re-queried from here.
"""
import json
import logging
import re
from typing import Any, Callable, Dict, Optional, Tuple

from ..exceptions import ModelOutputError

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*")
_TRAILING_COMMA_RE = re.compile(r",(?=\s*[}\]])")
_SMART_QUOTES = str.maketrans({
    "“": '"',
    "”": '"',
    "„": '"',
    "‟": '"',
    "″": '"',
    "‘": "'",
    "’": "'",
    "‚": "'",
    "‛": "'",
    "′": "'",
})


# ============================================================================
# Repair strategies
# ============================================================================

def strip_code_fences(text: str) -> str:
    return _CODE_FENCE_RE.sub("", text)


def remove_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub("", text)


def normalize_smart_quotes(text: str) -> str:
    return text.translate(_SMART_QUOTES)


REPAIR_STRATEGIES: Tuple[Callable[[str], str], ...] = (
    strip_code_fences,
    remove_trailing_commas,
    normalize_smart_quotes,
)


def repair_text(text: str) -> str:
    for strategy in REPAIR_STRATEGIES:
        text = strategy(text)
    return text.strip()


def extract_balanced_object(text: str) -> Optional[str]:
    """
    Return the first balanced ``{...}`` in ``text``.

    Braces inside string literals (including escaped quotes) do not count.
    Returns None when no object opens or the first one never closes.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


# ============================================================================
# Parse stages
# ============================================================================

PARSE_STAGES: Tuple[Tuple[str, Callable[[str], Optional[str]]], ...] = (
    ("direct", lambda text: text.strip()),
    ("balanced-object", extract_balanced_object),
    ("repaired", repair_text),
    ("repaired-balanced-object", lambda text: extract_balanced_object(repair_text(text))),
)


def parse_model_json_with_stage(raw: str) -> Tuple[Dict[str, Any], str]:
    """Parse raw model text, returning the object and the name of the stage that worked."""
    last_error: Optional[Exception] = None
    for stage, candidate_for in PARSE_STAGES:
        candidate = candidate_for(raw or "")
        if not candidate:
            continue
        try:
            parsed = json.loads(candidate)
        except (ValueError, RecursionError) as exc:
            # JSONDecodeError, oversized integer literals, pathological nesting
            last_error = exc
            continue
        if not isinstance(parsed, dict):
            last_error = ValueError(f"expected a JSON object, got {type(parsed).__name__}")
            continue
        if stage != "direct":
            logger.info("Recovered model JSON via %s stage", stage)
        return parsed, stage

    reason = last_error or ValueError("empty response")
    raise ModelOutputError(
        f"Invalid JSON from model: {reason}. "
        "The model is probably not honoring the JSON-only output format "
        "(markdown, prose or a truncated response)."
    )


def parse_model_json(raw: str) -> Dict[str, Any]:
    return parse_model_json_with_stage(raw)[0]
