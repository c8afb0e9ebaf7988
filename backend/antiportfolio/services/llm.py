"""
Gemini text-completion client.

The orchestrator only needs ``await client.complete(system, prompt, max_output_tokens)``
returning raw model text; anything with that coroutine can stand in for it.
"""
import hashlib
import logging
import os
from typing import Optional, Tuple

from google import genai
from google.genai import types

from ..config import get_settings
from ..exceptions import LLMUnavailableError

logger = logging.getLogger(__name__)

settings = get_settings()

# Lazy initialization of Gemini client
_genai_client = None


def resolve_api_key() -> Tuple[Optional[str], str]:
    """Return (key, source); source is "env", "file:.env" or "missing"."""
    key = (settings.gemini_api_key or "").strip()
    if not key:
        return None, "missing"
    if os.environ.get("GEMINI_API_KEY", "").strip() == key:
        return key, "env"
    return key, "file:.env"


def fingerprint_secret(secret: str) -> str:
    """Non-reversible fingerprint, safe to log or display."""
    digest = hashlib.sha256(secret.encode("utf-8")).hexdigest()
    return f"{digest[:8]}…{digest[-6:]}"


def get_genai_client() -> genai.Client:
    """Get the Gemini client, initializing lazily if needed."""
    global _genai_client
    if _genai_client is None:
        key, _ = resolve_api_key()
        if not key:
            raise LLMUnavailableError("Gemini API not configured. Please set GEMINI_API_KEY.")
        try:
            _genai_client = genai.Client(api_key=key)
        except Exception as e:
            raise LLMUnavailableError(f"Failed to initialize Gemini client: {e}") from e
        logger.info("Gemini client initialized (key %s)", fingerprint_secret(key))
    return _genai_client


class GeminiTextClient:
    """Single-turn JSON completions against the configured Gemini model."""

    def __init__(self, client: Optional[genai.Client] = None, model: Optional[str] = None):
        self._client = client
        self.model = model or settings.gemini_model

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = get_genai_client()
        return self._client

    async def complete(self, system: str, prompt: str, max_output_tokens: int) -> str:
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=system,
                temperature=0.4,
                max_output_tokens=max_output_tokens,
                response_mime_type="application/json",
            ),
        )
        text = response.text or ""
        logger.info("Model %s returned %d chars", self.model, len(text))
        return text
