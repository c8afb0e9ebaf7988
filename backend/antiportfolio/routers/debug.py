"""
Debug Router - LLM key diagnostics (mounted only when debug is on)
"""
from fastapi import APIRouter

from ..config import get_settings
from ..services.llm import fingerprint_secret, resolve_api_key

router = APIRouter(prefix="/api/debug", tags=["Debug"])


@router.get("/llm")
async def llm_status():
    settings = get_settings()
    key, source = resolve_api_key()
    if not key:
        return {
            "hasKey": False,
            "source": source,
            "model": settings.gemini_model,
            "note": "Set GEMINI_API_KEY in the environment or .env and restart the server.",
        }
    return {
        "hasKey": True,
        "source": source,
        "fingerprint": fingerprint_secret(key),
        "length": len(key),
        "model": settings.gemini_model,
        "note": "This is a non-reversible fingerprint of the configured key.",
    }
