"""
Anti-portfolio build pipeline.

One request runs strictly in sequence:
extract text per input -> analysis call -> generation call -> sanitize -> validate.
Every externally-dependent step is wrapped in the bounded retry policy.
"""
import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from ..config import Settings, get_settings
from ..exceptions import InputError
from ..schemas import ProfileAnalysis, to_wire, validate_anti_portfolio
from .content_extractor import extract_text_from_pdf, extract_text_from_url, is_pdf_upload
from .coercion import normalize_url
from .json_repair import parse_model_json_with_stage
from .llm import GeminiTextClient
from .names import guess_name_hint
from .prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    GENERATION_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_generation_prompt,
)
from .retry import with_retry
from .sanitizer import sanitize_anti_portfolio, sanitize_profile_analysis

logger = logging.getLogger(__name__)


@dataclass
class SourceFile:
    """An uploaded file, already read into memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def parse_links(raw: Optional[str]) -> List[str]:
    """Links arrive as a JSON array string; anything else yields no links."""
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Ignoring malformed links field")
        return []
    if not isinstance(parsed, list):
        return []
    return [normalize_url(item) for item in parsed if isinstance(item, str) and item.strip()]


class AntiPortfolioBuilder:
    """
    Runs the two-call generation pipeline.

    The LLM client and both extractors are injectable; tests pass fakes with
    the same coroutine signatures.
    """

    def __init__(
        self,
        llm: Any = None,
        settings: Optional[Settings] = None,
        pdf_extractor: Callable[[bytes], Awaitable[str]] = extract_text_from_pdf,
        web_extractor: Callable[[str], Awaitable[str]] = extract_text_from_url,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self.llm = llm or GeminiTextClient()
        self.pdf_extractor = pdf_extractor
        self.web_extractor = web_extractor
        self.sleep = sleep

    async def _retry(self, fn, operation: str, max_retries: Optional[int] = None):
        return await with_retry(
            fn,
            max_retries=self.settings.max_retries if max_retries is None else max_retries,
            base_delay=self.settings.retry_base_delay,
            operation=operation,
            sleep=self.sleep,
        )

    # ========================================================================
    # Extraction
    # ========================================================================

    def accept_files(self, files: Sequence[SourceFile]) -> List[SourceFile]:
        """Drop oversize and non-PDF uploads silently."""
        accepted = []
        for f in files:
            if f.size > self.settings.upload_max_size:
                logger.warning("Dropping %s: %d bytes exceeds upload limit", f.filename, f.size)
                continue
            if not is_pdf_upload(f.filename, f.content_type):
                logger.warning("Dropping %s: not a PDF (%s)", f.filename, f.content_type)
                continue
            accepted.append(f)
        return accepted

    async def extract_file_texts(self, files: Sequence[SourceFile]) -> List[str]:
        blocks = []
        for f in self.accept_files(files):
            text = await self._retry(lambda f=f: self.pdf_extractor(f.data), f"pdf:{f.filename}")
            if text:
                blocks.append(f"=== File: {f.filename} ===\n{text}")
        return blocks

    async def extract_web_texts(self, links: Sequence[str]) -> List[str]:
        blocks = []
        for url in list(links)[: self.settings.max_links]:
            text = await self._retry(
                lambda url=url: self.web_extractor(url), f"web:{url}", self.settings.web_max_retries
            )
            if text:
                blocks.append(f"=== Web: {url} ===\n{text}")
        return blocks

    # ========================================================================
    # Model calls
    # ========================================================================

    async def analyze(self, content: str, files_count: int, links_count: int) -> ProfileAnalysis:
        async def call() -> ProfileAnalysis:
            raw = await self.llm.complete(
                ANALYSIS_SYSTEM_PROMPT,
                build_analysis_prompt(content),
                self.settings.analysis_max_output_tokens,
            )
            parsed, stage = parse_model_json_with_stage(raw)
            logger.info("Profile analysis parsed (stage=%s)", stage)
            return sanitize_profile_analysis(parsed, files_count, links_count)

        return await self._retry(call, "ai:analyze")

    async def generate(
        self,
        analysis: ProfileAnalysis,
        links: List[str],
        files_count: int,
        links_count: int,
        name_hint: Optional[str],
    ) -> Dict[str, Any]:
        prompt = build_generation_prompt(
            analysis.model_dump(by_alias=True), links, files_count, links_count, name_hint
        )

        async def call() -> Dict[str, Any]:
            raw = await self.llm.complete(
                GENERATION_SYSTEM_PROMPT, prompt, self.settings.generation_max_output_tokens
            )
            parsed, stage = parse_model_json_with_stage(raw)
            logger.info("Anti-portfolio parsed (stage=%s)", stage)
            return parsed

        return await self._retry(call, "ai:generate")

    # ========================================================================
    # Pipeline
    # ========================================================================

    async def build(
        self,
        files: Sequence[SourceFile] = (),
        links: Sequence[str] = (),
        briefing: str = "",
    ) -> Dict[str, Any]:
        """
        Build a validated anti-portfolio from uploads, links and a free-text briefing.

        Returns:
            The wire-shaped (camelCase) AntiPortfolioData dict.

        Raises:
            InputError: nothing was supplied, or nothing could be extracted
            OperationFailedError / AntiPortfolioError: a step failed after retries
        """
        links = [normalize_url(u) for u in links if u and u.strip()]
        briefing = (briefing or "").strip()[: self.settings.briefing_max_chars]
        if not files and not links:
            raise InputError("At least one file or one link is required")

        file_texts = await self.extract_file_texts(files)
        web_texts = await self.extract_web_texts(links)
        logger.info("Extracted %d file texts and %d web texts", len(file_texts), len(web_texts))

        briefing_block = f"=== User Narrative (Briefing di missione) ===\n{briefing}" if briefing else ""
        combined = "\n\n".join(b for b in [briefing_block, *file_texts, *web_texts] if b).strip()
        if not combined:
            raise InputError("No content could be extracted from the provided files and links")

        name_hint = guess_name_hint("\n\n".join(file_texts) or combined, links)
        logger.info("Name hint: %s", "found" if name_hint else "none")

        files_count = len(files)
        links_count = len(links)
        analysis = await self.analyze(combined, files_count, links_count)
        raw = await self.generate(analysis, links, files_count, links_count, name_hint)

        sanitized = sanitize_anti_portfolio(raw, name_hint, files_count, links_count)
        return to_wire(validate_anti_portfolio(sanitized))


async def build_anti_portfolio(
    files: Sequence[SourceFile] = (),
    links: Sequence[str] = (),
    briefing: str = "",
    builder: Optional[AntiPortfolioBuilder] = None,
) -> Dict[str, Any]:
    builder = builder or AntiPortfolioBuilder()
    return await builder.build(files, links, briefing)
