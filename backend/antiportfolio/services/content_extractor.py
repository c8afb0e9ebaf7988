"""
Text extraction from uploaded PDFs and public web pages.
"""
import asyncio
import logging
from typing import Optional

import fitz  # PyMuPDF
import httpx
from bs4 import BeautifulSoup

from ..config import get_settings
from ..exceptions import ExtractionError
from .coercion import normalize_url

logger = logging.getLogger(__name__)

settings = get_settings()

USER_AGENT = "Mozilla/5.0 (compatible; AntiPortfolioBot/1.0)"

# Boilerplate removed before reading page text.
NOISE_SELECTORS = "script, style, nav, footer, header, aside, .advertisement, .ads"
# First match wins; body is the last resort.
MAIN_CONTENT_SELECTORS = ("main", "article", ".content", "#content")

__all__ = [
    "normalize_url",
    "is_pdf_upload",
    "pdf_bytes_to_text",
    "extract_text_from_pdf",
    "html_to_text",
    "extract_text_from_url",
]


def is_pdf_upload(filename: str, content_type: str) -> bool:
    return "pdf" in (content_type or "") or (filename or "").lower().endswith(".pdf")


def pdf_bytes_to_text(pdf_bytes: bytes) -> str:
    """Concatenate the text layer of every page using PyMuPDF."""
    try:
        pdf_document = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise ExtractionError(f"Could not open PDF: {e}") from e

    try:
        pages = [page.get_text() for page in pdf_document]
    finally:
        pdf_document.close()
    return "\n".join(pages).strip()


async def extract_text_from_pdf(pdf_bytes: bytes, timeout: Optional[float] = None) -> str:
    timeout = settings.pdf_extraction_timeout if timeout is None else timeout
    try:
        return await asyncio.wait_for(asyncio.to_thread(pdf_bytes_to_text, pdf_bytes), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ExtractionError("PDF extraction timeout") from e


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "lxml")
    for node in soup.select(NOISE_SELECTORS):
        node.decompose()

    main = None
    for selector in MAIN_CONTENT_SELECTORS:
        main = soup.select_one(selector)
        if main is not None:
            break
    if main is None:
        main = soup.body or soup

    return " ".join(main.get_text(separator=" ").split())


async def extract_text_from_url(url: str, timeout: Optional[float] = None) -> str:
    """
    Fetch a page and return its main text with whitespace collapsed.

    HTTP error statuses are not failures: whatever body came back is read.
    Network errors and timeouts raise ExtractionError.
    """
    normalized = normalize_url(url)
    timeout = settings.web_scraping_timeout if timeout is None else timeout
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            response = await client.get(normalized, headers={"User-Agent": USER_AGENT})
    except httpx.TimeoutException as e:
        raise ExtractionError(f"Timeout fetching {normalized}") from e
    except httpx.HTTPError as e:
        raise ExtractionError(f"Could not fetch {normalized}: {e}") from e

    if not response.text:
        return ""
    return html_to_text(response.text)
