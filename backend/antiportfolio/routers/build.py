"""
Build Router - turns uploaded CVs, links and a briefing into an anti-portfolio
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from ..exceptions import AntiPortfolioError, InputError, SchemaValidationError
from ..services.orchestrator import AntiPortfolioBuilder, SourceFile, parse_links

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Build"])


def get_builder() -> AntiPortfolioBuilder:
    return AntiPortfolioBuilder()


def error_response(exc: Exception) -> JSONResponse:
    """Collapse any failure into the {error, message?} envelope."""
    if isinstance(exc, InputError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(exc)},
        )

    category = exc.category if isinstance(exc, AntiPortfolioError) else "Build failed"
    content = {"error": category, "message": str(exc) or "Unknown error"}
    if isinstance(exc, SchemaValidationError):
        content["violations"] = [v.to_dict() for v in exc.violations]
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


@router.post("/build")
async def build(
    files: List[UploadFile] = File(default=[]),
    links: Optional[str] = Form(default=None),
    briefing: str = Form(default=""),
    builder: AntiPortfolioBuilder = Depends(get_builder),
):
    """
    Generate a validated anti-portfolio.

    - files: PDF uploads (others and oversize files are ignored)
    - links: JSON array of URLs, e.g. ["linkedin.com/in/someone"]
    - briefing: free-text mission briefing from the user
    """
    try:
        sources = [
            SourceFile(
                filename=f.filename or "upload",
                content_type=f.content_type or "",
                data=await f.read(),
            )
            for f in files
        ]
        logger.info("Build request: %d files, links field %s", len(sources), "set" if links else "empty")
        return await builder.build(sources, parse_links(links), briefing)
    except Exception as e:
        if isinstance(e, InputError):
            logger.info("Build rejected: %s", e)
        else:
            logger.exception("Build failed")
        return error_response(e)
