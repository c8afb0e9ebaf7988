"""
Error taxonomy for the anti-portfolio pipeline.

Input errors go straight back to the caller, extraction and model failures are
retried by the orchestrator, and schema violations signal a sanitizer defect.
"""
from dataclasses import dataclass
from typing import Any, List, Optional


class AntiPortfolioError(Exception):
    """Base class for every error raised on purpose by the pipeline."""

    category = "Build failed"


class InputError(AntiPortfolioError):
    """No usable file, link or text was supplied."""

    category = "Bad request"


class ExtractionError(AntiPortfolioError):
    """PDF or web text extraction failed or timed out."""


class LLMUnavailableError(AntiPortfolioError):
    """The text-completion client could not be configured."""


class ModelOutputError(AntiPortfolioError):
    """Raw model text could not be turned into a JSON object."""


class OperationFailedError(AntiPortfolioError):
    """An operation kept failing after every retry."""

    def __init__(self, operation: Optional[str], cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        label = f" ({operation})" if operation else ""
        detail = f": {cause}" if cause is not None and str(cause) else ""
        super().__init__(f"Operation failed{label}{detail}")


@dataclass(frozen=True)
class SchemaViolation:
    path: str
    expected: str
    actual: Any = None

    def to_dict(self) -> dict:
        return {"path": self.path, "expected": self.expected, "actual": self.actual}


class SchemaValidationError(AntiPortfolioError):
    """The object failed the final structural gate. Nothing is partially accepted."""

    def __init__(self, violations: List[SchemaViolation]):
        self.violations = list(violations)
        summary = "; ".join(f"{v.path}: {v.expected}" for v in self.violations[:5])
        more = f" (+{len(self.violations) - 5} more)" if len(self.violations) > 5 else ""
        super().__init__(f"Schema validation failed: {summary}{more}")
