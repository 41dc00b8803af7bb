"""
Pydantic Schemas - Data Validation Models

Defines the small set of schemas used across the fetch pipeline:
- Token endpoint response
- Per-job outcome (success with payload | failure with error)

Remote collection and help payloads are deliberately not modelled; they are
persisted verbatim.

Usage:
    from utils.schemas import JobOutcome

    outcome = JobOutcome.success("course-dates", "Course Dates", payload, path)
    if not outcome.ok:
        logger.error(outcome.error)
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    """OAuth password-grant token response.

    Only `access_token` is required; other keys the server sends are ignored.
    """

    access_token: str = Field(..., min_length=1, description="Opaque bearer token")
    token_type: Optional[str] = Field(default=None, description="Token type, usually 'bearer'")
    expires_in: Optional[int] = Field(default=None, description="Lifetime in seconds (not enforced)")


class JobOutcome(BaseModel):
    """Settled result of a single fetch job.

    `ok=True` carries the payload and the file it was written to; `ok=False`
    carries the error message. An empty-but-valid payload is still a success.
    """

    kind: str = Field(..., description="Job kind, also the output file prefix")
    label: str = Field(..., description="Human-readable job label")
    ok: bool = Field(..., description="Whether the job completed")
    payload: Any = Field(default=None, description="Raw JSON payload on success")
    output_path: Optional[Path] = Field(default=None, description="Written file on success")
    error: Optional[str] = Field(default=None, description="Error message on failure")

    @classmethod
    def success(cls, kind: str, label: str, payload: Any, output_path: Path) -> "JobOutcome":
        return cls(kind=kind, label=label, ok=True, payload=payload, output_path=output_path)

    @classmethod
    def failure(cls, kind: str, label: str, error: BaseException) -> "JobOutcome":
        return cls(kind=kind, label=label, ok=False, error=str(error) or type(error).__name__)
