"""
Fetch Jobs - Data and Help Endpoint Definitions

A FetchJob describes one GET against the API and the file its response is
written to. run_job() executes a job and never raises: any failure is logged
and returned as a failed JobOutcome so sibling jobs are unaffected.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from utils.config import Settings
from utils.http import ApiClient
from utils.logging import get_logger, success
from utils.schemas import JobOutcome
from utils.storage import OutputWriter

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchJob:
    """
    Single fetch job definition.

    Attributes:
        kind: Output file prefix, e.g. "course-dates"
        label: Label used in the run summary, e.g. "Course Dates"
        endpoint: API path appended to the base URL
        params: Query parameters (empty for help endpoints)
        item_label: Noun for the "Retrieved N ..." log line; None skips it
    """

    kind: str
    label: str
    endpoint: str
    params: dict[str, Any] = field(default_factory=dict)
    item_label: Optional[str] = None


def course_data_jobs(settings: Settings, limit: int) -> list[FetchJob]:
    """Build the course-templates and course-dates jobs with a record cap."""
    return [
        FetchJob(
            kind="course-templates",
            label="Course Templates",
            endpoint=settings.COURSE_TEMPLATES_ENDPOINT,
            params={"$top": limit, "$orderby": "Name asc"},
            item_label="course templates",
        ),
        FetchJob(
            kind="course-dates",
            label="Course Dates",
            endpoint=settings.COURSE_DATES_ENDPOINT,
            params={"$top": limit, "$orderby": "StartDate asc"},
            item_label="course dates",
        ),
    ]


def help_jobs(settings: Settings) -> list[FetchJob]:
    """Build the parameter-less API help jobs."""
    return [
        FetchJob(
            kind="course-date-help",
            label="Course Date Help",
            endpoint=settings.COURSE_DATE_HELP_ENDPOINT,
        ),
        FetchJob(
            kind="course-template-help",
            label="Course Template Help",
            endpoint=settings.COURSE_TEMPLATE_HELP_ENDPOINT,
        ),
    ]


def count_results(payload: Any) -> int:
    """Length of payload["results"] when it is a list, else 0."""
    if isinstance(payload, dict) and isinstance(payload.get("results"), list):
        return len(payload["results"])
    return 0


async def run_job(job: FetchJob, api: ApiClient, token: str, writer: OutputWriter) -> JobOutcome:
    """
    Fetch one endpoint and persist the response.

    Args:
        job: Job definition
        api: Authenticated API client
        token: Bearer token
        writer: Output file writer

    Returns:
        JobOutcome.success with payload and path, or JobOutcome.failure
    """
    try:
        if "$top" in job.params:
            logger.info("Fetching %s (limit: %s)...", job.label.lower(), job.params["$top"])
        else:
            logger.info("Fetching %s...", job.kind)

        payload = await api.request(job.endpoint, token, job.params or None)
        output_path = writer.write(job.kind, payload)

        success(logger, "%s saved to: %s", job.label, output_path)
        if job.item_label is not None:
            logger.info("Retrieved %d %s", count_results(payload), job.item_label)

        return JobOutcome.success(job.kind, job.label, payload, output_path)

    except Exception as e:
        logger.error("Failed to fetch %s: %s", job.label.lower(), e)
        return JobOutcome.failure(job.kind, job.label, e)
