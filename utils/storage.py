"""
Output Storage Utilities

Writes raw API payloads to timestamped JSON files. Files are created with
exclusive mode, so an existing file is never overwritten; a name collision
gets a numeric suffix instead.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional, Union

import orjson

logger = logging.getLogger(__name__)


def filename_timestamp(now: Optional[datetime] = None) -> str:
    """
    Build a filesystem-safe UTC timestamp.

    ISO-8601 with microseconds, ':' and '.' replaced by '-':
    2025-01-01T12:00:00.123456Z -> 2025-01-01T12-00-00-123456Z

    Args:
        now: Timestamp to format, defaults to the current UTC time

    Returns:
        Sanitized timestamp string
    """
    now = now or datetime.now(timezone.utc)
    iso = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return iso.replace(":", "-").replace(".", "-")


def dump_json(payload: Any) -> bytes:
    """
    Serialize a payload as 2-space indented JSON with a trailing newline.

    Uses orjson, falling back to json for values orjson rejects (integers
    wider than 64 bits).
    """
    try:
        return orjson.dumps(payload, option=orjson.OPT_INDENT_2) + b"\n"
    except orjson.JSONEncodeError:
        return (json.dumps(payload, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


class OutputWriter:
    """Persists payloads as `<kind>-<timestamp>.json` under an output directory."""

    def __init__(
        self,
        output_dir: Union[str, Path],
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.output_dir = Path(output_dir)
        self.clock = clock

    def write(self, kind: str, payload: Any) -> Path:
        """
        Write a payload as pretty-printed JSON (2-space indent).

        Args:
            kind: File name prefix, e.g. "course-dates"
            payload: Any JSON-serializable value, written verbatim

        Returns:
            Path of the created file

        Raises:
            OSError: If the directory or file cannot be created
            TypeError: If the payload is not JSON-serializable
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)

        data = dump_json(payload)
        stem = f"{kind}-{filename_timestamp(self.clock())}"

        sequence = 0
        while True:
            suffix = f"-{sequence}" if sequence else ""
            path = self.output_dir / f"{stem}{suffix}.json"
            try:
                with open(path, "xb") as f:
                    f.write(data)
                return path
            except FileExistsError:
                logger.debug("Output file exists, trying next suffix: %s", path)
                sequence += 1
