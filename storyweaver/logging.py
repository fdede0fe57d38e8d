"""Structured logging infrastructure for the generation pipeline.

Provides JSON-formatted logging for production and human-readable
logging for development, plus a BookLogger helper for illustrated
book generation events.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

# Extra fields copied from log records into the JSON payload
STRUCTURED_FIELDS = (
    "story_id",
    "stage",
    "duration",
    "attempt",
    "error_type",
    "provider",
    "provider_index",
    "scene_number",
)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in STRUCTURED_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Configure structured logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)


class BookLogger:
    """Logger for illustrated book generation events with structured fields."""

    def __init__(self):
        self.logger = logging.getLogger("book_generation")

    def generation_started(self, story_id: str, child_name: str, theme: str) -> None:
        self.logger.info(
            f"Illustrated book generation started for {child_name} ({theme})",
            extra={"story_id": story_id, "stage": "started"},
        )

    def stage_completed(self, story_id: str, stage: str, duration: Optional[float] = None) -> None:
        extra = {"story_id": story_id, "stage": stage}
        if duration:
            extra["duration"] = round(duration, 2)
        self.logger.info(f"Stage completed: {stage}", extra=extra)

    def scene_illustrated(self, story_id: str, scene_number: int, total: int) -> None:
        self.logger.info(
            f"Generated illustration {scene_number}/{total}",
            extra={"story_id": story_id, "stage": "illustrations", "scene_number": scene_number},
        )

    def scene_failed(self, story_id: str, scene_number: int, error: Exception) -> None:
        self.logger.warning(
            f"Illustration failed for scene {scene_number}: {error}",
            extra={
                "story_id": story_id,
                "stage": "illustrations",
                "scene_number": scene_number,
                "error_type": type(error).__name__,
            },
        )

    def generation_completed(self, story_id: str, pages: int, duration: float) -> None:
        self.logger.info(
            f"Illustrated book generation completed with {pages} pages",
            extra={"story_id": story_id, "stage": "completed", "duration": round(duration, 2)},
        )

    def generation_failed(self, story_id: str, error: Exception, stage: Optional[str] = None) -> None:
        extra = {"story_id": story_id, "stage": "failed", "error_type": type(error).__name__}
        if stage:
            extra["failed_at_stage"] = stage
        self.logger.error(f"Illustrated book generation failed: {error}", extra=extra, exc_info=True)


# Global book logger instance
book_logger = BookLogger()
