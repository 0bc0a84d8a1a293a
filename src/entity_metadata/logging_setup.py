# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Structured logging for metadata building.

Builder and store log calls attach the entity type and property they act on
through metadata_fields(); StructuredFormatter renders those as top-level
JSON keys so a log can be filtered by type or member.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from entity_metadata.models import StructuralType

PACKAGE_LOGGER = "entity_metadata"


def metadata_fields(
    structural_type: "StructuralType", property_name: Optional[str] = None
) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a log call about a type or one of its members."""
    fields: Dict[str, Any] = {"entity_type": structural_type.name}
    if property_name is not None:
        fields["property"] = property_name
    return {"extra_fields": fields}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            log_data.update(extra_fields)

        return json.dumps(log_data, default=str)


def setup_logging(
    log_dir: Optional[Path] = None,
    log_level: int = logging.INFO,
    console_output: bool = False,
) -> logging.Logger:
    """Attach structured handlers to the package logger.

    Only the ``entity_metadata`` logger is touched; records still propagate
    to whatever the host application configured on the root logger.

    Args:
        log_dir: Directory for the JSON log file. If None, no file is written.
        log_level: Level for the package logger and its handlers.
        console_output: Also write JSON lines to stderr.

    Returns:
        The configured package logger.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"entity_metadata_{datetime.now(timezone.utc).strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(StructuredFormatter())
        package_logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(StructuredFormatter())
        package_logger.addHandler(console_handler)

    package_logger.debug(f"Structured logging initialized (log_dir={log_dir})")
    return package_logger
