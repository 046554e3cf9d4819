"""Logging configuration and utilities."""

import os
import sys
import logging
import logging.handlers
from pathlib import Path
import structlog
from structlog.stdlib import LoggerFactory

from covid_normalization.models.config import NormalizationConfig


def setup_logging(config: NormalizationConfig) -> None:
    """Setup structured logging with the specified configuration."""

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format="%(message)s",
        stream=sys.stdout,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if config.log_format.lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if config.log_file:
        log_path = Path(config.log_file)
        root = logging.getLogger()
        if any(getattr(h, "baseFilename", None) == os.path.abspath(log_path) for h in root.handlers):
            return
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        )
        file_handler.setLevel(getattr(logging, config.log_level.upper()))
        file_handler.setFormatter(logging.Formatter('%(message)s'))

        root.addHandler(file_handler)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
