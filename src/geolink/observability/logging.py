"""
Configures structured logging for the application using structlog.
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, List, Optional, TextIO

import structlog

if TYPE_CHECKING:
    from geolink.config.config import MonitoringConfig

# --- Configuration ---


def configure_logging(config: MonitoringConfig, stream: Optional[TextIO] = None) -> None:
    """
    Sets up structlog to handle all logging for the application.

    Console output goes to ``stream`` (stdout by default) unless a log file is configured.
    """
    stream = stream or sys.stdout
    shared_processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    log_renderer: Any
    if config.log_file:
        # Structured JSON logging for production/file output
        log_renderer = structlog.processors.JSONRenderer()
        handler: logging.Handler = logging.FileHandler(config.log_file)
    else:
        # More readable console output for development
        log_renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())
        handler = logging.StreamHandler(stream)

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=log_renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    # Route the standard logging library (uvicorn, aiohttp) through the same handler
    logging.basicConfig(
        format="%(message)s",
        level=config.log_level.upper(),
        handlers=[handler],
        force=True,
    )

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("geolink.logging")
    logger.info("Logging configured", level=config.log_level, output=config.log_file or "console")
