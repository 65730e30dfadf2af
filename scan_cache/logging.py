"""Structured logging configuration: structlog over stdlib logging."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

LOG_LEVEL_ENV = "SCAN_CACHE_LOG_LEVEL"
LOG_FORMAT_ENV = "SCAN_CACHE_LOG_FORMAT"


def _renderers(log_format: str) -> list[structlog.types.Processor]:
    if log_format == "json":
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    # ConsoleRenderer formats exceptions itself
    return [structlog.dev.ConsoleRenderer(colors=False)]


def setup_logging(level: str | None = None) -> None:
    """Route structlog and library loggers (httpx) to stderr.

    Command output goes to stdout, so logs never mix with the JSON printed by
    `scan-cache summary`.

    Args:
        level: Log level. Defaults to SCAN_CACHE_LOG_LEVEL, then WARNING.
            SCAN_CACHE_LOG_FORMAT selects "console" (default) or "json".
    """
    log_level = (level or os.environ.get(LOG_LEVEL_ENV, "WARNING")).upper()
    log_format = os.environ.get(LOG_FORMAT_ENV, "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        *_renderers(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "root": {"handlers": ["stderr"], "level": "WARNING"},
            "loggers": {
                "scan_cache": {"level": log_level},
                "httpx": {"level": "WARNING"},
            },
        }
    )
