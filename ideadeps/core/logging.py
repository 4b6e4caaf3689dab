"""Logging setup for the ideadeps CLI and embedding hosts.

Events are emitted through structlog and routed into stdlib logging, so a
host application that already configures ``logging`` keeps control of the
handlers. The CLI calls :func:`setup_logging` once per invocation.
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

LOG_FORMATS = ("console", "json")


def _processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Send ``ideadeps.*`` events to stderr.

    Arguments win over ``IDEADEPS_LOG_LEVEL`` (default INFO) and
    ``IDEADEPS_LOG_FORMAT`` (``console`` or ``json``). Other libraries stay
    at WARNING. Stdout is left to command output.
    """
    log_level = (level or os.environ.get("IDEADEPS_LOG_LEVEL", "INFO")).upper()
    log_format = (log_format or os.environ.get("IDEADEPS_LOG_FORMAT", "console")).lower()
    processors = _processors()

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "ideadeps": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "ideadeps",
                },
            },
            "root": {"handlers": ["stderr"], "level": "WARNING"},
            "loggers": {"ideadeps": {"level": log_level}},
        }
    )
