"""Logging for the TVL feed service.

The price feed, poller and network client emit structlog events named in
snake_case (``price_feed_updated``, ``price_feed_update_skipped``,
``http_bad_status``) with their context as keyword fields. uvicorn and httpx
log through stdlib ``logging``; their records go through the same timestamp
and level processors so one stream carries both. Set LOG_FORMAT=json for
machine-readable output.
"""

import logging
import os

import structlog

# Third-party loggers that are chatty at INFO and below.
_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def _event_processors() -> list[structlog.types.Processor]:
    """Processors applied to structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_level: str = "INFO", log_format: str | None = None) -> None:
    """Install one root handler rendering feed events and library records.

    Args:
        log_level: Root level name; unknown names fall back to INFO.
        log_format: "json" or "console". Defaults to LOG_FORMAT, else "console".
    """
    log_format = (log_format or os.environ.get("LOG_FORMAT", "console")).lower()
    level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            *_event_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_event_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
