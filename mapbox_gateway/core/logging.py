"""Structured logging configuration using structlog.

Modules keep logging through plain ``logging.getLogger(__name__)`` and pass
structured metadata via ``extra=``.  ``configure_logging`` installs a
``structlog`` ``ProcessorFormatter`` on the root logger so those records are
rendered as JSON (or human-readable console lines) with the metadata lifted
into top-level keys.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from mapbox_gateway.core.config import Settings, settings

SERVICE_NAME = "mapbox-gateway"

_LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
_LOG_FILE_BACKUPS = 5
_HANDLER_MARKER = "_mapbox_gateway_handler"

UNHANDLED_LOGGER = "mapbox_gateway.unhandled"
_previous_excepthook = sys.excepthook


def add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every log entry with the service name and version."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", settings.app_version)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        add_service_context,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _formatter(renderer: Processor) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _log_unhandled_exception(exc_type, exc_value, exc_tb) -> None:
    """``sys.excepthook`` that records uncaught exceptions, then defers to the
    hook that was installed before it."""
    if not issubclass(exc_type, KeyboardInterrupt):
        logging.getLogger(UNHANDLED_LOGGER).critical(
            "Unhandled exception: %s",
            exc_type.__name__,
            exc_info=(exc_type, exc_value, exc_tb),
        )
    _previous_excepthook(exc_type, exc_value, exc_tb)


def _replace_handlers(logger: logging.Logger, handlers: list[logging.Handler]) -> None:
    # Only replace handlers installed by a previous call
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        setattr(handler, _HANDLER_MARKER, True)
        logger.addHandler(handler)


def configure_logging(config: Settings | None = None) -> None:
    """Configure the root logger for the gateway.

    Args:
        config: Settings to read ``log_level``, ``log_json`` and ``log_dir``
            from.  Defaults to the module-level settings.

    With ``log_dir`` set, records also go to ``error.log`` (errors only) and
    ``combined.log``, and uncaught exceptions to ``exceptions.log``.
    """
    global _previous_excepthook
    config = config or settings

    console_renderer: Processor = (
        structlog.processors.JSONRenderer()
        if config.log_json
        else structlog.dev.ConsoleRenderer()
    )

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter(console_renderer))
    handlers: list[logging.Handler] = [console]
    unhandled_handlers: list[logging.Handler] = []

    if config.log_dir:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        json_formatter = _formatter(structlog.processors.JSONRenderer())

        error_file = RotatingFileHandler(
            log_dir / "error.log",
            maxBytes=_LOG_FILE_MAX_BYTES,
            backupCount=_LOG_FILE_BACKUPS,
        )
        error_file.setLevel(logging.ERROR)
        error_file.setFormatter(json_formatter)

        combined_file = RotatingFileHandler(
            log_dir / "combined.log",
            maxBytes=_LOG_FILE_MAX_BYTES,
            backupCount=_LOG_FILE_BACKUPS,
        )
        combined_file.setFormatter(json_formatter)
        handlers.extend([error_file, combined_file])

        exceptions_file = RotatingFileHandler(
            log_dir / "exceptions.log",
            maxBytes=_LOG_FILE_MAX_BYTES,
            backupCount=_LOG_FILE_BACKUPS,
        )
        exceptions_file.setFormatter(json_formatter)
        unhandled_handlers.append(exceptions_file)

    root = logging.getLogger()
    _replace_handlers(root, handlers)
    _replace_handlers(logging.getLogger(UNHANDLED_LOGGER), unhandled_handlers)
    root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    # Set log levels for noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    if sys.excepthook is not _log_unhandled_exception:
        _previous_excepthook = sys.excepthook
        sys.excepthook = _log_unhandled_exception


__all__ = [
    "SERVICE_NAME",
    "UNHANDLED_LOGGER",
    "add_service_context",
    "configure_logging",
]
