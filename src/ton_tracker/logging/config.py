# -*- coding: utf-8 -*-
"""structlog setup: one processor chain, per-handler renderers, optional Logfire export."""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

import logfire
import structlog
from structlog.types import EventDict, Processor

from ton_tracker.config import AppSettings, Settings, get_settings

_LOGFIRE_LEVELS: dict[str, str] = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "fatal",
}

# Third-party loggers that are chatty at INFO (access log per webhook hit, SQL echo).
_NOISY_LOGGERS: dict[str, int] = {
    "aiohttp.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "httpx": logging.WARNING,
}


class _ServiceContext:
    """Processor stamping app/service identity on every event."""

    def __init__(self, app: AppSettings) -> None:
        fields: dict[str, Any] = {"app_name": app.app_name, "environment": app.environment}
        if app.service_name:
            fields["service_name"] = app.service_name
        if app.service_version:
            fields["service_version"] = app.service_version
        self._fields = fields

    def __call__(self, logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in self._fields.items():
            event_dict.setdefault(key, value)
        return event_dict


def _level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _formatter(renderer: Processor, shared: list[Processor]) -> logging.Formatter:
    processors: list[Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    # ConsoleRenderer pretty-prints exc_info itself.
    if not isinstance(renderer, structlog.dev.ConsoleRenderer):
        processors.append(structlog.processors.format_exc_info)
    processors.append(renderer)
    return structlog.stdlib.ProcessorFormatter(foreign_pre_chain=shared, processors=processors)


def _build_handlers(settings: Settings, shared: list[Processor]) -> list[logging.Handler]:
    """Console follows json_format; the rotating file is always JSON lines."""
    cfg = settings.logging
    handlers: list[logging.Handler] = []

    if cfg.log_to_console:
        console = logging.StreamHandler()
        console.setLevel(_level(cfg.console_level))
        renderer: Processor = (
            structlog.processors.JSONRenderer() if cfg.json_format else structlog.dev.ConsoleRenderer()
        )
        console.setFormatter(_formatter(renderer, shared))
        handlers.append(console)

    if cfg.log_to_file:
        path = Path(cfg.log_file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = TimedRotatingFileHandler(
            path,
            when=cfg.log_file_when,
            interval=cfg.log_file_interval,
            backupCount=cfg.log_file_backup_count,
            encoding="utf-8",
            utc=cfg.log_file_utc,
        )
        rotating.setLevel(_level(cfg.file_level))
        rotating.setFormatter(_formatter(structlog.processors.JSONRenderer(), shared))
        handlers.append(rotating)

    return handlers


def configure_logging(settings: Settings | None = None) -> None:
    """Configure stdlib handlers, structlog and (when enabled) Logfire from settings."""
    settings = settings or get_settings()
    cfg = settings.logging
    app = settings.app

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _ServiceContext(app),
    ]

    handlers = _build_handlers(settings, shared)
    root_level = min((h.level for h in handlers), default=logging.WARNING)
    logging.basicConfig(level=root_level, handlers=handlers or [logging.NullHandler()], force=True)
    for name, level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        *shared,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if cfg.logfire_enabled:
        logfire.configure(
            token=cfg.logfire_token,
            service_name=app.service_name or app.app_name,
            service_version=app.service_version,
            min_level=_LOGFIRE_LEVELS.get(cfg.logfire_level, "info"),  # type: ignore[arg-type]
            environment=app.environment,
        )
        processors.append(logfire.StructlogProcessor())  # type: ignore[arg-type]
    processors.append(structlog.stdlib.ProcessorFormatter.wrap_for_formatter)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
