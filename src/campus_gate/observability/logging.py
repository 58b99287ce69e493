"""
campus_gate.observability.logging

Structured logging configuration shared by the service and client processes.

Responsibilities:
- Configure `structlog` on top of stdlib logging (JSON in deployments, console in dev).
- Provide a small wrapper for obtaining bound loggers.
- Bind the authenticated principal into the request log context.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Literal

import structlog

LogFormat = Literal["json", "console"]


def configure_logging(*, service_name: str, level: str, fmt: LogFormat = "json") -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer: Any
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_principal(principal_id: str | None) -> None:
    # Called by the edge gate once the session has been refreshed.
    if principal_id is None:
        structlog.contextvars.unbind_contextvars("principal_id")
    else:
        structlog.contextvars.bind_contextvars(principal_id=principal_id)


# --- Module Notes -----------------------------------------------------------
# Client-side components (AuthSession, RoleCache) log through the same helper, so a
# UI process that calls `configure_logging` emits the same event shape.
