"""Structured logging utilities."""

import logging
import sys
from typing import Any, Optional

import structlog


def setup_logging(debug: bool = False) -> None:
    """Configure structured logging for the application."""

    log_level = logging.DEBUG if debug else logging.INFO

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance for the given name."""
    return structlog.get_logger(name)


class AuditLogger:
    """Logger for ownership-scoped mutations (status changes, moderation)."""

    def __init__(self, actor_id: Optional[int], entity: str):
        self.logger = get_logger("audit")
        self.actor_id = actor_id
        self.entity = entity

    def log(self, event: str, entity_id: int, **kwargs: Any) -> None:
        self.logger.info(
            event,
            actor_id=self.actor_id,
            entity=self.entity,
            entity_id=entity_id,
            **kwargs,
        )

    def status_changed(self, entity_id: int, old: str, new: str) -> None:
        self.log("status_changed", entity_id, old_status=old, new_status=new)

    def denied(self, entity_id: int, reason: str) -> None:
        self.logger.warning(
            "access_denied",
            actor_id=self.actor_id,
            entity=self.entity,
            entity_id=entity_id,
            reason=reason,
        )
