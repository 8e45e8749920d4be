"""Structured Logging — request-scoped context, JSON formatter and setup.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Every record emitted while serving a request carries that request's
      request_id and path; user_id once the auth gate has verified a token
    - Extra fields passed explicitly win over the bound request context
    - setup_logging is idempotent: re-running it replaces its own handler

Design Decisions:
    - ContextVars over passing a logger adapter around: each asyncio task sees
      its own request, and services log without knowing about HTTP
    - Context injected by a logging.Filter on the handler, so third-party
      loggers (sqlalchemy, uvicorn) get the same fields
"""

import json
import logging
import re
import uuid
from contextvars import ContextVar, Token
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "request_id", "user_id", "payment_id", "username",
    "error_code", "path", "reason",
)

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_path: ContextVar[str | None] = ContextVar("path", default=None)
_user_id: ContextVar[int | None] = ContextVar("user_id", default=None)

_HANDLER_NAME = "loantracker"
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


# ─── Request Context ─────────────────────────────────────────────

def bind_request(path: str, request_id: str | None = None) -> tuple[Token, Token]:
    """Bind a request id and path for the current task. Returns reset tokens.

    A caller-supplied id is kept only if it is a short plain token; anything
    else is replaced by a fresh one.
    """
    if request_id is None or not _REQUEST_ID_PATTERN.match(request_id):
        request_id = uuid.uuid4().hex
    return (
        _request_id.set(request_id),
        _path.set(path),
    )


def reset_request(tokens: tuple[Token, Token]) -> None:
    request_token, path_token = tokens
    _request_id.reset(request_token)
    _path.reset(path_token)
    _user_id.set(None)


def bind_user(user_id: int) -> None:
    _user_id.set(user_id)


def current_request_id() -> str | None:
    return _request_id.get()


class RequestContextFilter(logging.Filter):
    """Copy the bound request context onto each record, without overriding extras."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, var in (
            ("request_id", _request_id), ("path", _path), ("user_id", _user_id),
        ):
            value = var.get()
            if value is not None and record.__dict__.get(key) is None:
                setattr(record, key, value)
        return True


# ─── Formatting ──────────────────────────────────────────────────

class JSONFormatter(logging.Formatter):
    """One JSON object per line; only whitelisted extras are emitted."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Install the application handler on the root logger."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.addFilter(RequestContextFilter())
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(request_id)s] - %(message)s",
            defaults={"request_id": "-"},
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
