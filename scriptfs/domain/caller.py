"""Tracks which script issued the current call, for log attribution."""

import contextvars
import logging
from typing import Any, MutableMapping, Optional

_caller_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "caller", default=None
)


def get_caller() -> Optional[str]:
    """Retrieve the current caller name from context."""
    return _caller_var.get()


def set_caller(caller: str) -> None:
    """Store the caller name in the current context."""
    _caller_var.set(caller)


def clear_caller() -> None:
    """Remove the caller name from the current context."""
    _caller_var.set(None)


class CallerLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that injects the caller and component into log records."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        """Add caller and component to the extra dict."""
        if "extra" not in kwargs:
            kwargs["extra"] = {}
        else:
            kwargs["extra"] = dict(kwargs["extra"])

        caller = get_caller()
        kwargs["extra"]["caller"] = caller if caller is not None else "-"

        logger_name = self.logger.name
        if logger_name.startswith("scriptfs."):
            component = logger_name[len("scriptfs.") :]
        else:
            component = logger_name
        kwargs["extra"]["component"] = component

        return msg, kwargs
