"""Error reporting helpers: checked conditions, error logging and a wrapping id counter."""

from __future__ import annotations

import logging

_log = logging.getLogger("jcontainers")

ERROR_PREFIX = "[Error] "


class AssertionFailed(RuntimeError):
    """Raised when a checked condition does not hold."""


def ensure(condition, message="", exc_type=AssertionFailed):
    """Raise ``exc_type(message)`` unless ``condition`` is true."""
    if not condition:
        raise exc_type(message)


def log_error(message, *args):
    """Log an error line with printf-style arguments and return the logged text."""
    text = ERROR_PREFIX + (message % args if args else message)
    _log.error("%s", text)
    return text


class Counter:
    """Monotonic id source that wraps back to zero after reaching its limit."""

    def __init__(self, limit=0xFFFFFFFF):
        if limit < 0:
            raise ValueError("counter limit must not be negative")
        self._limit = limit
        self._value = 0

    @property
    def limit(self):
        return self._limit

    def increase(self):
        """Advance the counter, wrapping to zero once the limit was reached."""
        self._value = 0 if self._value == self._limit else self._value + 1

    def new_id(self):
        """Advance the counter and return the new value."""
        self.increase()
        return self._value

    def current(self):
        """Return the current value without advancing."""
        return self._value