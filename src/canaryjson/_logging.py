"""Loggers and optional tracing spans for the codec.

Records go to stdlib loggers under the ``canaryjson`` namespace. Spans are
only created once a tracer is installed:

    import canaryjson
    canaryjson.configure(tracer=trace.get_tracer("storage"))
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator


def get_logger(name: str) -> logging.Logger:
    """Return ``canaryjson.<last component of name>``."""
    return logging.getLogger(f"canaryjson.{name.split('.')[-1]}")


class _NoOpSpan:
    """Accepts span attributes and drops them."""

    def set_attribute(self, _key: str, _value: Any) -> None:
        pass


# Anything with start_as_current_span(name, attributes=...); None disables spans
_tracer: Any = None


def set_tracer(tracer: Any) -> None:
    global _tracer
    _tracer = tracer


def get_tracer() -> Any:
    return _tracer


@contextmanager
def span(name: str, **attributes: Any) -> Generator[Any, None, None]:
    """Run the body inside a tracer span named ``name``.

    Yields the tracer's span, or a :class:`_NoOpSpan` when no tracer is set,
    so callers can always call ``set_attribute``. Errors from the body are
    never caught here.
    """
    tracer = _tracer
    if tracer is None:
        yield _NoOpSpan()
        return

    with tracer.start_as_current_span(name, attributes=attributes) as s:
        yield s
