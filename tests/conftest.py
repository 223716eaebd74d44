"""Shared fixtures for canaryjson tests."""

from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal

import pytest

from canaryjson._logging import set_tracer


class RecordingSpan:
    def __init__(self, name, attributes):
        self.name = name
        self.attributes = dict(attributes)

    def set_attribute(self, key, value):
        self.attributes[key] = value


class RecordingTracer:
    """Minimal stand-in for an OpenTelemetry tracer."""

    def __init__(self):
        self.spans = []

    @contextmanager
    def start_as_current_span(self, name, attributes=None):
        s = RecordingSpan(name, attributes or {})
        self.spans.append(s)
        yield s


@pytest.fixture(autouse=True)
def _reset_tracer():
    yield
    set_tracer(None)


@pytest.fixture
def tracer():
    t = RecordingTracer()
    set_tracer(t)
    return t


@pytest.fixture
def record():
    """A storage-style record with a 64-bit id and exact decimals."""
    return {
        "id": 9223372036854775807,
        "name": "policy/default",
        "ttl": 3600,
        "ratio": Decimal("0.1"),
        "enabled": True,
        "parent": None,
        "tags": ["a", "b", "c"],
        "limits": {"max": 18446744073709551615, "min": -9223372036854775808},
    }
