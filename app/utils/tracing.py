from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace


@contextmanager
def traced_span(name: str, **attributes: Any) -> Iterator[None]:
    """Wrap a service call in a span; a no-op tracer is used when no SDK is configured."""
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(name) as span:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(key, value)
        yield
