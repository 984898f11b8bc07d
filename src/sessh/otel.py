"""Optional OpenTelemetry tracing for sessh.

sessh.otel
~~~~~~~~~~

Every client operation runs inside :func:`start_span`. The span is created on
whatever tracer provider the application installed, and :func:`trace_env`
turns the active context into ``TRACEPARENT``/``TRACESTATE``/``BAGGAGE`` so
the sessh child process can continue the trace.

Without ``opentelemetry-api`` installed (``pip install sessh[otel]``), or with
``SESSH_OTEL=0``, the helpers do nothing. sessh never installs a provider on
its own; applications without one can call :func:`configure_tracing`.
"""

from __future__ import annotations

import contextlib
import logging
import os
import typing as t

from .__about__ import __version__

if t.TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

propagate = None
trace = None

try:  # pragma: no cover - optional dependency
    from opentelemetry import propagate as otel_propagate, trace as otel_trace
except ImportError:  # pragma: no cover - optional dependency
    pass
else:
    propagate = otel_propagate
    trace = otel_trace

#: Carrier keys forwarded to the child, and the variable each one becomes
TRACE_ENV_KEYS = {
    "traceparent": "TRACEPARENT",
    "tracestate": "TRACESTATE",
    "baggage": "BAGGAGE",
}


def otel_enabled() -> bool:
    """Return True unless tracing is unavailable or ``SESSH_OTEL`` turns it off.

    >>> import os
    >>> os.environ["SESSH_OTEL"] = "0"
    >>> otel_enabled()
    False
    >>> del os.environ["SESSH_OTEL"]
    """
    if trace is None:
        return False
    return os.environ.get("SESSH_OTEL", "").strip().lower() not in {"0", "false"}


def trace_env() -> dict[str, str]:
    """Return W3C trace headers for the child environment.

    Empty when no valid span is current.

    >>> trace_env()
    {}
    """
    if propagate is None or not otel_enabled():
        return {}
    carrier: dict[str, str] = {}
    propagate.inject(carrier)
    if "traceparent" not in carrier:
        return {}
    return {
        env_key: carrier[key]
        for key, env_key in TRACE_ENV_KEYS.items()
        if carrier.get(key)
    }


@contextlib.contextmanager
def start_span(name: str, **attributes: str) -> Iterator[t.Any]:
    """Run the block inside a span named *name*; yields None when disabled."""
    if trace is None or not otel_enabled():
        yield None
        return
    tracer = trace.get_tracer_provider().get_tracer("sessh", __version__)
    with tracer.start_as_current_span(name, attributes=attributes or None) as span:
        yield span


def configure_tracing(service_name: str = "sessh") -> t.Any:
    """Install a tracer provider exporting spans over OTLP/HTTP.

    The exporter reads ``OTEL_EXPORTER_OTLP_*`` variables for its endpoint.
    Returns the provider, or None when the SDK or exporter is not installed.
    """
    if trace is None:
        return None
    try:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
    except ImportError:
        logger.debug("opentelemetry sdk or otlp exporter missing", exc_info=True)
        return None

    provider = TracerProvider(
        resource=Resource.create(
            {"service.name": service_name, "service.version": __version__},
        ),
    )
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    trace.set_tracer_provider(provider)
    return provider


__all__ = ["configure_tracing", "otel_enabled", "start_span", "trace_env"]
