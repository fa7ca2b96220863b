"""
Langfuse tracing for agent runs.

Tracing auto-enables when both Langfuse keys are configured and is a
no-op otherwise.
"""

from .client import (
    TracingClient,
    init_tracing_client,
    get_tracing_client,
    shutdown_tracing,
)
from .context import TracingContext, SpanContext, GenerationContext

__all__ = [
    "TracingClient",
    "init_tracing_client",
    "get_tracing_client",
    "shutdown_tracing",
    "TracingContext",
    "SpanContext",
    "GenerationContext",
]
