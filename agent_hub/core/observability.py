"""Langfuse tracing for generative backend calls.

Tracing is on only when both Langfuse keys are configured. The client is
built once at import so ``observe`` and ``flush_traces`` share it; without
keys ``observe`` is a pass-through and ``flush_traces`` does nothing.
"""

import asyncio
import logging
from collections.abc import Callable
from functools import wraps

from agent_hub.core.config import settings

logger = logging.getLogger(__name__)

logging.getLogger("langfuse").setLevel(logging.ERROR)

TRACING_ENABLED = bool(settings.langfuse_public_key and settings.langfuse_secret_key)

if TRACING_ENABLED:
    from langfuse import Langfuse, observe

    _client = Langfuse(
        public_key=settings.langfuse_public_key,
        secret_key=settings.langfuse_secret_key,
        host=settings.langfuse_host,
    )
else:
    _client = None

    def observe(name: str = "", **kwargs) -> Callable:  # type: ignore[misc]
        def decorator(fn: Callable) -> Callable:
            if not asyncio.iscoroutinefunction(fn):
                return fn

            @wraps(fn)
            async def traced(*args, **kw):
                return await fn(*args, **kw)

            return traced

        return decorator


def flush_traces() -> None:
    """Send buffered generation traces before the process exits."""
    if _client is None:
        return
    try:
        _client.flush()
    except Exception as e:
        logger.warning("Langfuse flush failed: %s", e)


__all__ = ["TRACING_ENABLED", "flush_traces", "observe"]
