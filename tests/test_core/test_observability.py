from unittest.mock import MagicMock, patch

from agent_hub.core import observability
from agent_hub.core.observability import TRACING_ENABLED, flush_traces, observe


def test_tracing_disabled_without_keys():
    assert TRACING_ENABLED is False
    assert observability._client is None


async def test_observe_noop_keeps_coroutine_behaviour():
    @observe(name="demo")
    async def add(a, b):
        return a + b

    assert await add(1, 2) == 3
    assert add.__name__ == "add"


def test_observe_noop_returns_sync_functions_unchanged():
    def double(x):
        return x * 2

    assert observe(name="demo")(double) is double


def test_flush_without_client_is_noop():
    flush_traces()


def test_flush_errors_are_swallowed():
    client = MagicMock()
    client.flush.side_effect = RuntimeError("network")
    with patch.object(observability, "_client", client):
        flush_traces()
    client.flush.assert_called_once()
