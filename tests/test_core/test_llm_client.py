"""Tests for model routing and provider fallback."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from agent_hub.core.exceptions import ConfigurationError, UpstreamUnavailable
from agent_hub.core.llm.clients import Completion, GenerativeTextClient, generate_text

MESSAGES = [{"role": "user", "content": "Hello"}]


@pytest.fixture(autouse=True)
def _mock_usage():
    with patch("agent_hub.core.llm.clients.log_usage", new_callable=AsyncMock) as mock:
        yield mock


async def test_claude_models_route_to_anthropic():
    with patch("agent_hub.core.llm.clients.anthropic_client") as factory:
        client = AsyncMock()
        factory.return_value = client
        client.messages.create.return_value = MagicMock(
            content=[MagicMock(type="text", text="result")],
            usage=MagicMock(input_tokens=12, output_tokens=3),
        )

        result = await generate_text("claude-sonnet-4-5", "system", MESSAGES, max_tokens=100)

    assert result.text == "result"
    assert result.tokens_input == 12
    kwargs = client.messages.create.call_args.kwargs
    assert kwargs["max_tokens"] == 100
    assert kwargs["system"][0]["cache_control"]["type"] == "ephemeral"


async def test_gpt_models_route_to_openai():
    with patch("agent_hub.core.llm.clients.openai_client") as factory:
        client = AsyncMock()
        factory.return_value = client
        client.chat.completions.create.return_value = MagicMock(
            choices=[MagicMock(message=MagicMock(content="ok"))],
            usage=MagicMock(prompt_tokens=5, completion_tokens=1),
        )

        result = await generate_text("gpt-4.1-mini", "system", MESSAGES)

    assert result.text == "ok"
    sent = client.chat.completions.create.call_args.kwargs["messages"]
    assert sent[0] == {"role": "system", "content": "system"}


async def test_unknown_model_prefix_is_configuration_error():
    with pytest.raises(ConfigurationError):
        await generate_text("llama-3", "system", MESSAGES)


async def test_empty_messages_rejected():
    with pytest.raises(ValueError):
        await generate_text("claude-sonnet-4-5", "system", [])


async def test_fallback_model_used_when_primary_fails(_mock_usage):
    calls = []

    async def fake_generate(model, system, messages, max_tokens):
        calls.append(model)
        if model.startswith("claude-"):
            raise RuntimeError("503")
        return Completion(text="from fallback", model=model)

    client = GenerativeTextClient("claude-sonnet-4-5", "gpt-4.1-mini", 100)
    with patch("agent_hub.core.llm.clients.generate_text", side_effect=fake_generate):
        text = await client.complete(MESSAGES, "system", user_id=None)

    assert text == "from fallback"
    assert calls == ["claude-sonnet-4-5", "gpt-4.1-mini"]
    successes = [c.kwargs["success"] for c in _mock_usage.call_args_list]
    assert successes == [False, True]


async def test_all_models_failing_raises_upstream_unavailable():
    client = GenerativeTextClient("claude-sonnet-4-5", "gpt-4.1-mini", 100)
    with patch(
        "agent_hub.core.llm.clients.generate_text",
        new_callable=AsyncMock,
        side_effect=RuntimeError("down"),
    ):
        with pytest.raises(UpstreamUnavailable):
            await client.complete(MESSAGES, "system")


async def test_empty_fallback_disables_second_attempt():
    client = GenerativeTextClient("claude-sonnet-4-5", "", 100)
    with patch(
        "agent_hub.core.llm.clients.generate_text",
        new_callable=AsyncMock,
        side_effect=RuntimeError("down"),
    ) as mock_generate:
        with pytest.raises(UpstreamUnavailable):
            await client.complete(MESSAGES, "system")
    assert mock_generate.await_count == 1
