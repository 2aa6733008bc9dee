from typing import Any

from agent_hub.core.exceptions import ConfigurationError


class PromptAdapter:
    """Shapes a system prompt plus chat messages for each provider SDK."""

    @staticmethod
    def for_claude(
        system: str,
        messages: list[dict[str, str]],
        cache: bool = True,
    ) -> dict[str, Any]:
        # system prompt cached for 1h
        block: dict[str, Any] = {"type": "text", "text": system}
        if cache:
            block["cache_control"] = {"type": "ephemeral", "ttl": "1h"}
        return {"system": [block], "messages": messages}

    @staticmethod
    def for_openai(system: str, messages: list[dict[str, str]]) -> dict[str, Any]:
        return {"messages": [{"role": "system", "content": system}, *messages]}

    @classmethod
    def for_model(cls, model: str, system: str, messages: list[dict[str, str]]) -> dict[str, Any]:
        if model.startswith("claude-"):
            return cls.for_claude(system, messages)
        if model.startswith("gpt-"):
            return cls.for_openai(system, messages)
        raise ConfigurationError(f"Unknown model prefix: {model}")
