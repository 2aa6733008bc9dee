import logging
import time
from dataclasses import dataclass

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from agent_hub.core.config import settings
from agent_hub.core.exceptions import ConfigurationError, UpstreamUnavailable
from agent_hub.core.llm.prompts import PromptAdapter
from agent_hub.core.observability import observe
from agent_hub.core.usage import log_usage

logger = logging.getLogger(__name__)

# Singleton clients (lazy initialization)
_anthropic: AsyncAnthropic | None = None
_openai: AsyncOpenAI | None = None


def anthropic_client() -> AsyncAnthropic:
    global _anthropic
    if _anthropic is None:
        _anthropic = AsyncAnthropic(api_key=settings.anthropic_api_key)
    return _anthropic


def openai_client() -> AsyncOpenAI:
    global _openai
    if _openai is None:
        _openai = AsyncOpenAI(api_key=settings.openai_api_key)
    return _openai


@dataclass
class Completion:
    text: str
    model: str
    tokens_input: int = 0
    tokens_output: int = 0


async def generate_text(
    model: str,
    system: str,
    messages: list[dict[str, str]],
    max_tokens: int = 1024,
) -> Completion:
    """Unified LLM call. Routes to the correct SDK based on model ID."""
    if not messages:
        raise ValueError("messages are required")

    payload = PromptAdapter.for_model(model, system, messages)
    if model.startswith("gpt-"):
        resp = await openai_client().chat.completions.create(
            model=model,
            max_completion_tokens=max_tokens,
            **payload,
        )
        usage = resp.usage
        return Completion(
            text=resp.choices[0].message.content or "",
            model=model,
            tokens_input=getattr(usage, "prompt_tokens", 0) or 0,
            tokens_output=getattr(usage, "completion_tokens", 0) or 0,
        )
    resp = await anthropic_client().messages.create(
        model=model,
        max_tokens=max_tokens,
        **payload,
    )
    text = "".join(b.text for b in resp.content if getattr(b, "type", "text") == "text")
    return Completion(
        text=text,
        model=model,
        tokens_input=getattr(resp.usage, "input_tokens", 0) or 0,
        tokens_output=getattr(resp.usage, "output_tokens", 0) or 0,
    )


class GenerativeTextClient:
    """Text completion with a primary model and an optional fallback model.

    Any provider error (network, rate limit, 5xx) on the primary model is
    retried once on the fallback model. When both fail the call raises
    ``UpstreamUnavailable``.
    """

    def __init__(
        self,
        model: str | None = None,
        fallback_model: str | None = None,
        max_tokens: int | None = None,
    ):
        self.model = model or settings.focus_model
        self.fallback_model = (
            fallback_model if fallback_model is not None else settings.focus_fallback_model
        )
        self.max_tokens = max_tokens or settings.focus_max_tokens

    @observe(name="generative_complete")
    async def complete(
        self,
        messages: list[dict[str, str]],
        system_prompt: str,
        *,
        user_id: str | None = None,
        agent_type: str = "",
        operation: str = "",
    ) -> str:
        models = [self.model]
        if self.fallback_model and self.fallback_model != self.model:
            models.append(self.fallback_model)

        last_error: Exception | None = None
        for model in models:
            start = time.monotonic()
            try:
                completion = await generate_text(model, system_prompt, messages, self.max_tokens)
            except ConfigurationError:
                raise
            except Exception as e:
                last_error = e
                logger.warning("Model %s failed: %s", model, e)
                await log_usage(
                    user_id=user_id,
                    agent_type=agent_type,
                    operation=operation,
                    model=model,
                    duration_ms=int((time.monotonic() - start) * 1000),
                    success=False,
                )
                continue

            await log_usage(
                user_id=user_id,
                agent_type=agent_type,
                operation=operation,
                model=completion.model,
                tokens_input=completion.tokens_input,
                tokens_output=completion.tokens_output,
                duration_ms=int((time.monotonic() - start) * 1000),
                success=True,
            )
            return completion.text

        raise UpstreamUnavailable(f"All models failed: {last_error}") from last_error
