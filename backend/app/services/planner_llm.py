"""Planner model access — OpenAI chat completions, Anthropic as fallback."""

import logging

from openai import AsyncOpenAI
import anthropic

from app.config import settings

logger = logging.getLogger(__name__)


class PlannerLLM:
    """Sends one system + user exchange to the first provider that answers.

    SDK clients are built from settings on first use unless injected.
    Sampling parameters come from the planner settings, so every pass of a
    recommendation run uses the same model configuration.
    """

    def __init__(self, openai_client=None, anthropic_client=None):
        self._openai = openai_client
        self._anthropic = anthropic_client

    def _providers(self):
        if self._openai is None and settings.openai_api_key:
            self._openai = AsyncOpenAI(api_key=settings.openai_api_key)
        if self._anthropic is None and settings.anthropic_api_key:
            self._anthropic = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)

        providers = []
        if self._openai is not None:
            providers.append(("OpenAI", self._ask_openai))
        if self._anthropic is not None:
            providers.append(("Anthropic", self._ask_anthropic))
        return providers

    async def complete(self, system: str, user: str, *, json_mode: bool = False) -> str:
        """Return the first non-empty reply, trying providers in order.

        Raises:
            RuntimeError: no provider is configured, or every one failed.
        """
        providers = self._providers()
        if not providers:
            raise RuntimeError("No planner model configured")

        errors = []
        for name, ask in providers:
            try:
                reply = (await ask(system, user, json_mode)).strip()
                if not reply:
                    raise ValueError("empty reply")
                return reply
            except Exception as e:
                errors.append(f"{name}: {e}")
                logger.warning(f"{name} planner call failed: {e}")

        raise RuntimeError(f"All LLM providers failed: {'; '.join(errors)}")

    async def _ask_openai(self, system: str, user: str, json_mode: bool) -> str:
        kwargs: dict = {
            "model": settings.openai_model,
            "max_tokens": settings.planner_max_tokens,
            "temperature": settings.planner_temperature,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = await self._openai.chat.completions.create(**kwargs)
        return response.choices[0].message.content or ""

    async def _ask_anthropic(self, system: str, user: str, json_mode: bool) -> str:
        # No response_format here; the final prompt already demands a JSON object
        response = await self._anthropic.messages.create(
            model=settings.anthropic_model,
            max_tokens=settings.planner_max_tokens,
            temperature=settings.planner_temperature,
            system=system,
            messages=[{"role": "user", "content": user}],
        )
        return "".join(block.text for block in response.content if getattr(block, "type", "text") == "text")

    async def close(self):
        if self._openai is not None:
            await self._openai.close()
        if self._anthropic is not None:
            await self._anthropic.close()


# Singleton
planner_llm = PlannerLLM()
