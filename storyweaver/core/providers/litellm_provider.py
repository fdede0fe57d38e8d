"""
Text generation through DSPy's LiteLLM-backed LM client.

One subclass per vendor sets the provider name, the credential variables
and the model list. Models are tried in order; a model the account cannot
see (404) moves on to the next one, any other failure is raised.
"""

import asyncio
import logging
from typing import Optional, Sequence

import dspy
import litellm

from storyweaver.config import PROVIDER_CONSTANTS, SYSTEM_PROMPT, TEXT_MODELS, get_api_key
from ..errors import TransientError, UnavailableError
from ..types import TextGenerationRequest
from .base import TextProvider, map_vendor_error

logger = logging.getLogger(__name__)


class LiteLLMTextProvider(TextProvider):
    """Story text via dspy.LM, with in-provider model fallback."""

    api_key_names: tuple[str, ...] = ()

    def __init__(self, api_key: Optional[str] = None, models: Optional[Sequence[str]] = None):
        self.api_key = api_key or get_api_key(*self.api_key_names)
        self.models = list(models or TEXT_MODELS[self.name])
        if not self.api_key:
            logger.debug(
                f"{' or '.join(self.api_key_names)} is not set. "
                f"{self.name} provider will not be available."
            )

    def is_available(self) -> bool:
        return bool(self.api_key)

    def _get_lm(self, model: str, max_tokens: Optional[int] = None) -> dspy.LM:
        # Retries and caching are handled by the retry engine, not LiteLLM
        return dspy.LM(
            model,
            api_key=self.api_key,
            max_tokens=max_tokens or PROVIDER_CONSTANTS["max_tokens"],
            temperature=PROVIDER_CONSTANTS["temperature"],
            timeout=PROVIDER_CONSTANTS["llm_timeout"],
            cache=False,
            num_retries=0,
        )

    async def generate_text(self, request: TextGenerationRequest) -> str:
        self._require_available()
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": self.resolve_prompt(request)},
        ]
        return await self.complete(messages)

    async def complete(self, messages: list[dict], max_tokens: Optional[int] = None) -> str:
        """Run a chat completion, falling through models that are not found."""
        not_found: Optional[BaseException] = None

        for model in self.models:
            lm = self._get_lm(model, max_tokens)
            try:
                outputs = await asyncio.to_thread(lm, messages=messages)
            except litellm.exceptions.NotFoundError as e:
                logger.warning(f"{self.name}: model {model} not found, trying next model")
                not_found = e
                continue
            except Exception as e:
                raise map_vendor_error(self.name, e) from e

            return self._first_text(outputs, model)

        raise UnavailableError(
            f"No {self.name} model available (tried {', '.join(self.models)}): {not_found}",
            provider=self.name,
            original_error=not_found,
        )

    def _first_text(self, outputs: list, model: str) -> str:
        text = outputs[0] if outputs else None
        # Outputs are dicts when the model returns reasoning or tool calls
        if isinstance(text, dict):
            text = text.get("text")
        if not text or not text.strip():
            raise TransientError(f"{self.name} ({model}) returned an empty response", provider=self.name)
        return text
