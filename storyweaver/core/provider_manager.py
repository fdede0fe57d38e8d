"""
Provider manager: one entry point over every configured provider.

Holds the ordered text and image provider type lists and runs each
request through retry_with_fallback, trying providers in configured order
until one succeeds. The manager is created once by the caller and passed
to whatever needs it; it keeps no request state.
"""

import logging
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from storyweaver.config import (
    DEFAULT_IMAGE_PROVIDER,
    DEFAULT_TEXT_PROVIDER,
    get_image_provider_setting,
    get_text_provider_setting,
    parse_provider_list,
)
from .errors import ConfigurationError, ProviderError, ProvidersExhaustedError, classify_error
from .providers import ImageProvider, ProviderRegistry, TextProvider
from .providers.base import BaseProvider
from .retry import FallbackOptions, retry_with_fallback
from .types import ImageGenerationRequest, TextGenerationRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = TypeVar("P", bound=BaseProvider)


def _tagged(provider: P, call: Callable[[P], Awaitable[T]]) -> Callable[[], Awaitable[T]]:
    """Wrap a provider call so any failure is a ProviderError naming that provider."""

    async def run() -> T:
        try:
            return await call(provider)
        except ProviderError as e:
            if e.provider == provider.name:
                raise
            raise ProviderError(
                f"{provider.name}: {e}", provider=provider.name, original_error=e, kind=e.kind
            ) from e
        except Exception as e:
            raise ProviderError(
                f"{provider.name}: {e}",
                provider=provider.name,
                original_error=e,
                kind=classify_error(e),
            ) from e

    return run


class ProviderManager:
    """
    Unified text, image analysis and image generation over ordered providers.

    Args:
        text_providers: Comma-separated text provider types. Defaults to
            the AI_PROVIDER environment variable.
        image_providers: Comma-separated image provider types. Defaults to
            the IMAGE_PROVIDER environment variable.
        registry: Adapter factories (tests pass their own).
        fallback_options: Per-provider retry budget and timeout.
    """

    def __init__(
        self,
        text_providers: Optional[str] = None,
        image_providers: Optional[str] = None,
        registry: Optional[ProviderRegistry] = None,
        fallback_options: Optional[FallbackOptions] = None,
    ):
        self.registry = registry or ProviderRegistry()
        self.fallback_options = fallback_options or FallbackOptions()

        if text_providers is None:
            text_providers = get_text_provider_setting()
        if image_providers is None:
            image_providers = get_image_provider_setting()

        self.text_provider_types = parse_provider_list(
            text_providers, self.registry.text_types, DEFAULT_TEXT_PROVIDER
        )
        self.image_provider_types = parse_provider_list(
            image_providers, self.registry.image_types, DEFAULT_IMAGE_PROVIDER
        )

        logger.info(
            f"Provider manager configured: text={','.join(self.text_provider_types)} "
            f"image={','.join(self.image_provider_types)}"
        )

    # =========================================================================
    # Candidate assembly
    # =========================================================================

    def _text_providers(self) -> list[TextProvider]:
        providers = []
        for provider_type in self.text_provider_types:
            provider = self.registry.get_text_provider(provider_type)
            if provider:
                providers.append(provider)
        return providers

    def _image_providers(self) -> list[ImageProvider]:
        providers = []
        for provider_type in self.image_provider_types:
            provider = self.registry.get_image_provider(provider_type)
            if provider:
                providers.append(provider)

        if not providers:
            fallback = self.registry.available_image_providers()[:1]
            if fallback:
                logger.warning(
                    f"No configured image provider ({','.join(self.image_provider_types)}) is "
                    f"available, falling back to {fallback[0].name}"
                )
            providers = fallback
        return providers

    async def _run(
        self,
        channel: str,
        providers: Sequence[P],
        call: Callable[[P], Awaitable[T]],
    ) -> T:
        candidates = [_tagged(provider, call) for provider in providers]

        try:
            outcome = await retry_with_fallback(candidates, self.fallback_options)
        except ProvidersExhaustedError as e:
            kind = classify_error(e.last_error) if e.last_error else None
            raise ProviderError(
                f"All {channel} providers failed: {e}",
                provider="all",
                original_error=e,
                kind=kind,
            ) from e

        provider = providers[outcome.provider_index]
        logger.info(
            f"{channel} succeeded with provider {outcome.provider_index} ({provider.name})",
            extra={"provider": provider.name, "provider_index": outcome.provider_index},
        )
        return outcome.result

    # =========================================================================
    # Public operations
    # =========================================================================

    async def generate_text(self, request: TextGenerationRequest) -> str:
        """Generate story text with the first text provider that succeeds."""
        providers = self._text_providers()
        if not providers:
            raise ConfigurationError(
                f"No text providers available (configured: {','.join(self.text_provider_types)}). "
                "Set AI_PROVIDER and the matching API key."
            )
        return await self._run("Text generation", providers, lambda p: p.generate_text(request))

    async def analyze_image(self, image: str, prompt: Optional[str] = None) -> str:
        """
        Describe an image with the first capable text provider that succeeds.

        Args:
            image: Base64 image, with or without a data: URL prefix
            prompt: Analysis instruction (defaults to a child description prompt)

        Raises:
            ConfigurationError: No text provider is available, or none of the
                available ones supports image analysis.
        """
        providers = self._text_providers()
        if not providers:
            raise ConfigurationError("No text providers available for image analysis")

        capable = [p for p in providers if p.supports_image_analysis]
        if not capable:
            raise ConfigurationError(
                f"None of the configured providers ({','.join(p.name for p in providers)}) "
                "supports image analysis"
            )
        return await self._run("Image analysis", capable, lambda p: p.analyze_image(image, prompt))

    async def generate_images(self, request: ImageGenerationRequest) -> list[str]:
        """Generate images with the first image provider that succeeds."""
        providers = self._image_providers()
        if not providers:
            raise ConfigurationError(
                f"No image providers available (configured: {','.join(self.image_provider_types)}). "
                "Set IMAGE_PROVIDER and the matching API key."
            )
        return await self._run("Image generation", providers, lambda p: p.generate_images(request))

    def get_provider_info(self) -> dict:
        """Configured and currently available providers per channel."""
        return {
            "text": {
                "configured": list(self.text_provider_types),
                "available": [p.name for p in self._text_providers()],
            },
            "image": {
                "configured": list(self.image_provider_types),
                "available": [p.name for p in self._image_providers()],
            },
        }
