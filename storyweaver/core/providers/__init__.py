"""
Provider adapters and the registry that builds them.

The registry maps provider type names ("gemini", "dalle", ...) to adapter
factories. Every lookup builds a fresh adapter, so availability always
reflects the credentials present at that moment. Tests inject their own
factories.
"""

import logging
from typing import Callable, Mapping, Optional

from .anthropic_provider import AnthropicProvider
from .base import BaseProvider, ImageProvider, TextProvider
from .gemini_provider import GeminiImageProvider, GeminiProvider
from .openai_provider import DalleProvider, OpenAIProvider
from .stability_provider import StableDiffusionProvider
from ..types import ProviderDescriptor

logger = logging.getLogger(__name__)

TEXT_PROVIDER_FACTORIES: Mapping[str, Callable[[], TextProvider]] = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}

IMAGE_PROVIDER_FACTORIES: Mapping[str, Callable[[], ImageProvider]] = {
    "dalle": DalleProvider,
    "gemini-image": GeminiImageProvider,
    "stable-diffusion": StableDiffusionProvider,
}


class ProviderRegistry:
    """Builds provider adapters by type name."""

    def __init__(
        self,
        text_factories: Optional[Mapping[str, Callable[[], TextProvider]]] = None,
        image_factories: Optional[Mapping[str, Callable[[], ImageProvider]]] = None,
    ):
        self.text_factories = dict(TEXT_PROVIDER_FACTORIES if text_factories is None else text_factories)
        self.image_factories = dict(IMAGE_PROVIDER_FACTORIES if image_factories is None else image_factories)

    @property
    def text_types(self) -> set[str]:
        return set(self.text_factories)

    @property
    def image_types(self) -> set[str]:
        return set(self.image_factories)

    def _build(self, factories: Mapping[str, Callable[[], BaseProvider]], provider_type: str):
        factory = factories.get(provider_type)
        if factory is None:
            return None
        try:
            return factory()
        except Exception:
            logger.exception(f"Failed to construct provider {provider_type}; treating as unavailable")
            return None

    def get_text_provider(self, provider_type: str) -> Optional[TextProvider]:
        """A fresh text adapter, or None if unknown or not configured."""
        provider = self._build(self.text_factories, provider_type)
        return provider if provider and provider.is_available() else None

    def get_image_provider(self, provider_type: str) -> Optional[ImageProvider]:
        """A fresh image adapter, or None if unknown or not configured."""
        provider = self._build(self.image_factories, provider_type)
        return provider if provider and provider.is_available() else None

    def available_image_providers(self) -> list[ImageProvider]:
        return [p for p in map(self.get_image_provider, self.image_factories) if p]

    def describe(self) -> list[ProviderDescriptor]:
        """Descriptors for every registered provider, available or not."""
        descriptors = []
        for factories in (self.text_factories, self.image_factories):
            for provider_type in factories:
                provider = self._build(factories, provider_type)
                if provider:
                    descriptors.append(provider.descriptor)
        return descriptors


__all__ = [
    "AnthropicProvider",
    "BaseProvider",
    "DalleProvider",
    "GeminiImageProvider",
    "GeminiProvider",
    "ImageProvider",
    "OpenAIProvider",
    "ProviderRegistry",
    "StableDiffusionProvider",
    "TextProvider",
    "IMAGE_PROVIDER_FACTORIES",
    "TEXT_PROVIDER_FACTORIES",
]
