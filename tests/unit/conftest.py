"""Pytest fixtures for pipeline unit tests."""

from typing import Optional

import pytest

from storyweaver.core.errors import TransientError
from storyweaver.core.provider_manager import ProviderManager
from storyweaver.core.providers import ImageProvider, ProviderRegistry, TextProvider
from storyweaver.core.retry import FallbackOptions, RetryOptions

PROVIDER_ENV_VARS = (
    "AI_PROVIDER",
    "IMAGE_PROVIDER",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "OPENAI_API_KEY",
    "DALL_E_API_KEY",
    "ANTHROPIC_API_KEY",
    "STABILITY_AI_API_KEY",
    "STABLE_DIFFUSION_API_KEY",
)

# No sleeping between attempts in tests
FAST_RETRY = RetryOptions(max_retries=3, initial_delay=0, max_delay=0)
FAST_FALLBACK = FallbackOptions(initial_delay=0, max_delay=0, timeout=5)

STORY_TEXT = """Mia woke up to a strange humming sound coming from the garden outside her window.

She ran outside and discovered a tiny silver rocket sitting right in the middle of the flower bed.

Mia climbed into the rocket and pressed the big glowing button that blinked green and gold.

The rocket zoomed up past the clouds, and Mia saw the Moon getting bigger and brighter ahead.

On the Moon, Mia met a friendly alien named Zib who was looking for his lost star map.

Together they searched the craters until Mia found the map tucked under a sparkling moon rock.

Back home, Mia snuggled into her warm bed and smiled, dreaming of her next adventure in space."""


class FakeTextProvider(TextProvider):
    """Text provider that records requests and returns canned text."""

    def __init__(
        self,
        name: str = "fake-text",
        available: bool = True,
        text: str = STORY_TEXT,
        error: Optional[Exception] = None,
        supports_image_analysis: bool = False,
        description: str = "A child with curly brown hair and a big smile",
    ):
        self.name = name
        self.available = available
        self.text = text
        self.error = error
        self.supports_image_analysis = supports_image_analysis
        self.description = description
        self.requests = []
        self.analyzed = []

    def is_available(self) -> bool:
        return self.available

    async def generate_text(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.text

    async def analyze_image(self, image, prompt=None):
        self.analyzed.append((image, prompt))
        if self.error:
            raise self.error
        return self.description


class FakeImageProvider(ImageProvider):
    """Image provider that fails on chosen call numbers (1-based)."""

    def __init__(
        self,
        name: str = "fake-image",
        available: bool = True,
        fail_on: tuple = (),
        error: Optional[Exception] = None,
    ):
        self.name = name
        self.available = available
        self.fail_on = set(fail_on)
        self.error = error
        self.requests = []

    def is_available(self) -> bool:
        return self.available

    async def generate_images(self, request):
        self.requests.append(request)
        call_number = len(self.requests)
        if self.error:
            raise self.error
        if call_number in self.fail_on:
            raise TransientError(f"image {call_number} failed", provider=self.name)
        return [f"https://images.example.com/{self.name}/{call_number}.png"]


def make_registry(text_providers=(), image_providers=()) -> ProviderRegistry:
    """Registry whose factories hand back the given fake instances."""
    return ProviderRegistry(
        text_factories={p.name: (lambda p=p: p) for p in text_providers},
        image_factories={p.name: (lambda p=p: p) for p in image_providers},
    )


def make_manager(text_providers=(), image_providers=()) -> ProviderManager:
    """Manager over fakes, configured in the order given."""
    return ProviderManager(
        text_providers=",".join(p.name for p in text_providers),
        image_providers=",".join(p.name for p in image_providers),
        registry=make_registry(text_providers, image_providers),
        fallback_options=FAST_FALLBACK,
    )


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch):
    """Tests never see real credentials or provider settings."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def story_text():
    return STORY_TEXT


@pytest.fixture
def text_provider():
    return FakeTextProvider(name="primary-text")


@pytest.fixture
def image_provider():
    return FakeImageProvider(name="primary-image")


@pytest.fixture
def manager(text_provider, image_provider):
    return make_manager([text_provider], [image_provider])
