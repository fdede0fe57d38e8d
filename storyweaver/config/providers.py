"""
Provider configuration for the illustrated book pipeline.

Provider order comes from two comma-separated environment variables:
- AI_PROVIDER: text providers, e.g. "gemini,openai,anthropic"
- IMAGE_PROVIDER: image providers, e.g. "dalle,gemini-image"

Both are read when a ProviderManager is constructed. Credentials are read
by each provider adapter, so availability always reflects the current
environment.
"""

import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Defaults used when a list is empty or names nothing we know
DEFAULT_TEXT_PROVIDER = "gemini"
DEFAULT_IMAGE_PROVIDER = "dalle"

# Timeout for a single LLM call (seconds)
LLM_TIMEOUT = 60

PROVIDER_CONSTANTS = {
    "llm_timeout": LLM_TIMEOUT,
    "max_tokens": 2000,
    "temperature": 0.8,
    "analysis_max_tokens": 500,
    "stability_timeout": 120,
}

# Models are tried in order; later entries are used when earlier ones are
# not found for the account.
TEXT_MODELS = {
    "gemini": ["gemini/gemini-2.5-flash", "gemini/gemini-2.5-pro"],
    "openai": ["openai/gpt-4o", "openai/gpt-4o-mini"],
    "anthropic": [
        "anthropic/claude-sonnet-4-20250514",
        "anthropic/claude-3-5-haiku-20241022",
    ],
}

ANALYSIS_MODELS = {
    "gemini": "gemini-2.5-flash",
    "openai": "gpt-4o",
}

IMAGE_MODELS = {
    "dalle": ["dall-e-3", "dall-e-2"],
    "gemini-image": "gemini-2.5-flash-image",
    "stable-diffusion": "stable-diffusion-xl-1024-v1-0",
}

STABILITY_API_BASE = "https://api.stability.ai/v1/generation"

SYSTEM_PROMPT = (
    "You are a creative children's story writer. Write engaging, age-appropriate "
    "bedtime stories that are wholesome, educational, and kid-safe."
)

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert at analyzing images of people and describing them in detail "
    "for the purpose of creating consistent character illustrations."
)

DEFAULT_ANALYSIS_PROMPT = (
    "Describe the child in this image. Focus on physical appearance: hair color, "
    "hair style, eye color, skin tone, and any distinctive features. Also mention the "
    "clothing and expression. Keep it concise but descriptive enough to recreate a "
    "similar character."
)


def get_api_key(*names: str) -> Optional[str]:
    """Return the first non-empty environment variable among names."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def get_text_provider_setting() -> Optional[str]:
    """Raw AI_PROVIDER value (comma-separated text provider types)."""
    return os.getenv("AI_PROVIDER")


def get_image_provider_setting() -> Optional[str]:
    """Raw IMAGE_PROVIDER value (comma-separated image provider types)."""
    return os.getenv("IMAGE_PROVIDER")


def parse_provider_list(value: Optional[str], known: set[str], default: str) -> list[str]:
    """
    Parse a comma-separated provider list.

    Entries are trimmed and lowercased, unknown entries are dropped, and
    an empty result becomes [default]. Order and duplicates-removal follow
    first appearance.
    """
    if not value:
        return [default]

    types: list[str] = []
    for item in value.split(","):
        name = item.strip().lower()
        if name in known and name not in types:
            types.append(name)

    return types or [default]
