"""Anthropic Claude adapter (story text only)."""

from .litellm_provider import LiteLLMTextProvider


class AnthropicProvider(LiteLLMTextProvider):
    """Claude story text through dspy.LM. No image analysis."""

    name = "anthropic"
    api_key_names = ("ANTHROPIC_API_KEY",)
