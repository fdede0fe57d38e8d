"""
Configuration module for the illustrated book pipeline.

Re-exports provider, story and retry configuration.
"""

from .providers import (
    ANALYSIS_MODELS,
    ANALYSIS_SYSTEM_PROMPT,
    DEFAULT_ANALYSIS_PROMPT,
    DEFAULT_IMAGE_PROVIDER,
    DEFAULT_TEXT_PROVIDER,
    IMAGE_MODELS,
    LLM_TIMEOUT,
    PROVIDER_CONSTANTS,
    STABILITY_API_BASE,
    SYSTEM_PROMPT,
    TEXT_MODELS,
    get_api_key,
    get_image_provider_setting,
    get_text_provider_setting,
    parse_provider_list,
)
from .story import RETRY_CONSTANTS, STORY_CONSTANTS

__all__ = [
    # Providers
    "ANALYSIS_MODELS",
    "ANALYSIS_SYSTEM_PROMPT",
    "DEFAULT_ANALYSIS_PROMPT",
    "DEFAULT_IMAGE_PROVIDER",
    "DEFAULT_TEXT_PROVIDER",
    "IMAGE_MODELS",
    "LLM_TIMEOUT",
    "PROVIDER_CONSTANTS",
    "STABILITY_API_BASE",
    "SYSTEM_PROMPT",
    "TEXT_MODELS",
    "get_api_key",
    "get_image_provider_setting",
    "get_text_provider_setting",
    "parse_provider_list",
    # Story
    "STORY_CONSTANTS",
    "RETRY_CONSTANTS",
]
