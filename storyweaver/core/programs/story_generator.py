"""
Plain (unillustrated) story generation.

Single-child and multi-child stories go to the text providers with the
enhanced story prompt. A custom_prompt on the request is sent as-is.
"""

import logging
import re
from typing import Optional

from storyweaver.config import STORY_CONSTANTS
from ..modules.story_prompt_builder import (
    EnhancedStoryRequest,
    build_enhanced_story_prompt,
    determine_age_group,
)
from ..provider_manager import ProviderManager
from ..types import TextGenerationRequest

logger = logging.getLogger(__name__)

_SENTENCE_END = re.compile(r"[.!?]")
_MARKDOWN_MARKS = re.compile(r"[#*]")


async def generate_story(
    provider_manager: ProviderManager,
    request: TextGenerationRequest,
    child_age: Optional[int] = None,
) -> str:
    """
    Generate a story's text.

    Args:
        provider_manager: Shared manager for text providers
        request: Single-child or multi-child story parameters
        child_age: Reader age in years; selects length and vocabulary

    Returns:
        The story text
    """
    if request.custom_prompt:
        return await provider_manager.generate_text(request)

    prompt = build_enhanced_story_prompt(EnhancedStoryRequest(
        child_name=request.child_name or "",
        adjectives=request.adjectives,
        theme=request.theme,
        moral=request.moral,
        age_group=determine_age_group(child_age),
        children=request.children,
    ))

    logger.info(
        f"Generating {'multi-child' if request.is_multi_child else 'single-child'} "
        f"{request.theme} story ({len(prompt)} char prompt)"
    )

    return await provider_manager.generate_text(TextGenerationRequest(
        theme=request.theme,
        child_name=request.child_name,
        adjectives=request.adjectives,
        children=request.children,
        moral=request.moral,
        template_id=request.template_id,
        custom_prompt=prompt,
    ))


def generate_story_title(content: str, child_name: str, theme: str) -> str:
    """
    Title for a generated story.

    Uses the story's first sentence (without its closing punctuation) when
    it is shorter than 60 characters, otherwise "<name>'s <theme> Adventure".
    """
    first_sentence = _SENTENCE_END.split(content or "", maxsplit=1)[0]
    first_sentence = _MARKDOWN_MARKS.sub("", first_sentence).strip()

    if first_sentence and len(first_sentence) < STORY_CONSTANTS["title_max_length"]:
        return first_sentence
    return f"{child_name}'s {theme} Adventure"
