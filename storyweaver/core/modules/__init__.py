# Story prompts
from .story_prompt_builder import (
    EnhancedStoryRequest,
    build_basic_story_prompt,
    build_enhanced_story_prompt,
    build_illustrated_story_prompt,
    determine_age_group,
    determine_emotional_arc,
)
from .story_templates import StoryTemplate, get_template_by_id, get_templates_for_theme

# Characters and scenes
from .character_tier import build_appearance_description, determine_character_tier
from .scene_extractor import KeyMomentExtractor, RegexKeyMomentExtractor, extract_scenes_from_story

# Illustration prompts
from .illustration_styles import determine_mood_from_scene, select_art_style
from .illustration_prompt_builder import build_enhanced_illustration_prompt

__all__ = [
    # Story prompts
    "EnhancedStoryRequest",
    "build_basic_story_prompt",
    "build_enhanced_story_prompt",
    "build_illustrated_story_prompt",
    "determine_age_group",
    "determine_emotional_arc",
    "StoryTemplate",
    "get_template_by_id",
    "get_templates_for_theme",
    # Characters and scenes
    "build_appearance_description",
    "determine_character_tier",
    "KeyMomentExtractor",
    "RegexKeyMomentExtractor",
    "extract_scenes_from_story",
    # Illustration prompts
    "determine_mood_from_scene",
    "select_art_style",
    "build_enhanced_illustration_prompt",
]
