"""
Illustration prompt builder.

Builds one bounded-length image prompt per scene from the scene's key
moment, the story's art style, the theme palette, the scene mood and the
character tier. Three prompt shapes exist:

- character with description (photo or appearance tier)
- character without description (generic friendly child)
- environment only (no people, child's name and pronouns removed)

All shapes end with the same audience clause and safety exclusions.
"""

import logging
import re

from storyweaver.config import STORY_CONSTANTS
from ..types import IllustrationRequest
from .illustration_styles import get_color_palette, get_style_guide

logger = logging.getLogger(__name__)

MAX_PROMPT_LENGTH = STORY_CONSTANTS["max_prompt_length"]
MIN_SCENE_LENGTH = STORY_CONSTANTS["min_scene_description_length"]
TRUNCATION_BUFFER = STORY_CONSTANTS["truncation_buffer"]

AUDIENCE_CLAUSE = "Professional quality, single focused {focus}, ages 3-8, never scary."

CHARACTER_EXCLUSIONS = (
    "NO: text, words, letters, speech bubbles, multiple scenes, cluttered backgrounds, "
    "photorealism, dark elements."
)

ENVIRONMENT_EXCLUSIONS = (
    "NO: people, characters, animals with human features, text, words, letters, "
    "speech bubbles, multiple scenes, cluttered backgrounds, photorealism, dark elements."
)

CHARACTER_COMPOSITION = (
    "Composition: {name} in lower third or center (rule of thirds). Simple background with "
    "2-4 elements. Character prominent (30% of image). Clear depth with foreground/background layers."
)

ENVIRONMENT_COMPOSITION = (
    "Composition: Establish a clear focal point in the environment. Simple, uncluttered scene "
    "with 2-4 main elements. Create depth with foreground, middle ground, and background layers. "
    "Use leading lines and natural framing."
)

_DISALLOWED_CHARS = re.compile(r"[^\w\s.,!?-]")
_WHITESPACE = re.compile(r"\s+")
_PRONOUNS = re.compile(r"\b(he|she|they|him|her|them)\b", re.IGNORECASE)
_PERSON_WORDS = re.compile(r"character|person|child", re.IGNORECASE)


def clean_scene_text(text: str) -> str:
    """Strip characters image models tend to misread and collapse whitespace."""
    return _WHITESPACE.sub(" ", _DISALLOWED_CHARS.sub("", text)).strip()


def _style_line(request: IllustrationRequest) -> str:
    guide = get_style_guide(request.art_style)
    traits = ", ".join(guide.characteristics[:3])
    return (
        f"Style: {guide.description}. {guide.techniques}. {traits}. "
        f"Inspired by {guide.reference_artists[0]} style."
    )


def _colors_line(request: IllustrationRequest) -> str:
    palette = get_color_palette(request.theme)
    return (
        f"Colors ({request.theme}): {palette.primary}, {palette.secondary}. "
        f"{palette.lighting}. {palette.mood}."
    )


def _has_scene_context(request: IllustrationRequest) -> bool:
    return bool(request.scene_number and request.total_scenes)


def _character_prompt(request: IllustrationRequest, scene: str) -> str:
    name = request.child_name
    mood = request.mood.value
    sections = [f"Children's book illustration: {scene}"]

    if request.child_description:
        if request.profile_image_url:
            consistency = (
                "IMPORTANT: Maintain exact same character appearance as reference "
                "throughout all illustrations."
            )
        else:
            consistency = "IMPORTANT: Keep character appearance consistent with this description."
        sections.append(
            f"Character: {name}, {request.child_description}. Make {name} the clear focal "
            f"point with expressive {mood} emotion. {consistency}"
        )
        if request.profile_image_url:
            sections.append(
                "Reference: Character appearance based on provided profile image for visual consistency."
            )
    else:
        sections.append(
            f"Character: {name}, friendly child. Make {name} the clear focal point with "
            f"expressive {mood} emotion."
        )

    sections.append(_style_line(request))
    sections.append(_colors_line(request))
    sections.append(CHARACTER_COMPOSITION.format(name=name))

    mood_line = f"Mood: {mood.capitalize()}, warm, safe, perfect for bedtime."
    if request.child_description and _has_scene_context(request):
        mood_line += (
            f"\n\nStory Continuity: This is scene {request.scene_number} of {request.total_scenes}. "
            "Use EXACTLY the same art style, line weight, color palette, and rendering technique "
            "as all other scenes in this story. The visual style must be indistinguishable "
            "between illustrations - same brushwork, same level of detail, same artistic "
            "choices throughout."
        )
    sections.append(mood_line)

    sections.append(AUDIENCE_CLAUSE.format(focus="moment"))
    sections.append(CHARACTER_EXCLUSIONS)
    return "\n\n".join(sections)


def _environment_prompt(request: IllustrationRequest, scene: str) -> str:
    if request.child_name:
        scene = re.sub(re.escape(request.child_name), "the scene", scene, flags=re.IGNORECASE)
    scene = _PRONOUNS.sub("it", scene)
    scene = _PERSON_WORDS.sub("element", scene)

    sections = [
        f"Children's book illustration: {scene}",
        f"Focus: Beautiful {request.theme.lower()} environment and setting. NO characters or "
        "people. Focus entirely on the landscape, scenery, and atmosphere.",
        _style_line(request),
        _colors_line(request),
        ENVIRONMENT_COMPOSITION,
    ]

    mood_line = (
        f"Mood: {request.mood.value.capitalize()}, atmospheric, immersive, inviting. "
        "Create a sense of wonder through the environment alone."
    )
    if _has_scene_context(request):
        mood_line += (
            f"\n\nStory Continuity: This is scene {request.scene_number} of {request.total_scenes}. "
            "Maintain EXACTLY the same art style, color treatment, lighting approach, and "
            "atmospheric rendering as all other scenes. The environment/landscape style must be "
            "visually cohesive with the entire story - same artistic technique, same brushwork "
            "quality, same level of detail throughout."
        )
    sections.append(mood_line)

    sections.append(AUDIENCE_CLAUSE.format(focus="scene"))
    sections.append(ENVIRONMENT_EXCLUSIONS)
    return "\n\n".join(sections)


def _compose(request: IllustrationRequest, scene: str) -> str:
    if request.include_character:
        return _character_prompt(request, scene)
    return _environment_prompt(request, scene)


def build_enhanced_illustration_prompt(request: IllustrationRequest) -> str:
    """
    Build the image prompt for one scene.

    If the prompt exceeds MAX_PROMPT_LENGTH the scene description is cut by
    the excess plus a buffer and the prompt rebuilt, never below
    MIN_SCENE_LENGTH characters. When the scene cannot get any shorter the
    over-length prompt is returned as-is.
    """
    scene = clean_scene_text(request.scene_description)
    prompt = _compose(request, scene)

    while len(prompt) > MAX_PROMPT_LENGTH and len(scene) > MIN_SCENE_LENGTH:
        excess = len(prompt) - MAX_PROMPT_LENGTH
        target = max(MIN_SCENE_LENGTH, len(scene) - excess - TRUNCATION_BUFFER)
        if target >= len(scene):
            break

        logger.warning(
            f"Illustration prompt too long ({len(prompt)} chars), truncating scene to {target} chars"
        )
        scene = scene[:target].strip()
        prompt = _compose(request, scene)

    return prompt
