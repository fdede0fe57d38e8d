"""
Scene extraction for illustrated books.

Splits generated story text into 5-7 scenes and attaches an illustration
prompt to each. The art style is chosen once per story so every scene is
drawn the same way; only the emotional mood varies between scenes.

Splitting strategy, in order:
1. Blank-line paragraphs longer than 50 characters (max 7)
2. Single lines longer than 50 characters (max 7)
3. Exactly 5 equal word chunks (may cut mid-sentence)
"""

import logging
import re
from typing import Optional, Protocol, TypedDict, Union

from storyweaver.config import STORY_CONSTANTS
from ..types import ArtStyle, IllustrationRequest, Mood, Scene
from .illustration_prompt_builder import build_enhanced_illustration_prompt, clean_scene_text
from .illustration_styles import determine_mood_from_scene, select_art_style

logger = logging.getLogger(__name__)

MIN_SCENES = STORY_CONSTANTS["min_scenes"]
MAX_SCENES = STORY_CONSTANTS["max_scenes"]
MIN_SECTION_LENGTH = STORY_CONSTANTS["min_section_length"]
MIN_SENTENCE_LENGTH = STORY_CONSTANTS["min_sentence_length"]
FALLBACK_CHARS = STORY_CONSTANTS["key_moment_fallback_chars"]

# Style is picked with a neutral mood so it cannot drift between scenes
STORY_STYLE_MOOD = Mood.EXCITING

ACTION_VERBS = (
    "discovered", "found", "saw", "met", "touched", "held", "climbed", "jumped",
    "ran", "flew", "opened", "closed", "picked", "grabbed", "hugged", "smiled",
    "laughed", "cried", "looked", "gazed", "pointed", "waved", "danced", "sang",
    "played", "built", "created", "drew", "painted",
)

PROGRESSIVE_PATTERN = re.compile(r"(?:was |were |is |are |started |began )([\w\s]+ing)", re.IGNORECASE)
SENTENCE_SPLIT = re.compile(r"[.!?]")


class StyleOverrides(TypedDict, total=False):
    """Story-wide overrides for scene planning."""

    art_style: Union[ArtStyle, str]
    mood: Union[Mood, str]
    profile_image_url: str


class KeyMomentExtractor(Protocol):
    """Strategy that picks the single illustratable moment of a scene."""

    def extract(self, text: str, child_name: str) -> str:
        ...


class RegexKeyMomentExtractor:
    """
    Pick the sentence holding the clearest action.

    Looks for a progressive verb ("was running") or the child's name followed
    by a concrete action verb. Falls back to the first sentence longer than
    20 characters, then to the first 200 characters of the text.
    """

    def _action_patterns(self, child_name: str) -> list[re.Pattern]:
        patterns = [PROGRESSIVE_PATTERN]
        if child_name:
            verbs = "|".join(ACTION_VERBS)
            patterns.append(
                re.compile(rf"{re.escape(child_name)}[^.!?]*?({verbs})", re.IGNORECASE)
            )
        return patterns

    def extract(self, text: str, child_name: str) -> str:
        sentences = SENTENCE_SPLIT.split(text)

        for pattern in self._action_patterns(child_name):
            match = pattern.search(text)
            if not match:
                continue
            needle = match.group(0).lower()
            for sentence in sentences:
                if needle in sentence.lower():
                    return sentence.strip()

        for sentence in sentences:
            if len(sentence.strip()) > MIN_SENTENCE_LENGTH:
                return sentence.strip()

        return text[:FALLBACK_CHARS].strip()


_default_extractor = RegexKeyMomentExtractor()


def extract_key_visual_moment(text: str, child_name: str) -> str:
    """Extract the key visual moment using the default regex heuristic."""
    return _default_extractor.extract(text, child_name)


def _long_sections(content: str, separator: str) -> list[str]:
    sections = [s for s in content.split(separator) if len(s.strip()) > MIN_SECTION_LENGTH]
    return sections[:MAX_SCENES]


def _equal_word_chunks(content: str, count: int = MIN_SCENES) -> list[str]:
    words = content.split()
    base, extra = divmod(len(words), count)
    chunks, start = [], 0
    for i in range(count):
        end = start + base + (1 if i < extra else 0)
        chunks.append(" ".join(words[start:end]))
        start = end
    # fewer words than chunks leaves some empty
    return [chunk for chunk in chunks if chunk]


def split_into_sections(content: str) -> list[str]:
    """Split story text into 5-7 sections (see module docstring)."""
    sections = _long_sections(content, "\n\n")
    if len(sections) >= MIN_SCENES:
        return sections

    sections = _long_sections(content, "\n")
    if len(sections) >= MIN_SCENES:
        return sections

    logger.info("Story has too few paragraphs, splitting into equal word chunks")
    return _equal_word_chunks(content)


def extract_scenes_from_story(
    content: str,
    child_name: str,
    theme: str,
    character_description: Optional[str] = None,
    include_character: bool = True,
    style_overrides: Optional[StyleOverrides] = None,
    moment_extractor: Optional[KeyMomentExtractor] = None,
) -> list[Scene]:
    """
    Split a story into illustrated scenes.

    Args:
        content: Full story text from the text provider
        child_name: Hero's name, used for action matching and prompts
        theme: Story theme (selects palette and art style)
        character_description: Photo or appearance description of the child
        include_character: False for environment-only illustrations
        style_overrides: Optional story-wide art_style / mood / profile_image_url
        moment_extractor: Strategy for picking each scene's key moment

    Returns:
        5-7 Scene objects sharing one art style
    """
    if not content or not content.strip():
        raise ValueError("Story content must be a non-empty string")

    overrides = style_overrides or {}
    extractor = moment_extractor or _default_extractor

    if overrides.get("art_style"):
        art_style = ArtStyle(overrides["art_style"])
    else:
        art_style = select_art_style(theme, STORY_STYLE_MOOD)
    fixed_mood = Mood(overrides["mood"]) if overrides.get("mood") else None

    sections = split_into_sections(content)
    total = len(sections)
    scenes = []

    for index, section in enumerate(sections, start=1):
        key_moment = clean_scene_text(extractor.extract(section, child_name))
        mood = fixed_mood or determine_mood_from_scene(section)

        prompt = build_enhanced_illustration_prompt(IllustrationRequest(
            scene_description=key_moment,
            child_name=child_name,
            child_description=character_description,
            theme=theme,
            mood=mood,
            art_style=art_style,
            include_character=include_character,
            profile_image_url=overrides.get("profile_image_url"),
            scene_number=index,
            total_scenes=total,
        ))

        logger.debug(
            f"Scene {index}/{total} - Character: {include_character}, "
            f"Style: {art_style.value}, Prompt: {len(prompt)} chars"
        )

        scenes.append(Scene(
            scene_number=index,
            text=section.strip(),
            key_moment=key_moment,
            illustration_prompt=prompt,
            art_style=art_style,
        ))

    return scenes
