"""
Character tier resolution and appearance descriptions.

A description derived from the child's photo outranks manually chosen
appearance attributes, which outrank environment-only illustration.
"""

from typing import Mapping, Optional

from ..types import AppearanceInput, ChildAppearance, CharacterTier

UNSET = "none"

SKIN_TONE_DESCRIPTIONS = {
    "light": "fair skin tone",
    "medium-light": "light-medium skin tone",
    "medium": "medium skin tone",
    "medium-dark": "medium-dark skin tone",
    "dark": "rich dark skin tone",
}

FRIENDLINESS_CLAUSE = "with a friendly, expressive face and bright, curious eyes"


def _as_appearance(appearance: Optional[AppearanceInput]) -> Optional[ChildAppearance]:
    if appearance is None or isinstance(appearance, ChildAppearance):
        return appearance
    if isinstance(appearance, Mapping):
        return ChildAppearance.from_dict(appearance)
    raise TypeError(f"Unsupported appearance type: {type(appearance).__name__}")


def _is_set(value: Optional[str]) -> bool:
    return bool(value) and value != UNSET


def determine_character_tier(
    ai_description: Optional[str] = None,
    appearance: Optional[AppearanceInput] = None,
) -> CharacterTier:
    """Map the available child identity data to a rendering tier."""
    if ai_description and ai_description.strip():
        return CharacterTier.PHOTO

    resolved = _as_appearance(appearance)
    if resolved and any(
        _is_set(value)
        for value in (resolved.skin_tone, resolved.hair_color, resolved.hair_style)
    ):
        return CharacterTier.APPEARANCE

    return CharacterTier.NONE


def build_appearance_description(
    appearance: AppearanceInput,
    age: Optional[int] = None,
) -> str:
    """
    Build a character sentence from manually chosen appearance settings.

    Example: "school-age child, with medium skin tone, curly brown hair,
    with a friendly, expressive face and bright, curious eyes"
    """
    resolved = _as_appearance(appearance) or ChildAppearance()

    if not age:
        age_descriptor = "young"
    elif age < 5:
        age_descriptor = "young"
    elif age < 8:
        age_descriptor = "school-age"
    else:
        age_descriptor = "older"

    parts = [f"{age_descriptor} child"]

    if _is_set(resolved.skin_tone):
        skin = SKIN_TONE_DESCRIPTIONS.get(resolved.skin_tone)
        if skin:
            parts.append(f"with {skin}")

    hair = [value for value in (resolved.hair_style, resolved.hair_color) if _is_set(value)]
    if hair:
        parts.append(f"{' '.join(hair)} hair")

    parts.append(FRIENDLINESS_CLAUSE)
    return ", ".join(parts)
