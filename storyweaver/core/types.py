"""
Centralized domain types for the illustrated book pipeline.

All dataclasses that are used across multiple modules are defined here
to make data flow explicit and avoid circular imports.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union


# =============================================================================
# Enums
# =============================================================================


class CharacterTier(str, Enum):
    """Fidelity at which the child is rendered, highest first."""

    PHOTO = "photo"
    APPEARANCE = "appearance"
    NONE = "none"


class ArtStyle(str, Enum):
    """Art styles available for a story's illustrations."""

    CLASSIC_PICTURE_BOOK = "classic-picture-book"
    WATERCOLOR = "watercolor"
    MODERN_FLAT = "modern-flat"
    WHIMSICAL = "whimsical"


class Mood(str, Enum):
    """Emotional tone of a single scene."""

    CALM = "calm"
    EXCITING = "exciting"
    MAGICAL = "magical"
    ADVENTUROUS = "adventurous"
    COZY = "cozy"


class AgeGroup(str, Enum):
    """Reader age bands: 2-3, 4-5, 6-7, 8-9."""

    TODDLER = "toddler"
    PRESCHOOL = "preschool"
    EARLY_ELEMENTARY = "early-elementary"
    ELEMENTARY = "elementary"


class ImageSize(str, Enum):
    """Image sizes accepted by the image providers."""

    SMALL = "256x256"
    MEDIUM = "512x512"
    SQUARE = "1024x1024"
    PORTRAIT = "1024x1792"
    LANDSCAPE = "1792x1024"


# =============================================================================
# Style Types
# =============================================================================


@dataclass(frozen=True)
class ArtStyleGuide:
    """Static description of one art style."""

    description: str
    techniques: str
    characteristics: tuple[str, ...]
    reference_artists: tuple[str, ...]


@dataclass(frozen=True)
class ColorPalette:
    """Static color and lighting direction for one story theme."""

    primary: str
    secondary: str
    accent: str
    background: str
    lighting: str
    mood: str


# =============================================================================
# Child Identity
# =============================================================================


@dataclass
class ChildAppearance:
    """Manually chosen appearance attributes. "none" means not chosen."""

    skin_tone: Optional[str] = None
    hair_color: Optional[str] = None
    hair_style: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChildAppearance":
        """Create from a mapping with camelCase or snake_case keys."""
        return cls(
            skin_tone=data.get("skin_tone", data.get("skinTone")),
            hair_color=data.get("hair_color", data.get("hairColor")),
            hair_style=data.get("hair_style", data.get("hairStyle")),
        )


AppearanceInput = Union[ChildAppearance, Mapping[str, Any]]


@dataclass
class StoryChild:
    """One child in a multi-child story."""

    name: str
    adjectives: list[str] = field(default_factory=list)


# =============================================================================
# Provider Requests
# =============================================================================


@dataclass
class TextGenerationRequest:
    """
    Request for story text.

    Single-child requests set child_name and adjectives; multi-child
    requests set children. custom_prompt, when present, is sent to the
    provider verbatim.
    """

    theme: str
    child_name: Optional[str] = None
    adjectives: list[str] = field(default_factory=list)
    children: list[StoryChild] = field(default_factory=list)
    moral: Optional[str] = None
    template_id: Optional[str] = None
    custom_prompt: Optional[str] = None

    def __post_init__(self):
        if self.children and (self.child_name or self.adjectives):
            raise ValueError("Use either child_name/adjectives or children, not both")
        if not self.children and not self.child_name and not self.custom_prompt:
            raise ValueError("A child_name or children list is required")

    @property
    def is_multi_child(self) -> bool:
        return len(self.children) > 0


@dataclass
class ImageGenerationRequest:
    """Request for one or more images from a text prompt."""

    prompt: str
    count: int = 1
    size: ImageSize = ImageSize.SQUARE
    style: Optional[str] = None


@dataclass(frozen=True)
class ProviderDescriptor:
    """Identity, capabilities and current availability of a provider."""

    name: str
    supports_text: bool = False
    supports_image: bool = False
    supports_image_analysis: bool = False
    available: bool = False


# =============================================================================
# Illustration Types
# =============================================================================


@dataclass
class IllustrationRequest:
    """Inputs for building one illustration prompt."""

    scene_description: str
    child_name: str
    theme: str
    child_description: Optional[str] = None
    mood: Mood = Mood.EXCITING
    art_style: ArtStyle = ArtStyle.CLASSIC_PICTURE_BOOK
    include_character: bool = True
    profile_image_url: Optional[str] = None
    scene_number: Optional[int] = None
    total_scenes: Optional[int] = None


@dataclass
class Scene:
    """One narrative segment destined for exactly one illustration."""

    scene_number: int
    text: str
    key_moment: str
    illustration_prompt: str
    art_style: ArtStyle


@dataclass
class BookPage:
    """
    A page of the finished book.

    An empty illustration_url marks a page whose illustration failed.
    """

    page_number: int
    text: str
    illustration_url: str = ""

    @property
    def has_illustration(self) -> bool:
        return self.illustration_url != ""

    def to_dict(self) -> dict:
        return {
            "pageNumber": self.page_number,
            "text": self.text,
            "illustration_url": self.illustration_url,
        }


@dataclass
class IllustratedBookParams:
    """Inputs for generating an illustrated book."""

    child_name: str
    theme: str
    adjectives: list[str] = field(default_factory=list)
    moral: Optional[str] = None
    template_id: Optional[str] = None
    ai_description: Optional[str] = None
    appearance: Optional[AppearanceInput] = None
    child_age: Optional[int] = None
    profile_image_url: Optional[str] = None


@dataclass
class IllustratedBookResult:
    """Story text, delivered pages, and the scene plan behind them."""

    content: str
    book_pages: list[BookPage]
    scenes: list[Scene]
    character_tier: CharacterTier = CharacterTier.NONE

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "bookPages": [page.to_dict() for page in self.book_pages],
            "scenes": [
                {
                    "sceneNumber": scene.scene_number,
                    "text": scene.text,
                    "illustrationPrompt": scene.illustration_prompt,
                }
                for scene in self.scenes
            ],
        }
