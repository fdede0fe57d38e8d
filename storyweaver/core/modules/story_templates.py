"""
Predefined story templates.

A template adds a structure line and extra writing direction to the basic
story prompt. Templates are looked up by id; unknown ids are ignored by
the prompt builders.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class TemplateCategory(str, Enum):
    ADVENTURE = "adventure"
    BEDTIME = "bedtime"
    EDUCATIONAL = "educational"
    FANTASY = "fantasy"
    FRIENDSHIP = "friendship"
    GROWTH = "growth"


@dataclass(frozen=True)
class StoryTemplate:
    """A reusable story shape offered to the person creating a story."""

    id: str
    name: str
    description: str
    category: TemplateCategory
    structure: str  # Beat sequence, e.g. "Launch → Journey → Return"
    prompt_enhancement: str  # Extra direction appended to the story prompt
    suggested_themes: tuple[str, ...]
    age_range: str

    def to_prompt_section(self) -> str:
        return (
            f"Story Template: {self.name}\n{self.prompt_enhancement}\n\n"
            f"Story Structure: {self.structure}"
        )


STORY_TEMPLATES: tuple[StoryTemplate, ...] = (
    StoryTemplate(
        id="classic-adventure",
        name="Classic Adventure",
        description="A hero's journey with challenges and triumphs",
        category=TemplateCategory.ADVENTURE,
        structure="Introduction → Challenge → Journey → Resolution → Lesson",
        prompt_enhancement=(
            "Create an adventure story where the child embarks on a journey, faces challenges, "
            "and learns valuable lessons along the way. Include exciting moments and a "
            "satisfying conclusion."
        ),
        suggested_themes=("Adventure", "Courage", "Discovery", "Superhero"),
        age_range="4-10",
    ),
    StoryTemplate(
        id="bedtime-story",
        name="Bedtime Story",
        description="Calm and soothing story perfect for bedtime",
        category=TemplateCategory.BEDTIME,
        structure="Peaceful beginning → Gentle adventure → Cozy resolution",
        prompt_enhancement=(
            "Create a calming bedtime story with a peaceful, dreamy atmosphere. Use gentle "
            "language, soft imagery, and a soothing conclusion that helps the child feel safe "
            "and ready for sleep."
        ),
        suggested_themes=("Nature", "Magic", "Animals", "Fantasy"),
        age_range="2-8",
    ),
    StoryTemplate(
        id="friendship-tale",
        name="Friendship Tale",
        description="Story about making friends and working together",
        category=TemplateCategory.FRIENDSHIP,
        structure="Meeting → Bonding → Challenge together → Success together",
        prompt_enhancement=(
            "Create a heartwarming story about friendship, cooperation, and helping others. "
            "Show how working together makes everything better and how friends support each other."
        ),
        suggested_themes=("Friendship", "Kindness", "Animals", "Learning"),
        age_range="3-9",
    ),
    StoryTemplate(
        id="magical-discovery",
        name="Magical Discovery",
        description="Discovering magic in everyday life",
        category=TemplateCategory.FANTASY,
        structure="Ordinary day → Magical discovery → Wonder → Appreciation",
        prompt_enhancement=(
            "Create a magical story where the child discovers wonder and magic in everyday "
            "moments. Show how imagination and curiosity can reveal extraordinary things in "
            "ordinary places."
        ),
        suggested_themes=("Magic", "Fantasy", "Discovery", "Nature"),
        age_range="4-10",
    ),
    StoryTemplate(
        id="learning-adventure",
        name="Learning Adventure",
        description="Educational story that teaches while entertaining",
        category=TemplateCategory.EDUCATIONAL,
        structure="Question → Exploration → Discovery → Understanding",
        prompt_enhancement=(
            "Create an educational story that teaches important concepts or values in an "
            "engaging, fun way. Make learning feel like an adventure and discovery."
        ),
        suggested_themes=("Learning", "Discovery", "Nature", "Science"),
        age_range="5-12",
    ),
    StoryTemplate(
        id="hero-journey",
        name="Hero's Journey",
        description="Child becomes the hero and saves the day",
        category=TemplateCategory.ADVENTURE,
        structure="Call to adventure → Tests → Transformation → Victory",
        prompt_enhancement=(
            "Create an empowering story where the child is the hero who faces challenges, grows "
            "stronger, and saves the day through courage, kindness, and determination."
        ),
        suggested_themes=("Superhero", "Courage", "Adventure", "Fantasy"),
        age_range="5-12",
    ),
    StoryTemplate(
        id="animal-companion",
        name="Animal Companion",
        description="Story featuring a special animal friend",
        category=TemplateCategory.FRIENDSHIP,
        structure="Meeting animal → Bonding → Adventure together → Friendship",
        prompt_enhancement=(
            "Create a delightful story featuring a special animal companion. Show the bond "
            "between the child and their animal friend, their adventures together, and the joy "
            "of friendship."
        ),
        suggested_themes=("Animals", "Friendship", "Nature", "Adventure"),
        age_range="3-9",
    ),
    StoryTemplate(
        id="growth-story",
        name="Growth Story",
        description="Story about personal growth and overcoming fears",
        category=TemplateCategory.GROWTH,
        structure="Fear/challenge → Attempt → Growth → Confidence",
        prompt_enhancement=(
            "Create an inspiring story about personal growth, overcoming fears, and building "
            "confidence. Show how the child faces something difficult and grows stronger "
            "through the experience."
        ),
        suggested_themes=("Courage", "Learning", "Discovery", "Kindness"),
        age_range="4-10",
    ),
    StoryTemplate(
        id="princess-prince",
        name="Royal Tale",
        description="Magical royal adventure with princesses and princes",
        category=TemplateCategory.FANTASY,
        structure="Royal setting → Quest → Challenges → Triumph",
        prompt_enhancement=(
            "Create a magical royal story with castles, kingdoms, and noble adventures. Include "
            "themes of kindness, leadership, and doing what's right."
        ),
        suggested_themes=("Princess", "Fantasy", "Magic", "Courage"),
        age_range="4-10",
    ),
    StoryTemplate(
        id="space-adventure",
        name="Space Adventure",
        description="Journey through space and discover new worlds",
        category=TemplateCategory.ADVENTURE,
        structure="Launch → Space journey → Discovery → Return",
        prompt_enhancement=(
            "Create an exciting space adventure story with planets, stars, and cosmic "
            "discoveries. Include wonder, exploration, and the beauty of the universe."
        ),
        suggested_themes=("Space", "Adventure", "Discovery", "Science"),
        age_range="5-12",
    ),
)

_TEMPLATES_BY_ID = {template.id: template for template in STORY_TEMPLATES}


def get_template_by_id(template_id: Optional[str]) -> Optional[StoryTemplate]:
    """Look up a template; None for unknown or missing ids."""
    if not template_id:
        return None
    return _TEMPLATES_BY_ID.get(template_id)


def get_templates_by_category(category: Union[TemplateCategory, str]) -> list[StoryTemplate]:
    category = TemplateCategory(category)
    return [t for t in STORY_TEMPLATES if t.category == category]


def get_templates_for_theme(theme: str) -> list[StoryTemplate]:
    """Templates whose suggested themes include theme (case-insensitive)."""
    wanted = theme.lower()
    return [
        t for t in STORY_TEMPLATES
        if any(suggested.lower() == wanted for suggested in t.suggested_themes)
    ]


def get_template_categories() -> list[TemplateCategory]:
    """Categories in first-appearance order."""
    categories: list[TemplateCategory] = []
    for template in STORY_TEMPLATES:
        if template.category not in categories:
            categories.append(template.category)
    return categories
