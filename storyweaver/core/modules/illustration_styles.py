"""
Art style and color palette definitions for illustrated books.

One art style is chosen per story and reused for every scene so the
illustrations read as a single book. Color palettes are keyed by story
theme; unknown themes use the Fantasy palette.
"""

import re
from types import MappingProxyType
from typing import Mapping, Union

from ..types import ArtStyle, ArtStyleGuide, ColorPalette, Mood


ART_STYLES: Mapping[ArtStyle, ArtStyleGuide] = MappingProxyType({

    ArtStyle.CLASSIC_PICTURE_BOOK: ArtStyleGuide(
        description="Warm, timeless children's book illustration style",
        techniques="Watercolor and ink, hand-drawn quality, slightly imperfect lines add charm",
        characteristics=(
            "Simple, bold shapes",
            "Clear outlines with varied line weight",
            "Soft color blending",
            "Textured paper feel",
            "Friendly, approachable characters",
            "Balance of detail and simplicity",
        ),
        reference_artists=("Eric Carle", "Oliver Jeffers", "Maurice Sendak"),
    ),

    ArtStyle.WATERCOLOR: ArtStyleGuide(
        description="Soft, dreamy watercolor illustration",
        techniques="Wet-on-wet watercolor, color bleeding, transparent layers",
        characteristics=(
            "Soft edges and gentle transitions",
            "Light, airy feeling",
            "Visible brush strokes",
            "White space integration",
            "Delicate color washes",
            "Atmospheric depth",
        ),
        reference_artists=("Beatrix Potter", "Shirley Hughes"),
    ),

    ArtStyle.MODERN_FLAT: ArtStyleGuide(
        description="Contemporary flat design with bold colors",
        techniques="Digital illustration, geometric shapes, flat colors",
        characteristics=(
            "Minimal shading",
            "Bold, vibrant colors",
            "Geometric simplified forms",
            "Clear composition",
            "Strong contrasts",
            "Playful proportions",
        ),
        reference_artists=("Herve Tullet", "Ellsworth Kelly"),
    ),

    ArtStyle.WHIMSICAL: ArtStyleGuide(
        description="Playful, imaginative illustration with personality",
        techniques="Mixed media feel, expressive lines, creative details",
        characteristics=(
            "Exaggerated features",
            "Playful proportions",
            "Creative textures",
            "Unexpected details",
            "Energetic linework",
            "Personality in every element",
        ),
        reference_artists=("Quentin Blake", "Lane Smith", "Mo Willems"),
    ),
})


THEME_COLOR_PALETTES: Mapping[str, ColorPalette] = MappingProxyType({
    "Space": ColorPalette(
        primary="Deep indigo and cosmic purple",
        secondary="Bright star white and silver",
        accent="Electric blue, cyan, and pink nebula colors",
        background="Dark space with distant galaxies, gradients from black to deep blue",
        lighting="Soft glow from stars and planets, rim lighting on character",
        mood="Sense of wonder and infinite possibility",
    ),
    "Ocean": ColorPalette(
        primary="Turquoise and sea blue",
        secondary="Sandy yellows and coral pinks",
        accent="Bright tropical fish colors, purple sea anemones",
        background="Underwater gradient from light turquoise to deep blue, dappled sunlight",
        lighting="Filtered underwater sunbeams, caustic light patterns",
        mood="Peaceful exploration with pockets of excitement",
    ),
    "Fantasy": ColorPalette(
        primary="Royal purple and soft pink",
        secondary="Sparkle silver and gold accents",
        accent="Rainbow gradients, magical glows",
        background="Enchanted forest or castle with atmospheric mist",
        lighting="Magical sparkles, soft ethereal glow, warm ambient light",
        mood="Magical and full of wonder",
    ),
    "Nature": ColorPalette(
        primary="Forest green and earth brown",
        secondary="Sky blue and cloud white",
        accent="Wildflower colors, autumn leaves, bright berries",
        background="Natural outdoor setting, trees, grass, sky",
        lighting="Warm natural sunlight filtering through leaves, golden hour",
        mood="Peaceful, grounded, alive",
    ),
    "Dinosaurs": ColorPalette(
        primary="Prehistoric greens and earth tones",
        secondary="Volcanic oranges and rocky grays",
        accent="Bright dinosaur patterns, exotic plants",
        background="Prehistoric landscape with volcanoes, ferns, palm trees",
        lighting="Strong prehistoric sun, dramatic shadows",
        mood="Adventurous and slightly wild",
    ),
    "Superhero": ColorPalette(
        primary="Bold primary colors - red, blue, yellow",
        secondary="City grays and steel",
        accent="Energy effects in bright cyan and yellow, action lines",
        background="Stylized cityscape with geometric buildings",
        lighting="Dynamic lighting, strong highlights, heroic backlighting",
        mood="Powerful, energetic, triumphant",
    ),
    "Princess": ColorPalette(
        primary="Soft pinks and royal purples",
        secondary="Pearl white and cream",
        accent="Gold, sparkles, jewel tones",
        background="Castle interior or garden with flowers",
        lighting="Soft, flattering light with sparkly highlights",
        mood="Elegant, magical, regal",
    ),
    "Robots": ColorPalette(
        primary="Metallic silvers and blues",
        secondary="Circuit board greens and tech oranges",
        accent="Glowing screens, LED lights, energy cores",
        background="Futuristic lab or tech city with geometric patterns",
        lighting="Cool LED lighting, screen glows, technical precision",
        mood="Innovative, precise, friendly technology",
    ),
    "Adventure": ColorPalette(
        primary="Earth tones - browns, greens, sand",
        secondary="Sky blue and cloud white",
        accent="Sunrise gold, campfire orange, map colors",
        background="Outdoor adventure setting - mountains, forests, trails",
        lighting="Dynamic outdoor lighting, sun breaking through clouds",
        mood="Exciting, brave, exploratory",
    ),
    "Magic": ColorPalette(
        primary="Deep mystical purple and violet",
        secondary="Starlight silver and moon white",
        accent="Spell effects - sparkles, swirls, magical colors",
        background="Mysterious magical setting with atmospheric effects",
        lighting="Magical glows, mysterious shadows, enchanted ambiance",
        mood="Mysterious, wonderful, transformative",
    ),
    "Friendship": ColorPalette(
        primary="Warm yellows and friendly oranges",
        secondary="Gentle pinks and happy greens",
        accent="Rainbow variety showing diversity",
        background="Cozy, relatable settings - playgrounds, homes, parks",
        lighting="Warm, inviting light that brings people together",
        mood="Warm, joyful, connected",
    ),
    "Learning": ColorPalette(
        primary="Smart blues and knowledge greens",
        secondary="Paper whites and book browns",
        accent="Lightbulb yellow for ideas, colorful learning tools",
        background="Classroom, library, or creative learning space",
        lighting="Clear, bright lighting that enhances focus",
        mood="Curious, inspired, accomplished",
    ),
    "Pirates": ColorPalette(
        primary="Ocean blues and ship wood browns",
        secondary="Sail white and rope tan",
        accent="Gold treasure, pirate flag black, tropical colors",
        background="Ship deck, tropical island, ocean waves",
        lighting="Bright nautical sun, sparkling water reflections",
        mood="Adventurous, playful, treasure-hunting excitement",
    ),
})

DEFAULT_PALETTE_THEME = "Fantasy"

# Checked in this order; first bucket with a keyword hit wins
MOOD_KEYWORDS: tuple[tuple[Mood, re.Pattern], ...] = (
    (Mood.CALM, re.compile(r"sleep|rest|calm|peaceful|gentle|quiet|soft")),
    (Mood.MAGICAL, re.compile(r"magic|spell|fairy|enchant|glow|sparkle|transform")),
    (Mood.EXCITING, re.compile(r"climb|jump|run|fly|race|chase|adventure|explore")),
    (Mood.ADVENTUROUS, re.compile(r"discover|journey|quest|brave|mountain|ocean|forest")),
    (Mood.COZY, re.compile(r"home|hug|friend|warm|comfort|safe|together")),
)


def get_style_guide(style: Union[ArtStyle, str]) -> ArtStyleGuide:
    """Get a style guide by enum or name; unknown names get the classic style."""
    try:
        return ART_STYLES[ArtStyle(style)]
    except ValueError:
        return ART_STYLES[ArtStyle.CLASSIC_PICTURE_BOOK]


def get_color_palette(theme: str) -> ColorPalette:
    """Get the palette for a theme, falling back to Fantasy."""
    return THEME_COLOR_PALETTES.get(theme, THEME_COLOR_PALETTES[DEFAULT_PALETTE_THEME])


def determine_mood_from_scene(scene_text: str) -> Mood:
    """Classify a scene's mood by keyword; defaults to exciting."""
    lower = scene_text.lower()
    for mood, pattern in MOOD_KEYWORDS:
        if pattern.search(lower):
            return mood
    return Mood.EXCITING


def select_art_style(theme: str, mood: Union[Mood, str]) -> ArtStyle:
    """
    Pick the art style for a theme and mood.

    Calm or cozy moods get watercolor; Fantasy/Magic themes or a magical
    mood get whimsical; Robots/Superhero get modern flat; everything else
    gets the classic picture book style.
    """
    mood_value = mood.value if isinstance(mood, Mood) else mood

    if mood_value in (Mood.CALM.value, Mood.COZY.value):
        return ArtStyle.WATERCOLOR

    if theme in ("Fantasy", "Magic") or mood_value == Mood.MAGICAL.value:
        return ArtStyle.WHIMSICAL

    if theme in ("Robots", "Superhero"):
        return ArtStyle.MODERN_FLAT

    return ArtStyle.CLASSIC_PICTURE_BOOK
