"""Unit tests for art style and mood selection."""

import pytest

from storyweaver.core.modules.illustration_styles import (
    ART_STYLES,
    THEME_COLOR_PALETTES,
    determine_mood_from_scene,
    get_color_palette,
    get_style_guide,
    select_art_style,
)
from storyweaver.core.types import ArtStyle, Mood


class TestSelectArtStyle:
    """Tests for choosing one art style per story."""

    @pytest.mark.parametrize("mood", [Mood.CALM, Mood.COZY, "calm"])
    def test_gentle_moods_get_watercolor(self, mood):
        assert select_art_style("Robots", mood) == ArtStyle.WATERCOLOR

    @pytest.mark.parametrize("theme,mood", [
        ("Fantasy", Mood.EXCITING),
        ("Magic", Mood.ADVENTUROUS),
        ("Space", Mood.MAGICAL),
    ])
    def test_magic_gets_whimsical(self, theme, mood):
        assert select_art_style(theme, mood) == ArtStyle.WHIMSICAL

    @pytest.mark.parametrize("theme", ["Robots", "Superhero"])
    def test_robots_and_superheroes_get_modern_flat(self, theme):
        assert select_art_style(theme, Mood.EXCITING) == ArtStyle.MODERN_FLAT

    def test_everything_else_is_classic(self):
        assert select_art_style("Ocean", Mood.ADVENTUROUS) == ArtStyle.CLASSIC_PICTURE_BOOK

    def test_deterministic(self):
        results = {select_art_style("Dinosaurs", Mood.EXCITING) for _ in range(20)}
        assert len(results) == 1


class TestDetermineMoodFromScene:
    """Tests for keyword mood classification."""

    @pytest.mark.parametrize("text,mood", [
        ("Mia lay down to rest in the quiet meadow.", Mood.CALM),
        ("A fairy cast a glittering spell.", Mood.MAGICAL),
        ("Leo started to climb the tall tree.", Mood.EXCITING),
        ("The journey led them up the mountain.", Mood.ADVENTUROUS),
        ("Back home, Ava gave her mom a big hug.", Mood.COZY),
        ("Sam ate a sandwich.", Mood.EXCITING),
    ])
    def test_keyword_buckets(self, text, mood):
        assert determine_mood_from_scene(text) == mood

    def test_earlier_bucket_wins(self):
        """Calm keywords are checked before magical ones."""
        assert determine_mood_from_scene("A soft magic glow filled the room.") == Mood.CALM

    def test_case_insensitive(self):
        assert determine_mood_from_scene("SPARKLE everywhere") == Mood.MAGICAL

    def test_deterministic(self):
        text = "They raced across the ocean to discover a hidden island."
        assert len({determine_mood_from_scene(text) for _ in range(20)}) == 1


class TestStyleLookups:
    """Tests for style guide and palette lookups."""

    def test_every_style_has_a_guide(self):
        assert set(ART_STYLES) == set(ArtStyle)

    def test_style_guide_by_name(self):
        assert get_style_guide("watercolor") is ART_STYLES[ArtStyle.WATERCOLOR]

    def test_unknown_style_falls_back_to_classic(self):
        assert get_style_guide("oil-painting") is ART_STYLES[ArtStyle.CLASSIC_PICTURE_BOOK]

    def test_known_theme_palette(self):
        assert get_color_palette("Ocean") is THEME_COLOR_PALETTES["Ocean"]

    def test_unknown_theme_uses_fantasy_palette(self):
        assert get_color_palette("Cooking") is THEME_COLOR_PALETTES["Fantasy"]
