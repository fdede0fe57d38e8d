"""Unit tests for story prompt building."""

import pytest

from storyweaver.core.modules.story_prompt_builder import (
    AGE_GUIDELINES,
    EMOTIONAL_ARCS,
    GENERIC_SENSORY_DETAILS,
    ILLUSTRATED_BOOK_SECTION,
    EnhancedStoryRequest,
    act_word_counts,
    build_basic_story_prompt,
    build_enhanced_story_prompt,
    build_illustrated_story_prompt,
    determine_age_group,
    determine_emotional_arc,
    get_sensory_details,
)
from storyweaver.core.types import AgeGroup, StoryChild, TextGenerationRequest


class TestAgeGroups:
    """Tests for age band selection."""

    @pytest.mark.parametrize("age,group", [
        (None, AgeGroup.PRESCHOOL),
        (2, AgeGroup.TODDLER),
        (3, AgeGroup.TODDLER),
        (4, AgeGroup.PRESCHOOL),
        (5, AgeGroup.PRESCHOOL),
        (6, AgeGroup.EARLY_ELEMENTARY),
        (7, AgeGroup.EARLY_ELEMENTARY),
        (9, AgeGroup.ELEMENTARY),
    ])
    def test_determine_age_group(self, age, group):
        assert determine_age_group(age) == group

    def test_target_words_grow_with_age(self):
        targets = [AGE_GUIDELINES[group].target_words for group in AgeGroup]
        assert targets == [300, 450, 600, 750]

    def test_act_word_counts(self):
        assert act_word_counts(450) == (112, 225, 112)
        assert act_word_counts(600) == (150, 300, 150)


class TestEmotionalArc:
    """Tests for emotional arc selection."""

    @pytest.mark.parametrize("theme,adjectives,arc", [
        ("Friendship", [], "friendship"),
        ("Space", ["kind"], "friendship"),
        ("Space", ["brave"], "courage"),
        ("Learning", [], "learning"),
        ("Space", ["curious"], "discovery"),
        ("Space", ["helpful"], "kindness"),
        ("Teamwork", [], "teamwork"),
        ("Space", ["funny"], "adventure"),
    ])
    def test_arc_rules(self, theme, adjectives, arc):
        assert determine_emotional_arc(theme, adjectives) == EMOTIONAL_ARCS[arc]


class TestSensoryDetails:
    """Tests for theme sensory hints."""

    def test_known_theme(self):
        assert "Twinkling stars" in get_sensory_details("Space")

    def test_unknown_theme(self):
        assert get_sensory_details("Cooking") == GENERIC_SENSORY_DETAILS


class TestEnhancedStoryPrompt:
    """Tests for the three-act story prompt."""

    def test_single_child_prompt(self):
        prompt = build_enhanced_story_prompt(EnhancedStoryRequest(
            child_name="Mia",
            adjectives=["brave", "curious"],
            theme="Space",
            moral="Always help a friend",
            age_group=AgeGroup.EARLY_ELEMENTARY,
        ))

        assert "Create a captivating story for Mia." in prompt
        assert "Personality: brave, curious" in prompt
        assert "Age Group: early-elementary (600 words target)" in prompt
        assert "ACT 1 - SETUP (150 words)" in prompt
        assert "ACT 2 - CONFLICT & RISING ACTION (300 words)" in prompt
        assert 'Naturally weave in this lesson: "Always help a friend"' in prompt
        assert EMOTIONAL_ARCS["courage"] in prompt

    def test_default_age_group(self):
        prompt = build_enhanced_story_prompt(EnhancedStoryRequest(
            child_name="Leo", adjectives=["kind"], theme="Ocean",
        ))

        assert "Age Group: preschool (450 words target)" in prompt
        assert "MORAL/LESSON" not in prompt

    def test_multi_child_prompt(self):
        prompt = build_enhanced_story_prompt(EnhancedStoryRequest(
            child_name="",
            adjectives=[],
            theme="Dinosaurs",
            age_group=AgeGroup.PRESCHOOL,
            children=[
                StoryChild(name="Ava", adjectives=["clever"]),
                StoryChild(name="Sam", adjectives=["funny", "brave"]),
            ],
        ))

        assert "1. Ava - clever" in prompt
        assert "2. Sam - funny, brave" in prompt
        assert "CHARACTER BEATS (each child gets their own):" in prompt
        assert "• Sam: a moment where Sam shines by being funny, brave" in prompt
        assert "✓ 540 words" in prompt
        assert EMOTIONAL_ARCS["courage"] in prompt

    def test_illustrated_prompt_adds_scene_layout(self):
        prompt = build_illustrated_story_prompt("Mia", ["brave"], "Space")

        assert prompt.endswith(ILLUSTRATED_BOOK_SECTION.format(name="Mia"))
        assert "exactly 5-7 distinct scenes" in prompt


class TestBasicStoryPrompt:
    """Tests for the compact fallback prompt."""

    def test_single_child(self):
        prompt = build_basic_story_prompt(TextGenerationRequest(
            theme="Ocean", child_name="Leo", adjectives=["kind", "funny"], moral="Share your toys",
        ))

        assert "for a child named Leo" in prompt
        assert "described as: kind, funny." in prompt
        assert "The story should teach the moral: Share your toys." in prompt
        assert prompt.endswith("Story:")

    def test_multi_child(self):
        prompt = build_basic_story_prompt(TextGenerationRequest(
            theme="Space",
            children=[StoryChild(name="Ava", adjectives=["clever"]), StoryChild(name="Sam")],
        ))

        assert "1. Ava - described as: clever" in prompt
        assert "Ava and Sam going on an adventure together" in prompt
        assert prompt.endswith("Story:")

    def test_template_section(self):
        prompt = build_basic_story_prompt(TextGenerationRequest(
            theme="Space", child_name="Mia", template_id="space-adventure",
        ))
        assert "Story Template: Space Adventure" in prompt

    def test_unknown_template_is_ignored(self):
        prompt = build_basic_story_prompt(TextGenerationRequest(
            theme="Space", child_name="Mia", template_id="does-not-exist",
        ))
        assert "Story Template" not in prompt
