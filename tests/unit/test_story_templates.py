"""Unit tests for story template lookups."""

import pytest

from storyweaver.core.modules.story_templates import (
    STORY_TEMPLATES,
    TemplateCategory,
    get_template_by_id,
    get_template_categories,
    get_templates_by_category,
    get_templates_for_theme,
)


class TestStoryTemplates:
    """Tests for the predefined templates."""

    def test_ids_are_unique(self):
        ids = [t.id for t in STORY_TEMPLATES]
        assert len(ids) == len(set(ids)) == 10

    def test_lookup_by_id(self):
        assert get_template_by_id("hero-journey").name == "Hero's Journey"

    @pytest.mark.parametrize("template_id", [None, "", "missing"])
    def test_unknown_id_is_none(self, template_id):
        assert get_template_by_id(template_id) is None

    def test_by_category_accepts_string(self):
        ids = [t.id for t in get_templates_by_category("friendship")]
        assert ids == ["friendship-tale", "animal-companion"]

    def test_by_theme_is_case_insensitive(self):
        ids = {t.id for t in get_templates_for_theme("space")}
        assert ids == {"space-adventure"}

    def test_categories_in_first_appearance_order(self):
        assert get_template_categories() == [
            TemplateCategory.ADVENTURE,
            TemplateCategory.BEDTIME,
            TemplateCategory.FRIENDSHIP,
            TemplateCategory.FANTASY,
            TemplateCategory.EDUCATIONAL,
            TemplateCategory.GROWTH,
        ]

    def test_prompt_section(self):
        section = get_template_by_id("bedtime-story").to_prompt_section()

        assert section.startswith("Story Template: Bedtime Story\n")
        assert "Story Structure:" in section
