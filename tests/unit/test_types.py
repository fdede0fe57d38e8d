"""Unit tests for domain types."""

from storyweaver.core.types import BookPage, ChildAppearance


class TestChildAppearance:
    def test_from_camel_case(self):
        appearance = ChildAppearance.from_dict({"skinTone": "dark", "hairColor": "black"})

        assert appearance.skin_tone == "dark"
        assert appearance.hair_color == "black"
        assert appearance.hair_style is None

    def test_snake_case_wins(self):
        appearance = ChildAppearance.from_dict({"hair_style": "braids", "hairStyle": "curly"})
        assert appearance.hair_style == "braids"


class TestBookPage:
    def test_empty_url_has_no_illustration(self):
        assert not BookPage(page_number=2, text="Mia slept.").has_illustration

    def test_to_dict(self):
        page = BookPage(page_number=1, text="Mia flew.", illustration_url="https://example.com/1.png")
        assert page.to_dict() == {
            "pageNumber": 1,
            "text": "Mia flew.",
            "illustration_url": "https://example.com/1.png",
        }
