from .illustrated_book_generator import IllustratedBookGenerator, generate_illustrated_book
from .story_generator import generate_story, generate_story_title

__all__ = [
    "IllustratedBookGenerator",
    "generate_illustrated_book",
    "generate_story",
    "generate_story_title",
]
