# Storyweaver - Core Domain

# Re-export types for convenient access
from .types import (
    ArtStyle,
    BookPage,
    CharacterTier,
    ChildAppearance,
    IllustratedBookParams,
    IllustratedBookResult,
    ImageGenerationRequest,
    ImageSize,
    Mood,
    Scene,
    StoryChild,
    TextGenerationRequest,
)
from .errors import (
    BookGenerationError,
    ConfigurationError,
    ErrorKind,
    ProviderError,
    ProvidersExhaustedError,
)

__all__ = [
    # Types
    "ArtStyle",
    "BookPage",
    "CharacterTier",
    "ChildAppearance",
    "IllustratedBookParams",
    "IllustratedBookResult",
    "ImageGenerationRequest",
    "ImageSize",
    "Mood",
    "Scene",
    "StoryChild",
    "TextGenerationRequest",
    # Errors
    "BookGenerationError",
    "ConfigurationError",
    "ErrorKind",
    "ProviderError",
    "ProvidersExhaustedError",
]
