"""
Base classes shared by all provider adapters.

An adapter is a stateless request handler for one vendor. Availability is
decided from credentials at construction time; constructing an adapter
never fails and never touches the network. Vendor exceptions are
translated into ProviderError subclasses so the retry engine can tell
authentication and malformed-request failures from transient ones.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional

from ..errors import (
    AuthError,
    BadRequestError,
    ProviderError,
    TransientError,
    UnavailableError,
)
from ..modules.story_prompt_builder import build_basic_story_prompt
from ..types import ImageGenerationRequest, ProviderDescriptor, TextGenerationRequest

logger = logging.getLogger(__name__)

_DATA_URL = re.compile(r"^data:(image/[\w.+-]+);base64,")

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


def split_data_url(image: str) -> tuple[str, str]:
    """
    Split a base64 image into (mime_type, payload).

    Accepts either a bare base64 string or a data URL; bare strings are
    assumed to be JPEG.
    """
    match = _DATA_URL.match(image)
    if match:
        return match.group(1), image[match.end():]
    return DEFAULT_IMAGE_MIME_TYPE, image


def to_data_url(payload: str, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{payload}"


def error_for_status(
    provider: str,
    status: Optional[int],
    message: str,
    original_error: Optional[BaseException] = None,
) -> ProviderError:
    """Translate an HTTP status code into the matching ProviderError subclass."""
    if status in (401, 403):
        error_class = AuthError
    elif status in (400, 422):
        error_class = BadRequestError
    elif status == 404:
        error_class = UnavailableError
    else:
        # 408, 409, 429, 5xx and unknown statuses are worth retrying
        error_class = TransientError
    return error_class(message, provider=provider, original_error=original_error)


def map_vendor_error(provider: str, error: BaseException) -> ProviderError:
    """
    Translate an SDK exception into a ProviderError.

    LiteLLM and OpenAI exceptions carry status_code; google-genai API errors
    carry an integer code. Anything without a status is treated as transient.
    """
    if isinstance(error, ProviderError):
        return error

    status = getattr(error, "status_code", None)
    if not isinstance(status, int):
        code = getattr(error, "code", None)
        status = code if isinstance(code, int) else None

    return error_for_status(provider, status, f"{provider} request failed: {error}", error)


class BaseProvider(ABC):
    """Identity, capabilities and availability of one vendor adapter."""

    name: str = ""
    supports_text: bool = False
    supports_image: bool = False
    supports_image_analysis: bool = False

    @abstractmethod
    def is_available(self) -> bool:
        """True when the credentials this adapter needs are present."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return ProviderDescriptor(
            name=self.name,
            supports_text=self.supports_text,
            supports_image=self.supports_image,
            supports_image_analysis=self.supports_image_analysis,
            available=self.is_available(),
        )

    def _require_available(self) -> None:
        if not self.is_available():
            raise UnavailableError(f"{self.name} API key is not configured", provider=self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, available={self.is_available()})"


class TextProvider(BaseProvider):
    """Adapter that writes story text and, optionally, describes images."""

    supports_text = True

    @abstractmethod
    async def generate_text(self, request: TextGenerationRequest) -> str:
        """Generate story text for the request."""

    async def analyze_image(self, image: str, prompt: Optional[str] = None) -> str:
        """
        Describe an image (base64, with or without a data: prefix).

        Only adapters with supports_image_analysis override this.
        """
        raise UnavailableError(f"{self.name} does not support image analysis", provider=self.name)

    @staticmethod
    def resolve_prompt(request: TextGenerationRequest) -> str:
        """The custom prompt when given, otherwise the basic story prompt."""
        if request.custom_prompt:
            return request.custom_prompt
        return build_basic_story_prompt(request)


class ImageProvider(BaseProvider):
    """Adapter that turns a text prompt into one or more image URLs."""

    supports_image = True

    @abstractmethod
    async def generate_images(self, request: ImageGenerationRequest) -> list[str]:
        """
        Generate images for the request.

        Returns a non-empty list of URLs (http(s) or data: URLs).
        """
