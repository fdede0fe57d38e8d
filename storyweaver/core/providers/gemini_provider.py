"""
Google Gemini adapters.

- GeminiProvider: story text through dspy.LM, image analysis through
  google-genai
- GeminiImageProvider: illustrations through google-genai image output

Both accept GEMINI_API_KEY or GOOGLE_API_KEY.
"""

import asyncio
import base64
import binascii
import logging
from io import BytesIO
from typing import Optional

from google import genai
from google.genai.types import GenerateContentConfig, Modality
from PIL import Image, UnidentifiedImageError

from storyweaver.config import ANALYSIS_MODELS, DEFAULT_ANALYSIS_PROMPT, IMAGE_MODELS, get_api_key
from ..errors import BadRequestError, TransientError
from ..types import ImageGenerationRequest
from .base import ImageProvider, map_vendor_error, split_data_url, to_data_url
from .litellm_provider import LiteLLMTextProvider

logger = logging.getLogger(__name__)

GEMINI_KEY_NAMES = ("GEMINI_API_KEY", "GOOGLE_API_KEY")


def decode_image(image: str, provider: str) -> Image.Image:
    """Decode a base64 image or data URL into a PIL image."""
    _, payload = split_data_url(image)
    try:
        return Image.open(BytesIO(base64.b64decode(payload)))
    except (binascii.Error, UnidentifiedImageError, ValueError) as e:
        raise BadRequestError(f"Invalid image data: {e}", provider=provider, original_error=e) from e


def extract_image_from_response(response) -> tuple[bytes, str]:
    """
    Extract the first inline image from a Gemini response.

    Returns:
        (image bytes, mime type)

    Raises:
        ValueError: If no image found in response
    """
    for candidate in response.candidates or []:
        if not candidate.content:
            continue
        for part in candidate.content.parts or []:
            if getattr(part, "inline_data", None):
                data = part.inline_data.data
                raw = base64.b64decode(data) if isinstance(data, str) else data
                return raw, part.inline_data.mime_type or "image/png"

    raise ValueError("No image found in response")


class GeminiProvider(LiteLLMTextProvider):
    """Gemini story text and image analysis."""

    name = "gemini"
    supports_image_analysis = True
    api_key_names = GEMINI_KEY_NAMES

    def __init__(self, api_key: Optional[str] = None, models=None, client: Optional[genai.Client] = None):
        super().__init__(api_key=api_key, models=models)
        self._client = client

    @property
    def client(self) -> genai.Client:
        """Lazy load the client."""
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def analyze_image(self, image: str, prompt: Optional[str] = None) -> str:
        self._require_available()
        picture = decode_image(image, self.name)

        try:
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=ANALYSIS_MODELS[self.name],
                contents=[picture, prompt or DEFAULT_ANALYSIS_PROMPT],
            )
        except Exception as e:
            raise map_vendor_error(self.name, e) from e

        if not response.text:
            raise TransientError("Gemini returned an empty image description", provider=self.name)
        return response.text


class GeminiImageProvider(ImageProvider):
    """Gemini image generation; images come back as data URLs."""

    name = "gemini-image"

    def __init__(self, api_key: Optional[str] = None, client: Optional[genai.Client] = None):
        self.api_key = api_key or get_api_key(*GEMINI_KEY_NAMES)
        self.model = IMAGE_MODELS[self.name]
        self._client = client

    def is_available(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _generate_one(self, prompt: str) -> str:
        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=GenerateContentConfig(response_modalities=[Modality.TEXT, Modality.IMAGE]),
        )
        raw, mime_type = extract_image_from_response(response)
        return to_data_url(base64.b64encode(raw).decode("ascii"), mime_type)

    async def generate_images(self, request: ImageGenerationRequest) -> list[str]:
        self._require_available()
        prompt = f"Generate an image: {request.prompt}"
        urls = []

        # One image per call
        for _ in range(max(1, request.count)):
            try:
                urls.append(await asyncio.to_thread(self._generate_one, prompt))
            except ValueError as e:
                raise TransientError(
                    f"Gemini returned no image: {e}", provider=self.name, original_error=e
                ) from e
            except Exception as e:
                raise map_vendor_error(self.name, e) from e

        return urls
