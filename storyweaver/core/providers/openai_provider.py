"""
OpenAI adapters.

- OpenAIProvider: story text through dspy.LM, image analysis through the
  chat completions vision API
- DalleProvider: DALL-E 3 illustrations, falling back to DALL-E 2 when
  the account cannot use DALL-E 3
"""

import asyncio
import logging
from typing import Optional

import openai
from openai import OpenAI

from storyweaver.config import (
    ANALYSIS_MODELS,
    ANALYSIS_SYSTEM_PROMPT,
    DEFAULT_ANALYSIS_PROMPT,
    IMAGE_MODELS,
    PROVIDER_CONSTANTS,
    get_api_key,
)
from ..errors import TransientError, UnavailableError
from ..types import ImageGenerationRequest, ImageSize
from .base import ImageProvider, map_vendor_error, split_data_url, to_data_url
from .litellm_provider import LiteLLMTextProvider

logger = logging.getLogger(__name__)

# Sizes each image model accepts; anything else is sent as 1024x1024
DALLE_SIZES = {
    "dall-e-3": {ImageSize.SQUARE, ImageSize.PORTRAIT, ImageSize.LANDSCAPE},
    "dall-e-2": {ImageSize.SMALL, ImageSize.MEDIUM, ImageSize.SQUARE},
}


def _is_model_not_found(error: Exception) -> bool:
    return isinstance(error, openai.NotFoundError) or getattr(error, "code", None) == "model_not_found"


class OpenAIProvider(LiteLLMTextProvider):
    """OpenAI story text and image analysis."""

    name = "openai"
    supports_image_analysis = True
    api_key_names = ("OPENAI_API_KEY",)

    def __init__(self, api_key: Optional[str] = None, models=None, client: Optional[OpenAI] = None):
        super().__init__(api_key=api_key, models=models)
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, timeout=PROVIDER_CONSTANTS["llm_timeout"])
        return self._client

    async def analyze_image(self, image: str, prompt: Optional[str] = None) -> str:
        self._require_available()
        mime_type, payload = split_data_url(image)

        try:
            completion = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=ANALYSIS_MODELS[self.name],
                messages=[
                    {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt or DEFAULT_ANALYSIS_PROMPT},
                            {"type": "image_url", "image_url": {"url": to_data_url(payload, mime_type)}},
                        ],
                    },
                ],
                max_tokens=PROVIDER_CONSTANTS["analysis_max_tokens"],
            )
        except Exception as e:
            raise map_vendor_error(self.name, e) from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise TransientError("OpenAI returned empty response for image analysis", provider=self.name)
        return content


class DalleProvider(ImageProvider):
    """DALL-E illustrations. Accepts OPENAI_API_KEY or DALL_E_API_KEY."""

    name = "dalle"

    def __init__(self, api_key: Optional[str] = None, client: Optional[OpenAI] = None):
        self.api_key = api_key or get_api_key("OPENAI_API_KEY", "DALL_E_API_KEY")
        self.models = list(IMAGE_MODELS[self.name])
        self._client = client

    def is_available(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def _params(self, model: str, request: ImageGenerationRequest) -> dict:
        size = request.size if request.size in DALLE_SIZES[model] else ImageSize.SQUARE
        params = {"model": model, "prompt": request.prompt, "size": size.value}
        if model == "dall-e-3":
            # DALL-E 3 only generates one image per call
            params.update(n=1, quality="standard", style="vivid" if request.style == "vivid" else "natural")
        else:
            params["n"] = max(1, request.count)
        return params

    def _generate(self, model: str, request: ImageGenerationRequest) -> list[str]:
        params = self._params(model, request)
        calls = max(1, request.count) if params["n"] == 1 else 1

        urls = []
        for _ in range(calls):
            response = self.client.images.generate(**params)
            for image in response.data or []:
                if image.url:
                    urls.append(image.url)
                elif image.b64_json:
                    urls.append(to_data_url(image.b64_json))
        return urls

    async def generate_images(self, request: ImageGenerationRequest) -> list[str]:
        self._require_available()
        not_found: Optional[Exception] = None

        for model in self.models:
            try:
                urls = await asyncio.to_thread(self._generate, model, request)
            except Exception as e:
                if _is_model_not_found(e):
                    logger.warning(f"{model} not available, trying next image model")
                    not_found = e
                    continue
                raise map_vendor_error(self.name, e) from e

            if not urls:
                raise TransientError(f"{model} returned no images", provider=self.name)
            return urls

        raise UnavailableError(
            f"No DALL-E model available: {not_found}", provider=self.name, original_error=not_found
        )
