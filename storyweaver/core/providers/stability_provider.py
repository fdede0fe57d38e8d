"""
Stable Diffusion adapter for the Stability AI REST API.

Uses the v1 text-to-image endpoint and returns images as PNG data URLs.
Accepts STABILITY_AI_API_KEY or STABLE_DIFFUSION_API_KEY.
"""

import logging
from typing import Optional

import httpx

from storyweaver.config import IMAGE_MODELS, PROVIDER_CONSTANTS, STABILITY_API_BASE, get_api_key
from ..errors import TransientError
from ..types import ImageGenerationRequest, ImageSize
from .base import ImageProvider, error_for_status, to_data_url

logger = logging.getLogger(__name__)

# SDXL only accepts a fixed set of dimensions
SDXL_DIMENSIONS = {
    ImageSize.PORTRAIT: (768, 1344),
    ImageSize.LANDSCAPE: (1344, 768),
}
SDXL_DEFAULT_DIMENSIONS = (1024, 1024)

CFG_SCALE = 7
STEPS = 30


class StableDiffusionProvider(ImageProvider):
    """Stability AI SDXL text-to-image."""

    name = "stable-diffusion"

    def __init__(self, api_key: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        self.api_key = api_key or get_api_key("STABILITY_AI_API_KEY", "STABLE_DIFFUSION_API_KEY")
        self.engine = IMAGE_MODELS[self.name]
        self._client = client

    def is_available(self) -> bool:
        return bool(self.api_key)

    @property
    def url(self) -> str:
        return f"{STABILITY_API_BASE}/{self.engine}/text-to-image"

    def _payload(self, request: ImageGenerationRequest) -> dict:
        width, height = SDXL_DIMENSIONS.get(request.size, SDXL_DEFAULT_DIMENSIONS)
        return {
            "text_prompts": [{"text": request.prompt, "weight": 1}],
            "cfg_scale": CFG_SCALE,
            "width": width,
            "height": height,
            "samples": max(1, request.count),
            "steps": STEPS,
        }

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        return await client.post(
            self.url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Accept": "application/json",
            },
            json=payload,
        )

    async def generate_images(self, request: ImageGenerationRequest) -> list[str]:
        self._require_available()
        payload = self._payload(request)

        try:
            if self._client is not None:
                response = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient(timeout=PROVIDER_CONSTANTS["stability_timeout"]) as client:
                    response = await self._post(client, payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise error_for_status(
                self.name,
                e.response.status_code,
                f"Stability API error {e.response.status_code}: {e.response.text}",
                e,
            ) from e
        except httpx.RequestError as e:
            raise TransientError(
                f"Failed to connect to Stability API: {e}", provider=self.name, original_error=e
            ) from e

        artifacts = response.json().get("artifacts", [])
        urls = [
            to_data_url(artifact["base64"])
            for artifact in artifacts
            if artifact.get("finishReason") == "SUCCESS" and artifact.get("base64")
        ]

        if not urls:
            reasons = ", ".join(a.get("finishReason", "UNKNOWN") for a in artifacts) or "no artifacts"
            raise TransientError(f"Stability API returned no usable images ({reasons})", provider=self.name)
        return urls
