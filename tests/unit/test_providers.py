"""Unit tests for provider adapters with mocked vendor clients."""

import base64
import json
from io import BytesIO
from unittest.mock import MagicMock, patch

import httpx
import litellm
import pytest
from google.genai.errors import ClientError, ServerError
from PIL import Image

from storyweaver.config import DEFAULT_ANALYSIS_PROMPT, SYSTEM_PROMPT
from storyweaver.core.errors import (
    AuthError,
    BadRequestError,
    TransientError,
    UnavailableError,
)
from storyweaver.core.providers import (
    AnthropicProvider,
    DalleProvider,
    GeminiImageProvider,
    GeminiProvider,
    OpenAIProvider,
    StableDiffusionProvider,
)
from storyweaver.core.providers.base import TextProvider, split_data_url
from storyweaver.core.providers.gemini_provider import extract_image_from_response
from storyweaver.core.types import ImageGenerationRequest, ImageSize, TextGenerationRequest


def _png_base64() -> str:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color="red").save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def _make_client_error(code: int, message: str = "Error") -> ClientError:
    return ClientError(code=code, response_json={"error": {"code": code, "message": message}})


def _gemini_image_response(data, mime_type="image/png"):
    part = MagicMock()
    part.inline_data.data = data
    part.inline_data.mime_type = mime_type
    candidate = MagicMock()
    candidate.content.parts = [part]
    response = MagicMock()
    response.candidates = [candidate]
    return response


class StatusError(Exception):
    """SDK-style exception carrying an HTTP status code."""

    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


class TestBaseHelpers:
    """Tests for shared adapter helpers."""

    def test_split_data_url(self):
        assert split_data_url("data:image/png;base64,AAAA") == ("image/png", "AAAA")

    def test_bare_base64_is_jpeg(self):
        assert split_data_url("AAAA") == ("image/jpeg", "AAAA")

    def test_custom_prompt_is_sent_verbatim(self):
        request = TextGenerationRequest(theme="Space", child_name="Mia", custom_prompt="Write a poem")
        assert TextProvider.resolve_prompt(request) == "Write a poem"

    def test_basic_prompt_without_custom_prompt(self):
        request = TextGenerationRequest(theme="Space", child_name="Mia")
        assert "for a child named Mia" in TextProvider.resolve_prompt(request)


class TestLiteLLMTextProviders:
    """Tests for dspy.LM-backed text generation."""

    @pytest.mark.asyncio
    async def test_generates_with_system_prompt(self):
        provider = GeminiProvider(api_key="test-key", models=["gemini/gemini-2.5-flash"])
        request = TextGenerationRequest(theme="Space", child_name="Mia", custom_prompt="Tell a story")

        with patch("storyweaver.core.providers.litellm_provider.dspy.LM") as mock_lm:
            mock_lm.return_value.return_value = ["Once upon a time"]
            text = await provider.generate_text(request)

        assert text == "Once upon a time"
        assert mock_lm.call_args.args[0] == "gemini/gemini-2.5-flash"
        assert mock_lm.call_args.kwargs["cache"] is False
        messages = mock_lm.return_value.call_args.kwargs["messages"]
        assert messages == [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "Tell a story"},
        ]

    @pytest.mark.asyncio
    async def test_missing_model_falls_through(self):
        provider = AnthropicProvider(api_key="test-key", models=["anthropic/old", "anthropic/new"])
        not_found = litellm.exceptions.NotFoundError(
            message="model not found", model="anthropic/old", llm_provider="anthropic"
        )

        with patch("storyweaver.core.providers.litellm_provider.dspy.LM") as mock_lm:
            mock_lm.return_value.side_effect = [not_found, ["from new"]]
            text = await provider.complete([{"role": "user", "content": "hi"}])

        assert text == "from new"
        assert [call.args[0] for call in mock_lm.call_args_list] == ["anthropic/old", "anthropic/new"]

    @pytest.mark.asyncio
    async def test_no_model_found_is_unavailable(self):
        provider = AnthropicProvider(api_key="test-key", models=["anthropic/old"])
        not_found = litellm.exceptions.NotFoundError(
            message="model not found", model="anthropic/old", llm_provider="anthropic"
        )

        with patch("storyweaver.core.providers.litellm_provider.dspy.LM") as mock_lm:
            mock_lm.return_value.side_effect = not_found
            with pytest.raises(UnavailableError):
                await provider.complete([{"role": "user", "content": "hi"}])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,error_class", [(401, AuthError), (429, TransientError)])
    async def test_vendor_errors_are_mapped(self, status, error_class):
        provider = OpenAIProvider(api_key="test-key", models=["openai/gpt-4o"])

        with patch("storyweaver.core.providers.litellm_provider.dspy.LM") as mock_lm:
            mock_lm.return_value.side_effect = StatusError("failed", status)
            with pytest.raises(error_class):
                await provider.complete([{"role": "user", "content": "hi"}])

    @pytest.mark.asyncio
    async def test_empty_output_is_transient(self):
        provider = GeminiProvider(api_key="test-key", models=["gemini/gemini-2.5-flash"])

        with patch("storyweaver.core.providers.litellm_provider.dspy.LM") as mock_lm:
            mock_lm.return_value.return_value = [{"text": "  "}]
            with pytest.raises(TransientError):
                await provider.complete([{"role": "user", "content": "hi"}])

    @pytest.mark.asyncio
    async def test_without_key_is_unavailable(self):
        provider = AnthropicProvider()

        assert not provider.is_available()
        with pytest.raises(UnavailableError):
            await provider.generate_text(TextGenerationRequest(theme="Space", child_name="Mia"))

    @pytest.mark.asyncio
    async def test_anthropic_cannot_analyze_images(self):
        with pytest.raises(UnavailableError):
            await AnthropicProvider(api_key="test-key").analyze_image(_png_base64())


class TestGeminiProvider:
    """Tests for Gemini image analysis and image generation."""

    @pytest.mark.asyncio
    async def test_analyze_image(self):
        client = MagicMock()
        client.models.generate_content.return_value = MagicMock(text="a girl with pigtails")
        provider = GeminiProvider(api_key="test-key", client=client)

        description = await provider.analyze_image(f"data:image/png;base64,{_png_base64()}")

        assert description == "a girl with pigtails"
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert isinstance(kwargs["contents"][0], Image.Image)
        assert kwargs["contents"][1] == DEFAULT_ANALYSIS_PROMPT

    @pytest.mark.asyncio
    async def test_invalid_image_is_bad_request(self):
        provider = GeminiProvider(api_key="test-key", client=MagicMock())

        with pytest.raises(BadRequestError):
            await provider.analyze_image("bm90IGFuIGltYWdl")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error,error_class", [
        (_make_client_error(401, "API key not valid"), AuthError),
        (_make_client_error(400, "Invalid argument"), BadRequestError),
        (_make_client_error(429, "Resource exhausted"), TransientError),
        (ServerError(code=503, response_json={"error": {"code": 503, "message": "Overloaded"}}), TransientError),
    ])
    async def test_genai_errors_are_mapped(self, error, error_class):
        client = MagicMock()
        client.models.generate_content.side_effect = error
        provider = GeminiProvider(api_key="test-key", client=client)

        with pytest.raises(error_class):
            await provider.analyze_image(_png_base64())

    @pytest.mark.asyncio
    async def test_generate_images_returns_data_urls(self):
        client = MagicMock()
        client.models.generate_content.return_value = _gemini_image_response(b"png-bytes")
        provider = GeminiImageProvider(api_key="test-key", client=client)

        urls = await provider.generate_images(ImageGenerationRequest(prompt="a whale", count=2))

        assert urls == ["data:image/png;base64,cG5nLWJ5dGVz"] * 2
        assert client.models.generate_content.call_count == 2
        assert client.models.generate_content.call_args.kwargs["contents"] == "Generate an image: a whale"

    @pytest.mark.asyncio
    async def test_response_without_image_is_transient(self):
        client = MagicMock()
        response = _gemini_image_response(None)
        response.candidates[0].content.parts[0].inline_data = None
        client.models.generate_content.return_value = response
        provider = GeminiImageProvider(api_key="test-key", client=client)

        with pytest.raises(TransientError, match="no image"):
            await provider.generate_images(ImageGenerationRequest(prompt="a whale"))

    def test_extract_base64_string_data(self):
        raw, mime_type = extract_image_from_response(
            _gemini_image_response("cG5nLWJ5dGVz", mime_type="image/jpeg")
        )
        assert raw == b"png-bytes"
        assert mime_type == "image/jpeg"


class TestOpenAIProvider:
    """Tests for OpenAI image analysis."""

    @pytest.mark.asyncio
    async def test_analyze_image(self):
        client = MagicMock()
        client.chat.completions.create.return_value = MagicMock(
            choices=[MagicMock(message=MagicMock(content="a boy in a red cap"))]
        )
        provider = OpenAIProvider(api_key="test-key", client=client)

        description = await provider.analyze_image("data:image/png;base64,AAAA", "Describe him")

        assert description == "a boy in a red cap"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        content = kwargs["messages"][1]["content"]
        assert content[0] == {"type": "text", "text": "Describe him"}
        assert content[1]["image_url"]["url"] == "data:image/png;base64,AAAA"

    @pytest.mark.asyncio
    async def test_empty_description_is_transient(self):
        client = MagicMock()
        client.chat.completions.create.return_value = MagicMock(choices=[])
        provider = OpenAIProvider(api_key="test-key", client=client)

        with pytest.raises(TransientError):
            await provider.analyze_image("AAAA")


class TestDalleProvider:
    """Tests for DALL-E image generation."""

    @staticmethod
    def _response(url="https://images.example.com/1.png", b64_json=None):
        return MagicMock(data=[MagicMock(url=url, b64_json=b64_json)])

    @pytest.mark.asyncio
    async def test_dalle3_one_image_per_call(self):
        client = MagicMock()
        client.images.generate.return_value = self._response()
        provider = DalleProvider(api_key="test-key", client=client)

        urls = await provider.generate_images(
            ImageGenerationRequest(prompt="a castle", count=2, style="vivid")
        )

        assert urls == ["https://images.example.com/1.png"] * 2
        assert client.images.generate.call_count == 2
        kwargs = client.images.generate.call_args.kwargs
        assert kwargs["model"] == "dall-e-3"
        assert kwargs["n"] == 1
        assert kwargs["style"] == "vivid"
        assert kwargs["size"] == "1024x1024"

    @pytest.mark.asyncio
    async def test_falls_back_to_dalle2(self):
        class ModelNotFound(Exception):
            code = "model_not_found"

        client = MagicMock()
        client.images.generate.side_effect = [
            ModelNotFound("dall-e-3 is not available"),
            self._response(url=None, b64_json="aGk="),
        ]
        provider = DalleProvider(api_key="test-key", client=client)

        urls = await provider.generate_images(
            ImageGenerationRequest(prompt="a castle", count=2, size=ImageSize.PORTRAIT)
        )

        assert urls == ["data:image/png;base64,aGk="]
        kwargs = client.images.generate.call_args.kwargs
        assert kwargs["model"] == "dall-e-2"
        assert kwargs["n"] == 2
        assert kwargs["size"] == "1024x1024"

    @pytest.mark.asyncio
    async def test_rejected_key_is_auth_error(self):
        client = MagicMock()
        client.images.generate.side_effect = StatusError("Incorrect API key", 401)
        provider = DalleProvider(api_key="test-key", client=client)

        with pytest.raises(AuthError):
            await provider.generate_images(ImageGenerationRequest(prompt="a castle"))

    @pytest.mark.asyncio
    async def test_empty_result_is_transient(self):
        client = MagicMock()
        client.images.generate.return_value = MagicMock(data=[])
        provider = DalleProvider(api_key="test-key", client=client)

        with pytest.raises(TransientError):
            await provider.generate_images(ImageGenerationRequest(prompt="a castle"))

    @pytest.mark.asyncio
    async def test_without_key_is_unavailable(self):
        with pytest.raises(UnavailableError):
            await DalleProvider().generate_images(ImageGenerationRequest(prompt="a castle"))


class TestStableDiffusionProvider:
    """Tests for the Stability AI REST adapter."""

    @staticmethod
    def _provider(handler) -> StableDiffusionProvider:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return StableDiffusionProvider(api_key="test-key", client=client)

    @pytest.mark.asyncio
    async def test_generates_data_urls(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["payload"] = json.loads(request.content)
            return httpx.Response(200, json={"artifacts": [
                {"base64": "aGk=", "finishReason": "SUCCESS"},
                {"base64": "bm8=", "finishReason": "CONTENT_FILTERED"},
            ]})

        provider = self._provider(handler)
        urls = await provider.generate_images(
            ImageGenerationRequest(prompt="a dragon", count=2, size=ImageSize.PORTRAIT)
        )

        assert urls == ["data:image/png;base64,aGk="]
        assert seen["url"].endswith("/stable-diffusion-xl-1024-v1-0/text-to-image")
        assert seen["auth"] == "Bearer test-key"
        assert seen["payload"]["text_prompts"] == [{"text": "a dragon", "weight": 1}]
        assert (seen["payload"]["width"], seen["payload"]["height"]) == (768, 1344)
        assert seen["payload"]["samples"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,error_class", [
        (401, AuthError),
        (400, BadRequestError),
        (500, TransientError),
    ])
    async def test_http_errors_are_mapped(self, status, error_class):
        provider = self._provider(lambda request: httpx.Response(status, text="nope"))

        with pytest.raises(error_class, match=f"Stability API error {status}"):
            await provider.generate_images(ImageGenerationRequest(prompt="a dragon"))

    @pytest.mark.asyncio
    async def test_connection_failure_is_transient(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        with pytest.raises(TransientError, match="Failed to connect"):
            await self._provider(handler).generate_images(ImageGenerationRequest(prompt="a dragon"))

    @pytest.mark.asyncio
    async def test_all_filtered_is_transient(self):
        provider = self._provider(lambda request: httpx.Response(200, json={"artifacts": [
            {"base64": "bm8=", "finishReason": "CONTENT_FILTERED"},
        ]}))

        with pytest.raises(TransientError, match="CONTENT_FILTERED"):
            await provider.generate_images(ImageGenerationRequest(prompt="a dragon"))
