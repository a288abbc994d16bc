"""Tests for Fal image provider."""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from fal_client import Completed, InProgress, Queued

from seedreamstudio.models.errors import ErrorCode, ProviderError, ValidationError
from seedreamstudio.models.requests import (
    CustomImageSize,
    FileUpload,
    ImageEditRequest,
    ImageGenerationRequest,
    ImageSize,
)
from seedreamstudio.models.responses import QueueState
from seedreamstudio.providers.fal_provider import EDIT_ENDPOINT, TEXT_TO_IMAGE_ENDPOINT, FalProvider


@pytest.fixture
def fal_client_mock():
    with patch("seedreamstudio.providers.fal_provider.fal_client") as mock_fal_client:
        client = MagicMock()
        mock_fal_client.AsyncClient.return_value = client
        yield mock_fal_client, client


@pytest.mark.asyncio
async def test_fal_provider_generate_success(fal_client_mock, api_config):
    """A sync-style call returns the vendor's images and the enqueued request id."""
    mock_fal_client, client = fal_client_mock

    async def fake_subscribe(endpoint, arguments, with_logs, on_enqueue, on_queue_update):
        on_enqueue("req-123")
        on_queue_update(InProgress(logs=[{"message": "step 1/20"}]))
        return {"images": [{"url": "https://x/cat.png"}]}

    client.subscribe = AsyncMock(side_effect=fake_subscribe)

    provider = FalProvider(api_config)
    result = await provider.generate_image(
        ImageGenerationRequest(prompt="cat", image_size=ImageSize.SQUARE, num_images=1)
    )

    assert [image.url for image in result.images] == ["https://x/cat.png"]
    assert result.seed is None
    assert result.request_id == "req-123"
    mock_fal_client.AsyncClient.assert_called_once_with(key="test-key")

    args, kwargs = client.subscribe.call_args
    assert args[0] == TEXT_TO_IMAGE_ENDPOINT
    assert kwargs["arguments"] == {"prompt": "cat", "image_size": "square", "num_images": 1}
    assert kwargs["with_logs"] is True


@pytest.mark.asyncio
async def test_fal_provider_maps_image_metadata(fal_client_mock, api_config):
    _, client = fal_client_mock
    client.subscribe = AsyncMock(
        return_value={
            "images": [
                {
                    "url": "https://fal.media/a.png",
                    "width": 2048,
                    "height": 2048,
                    "content_type": "image/png",
                    "file_name": "a.png",
                    "file_size": 1234,
                }
            ],
            "seed": 42,
        }
    )

    provider = FalProvider(api_config)
    result = await provider.generate_image(
        ImageGenerationRequest(prompt="a red dragon", image_size=CustomImageSize(width=2048, height=2048), seed=42)
    )

    image = result.images[0]
    assert (image.width, image.height) == (2048, 2048)
    assert image.content_type == "image/png"
    assert image.file_name == "a.png"
    assert image.file_size == 1234
    assert result.seed == 42
    assert client.subscribe.call_args.kwargs["arguments"]["image_size"] == {"width": 2048, "height": 2048}


@pytest.mark.asyncio
async def test_fal_provider_edit_forwards_image_urls(fal_client_mock, api_config):
    _, client = fal_client_mock
    client.subscribe = AsyncMock(return_value={"images": [{"url": "https://fal.media/edited.png"}]})

    provider = FalProvider(api_config)
    await provider.edit_image(
        ImageEditRequest(prompt="make it blue", image_urls=["https://x/1.png", "https://x/2.png"])
    )

    args, kwargs = client.subscribe.call_args
    assert args[0] == EDIT_ENDPOINT
    assert kwargs["arguments"]["image_urls"] == ["https://x/1.png", "https://x/2.png"]


@pytest.mark.asyncio
async def test_fal_provider_rejects_oversized_edit_before_network(fal_client_mock, api_config):
    """Seven source images against a cap of six never reach the vendor."""
    _, client = fal_client_mock
    client.subscribe = AsyncMock()

    provider = FalProvider(api_config)
    request = ImageEditRequest(prompt="merge", image_urls=[f"https://x/{i}.png" for i in range(7)])

    with pytest.raises(ValidationError, match="maximum 6"):
        await provider.edit_image(request)

    client.subscribe.assert_not_awaited()


@pytest.mark.asyncio
async def test_fal_provider_rejects_out_of_range_custom_size(fal_client_mock, api_config):
    _, client = fal_client_mock
    client.subscribe = AsyncMock()

    provider = FalProvider(api_config)
    with pytest.raises(ValidationError):
        await provider.generate_image(
            ImageGenerationRequest(prompt="cat", image_size=CustomImageSize(width=512, height=1024))
        )
    client.subscribe.assert_not_awaited()


@pytest.mark.asyncio
async def test_fal_provider_generate_timeout(fal_client_mock, api_config):
    """Timeouts are re-wrapped as ProviderError with a timeout code."""
    _, client = fal_client_mock
    client.subscribe = AsyncMock(side_effect=TimeoutError("Request timed out"))

    provider = FalProvider(api_config)
    with pytest.raises(ProviderError) as exc_info:
        await provider.generate_image(ImageGenerationRequest(prompt="A red dragon"))

    assert exc_info.value.error_code == ErrorCode.PROVIDER_TIMEOUT
    assert exc_info.value.retryable is True
    assert "timed out" in exc_info.value.message.lower()


@pytest.mark.asyncio
async def test_fal_provider_http_error_carries_status(fal_client_mock, api_config):
    _, client = fal_client_mock
    error = httpx.HTTPStatusError(
        "rate limited",
        request=httpx.Request("POST", "https://queue.fal.run"),
        response=httpx.Response(429, text="slow down"),
    )
    client.subscribe = AsyncMock(side_effect=error)

    provider = FalProvider(api_config)
    with pytest.raises(ProviderError) as exc_info:
        await provider.generate_image(ImageGenerationRequest(prompt="cat"))

    assert exc_info.value.status_code == 429
    assert exc_info.value.error_code == ErrorCode.RATE_LIMITED
    assert exc_info.value.body == "slow down"
    assert exc_info.value.original_exception is error


@pytest.mark.asyncio
async def test_fal_provider_unexpected_result_shape(fal_client_mock, api_config):
    _, client = fal_client_mock
    client.subscribe = AsyncMock(return_value={"detail": "nope"})

    provider = FalProvider(api_config)
    with pytest.raises(ProviderError, match="images"):
        await provider.generate_image(ImageGenerationRequest(prompt="cat"))


@pytest.mark.asyncio
async def test_fal_provider_queue_operations(fal_client_mock, api_config):
    _, client = fal_client_mock
    handle = MagicMock()
    handle.request_id = "req-9"
    client.submit = AsyncMock(return_value=handle)
    client.status = AsyncMock(
        side_effect=[
            Queued(position=3),
            InProgress(logs=[{"message": "denoising"}]),
            Completed(logs=[], metrics={}),
        ]
    )
    client.result = AsyncMock(return_value={"images": [{"url": "https://fal.media/q.png"}], "seed": 7})

    provider = FalProvider(api_config)
    submitted = await provider.submit_generation(ImageGenerationRequest(prompt="cat"))
    assert submitted.request_id == "req-9"

    statuses = [await provider.get_queue_status("req-9") for _ in range(3)]
    assert [s.status for s in statuses] == [QueueState.QUEUED, QueueState.IN_PROGRESS, QueueState.COMPLETED]
    assert statuses[1].logs == ["denoising"]
    client.status.assert_awaited_with(TEXT_TO_IMAGE_ENDPOINT, "req-9", with_logs=True)

    result = await provider.get_result("req-9")
    assert result.images[0].url == "https://fal.media/q.png"
    assert result.request_id == "req-9"
    assert result.seed == 7


@pytest.mark.asyncio
async def test_fal_provider_upload_file(fal_client_mock, api_config):
    _, client = fal_client_mock
    client.upload = AsyncMock(return_value="https://fal.media/files/source.png")

    provider = FalProvider(api_config)
    url = await provider.upload_file(FileUpload(data=b"png", content_type="image/png", file_name="source.png"))

    assert url == "https://fal.media/files/source.png"
    client.upload.assert_awaited_once_with(b"png", "image/png", file_name="source.png")


def test_fal_provider_capabilities(fal_client_mock, api_config):
    provider = FalProvider(api_config)

    assert provider.supports_queue() is True
    assert provider.supports_file_upload() is True
    assert provider.supports_sequential() is False
