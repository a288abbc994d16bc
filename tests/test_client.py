"""Tests for the unified client."""

import base64

import pytest
from unittest.mock import AsyncMock, patch

from seedreamstudio.client import SeedreamApiClient
from seedreamstudio.config import ApiConfig, ProviderType
from seedreamstudio.models.errors import ProviderError, UnsupportedOperation, UnsupportedProvider
from seedreamstudio.models.requests import (
    FileUpload,
    ImageEditRequest,
    ImageGenerationRequest,
    SequentialEditRequest,
    SequentialGenerateRequest,
)
from seedreamstudio.models.responses import ImageGenerationResponse
from seedreamstudio.providers.template_provider import TemplateProvider
from seedreamstudio.services.upload_service import is_inline_url


def test_client_starts_on_requested_provider(api_config):
    client = SeedreamApiClient(ProviderType.REPLICATE, api_config)

    assert client.get_current_provider() == ProviderType.REPLICATE
    assert client.provider.provider_type == ProviderType.REPLICATE


def test_switch_provider_updates_probes(api_config):
    client = SeedreamApiClient(ProviderType.FAL, api_config)
    assert client.supports_file_upload() is True
    assert client.supports_sequential() is False

    client.switch_provider(ProviderType.WAVESPEED, api_config)

    assert client.get_current_provider() == ProviderType.WAVESPEED
    assert client.supports_queue() is True
    assert client.supports_file_upload() is False
    assert client.supports_sequential() is True


def test_switch_provider_discards_old_adapter(api_config):
    client = SeedreamApiClient(ProviderType.WAVESPEED, api_config)
    old = client.provider
    new_config = ApiConfig(api_key="other-key")

    client.switch_provider(ProviderType.WAVESPEED, new_config)

    assert client.provider is not old
    assert client.provider.config is new_config


def test_failed_switch_keeps_previous_provider(api_config):
    client = SeedreamApiClient(ProviderType.FAL, api_config)
    adapter = client.provider

    with pytest.raises(UnsupportedProvider):
        client.switch_provider("openai", api_config)

    assert client.get_current_provider() == ProviderType.FAL
    assert client.provider is adapter
    assert client.supports_file_upload() is True


def test_constructor_rejects_unknown_provider(api_config):
    with pytest.raises(UnsupportedProvider):
        SeedreamApiClient("midjourney", api_config)


@pytest.mark.asyncio
async def test_generate_and_edit_delegate_to_adapter(api_config):
    client = SeedreamApiClient(ProviderType.REPLICATE, api_config)
    expected = ImageGenerationResponse(images=[{"url": "https://r/1.png"}])

    with patch.object(client.provider, "generate_image", AsyncMock(return_value=expected)) as generate, \
            patch.object(client.provider, "edit_image", AsyncMock(return_value=expected)) as edit:
        request = ImageGenerationRequest(prompt="cat")
        edit_request = ImageEditRequest(prompt="hat", image_urls=["https://x/cat.png"])

        assert await client.generate_image(request) is expected
        assert await client.edit_image(edit_request) is expected

    generate.assert_awaited_once_with(request)
    edit.assert_awaited_once_with(edit_request)


@pytest.mark.asyncio
async def test_sequential_generate_unsupported_names_provider_and_operation(api_config):
    client = SeedreamApiClient(ProviderType.FAL, api_config)

    with pytest.raises(UnsupportedOperation) as exc_info:
        await client.sequential_generate(SequentialGenerateRequest(prompt="storyboard"))

    assert exc_info.value.provider == "fal"
    assert exc_info.value.operation == "sequential_generate"
    assert "fal" in str(exc_info.value)
    assert "sequential_generate" in str(exc_info.value)


@pytest.mark.asyncio
async def test_sequential_edit_unsupported(api_config):
    client = SeedreamApiClient(ProviderType.FAL, api_config)

    with pytest.raises(UnsupportedOperation, match="sequential_edit"):
        await client.sequential_edit(SequentialEditRequest(prompt="storyboard"))


@pytest.mark.asyncio
async def test_sequential_delegates_when_supported(api_config):
    client = SeedreamApiClient(ProviderType.WAVESPEED, api_config)
    expected = ImageGenerationResponse(request_id="s1")

    with patch.object(client.provider, "sequential_generate", AsyncMock(return_value=expected)):
        result = await client.sequential_generate(SequentialGenerateRequest(prompt="storyboard", max_images=3))

    assert result is expected


@pytest.mark.asyncio
async def test_queue_operations_checked_before_delegation(api_config):
    client = SeedreamApiClient(ProviderType.FAL, api_config)
    # A provider without the queue capability
    client._active = client._active._replace(adapter=TemplateProvider(api_config))

    for call in (
        client.submit_generation(ImageGenerationRequest(prompt="cat")),
        client.get_queue_status("r1"),
        client.get_result("r1"),
    ):
        with pytest.raises(UnsupportedOperation):
            await call


@pytest.mark.asyncio
async def test_adapter_errors_propagate_unchanged(api_config):
    client = SeedreamApiClient(ProviderType.WAVESPEED, api_config)
    error = ProviderError("wavespeed", "HTTP 500: down", status_code=500)

    with patch.object(client.provider, "get_queue_status", AsyncMock(side_effect=error)):
        with pytest.raises(ProviderError) as exc_info:
            await client.get_queue_status("r1")

    assert exc_info.value is error


@pytest.mark.asyncio
async def test_upload_file_uses_hosted_upload_when_supported(api_config):
    client = SeedreamApiClient(ProviderType.FAL, api_config)
    upload = FileUpload(data=b"\x89PNG", content_type="image/png", file_name="cat.png")

    with patch.object(client.provider, "upload_file", AsyncMock(return_value="https://fal.media/cat.png")):
        url = await client.upload_file(upload)

    assert url == "https://fal.media/cat.png"
    assert is_inline_url(url) is False


@pytest.mark.asyncio
async def test_upload_file_falls_back_to_data_url(api_config):
    client = SeedreamApiClient(ProviderType.WAVESPEED, api_config)
    upload = FileUpload(data=b"\x89PNG", content_type="image/png", file_name="cat.png")

    url = await client.upload_file(upload)

    assert is_inline_url(url) is True
    assert url == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode("ascii")


@pytest.mark.asyncio
async def test_upload_file_without_fallback_is_unsupported(api_config):
    client = SeedreamApiClient(ProviderType.REPLICATE, api_config)
    upload = FileUpload(data=b"x")

    with pytest.raises(UnsupportedOperation) as exc_info:
        await client.upload_file(upload, inline_fallback=False)

    assert exc_info.value.provider == "replicate"
    assert exc_info.value.operation == "upload_file"
