"""Tests for the reference provider."""

import pytest

from seedreamstudio.models.errors import UnsupportedOperation, ValidationError
from seedreamstudio.models.requests import (
    FileUpload,
    ImageEditRequest,
    ImageGenerationRequest,
    SequentialEditRequest,
    SequentialGenerateRequest,
)
from seedreamstudio.providers.template_provider import PLACEHOLDER_URL, TemplateProvider


@pytest.mark.asyncio
async def test_generate_returns_placeholder(api_config):
    provider = TemplateProvider(api_config)

    result = await provider.generate_image(ImageGenerationRequest(prompt="cat", seed=3))

    assert result.images[0].url == PLACEHOLDER_URL
    assert result.seed == 3
    assert result.request_id == "example-request-id"


@pytest.mark.asyncio
async def test_edit_checks_input_limit(api_config):
    provider = TemplateProvider(api_config)

    with pytest.raises(ValidationError):
        await provider.edit_image(
            ImageEditRequest(prompt="merge", image_urls=[f"https://x/{i}.png" for i in range(7)])
        )


@pytest.mark.asyncio
async def test_optional_operations_are_unsupported(api_config):
    provider = TemplateProvider(api_config)

    calls = {
        "sequential_edit": provider.sequential_edit(SequentialEditRequest(prompt="a")),
        "sequential_generate": provider.sequential_generate(SequentialGenerateRequest(prompt="a")),
        "submit_generation": provider.submit_generation(ImageGenerationRequest(prompt="a")),
        "get_queue_status": provider.get_queue_status("r1"),
        "get_result": provider.get_result("r1"),
        "upload_file": provider.upload_file(FileUpload(data=b"x")),
    }
    for operation, call in calls.items():
        with pytest.raises(UnsupportedOperation) as exc_info:
            await call
        assert exc_info.value.provider == "template"
        assert exc_info.value.operation == operation


def test_template_declares_no_optional_capabilities(api_config):
    provider = TemplateProvider(api_config)

    assert provider.supports_queue() is False
    assert provider.supports_sequential() is False
    assert provider.supports_file_upload() is False


def test_template_provider_is_exported():
    import seedreamstudio

    assert seedreamstudio.TemplateProvider is TemplateProvider
    assert "TemplateProvider" in seedreamstudio.__all__
