"""Unified client that can switch between image providers."""

import logging
from typing import Callable, NamedTuple

from seedreamstudio.config import ApiConfig, ProviderType
from seedreamstudio.factory import ApiProviderFactory
from seedreamstudio.models.errors import UnsupportedOperation
from seedreamstudio.models.requests import (
    FileUpload,
    ImageEditRequest,
    ImageGenerationRequest,
    SequentialEditRequest,
    SequentialGenerateRequest,
)
from seedreamstudio.models.responses import ImageGenerationResponse, QueueStatus, SubmissionResult
from seedreamstudio.providers.base import ImageProvider
from seedreamstudio.services.upload_service import to_data_url

logger = logging.getLogger(__name__)


class _ActiveProvider(NamedTuple):
    provider_type: ProviderType
    adapter: ImageProvider


class SeedreamApiClient:
    """
    Single entry point for the studio: forwards every operation to the active
    provider adapter.

    Adapter errors are never caught here; they reach the caller unchanged so it
    can branch on the error type.
    """

    def __init__(self, provider_type: ProviderType | str, config: ApiConfig):
        self._active = self._build(provider_type, config)

    @staticmethod
    def _build(provider_type: ProviderType | str, config: ApiConfig) -> _ActiveProvider:
        adapter = ApiProviderFactory.create(provider_type, config)
        return _ActiveProvider(adapter.provider_type, adapter)

    def switch_provider(self, provider_type: ProviderType | str, config: ApiConfig) -> None:
        """Replace the active provider. On failure the previous provider stays active."""
        active = self._build(provider_type, config)
        self._active = active
        logger.info(f"Switched image provider to {active.provider_type.value}")

    def get_current_provider(self) -> ProviderType:
        return self._active.provider_type

    @property
    def provider(self) -> ImageProvider:
        return self._active.adapter

    # Main API methods

    async def generate_image(self, request: ImageGenerationRequest) -> ImageGenerationResponse:
        return await self._active.adapter.generate_image(request)

    async def edit_image(self, request: ImageEditRequest) -> ImageGenerationResponse:
        return await self._active.adapter.edit_image(request)

    async def sequential_edit(self, request: SequentialEditRequest) -> ImageGenerationResponse:
        adapter = self._require("sequential_edit", ImageProvider.supports_sequential)
        return await adapter.sequential_edit(request)

    async def sequential_generate(self, request: SequentialGenerateRequest) -> ImageGenerationResponse:
        adapter = self._require("sequential_generate", ImageProvider.supports_sequential)
        return await adapter.sequential_generate(request)

    # Queue methods (if supported by provider)

    async def submit_generation(self, request: ImageGenerationRequest) -> SubmissionResult:
        adapter = self._require("submit_generation", ImageProvider.supports_queue)
        return await adapter.submit_generation(request)

    async def get_queue_status(self, request_id: str) -> QueueStatus:
        adapter = self._require("get_queue_status", ImageProvider.supports_queue)
        return await adapter.get_queue_status(request_id)

    async def get_result(self, request_id: str) -> ImageGenerationResponse:
        adapter = self._require("get_result", ImageProvider.supports_queue)
        return await adapter.get_result(request_id)

    async def upload_file(self, file: FileUpload, inline_fallback: bool = True) -> str:
        """
        Upload a file for use as an edit source.

        Returns the provider-hosted URL when the active provider supports
        uploads. Otherwise returns a base64 data URL (see ``is_inline_url``), or
        raises UnsupportedOperation when ``inline_fallback`` is False.
        """
        active = self._active
        if active.adapter.supports_file_upload():
            return await active.adapter.upload_file(file)
        if not inline_fallback:
            raise UnsupportedOperation(active.provider_type.value, "upload_file")
        logger.debug(f"{active.provider_type.value} has no file upload; encoding {file.file_name or 'file'} inline")
        return to_data_url(file)

    # Capability probes, always computed from the current adapter

    def supports_queue(self) -> bool:
        return self._active.adapter.supports_queue()

    def supports_sequential(self) -> bool:
        return self._active.adapter.supports_sequential()

    def supports_file_upload(self) -> bool:
        return self._active.adapter.supports_file_upload()

    def _require(self, operation: str, probe: Callable[[ImageProvider], bool]) -> ImageProvider:
        active = self._active
        if not probe(active.adapter):
            raise UnsupportedOperation(active.provider_type.value, operation)
        return active.adapter
