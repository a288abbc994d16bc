"""Fal.ai image generation provider."""

import logging
from typing import Any

import fal_client
from fal_client import Completed, InProgress, Queued

from seedreamstudio.config import ApiConfig, ProviderType
from seedreamstudio.models.errors import ProviderError
from seedreamstudio.models.requests import (
    CustomImageSize,
    FileUpload,
    ImageEditRequest,
    ImageGenerationRequest,
    ImageSize,
    ImageSizeSpec,
)
from seedreamstudio.models.responses import (
    GeneratedImage,
    ImageGenerationResponse,
    QueueState,
    QueueStatus,
    SubmissionResult,
)
from seedreamstudio.providers.base import FileUploadCapable, ImageProvider, QueueCapable
from seedreamstudio.utils.size_utils import check_size_table, require_custom_size_in_bounds

logger = logging.getLogger(__name__)

TEXT_TO_IMAGE_ENDPOINT = "fal-ai/bytedance/seedream/v4/text-to-image"
EDIT_ENDPOINT = "fal-ai/bytedance/seedream/v4/edit"

# Fal accepts the studio's preset names verbatim
SIZE_TABLE = check_size_table({size: size.value for size in ImageSize}, "fal")


class FalProvider(QueueCapable, FileUploadCapable, ImageProvider):
    """Image provider using the Fal.ai queue-backed SDK."""

    provider_type = ProviderType.FAL

    def __init__(self, config: ApiConfig):
        """
        Initialize Fal provider.

        Args:
            config: API configuration; ``api_key`` is the Fal key
        """
        super().__init__(config)
        self._client = fal_client.AsyncClient(key=config.api_key)

    def _image_size(self, size: ImageSizeSpec | None) -> str | dict[str, int] | None:
        if size is None:
            return None
        if isinstance(size, CustomImageSize):
            limits = self.provider_config
            require_custom_size_in_bounds(size, limits.min_dimension, limits.max_dimension, self.name)
            return {"width": size.width, "height": size.height}
        return SIZE_TABLE[size]

    def _arguments(self, request: ImageGenerationRequest | ImageEditRequest) -> dict[str, Any]:
        arguments: dict[str, Any] = {
            "prompt": request.prompt,
            "image_size": self._image_size(request.image_size),
            "num_images": self._num_images(request.num_images),
            "seed": request.seed,
            "sync_mode": request.sync_mode,
        }
        if isinstance(request, ImageEditRequest):
            self._check_input_images(request.image_urls)
            arguments["image_urls"] = request.image_urls
        return {key: value for key, value in arguments.items() if value is not None}

    def _on_queue_update(self, update: Any) -> None:
        if isinstance(update, InProgress):
            for log in update.logs or []:
                logger.info(f"[fal] {log.get('message', '')}")

    def _to_response(self, result: Any, request_id: str | None) -> ImageGenerationResponse:
        if not isinstance(result, dict) or not isinstance(result.get("images"), list):
            raise ProviderError(self.name, "response did not contain an images list")

        images = [
            GeneratedImage(
                url=image["url"],
                width=image.get("width"),
                height=image.get("height"),
                content_type=image.get("content_type"),
                file_name=image.get("file_name"),
                file_size=image.get("file_size"),
            )
            for image in result["images"]
            if image.get("url")
        ]
        return ImageGenerationResponse(images=images, seed=result.get("seed"), request_id=request_id)

    async def _subscribe(self, endpoint: str, arguments: dict[str, Any], operation: str) -> ImageGenerationResponse:
        request_ids: list[str] = []
        logger.debug(f"[fal] {operation} -> {endpoint} ({sorted(arguments)})")

        with self._vendor_errors(operation):
            result = await self._client.subscribe(
                endpoint,
                arguments=arguments,
                with_logs=True,
                on_enqueue=request_ids.append,
                on_queue_update=self._on_queue_update,
            )
            return self._to_response(result, request_ids[0] if request_ids else None)

    async def generate_image(self, request: ImageGenerationRequest) -> ImageGenerationResponse:
        return await self._subscribe(TEXT_TO_IMAGE_ENDPOINT, self._arguments(request), "generate_image")

    async def edit_image(self, request: ImageEditRequest) -> ImageGenerationResponse:
        return await self._subscribe(EDIT_ENDPOINT, self._arguments(request), "edit_image")

    async def submit_generation(self, request: ImageGenerationRequest) -> SubmissionResult:
        arguments = self._arguments(request)
        with self._vendor_errors("submit_generation"):
            handle = await self._client.submit(TEXT_TO_IMAGE_ENDPOINT, arguments=arguments)
            return SubmissionResult(request_id=handle.request_id)

    async def get_queue_status(self, request_id: str) -> QueueStatus:
        with self._vendor_errors("get_queue_status"):
            status = await self._client.status(TEXT_TO_IMAGE_ENDPOINT, request_id, with_logs=True)

        logs = [log.get("message", "") for log in getattr(status, "logs", None) or []]
        if isinstance(status, Queued):
            return QueueStatus(status=QueueState.QUEUED, logs=logs)
        if isinstance(status, InProgress):
            return QueueStatus(status=QueueState.IN_PROGRESS, logs=logs)
        if isinstance(status, Completed):
            error = getattr(status, "error", None)
            if error:
                return QueueStatus(status=QueueState.FAILED, logs=logs, error=str(error))
            return QueueStatus(status=QueueState.COMPLETED, logs=logs, progress=100.0)
        raise ProviderError(self.name, f"unexpected queue status: {status!r}")

    async def get_result(self, request_id: str) -> ImageGenerationResponse:
        with self._vendor_errors("get_result"):
            result = await self._client.result(TEXT_TO_IMAGE_ENDPOINT, request_id)
            return self._to_response(result, request_id)

    async def upload_file(self, file: FileUpload) -> str:
        with self._vendor_errors("upload_file"):
            url = await self._client.upload(file.data, file.content_type, file_name=file.file_name)
        logger.debug(f"[fal] uploaded {file.file_name or 'file'} ({len(file.data)} bytes)")
        return url
