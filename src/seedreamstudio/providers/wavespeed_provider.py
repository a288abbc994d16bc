"""WavespeedAI image generation provider.

WavespeedAI is a submit-then-poll API: every POST creates a prediction and
returns its id. In sync mode the adapter polls the prediction until it reaches
a terminal state (100ms interval, 300 checks); otherwise it returns the id
immediately with no images.
"""

import logging
from typing import Any

import httpx

from seedreamstudio.config import ApiConfig, ProviderType
from seedreamstudio.models.errors import GenerationFailed, ProviderError
from seedreamstudio.models.requests import (
    CustomImageSize,
    ImageEditRequest,
    ImageGenerationRequest,
    ImageSize,
    ImageSizeSpec,
    SequentialEditRequest,
    SequentialGenerateRequest,
)
from seedreamstudio.models.responses import (
    GeneratedImage,
    ImageGenerationResponse,
    QueueState,
    QueueStatus,
    SubmissionResult,
)
from seedreamstudio.providers.base import (
    ImageProvider,
    QueueCapable,
    SequentialCapable,
    check_http_response,
    error_code_for_status,
)
from seedreamstudio.services.poll_service import poll_until_complete
from seedreamstudio.utils.size_utils import (
    check_size_table,
    require_at_most,
    require_custom_size_in_bounds,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.wavespeed.ai/api/v3"

TEXT_TO_IMAGE_PATH = "bytedance/seedream-v4"
EDIT_PATH = "bytedance/seedream-v4/edit"
SEQUENTIAL_PATH = "bytedance/seedream-v4/sequential"
EDIT_SEQUENTIAL_PATH = "bytedance/seedream-v4/edit-sequential"

DEFAULT_SIZE = "2048*2048"
SIZE_TABLE = check_size_table(
    {
        ImageSize.SQUARE_HD: "2048*2048",
        ImageSize.SQUARE: "1024*1024",
        ImageSize.PORTRAIT_4_3: "1536*2048",
        ImageSize.PORTRAIT_16_9: "1152*2048",
        ImageSize.LANDSCAPE_4_3: "2048*1536",
        ImageSize.LANDSCAPE_16_9: "2048*1152",
    },
    "wavespeed",
)

STATUS_MAP = {
    "created": QueueState.QUEUED,
    "processing": QueueState.IN_PROGRESS,
    "completed": QueueState.COMPLETED,
    "failed": QueueState.FAILED,
}

PROGRESS_MAP = {
    "completed": 100.0,
    "processing": 50.0,
}


class WavespeedProvider(QueueCapable, SequentialCapable, ImageProvider):
    """Image provider using the WavespeedAI REST API."""

    provider_type = ProviderType.WAVESPEED

    def __init__(self, config: ApiConfig):
        super().__init__(config)
        self.base_url = (config.base_url or DEFAULT_BASE_URL).rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

    def _size(self, size: ImageSizeSpec | None) -> str:
        if size is None:
            return DEFAULT_SIZE
        if isinstance(size, CustomImageSize):
            limits = self.provider_config
            require_custom_size_in_bounds(size, limits.min_dimension, limits.max_dimension, self.name)
            return f"{size.width}*{size.height}"
        return SIZE_TABLE[size]

    def _max_images(self, requested: int | None) -> int:
        count = requested or 1
        require_at_most(count, self.provider_config.max_sequential_images, "sequential images", self.name)
        return count

    def _payload(self, request: Any, sync_mode: bool) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "prompt": request.prompt,
            "size": self._size(request.image_size),
            "seed": request.seed if request.seed is not None else -1,
            "enable_base64_output": False,
            "enable_sync_mode": sync_mode,
        }
        if isinstance(request, (ImageGenerationRequest, ImageEditRequest)):
            # One image per job; larger counts are rejected rather than dropped
            self._num_images(request.num_images)
        image_urls = getattr(request, "image_urls", None)
        if image_urls:
            self._check_input_images(image_urls)
            payload["images"] = image_urls
        if isinstance(request, (SequentialEditRequest, SequentialGenerateRequest)):
            payload["max_images"] = self._max_images(request.max_images)
        return payload

    def _unwrap(self, envelope: Any) -> dict[str, Any]:
        if not isinstance(envelope, dict):
            raise ProviderError(self.name, "response was not a JSON object")
        # Error envelopes carry data: null
        code = envelope.get("code")
        if code != 200:
            raise ProviderError(
                self.name,
                f"API Error: {envelope.get('message')}",
                error_code=error_code_for_status(code) if isinstance(code, int) else None,
                status_code=code if isinstance(code, int) else None,
                body=str(envelope.get("message")),
            )
        if not isinstance(envelope.get("data"), dict):
            raise ProviderError(self.name, "response did not contain a data object")
        return envelope["data"]

    async def _post(self, path: str, payload: dict[str, Any], operation: str) -> dict[str, Any]:
        logger.debug(f"[wavespeed] {operation} -> {path} ({sorted(payload)})")
        with self._vendor_errors(operation):
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                response = await client.post(f"{self.base_url}/{path}", headers=self._headers(), json=payload)
            check_http_response(self.name, response)
            return self._unwrap(response.json())

    async def _fetch_prediction(self, request_id: str, operation: str) -> dict[str, Any]:
        with self._vendor_errors(operation):
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                response = await client.get(
                    f"{self.base_url}/predictions/{request_id}/result",
                    headers={"Authorization": f"Bearer {self.config.api_key}"},
                )
            check_http_response(self.name, response)
            return self._unwrap(response.json())

    def _images(self, data: dict[str, Any]) -> list[GeneratedImage]:
        outputs = data.get("outputs")
        if not isinstance(outputs, list) or not outputs:
            raise ProviderError(self.name, "completed prediction returned no outputs")
        return [GeneratedImage(url=url) for url in outputs]

    async def _run(self, path: str, request: Any, operation: str) -> ImageGenerationResponse:
        sync_mode = bool(request.sync_mode)
        data = await self._post(path, self._payload(request, sync_mode), operation)

        request_id = data.get("id")
        if not request_id:
            raise ProviderError(self.name, "response did not contain a prediction id")

        if not sync_mode:
            return ImageGenerationResponse(images=[], request_id=request_id, seed=request.seed)

        # enable_sync_mode may already have produced the outputs
        if data.get("status") == "completed" and data.get("outputs"):
            return ImageGenerationResponse(images=self._images(data), request_id=request_id, seed=request.seed)
        if data.get("status") == "failed":
            raise GenerationFailed(self.name, data.get("error"), request_id=request_id)

        await poll_until_complete(
            self.get_queue_status,
            request_id,
            provider=self.name,
            config=self.poll_config,
        )
        result = await self.get_result(request_id)
        result.seed = request.seed
        return result

    async def generate_image(self, request: ImageGenerationRequest) -> ImageGenerationResponse:
        return await self._run(TEXT_TO_IMAGE_PATH, request, "generate_image")

    async def edit_image(self, request: ImageEditRequest) -> ImageGenerationResponse:
        return await self._run(EDIT_PATH, request, "edit_image")

    async def sequential_generate(self, request: SequentialGenerateRequest) -> ImageGenerationResponse:
        return await self._run(SEQUENTIAL_PATH, request, "sequential_generate")

    async def sequential_edit(self, request: SequentialEditRequest) -> ImageGenerationResponse:
        # Without source images this is plain sequential generation
        path = EDIT_SEQUENTIAL_PATH if request.image_urls else SEQUENTIAL_PATH
        return await self._run(path, request, "sequential_edit")

    async def submit_generation(self, request: ImageGenerationRequest) -> SubmissionResult:
        result = await self.generate_image(request.model_copy(update={"sync_mode": False}))
        if not result.request_id:
            raise ProviderError(self.name, "Failed to get request ID from WavespeedAI")
        return SubmissionResult(request_id=result.request_id)

    async def get_queue_status(self, request_id: str) -> QueueStatus:
        data = await self._fetch_prediction(request_id, "get_queue_status")
        raw_status = data.get("status")
        return QueueStatus(
            status=STATUS_MAP.get(raw_status, QueueState.QUEUED),
            progress=PROGRESS_MAP.get(raw_status, 0.0),
            error=data.get("error") or None,
        )

    async def get_result(self, request_id: str) -> ImageGenerationResponse:
        data = await self._fetch_prediction(request_id, "get_result")
        status = data.get("status")
        if status == "failed":
            raise GenerationFailed(self.name, data.get("error"), request_id=request_id)
        if status != "completed":
            raise ProviderError(self.name, f"Generation not completed yet. Status: {status}")
        return ImageGenerationResponse(images=self._images(data), request_id=request_id)
