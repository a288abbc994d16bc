"""Replicate image generation provider."""

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
)
from seedreamstudio.services.poll_service import poll_until_complete
from seedreamstudio.utils.size_utils import (
    check_size_table,
    clamp,
    clamp_custom_size,
    require_at_most,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.replicate.com/v1"

# bytedance/seedream-4
MODEL_VERSION = "a5b6d65516c0f279e518a6151d3844758b347a95164ead571533a58a1a6c611d"

# Replicate accepts Prefer: wait=1..60
MAX_WAIT_SECONDS = 60
WAIT_MARGIN_SECONDS = 5

DEFAULT_SIZE = ("2K", "1:1")
# Named preset -> (size, aspect_ratio)
SIZE_TABLE = check_size_table(
    {
        ImageSize.SQUARE: ("1K", "1:1"),
        ImageSize.SQUARE_HD: ("2K", "1:1"),
        ImageSize.PORTRAIT_4_3: ("2K", "3:4"),
        ImageSize.PORTRAIT_16_9: ("2K", "9:16"),
        ImageSize.LANDSCAPE_4_3: ("2K", "4:3"),
        ImageSize.LANDSCAPE_16_9: ("2K", "16:9"),
    },
    "replicate",
)

STATUS_MAP = {
    "starting": QueueState.QUEUED,
    "processing": QueueState.IN_PROGRESS,
    "succeeded": QueueState.COMPLETED,
    "failed": QueueState.FAILED,
    "canceled": QueueState.FAILED,
}


class ReplicateProvider(QueueCapable, SequentialCapable, ImageProvider):
    """
    Image provider using Replicate predictions.

    Out-of-range custom dimensions and image counts are clamped into the
    model's legal ranges rather than rejected.
    """

    provider_type = ProviderType.REPLICATE

    def __init__(self, config: ApiConfig):
        super().__init__(config)
        self.base_url = (config.base_url or DEFAULT_BASE_URL).rstrip("/")

    def _headers(self, wait: bool = False) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }
        if wait:
            headers["Prefer"] = f"wait={self._wait_seconds()}"
        return headers

    def _wait_seconds(self) -> int:
        """Server-side hold for a blocking create, kept below the HTTP read timeout.

        A prediction still running when the hold ends comes back with its id and
        is polled, instead of being lost to a client timeout.
        """
        return clamp(int(self.config.timeout_seconds) - WAIT_MARGIN_SECONDS, 1, MAX_WAIT_SECONDS)

    def _size_params(self, size: ImageSizeSpec | None) -> dict[str, Any]:
        if isinstance(size, CustomImageSize):
            limits = self.provider_config
            clamped = clamp_custom_size(size, limits.min_dimension, limits.max_dimension)
            return {"size": "custom", "width": clamped.width, "height": clamped.height}
        token, aspect_ratio = SIZE_TABLE[size] if size is not None else DEFAULT_SIZE
        return {"size": token, "aspect_ratio": aspect_ratio}

    def _build_input(self, request: Any, count: int | None, sequential: bool) -> dict[str, Any]:
        params: dict[str, Any] = {
            "prompt": request.prompt,
            "max_images": clamp(count or 1, 1, self.provider_config.max_sequential_images),
            "sequential_image_generation": "auto" if sequential else "disabled",
            **self._size_params(request.image_size),
        }
        image_urls = getattr(request, "image_urls", None)
        if image_urls:
            require_at_most(len(image_urls), self.provider_config.max_input_images, "input images", self.name)
            params["image_input"] = image_urls
        if request.seed is not None:
            params["seed"] = request.seed
        return params

    async def _create_prediction(self, params: dict[str, Any], wait: bool, operation: str) -> dict[str, Any]:
        logger.debug(f"[replicate] {operation} ({sorted(params)})")
        with self._vendor_errors(operation):
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                response = await client.post(
                    f"{self.base_url}/predictions",
                    headers=self._headers(wait=wait),
                    json={"version": MODEL_VERSION, "input": params},
                )
            check_http_response(self.name, response)
            return self._prediction(response.json())

    async def _get_prediction(self, request_id: str, operation: str) -> dict[str, Any]:
        with self._vendor_errors(operation):
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                response = await client.get(f"{self.base_url}/predictions/{request_id}", headers=self._headers())
            check_http_response(self.name, response)
            return self._prediction(response.json())

    def _prediction(self, body: Any) -> dict[str, Any]:
        if not isinstance(body, dict):
            raise ProviderError(self.name, "prediction response was not a JSON object")
        return body

    def _images(self, prediction: dict[str, Any]) -> list[GeneratedImage]:
        output = prediction.get("output")
        if isinstance(output, str):
            output = [output]
        if not isinstance(output, list) or not output:
            raise ProviderError(self.name, "Invalid response from Replicate API")
        return [GeneratedImage(url=url) for url in output]

    async def _run(self, params: dict[str, Any], seed: int | None, operation: str) -> ImageGenerationResponse:
        """Create a prediction and block until it finishes."""
        prediction = await self._create_prediction(params, wait=True, operation=operation)
        request_id = prediction.get("id")
        status = prediction.get("status")

        if status not in ("succeeded", "failed", "canceled"):
            if not request_id:
                raise ProviderError(self.name, "prediction response did not contain an id")
            await poll_until_complete(
                self.get_queue_status,
                request_id,
                provider=self.name,
                config=self.poll_config,
            )
            prediction = await self._get_prediction(request_id, operation)
            status = prediction.get("status")

        if status in ("failed", "canceled"):
            raise GenerationFailed(self.name, prediction.get("error") or status, request_id=request_id)

        return ImageGenerationResponse(images=self._images(prediction), seed=seed, request_id=request_id)

    async def generate_image(self, request: ImageGenerationRequest) -> ImageGenerationResponse:
        params = self._build_input(request, request.num_images, sequential=False)
        return await self._run(params, request.seed, "generate_image")

    async def edit_image(self, request: ImageEditRequest) -> ImageGenerationResponse:
        params = self._build_input(request, request.num_images, sequential=False)
        return await self._run(params, request.seed, "edit_image")

    async def sequential_generate(self, request: SequentialGenerateRequest) -> ImageGenerationResponse:
        params = self._build_input(request, request.max_images, sequential=True)
        return await self._run(params, request.seed, "sequential_generate")

    async def sequential_edit(self, request: SequentialEditRequest) -> ImageGenerationResponse:
        params = self._build_input(request, request.max_images, sequential=True)
        return await self._run(params, request.seed, "sequential_edit")

    async def submit_generation(self, request: ImageGenerationRequest) -> SubmissionResult:
        params = self._build_input(request, request.num_images, sequential=False)
        prediction = await self._create_prediction(params, wait=False, operation="submit_generation")
        if not prediction.get("id"):
            raise ProviderError(self.name, "prediction response did not contain an id")
        return SubmissionResult(request_id=prediction["id"])

    async def get_queue_status(self, request_id: str) -> QueueStatus:
        prediction = await self._get_prediction(request_id, "get_queue_status")
        logs = prediction.get("logs") or ""
        return QueueStatus(
            status=STATUS_MAP.get(prediction.get("status"), QueueState.QUEUED),
            logs=[line for line in logs.split("\n") if line],
            error=prediction.get("error") or None,
        )

    async def get_result(self, request_id: str) -> ImageGenerationResponse:
        prediction = await self._get_prediction(request_id, "get_result")
        status = prediction.get("status")
        if status in ("failed", "canceled"):
            raise GenerationFailed(self.name, prediction.get("error") or status, request_id=request_id)
        if status != "succeeded":
            raise ProviderError(
                self.name,
                f"Prediction not successful or output is invalid. Status: {status}",
            )
        return ImageGenerationResponse(images=self._images(prediction), request_id=request_id)
