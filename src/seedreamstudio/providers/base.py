"""Base provider interfaces for image generation.

Every adapter implements the ``ImageProvider`` core and mixes in whichever
optional capability interfaces its vendor supports. The core supplies default
implementations of every optional operation that raise ``UnsupportedOperation``,
so an absent capability is always reported the same way.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

import httpx

from seedreamstudio.config import ApiConfig, ProviderConfig, ProviderType, get_provider_config
from seedreamstudio.models.errors import ErrorCode, ProviderError, StudioError, UnsupportedOperation
from seedreamstudio.models.requests import (
    FileUpload,
    ImageEditRequest,
    ImageGenerationRequest,
    SequentialEditRequest,
    SequentialGenerateRequest,
)
from seedreamstudio.models.responses import ImageGenerationResponse, QueueStatus, SubmissionResult
from seedreamstudio.services.poll_service import PollConfig
from seedreamstudio.utils.size_utils import require_at_most

logger = logging.getLogger(__name__)


class ImageProvider(ABC):
    """Required capability set of every provider adapter."""

    provider_type: ProviderType

    def __init__(self, config: ApiConfig):
        self._config = config

    @property
    def config(self) -> ApiConfig:
        return self._config

    @property
    def name(self) -> str:
        return self.provider_type.value

    @property
    def provider_config(self) -> ProviderConfig:
        return get_provider_config(self.provider_type)

    @property
    def poll_config(self) -> PollConfig:
        return PollConfig(
            interval_seconds=self._config.poll_interval_seconds,
            max_attempts=self._config.max_poll_attempts,
        )

    @abstractmethod
    async def generate_image(self, request: ImageGenerationRequest) -> ImageGenerationResponse:
        """Generate images from a text prompt."""

    @abstractmethod
    async def edit_image(self, request: ImageEditRequest) -> ImageGenerationResponse:
        """Edit one or more source images according to a prompt."""

    # Optional capabilities. Concrete capability interfaces below override these.

    async def sequential_edit(self, request: SequentialEditRequest) -> ImageGenerationResponse:
        raise UnsupportedOperation(self.name, "sequential_edit")

    async def sequential_generate(self, request: SequentialGenerateRequest) -> ImageGenerationResponse:
        raise UnsupportedOperation(self.name, "sequential_generate")

    async def submit_generation(self, request: ImageGenerationRequest) -> SubmissionResult:
        raise UnsupportedOperation(self.name, "submit_generation")

    async def get_queue_status(self, request_id: str) -> QueueStatus:
        raise UnsupportedOperation(self.name, "get_queue_status")

    async def get_result(self, request_id: str) -> ImageGenerationResponse:
        raise UnsupportedOperation(self.name, "get_result")

    async def upload_file(self, file: FileUpload) -> str:
        raise UnsupportedOperation(self.name, "upload_file")

    # Capability probes

    def supports_queue(self) -> bool:
        return isinstance(self, QueueCapable)

    def supports_sequential(self) -> bool:
        return isinstance(self, SequentialCapable)

    def supports_file_upload(self) -> bool:
        return isinstance(self, FileUploadCapable)

    # Shared helpers

    def _num_images(self, requested: int | None) -> int:
        count = requested or 1
        require_at_most(count, self.provider_config.max_num_images, "images per request", self.name)
        return count

    def _check_input_images(self, image_urls: list[str]) -> None:
        require_at_most(len(image_urls), self.provider_config.max_input_images, "input images", self.name)

    @contextmanager
    def _vendor_errors(self, operation: str) -> Iterator[None]:
        """
        Translate vendor SDK/HTTP exceptions into the studio error taxonomy.

        Studio errors raised inside the block pass through untouched.
        """
        try:
            yield
        except StudioError:
            raise
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"[{self.name}] {operation} failed with HTTP {status}")
            raise ProviderError(
                self.name,
                f"HTTP {status}: {e.response.text}",
                error_code=error_code_for_status(status),
                status_code=status,
                body=e.response.text,
                original_exception=e,
            )
        except (TimeoutError, httpx.TimeoutException) as e:
            logger.error(f"[{self.name}] {operation} timed out: {e}")
            raise ProviderError(
                self.name,
                f"request timed out: {str(e)}",
                error_code=ErrorCode.PROVIDER_TIMEOUT,
                original_exception=e,
            )
        except Exception as e:
            logger.error(f"[{self.name}] {operation} failed: {e}")
            raise ProviderError(
                self.name,
                f"{operation} failed: {str(e)}",
                error_code=ErrorCode.INTERNAL_ERROR,
                original_exception=e,
            )


class QueueCapable(ABC):
    """Job submission and inspection. Implemented as a complete triple or not at all."""

    @abstractmethod
    async def submit_generation(self, request: ImageGenerationRequest) -> SubmissionResult:
        """Submit a generation job without waiting for it."""

    @abstractmethod
    async def get_queue_status(self, request_id: str) -> QueueStatus:
        """Return the current status of a submitted job."""

    @abstractmethod
    async def get_result(self, request_id: str) -> ImageGenerationResponse:
        """Return the images of a completed job."""


class SequentialCapable(ABC):
    """Batched generation of multiple related images in one request."""

    @abstractmethod
    async def sequential_edit(self, request: SequentialEditRequest) -> ImageGenerationResponse:
        """Produce up to max_images related edits of the optional source images."""

    @abstractmethod
    async def sequential_generate(self, request: SequentialGenerateRequest) -> ImageGenerationResponse:
        """Produce up to max_images related images from text."""


class FileUploadCapable(ABC):
    """Upload of local files to vendor storage."""

    @abstractmethod
    async def upload_file(self, file: FileUpload) -> str:
        """Upload a file and return its hosted URL."""


def error_code_for_status(status_code: int) -> ErrorCode:
    if status_code == 429:
        return ErrorCode.RATE_LIMITED
    if status_code in (401, 403):
        return ErrorCode.AUTHENTICATION_REQUIRED
    if status_code >= 500:
        return ErrorCode.PROVIDER_OVERLOADED
    return ErrorCode.PROVIDER_REJECTED


def check_http_response(provider: str, response: httpx.Response) -> None:
    """Raise ProviderError for a non-2xx HTTP response."""
    if not 200 <= response.status_code < 300:
        raise ProviderError(
            provider,
            f"HTTP {response.status_code}: {response.text}",
            error_code=error_code_for_status(response.status_code),
            status_code=response.status_code,
            body=response.text,
        )
