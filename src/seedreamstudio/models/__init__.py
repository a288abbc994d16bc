"""Models package for Seedream Studio."""

from seedreamstudio.models.errors import (
    ErrorCode,
    GenerationFailed,
    PollTimeoutError,
    ProviderError,
    StudioError,
    UnsupportedOperation,
    UnsupportedProvider,
    ValidationError,
    is_retryable,
)
from seedreamstudio.models.requests import (
    CustomImageSize,
    FileUpload,
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

__all__ = [
    "ErrorCode",
    "is_retryable",
    "StudioError",
    "ValidationError",
    "ProviderError",
    "UnsupportedOperation",
    "UnsupportedProvider",
    "PollTimeoutError",
    "GenerationFailed",
    "CustomImageSize",
    "FileUpload",
    "ImageEditRequest",
    "ImageGenerationRequest",
    "ImageSize",
    "ImageSizeSpec",
    "SequentialEditRequest",
    "SequentialGenerateRequest",
    "GeneratedImage",
    "ImageGenerationResponse",
    "QueueState",
    "QueueStatus",
    "SubmissionResult",
]
