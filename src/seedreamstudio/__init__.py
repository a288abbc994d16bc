"""Seedream Studio - unified client for multi-provider image generation."""

from seedreamstudio.client import SeedreamApiClient
from seedreamstudio.config import (
    PROVIDER_CONFIGS,
    ApiConfig,
    ProviderConfig,
    ProviderType,
    get_provider_config,
)
from seedreamstudio.factory import ApiProviderFactory
from seedreamstudio.interfaces import KeyValueStore
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
    FileUploadCapable,
    ImageProvider,
    QueueCapable,
    SequentialCapable,
)
from seedreamstudio.providers.template_provider import TemplateProvider
from seedreamstudio.services.history_service import ApiKeyStore, GenerationMode, ImageHistory, SavedImage
from seedreamstudio.services.upload_service import is_inline_url
from seedreamstudio.storage import InMemoryStore, JsonFileStore

__version__ = "0.1.0"

__all__ = [
    # Client and factory
    "SeedreamApiClient",
    "ApiProviderFactory",
    # Configuration
    "ApiConfig",
    "ProviderConfig",
    "ProviderType",
    "PROVIDER_CONFIGS",
    "get_provider_config",
    # Request types
    "CustomImageSize",
    "FileUpload",
    "ImageEditRequest",
    "ImageGenerationRequest",
    "ImageSize",
    "SequentialEditRequest",
    "SequentialGenerateRequest",
    # Response types
    "GeneratedImage",
    "ImageGenerationResponse",
    "QueueState",
    "QueueStatus",
    "SubmissionResult",
    # Errors
    "ErrorCode",
    "is_retryable",
    "StudioError",
    "ValidationError",
    "ProviderError",
    "UnsupportedOperation",
    "UnsupportedProvider",
    "PollTimeoutError",
    "GenerationFailed",
    # Providers
    "ImageProvider",
    "QueueCapable",
    "SequentialCapable",
    "FileUploadCapable",
    "TemplateProvider",
    # Persistence
    "KeyValueStore",
    "InMemoryStore",
    "JsonFileStore",
    "ApiKeyStore",
    "ImageHistory",
    "SavedImage",
    "GenerationMode",
    # Utilities
    "is_inline_url",
]
