"""Provider identifiers, API configuration and static provider capability table."""

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from seedreamstudio.models.errors import UnsupportedProvider, ValidationError


class ProviderType(str, Enum):
    """Registered image generation providers."""

    FAL = "fal"
    WAVESPEED = "wavespeed"
    REPLICATE = "replicate"


class ApiConfig(BaseModel):
    """Per-client configuration handed to an adapter at construction time."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1, repr=False, description="Vendor API key")
    base_url: Optional[str] = Field(None, description="Override for the vendor API base URL")
    timeout_seconds: float = Field(60.0, gt=0, description="HTTP timeout per request")
    poll_interval_seconds: float = Field(0.1, ge=0, description="Delay between status checks")
    max_poll_attempts: int = Field(300, ge=1, description="Status checks before giving up")

    @classmethod
    def from_env(cls, provider_type: "ProviderType | str", **overrides) -> "ApiConfig":
        """
        Build a config from the provider's API key environment variable.

        Args:
            provider_type: Provider whose key should be loaded
            **overrides: Any other ApiConfig field

        Raises:
            ValidationError: If the environment variable is unset or empty
        """
        try:
            provider_type = ProviderType(provider_type)
        except ValueError:
            raise UnsupportedProvider(provider_type, [p.value for p in ProviderType])

        env_var = API_KEY_ENV_VARS[provider_type]
        api_key = os.getenv(env_var)
        if not api_key:
            raise ValidationError(f"{env_var} environment variable or api_key parameter is required")
        return cls(api_key=api_key, **overrides)


API_KEY_ENV_VARS: dict[ProviderType, str] = {
    ProviderType.FAL: "FAL_KEY",
    ProviderType.WAVESPEED: "WAVESPEED_API_KEY",
    ProviderType.REPLICATE: "REPLICATE_API_TOKEN",
}


class ProviderConfig(BaseModel):
    """Static description of a provider's capabilities and limits. Never mutated."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    description: str
    supports_text_to_image: bool = True
    supports_image_edit: bool = True
    supports_file_upload: bool = False
    supports_queue: bool = False
    supports_sequential: bool = False
    api_key_required: bool = True
    max_input_images: int = Field(..., ge=1, description="Source images accepted by one edit")
    max_num_images: int = Field(..., ge=1, description="Images returned by one generate/edit")
    max_sequential_images: Optional[int] = Field(None, ge=1, description="Ceiling for max_images")
    min_dimension: int = Field(1024, ge=1, description="Smallest legal custom width/height")
    max_dimension: int = Field(4096, ge=1, description="Largest legal custom width/height")
    supported_formats: tuple[str, ...] = ("JPEG", "PNG", "WebP")


PROVIDER_CONFIGS: dict[ProviderType, ProviderConfig] = {
    ProviderType.FAL: ProviderConfig(
        name="fal",
        display_name="FAL AI",
        description="Bytedance Seedream v4 via FAL AI - Generate 1-6 images per request",
        supports_file_upload=True,
        supports_queue=True,
        max_input_images=6,
        max_num_images=6,
    ),
    ProviderType.WAVESPEED: ProviderConfig(
        name="wavespeed",
        display_name="WavespeedAI",
        description="Bytedance Seedream v4 via WavespeedAI - Ultra-fast inference (1.8s for 2K images)",
        supports_queue=True,
        supports_sequential=True,
        max_input_images=10,
        max_num_images=1,
        max_sequential_images=15,
    ),
    ProviderType.REPLICATE: ProviderConfig(
        name="replicate",
        display_name="Replicate",
        description="Bytedance Seedream 4 on the Replicate platform",
        supports_queue=True,
        supports_sequential=True,
        max_input_images=10,
        max_num_images=15,
        max_sequential_images=15,
    ),
}


def get_provider_config(provider_type: "ProviderType | str") -> ProviderConfig:
    """Look up the static config for a provider."""
    try:
        return PROVIDER_CONFIGS[ProviderType(provider_type)]
    except (ValueError, KeyError):
        raise UnsupportedProvider(provider_type, [p.value for p in PROVIDER_CONFIGS])
