"""Request models shared by every provider adapter."""

import mimetypes
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator


class ImageSize(str, Enum):
    """Named aspect-ratio presets understood by the studio."""

    SQUARE_HD = "square_hd"
    SQUARE = "square"
    PORTRAIT_4_3 = "portrait_4_3"
    PORTRAIT_16_9 = "portrait_16_9"
    LANDSCAPE_4_3 = "landscape_4_3"
    LANDSCAPE_16_9 = "landscape_16_9"


class CustomImageSize(BaseModel):
    """Explicit output dimensions. Legal bounds are enforced per provider."""

    width: int = Field(..., ge=1, description="Output width in pixels")
    height: int = Field(..., ge=1, description="Output height in pixels")


ImageSizeSpec = Union[ImageSize, CustomImageSize]


class _PromptRequest(BaseModel):
    prompt: str = Field(..., min_length=1, description="Text prompt describing the image")
    image_size: Optional[ImageSizeSpec] = Field(None, description="Named preset or custom dimensions")
    seed: Optional[int] = Field(None, description="Seed for reproducible output")
    sync_mode: Optional[bool] = Field(
        None,
        description="Block until the vendor finishes instead of returning a trackable request id",
    )

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt must not be blank")
        return value


class ImageGenerationRequest(_PromptRequest):
    """Request model for text-to-image generation."""

    num_images: Optional[int] = Field(None, ge=1, description="Number of images to generate")


class ImageEditRequest(_PromptRequest):
    """Request model for editing one or more source images."""

    image_urls: list[str] = Field(
        ...,
        min_length=1,
        description="Source images as hosted URLs or data: URLs. Upper bound is provider-specific.",
    )
    num_images: Optional[int] = Field(None, ge=1, description="Number of images to generate")


class SequentialEditRequest(_PromptRequest):
    """Request model for batched, related edits. Source images are optional."""

    image_urls: list[str] = Field(default_factory=list, description="Optional source images")
    max_images: Optional[int] = Field(None, ge=1, description="Upper bound on images to produce")


class SequentialGenerateRequest(_PromptRequest):
    """Request model for a batch of related images generated from text only."""

    max_images: Optional[int] = Field(None, ge=1, description="Upper bound on images to produce")


class FileUpload(BaseModel):
    """Raw file blob handed over by a file picker or drag-and-drop widget."""

    data: bytes = Field(..., description="File contents")
    content_type: str = Field("application/octet-stream", description="MIME type of the file")
    file_name: Optional[str] = Field(None, description="Original file name, if known")

    @classmethod
    def from_path(cls, path: Union[str, Path], content_type: str | None = None) -> "FileUpload":
        """Read a local file, guessing its MIME type from the extension."""
        path = Path(path)
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            data=path.read_bytes(),
            content_type=content_type or guessed or "application/octet-stream",
            file_name=path.name,
        )
