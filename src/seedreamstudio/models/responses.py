"""Response models for Seedream Studio."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class GeneratedImage(BaseModel):
    """A single image produced by a provider."""

    url: str = Field(..., description="Hosted URL (or data: URL) of the image")
    width: Optional[int] = Field(None, ge=1, description="Image width in pixels")
    height: Optional[int] = Field(None, ge=1, description="Image height in pixels")
    content_type: Optional[str] = Field(None, description="MIME type reported by the provider")
    file_name: Optional[str] = Field(None, description="File name reported by the provider")
    file_size: Optional[int] = Field(None, ge=0, description="Size in bytes reported by the provider")


class ImageGenerationResponse(BaseModel):
    """Normalized response for every generation and edit operation.

    ``images`` is empty when a job was submitted asynchronously and has not
    resolved yet; ``request_id`` is then the handle to poll with.
    """

    images: list[GeneratedImage] = Field(default_factory=list, description="Generated images")
    seed: Optional[int] = Field(None, description="Seed used, when the provider reports it")
    request_id: Optional[str] = Field(None, description="Provider job identifier")


class QueueState(str, Enum):
    """Lifecycle states of a queued provider job."""

    QUEUED = "QUEUED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class QueueStatus(BaseModel):
    """Snapshot of a queued job."""

    status: QueueState
    logs: list[str] = Field(default_factory=list, description="Log lines reported by the provider")
    progress: Optional[float] = Field(None, ge=0.0, le=100.0, description="Progress percentage")
    error: Optional[str] = Field(None, description="Provider error message when status is FAILED")

    @property
    def is_terminal(self) -> bool:
        return self.status in (QueueState.COMPLETED, QueueState.FAILED)


class SubmissionResult(BaseModel):
    """Handle returned when a job is submitted to a provider queue."""

    request_id: str = Field(..., min_length=1)
