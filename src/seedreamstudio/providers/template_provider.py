"""Reference provider showing the minimum an adapter must implement.

Copy this module when adding a vendor. It implements only the required core;
every optional operation falls through to ``ImageProvider`` and raises
``UnsupportedOperation``. Mix in ``QueueCapable``, ``SequentialCapable`` or
``FileUploadCapable`` for whatever the vendor actually supports.
"""

from seedreamstudio.config import ProviderType
from seedreamstudio.models.requests import ImageEditRequest, ImageGenerationRequest
from seedreamstudio.models.responses import GeneratedImage, ImageGenerationResponse
from seedreamstudio.providers.base import ImageProvider

PLACEHOLDER_URL = "https://example.com/generated-image.jpg"
PLACEHOLDER_EDIT_URL = "https://example.com/edited-image.jpg"


class TemplateProvider(ImageProvider):
    """No-op provider returning placeholder images."""

    # Borrows FAL's static limits; a real adapter declares its own ProviderType
    provider_type = ProviderType.FAL

    @property
    def name(self) -> str:
        return "template"

    async def generate_image(self, request: ImageGenerationRequest) -> ImageGenerationResponse:
        return ImageGenerationResponse(
            images=[GeneratedImage(url=PLACEHOLDER_URL, width=1024, height=1024)],
            seed=request.seed,
            request_id="example-request-id",
        )

    async def edit_image(self, request: ImageEditRequest) -> ImageGenerationResponse:
        self._check_input_images(request.image_urls)
        return ImageGenerationResponse(
            images=[GeneratedImage(url=PLACEHOLDER_EDIT_URL, width=1024, height=1024)],
            seed=request.seed,
            request_id="example-request-id",
        )
