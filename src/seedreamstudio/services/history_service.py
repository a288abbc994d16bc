"""Image history and API key persistence for the calling layer."""

import json
import logging
import time
from enum import Enum

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from seedreamstudio.interfaces import KeyValueStore
from seedreamstudio.models.responses import ImageGenerationResponse

logger = logging.getLogger(__name__)

API_KEY_STORAGE_KEY = "seedream_api_key"
HISTORY_STORAGE_KEY = "seedream_saved_images"
DEFAULT_HISTORY_LIMIT = 20


class GenerationMode(str, Enum):
    """Studio mode that produced an image."""

    GENERATE = "generate"
    EDIT = "edit"
    SEQUENTIAL_EDIT = "sequential_edit"
    SEQUENTIAL_GENERATE = "sequential_generate"


class SavedImage(BaseModel):
    """A history entry."""

    url: str
    prompt: str
    timestamp: int = Field(..., description="Milliseconds since the epoch; doubles as the entry id")
    mode: GenerationMode


_history_adapter = TypeAdapter(list[SavedImage])


class ApiKeyStore:
    """Persists the user's API key."""

    def __init__(self, store: KeyValueStore, key: str = API_KEY_STORAGE_KEY):
        self._store = store
        self._key = key

    def load(self) -> str:
        return self._store.get(self._key) or ""

    def save(self, value: str) -> None:
        """Store the key; a blank value removes it."""
        if value.strip():
            self._store.set(self._key, value)
        else:
            self._store.delete(self._key)

    def clear(self) -> None:
        self._store.delete(self._key)


class ImageHistory:
    """Newest-first list of generated images, capped at ``limit`` entries."""

    def __init__(
        self,
        store: KeyValueStore,
        limit: int = DEFAULT_HISTORY_LIMIT,
        key: str = HISTORY_STORAGE_KEY,
    ):
        self._store = store
        self._limit = limit
        self._key = key

    def load(self) -> list[SavedImage]:
        raw = self._store.get(self._key)
        if not raw:
            return []
        try:
            return _history_adapter.validate_json(raw)
        except PydanticValidationError as e:
            logger.error(f"Error parsing saved images, clearing history: {e}")
            self._store.delete(self._key)
            return []

    def _write(self, images: list[SavedImage]) -> None:
        self._store.set(self._key, json.dumps([image.model_dump(mode="json") for image in images]))

    def save(self, url: str, prompt: str, mode: GenerationMode) -> SavedImage:
        """Prepend an image to the history and persist it."""
        return self.save_many([url], prompt, mode)[0]

    def save_response(
        self, response: ImageGenerationResponse, prompt: str, mode: GenerationMode
    ) -> list[SavedImage]:
        """Record every image of a response. Pending responses record nothing."""
        return self.save_many([image.url for image in response.images], prompt, mode)

    def save_many(self, urls: list[str], prompt: str, mode: GenerationMode) -> list[SavedImage]:
        if not urls:
            return []
        existing = self.load()
        # Timestamps identify entries, so keep them unique within a batch and against history
        base = max([int(time.time() * 1000)] + [image.timestamp + 1 for image in existing])
        new_images = [
            SavedImage(url=url, prompt=prompt, timestamp=base + offset, mode=mode)
            for offset, url in enumerate(urls)
        ]
        new_images.reverse()
        self._write((new_images + existing)[: self._limit])
        return new_images

    def remove(self, timestamp: int) -> None:
        self._write([image for image in self.load() if image.timestamp != timestamp])

    def clear(self) -> None:
        self._store.delete(self._key)
