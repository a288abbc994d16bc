"""Inline (data: URL) encoding for files a provider cannot host."""

import base64

from seedreamstudio.models.requests import FileUpload

DATA_URL_PREFIX = "data:"


def to_data_url(file: FileUpload) -> str:
    """
    Encode a file as a base64 data URL.

    Vendors that accept image URLs also accept data URLs, so this is the
    fallback when the active provider has no hosted upload.
    """
    encoded = base64.b64encode(file.data).decode("ascii")
    return f"{DATA_URL_PREFIX}{file.content_type};base64,{encoded}"


def is_inline_url(url: str) -> bool:
    """True for a data: URL, False for a hosted URL."""
    return url.startswith(DATA_URL_PREFIX)
