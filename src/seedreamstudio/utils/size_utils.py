"""Helpers for provider size tables and dimension bounds."""

from typing import Mapping, TypeVar

from seedreamstudio.models.errors import ValidationError
from seedreamstudio.models.requests import CustomImageSize, ImageSize

T = TypeVar("T")


def check_size_table(table: Mapping[ImageSize, T], provider: str) -> Mapping[ImageSize, T]:
    """
    Assert that a named-size lookup table covers every ImageSize preset.

    Adapters call this at import time so a missing entry fails loudly instead of
    falling back to an arbitrary default at request time.

    Raises:
        ValueError: If any preset is missing or maps to an empty token
    """
    missing = [size.value for size in ImageSize if not table.get(size)]
    if missing:
        raise ValueError(f"{provider} size table is missing entries for: {missing}")
    return table


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))


def clamp_custom_size(size: CustomImageSize, lower: int, upper: int) -> CustomImageSize:
    """Clamp both dimensions of a custom size. Clamping a clamped size is a no-op."""
    return CustomImageSize(
        width=clamp(size.width, lower, upper),
        height=clamp(size.height, lower, upper),
    )


def require_custom_size_in_bounds(size: CustomImageSize, lower: int, upper: int, provider: str) -> None:
    """Reject a custom size whose dimensions fall outside [lower, upper]."""
    for label, value in (("width", size.width), ("height", size.height)):
        if not lower <= value <= upper:
            raise ValidationError(
                f"{provider} requires custom {label} between {lower} and {upper} pixels, got {value}"
            )


def require_at_most(count: int, limit: int, what: str, provider: str) -> None:
    """Reject a count that exceeds a provider limit."""
    if count > limit:
        raise ValidationError(f"{provider} supports maximum {limit} {what}, got {count}")
