"""Protocol interfaces for Seedream Studio."""

from typing import Optional, Protocol

from typing_extensions import runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """
    String key/value persistence owned by the calling layer.

    The provider core never touches a store; history and API key helpers
    receive one by injection.
    """

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        ...

    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        ...
