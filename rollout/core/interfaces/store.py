"""
Durable store protocol.
Implementations: RedisStoreBackend, MemoryStoreBackend
"""
from __future__ import annotations

from typing import Protocol


class StoreBackend(Protocol):
    """
    Protocol for the durable key-value/set store holding flag state.

    Absent keys are reported as None. Transport failures raise
    StoreUnavailableError, never None.
    """

    def set_add(self, key: str, member: str) -> None:
        """Add member to the set stored at key."""
        ...

    def set_remove(self, key: str, member: str) -> None:
        """Remove member from the set stored at key."""
        ...

    def set_members(self, key: str) -> set[str] | None:
        """Get all members of the set at key, or None if absent."""
        ...

    def is_member(self, key: str, member: str) -> bool:
        """Check set membership."""
        ...

    def get(self, key: str) -> str | None:
        """Get string value by key, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Set string value."""
        ...

    def delete(self, key: str) -> None:
        """Delete key of any type."""
        ...
