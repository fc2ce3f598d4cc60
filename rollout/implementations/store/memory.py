"""
In-memory durable store for development and testing.

Data is lost on restart.
"""

from collections import defaultdict


class MemoryStoreBackend:
    """
    In-memory key-value/set store.

    Mirrors Redis semantics closely enough for the flag evaluator:
    removing the last member of a set removes the key, and reading a
    missing key returns None.

    Useful for:
    - Development without Redis
    - Unit testing
    """

    def __init__(self):
        self._sets: dict[str, set[str]] = defaultdict(set)
        self._strings: dict[str, str] = {}

    # ============================================================
    # SET OPERATIONS
    # ============================================================

    def set_add(self, key: str, member: str) -> None:
        self._strings.pop(key, None)
        self._sets[key].add(str(member))

    def set_remove(self, key: str, member: str) -> None:
        members = self._sets.get(key)
        if members is None:
            return
        members.discard(str(member))
        if not members:
            del self._sets[key]

    def set_members(self, key: str) -> set[str] | None:
        members = self._sets.get(key)
        if not members:
            return None
        return set(members)

    def is_member(self, key: str, member: str) -> bool:
        return str(member) in self._sets.get(key, ())

    # ============================================================
    # STRING OPERATIONS
    # ============================================================

    def get(self, key: str) -> str | None:
        return self._strings.get(key)

    def set(self, key: str, value: str) -> None:
        self._sets.pop(key, None)
        self._strings[key] = str(value)

    def delete(self, key: str) -> None:
        self._sets.pop(key, None)
        self._strings.pop(key, None)

    # ============================================================
    # TEST HELPERS
    # ============================================================

    def keys(self) -> list[str]:
        """List all stored keys."""
        return sorted(set(self._sets) | set(self._strings))

    def clear(self) -> None:
        """Clear all data. Useful for testing."""
        self._sets.clear()
        self._strings.clear()
