"""
Named factories for the store and cache backends.

Settings pick a backend by name (ROLLOUT_STORE_BACKEND, ROLLOUT_CACHE_BACKEND);
create_rollout() asks the matching registry to build it.
"""
from __future__ import annotations

from typing import TypeVar, Generic, Callable, Any
import logging

from ..errors import UnknownBackendError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PluginRegistry(Generic[T]):
    """
    Backend name -> factory.

    ```python
    store_backends.register("memory", lambda **config: MemoryStoreBackend(), default=True)
    store = store_backends.get("memory")
    ```
    """

    def __init__(self, kind: str):
        self.kind = kind
        self._factories: dict[str, Callable[..., T]] = {}
        self._default: str | None = None

    def register(
        self,
        name: str,
        factory: Callable[..., T],
        *,
        default: bool = False,
    ) -> None:
        """Register a factory; the first one registered is the default."""
        if name in self._factories:
            logger.warning(f"Replacing {self.kind} backend factory: {name}")

        self._factories[name] = factory
        if default or self._default is None:
            self._default = name

    def get(
        self,
        name: str | None = None,
        *,
        config: dict[str, Any] | None = None,
    ) -> T:
        """
        Build the backend registered under name (or the default).

        Raises:
            UnknownBackendError: If nothing is registered under name
        """
        name = name or self._default
        factory = self._factories.get(name) if name else None
        if factory is None:
            known = ", ".join(sorted(self._factories)) or "none"
            raise UnknownBackendError(
                f"Unknown {self.kind} backend: {name!r} (registered: {known})"
            )
        return factory(**(config or {}))

    @property
    def default(self) -> str | None:
        return self._default


store_backends = PluginRegistry[Any]("store")
cache_backends = PluginRegistry[Any]("cache")
