"""
Rollout exception hierarchy.

Transport failures and "value absent" are never the same thing:
backends return None for absent keys and raise BackendUnavailableError
subclasses when the store or cache cannot be reached.
"""


class RolloutError(Exception):
    """Base class for all rollout errors."""
    pass


class BackendUnavailableError(RolloutError):
    """Raised when a store or cache call fails in transport."""

    def __init__(self, operation: str, key: str | None = None, cause: Exception | None = None):
        self.operation = operation
        self.key = key
        self.cause = cause
        message = f"{operation} failed"
        if key is not None:
            message = f"{message} for key '{key}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class StoreUnavailableError(BackendUnavailableError):
    """Raised when the durable store cannot be reached."""
    pass


class CacheUnavailableError(BackendUnavailableError):
    """Raised when the cache layer cannot be reached."""
    pass


class InvalidPercentageError(RolloutError, ValueError):
    """Raised when a percentage is not an integer."""

    def __init__(self, value: object, key: str | None = None):
        self.value = value
        self.key = key
        where = f" stored under '{key}'" if key else ""
        super().__init__(f"Percentage must be an integer, got {value!r}{where}")


class GroupPredicateError(RolloutError):
    """Raised when a group predicate fails and strict group evaluation is on."""

    def __init__(self, group: str, feature: str, cause: Exception):
        self.group = group
        self.feature = feature
        self.cause = cause
        super().__init__(
            f"Group '{group}' predicate failed while evaluating '{feature}': {cause}"
        )


class UnknownBackendError(RolloutError, ValueError):
    """Raised when a backend name is not registered."""
    pass
