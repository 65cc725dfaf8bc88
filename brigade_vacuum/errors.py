"""Error definitions for brigade_vacuum.

Every error carries a stable ``code`` that the CLI surfaces in JSON
output, alongside the human-readable message.
"""

# Error code constants
LIST_FAILED = "list_failed"
DELETE_FAILED = "delete_failed"
NOT_FOUND = "not_found"
KUBE_CONFIG_ERROR = "kube_config"
INVALID_LIMIT = "invalid_limit"


class VacuumError(Exception):
    """Base class for brigade_vacuum errors."""

    def __init__(self, message: str, code: str) -> None:
        """Initialize VacuumError.

        Args:
            message: Error description.
            code: Error code for structured error handling.
        """
        super().__init__(message)
        self.code = code

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"code": self.code, "message": str(self)}


class ResourceListError(VacuumError):
    """Raised when resources cannot be listed. Aborts the pass."""

    def __init__(
        self,
        kind: str,
        selector: str | None,
        reason: object,
        code: str = LIST_FAILED,
    ) -> None:
        """Initialize ResourceListError.

        Args:
            kind: Resource kind being listed ("record" or "worker").
            selector: Label selector used, None for an unrestricted list.
            reason: Underlying transport error or message.
            code: Error code for structured error handling.
        """
        scope = f"selector {selector!r}" if selector else "all"
        super().__init__(f"Failed to list {kind} resources ({scope}): {reason}", code)
        self.kind = kind
        self.selector = selector


class ResourceAccessError(VacuumError):
    """Raised when deleting a single resource fails."""

    def __init__(
        self,
        kind: str,
        name: str,
        reason: object,
        code: str = DELETE_FAILED,
    ) -> None:
        """Initialize ResourceAccessError.

        Args:
            kind: Resource kind ("record" or "worker").
            name: Resource name.
            reason: Underlying transport error or message.
            code: Error code for structured error handling.
        """
        super().__init__(f"Failed to delete {kind} {name}: {reason}", code)
        self.kind = kind
        self.name = name
        self.reason = reason


class ResourceNotFoundError(ResourceAccessError):
    """Raised when a resource to delete no longer exists."""

    def __init__(self, kind: str, name: str, code: str = NOT_FOUND) -> None:
        super().__init__(kind, name, "not found", code)


class KubeConfigError(VacuumError):
    """Raised when no Kubernetes client configuration can be loaded."""

    def __init__(self, message: str, code: str = KUBE_CONFIG_ERROR) -> None:
        super().__init__(message, code)


class InvalidLimitError(VacuumError):
    """Raised when a configured limit cannot be turned into a usable cutoff."""

    def __init__(self, message: str, code: str = INVALID_LIMIT) -> None:
        super().__init__(message, code)


__all__ = [
    "DELETE_FAILED",
    "INVALID_LIMIT",
    "KUBE_CONFIG_ERROR",
    "LIST_FAILED",
    "NOT_FOUND",
    "InvalidLimitError",
    "KubeConfigError",
    "ResourceAccessError",
    "ResourceListError",
    "ResourceNotFoundError",
    "VacuumError",
]
