"""Domain-specific exceptions — transport-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity is not present in any loaded scope."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class CatalogApiError(Exception):
    """Raised when the remote catalog authority rejects a call.

    Covers non-2xx responses as well as 2xx envelopes with ``success: false``.
    """

    def __init__(self, status_code: int, message: str, status_text: str = ""):
        self.status_code = status_code
        self.status_text = status_text
        self.message = message
        super().__init__(f"[catalog-api] {status_code}: {message}")


class NetworkError(CatalogApiError):
    """No response from the authority (connection refused, DNS, timeout)."""

    def __init__(self, message: str = "Connection error — check your network."):
        super().__init__(0, message, status_text="Network Error")


class UnsupportedOperationError(Exception):
    """Raised when a collection has no endpoint for the requested operation."""

    def __init__(self, collection: str, operation: str):
        self.collection = collection
        self.operation = operation
        super().__init__(f"Collection '{collection}' does not support '{operation}'")


class InvalidStateTransitionError(Exception):
    """Raised when a reorder session is driven out of its state order."""

    def __init__(self, current: str, action: str):
        self.current = current
        self.action = action
        super().__init__(f"Cannot {action} while {current}")
