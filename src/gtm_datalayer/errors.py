from typing import Optional


class DataLayerError(Exception):
    """Base exception for dataLayer-related errors."""
    pass


class NotFoundError(DataLayerError, LookupError):
    """Raised when something the page is expected to expose is missing."""
    pass


class ContainerNotFoundError(NotFoundError):
    """Raised when the requested GTM container is not registered on the page."""

    def __init__(self, container_id: str):
        super().__init__(f"GTM container {container_id} not found on the page")
        self.container_id = container_id


class GTMNotFoundError(NotFoundError):
    """Raised when the page has no GTM runtime object at all."""

    def __init__(self, message: str = "No GTM container found on the page"):
        super().__init__(message)


class HistorySerializationError(DataLayerError):
    """Raised when the dataLayer history cannot be made JSON-safe."""
    pass


class WaitTimeoutError(DataLayerError, TimeoutError):
    """Raised when a wait on the page elapses before its predicate holds."""

    def __init__(self, message: str, event: Optional[str] = None, timeout_ms: Optional[int] = None):
        super().__init__(message)
        self.event = event
        self.timeout_ms = timeout_ms
