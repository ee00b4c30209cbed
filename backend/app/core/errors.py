"""Error taxonomy for the invoice rendering service.

``NotFoundError`` and ``ValidationFailure`` are client-facing (4xx).
``StorageWriteFailure`` and ``GenerationFailure`` are server-facing (5xx).
``StorageMiss`` is recoverable and never leaves the render cache.
"""


class InvoiceServiceError(Exception):
    """Base class for all service-level errors."""


class NotFoundError(InvoiceServiceError):
    """Resource is absent or not owned by the requester."""


class ValidationFailure(InvoiceServiceError):
    """Configuration input rejected by a service."""


class StorageMiss(InvoiceServiceError):
    """A blob could not be fetched for an expected key."""

    def __init__(self, key: str, reason: str = "not found"):
        super().__init__(f"Blob {key} {reason}")
        self.key = key


class StorageWriteFailure(InvoiceServiceError):
    """A blob or its database pointer could not be persisted."""


class GenerationFailure(InvoiceServiceError):
    """The template could not be parsed or the overlay could not be drawn."""
