class DomainError(Exception):
    """Base class for failures raised by the ordering and recap services."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """User-correctable input problem, raised before any write is issued."""


class NotFoundError(DomainError):
    pass


class InvalidTransitionError(DomainError):
    """Status change not allowed from the record's current status."""


class PersistenceError(DomainError):
    """The storage backend rejected or failed a read or write."""

    def __init__(self, message: str, original: Exception = None):
        super().__init__(message)
        self.original = original
