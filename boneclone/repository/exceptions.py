"""Custom exceptions for repository operations."""


class RepositoryOperationError(Exception):
    """Base class for errors raised while operating on a cloned repository."""

    pass


class CloneError(RepositoryOperationError):
    """Raised when a repository cannot be cloned."""

    pass


class EligibilityError(RepositoryOperationError):
    """Raised when the HEAD commit of a clone cannot be read."""

    pass


class PushError(RepositoryOperationError):
    """Raised when a push is rejected or fails."""

    pass
