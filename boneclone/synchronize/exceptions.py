"""Custom exceptions for the synchronize module."""


class RepositoryProcessingError(Exception):
    """Raised when a stage of processing a single repository fails.

    The message is prefixed with the stage label (for example 'clone: ...')
    and the underlying exception is chained as the cause.
    """

    def __init__(self, stage: str, cause: BaseException) -> None:
        """Initializes the exception with the failed stage and its cause."""
        super().__init__(f"{stage}: {cause}")
        self.stage = stage
        self.cause = cause


class ProcessorConfigurationError(Exception):
    """Raised when a landing strategy is constructed without a required collaborator."""

    pass


class ProviderCapabilityError(Exception):
    """Raised when a provider cannot perform an operation the landing strategy needs."""

    pass
