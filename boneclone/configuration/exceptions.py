"""Contains exceptions raised when loading application configuration."""


class ConfigurationLoadError(Exception):
    """Raised when the configuration file cannot be read or is invalid."""

    def __init__(self, path: str, reason: str) -> None:
        """Initializes the exception with the configuration path and the reason it failed."""
        super().__init__(f"Failed to load configuration from {path}: {reason}")
        self.path = path
        self.reason = reason


class UnknownProviderError(Exception):
    """Raised when a provider entry names a provider type that is not supported."""

    def __init__(self, provider: str) -> None:
        """Initializes the exception with the unsupported provider name."""
        super().__init__(f"unknown provider: {provider}")
        self.provider = provider
