"""
Provider exceptions.

Adapters return failure results for API-level errors; these are raised
only for transport/storage problems and missing credentials.
"""
from typing import Optional


class ProviderError(Exception):
    """A provider call could not be completed."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        self.provider = provider
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{provider}] {message}")

    @property
    def retryable(self) -> bool:
        """Transport errors and 5xx/429 responses may succeed on a later attempt."""
        return self.status_code is None or self.status_code == 429 or self.status_code >= 500


class ProviderUnavailable(ProviderError):
    """Credentials for the provider are missing or still placeholders."""

    def __init__(self, provider: str, *env_keys: str):
        self.env_keys = env_keys
        super().__init__(provider, f"Not configured: missing {' or '.join(env_keys) or 'credentials'}")

    @property
    def retryable(self) -> bool:
        return False
