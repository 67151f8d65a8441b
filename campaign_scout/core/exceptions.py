"""Custom exceptions for Campaign Scout."""

from __future__ import annotations


class CampaignScoutError(Exception):
    """Base exception for all Campaign Scout errors."""
    pass


class APIError(CampaignScoutError):
    """Base exception for external provider failures."""
    pass


class ProviderError(APIError):
    """Raised when a provider call fails after retries."""

    def __init__(self, message: str, status_code: int | None = None, provider: str | None = None):
        self.status_code = status_code
        self.provider = provider
        super().__init__(message)


class ProviderNotConfiguredError(APIError):
    """Raised when a provider key is missing or malformed."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"{provider} API key not configured or invalid")


class RateLimitError(ProviderError):
    """Raised when a provider keeps answering 429 after retries."""

    def __init__(self, provider: str, retry_after: int | None = None):
        self.retry_after = retry_after
        super().__init__(f"{provider} rate limit exceeded", status_code=429, provider=provider)


class ValidationError(CampaignScoutError):
    """Raised when submission input validation fails."""
    pass


class DatabaseError(CampaignScoutError):
    """Raised when campaign persistence fails."""
    pass
