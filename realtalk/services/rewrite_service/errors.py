"""Rewrite service exception hierarchy.

Handlers map these to HTTP status codes; anything else is a generic 500.
"""
from typing import Optional


class RewriteServiceError(Exception):
    """Base exception for rewrite service errors."""
    pass


class ConfigurationError(RewriteServiceError):
    """Required configuration (API key, URL) is missing or invalid."""
    pass


class RewriteValidationError(RewriteServiceError):
    """The caller's request is invalid (empty text, missing user id, ...)."""
    pass


class LLMServiceError(RewriteServiceError):
    """The chat-completion API failed or returned no content."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidRewriteResponse(RewriteServiceError):
    """The model answered, but not in the accepted shape."""
    pass
