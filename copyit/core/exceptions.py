"""
Custom Exceptions

This module defines the error taxonomy of the snippet service.

- ValidationError / ContentTooLargeError: bad input, reported to the caller
- NotFoundError: unknown or expired path (deliberately indistinguishable)
- GoneError: one-time snippet already consumed
- CapacityError: no unique path could be allocated
- RateLimitedError: client exceeded its request window
- InternalError: unexpected store failure, details never exposed to callers
"""


class SnippetServiceError(Exception):
    """Base exception for the snippet service."""
    pass


class ValidationError(SnippetServiceError):
    """Raised when snippet content or a path fails validation."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


def _format_limit(limit: int) -> str:
    mib = 1024 * 1024
    if limit >= mib and limit % mib == 0:
        return f"{limit // mib}MB"
    return f"{limit} byte"


class ContentTooLargeError(ValidationError):
    """Raised when snippet content exceeds the configured byte limit."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Content size exceeds {_format_limit(limit)} limit")


class NotFoundError(SnippetServiceError):
    """Raised when a path is unknown or its snippet has expired."""

    def __init__(self, path: str):
        self.path = path
        super().__init__("Snippet not found or expired.")


class GoneError(SnippetServiceError):
    """Raised when a one-time snippet has already been consumed."""

    def __init__(self, path: str):
        self.path = path
        super().__init__("This one-time snippet has already been consumed.")


class PathCollisionError(SnippetServiceError):
    """Raised by the store when a candidate path is already taken."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path '{path}' is already taken")


class CapacityError(SnippetServiceError):
    """Raised when every path allocation attempt collided."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Unable to allocate a unique path after {attempts} attempts")


class RateLimitedError(SnippetServiceError):
    """Raised when a client exceeds its rate limit window."""

    def __init__(self, action_class: str, client_key: str):
        self.action_class = action_class
        self.client_key = client_key
        super().__init__("Too many requests")


class InternalError(SnippetServiceError):
    """Raised when a store operation fails unexpectedly."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Internal error: {message}")
