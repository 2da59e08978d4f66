"""
Centralized exception hierarchy for the toml-test launcher.

Fetch failures are kept apart from everything else because the launcher
answers them with proxy and mirror instructions instead of a raw error.
"""

from filelock import Timeout as LockTimeout


# ============================================================================
# Base Exceptions
# ============================================================================


class TomlTestError(Exception):
    """Base exception for all launcher errors."""

    pass


# ============================================================================
# Network Exceptions
# ============================================================================


class FetchError(TomlTestError):
    """Raised when the binary cannot be fetched from the remote host."""

    pass


class HTTPStatusError(FetchError):
    """Raised when the server answers with a non-success status."""

    def __init__(self, status_code: int, url: str = ""):
        self.status_code = status_code
        self.url = url
        msg = f"status: {status_code}"
        if url:
            msg += f" ({url})"
        super().__init__(msg)


class TooManyRedirectsError(FetchError):
    """Raised when a redirect chain exceeds the hop limit."""

    def __init__(self, max_redirects: int, url: str = ""):
        self.max_redirects = max_redirects
        self.url = url
        super().__init__(f"Exceeded {max_redirects} redirects while fetching {url}")


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class DecompressionError(TomlTestError):
    """Raised when the downloaded payload is not a valid gzip stream."""

    pass


# ============================================================================
# Metadata Exceptions
# ============================================================================


class MetadataError(TomlTestError):
    """Raised when package metadata is missing or malformed."""

    pass


__all__ = [
    "TomlTestError",
    "FetchError",
    "HTTPStatusError",
    "TooManyRedirectsError",
    "DecompressionError",
    "MetadataError",
    "LockTimeout",
]
