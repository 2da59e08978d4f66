"""
Environment-backed configuration for the launcher.

All environment lookups go through EnvironmentConfig so that components can
be handed a fixed mapping instead of reading process-wide state.

Variable precedence:
    When a setting exists in both lowercase and uppercase form (the proxy
    variables), the lowercase name is consulted first and the first
    non-empty value wins.
"""

import logging
import os
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_BINARY_HOST = "https://github.com/BurntSushi/toml-test/releases/download"
DEFAULT_LOG_LEVEL = "INFO"

BINARY_HOST_VAR = "TOML_TEST_BINARY_HOST"
LOG_LEVEL_VAR = "TOML_TEST_LOG_LEVEL"


class EnvironmentConfig:
    """
    Read-only view over environment variables.

    Attributes:
        environ: Mapping consulted for every lookup (default: os.environ)

    Example:
        >>> config = EnvironmentConfig({"TOML_TEST_BINARY_HOST": "https://mirror"})
        >>> config.binary_host
        'https://mirror'
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def get(self, name: str) -> Optional[str]:
        """Return variable value, treating empty strings as unset."""
        value = self.environ.get(name)
        return value or None

    def get_first(self, *names: str) -> Optional[str]:
        """
        Return the first non-empty value among names, in order.

        Args:
            *names: Variable names in precedence order

        Returns:
            Value of the first variable that is set and non-empty, else None
        """
        for name in names:
            value = self.get(name)
            if value:
                return value
        return None

    def get_proxy_variable(self, name: str) -> Optional[str]:
        """
        Look up a proxy variable by its lowercase name.

        Checks ``name`` then ``NAME.upper()``.

        Example:
            >>> EnvironmentConfig({"HTTP_PROXY": "http://p:1080"}).get_proxy_variable("http_proxy")
            'http://p:1080'
        """
        return self.get_first(name.lower(), name.upper())

    @property
    def binary_host(self) -> str:
        """Download host: TOML_TEST_BINARY_HOST, else the GitHub releases URL."""
        host = self.get(BINARY_HOST_VAR)
        if host:
            logger.debug(f"Using binary host from {BINARY_HOST_VAR}: {host}")
            return host
        return DEFAULT_BINARY_HOST

    @property
    def log_level(self) -> str:
        return (self.get(LOG_LEVEL_VAR) or DEFAULT_LOG_LEVEL).upper()
