"""
Core functionality for the toml-test launcher.

This package resolves, downloads and caches the toml-test binary.
"""

from .config import EnvironmentConfig

from .platform import (
    BinaryPaths,
    resolve_paths,
    normalize_platform,
    normalize_arch,
)

from .proxy import (
    ProxyAgent,
    ProxyKind,
    select_proxy,
)

from .download import (
    Fetcher,
    DownloadProgress,
    download_to_file,
)

from .filesystem import (
    decompress_to_file,
    make_executable,
    remove_quietly,
)

from .metadata import get_toml_test_version

from .exceptions import (
    TomlTestError,
    FetchError,
    HTTPStatusError,
    TooManyRedirectsError,
    DecompressionError,
    MetadataError,
    LockTimeout,
)

__all__ = [
    "EnvironmentConfig",
    "BinaryPaths",
    "resolve_paths",
    "normalize_platform",
    "normalize_arch",
    "ProxyAgent",
    "ProxyKind",
    "select_proxy",
    "Fetcher",
    "DownloadProgress",
    "download_to_file",
    "decompress_to_file",
    "make_executable",
    "remove_quietly",
    "get_toml_test_version",
    "TomlTestError",
    "FetchError",
    "HTTPStatusError",
    "TooManyRedirectsError",
    "DecompressionError",
    "MetadataError",
    "LockTimeout",
]
