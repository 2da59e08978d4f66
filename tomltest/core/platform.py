"""
Platform detection and download path resolution.

This module turns the running platform, CPU architecture and the pinned
toml-test version into the release filename, the remote URL and the local
cache paths. Everything here is pure computation; nothing touches the
network or the filesystem.

Usage:
    from tomltest.core.platform import resolve_paths

    paths = resolve_paths("1.5.0")
    print(paths.url)
    # https://github.com/BurntSushi/toml-test/releases/download/v1.5.0/toml-test-v1.5.0-linux-amd64.gz
"""

import logging
import platform as _platform
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tomltest.core.config import EnvironmentConfig

logger = logging.getLogger(__name__)

DEFAULT_DIST_DIR = Path(__file__).resolve().parent.parent / "dist"

BINARY_PREFIX = "toml-test"
WINDOWS_SUFFIX = ".ext"
COMPRESSED_SUFFIX = ".gz"
PARTIAL_SUFFIX = ".part"

_WINDOWS_PLATFORMS = ("win32", "cygwin", "windows")
_X64_ARCHITECTURES = ("x64", "x86_64", "amd64")


@dataclass(frozen=True)
class BinaryPaths:
    """
    Resolved names and locations for one toml-test release.

    Attributes:
        version: toml-test version without a leading 'v' (e.g. '1.5.0')
        platform: Normalized platform identifier ('windows', 'darwin', 'linux')
        arch: Normalized architecture identifier ('amd64', 'arm64', ...)
        binary_filename: Name of the executable in the cache directory
        compressed_filename: Name of the gzip payload on the release host
        dist_dir: Cache directory
        url: Remote URL of the compressed payload
    """

    version: str
    platform: str
    arch: str
    binary_filename: str
    compressed_filename: str
    dist_dir: Path
    url: str

    @property
    def binary_path(self) -> Path:
        return self.dist_dir / self.binary_filename

    @property
    def compressed_path(self) -> Path:
        return self.dist_dir / self.compressed_filename

    @property
    def partial_path(self) -> Path:
        """Decompression target, renamed onto binary_path once executable."""
        return self.dist_dir / f"{self.binary_filename}{PARTIAL_SUFFIX}"


def detect_platform() -> str:
    """Runtime OS report, e.g. 'linux', 'darwin', 'win32'."""
    return sys.platform


def detect_arch() -> str:
    """
    Runtime CPU architecture report.

    Python reports the kernel machine name; 'aarch64' is reported as
    'arm64' to match the name used by toml-test release assets.
    """
    machine = _platform.machine().lower()
    if machine == "aarch64":
        return "arm64"
    return machine


def normalize_platform(platform: str) -> str:
    """
    Normalize a platform report to the release naming scheme.

    Windows spellings become 'windows'; everything else passes through.

    Example:
        >>> normalize_platform("win32")
        'windows'
        >>> normalize_platform("darwin")
        'darwin'
    """
    if platform.lower() in _WINDOWS_PLATFORMS:
        return "windows"
    return platform


def normalize_arch(arch: str) -> str:
    """
    Normalize an architecture report to the release naming scheme.

    The x64 family becomes 'amd64'; everything else passes through.

    Example:
        >>> normalize_arch("x64")
        'amd64'
        >>> normalize_arch("arm64")
        'arm64'
    """
    if arch.lower() in _X64_ARCHITECTURES:
        return "amd64"
    return arch


def binary_filename(version: str, platform: str, arch: str) -> str:
    """
    Build the binary filename for normalized platform and arch.

    Example:
        >>> binary_filename("1.5.0", "windows", "amd64")
        'toml-test-v1.5.0-windows-amd64.ext'
    """
    name = f"{BINARY_PREFIX}-v{version}-{platform}-{arch}"
    if platform == "windows":
        name += WINDOWS_SUFFIX
    return name


def build_url(host: str, version: str, compressed_filename: str) -> str:
    """Join the release host with 'v{version}/{compressed_filename}'."""
    return f"{host.rstrip('/')}/v{version}/{compressed_filename}"


def resolve_paths(
    version: str,
    platform: Optional[str] = None,
    arch: Optional[str] = None,
    config: Optional[EnvironmentConfig] = None,
    dist_dir: Optional[Path] = None,
) -> BinaryPaths:
    """
    Resolve filename, URL and cache paths for a toml-test release.

    Args:
        version: toml-test version (e.g. '1.5.0')
        platform: Runtime platform report (default: detect_platform())
        arch: Runtime architecture report (default: detect_arch())
        config: Configuration provider (default: process environment)
        dist_dir: Cache directory (default: 'dist' beside the package)

    Returns:
        BinaryPaths for the release

    Example:
        >>> paths = resolve_paths("1.5.0", "win32", "x64", EnvironmentConfig({}))
        >>> paths.binary_filename
        'toml-test-v1.5.0-windows-amd64.ext'
    """
    config = config or EnvironmentConfig()
    platform_id = normalize_platform(platform or detect_platform())
    arch_id = normalize_arch(arch or detect_arch())

    filename = binary_filename(version, platform_id, arch_id)
    compressed = f"{filename}{COMPRESSED_SUFFIX}"

    paths = BinaryPaths(
        version=version,
        platform=platform_id,
        arch=arch_id,
        binary_filename=filename,
        compressed_filename=compressed,
        dist_dir=Path(dist_dir) if dist_dir else DEFAULT_DIST_DIR,
        url=build_url(config.binary_host, version, compressed),
    )
    logger.debug(f"Resolved {paths.platform}-{paths.arch} binary: {paths.url}")
    return paths
