"""
toml-test launcher entry point.

Makes sure the toml-test binary for this platform is cached, then runs it
with every command-line argument forwarded verbatim. The child inherits
stdin, stdout and stderr, and its exit code becomes the launcher's.

Usage:
    toml-test [toml-test arguments]
    python -m tomltest [toml-test arguments]
"""

import logging
import subprocess
import sys
from typing import Callable, List, Optional

from tomltest.core.console import safe_print
from tomltest.core.cache import CacheManager
from tomltest.core.config import EnvironmentConfig
from tomltest.core.download import DownloadProgress, format_progress
from tomltest.core.exceptions import MetadataError
from tomltest.core.metadata import get_toml_test_version
from tomltest.core.platform import BinaryPaths, resolve_paths

logger = logging.getLogger(__name__)

PROGRESS_STEP = 25.0


def configure_logging(config: EnvironmentConfig):
    """
    Configure logging from TOML_TEST_LOG_LEVEL.

    Records go to stderr so that stdout stays the binary's.
    """
    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        level = logging.INFO

    if level <= logging.DEBUG:
        format_str = "%(levelname)s [%(name)s] %(message)s"
    else:
        format_str = "%(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        stream=sys.stderr,
        force=True,  # Reconfigure if already configured
    )


def progress_logger() -> Callable[[DownloadProgress], None]:
    """Build a progress callback that logs every PROGRESS_STEP percent."""
    next_mark = PROGRESS_STEP

    def on_progress(progress: DownloadProgress):
        nonlocal next_mark
        if progress.total_bytes <= 0:
            return
        if progress.percentage >= next_mark:
            logger.info(f"  {format_progress(progress)}")
            while next_mark <= progress.percentage:
                next_mark += PROGRESS_STEP

    return on_progress


def spawn(binary_path, args: List[str]) -> int:
    """
    Run the binary with inherited standard streams and wait for it.

    Returns:
        Child exit code, or 1 if the binary could not be started
    """
    command = [str(binary_path), *args]
    logger.debug(f"Running: {' '.join(command)}")
    try:
        return subprocess.call(command)
    except OSError as e:
        safe_print(f"Failed to run {binary_path}: {e}")
        return 1


def run(
    argv: Optional[List[str]] = None,
    config: Optional[EnvironmentConfig] = None,
    paths: Optional[BinaryPaths] = None,
) -> int:
    """
    Ensure the binary is cached, then dispatch to it.

    Args:
        argv: Full argument vector (default: sys.argv); argv[0] is dropped
        config: Configuration provider (default: process environment)
        paths: Pre-resolved binary paths (default: resolved for this host)

    Returns:
        Exit code of the toml-test binary

    Raises:
        SystemExit: With status 1 if the binary cannot be acquired
    """
    argv = sys.argv if argv is None else argv
    config = config or EnvironmentConfig()
    configure_logging(config)

    if paths is None:
        try:
            version = get_toml_test_version()
        except MetadataError as e:
            safe_print(str(e))
            return 1
        paths = resolve_paths(version, config=config)

    CacheManager(
        paths, config=config, progress_callback=progress_logger()
    ).ensure_binary_present()

    return spawn(paths.binary_path, list(argv[1:]))


def main():
    """Console script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
