"""
Cross-process locking for binary downloads.

Two launchers started at the same time on a fresh install would otherwise
both download and decompress into the same files. The first one to take the
lock performs the download; the others wait and then find the binary in
place.

Usage:
    from tomltest.core.locking import binary_lock

    with binary_lock(dist_dir, binary_filename):
        if not binary_path.exists():
            download()
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 300


def lock_path_for(dist_dir: Path, binary_filename: str) -> Path:
    """Lock file guarding one binary in dist_dir."""
    return Path(dist_dir) / f"{binary_filename}.lock"


@contextmanager
def binary_lock(
    dist_dir: Path, binary_filename: str, timeout: float = DEFAULT_LOCK_TIMEOUT
):
    """
    Hold the download lock for a binary.

    Args:
        dist_dir: Cache directory (must exist)
        binary_filename: Binary the lock guards
        timeout: Maximum wait time in seconds (default: 300)

    Yields:
        None

    Raises:
        LockTimeout: If the lock can't be acquired within timeout
    """
    lock_path = lock_path_for(dist_dir, binary_filename)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired download lock: {lock_path}")
            yield
            logger.debug(f"Released download lock: {lock_path}")
    except LockTimeout as e:
        logger.error(
            f"Could not acquire download lock after {timeout}s. "
            "Another toml-test launcher may be downloading."
        )
        raise LockTimeout(str(lock_path)) from e


__all__ = ["binary_lock", "lock_path_for", "LockTimeout", "DEFAULT_LOCK_TIMEOUT"]
