"""
Local cache of the toml-test binary.

CacheManager makes sure the binary for the current platform exists in the
cache directory, downloading and decompressing it when it does not. The
binary file doubles as the completion marker: it is renamed into place
only after decompression and chmod have both succeeded, so its existence
always means a complete, executable binary.

Acquisition workflow:
1. Return immediately if the binary exists
2. Create the cache directory
3. Take the per-binary download lock and re-check
4. Fetch the gzip payload to '<binary>.gz'
5. Decompress into '<binary>.part' and mark it executable
6. Rename '<binary>.part' to '<binary>'
7. Remove the transient '.gz'

Any failure removes the transient files and exits the process with status 1.
"""

import logging
import os
import sys
from typing import Callable, Optional

from tomltest.core.config import EnvironmentConfig
from tomltest.core.console import print_failure, print_help, print_success, safe_print
from tomltest.core.download import DownloadProgress, Fetcher, download_to_file
from tomltest.core.exceptions import FetchError
from tomltest.core.filesystem import decompress_to_file, make_executable, remove_quietly
from tomltest.core.locking import DEFAULT_LOCK_TIMEOUT, binary_lock
from tomltest.core.platform import BinaryPaths

logger = logging.getLogger(__name__)


class CacheManager:
    """
    Ensures the toml-test binary is present in the cache directory.

    Attributes:
        paths: Resolved binary names, paths and URL
        fetcher: Fetcher used for the download
        lock_timeout: Seconds to wait for a concurrent download

    Example:
        >>> paths = resolve_paths(get_toml_test_version())
        >>> CacheManager(paths).ensure_binary_present()
        >>> paths.binary_path.exists()
        True
    """

    def __init__(
        self,
        paths: BinaryPaths,
        config: Optional[EnvironmentConfig] = None,
        fetcher: Optional[Fetcher] = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        self.paths = paths
        self.fetcher = fetcher or Fetcher(config)
        self.lock_timeout = lock_timeout
        self.progress_callback = progress_callback

    def is_present(self) -> bool:
        return self.paths.binary_path.exists()

    def ensure_binary_present(self) -> None:
        """
        Download the binary unless it already exists.

        Raises:
            SystemExit: With status 1 if acquisition fails
        """
        if self.is_present():
            logger.debug(f"Binary already present: {self.paths.binary_path}")
            return

        logger.info("Downloading toml-test binary")
        try:
            self._ensure_dist_exists()
            with binary_lock(
                self.paths.dist_dir, self.paths.binary_filename, self.lock_timeout
            ):
                if self.is_present():
                    logger.info("Binary was downloaded by another process")
                    return
                try:
                    self.download()
                except BaseException:
                    # Only the lock holder owns the transient files
                    self._remove_transient_files()
                    raise
        except Exception as e:
            self._report_failure(e)
            sys.exit(1)

        print_success("Download toml-test binary success")

    def download(self) -> None:
        """
        Run one fetch -> decompress -> chmod -> rename cycle.

        Raises:
            FetchError: If the payload cannot be fetched
            DecompressionError: If the payload is not valid gzip
            OSError: On filesystem failures
        """
        paths = self.paths
        logger.debug(f"Fetching {paths.url}")

        response = self.fetcher.fetch(paths.url)
        download_to_file(response, paths.compressed_path, self.progress_callback)

        decompress_to_file(paths.compressed_path, paths.partial_path)
        make_executable(paths.partial_path)
        os.replace(paths.partial_path, paths.binary_path)

        remove_quietly(paths.compressed_path)
        logger.debug(f"Installed {paths.binary_path}")

    def _ensure_dist_exists(self) -> None:
        self.paths.dist_dir.mkdir(parents=True, exist_ok=True)

    def _remove_transient_files(self) -> None:
        remove_quietly(self.paths.partial_path, self.paths.compressed_path)

    def _report_failure(self, error: Exception) -> None:
        if isinstance(error, FetchError):
            print_failure(f"Download toml-test binary failed: {error}")
            print_help()
        else:
            logger.debug("Acquisition failed", exc_info=error)
            safe_print(f"{type(error).__name__}: {error}")
