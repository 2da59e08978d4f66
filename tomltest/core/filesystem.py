"""
Filesystem helpers for the binary cache.

Features:
- Streamed gzip decompression into the final binary
- Executable permission bits
- Best-effort removal of partial artifacts
"""

import gzip
import logging
import os
import shutil
import zlib
from pathlib import Path
from typing import Union

from tomltest.core.exceptions import DecompressionError

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755  # rwxr-xr-x
CHUNK_SIZE = 64 * 1024


def decompress_to_file(
    compressed_path: Union[str, Path], output_path: Union[str, Path]
) -> Path:
    """
    Decompress a single-file gzip payload into output_path.

    Both files are opened in scoped blocks, so a failure in any stage
    (read, inflate, write) closes every handle before propagating.

    Args:
        compressed_path: Gzip file to read
        output_path: File to create (overwritten if present)

    Returns:
        Path to the decompressed file

    Raises:
        DecompressionError: If the payload is not valid gzip data
        OSError: If either file cannot be opened, read or written
    """
    compressed_path = Path(compressed_path)
    output_path = Path(output_path)

    logger.debug(f"Decompressing {compressed_path} -> {output_path}")

    try:
        with gzip.open(compressed_path, "rb") as src, open(output_path, "wb") as dst:
            shutil.copyfileobj(src, dst, CHUNK_SIZE)
    except (gzip.BadGzipFile, EOFError, zlib.error) as e:
        raise DecompressionError(
            f"Failed to decompress {compressed_path.name}: {e}"
        ) from e

    return output_path


def make_executable(path: Union[str, Path]) -> None:
    """Set rwxr-xr-x on path."""
    os.chmod(path, EXECUTABLE_MODE)


def remove_quietly(*paths: Union[str, Path]) -> None:
    """
    Delete files, ignoring any that are missing or cannot be removed.

    Example:
        >>> remove_quietly(Path("dist/partial"), Path("dist/partial.gz"))
    """
    for path in paths:
        try:
            Path(path).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.debug(f"Could not remove {path}: {e}")
