"""
Package metadata for the launcher.

The toml-test release to download is pinned in ``metadata.yaml`` shipped
inside the ``tomltest`` package.
"""

import functools
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from tomltest.core.exceptions import MetadataError

logger = logging.getLogger(__name__)

METADATA_FILE = Path(__file__).resolve().parent.parent / "metadata.yaml"


def load_metadata(metadata_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load and parse the package metadata file.

    Args:
        metadata_file: Path to YAML metadata (default: bundled metadata.yaml)

    Returns:
        Metadata dictionary

    Raises:
        MetadataError: If the file is missing or is not a YAML mapping
    """
    metadata_file = Path(metadata_file or METADATA_FILE)

    if not metadata_file.exists():
        raise MetadataError(f"Metadata file not found: {metadata_file}")

    logger.debug(f"Loading metadata from {metadata_file}")

    try:
        with open(metadata_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise MetadataError(f"Invalid YAML in {metadata_file}: {e}") from e

    if not isinstance(data, dict):
        raise MetadataError(f"Metadata in {metadata_file} must be a mapping")

    return data


def get_toml_test_version(metadata_file: Optional[Path] = None) -> str:
    """
    Get the pinned toml-test version (e.g. '1.5.0').

    Raises:
        MetadataError: If the version is absent or empty
    """
    if metadata_file is None:
        return _bundled_version()
    return _read_version(load_metadata(metadata_file), metadata_file)


@functools.lru_cache(maxsize=1)
def _bundled_version() -> str:
    return _read_version(load_metadata(METADATA_FILE), METADATA_FILE)


def _read_version(data: Dict[str, Any], source: Path) -> str:
    version = data.get("toml_test_version")
    if version is None or str(version).strip() == "":
        raise MetadataError(f"toml_test_version missing from {source}")
    # A leading "v" would be doubled in the release URL
    return str(version).strip().lstrip("v")
