"""
Pytest configuration and shared fixtures for launcher tests.
"""

import gzip
import logging

import pytest
from pathlib import Path

from tomltest.core.config import EnvironmentConfig
from tomltest.core.platform import BinaryPaths, resolve_paths

TEST_VERSION = "1.5.0"
TEST_HOST = "https://downloads.example.com/toml-test"
BINARY_CONTENT = b"#!/bin/sh\necho toml-test\n"


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def env_config() -> EnvironmentConfig:
    """Configuration with a fixed host and no proxy variables."""
    return EnvironmentConfig({"TOML_TEST_BINARY_HOST": TEST_HOST})


@pytest.fixture
def dist_dir(tmp_path: Path) -> Path:
    """Cache directory path (not created)."""
    return tmp_path / "dist"


@pytest.fixture
def linux_paths(env_config: EnvironmentConfig, dist_dir: Path) -> BinaryPaths:
    """Resolved paths for linux/amd64 under a temporary cache directory."""
    return resolve_paths(
        TEST_VERSION, "linux", "x64", config=env_config, dist_dir=dist_dir
    )


@pytest.fixture
def binary_content() -> bytes:
    """Contents of the fake toml-test binary."""
    return BINARY_CONTENT


@pytest.fixture
def gz_payload(binary_content: bytes) -> bytes:
    """Gzip-compressed fake binary."""
    return gzip.compress(binary_content)


@pytest.fixture
def clean_proxy_env(monkeypatch):
    """Remove proxy variables from the process environment."""
    for name in (
        "http_proxy",
        "HTTP_PROXY",
        "https_proxy",
        "HTTPS_PROXY",
        "all_proxy",
        "ALL_PROXY",
        "TOML_TEST_BINARY_HOST",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo logging.basicConfig(force=True) calls made by the launcher."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
