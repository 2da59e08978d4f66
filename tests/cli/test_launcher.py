"""
Tests for the launcher entry point.

This module tests argument forwarding, dispatch and logging setup.
"""

import logging
import sys

import pytest
from unittest.mock import patch

from tomltest.cli import launcher
from tomltest.cli.launcher import configure_logging, progress_logger, run, spawn
from tomltest.core.config import EnvironmentConfig
from tomltest.core.download import DownloadProgress
from tomltest.core.exceptions import MetadataError


@pytest.fixture
def cached_binary(linux_paths):
    """Place a fake binary in the cache so no download happens."""
    linux_paths.dist_dir.mkdir()
    linux_paths.binary_path.write_text("#!/bin/sh\nexit 0\n")
    linux_paths.binary_path.chmod(0o755)
    return linux_paths


class TestRun:
    """Test run()."""

    def test_forwards_arguments(self, cached_binary, env_config):
        argv = ["toml-test", "-toml", "1.1.0", "--", "my-decoder", "-x"]

        with patch("tomltest.cli.launcher.subprocess.call", return_value=0) as call:
            result = run(argv, config=env_config, paths=cached_binary)

        assert result == 0
        call.assert_called_once_with(
            [str(cached_binary.binary_path), "-toml", "1.1.0", "--", "my-decoder", "-x"]
        )

    def test_no_arguments(self, cached_binary, env_config):
        with patch("tomltest.cli.launcher.subprocess.call", return_value=0) as call:
            run(["toml-test"], config=env_config, paths=cached_binary)

        call.assert_called_once_with([str(cached_binary.binary_path)])

    def test_returns_child_exit_code(self, cached_binary, env_config):
        with patch("tomltest.cli.launcher.subprocess.call", return_value=3):
            assert run(["toml-test"], config=env_config, paths=cached_binary) == 3

    def test_ensures_binary_before_spawning(self, linux_paths, env_config):
        order = []

        def ensure(self):
            order.append("ensure")

        def call(command):
            order.append("spawn")
            return 0

        with patch(
            "tomltest.cli.launcher.CacheManager.ensure_binary_present", ensure
        ), patch("tomltest.cli.launcher.subprocess.call", side_effect=call):
            run(["toml-test"], config=env_config, paths=linux_paths)

        assert order == ["ensure", "spawn"]

    def test_acquisition_failure_does_not_spawn(self, linux_paths, env_config):
        with patch(
            "tomltest.cli.launcher.CacheManager.ensure_binary_present",
            side_effect=SystemExit(1),
        ), patch("tomltest.cli.launcher.subprocess.call") as call:
            with pytest.raises(SystemExit) as exc_info:
                run(["toml-test"], config=env_config, paths=linux_paths)

        assert exc_info.value.code == 1
        call.assert_not_called()

    def test_resolves_paths_from_metadata(self, tmp_path, env_config):
        with patch(
            "tomltest.cli.launcher.get_toml_test_version", return_value="9.9.9"
        ), patch("tomltest.cli.launcher.resolve_paths") as resolve, patch(
            "tomltest.cli.launcher.CacheManager"
        ), patch(
            "tomltest.cli.launcher.subprocess.call", return_value=0
        ):
            run(["toml-test"], config=env_config)

        resolve.assert_called_once_with("9.9.9", config=env_config)

    def test_metadata_error(self, env_config, capsys):
        with patch(
            "tomltest.cli.launcher.get_toml_test_version",
            side_effect=MetadataError("toml_test_version missing"),
        ):
            assert run(["toml-test"], config=env_config) == 1

        assert "toml_test_version missing" in capsys.readouterr().err

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell script")
    def test_runs_real_binary(self, linux_paths, env_config):
        linux_paths.dist_dir.mkdir()
        linux_paths.binary_path.write_text('#!/bin/sh\nexit "$#"\n')
        linux_paths.binary_path.chmod(0o755)

        result = run(["toml-test", "a", "b"], config=env_config, paths=linux_paths)

        assert result == 2


class TestSpawn:
    """Test spawn()."""

    def test_start_failure(self, tmp_path, capsys):
        result = spawn(tmp_path / "missing-binary", [])

        assert result == 1
        assert "Failed to run" in capsys.readouterr().err


class TestMain:
    """Test main()."""

    def test_exits_with_run_result(self):
        with patch("tomltest.cli.launcher.run", return_value=4):
            with pytest.raises(SystemExit) as exc_info:
                launcher.main()

        assert exc_info.value.code == 4


class TestConfigureLogging:
    """Test configure_logging()."""

    def test_default_level_info(self):
        configure_logging(EnvironmentConfig({}))
        assert logging.getLogger().level == logging.INFO

    def test_debug_level(self):
        configure_logging(EnvironmentConfig({"TOML_TEST_LOG_LEVEL": "debug"}))
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        configure_logging(EnvironmentConfig({"TOML_TEST_LOG_LEVEL": "chatty"}))
        assert logging.getLogger().level == logging.INFO


class TestProgressLogger:
    """Test progress_logger()."""

    def test_logs_at_quarter_marks(self, caplog):
        on_progress = progress_logger()

        with caplog.at_level(logging.INFO, logger="tomltest.cli.launcher"):
            for pct in (10, 30, 40, 60, 100):
                on_progress(DownloadProgress(pct, 100, float(pct)))

        messages = [r.message for r in caplog.records]
        assert len(messages) == 3

    def test_unknown_size_is_silent(self, caplog):
        on_progress = progress_logger()

        with caplog.at_level(logging.INFO, logger="tomltest.cli.launcher"):
            on_progress(DownloadProgress(1024, 0, 0.0))

        assert caplog.records == []

    def test_jump_past_several_marks_logs_once(self, caplog):
        on_progress = progress_logger()

        with caplog.at_level(logging.INFO, logger="tomltest.cli.launcher"):
            for pct in (90, 95, 100):
                on_progress(DownloadProgress(pct, 100, float(pct)))

        messages = [r.message for r in caplog.records]
        assert len(messages) == 2
        assert "(90.0%)" in messages[0]
        assert "(100.0%)" in messages[1]

    def test_callbacks_track_marks_independently(self, caplog):
        first = progress_logger()
        second = progress_logger()

        with caplog.at_level(logging.INFO, logger="tomltest.cli.launcher"):
            first(DownloadProgress(50, 100, 50.0))
            second(DownloadProgress(30, 100, 30.0))

        assert len(caplog.records) == 2
