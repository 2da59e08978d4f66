"""
Launcher for the toml-test compliance runner.

Downloads the prebuilt toml-test binary for the current platform on first
use and forwards every command-line argument to it.
"""
