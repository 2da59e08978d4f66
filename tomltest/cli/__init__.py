"""
Command-line entry point for the toml-test launcher.

The launcher defines no options of its own; see tomltest.cli.launcher.
"""
