"""
Entry point for running the launcher as a module.

Usage: python -m tomltest [toml-test arguments]
"""

from tomltest.cli.launcher import main

if __name__ == "__main__":
    main()
