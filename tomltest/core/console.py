"""
Console output for launcher status messages.

Messages go to stderr; stdout belongs to the toml-test binary.
"""

import sys

HELP_MESSAGE = """Please try the following solutions:
1. Set up a proxy
    export HTTP_PROXY=http://proxy.example.com:1080
    export HTTPS_PROXY=http://proxy.example.com:1080
    export ALL_PROXY=socks5://proxy.example.com:1080
2. Set up a mirror
    export TOML_TEST_BINARY_HOST=https://mirror.example.com/toml-test"""


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for Windows console.

    Falls back to ASCII-safe characters if Unicode symbols can't be encoded.

    Args:
        message: Message to print
        file: Output file (default: stderr)
    """
    file = file or sys.stderr
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = message.replace("✔", "[OK]").replace("✖", "[ERROR]")
        print(safe_message.encode("ascii", "replace").decode("ascii"), file=file)


def print_success(message: str):
    safe_print(f"✔ {message}")


def print_failure(message: str):
    safe_print(f"✖ {message}")


def print_help():
    safe_print(HELP_MESSAGE)
