"""Base64 encoding of a file."""

import base64
import sys

from usrtools.style import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE, color, error, reset


def encode_file(path: str) -> str:
    """Return the Base64 encoding of a file, without one trailing newline."""
    with open(path, "rb") as f:
        data = f.read()
    if data.endswith(b"\n"):
        data = data[:-1]
    return base64.b64encode(data).decode("ascii")


def _usage() -> str:
    return f"{color('yellow')}Usage:{reset()} encode {color('aqua')}<file>{reset()}"


def main(argv=None) -> int:
    """Print the Base64 encoding of a file and return the exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print(_usage())
        return EXIT_USAGE
    path = args[0]
    try:
        encoded = encode_file(path)
    except OSError:
        error(f"Could not encode '{path}'")
        return EXIT_FAILURE
    print(encoded)
    return EXIT_SUCCESS