"""Hexadecimal dump of binary data."""

import sys

from usrtools.style import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE, color, error, reset


def format_hex(data: bytes, offset: int = 0) -> list[str]:
    """Return the dump of data, 16 bytes per line, addresses starting at offset."""
    cyan = color("aqua")
    gray = color("gray")
    pink = color("fushia")
    lines = []
    for index, start in enumerate(range(0, len(data), 16)):
        chunk = bytes(data[start:start + 16])
        addr = offset + index * 16
        hexa = chunk.hex(" ", -2).upper()
        text = "".join(
            chr(b) if 32 <= b <= 126 else f"{gray}.{reset()}" for b in chunk
        )
        lines.append(f"{cyan}{addr:08X}: {pink}{hexa:40}{reset()}{text}")
    return lines


def print_hex(data: bytes, offset: int = 0) -> None:
    """Print the dump of data."""
    for line in format_hex(data, offset):
        print(line)


def _usage() -> str:
    return f"{color('yellow')}Usage:{reset()} hex {color('aqua')}<file>{reset()}"


def main(argv=None) -> int:
    """Dump a file in hexadecimal and return the exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print(_usage())
        return EXIT_USAGE
    if args[0] in ("-h", "--help"):
        print(_usage())
        return EXIT_SUCCESS
    path = args[0]
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError:
        error(f"Could not read file '{path}'")
        return EXIT_FAILURE
    print_hex(data)
    return EXIT_SUCCESS