"""Terminal colours, error reporting and exit codes shared by the commands."""

import sys

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 64

_FOREGROUND = {
    "black": 30,
    "maroon": 31,
    "green": 32,
    "olive": 33,
    "navy": 34,
    "purple": 35,
    "teal": 36,
    "silver": 37,
    "gray": 90,
    "red": 91,
    "lime": 92,
    "yellow": 93,
    "blue": 94,
    "fushia": 95,
    "aqua": 96,
    "white": 97,
}


def _code(name: str) -> int:
    try:
        return _FOREGROUND[name]
    except KeyError:
        raise ValueError(f"Unknown color '{name}'") from None


def color(name: str, background: str | None = None) -> str:
    """Return the escape sequence for a foreground and optional background colour."""
    codes = [str(_code(name))]
    if background is not None:
        codes.append(str(_code(background) + 10))
    return f"\x1b[{';'.join(codes)}m"


def reset() -> str:
    """Return the escape sequence that resets all attributes."""
    return "\x1b[0m"


def error(message: str) -> None:
    """Print an error message to standard error."""
    print(f"{color('red')}Error:{reset()} {message}", file=sys.stderr)