"""Keyboard layout selection."""

import enum
import sys

from usrtools.style import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE, color, error, reset


class Layout(enum.Enum):
    """Supported keyboard layouts."""

    QWERTY = "qwerty"
    AZERTY = "azerty"
    DVORAK = "dvorak"


_current = Layout.QWERTY


def set_layout(name: str) -> Layout:
    """Select the layout by name; raise ValueError for an unknown one."""
    global _current
    try:
        layout = Layout(name)
    except ValueError:
        raise ValueError(f"Unknown keyboard layout '{name}'") from None
    _current = layout
    return layout


def current_layout() -> Layout:
    """Return the selected layout."""
    return _current


def _usage() -> str:
    return "\n".join(
        [
            f"{color('yellow')}Usage:{reset()} keyboard "
            f"{color('aqua')}<command>{reset()}",
            "",
            f"{color('yellow')}Commands:{reset()}",
            f"  {color('aqua')}set <layout>{reset()}    Set keyboard layout",
        ]
    )


def main(argv=None) -> int:
    """Run the keyboard command and return its exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print(_usage())
        return EXIT_USAGE
    command = args[0]
    if command == "set":
        if len(args) == 1:
            error("Keyboard layout missing")
            return EXIT_FAILURE
        try:
            set_layout(args[1])
        except ValueError:
            error("Unknown keyboard layout")
            return EXIT_FAILURE
        return EXIT_SUCCESS
    if command in ("-h", "--help", "help"):
        print(_usage())
        return EXIT_SUCCESS
    error("Invalid command")
    return EXIT_FAILURE