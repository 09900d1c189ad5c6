"""Help pages for the shell commands."""

import sys

from usrtools.style import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE, color, error, reset

_COMMANDS = [
    ("c", "opy <file> <file>", "Copy file from source to destination"),
    ("d", "elete <file>", "Delete file or empty directory"),
    ("e", "dit <file>", "Edit existing or new file"),
    ("f", "ind <str> <path>", "Find pattern in path"),
    ("h", "elp <cmd>", "Display help about a command"),
    ("l", "ist <dir>", "List entries in directory"),
    ("m", "ove <file> <file>", "Move file from source to destination"),
    ("p", "rint <str>", "Print string to screen"),
    ("q", "uit", "Quit the console"),
    ("r", "ead <file>", "Read file to screen"),
    ("w", "rite <file>", "Write file or directory"),
]

_EDIT_COMMANDS = [
    ("^Q", "Quit editor"),
    ("^W", "Write to file"),
    ("^X", "Write to file and quit"),
    ("^T", "Go to top of file"),
    ("^B", "Go to bottom of file"),
    ("^A", "Go to beginning of line"),
    ("^E", "Go to end of line"),
    ("^D", "Cut line"),
    ("^Y", "Copy line"),
    ("^P", "Paste line"),
    ("^F", "Find string"),
    ("^N", "Find next string"),
]

_DATE_SPECIFIERS = [
    ("%a", "Abbreviated weekday name"),
    ("%A", "Full weekday name"),
    ("%b", "Abbreviated month name"),
    ("%B", "Full month name"),
    ("%c", "Date and time, equivalent to %a %b %-d %-H:%M:%S %-Y"),
    ("%C", "Year divided by 100 and truncated to integer (00-99)"),
    ("%d", "Day of the month, zero-padded (01-31)"),
    ("%D", "Short MM/DD/YY date, equivalent to %-m/%d/%y"),
    ("%F", "Short YYYY-MM-DD date, equivalent to %-Y-%m-%d"),
    ("%g", "Week-based year, last two digits (00-99)"),
    ("%G", "Week-based year"),
    ("%H", "Hour in 24h format (00-23)"),
    ("%I", "Hour in 12h format (01-12)"),
    ("%j", "Day of the year (001-366)"),
    ("%m", "Month as a decimal number (01-12)"),
    ("%M", "Minute (00-59)"),
    ("%N", "Subsecond nanoseconds. Always 9 digits"),
    ("%p", "am or pm designation"),
    ("%P", "AM or PM designation"),
    ("%r", "12-hour clock time, equivalent to %-I:%M:%S %p"),
    ("%R", "24-hour HH:MM time, equivalent to %-H:%M"),
    ("%S", "Second (00-59)"),
    ("%T", "24-hour clock time with seconds, equivalent to %-H:%M:%S"),
    ("%u", "ISO 8601 weekday as number with Monday as 1 (1-7)"),
    ("%U", "Week number with Sunday as first day of the week (00-53)"),
    ("%V", "ISO 8601 week number (01-53)"),
    ("%w", "Weekday as a decimal number with Sunday as 0 (0-6)"),
    ("%W", "Week number with Monday as first day of the week (00-53)"),
    ("%y", "Year, last two digits (00-99)"),
    ("%Y", "Full year, including + if \u226510,000"),
    ("%z", "ISO 8601 offset from UTC in timezone (+HHMM)"),
    ("%%", "Literal %"),
]


def _usage_line(alias: str, command: str, usage: str) -> str:
    return f"  {color('lime')}{alias}{color('aqua')}{command:21}{reset()}{usage}"


def _title(text: str) -> str:
    return f"{color('yellow')}{text}{reset()}"


def _table(rows) -> list[str]:
    return [f"  {color('aqua')}{key}{reset()}    {text}" for key, text in rows]


def _usage() -> str:
    return (
        f"{color('yellow')}Usage:{reset()} help "
        f"{color('aqua')}[<command>]{reset()}"
    )


def help_summary() -> str:
    """Return the overview of shell usage and commands."""
    lines = [
        _title("Usage:"),
        _usage_line("", "<dir>", " Change directory"),
        _usage_line("", "<cmd>", " Execute command"),
        "",
        _title("Commands:"),
    ]
    lines.extend(_usage_line(*entry) for entry in _COMMANDS)
    return "\n".join(lines)


def help_edit() -> str:
    """Return the help page of the text editor."""
    lines = [
        "The text editor is a very simple editor inspired by Pico.",
        "",
        _title("Commands:"),
    ]
    lines.extend(_table(_EDIT_COMMANDS))
    return "\n".join(lines)


def help_date() -> str:
    """Return the help page of the date formatting specifiers."""
    lines = [
        "The date command's formatting behavior is based on strftime.",
        "",
        _title("Specifiers:"),
    ]
    lines.extend(_table(_DATE_SPECIFIERS))
    return "\n".join(lines)


def help_command(command: str) -> str:
    """Return the help page of a command; raise ValueError if there is none."""
    if command in ("-h", "--help"):
        return _usage()
    pages = {"date": help_date, "edit": help_edit}
    try:
        return pages[command]()
    except KeyError:
        raise ValueError(f"Help not found for command '{command}'") from None


def main(argv=None) -> int:
    """Run the help command and return its exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print(help_summary())
        return EXIT_SUCCESS
    if len(args) == 1:
        try:
            print(help_command(args[0]))
        except ValueError as exc:
            error(str(exc))
            return EXIT_FAILURE
        return EXIT_SUCCESS
    print(_usage())
    return EXIT_USAGE