"""Finding files by name and lines by pattern."""

import fnmatch
import os
import re
import sys
from collections.abc import Iterator
from dataclasses import dataclass

from usrtools.style import EXIT_SUCCESS, EXIT_USAGE, color, error, reset


@dataclass
class FindOptions:
    """Search options and state shared across a recursive search."""

    is_first_match: bool = True
    is_recursive: bool = False
    file: str = "*"
    line: str = ""
    trim: str = ""


def is_matching_file(path: str, pattern: str) -> bool:
    """Return True if the file name of path matches the glob pattern."""
    return fnmatch.fnmatchcase(os.path.basename(path), pattern)


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def highlight_matches(line: str, pattern: str) -> str | None:
    """Return line with the matches of pattern coloured, or None without a match."""
    regex = re.compile(pattern)
    red, off = color("red"), reset()
    parts: list[str] = []
    j = 0
    while True:
        found = regex.search(line[j:])
        if found is None:
            break
        m, n = j + found.start(), j + found.end()
        parts.append(f"{line[j:m]}{red}{line[m:n]}{off}")
        j = n
        # Empty matches would never advance, and a match reaching the end
        # of the line leaves nothing more to search.
        if m == n or n >= len(line):
            break
    if not parts:
        return None
    parts.append(line[j:])
    return "".join(parts)


def matching_lines(text: str, pattern: str) -> list[tuple[int, str]]:
    """Return (1-based line number, highlighted line) for each matching line."""
    result = []
    for number, line in enumerate(_split_lines(text), start=1):
        highlighted = highlight_matches(line, pattern)
        if highlighted is not None:
            result.append((number, highlighted))
    return result


def _trim_prefix(text: str, prefix: str) -> str:
    if prefix:
        while text.startswith(prefix):
            text = text[len(prefix):]
    return text


def _file_matches(path: str, options: FindOptions) -> Iterator[str]:
    if not os.path.isfile(path):
        return
    try:
        with open(path, encoding="utf-8") as f:
            contents = f.read()
    except (OSError, UnicodeDecodeError):
        return
    matches = matching_lines(contents, options.line)
    if not matches:
        return
    off = reset()
    if options.is_recursive:
        if options.is_first_match:
            options.is_first_match = False
        else:
            yield ""
        yield f"{color('yellow')}{path}{off}"
    width = len(str(matches[-1][0]))
    line_color = color("aqua")
    for number, text in matches:
        yield f"{line_color}{number:>{width}}:{off} {text}"


def search_files(path: str, options: FindOptions) -> Iterator[str]:
    """Yield the output lines of a search under path."""
    try:
        names = sorted(os.listdir(path))
    except OSError:
        yield from _file_matches(path, options)
        return
    options.is_recursive = True
    for name in names:
        file_path = path if path.endswith("/") else path + "/"
        file_path += name
        if os.path.isdir(file_path):
            yield from search_files(file_path, options)
        elif is_matching_file(file_path, options.file):
            if options.line:
                yield from _file_matches(file_path, options)
            else:
                yield _trim_prefix(file_path, options.trim)


def _usage() -> None:
    option, title, off = color("aqua"), color("yellow"), reset()
    print(f"{title}Usage:{off} find {option}<options> [<path>]{off}")
    print()
    print(f"{title}Options:{off}")
    print(
        f"  {option}-f{off}, {option}--file \"<pattern>\"{off}    "
        f"Find files matching {option}<pattern>{off}"
    )
    print(
        f"  {option}-l{off}, {option}--line \"<pattern>\"{off}    "
        f"Find lines matching {option}<pattern>{off}"
    )


def main(argv=None) -> int:
    """Run the find command and return its exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    options = FindOptions()
    path = ""
    arguments = iter(args)
    for arg in arguments:
        if arg in ("-h", "--help"):
            _usage()
            return EXIT_SUCCESS
        if arg in ("-f", "--file"):
            value = next(arguments, None)
            if value is None:
                error("Missing file pattern")
                return EXIT_USAGE
            options.file = value
        elif arg in ("-l", "--line"):
            value = next(arguments, None)
            if value is None:
                error("Missing line pattern")
                return EXIT_USAGE
            options.line = value
        elif arg.startswith("-"):
            error(f"Invalid option '{arg}'")
            return EXIT_USAGE
        elif not path:
            path = arg
        else:
            error("Multiple paths not supported")
            return EXIT_USAGE

    if not path:
        path = os.getcwd()
        options.trim = f"{path}/"
    if len(path) > 1:
        path = path.rstrip("/")

    if options.line:
        try:
            re.compile(options.line)
        except re.error:
            error("Invalid line pattern")
            return EXIT_USAGE

    if os.path.isdir(path) or (os.path.isfile(path) and options.line):
        for line in search_files(path, options):
            print(line)
        return EXIT_SUCCESS
    error("Invalid path")
    return EXIT_USAGE