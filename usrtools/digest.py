"""SHA-256 hashes of files and directory trees."""

import hashlib
import os
import sys
from collections.abc import Iterator
from dataclasses import dataclass

from usrtools.style import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE, color, error, reset


@dataclass
class HashConfig:
    """Output options of the hash command."""

    color: bool = True
    short: bool = True
    recursive: bool = False


def hash_file(path: str, short: bool = True) -> str:
    """Return the uppercase hex SHA-256 of a file, its first 4 bytes if short."""
    with open(path, "rb") as f:
        digest = hashlib.sha256(f.read()).digest()
    return (digest[:4] if short else digest).hex().upper()


def hash_path(path: str, config: HashConfig) -> Iterator[str]:
    """Yield one output line per file hashed under path."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Could not find file '{path}'")
    if os.path.isfile(path):
        try:
            digest = hash_file(path, config.short)
        except OSError:
            raise OSError(f"Could not read '{path}'") from None
        if config.color:
            yield f"{color('fushia')}{digest}{reset()} {path}"
        else:
            yield f"{digest} {path}"
    elif config.recursive and os.path.isdir(path):
        try:
            names = sorted(os.listdir(path))
        except OSError:
            raise OSError(f"Could not read '{path}'") from None
        sep = "" if path == "/" else "/"
        for name in names:
            yield from hash_path(f"{path}{sep}{name}", config)
    else:
        raise ValueError(f"Could not hash '{path}'")


def _help() -> None:
    option, title, off = color("aqua"), color("yellow"), reset()
    print(f"{title}Usage:{off} hash {option}<options> <file>{off}")
    print()
    print(f"{title}Options:{off}")
    print(f"  {option}-l{off}, {option}--long{off}         Show full hash")
    print(f"  {option}-s{off}, {option}--short{off}        Show abbreviated hash")
    print(f"  {option}-c{off}, {option}--color{off}        Enable color mode")
    print(f"  {option}-r{off}, {option}--recursive{off}    Enable recursive mode")


def main(argv=None) -> int:
    """Print the hashes of the given paths and return the exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    config = HashConfig()
    if not sys.stdout.isatty():
        config.color = False
        config.short = False
    paths = []
    for arg in args:
        if arg in ("-h", "--help"):
            _help()
            return EXIT_SUCCESS
        if arg in ("-c", "--color"):
            config.color = True
        elif arg in ("-s", "--short"):
            config.short = True
        elif arg in ("-l", "--long"):
            config.short = False
        elif arg in ("-r", "--recursive"):
            config.recursive = True
        elif arg.startswith("-"):
            error(f"Invalid option '{arg}'")
            return EXIT_USAGE
        else:
            paths.append(arg)

    for path in sorted(paths):
        if len(path) > 1:
            path = path.rstrip("/")
        try:
            for line in hash_path(path, config):
                print(line)
        except (OSError, ValueError) as exc:
            error(str(exc))
            return EXIT_FAILURE
    return EXIT_SUCCESS