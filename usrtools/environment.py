"""Listing, reading and setting environment variables."""

import os
import sys
from collections.abc import Mapping, MutableMapping

from usrtools.style import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE, color, error, reset


def format_env(env: Mapping[str, str]) -> list[str]:
    """Return one aligned line per variable, sorted by name."""
    width = max((len(key) for key in env), default=0)
    return [f'{key:<{width}} "{env[key]}"' for key in sorted(env)]


def _usage() -> str:
    return (
        f"{color('yellow')}Usage:{reset()} env "
        f"{color('aqua')}[<key> [<value>]]{reset()}"
    )


def main(argv=None, env: MutableMapping[str, str] | None = None) -> int:
    """Run the env command against env (the process environment by default)."""
    args = sys.argv[1:] if argv is None else list(argv)
    if env is None:
        env = os.environ
    if any(arg in ("-h", "--help") for arg in args):
        print(_usage())
        return EXIT_SUCCESS
    if not args:
        for line in format_env(env):
            print(line)
        return EXIT_SUCCESS
    if len(args) == 1:
        key = args[0]
        if key in env:
            print(env[key])
            return EXIT_SUCCESS
        error(f"Could not get '{key}'")
        return EXIT_FAILURE
    if len(args) == 2:
        env[args[0]] = args[1]
        return EXIT_SUCCESS
    print(_usage())
    return EXIT_USAGE