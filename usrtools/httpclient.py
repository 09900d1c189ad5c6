"""A minimal HTTP/1.1 GET client."""

import ipaddress
import socket
import sys
from dataclasses import dataclass
from typing import BinaryIO

from usrtools.host import DnsError, resolve
from usrtools.style import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE, color, error, reset

_VERSION = "0.1.0"
_BUFFER_SIZE = 4096


class HttpError(Exception):
    """Raised when a request cannot be completed."""


@dataclass(frozen=True)
class Url:
    """The parts of an http URL used to make a request."""

    host: str
    port: int
    path: str


def parse_url(url: str) -> Url:
    """Parse an http:// URL; raise ValueError for any other scheme."""
    prefix = "http://"
    if not url.startswith(prefix):
        raise ValueError(f"Invalid URL '{url}'")
    rest = url[len(prefix):]
    slash = rest.find("/")
    server, path = (rest, "/") if slash < 0 else (rest[:slash], rest[slash:])
    colon = server.find(":")
    host, port = (server, "80") if colon < 0 else (server[:colon], server[colon + 1:])
    number = int(port) if port.isascii() and port.isdigit() else -1
    if not 0 <= number <= 0xFFFF:
        number = 80
    return Url(host=host, port=number, path=path)


def build_request(url: Url) -> list[str]:
    """Return the lines of a GET request for url, each ending with CRLF."""
    return [
        f"GET {url.path} HTTP/1.1\r\n",
        f"Host: {url.host}\r\n",
        f"User-Agent: usrtools/{_VERSION}\r\n",
        "Connection: close\r\n",
        "\r\n",
    ]


def _read_response(sock: socket.socket, out: BinaryIO, verbose: bool) -> str | None:
    """Stream the body to out and return the status code word, if any."""
    blue, off = color("blue"), reset()
    code = None
    pending = b""
    in_headers = True
    first = True
    while True:
        chunk = sock.recv(_BUFFER_SIZE)
        if not chunk:
            break
        if not in_headers:
            out.write(chunk)
            continue
        pending += chunk
        while in_headers:
            end = pending.find(b"\n")
            if end < 0:
                break
            raw, pending = pending[:end], pending[end + 1:]
            line = raw.decode("utf-8", errors="replace")
            if first:
                words = line.split(" ")
                code = words[1] if len(words) > 1 else None
                if verbose:
                    print(blue, end="")
                first = False
            if verbose:
                print(f"< {line.rstrip(chr(13))}")
            if not line.strip():
                if verbose:
                    print(off, end="")
                in_headers = False
        if not in_headers and pending:
            out.write(pending)
            pending = b""
    return code


def _fetch(url: Url, address: str, timeout: float, verbose: bool) -> str | None:
    request = build_request(url)
    if verbose:
        print(color("blue") + "".join(f"> {line}" for line in request) + reset(), end="")
    try:
        with socket.create_connection((address, url.port), timeout=timeout) as sock:
            sock.sendall("".join(request).encode())
            sys.stdout.flush()
            out = sys.stdout.buffer
            code = _read_response(sock, out, verbose)
            out.flush()
            return code
    except ConnectionError as exc:
        raise HttpError(f"Could not connect to {address}:{url.port}") from exc
    except OSError as exc:
        raise HttpError(f"Could not read from {address}:{url.port}") from exc


def _help() -> None:
    option, title, off = color("aqua"), color("yellow"), reset()
    print(f"{title}Usage:{off} http {option}<options> <url>{off}")
    print()
    print(f"{title}Options:{off}")
    print(f"  {option}-v{off}, {option}--verbose{off}              Increase verbosity")
    print(f"  {option}-t{off}, {option}--timeout <seconds>{off}    Request timeout")


def _strip_scheme(arg: str) -> str:
    arg = arg[len("http://"):] if arg.startswith("http://") else arg
    return arg[len("https://"):] if arg.startswith("https://") else arg


def main(argv=None) -> int:
    """Fetch a URL, write its body to standard output and return the exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    verbose = False
    host = ""
    path = ""
    timeout = 5.0
    arguments = iter(args)
    for arg in arguments:
        if arg in ("-h", "--help"):
            _help()
            return EXIT_SUCCESS
        if arg in ("-v", "--verbose"):
            verbose = True
        elif arg in ("-t", "--timeout"):
            value = next(arguments, None)
            if value is None:
                error("Missing timeout seconds")
                return EXIT_USAGE
            try:
                timeout = float(value)
            except ValueError:
                pass
        elif arg.startswith("-"):
            error(f"Invalid option '{arg}'")
            return EXIT_USAGE
        elif not host:
            host = _strip_scheme(arg)
        elif not path:
            path = arg
        else:
            error("Too many arguments")
            return EXIT_USAGE

    if not host and not path:
        error("Missing URL")
        return EXIT_USAGE
    if not path:
        slash = host.find("/")
        host, path = (host, "/") if slash < 0 else (host[:slash], host[slash:])

    url = parse_url(f"http://{host}{path}")
    if url.host[-1:].isdigit():
        try:
            address = str(ipaddress.ip_address(url.host))
        except ValueError:
            error("Invalid address format")
            return EXIT_USAGE
    else:
        try:
            address = str(resolve(url.host))
        except DnsError as exc:
            error(str(exc))
            return EXIT_FAILURE

    try:
        code = _fetch(url, address, timeout, verbose)
    except HttpError as exc:
        error(str(exc))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return EXIT_FAILURE

    if code is not None and code.isascii() and code.isdigit() and int(code) < 400:
        return EXIT_SUCCESS
    return EXIT_FAILURE