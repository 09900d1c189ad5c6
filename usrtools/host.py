"""Resolving host names with DNS queries over UDP."""

import enum
import ipaddress
import random
import socket
import struct
import sys
from dataclasses import dataclass

from usrtools.style import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE, color, error, reset

DEFAULT_SERVER = "8.8.8.8"
DNS_PORT = 53
FLAG_RD = 0x0100
_HEADER_SIZE = 12
_MIN_RESPONSE = 28
_BUFFER_SIZE = 4096


class QueryType(enum.IntEnum):
    """DNS query types."""

    A = 1


class QueryClass(enum.IntEnum):
    """DNS query classes."""

    IN = 1


class ResponseCode(enum.IntEnum):
    """Outcomes of a resolution."""

    NO_ERROR = 0
    FORMAT_ERROR = 1
    SERVER_FAILURE = 2
    NAME_ERROR = 3
    NOT_IMPLEMENTED = 4
    REFUSED = 5
    UNKNOWN_ERROR = 6
    NETWORK_ERROR = 7

    @property
    def label(self) -> str:
        """Return the code's name in CamelCase, e.g. NameError."""
        return "".join(part.capitalize() for part in self.name.split("_"))


class DnsError(Exception):
    """Raised when a name cannot be resolved."""

    def __init__(self, code: ResponseCode):
        super().__init__(f"Could not resolve host: {code.label}")
        self.code = code


@dataclass(frozen=True)
class Message:
    """A DNS datagram."""

    datagram: bytes

    def __post_init__(self):
        if len(self.datagram) < _HEADER_SIZE:
            raise ValueError("DNS message shorter than its header")

    def ident(self) -> int:
        """Return the transaction ID."""
        return struct.unpack_from(">H", self.datagram, 0)[0]

    def header(self) -> int:
        """Return the flags field."""
        return struct.unpack_from(">H", self.datagram, 2)[0]

    def is_response(self) -> bool:
        """Return True if the message is a response."""
        return bool(self.header() >> 15 & 1)

    def code(self) -> ResponseCode:
        """Return the response code read from bits 11 to 14 of the flags."""
        value = self.header() >> 11 & 0xF
        if value <= ResponseCode.REFUSED:
            return ResponseCode(value)
        return ResponseCode.UNKNOWN_ERROR


def build_query(
    name: str,
    qtype: QueryType = QueryType.A,
    qclass: QueryClass = QueryClass.IN,
    ident: int | None = None,
) -> Message:
    """Build a recursive query for name with one question."""
    if ident is None:
        ident = random.getrandbits(16)
    parts = [struct.pack(">HHHHHH", ident, FLAG_RD, 1, 0, 0, 0)]
    for label in name.split("."):
        encoded = label.encode()
        if len(encoded) > 255:
            raise ValueError(f"Label too long: '{label}'")
        parts.append(bytes([len(encoded)]) + encoded)
    parts.append(b"\0")
    parts.append(struct.pack(">HH", qtype, qclass))
    return Message(b"".join(parts))


def resolve(name: str, server=None, timeout: float = 5.0) -> ipaddress.IPv4Address:
    """Resolve name to an IPv4 address; server is a host or a (host, port) pair."""
    if server is None:
        address = (DEFAULT_SERVER, DNS_PORT)
    elif isinstance(server, tuple):
        address = server
    else:
        address = (str(server), DNS_PORT)
    query = build_query(name)
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.settimeout(timeout)
            sock.connect(address)
            sock.send(query.datagram)
            while True:
                data = sock.recv(_BUFFER_SIZE)
                if len(data) < _MIN_RESPONSE:
                    break
                message = Message(data)
                if message.ident() != query.ident() or not message.is_response():
                    continue
                code = message.code()
                if code is not ResponseCode.NO_ERROR:
                    raise DnsError(code)
                # The address is taken from the last four bytes of the answer.
                result = ipaddress.IPv4Address(data[-4:])
                if result.is_unspecified:
                    raise DnsError(ResponseCode.NAME_ERROR)
                return result
    except OSError:
        raise DnsError(ResponseCode.NETWORK_ERROR) from None
    raise DnsError(ResponseCode.NETWORK_ERROR)


def _usage() -> str:
    return f"{color('yellow')}Usage:{reset()} host {color('aqua')}<domain>{reset()}"


def main(argv=None) -> int:
    """Print the address of a domain and return the exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print(_usage())
        return EXIT_USAGE
    try:
        address = resolve(args[0])
    except DnsError as exc:
        error(str(exc))
        return EXIT_FAILURE
    print(address)
    return EXIT_SUCCESS