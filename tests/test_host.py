import ipaddress
import socket
import threading

import pytest

from usrtools.host import (
    FLAG_RD,
    DnsError,
    Message,
    QueryClass,
    QueryType,
    ResponseCode,
    build_query,
    main,
    resolve,
)
from usrtools.style import EXIT_USAGE


@pytest.fixture
def dns_server():
    sockets = []

    def start(reply):
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.bind(("127.0.0.1", 0))
        sock.settimeout(5)
        sockets.append(sock)

        def serve():
            try:
                query, peer = sock.recvfrom(4096)
            except OSError:
                return
            answer = reply(query)
            if answer is not None:
                sock.sendto(answer, peer)

        threading.Thread(target=serve, daemon=True).start()
        return sock.getsockname()

    yield start
    for sock in sockets:
        sock.close()


def _answer(query, flags, address):
    record = b"\xc0\x0c\x00\x01\x00\x01\x00\x00\x00\x3c\x00\x04"
    return query[:2] + flags.to_bytes(2, "big") + query[4:] + record + address


def test_build_query_wire_format():
    query = build_query("example.com", QueryType.A, QueryClass.IN, 0x1234)
    expected = (
        b"\x12\x34\x01\x00\x00\x01\x00\x00\x00\x00\x00\x00"
        b"\x07example\x03com\x00\x00\x01\x00\x01"
    )
    assert query.datagram == expected


def test_query_fields_round_trip():
    query = build_query("example.com", ident=0xBEEF)
    assert query.ident() == 0xBEEF
    assert query.header() == FLAG_RD
    assert not query.is_response()


def test_message_response_flags():
    message = Message(b"\x00\x01\x81\x80" + bytes(8))
    assert message.is_response()
    assert message.code() is ResponseCode.NO_ERROR


def test_message_code_bits():
    header = 0x8000 | (ResponseCode.REFUSED << 11)
    message = Message(b"\x00\x01" + header.to_bytes(2, "big") + bytes(8))
    assert message.code() is ResponseCode.REFUSED


def test_message_unknown_code():
    header = 0x8000 | (9 << 11)
    message = Message(b"\x00\x01" + header.to_bytes(2, "big") + bytes(8))
    assert message.code() is ResponseCode.UNKNOWN_ERROR


def test_message_too_short():
    with pytest.raises(ValueError):
        Message(b"\x00\x01")


def test_response_code_label():
    assert ResponseCode.NAME_ERROR.label == "NameError"
    assert str(DnsError(ResponseCode.NETWORK_ERROR)) == (
        "Could not resolve host: NetworkError"
    )


def test_resolve_returns_address(dns_server):
    address = dns_server(lambda q: _answer(q, 0x8180, bytes([10, 1, 2, 3])))
    assert resolve("example.com", address) == ipaddress.IPv4Address("10.1.2.3")


def test_resolve_unspecified_address_is_name_error(dns_server):
    address = dns_server(lambda q: _answer(q, 0x8180, bytes(4)))
    with pytest.raises(DnsError) as info:
        resolve("example.com", address)
    assert info.value.code is ResponseCode.NAME_ERROR


def test_resolve_error_code(dns_server):
    flags = 0x8000 | (ResponseCode.SERVER_FAILURE << 11)
    address = dns_server(lambda q: _answer(q, flags, bytes([10, 1, 2, 3])))
    with pytest.raises(DnsError) as info:
        resolve("example.com", address)
    assert info.value.code is ResponseCode.SERVER_FAILURE


def test_resolve_short_reply_is_network_error(dns_server):
    address = dns_server(lambda q: q[:12])
    with pytest.raises(DnsError) as info:
        resolve("example.com", address)
    assert info.value.code is ResponseCode.NETWORK_ERROR


def test_resolve_timeout_is_network_error(dns_server):
    address = dns_server(lambda q: None)
    with pytest.raises(DnsError) as info:
        resolve("example.com", address, timeout=0.2)
    assert info.value.code is ResponseCode.NETWORK_ERROR


def test_main_usage():
    assert main([]) == EXIT_USAGE
    assert main(["a", "b"]) == EXIT_USAGE