"""A small HTTP/1.1 file server supporting GET, PUT and DELETE."""

import os
import socket
import socketserver
import sys
import time
from dataclasses import dataclass, field
from email.utils import formatdate

from usrtools.style import EXIT_FAILURE, EXIT_SUCCESS, color, error, reset

_VERSION = "0.1.0"
_BUFFER_SIZE = 4096
_INDEX = ("", "/index.html", "/index.htm", "/index.txt")
_DATE_TIME_ZONE = "%Y-%m-%d %H:%M:%S %z"

_STATUS = {
    200: "OK",
    301: "Moved Permanently",
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    500: "Internal Server Error",
}

_CONTENT_TYPES = {
    "css": "text/css",
    "csv": "text/csv",
    "gif": "text/gif",
    "htm": "text/html",
    "html": "text/html",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "js": "text/javascript",
    "json": "application/json",
    "lsp": "text/plain",
    "lisp": "text/plain",
    "png": "image/png",
    "sh": "application/x-sh",
    "txt": "text/plain",
    "md": "text/plain",
}


@dataclass
class Request:
    """A parsed HTTP request."""

    addr: str
    verb: str = ""
    path: str = ""
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_request(addr: str, data: bytes) -> Request | None:
    """Parse raw request bytes from addr; return None when data is empty."""
    message = bytes(data).decode("utf-8", errors="replace")
    if not message:
        return None
    request = Request(addr)
    body = []
    is_header = True
    for index, line in enumerate(_lines(message)):
        if index == 0:
            fields = line.split(" ")
            if len(fields) >= 2:
                request.verb, request.path = fields[0], fields[1]
        elif is_header:
            key, sep, value = line.partition(":")
            if sep:
                request.headers[key.strip()] = value.strip()
            elif not line:
                is_header = False
        else:
            body.append(f"{line}\n")
    request.body = "".join(body).encode()
    return request


@dataclass
class Response:
    """An HTTP response being built for a request."""

    req: Request
    buf: bytes = b""
    mime: str = ""
    time: str = ""
    code: int = 0
    size: int = 0
    body: bytearray = field(default_factory=bytearray)
    headers: dict[str, str] = field(default_factory=dict)
    real_path: str = ""

    def __post_init__(self):
        self.headers.setdefault("Date", formatdate(usegmt=True))
        self.headers.setdefault("Server", f"usrtools/{_VERSION}")
        if not self.time:
            self.time = time.strftime(_DATE_TIME_ZONE, time.localtime())

    def end(self) -> None:
        """Set the final headers and serialize the response into buf."""
        self.size = len(self.body)
        self.headers["Content-Length"] = str(self.size)
        self.headers["Connection"] = "keep-alive" if self.is_persistent() else "close"
        if self.mime.startswith("text/"):
            self.headers["Content-Type"] = f"{self.mime}; charset=utf-8"
        else:
            self.headers["Content-Type"] = self.mime
        head = [f"{self.status_line()}\r\n"]
        head.extend(f"{key}: {self.headers[key]}\r\n" for key in sorted(self.headers))
        head.append("\r\n")
        self.buf = "".join(head).encode() + bytes(self.body)

    def status_line(self) -> str:
        """Return the status line, e.g. 'HTTP/1.1 200 OK'."""
        return f"HTTP/1.1 {self.code} {_STATUS.get(self.code, 'Unknown Error')}"

    def is_persistent(self) -> bool:
        """Return False if the client asked to close the connection."""
        return self.req.headers.get("Connection") != "close"

    def __str__(self) -> str:
        blue, cyan, pink, off = color("blue"), color("aqua"), color("fushia"), reset()
        return (
            f"{cyan}{self.req.addr} - -{pink} [{self.time}] "
            f"{blue}\"{self.req.verb} {self.req.path}\"{off} {self.code} {self.size}"
        )


def content_type(path: str) -> str:
    """Return the MIME type for the extension of path."""
    _, dot, ext = path.rpartition(".")
    if not dot:
        ext = ""
    return _CONTENT_TYPES.get(ext, "application/octet-stream")


def join_path(directory: str, path: str) -> str:
    """Join a requested path to the server's root directory."""
    path = path.strip("/")
    sep = "" if directory == "/" or path == "" else "/"
    return f"{directory}{sep}{path}"


def handle_get(request: Request, response: Response) -> None:
    """Serve a file, an index file, a directory listing or a redirect."""
    if os.path.isdir(response.real_path) and not request.path.endswith("/"):
        response.code = 301
        response.mime = "text/html"
        response.headers["Location"] = f"{request.path}/"
        response.body.extend(b"<h1>Moved Permanently</h1>\r\n")
        return
    for index in _INDEX:
        real_path = f"{response.real_path}{index}"
        if os.path.isdir(real_path):
            continue
        try:
            with open(real_path, "rb") as f:
                data = f.read()
        except OSError:
            continue
        response.code = 200
        response.mime = content_type(real_path)
        if response.mime.startswith("text/"):
            text = data.decode("utf-8", errors="replace").replace("\n", "\r\n")
            response.body.extend(text.encode())
        else:
            response.body.extend(data)
        return
    try:
        names = sorted(os.listdir(response.real_path))
    except OSError:
        response.code = 404
        response.mime = "text/html"
        response.body.extend(b"<h1>Not Found</h1>\r\n")
        return
    response.code = 200
    response.mime = "text/html"
    response.body.extend(f"<h1>Index of {request.path}</h1>\r\n".encode())
    for name in names:
        link = f"<li><a href=\"{request.path}{name}\">{name}</a></li>\n"
        response.body.extend(link.encode())


def handle_put(request: Request, response: Response) -> None:
    """Create a directory (path ending with '/') or write the request body to a file."""
    if response.real_path.endswith("/"):
        real_path = response.real_path.rstrip("/")
        if os.path.exists(real_path):
            response.code = 403
        else:
            try:
                os.mkdir(real_path)
                response.code = 200
            except OSError:
                response.code = 500
    else:
        try:
            with open(response.real_path, "wb") as f:
                f.write(request.body)
            response.code = 200
        except OSError:
            response.code = 500
    response.mime = "text/plain"


def handle_delete(request: Request, response: Response) -> None:
    """Delete a file or an empty directory."""
    path = response.real_path
    if os.path.lexists(path):
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                os.rmdir(path)
            else:
                os.remove(path)
            response.code = 200
        except OSError:
            response.code = 500
    else:
        response.code = 404
    response.mime = "text/plain"


def handle_request(request: Request, root: str, read_only: bool = False) -> Response:
    """Build the finished response to a request for files under root."""
    response = Response(request)
    response.real_path = join_path(root, request.path)
    if request.verb == "GET":
        handle_get(request, response)
    elif request.verb == "PUT" and not read_only:
        handle_put(request, response)
    elif request.verb == "DELETE" and not read_only:
        handle_delete(request, response)
    else:
        response.body.extend(b"<h1>Bad Request</h1>\r\n")
        response.code = 400
        response.mime = "text/html"
    response.end()
    return response


def _content_length(head: bytes) -> int:
    for line in head.split(b"\n")[1:]:
        key, sep, value = line.partition(b":")
        if sep and key.strip().lower() == b"content-length":
            try:
                return max(int(value.strip()), 0)
            except ValueError:
                return 0
    return 0


def _receive(sock: socket.socket) -> bytes:
    """Read one request: its headers and as much body as Content-Length announces."""
    data = b""
    while True:
        chunk = sock.recv(_BUFFER_SIZE)
        if not chunk:
            return data
        data += chunk
        for marker in (b"\r\n\r\n", b"\n\n"):
            end = data.find(marker)
            if end >= 0:
                needed = end + len(marker) + _content_length(data[:end])
                while len(data) < needed:
                    chunk = sock.recv(_BUFFER_SIZE)
                    if not chunk:
                        break
                    data += chunk
                return data


class _Handler(socketserver.BaseRequestHandler):
    def handle(self):
        addr = self.client_address[0]
        while True:
            try:
                data = _receive(self.request)
            except OSError:
                return
            request = parse_request(addr, data)
            if request is None:
                return
            response = handle_request(request, self.server.root, self.server.read_only)
            print(response, flush=True)
            try:
                self.request.sendall(response.buf)
            except OSError:
                return
            if not response.is_persistent():
                return


class _Server(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, address, root: str, read_only: bool):
        self.root = root
        self.read_only = read_only
        super().__init__(address, _Handler)


def serve(root: str, port: int = 80, read_only: bool = False) -> None:
    """Serve files under root on port until interrupted."""
    with _Server(("0.0.0.0", port), root, read_only) as server:
        print(f"{color('yellow')}HTTP Server listening on 0.0.0.0:{port}{reset()}")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print()


def _usage() -> None:
    option, title, off = color("aqua"), color("yellow"), reset()
    print(f"{title}Usage:{off} httpd {option}<options>{off}")
    print()
    print(f"{title}Options:{off}")
    print(
        f"  {option}-d{off}, {option}--dir <path>{off}       "
        f"Set directory to {option}<path>{off}"
    )
    print(
        f"  {option}-p{off}, {option}--port <number>{off}    "
        f"Listen to port {option}<number>{off}"
    )
    print(f"  {option}-r{off}, {option}--read-only{off}        Set read-only mode")


def main(argv=None) -> int:
    """Run the HTTP server and return its exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    read_only = False
    port = 80
    directory = os.getcwd()
    arguments = iter(args)
    for arg in arguments:
        if arg in ("-h", "--help"):
            _usage()
            return EXIT_SUCCESS
        if arg in ("-r", "--read-only"):
            read_only = True
        elif arg in ("-p", "--port"):
            value = next(arguments, None)
            if value is None:
                error("Missing port number")
                return 64
            if value.isascii() and value.isdigit() and int(value) <= 0xFFFF:
                port = int(value)
        elif arg in ("-d", "--dir"):
            value = next(arguments, None)
            if value is None:
                error("Missing directory")
                return 64
            directory = value

    root = "/" + os.path.realpath(directory).strip("/")
    try:
        serve(root, port, read_only)
    except OSError:
        error("Could not find network interface")
        return EXIT_FAILURE
    return EXIT_SUCCESS