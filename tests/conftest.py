from __future__ import annotations

import socket
import struct
import threading
from typing import Callable, List, Optional

import pytest

from rcon_panel.packet import SERVERDATA_AUTH, SERVERDATA_AUTH_RESPONSE, SERVERDATA_RESPONSE_VALUE, encode

# handler(request_id, type, payload) -> list of frames to write back
Handler = Callable[[int, int, bytes], List[bytes]]


def _recv_exact(sock: socket.socket, n: int) -> Optional[bytes]:
    data = b""
    while len(data) < n:
        chunk = sock.recv(n - len(data))
        if not chunk:
            return None
        data += chunk
    return data


class MockRconServer:
    """Tiny threaded RCON server; every accepted connection is served by `handler`."""

    def __init__(self, handler: Handler):
        self.handler = handler
        self.requests: List[tuple[int, int, bytes]] = []
        self._lock = threading.Lock()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(8)
        self.host, self.port = self._sock.getsockname()
        self._threads: List[threading.Thread] = []
        self._accept = threading.Thread(target=self._serve, daemon=True)
        self._accept.start()

    def _serve(self) -> None:
        while True:
            try:
                conn, _ = self._sock.accept()
            except OSError:
                return
            t = threading.Thread(target=self._client, args=(conn,), daemon=True)
            t.start()
            self._threads.append(t)

    def _client(self, conn: socket.socket) -> None:
        with conn:
            while True:
                raw_len = _recv_exact(conn, 4)
                if raw_len is None:
                    return
                (length,) = struct.unpack("<i", raw_len)
                body = _recv_exact(conn, length)
                if body is None:
                    return
                req_id, kind = struct.unpack("<ii", body[:8])
                payload = body[8:-2]
                with self._lock:
                    self.requests.append((req_id, kind, payload))
                try:
                    for frame in self.handler(req_id, kind, payload):
                        conn.sendall(frame)
                except OSError:
                    return

    def close(self) -> None:
        self._sock.close()


def echo_handler(req_id: int, kind: int, payload: bytes) -> List[bytes]:
    """Accept any password, echo command payloads back as type 0 responses."""
    if kind == SERVERDATA_AUTH:
        return [encode(SERVERDATA_AUTH_RESPONSE, b"", req_id)]
    return [encode(SERVERDATA_RESPONSE_VALUE, payload, req_id)]


@pytest.fixture
def rcon_server():
    servers: List[MockRconServer] = []

    def start(handler: Handler = echo_handler) -> MockRconServer:
        srv = MockRconServer(handler)
        servers.append(srv)
        return srv

    yield start
    for srv in servers:
        srv.close()
