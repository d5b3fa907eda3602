# rcon_panel/rcon.py
from __future__ import annotations

import itertools
import logging
import socket
import threading
from typing import Optional

from .errors import RconArgumentError, RconAuthError, RconConnectionError, RconProtocolError
from .packet import SERVERDATA_AUTH, SERVERDATA_EXECCOMMAND, Response, decode, encode
from .util import useable

log = logging.getLogger(__name__)

BUFFER_SIZE = 4096  # one recv per response; bigger replies get cut

_request_ids = itertools.count(1)
_request_lock = threading.Lock()


def _next_request_id() -> int:
    with _request_lock:
        return next(_request_ids)


class Rcon:
    """
    One authenticated RCON connection. Build it with `Rcon.open(...)`.

    Every request on the connection carries the same request id, picked when the
    session is opened. `send`/`command`/`disconnect` are serialized on a lock, so
    a session can be shared between threads.
    """

    def __init__(self, request_id: int, sock: socket.socket):
        self._request_id = request_id
        self._sock = sock
        self._lock = threading.Lock()
        self._closed = False

    @property
    def request_id(self) -> int:
        return self._request_id

    @property
    def closed(self) -> bool:
        return self._closed

    @classmethod
    def open(cls, host: str, port: int, password: str, timeout: Optional[float] = None) -> "Rcon":
        """Connect to host:port and authenticate with `password`."""
        if not useable(host):
            raise RconArgumentError(f"Invalid host: {host!r}")
        if not isinstance(port, int) or isinstance(port, bool) or not 0 <= port <= 65535:
            raise RconArgumentError(f"Invalid port: {port!r}")
        if not isinstance(password, str):
            raise RconArgumentError("Password must be a string")

        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            raise RconConnectionError(f"Cannot connect to {host}:{port}: {e}") from e
        sock.settimeout(timeout)

        rcon = cls(_next_request_id(), sock)
        log.debug("connected to %s:%d as request id %d", host, port, rcon.request_id)
        try:
            response = rcon.send(SERVERDATA_AUTH, password.encode("utf-8"))
        except Exception:
            rcon.disconnect()
            raise
        if response.id == -1:
            raise RconAuthError("Server rejected authentication", session=rcon)
        log.debug("authenticated with %s:%d", host, port)
        return rcon

    def command(self, payload: str) -> str:
        """Run a console command and return the server's reply text."""
        if not useable(payload):
            raise RconArgumentError(f"Invalid payload: {payload!r}")
        response = self.send(SERVERDATA_EXECCOMMAND, payload.encode("utf-8"))
        return response.data.decode("utf-8", "replace")

    def send(self, kind: int, payload: bytes) -> Response:
        """
        One write-then-read transaction with an arbitrary packet type.
        Types other than EXECCOMMAND/AUTH are passed through untouched.

        A failed write, read or decode closes the session: whatever the server
        sends later would otherwise be read as the reply to the next request.
        """
        with self._lock:
            frame = encode(kind, payload, self._request_id)
            try:
                self._sock.sendall(frame)
                buf = bytearray(BUFFER_SIZE)
                n = self._sock.recv_into(buf)
                if n == 0:
                    raise RconConnectionError("Connection closed by server")
                log.debug("request id %d: type %d, sent %d bytes, read %d", self._request_id, kind, len(frame), n)
                return decode(buf, n)
            except (OSError, RconProtocolError):
                self._sock.close()
                self._closed = True
                raise

    def disconnect(self) -> None:
        with self._lock:
            self._sock.close()
            self._closed = True

    def __enter__(self) -> "Rcon":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()
