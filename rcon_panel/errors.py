# rcon_panel/errors.py
from __future__ import annotations

from typing import Any, Optional


class RconError(Exception):
    """Base class for everything the RCON client raises on its own."""


class RconArgumentError(RconError, ValueError):
    """Bad host/port/password/payload, caught before any I/O happens."""


class RconConnectionError(RconError, ConnectionError):
    """Could not connect, or the server hung up mid-transaction."""


class RconAuthError(RconError):
    """
    Server answered the auth packet with request id -1.

    The connection is NOT closed for you; `session` is the half-open Rcon so the
    caller can disconnect it.
    """

    def __init__(self, message: str, session: Optional[Any] = None):
        super().__init__(message)
        self.session = session


class RconProtocolError(RconError):
    """Bytes read off the socket do not form a valid RCON frame."""


class MalformedLength(RconProtocolError):
    pass


class MissingTerminator(RconProtocolError):
    pass
