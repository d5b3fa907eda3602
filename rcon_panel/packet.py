# rcon_panel/packet.py
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Optional

from .errors import MalformedLength, MissingTerminator, RconArgumentError

SERVERDATA_RESPONSE_VALUE = 0
SERVERDATA_AUTH_RESPONSE = 2
SERVERDATA_EXECCOMMAND = 2
SERVERDATA_AUTH = 3

TERMINATOR = b"\x00\x00"
HEADER_SIZE = 12          # length + request id + type
BODY_OVERHEAD = 10        # request id + type + terminator, counted by `length`

_HEADER = struct.Struct("<iii")


@dataclass(frozen=True)
class Response:
    id: int
    type: int
    data: bytes


def encode(kind: int, payload: bytes, request_id: int) -> bytes:
    """
    Build one frame: [length][request id][type][payload][\\0\\0], little-endian int32s.
    `length` counts everything after itself, so it is len(payload) + 10.
    """
    body = len(payload) + BODY_OVERHEAD
    try:
        header = _HEADER.pack(body, request_id, kind)
    except struct.error as e:
        raise RconArgumentError(f"Value does not fit a signed 32-bit field: {e}") from e
    return header + bytes(payload) + TERMINATOR


def decode(raw: bytes, valid_length: Optional[int] = None) -> Response:
    """
    Parse a single frame out of the first `valid_length` bytes of `raw`
    (the count a socket read actually returned; defaults to len(raw)).

    Only the position of the terminator is checked, not its content.
    """
    if valid_length is None:
        valid_length = len(raw)
    view = memoryview(raw)[:valid_length]

    if len(view) < HEADER_SIZE:
        raise MalformedLength(f"Packet too short: {len(view)} bytes, header needs {HEADER_SIZE}")
    length, request_id, kind = _HEADER.unpack_from(view, 0)

    payload_len = length - BODY_OVERHEAD
    remaining = len(view) - HEADER_SIZE
    if payload_len < 0 or payload_len > remaining:
        raise MalformedLength(
            f"Invalid packet length {length}: payload of {payload_len} bytes, {remaining} available"
        )
    data = bytes(view[HEADER_SIZE:HEADER_SIZE + payload_len])

    if remaining - payload_len != 2:
        raise MissingTerminator(
            f"Missing terminator bytes: expected 2 after payload, found {remaining - payload_len}"
        )
    return Response(request_id, kind, data)
