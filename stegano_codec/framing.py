"""Payload framing conventions.

Image codecs terminate the payload with an end-marker sentinel, audio codecs
prefix it with a fixed magic + big-endian length header.
"""
from __future__ import annotations

import re
import struct

from .errors import CorruptPayload, NoHiddenDataFound

END_MARKER = b"<<<END>>>"
ESCAPE_BYTE = 0x1B

HEADER_SIZE = 8
AUDIO_LSB_MAGIC = b"STGH"
AUDIO_ECHO_MAGIC = b"STGE"


class SentinelFrame:
    """Append an end marker; escape payload bytes that could start one.

    Payload bytes equal to the escape byte or to the marker's first byte are
    prefixed with the escape byte, so an unescaped marker only ever appears
    at the real end of the payload. Plain text without ``<`` frames to
    ``payload + marker`` unchanged.
    """

    def __init__(self, marker: bytes = END_MARKER, escape: int = ESCAPE_BYTE):
        if not marker:
            raise ValueError("marker must not be empty")
        if marker[0] == escape:
            raise ValueError("marker must not start with the escape byte")
        self.marker = marker
        self.escape = escape
        self._esc = bytes([escape])
        self._lead = marker[:1]
        self._escaped = re.compile(re.escape(self._esc) + b"(.)", re.DOTALL)

    @property
    def overhead(self) -> int:
        return len(self.marker)

    def frame(self, payload: bytes) -> bytes:
        body = payload.replace(self._esc, self._esc * 2).replace(self._lead, self._esc + self._lead)
        return body + self.marker

    def unframe(self, stream: bytes) -> bytes:
        start = 0
        while True:
            end = stream.find(self.marker, start)
            if end < 0:
                raise NoHiddenDataFound()
            # An odd run of escape bytes right before the hit means its first byte is escaped.
            run = 0
            while run < end and stream[end - run - 1] == self.escape:
                run += 1
            if run % 2 == 0:
                return self._escaped.sub(rb"\1", stream[:end])
            start = end + 1


class HeaderFrame:
    """``magic(4) || length(4, big-endian) || payload``."""

    def __init__(self, magic: bytes):
        if len(magic) != 4:
            raise ValueError("magic must be exactly 4 bytes")
        self.magic = magic

    @property
    def overhead(self) -> int:
        return HEADER_SIZE

    def frame(self, payload: bytes) -> bytes:
        return self.magic + struct.pack(">I", len(payload)) + payload

    def parse_header(self, header: bytes) -> int:
        """Validate the magic and return the declared payload length."""
        if len(header) < HEADER_SIZE or header[:4] != self.magic:
            raise NoHiddenDataFound(
                "Could not extract message from this audio. Please ensure this file contains hidden data."
            )
        (length,) = struct.unpack(">I", header[4:HEADER_SIZE])
        return length

    def unframe(self, data: bytes) -> bytes:
        length = self.parse_header(data[:HEADER_SIZE])
        payload = data[HEADER_SIZE:HEADER_SIZE + length]
        if len(payload) != length:
            raise CorruptPayload("Incomplete message data", {"declared": length, "available": len(payload)})
        return payload
