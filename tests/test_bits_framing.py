"""Tests for bit packing and payload framing."""

import numpy as np
import pytest

from stegano_codec.bits import bits_to_bytes, bits_to_text, bytes_to_bits, text_to_bits
from stegano_codec.errors import CorruptPayload, NoHiddenDataFound
from stegano_codec.framing import END_MARKER, ESCAPE_BYTE, HEADER_SIZE, HeaderFrame, SentinelFrame


class TestBits:

    def test_msb_first(self):
        assert list(bytes_to_bits(b"A")) == [0, 1, 0, 0, 0, 0, 0, 1]

    def test_pack_roundtrip(self):
        data = bytes(range(256))
        assert bits_to_bytes(bytes_to_bits(data)) == data

    def test_empty(self):
        assert bytes_to_bits(b"").size == 0
        assert bits_to_bytes([]) == b""

    def test_strict_rejects_partial_byte(self):
        with pytest.raises(ValueError):
            bits_to_bytes([1, 0, 1])

    def test_non_strict_drops_trailing_bits(self):
        bits = np.concatenate([bytes_to_bits(b"Hi"), [1, 1, 1]])
        assert bits_to_bytes(bits, strict=False) == b"Hi"

    def test_text_helpers(self):
        assert bits_to_text(text_to_bits("héllo")) == "héllo"

    def test_invalid_utf8(self):
        with pytest.raises(CorruptPayload):
            bits_to_text(bytes_to_bits(b"\xff\xfe"))


class TestSentinelFrame:

    def test_plain_text_frames_like_marker_suffix(self):
        frame = SentinelFrame()
        assert frame.frame(b"HELLO") == b"HELLO" + END_MARKER

    def test_unframe_ignores_trailing_noise(self):
        frame = SentinelFrame()
        assert frame.unframe(frame.frame(b"HELLO") + b"\x00\x13garbage") == b"HELLO"

    def test_marker_inside_payload_is_escaped(self):
        frame = SentinelFrame()
        payload = b"before" + END_MARKER + b"after"
        framed = frame.frame(payload)
        assert framed.count(END_MARKER) == 1
        assert frame.unframe(framed + b"xyz") == payload

    def test_escape_byte_roundtrip(self):
        frame = SentinelFrame()
        payload = bytes([ESCAPE_BYTE, ESCAPE_BYTE, ord("<")]) + b"<<END>>"
        assert frame.unframe(frame.frame(payload)) == payload

    def test_empty_payload(self):
        frame = SentinelFrame()
        assert frame.frame(b"") == END_MARKER
        assert frame.unframe(END_MARKER) == b""

    def test_missing_marker(self):
        with pytest.raises(NoHiddenDataFound):
            SentinelFrame().unframe(b"\x00" * 64)

    def test_escaped_marker_is_skipped(self):
        stream = bytes([ESCAPE_BYTE]) + END_MARKER + END_MARKER + b"tail"
        assert SentinelFrame().unframe(stream) == END_MARKER

    def test_escaped_escape_before_marker(self):
        stream = bytes([ESCAPE_BYTE, ESCAPE_BYTE]) + END_MARKER
        assert SentinelFrame().unframe(stream) == bytes([ESCAPE_BYTE])

    def test_large_stream(self):
        frame = SentinelFrame()
        prefix = bytes(4 * 1024 * 1024)
        assert frame.unframe(frame.frame(prefix + b"HELLO") + bytes(1024)) == prefix + b"HELLO"
        with pytest.raises(NoHiddenDataFound):
            frame.unframe(prefix)


class TestHeaderFrame:

    def test_layout(self):
        framed = HeaderFrame(b"STGH").frame(b"HELLO")
        assert framed[:4] == b"STGH"
        assert framed[4:HEADER_SIZE] == b"\x00\x00\x00\x05"
        assert framed[HEADER_SIZE:] == b"HELLO"

    def test_roundtrip_with_magic_in_payload(self):
        frame = HeaderFrame(b"STGH")
        payload = b"STGH\x00\x00\x00\x09STGH"
        assert frame.unframe(frame.frame(payload) + b"tail") == payload

    def test_wrong_magic(self):
        with pytest.raises(NoHiddenDataFound):
            HeaderFrame(b"STGE").unframe(HeaderFrame(b"STGH").frame(b"x"))

    def test_truncated_payload(self):
        framed = HeaderFrame(b"STGH").frame(b"HELLO")
        with pytest.raises(CorruptPayload):
            HeaderFrame(b"STGH").unframe(framed[:-2])

    def test_magic_must_be_four_bytes(self):
        with pytest.raises(ValueError):
            HeaderFrame(b"ST")
