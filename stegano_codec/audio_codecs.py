"""Audio codecs.

``audio_lsb`` writes one header/payload bit into the least significant bit of
each 16-bit PCM sample of the first channel. ``audio_echo`` is the lossy
alternative: each bit is carried by a faint echo at one of two delays within
a fixed-length segment, detected through the segment's autocorrelation. The
two share the magic + length header layout but use different magics, so one
decoder never accepts the other's stream.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np

from . import config
from .bits import bits_to_bytes, bytes_to_bits, decode_utf8
from .carriers import CarrierAudio, from_pcm16, to_pcm16
from .errors import CapacityExceeded, CorruptPayload, NoHiddenDataFound
from .framing import AUDIO_ECHO_MAGIC, AUDIO_LSB_MAGIC, HEADER_SIZE, HeaderFrame

logger = logging.getLogger(__name__)

LSB_FRAME = HeaderFrame(AUDIO_LSB_MAGIC)
ECHO_FRAME = HeaderFrame(AUDIO_ECHO_MAGIC)

HEADER_BITS = HEADER_SIZE * 8
PCM16_MIN = -0x7FFF


def _finish(payload: bytes, require_text: bool) -> bytes:
    if require_text:
        decode_utf8(payload)
    return payload


# ------------------------------------------------------------------ PCM LSB


def audio_lsb_capacity(carrier: CarrierAudio) -> int:
    return carrier.n_samples


def encode_audio_lsb(carrier: CarrierAudio, payload: bytes) -> CarrierAudio:
    bits = bytes_to_bits(LSB_FRAME.frame(payload))
    capacity = audio_lsb_capacity(carrier)
    if bits.size > capacity:
        raise CapacityExceeded(int(bits.size), capacity)

    pcm = to_pcm16(carrier.samples[0]).astype(np.int32)
    n = bits.size
    pcm[:n] = (pcm[:n] & ~1) | bits
    # -32768 would be clamped back to -32767 on the next read, flipping the bit.
    pcm[pcm < PCM16_MIN] += 2

    out = carrier.copy()
    out.samples[0] = from_pcm16(pcm)
    logger.debug("audio_lsb: embedded %d bits into %d samples", n, capacity)
    return out


def decode_audio_lsb(carrier: CarrierAudio, require_text: bool = True) -> bytes:
    pcm = to_pcm16(carrier.samples[0])
    if pcm.size < HEADER_BITS:
        raise NoHiddenDataFound("Audio is too short to contain a header")
    lsbs = (pcm & 1).astype(np.uint8)

    length = LSB_FRAME.parse_header(bits_to_bytes(lsbs[:HEADER_BITS]))
    total_bits = (HEADER_SIZE + length) * 8
    if total_bits > pcm.size:
        raise CorruptPayload(
            "Extracted message length exceeds audio capacity",
            {"declared": length, "samples": int(pcm.size)},
        )
    payload = LSB_FRAME.unframe(bits_to_bytes(lsbs[:total_bits]))
    return _finish(payload, require_text)


# ------------------------------------------------------------- echo hiding


def _echo_params(segment: Optional[int], alpha: Optional[float]) -> Tuple[int, float, int, int]:
    segment = segment or config.ECHO_SEGMENT
    alpha = config.ECHO_ALPHA if alpha is None else alpha
    d0, d1 = config.ECHO_DELAY_ZERO, config.ECHO_DELAY_ONE
    if not 0 < d0 < d1 < segment:
        raise ValueError(f"Echo delays ({d0}, {d1}) must fit inside a {segment}-sample segment")
    return segment, alpha, d0, d1


def _delayed(x: np.ndarray, delay: int) -> np.ndarray:
    out = np.zeros_like(x)
    out[delay:] = x[:-delay]
    return out


def audio_echo_capacity(carrier: CarrierAudio, segment: Optional[int] = None) -> int:
    return carrier.n_samples // (segment or config.ECHO_SEGMENT)


def encode_audio_echo(
    carrier: CarrierAudio,
    payload: bytes,
    segment: Optional[int] = None,
    alpha: Optional[float] = None,
) -> CarrierAudio:
    segment, alpha, d0, d1 = _echo_params(segment, alpha)
    bits = bytes_to_bits(ECHO_FRAME.frame(payload))
    capacity = audio_echo_capacity(carrier, segment)
    if bits.size > capacity:
        raise CapacityExceeded(int(bits.size), capacity)

    x = carrier.samples[0]
    span = bits.size * segment
    selector = np.repeat(bits, segment).astype(bool)
    echo = np.where(selector, _delayed(x, d1)[:span], _delayed(x, d0)[:span])

    out = carrier.copy()
    out.samples[0, :span] = np.clip(x[:span] + alpha * echo, -1.0, 1.0)
    logger.debug("audio_echo: embedded %d bits in %d-sample segments", bits.size, segment)
    return out


def _echo_bits(x: np.ndarray, count: int, segment: int, d0: int, d1: int) -> np.ndarray:
    frames = x[: count * segment].reshape(count, segment)
    r0 = np.sum(frames[:, d0:] * frames[:, :-d0], axis=1) / (segment - d0)
    r1 = np.sum(frames[:, d1:] * frames[:, :-d1], axis=1) / (segment - d1)
    return (r1 > r0).astype(np.uint8)


def decode_audio_echo(
    carrier: CarrierAudio,
    require_text: bool = True,
    segment: Optional[int] = None,
) -> bytes:
    segment, _alpha, d0, d1 = _echo_params(segment, None)
    x = carrier.samples[0]
    available = audio_echo_capacity(carrier, segment)
    if available < HEADER_BITS:
        raise NoHiddenDataFound("Audio is too short to contain an echo header")

    length = ECHO_FRAME.parse_header(bits_to_bytes(_echo_bits(x, HEADER_BITS, segment, d0, d1)))
    total_bits = (HEADER_SIZE + length) * 8
    if total_bits > available:
        raise CorruptPayload(
            "Extracted message length exceeds audio capacity",
            {"declared": length, "segments": available},
        )
    bits = _echo_bits(x, total_bits, segment, d0, d1)
    payload = ECHO_FRAME.unframe(bits_to_bytes(bits))
    return _finish(payload, require_text)
