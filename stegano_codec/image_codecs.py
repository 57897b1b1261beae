"""Image codecs: bit-plane (LSB), DCT coefficient parity and Haar wavelet coefficient parity.

Every codec frames the payload with :class:`~stegano_codec.framing.SentinelFrame`,
checks capacity before touching pixels and embeds into a copy of the carrier.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Tuple

import numpy as np

from . import config
from .bits import bits_to_bytes, bytes_to_bits
from .carriers import CarrierImage
from .errors import CapacityExceeded, EmbeddingFailed
from .framing import SentinelFrame
from .transforms import (
    BLOCK_SIZE,
    QUANTIZATION_MATRIX,
    block_at,
    block_grid,
    dct2,
    dequantize,
    haar2,
    idct2,
    merge_block,
    quantize,
    split_blocks,
)

logger = logging.getLogger(__name__)

FRAME = SentinelFrame()
COLOR_CHANNELS = 3


def _framed_bits(payload: bytes, available: int) -> np.ndarray:
    bits = bytes_to_bits(FRAME.frame(payload))
    if bits.size > available:
        raise CapacityExceeded(int(bits.size), available)
    return bits


def _set_parity(value: float, bit: int) -> int:
    """Round ``value`` and step it by one if its parity differs from ``bit``."""
    k = int(round(value))
    if k % 2 != bit:
        k += 1 if k % 2 == 0 else -1
    return k


# ---------------------------------------------------------------- bit-plane


def lsb_capacity(carrier: CarrierImage) -> int:
    return carrier.width * carrier.height * COLOR_CHANNELS


def encode_lsb(carrier: CarrierImage, payload: bytes) -> CarrierImage:
    bits = _framed_bits(payload, lsb_capacity(carrier))
    out = carrier.copy()
    # R, G, B bytes of each pixel in buffer order; alpha is never touched.
    rgb = out.pixels[:, :, :COLOR_CHANNELS].reshape(-1)
    n = bits.size
    rgb[:n] = (rgb[:n] & 0xFE) | bits
    out.pixels[:, :, :COLOR_CHANNELS] = rgb.reshape(carrier.height, carrier.width, COLOR_CHANNELS)
    logger.debug("LSB: embedded %d bits into %d eligible bytes", n, rgb.size)
    return out


def decode_lsb(carrier: CarrierImage) -> bytes:
    bits = carrier.pixels[:, :, :COLOR_CHANNELS].reshape(-1) & 1
    return FRAME.unframe(bits_to_bytes(bits, strict=False))


# ---------------------------------------------------------- block transforms

BlockEmbed = Callable[[np.ndarray, int], np.ndarray]
BlockRead = Callable[[np.ndarray], int]


def block_capacity(carrier: CarrierImage, block_size: int = BLOCK_SIZE) -> int:
    rows, cols = block_grid(carrier.height, carrier.width, block_size)
    return COLOR_CHANNELS * rows * cols


def _embed_blocks(carrier: CarrierImage, payload: bytes, embed: BlockEmbed, read: BlockRead) -> CarrierImage:
    bits = _framed_bits(payload, block_capacity(carrier))
    out = carrier.copy()
    idx = 0
    n = bits.size
    for c in range(COLOR_CHANNELS):
        if idx >= n:
            break
        channel = out.pixels[:, :, c]
        for pos, block in split_blocks(channel):
            if idx >= n:
                break
            bit = int(bits[idx])
            merge_block(channel, pos, embed(block, bit))
            if read(block_at(channel, pos)) != bit:
                raise EmbeddingFailed(
                    f"Bit {idx} did not survive reconstruction of block {pos} in channel {c}",
                    {"bit": idx, "channel": c, "block": pos},
                )
            idx += 1
    logger.debug("Embedded %d bits into %d blocks", n, idx)
    return out


def _read_blocks(carrier: CarrierImage, read: BlockRead) -> bytes:
    bits: List[int] = []
    for c in range(COLOR_CHANNELS):
        for _pos, block in split_blocks(carrier.pixels[:, :, c]):
            bits.append(read(block))
    return FRAME.unframe(bits_to_bytes(bits, strict=False))


def _dct_swing() -> float:
    """Largest pixel change a one-step parity fix of the target coefficient can cause."""
    u, v = config.DCT_TARGET
    unit = np.zeros((BLOCK_SIZE, BLOCK_SIZE))
    unit[u, v] = 1.0
    return 1.5 * QUANTIZATION_MATRIX[u, v] * float(np.abs(idct2(unit)).max())


def _dct_set_parity(block: np.ndarray, bit: int) -> np.ndarray:
    u, v = config.DCT_TARGET
    coeffs = dct2(block - 128.0)
    q = quantize(coeffs)
    q[u, v] = _set_parity(q[u, v], bit)
    coeffs[u, v] = dequantize(q)[u, v]
    return idct2(coeffs) + 128.0


def _dct_embed(block: np.ndarray, bit: int) -> np.ndarray:
    out = _dct_set_parity(block, bit)
    if np.ptp(out) > 255.0:
        # Too much contrast to fit; flatten toward the block mean first.
        swing = _dct_swing()
        mean = block.mean()
        block = mean + (block - mean) * (255.0 - 2.0 * swing) / np.ptp(block)
        out = _dct_set_parity(block, bit)
    # A uniform offset only moves the DC coefficient.
    out -= max(out.max() - 255.0, 0.0)
    out += max(-out.min(), 0.0)
    return out


def _dct_read(block: np.ndarray) -> int:
    u, v = config.DCT_TARGET
    coeffs = quantize(dct2(block - 128.0))
    return int(round(coeffs[u, v])) % 2


# HH[0, 0] = (a - b - c + d) / 2 over the block's top-left 2x2 pixels.
_HH_SIGNS = np.array([[1.0, -1.0], [-1.0, 1.0]])


def _dwt_index(value: float) -> int:
    # HH of an integer block is a multiple of 0.5; snap away float noise first.
    value = round(value * 2.0) / 2.0
    return int(np.floor(value / config.DWT_STEP + 0.5))


def _dwt_embed(block: np.ndarray, bit: int) -> np.ndarray:
    _LL, _LH, _HL, HH = haar2(block)
    q = _dwt_index(HH[0, 0])
    if q % 2 == bit:
        return block
    # One lattice step is 2 * DWT_STEP in signed pixel units over the 2x2 corner.
    need = int(round(2 * config.DWT_STEP))
    corner = block[:2, :2]
    directions: Tuple[int, int] = (1, -1) if q % 2 == 0 else (-1, 1)
    for t in directions:
        signs = _HH_SIGNS * t
        room = np.where(signs > 0, 255.0 - corner, corner).ravel()
        if room.sum() < need:
            continue
        delta = np.minimum(room, need // 4)
        for i in np.argsort(-room, kind="stable"):
            delta[i] += min(room[i] - delta[i], need - delta.sum())
        out = block.copy()
        out[:2, :2] += signs * delta.reshape(2, 2)
        return out
    raise EmbeddingFailed("Wavelet coefficient cannot be moved inside [0, 255]", {"HH": float(HH[0, 0])})


def _dwt_read(block: np.ndarray) -> int:
    _LL, _LH, _HL, HH = haar2(block)
    return _dwt_index(HH[0, 0]) % 2


def encode_dct(carrier: CarrierImage, payload: bytes) -> CarrierImage:
    return _embed_blocks(carrier, payload, _dct_embed, _dct_read)


def decode_dct(carrier: CarrierImage) -> bytes:
    return _read_blocks(carrier, _dct_read)


def encode_dwt(carrier: CarrierImage, payload: bytes) -> CarrierImage:
    return _embed_blocks(carrier, payload, _dwt_embed, _dwt_read)


def decode_dwt(carrier: CarrierImage) -> bytes:
    return _read_blocks(carrier, _dwt_read)
