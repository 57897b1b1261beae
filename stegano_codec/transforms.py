"""Block transform library shared by the frequency-domain image codecs.

Blocks are square ``block_size`` tiles of a single 2-D channel. Only full
tiles are visited; trailing partial rows and columns are left alone.
"""
from __future__ import annotations

from typing import Iterator, Tuple

import cv2
import numpy as np
import pywt


Block = Tuple[int, int]  # (row_block_index, col_block_index)

BLOCK_SIZE = 8

# Standard JPEG luminance table.
QUANTIZATION_MATRIX = np.array(
    [
        [16, 11, 10, 16, 24, 40, 51, 61],
        [12, 12, 14, 19, 26, 58, 60, 55],
        [14, 13, 16, 24, 40, 57, 69, 56],
        [14, 17, 22, 29, 51, 87, 80, 62],
        [18, 22, 37, 56, 68, 109, 103, 77],
        [24, 35, 55, 64, 81, 104, 113, 92],
        [49, 64, 78, 87, 103, 121, 120, 101],
        [72, 92, 95, 98, 112, 100, 103, 99],
    ],
    dtype=np.float64,
)


def block_grid(height: int, width: int, block_size: int = BLOCK_SIZE) -> Tuple[int, int]:
    return height // block_size, width // block_size


def split_blocks(channel: np.ndarray, block_size: int = BLOCK_SIZE) -> Iterator[Tuple[Block, np.ndarray]]:
    """Yield ``((bi, bj), block)`` in block-row-major order.

    Blocks are float64 copies, so callers may transform them freely.
    """
    rows, cols = block_grid(channel.shape[0], channel.shape[1], block_size)
    for bi in range(rows):
        for bj in range(cols):
            yield (bi, bj), block_at(channel, (bi, bj), block_size)


def block_at(channel: np.ndarray, pos: Block, block_size: int = BLOCK_SIZE) -> np.ndarray:
    bi, bj = pos
    i = bi * block_size
    j = bj * block_size
    return channel[i:i+block_size, j:j+block_size].astype(np.float64)


def merge_block(channel: np.ndarray, pos: Block, block: np.ndarray, block_size: int = BLOCK_SIZE) -> None:
    """Write one reconstructed block back into ``channel`` (uint8), rounding and clamping."""
    bi, bj = pos
    i = bi * block_size
    j = bj * block_size
    channel[i:i+block_size, j:j+block_size] = np.clip(np.rint(block), 0, 255).astype(channel.dtype)


def dct2(block: np.ndarray) -> np.ndarray:
    return cv2.dct(block.astype(np.float64))


def idct2(coeffs: np.ndarray) -> np.ndarray:
    return cv2.idct(coeffs.astype(np.float64))


def quantize(coeffs: np.ndarray, table: np.ndarray = QUANTIZATION_MATRIX) -> np.ndarray:
    return np.round(coeffs / table)


def dequantize(coeffs: np.ndarray, table: np.ndarray = QUANTIZATION_MATRIX) -> np.ndarray:
    return coeffs * table


def haar2(block: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Single-level 2-D Haar transform returning ``(LL, LH, HL, HH)``."""
    LL, (LH, HL, HH) = pywt.dwt2(block.astype(np.float64), "haar", mode="periodization")
    return LL, LH, HL, HH


def ihaar2(LL: np.ndarray, LH: np.ndarray, HL: np.ndarray, HH: np.ndarray) -> np.ndarray:
    return pywt.idwt2((LL, (LH, HL, HH)), "haar", mode="periodization")
