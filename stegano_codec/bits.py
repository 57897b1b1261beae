from __future__ import annotations

from typing import Iterable, Union

import numpy as np

from .errors import CorruptPayload

BitsLike = Union[np.ndarray, Iterable[int]]


def bytes_to_bits(data: bytes) -> np.ndarray:
    """Expand bytes into a uint8 array of 0/1 values, most significant bit first."""
    return np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8))


def bits_to_bytes(bits: BitsLike, strict: bool = True) -> bytes:
    """Pack 0/1 values back into bytes, MSB first.

    With ``strict`` a bit count that is not a multiple of 8 is an error;
    otherwise the trailing partial byte is dropped.
    """
    arr = np.asarray(list(bits) if not isinstance(bits, np.ndarray) else bits, dtype=np.uint8)
    if arr.size % 8 != 0:
        if strict:
            raise ValueError("Bit length not divisible by 8")
        arr = arr[: arr.size - arr.size % 8]
    return np.packbits(arr & 1).tobytes()


def text_to_bits(text: str) -> np.ndarray:
    return bytes_to_bits(text.encode("utf-8"))


def bits_to_text(bits: BitsLike) -> str:
    return decode_utf8(bits_to_bytes(bits))


def decode_utf8(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptPayload("Invalid UTF-8 data in decoded message") from exc
