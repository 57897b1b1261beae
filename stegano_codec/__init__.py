"""Stegano-Codec package: hide byte payloads in images and PCM audio.

Modules:
- bits: byte/bit packing helpers
- transforms: 8x8 blocks, DCT/IDCT with quantization, 2-D Haar wavelet
- framing: end-marker sentinel and magic+length header frames
- carriers: RGBA image and multi-channel audio buffers with file I/O
- image_codecs: LSB, DCT-parity and wavelet-parity embedding
- audio_codecs: 16-bit PCM LSB embedding and echo hiding
- capacity: per-algorithm capacity planning
- dispatch: algorithm registry, explicit dispatch and auto-detection
- crypto: optional AES-256-GCM sealing and SHA-256 digests
- cli: command-line interface (hide/reveal/capacity/digest)
"""

from .carriers import CarrierAudio, CarrierImage, open_carrier
from .dispatch import Algorithm, Revealed, hide, reveal
from .errors import (
    CapacityExceeded,
    CarrierDecodeError,
    CorruptPayload,
    EmbeddingFailed,
    NoHiddenDataFound,
    StegoError,
    UnsupportedCombination,
)

__all__ = [
    "Algorithm",
    "CapacityExceeded",
    "CarrierAudio",
    "CarrierDecodeError",
    "CarrierImage",
    "CorruptPayload",
    "EmbeddingFailed",
    "NoHiddenDataFound",
    "Revealed",
    "StegoError",
    "UnsupportedCombination",
    "hide",
    "open_carrier",
    "reveal",
]
