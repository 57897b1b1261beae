"""In-memory carrier buffers and their container I/O."""
from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
import soundfile as sf
from PIL import Image

from .errors import CarrierDecodeError

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes]

PCM16_SCALE = 0x7FFF


def _as_stream(source: Source):
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    return str(source)


@dataclass
class CarrierImage:
    """RGBA raster; ``pixels`` has shape (height, width, 4) and dtype uint8."""

    pixels: np.ndarray

    def __post_init__(self):
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise CarrierDecodeError(f"Expected an RGBA pixel buffer, got shape {pixels.shape}")
        self.pixels = np.ascontiguousarray(pixels, dtype=np.uint8)

    kind = "image"

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2])

    def copy(self) -> "CarrierImage":
        return CarrierImage(self.pixels.copy())

    @classmethod
    def from_pil(cls, img: Image.Image) -> "CarrierImage":
        return cls(np.array(img.convert("RGBA"), dtype=np.uint8))

    def to_pil(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    @classmethod
    def open(cls, source: Source) -> "CarrierImage":
        try:
            with Image.open(_as_stream(source)) as img:
                img.load()
                return cls.from_pil(img)
        except OSError as exc:
            raise CarrierDecodeError(f"Could not decode image carrier: {exc}") from exc

    def save(self, path: Union[str, Path]) -> None:
        """Save losslessly. Anything other than .bmp/.tif/.tiff is written as PNG."""
        ext = os.path.splitext(str(path))[1].lower()
        fmt = {".bmp": "BMP", ".tif": "TIFF", ".tiff": "TIFF"}.get(ext, "PNG")
        self.to_pil().save(str(path), format=fmt)

    def to_png_bytes(self) -> bytes:
        buf = io.BytesIO()
        self.to_pil().save(buf, format="PNG")
        return buf.getvalue()


@dataclass
class CarrierAudio:
    """Multi-channel waveform; ``samples`` is (n_channels, n_samples) float64 in [-1, 1]."""

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        samples = np.asarray(self.samples, dtype=np.float64)
        if samples.ndim == 1:
            samples = samples[None, :]
        if samples.ndim != 2 or samples.shape[0] == 0:
            raise CarrierDecodeError(f"Expected (channels, samples) audio, got shape {samples.shape}")
        self.samples = samples
        self.sample_rate = int(self.sample_rate)

    kind = "audio"

    @property
    def n_channels(self) -> int:
        return int(self.samples.shape[0])

    @property
    def n_samples(self) -> int:
        return int(self.samples.shape[1])

    def copy(self) -> "CarrierAudio":
        return CarrierAudio(self.samples.copy(), self.sample_rate)

    @classmethod
    def open(cls, source: Source) -> "CarrierAudio":
        """Read any container libsndfile understands.

        16-bit PCM is read as raw integers and scaled by 1/32767 so that
        :func:`to_pcm16` recovers the stored samples exactly.
        """
        try:
            with sf.SoundFile(_as_stream(source)) as f:
                sample_rate = f.samplerate
                if f.subtype == "PCM_16":
                    data = f.read(dtype="int16", always_2d=True).astype(np.float64) / PCM16_SCALE
                else:
                    data = f.read(dtype="float64", always_2d=True)
        except (RuntimeError, TypeError) as exc:
            raise CarrierDecodeError(f"Could not decode audio carrier: {exc}") from exc
        return cls(data.T, sample_rate)

    def save(self, path: Union[str, Path]) -> None:
        sf.write(str(path), to_pcm16(self.samples).T, self.sample_rate, subtype="PCM_16", format="WAV")

    def to_wav_bytes(self) -> bytes:
        buf = io.BytesIO()
        sf.write(buf, to_pcm16(self.samples).T, self.sample_rate, subtype="PCM_16", format="WAV")
        return buf.getvalue()


Carrier = Union[CarrierImage, CarrierAudio]


def to_pcm16(samples: np.ndarray) -> np.ndarray:
    """``round(clamp(x, -1, 1) * 32767)`` as int16."""
    return np.rint(np.clip(samples, -1.0, 1.0) * PCM16_SCALE).astype(np.int16)


def from_pcm16(pcm: np.ndarray) -> np.ndarray:
    return pcm.astype(np.float64) / PCM16_SCALE


def silence(seconds: float = 1.0, sample_rate: int = 44100, channels: int = 1) -> CarrierAudio:
    n = int(round(seconds * sample_rate))
    return CarrierAudio(np.zeros((channels, n), dtype=np.float64), sample_rate)


def open_carrier(source: Source) -> Carrier:
    """Decode ``source`` as an image, falling back to audio."""
    try:
        return CarrierImage.open(source)
    except CarrierDecodeError:
        logger.debug("Source is not an image, trying audio")
    try:
        return CarrierAudio.open(source)
    except CarrierDecodeError as exc:
        raise CarrierDecodeError("Carrier is neither a supported image nor audio file") from exc
