"""Algorithm selection and auto-detection.

The algorithm set is closed: :class:`Algorithm` names every codec and
:data:`CODECS` maps each one to its ``(encode, decode, capacity)`` functions
and the frame it wraps payloads in.
Decoding without an explicit algorithm walks a fixed candidate order for the
carrier kind and returns the first validly framed payload.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, Tuple, Union

from . import audio_codecs, capacity, image_codecs
from .bits import decode_utf8
from .carriers import Carrier, CarrierAudio, CarrierImage
from .errors import CorruptPayload, NoHiddenDataFound, UnsupportedCombination
from .framing import HeaderFrame, SentinelFrame

logger = logging.getLogger(__name__)


class Algorithm(Enum):
    LSB = "lsb"
    DCT = "dct"
    DWT = "dwt"
    AUDIO_LSB = "audio_lsb"
    AUDIO_ECHO = "audio_echo"

    @property
    def kind(self) -> str:
        return "audio" if self.value.startswith("audio_") else "image"

    @classmethod
    def parse(cls, value: Union["Algorithm", str]) -> "Algorithm":
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            choices = ", ".join(a.value for a in cls)
            raise UnsupportedCombination(f"Unknown algorithm {value!r} (expected one of: {choices})") from None


# Identifiers stored by earlier releases.
_ALIASES = {
    "audio_phase": "audio_lsb",
    "wavelet": "dwt",
}


class Codec(NamedTuple):
    kind: str
    encode: Callable[[Carrier, bytes], Carrier]
    decode: Callable[..., bytes]
    capacity: Callable[[Carrier], int]
    frame: Union[SentinelFrame, HeaderFrame]


def _image_decoder(fn: Callable[[CarrierImage], bytes]) -> Callable[..., bytes]:
    def decode(carrier: CarrierImage, require_text: bool = False) -> bytes:
        payload = fn(carrier)
        if require_text:
            decode_utf8(payload)
        return payload

    decode.__name__ = fn.__name__
    return decode


CODECS: Dict[Algorithm, Codec] = {
    Algorithm.LSB: Codec(
        "image", image_codecs.encode_lsb, _image_decoder(image_codecs.decode_lsb), image_codecs.lsb_capacity,
        image_codecs.FRAME,
    ),
    Algorithm.DCT: Codec(
        "image", image_codecs.encode_dct, _image_decoder(image_codecs.decode_dct), image_codecs.block_capacity,
        image_codecs.FRAME,
    ),
    Algorithm.DWT: Codec(
        "image", image_codecs.encode_dwt, _image_decoder(image_codecs.decode_dwt), image_codecs.block_capacity,
        image_codecs.FRAME,
    ),
    Algorithm.AUDIO_LSB: Codec(
        "audio", audio_codecs.encode_audio_lsb, audio_codecs.decode_audio_lsb, audio_codecs.audio_lsb_capacity,
        audio_codecs.LSB_FRAME,
    ),
    Algorithm.AUDIO_ECHO: Codec(
        "audio", audio_codecs.encode_audio_echo, audio_codecs.decode_audio_echo, audio_codecs.audio_echo_capacity,
        audio_codecs.ECHO_FRAME,
    ),
}

IMAGE_ORDER: Tuple[Algorithm, ...] = (Algorithm.LSB, Algorithm.DCT, Algorithm.DWT)
AUDIO_ORDER: Tuple[Algorithm, ...] = (Algorithm.AUDIO_LSB, Algorithm.AUDIO_ECHO)


@dataclass(frozen=True)
class Revealed:
    payload: bytes
    algorithm: Algorithm

    @property
    def text(self) -> str:
        return decode_utf8(self.payload)


def carrier_kind(carrier: Carrier) -> str:
    if isinstance(carrier, CarrierImage):
        return "image"
    if isinstance(carrier, CarrierAudio):
        return "audio"
    raise UnsupportedCombination(f"Unsupported carrier type: {type(carrier).__name__}")


def candidates_for(carrier: Carrier) -> Tuple[Algorithm, ...]:
    return IMAGE_ORDER if carrier_kind(carrier) == "image" else AUDIO_ORDER


def codec_for(carrier: Carrier, algorithm: Union[Algorithm, str]) -> Codec:
    algorithm = Algorithm.parse(algorithm)
    kind = carrier_kind(carrier)
    codec = CODECS[algorithm]
    if codec.kind != kind:
        raise UnsupportedCombination(
            f"Algorithm {algorithm.value!r} cannot be used with an {kind} carrier",
            {"algorithm": algorithm.value, "carrier": kind},
        )
    return codec


def hide(carrier: Carrier, payload: Union[bytes, str], algorithm: Union[Algorithm, str]) -> Carrier:
    """Embed ``payload`` with an explicitly chosen algorithm and return the new carrier."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    algorithm = Algorithm.parse(algorithm)
    codec = codec_for(carrier, algorithm)
    capacity.check_capacity(carrier, algorithm, len(codec.frame.frame(payload)) * 8)
    return codec.encode(carrier, payload)


def reveal(
    carrier: Carrier,
    algorithm: Optional[Union[Algorithm, str]] = None,
    require_text: bool = True,
) -> Revealed:
    """Recover a payload, auto-detecting the algorithm when none is given."""
    if algorithm is not None:
        algorithm = Algorithm.parse(algorithm)
        codec = codec_for(carrier, algorithm)
        return Revealed(codec.decode(carrier, require_text=require_text), algorithm)

    for candidate in candidates_for(carrier):
        codec = CODECS[candidate]
        try:
            payload = codec.decode(carrier.copy(), require_text=require_text)
        except (NoHiddenDataFound, CorruptPayload) as exc:
            logger.debug("Auto-detect: %s failed (%s)", candidate.value, exc.message)
            continue
        logger.info("Auto-detect: payload found with %s", candidate.value)
        return Revealed(payload, candidate)

    raise NoHiddenDataFound(
        "Could not detect algorithm: no candidate found hidden data",
        {"tried": [a.value for a in candidates_for(carrier)]},
    )
