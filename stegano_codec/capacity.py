from __future__ import annotations

import logging
from typing import Dict

from . import dispatch
from .errors import CapacityExceeded

logger = logging.getLogger(__name__)


def capacity_bits(carrier, algorithm) -> int:
    """Raw number of bits ``algorithm`` can embed into ``carrier``."""
    return dispatch.codec_for(carrier, algorithm).capacity(carrier)


def framing_overhead(algorithm) -> int:
    """Constant framing cost in bytes (sentinel or header)."""
    return dispatch.CODECS[dispatch.Algorithm.parse(algorithm)].frame.overhead


def max_payload_bytes(carrier, algorithm) -> int:
    """Conservative payload size limit in bytes.

    Sentinel framing may escape some payload bytes, so text containing
    ``<`` can still exceed this bound at encode time.
    """
    return max(0, capacity_bits(carrier, algorithm) // 8 - framing_overhead(algorithm))


def check_capacity(carrier, algorithm, required_bits: int) -> None:
    available = capacity_bits(carrier, algorithm)
    if required_bits > available:
        logger.info("Capacity check failed: need %d bits, have %d", required_bits, available)
        raise CapacityExceeded(required_bits, available)


def capacity_report(carrier) -> Dict[str, int]:
    """``max_payload_bytes`` for every algorithm applicable to the carrier kind."""
    return {alg.value: max_payload_bytes(carrier, alg) for alg in dispatch.candidates_for(carrier)}
