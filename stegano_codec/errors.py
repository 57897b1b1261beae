from __future__ import annotations

from typing import Any, Dict, Optional


class StegoError(Exception):
    """Base class for every failure raised by the codecs."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CapacityExceeded(StegoError):
    """Framed payload does not fit the carrier for the chosen algorithm."""

    def __init__(self, required: int, available: int, unit: str = "bits"):
        self.required = required
        self.available = available
        self.unit = unit
        super().__init__(
            f"Message too large for this carrier. Capacity: {available} {unit}, Required: {required} {unit}",
            {"required": required, "available": available, "unit": unit},
        )


class NoHiddenDataFound(StegoError):
    """Framing marker or header is absent from the recovered stream."""

    def __init__(self, message: str = "No hidden message found in this carrier", details=None):
        super().__init__(message, details)


class CorruptPayload(StegoError):
    """Header was found but the payload cannot be recovered or is not valid text."""


class UnsupportedCombination(StegoError):
    """Algorithm requested for a carrier kind it does not handle."""


class CarrierDecodeError(StegoError):
    """Carrier container could not be parsed into a working buffer."""


class EmbeddingFailed(StegoError):
    """A written bit did not read back from the reconstructed carrier."""
