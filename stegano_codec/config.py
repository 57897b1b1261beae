from __future__ import annotations

import logging
import os


LOG_LEVEL = os.getenv("STEGANO_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Key derivation for the optional password sealing.
PBKDF2_ITERATIONS = int(os.getenv("STEGANO_PBKDF2_ITERATIONS", 200_000))

# Echo-hiding audio codec.
ECHO_SEGMENT = int(os.getenv("STEGANO_ECHO_SEGMENT", 1024))
ECHO_ALPHA = float(os.getenv("STEGANO_ECHO_ALPHA", 0.5))
ECHO_DELAY_ZERO = 50
ECHO_DELAY_ONE = 100

# DCT codec target coefficient (row, column) inside an 8x8 block.
DCT_TARGET = (4, 5)

# Lattice step applied to the wavelet HH(0, 0) coefficient.
DWT_STEP = 2.0


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
