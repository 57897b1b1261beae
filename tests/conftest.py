# Shared carriers for the codec tests.

import numpy as np
import pytest

from stegano_codec import config
from stegano_codec.carriers import CarrierAudio, CarrierImage, silence


def make_image(width=64, height=64, seed=7):
    """Mid-range gradient with mild noise."""
    rng = np.random.default_rng(seed)
    y, x = np.mgrid[0:height, 0:width]
    base = 60 + (x * 63 // max(width - 1, 1)) + (y * 63 // max(height - 1, 1))
    rgb = np.stack([base, base[::-1], np.full_like(base, 128)], axis=2)
    rgb = rgb + rng.integers(-3, 4, size=rgb.shape)
    alpha = np.full((height, width, 1), 255)
    return CarrierImage(np.concatenate([rgb, alpha], axis=2).astype(np.uint8))


def make_noise(seconds=3.0, sample_rate=44100, channels=1, seed=11):
    rng = np.random.default_rng(seed)
    n = int(seconds * sample_rate)
    return CarrierAudio(rng.normal(0.0, 0.1, size=(channels, n)), sample_rate)


@pytest.fixture
def image():
    """64x64 RGBA carrier."""
    return make_image()


@pytest.fixture
def silent_audio():
    """1 second of 44.1 kHz mono silence."""
    return silence(1.0, 44100)


@pytest.fixture
def noise_audio():
    """3 seconds of seeded mono noise; echo hiding needs a non-silent carrier."""
    return make_noise()


@pytest.fixture
def stereo_audio():
    return make_noise(seconds=1.0, channels=2)


@pytest.fixture
def fast_kdf(monkeypatch):
    monkeypatch.setattr(config, "PBKDF2_ITERATIONS", 1000)
