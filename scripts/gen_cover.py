from __future__ import annotations

import sys
from pathlib import Path

import numpy as np

from stegano_codec.carriers import CarrierAudio, CarrierImage, silence


def make_image(h: int = 512, w: int = 512) -> CarrierImage:
    # Base orange gradient (sunset-like)
    y = np.linspace(0, 1, h, dtype=np.float32)[:, None]
    x = np.linspace(0, 1, w, dtype=np.float32)[None, :]
    grad = (0.7 * (1 - y) + 0.2).astype(np.float32)

    rng = np.random.default_rng(42)
    noise = rng.normal(loc=0.0, scale=0.03, size=(h, w)).astype(np.float32)

    vignette = (0.85 + 0.15 * (x * (1 - x) + y * (1 - y))).astype(np.float32)
    base = np.clip(grad * vignette + noise, 0.05, 0.95)
    R = base
    G = 0.45 * base + 0.2
    B = 0.1 * base + 0.3
    A = np.ones_like(base)
    rgba = (np.stack([R, G, B, A], axis=2) * 255).astype(np.uint8)
    return CarrierImage(rgba)


def make_audio(seconds: float = 3.0, sample_rate: int = 44100, noise: bool = True) -> CarrierAudio:
    """Quiet broadband noise; silence works for audio_lsb but not for echo hiding."""
    if not noise:
        return silence(seconds, sample_rate)
    rng = np.random.default_rng(42)
    return CarrierAudio(rng.normal(0.0, 0.05, int(seconds * sample_rate)), sample_rate)


def main(out_dir: Path):
    out_dir.mkdir(parents=True, exist_ok=True)
    make_image().save(out_dir / "cover.png")
    make_audio().save(out_dir / "cover.wav")
    make_audio(1.0, noise=False).save(out_dir / "silence.wav")


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(".")
    main(out)
    print(f"Wrote cover.png, cover.wav and silence.wav to {out.resolve()}")
