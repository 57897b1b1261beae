from __future__ import annotations

import click

from . import config
from .capacity import capacity_report
from .carriers import CarrierAudio, CarrierImage, open_carrier
from .crypto import content_digest, is_sealed, open_message, seal_message, verify_digest
from .dispatch import Algorithm, hide as hide_payload, reveal as reveal_payload
from .errors import StegoError

ALGORITHM_CHOICES = [a.value for a in Algorithm] + ["audio_phase", "wavelet"]


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Stegano-Codec CLI: hide/reveal messages in images and audio."""
    config.configure_logging(verbose)


@cli.command()
@click.option("--in", "in_path", required=True, help="Cover image (PNG/BMP/JPEG) or audio (WAV/FLAC)")
@click.option("--out", "out_path", required=True, help="Output stego file (PNG for images, WAV for audio)")
@click.option("--message", default=None, help="Secret message text")
@click.option("--message-file", "message_path", default=None, help="File containing the secret message (UTF-8)")
@click.option("--algorithm", type=click.Choice(ALGORITHM_CHOICES, case_sensitive=False), default=None,
              help="Embedding algorithm (default: lsb for images, audio_lsb for audio)")
@click.option("--password", default=None, help="Seal the message with AES-256-GCM before embedding")
def hide(in_path: str, out_path: str, message, message_path, algorithm, password):
    """Hide a message inside a cover image or audio file."""
    if (message is None) == (message_path is None):
        raise click.UsageError("Provide exactly one of --message or --message-file")
    if message_path is not None:
        with open(message_path, "r", encoding="utf-8") as f:
            message = f.read()
    if password:
        message = seal_message(password, message)

    try:
        carrier = open_carrier(in_path)
        if algorithm is None:
            algorithm = Algorithm.LSB if isinstance(carrier, CarrierImage) else Algorithm.AUDIO_LSB
        stego = hide_payload(carrier, message, algorithm)
        stego.save(out_path)
    except StegoError as e:
        raise click.ClickException(e.message)
    with open(out_path, "rb") as f:
        stego_digest = content_digest(f.read())
    click.echo(f"Stego file saved to: {out_path}")
    click.echo(f"SHA-256: {stego_digest}")


@cli.command()
@click.option("--in", "in_path", required=True, help="Stego image or audio file")
@click.option("--algorithm", type=click.Choice(ALGORITHM_CHOICES + ["auto"], case_sensitive=False),
              default="auto", show_default=True, help="Algorithm used when hiding")
@click.option("--password", default=None, help="Password if the message was sealed")
@click.option("--out", "out_path", default=None, help="Write the recovered message to this file")
def reveal(in_path: str, algorithm: str, password, out_path):
    """Extract a hidden message, auto-detecting the algorithm by default."""
    try:
        carrier = open_carrier(in_path)
        result = reveal_payload(carrier, None if algorithm == "auto" else algorithm)
        text = result.text
        if is_sealed(text):
            if not password:
                raise click.ClickException("Message is password protected; pass --password")
            text = open_message(password, text)
    except StegoError as e:
        raise click.ClickException(e.message)

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(text)
        click.echo(f"Recovered message ({result.algorithm.value}) saved to: {out_path}")
    else:
        click.echo(f"[{result.algorithm.value}] {text}")


@cli.command()
@click.option("--in", "in_path", required=True, help="Cover image or audio file")
def capacity(in_path: str):
    """Show the maximum message size per algorithm."""
    try:
        carrier = open_carrier(in_path)
    except StegoError as e:
        raise click.ClickException(e.message)
    if isinstance(carrier, CarrierAudio):
        click.echo(f"Audio: {carrier.n_channels} channel(s), {carrier.n_samples} samples @ {carrier.sample_rate} Hz")
    else:
        click.echo(f"Image: {carrier.width}x{carrier.height}")
    for name, size in capacity_report(carrier).items():
        click.echo(f"  {name:<11} {size} bytes")


@cli.command()
@click.option("--in", "in_path", required=True, help="File to hash")
@click.option("--expect", default=None, help="Fail unless the digest equals this hex value")
def digest(in_path: str, expect):
    """Print the SHA-256 digest of a file, optionally checking it."""
    with open(in_path, "rb") as f:
        data = f.read()
    click.echo(content_digest(data))
    if expect is not None and not verify_digest(data, expect):
        raise click.ClickException("Digest mismatch: the file has changed")


if __name__ == "__main__":
    cli()
