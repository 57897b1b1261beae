"""End-to-end tests for the click CLI."""

import pytest
from click.testing import CliRunner

from stegano_codec.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cover_png(image, tmp_path):
    path = tmp_path / "cover.png"
    image.save(path)
    return str(path)


@pytest.fixture
def cover_wav(silent_audio, tmp_path):
    path = tmp_path / "cover.wav"
    silent_audio.save(path)
    return str(path)


class TestCli:

    @pytest.mark.parametrize("algorithm", ["lsb", "dct", "dwt"])
    def test_hide_and_reveal_image(self, runner, cover_png, tmp_path, algorithm):
        out = str(tmp_path / "stego.png")
        result = runner.invoke(cli, ["hide", "--in", cover_png, "--out", out, "--message", "HELLO",
                                     "--algorithm", algorithm])
        assert result.exit_code == 0, result.output
        assert "SHA-256:" in result.output

        result = runner.invoke(cli, ["reveal", "--in", out])
        assert result.exit_code == 0, result.output
        assert f"[{algorithm}] HELLO" in result.output

    def test_audio_defaults_to_pcm_lsb(self, runner, cover_wav, tmp_path):
        out = str(tmp_path / "stego.wav")
        result = runner.invoke(cli, ["hide", "--in", cover_wav, "--out", out, "--message", "HELLO"])
        assert result.exit_code == 0, result.output
        result = runner.invoke(cli, ["reveal", "--in", out, "--algorithm", "audio_lsb"])
        assert "[audio_lsb] HELLO" in result.output

    def test_password(self, runner, cover_png, tmp_path, fast_kdf):
        out = str(tmp_path / "stego.png")
        runner.invoke(cli, ["hide", "--in", cover_png, "--out", out, "--message", "secret", "--password", "pw"])

        locked = runner.invoke(cli, ["reveal", "--in", out])
        assert locked.exit_code != 0
        assert "password" in locked.output

        wrong = runner.invoke(cli, ["reveal", "--in", out, "--password", "nope"])
        assert wrong.exit_code != 0

        result = runner.invoke(cli, ["reveal", "--in", out, "--password", "pw"])
        assert result.exit_code == 0, result.output
        assert "secret" in result.output

    def test_message_file_and_output_file(self, runner, cover_png, tmp_path):
        message = tmp_path / "msg.txt"
        message.write_text("from a file", encoding="utf-8")
        stego = str(tmp_path / "stego.png")
        recovered = tmp_path / "out.txt"
        runner.invoke(cli, ["hide", "--in", cover_png, "--out", stego, "--message-file", str(message)])
        result = runner.invoke(cli, ["reveal", "--in", stego, "--out", str(recovered)])
        assert result.exit_code == 0, result.output
        assert recovered.read_text(encoding="utf-8") == "from a file"

    def test_requires_one_message_source(self, runner, cover_png, tmp_path):
        result = runner.invoke(cli, ["hide", "--in", cover_png, "--out", str(tmp_path / "x.png")])
        assert result.exit_code != 0

    def test_too_large(self, runner, cover_png, tmp_path):
        result = runner.invoke(cli, ["hide", "--in", cover_png, "--out", str(tmp_path / "x.png"),
                                     "--message", "x" * 100, "--algorithm", "dct"])
        assert result.exit_code != 0
        assert "too large" in result.output

    def test_unsupported_combination(self, runner, cover_png, tmp_path):
        result = runner.invoke(cli, ["hide", "--in", cover_png, "--out", str(tmp_path / "x.png"),
                                     "--message", "HELLO", "--algorithm", "audio_echo"])
        assert result.exit_code != 0
        assert "cannot be used" in result.output

    def test_nothing_hidden(self, runner, cover_png):
        result = runner.invoke(cli, ["reveal", "--in", cover_png])
        assert result.exit_code != 0
        assert "detect" in result.output

    def test_capacity(self, runner, cover_png):
        result = runner.invoke(cli, ["capacity", "--in", cover_png])
        assert result.exit_code == 0
        assert "64x64" in result.output
        assert "1527 bytes" in result.output

    def test_digest(self, runner, tmp_path):
        path = tmp_path / "abc.bin"
        path.write_bytes(b"abc")
        result = runner.invoke(cli, ["digest", "--in", str(path)])
        assert result.output.strip().startswith("ba7816bf")

    def test_digest_expect(self, runner, tmp_path):
        path = tmp_path / "abc.bin"
        path.write_bytes(b"abc")
        good = "BA7816BF8F01CFEA414140DE5DAE2223B00361A396177A9CB410FF61F20015AD"
        assert runner.invoke(cli, ["digest", "--in", str(path), "--expect", good]).exit_code == 0
        result = runner.invoke(cli, ["digest", "--in", str(path), "--expect", "00" * 32])
        assert result.exit_code != 0
        assert "mismatch" in result.output

    def test_hide_then_verify_digest(self, runner, cover_png, tmp_path):
        out = str(tmp_path / "stego.png")
        result = runner.invoke(cli, ["hide", "--in", cover_png, "--out", out, "--message", "HELLO"])
        printed = result.output.split("SHA-256:")[1].strip()
        assert runner.invoke(cli, ["digest", "--in", out, "--expect", printed]).exit_code == 0
