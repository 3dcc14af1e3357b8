"""
test_cli.py - Command Line Interface Tests

Exercises every sub-command through cli.main() with temporary files.

Run with: python -m pytest tests/ -v
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cli import KEY_ENV_VAR, main
from stegano_core import SteganoEngine
from zero_width import ZeroWidthCodec

CARRIER = (
    "Quarterly figures are attached for internal review only. Please do not "
    "forward this summary outside the finance team before the public release. "
) * 4


@pytest.fixture(autouse=True)
def no_env_key(monkeypatch):
    monkeypatch.delenv(KEY_ENV_VAR, raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture
def carrier_file(tmp_path):
    path = tmp_path / "memo.txt"
    path.write_text(CARRIER, encoding="utf-8")
    return path


@pytest.fixture
def marked_file(tmp_path):
    path = tmp_path / "memo_marked.txt"
    path.write_text(SteganoEngine().embed(CARRIER, "s3cret", "Reader-042"), encoding="utf-8")
    return path


# ═══════════════════════════════════════════════════════════════════════════════
# EMBED
# ═══════════════════════════════════════════════════════════════════════════════


class TestEmbedCommand:
    def test_embed_to_file(self, carrier_file, tmp_path):
        out = tmp_path / "out.txt"
        code = main(["embed", str(carrier_file), "-k", "s3cret", "-w", "Reader-042", "-o", str(out)])

        assert code == 0
        marked = out.read_text(encoding="utf-8")
        assert ZeroWidthCodec.strip(marked) == CARRIER
        assert SteganoEngine().extract(marked, "s3cret") == "Reader-042"

    def test_embed_to_stdout(self, carrier_file, capsys):
        code = main(["embed", str(carrier_file), "-k", "s3cret", "-w", "Reader-042"])

        assert code == 0
        marked = capsys.readouterr().out
        assert SteganoEngine().extract(marked, "s3cret") == "Reader-042"

    def test_key_from_environment(self, carrier_file, tmp_path, monkeypatch):
        monkeypatch.setenv(KEY_ENV_VAR, "from-env")
        out = tmp_path / "out.txt"

        assert main(["embed", str(carrier_file), "-w", "Reader-042", "-o", str(out)]) == 0
        assert SteganoEngine().extract(out.read_text(encoding="utf-8"), "from-env") == "Reader-042"

    def test_missing_key(self, carrier_file):
        assert main(["embed", str(carrier_file), "-w", "Reader-042"]) == 1

    def test_missing_file(self, tmp_path):
        assert main(["embed", str(tmp_path / "nope.txt"), "-k", "k", "-w", "hi"]) == 1

    def test_carrier_too_short(self, tmp_path, capsys):
        path = tmp_path / "short.txt"
        path.write_text("short", encoding="utf-8")

        assert main(["embed", str(path), "-k", "k", "-w", "hi"]) == 1
        assert "too short" in capsys.readouterr().err

    def test_refuses_marked_input(self, marked_file):
        assert main(["embed", str(marked_file), "-k", "k", "-w", "hi"]) == 1

    def test_strip_existing(self, marked_file, tmp_path):
        out = tmp_path / "out.txt"
        code = main(
            ["embed", str(marked_file), "-k", "new", "-w", "Second", "--strip-existing", "-o", str(out)]
        )

        assert code == 0
        text = out.read_text(encoding="utf-8")
        assert SteganoEngine().extract(text, "new") == "Second"
        assert SteganoEngine().extract(text, "s3cret") is None

    def test_verbose_report(self, carrier_file, tmp_path, capsys):
        out = tmp_path / "out.txt"
        main(["embed", str(carrier_file), "-k", "k", "-w", "hi", "-o", str(out), "-v"])
        assert "Embed Report" in capsys.readouterr().err


# ═══════════════════════════════════════════════════════════════════════════════
# EXTRACT / CHECK / CLEAN
# ═══════════════════════════════════════════════════════════════════════════════


class TestExtractCommand:
    def test_extract_found(self, marked_file, capsys):
        assert main(["extract", str(marked_file), "-k", "s3cret"]) == 2
        assert capsys.readouterr().out.strip() == "Reader-042"

    def test_extract_wrong_key(self, marked_file):
        assert main(["extract", str(marked_file), "-k", "wrong"]) == 0

    def test_extract_json(self, marked_file, capsys):
        assert main(["extract", str(marked_file), "-k", "s3cret", "--json"]) == 2
        data = json.loads(capsys.readouterr().out)
        assert data["found"] is True
        assert data["watermark"] == "Reader-042"

    def test_extract_hmac_mismatch(self, marked_file):
        assert main(["extract", str(marked_file), "-k", "s3cret", "--tag", "hmac"]) == 0

    def test_extract_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")
        assert main(["extract", str(path), "-k", "s3cret"]) == 1


class TestCheckAndCleanCommands:
    def test_check(self, carrier_file, marked_file):
        assert main(["check", str(carrier_file)]) == 0
        assert main(["check", str(marked_file)]) == 2
        assert main(["check", "-q", str(marked_file)]) == 2

    def test_clean(self, marked_file, tmp_path, capsys):
        out = tmp_path / "clean.txt"

        assert main(["clean", str(marked_file), "-o", str(out)]) == 0
        assert out.read_text(encoding="utf-8") == CARRIER
        assert "Removed" in capsys.readouterr().err

    def test_demo(self):
        assert main(["demo"]) == 0

    def test_no_command(self):
        assert main([]) == 0
