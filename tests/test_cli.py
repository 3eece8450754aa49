from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from imagefy import ImagefyClient, cli
from imagefy.errors import ConfigError

from conftest import PAYLOAD, SpyTransport

runner = CliRunner()


@pytest.fixture
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "console", Console(width=200))


@pytest.fixture
def cli_spy(monkeypatch: pytest.MonkeyPatch, wide_console: None) -> SpyTransport:
    spy = SpyTransport()
    monkeypatch.setattr(cli, "build_client", lambda config_path: ImagefyClient("k", transport=spy.transport))
    return spy


def test_operations_lists_every_operation(wide_console: None) -> None:
    result = runner.invoke(cli.app, ["operations"])
    assert result.exit_code == 0
    assert "abbreviation" in result.output
    assert "qr_phone_call" in result.output
    assert "thumbnail/blurred" in result.output


def test_abbreviation_writes_output(cli_spy: SpyTransport, tmp_path: Path) -> None:
    out = tmp_path / "avatar.png"
    result = runner.invoke(
        cli.app, ["abbreviation", "JD", "--background", "#abc", "--size", "64x64", "-o", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert out.read_bytes() == PAYLOAD
    assert json.loads(cli_spy.last.content)["name"] == "JD"


def test_invalid_input_exits_with_2(cli_spy: SpyTransport, tmp_path: Path) -> None:
    out = tmp_path / "avatar.png"
    result = runner.invoke(
        cli.app, ["abbreviation", "JD", "--background", "blue", "-o", str(out)]
    )
    assert result.exit_code == 2
    assert "background must be a hex string color" in result.output
    assert cli_spy.requests == []
    assert not out.exists()


def test_remote_failure_exits_with_1(monkeypatch: pytest.MonkeyPatch, wide_console: None, tmp_path: Path) -> None:
    spy = SpyTransport(status=500)
    monkeypatch.setattr(cli, "build_client", lambda config_path: ImagefyClient("k", transport=spy.transport))
    result = runner.invoke(cli.app, ["placeholder", "hello", "-o", str(tmp_path / "p.png")])
    assert result.exit_code == 1
    assert "Try again later" in result.output


def test_missing_key_exits_with_2(monkeypatch: pytest.MonkeyPatch, wide_console: None, tmp_path: Path) -> None:
    def fail(config_path):
        raise ConfigError("No API key configured")

    monkeypatch.setattr(cli, "build_client", fail)
    result = runner.invoke(cli.app, ["placeholder", "hello", "-o", str(tmp_path / "p.png")])
    assert result.exit_code == 2
    assert "No API key" in result.output


def test_qr_arguments_are_parsed(cli_spy: SpyTransport, tmp_path: Path) -> None:
    result = runner.invoke(
        cli.app,
        [
            "qr", "Bitcoin",
            "-a", "address=1A1zP1",
            "-a", "amount=0.5",
            "--size", "200",
            "-o", str(tmp_path / "btc.png"),
        ],
    )
    assert result.exit_code == 0, result.output
    assert json.loads(cli_spy.last.content) == {
        "size": "200x200",
        "type": "Bitcoin",
        "args": ["1A1zP1", "0.5"],
    }


def test_qr_argument_without_equals_is_rejected(cli_spy: SpyTransport, tmp_path: Path) -> None:
    result = runner.invoke(cli.app, ["qr", "Text", "-a", "hello", "-o", str(tmp_path / "t.png")])
    assert result.exit_code == 2
    assert "key=value" in result.output


def test_compress_with_quality_is_lossy(cli_spy: SpyTransport, image_file: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        cli.app, ["compress", str(image_file), "--quality", "60", "-o", str(tmp_path / "c.png")]
    )
    assert result.exit_code == 0, result.output
    assert str(cli_spy.last.url).endswith("/compress/lossy")


def test_resize_fill(cli_spy: SpyTransport, image_file: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["resize", str(image_file), "--size", "32x32", "--fill", "--mode", "Contain", "-o", str(tmp_path / "r.png")],
    )
    assert result.exit_code == 0, result.output
    assert str(cli_spy.last.url).endswith("/resize/fill")
    assert b"contain" in cli_spy.last.content


def test_thumbnail_and_watermark(cli_spy: SpyTransport, image_file: Path, mark_file: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        cli.app, ["thumbnail", str(image_file), "--size", "32x32", "-o", str(tmp_path / "t.png")]
    )
    assert result.exit_code == 0, result.output
    assert str(cli_spy.last.url).endswith("/thumbnail/cropped")

    result = runner.invoke(
        cli.app, ["watermark", str(image_file), str(mark_file), "-o", str(tmp_path / "w.png")]
    )
    assert result.exit_code == 0, result.output
    assert str(cli_spy.last.url).endswith("/watermark")


def test_whole_number_qr_arguments_stay_integers(cli_spy: SpyTransport, tmp_path: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["qr", "Bitcoin", "-a", "address=1A1zP1", "-a", "amount=1", "-o", str(tmp_path / "btc.png")],
    )
    assert result.exit_code == 0, result.output
    assert json.loads(cli_spy.last.content)["args"] == ["1A1zP1", "1"]


def test_non_numeric_qr_argument_is_rejected(cli_spy: SpyTransport, tmp_path: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["qr", "Geolocation", "-a", "latitude=north", "-a", "longitude=0", "-o", str(tmp_path / "g.png")],
    )
    assert result.exit_code == 2
    assert "must be a number" in result.output
    assert cli_spy.requests == []
