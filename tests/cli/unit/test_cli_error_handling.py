"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from mesh_protogen.cli import main


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["compile", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option: --bogus" in captured.err
    assert "Traceback" not in captured.err


def test_missing_out_dir_is_a_configuration_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    monkeypatch.delenv("OUT_DIR", raising=False)
    monkeypatch.chdir(tmp_path)

    exit_code = main(["compile"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "configuration error: OUT_DIR is not set" in captured.err
    assert "Traceback" not in captured.err
    assert list(tmp_path.iterdir()) == []


def test_missing_config_file_is_a_configuration_error(tmp_path: Path, capsys) -> None:
    exit_code = main(
        ["compile", "--config", str(tmp_path / "missing.yaml"), "--out-dir", str(tmp_path)]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "configuration error: Configuration file not found" in captured.err


def test_missing_schema_file_is_a_source_error(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "protogen.yaml"
    config_path.write_text(
        "sources: [proto/mesh/v1/data.proto]\ninclude_paths: [proto]\n", encoding="utf-8"
    )

    exit_code = main(
        ["compile", "--config", str(config_path), "--out-dir", str(tmp_path / "out")]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "source error: Schema file not found" in captured.err


def test_describe_without_descriptor_or_out_dir_fails(
    monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    monkeypatch.delenv("OUT_DIR", raising=False)

    exit_code = main(["describe"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "OUT_DIR is not set" in captured.err


def test_describe_reports_unreadable_descriptor(tmp_path: Path, capsys) -> None:
    exit_code = main(["describe", "--descriptor", str(tmp_path / "missing.bin")])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Descriptor set cannot be read" in captured.err
