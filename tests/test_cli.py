"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dombridge.cli import _build_parser, main
from dombridge.identity import content_hash, to_file_url


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()

    assert parser.parse_args(["--verbose", "serve"]).verbose is True
    assert parser.parse_args(["serve", "--verbose"]).verbose is True


def test_cli_transform_requires_platform() -> None:
    parser = _build_parser()

    with pytest.raises(SystemExit):
        parser.parse_args(["transform", "Widget.js"])


def test_cli_production_flag_sets_mode() -> None:
    args = _build_parser().parse_args(["transform", "W.js", "--platform", "ios", "--production"])

    assert args.mode == "production"


def test_cli_transform_prints_proxy(tmp_path: Path, capsys) -> None:
    widget = tmp_path / "Widget.js"
    widget.write_text('"use dom";\nexport default function Widget() { return null; }\n', encoding="utf-8")

    main(["--config", str(tmp_path), "transform", str(widget), "--platform", "ios", "--production"])

    out = capsys.readouterr().out
    digest = content_hash(to_file_url(widget.resolve()))
    assert f'"www.bundle/{digest}.html"' in out
    assert f"// source.uri: www.bundle/{digest}.html" in out


def test_cli_transform_prints_metadata(tmp_path: Path, capsys) -> None:
    widget = tmp_path / "Widget.js"
    widget.write_text('"use dom";\nexport default () => null;\n', encoding="utf-8")

    main(["--config", str(tmp_path), "transform", str(widget), "--platform", "android", "--metadata"])

    payload = json.loads(capsys.readouterr().out)
    assert payload == {"expoDomComponentReference": to_file_url(widget.resolve())}


def test_cli_transform_reports_compile_errors(tmp_path: Path, capsys) -> None:
    widget = tmp_path / "Widget.js"
    widget.write_text('"use dom";\nexport const a = 1;\n', encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "transform", str(widget), "--platform", "ios"])

    assert excinfo.value.code == 1
    assert "only support a single default export" in capsys.readouterr().err


def test_cli_entry_generates_module(tmp_path: Path, capsys) -> None:
    widget = tmp_path / "src" / "Widget.js"
    widget.parent.mkdir()
    widget.write_text('"use dom";\nexport default () => null;\n', encoding="utf-8")

    main(["--config", str(tmp_path), "entry", str(widget), "--no-settle"])

    lines = capsys.readouterr().out.splitlines()
    digest = content_hash(to_file_url(widget.resolve()))
    assert Path(lines[0]) == tmp_path.resolve() / ".expo" / "@dom" / f"{digest}.js"
    assert Path(lines[0]).exists()
    assert lines[1].startswith(f"http://localhost:8081/.expo/@dom/{digest}.bundle?platform=web")


def test_cli_log_file_option_receives_records(tmp_path: Path, capsys) -> None:
    widget = tmp_path / "Widget.js"
    widget.write_text('"use dom";\nexport default () => null;\n', encoding="utf-8")
    log_file = tmp_path / "logs" / "cli.log"

    main(
        [
            "--verbose",
            "--config",
            str(tmp_path),
            "--log-file",
            str(log_file),
            "transform",
            str(widget),
            "--platform",
            "ios",
        ]
    )

    contents = log_file.read_text(encoding="utf-8")
    assert "dombridge.transform: Rewrote DOM component" in contents


def test_cli_uses_log_file_from_config(tmp_path: Path, capsys) -> None:
    (tmp_path / ".dombridge.yml").write_text("log_file: dombridge.log\n", encoding="utf-8")
    widget = tmp_path / "Widget.js"
    widget.write_text("export default 1;\n", encoding="utf-8")

    main(["--config", str(tmp_path), "transform", str(widget), "--platform", "ios"])

    assert (tmp_path / "dombridge.log").exists()
