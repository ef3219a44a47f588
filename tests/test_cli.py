"""Tests for the apon command line tool."""

import io
import json

import pytest

from apon.cli import build_parser, main


@pytest.fixture
def apon_file(tmp_path):
    path = tmp_path / "doc.apon"
    path.write_text("name: demo\nports: [\n  80\n  443\n]\n", encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# to-json
# ---------------------------------------------------------------------------

def test_to_json(apon_file, capsys):
    assert main(["to-json", str(apon_file)]) == 0
    out = capsys.readouterr().out
    assert json.loads(out) == {"name": "demo", "ports": [80, 443]}

def test_to_json_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("a: 1"))
    assert main(["to-json", "--indent", "0"]) == 0
    assert json.loads(capsys.readouterr().out) == {"a": 1}

def test_to_json_format_error(tmp_path, capsys):
    bad = tmp_path / "bad.apon"
    bad.write_text("a: {\n  b: 1\n", encoding="utf-8")
    assert main(["to-json", str(bad)]) == 1
    err = capsys.readouterr().err
    assert err.startswith("error: Unclosed block")
    assert "line 1" in err

def test_missing_file(tmp_path, capsys):
    assert main(["to-json", str(tmp_path / "nope.apon")]) == 1
    assert "error:" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# from-json
# ---------------------------------------------------------------------------

def test_from_json(tmp_path, capsys):
    src = tmp_path / "doc.json"
    src.write_text(json.dumps({"user": {"name": "Jane", "active": True}}), encoding="utf-8")
    assert main(["from-json", str(src)]) == 0
    assert capsys.readouterr().out == "user: {\n  name: Jane\n  active: true\n}\n"

def test_from_json_indent(tmp_path, capsys):
    src = tmp_path / "doc.json"
    src.write_text('{"a": [1]}', encoding="utf-8")
    assert main(["from-json", "--indent", "4", str(src)]) == 0
    assert capsys.readouterr().out == "a: [\n    1\n]\n"

def test_from_json_scalar_rejected(tmp_path, capsys):
    src = tmp_path / "doc.json"
    src.write_text('"just a string"', encoding="utf-8")
    assert main(["from-json", str(src)]) == 1
    assert "mapping or a sequence" in capsys.readouterr().err

def test_from_json_invalid(tmp_path, capsys):
    src = tmp_path / "doc.json"
    src.write_text("{not json", encoding="utf-8")
    assert main(["from-json", str(src)]) == 1
    assert "invalid JSON" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

def test_check_mixed(apon_file, tmp_path, capsys):
    bad = tmp_path / "bad.apon"
    bad.write_text("no separator here", encoding="utf-8")
    assert main(["check", str(apon_file), str(bad)]) == 1
    captured = capsys.readouterr()
    assert f"{apon_file}: OK" in captured.out
    assert "Missing name-value separator" in captured.err

def test_check_all_ok(apon_file, capsys):
    assert main(["check", str(apon_file)]) == 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def test_command_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])

def test_verbose_flag():
    args = build_parser().parse_args(["-v", "check", "x.apon"])
    assert args.verbose
    assert args.files == ["x.apon"]
