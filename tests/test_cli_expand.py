from pathlib import Path

from typer.testing import CliRunner

from single_include.cli import app


runner = CliRunner()

EXPECTED = Path("examples/basic/expected.h")


def _write(p: Path, text: str) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def test_expand_matches_expected():
    r = runner.invoke(app, ["expand", "examples/basic/widget.h", "-I", "examples/basic/include"])
    assert r.exit_code == 0, r.stdout + r.stderr
    assert r.stdout == EXPECTED.read_text(encoding="utf-8")


def test_expand_with_config_file():
    r = runner.invoke(
        app, ["expand", "examples/basic/widget.h", "--config", "examples/basic/single-include.yaml"]
    )
    assert r.exit_code == 0, r.stdout + r.stderr
    assert r.stdout == EXPECTED.read_text(encoding="utf-8")


def test_expand_writes_out_file(tmp_path: Path):
    out_path = tmp_path / "gen" / "widget_all.h"
    r = runner.invoke(
        app,
        ["expand", "examples/basic/widget.h", "-I", "examples/basic/include", "--out", str(out_path)],
    )
    assert r.exit_code == 0, r.stdout + r.stderr
    assert f"OK: wrote {out_path}" in r.stdout
    assert out_path.read_text(encoding="utf-8") == EXPECTED.read_text(encoding="utf-8")


def test_expand_dry_run_with_tree(tmp_path: Path):
    a = _write(tmp_path / "a.h", '#include "b.h"\n')
    b = _write(tmp_path / "b.h", "#include <stdio.h>\n")
    out_path = tmp_path / "out.h"

    r = runner.invoke(app, ["expand", str(a), "-d", "-t", "-o", str(out_path)])

    assert r.exit_code == 0, r.stdout + r.stderr
    assert not out_path.exists()
    assert r.stdout.splitlines() == [
        f'"{a.resolve()}" (expanded)',
        f'  "{b.resolve()}" (expanded)',
        "    <stdio.h> (not found)",
    ]


def test_expand_all_flag(tmp_path: Path):
    a = _write(tmp_path / "a.h", '#include "b.h"\n#include "b.h"\n')
    _write(tmp_path / "b.h", "int b;\n")

    once = runner.invoke(app, ["expand", str(a)])
    twice = runner.invoke(app, ["expand", str(a), "--all"])

    assert once.stdout.count("int b;") == 1
    assert twice.stdout.count("int b;") == 2


def test_expand_verbose_report(tmp_path: Path):
    a = _write(tmp_path / "a.h", "#include <nowhere.h>\n")

    r = runner.invoke(app, ["expand", str(a), "--dry", "--verbose", "-I", str(tmp_path)])

    assert r.exit_code == 0, r.stdout + r.stderr
    assert f"Target name: {a.resolve()}" in r.stdout
    assert "Include paths:" in r.stdout
    assert "All included files:" in r.stdout
    assert "\n  <nowhere.h> (not found)\n" in r.stdout
    assert "DEBUG: Ignore include file <nowhere.h>" in r.stderr


def test_expand_missing_file():
    r = runner.invoke(app, ["expand", "examples/does-not-exist.h"])
    assert r.exit_code == 1
    assert "E_FILE_NOT_EXIST" in r.stderr


def test_expand_missing_include_dir():
    r = runner.invoke(app, ["expand", "examples/basic/widget.h", "-I", "examples/nope"])
    assert r.exit_code == 2
    assert "E_DIR_NOT_EXIST" in r.stderr


def test_expand_invalid_config(tmp_path: Path):
    cfg = _write(tmp_path / "cfg.yaml", "max_depth: -1\n")
    r = runner.invoke(app, ["expand", "examples/basic/widget.h", "--config", str(cfg)])
    assert r.exit_code == 2
    assert "E_CONFIG_INVALID" in r.stderr


def test_expand_missing_config():
    r = runner.invoke(app, ["expand", "examples/basic/widget.h", "--config", "examples/nope.yaml"])
    assert r.exit_code == 1
    assert "E_CONFIG_NOT_FOUND" in r.stderr


def test_expand_cycle_in_all_mode_writes_nothing(tmp_path: Path):
    a = _write(tmp_path / "a.h", '#include "b.h"\n')
    _write(tmp_path / "b.h", '#include "a.h"\n')
    out_path = tmp_path / "out.h"

    r = runner.invoke(app, ["expand", str(a), "-a", "--max-depth", "4", "-o", str(out_path)])

    assert r.exit_code == 1
    assert "E_RECURSION_LIMIT" in r.stderr
    assert not out_path.exists()


def test_expand_keeps_undecodable_bytes_on_stdout(tmp_path: Path):
    root = tmp_path / "m.c"
    root.write_bytes(b'#include "b.h"\n// caf\xe9\n')
    (tmp_path / "b.h").write_bytes(b"int \xff;\n")

    r = runner.invoke(app, ["expand", str(root), "--tree"])

    assert r.exit_code == 0, r.stderr
    assert b'// #include "b.h"\nint \xff;\n// End #include "b.h"\n// caf\xe9\n' in r.stdout_bytes


def test_expand_huge_max_depth_reports_recursion_limit(tmp_path: Path):
    a = _write(tmp_path / "a.h", '#include "b.h"\n')
    _write(tmp_path / "b.h", '#include "a.h"\n')

    r = runner.invoke(app, ["expand", str(a), "--all", "--max-depth", "1000000"])

    assert r.exit_code == 1
    assert "E_RECURSION_LIMIT" in r.stderr
