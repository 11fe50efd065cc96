#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
import shutil
import subprocess
import sys

import pytest

import license_tagger as lt
from license_tagger_templates import FileKind, load_template

GO_TEMPLATE = "/*\nCopyright 2020 Acme\n*/\n\n"
HASH_TEMPLATE = "# Copyright 2020 Acme\n# Licensed under MIT.\n\n"
GO_SOURCE = "package main\n\nfunc main() {\n\tprintln(\"hi\")\n}\n"
SH_SOURCE = "#!/bin/sh\nset -e\necho building the whole project now\n"


@pytest.fixture
def templates(tmp_path):
    tdir = tmp_path / "template"
    tdir.mkdir()
    (tdir / "go.txt").write_text(GO_TEMPLATE)
    (tdir / "bash.txt").write_text(HASH_TEMPLATE)
    (tdir / "makefile.txt").write_text(HASH_TEMPLATE)
    (tdir / "dockerfile.txt").write_text(HASH_TEMPLATE)
    return tdir


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    (root / "cmd").mkdir(parents=True)
    (root / "cmd" / "main.go").write_text(GO_SOURCE)
    (root / "hack").mkdir()
    (root / "hack" / "build.sh").write_text(SH_SOURCE)
    (root / "vendor").mkdir()
    (root / "vendor" / "dep.go").write_text(GO_SOURCE)
    return root


def test_main_tags_project(project, templates, capsys) -> None:
    code = lt.main(["-path", str(project), "-t", str(templates), "-v"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Files modified :  2" in out
    assert str(project / "cmd" / "main.go") in out
    assert str(project / "hack" / "build.sh") in out
    assert (project / "cmd" / "main.go").read_text() == GO_TEMPLATE + GO_SOURCE
    assert (project / "vendor" / "dep.go").read_text() == GO_SOURCE


def test_main_check_mode_exit_codes(project, templates, capsys) -> None:
    args = ["--path", str(project), "--templates", str(templates), "--check"]
    assert lt.main(args) == 1
    assert "Files missing header :  2" in capsys.readouterr().out
    assert (project / "cmd" / "main.go").read_text() == GO_SOURCE

    assert lt.main(["--path", str(project), "--templates", str(templates)]) == 0
    assert lt.main(args) == 0


def test_main_remove_mode(project, templates, capsys) -> None:
    lt.main(["-path", str(project), "-t", str(templates)])
    code = lt.main(["-path", str(project), "-t", str(templates), "-remove"])
    assert code == 0
    assert "Files modified :  2" in capsys.readouterr().out
    assert (project / "cmd" / "main.go").read_text() == GO_SOURCE


def test_main_excludes_flag(project, templates) -> None:
    code = lt.main(
        ["-path", str(project), "-t", str(templates), "-excludes", "hack cmd", "-check"]
    )
    assert code == 1
    assert (project / "vendor" / "dep.go").read_text() == GO_SOURCE


def test_missing_template_warns_and_skips_kind(project, templates, capsys) -> None:
    (templates / "go.txt").unlink()

    code = lt.main(["-path", str(project), "-t", str(templates)])

    out = capsys.readouterr().out
    assert code == 0
    assert "No template file for golang files, shall skip all golang files" in out
    assert "Files modified :  1" in out
    assert (project / "cmd" / "main.go").read_text() == GO_SOURCE


def test_non_utf8_template_is_copied_verbatim(project, templates, capsys) -> None:
    latin1 = "/*\nCopyright 2020 Diego Mui\xf1o\n*/\n\n".encode("latin-1")
    (templates / "go.txt").write_bytes(latin1)

    code = lt.main(["-path", str(project), "-t", str(templates)])

    assert code == 0
    assert "Files modified :  2" in capsys.readouterr().out
    assert (project / "cmd" / "main.go").read_bytes() == latin1 + GO_SOURCE.encode()
    assert lt.main(["-path", str(project), "-t", str(templates), "-check"]) == 0


def test_load_template_keeps_raw_bytes(templates) -> None:
    raw = b"# Copyright 2020 M\xfcller GmbH\n\n"
    (templates / "bash.txt").write_bytes(raw)
    template = load_template(str(templates), FileKind.SHELL)
    assert template.data == raw
    assert template.path == os.path.join(str(templates), "bash.txt")


def test_help_text_names_templates_environment_variable() -> None:
    help_text = lt.build_arg_parser().format_help()
    assert f"(or {lt.TEMPLATES_ENV})" in " ".join(help_text.split())


def test_templates_dir_from_environment(project, templates, monkeypatch) -> None:
    monkeypatch.setenv(lt.TEMPLATES_ENV, str(templates))
    assert lt.main(["-path", str(project), "-check"]) == 1


def test_check_and_remove_are_exclusive(project, templates) -> None:
    with pytest.raises(SystemExit) as exc:
        lt.main(["-path", str(project), "-t", str(templates), "-check", "-remove"])
    assert exc.value.code == 2


def test_io_error_is_fatal(tmp_path, templates, capsys) -> None:
    code = lt.main(["-path", str(tmp_path / "missing"), "-t", str(templates)])
    assert code == 2
    assert "Error:" in capsys.readouterr().err


def test_generated_file_is_left_alone(project, templates) -> None:
    generated = "// Code generated by stringer. DO NOT EDIT.\n\n" + GO_SOURCE
    (project / "cmd" / "kind_string.go").write_text(generated)
    lt.main(["-path", str(project), "-t", str(templates)])
    assert (project / "cmd" / "kind_string.go").read_text() == generated


def _which(cmd: str) -> bool:
    return shutil.which(cmd) is not None


def _run(cmd: list, desc: str) -> int:
    print(f"\n==> {desc}")
    print(" ".join(cmd))
    return subprocess.call(cmd)


def main() -> int:
    python = sys.executable
    here = os.path.dirname(os.path.abspath(__file__))
    exit_code = 0
    missing = []
    for mod in ("pytest", "coverage", "rich"):
        try:
            __import__(mod)
        except ImportError:
            missing.append(mod)
    if missing:
        print("Faltan dependencias de test: " + ", ".join(missing))
        print("Ejecuta: uv run --extra test python3 test_license_tagger.py")

    if _which("pytest"):
        exit_code |= _run([python, "-m", "pytest", "-q", here], "pytest")
        if _which("coverage"):
            exit_code |= _run(
                ["coverage", "run", "-m", "pytest", "-q", here], "coverage run"
            )
            exit_code |= _run(["coverage", "report"], "coverage report")
    else:
        print("pytest no esta disponible; saltando tests.")

    if _which("ruff"):
        exit_code |= _run(["ruff", "check", here], "ruff")
    if _which("mypy"):
        exit_code |= _run(["mypy", "license_tagger.py"], "mypy")
    if _which("black"):
        exit_code |= _run(["black", "--check", here], "black")

    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
