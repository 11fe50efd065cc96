#!/usr/bin/env python3
"""
license_tagger.py

Keeps license/copyright headers in a source tree consistent:

- Go sources (``*.go``), shell scripts (``*.sh`` or executables without an
  extension), Makefiles and Dockerfiles each get the header from
  ``<templates>/{go,bash,makefile,dockerfile}.txt``.
- Build constraints (``//go:build``, ``// +build``), shebangs and Dockerfile
  parser directives stay on line 1; the header goes right after them.
- Files whose first line says ``DO NOT EDIT`` are never touched.
- An existing ``Copyright`` notice, canonical or not, is left alone.
- ``--check`` lists files missing a header and exits 1 when there is any.
- ``--remove`` strips the copyright block instead.

Uso (help):
  python3 license_tagger.py -h

Ejecucion:
- Etiquetar el proyecto actual
  python3 license_tagger.py -path . -t ./template -v

- CI (solo comprobar)
  python3 license_tagger.py -path . -excludes "vendor third_party" -check
"""

from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape

from license_tagger_appliers import (
    AutoGeneratedError,
    DockerfileApplier,
    GoApplier,
    HeaderApplier,
    MakefileApplier,
    ShellApplier,
    SpecialCondition,
)
from license_tagger_classify import classify
from license_tagger_regions import find_bash_copyright, find_go_copyright, trim_blanks
from license_tagger_templates import FileKind, Template, TemplateSet, load_templates
from license_tagger_walk import (
    DEFAULT_EXCLUDES,
    DEFAULT_PATH,
    DEFAULT_TEMPLATE_DIR,
    TagContext,
    parse_excludes,
    process_file,
    tag_files,
)

__all__ = [
    "AutoGeneratedError",
    "DockerfileApplier",
    "FileKind",
    "GoApplier",
    "HeaderApplier",
    "MakefileApplier",
    "ShellApplier",
    "SpecialCondition",
    "TagContext",
    "Template",
    "TemplateSet",
    "classify",
    "find_bash_copyright",
    "find_go_copyright",
    "load_templates",
    "process_file",
    "tag_files",
    "trim_blanks",
]

TEMPLATES_ENV = "LICENSE_TAGGER_TEMPLATES"

EXIT_OK = 0
EXIT_CHECK_FAILED = 1
EXIT_ERROR = 2


def make_console(*, stderr: bool = False) -> Console:
    """Create a Rich Console for plain CLI output."""
    return Console(stderr=stderr, highlight=False)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    p = argparse.ArgumentParser(
        prog="license-tagger",
        description=(
            "Inserta, comprueba o elimina la cabecera de licencia en ficheros "
            "Go, scripts shell, Makefiles y Dockerfiles."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Ejemplos:\n"
            "  license-tagger -path . -t ./template -v\n"
            '  license-tagger -path . -excludes "vendor third_party" -check\n'
            "  license-tagger -path ./cmd -remove\n"
        ),
    )
    p.add_argument(
        "-path",
        "--path",
        dest="path",
        default=DEFAULT_PATH,
        metavar="DIR",
        help=f"Project path. Default: {DEFAULT_PATH}",
    )
    p.add_argument(
        "-excludes",
        "--excludes",
        dest="excludes",
        default=DEFAULT_EXCLUDES,
        metavar="NAMES",
        help=f"Space-separated folder names to skip. Default: {DEFAULT_EXCLUDES}",
    )
    p.add_argument(
        "-t",
        "--templates",
        dest="templates",
        default=os.environ.get(TEMPLATES_ENV, DEFAULT_TEMPLATE_DIR),
        metavar="DIR",
        help=(
            f"Template files path (or {TEMPLATES_ENV}). "
            f"Default: {DEFAULT_TEMPLATE_DIR}"
        ),
    )
    mode = p.add_mutually_exclusive_group()
    mode.add_argument(
        "-check",
        "--check",
        dest="check",
        action="store_true",
        help="Check files missing header (dry run, exit 1 if any).",
    )
    mode.add_argument(
        "-remove",
        "--remove",
        dest="remove",
        action="store_true",
        help="Remove header if present.",
    )
    p.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        action="store_true",
        help="Verbose output: list every affected file.",
    )
    return p


def build_context(args: argparse.Namespace, console: Console) -> TagContext:
    """Load templates and turn parsed flags into a TagContext."""

    def warn(message: str) -> None:
        console.print(f"[yellow]{message}[/yellow]")

    return TagContext(
        root=args.path,
        exclude_list=parse_excludes(args.excludes),
        template_path=args.templates,
        templates=load_templates(args.templates, warn=warn),
        dry_run=args.check,
        remove_header=args.remove,
        verbose=args.verbose,
    )


def print_summary(console: Console, ctx: TagContext) -> None:
    """Print the count of affected files and, when verbose, their paths."""
    if ctx.dry_run:
        console.print(f"Files missing header :  {len(ctx.outfile_list)}")
    else:
        console.print(f"Files modified :  {len(ctx.outfile_list)}")
    if ctx.verbose:
        for path in ctx.outfile_list:
            console.print(path, markup=False, soft_wrap=True)


def run(args: argparse.Namespace, console: Console) -> int:
    """Run one tagging pass and return the process exit code."""
    ctx = build_context(args, console)
    tag_files(ctx)
    print_summary(console, ctx)
    if ctx.dry_run and ctx.outfile_list:
        return EXIT_CHECK_FAILED
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Sync CLI entrypoint."""
    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = make_console()
    try:
        return run(args, console)
    except (OSError, RuntimeError) as exc:
        make_console(stderr=True).print(
            f"[red]Error:[/red] {escape(str(exc))}", soft_wrap=True
        )
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
