"""Locate existing copyright blocks in a file's lines."""

from __future__ import annotations

from typing import List, Sequence, Tuple

NOT_FOUND: Tuple[int, int] = (-1, -1)


def trim_blanks(lines: Sequence[str]) -> str:
    """Join lines, strip surrounding blank space and end with one newline."""
    return "\n".join(lines).strip() + "\n"


def find_go_copyright(lines: Sequence[str]) -> Tuple[int, int]:
    """Return the inclusive (start, end) of the first ``/* Copyright ... */`` block.

    A block counts only when the line right after the ``/*`` fence starts
    with ``Copyright ``; other block comments are skipped.
    """
    start = -1
    copyright_block = False
    for idx, line in enumerate(lines):
        stripped = line.strip()
        if start == -1 and stripped == "/*":
            start = idx
            continue
        if start > -1 and stripped == "*/":
            if copyright_block:
                return start, idx
            start = -1
            copyright_block = False
            continue
        if start > -1 and idx == start + 1 and stripped.startswith("Copyright "):
            copyright_block = True
    return NOT_FOUND


def find_bash_copyright(lines: Sequence[str]) -> Tuple[int, int]:
    """Return the inclusive (start, end) of the first ``# Copyright`` comment run."""
    start = -1
    for idx, line in enumerate(lines):
        stripped = line.strip()
        if start == -1:
            if stripped.startswith("# Copyright "):
                start = idx
            continue
        if not stripped.startswith("#"):
            return start, idx - 1
    if start > -1:
        # comment run reaches end of input
        return start, len(lines) - 1
    return NOT_FOUND


def cut_region(lines: Sequence[str], region: Tuple[int, int]) -> List[str]:
    """Drop the inclusive ``region`` from ``lines``; NOT_FOUND keeps them all."""
    start, end = region
    if start < 0 or end < 0:
        return list(lines)
    return list(lines[:start]) + list(lines[end + 1 :])
