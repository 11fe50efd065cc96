"""Pick the header applier for a file from its name and mode."""

from __future__ import annotations

import stat
from typing import List, Optional

from license_tagger_appliers import HeaderApplier, applier_for
from license_tagger_templates import FileKind, TemplateSet

IS_EXECUTABLE = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
SKIP_DIRS = frozenset({".git", ".svn", ".."})
SKIP_FILES = frozenset({"LICENSE", "MAINTAINERS"})


def candidate_kinds(name: str, *, executable: bool) -> List[FileKind]:
    """Return the kinds ``name`` could be, strongest claim first.

    Extension beats base name, base name beats the executable bit.
    """
    parts = name.split(".")
    base = parts[0]
    kinds: List[FileKind] = []
    if len(parts) == 1:
        if base == "Makefile":
            kinds.append(FileKind.MAKEFILE)
        if base.lower() == "dockerfile":
            kinds.append(FileKind.DOCKERFILE)
        if executable:
            kinds.append(FileKind.SHELL)
        return kinds

    ext = parts[-1]
    if ext == "go":
        kinds.append(FileKind.GO)
    if ext == "sh":
        kinds.append(FileKind.SHELL)
    if base.lower() == "dockerfile":
        kinds.append(FileKind.DOCKERFILE)
    if base.lower() == "makefile":
        kinds.append(FileKind.MAKEFILE)
    return kinds


def classify(
    name: str, *, executable: bool, templates: TemplateSet
) -> Optional[HeaderApplier]:
    """Return the applier for ``name``, or None when the file is not processed.

    A kind only counts when its template was loaded; the first such kind wins.
    """
    for kind in candidate_kinds(name, executable=executable):
        if templates.has(kind):
            return applier_for(kind)
    return None


def is_executable(mode: int) -> bool:
    return bool(mode & IS_EXECUTABLE)

