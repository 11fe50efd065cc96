"""File kinds and header template loading for license_tagger."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional


class FileKind(str, Enum):
    """Recognized file kinds; the value is the template file stem."""

    GO = "go"
    SHELL = "bash"
    MAKEFILE = "makefile"
    DOCKERFILE = "dockerfile"

    @property
    def template_name(self) -> str:
        return f"{self.value}.txt"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    FileKind.GO: "golang files",
    FileKind.SHELL: "bash scripts",
    FileKind.MAKEFILE: "Makefile",
    FileKind.DOCKERFILE: "Dockerfile",
}


@dataclass(frozen=True)
class Template:
    """Header bytes for one file kind, loaded once per run and copied verbatim."""

    kind: FileKind
    path: str
    data: bytes


@dataclass(frozen=True)
class TemplateSet:
    """Loaded templates by kind; a missing kind is disabled for the run."""

    templates: Dict[FileKind, Template] = field(default_factory=dict)

    def get(self, kind: FileKind) -> Optional[Template]:
        return self.templates.get(kind)

    def has(self, kind: FileKind) -> bool:
        return kind in self.templates

    @classmethod
    def from_texts(cls, texts: Dict[FileKind, str]) -> "TemplateSet":
        """Build a set from in-memory texts (no files involved)."""
        return cls(
            {
                kind: Template(
                    kind=kind,
                    path=f"<{kind.template_name}>",
                    data=text.encode("utf-8"),
                )
                for kind, text in texts.items()
            }
        )


def load_template(directory: str, kind: FileKind) -> Template:
    """Read the template for ``kind`` from ``directory``.

    Raises OSError when the file is missing or unreadable.
    """
    path = os.path.join(directory, kind.template_name)
    with open(path, "rb") as f:
        data = f.read()
    return Template(kind=kind, path=path, data=data)


def load_templates(
    directory: str,
    *,
    warn: Callable[[str], None] | None = None,
) -> TemplateSet:
    """Load every known template, warning about (and skipping) missing ones."""
    loaded: Dict[FileKind, Template] = {}
    for kind in (FileKind.DOCKERFILE, FileKind.GO, FileKind.SHELL, FileKind.MAKEFILE):
        try:
            loaded[kind] = load_template(directory, kind)
        except OSError:
            if warn is not None:
                warn(f"No template file for {kind.label}, shall skip all {kind.label}")
    return TemplateSet(loaded)
