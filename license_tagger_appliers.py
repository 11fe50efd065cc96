"""Per-kind header check/apply/remove logic for license_tagger."""

from __future__ import annotations

import os
import re
import shutil
import tempfile
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterable, List, Sequence, Tuple

from license_tagger_regions import (
    cut_region,
    find_bash_copyright,
    find_go_copyright,
    trim_blanks,
)
from license_tagger_templates import FileKind, Template

if TYPE_CHECKING:
    from license_tagger_walk import TagContext


GO_DIRECTIVE_KEYWORDS = ("build", "unix", "linux", "windows", "darwin", "freebsd")
AUTO_GENERATED_MARKER = "DO NOT EDIT"
DOCKERFILE_DIRECTIVE_RE = re.compile(r"^#\s*(syntax|escape|check)\s*=", re.IGNORECASE)


class SpecialCondition(Enum):
    """What the first line of a file says about where a header may go."""

    NORMAL = 1
    DIRECTIVE = 2
    AUTO_GENERATED = 3


class AutoGeneratedError(RuntimeError):
    """Raised when a generated file reaches header insertion."""

    def __init__(self, path: str) -> None:
        super().__init__(f"refusing to tag auto-generated file {path}")
        self.path = path


class MissingTemplateError(RuntimeError):
    """Raised when an applier runs for a kind whose template is not loaded."""

    def __init__(self, kind: FileKind) -> None:
        super().__init__(f"no template loaded for {kind.value} files")
        self.kind = kind


def atomic_write(path: str, chunks: Iterable[bytes]) -> None:
    """Write ``chunks`` to a sibling temp file, then rename it over ``path``.

    The temp file takes the permission bits of ``path`` and is removed on
    every exit that does not reach the rename.
    """
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(
        prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=directory
    )
    try:
        with os.fdopen(fd, "wb") as out:
            for chunk in chunks:
                out.write(chunk)
        shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise


def _decode_line(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").rstrip("\r\n")


class HeaderApplier(ABC):
    """Detect, insert and strip the header of one file kind."""

    kind: FileKind
    comment_token: str
    copyright_re: re.Pattern[bytes]

    def template(self, ctx: "TagContext") -> Template:
        template = ctx.templates.get(self.kind)
        if template is None:
            raise MissingTemplateError(self.kind)
        return template

    @abstractmethod
    def is_directive(self, line: str) -> bool:
        """Return True when ``line`` must stay the first line of the file."""

    @abstractmethod
    def find_region(self, lines: Sequence[str]) -> Tuple[int, int]:
        """Return the inclusive line range of the existing copyright block."""

    def special_condition(self, first_line: bytes) -> SpecialCondition:
        line = _decode_line(first_line)
        if self.is_directive(line):
            return SpecialCondition.DIRECTIVE
        if line.startswith(self.comment_token) and AUTO_GENERATED_MARKER in line:
            return SpecialCondition.AUTO_GENERATED
        return SpecialCondition.NORMAL

    def expected_header(
        self, first_line: bytes, condition: SpecialCondition, template: Template
    ) -> bytes:
        """Return the bytes a correctly tagged file starts with."""
        if condition is SpecialCondition.DIRECTIVE:
            return first_line.rstrip(b"\r\n") + b"\n\n" + template.data
        return template.data

    def check_header(self, path: str, ctx: "TagContext") -> bool:
        """Return True when ``path`` has a header or must not get one."""
        template = self.template(ctx)
        with open(path, "rb") as f:
            first_line = f.readline()
            condition = self.special_condition(first_line)
            if condition is SpecialCondition.AUTO_GENERATED:
                return True
            expected = self.expected_header(first_line, condition, template)
            f.seek(0)
            chunk = f.read(len(expected))

        if len(chunk) < len(expected):
            return False
        if chunk == expected:
            return True
        # an existing, non-canonical copyright notice is left alone
        return self.copyright_re.search(chunk) is not None

    def apply_header(self, path: str, ctx: "TagContext") -> bool:
        """Insert the template into ``path``; return False when nothing changed."""
        if self.check_header(path, ctx):
            return False
        template = self.template(ctx)

        with open(path, "rb") as f:
            data = f.read()
        first_line, newline, rest = data.partition(b"\n")
        condition = self.special_condition(first_line + newline)
        if condition is SpecialCondition.AUTO_GENERATED:
            raise AutoGeneratedError(path)

        chunks: List[bytes] = []
        body = data
        if condition is SpecialCondition.DIRECTIVE:
            chunks.append(first_line.rstrip(b"\r") + b"\n\n")
            # blank lines after the directive are replaced by the separator
            while True:
                following, next_newline, after = rest.partition(b"\n")
                if not next_newline or following.strip():
                    break
                rest = after
            body = rest
        chunks.append(template.data)
        chunks.append(body)
        atomic_write(path, chunks)
        return True

    def remove_header(self, path: str) -> bool:
        """Strip the copyright block and trim blanks; return True if rewritten."""
        with open(path, "rb") as f:
            raw = f.read()
        lines = raw.decode("utf-8", errors="surrogateescape").split("\n")
        region = self.find_region(lines)
        cleaned = trim_blanks(cut_region(lines, region)).encode(
            "utf-8", errors="surrogateescape"
        )
        if cleaned == raw:
            return False
        atomic_write(path, [cleaned])
        return True


class GoApplier(HeaderApplier):
    """Go sources: ``/* */`` headers placed after build constraints."""

    kind = FileKind.GO
    comment_token = "//"
    copyright_re = re.compile(rb"(?:/\*|//)\s*Copyright ")

    def is_directive(self, line: str) -> bool:
        return (
            line.startswith("//")
            and any(word in line for word in GO_DIRECTIVE_KEYWORDS)
            and "Package" not in line
        )

    def find_region(self, lines: Sequence[str]) -> Tuple[int, int]:
        return find_go_copyright(lines)


class HashCommentApplier(HeaderApplier):
    """Kinds whose header is a run of ``#`` comment lines."""

    comment_token = "#"
    copyright_re = re.compile(rb"#\s*Copyright ")

    def is_directive(self, line: str) -> bool:
        return False

    def find_region(self, lines: Sequence[str]) -> Tuple[int, int]:
        return find_bash_copyright(lines)


class ShellApplier(HashCommentApplier):
    kind = FileKind.SHELL

    def is_directive(self, line: str) -> bool:
        return line.startswith("#!")


class MakefileApplier(HashCommentApplier):
    kind = FileKind.MAKEFILE


class DockerfileApplier(HashCommentApplier):
    kind = FileKind.DOCKERFILE

    def is_directive(self, line: str) -> bool:
        return DOCKERFILE_DIRECTIVE_RE.match(line) is not None


APPLIERS: Dict[FileKind, HeaderApplier] = {
    FileKind.GO: GoApplier(),
    FileKind.SHELL: ShellApplier(),
    FileKind.MAKEFILE: MakefileApplier(),
    FileKind.DOCKERFILE: DockerfileApplier(),
}


def applier_for(kind: FileKind) -> HeaderApplier:
    """Return the shared applier for ``kind``."""
    return APPLIERS[kind]
