"""Directory traversal and run context for license_tagger."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from typing import List, Optional

from license_tagger_classify import SKIP_DIRS, SKIP_FILES, classify, is_executable
from license_tagger_templates import TemplateSet

DEFAULT_PATH = "."
DEFAULT_EXCLUDES = "vendor"
DEFAULT_TEMPLATE_DIR = "./template"


def parse_excludes(value: str) -> List[str]:
    """Split the space-separated exclude flag into folder names."""
    return [v for v in value.split(" ") if v]


@dataclass
class TagContext:
    """Run-scoped configuration plus the list of files touched (or to touch)."""

    root: str = DEFAULT_PATH
    exclude_list: List[str] = field(
        default_factory=lambda: parse_excludes(DEFAULT_EXCLUDES)
    )
    template_path: str = DEFAULT_TEMPLATE_DIR
    templates: TemplateSet = field(default_factory=TemplateSet)
    dry_run: bool = False
    remove_header: bool = False
    verbose: bool = False
    outfile_list: List[str] = field(default_factory=list)

    def is_pruned(self, dirname: str) -> bool:
        return dirname in SKIP_DIRS or dirname in self.exclude_list


def _raise(exc: OSError) -> None:
    raise exc


def is_eligible(path: str, st: os.stat_result) -> bool:
    """Return True for non-empty regular files that are not license files."""
    if stat.S_ISLNK(st.st_mode) or not stat.S_ISREG(st.st_mode):
        return False
    if st.st_size == 0:
        return False
    return os.path.basename(path) not in SKIP_FILES


def process_file(
    path: str, ctx: TagContext, st: Optional[os.stat_result] = None
) -> None:
    """Check, tag or untag one file, recording it in ``ctx.outfile_list``."""
    if st is None:
        st = os.lstat(path)
    if not is_eligible(path, st):
        return
    applier = classify(
        os.path.basename(path),
        executable=is_executable(st.st_mode),
        templates=ctx.templates,
    )
    if applier is None:
        return

    if ctx.remove_header:
        if applier.remove_header(path):
            ctx.outfile_list.append(path)
        return

    if applier.check_header(path, ctx):
        return
    if not ctx.dry_run:
        applier.apply_header(path, ctx)
    ctx.outfile_list.append(path)


def tag_files(ctx: TagContext) -> List[str]:
    """Walk ``ctx.root`` depth-first in lexical order and process every file.

    The first error aborts the walk.
    """
    root = ctx.root
    st = os.lstat(root)
    if stat.S_ISLNK(st.st_mode):
        return ctx.outfile_list
    if not stat.S_ISDIR(st.st_mode):
        process_file(root, ctx, st)
        return ctx.outfile_list
    if ctx.is_pruned(os.path.basename(os.path.normpath(root))):
        return ctx.outfile_list

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames[:] = sorted(
            d
            for d in dirnames
            if not ctx.is_pruned(d) and not os.path.islink(os.path.join(dirpath, d))
        )
        for name in sorted(filenames):
            process_file(os.path.join(dirpath, name), ctx)
    return ctx.outfile_list
