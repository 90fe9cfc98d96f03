"""Depth-first directory traversal shared by every transform operation."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from .paths import is_skippable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirEntry:
    path: Path
    name: str
    is_dir: bool
    # Path relative to the walk root, used for skip decisions and URLs.
    rel_path: Path


@dataclass(frozen=True)
class SkipPolicy:
    """Skips backup/dependency folders and the tool's own file."""
    tool_name: str = ""

    @classmethod
    def for_current_process(cls) -> "SkipPolicy":
        return cls(tool_name=os.path.basename(sys.argv[0]) if sys.argv else "")

    def __call__(self, rel_path: Path) -> bool:
        return is_skippable(rel_path, self.tool_name)


Visitor = Callable[[DirEntry], None]


def _list_dir(folder: Path) -> List[os.DirEntry]:
    # Snapshot the listing before visiting: operations create files
    # (webp siblings, the backup folder) while a directory is being walked.
    with os.scandir(folder) as it:
        return sorted(it, key=lambda e: e.name)


def walk(root: Path, visit: Visitor, policy: Optional[SkipPolicy] = None) -> None:
    """
    Call *visit* for every file under *root*, depth-first.

    Skipped entries are neither visited nor descended into. A directory that
    cannot be listed is logged and only its own subtree is lost.
    """
    root = Path(root)
    policy = policy or SkipPolicy.for_current_process()
    _walk_dir(root, root, visit, policy)


def _walk_dir(root: Path, folder: Path, visit: Visitor, policy: SkipPolicy) -> None:
    try:
        entries = _list_dir(folder)
    except OSError as e:
        logger.error(f"Error processing directory {folder}: {e}")
        return

    for e in entries:
        path = Path(e.path)
        rel = path.relative_to(root)

        if policy(rel):
            logger.debug(f"Skipping {rel}")
            continue

        try:
            is_dir = e.is_dir(follow_symlinks=False)
        except OSError as err:
            logger.error(f"Cannot stat {path}: {err}")
            continue

        if is_dir:
            _walk_dir(root, path, visit, policy)
        elif e.is_file():
            visit(DirEntry(path=path, name=e.name, is_dir=False, rel_path=rel))
