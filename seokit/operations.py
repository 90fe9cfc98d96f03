"""
File-level transform operations.

Every operation is walk() plus a visitor. The visitor filters by file type,
reads, transforms, writes in place and records a FileOutcome; any error for
one file is logged, counted and the walk carries on with the next file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

from . import markup
from .codecs import transform_text
from .engine import encode_webp, write_atomic
from .paths import BACKUP_DIR_NAME, TARGET_EXT, is_convertible_image, is_markup_file, is_target_file, is_text_reference_file
from .results import FileOutcome, calculate_savings, file_size
from .settings import ImageSettings, ProcessMode, SchemaOptions, ToolkitSettings
from .stats import RunStats
from .walker import DirEntry, SkipPolicy, walk


logger = logging.getLogger(__name__)


def _read_text(path: Path) -> str:
    # newline="" keeps CRLF files byte-identical outside the edited spots
    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()


def _write_text(path: Path, text: str) -> None:
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)


def _apply(
    entry: DirEntry,
    family: str,
    stats: RunStats,
    action: Callable[[DirEntry], Optional[FileOutcome]],
) -> Optional[FileOutcome]:
    """Run *action* for one file; errors end up in the stats, not the caller."""
    try:
        outcome = action(entry)
    except Exception as e:
        logger.error(f"Failed to process {entry.path}: {e}")
        outcome = FileOutcome.failed(entry.path)

    if outcome is not None:
        stats.record(family, outcome)
    return outcome


# ----- Images -----

def convert_image(path: Path, s: ImageSettings) -> FileOutcome:
    """
    Write <stem>.webp next to *path* and move the original into the backup folder.

    The WebP bytes are produced fully in memory before anything touches the
    disk, so a failed encode leaves the original and the directory as they were.
    """
    src_bytes = path.read_bytes()
    size_before = len(src_bytes)

    data = encode_webp(
        src_bytes,
        quality=s.quality,
        max_width=s.max_width if s.resize else None,
        method=s.method,
    )

    out_path = path.with_name(path.stem + TARGET_EXT)
    write_atomic(data, out_path)
    size_after = file_size(out_path)

    backup_dir = path.parent / BACKUP_DIR_NAME
    try:
        backup_dir.mkdir(exist_ok=True)
        path.replace(backup_dir / path.name)
    except OSError:
        # Original still in place, so references must keep pointing at it.
        out_path.unlink(missing_ok=True)
        raise

    savings = calculate_savings(size_before, size_after)
    logger.info(f"Converted: {path.name} -> {out_path.name} ({savings.formatted} saved, {savings.percentage})")
    logger.info(f"Moved original to: {backup_dir}")

    return FileOutcome(path=path, success=True, size_before=size_before, size_after=size_after)


def convert_images(root: Path, stats: RunStats, s: ImageSettings, policy: Optional[SkipPolicy] = None) -> None:
    def visit(entry: DirEntry) -> None:
        if not is_convertible_image(entry.name):
            return
        _apply(entry, "images", stats, lambda e: convert_image(e.path, s))

    walk(root, visit, policy)


def rewrite_image_references(root: Path, policy: Optional[SkipPolicy] = None) -> Tuple[int, int]:
    """
    Point references to converted images at the .webp files.

    Returns (files updated, files that could not be read or written).
    """
    updated = 0
    errors = 0

    def visit(entry: DirEntry) -> None:
        nonlocal updated, errors
        if not is_text_reference_file(entry.name):
            return

        try:
            content = _read_text(entry.path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading file {entry.path}: {e}")
            errors += 1
            return

        new_content = markup.rewrite_image_references(content)
        if new_content == content:
            logger.debug(f"No changes: {entry.path}")
            return

        try:
            _write_text(entry.path, new_content)
        except OSError as e:
            logger.error(f"Error writing file {entry.path}: {e}")
            errors += 1
            return

        updated += 1
        logger.info(f"Updated: {entry.path}")

    walk(root, visit, policy)
    return updated, errors


# ----- CSS / HTML / JS -----

def process_file(path: Path, family: str, mode: ProcessMode, settings: ToolkitSettings) -> FileOutcome:
    text = _read_text(path)
    size_before = file_size(path)

    output = transform_text(family, text, mode, settings)
    _write_text(path, output)
    size_after = file_size(path)

    savings = calculate_savings(size_before, size_after)
    verb = "Minified" if mode == "minify" else "Beautified"
    change = "added" if savings.grew else "saved"
    logger.info(f"{verb}: {path.name} ({savings.formatted} {change}, {savings.percentage})")

    return FileOutcome(path=path, success=True, size_before=size_before, size_after=size_after)


def process_files(
    root: Path,
    family: str,
    mode: ProcessMode,
    stats: RunStats,
    settings: ToolkitSettings,
    policy: Optional[SkipPolicy] = None,
) -> None:
    """Minify or beautify every css, html or js file under *root*."""
    if mode not in ("minify", "beautify"):
        raise ValueError(f"Unknown mode: {mode}")

    def visit(entry: DirEntry) -> None:
        if not is_target_file(entry.name, family):
            return
        _apply(entry, family, stats, lambda e: process_file(e.path, family, mode, settings))

    walk(root, visit, policy)


# ----- <img> attributes -----

def _edit_markup(path: Path, edit: Callable[[str], Tuple[str, int]]) -> Optional[FileOutcome]:
    content = _read_text(path)
    new_content, changed = edit(content)
    if not changed or new_content == content:
        return None

    size_before = file_size(path)
    _write_text(path, new_content)
    return FileOutcome(
        path=path,
        success=True,
        size_before=size_before,
        size_after=file_size(path),
        count=changed,
    )


def add_lazy_loading(root: Path, stats: RunStats, policy: Optional[SkipPolicy] = None) -> None:
    def action(entry: DirEntry) -> Optional[FileOutcome]:
        outcome = _edit_markup(entry.path, markup.add_lazy_loading)
        if outcome:
            logger.info(f"Added lazy loading to {outcome.count} images in {entry.path}")
        return outcome

    def visit(entry: DirEntry) -> None:
        if is_markup_file(entry.name):
            _apply(entry, "lazy_load", stats, action)

    walk(root, visit, policy)


def add_alt_attributes(root: Path, stats: RunStats, policy: Optional[SkipPolicy] = None) -> None:
    def action(entry: DirEntry) -> Optional[FileOutcome]:
        outcome = _edit_markup(entry.path, markup.add_alt_attributes)
        if outcome:
            logger.info(f"Added alt attributes to {outcome.count} images in {entry.name}")
        return outcome

    def visit(entry: DirEntry) -> None:
        if is_markup_file(entry.name):
            _apply(entry, "alt_attributes", stats, action)

    walk(root, visit, policy)


# ----- JSON-LD -----

def add_schema_markup(entry: DirEntry, options: SchemaOptions) -> Optional[FileOutcome]:
    content = _read_text(entry.path)

    if markup.has_json_ld(content):
        logger.info(f"Schema markup already exists in {entry.path}")
        return None

    folder = entry.rel_path.parent.as_posix()
    schema = markup.build_schema(content, entry.name, folder, options)

    updated = markup.inject_schema(content, schema)
    if updated is None:
        logger.warning(f"No </head> in {entry.path}, schema markup not added")
        return None

    size_before = file_size(entry.path)
    _write_text(entry.path, updated)
    logger.info(f"Added {schema.get('@type', 'schema')} markup to {entry.path}")

    return FileOutcome(path=entry.path, success=True, size_before=size_before, size_after=file_size(entry.path))


def generate_schema_markup(
    root: Path,
    stats: RunStats,
    options: SchemaOptions,
    policy: Optional[SkipPolicy] = None,
) -> None:
    """Inject one JSON-LD block into every page that does not have one yet."""
    def visit(entry: DirEntry) -> None:
        if is_markup_file(entry.name):
            _apply(entry, "schema", stats, lambda e: add_schema_markup(e, options))

    walk(root, visit, policy)
