from __future__ import annotations

from pathlib import PurePath
from typing import Union


# Per-directory folder that receives originals after a WebP conversion.
BACKUP_DIR_NAME = "replaced"
DEPENDENCY_DIR_NAME = "node_modules"

TARGET_EXT = ".webp"

CONVERT_EXTS = {".jpg", ".jpeg", ".png", ".gif"}

# Extensions rewritten to TARGET_EXT inside text files. Order matters only
# for readability of the output log.
REFERENCE_EXTS = (".png", ".jpg", ".jpeg", ".gif")

TEXT_REFERENCE_EXTS = {
    ".html",
    ".htm",
    ".css",
    ".js",
    ".ts",
    ".json",
    ".php",
    ".ejs",
    ".vue",
    ".md",
    ".txt",
}

HTML_EXTS = {".html", ".htm"}

FAMILY_EXTS = {
    "css": ({".css"}, ".min.css"),
    "js": ({".js"}, ".min.js"),
    "html": (HTML_EXTS, None),
}

PathLike = Union[str, PurePath]


def _suffix(name: PathLike) -> str:
    return PurePath(name).suffix.lower()


def is_skippable(path: PathLike, tool_name: str = "") -> bool:
    """
    True when any segment of *path* is the backup or dependency folder,
    or its base name is the running tool's own file.

    Only the path is inspected, never the file.
    """
    p = PurePath(path)
    if BACKUP_DIR_NAME in p.parts or DEPENDENCY_DIR_NAME in p.parts:
        return True
    return bool(tool_name) and p.name == tool_name


def is_convertible_image(name: PathLike) -> bool:
    return _suffix(name) in CONVERT_EXTS


def is_text_reference_file(name: PathLike) -> bool:
    return _suffix(name) in TEXT_REFERENCE_EXTS


def is_target_file(name: PathLike, family: str) -> bool:
    """
    css/js: plain sources only, already minified "*.min.*" files are left alone.
    html: .html or .htm.
    """
    try:
        exts, minified_suffix = FAMILY_EXTS[family]
    except KeyError:
        raise ValueError(f"Unknown file family: {family}")

    base = PurePath(name).name
    if _suffix(base) not in exts:
        return False
    if minified_suffix and base.endswith(minified_suffix):
        return False
    return True


def is_markup_file(name: PathLike) -> bool:
    return is_target_file(name, "html")
