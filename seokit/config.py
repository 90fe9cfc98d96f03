"""Loading of the optional seo-config.json at the root of the site."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .settings import BeautifySettings, ImageSettings, MinifySettings, ToolkitSettings


logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "seo-config.json"


def load_config(root: Path) -> ToolkitSettings:
    """
    Read <root>/seo-config.json into ToolkitSettings.

    A missing file gives the built-in defaults. A file that cannot be read or
    parsed is logged and the defaults are used as well; it is never fatal.
    """
    config_path = Path(root) / CONFIG_FILE_NAME
    if not config_path.exists():
        return ToolkitSettings()

    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Error loading configuration {config_path}: {e}")
        return ToolkitSettings()

    if not isinstance(data, dict):
        logger.error(f"Error loading configuration {config_path}: top level must be an object")
        return ToolkitSettings()

    try:
        settings = settings_from_dict(data)
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid value in {config_path}: {e}")
        return ToolkitSettings()

    logger.info(f"Configuration loaded from {CONFIG_FILE_NAME}")
    return settings


def settings_from_dict(data: Dict[str, Any]) -> ToolkitSettings:
    return ToolkitSettings(
        images=_images(_section(data, "images")),
        minify=_minify(_section(data, "minify")),
        beautify=_beautify(_section(data, "beautify")),
    )


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        logger.warning(f"Ignoring config section '{key}': expected an object")
        return {}
    return value


def _images(d: Dict[str, Any]) -> ImageSettings:
    defaults = ImageSettings()

    quality = d.get("quality", defaults.quality)
    try:
        quality = int(quality)
        if not 1 <= quality <= 100:
            raise ValueError()
    except (TypeError, ValueError):
        logger.warning(f"Invalid image quality {d.get('quality')!r}, using {defaults.quality}")
        quality = defaults.quality

    max_width = d.get("maxWidth", d.get("max_width", defaults.max_width))
    try:
        max_width = int(max_width)
        if max_width <= 0:
            raise ValueError()
    except (TypeError, ValueError):
        logger.warning(f"Invalid image maxWidth {max_width!r}, using {defaults.max_width}")
        max_width = defaults.max_width

    return ImageSettings(
        quality=quality,
        resize=bool(d.get("resize", defaults.resize)),
        max_width=max_width,
    )


def _minify(d: Dict[str, Any]) -> MinifySettings:
    defaults = MinifySettings()
    return MinifySettings(
        css=dict(_section(d, "css")) if "css" in d else defaults.css,
        html=dict(_section(d, "html")) if "html" in d else defaults.html,
        js=dict(_section(d, "js")) if "js" in d else defaults.js,
    )


def _beautify(d: Dict[str, Any]) -> BeautifySettings:
    defaults = BeautifySettings()
    return BeautifySettings(
        indent_size=int(d.get("indent_size", defaults.indent_size)),
        end_with_newline=bool(d.get("end_with_newline", defaults.end_with_newline)),
        preserve_newlines=bool(d.get("preserve_newlines", defaults.preserve_newlines)),
        max_preserve_newlines=int(d.get("max_preserve_newlines", defaults.max_preserve_newlines)),
    )
