from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple


# "minify" and "beautify" are mutually exclusive per run.
ProcessMode = Literal["minify", "beautify"]


class Task(str, Enum):
    IMAGE_CONVERT = "image-convert"
    ADVANCED_IMAGE_CONVERT = "advanced-image-convert"
    MINIFY_CSS = "minify-css"
    MINIFY_HTML = "minify-html"
    MINIFY_JS = "minify-js"
    BEAUTIFY = "beautify"
    LAZY_LOAD = "lazy-load"
    ALT_ATTRIBUTES = "alt-attributes"
    SITEMAP = "sitemap"
    ROBOTS = "robots"
    SCHEMA = "schema"
    EXIT = "exit"


BEAUTIFY_FAMILIES = ("css", "html", "js")


def _default_css_minify() -> Dict[str, Any]:
    return {}


def _default_html_minify() -> Dict[str, Any]:
    # Collapse whitespace, drop comments, minify inline <style>/<script>.
    return {
        "minify_css": True,
        "minify_js": True,
        "keep_closing_tags": True,
        "keep_html_and_head_opening_tags": True,
    }


def _default_js_minify() -> Dict[str, Any]:
    return {"quote_chars": "'\"`"}


@dataclass(frozen=True)
class ImageSettings:
    """
    Knobs for the WebP conversion pass.

    max_width is only used when resize is on; images narrower than it
    are never enlarged.
    """
    quality: int = 80
    resize: bool = False
    max_width: int = 1920

    # 0-6, higher = smaller but slower
    method: int = 4


@dataclass(frozen=True)
class MinifySettings:
    # Passed straight through as keyword arguments to the minifier
    # of each language (cssmin / minify-html / jsmin).
    css: Dict[str, Any] = field(default_factory=_default_css_minify)
    html: Dict[str, Any] = field(default_factory=_default_html_minify)
    js: Dict[str, Any] = field(default_factory=_default_js_minify)


@dataclass(frozen=True)
class BeautifySettings:
    indent_size: int = 2
    end_with_newline: bool = True
    preserve_newlines: bool = True
    max_preserve_newlines: int = 2


@dataclass(frozen=True)
class ToolkitSettings:
    """
    Defaults for every task, usually loaded from seo-config.json.

    Pure data object; per-run choices live in tasks.TaskRequest.
    """
    images: ImageSettings = field(default_factory=ImageSettings)
    minify: MinifySettings = field(default_factory=MinifySettings)
    beautify: BeautifySettings = field(default_factory=BeautifySettings)


@dataclass(frozen=True)
class RobotsOptions:
    base_url: str = ""
    disallow_paths: Tuple[str, ...] = ()
    allow_paths: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SchemaOptions:
    """Site-wide values used when a page does not provide its own."""
    site_name: str = ""
    base_url: str = ""
    logo_url: str = ""
    default_author: str = ""
    default_description: str = ""
    default_image: str = ""
    social_profiles: Tuple[str, ...] = ()

    # {"@type": "ContactPoint", "contactType": ..., "telephone": ..., "email": ...}
    contact_point: Optional[Dict[str, str]] = None

    # Replaces the generated publisher block of blog posts when set.
    organization: Optional[Dict[str, Any]] = None

    currency: str = "USD"
