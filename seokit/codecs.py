"""
Minifier and beautifier adapters.

Each language has a minify and a beautify function taking text and
returning text. Minifier problems are reported as MinifyError so callers
can count them as a failure for that one file.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

import cssbeautifier
import cssmin
import jsbeautifier
import jsmin
import minify_html
from bs4 import BeautifulSoup
from bs4.formatter import HTMLFormatter

from .settings import BeautifySettings, ProcessMode, ToolkitSettings


class MinifyError(Exception):
    """A minifier rejected its input."""

    def __init__(self, family: str, diagnostics: List[str]):
        self.family = family
        self.diagnostics = list(diagnostics)
        super().__init__(f"{family} minifier reported: {'; '.join(self.diagnostics)}")


def minify_css(text: str, options: Mapping[str, Any]) -> str:
    return cssmin.cssmin(text, **dict(options))


def minify_html_text(text: str, options: Mapping[str, Any]) -> str:
    return minify_html.minify(text, **dict(options))


def minify_js(text: str, options: Mapping[str, Any]) -> str:
    return jsmin.jsmin(text, **dict(options))


_MINIFIERS = {
    "css": minify_css,
    "html": minify_html_text,
    "js": minify_js,
}


def minify(family: str, text: str, options: Mapping[str, Any]) -> str:
    fn = _MINIFIERS[family]
    try:
        return fn(text, options)
    except Exception as e:
        raise MinifyError(family, [f"{type(e).__name__}: {e}"]) from e


def _apply_beautify_options(opts: Any, s: BeautifySettings) -> Any:
    opts.indent_size = int(s.indent_size)
    opts.end_with_newline = bool(s.end_with_newline)
    opts.preserve_newlines = bool(s.preserve_newlines)
    opts.max_preserve_newlines = int(s.max_preserve_newlines)
    return opts


def beautify_css(text: str, s: BeautifySettings) -> str:
    opts = _apply_beautify_options(cssbeautifier.default_options(), s)
    return cssbeautifier.beautify(text, opts)


def beautify_js(text: str, s: BeautifySettings) -> str:
    opts = _apply_beautify_options(jsbeautifier.default_options(), s)
    opts.space_after_anon_function = True
    return jsbeautifier.beautify(text, opts)


def beautify_html(text: str, s: BeautifySettings) -> str:
    soup = BeautifulSoup(text, "html.parser")
    out = soup.prettify(formatter=HTMLFormatter(indent=int(s.indent_size)))
    out = out.rstrip("\n")
    return out + "\n" if s.end_with_newline else out


_BEAUTIFIERS = {
    "css": beautify_css,
    "html": beautify_html,
    "js": beautify_js,
}


def beautify(family: str, text: str, s: BeautifySettings) -> str:
    return _BEAUTIFIERS[family](text, s)


def transform_text(family: str, text: str, mode: ProcessMode, settings: ToolkitSettings) -> str:
    if mode == "minify":
        options: Dict[str, Any] = getattr(settings.minify, family)
        return minify(family, text, options)
    if mode == "beautify":
        return beautify(family, text, settings.beautify)
    raise ValueError(f"Unknown mode: {mode}")
