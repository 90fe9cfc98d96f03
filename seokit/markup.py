"""
Text-level rewrites of markup.

These work on regular expressions, not a parsed DOM, so the output keeps
the author's formatting byte for byte outside the edited spots. Known
limits: a literal ">" inside a quoted attribute value ends the tag early,
and unquoted or malformed attribute quoting is matched loosely. A bare
"alt" or "loading" word inside another attribute's quoted value is taken
as the attribute being present, so that tag is left alone.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from .paths import REFERENCE_EXTS, TARGET_EXT


# ----- Image references -----

# Old extension followed by a URL terminator (query, fragment, quote,
# closing paren, whitespace) or the end of the text.
_REF_PATTERNS = [
    re.compile(re.escape(ext) + r"(?=[?#\"'\)\s]|\Z)", re.IGNORECASE)
    for ext in REFERENCE_EXTS
]

# "<path><ext> <descriptor>" as used in srcset lists.
_SRCSET_PATTERNS = [
    re.compile(r"([\w\-./]+)" + re.escape(ext) + r"\s+(\w+)", re.IGNORECASE)
    for ext in REFERENCE_EXTS
]


def rewrite_image_references(content: str) -> str:
    for pattern in _REF_PATTERNS:
        content = pattern.sub(TARGET_EXT, content)

    if "srcset" in content or "source" in content:
        for pattern in _SRCSET_PATTERNS:
            content = pattern.sub(lambda m: f"{m.group(1)}{TARGET_EXT} {m.group(2)}", content)

    return content


# ----- <img> attributes -----

def _img_without(attr: str) -> re.Pattern:
    # <img ...> whose attribute list does not name *attr*, with or without a value
    return re.compile(
        r"(<img)\b(?![^>]*\s" + attr + r"(?=[\s=/>]))([^>]*?)(\s*/?>)",
        re.IGNORECASE,
    )


_IMG_WITHOUT_LOADING = _img_without("loading")
_IMG_WITHOUT_ALT = _img_without("alt")


def add_lazy_loading(content: str) -> Tuple[str, int]:
    """Add loading="lazy" to every <img> lacking a loading attribute."""
    return _IMG_WITHOUT_LOADING.subn(r'\1\2 loading="lazy"\3', content)


def add_alt_attributes(content: str) -> Tuple[str, int]:
    """Add alt="img-1", alt="img-2", ... to <img> tags lacking alt, in document order."""
    counter = 0

    def _sub(m: re.Match) -> str:
        nonlocal counter
        counter += 1
        return f'{m.group(1)}{m.group(2)} alt="img-{counter}"{m.group(3)}'

    return _IMG_WITHOUT_ALT.sub(_sub, content), counter


# ----- JSON-LD -----

_JSON_LD = re.compile(r"""<script[^>]*\btype\s*=\s*["']application/ld\+json["']""", re.IGNORECASE)

_TITLE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_DESCRIPTION = re.compile(r"""<meta\s+name=["']description["']\s+content=["'](.*?)["']""", re.IGNORECASE)
_PUBLISHED = re.compile(
    r"""<time.*?datetime=["'](.*?)["'].*?>|<meta.*?property=["']article:published_time["'].*?content=["'](.*?)["']""",
    re.IGNORECASE,
)
_AUTHOR = re.compile(r"""<meta.*?name=["']author["'].*?content=["'](.*?)["']""", re.IGNORECASE)
_OG_IMAGE = re.compile(r"""<meta.*?property=["']og:image["'].*?content=["'](.*?)["']""", re.IGNORECASE)
_PRICE = re.compile(r"\$\s*(\d+(\.\d{1,2})?)")
_PRODUCT_IMAGE = re.compile(r"""<img.*?src=["'](.*?)["'].*?alt=["'](.*?)["']""", re.IGNORECASE)

HEAD_CLOSE = "</head>"


def has_json_ld(content: str) -> bool:
    return _JSON_LD.search(content) is not None


def _first(pattern: re.Pattern, content: str, default: str = "") -> str:
    m = pattern.search(content)
    return m.group(1).strip() if m else default


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def classify_page(name: str, folder: str) -> list[str]:
    """
    Page kinds suggested by the file name and its folder, in evaluation order.

    "website" is always first; later matches win when the schema is built.
    """
    kinds = ["website"]
    if "blog" in name or "post" in name or "blog" in folder or "posts" in folder:
        kinds.append("blog")
    if "about" in name or "contact" in name or "about" in folder or "contact" in folder:
        kinds.append("organization")
    if "product" in name or "product" in folder or "shop" in name or "shop" in folder:
        kinds.append("product")
    return kinds


def build_schema(content: str, name: str, folder: str, options: Any) -> Dict[str, Any]:
    """
    Build the JSON-LD object for one page.

    Each matching page kind replaces the candidate built so far, so a page
    that looks like both a blog post and a product ends up as a Product
    (if a price was found) and never as a mix of both.
    """
    base_url = options.base_url or ""
    page_title = _first(_TITLE, content, options.site_name)
    page_description = _first(_DESCRIPTION, content, options.default_description)

    schema: Dict[str, Any] = {}

    for kind in classify_page(name, folder):
        if kind == "website":
            schema = {
                "@context": "https://schema.org",
                "@type": "WebSite",
                "name": options.site_name,
                "url": base_url,
                "description": page_description or options.default_description,
            }
            if "<form" in content and "search" in content:
                schema["potentialAction"] = {
                    "@type": "SearchAction",
                    "target": f"{base_url}/search?q={{search_term_string}}",
                    "query-input": "required name=search_term_string",
                }

        elif kind == "blog":
            m = _PUBLISHED.search(content)
            publish_date = (m.group(1) or m.group(2)) if m else _now_iso()
            schema = {
                "@context": "https://schema.org",
                "@type": "BlogPosting",
                "headline": page_title,
                "description": page_description,
                "image": _first(_OG_IMAGE, content, options.default_image),
                "author": {
                    "@type": "Person",
                    "name": _first(_AUTHOR, content, options.default_author),
                },
                "publisher": options.organization or {
                    "@type": "Organization",
                    "name": options.site_name,
                    "logo": {"@type": "ImageObject", "url": options.logo_url},
                },
                "datePublished": publish_date,
                "dateModified": publish_date,
            }

        elif kind == "organization":
            schema = {
                "@context": "https://schema.org",
                "@type": "Organization",
                "name": options.site_name,
                "url": base_url,
                "logo": options.logo_url,
                "description": page_description or options.default_description,
            }
            if options.social_profiles:
                schema["sameAs"] = list(options.social_profiles)
            if options.contact_point:
                schema["contactPoint"] = [dict(options.contact_point)]

        elif kind == "product":
            price = _first(_PRICE, content)
            if not price:
                continue
            m = _PRODUCT_IMAGE.search(content)
            schema = {
                "@context": "https://schema.org",
                "@type": "Product",
                "name": m.group(2) if m else page_title,
                "description": page_description,
                "image": m.group(1) if m else options.default_image,
                "offers": {
                    "@type": "Offer",
                    "price": price,
                    "priceCurrency": options.currency,
                    "availability": "https://schema.org/InStock",
                },
            }

    return schema


def inject_schema(content: str, schema: Dict[str, Any]) -> Optional[str]:
    """
    Insert one JSON-LD block right before the first </head>.

    Returns None when the page has no </head>.
    """
    if HEAD_CLOSE not in content:
        return None
    block = (
        '\n<script type="application/ld+json">\n'
        f"{json.dumps(schema, indent=2, ensure_ascii=False)}\n"
        "</script>\n"
    )
    return content.replace(HEAD_CLOSE, f"{block}\n{HEAD_CLOSE}", 1)
