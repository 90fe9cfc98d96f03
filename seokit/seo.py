from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .paths import is_markup_file
from .results import FileOutcome, file_size
from .settings import RobotsOptions
from .stats import RunStats
from .walker import DirEntry, SkipPolicy, walk


logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
SITEMAP_FILE = "sitemap.xml"
ROBOTS_FILE = "robots.txt"

DEFAULT_BASE_URL = "https://example.com"
CHANGE_FREQ = "monthly"
PRIORITY = "0.8"


def normalize_base_url(base_url: str) -> str:
    return base_url.rstrip("/")


def collect_page_urls(root: Path, base_url: str, policy: Optional[SkipPolicy] = None) -> List[str]:
    """Absolute URL of every markup file under *root*, in walk order."""
    base = normalize_base_url(base_url)
    urls: List[str] = []

    def visit(entry: DirEntry) -> None:
        if is_markup_file(entry.name):
            urls.append(f"{base}/{entry.rel_path.as_posix()}")

    walk(root, visit, policy)
    return urls


def build_urlset(urls: List[str], lastmod_value: str) -> ET.Element:
    root = ET.Element("urlset", xmlns=SITEMAP_NS)
    for url in urls:
        url_node = ET.SubElement(root, "url")
        ET.SubElement(url_node, "loc").text = url
        ET.SubElement(url_node, "lastmod").text = lastmod_value
        ET.SubElement(url_node, "changefreq").text = CHANGE_FREQ
        ET.SubElement(url_node, "priority").text = PRIORITY
    return root


def write_xml(path: Path, root: ET.Element) -> None:
    ET.indent(root, space="  ")
    path.write_bytes(ET.tostring(root, encoding="utf-8", xml_declaration=True))


def generate_sitemap(
    root: Path,
    base_url: str,
    stats: RunStats,
    policy: Optional[SkipPolicy] = None,
) -> Optional[Path]:
    """
    (Re)write <root>/sitemap.xml listing every page under *root*.

    All entries share the build time as lastmod.
    """
    root = Path(root)
    if not base_url:
        logger.warning(f"No base URL provided for sitemap. Using {DEFAULT_BASE_URL} as placeholder.")
        base_url = DEFAULT_BASE_URL

    sitemap_path = root / SITEMAP_FILE
    urls = collect_page_urls(root, base_url, policy)
    timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")

    try:
        write_xml(sitemap_path, build_urlset(urls, timestamp))
    except OSError as e:
        logger.error(f"Error writing sitemap {sitemap_path}: {e}")
        stats.record("sitemap", FileOutcome.failed(sitemap_path))
        return None

    stats.record(
        "sitemap",
        FileOutcome(path=sitemap_path, success=True, size_after=file_size(sitemap_path), count=len(urls)),
    )
    logger.info(f"Created sitemap at {sitemap_path} with {len(urls)} URLs")
    return sitemap_path


def build_robots_txt(options: RobotsOptions, has_sitemap: bool) -> str:
    lines = ["User-agent: *"]
    lines += [f"Disallow: {p}" for p in options.disallow_paths]
    lines += [f"Allow: {p}" for p in options.allow_paths]

    content = "\n".join(lines) + "\n"
    if has_sitemap:
        base = normalize_base_url(options.base_url)
        content += f"\nSitemap: {base}/{SITEMAP_FILE}\n"
    return content


def generate_robots_txt(root: Path, options: RobotsOptions, stats: RunStats) -> Optional[Path]:
    """(Re)write <root>/robots.txt; references the sitemap only if one exists."""
    root = Path(root)
    robots_path = root / ROBOTS_FILE
    content = build_robots_txt(options, has_sitemap=(root / SITEMAP_FILE).exists())

    try:
        robots_path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.error(f"Error writing robots.txt {robots_path}: {e}")
        stats.record("robots", FileOutcome.failed(robots_path))
        return None

    stats.record("robots", FileOutcome(path=robots_path, success=True, size_after=file_size(robots_path)))
    logger.info(f"Created robots.txt at {robots_path}")
    return robots_path
