"""
Test configuration and fixtures for seokit tests.

Provides temporary site trees, Pillow-generated images and a fresh
statistics object for every test.
"""

import os
from pathlib import Path

import pytest
from PIL import Image

from seokit.stats import RunStats
from seokit.walker import SkipPolicy


@pytest.fixture
def stats():
    """Fixture providing an empty RunStats."""
    return RunStats()


@pytest.fixture
def policy():
    """Fixture providing a skip policy that does not depend on sys.argv."""
    return SkipPolicy(tool_name="seokit-test.py")


@pytest.fixture
def make_image():
    """Fixture providing a helper that writes an image file and returns its path."""
    def _make(path: Path, size=(64, 48), mode="RGB", fmt=None, noise=False, **save_kwargs) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if noise:
            w, h = size
            im = Image.frombytes("RGB", size, os.urandom(w * h * 3))
        else:
            color = (200, 40, 40, 128) if mode == "RGBA" else (200, 40, 40)
            im = Image.new(mode, size, color if mode in ("RGB", "RGBA") else 128)
        im.save(path, format=fmt, **save_kwargs)
        return path
    return _make


@pytest.fixture
def site(tmp_path, make_image):
    """
    Fixture providing a small static site:

        index.html            references img/photo.jpg (src + srcset)
        about.html
        blog/post.html        has a <time datetime>
        css/style.css
        js/app.js, js/app.min.js
        img/photo.jpg, img/logo.png
        replaced/old.html, replaced/old.jpg
        node_modules/lib/index.html
    """
    root = tmp_path / "site"

    write(root / "index.html", (
        "<!DOCTYPE html>\n<html>\n<head>\n<title>Home</title>\n</head>\n<body>\n"
        '<img src="img/photo.jpg">\n'
        '<picture><source srcset="img/photo.jpg 2x"></picture>\n'
        '<div style="background: url(img/logo.png)"></div>\n'
        "</body>\n</html>\n"
    ))
    write(root / "about.html", (
        "<html><head><title>About us</title></head>"
        '<body><img src="team.png" alt="Team"></body></html>\n'
    ))
    write(root / "blog" / "post.html", (
        "<html><head><title>First post</title>"
        '<meta name="author" content="Jane">'
        '</head><body><time datetime="2024-05-01">May 1</time></body></html>\n'
    ))
    write(root / "css" / "style.css", "body {\n    color: red;\n}\n\n.hero {\n    background: url('../img/photo.jpg');\n}\n")
    write(root / "js" / "app.js", "// greeting\nfunction hello(name) {\n    return 'hi ' + name;\n}\n")
    write(root / "js" / "app.min.js", "function a(){return 1}")

    make_image(root / "img" / "photo.jpg", size=(320, 200), fmt="JPEG")
    make_image(root / "img" / "logo.png", size=(32, 32), mode="RGBA", fmt="PNG")

    write(root / "replaced" / "old.html", "<html><head></head><body></body></html>\n")
    make_image(root / "replaced" / "old.jpg", fmt="JPEG")
    write(root / "node_modules" / "lib" / "index.html", "<html><head></head></html>\n")

    return root


# Helper functions for tests
def write(path: Path, text: str) -> Path:
    """Write text without newline translation."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
    return path


def read(path: Path) -> str:
    return path.read_bytes().decode("utf-8")
