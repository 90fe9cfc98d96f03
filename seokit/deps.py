"""Startup check for the third-party libraries the collaborators need."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import subprocess
import sys
from typing import Dict, List


logger = logging.getLogger(__name__)


# import name -> distribution name on the package index
REQUIRED_PACKAGES: Dict[str, str] = {
    "PIL": "Pillow",
    "cssmin": "cssmin",
    "jsmin": "jsmin",
    "minify_html": "minify-html",
    "jsbeautifier": "jsbeautifier",
    "cssbeautifier": "cssbeautifier",
    "bs4": "beautifulsoup4",
}


class DependencyError(RuntimeError):
    """Required libraries are missing and could not be installed."""


def find_missing(packages: Dict[str, str] = REQUIRED_PACKAGES) -> List[str]:
    return [dist for module, dist in packages.items() if importlib.util.find_spec(module) is None]


def ensure_dependencies(install: bool = True, packages: Dict[str, str] = REQUIRED_PACKAGES) -> None:
    """
    Make sure every collaborator library can be imported.

    Missing ones are installed with pip into the running interpreter. Runs
    once before any directory is touched; raises DependencyError if
    something is still missing afterwards.
    """
    missing = find_missing(packages)
    if not missing:
        return

    logger.warning(f"Missing dependencies detected: {', '.join(missing)}")
    if not install:
        raise DependencyError(f"Please install them manually: pip install {' '.join(missing)}")

    logger.info("Installing required packages...")
    try:
        subprocess.run([sys.executable, "-m", "pip", "install", *missing], check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise DependencyError(
            f"Failed to install dependencies ({e}). Please install them manually: pip install {' '.join(missing)}"
        ) from e

    importlib.invalidate_caches()
    still_missing = find_missing(packages)
    if still_missing:
        raise DependencyError(f"Still missing after install: {', '.join(still_missing)}")

    logger.info("Dependencies installed successfully")
