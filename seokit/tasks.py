"""
Task sequencing.

A front end (interactive prompts, command-line flags, a script) builds a
TaskRequest; run_task resets the statistics, runs the operations the task
needs against the target directory and returns the summary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Tuple

from . import operations, seo
from .settings import BEAUTIFY_FAMILIES, ImageSettings, RobotsOptions, SchemaOptions, Task, ToolkitSettings
from .stats import RunStats, RunSummary
from .walker import SkipPolicy


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskRequest:
    """
    Everything needed to run one task.

    Fields a task does not use are ignored. image_settings overrides the
    configured image defaults (advanced conversion).
    """
    task: Task
    image_settings: Optional[ImageSettings] = None
    beautify_families: Tuple[str, ...] = BEAUTIFY_FAMILIES
    base_url: str = ""
    robots: RobotsOptions = field(default_factory=RobotsOptions)
    schema: SchemaOptions = field(default_factory=SchemaOptions)


def run_task(
    request: TaskRequest,
    root: Path,
    settings: ToolkitSettings,
    stats: RunStats,
    policy: Optional[SkipPolicy] = None,
) -> RunSummary:
    root = Path(root)
    policy = policy or SkipPolicy.for_current_process()

    stats.reset()
    task = Task(request.task)

    if task in (Task.IMAGE_CONVERT, Task.ADVANCED_IMAGE_CONVERT):
        image_settings = settings.images
        if task is Task.ADVANCED_IMAGE_CONVERT and request.image_settings is not None:
            image_settings = request.image_settings

        logger.info(f"Converting images in: {root}")
        operations.convert_images(root, stats, image_settings, policy)

        # Every conversion has finished before any reference is rewritten.
        logger.info(f"Updating image references in: {root}")
        updated, errors = operations.rewrite_image_references(root, policy)
        logger.info(f"Image references updated in {updated} files ({errors} errors)")

    elif task is Task.MINIFY_CSS:
        operations.process_files(root, "css", "minify", stats, settings, policy)

    elif task is Task.MINIFY_HTML:
        operations.process_files(root, "html", "minify", stats, settings, policy)

    elif task is Task.MINIFY_JS:
        operations.process_files(root, "js", "minify", stats, settings, policy)

    elif task is Task.BEAUTIFY:
        if not request.beautify_families:
            raise ValueError("Select at least one file type to beautify")
        for family in BEAUTIFY_FAMILIES:
            if family in request.beautify_families:
                logger.info(f"Beautifying {family} files in: {root}")
                operations.process_files(root, family, "beautify", stats, settings, policy)

    elif task is Task.LAZY_LOAD:
        operations.add_lazy_loading(root, stats, policy)

    elif task is Task.ALT_ATTRIBUTES:
        operations.add_alt_attributes(root, stats, policy)

    elif task is Task.SITEMAP:
        seo.generate_sitemap(root, request.base_url, stats, policy)

    elif task is Task.ROBOTS:
        robots = request.robots
        if request.base_url and not robots.base_url:
            robots = replace(robots, base_url=request.base_url)
        seo.generate_robots_txt(root, robots, stats)

    elif task is Task.SCHEMA:
        schema = request.schema
        if request.base_url and not schema.base_url:
            schema = replace(schema, base_url=request.base_url)
        operations.generate_schema_markup(root, stats, schema, policy)

    elif task is Task.EXIT:
        pass

    return stats.summarize()
