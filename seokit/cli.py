from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .deps import DependencyError, ensure_dependencies
from .settings import BEAUTIFY_FAMILIES, ImageSettings, RobotsOptions, SchemaOptions, Task, ToolkitSettings
from .stats import RunStats


logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def _split(text: Optional[str]) -> tuple:
    if not text:
        return ()
    return tuple(item.strip() for item in text.split(",") if item.strip())


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="seokit",
        description="Static site optimization toolkit: WebP images, minify/beautify, sitemap, robots.txt, JSON-LD",
    )
    p.add_argument("-d", "--directory", default=".", help="Target directory (default: current directory)")
    p.add_argument(
        "--task",
        choices=[t.value for t in Task],
        default=None,
        help="Run one task and exit instead of showing the interactive menu",
    )

    # Images
    p.add_argument("--quality", type=int, default=None, help="WebP quality (1-100)")
    p.add_argument("--max-width", type=int, default=None, help="Resize images wider than this (>= 100 px)")

    # Beautify
    p.add_argument("--types", default=None, help="File types to beautify, comma separated (css,html,js)")

    # Sitemap / robots / schema
    p.add_argument("--base-url", default="", help="Base URL of the site, e.g. https://example.com")
    p.add_argument("--disallow", default=None, help="robots.txt paths to disallow, comma separated")
    p.add_argument("--allow", default=None, help="robots.txt paths to allow, comma separated")
    p.add_argument("--site-name", default="", help="Website/business name for schema markup")
    p.add_argument("--logo-url", default="", help="Logo URL for schema markup")
    p.add_argument("--author", default="", help="Default author for schema markup")
    p.add_argument("--description", default="", help="Default description for schema markup")
    p.add_argument("--social", default=None, help="Social profile URLs, comma separated")

    # Run
    p.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    p.add_argument("--report", default=None, help="Write the run summary as JSON to this path")
    p.add_argument("--no-install", action="store_true", help="Do not pip-install missing libraries")

    return p


def _image_settings(args: argparse.Namespace, defaults: ImageSettings, parser: argparse.ArgumentParser) -> ImageSettings:
    quality = defaults.quality
    if args.quality is not None:
        if not (1 <= args.quality <= 100):
            parser.error("--quality must be between 1 and 100")
        quality = args.quality

    resize, max_width = defaults.resize, defaults.max_width
    if args.max_width is not None:
        if args.max_width < 100:
            parser.error("--max-width must be at least 100")
        resize, max_width = True, args.max_width

    return ImageSettings(quality=quality, resize=resize, max_width=max_width, method=defaults.method)


def request_from_args(args: argparse.Namespace, settings: ToolkitSettings, parser: argparse.ArgumentParser):
    from .tasks import TaskRequest

    task = Task(args.task)

    families = BEAUTIFY_FAMILIES
    if args.types is not None:
        families = tuple(f.lower() for f in _split(args.types))
        unknown = [f for f in families if f not in BEAUTIFY_FAMILIES]
        if not families or unknown:
            parser.error("--types must name at least one of css, html, js")

    image_settings = None
    if task is Task.ADVANCED_IMAGE_CONVERT:
        image_settings = _image_settings(args, settings.images, parser)
    elif args.quality is not None or args.max_width is not None:
        # image-convert takes its image settings from seo-config.json
        parser.error("--quality and --max-width only apply to --task advanced-image-convert")

    return TaskRequest(
        task=task,
        image_settings=image_settings,
        beautify_families=families,
        base_url=args.base_url,
        robots=RobotsOptions(
            base_url=args.base_url,
            disallow_paths=_split(args.disallow),
            allow_paths=_split(args.allow),
        ),
        schema=SchemaOptions(
            site_name=args.site_name,
            base_url=args.base_url,
            logo_url=args.logo_url,
            default_author=args.author,
            default_description=args.description,
            social_profiles=_split(args.social),
        ),
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    root = Path(args.directory)
    if not root.is_dir():
        parser.error(f"directory does not exist: {root}")
    root = root.resolve()

    setup_logging(args.log_level)

    try:
        ensure_dependencies(install=not args.no_install)
    except DependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Needs the third-party libraries checked above.
    from .config import load_config
    from .report import build_report, render_summary, save_report_json
    from .tasks import run_task

    settings = load_config(root)
    stats = RunStats()

    def run(request) -> None:
        summary = run_task(request, root, settings, stats)
        print(render_summary(summary))
        if args.report:
            report_path = Path(args.report)
            save_report_json(build_report(summary, request.task.value, root), report_path)
            print("\nReport written:", report_path)

    if args.task:
        request = request_from_args(args, settings, parser)
        if request.task is not Task.EXIT:
            run(request)
        return 0

    from .prompts import Prompter

    prompter = Prompter()
    logger.info(f"Working directory: {root}")
    while True:
        try:
            request = prompter.ask_request(settings.images)
        except (EOFError, KeyboardInterrupt):
            print()
            return 0

        if request.task is Task.EXIT:
            print("Goodbye!")
            return 0

        run(request)
