"""
Interactive front end: asks which task to run and the questions it needs.

Every question goes through an injectable ``input_fn`` so the flow can be
driven from tests with canned answers.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Tuple

from .settings import BEAUTIFY_FAMILIES, ImageSettings, RobotsOptions, SchemaOptions, Task
from .tasks import TaskRequest


InputFn = Callable[[str], str]

BASE_URL_RE = re.compile(r"^https?://[a-zA-Z0-9\-_.]+\.[a-zA-Z]{2,}")

MENU: List[Tuple[Optional[str], str]] = [
    (None, "IMAGE OPTIMIZATION"),
    (Task.IMAGE_CONVERT.value, "Convert images to WebP + replace references"),
    (Task.ADVANCED_IMAGE_CONVERT.value, "Advanced image conversion options"),
    (None, "CODE OPTIMIZATION"),
    (Task.MINIFY_CSS.value, "Minify CSS files"),
    (Task.MINIFY_HTML.value, "Minify HTML files"),
    (Task.MINIFY_JS.value, "Minify JavaScript files"),
    (Task.BEAUTIFY.value, "Beautify code (CSS, HTML, JS)"),
    (None, "SEO ENHANCEMENTS"),
    (Task.LAZY_LOAD.value, "Add lazy loading to images"),
    (Task.ALT_ATTRIBUTES.value, "Add alt attributes to images"),
    (Task.SITEMAP.value, "Generate sitemap.xml"),
    (Task.ROBOTS.value, "Generate robots.txt"),
    (Task.SCHEMA.value, "Generate JSON-LD schema markup"),
    (None, ""),
    (Task.EXIT.value, "Exit"),
]

CONTACT_TYPES = (
    "Customer Service",
    "Technical Support",
    "Sales",
    "Billing Support",
    "General Inquiries",
)


def _parse_int_range(text: str, lo: int, hi: Optional[int], label: str) -> int:
    try:
        v = int(text.strip())
    except ValueError:
        raise ValueError(f"{label} must be a whole number.") from None
    if hi is None:
        if v < lo:
            raise ValueError(f"{label} must be at least {lo}.")
    elif not (lo <= v <= hi):
        raise ValueError(f"{label} must be between {lo} and {hi}.")
    return v


def split_list(text: str) -> Tuple[str, ...]:
    """'/admin, /private' -> ('/admin', '/private'); empty items dropped."""
    return tuple(item.strip() for item in text.split(",") if item.strip())


class Prompter:
    def __init__(self, input_fn: InputFn = input, output_fn: Callable[[str], None] = print):
        self.input_fn = input_fn
        self.output_fn = output_fn

    # ---- primitive questions ----

    def ask_text(self, message: str, default: str = "") -> str:
        suffix = f" ({default})" if default else ""
        answer = self.input_fn(f"{message}{suffix}: ").strip()
        return answer or default

    def ask_required(self, message: str) -> str:
        while True:
            answer = self.ask_text(message)
            if answer:
                return answer
            self.output_fn("Please enter a value.")

    def ask_int(self, message: str, default: int, lo: int, hi: Optional[int] = None) -> int:
        while True:
            text = self.ask_text(message, str(default))
            try:
                return _parse_int_range(text, lo, hi, message.rstrip(":"))
            except ValueError as e:
                self.output_fn(str(e))

    def ask_yes_no(self, message: str, default: bool = False) -> bool:
        hint = "Y/n" if default else "y/N"
        while True:
            answer = self.input_fn(f"{message} [{hint}]: ").strip().lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            self.output_fn("Please answer yes or no.")

    def ask_choice(self, message: str, choices: Tuple[str, ...], default: str) -> str:
        for i, choice in enumerate(choices, start=1):
            self.output_fn(f"  {i}. {choice}")
        while True:
            answer = self.ask_text(message, default)
            if answer in choices:
                return answer
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1]
            self.output_fn(f"Please pick one of 1-{len(choices)}.")

    def ask_base_url(self, message: str, default: str = "") -> str:
        while True:
            answer = self.ask_text(message, default)
            if BASE_URL_RE.match(answer):
                return answer
            self.output_fn("Please enter a valid URL (e.g., https://example.com)")

    # ---- task menu ----

    def choose_task(self) -> Task:
        numbered: Dict[str, str] = {}
        self.output_fn("")
        self.output_fn("SELECT OPTIMIZATION TASK:")
        for task_id, label in MENU:
            if task_id is None:
                self.output_fn(f"--- {label} ---" if label else "---")
                continue
            n = str(len(numbered) + 1)
            numbered[n] = task_id
            self.output_fn(f"  {n:>2}. {label}")

        while True:
            answer = self.input_fn("> ").strip()
            task_id = numbered.get(answer, answer)
            try:
                return Task(task_id)
            except ValueError:
                self.output_fn(f"Unknown choice: {answer!r}")

    # ---- per-task questions ----

    def ask_image_settings(self, defaults: ImageSettings) -> ImageSettings:
        quality = self.ask_int("WebP quality (1-100)", defaults.quality, 1, 100)
        resize = self.ask_yes_no("Resize large images?", default=False)
        max_width = defaults.max_width
        if resize:
            max_width = self.ask_int("Maximum image width (pixels)", defaults.max_width, 100)
        return ImageSettings(quality=quality, resize=resize, max_width=max_width, method=defaults.method)

    def ask_beautify_families(self) -> Tuple[str, ...]:
        while True:
            text = self.ask_text("File types to beautify, comma separated (css, html, js)", "css, html, js")
            families = tuple(f.lower() for f in split_list(text))
            unknown = [f for f in families if f not in BEAUTIFY_FAMILIES]
            if families and not unknown:
                return families
            self.output_fn("Please select at least one of: css, html, js")

    def ask_robots(self) -> RobotsOptions:
        base_url = self.ask_text("Enter the base URL of your website (optional)")

        disallow: Tuple[str, ...] = ()
        if self.ask_yes_no("Do you want to add paths to disallow in robots.txt?"):
            disallow = split_list(
                self.ask_text("Enter paths to disallow (comma separated)", "/admin, /private, /cgi-bin")
            )

        allow: Tuple[str, ...] = ()
        if self.ask_yes_no("Do you want to add specific paths to allow in robots.txt?"):
            allow = split_list(self.ask_text("Enter paths to allow (comma separated)", "/public"))

        return RobotsOptions(base_url=base_url, disallow_paths=disallow, allow_paths=allow)

    def ask_schema(self) -> SchemaOptions:
        site_name = self.ask_required("Website/Business name")
        base_url = self.ask_text("Website URL (including https://)")
        logo_url = self.ask_text("Logo URL (leave empty if none)")
        author = self.ask_text("Default author name for content")
        description = self.ask_text("Default site description")
        profiles = split_list(self.ask_text("Social media profiles (comma-separated URLs)"))

        contact_point = None
        if self.ask_yes_no("Include contact information?", default=False):
            telephone = self.ask_text("Contact phone number")
            email = self.ask_text("Contact email")
            contact_type = self.ask_choice("Type of contact", CONTACT_TYPES, CONTACT_TYPES[0])
            if telephone or email:
                contact_point = {
                    "@type": "ContactPoint",
                    "contactType": contact_type,
                    "telephone": telephone,
                    "email": email,
                }

        return SchemaOptions(
            site_name=site_name,
            base_url=base_url,
            logo_url=logo_url,
            default_author=author,
            default_description=description,
            social_profiles=profiles,
            contact_point=contact_point,
        )

    def ask_request(self, image_defaults: ImageSettings) -> TaskRequest:
        task = self.choose_task()

        if task is Task.ADVANCED_IMAGE_CONVERT:
            return TaskRequest(task=task, image_settings=self.ask_image_settings(image_defaults))
        if task is Task.BEAUTIFY:
            return TaskRequest(task=task, beautify_families=self.ask_beautify_families())
        if task is Task.SITEMAP:
            base_url = self.ask_base_url(
                "Enter the base URL of your website (e.g., https://example.com)",
                "https://example.com",
            )
            return TaskRequest(task=task, base_url=base_url)
        if task is Task.ROBOTS:
            return TaskRequest(task=task, robots=self.ask_robots())
        if task is Task.SCHEMA:
            return TaskRequest(task=task, schema=self.ask_schema())
        return TaskRequest(task=task)
