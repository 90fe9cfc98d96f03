from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .results import FileOutcome, Savings, calculate_savings


# family key -> (display name, label for the success counter)
FAMILIES: Dict[str, tuple[str, str]] = {
    "images": ("Images", "Converted"),
    "css": ("CSS", "Processed"),
    "html": ("HTML", "Processed"),
    "js": ("JavaScript", "Processed"),
    "lazy_load": ("Lazy loading", "Updated"),
    "alt_attributes": ("Alt attributes", "Added"),
    "sitemap": ("Sitemap", "URLs"),
    "robots": ("robots.txt", "Created"),
    "schema": ("JSON-LD schema markup", "Added"),
}

# Families whose byte totals make up the grand total.
BYTE_FAMILIES = ("images", "css", "html", "js")


@dataclass
class FamilyStats:
    succeeded: int = 0
    failed: int = 0
    total_size_before: int = 0
    total_size_after: int = 0
    # set by any record(), even one that adds nothing (an empty sitemap)
    touched: bool = False

    @property
    def active(self) -> bool:
        return self.touched


@dataclass(frozen=True)
class FamilySummary:
    family: str
    name: str
    count_label: str
    succeeded: int
    failed: int
    total_size_before: int
    total_size_after: int
    savings: Optional[Savings]


@dataclass(frozen=True)
class RunSummary:
    families: List[FamilySummary]
    total_size_before: int
    total_size_after: int
    total: Optional[Savings]

    def get(self, family: str) -> Optional[FamilySummary]:
        for f in self.families:
            if f.family == family:
                return f
        return None


@dataclass
class RunStats:
    """
    Counters for one task.

    Owned by whoever runs the task and passed into every operation.
    Call reset() before each task; counts are never cumulative across tasks.
    """
    families: Dict[str, FamilyStats] = field(
        default_factory=lambda: {k: FamilyStats() for k in FAMILIES}
    )

    def __getattr__(self, name: str) -> FamilyStats:
        # stats.images, stats.css, ...
        families = self.__dict__.get("families", {})
        if name in families:
            return families[name]
        raise AttributeError(name)

    def reset(self) -> None:
        for k in FAMILIES:
            self.families[k] = FamilyStats()

    def record(self, family: str, outcome: FileOutcome) -> None:
        f = self.families[family]
        f.touched = True
        if outcome.success:
            f.succeeded += outcome.count
            f.total_size_before += outcome.size_before
            f.total_size_after += outcome.size_after
        else:
            f.failed += 1

    def summarize(self) -> RunSummary:
        rows: List[FamilySummary] = []
        for key, (name, count_label) in FAMILIES.items():
            f = self.families[key]
            if not f.active:
                continue

            savings = None
            if key in BYTE_FAMILIES:
                savings = calculate_savings(f.total_size_before, f.total_size_after)

            rows.append(
                FamilySummary(
                    family=key,
                    name=name,
                    count_label=count_label,
                    succeeded=f.succeeded,
                    failed=f.failed,
                    total_size_before=f.total_size_before,
                    total_size_after=f.total_size_after,
                    savings=savings,
                )
            )

        before = sum(self.families[k].total_size_before for k in BYTE_FAMILIES)
        after = sum(self.families[k].total_size_after for k in BYTE_FAMILIES)

        return RunSummary(
            families=rows,
            total_size_before=before,
            total_size_after=after,
            total=calculate_savings(before, after) if before > 0 else None,
        )
