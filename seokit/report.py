from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .results import format_bytes
from .stats import RunSummary


@dataclass(frozen=True)
class FamilyReport:
    family: str
    succeeded: int
    failed: int
    total_size_before: int
    total_size_after: int
    saved_bytes: Optional[int]
    saved_percent: Optional[str]


@dataclass(frozen=True)
class RunReport:
    created_utc: str
    task: str
    root: str
    families: List[FamilyReport]
    total: Optional[dict]


def render_summary(summary: RunSummary) -> str:
    lines = ["", "=== Optimization Summary ==="]

    if not summary.families:
        lines.append("Nothing to report.")

    for f in summary.families:
        lines.append("")
        lines.append(f"{f.name}")
        lines.append(f"  {f.count_label:<10}: {f.succeeded}")
        lines.append(f"  {'Failed':<10}: {f.failed}")

        if f.savings is not None:
            lines.append(f"  {'Before':<10}: {format_bytes(f.total_size_before)}")
            lines.append(f"  {'After':<10}: {format_bytes(f.total_size_after)}")
            label = "Added" if f.savings.grew else "Saved"
            lines.append(f"  {label:<10}: {format_bytes(abs(f.savings.bytes))} ({f.savings.percentage})")

    if summary.total is not None:
        lines.append("")
        lines.append("TOTAL SAVINGS")
        lines.append(
            f"  Before: {format_bytes(summary.total_size_before)} | After: {format_bytes(summary.total_size_after)}"
        )
        lines.append(f"  Total saved: {summary.total.formatted} ({summary.total.percentage})")

    return "\n".join(lines)


def build_report(summary: RunSummary, task: str, root: Path) -> RunReport:
    created_utc = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")

    families: List[FamilyReport] = []
    for f in summary.families:
        families.append(
            FamilyReport(
                family=f.family,
                succeeded=f.succeeded,
                failed=f.failed,
                total_size_before=f.total_size_before,
                total_size_after=f.total_size_after,
                saved_bytes=f.savings.bytes if f.savings else None,
                saved_percent=f.savings.percentage if f.savings else None,
            )
        )

    total = None
    if summary.total is not None:
        total = {
            "total_size_before": summary.total_size_before,
            "total_size_after": summary.total_size_after,
            "saved_bytes": summary.total.bytes,
            "saved_percent": summary.total.percentage,
        }

    return RunReport(created_utc=created_utc, task=task, root=str(root), families=families, total=total)


def save_report_json(report: RunReport, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8") as f:
        json.dump(asdict(report), f, indent=2, ensure_ascii=False)
