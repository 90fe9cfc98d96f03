from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FileOutcome:
    """
    Output of transforming a single file.

    Failures carry only the offending path; the error is logged where it is
    caught. Outcomes are recorded in the run statistics and never raised further.
    """
    path: Path
    success: bool
    size_before: int = 0
    size_after: int = 0
    # How many units this file adds to the success counter
    # (tags changed for alt attributes, URLs for the sitemap).
    count: int = 1

    @classmethod
    def failed(cls, path: Path) -> "FileOutcome":
        return cls(path=path, success=False, count=0)


@dataclass(frozen=True)
class Savings:
    bytes: int
    percentage: str
    formatted: str

    @property
    def grew(self) -> bool:
        return self.bytes < 0


def format_bytes(num: int, decimals: int = 2) -> str:
    """Human readable size, e.g. 1536 -> "1.5 KB". Negative sizes keep their sign."""
    if num == 0:
        return "0 Bytes"

    sizes = ["Bytes", "KB", "MB", "GB"]
    value = float(abs(num))
    i = 0
    while value >= 1024 and i < len(sizes) - 1:
        value /= 1024
        i += 1
    sign = "-" if num < 0 else ""
    return f"{sign}{round(value, decimals):g} {sizes[i]}"


def calculate_savings(before: int, after: int) -> Savings:
    """
    saved = before - after; the percentage is 0 when nothing was measured.

    after > before (a beautified file growing) gives a negative result.
    """
    saved = before - after
    percentage = (saved / before) * 100.0 if before > 0 else 0.0
    return Savings(
        bytes=saved,
        percentage=f"{percentage:.2f}%",
        formatted=format_bytes(saved),
    )


def file_size(p: Path) -> int:
    try:
        return p.stat().st_size
    except FileNotFoundError:
        return 0
