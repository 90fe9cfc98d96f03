"""Unit tests for savings arithmetic and byte formatting."""

from pathlib import Path

import pytest

from seokit.results import FileOutcome, calculate_savings, file_size, format_bytes


class TestCalculateSavings:
    """Test calculate_savings edge cases."""

    def test_nothing_measured(self):
        s = calculate_savings(0, 0)
        assert s.bytes == 0
        assert s.percentage == "0.00%"
        assert s.formatted == "0 Bytes"

    def test_three_quarters_saved(self):
        s = calculate_savings(1000, 250)
        assert s.bytes == 750
        assert s.percentage == "75.00%"
        assert not s.grew

    def test_growth_is_negative(self):
        """A file that grew gives a negative result without raising."""
        s = calculate_savings(100, 150)
        assert s.bytes == -50
        assert s.percentage == "-50.00%"
        assert s.grew

    def test_zero_before_nonzero_after(self):
        s = calculate_savings(0, 10)
        assert s.bytes == -10
        assert s.percentage == "0.00%"


class TestFormatBytes:
    """Test human readable sizes."""

    @pytest.mark.parametrize("num,expected", [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1 MB"),
        (3 * 1024 ** 3, "3 GB"),
        (-2048, "-2 KB"),
    ])
    def test_format(self, num, expected):
        assert format_bytes(num) == expected


class TestFileOutcome:
    """Test FileOutcome helpers."""

    def test_failed_counts_nothing(self):
        o = FileOutcome.failed(Path("a.css"))
        assert not o.success
        assert o.count == 0
        assert o.size_after == 0

    def test_file_size_of_missing_file(self, tmp_path):
        assert file_size(tmp_path / "missing") == 0
