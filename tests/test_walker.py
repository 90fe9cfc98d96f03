"""Unit tests for the directory walker."""

import logging

from seokit import walker
from seokit.walker import SkipPolicy, walk

from conftest import write


def _collect(root, policy):
    seen = []
    walk(root, lambda e: seen.append(e.rel_path.as_posix()), policy)
    return seen


class TestWalk:
    """Test traversal order and skipping."""

    def test_visits_files_depth_first_sorted(self, tmp_path, policy):
        """Entries are visited in name order, descending into folders as met."""
        for rel in ["b.txt", "a/z.txt", "a/y/x.txt", "c.txt"]:
            write(tmp_path / rel, "x")

        assert _collect(tmp_path, policy) == ["a/y/x.txt", "a/z.txt", "b.txt", "c.txt"]

    def test_skipped_folders_never_visited(self, site, policy):
        """Nothing under replaced/ or node_modules/ reaches the visitor."""
        seen = _collect(site, policy)

        assert seen
        assert not [p for p in seen if "replaced" in p or "node_modules" in p]

    def test_skips_tool_own_file(self, tmp_path):
        """The running script is not visited."""
        write(tmp_path / "main.py", "print()")
        write(tmp_path / "page.html", "<p>")

        assert _collect(tmp_path, SkipPolicy(tool_name="main.py")) == ["page.html"]

    def test_visitor_sees_entry_fields(self, tmp_path, policy):
        """DirEntry carries absolute path, name and root-relative path."""
        target = write(tmp_path / "sub" / "page.html", "<p>")
        entries = []
        walk(tmp_path, entries.append, policy)

        assert len(entries) == 1
        e = entries[0]
        assert e.path == target
        assert e.name == "page.html"
        assert e.rel_path.as_posix() == "sub/page.html"
        assert e.is_dir is False

    def test_unreadable_directory_only_loses_its_subtree(self, tmp_path, policy, monkeypatch, caplog):
        """A listing error is logged and the rest of the tree is still walked."""
        write(tmp_path / "locked" / "secret.html", "x")
        write(tmp_path / "open" / "page.html", "x")

        real_list_dir = walker._list_dir

        def fake_list_dir(folder):
            if folder.name == "locked":
                raise PermissionError("denied")
            return real_list_dir(folder)

        monkeypatch.setattr(walker, "_list_dir", fake_list_dir)

        with caplog.at_level(logging.ERROR, logger="seokit.walker"):
            seen = _collect(tmp_path, policy)

        assert seen == ["open/page.html"]
        assert "locked" in caplog.text

    def test_files_created_during_walk_are_not_visited(self, tmp_path, policy):
        """The listing is a snapshot taken before visiting."""
        write(tmp_path / "a.txt", "x")
        seen = []

        def visit(entry):
            seen.append(entry.name)
            write(entry.path.parent / ("z_" + entry.name), "y")

        walk(tmp_path, visit, policy)

        assert seen == ["a.txt"]
