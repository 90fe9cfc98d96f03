"""Tests for the startup dependency check."""

import subprocess
import sys

import pytest

from seokit import deps
from seokit.deps import DependencyError, ensure_dependencies, find_missing

PRESENT = {"json": "json"}
MISSING = {"json": "json", "seokit_no_such_module_xyz": "seokit-no-such-dist"}


class TestEnsureDependencies:
    """Test detection and remediation."""

    def test_find_missing(self):
        assert find_missing(PRESENT) == []
        assert find_missing(MISSING) == ["seokit-no-such-dist"]

    def test_nothing_missing_installs_nothing(self, monkeypatch):
        calls = []
        monkeypatch.setattr(deps.subprocess, "run", lambda *a, **kw: calls.append(a))

        ensure_dependencies(packages=PRESENT)

        assert calls == []

    def test_no_install_raises(self):
        with pytest.raises(DependencyError, match="seokit-no-such-dist"):
            ensure_dependencies(install=False, packages=MISSING)

    def test_installs_with_current_interpreter(self, monkeypatch):
        """pip runs once for the missing distributions; still missing afterwards is an error."""
        calls = []
        monkeypatch.setattr(deps.subprocess, "run", lambda cmd, **kw: calls.append(cmd))

        with pytest.raises(DependencyError, match="Still missing"):
            ensure_dependencies(packages=MISSING)

        assert calls == [[sys.executable, "-m", "pip", "install", "seokit-no-such-dist"]]

    def test_pip_failure(self, monkeypatch):
        def fail(cmd, **kw):
            raise subprocess.CalledProcessError(1, cmd)

        monkeypatch.setattr(deps.subprocess, "run", fail)

        with pytest.raises(DependencyError, match="Failed to install"):
            ensure_dependencies(packages=MISSING)
