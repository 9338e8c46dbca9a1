"""
Shared fixtures: a scripted process runner and a throwaway composer project.
"""

import json
from pathlib import Path

import pytest

from patchoverview.core.process import ProcessRunner


class FakeRunner(ProcessRunner):
    """ProcessRunner that records calls and returns scripted exit codes.

    `results` maps an argument tuple to an exit code; anything unscripted
    exits with 1. `on_run` overrides the lookup entirely.
    """

    def __init__(self, programs=("patch",), results=None, on_run=None):
        self.programs = set(programs)
        self.results = dict(results or {})
        self.on_run = on_run
        self.calls = []

    def exists(self, program):
        return program in self.programs

    def run(self, args, cwd=None, stdin=None):
        args = [str(arg) for arg in args]
        self.calls.append((args, cwd, stdin))
        if self.on_run is not None:
            return self.on_run(args, cwd, stdin)
        return self.results.get(tuple(args), 1)

    @property
    def commands(self):
        return [args for args, _, _ in self.calls]


def probe(strip_level, reverse=False):
    args = ["patch", strip_level]
    if reverse:
        args.append("-R")
    args.append("--dry-run")
    return tuple(args)


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def make_project(tmp_path):
    """Write composer.json / composer.lock next to a `web` root and return the root."""

    def _make(patches=None, installer_paths=None, packages=None, packages_dev=None, extra=None):
        root = tmp_path / "web"
        root.mkdir(exist_ok=True)

        manifest_extra = {
            "installer-paths": installer_paths or {},
            "patches": patches or {},
        }
        manifest_extra.update(extra or {})
        lock = {"packages": packages or []}
        if packages_dev is not None:
            lock["packages-dev"] = packages_dev

        (tmp_path / "composer.json").write_text(json.dumps({"name": "acme/site", "extra": manifest_extra}))
        (tmp_path / "composer.lock").write_text(json.dumps(lock))
        return root

    return _make
