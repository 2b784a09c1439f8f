"""Shared test fixtures for Code Styler tests."""

import shutil
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from code_styler.changes.resolver import DELIMITER
from code_styler.findings.models import FindingSource


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given; skip git tests without git."""
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    skip_git = pytest.mark.skip(reason="git executable not available")
    has_git = shutil.which("git") is not None
    for item in items:
        if "slow" in item.keywords and not config.getoption("--run-slow"):
            item.add_marker(skip_slow)
        elif "slow" in item.keywords and not has_git:
            item.add_marker(skip_git)


def frame(*lines: str) -> str:
    """Join lines with the delimiter framing the parsers expect."""
    return "".join(f"{line}{DELIMITER}" for line in lines)


class FakeExecutor:
    """CommandExecutor stand-in answering by command substring.

    ``responses`` maps a substring of the joined argv to the output (or an
    exception to raise); the first matching entry wins. ``streams`` maps the
    last argv element (the file path) to the lines ``stream`` yields.
    """

    def __init__(self, responses=None, streams=None):
        self.responses = dict(responses or {})
        self.streams = dict(streams or {})
        self.calls = []

    async def run(self, argv, cwd, check=True):
        self.calls.append(list(argv))
        command = " ".join(argv)
        for pattern, output in self.responses.items():
            if pattern in command:
                if isinstance(output, Exception):
                    raise output
                return output
        return ""

    async def stream(self, argv, cwd, check=False):
        self.calls.append(list(argv))
        output = self.streams.get(argv[-1], [])
        if isinstance(output, Exception):
            raise output
        for line in output:
            yield line


@pytest.fixture
def fake_executor():
    return FakeExecutor()


@pytest.fixture
def source():
    return FindingSource(title="TestChecker", description="Checker used in tests")


@pytest.fixture
def simple_diff_text():
    """Framed diff of one file with one added line."""
    return frame(
        "diff --git a/f.txt b/f.txt",
        "@@ -1,2 +1,3 @@",
        " line1",
        "+line2",
        " line3",
    )


@pytest.fixture
def python_diff_text():
    """Framed git diff for src/app.py adding an undocumented function."""
    return frame(
        "diff --git a/src/app.py b/src/app.py",
        "index 1111111..2222222 100644",
        "--- a/src/app.py",
        "+++ b/src/app.py",
        "@@ -1,3 +1,6 @@",
        ' """App module."""',
        " ",
        " VALUE = 1",
        "+",
        "+def handler(event):",
        "+    return event",
    )
