"""
Shared fixtures for the npm release tests.
"""

import json
import logging

import pytest

from npm_release.errors import ExitError
from npm_release.utils import PACKAGE_LOGGER


class FakeRunner:
    """
    Records commands instead of running them.

    Tags created with ``git tag -a`` are remembered so that a later
    ``git rev-parse --verify refs/tags/...`` finds them, like a real
    repository would.
    """

    def __init__(self, existing_tags=(), fail=None):
        self.calls = []
        self.tags = set(existing_tags)
        self.fail = dict(fail or {})  # command prefix tuple -> exit code

    def run(self, directory, command, *args):
        call = (command, *args)
        self.calls.append(call)

        for prefix, code in self.fail.items():
            if call[:len(prefix)] == prefix:
                raise ExitError(command, args, code, "simulated failure")

        if call[:2] == ("git", "rev-parse"):
            tag = args[-1].replace("refs/tags/", "", 1)
            if tag not in self.tags:
                raise ExitError(command, args, 1)
        elif call[:3] == ("git", "tag", "-a"):
            self.tags.add(args[-1])

    def ran(self, *prefix):
        """True if any recorded call starts with ``prefix``."""
        return any(call[:len(prefix)] == prefix for call in self.calls)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def workspace(tmp_path):
    """A workspace with a package.json declaring version 1.2.0."""
    path = tmp_path / "workspace"
    path.mkdir()
    (path / "package.json").write_text(json.dumps({"name": "demo-package", "version": "1.2.0"}))
    return path


def make_event(messages, owner=None):
    owner = owner if owner is not None else {"name": "octocat", "email": "octocat@example.com"}
    return {
        "repository": {"owner": owner},
        "commits": [
            {"id": f"sha{i}", "message": message}
            for i, message in enumerate(messages)
        ],
    }


@pytest.fixture
def event_file(tmp_path):
    """Factory writing a push event payload and returning its path."""
    def _write(messages, owner=None):
        path = tmp_path / "event.json"
        path.write_text(json.dumps(make_event(messages, owner)))
        return path
    return _write


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo setup_logging() calls made by a test."""
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(pkg_logger.handlers)
    level = pkg_logger.level
    yield
    for handler in pkg_logger.handlers:
        if handler not in handlers:
            handler.close()
    pkg_logger.handlers[:] = handlers
    pkg_logger.setLevel(level)
