"""
npm release action

Tags and publishes an npm package when a push contains the commit that
announces the package's declared version.

Quick Start:
    ```python
    from npm_release import run_from_environment

    outcome = run_from_environment()
    raise SystemExit(outcome.exit_code)
    ```

Command Line:
    ```bash
    npm-release --workspace . --event-path push.json --verbose
    python -m npm_release
    ```
"""

__version__ = "1.0.0"

from .errors import (
    ReleaseError,
    ConfigurationError,
    EventError,
    PackageMetadataError,
    ProcessError,
    ExitError,
    LaunchError,
)

from .config import (
    ActionInputs,
    EnvRule,
    ENV_RULES,
    ReleaseConfig,
    TagAuthor,
)

from .commits import Commit, Event, find_release_commit, load_event
from .package import PackageMetadata, read_package_metadata
from .runner import ProcessRunner
from .tags import TagManager, TagResult, TagStatus
from .publish import build_publish_command, publish_package
from .outputs import OutputSink

from .core import (
    ReleaseAction,
    RunOutcome,
    Released,
    Skipped,
    Failed,
    run_from_environment,
)

__all__ = [
    "ReleaseAction",
    "RunOutcome",
    "Released",
    "Skipped",
    "Failed",
    "run_from_environment",
    "ActionInputs",
    "EnvRule",
    "ENV_RULES",
    "ReleaseConfig",
    "TagAuthor",
    "Commit",
    "Event",
    "find_release_commit",
    "load_event",
    "PackageMetadata",
    "read_package_metadata",
    "ProcessRunner",
    "TagManager",
    "TagResult",
    "TagStatus",
    "build_publish_command",
    "publish_package",
    "OutputSink",
    "ReleaseError",
    "ConfigurationError",
    "EventError",
    "PackageMetadataError",
    "ProcessError",
    "ExitError",
    "LaunchError",
]
