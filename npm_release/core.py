"""
Core release orchestration.

``ReleaseAction`` takes one push through the release steps:

1. Read the declared version from package.json
2. Find the commit announcing that version
3. Create and push the release tag (optional)
4. Publish the package
5. Report the step outputs

"Nothing to do" results (no release commit, tag already there) end the
run as ``Skipped`` with a success status. Every ``ReleaseError`` ends it
as ``Failed`` with a failing status. Either way ``changed=false`` is
reported.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Iterable, Mapping, Optional, Union

from .commits import Commit, Event, find_release_commit, load_event
from .config import ActionInputs, ReleaseConfig, TagAuthor
from .errors import ReleaseError
from .outputs import OutputSink
from .package import read_package_metadata
from .publish import publish_package
from .runner import ProcessRunner
from .tags import TagManager
from .utils import truncate_string

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Released:
    """The package was published."""
    version: str
    commit_id: str

    changed: ClassVar[bool] = True
    exit_code: ClassVar[int] = 0


@dataclass(frozen=True)
class Skipped:
    """Nothing to release for this push."""
    reason: str

    changed: ClassVar[bool] = False
    exit_code: ClassVar[int] = 0


@dataclass(frozen=True)
class Failed:
    """The run failed; ``message`` says why."""
    message: str

    changed: ClassVar[bool] = False
    exit_code: ClassVar[int] = 1


RunOutcome = Union[Released, Skipped, Failed]


def report_outcome(outputs: OutputSink, outcome: RunOutcome) -> None:
    """Write the step outputs for a finished run."""
    if isinstance(outcome, Released):
        outputs.set_output("changed", "true")
        outputs.set_output("version", outcome.version)
        outputs.set_output("commit", outcome.commit_id)
        return

    outputs.set_output("changed", "false")
    if isinstance(outcome, Failed):
        logger.error("Release failed: %s", outcome.message)
        outputs.error(outcome.message)


class ReleaseAction:
    """
    Release a package for one push event.

    Example:
        ```python
        action = ReleaseAction(config, Path("/github/workspace"))
        outcome = action.run(event.commits)
        sys.exit(outcome.exit_code)
        ```
    """

    def __init__(
        self,
        config: ReleaseConfig,
        workspace: Union[str, Path],
        runner: Optional[ProcessRunner] = None,
        outputs: Optional[OutputSink] = None,
    ):
        """
        Initialize the release action.

        Args:
            config: Validated release configuration.
            workspace: Directory holding package.json and the git checkout.
            runner: Process runner used for git and publish commands.
            outputs: Sink for step outputs.
        """
        self.config = config
        self.workspace = Path(workspace)
        self.runner = runner or ProcessRunner()
        self.outputs = outputs or OutputSink.from_environment()
        self.tags = TagManager(self.runner)

    def mark_safe_directory(self) -> None:
        """Allow git to operate on a workspace owned by another user (container checkouts)."""
        self.runner.run(
            self.workspace, "git", "config", "--global", "--add", "safe.directory", str(self.workspace)
        )

    def release(self, commits: Iterable[Commit]) -> RunOutcome:
        """
        Run the release steps without reporting.

        Returns:
            Released, or Skipped when there is nothing to do.

        Raises:
            ReleaseError: On any failure.
        """
        package = read_package_metadata(self.workspace)
        version = package.version
        logger.info("Package %s declares version %s", package.name or package.path, version)

        self.mark_safe_directory()

        commit = find_release_commit(self.config.commit_pattern, commits, version)
        if commit is None:
            print(f"ℹ️ No commit found for version: {version}")
            return Skipped(f"No commit found for version: {version}")
        print(f"🔍 Found commit: {truncate_string(commit.message, 72)}")

        if self.config.create_tag:
            result = self.tags.ensure_tag(self.workspace, self.config, version)
            if not result.created:
                print(f"ℹ️ Tag already exists: {result.tag_name}")
                return Skipped(f"Tag already exists: {result.tag_name}")
            print(f"🏷️ Tag has been created successfully: {result.tag_name}")
        else:
            logger.info("Tag creation disabled, skipping tag for %s", version)

        publish_package(self.runner, self.workspace, self.config, version)
        print(f"📦 Version has been published successfully: {version}")

        return Released(version=version, commit_id=commit.id)

    def run(self, commits: Iterable[Commit]) -> RunOutcome:
        """
        Run the release and report its outputs.

        Args:
            commits: Commits of the triggering push, in order.

        Returns:
            The run outcome. Use ``outcome.exit_code`` as the process status.
        """
        try:
            outcome = self.release(commits)
        except ReleaseError as e:
            outcome = Failed(str(e))

        report_outcome(self.outputs, outcome)
        if isinstance(outcome, Released):
            print("✅ Done.")
        return outcome


def tag_author_from_event(event: Event) -> Optional[TagAuthor]:
    """Use the repository owner as tag author when the event names one."""
    if event.owner_name and event.owner_email:
        return TagAuthor(event.owner_name, event.owner_email)
    return None


def run_from_environment(
    environ: Optional[Mapping[str, str]] = None,
    runner: Optional[ProcessRunner] = None,
    outputs: Optional[OutputSink] = None,
    inputs: Optional[ActionInputs] = None,
) -> RunOutcome:
    """
    Resolve inputs, load the event and run the release.

    Args:
        environ: Environment to read inputs from (defaults to os.environ).
        runner: Process runner (defaults to a real one).
        outputs: Output sink (defaults to one built from the environment).
        inputs: Pre-resolved inputs, overriding the environment.

    Returns:
        The run outcome. Configuration and event errors are reported as Failed.
    """
    outputs = outputs or OutputSink.from_environment(environ)
    try:
        inputs = inputs or ActionInputs.from_environment(environ)
        event = load_event(inputs.event_path)
        config = ReleaseConfig.from_inputs(inputs, tag_author_from_event(event))
    except ReleaseError as e:
        outcome = Failed(str(e))
        report_outcome(outputs, outcome)
        return outcome

    logger.info("Workspace: %s, event: %s", inputs.workspace, inputs.event_path)
    action = ReleaseAction(config, inputs.workspace, runner=runner, outputs=outputs)
    return action.run(event.commits)
