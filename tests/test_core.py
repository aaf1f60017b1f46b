"""
Tests for the release orchestration in core.py.
"""

import io

import pytest

from npm_release.commits import Commit, Event
from npm_release.config import ActionInputs, ReleaseConfig, TagAuthor
from npm_release.core import (
    Failed,
    Released,
    ReleaseAction,
    Skipped,
    run_from_environment,
    tag_author_from_event,
)
from npm_release.outputs import OutputSink

from conftest import FakeRunner

AUTHOR = TagAuthor("octocat", "octocat@example.com")


def commits_from(*messages):
    return [Commit(id=f"sha{i}", message=m) for i, m in enumerate(messages)]


@pytest.fixture
def outputs():
    return OutputSink(stream=io.StringIO())


def make_action(workspace, runner, outputs, **config_kwargs):
    config_kwargs.setdefault("tag_author", AUTHOR)
    return ReleaseAction(ReleaseConfig(**config_kwargs), workspace, runner=runner, outputs=outputs)


class TestOutcomes:
    """Tests for the outcome variants."""

    def test_exit_codes(self):
        assert Released("1.2.0", "abc").exit_code == 0
        assert Skipped("nothing").exit_code == 0
        assert Failed("boom").exit_code == 1

    def test_changed(self):
        assert Released("1.2.0", "abc").changed is True
        assert Skipped("nothing").changed is False
        assert Failed("boom").changed is False


class TestReleaseAction:
    """Scenario tests for ReleaseAction.run."""

    def test_release_commit_found(self, workspace, runner, outputs):
        """Release commit found: tag created, package published, outputs reported."""
        action = make_action(workspace, runner, outputs)
        outcome = action.run(commits_from("fix typo", "Release 1.2.0"))

        assert outcome == Released(version="1.2.0", commit_id="sha1")
        assert runner.ran("git", "tag", "-a", "-m", "v1.2.0", "v1.2.0")
        assert runner.ran("git", "push", "origin", "refs/tags/v1.2.0")
        assert runner.calls[-1] == ("yarn", "publish", "--non-interactive", "--new-version", "1.2.0")
        assert outputs.values == {"changed": "true", "version": "1.2.0", "commit": "sha1"}

    def test_step_order(self, workspace, runner, outputs):
        make_action(workspace, runner, outputs).run(commits_from("Release 1.2.0"))
        steps = [call[:2] for call in runner.calls]
        assert steps == [
            ("git", "config"),    # safe.directory
            ("git", "rev-parse"),
            ("git", "config"),
            ("git", "config"),
            ("git", "tag"),
            ("git", "push"),
            ("yarn", "publish"),
        ]
        assert runner.calls[0] == (
            "git", "config", "--global", "--add", "safe.directory", str(workspace),
        )

    def test_no_release_commit(self, workspace, runner, outputs):
        """No matching commit: neutral stop, nothing tagged or published."""
        outcome = make_action(workspace, runner, outputs).run(commits_from("fix typo", "chore: bump"))

        assert isinstance(outcome, Skipped)
        assert outcome.exit_code == 0
        assert "1.2.0" in outcome.reason
        assert outputs.values == {"changed": "false"}
        assert not runner.ran("git", "tag")
        assert not runner.ran("yarn")

    def test_tag_already_exists(self, workspace, outputs):
        """Existing tag: neutral stop, publish never invoked."""
        runner = FakeRunner(existing_tags={"v1.2.0"})
        outcome = make_action(workspace, runner, outputs).run(commits_from("fix typo", "Release 1.2.0"))

        assert outcome == Skipped("Tag already exists: v1.2.0")
        assert outputs.values == {"changed": "false"}
        assert not runner.ran("git", "tag")
        assert not runner.ran("yarn")

    def test_rerun_is_neutral(self, workspace, runner, outputs):
        action = make_action(workspace, runner, outputs)
        commits = commits_from("Release 1.2.0")
        assert isinstance(action.run(commits), Released)
        assert isinstance(action.run(commits), Skipped)
        assert sum(1 for call in runner.calls if call[0] == "yarn") == 1

    def test_missing_package_file(self, tmp_path, runner, outputs):
        """Missing package.json: fatal, changed=false, message names the file."""
        outcome = make_action(tmp_path, runner, outputs).run(commits_from("Release 1.2.0"))

        assert isinstance(outcome, Failed)
        assert outcome.exit_code == 1
        assert "package file not found" in outcome.message
        assert outputs.values == {"changed": "false"}
        assert "::error::package file not found" in outputs.stream.getvalue()
        assert runner.calls == []

    def test_create_tag_disabled(self, workspace, runner, outputs):
        """Tagging disabled: tag step skipped entirely, publish still runs."""
        action = make_action(workspace, runner, outputs, create_tag=False)
        outcome = action.run(commits_from("Release 1.2.0"))

        assert outcome == Released(version="1.2.0", commit_id="sha0")
        assert not runner.ran("git", "rev-parse")
        assert not runner.ran("git", "tag")
        assert runner.ran("yarn", "publish")

    def test_publish_failure_is_fatal(self, workspace, outputs):
        runner = FakeRunner(fail={("yarn", "publish"): 1})
        outcome = make_action(workspace, runner, outputs).run(commits_from("Release 1.2.0"))

        assert isinstance(outcome, Failed)
        assert "command failed with code 1" in outcome.message
        assert outputs.values == {"changed": "false"}

    def test_push_failure_is_fatal(self, workspace, outputs):
        runner = FakeRunner(fail={("git", "push"): 128})
        outcome = make_action(workspace, runner, outputs).run(commits_from("Release 1.2.0"))

        assert isinstance(outcome, Failed)
        assert not runner.ran("yarn")

    def test_unexpected_probe_failure_is_fatal(self, workspace, outputs):
        runner = FakeRunner(fail={("git", "rev-parse"): 129})
        outcome = make_action(workspace, runner, outputs).run(commits_from("Release 1.2.0"))
        assert isinstance(outcome, Failed)

    def test_safe_directory_failure_is_fatal(self, workspace, outputs):
        runner = FakeRunner(fail={("git", "config", "--global"): 255})
        outcome = make_action(workspace, runner, outputs).run(commits_from("Release 1.2.0"))
        assert isinstance(outcome, Failed)

    def test_npm_strategy_with_args(self, workspace, runner, outputs):
        action = make_action(
            workspace, runner, outputs,
            create_tag=False, publish_command="npm", publish_args=("--access", "public"),
        )
        action.run(commits_from("Version 1.2.0"))
        assert runner.calls[-1] == ("npm", "publish", "--access", "public")

    def test_progress_printed(self, workspace, runner, outputs, capsys):
        make_action(workspace, runner, outputs).run(commits_from("Release 1.2.0"))
        out = capsys.readouterr().out
        assert "Found commit: Release 1.2.0" in out
        assert "v1.2.0" in out
        assert "published successfully: 1.2.0" in out


class TestTagAuthorFromEvent:

    def test_owner_used(self):
        event = Event(owner_name="octocat", owner_email="octocat@example.com")
        assert tag_author_from_event(event) == AUTHOR

    def test_incomplete_owner(self):
        assert tag_author_from_event(Event(owner_name="octocat", owner_email=None)) is None


class TestRunFromEnvironment:
    """Tests for run_from_environment."""

    def test_full_run(self, workspace, event_file, runner, tmp_path):
        output_file = tmp_path / "github_output"
        environ = {
            "WORKSPACE": str(workspace),
            "GITHUB_EVENT_PATH": str(event_file(["fix typo", "Release 1.2.0"])),
            "GITHUB_OUTPUT": str(output_file),
            "INPUT_PUBLISH_COMMAND": "npm",
            "INPUT_PUBLISH_ARGS": "--access public",
        }
        outcome = run_from_environment(environ, runner=runner)

        assert outcome == Released(version="1.2.0", commit_id="sha1")
        assert runner.calls[-1] == ("npm", "publish", "--access", "public")
        assert runner.ran("git", "config", "user.name", "octocat")
        assert output_file.read_text() == "changed=true\nversion=1.2.0\ncommit=sha1\n"

    def test_missing_event_file(self, workspace, tmp_path, runner, outputs):
        environ = {"WORKSPACE": str(workspace), "GITHUB_EVENT_PATH": str(tmp_path / "nope.json")}
        outcome = run_from_environment(environ, runner=runner, outputs=outputs)

        assert isinstance(outcome, Failed)
        assert "event file not found" in outcome.message
        assert outputs.values == {"changed": "false"}
        assert runner.calls == []

    def test_template_without_placeholder(self, workspace, event_file, runner, outputs):
        """Invalid templates fail before any command runs."""
        environ = {
            "WORKSPACE": str(workspace),
            "GITHUB_EVENT_PATH": str(event_file(["Release 1.2.0"])),
            "TAG_NAME": "latest",
        }
        outcome = run_from_environment(environ, runner=runner, outputs=outputs)

        assert outcome == Failed("missing placeholder in variable: TAG_NAME")
        assert runner.calls == []

    def test_missing_owner_email_with_tagging(self, workspace, event_file, runner, outputs):
        environ = {
            "WORKSPACE": str(workspace),
            "GITHUB_EVENT_PATH": str(event_file(["Release 1.2.0"], owner={"name": "octocat"})),
        }
        outcome = run_from_environment(environ, runner=runner, outputs=outputs)
        assert isinstance(outcome, Failed)

    def test_owner_without_email_and_no_release_commit(self, workspace, event_file, runner, outputs):
        """Organisation owners have no email; an ordinary push still ends cleanly."""
        environ = {
            "WORKSPACE": str(workspace),
            "GITHUB_EVENT_PATH": str(event_file(["fix typo"], owner={"name": "my-org", "email": None})),
        }
        outcome = run_from_environment(environ, runner=runner, outputs=outputs)

        assert isinstance(outcome, Skipped)
        assert outcome.exit_code == 0
        assert outputs.values == {"changed": "false"}
        assert "::error::" not in outputs.stream.getvalue()

    def test_owner_without_email_and_existing_tag(self, workspace, event_file, outputs):
        runner = FakeRunner(existing_tags={"v1.2.0"})
        environ = {
            "WORKSPACE": str(workspace),
            "GITHUB_EVENT_PATH": str(event_file(["Release 1.2.0"], owner={"name": "my-org", "email": None})),
        }
        outcome = run_from_environment(environ, runner=runner, outputs=outputs)

        assert outcome == Skipped("Tag already exists: v1.2.0")
        assert not runner.ran("yarn")

    def test_missing_owner_email_without_tagging(self, workspace, event_file, runner, outputs):
        environ = {
            "WORKSPACE": str(workspace),
            "GITHUB_EVENT_PATH": str(event_file(["Release 1.2.0"], owner={"name": "octocat"})),
            "CREATE_TAG": "false",
        }
        outcome = run_from_environment(environ, runner=runner, outputs=outputs)
        assert isinstance(outcome, Released)

    def test_inputs_override(self, workspace, event_file, runner, outputs):
        inputs = ActionInputs(workspace=str(workspace), event_path=str(event_file(["chore"])))
        outcome = run_from_environment({}, runner=runner, outputs=outputs, inputs=inputs)
        assert isinstance(outcome, Skipped)
