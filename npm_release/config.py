"""
Configuration for the npm release action.

Inputs are read from the environment exactly once, through the ordered
``ENV_RULES`` table, into an ``ActionInputs`` value. ``ReleaseConfig`` is
then built from those inputs and validated before anything touches git
or the registry.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from .commits import DEFAULT_COMMIT_PATTERN, compile_release_pattern
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

PLACEHOLDER = "%s"

DEFAULT_WORKSPACE = "/github/workspace"
DEFAULT_EVENT_PATH = "/github/workflow/event.json"
DEFAULT_TAG_TEMPLATE = "v%s"
DEFAULT_PUBLISH_COMMAND = "yarn"


def require_placeholder(template: str, name: str) -> str:
    """
    Check that ``template`` contains the version placeholder.

    Raises:
        ConfigurationError: If the placeholder is missing.
    """
    if PLACEHOLDER not in template:
        raise ConfigurationError(f"missing placeholder in variable: {name}")
    return template


@dataclass(frozen=True)
class EnvRule:
    """How one input is resolved from the environment."""

    field: str
    """Name of the ActionInputs field this rule fills."""

    names: Tuple[str, ...]
    """Environment variable names, tried in order. The first non-empty value wins."""

    default: str = ""
    """Value used when none of the variables is set."""

    def resolve(self, environ: Mapping[str, str]) -> str:
        for name in self.names:
            value = environ.get(name)
            if value:
                return value
        return self.default


ENV_RULES: Tuple[EnvRule, ...] = (
    EnvRule("workspace", ("WORKSPACE", "INPUT_WORKSPACE", "GITHUB_WORKSPACE"), DEFAULT_WORKSPACE),
    EnvRule("event_path", ("GITHUB_EVENT_PATH",), DEFAULT_EVENT_PATH),
    EnvRule("commit_pattern", ("COMMIT_PATTERN", "INPUT_COMMIT_PATTERN"), DEFAULT_COMMIT_PATTERN),
    EnvRule("create_tag", ("CREATE_TAG", "INPUT_CREATE_TAG"), "true"),
    EnvRule("tag_name", ("TAG_NAME", "INPUT_TAG_NAME"), DEFAULT_TAG_TEMPLATE),
    EnvRule("tag_message", ("TAG_MESSAGE", "INPUT_TAG_MESSAGE"), DEFAULT_TAG_TEMPLATE),
    EnvRule("publish_command", ("PUBLISH_COMMAND", "INPUT_PUBLISH_COMMAND"), DEFAULT_PUBLISH_COMMAND),
    EnvRule("publish_args", ("PUBLISH_ARGS", "INPUT_PUBLISH_ARGS"), ""),
)


@dataclass(frozen=True)
class ActionInputs:
    """Raw action inputs, as strings, after environment resolution."""

    workspace: str = DEFAULT_WORKSPACE
    event_path: str = DEFAULT_EVENT_PATH
    commit_pattern: str = DEFAULT_COMMIT_PATTERN
    create_tag: str = "true"
    tag_name: str = DEFAULT_TAG_TEMPLATE
    tag_message: str = DEFAULT_TAG_TEMPLATE
    publish_command: str = DEFAULT_PUBLISH_COMMAND
    publish_args: str = ""

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "ActionInputs":
        """Resolve every input through ENV_RULES."""
        environ = os.environ if environ is None else environ
        inputs = cls(**{rule.field: rule.resolve(environ) for rule in ENV_RULES})
        logger.debug("Resolved inputs: %s", inputs)
        return inputs


@dataclass(frozen=True)
class TagAuthor:
    """Identity used as committer of the release tag."""

    name: str
    email: str

    def __post_init__(self):
        if not self.name or not self.email:
            raise ConfigurationError("Tag author name and email must both be non-empty")


@dataclass(frozen=True)
class ReleaseConfig:
    """
    Release settings for one run.

    Example:
        ```python
        config = ReleaseConfig(
            tag_author=TagAuthor("octocat", "octocat@github.com"),
            publish_command="npm",
            publish_args=("--access", "public"),
        )
        ```
    """

    commit_pattern: re.Pattern = field(default_factory=lambda: re.compile(DEFAULT_COMMIT_PATTERN))
    """Release commit pattern; group 1 captures the version. Strings are compiled."""

    create_tag: bool = True
    """Whether to create and push a release tag before publishing."""

    tag_name: str = DEFAULT_TAG_TEMPLATE
    """Tag name template; every '%s' is replaced by the version."""

    tag_message: str = DEFAULT_TAG_TEMPLATE
    """Tag message template; every '%s' is replaced by the version."""

    tag_author: Optional[TagAuthor] = None
    """Tag author. Checked only when a tag is actually created."""

    publish_command: str = DEFAULT_PUBLISH_COMMAND
    """'yarn', 'npm', or any other executable name."""

    publish_args: Tuple[str, ...] = ()
    """Extra arguments appended to the publish command."""

    def __post_init__(self):
        """Validate configuration after initialization."""
        object.__setattr__(self, "commit_pattern", compile_release_pattern(self.commit_pattern))
        object.__setattr__(self, "publish_args", tuple(self.publish_args))

        require_placeholder(self.tag_name, "TAG_NAME")
        require_placeholder(self.tag_message, "TAG_MESSAGE")

        if not self.publish_command:
            raise ConfigurationError("Publish command cannot be empty")

    @classmethod
    def from_inputs(cls, inputs: ActionInputs, tag_author: Optional[TagAuthor] = None) -> "ReleaseConfig":
        """
        Build a validated configuration from resolved inputs.

        Args:
            inputs: Resolved action inputs.
            tag_author: Author for the release tag, usually the repository owner.

        Returns:
            The release configuration.

        Raises:
            ConfigurationError: If any input is invalid.
        """
        return cls(
            commit_pattern=inputs.commit_pattern,
            create_tag=inputs.create_tag != "false",
            tag_name=inputs.tag_name,
            tag_message=inputs.tag_message,
            tag_author=tag_author,
            publish_command=inputs.publish_command,
            publish_args=tuple(inputs.publish_args.split()),
        )
