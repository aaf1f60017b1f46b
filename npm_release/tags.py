"""
Release tag management.

Creates an annotated tag for the released version and pushes it to
``origin``, unless a tag with that name already exists. The existence
probe is the only place where a non-zero git exit status is treated as an
answer instead of an error.
"""

import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .config import PLACEHOLDER, ReleaseConfig, require_placeholder
from .errors import ConfigurationError, ExitError
from .runner import ProcessRunner

logger = logging.getLogger(__name__)

REMOTE = "origin"

# `git rev-parse -q --verify` exits with 1 when the ref does not exist.
REF_NOT_FOUND_EXIT_CODE = 1


class TagStatus(enum.Enum):
    """Result of ensuring a release tag."""
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True)
class TagResult:
    status: TagStatus
    tag_name: str

    @property
    def created(self) -> bool:
        return self.status is TagStatus.CREATED


def render_template(template: str, version: str, name: str = "template") -> str:
    """
    Substitute every placeholder occurrence in ``template`` with ``version``.

    Raises:
        ConfigurationError: If the template has no placeholder.
    """
    require_placeholder(template, name)
    return template.replace(PLACEHOLDER, version)


# Rules from `git check-ref-format`, applied to the part after refs/tags/.
TAG_NAME_RULES = (
    (r'(^|/)\.', "no component may begin with '.'"),
    (r'\.lock(/|$)', "no component may end with '.lock'"),
    (r'\.\.', "no '..' anywhere"),
    (r'[\x00-\x20\x7f~^:]', "no control characters, space, '~', '^' or ':'"),
    (r'[?*\[]', "no '?', '*' or '['"),
    (r'^/|/$|//', "no leading or trailing '/' and no '//'"),
    (r'\.$', "must not end with '.'"),
    (r'@\{', "no '@{'"),
    (r'^@$', "must not be the single character '@'"),
    (r'\\', "no '\\'"),
    (r'\s', "no whitespace"),
    # Not in check-ref-format; git tag would parse it as an option.
    (r'^-', "must not begin with '-'"),
)


def validate_tag_name(tag_name: str) -> str:
    """
    Validate a rendered tag name against git's ref name rules.

    Args:
        tag_name: The tag name to validate.

    Returns:
        The validated tag name.

    Raises:
        ConfigurationError: If git would reject the name. The message names
            the rule that failed.
    """
    if not tag_name or len(tag_name) > 255:
        raise ConfigurationError(f"Invalid tag name length: '{tag_name}'")

    for pattern, rule in TAG_NAME_RULES:
        if re.search(pattern, tag_name):
            raise ConfigurationError(f"Invalid tag name '{tag_name}': {rule}")

    return tag_name


class TagManager:
    """
    Create release tags idempotently.

    Example:
        ```python
        manager = TagManager(ProcessRunner())
        result = manager.ensure_tag(workspace, config, "1.2.0")
        if not result.created:
            print(f"Tag already exists: {result.tag_name}")
        ```
    """

    def __init__(self, runner: Optional[ProcessRunner] = None):
        self.runner = runner or ProcessRunner()

    def tag_exists(self, directory: Union[str, Path], tag_name: str) -> bool:
        """
        Check whether ``refs/tags/<tag_name>`` exists in the repository.

        Raises:
            ProcessError: If git fails for any reason other than a missing ref.
        """
        try:
            self.runner.run(directory, "git", "rev-parse", "-q", "--verify", f"refs/tags/{tag_name}")
        except ExitError as e:
            if e.code == REF_NOT_FOUND_EXIT_CODE:
                logger.debug("Tag %s not found", tag_name)
                return False
            raise
        return True

    def create_tag(
        self,
        directory: Union[str, Path],
        config: ReleaseConfig,
        tag_name: str,
        tag_message: str,
    ) -> None:
        """Create the annotated tag as the configured author and push it to origin."""
        author = config.tag_author
        if author is None:
            raise ConfigurationError(
                f"Tag author is required to create {tag_name} "
                "(repository owner name and email missing from the event)"
            )

        self.runner.run(directory, "git", "config", "user.name", author.name)
        self.runner.run(directory, "git", "config", "user.email", author.email)

        self.runner.run(directory, "git", "tag", "-a", "-m", tag_message, tag_name)
        logger.info("Pushing tag %s to %s", tag_name, REMOTE)
        self.runner.run(directory, "git", "push", REMOTE, f"refs/tags/{tag_name}")

    def ensure_tag(
        self,
        directory: Union[str, Path],
        config: ReleaseConfig,
        version: str,
    ) -> TagResult:
        """
        Make sure a release tag exists for ``version``.

        Args:
            directory: Repository working directory.
            config: Release configuration (templates and author).
            version: Version being released.

        Returns:
            TagResult with CREATED if the tag was created and pushed, or
            ALREADY_EXISTS if it was there before.

        Raises:
            ConfigurationError: If a template or the rendered tag name is invalid.
            ProcessError: If probing, creating or pushing the tag fails. A tag
                created locally but not pushed is left in place.
        """
        tag_name = validate_tag_name(render_template(config.tag_name, version, "TAG_NAME"))
        tag_message = render_template(config.tag_message, version, "TAG_MESSAGE")

        if self.tag_exists(directory, tag_name):
            logger.info("Tag already exists: %s", tag_name)
            return TagResult(TagStatus.ALREADY_EXISTS, tag_name)

        self.create_tag(directory, config, tag_name, tag_message)
        logger.info("Tag has been created successfully: %s", tag_name)
        return TagResult(TagStatus.CREATED, tag_name)
