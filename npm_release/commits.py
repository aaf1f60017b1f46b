"""
Triggering event model and release commit matching.

The event payload is the JSON document the CI runner writes for a push:
the repository owner identity plus the ordered list of pushed commits.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from .errors import ConfigurationError, EventError
from .utils import truncate_string

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_PATTERN = r"^(?:Release|Version) (\S+)"


@dataclass(frozen=True)
class Commit:
    """One commit of the triggering push."""

    id: str
    """Stable commit identifier (the SHA)."""

    message: str = ""
    """Full commit message."""

    @classmethod
    def from_dict(cls, data: dict) -> "Commit":
        """Build a Commit from one entry of the payload's ``commits`` list."""
        if not isinstance(data, dict):
            raise EventError(f"Invalid commit entry: {data!r}")
        commit_id = data.get("id") or data.get("sha") or ""
        return cls(id=str(commit_id), message=str(data.get("message") or ""))


@dataclass(frozen=True)
class Event:
    """The triggering push event."""

    owner_name: Optional[str]
    """Repository owner's name, used as the tag author."""

    owner_email: Optional[str]
    """Repository owner's email, used as the tag author."""

    commits: Tuple[Commit, ...] = field(default_factory=tuple)
    """Pushed commits in payload order."""

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """
        Build an Event from a parsed push payload.

        Args:
            data: Parsed event JSON.

        Returns:
            The Event.

        Raises:
            EventError: If the repository owner or commit list is missing.
        """
        if not isinstance(data, dict):
            raise EventError("Event payload must be a JSON object")

        repository = data.get("repository")
        owner = repository.get("owner") if isinstance(repository, dict) else None
        if not isinstance(owner, dict):
            raise EventError("Event payload has no repository owner")

        commits = data.get("commits")
        if commits is None:
            commits = []
        if not isinstance(commits, list):
            raise EventError("Event payload 'commits' must be a list")

        return cls(
            owner_name=owner.get("name"),
            owner_email=owner.get("email"),
            commits=tuple(Commit.from_dict(c) for c in commits),
        )


def load_event(path: Union[str, Path]) -> Event:
    """
    Load the triggering event from its JSON file.

    Args:
        path: Path to the event payload.

    Returns:
        The parsed Event.

    Raises:
        EventError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise EventError(f"event file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise EventError(f"Failed to read event file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise EventError(f"Invalid JSON in event file '{path}': {e}") from e

    event = Event.from_dict(data)
    logger.debug("Loaded event from %s with %d commit(s)", path, len(event.commits))
    return event


def compile_release_pattern(pattern: Union[str, re.Pattern]) -> re.Pattern:
    """
    Compile a release commit pattern and check its capture groups.

    Args:
        pattern: Regular expression, as a string or already compiled.

    Returns:
        The compiled pattern.

    Raises:
        ConfigurationError: If the pattern is invalid or does not define
            exactly one capture group.
    """
    if isinstance(pattern, str):
        try:
            pattern = re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid commit pattern '{pattern}': {e}") from e

    if pattern.groups != 1:
        raise ConfigurationError(
            f"Commit pattern must define exactly one capture group, "
            f"got {pattern.groups}: '{pattern.pattern}'"
        )
    return pattern


def find_release_commit(
    pattern: Union[str, re.Pattern],
    commits: Iterable[Commit],
    version: str,
) -> Optional[Commit]:
    """
    Find the first commit announcing ``version``.

    A commit matches when ``pattern`` is found in its message and the
    captured text equals ``version`` exactly. Earlier commits win.

    Args:
        pattern: Release pattern with exactly one capture group.
        commits: Commits in push order.
        version: Declared package version.

    Returns:
        The matching commit, or None if no commit announces the version.
    """
    regex = compile_release_pattern(pattern)
    for commit in commits:
        match = regex.search(commit.message)
        if match and match.group(1) == version:
            logger.info("Found commit %s: %s", commit.id, truncate_string(commit.message, 80))
            return commit

    logger.debug("No commit matched %r for version %s", regex.pattern, version)
    return None
