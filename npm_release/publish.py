"""Publish strategies: yarn, npm, or any other executable."""

import logging
from pathlib import Path
from typing import List, Sequence, Union

from .config import ReleaseConfig
from .runner import ProcessRunner

logger = logging.getLogger(__name__)


def build_publish_command(
    publish_command: str,
    version: str,
    extra_args: Sequence[str] = (),
) -> List[str]:
    """
    Build the publish command line for a strategy.

    ``yarn`` is told the version explicitly; ``npm`` reads it from
    package.json; any other command gets only the extra arguments.

    Args:
        publish_command: "yarn", "npm", or an executable name.
        version: Version being released.
        extra_args: Arguments appended verbatim.

    Returns:
        The full command line, executable first.
    """
    if publish_command == "yarn":
        cmd = ["yarn", "publish", "--non-interactive", "--new-version", version]
    elif publish_command == "npm":
        cmd = ["npm", "publish"]
    else:
        cmd = [publish_command]
    return [*cmd, *extra_args]


def publish_package(
    runner: ProcessRunner,
    directory: Union[str, Path],
    config: ReleaseConfig,
    version: str,
) -> None:
    """
    Publish the package with the configured strategy.

    Raises:
        ProcessError: If the publish command fails or cannot be started.
    """
    command, *args = build_publish_command(config.publish_command, version, config.publish_args)
    runner.run(directory, command, *args)
    logger.info("Version has been published successfully: %s", version)
