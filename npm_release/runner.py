"""
Process execution for the npm release action.

The runner knows nothing about git or package managers: it starts a
command, waits for it, and reports success or a structured failure.
Interpreting exit codes is left to the caller.
"""

import logging
import subprocess
from pathlib import Path
from typing import Union

from .errors import ExitError, LaunchError

logger = logging.getLogger(__name__)


class ProcessRunner:
    """
    Run external commands one at a time.

    Standard input and standard output are discarded, standard error is
    captured so it can be attached to the failure. No timeout is applied;
    the surrounding CI job bounds the total run time.
    """

    def run(self, directory: Union[str, Path], command: str, *args: str) -> None:
        """
        Run a command to completion in ``directory``.

        Args:
            directory: Working directory for the command.
            command: Executable name or path.
            *args: Command arguments, passed without a shell.

        Raises:
            ExitError: If the command exits with a non-zero status.
            LaunchError: If the command could not be started.
        """
        logger.info("Executing: %s %s", command, " ".join(args))
        try:
            result = subprocess.run(
                [command, *args],
                cwd=directory,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.debug("Could not start %s in %s: %s", command, directory, e)
            raise LaunchError(command, args) from e

        if result.returncode == 0:
            return

        stderr = (result.stderr or "").strip()
        if stderr:
            logger.warning("command failed with code %d", result.returncode)
            logger.warning("%s", stderr)
        raise ExitError(command, args, result.returncode, stderr)
