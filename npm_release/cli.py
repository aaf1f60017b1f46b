#!/usr/bin/env python3
"""
Command-line interface for the npm release action.

Usage:
    # Inside the action container (inputs come from the environment)
    npm-release

    # Locally, against a checkout and a saved push payload
    npm-release --workspace . --event-path event.json --verbose

Environment Variables:
    COMMIT_PATTERN   Release commit pattern (default: '^(?:Release|Version) (\\S+)')
    CREATE_TAG       'false' disables tag creation
    TAG_NAME         Tag name template, must contain '%s' (default: 'v%s')
    TAG_MESSAGE      Tag message template, must contain '%s' (default: 'v%s')
    PUBLISH_COMMAND  'yarn' (default), 'npm', or any executable
    PUBLISH_ARGS     Extra publish arguments, space separated

Every variable is also read with an 'INPUT_' prefix, as set by the runner
for action inputs.
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from . import __version__

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="npm-release",
        description="Tag and publish an npm package when a push contains its release commit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with inputs from the environment
  %(prog)s

  # Run against a local checkout
  %(prog)s --workspace ./my-package --event-path push.json -v

Environment Variables:
  WORKSPACE / GITHUB_WORKSPACE  Package directory (default: /github/workspace)
  GITHUB_EVENT_PATH             Push event payload (default: /github/workflow/event.json)
  GITHUB_OUTPUT                 File receiving step outputs
"""
    )

    parser.add_argument(
        "--workspace", "-w",
        type=str,
        default=None,
        help="Directory containing package.json (overrides WORKSPACE)",
    )

    parser.add_argument(
        "--event-path", "-e",
        type=str,
        default=None,
        help="Path to the push event JSON (overrides GITHUB_EVENT_PATH)",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="dotenv file loaded before reading inputs, if it exists (default: .env)",
    )

    # Logging options
    log_group = parser.add_argument_group("Logging options")
    log_group.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show INFO level logs",
    )
    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Show DEBUG level logs",
    )
    log_group.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only show errors",
    )
    log_group.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write DEBUG logs to this file",
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit status: 0 when released or skipped, 1 on failure.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    from .config import ActionInputs
    from .core import run_from_environment
    from .utils import setup_logging

    verbosity = 2 if args.debug else 1 if args.verbose else 0
    setup_logging(verbosity=verbosity, log_file=args.log_file, quiet=args.quiet)

    env_file = Path(args.env_file)
    if env_file.is_file():
        load_dotenv(env_file)
        logger.info("Loaded environment from %s", env_file)

    inputs = ActionInputs.from_environment()
    overrides = {}
    if args.workspace:
        overrides["workspace"] = str(Path(args.workspace).resolve())
    if args.event_path:
        overrides["event_path"] = args.event_path
    if overrides:
        inputs = dataclasses.replace(inputs, **overrides)

    outcome = run_from_environment(inputs=inputs)
    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
