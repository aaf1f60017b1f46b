"""
Step outputs for the invoking workflow.

Values are percent-encoded the way JavaScript's ``encodeURIComponent``
does it. When the runner provides a ``GITHUB_OUTPUT`` file the outputs are
appended there, otherwise the legacy ``::set-output`` command is printed.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional, TextIO, Union
from urllib.parse import quote

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone besides letters and digits.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_value(value: str) -> str:
    """Percent-encode a value for transport in a workflow command."""
    return quote(str(value), safe=_URI_COMPONENT_SAFE)


class OutputSink:
    """
    Record named outputs for the workflow.

    Every output set is also kept in ``values`` (unencoded), which is what
    tests and callers inspect.
    """

    def __init__(
        self,
        output_file: Optional[Union[str, Path]] = None,
        stream: Optional[TextIO] = None,
    ):
        self.output_file = Path(output_file) if output_file else None
        self.stream = stream
        self.values: Dict[str, str] = {}

    @classmethod
    def from_environment(cls, environ: Optional[dict] = None) -> "OutputSink":
        environ = os.environ if environ is None else environ
        return cls(output_file=environ.get("GITHUB_OUTPUT") or None)

    def set_output(self, name: str, value: str = "") -> None:
        value = str(value)
        self.values[name] = value
        encoded_name = encode_value(name)
        encoded_value = encode_value(value)
        logger.debug("Output %s=%s", name, value)

        if self.output_file is not None:
            with open(self.output_file, "a", encoding="utf-8") as f:
                f.write(f"{encoded_name}={encoded_value}\n")
        else:
            stream = self.stream or sys.stdout
            print(f"::set-output name={encoded_name}::{encoded_value}", file=stream)

    def error(self, message: str) -> None:
        """Print an ``::error::`` annotation so the failure shows on the workflow run."""
        escaped = str(message).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        stream = self.stream or sys.stdout
        print(f"::error::{escaped}", file=stream)
