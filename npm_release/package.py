"""Package metadata (package.json) for the workspace being released."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .errors import PackageMetadataError

logger = logging.getLogger(__name__)

PACKAGE_FILE = "package.json"


@dataclass(frozen=True)
class PackageMetadata:
    """Declared metadata of the package in the workspace."""

    path: Path
    version: str
    name: Optional[str] = None


def read_package_metadata(directory: Union[str, Path]) -> PackageMetadata:
    """
    Read ``package.json`` from the workspace.

    Args:
        directory: Workspace directory.

    Returns:
        The package metadata.

    Raises:
        PackageMetadataError: If the file is missing, is not valid JSON, or
            has no string ``version`` field.
    """
    path = Path(directory) / PACKAGE_FILE
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise PackageMetadataError(f"package file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise PackageMetadataError(f"Failed to read package file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise PackageMetadataError(f"Invalid JSON in package file '{path}': {e}") from e

    if not isinstance(data, dict) or data.get("version") is None:
        raise PackageMetadataError(f"missing version field in {path}")

    version = data["version"]
    if not isinstance(version, str) or not version:
        raise PackageMetadataError(f"Invalid version field in {path}: {version!r}")

    name = data.get("name")
    logger.debug("Read %s: name=%s version=%s", path, name, version)
    return PackageMetadata(path=path, version=version, name=name if isinstance(name, str) else None)
