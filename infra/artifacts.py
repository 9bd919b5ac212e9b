"""Artifact file persistence for encoded datasets.

Each codec's encoded bytes are written to ``<output_dir>/<codec>.txt``
and read back before decoding, so the decode phase always works on a
disk round trip rather than the in-memory encode result. Files are
truncated on write and left in place after the run.

All ``OSError`` failures are re-raised as
:class:`core.errors.ArtifactIOError` carrying the codec and operation.
"""

import logging
from pathlib import Path

from core.errors import ArtifactIOError

logger: logging.Logger = logging.getLogger(__name__)

ARTIFACT_SUFFIX: str = ".txt"


def artifact_path(output_dir: Path, codec_name: str) -> Path:
    """Return the artifact file path for a codec."""
    return output_dir / f"{codec_name}{ARTIFACT_SUFFIX}"


def write_artifact(path: Path, data: bytes, codec_name: str) -> None:
    """Write encoded bytes, truncating any previous content.

    Raises:
        ArtifactIOError: If the file cannot be opened or written.
    """
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise ArtifactIOError(codec=codec_name, operation="write", path=path) from exc
    logger.debug("Wrote %d bytes to %s", len(data), path)


def read_artifact(path: Path, codec_name: str) -> bytes:
    """Read an artifact file fully into memory.

    Raises:
        ArtifactIOError: If the file cannot be opened or read.
    """
    try:
        with open(path, "rb") as f:
            data: bytes = f.read()
    except OSError as exc:
        raise ArtifactIOError(codec=codec_name, operation="read", path=path) from exc
    logger.debug("Read %d bytes from %s", len(data), path)
    return data
