"""Use case: write the derived output as a plain-text download artifact."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger('psp.persist')

EXPORT_FILENAME = 'prompt-output.txt'
EXPORT_MIME_TYPE = 'text/plain'


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    payload: bytes
    mime_type: str = EXPORT_MIME_TYPE


def build_export(derived_output: str, filename: str = EXPORT_FILENAME) -> ExportArtifact:
    return ExportArtifact(filename=filename, payload=derived_output.encode('utf-8'))


def write_export(artifact: ExportArtifact, directory: Path) -> Path:
    """Write *artifact* into *directory*, creating it if needed. Overwrites an existing file."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / artifact.filename
    path.write_bytes(artifact.payload)
    log.info('Exported %d bytes to %s', len(artifact.payload), path)
    return path
