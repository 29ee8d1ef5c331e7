"""
Extraction Artifacts

Turns a document reconstruction into the objects written back to S3.
Each kind is written only when its reconstruction has content.

Keys replace the source extension with "-<api>" plus a kind suffix:
    invoices/2024/acme.pdf -> invoices/2024/acme-StartDocumentAnalysis.csv
"""

import json
import posixpath
from dataclasses import dataclass
from enum import Enum

from textract_pipeline.reconstruction import DocumentReconstruction


class ArtifactKind(str, Enum):
    TEXT = "text"
    FORM = "form"
    TABLE = "table"


# kind -> (key suffix, content type)
ARTIFACT_FORMATS = {
    ArtifactKind.TEXT: (".txt", "text/plain"),
    ArtifactKind.FORM: (".json", "application/json"),
    ArtifactKind.TABLE: (".csv", "application/csv"),
}


@dataclass(frozen=True)
class Artifact:
    """One object to write."""

    kind: ArtifactKind
    bucket: str
    key: str
    body: str

    @property
    def content_type(self) -> str:
        return ARTIFACT_FORMATS[self.kind][1]


def artifact_key(source_key: str, api: str, kind: ArtifactKind) -> str:
    """Destination key for one artifact of a source object."""
    stem, _ = posixpath.splitext(source_key)
    return f"{stem}-{api}{ARTIFACT_FORMATS[kind][0]}"


def build_artifacts(
    reconstruction: DocumentReconstruction,
    *,
    bucket: str,
    source_key: str,
    api: str,
) -> list[Artifact]:
    """
    Artifacts for the non-empty parts of a reconstruction.

    Text is one line per LINE block, form data is a JSON object, tables are
    the delimited rendering. Bodies are deterministic for the same blocks.
    """
    bodies: list[tuple[ArtifactKind, str]] = []

    if reconstruction.lines:
        bodies.append((ArtifactKind.TEXT, "\n".join(reconstruction.lines)))
    if reconstruction.form_data:
        bodies.append((ArtifactKind.FORM, json.dumps(reconstruction.form_data)))
    if reconstruction.tables is not None:
        bodies.append((ArtifactKind.TABLE, reconstruction.tables))

    return [
        Artifact(
            kind=kind,
            bucket=bucket,
            key=artifact_key(source_key, api, kind),
            body=body,
        )
        for kind, body in bodies
    ]
