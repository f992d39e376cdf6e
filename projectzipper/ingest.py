"""Normalise uploaded text files and zip archives into one raw-text blob."""

from __future__ import annotations

import io
import mimetypes
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .extractor import SECTION_DELIMITER, fence_language
from .logging import get_logger

ZIP_MIME_TYPES = {"application/zip", "application/x-zip-compressed"}


class IngestError(RuntimeError):
    """Raised when uploaded content cannot be read."""


@dataclass
class InputFile:
    """An uploaded file as received from the CLI or the service."""

    name: str
    data: bytes | str
    mime_type: Optional[str] = None

    @property
    def is_archive(self) -> bool:
        if self.mime_type in ZIP_MIME_TYPES:
            return True
        return self.name.lower().endswith(".zip")

    def text(self) -> str:
        if isinstance(self.data, str):
            return self.data
        return self.data.decode("utf-8", errors="replace")


logger = get_logger("ingest")


def ingest(files: Iterable[InputFile]) -> str:
    """Serialize ``files`` into the heading/fence/``---`` grammar the extractor parses.

    Archive entries become one section each; plain text inputs are appended
    verbatim followed by a section delimiter.
    """
    combined: List[str] = []
    for item in files:
        if item.is_archive:
            combined.append(_serialize_archive(item))
        else:
            combined.append(f"{item.text()}\n{SECTION_DELIMITER}\n")
    return "".join(combined)


def read_input_paths(paths: Sequence[Path]) -> List[InputFile]:
    """Load files from disk, guessing their MIME type from the file name."""
    inputs: List[InputFile] = []
    for path in paths:
        resolved = Path(path).expanduser()
        try:
            data = resolved.read_bytes()
        except OSError as exc:
            raise IngestError(f"Unable to read {resolved}: {exc}") from exc
        mime_type, _ = mimetypes.guess_type(resolved.name)
        inputs.append(InputFile(name=resolved.name, data=data, mime_type=mime_type))
    return inputs


def _serialize_archive(item: InputFile) -> str:
    raw = item.data.encode("utf-8") if isinstance(item.data, str) else item.data
    try:
        archive = zipfile.ZipFile(io.BytesIO(raw))
    except zipfile.BadZipFile as exc:
        raise IngestError(f"{item.name} is not a readable zip archive") from exc

    sections: List[str] = []
    with archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            try:
                content = archive.read(info).decode("utf-8", errors="replace")
            except (zipfile.BadZipFile, RuntimeError) as exc:
                raise IngestError(f"Unable to read {info.filename} from {item.name}: {exc}") from exc
            language = fence_language(info.filename)
            sections.append(
                f"### `{info.filename}`\n```{language}\n{content}\n```\n{SECTION_DELIMITER}\n"
            )
    logger.debug("Serialized %d entries from archive %s", len(sections), item.name)
    return "".join(sections)


__all__ = ["InputFile", "IngestError", "ingest", "read_input_paths"]
