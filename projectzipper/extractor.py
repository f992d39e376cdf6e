"""Heading + fenced-block grammar for recovering files from raw project text."""

from __future__ import annotations

import re
from typing import Iterable, List

from .logging import get_logger
from .models import ProjectFile

SECTION_DELIMITER = "---"

_SECTION_SPLIT = re.compile(r"^---$", re.MULTILINE)
_HEADER_PATTERN = re.compile(r"^#+.*`([\w./-]+)`", re.ASCII)
_CODE_BLOCK_PATTERN = re.compile(r"```(?:[a-zA-Z]+)?\n(.*?)\n```", re.DOTALL)
_MANIFEST_ICON_PATTERN = re.compile(r'"(icons/icon\d+\.png)"', re.ASCII)
_FENCE_LANGUAGE = re.compile(r"^[a-zA-Z]+$")

_MANIFEST_PATH = "manifest.json"

logger = get_logger("extractor")


def extract(raw_text: str) -> List[ProjectFile]:
    """Split ``raw_text`` into sections and return every section that names a file.

    A section is kept when its first line is a markdown heading carrying a
    backtick-quoted path, e.g. ``### `src/app.py```. The first fenced code
    block in the section becomes the file content; without a fence the text
    below the heading is used instead. Never raises.
    """
    if not raw_text or not raw_text.strip():
        return []

    normalized = raw_text.replace("\r\n", "\n")
    files: List[ProjectFile] = []
    for section in _SECTION_SPLIT.split(normalized):
        parsed = _parse_section(section)
        if parsed is not None:
            files.append(parsed)

    files.extend(_manifest_icon_stubs(files))
    logger.debug("Extracted %d file(s) from %d characters of input", len(files), len(raw_text))
    return files


def serialize(files: Iterable[ProjectFile]) -> str:
    """Render files back into the grammar understood by :func:`extract`."""
    blocks: List[str] = []
    for item in files:
        header = f"### `{item.path}`"
        if not item.content:
            blocks.append(header)
            continue
        language = fence_language(item.path)
        blocks.append(f"{header}\n```{language}\n{item.content}\n```")
    return f"\n{SECTION_DELIMITER}\n".join(blocks)


def fence_language(path: str) -> str:
    """Return the fence tag for ``path``: its extension when purely alphabetic."""
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    extension = name.rsplit(".", 1)[-1]
    return extension if _FENCE_LANGUAGE.match(extension) else ""


def _parse_section(section: str) -> ProjectFile | None:
    trimmed = section.strip()
    if not trimmed:
        return None

    first_line = trimmed.split("\n", 1)[0].strip()
    match = _HEADER_PATTERN.match(first_line)
    if not match:
        return None

    path = match.group(1)
    code_match = _CODE_BLOCK_PATTERN.search(trimmed)
    if code_match and code_match.group(1):
        content = code_match.group(1).strip()
    else:
        content = trimmed[len(first_line):].strip()
    return ProjectFile(path=path, content=content)


def _manifest_icon_stubs(files: List[ProjectFile]) -> List[ProjectFile]:
    manifest = next((item for item in files if item.path == _MANIFEST_PATH), None)
    if manifest is None:
        return []

    known = {item.path for item in files}
    stubs: List[ProjectFile] = []
    for icon_path in dict.fromkeys(_MANIFEST_ICON_PATTERN.findall(manifest.content)):
        if icon_path in known:
            continue
        known.add(icon_path)
        stubs.append(ProjectFile(path=icon_path, content=""))
    if stubs:
        logger.debug("Added %d icon placeholder(s) referenced by manifest.json", len(stubs))
    return stubs


__all__ = ["SECTION_DELIMITER", "extract", "fence_language", "serialize"]
