"""Schema-validating decoder for structured model replies.

Model output is untrusted text. Every structured reply is turned into one of
three tagged results before any step looks at it:

``Ok(value)``
    The reply parsed and matched the expected shape.
``ParseError(detail, raw)``
    The reply was not JSON, or the JSON did not have the expected shape.
``ServiceError(detail)``
    The service call itself failed; there is no reply to decode.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..logging import get_logger

_OPENING_FENCE = re.compile(r"^```[A-Za-z]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?```$")

logger = get_logger("llm.decoding")


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class ParseError:
    detail: str
    raw: str = ""


@dataclass(frozen=True)
class ServiceError:
    detail: str


DecodeResult = Union[Ok, ParseError, ServiceError]


class FileCandidate(BaseModel):
    """A file proposed by the model."""

    model_config = ConfigDict(strict=True, extra="ignore")

    path: str = Field(..., min_length=1, description="Full path of the missing file.")
    content: str = Field(..., description="Full content of the missing file.")


class DocumentationNotesPayload(BaseModel):
    """Reply shape of the documentation extraction step."""

    model_config = ConfigDict(strict=True, extra="ignore")

    documentationNotes: str = Field(
        ...,
        description="Descriptive text, goals and instructions found outside code blocks.",
    )


def strip_code_fence(text: str) -> str:
    """Remove a markdown fence wrapped around the reply, if any.

    Only a leading fence is required; the closing fence is optional so a
    truncated reply still decodes.
    """
    trimmed = text.strip()
    if not trimmed.startswith("```"):
        return trimmed
    body = _OPENING_FENCE.sub("", trimmed, count=1)
    return _CLOSING_FENCE.sub("", body.rstrip(), count=1).strip()


def decode_json(text: str) -> Ok | ParseError:
    """Parse ``text`` as JSON after stripping a surrounding fence."""
    candidate = strip_code_fence(text or "")
    try:
        return Ok(json.loads(candidate))
    except (json.JSONDecodeError, TypeError) as exc:
        logger.debug("Unable to parse JSON from model reply: %s", candidate[:200])
        return ParseError(detail=f"Invalid JSON in model reply: {exc}", raw=candidate)


def decode_additional_files(text: str) -> Ok | ParseError:
    """Decode a file finder reply into well-formed candidates.

    A missing or non-list ``additionalFiles`` field decodes to an empty list;
    individual malformed entries are dropped rather than failing the batch.
    """
    parsed = decode_json(text)
    if isinstance(parsed, ParseError):
        return parsed
    payload = parsed.value
    items = payload.get("additionalFiles") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return Ok([])

    candidates: List[FileCandidate] = []
    for item in items:
        try:
            candidates.append(FileCandidate.model_validate(item))
        except ValidationError:
            logger.debug("Dropping malformed file candidate: %r", item)
    return Ok(candidates)


def decode_documentation_notes(text: str) -> Ok | ParseError:
    """Decode a documentation extraction reply into the notes string."""
    parsed = decode_json(text)
    if isinstance(parsed, ParseError):
        return parsed
    try:
        payload = DocumentationNotesPayload.model_validate(parsed.value)
    except ValidationError as exc:
        return ParseError(
            detail=f"Reply is missing a string documentationNotes field ({exc.error_count()} error(s))",
            raw=strip_code_fence(text),
        )
    return Ok(payload.documentationNotes)


__all__ = [
    "DecodeResult",
    "DocumentationNotesPayload",
    "FileCandidate",
    "Ok",
    "ParseError",
    "ServiceError",
    "decode_additional_files",
    "decode_documentation_notes",
    "decode_json",
    "strip_code_fence",
]
