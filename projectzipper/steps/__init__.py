"""Workflow step executors."""

from __future__ import annotations

from .extract_docs import extract_documentation_notes
from .find_files import find_additional_files
from .generate_readme import README_PATH, generate_readme, upsert_readme

__all__ = [
    "README_PATH",
    "extract_documentation_notes",
    "find_additional_files",
    "generate_readme",
    "upsert_readme",
]
