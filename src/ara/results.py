"""Refactoring results consumed by the pull-request pipeline.

A result is produced upstream by whatever detects refactoring opportunities and
is treated as read-only from then on.  The helpers below parse the producer's
JSON output into validated records and narrow a result list down to the
configured categories and directories.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .tools.files import read_text, should_include_file

LOGGER = logging.getLogger(__name__)

__all__ = [
    "ALL_CATEGORIES",
    "RefactoringCategory",
    "RefactoringResult",
    "ResultsError",
    "filter_results",
    "load_results",
    "parse_results",
]


class ResultsError(ValueError):
    """Raised when producer output cannot be turned into refactoring results."""


class RefactoringCategory(str, Enum):
    """Closed set of refactoring kinds the agent knows how to submit."""

    VARIABLE_RENAMING = "variable-renaming"
    CODE_FORMATTING = "code-formatting"
    METHOD_EXTRACTION = "method-extraction"
    DUPLICATE_CODE = "duplicate-code"
    DEAD_CODE = "dead-code"


ALL_CATEGORIES: tuple[str, ...] = tuple(category.value for category in RefactoringCategory)


class RefactoringResult(BaseModel):
    """One proposed change to a single file."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    category: str = Field(validation_alias=AliasChoices("category", "type"))
    file_path: str = Field(validation_alias=AliasChoices("file_path", "filePath"))
    original_content: str = Field(
        default="",
        validation_alias=AliasChoices("original_content", "originalContent"),
    )
    refactored_content: str = Field(
        default="",
        validation_alias=AliasChoices("refactored_content", "refactoredContent"),
    )
    description: str = ""


_ORIGINAL_KEYS = ("original_content", "originalContent")
_PATH_KEYS = ("file_path", "filePath")


def _entries_from_payload(payload: Any) -> List[Any]:
    if isinstance(payload, Mapping):
        payload = payload.get("results")
    if not isinstance(payload, list):
        raise ResultsError("Expected a list of results or a mapping with a 'results' list.")
    return payload


def _fill_original_content(entry: Any, repo_root: Path) -> Any:
    """Read the current file contents for entries that omit them."""

    if not isinstance(entry, Mapping):
        return entry
    if any(key in entry for key in _ORIGINAL_KEYS):
        return entry
    relative = next((entry[key] for key in _PATH_KEYS if isinstance(entry.get(key), str)), None)
    if relative is None:
        return entry
    content = read_text(repo_root / relative)
    if content is None:
        LOGGER.warning("Original content unavailable for %s; treating it as empty.", relative)
        content = ""
    return {**entry, "original_content": content}


def parse_results(payload: Any, *, repo_root: Optional[Path] = None) -> List[RefactoringResult]:
    """Validate producer output and return results in their original order."""

    entries = _entries_from_payload(payload)
    if repo_root is not None:
        entries = [_fill_original_content(entry, repo_root) for entry in entries]

    results: List[RefactoringResult] = []
    for index, entry in enumerate(entries):
        try:
            results.append(RefactoringResult.model_validate(entry))
        except ValidationError as error:
            raise ResultsError(f"Result #{index + 1} is invalid: {error}") from error
    return results


def load_results(path: Path, *, repo_root: Optional[Path] = None) -> List[RefactoringResult]:
    """Load refactoring results from a JSON file written by the producer."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as error:
        raise ResultsError(f"Results file not found: {path}") from error
    except json.JSONDecodeError as error:
        raise ResultsError(f"Results file is not valid JSON: {path}: {error}") from error
    return parse_results(payload, repo_root=repo_root)


def filter_results(
    results: Iterable[RefactoringResult],
    *,
    allowed_categories: Sequence[str],
    include_dirs: Sequence[str] = (),
    exclude_dirs: Sequence[str] = (),
) -> List[RefactoringResult]:
    """Keep results whose category is allowed and whose file is in scope."""

    allowed = set(allowed_categories)
    kept: List[RefactoringResult] = []
    for result in results:
        if result.category not in allowed:
            LOGGER.debug("Skipping %s: category %r is not enabled", result.file_path, result.category)
            continue
        if not should_include_file(result.file_path, include_dirs, exclude_dirs):
            LOGGER.debug("Skipping %s: outside the configured directories", result.file_path)
            continue
        kept.append(result)
    return kept
