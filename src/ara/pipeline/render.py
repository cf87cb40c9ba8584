"""Markdown bodies for refactoring pull requests."""

from __future__ import annotations

from typing import Iterable, List

from ..results import RefactoringResult
from .naming import readable_category

INTRODUCTION = (
    "This pull request contains automated refactoring suggestions for improving code quality."
)
DISCLAIMER = (
    "This pull request was created by the AI Refactoring Agent, which automatically "
    "identifies potential code improvements.\n"
    "Please review the changes carefully before merging.\n"
)


def _split_lines(content: str) -> List[str]:
    if not content:
        return []
    return content.split("\n")


def positional_diff(original: str, refactored: str) -> List[str]:
    """Compare two snapshots line by line at matching indexes.

    Lines are never re-aligned after an insertion or deletion: line ``i`` of the
    original is only ever compared with line ``i`` of the refactored text.
    """

    original_lines = _split_lines(original)
    refactored_lines = _split_lines(refactored)
    output: List[str] = []
    for index in range(max(len(original_lines), len(refactored_lines))):
        has_original = index < len(original_lines)
        has_refactored = index < len(refactored_lines)
        if has_original and has_refactored:
            before = original_lines[index]
            after = refactored_lines[index]
            if before == after:
                output.append(f"  {before}")
            else:
                output.append(f"- {before}")
                output.append(f"+ {after}")
        elif has_original:
            output.append(f"- {original_lines[index]}")
        else:
            output.append(f"+ {refactored_lines[index]}")
    return output


def render_result(result: RefactoringResult) -> str:
    """Render the per-file section for one result."""

    parts = [f"### {result.file_path}\n\n", f"{result.description}\n\n", "```diff\n"]
    parts.extend(f"{line}\n" for line in positional_diff(result.original_content, result.refactored_content))
    parts.append("```\n\n")
    return "".join(parts)


def render_body(category: str, chunk: Iterable[RefactoringResult]) -> str:
    """Render the full pull-request body for one chunk of a category."""

    parts = [
        f"# AI Refactoring: {readable_category(category)}\n\n",
        f"{INTRODUCTION}\n\n",
        "## Changes\n\n",
    ]
    parts.extend(render_result(result) for result in chunk)
    parts.append("## About AI Refactoring\n\n")
    parts.append(DISCLAIMER)
    return "".join(parts)


__all__ = ["positional_diff", "render_body", "render_result"]
