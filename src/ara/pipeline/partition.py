"""Group refactoring results by category and split them into bounded chunks."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from ..results import RefactoringResult

Chunk = Tuple[RefactoringResult, ...]
Grouping = Dict[str, List[Chunk]]


def group_by_category(results: Iterable[RefactoringResult]) -> Dict[str, List[RefactoringResult]]:
    """Bucket results by category in the order each category first appears."""

    grouped: Dict[str, List[RefactoringResult]] = {}
    for result in results:
        grouped.setdefault(result.category, []).append(result)
    return grouped


def chunk_results(results: Sequence[RefactoringResult], max_per_chunk: int) -> List[Chunk]:
    """Split ``results`` into consecutive chunks of at most ``max_per_chunk`` items."""

    if max_per_chunk < 1:
        raise ValueError(f"max_per_chunk must be at least 1, got {max_per_chunk}")
    return [
        tuple(results[start : start + max_per_chunk])
        for start in range(0, len(results), max_per_chunk)
    ]


def partition(results: Iterable[RefactoringResult], max_per_chunk: int) -> Grouping:
    """Return ``category -> chunks`` with categories and chunks in input order.

    Concatenating a category's chunks reproduces its results exactly, and every
    chunk except possibly the last holds ``max_per_chunk`` results.
    """

    return {
        category: chunk_results(members, max_per_chunk)
        for category, members in group_by_category(results).items()
    }


__all__ = ["Chunk", "Grouping", "chunk_results", "group_by_category", "partition"]
