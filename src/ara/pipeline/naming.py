"""Deterministic branch names and pull-request titles."""

from __future__ import annotations

DEFAULT_BRANCH_PREFIX = "ai-refactor"
DEFAULT_TITLE_TAG = "AI Refactor"


def readable_category(category: str) -> str:
    """Turn ``dead-code`` into ``Dead Code``."""

    return " ".join(word[:1].upper() + word[1:] for word in category.split("-"))


def branch_name(category: str, chunk_index: int, *, prefix: str = DEFAULT_BRANCH_PREFIX) -> str:
    """Return ``<prefix>/<category>-<chunk_index>`` for a 1-based chunk index."""

    return f"{prefix}/{category}-{chunk_index}"


def pull_request_title(
    category: str,
    chunk_index: int,
    total_chunks: int,
    *,
    tag: str = DEFAULT_TITLE_TAG,
) -> str:
    """Title for one chunk; multi-chunk categories get a ``(Part N)`` suffix."""

    title = f"[{tag}] {readable_category(category)}"
    if total_chunks > 1:
        title = f"{title} (Part {chunk_index})"
    return title


__all__ = [
    "DEFAULT_BRANCH_PREFIX",
    "DEFAULT_TITLE_TAG",
    "branch_name",
    "pull_request_title",
    "readable_category",
]
