"""Partitioning, naming, and rendering stages of the pull-request pipeline."""

from .naming import branch_name, pull_request_title, readable_category
from .partition import Chunk, Grouping, chunk_results, group_by_category, partition
from .render import positional_diff, render_body

__all__ = [
    "Chunk",
    "Grouping",
    "branch_name",
    "chunk_results",
    "group_by_category",
    "partition",
    "positional_diff",
    "pull_request_title",
    "readable_category",
    "render_body",
]
