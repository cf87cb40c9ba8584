"""Sequential submission of partitioned refactoring results as pull requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Mapping, Optional, Sequence

from .hosts.base import HostClient, PullRequestRef
from .pipeline.naming import (
    DEFAULT_BRANCH_PREFIX,
    DEFAULT_TITLE_TAG,
    branch_name,
    pull_request_title,
)
from .pipeline.partition import Chunk, Grouping, partition
from .pipeline.render import render_body
from .results import RefactoringResult

LOGGER = logging.getLogger(__name__)

__all__ = [
    "SubmissionError",
    "SubmissionOrchestrator",
    "SubmissionReport",
    "SubmissionState",
    "SubmissionUnit",
]


class SubmissionError(RuntimeError):
    """Raised when the grouping handed to the orchestrator is malformed."""


class SubmissionState(str, Enum):
    """Lifecycle states for one submission unit."""

    PENDING = "PENDING"
    BRANCH_CREATED = "BRANCH_CREATED"
    CHANGES_APPLIED = "CHANGES_APPLIED"
    PR_CREATED = "PR_CREATED"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass(slots=True)
class SubmissionUnit:
    """One chunk of one category on its way to becoming a pull request."""

    category: str
    chunk_index: int
    total_chunks: int
    results: Chunk
    branch: str
    title: str
    body: str
    state: SubmissionState = SubmissionState.PENDING
    failed_step: Optional[str] = None
    error: Optional[str] = None
    pull_request: Optional[PullRequestRef] = None

    @property
    def position(self) -> str:
        return f"{self.chunk_index}/{self.total_chunks}"


@dataclass(slots=True)
class SubmissionReport:
    """Outcome of a submission run, one unit per chunk in submission order."""

    units: List[SubmissionUnit] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> List[SubmissionUnit]:
        return [unit for unit in self.units if unit.state is SubmissionState.DONE]

    @property
    def failed(self) -> List[SubmissionUnit]:
        return [unit for unit in self.units if unit.state is SubmissionState.FAILED]

    @property
    def results_processed(self) -> int:
        return sum(len(unit.results) for unit in self.units)


def _validate_grouping(grouping: Mapping[str, Sequence[Chunk]]) -> None:
    """Reject groupings the partitioner could never have produced."""

    if not isinstance(grouping, Mapping):
        raise SubmissionError(f"Expected a mapping of category to chunks, got {type(grouping).__name__}")
    for category, chunks in grouping.items():
        if not isinstance(category, str):
            raise SubmissionError(f"Category keys must be strings, got {category!r}")
        for position, chunk in enumerate(chunks, start=1):
            if not chunk:
                raise SubmissionError(f"Chunk {position} of {category!r} is empty")
            for result in chunk:
                if not isinstance(result, RefactoringResult):
                    raise SubmissionError(
                        f"Chunk {position} of {category!r} contains {type(result).__name__}, "
                        "expected RefactoringResult"
                    )
                if result.category != category:
                    raise SubmissionError(
                        f"Result for {result.file_path} has category {result.category!r} "
                        f"but was grouped under {category!r}"
                    )


class SubmissionOrchestrator:
    """Drive every chunk through branch creation, commit, and pull request.

    Units are processed one at a time, categories in grouping order and chunks
    in order within a category.  A failing step marks only its own unit as
    failed; the run continues with the next chunk and nothing is retried.
    """

    def __init__(
        self,
        host: HostClient,
        *,
        max_per_chunk: int = 10,
        branch_prefix: str = DEFAULT_BRANCH_PREFIX,
        title_tag: str = DEFAULT_TITLE_TAG,
    ) -> None:
        self._host = host
        self._max_per_chunk = max_per_chunk
        self._branch_prefix = branch_prefix
        self._title_tag = title_tag

    def submit_results(self, results: Iterable[RefactoringResult]) -> SubmissionReport:
        """Partition ``results`` and submit every resulting chunk."""

        return self.submit(partition(results, self._max_per_chunk))

    def submit(self, grouping: Grouping) -> SubmissionReport:
        """Submit an already partitioned grouping."""

        report = SubmissionReport()
        if not grouping:
            LOGGER.info("No refactoring results to create pull requests for")
            return report

        _validate_grouping(grouping)
        for category, chunks in grouping.items():
            for chunk_index, chunk in enumerate(chunks, start=1):
                unit = self.build_unit(category, chunk_index, len(chunks), chunk)
                report.units.append(unit)
                self._advance(unit, report)
        return report

    def plan(self, grouping: Grouping) -> List[SubmissionUnit]:
        """Return the units :meth:`submit` would create, without calling the host."""

        _validate_grouping(grouping)
        return [
            self.build_unit(category, chunk_index, len(chunks), chunk)
            for category, chunks in grouping.items()
            for chunk_index, chunk in enumerate(chunks, start=1)
        ]

    def build_unit(
        self,
        category: str,
        chunk_index: int,
        total_chunks: int,
        chunk: Chunk,
    ) -> SubmissionUnit:
        return SubmissionUnit(
            category=category,
            chunk_index=chunk_index,
            total_chunks=total_chunks,
            results=tuple(chunk),
            branch=branch_name(category, chunk_index, prefix=self._branch_prefix),
            title=pull_request_title(category, chunk_index, total_chunks, tag=self._title_tag),
            body=render_body(category, chunk),
        )

    def _advance(self, unit: SubmissionUnit, report: SubmissionReport) -> None:
        step = "create branch"
        try:
            self._host.create_branch(unit.branch)
            unit.state = SubmissionState.BRANCH_CREATED

            step = "apply changes"
            self._host.apply_changes(unit.branch, unit.results, message=unit.title)
            unit.state = SubmissionState.CHANGES_APPLIED

            step = "open pull request"
            unit.pull_request = self._host.open_pull_request(unit.branch, unit.title, unit.body)
            unit.state = SubmissionState.PR_CREATED
        except Exception as error:
            unit.state = SubmissionState.FAILED
            unit.failed_step = step
            unit.error = str(error) or type(error).__name__
            message = (
                f"Failed to create pull request for {unit.category} refactoring "
                f"({unit.position}) at step '{step}': {unit.error}"
            )
            LOGGER.warning(message)
            report.warnings.append(message)
            return

        unit.state = SubmissionState.DONE
        LOGGER.info("Created pull request for %s refactoring (%s)", unit.category, unit.position)
