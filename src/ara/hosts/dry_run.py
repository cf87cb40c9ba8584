"""Host client that records calls without touching any repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from ..results import RefactoringResult
from .base import HostClient, PullRequestRef

__all__ = ["DryRunHost", "RecordedCall"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RecordedCall:
    """One host operation captured by :class:`DryRunHost`."""

    operation: str
    branch: str
    detail: Tuple[str, ...] = ()


@dataclass
class DryRunHost(HostClient):
    """Accept every operation and remember it for later inspection."""

    calls: List[RecordedCall] = field(default_factory=list)

    name = "dry-run"

    def create_branch(self, branch: str) -> None:
        LOGGER.info("[dry-run] create branch %s", branch)
        self.calls.append(RecordedCall("create_branch", branch))

    def apply_changes(
        self,
        branch: str,
        results: Sequence[RefactoringResult],
        *,
        message: str,
    ) -> None:
        paths = tuple(result.file_path for result in results)
        LOGGER.info("[dry-run] apply %d change(s) to %s", len(paths), branch)
        self.calls.append(RecordedCall("apply_changes", branch, paths))

    def open_pull_request(self, branch: str, title: str, body: str) -> PullRequestRef:
        LOGGER.info("[dry-run] open pull request %r from %s", title, branch)
        self.calls.append(RecordedCall("open_pull_request", branch, (title,)))
        return PullRequestRef(branch=branch, title=title)
