"""Client base class shared by every version-control host integration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..results import RefactoringResult

__all__ = [
    "BranchExistsError",
    "HostClient",
    "HostClientError",
    "HostTransportError",
    "PullRequestRef",
]


class HostClientError(RuntimeError):
    """Base error raised when a host operation fails."""


class HostTransportError(HostClientError):
    """Raised when the host could not be reached or answered with an error status."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class BranchExistsError(HostClientError):
    """Raised when the branch to create is already present on the host."""


@dataclass(slots=True, frozen=True)
class PullRequestRef:
    """Handle to a pull request opened on the host."""

    branch: str
    title: str
    number: Optional[int] = None
    url: Optional[str] = None


class HostClient:
    """Operations the submission orchestrator needs from a version-control host.

    Every method either completes or raises; callers decide how failures are
    isolated.
    """

    name = "host"

    def create_branch(self, branch: str) -> None:
        """Create ``branch`` from the host's base branch."""
        raise NotImplementedError("Subclasses must implement create_branch().")

    def apply_changes(
        self,
        branch: str,
        results: Sequence[RefactoringResult],
        *,
        message: str,
    ) -> None:
        """Write each result's refactored content onto ``branch``."""
        raise NotImplementedError("Subclasses must implement apply_changes().")

    def open_pull_request(self, branch: str, title: str, body: str) -> PullRequestRef:
        """Open a pull request from ``branch`` into the base branch."""
        raise NotImplementedError("Subclasses must implement open_pull_request().")
