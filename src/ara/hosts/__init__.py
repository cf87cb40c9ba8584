"""Convenience exports for version-control host implementations."""

from .base import (
    BranchExistsError,
    HostClient,
    HostClientError,
    HostTransportError,
    PullRequestRef,
)
from .dry_run import DryRunHost, RecordedCall
from .github import GitHubHost
from .local import LocalGitHost

__all__ = [
    "BranchExistsError",
    "DryRunHost",
    "GitHubHost",
    "HostClient",
    "HostClientError",
    "HostTransportError",
    "LocalGitHost",
    "PullRequestRef",
    "RecordedCall",
]
