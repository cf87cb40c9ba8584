"""Host client that targets a local git repository.

Branches are created in the repository itself and changes are committed through
a throwaway worktree, so the caller's checkout is never modified.  Since a
plain repository has no notion of pull requests, each one is recorded as a
markdown file under ``records_dir``.
"""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Sequence

from ..results import RefactoringResult
from ..tools.vcs import GitError, GitRepository
from .base import BranchExistsError, HostClient, HostClientError, PullRequestRef

__all__ = ["LocalGitHost"]

LOGGER = logging.getLogger(__name__)

_RECORD_NAME_PATTERN = re.compile(r"[^A-Za-z0-9_.-]+")


class LocalGitHost(HostClient):
    """Submit refactoring branches to a repository on disk."""

    name = "local"

    def __init__(
        self,
        repo: GitRepository,
        *,
        records_dir: Path,
        base_branch: Optional[str] = None,
    ) -> None:
        self._repo = repo
        self._records_dir = records_dir
        self._base_branch = base_branch

    def base_branch(self) -> str:
        if not self._base_branch:
            current = self._repo.current_branch()
            if current is None:
                raise HostClientError("Cannot infer a base branch from a detached HEAD.")
            self._base_branch = current
        return self._base_branch

    def create_branch(self, branch: str) -> None:
        if self._repo.branch_exists(branch):
            raise BranchExistsError(f"Branch already exists: {branch}")
        self._repo.create_branch(branch, self.base_branch())

    def apply_changes(
        self,
        branch: str,
        results: Sequence[RefactoringResult],
        *,
        message: str,
    ) -> None:
        scratch = Path(tempfile.mkdtemp(prefix="ara-worktree-"))
        worktree_path = scratch / "worktree"
        try:
            worktree = self._repo.add_worktree(worktree_path, branch)
            try:
                for result in results:
                    target = _resolve_inside(worktree.root, result.file_path)
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_text(result.refactored_content, encoding="utf-8")
                sha = worktree.commit_all(message)
            finally:
                self._repo.remove_worktree(worktree_path)
        except GitError as error:
            raise HostClientError(f"Failed to commit changes to {branch}: {error}") from error
        finally:
            shutil.rmtree(scratch, ignore_errors=True)
        if sha is None:
            LOGGER.info("No file changes to commit on %s", branch)
        else:
            LOGGER.debug("Committed %d file(s) to %s as %s", len(results), branch, sha[:7])

    def open_pull_request(self, branch: str, title: str, body: str) -> PullRequestRef:
        if not self._repo.branch_exists(branch):
            raise HostClientError(f"Branch does not exist: {branch}")
        self._records_dir.mkdir(parents=True, exist_ok=True)
        record_path = self._records_dir / f"{_record_name(branch)}.md"
        header = f"# {title}\n\nBranch: `{branch}` -> `{self.base_branch()}`\n\n---\n\n"
        record_path.write_text(header + body, encoding="utf-8")
        return PullRequestRef(branch=branch, title=title, url=record_path.resolve().as_uri())


def _record_name(branch: str) -> str:
    return _RECORD_NAME_PATTERN.sub("-", branch.replace("/", "__")).strip("-") or "pull-request"


def _resolve_inside(root: Path, relative: str) -> Path:
    """Resolve ``relative`` under ``root``, refusing paths that escape it."""

    target = (root / relative).resolve()
    try:
        target.relative_to(root.resolve())
    except ValueError as error:
        raise HostClientError(f"Refusing to write outside the repository: {relative}") from error
    return target
