"""Minimal git helpers
The helpers below provide just enough structure to create refactoring branches
and commit file snapshots onto them without touching the caller's checkout.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Sequence


class GitError(RuntimeError):
    """Raised when a git command fails or the repository cannot be used."""


class GitRepository:
    """Lightweight wrapper around ``git`` commands."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()
        if not (self.root / ".git").exists():
            raise GitError(f"Not a git repository: {self.root}")

    @classmethod
    def discover(cls, start: Path | str | None = None) -> "GitRepository":
        """Locate the nearest git repository starting from ``start``."""

        path = Path(start or Path.cwd()).resolve()
        for candidate in (path, *path.parents):
            if (candidate / ".git").exists():
                return cls(candidate)
        raise GitError(f"Unable to locate a git repository from {path}")

    # ------------------------------------------------------------------ git IO
    def _run_git(self, args: Sequence[str], *, check: bool = True) -> subprocess.CompletedProcess[str]:
        command = ["git", *args]
        process = subprocess.run(
            command,
            cwd=self.root,
            capture_output=True,
            text=False,
            check=False,
        )
        stdout = process.stdout.decode("utf-8", errors="replace") if process.stdout else ""
        stderr = process.stderr.decode("utf-8", errors="replace") if process.stderr else ""
        result = subprocess.CompletedProcess(process.args, process.returncode, stdout, stderr)
        if check and result.returncode != 0:
            message = result.stderr.strip() or result.stdout.strip() or "unknown git error"
            raise GitError(f"git {' '.join(args)} failed: {message}")
        return result

    def git(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        """Execute ``git`` with ``args`` relative to the repository root."""

        return self._run_git(list(args), check=check)

    # -------------------------------------------------------------- branches
    def current_branch(self) -> str | None:
        """Return the current branch name or ``None`` when detached."""

        result = self._run_git(["rev-parse", "--abbrev-ref", "HEAD"], check=False)
        if result.returncode != 0:
            return None
        branch = result.stdout.strip()
        if not branch or branch == "HEAD":
            return None
        return branch

    def head(self, ref: str = "HEAD") -> str | None:
        """Return the commit SHA ``ref`` points at, or ``None`` if it does not resolve."""

        result = self._run_git(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def branch_exists(self, name: str) -> bool:
        """Return ``True`` when a local branch called ``name`` exists."""

        result = self._run_git(["show-ref", "--verify", "--quiet", f"refs/heads/{name}"], check=False)
        return result.returncode == 0

    def create_branch(self, name: str, start_point: str = "HEAD") -> None:
        """Create ``name`` at ``start_point`` without checking it out."""

        if self.branch_exists(name):
            raise GitError(f"Branch already exists: {name}")
        self._run_git(["branch", name, start_point], check=True)

    # ------------------------------------------------------------- worktrees
    def add_worktree(self, path: Path, branch: str) -> "GitRepository":
        """Check ``branch`` out into a separate worktree at ``path``."""

        self._run_git(["worktree", "add", path.as_posix(), branch], check=True)
        return GitRepository(path)

    def remove_worktree(self, path: Path) -> None:
        """Remove a worktree previously created with :meth:`add_worktree`."""

        self._run_git(["worktree", "remove", "--force", path.as_posix()], check=True)

    # --------------------------------------------------------------- commits
    def commit_all(self, message: str, *, allow_empty: bool = False) -> str | None:
        """Add all changes to the index and create a commit.

        Returns the new commit SHA when a commit was created.  Returns ``None`` when
        there were no changes to commit (and ``allow_empty`` is ``False``).
        """

        self._run_git(["add", "--all"], check=True)

        commit_args: List[str] = ["commit", "-m", message]
        if allow_empty:
            commit_args.append("--allow-empty")

        commit = self._run_git(commit_args, check=False)
        if commit.returncode != 0:
            output = commit.stderr.strip() or commit.stdout.strip() or ""
            if "nothing to commit" in output.lower():
                return None
            raise GitError(f"git commit failed: {output}")

        rev = self._run_git(["rev-parse", "HEAD"], check=True)
        return rev.stdout.strip()


__all__ = ["GitError", "GitRepository"]
