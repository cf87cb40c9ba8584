from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ara.results import RefactoringResult  # noqa: E402

ResultFactory = Callable[..., RefactoringResult]


@pytest.fixture()
def make_result() -> ResultFactory:
    """Return a factory producing results with sensible defaults."""

    def _make(
        category: str = "dead-code",
        file_path: str = "src/app.py",
        original_content: str = "a\nb",
        refactored_content: str = "a\nc",
        description: str = "Remove unused code.",
    ) -> RefactoringResult:
        return RefactoringResult(
            category=category,
            file_path=file_path,
            original_content=original_content,
            refactored_content=refactored_content,
            description=description,
        )

    return _make


@dataclass(slots=True)
class TinyRepo:
    """Fixture payload representing a throwaway git repository."""

    root: Path

    def git(self, *args: str) -> str:
        process = subprocess.run(
            ["git", *args],
            cwd=self.root,
            check=True,
            capture_output=True,
            text=True,
        )
        return process.stdout.strip()


@pytest.fixture()
def tiny_repo(tmp_path: Path) -> TinyRepo:
    """Create a git repository on ``main`` with a single tracked Python file."""

    repo_root = tmp_path / "tiny-repo"
    repo_root.mkdir()
    repo = TinyRepo(root=repo_root)

    repo.git("init")
    repo.git("symbolic-ref", "HEAD", "refs/heads/main")
    repo.git("config", "user.email", "agent@example.com")
    repo.git("config", "user.name", "AI Refactoring Agent")

    src_dir = repo_root / "src"
    src_dir.mkdir()
    (src_dir / "app.py").write_text("def add(a, b):\n    return a + b\n", encoding="utf-8")

    repo.git("add", ".")
    repo.git("commit", "-m", "Initial tiny repo state")
    return repo
