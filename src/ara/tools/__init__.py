"""Tool integrations used by the refactoring agent runtime."""

from .files import detect_language, discover_files, read_text, should_include_file
from .vcs import GitError, GitRepository

__all__ = [
    "GitError",
    "GitRepository",
    "detect_language",
    "discover_files",
    "read_text",
    "should_include_file",
]
