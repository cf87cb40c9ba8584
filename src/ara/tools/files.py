"""File discovery helpers shared by the producer contract and the CLI."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Literal, Optional, Sequence

LOGGER = logging.getLogger(__name__)

Language = Literal["python", "typescript", "unknown"]

_LANGUAGE_BY_SUFFIX: dict[str, Language] = {
    ".py": "python",
    ".ts": "typescript",
    ".tsx": "typescript",
}


def detect_language(path: str | Path) -> Language:
    """Return the language of ``path`` based on its extension."""

    suffix = Path(path).suffix.lower()
    return _LANGUAGE_BY_SUFFIX.get(suffix, "unknown")


def _normalise(value: str) -> str:
    return value.replace("\\", "/")


def should_include_file(
    path: str | Path,
    include_dirs: Sequence[str],
    exclude_dirs: Sequence[str],
) -> bool:
    """Decide whether ``path`` falls inside the configured directory scope.

    Matching is a plain prefix comparison on forward-slash paths.  Exclusions
    win over inclusions, and an include list that is empty or only ``"."``
    admits every path that is not excluded.
    """

    normalised = _normalise(str(path))

    for exclude_dir in exclude_dirs:
        if normalised.startswith(_normalise(exclude_dir)):
            return False

    if not include_dirs or (len(include_dirs) == 1 and include_dirs[0] == "."):
        return True

    return any(normalised.startswith(_normalise(include_dir)) for include_dir in include_dirs)


def discover_files(
    root: Path,
    include_dirs: Sequence[str],
    exclude_dirs: Sequence[str],
) -> List[Path]:
    """Return repository-relative paths of source files the agent can refactor."""

    root = root.resolve()
    found: List[Path] = []
    for directory, dirnames, filenames in os.walk(root):
        base = Path(directory)
        relative_dir = base.relative_to(root)
        dirnames[:] = [
            name
            for name in dirnames
            if should_include_dir((relative_dir / name).as_posix(), exclude_dirs)
        ]
        for filename in filenames:
            relative = (relative_dir / filename)
            if detect_language(relative) == "unknown":
                continue
            if should_include_file(relative.as_posix(), include_dirs, exclude_dirs):
                found.append(relative)
    return sorted(found, key=lambda item: item.as_posix())


def should_include_dir(relative_dir: str, exclude_dirs: Sequence[str]) -> bool:
    """Return ``False`` when a directory walk can skip ``relative_dir`` entirely."""

    normalised = _normalise(relative_dir)
    return not any(normalised.startswith(_normalise(entry)) for entry in exclude_dirs)


def read_text(path: Path) -> Optional[str]:
    """Read ``path`` as UTF-8, returning ``None`` when it cannot be read."""

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        LOGGER.error("Error reading file %s: %s", path, error)
        return None


__all__ = [
    "Language",
    "detect_language",
    "discover_files",
    "read_text",
    "should_include_dir",
    "should_include_file",
]
