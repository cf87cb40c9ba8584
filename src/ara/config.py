"""Configuration loading and validation for the refactoring agent."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .pipeline.naming import DEFAULT_BRANCH_PREFIX, DEFAULT_TITLE_TAG
from .results import ALL_CATEGORIES

DEFAULT_CONFIG_NAME = "config.yaml"
DEFAULT_MAX_FILES_PER_PR = 10
MAX_FILES_PER_PR_CAP = 20

DEFAULT_CONFIG_TEMPLATE: Dict[str, Any] = {
    "project": {
        "name": "",
        "repo_root": ".",
    },
    "refactoring": {
        "include_dirs": ["."],
        "exclude_dirs": ["node_modules", "dist", "build", ".git", ".github"],
        "types": list(ALL_CATEGORIES),
        "max_files_per_pr": DEFAULT_MAX_FILES_PER_PR,
    },
    "pull_requests": {
        "branch_prefix": DEFAULT_BRANCH_PREFIX,
        "title_tag": DEFAULT_TITLE_TAG,
        "base_branch": None,
    },
    "host": {
        "kind": "github",
        "repository": "",
        "api_url": "https://api.github.com",
        "timeout": 30,
    },
    "paths": {
        "data": "data",
        "records": "data/pull_requests",
        "config": DEFAULT_CONFIG_NAME,
    },
}


class ConfigError(ValueError):
    """Raised when the configuration file cannot be loaded."""


@dataclass(slots=True)
class RefactoringConfig:
    """Settings that decide which results are submitted and how they are split."""

    include_dirs: List[str] = field(default_factory=lambda: ["."])
    exclude_dirs: List[str] = field(default_factory=list)
    refactoring_types: List[str] = field(default_factory=lambda: list(ALL_CATEGORIES))
    max_files_per_pr: Any = DEFAULT_MAX_FILES_PER_PR
    branch_prefix: str = DEFAULT_BRANCH_PREFIX
    title_tag: str = DEFAULT_TITLE_TAG
    base_branch: Optional[str] = None


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration template."""
    return copy.deepcopy(DEFAULT_CONFIG_TEMPLATE)


def write_config(config_path: Path, config_data: Mapping[str, Any]) -> None:
    """Persist configuration data to disk with stable formatting."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(dict(config_data), handle, sort_keys=False)


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load YAML configuration from disk and return it as a dictionary."""
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse config: {error}") from error

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping at the top level.")
    return data


def resolve_repo_root(config: Mapping[str, Any], config_path: Path) -> Path:
    """Resolve the repository root relative to the configuration file."""

    project_cfg = config.get("project") or {}
    repo_root_path = Path(str(project_cfg.get("repo_root") or "."))
    if not repo_root_path.is_absolute():
        repo_root_path = (config_path.parent / repo_root_path).resolve()
    return repo_root_path


def _coerce_count(value: Any) -> Optional[int]:
    """Interpret ``value`` as a whole number, returning ``None`` when it is not numeric."""

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        try:
            value = float(text)
        except ValueError:
            return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)
    return None


def clamp_max_files_per_pr(value: Any) -> int:
    """Clamp the chunk size into ``[1, 20]``, defaulting invalid input to 10."""

    count = _coerce_count(value)
    if count is None or count < 1:
        return DEFAULT_MAX_FILES_PER_PR
    return min(count, MAX_FILES_PER_PR_CAP)


def filter_refactoring_types(types: Any) -> List[str]:
    """Keep recognised categories; fall back to every category when none remain."""

    if isinstance(types, str):
        types = [item.strip() for item in types.split(",")]
    elif not isinstance(types, (list, tuple)):
        types = []
    candidates = [str(item).strip() for item in types]
    allowed = [item for item in candidates if item in ALL_CATEGORIES]
    return allowed or list(ALL_CATEGORIES)


def _string_list(value: Any, fallback: List[str]) -> List[str]:
    if value is None:
        return list(fallback)
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if not isinstance(value, (list, tuple)):
        return list(fallback)
    return [str(item).strip() for item in value if str(item).strip()]


class ConfigManager:
    """Validated view over :class:`RefactoringConfig`."""

    def __init__(self, config: RefactoringConfig) -> None:
        self._config = self._validate(config)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConfigManager":
        """Build a manager from a loaded ``config.yaml`` mapping."""

        refactoring_cfg = data.get("refactoring") or {}
        pr_cfg = data.get("pull_requests") or {}
        defaults = DEFAULT_CONFIG_TEMPLATE["refactoring"]
        base_branch = pr_cfg.get("base_branch")
        config = RefactoringConfig(
            include_dirs=_string_list(refactoring_cfg.get("include_dirs"), defaults["include_dirs"]),
            exclude_dirs=_string_list(refactoring_cfg.get("exclude_dirs"), defaults["exclude_dirs"]),
            refactoring_types=_string_list(refactoring_cfg.get("types"), defaults["types"]),
            max_files_per_pr=refactoring_cfg.get("max_files_per_pr", DEFAULT_MAX_FILES_PER_PR),
            branch_prefix=str(pr_cfg.get("branch_prefix") or DEFAULT_BRANCH_PREFIX),
            title_tag=str(pr_cfg.get("title_tag") or DEFAULT_TITLE_TAG),
            base_branch=str(base_branch).strip() if base_branch else None,
        )
        return cls(config)

    @staticmethod
    def _validate(config: RefactoringConfig) -> RefactoringConfig:
        return replace(
            config,
            include_dirs=list(config.include_dirs),
            exclude_dirs=list(config.exclude_dirs),
            refactoring_types=filter_refactoring_types(config.refactoring_types),
            max_files_per_pr=clamp_max_files_per_pr(config.max_files_per_pr),
            branch_prefix=config.branch_prefix.strip("/") or DEFAULT_BRANCH_PREFIX,
        )

    @property
    def include_dirs(self) -> List[str]:
        return self._config.include_dirs

    @property
    def exclude_dirs(self) -> List[str]:
        return self._config.exclude_dirs

    @property
    def refactoring_types(self) -> List[str]:
        return self._config.refactoring_types

    @property
    def max_files_per_pr(self) -> int:
        return self._config.max_files_per_pr

    @property
    def branch_prefix(self) -> str:
        return self._config.branch_prefix

    @property
    def title_tag(self) -> str:
        return self._config.title_tag

    @property
    def base_branch(self) -> Optional[str]:
        return self._config.base_branch

    def get_config(self) -> RefactoringConfig:
        """Return a copy of the validated configuration."""
        return replace(
            self._config,
            include_dirs=list(self._config.include_dirs),
            exclude_dirs=list(self._config.exclude_dirs),
            refactoring_types=list(self._config.refactoring_types),
        )


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_CONFIG_TEMPLATE",
    "RefactoringConfig",
    "clamp_max_files_per_pr",
    "default_config",
    "filter_refactoring_types",
    "load_config",
    "resolve_repo_root",
    "write_config",
]
