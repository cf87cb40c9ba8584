from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
import yaml

from ara.config import (
    ConfigError,
    ConfigManager,
    RefactoringConfig,
    clamp_max_files_per_pr,
    default_config,
    load_config,
    resolve_repo_root,
    write_config,
)
from ara.results import ALL_CATEGORIES


@pytest.mark.parametrize("value", [0, -5, "abc", None, float("nan"), True, [3]])
def test_invalid_max_files_per_pr_defaults_to_ten(value) -> None:
    assert clamp_max_files_per_pr(value) == 10


@pytest.mark.parametrize("value, expected", [(37, 20), (20, 20), (1, 1), (7, 7), ("12", 12), (3.9, 3)])
def test_max_files_per_pr_is_clamped(value, expected: int) -> None:
    assert clamp_max_files_per_pr(value) == expected


def test_manager_filters_unknown_refactoring_types() -> None:
    manager = ConfigManager(
        RefactoringConfig(refactoring_types=["dead-code", "rewrite-everything", "code-formatting"])
    )

    assert manager.refactoring_types == ["dead-code", "code-formatting"]


def test_manager_falls_back_to_all_types_when_none_remain() -> None:
    manager = ConfigManager(RefactoringConfig(refactoring_types=["nonsense"]))

    assert manager.refactoring_types == list(ALL_CATEGORIES)


def test_get_config_returns_a_copy() -> None:
    manager = ConfigManager(RefactoringConfig(include_dirs=["src"], max_files_per_pr=37))

    snapshot = manager.get_config()
    snapshot.include_dirs.append("tests")

    assert manager.include_dirs == ["src"]
    assert snapshot.max_files_per_pr == 20


def test_from_mapping_reads_nested_sections() -> None:
    manager = ConfigManager.from_mapping(
        {
            "refactoring": {
                "include_dirs": "src, lib",
                "exclude_dirs": ["build"],
                "types": ["dead-code"],
                "max_files_per_pr": 0,
            },
            "pull_requests": {"branch_prefix": "bots/refactor/", "title_tag": "Bot", "base_branch": "develop"},
        }
    )

    assert manager.include_dirs == ["src", "lib"]
    assert manager.exclude_dirs == ["build"]
    assert manager.refactoring_types == ["dead-code"]
    assert manager.max_files_per_pr == 10
    assert manager.branch_prefix == "bots/refactor"
    assert manager.title_tag == "Bot"
    assert manager.base_branch == "develop"


def test_from_mapping_uses_defaults_for_missing_sections() -> None:
    manager = ConfigManager.from_mapping({})

    assert manager.include_dirs == ["."]
    assert ".git" in manager.exclude_dirs
    assert manager.max_files_per_pr == 10
    assert manager.branch_prefix == "ai-refactor"
    assert manager.title_tag == "AI Refactor"
    assert manager.base_branch is None


def test_from_mapping_ignores_scalar_lists() -> None:
    manager = ConfigManager.from_mapping(
        {"refactoring": {"types": 5, "include_dirs": 5, "exclude_dirs": {"build": True}}}
    )

    assert manager.refactoring_types == list(ALL_CATEGORIES)
    assert manager.include_dirs == ["."]
    assert ".git" in manager.exclude_dirs


def test_default_config_round_trips_through_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    write_config(config_path, default_config())

    loaded = load_config(config_path)

    assert loaded == default_config()


def test_load_config_rejects_missing_and_invalid_files(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml")

    broken = tmp_path / "broken.yaml"
    broken.write_text("refactoring: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(broken)

    scalar = tmp_path / "scalar.yaml"
    scalar.write_text("just a string\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(scalar)


def test_resolve_repo_root_is_relative_to_config(tmp_path: Path) -> None:
    config_path = tmp_path / "conf" / "config.yaml"
    config = yaml.safe_load(
        textwrap.dedent(
            """
            project:
              repo_root: ../repo
            """
        )
    )

    assert resolve_repo_root(config, config_path) == (tmp_path / "repo").resolve()
