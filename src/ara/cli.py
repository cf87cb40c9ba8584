"""CLI commands for turning refactoring results into pull requests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import typer

from .config import (
    DEFAULT_CONFIG_NAME,
    ConfigError,
    ConfigManager,
    default_config,
    load_config,
    resolve_repo_root,
    write_config,
)
from .hosts import DryRunHost, GitHubHost, HostClient, LocalGitHost
from .orchestrator import SubmissionError, SubmissionOrchestrator, SubmissionReport, SubmissionUnit
from .pipeline import partition
from .results import RefactoringResult, ResultsError, filter_results, load_results
from .tools.files import discover_files
from .tools.vcs import GitError, GitRepository

APP_HELP = "AI Refactoring Agent CLI entry point."
HOST_KINDS = ("github", "local", "dry-run")

app = typer.Typer(help=APP_HELP)

_CONFIG_OPTION = typer.Option(
    DEFAULT_CONFIG_NAME,
    "--config",
    "-c",
    help="Path to the agent configuration file.",
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config_or_default(config_path: Path) -> Dict[str, Any]:
    """Load ``config_path``, falling back to defaults when it does not exist."""
    if not config_path.exists():
        return default_config()
    try:
        return load_config(config_path)
    except ConfigError as error:
        typer.echo(str(error))
        raise typer.Exit(code=1) from error


def _resolve_records_dir(config: Dict[str, Any], repo_root: Path) -> Path:
    paths_cfg = config.get("paths") or {}
    records_value = paths_cfg.get("records")
    candidate = Path(str(records_value).strip()) if records_value else Path("data/pull_requests")
    if not candidate.is_absolute():
        candidate = repo_root / candidate
    return candidate


def _load_filtered_results(
    results_path: Path,
    manager: ConfigManager,
    repo_root: Path,
) -> List[RefactoringResult]:
    try:
        loaded = load_results(results_path, repo_root=repo_root)
    except ResultsError as error:
        typer.echo(f"Failed to load results: {error}")
        raise typer.Exit(code=1) from error

    kept = filter_results(
        loaded,
        allowed_categories=manager.refactoring_types,
        include_dirs=manager.include_dirs,
        exclude_dirs=manager.exclude_dirs,
    )
    skipped = len(loaded) - len(kept)
    if skipped:
        typer.echo(f"Skipped {skipped} result(s) outside the configured categories or directories.")
    return kept


def _build_host(
    kind: str,
    config: Dict[str, Any],
    manager: ConfigManager,
    repo_root: Path,
) -> HostClient:
    """Instantiate the requested host client from configuration."""
    host_cfg = config.get("host") or {}
    if kind == "dry-run":
        return DryRunHost()
    if kind == "local":
        try:
            repo = GitRepository.discover(repo_root)
        except GitError as error:
            typer.echo(f"Local host requires a git repository: {error}")
            raise typer.Exit(code=1) from error
        return LocalGitHost(
            repo,
            records_dir=_resolve_records_dir(config, repo_root),
            base_branch=manager.base_branch,
        )
    if kind == "github":
        client_kwargs: Dict[str, Any] = {}
        repository = host_cfg.get("repository")
        if isinstance(repository, str) and repository.strip():
            client_kwargs["repository"] = repository.strip()
        api_url = host_cfg.get("api_url")
        if isinstance(api_url, str) and api_url.strip():
            client_kwargs["api_url"] = api_url.strip()
        timeout_value = host_cfg.get("timeout")
        if isinstance(timeout_value, (int, float)) and timeout_value > 0:
            client_kwargs["timeout"] = float(timeout_value)
        try:
            return GitHubHost(base_branch=manager.base_branch, **client_kwargs)
        except ValueError as error:
            typer.echo(
                f"Failed to initialise GitHub host: {error} "
                "Set GITHUB_TOKEN and GITHUB_REPOSITORY, or use --host local/dry-run."
            )
            raise typer.Exit(code=1) from error
    typer.echo(f"Unknown host '{kind}' in configuration. Choose one of: {', '.join(HOST_KINDS)}.")
    raise typer.Exit(code=1)


def _render_unit(unit: SubmissionUnit) -> None:
    typer.echo(f"- {unit.title}")
    typer.echo(f"    branch: {unit.branch}")
    typer.echo(f"    files: {len(unit.results)}")
    if unit.failed_step:
        typer.echo(f"    ! failed at '{unit.failed_step}': {unit.error}")
    elif unit.pull_request and unit.pull_request.url:
        typer.echo(f"    pull request: {unit.pull_request.url}")


def _render_report(report: SubmissionReport) -> None:
    """Display per-unit outcomes followed by the run summary."""
    for unit in report.units:
        _render_unit(unit)
    typer.echo(
        f"Submitted {len(report.succeeded)} pull request(s), {len(report.failed)} failed; "
        f"processed {report.results_processed} refactoring result(s)."
    )


@app.command()
def init(config: str = _CONFIG_OPTION) -> None:
    """Write a default configuration file."""
    config_path = Path(config)
    if config_path.exists():
        typer.echo(f"Configuration already exists at {config_path}.")
        return
    config_data = default_config()
    config_data["paths"]["config"] = config_path.name
    write_config(config_path, config_data)
    typer.echo(f"Wrote default configuration to {config_path}.")


@app.command()
def plan(
    results: Path = typer.Option(..., "--results", "-r", help="JSON file of refactoring results."),
    config: str = _CONFIG_OPTION,
) -> None:
    """Show the pull requests a submission would create."""
    config_path = Path(config)
    config_data = _load_config_or_default(config_path)
    manager = ConfigManager.from_mapping(config_data)
    repo_root = resolve_repo_root(config_data, config_path)

    kept = _load_filtered_results(results, manager, repo_root)
    if not kept:
        typer.echo("No refactoring opportunities found.")
        return

    orchestrator = SubmissionOrchestrator(
        DryRunHost(),
        max_per_chunk=manager.max_files_per_pr,
        branch_prefix=manager.branch_prefix,
        title_tag=manager.title_tag,
    )
    units = orchestrator.plan(partition(kept, manager.max_files_per_pr))
    typer.echo(f"{len(units)} pull request(s) for {len(kept)} refactoring result(s):")
    for unit in units:
        _render_unit(unit)


@app.command()
def submit(
    results: Path = typer.Option(..., "--results", "-r", help="JSON file of refactoring results."),
    config: str = _CONFIG_OPTION,
    host: Optional[str] = typer.Option(
        None,
        "--host",
        click_type=click.Choice(HOST_KINDS),
        help="Host to submit to (defaults to host.kind in the config).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Create one pull request per category chunk."""
    _configure_logging(verbose)
    config_path = Path(config)
    config_data = _load_config_or_default(config_path)
    manager = ConfigManager.from_mapping(config_data)
    repo_root = resolve_repo_root(config_data, config_path)

    kept = _load_filtered_results(results, manager, repo_root)
    if not kept:
        typer.echo("No refactoring opportunities found.")
        return
    typer.echo(f"Found {len(kept)} refactoring opportunities.")

    host_kind = host or str((config_data.get("host") or {}).get("kind") or "github")
    host_client = _build_host(host_kind, config_data, manager, repo_root)
    orchestrator = SubmissionOrchestrator(
        host_client,
        max_per_chunk=manager.max_files_per_pr,
        branch_prefix=manager.branch_prefix,
        title_tag=manager.title_tag,
    )
    try:
        report = orchestrator.submit_results(kept)
    except SubmissionError as error:
        typer.echo(f"Submission aborted: {error}")
        raise typer.Exit(code=1) from error

    _render_report(report)


@app.command()
def discover(config: str = _CONFIG_OPTION) -> None:
    """List source files inside the configured directory scope."""
    config_path = Path(config)
    config_data = _load_config_or_default(config_path)
    manager = ConfigManager.from_mapping(config_data)
    repo_root = resolve_repo_root(config_data, config_path)

    files = discover_files(repo_root, manager.include_dirs, manager.exclude_dirs)
    if not files:
        typer.echo("No candidate files found.")
        return
    for path in files:
        typer.echo(path.as_posix())
    typer.echo(f"{len(files)} candidate file(s).")


if __name__ == "__main__":
    app()
