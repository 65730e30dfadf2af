"""CLI entry point for scan-cache."""

from __future__ import annotations

import signal
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from scan_cache import __version__
from scan_cache.cache import ArtifactCache, JsonFileCacheStore
from scan_cache.client import XrayClient
from scan_cache.config import ScannerConfig, load_config
from scan_cache.constants import EXIT_ERROR, EXIT_SUCCESS
from scan_cache.exceptions import ScanCacheError, ScanError
from scan_cache.logging import setup_logging
from scan_cache.models.dependency import ComponentPrefix, DependencyTreeNode
from scan_cache.scan import (
    CancellationToken,
    RichProgressIndicator,
    ScanOrchestrator,
    ScanOutcome,
    ScanStatus,
)

# Module-level console for consistent output
_console = Console()
# Separate console for error output (writes to stderr)
_error_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Scan Cache - Incremental dependency scanning with cached results.

    Sends a project's dependency graph to the scan service and caches the
    vulnerabilities, violations and licenses found per component. Quick
    scans only send components that are not cached yet.

    \b
    Examples:
        scan-cache scan tree.json
        scan-cache scan tree.json --full
        scan-cache scan tree.json --project my-project
        scan-cache summary npm://left-pad:1.3.0
    """
    pass


@main.command()
@click.argument("tree_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--full",
    "full_scan",
    is_flag=True,
    default=False,
    help="Scan every component, ignoring cached results.",
)
@click.option(
    "--project",
    default=None,
    help="Project key used as policy context (overrides the configuration).",
)
@click.option(
    "--prefix",
    type=click.Choice([p.name.lower() for p in ComponentPrefix], case_sensitive=False),
    default=None,
    help="Package scheme for nodes without a component id.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file.",
)
@click.option(
    "--cache",
    "cache_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Cache file (overrides the configuration).",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_flag",
    is_flag=True,
    default=False,
    help="Suppress progress output.",
)
def scan(
    tree_file: str,
    full_scan: bool,
    project: Optional[str],
    prefix: Optional[str],
    config_path: Optional[str],
    cache_path: Optional[str],
    quiet_flag: bool,
) -> None:
    """Scan the dependency tree in TREE_FILE and cache the results.

    TREE_FILE is a JSON dependency tree: nodes with "identifier",
    optional "component_id", "is_metadata" and "children".

    \b
    Examples:
        scan-cache scan tree.json
        scan-cache scan tree.json --full --prefix npm
        scan-cache scan tree.json --cache .scan-cache/cache.json
    """
    setup_logging()
    try:
        config = load_config(config_path)
        tree = _load_tree(Path(tree_file))
        cache = ArtifactCache.load(JsonFileCacheStore(cache_path or config.cache_path))
        outcome = _run_scan(
            config,
            cache,
            tree,
            quick_scan=not full_scan,
            project=project if project is not None else _config_project(config),
            prefix=ComponentPrefix[prefix.upper()] if prefix else None,
            show_progress=not quiet_flag,
        )
    except ScanCacheError as e:
        _display_error(e)
        sys.exit(EXIT_ERROR)

    _display_outcome(outcome, cache)
    if outcome.status in (ScanStatus.SUCCESS, ScanStatus.NOTHING_TO_SCAN):
        sys.exit(EXIT_SUCCESS)
    sys.exit(EXIT_ERROR)


@main.command()
@click.argument("component_id")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file.",
)
@click.option(
    "--cache",
    "cache_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Cache file (overrides the configuration).",
)
def summary(
    component_id: str, config_path: Optional[str], cache_path: Optional[str]
) -> None:
    """Print the cached scan summary of COMPONENT_ID as JSON.

    Components that were never scanned, or have no detected license, are
    reported with an "Unknown" license.

    \b
    Examples:
        scan-cache summary npm://left-pad:1.3.0
        scan-cache summary left-pad:1.3.0
    """
    setup_logging()
    try:
        config = load_config(config_path)
        cache = ArtifactCache.load(JsonFileCacheStore(cache_path or config.cache_path))
    except ScanCacheError as e:
        _display_error(e)
        sys.exit(EXIT_ERROR)

    click.echo(cache.get_summary(component_id).model_dump_json(indent=2))


def _config_project(config: ScannerConfig) -> Optional[str]:
    return config.server.project if config.server is not None else None


def _load_tree(path: Path) -> DependencyTreeNode:
    """Load a dependency tree from a JSON file.

    Raises:
        ScanError: If the file cannot be read or is not a valid tree.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ScanError(f"Cannot read dependency tree '{path}': {e}") from e
    try:
        return DependencyTreeNode.model_validate_json(content)
    except ValidationError as e:
        raise ScanError(
            f"Invalid dependency tree '{path}': {e.error_count()} validation errors"
        ) from e


def _run_scan(
    config: ScannerConfig,
    cache: ArtifactCache,
    tree: DependencyTreeNode,
    quick_scan: bool,
    project: Optional[str],
    prefix: Optional[ComponentPrefix],
    show_progress: bool,
) -> ScanOutcome:
    """Execute a scan against the configured service.

    Args:
        config: Loaded configuration; must have a server section.
        cache: Cache to scan into.
        tree: Dependency tree to scan.
        quick_scan: True to skip cached components.
        project: Policy context, if any.
        prefix: Package scheme for nodes without a component id.
        show_progress: Whether to show a spinner while the scan runs.

    Returns:
        The scan outcome.
    """
    token = CancellationToken()
    with XrayClient.from_config(config) as client, _cancel_on_interrupt(token):
        orchestrator = ScanOrchestrator(cache, client)
        if not show_progress:
            return orchestrator.scan_and_cache_artifacts(
                tree,
                quick_scan,
                project=project,
                prefix=prefix,
                check_canceled=token.check,
            )
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=_console,
            transient=True,
        ) as progress:
            indicator = RichProgressIndicator(progress, "Scanning dependencies...")
            return orchestrator.scan_and_cache_artifacts(
                tree,
                quick_scan,
                project=project,
                prefix=prefix,
                check_canceled=token.check,
                indicator=indicator,
            )


@contextmanager
def _cancel_on_interrupt(token: CancellationToken) -> Iterator[None]:
    """Turn Ctrl-C into a cooperative cancellation of the running scan."""

    def handler(signum: int, frame: Any) -> None:
        token.cancel()

    previous = signal.signal(signal.SIGINT, handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _display_outcome(outcome: ScanOutcome, cache: ArtifactCache) -> None:
    if outcome.status == ScanStatus.SUCCESS:
        _console.print(
            f"[green]Scan completed: {outcome.scanned_components} "
            f"components scanned.[/green]"
        )
        _display_issue_overview(cache)
    elif outcome.status == ScanStatus.NOTHING_TO_SCAN:
        _console.print("No components found to scan.")
    elif outcome.status == ScanStatus.CANCELED:
        _error_console.print("[yellow]Scan was canceled.[/yellow]")
    else:
        _error_console.print(f"[red bold]Scan failed: {outcome.reason}[/red bold]")


def _display_issue_overview(cache: ArtifactCache) -> None:
    """Print how many cached components have issues, and the worst severity."""
    severities = [a.top_severity for a in cache if a.top_severity is not None]
    if not severities:
        _console.print("No issues found in cached components.")
        return
    _console.print(
        f"{len(severities)} cached components have issues "
        f"(highest severity: {max(severities).value})."
    )


def _display_error(error: ScanCacheError) -> None:
    """Display error message to user.

    All errors are written to stderr.

    Args:
        error: The exception that occurred.
    """
    error_type = type(error).__name__
    _error_console.print(f"[red bold]Error: {error_type}: {error}[/red bold]")


if __name__ == "__main__":
    main()
