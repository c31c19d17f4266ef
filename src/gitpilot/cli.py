"""GitPilot CLI — Typer application with status, show, log, branches, remotes, diffstat, hash and init-config."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import typer
from rich.console import Console

from gitpilot import __version__

app = typer.Typer(
    name="gitpilot",
    help="Typed, structured views of a git repository.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_REPO_OPTION = typer.Option(None, "--repo", "-C", help="Repository path (default: current work tree)")
_CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Path to .gitpilot.toml")
_FORMAT_OPTION = typer.Option(None, "--format", "-f", help="Output format: terminal | json")
_VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Debug logging")


def _fail(label: str, exc: Exception) -> typer.Exit:
    console.print(f"[bold red]{label}:[/bold red] {exc}")
    return typer.Exit(code=2)


def _open(
    repo: Optional[Path],
    config: Optional[str],
    format: Optional[str],
    verbose: bool,
):
    """Resolve config and the repository handle; exit 2 on failure."""
    from gitpilot.config.loader import ConfigError, load_config
    from gitpilot.git.errors import GitOperationError
    from gitpilot.git.runner import SyncRunner
    from gitpilot.logging_config import configure_logging
    from gitpilot.repository import Repository

    if format and format not in ("terminal", "json"):
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)

    root = repo
    if root is None:
        # Find the work tree root first; the config file lives there.
        start = Path.cwd()
        try:
            executable = load_config(start, config).git.executable
            root = Repository.discover(start, SyncRunner(executable)).location
        except ConfigError as exc:
            raise _fail("Config error", exc) from exc
        except GitOperationError as exc:
            raise _fail("Git error", exc) from exc

    try:
        cfg = load_config(root, config)
    except ConfigError as exc:
        raise _fail("Config error", exc) from exc

    if format:
        cfg.output.format = format  # type: ignore[assignment]
    if verbose:
        cfg.logging.level = "debug"
    configure_logging(cfg.logging.level, json_format=cfg.logging.json)

    return Repository(root, SyncRunner(cfg.git.executable)), cfg


def _call(fn: Callable[[], Any]) -> Any:
    from gitpilot.git.errors import GitOperationError

    try:
        return fn()
    except GitOperationError as exc:
        raise _fail("Git error", exc) from exc


def _emit(cfg, data_fn: Callable[[], Any], render_fn: Callable[[], None]) -> None:
    from gitpilot.output import json_report

    if cfg.output.format == "json":
        print(json_report.render(data_fn()))
    else:
        render_fn()


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(
    repo: Optional[Path] = _REPO_OPTION,
    config: Optional[str] = _CONFIG_OPTION,
    format: Optional[str] = _FORMAT_OPTION,
    verbose: bool = _VERBOSE_OPTION,
    exit_code: bool = typer.Option(False, "--exit-code", help="Exit 1 if the tree is not clean"),
) -> None:
    """Show the working tree status."""
    from gitpilot.output import json_report, terminal

    handle, cfg = _open(repo, config, format, verbose)
    snapshot = _call(handle.status)
    _emit(
        cfg,
        lambda: json_report.status_to_dict(snapshot),
        lambda: terminal.render_status(snapshot, show_summary=cfg.output.show_summary, console=console),
    )
    if exit_code and not snapshot.is_clean:
        raise typer.Exit(code=1)


# ── show / log ────────────────────────────────────────────────────────────────


@app.command()
def show(
    ref: Optional[str] = typer.Argument(None, help="Commit reference (default: HEAD)"),
    repo: Optional[Path] = _REPO_OPTION,
    config: Optional[str] = _CONFIG_OPTION,
    format: Optional[str] = _FORMAT_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Show one commit."""
    from gitpilot.output import json_report, terminal

    handle, cfg = _open(repo, config, format, verbose)
    commit = _call(lambda: handle.get_commit(ref))
    _emit(
        cfg,
        lambda: json_report.commit_to_dict(commit),
        lambda: terminal.render_commit(commit, console=console),
    )


@app.command()
def log(
    revision: Optional[str] = typer.Argument(None, help="Revision or range (default: HEAD)"),
    max_count: Optional[int] = typer.Option(None, "--max-count", "-n", min=1, help="Limit the number of commits"),
    repo: Optional[Path] = _REPO_OPTION,
    config: Optional[str] = _CONFIG_OPTION,
    format: Optional[str] = _FORMAT_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """List commits."""
    from gitpilot.output import json_report, terminal

    handle, cfg = _open(repo, config, format, verbose)
    commits = _call(lambda: handle.log(max_count, revision))
    _emit(
        cfg,
        lambda: [json_report.commit_to_dict(c) for c in commits],
        lambda: terminal.render_log(commits, console=console),
    )


# ── branches / remotes ────────────────────────────────────────────────────────


@app.command()
def branches(
    repo: Optional[Path] = _REPO_OPTION,
    config: Optional[str] = _CONFIG_OPTION,
    format: Optional[str] = _FORMAT_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """List local branches with their commits and upstreams."""
    from gitpilot.output import json_report, terminal

    handle, cfg = _open(repo, config, format, verbose)
    records = _call(handle.list_branches_info)
    _emit(
        cfg,
        lambda: json_report.branches_to_list(records),
        lambda: terminal.render_branches(records, console=console),
    )


@app.command()
def remotes(
    repo: Optional[Path] = _REPO_OPTION,
    config: Optional[str] = _CONFIG_OPTION,
    format: Optional[str] = _FORMAT_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """List configured remotes."""
    from gitpilot.output import json_report, terminal

    handle, cfg = _open(repo, config, format, verbose)
    names = _call(handle.list_remotes)
    _emit(
        cfg,
        lambda: json_report.remotes_to_list(names),
        lambda: terminal.render_remotes(names, console=console),
    )


# ── diffstat / hash ───────────────────────────────────────────────────────────


@app.command()
def diffstat(
    base: Optional[str] = typer.Argument(None, help="Base revision"),
    head: Optional[str] = typer.Argument(None, help="Head revision"),
    staged: bool = typer.Option(False, "--staged", help="Compare the index with HEAD"),
    repo: Optional[Path] = _REPO_OPTION,
    config: Optional[str] = _CONFIG_OPTION,
    format: Optional[str] = _FORMAT_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Per-file added/removed line counts."""
    from gitpilot.output import json_report, terminal

    handle, cfg = _open(repo, config, format, verbose)
    summary = _call(lambda: handle.diff_stat(base, head, staged=staged))
    _emit(
        cfg,
        lambda: json_report.diff_summary_to_dict(summary),
        lambda: terminal.render_diff_summary(
            summary, show_summary=cfg.output.show_summary, console=console
        ),
    )


@app.command("hash")
def hash_(
    short: bool = typer.Option(False, "--short", help="Abbreviated hash"),
    repo: Optional[Path] = _REPO_OPTION,
    config: Optional[str] = _CONFIG_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Print the hash of HEAD."""
    handle, _ = _open(repo, config, None, verbose)
    print(_call(lambda: handle.get_hash(short)))


# ── init-config ───────────────────────────────────────────────────────────────


@app.command("init-config")
def init_config(
    repo: Optional[Path] = _REPO_OPTION,
) -> None:
    """Generate a starter .gitpilot.toml in the repo root."""
    from gitpilot.config.defaults import DEFAULT_TOML
    from gitpilot.config.loader import CONFIG_FILENAME

    handle, _ = _open(repo, None, None, False)
    config_path = handle.location / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"gitpilot {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """GitPilot — typed, structured views of a git repository."""
