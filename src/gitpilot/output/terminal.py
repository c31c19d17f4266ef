"""Rich terminal reporter — tables and colour for each result type."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from gitpilot.git.models import (
    BranchRecord,
    CommitRecord,
    DiffSummary,
    FileStatus,
    StatusSnapshot,
)
from gitpilot.git.types import RemoteName

_STATUS_STYLE = {
    FileStatus.MODIFIED: "yellow",
    FileStatus.ADDED: "green",
    FileStatus.DELETED_WORKING_TREE: "red",
    FileStatus.DELETED_STAGED: "bold red",
    FileStatus.RENAMED: "cyan",
    FileStatus.COPIED: "cyan",
    FileStatus.UNMERGED_CONFLICT: "bold white on red",
    FileStatus.UNTRACKED: "magenta",
    FileStatus.IGNORED: "dim",
    FileStatus.UNMODIFIED: "dim",
}


def _console(console: Optional[Console]) -> Console:
    return console or Console(stderr=True)


def _status_pill(status: FileStatus) -> Text:
    return Text(f" {status.value.upper()} ", style=_STATUS_STYLE.get(status, ""))


def render_status(
    status: StatusSnapshot, *, show_summary: bool = True, console: Optional[Console] = None
) -> None:
    """Print a status snapshot using Rich."""
    console = _console(console)
    branch = str(status.branch) if status.branch else "[italic]detached HEAD[/italic]"
    console.print(f"[bold]On branch[/bold] [cyan]{branch}[/cyan]")
    for flag, label in (
        (status.merging, "merge"),
        (status.rebasing, "rebase"),
        (status.cherry_picking, "cherry-pick"),
    ):
        if flag:
            console.print(f"[bold yellow]⚠ {label} in progress[/bold yellow]")

    if status.files:
        table = Table(show_lines=False, border_style="dim")
        table.add_column("Status", justify="center", width=16)
        table.add_column("Path", style="magenta")
        table.add_column("From", style="dim")
        for entry in status.files:
            table.add_row(_status_pill(entry.status), Text(entry.path), Text(entry.original_path or ""))
        console.print(table)

    if show_summary:
        console.print()
        verdict = "[green]clean[/green]" if status.is_clean else "[yellow]dirty[/yellow]"
        console.print(f"[dim]Working tree:[/dim]  {verdict}")
        console.print(f"[dim]Entries:[/dim]       {len(status.files)}")
        console.print(f"[dim]Untracked:[/dim]     {len(status.untracked)}")
        console.print(f"[dim]Conflicts:[/dim]     {len(status.conflicted)}")


def render_commit(commit: CommitRecord, *, console: Optional[Console] = None) -> None:
    console = _console(console)
    console.print(f"[bold yellow]commit {commit.hash}[/bold yellow] [dim]({commit.short_hash})[/dim]")
    if commit.is_merge:
        console.print(f"Merge:  {' '.join(str(p) for p in commit.parents)}")
    console.print(f"Author: {commit.author_name} <{commit.author_email}>", markup=False)
    console.print(f"Date:   {commit.date:%Y-%m-%d %H:%M:%S %Z}")
    console.print()
    console.print(f"    {commit.message}", markup=False)


def render_log(commits: List[CommitRecord], *, console: Optional[Console] = None) -> None:
    console = _console(console)
    table = Table(border_style="dim")
    table.add_column("Commit", style="yellow", no_wrap=True)
    table.add_column("Date", style="green", no_wrap=True)
    table.add_column("Author", style="cyan")
    table.add_column("Subject")
    for commit in commits:
        table.add_row(
            str(commit.short_hash),
            f"{commit.date:%Y-%m-%d}",
            Text(commit.author_name),
            Text(commit.message),
        )
    console.print(table)


def render_branches(branches: List[BranchRecord], *, console: Optional[Console] = None) -> None:
    console = _console(console)
    table = Table(border_style="dim")
    table.add_column("", width=1)
    table.add_column("Branch", style="cyan")
    table.add_column("Commit", style="yellow", no_wrap=True)
    table.add_column("Upstream", style="magenta")
    for branch in branches:
        table.add_row(
            "[green]*[/green]" if branch.is_head else "",
            str(branch.name),
            str(branch.commit)[:12],
            branch.upstream or "",
        )
    console.print(table)


def render_remotes(remotes: List[RemoteName], *, console: Optional[Console] = None) -> None:
    console = _console(console)
    for remote in remotes:
        console.print(f"  [cyan]{remote}[/cyan]")


def render_diff_summary(
    summary: DiffSummary, *, show_summary: bool = True, console: Optional[Console] = None
) -> None:
    console = _console(console)
    if not summary.files:
        console.print("[dim]No changes.[/dim]")
        return
    table = Table(border_style="dim")
    table.add_column("Added", justify="right", style="green")
    table.add_column("Removed", justify="right", style="red")
    table.add_column("Path", style="magenta")
    for stat in summary.files:
        table.add_row(f"+{stat.added}", f"-{stat.removed}", Text(stat.path))
    console.print(table)
    if show_summary:
        console.print(
            f"[dim]{len(summary.files)} file(s) changed,[/dim] "
            f"[green]{summary.total_added} insertion(s)[/green], "
            f"[red]{summary.total_removed} deletion(s)[/red]"
        )
