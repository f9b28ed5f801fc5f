"""Command line interface for lopper."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print
from rich.console import Console
from rich.markup import escape

from lopper import __version__
from lopper.config import RunConfig
from lopper.git import GitError, RemoteRepo
from lopper.logging_config import get_logger, setup_logging

app = typer.Typer(
    help="Delete all remote branches except a protected one.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)
console = Console()
logger = get_logger(__name__)


def get_repo(path: Path, remote: str, protected: str) -> RemoteRepo:
    """Get git repository instance."""
    try:
        return RemoteRepo(path, remote, protected)
    except GitError as err:
        print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(code=1) from err


def confirm_deletion(count: int) -> bool:
    """Ask the user to type 'yes' before anything is deleted."""
    console.print(f"[yellow]This will permanently delete {count} remote branch(es).[/yellow]")
    try:
        reply = input("Are you sure you want to continue? (yes/no): ")
    except EOFError:
        reply = ""
    console.print()
    return reply.strip().lower() == "yes"


def version_callback(value: bool) -> None:
    if value:
        print(f"lopper {__version__}")
        raise typer.Exit()


@app.command()
def prune(
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview which branches would be deleted without making changes"),
    force: bool = typer.Option(False, "--force", help="Skip confirmation prompt and delete branches immediately"),
    remote: str = typer.Option("origin", "--remote", "-r", help="Remote to delete branches from"),
    protect: str = typer.Option("main", "--protect", "-p", help="Branch that is never deleted"),
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Show debug information"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Delete every branch on the remote except the protected one."""
    setup_logging(verbose=verbose, debug=debug)
    try:
        config = RunConfig(dry_run=dry_run, force=force, remote=remote, protected=protect, path=path)
    except ValueError as err:
        raise typer.BadParameter(str(err)) from err
    logger.debug("Run configuration: %s", config)

    repo = get_repo(config.path, config.remote, config.protected)
    protected = escape(config.protected)

    console.print(f"[blue]=== Delete Non-{protected} Branches ===[/blue]\n")
    console.print("[yellow]Fetching remote branches...[/yellow]")
    try:
        branches = repo.get_branches_to_delete()
    except GitError as err:
        print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(code=1) from err

    if not branches:
        console.print(f"[green]✓ No non-{protected} branches found. Nothing to delete.[/green]")
        return

    count = len(branches)
    console.print(f"[yellow]Found {count} branch(es) to delete:[/yellow]")
    for branch in branches:
        console.print(f"  - {escape(branch)}")
    console.print()

    if config.dry_run:
        console.print(f"[blue]\\[DRY RUN] Would delete {count} branch(es)[/blue]")
        console.print("[green]✓ Dry run complete. No branches were deleted.[/green]")
        return

    if not config.force and not confirm_deletion(count):
        console.print("[yellow]Aborted. No branches were deleted.[/yellow]")
        return

    console.print("[yellow]Deleting branches...[/yellow]")
    tally = repo.delete_branches(
        branches,
        on_start=lambda branch: console.print(f"  Deleting {escape(branch)}... ", end=""),
        on_result=lambda _, ok: console.print("[green]✓[/green]" if ok else "[red]✗ (failed)[/red]"),
    )

    console.print()
    console.print("[green]✓ Branch deletion complete[/green]")
    console.print(f"  Deleted: {tally.succeeded} branch(es)")
    if tally.failed:
        console.print(f"  [red]Failed: {tally.failed} branch(es)[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
