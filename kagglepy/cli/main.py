"""kagglepy CLI - Main commands."""
import asyncio
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

from kagglepy.core.exceptions import KaggleException

app = typer.Typer(
    name="kagglepy",
    help="Kaggle API command line client",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def make_client(config_file: Optional[Path], **kwargs):
    """Build a client from the config file, or the environment when it is set."""
    from kagglepy import KaggleClient, Authentication

    if config_file is not None:
        auth = Authentication.config_file(config_file)
    elif os.environ.get("KAGGLE_USERNAME") and os.environ.get("KAGGLE_KEY"):
        auth = Authentication.env()
    else:
        auth = Authentication.default()
    return KaggleClient(auth, **kwargs)


def fail(error: Exception):
    console.print(f"[red]{error}[/red]")
    raise typer.Exit(1)


ConfigOption = typer.Option(None, "--config", "-c", help="Path to kaggle.json")

# Commands touching local files also report OSError and ValueError
FILE_COMMAND_ERRORS = (KaggleException, OSError, ValueError)


@app.command()
def competitions(
    search: str = typer.Option("", "--search", "-s", help="Search term"),
    category: str = typer.Option("", "--category", help="Competition category"),
    sort_by: str = typer.Option("", "--sort-by", help="Sort order"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    config_file: Optional[Path] = ConfigOption,
):
    """List competitions."""
    from kagglepy import CompetitionsList

    async def do_list():
        try:
            async with make_client(config_file) as kaggle:
                result = await kaggle.competitions_list(
                    CompetitionsList(category=category, sort_by=sort_by, page=page, search=search)
                )
        except KaggleException as e:
            fail(e)

        table = Table()
        table.add_column("Ref", style="cyan")
        table.add_column("Deadline")
        table.add_column("Category")
        table.add_column("Reward", justify="right")
        table.add_column("Teams", justify="right")

        for competition in result or []:
            table.add_row(
                str(competition.get("ref", "")),
                str(competition.get("deadline", "")),
                str(competition.get("category", "")),
                str(competition.get("reward", "")),
                str(competition.get("teamCount", "")),
            )
        console.print(table)

    run_async(do_list())


@app.command()
def files(
    competition: str = typer.Argument(..., help="Competition id"),
    config_file: Optional[Path] = ConfigOption,
):
    """List the data files of a competition."""
    async def do_files():
        try:
            async with make_client(config_file) as kaggle:
                result = await kaggle.competitions_data_list_files(competition)
        except KaggleException as e:
            fail(e)

        table = Table()
        table.add_column("Name")
        table.add_column("Size", justify="right")
        table.add_column("Created", style="dim")
        for item in result:
            size = item.get("totalBytes")
            table.add_row(
                str(item.get("name", "")),
                f"{size:,}" if isinstance(size, int) else "-",
                str(item.get("creationDate", "")),
            )
        console.print(table)

    run_async(do_files())


@app.command()
def leaderboard(
    competition: str = typer.Argument(..., help="Competition id"),
    download: bool = typer.Option(False, "--download", "-d", help="Download the full leaderboard"),
    path: Optional[Path] = typer.Option(None, "--path", "-p", help="Download target"),
    config_file: Optional[Path] = ConfigOption,
):
    """Show or download a competition leaderboard."""
    async def do_leaderboard():
        try:
            async with make_client(config_file) as kaggle:
                if download:
                    target = await kaggle.competition_download_leaderboard(competition, path)
                    console.print(f"[green]Downloaded:[/green] {target}")
                    return
                result = await kaggle.competition_view_leaderboard(competition)
        except FILE_COMMAND_ERRORS as e:
            fail(e)

        entries = result.get("submissions", []) if isinstance(result, dict) else result
        table = Table()
        table.add_column("Team", style="cyan")
        table.add_column("Date", style="dim")
        table.add_column("Score", justify="right")
        for entry in entries or []:
            table.add_row(
                str(entry.get("teamName", "")),
                str(entry.get("submissionDate", "")),
                str(entry.get("score", "")),
            )
        console.print(table)

    run_async(do_leaderboard())


@app.command()
def submit(
    competition: str = typer.Argument(..., help="Competition id"),
    file_path: Path = typer.Argument(..., help="Submission file", exists=True),
    message: str = typer.Option(..., "--message", "-m", help="Submission description"),
    config_file: Optional[Path] = ConfigOption,
):
    """Submit a file to a competition."""
    from kagglepy import UploadProgress

    async def do_submit():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console
        ) as progress:
            task = progress.add_task(f"Uploading {file_path.name}", total=100)

            def on_progress(p: UploadProgress):
                progress.update(task, completed=p.percentage)

            try:
                async with make_client(config_file, progress_callback=on_progress) as kaggle:
                    result = await kaggle.competition_submit(file_path, competition, message)
            except FILE_COMMAND_ERRORS as e:
                fail(e)

        console.print(f"[green]Submitted:[/green] {file_path.name}")
        if isinstance(result, dict) and result.get("message"):
            console.print(result["message"])

    run_async(do_submit())


@app.command("dataset-create")
def dataset_create(
    folder: Path = typer.Argument(..., help="Dataset folder with dataset-metadata.json", exists=True),
    public: bool = typer.Option(False, "--public", help="Create a public dataset"),
    archive: str = typer.Option("zip", "--archive", "-a", help="Archive mode for sub-directories (zip|tar)"),
    keep_tabular: bool = typer.Option(False, "--keep-tabular", help="Do not convert tabular files to CSV"),
    config_file: Optional[Path] = ConfigOption,
):
    """Create a new dataset from a folder."""
    from kagglepy import ArchiveMode

    try:
        mode = ArchiveMode.parse(archive)
    except ValueError as e:
        fail(e)

    async def do_create():
        try:
            async with make_client(config_file) as kaggle:
                result = await kaggle.dataset_create_new(
                    folder, public=public, convert_to_csv=not keep_tabular, archive_mode=mode
                )
        except FILE_COMMAND_ERRORS as e:
            fail(e)

        if result.get("error"):
            console.print(f"[red]Dataset creation failed: {result['error']}[/red]")
            raise typer.Exit(1)
        console.print(f"[green]Dataset created:[/green] {result.get('url', '')}")

    run_async(do_create())


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
