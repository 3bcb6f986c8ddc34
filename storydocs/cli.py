"""
storydocs CLI - Storybook documentation extraction tool

A command-line tool for reading Storybook projects:
1. Detecting the project's UI framework convention
2. Listing stories from a story index (file or running server)
3. Printing story details and full story documentation as JSON
4. Generating a static JSON API inside a Storybook build
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from storydocs.config import StorydocsSettings
from storydocs.extractors.framework_detector import detect_framework
from storydocs.static_api import StaticApiGenerator, detect_static_dir
from storydocs.tools import StoryTools

app = typer.Typer(
    name="storydocs",
    help="Storybook documentation extraction tool",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable debug logging"),
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _settings(**overrides) -> StorydocsSettings:
    try:
        return StorydocsSettings.from_env(**overrides)
    except ValidationError as e:
        err_console.print(f"[red]❌ Invalid configuration: {e}[/red]")
        raise typer.Exit(1)


def _tools(settings: StorydocsSettings) -> StoryTools:
    index_file = settings.index_file
    if index_file is None and not settings.storybook_url:
        static_dir = detect_static_dir(settings.project_dir)
        if static_dir is not None:
            index_file = static_dir / "index.json"

    return StoryTools(
        settings.project_dir,
        storybook_url=settings.storybook_url,
        index_file=index_file,
        timeout=settings.http_timeout,
    )


def _emit(result: Dict[str, Any]):
    typer.echo(json.dumps(result, indent=2, ensure_ascii=False))
    if not result.get("success"):
        raise typer.Exit(1)


@app.command()
def detect(
    project_dir: Path = typer.Argument(Path("."), help="Storybook project root"),
):
    """Detect the UI framework of a Storybook project."""
    if not project_dir.is_dir():
        err_console.print(f"[red]❌ Project directory not found: {project_dir}[/red]")
        raise typer.Exit(1)

    framework = detect_framework(project_dir)
    typer.echo(framework.value)


@app.command("list")
def list_stories(
    project_dir: Optional[Path] = typer.Option(None, "--project-dir", "-p", help="Storybook project root"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Running Storybook server URL"),
    index_file: Optional[Path] = typer.Option(None, "--index-file", "-i", help="Built index.json"),
    kind: Optional[str] = typer.Option(None, "--kind", "-k", help="Only stories of this kind/title"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result"),
):
    """List the stories of a Storybook project."""
    settings = _settings(project_dir=project_dir, storybook_url=url, index_file=index_file)
    result = asyncio.run(_tools(settings).list_stories(kind))

    if as_json or not result.get("success"):
        _emit(result)
        return

    table = Table(title=f"Stories ({result['count']})")
    table.add_column("ID", style="cyan")
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("Type", style="dim")
    for story in result["stories"]:
        table.add_row(story["id"], story.get("kind") or "", story.get("name") or "", story.get("type") or "")
    console.print(table)


@app.command()
def story(
    story_id: str = typer.Argument(..., help="Story id (e.g. example-button--primary)"),
    project_dir: Optional[Path] = typer.Option(None, "--project-dir", "-p", help="Storybook project root"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Running Storybook server URL"),
    index_file: Optional[Path] = typer.Option(None, "--index-file", "-i", help="Built index.json"),
):
    """Print one story with its args and component docs as JSON."""
    settings = _settings(project_dir=project_dir, storybook_url=url, index_file=index_file)
    _emit(asyncio.run(_tools(settings).get_story(story_id)))


@app.command()
def docs(
    story_id: str = typer.Argument(..., help="Story id (e.g. example-button--primary)"),
    project_dir: Optional[Path] = typer.Option(None, "--project-dir", "-p", help="Storybook project root"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Running Storybook server URL"),
    index_file: Optional[Path] = typer.Option(None, "--index-file", "-i", help="Built index.json"),
):
    """Print the full documentation of a story as JSON."""
    settings = _settings(project_dir=project_dir, storybook_url=url, index_file=index_file)
    _emit(asyncio.run(_tools(settings).get_story_docs(story_id)))


@app.command("generate-api")
def generate_api(
    static_dir: Optional[Path] = typer.Option(
        None,
        "--static",
        "-s",
        help="Storybook build directory (default: auto-detect)",
    ),
    project_dir: Optional[Path] = typer.Option(None, "--project-dir", "-p", help="Storybook project root"),
    num_workers: Optional[int] = typer.Option(None, "--num-workers", "-w", help="Number of parallel workers"),
):
    """Generate static JSON API files inside a Storybook build."""
    settings = _settings(project_dir=project_dir, workers=num_workers)

    target_dir = static_dir or detect_static_dir(settings.project_dir)
    if target_dir is None:
        err_console.print("[red]❌ No Storybook build found.[/red]")
        err_console.print("Build it first, for example: npx storybook build -o storybook-static")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold cyan]Generating static API[/bold cyan]\n"
        f"Build: {target_dir}\n"
        f"Project: {settings.project_dir}\n"
        f"Workers: {settings.workers}",
    ))

    generator = StaticApiGenerator(target_dir, settings.project_dir, num_workers=settings.workers, show_progress=True)
    try:
        result = generator.generate()
    except FileNotFoundError as e:
        err_console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    console.print("\n[bold green]✓ Static API generated[/bold green]")
    console.print(f"   • {result['apiDir']}/index.json")
    console.print(f"   • {result['apiDir']}/stories.json")
    console.print(f"   • {result['apiDir']}/stories/*.json ({result['storyCount']} files)")
    console.print(f"   • {result['apiDir']}/docs/*.json ({result['docsCount']} files)")
    console.print(f"   • {result['apiDir']}/nginx.conf.example")

    if result["failures"]:
        console.print(f"\n[yellow]⚠️  {len(result['failures'])} stories failed[/yellow]")
        for failure in result["failures"]:
            console.print(f"   {failure['story_id']}: {failure['error']}")
        raise typer.Exit(1)


@app.command()
def version():
    """Show version information."""
    from storydocs import __version__

    console.print(f"[bold cyan]storydocs[/bold cyan] v{__version__}")
    console.print("Storybook documentation extraction tool")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
