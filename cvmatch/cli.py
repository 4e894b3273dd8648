"""
cvmatch Command Line Interface

Runs the matching engine over requirement and profile items read from a
JSON file and prints the results.
"""

import json
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="cvmatch",
    help="Semantic matching of job requirements against CV profile items",
    add_completion=False,
)
console = Console()

QUALITY_COLORS = {
    "excellent": "green",
    "good": "blue",
    "fair": "yellow",
    "weak": "red",
    "none": "dim",
}


@app.command()
def version():
    """Show application version."""
    from cvmatch import __version__, __app_name__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show configuration."""
    from cvmatch.utils.config import get_settings
    from cvmatch.utils.logger import sanitize_for_logging

    settings = get_settings()
    embedding = sanitize_for_logging(settings.embedding.model_dump())

    table = Table(title="cvmatch Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Embedding Provider", embedding["provider"])
    if embedding["provider"] == "http":
        table.add_row("Embedding Endpoint", embedding["api_url"])
        table.add_row("Embedding Model", embedding["api_model"])
        table.add_row("API Key", str(embedding["api_key"] or "-"))
    else:
        table.add_row("Embedding Model", embedding["model_name"])
        table.add_row("ML Device", embedding["device"])
    table.add_row("Embedding Dimension", str(embedding["dimension"]))
    table.add_row("Embedding Cache", f"{settings.cache.enabled} ({settings.cache.max_entries} entries)")
    table.add_row("Candidate Limit", str(settings.matching.candidate_limit))
    table.add_row("Min Match Score", str(settings.matching.min_match_score))
    table.add_row("Vector Store", str(settings.vector_store.persist_directory))
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def warmup():
    """Load the embedding provider and embed a test sentence."""
    from rich.progress import Progress, SpinnerColumn, TextColumn

    from cvmatch.ml.embeddings import create_provider

    console.print("[yellow]Warming up embedding provider...[/yellow]")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Loading embedding provider...", total=None)
        try:
            provider = create_provider()
            vector = provider.embed("test warmup sentence")
            progress.update(
                task,
                description=f"[green]✓[/green] Embedding provider ready ({len(vector)} dimensions)",
            )
        except Exception as e:
            progress.update(task, description=f"[red]✗[/red] Embedding provider failed: {e}")
            raise typer.Exit(1)


@app.command()
def match(
    input_file: Path = typer.Argument(..., help="JSON file with owner_id, requirements and profile_items"),
    variants: bool = typer.Option(False, "--variants", "-v", help="Also build and rank CV variants"),
    indexed: bool = typer.Option(False, "--indexed", help="Use indexed search in the in-memory store"),
):
    """Match job requirements against profile items from a JSON file."""
    from cvmatch.core.matching import create_matching_engine
    from cvmatch.data.models import ProfileItem, RequirementItem
    from cvmatch.data.stores import InMemoryComponentStore
    from cvmatch.utils.exceptions import CVMatchError
    from cvmatch.utils.logger import setup_logging

    setup_logging()

    if not input_file.exists():
        console.print(f"[red]Error: File does not exist: {input_file}[/red]")
        raise typer.Exit(1)

    try:
        payload = json.loads(input_file.read_text(encoding="utf-8"))
        owner_id = payload.get("owner_id", "default")
        requirements = [RequirementItem.model_validate(r) for r in payload.get("requirements", [])]
        profile_items = [
            ProfileItem.model_validate({"owner_id": owner_id, **item})
            for item in payload.get("profile_items", [])
        ]
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Error: Invalid input file: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[yellow]Matching {len(requirements)} requirement(s) against "
        f"{len(profile_items)} profile item(s)...[/yellow]"
    )

    store = InMemoryComponentStore(profile_items, indexed=indexed)
    try:
        engine = create_matching_engine(store=store)
        matches = engine.match_all(requirements, owner_id)
        aggregate = engine.score_and_suggest(matches)
    except CVMatchError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    _print_matches(matches)
    _print_aggregate(aggregate)

    if variants:
        analysis = engine.suggest_focus_areas(requirements, matches)
        ranked = engine.build_variants(matches, analysis.suggested_focus_areas)
        _print_variants(engine.compare_variants(ranked))


def _print_matches(matches) -> None:
    table = Table(title="Requirement Matches")
    table.add_column("Requirement", style="cyan")
    table.add_column("Required", justify="center")
    table.add_column("Best Match")
    table.add_column("Score", justify="right")
    table.add_column("Quality", justify="center")

    for result in matches:
        color = QUALITY_COLORS[result.quality_tier.value]
        table.add_row(
            result.requirement.title,
            "✓" if result.requirement.is_required else "",
            result.profile_item.title if result.profile_item else "[dim]-[/dim]",
            str(result.score),
            f"[{color}]{result.quality_tier.value.upper()}[/{color}]",
        )

    console.print(table)


def _print_aggregate(aggregate) -> None:
    console.print(f"\n[bold]Overall Score:[/bold] [green]{aggregate.overall}[/green]/100")

    table = Table(title="Category Scores")
    table.add_column("Category", style="cyan")
    table.add_column("Score", justify="right")
    for name, score in aggregate.by_category.model_dump().items():
        table.add_row(name.capitalize(), str(score))
    console.print(table)

    if aggregate.unmatched:
        console.print(f"\n[yellow]Unmatched requirements ({len(aggregate.unmatched)}):[/yellow]")
        for requirement in aggregate.unmatched:
            console.print(f"  • {requirement.title}")

    if aggregate.suggestions:
        console.print("\n[bold]Suggestions:[/bold]")
        for suggestion in aggregate.suggestions:
            console.print(f"  • {suggestion}")


def _print_variants(comparisons) -> None:
    table = Table(title="CV Variants")
    table.add_column("Rank", style="dim", width=4)
    table.add_column("Variant", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Items", justify="right")
    table.add_column("Pros")
    table.add_column("Cons")

    for comparison in comparisons:
        variant = comparison.variant
        table.add_row(
            str(comparison.rank),
            variant.title,
            str(variant.score),
            str(variant.selected_items.count()),
            "\n".join(comparison.pros),
            "\n".join(comparison.cons),
        )

    console.print(table)


if __name__ == "__main__":
    app()
