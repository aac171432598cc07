"""
Recipe Box - CLI Entry Point.

Usage:
    recipebox import URL          Extract a recipe from a web page
    recipebox import URL --json   Same, as JSON
    recipebox parse LINE...       Split ingredient lines into amount and name
    recipebox scale AMOUNT X      Rescale an amount by a serving multiplier
    recipebox serve               Start the web API
    recipebox --help              Show help
"""

import json
import logging
from dataclasses import asdict

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="recipebox",
    help="Recipe Box - import, parse and scale recipes.",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging for every command."""
    from recipebox.config import settings

    logging.basicConfig(
        level="DEBUG" if verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@app.command("import")
def import_url(
    url: str = typer.Argument(..., help="Recipe page URL"),
    as_json: bool = typer.Option(False, "--json", help="Print the extracted recipe as JSON"),
) -> None:
    """Extract a recipe from a web page."""
    from recipebox.recipe_import import extract_recipe, parse_ingredient

    with console.status("Fetching recipe..."):
        result = extract_recipe(url)

    if not result.success or result.recipe is None:
        console.print(f"[red]{result.error}[/red]")
        if result.fallback_message:
            console.print(f"[dim]{result.fallback_message}[/dim]")
        raise typer.Exit(1)

    recipe = result.recipe
    if as_json:
        typer.echo(json.dumps(asdict(recipe), indent=2))
        return

    times = ", ".join(
        f"{label} {minutes} min"
        for label, minutes in (
            ("prep", recipe.prep_time_minutes),
            ("cook", recipe.cook_time_minutes),
            ("total", recipe.total_time_minutes),
        )
        if minutes is not None
    )
    console.print(
        Panel.fit(
            f"[bold green]{recipe.title}[/bold green]\n"
            f"[dim]{recipe.source_url}[/dim]\n"
            f"Servings: {recipe.servings or '?'}   {times}",
            title=f"Imported via {result.method.value}",
            border_style="green",
        )
    )

    table = Table("Amount", "Ingredient")
    for line in recipe.ingredient_lines:
        parsed = parse_ingredient(line)
        table.add_row(parsed.amount or "", parsed.name)
    console.print(table)

    for number, step in enumerate(recipe.instruction_steps, start=1):
        console.print(f"[bold]{number}.[/bold] {step}")

    for image_url in recipe.image_urls:
        console.print(f"[dim]image: {image_url}[/dim]")


@app.command()
def parse(
    lines: list[str] = typer.Argument(..., help="Ingredient lines"),
) -> None:
    """Split ingredient lines into amount and name."""
    from recipebox.recipe_import import parse_ingredient

    table = Table("Line", "Amount", "Name")
    for line in lines:
        parsed = parse_ingredient(line)
        table.add_row(line, parsed.amount or "[dim]-[/dim]", parsed.name)
    console.print(table)


@app.command()
def scale(
    amount: str = typer.Argument(..., help='Amount such as "1 1/2 cups"'),
    multiplier: str = typer.Argument(..., help='Serving multiplier such as 2, 0.5 or "1/3"'),
) -> None:
    """Rescale an amount by a serving multiplier."""
    from recipebox.tools.scaling import scale_amount

    try:
        console.print(scale_amount(amount, multiplier))
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from recipebox import __version__

    console.print(f"Recipe Box version {__version__}")


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the web API server."""
    import os

    import uvicorn

    # Hosting platforms set PORT
    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]Recipe Box API[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "recipebox.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
