"""Typer CLI for forkify (search, show, bookmarks, upload)."""

from __future__ import annotations

import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from dotenv import load_dotenv
# load .env immediately so subsequent imports (which read settings at import time)
# pick up values from the .env file
load_dotenv()

# Configure top-level logging early so other modules pick it up.
import logging
from forkify.settings import settings

log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
handlers = [logging.StreamHandler()]
if settings.LOG_FILE:
    handlers.append(logging.FileHandler(settings.LOG_FILE))
logging.basicConfig(
    level=log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    handlers=handlers,
)

# Quiet noisy third-party loggers while keeping our app logs
logging.getLogger("urllib3").setLevel(logging.WARNING)

from forkify.ingest.fetch import Fetcher
from forkify.models.recipe_schema import Recipe
from forkify.settings import validate_required
from forkify.state import RecipeState
from forkify.storage import SqliteStore

app = typer.Typer()
console = Console()


def build_state(require_key: bool = True) -> RecipeState:
    """Composition root: wire settings, fetcher and bookmark store together.

    Commands that only touch the local bookmarks pass require_key=False.
    """
    if require_key:
        validate_required()
    fetcher = Fetcher(timeout=settings.TIMEOUT_SEC)
    store = SqliteStore(settings.BOOKMARKS_DB)
    return RecipeState.from_settings(fetcher, store, settings)


def _fmt(value: Optional[float]) -> str:
    return "" if value is None else f"{value:g}"


def _print_recipe(recipe: Recipe) -> None:
    mark = " [yellow]★[/yellow]" if recipe.bookmarked else ""
    console.print(f"[bold]{recipe.title}[/bold]{mark}")
    console.print(f"by {recipe.publisher} | {_fmt(recipe.cooking_time)} min | {_fmt(recipe.servings)} servings")
    for ing in recipe.ingredients:
        console.print(f"  - {' '.join(p for p in (_fmt(ing.quantity), ing.unit, ing.description) if p)}")
    if recipe.source_url:
        console.print(f"Directions: {recipe.source_url}")


@app.command()
def search(query: str, page: int = 1):
    """Search recipes and print one page of results."""
    try:
        state = build_state()
        asyncio.run(state.load_search_results(query))
        results = state.get_search_results_page(page)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title=f"{query!r} page {page}/{state.search_page_count()}")
    table.add_column("id")
    table.add_column("title")
    table.add_column("publisher")
    for item in results:
        table.add_row(item.id, item.title, item.publisher)
    console.print(table)


@app.command()
def show(id: str, servings: Optional[float] = None):
    """Print a recipe, optionally rescaled to a number of servings."""
    try:
        state = build_state()
        asyncio.run(state.load_recipe(id))
        if servings is not None:
            state.update_servings(servings)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    _print_recipe(state.state.recipe)


@app.command()
def bookmarks():
    """List bookmarked recipes."""
    try:
        state = build_state(require_key=False)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    if not state.bookmarks:
        console.print("No bookmarks yet. Find a nice recipe and bookmark it :)")
        return
    for bookmark in state.bookmarks:
        console.print(f"{bookmark.id}  {bookmark.title} ({bookmark.publisher})")


@app.command()
def bookmark(id: str):
    """Load a recipe and add it to the bookmarks."""
    try:
        state = build_state()
        asyncio.run(state.load_recipe(id))
        if state.state.recipe.bookmarked:
            console.print(f"{id} is already bookmarked.")
            return
        state.add_bookmark(state.state.recipe)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"Bookmarked {state.state.recipe.title}.")


@app.command()
def unbookmark(id: str):
    """Remove a recipe from the bookmarks."""
    try:
        state = build_state(require_key=False)
        state.delete_bookmark(id)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"Removed bookmark {id}.")


@app.command("clear-bookmarks")
def clear_bookmarks():
    """Delete the persisted bookmarks."""
    try:
        state = build_state(require_key=False)
        state.clear_bookmarks()
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print("Bookmarks cleared.")


@app.command()
def upload(
    title: str = typer.Option(...),
    source_url: str = typer.Option(...),
    image: str = typer.Option(...),
    publisher: str = typer.Option(...),
    cooking_time: str = typer.Option(...),
    servings: str = typer.Option(...),
    ingredient: List[str] = typer.Option([], help="'quantity,unit,description'; repeatable"),
):
    """Upload a new recipe; it becomes bookmarked."""
    form = {
        "title": title,
        "sourceUrl": source_url,
        "image": image,
        "publisher": publisher,
        "cookingTime": cooking_time,
        "servings": servings,
    }
    for n, value in enumerate(ingredient, start=1):
        form[f"ingredient{n}"] = value
    try:
        state = build_state()
        asyncio.run(state.upload_recipe(form))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print("Recipe was successfully uploaded :)")
    _print_recipe(state.state.recipe)


if __name__ == "__main__":
    app()
