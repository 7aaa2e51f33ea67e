"""
Command line interface for IdeaPress.
"""

from typing import List, Optional

import typer
from pydantic import ValidationError
from rich import print
from rich.markup import escape
from rich.table import Table

from ideapress.exceptions import (
    DuplicateIdeaError,
    IdeaPressError,
    NoUnusedIdeasError,
    PublicationError,
)
from ideapress.factory import create_pipeline
from ideapress.utils.config import config
from ideapress.utils.logger import logger

app = typer.Typer(help="Manage the blog idea pool and publish the next post.")


def _print_conflicts(error: DuplicateIdeaError):
    print(f"[bold red]Similar idea already exists[/bold red] (threshold {error.result.threshold})")
    for conflict in error.result.conflicts:
        print(f"  [yellow]{conflict.similarity:.3f}[/yellow]  {escape(conflict.title)}")


def _fail(message: str, code: int = 1):
    print(f"[bold red]{escape(message)}[/bold red]")
    raise typer.Exit(code=code)


def _open_pipeline():
    try:
        return create_pipeline()
    except (IdeaPressError, ValueError) as e:
        logger.error(f"Error starting pipeline: {e}")
        _fail(str(e))


@app.command()
def add(
    title: str,
    description: str,
    tag: List[str] = typer.Option(..., "--tag", "-t", help="Topic tag, repeat for up to 5"),
):
    """
    Add a new idea to the pool, unless a near-duplicate already exists.
    """
    pipeline = _open_pipeline()
    try:
        idea = pipeline.add_idea({"title": title, "description": description, "tags": tag})
    except ValidationError as e:
        _fail(f"Invalid idea: {e}")
    except DuplicateIdeaError as e:
        _print_conflicts(e)
        raise typer.Exit(code=1)
    except IdeaPressError as e:
        logger.error(f"Error adding idea: {e}")
        _fail(str(e))
    print(f"[bold green]Added idea[/bold green] {idea.id}: {escape(idea.title)}")


@app.command("list")
def list_ideas(unused: bool = typer.Option(False, "--unused", help="Only show unused ideas")):
    """
    List the ideas in the pool.
    """
    pipeline = _open_pipeline()
    try:
        ideas = pipeline.list_ideas(unused_only=unused)
    except IdeaPressError as e:
        logger.error(f"Error listing ideas: {e}")
        _fail(str(e))
    if not ideas:
        print("No ideas found.")
        return

    table = Table("ID", "Title", "Tags", "Created", "Used")
    for idea in ideas:
        table.add_row(
            idea.id,
            escape(idea.title),
            ", ".join(idea.tags),
            idea.created_at.strftime("%Y-%m-%d"),
            idea.used_at.strftime("%Y-%m-%d") if idea.used_at else "-",
        )
    print(table)


@app.command()
def delete(idea_id: str):
    """
    Delete an idea by id.
    """
    pipeline = _open_pipeline()
    try:
        pipeline.delete_idea(idea_id)
    except IdeaPressError as e:
        logger.error(f"Error deleting idea {idea_id}: {e}")
        _fail(str(e))
    print(f"Deleted idea {idea_id}")


@app.command()
def select():
    """
    Show which idea would be published next, without publishing it.
    """
    pipeline = _open_pipeline()
    try:
        idea = pipeline.select_next()
    except NoUnusedIdeasError:
        print("Nothing to publish: every idea has been used.")
        return
    except IdeaPressError as e:
        logger.error(f"Error selecting next idea: {e}")
        _fail(str(e))
    print(f"[bold]{escape(idea.title)}[/bold] ({idea.id})")
    print(escape(idea.description))


@app.command()
def publish(
    platform: Optional[List[str]] = typer.Option(None, "--platform", "-p", help="devto or hashnode, repeatable"),
    draft: bool = typer.Option(False, "--draft", help="Publish as draft"),
):
    """
    Select the next idea, generate the article and publish it.
    """
    pipeline = _open_pipeline()
    try:
        outcome = pipeline.publish_next(platforms=platform or None, is_draft=draft)
    except NoUnusedIdeasError:
        print("Nothing to publish: every idea has been used.")
        return
    except PublicationError as e:
        for result in e.results:
            print(f"  [red]{result.platform}[/red]: {escape(result.error or '')}")
        _fail(str(e))
    except (IdeaPressError, ValidationError) as e:
        logger.error(f"Error in publish run: {e}")
        _fail(str(e))

    print(f"[bold green]Published[/bold green] {escape(outcome.title)} ({outcome.idea_id})")
    for result in outcome.results:
        status = "[green]ok[/green]" if result.success else f"[red]failed[/red] {escape(result.error or '')}"
        print(f"  {result.platform}: {status}")


@app.command("import-ideas")
def import_ideas(path: Optional[str] = typer.Argument(None, help="YAML file, defaults to IDEAS_FILE")):
    """
    Bulk-add ideas from a YAML file, skipping near-duplicates.
    """
    requests_ = config.load_ideas(path)
    if not requests_:
        print("No ideas to import.")
        return

    pipeline = _open_pipeline()
    try:
        added, rejected = pipeline.import_ideas(requests_)
    except (IdeaPressError, ValidationError) as e:
        logger.error(f"Error importing ideas: {e}")
        _fail(str(e))
    print(f"[bold green]Imported {len(added)} ideas[/bold green]")
    for title, result in rejected:
        closest = result.conflicts[0].title if result.conflicts else "?"
        print(f"  [yellow]skipped[/yellow] {escape(title)} (similar to '{escape(closest)}', {result.max_score:.3f})")


@app.command()
def stats():
    """
    Show pool size and usage.
    """
    pipeline = _open_pipeline()
    try:
        ideas = pipeline.list_ideas()
    except IdeaPressError as e:
        logger.error(f"Error reading pool stats: {e}")
        _fail(str(e))
    used = sum(1 for idea in ideas if idea.used)
    print(f"Total ideas: {len(ideas)}")
    print(f"Used: {used}")
    print(f"Unused: {len(ideas) - used}")
    print(f"Similarity threshold: {pipeline.gate.threshold}")
