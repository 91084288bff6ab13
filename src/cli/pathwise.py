"""
Pathwise CLI - normalize saved model output from the terminal.

Useful for replaying a captured provider response through the same pipeline
the API uses, e.g. when a model starts answering in a new shape.

Usage:
    pathwise normalize response.txt --schema exam --topic "Computer Networks" --count 5
    pathwise normalize response.json --raw-response --schema quiz --topic React
    pathwise schemas
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich import box
from rich.console import Console
from rich.table import Table

from config import get_settings
from src.llm_output import (
    CallerInputError,
    GenerationParams,
    NormalizedCollection,
    get_schema,
    list_schemas,
    normalize_model_output,
    resolve_redaction_policy,
)

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="pathwise",
    help="Pathwise - recover roadmaps, quizzes and exam papers from LLM output",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB", retention=5)


def _load_model_output(path: Path, raw_response: bool) -> object:
    text = path.read_text(encoding="utf-8", errors="replace")
    if not raw_response:
        return text
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {path} is not a JSON provider response: {e}[/red]")
        raise typer.Exit(1)


def _render_table(collection: NormalizedCollection) -> None:
    if not collection.records:
        console.print("[yellow]No records.[/yellow]")
        return

    columns = list(collection.records[0].keys())
    table = Table(title=f"{collection.schema_name} ({collection.source})", box=box.SIMPLE_HEAD)
    table.add_column("#", style="dim", justify="right")
    for column in columns:
        table.add_column(column, overflow="fold")

    for index, record in enumerate(collection.records, start=1):
        cells = []
        for column in columns:
            value = record.get(column, "")
            cells.append("\n".join(value) if isinstance(value, list) else str(value))
        table.add_row(str(index), *cells)

    console.print(table)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def normalize(
    source: Annotated[Path, typer.Argument(help="File holding the model output")],
    schema: Annotated[str, typer.Option("--schema", "-s", help="roadmap, quiz or exam")] = "exam",
    topic: Annotated[str, typer.Option("--topic", "-t", help="Topic, goal or career")] = "",
    count: Annotated[int | None, typer.Option("--count", "-n", help="Items requested")] = None,
    difficulty: Annotated[str, typer.Option("--difficulty", "-d", help="Difficulty or level")] = "mixed",
    topics: Annotated[str, typer.Option("--topics", help="Comma-separated sub-topics")] = "",
    keep_answers: Annotated[bool, typer.Option("--keep-answers", help="Include correct answers")] = False,
    admin_secret: Annotated[
        str | None, typer.Option("--admin-secret", help="Secret authorizing --keep-answers")
    ] = None,
    raw_response: Annotated[
        bool, typer.Option("--raw-response", help="Treat the file as a JSON provider payload")
    ] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print records as JSON")] = False,
) -> None:
    """Run saved model output through extraction, recovery, normalization and redaction."""
    if not source.exists():
        console.print(f"[red]Error: Source not found: {source}[/red]")
        raise typer.Exit(1)

    try:
        record_schema = get_schema(schema)
        params = GenerationParams.from_request(
            {"topic": topic, "count": count, "difficulty": difficulty, "topics": topics}
        )
        # The quiz answers are part of the practice experience; exam answers need the secret
        policy = resolve_redaction_policy(
            keep_answers,
            admin_secret,
            require_secret=record_schema.name != "quiz_question",
        )
    except CallerInputError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    model_output = _load_model_output(source, raw_response)
    collection = normalize_model_output(model_output, record_schema, params, policy)

    if as_json:
        payload = {"meta": collection.meta(params), "records": collection.records}
        console.print_json(json.dumps(payload, ensure_ascii=False))
        return

    _render_table(collection)
    console.print(
        f"[bold]{collection.count}[/bold]/{collection.requested} records "
        f"from [cyan]{collection.source}[/cyan]"
        + (f", {collection.padded} padded" if collection.padded else "")
    )
    if collection.failures:
        reasons = ", ".join(reason.value for reason in collection.failures)
        console.print(f"[dim]Recovered from: {reasons}[/dim]")


@app.command()
def schemas() -> None:
    """List record schemas with their canonical fields and accepted aliases."""
    for record_schema in list_schemas():
        table = Table(title=record_schema.name, box=box.SIMPLE_HEAD)
        table.add_column("Field", style="cyan")
        table.add_column("Kind")
        table.add_column("Aliases")
        table.add_column("Default")
        for spec in record_schema.fields:
            table.add_row(
                spec.name,
                spec.kind.value,
                ", ".join(spec.aliases) or "-",
                repr(spec.default_value()),
            )
        console.print(table)


# =============================================================================
# Entry Point
# =============================================================================


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output")] = False,
) -> None:
    """
    Pathwise - recover roadmaps, quizzes and exam papers from LLM output.

    \b
    Quick Start:
      pathwise normalize out.txt --schema exam --topic "Operating Systems"
      pathwise schemas
    """
    _configure_logging(verbose)


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
