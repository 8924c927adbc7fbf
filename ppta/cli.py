"""Command-line interface for the Positive Psychology Text Analyser."""

from __future__ import annotations

import asyncio
import dataclasses
import json
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ppta import __version__
from ppta.analysis.matcher import MatchStrategy
from ppta.analysis.models import AnalysisResult, FamilyResult
from ppta.analysis.scoring import Encoding
from ppta.config import load_settings
from ppta.errors import EmptyInputError, PptaError
from ppta.lexica import get_lexicon_spec, load_registry
from ppta.lexica.store import LexiconStore
from ppta.logging import setup_logging
from ppta.models import AnalysisConfig, NgramMode, PermaVariant

app = typer.Typer(
    name="ppta",
    help="Score text against PERMA well-being and related psychological lexica.",
    no_args_is_help=True,
)
console = Console(width=min(100, Console().width))

_FAMILY_TITLES = {
    "perma": "PERMA",
    "prospection": "Prospection",
    "affect": "Affect",
    "optimism": "Optimism",
    "big_five": "Big Five",
    "dark_triad": "Dark Triad",
}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ppta {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Score text against PERMA well-being and related psychological lexica."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _read_input(source: str | None, text: str | None) -> str:
    """Text from --text, a file path, or stdin ('-')."""
    if text is not None:
        return text
    if source is None:
        raise EmptyInputError("No input: pass a file, '-' for stdin, or --text.")
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        console.print(f"[red]No such file: {escape(source)}[/red]")
        raise typer.Exit(1)
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        _fail(f"{source} is not UTF-8 text")


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


def _format_score(value: float | None) -> str:
    return "[dim]n/a[/dim]" if value is None else f"{value:.4f}"


def _format_percent(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.2f}%"


def _family_table(family: FamilyResult, *, show_scores: bool = True) -> Table:
    table = Table(title=_FAMILY_TITLES.get(family.name, family.name), title_justify="left")
    table.add_column("Category")
    table.add_column("Matches", justify="right")
    if show_scores:
        table.add_column("Score", justify="right")
    table.add_column("Words")

    categories = list(dict.fromkeys([*family.scores, *family.matches.categories]))
    for category in categories:
        row = [category, str(family.counts.get(category, 0))]
        if show_scores:
            row.append(_format_score(family.scores.get(category)))
        row.append(escape(", ".join(family.printable.get(category, []))))
        table.add_row(*row)
    return table


def _print_report(result: AnalysisResult, config: AnalysisConfig) -> None:
    for warning in result.warnings:
        console.print(f"[bold yellow]!![/bold yellow] {escape(warning)}")

    console.print(
        f"[bold]Tokens[/bold] {result.word_count}  "
        f"[bold]Words[/bold] {result.true_word_count}  "
        f"[dim]lexicon: {config.variant.lexicon_id}[/dim]"
    )

    summary = result.perma_summary
    if summary is not None:
        console.print(
            f"Matches {summary.total} ({_format_percent(summary.match_percent)})  "
            f"[green]positive {summary.positive}[/green]  "
            f"[red]negative {summary.negative}[/red]  "
            f"neutral {summary.neutral} ({_format_percent(summary.neutral_percent)})"
        )
        console.print(summary.ratio_statement)

    data_driven = get_lexicon_spec(config.variant.lexicon_id).data_driven
    for family in result.families:
        console.print()
        console.print(_family_table(family, show_scores=family.name != "perma" or data_driven))

    if result.demographics is not None:
        demo = result.demographics
        console.print()
        age = "n/a" if demo.age is None else f"{demo.age:.2f}"
        console.print(f"[bold]Predicted age[/bold] {age}")
        console.print(
            f"[bold]Predicted gender[/bold] {demo.gender_label} "
            f"[dim]({_format_score(demo.gender_score)})[/dim]"
        )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def analyze(
    source: Annotated[
        str | None,
        typer.Argument(help="Text file to analyse, or '-' to read stdin."),
    ] = None,
    text: Annotated[
        str | None,
        typer.Option("--text", "-t", help="Analyse this text instead of a file."),
    ] = None,
    variant: Annotated[
        PermaVariant | None,
        typer.Option("--lexicon", "-l", help="PERMA lexicon variant."),
    ] = None,
    min_weight: Annotated[
        float | None,
        typer.Option("--min-weight", help="Lowest PERMA weight kept (data-driven lexica only)."),
    ] = None,
    max_weight: Annotated[
        float | None,
        typer.Option("--max-weight", help="Highest PERMA weight kept (data-driven lexica only)."),
    ] = None,
    encoding: Annotated[
        Encoding | None,
        typer.Option("--encoding", "-e", help="Score encoding."),
    ] = None,
    prospection: Annotated[bool, typer.Option("--prospection", help="Analyse time orientation.")] = False,
    affect: Annotated[bool, typer.Option("--affect", help="Analyse affect and intensity.")] = False,
    optimism: Annotated[
        bool, typer.Option("--optimism", help="Analyse optimism (needs --prospection and --affect)."),
    ] = False,
    big_five: Annotated[bool, typer.Option("--big-five", help="Analyse Big Five traits.")] = False,
    dark_triad: Annotated[bool, typer.Option("--dark-triad", help="Analyse Dark Triad traits.")] = False,
    age_gender: Annotated[bool, typer.Option("--age-gender", help="Predict age and gender.")] = False,
    ngrams: Annotated[
        NgramMode | None,
        typer.Option("--ngrams", "-n", help="Add bigrams, or bigrams and trigrams, before matching."),
    ] = None,
    count_ngrams: Annotated[
        bool, typer.Option("--count-ngrams", help="Include n-grams in the word count."),
    ] = False,
    no_clean: Annotated[
        bool, typer.Option("--no-clean", help="Skip HTML-entity decoding and punctuation cleanup."),
    ] = False,
    strategy: Annotated[
        MatchStrategy,
        typer.Option("--strategy", help="How lexicon entries are matched."),
    ] = MatchStrategy.EXACT_TOKEN,
    lexicon_source: Annotated[
        str | None,
        typer.Option("--lexica", help="Lexicon directory or base URL."),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Directory for the log file and token export."),
    ] = None,
    export_tokens: Annotated[
        bool, typer.Option("--export-tokens", help="Write the token list to the output directory."),
    ] = False,
    sort_tokens: Annotated[
        bool, typer.Option("--sort-tokens", help="Sort the exported tokens alphabetically."),
    ] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
) -> None:
    """Analyse a text and print counts, scores and matched words."""
    settings = load_settings(
        lexicon_source=lexicon_source,
        variant=variant,
        encoding=encoding,
        ngrams=ngrams,
        output_dir=output_dir,
    )
    setup_logging(output_dir=output_dir, verbose=verbose)

    try:
        config = AnalysisConfig(
            variant=settings.variant,
            min_weight=min_weight,
            max_weight=max_weight,
            encoding=settings.encoding,
            prospection=prospection,
            affect=affect,
            optimism=optimism,
            big_five=big_five,
            dark_triad=dark_triad,
            age_gender=age_gender,
            ngrams=settings.ngrams,
            ngrams_in_word_count=count_ngrams,
            clean_text=settings.clean_text and not no_clean,
            sort_tokens=sort_tokens,
            strategy=strategy,
        )
    except ValidationError as exc:
        _fail("; ".join(err["msg"] for err in exc.errors()))

    from ppta.export import write_tokens
    from ppta.pipeline import run_analysis

    store = LexiconStore.from_settings(settings)
    try:
        raw = _read_input(source, text)
        result = asyncio.run(run_analysis(raw, config, store))
    except PptaError as exc:
        _fail(str(exc))

    if export_tokens:
        settings.output_dir.mkdir(parents=True, exist_ok=True)
        path = write_tokens(result.tokens, settings.output_dir, sort=config.sort_tokens)
        console.print(f"[dim]Tokens written to {path}[/dim]")

    if as_json:
        typer.echo(json.dumps(dataclasses.asdict(result), indent=2))
    else:
        _print_report(result, config)


# British English alias for analyze
analyse = app.command(name="analyse", hidden=True)(analyze)


@app.command()
def tokens(
    source: Annotated[
        str | None,
        typer.Argument(help="Text file to tokenise, or '-' to read stdin."),
    ] = None,
    text: Annotated[
        str | None,
        typer.Option("--text", "-t", help="Tokenise this text instead of a file."),
    ] = None,
    sort: Annotated[bool, typer.Option("--sort", help="Sort tokens alphabetically.")] = False,
    no_clean: Annotated[
        bool, typer.Option("--no-clean", help="Skip HTML-entity decoding and punctuation cleanup."),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to this file (or directory) instead of stdout."),
    ] = None,
) -> None:
    """Print the token list for a text, one token per line."""
    from ppta.export import format_tokens, write_tokens
    from ppta.pipeline import prepare_text
    from ppta.tokenize import tokenize

    settings = load_settings()
    try:
        normalised = prepare_text(_read_input(source, text))
    except PptaError as exc:
        _fail(str(exc))

    token_list = tokenize(normalised, clean=settings.clean_text and not no_clean)
    if output is not None:
        path = write_tokens(token_list, output, sort=sort)
        console.print(f"[dim]{len(token_list)} tokens written to {path}[/dim]")
    else:
        typer.echo(format_tokens(token_list, sort=sort), nl=False)


@app.command()
def lexica() -> None:
    """List the lexica the analyser knows about."""
    registry = load_registry()
    table = Table(title=f"Lexicon registry v{registry.version}", title_justify="left")
    table.add_column("ID")
    table.add_column("Family")
    table.add_column("Data-driven")
    table.add_column("Weight range")
    table.add_column("File")
    for spec in registry.lexica.values():
        weight_range = "" if spec.weight_range is None else f"{spec.weight_range[0]} … {spec.weight_range[1]}"
        table.add_row(
            spec.id,
            spec.family,
            "yes" if spec.data_driven else "",
            weight_range,
            spec.path,
        )
    console.print(table)
