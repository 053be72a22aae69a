"""Pratt parser CLI."""

from __future__ import annotations

import tomllib
from pathlib import Path

import click

from pratt import __version__
from pratt.config import PrattConfig, build_parser, find_config, load_config
from pratt.errors import DiagnosticRenderer, GrammarError
from pratt.evaluator import EvaluationError, Evaluator
from pratt.formatter import FormatError, PythonFormatter, to_sexp
from pratt.parser import Parser
from pratt.tokens import Node


def _load_config(config_file: str | None) -> PrattConfig:
    try:
        if config_file is not None:
            return load_config(Path(config_file))
        try:
            path = find_config()
        except FileNotFoundError:
            return PrattConfig()
        return load_config(path)
    except (GrammarError, tomllib.TOMLDecodeError) as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)


def _build_parser(config: PrattConfig) -> Parser:
    try:
        return build_parser(config)
    except GrammarError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)


def _parse(config: PrattConfig, source: str) -> Node | None:
    """Parse source, echoing diagnostics. Exits on errors in strict mode."""
    parser = _build_parser(config)
    try:
        result = parser.parse_result(source)
    except GrammarError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)
    except RecursionError:
        click.echo("error: expression is nested too deeply", err=True)
        raise SystemExit(1)

    renderer = DiagnosticRenderer(color=config.output.color)
    for diag in result.diagnostics:
        click.echo(renderer.render(diag), err=True)
    if parser.strict and not result.ok:
        raise SystemExit(1)
    return result.value


@click.group()
@click.version_option(__version__, prog_name="pratt")
@click.option(
    "--config", "config_file", default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Read rules and settings from this pratt.toml.",
)
@click.pass_context
def main(ctx: click.Context, config_file: str | None) -> None:
    """Top-down operator precedence parser for arithmetic expressions."""
    ctx.obj = _load_config(config_file)


@main.command()
@click.argument("expr")
@click.pass_obj
def parse(config: PrattConfig, expr: str) -> None:
    """Print EXPR as a symbolic expression."""
    click.echo(to_sexp(_parse(config, expr)))


@main.command(name="compile")
@click.argument("expr")
@click.pass_obj
def compile_cmd(config: PrattConfig, expr: str) -> None:
    """Print EXPR compiled to Python."""
    node = _parse(config, expr)
    try:
        click.echo(PythonFormatter().format(node))
    except FormatError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)


@main.command(name="eval")
@click.argument("expr")
@click.pass_obj
def eval_cmd(config: PrattConfig, expr: str) -> None:
    """Run EXPR and print the value of its last expression.

    echo(x) prints x.
    """
    node = _parse(config, expr)
    try:
        value = Evaluator(echo=click.echo).run(node)
    except (EvaluationError, ArithmeticError, NameError, TypeError) as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)
    if value is not None:
        click.echo(value)


@main.command()
@click.argument("expr")
@click.option("--highlight", "use_highlight", is_flag=True, help="Print EXPR syntax-highlighted.")
@click.pass_obj
def tokens(config: PrattConfig, expr: str, use_highlight: bool) -> None:
    """Print the tokens of EXPR, one per line."""
    parser = _build_parser(config)

    try:
        if use_highlight:
            from pratt.highlight import highlight

            click.echo(highlight(parser, expr), nl=False)
            return
        result = parser.tokenize(expr)
    except GrammarError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    for tok in result.tokens:
        click.echo(f"{tok.name:<10} {tok.value!r}")

    renderer = DiagnosticRenderer(color=config.output.color)
    for diag in result.diagnostics:
        click.echo(renderer.render(diag), err=True)
    if not result.ok:
        raise SystemExit(1)
