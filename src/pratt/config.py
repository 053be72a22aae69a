"""TOML config loading for pratt.toml.

Rules are an array of tables, so their order in the file is the order
they are tried by the lexer::

    [parser]
    strict = true

    [[rules]]
    pattern = '\\s*(\\d+)\\s*'
    token = "number"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from pratt.errors import GrammarError
from pratt.grammar import TOKEN_KINDS, default_rules
from pratt.lexer import Rule
from pratt.parser import Parser
from pratt.tokens import Token

CONFIG_NAME = "pratt.toml"


@dataclass
class RuleConfig:
    pattern: str
    token: str


@dataclass
class ParserConfig:
    strict: bool = True


@dataclass
class OutputConfig:
    color: bool = True


@dataclass
class PrattConfig:
    parser: ParserConfig = field(default_factory=ParserConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    rules: list[RuleConfig] = field(default_factory=list)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find pratt.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> PrattConfig:
    """Parse a pratt.toml file into a PrattConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = PrattConfig()

    if "parser" in data:
        config.parser = ParserConfig(
            strict=data["parser"].get("strict", True),
        )

    if "output" in data:
        config.output = OutputConfig(
            color=data["output"].get("color", True),
        )

    for i, entry in enumerate(data.get("rules", [])):
        try:
            config.rules.append(RuleConfig(pattern=entry["pattern"], token=entry["token"]))
        except (KeyError, TypeError) as e:
            raise GrammarError(f"{path}: rule #{i + 1} needs 'pattern' and 'token'") from e

    return config


def build_parser(
    config: PrattConfig, kinds: dict[str, type[Token]] | None = None,
) -> Parser:
    """Create a parser from ``config``; no rules means the arithmetic grammar."""
    kinds = TOKEN_KINDS if kinds is None else kinds
    if not config.rules:
        return Parser(default_rules(), strict=config.parser.strict)

    parser = Parser(strict=config.parser.strict)
    for rule in config.rules:
        if rule.token not in kinds:
            known = ", ".join(sorted(kinds))
            raise GrammarError(f"unknown token kind {rule.token!r} (known: {known})")
        parser.add_rule(Rule(rule.pattern, kinds[rule.token]))
    return parser
