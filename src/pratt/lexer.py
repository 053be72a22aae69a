"""Rule-driven tokenizer.

A ``Rule`` pairs a regular expression with a token factory. The lexer
tries the rules in registration order at the current position and the
first one that matches wins, so a specific pattern (a keyword) has to be
registered before a general one (an identifier) that also matches it.

Whitespace is not skipped here: each pattern consumes the insignificant
characters around its token, e.g. ``\\s*(\\d+)\\s*``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from pratt.errors import UNTOKENIZABLE, Diagnostic, GrammarError, Severity, has_errors
from pratt.tokens import EMPTY_VALUE, EndToken, Token, TokenFactory


class Rule:
    """A pattern and the token kind it produces."""

    def __init__(self, pattern: str | re.Pattern[str], factory: TokenFactory) -> None:
        try:
            self.pattern = re.compile(pattern)
        except re.error as e:
            raise GrammarError(f"invalid pattern {pattern!r}: {e}") from e
        self.factory = factory

    def __repr__(self) -> str:
        kind = getattr(self.factory, "__name__", repr(self.factory))
        return f"Rule({self.pattern.pattern!r}, {kind})"

    def match(self, text: str) -> re.Match[str] | None:
        """Match the pattern at the start of ``text``.

        Raises GrammarError if the pattern matches without consuming
        anything, since the lexer could never make progress.
        """
        m = self.pattern.match(text)
        if m is not None and m.end() == 0:
            raise GrammarError(f"rule {self!r} matched the empty string at {text[:20]!r}")
        return m

    def accept(self, text: str) -> tuple[Token, int] | None:
        """Return the token for the prefix of ``text`` and its length."""
        m = self.match(text)
        if m is None:
            return None
        value = m.group(1) if self.pattern.groups else None
        if value is None:
            value = EMPTY_VALUE
        return self.factory(value), m.end()


@dataclass
class LexResult:
    tokens: list[Token]
    leftover: str = ""
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not has_errors(self.diagnostics)


class Lexer:
    """Splits input into tokens with an ordered list of rules."""

    def __init__(self, rules: Iterable[Rule]) -> None:
        self.rules = tuple(rules)

    def lex(self, source: str) -> LexResult:
        """Tokenize ``source``.

        Stops at the first position no rule accepts; the rest of the input
        is returned as ``leftover`` together with an E100 diagnostic. The
        token list always ends with exactly one ``EndToken``.
        """
        tokens: list[Token] = []
        diagnostics: list[Diagnostic] = []
        pos = 0

        while pos < len(source):
            remaining = source[pos:]
            for rule in self.rules:
                accepted = rule.accept(remaining)
                if accepted is not None:
                    token, length = accepted
                    tokens.append(token)
                    pos += length
                    break
            else:
                diagnostics.append(
                    Diagnostic(
                        severity=Severity.ERROR,
                        code=UNTOKENIZABLE,
                        message=f"unable to tokenize {remaining!r}",
                        notes=[f"none of the {len(self.rules)} rule(s) match here"],
                    )
                )
                break

        tokens.append(EndToken())
        return LexResult(tokens, source[pos:], diagnostics)


def tokenize(rules: Iterable[Rule], source: str) -> LexResult:
    return Lexer(rules).lex(source)
