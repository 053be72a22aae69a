"""Top-down operator precedence (Pratt) parser.

The parser owns an ordered list of lexer rules. Each ``parse`` call
tokenizes the input and runs ``ParseContext.expression(0)``; the shape
of the result is decided entirely by the ``nud``/``led`` hooks of the
token kinds the rules produce.

Example::

    parser = Parser()
    parser.add_rule(Rule(r"\\s*(if)\\b\\s*", IfToken))
    parser.add_rule(Rule(r"\\s*(\\w+)\\s*", IdentifierToken))
    parser.parse("if a")

With the rules added in the reverse order ``IfToken`` would never be
produced, because the identifier rule also accepts ``if``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from pratt.errors import (
    EXPECTED_TOKEN,
    TRAILING_INPUT,
    Diagnostic,
    ParseError,
    Severity,
    has_errors,
)
from pratt.lexer import Lexer, LexResult, Rule
from pratt.tokens import EndToken, Node, Token


class ParseContext:
    """State of a single parse: the token stream and the lookahead.

    Token hooks receive the context and call ``expression`` to parse
    their operands.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._stream = iter(tokens)
        self.diagnostics: list[Diagnostic] = []
        self.token: Token = self._next()

    def _next(self) -> Token:
        tok = next(self._stream, None)
        return tok if tok is not None else EndToken()

    def advance(self) -> Token:
        """Consume the lookahead and return it."""
        tok = self.token
        self.token = self._next()
        return tok

    def at_end(self) -> bool:
        return isinstance(self.token, EndToken)

    def expression(self, rbp: int = 0) -> Node | None:
        """Parse an expression binding tokens whose ``lbp`` exceeds ``rbp``.

        A left-associative operator passes its own ``lbp`` when parsing its
        right operand; a right-associative one passes something lower.
        """
        t = self.advance()
        left = t.nud(self)

        while rbp < self.token.lbp:
            t = self.advance()
            left = t.led(self, left)

        return left

    def expect(self, kind: type[Token], note: str | None = None) -> Token | None:
        """Consume the lookahead if it is a ``kind`` token, else report it.

        ``note`` is attached to the diagnostic, e.g. what the token closes.
        """
        if isinstance(self.token, kind):
            return self.advance()
        tok = self.token
        self.error(
            EXPECTED_TOKEN,
            f"expected {kind.name}, got {tok.name} ({tok.value!r})",
            notes=[note] if note else [],
        )
        return None

    def error(self, code: str, message: str, notes: list[str] | None = None) -> None:
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR, code=code, message=message,
                notes=list(notes or []),
            )
        )


@dataclass
class ParseResult:
    value: Node | None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    leftover: str = ""

    @property
    def ok(self) -> bool:
        return not has_errors(self.diagnostics)


class Parser:
    """Tokenizes and parses input with an ordered list of rules.

    The parser only holds configuration; every call gets its own
    ``ParseContext``, so one instance can serve any number of parses.
    """

    def __init__(self, rules: Iterable[Rule] = (), *, strict: bool = True) -> None:
        self._rules: list[Rule] = list(rules)
        self.strict = strict

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules)

    def add_rule(self, rule: Rule) -> Parser:
        """Append ``rule``; it is tried after every rule added before it."""
        self._rules.append(rule)
        return self

    def tokenize(self, source: str) -> LexResult:
        return Lexer(self._rules).lex(source)

    def parse_result(self, source: str) -> ParseResult:
        """Parse ``source`` without raising on syntax problems.

        Input after an untokenizable position is dropped and the tokens
        before it are parsed; a failed hook leaves ``None`` in the tree.
        """
        lexed = self.tokenize(source)
        ctx = ParseContext(lexed.tokens)
        value = ctx.expression(0)

        if not ctx.at_end():
            tok = ctx.token
            ctx.error(TRAILING_INPUT, f"unexpected {tok.name} ({tok.value!r}) after expression")

        return ParseResult(value, lexed.diagnostics + ctx.diagnostics, lexed.leftover)

    def parse(self, source: str) -> Node | None:
        """Parse ``source`` and return the tree built by the token hooks.

        Raises ParseError when anything was reported, unless the parser
        was created with ``strict=False``.
        """
        result = self.parse_result(source)
        if self.strict and not result.ok:
            raise ParseError(result.diagnostics)
        return result.value
