"""Arithmetic expression grammar built on the Pratt engine.

Supports numbers and symbols, prefix ``+`` and ``-``, assignment with
``=``, the four basic arithmetic operations, sequencing with ``;``,
parentheses for grouping and ``f(x)`` calls.

    a = 1                  (assign a 1)
    a = 10; b = 20; a * b  (sequence (assign a 10) (assign b 20) (* a b))
    10 * 2 + 1             (+ (* 10 2) 1)
    10 * (2 + 1)           (* 10 (+ 2 1))
    -10 + 10               (+ -10 10)

Binary operators are left-associative. ``=`` parses its right-hand side
at its own binding power as well, so ``a = b = 1`` groups as
``(assign (assign a b) 1)``.
"""

from __future__ import annotations

import re
from typing import Iterator

from pygments.token import Name, Number, Operator, Punctuation

from pratt.lexer import Rule
from pratt.parser import ParseContext, Parser
from pratt.tokens import EndToken, Node, Token

UNARY_BP = 70

_INTEGER = re.compile(r"-?\d+")


def _negate(operand: Node | None) -> Node | None:
    if isinstance(operand, str) and _INTEGER.fullmatch(operand):
        return operand[1:] if operand.startswith("-") else f"-{operand}"
    return ("-", operand)


def is_tagged(node: Node | None, label: str) -> bool:
    """Return True if ``node`` is a tuple whose first element is ``label``."""
    return isinstance(node, tuple) and len(node) > 0 and node[0] == label


def statements(node: Node | None) -> Iterator[Node | None]:
    """Yield the statements of ``node``, flattening nested sequences."""
    stack = [node]
    while stack:
        node = stack.pop()
        if is_tagged(node, "sequence"):
            stack.extend(reversed(node[1:]))  # type: ignore[index]
        else:
            yield node


class NumberToken(Token):
    name = "number"
    token_type = Number.Integer

    def nud(self, ctx: ParseContext) -> Node:
        return self.value


class SymbolToken(Token):
    name = "symbol"
    token_type = Name

    def nud(self, ctx: ParseContext) -> Node:
        return self.value


class _BinaryToken(Token):
    token_type = Operator

    def led(self, ctx: ParseContext, left: Node | None) -> Node:
        right = ctx.expression(self.lbp)
        return (self.name, left, right)


class PlusToken(_BinaryToken):
    name = "+"
    lbp = 50

    def nud(self, ctx: ParseContext) -> Node | None:
        return ctx.expression(UNARY_BP)


class MinusToken(_BinaryToken):
    name = "-"
    lbp = 50

    def nud(self, ctx: ParseContext) -> Node | None:
        return _negate(ctx.expression(UNARY_BP))


class MulToken(_BinaryToken):
    name = "*"
    lbp = 60


class DivToken(_BinaryToken):
    name = "/"
    lbp = 60


class AssignToken(Token):
    name = "assign"
    lbp = 20
    token_type = Operator

    def led(self, ctx: ParseContext, left: Node | None) -> Node:
        right = ctx.expression(self.lbp)
        return ("assign", left, right)


class CloseParenToken(Token):
    """Only consumed by ``OpenParenToken``; an unmatched one is an error."""

    name = ")"
    token_type = Punctuation


class SequenceToken(Token):
    name = "sequence"
    lbp = 10
    token_type = Punctuation

    def led(self, ctx: ParseContext, left: Node | None) -> Node:
        # trailing separator: "a;" or "(a;)"
        if isinstance(ctx.token, (EndToken, CloseParenToken)):
            right = None
        else:
            right = ctx.expression(self.lbp)

        if is_tagged(left, "sequence"):
            node = left
        else:
            node = ("sequence", left)
        if right is not None:
            node = node + (right,)
        return node


class OpenParenToken(Token):
    name = "("
    lbp = 80
    token_type = Punctuation

    def nud(self, ctx: ParseContext) -> Node | None:
        inner = ctx.expression(0)
        ctx.expect(CloseParenToken, note="to close the group opened by '('")
        return inner

    def led(self, ctx: ParseContext, left: Node | None) -> Node:
        argument = ctx.expression(0)
        ctx.expect(CloseParenToken, note="to close the argument opened by '('")
        return (left, argument)


# Token kinds by the names used in configuration files.
TOKEN_KINDS: dict[str, type[Token]] = {
    "number": NumberToken,
    "symbol": SymbolToken,
    "plus": PlusToken,
    "minus": MinusToken,
    "mul": MulToken,
    "div": DivToken,
    "open_paren": OpenParenToken,
    "close_paren": CloseParenToken,
    "assign": AssignToken,
    "sequence": SequenceToken,
}

# Order matters: numbers before the symbol rule, which also accepts digits.
RULES: tuple[tuple[str, str], ...] = (
    (r"\s*(\d+)\s*", "number"),
    (r"\s*(\+)\s*", "plus"),
    (r"\s*(-)\s*", "minus"),
    (r"\s*(\*)\s*", "mul"),
    (r"\s*(/)\s*", "div"),
    (r"\s*(\()\s*", "open_paren"),
    (r"\s*(\))\s*", "close_paren"),
    (r"\s*(=)\s*", "assign"),
    (r"\s*(;)\s*", "sequence"),
    (r"\s*([a-zA-Z0-9_]+)\s*", "symbol"),
)


def default_rules() -> list[Rule]:
    return [Rule(pattern, TOKEN_KINDS[kind]) for pattern, kind in RULES]


def arithmetic_parser(*, strict: bool = True) -> Parser:
    """Return a parser configured with the arithmetic grammar."""
    return Parser(default_rules(), strict=strict)
