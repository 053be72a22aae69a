"""Token base classes for the Pratt parser.

A token kind is a ``Token`` subclass. The class attribute ``lbp`` (left
binding power) decides how tightly the token binds to the expression on
its left, so in

    a OP1 b OP2 c

a higher ``lbp`` on ``OP2`` yields ``a OP1 (b OP2 c)`` and a lower one
yields ``(a OP1 b) OP2 c``. An ``lbp`` of 0 never binds and ends the
expression.

Subclasses implement ``nud`` (the token starts an expression), ``led``
(the token follows a parsed left operand) or both. The defaults record a
syntax error and return ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, ClassVar, Union

from pratt.errors import SYNTAX_ERROR

if TYPE_CHECKING:
    from pratt.parser import ParseContext

# An AST value is an atom or a tagged tuple ``(label, operand, ...)``.
Node = Union[str, tuple["Node", ...]]

# Value given to tokens whose pattern captured nothing.
EMPTY_VALUE = "(empty)"


@dataclass(frozen=True)
class Token:
    value: str = ""

    lbp: ClassVar[int] = 0
    name: ClassVar[str] = "(token)"

    def nud(self, ctx: ParseContext) -> Node | None:
        """Handle the token in prefix position."""
        ctx.error(SYNTAX_ERROR, f"unexpected {self.name} ({self.value!r}) in prefix position")
        return None

    def led(self, ctx: ParseContext, left: Node | None) -> Node | None:
        """Handle the token in infix position, after ``left``."""
        ctx.error(SYNTAX_ERROR, f"unexpected {self.name} ({self.value!r}) in infix position")
        return None


@dataclass(frozen=True)
class EndToken(Token):
    """Marks the end of the input. Binds nothing."""

    value: str = "(end)"

    lbp: ClassVar[int] = 0
    name: ClassVar[str] = "(end)"


# Builds a token from the captured text; a Token subclass is one.
TokenFactory = Callable[[str], Token]
