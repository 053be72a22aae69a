"""Consumers of the parse tree: s-expression printing and Python output.

The parser returns plain values, atoms (str) or tagged tuples
``(label, operand, ...)``, so none of this is needed to use it. The
formatters here follow the labels of the arithmetic grammar:

    ("sequence", stmt, ...)     variadic
    ("assign", target, value)
    (op, left, right)           op in + - * /
    ("-", operand)              negation
    (callee, argument)          call

Trees are walked with an explicit stack, so nesting depth is not bounded
by the interpreter's recursion limit.
"""

from __future__ import annotations

import keyword
import re

from pratt.grammar import is_tagged, statements
from pratt.tokens import Node

# Operator precedence table (higher binds tighter)
_BINARY: dict[str, int] = {
    "+": 1, "-": 1,
    "*": 2, "/": 2,
}
_UNARY = 3
_ATOM = 4

_INTEGER = re.compile(r"-?\d+")

# Rendering of a failed subtree in s-expressions.
ERROR_ATOM = "<error>"

# Stack marker for the end of a tagged sequence.
_CLOSE = object()


class FormatError(ValueError):
    """The tree cannot be expressed in the target form."""


def to_sexp(node: Node | None) -> str:
    """Render ``node`` as a symbolic expression.

        to_sexp(("+", "1", "2"))               # '(+ 1 2)'
        to_sexp(("*", ("+", "2", "3"), "12"))  # '(* (+ 2 3) 12)'
    """
    out: list[str] = []
    stack: list[object] = [node]
    after_open = True

    while stack:
        item = stack.pop()
        if item is _CLOSE:
            out.append(")")
            after_open = False
            continue
        if not after_open:
            out.append(" ")
        if isinstance(item, tuple):
            out.append("(")
            stack.append(_CLOSE)
            stack.extend(reversed(item))
            after_open = True
        else:
            out.append(ERROR_ATOM if item is None else str(item))
            after_open = False

    return "".join(out)


class PythonFormatter:
    """Compile a parse tree to Python source, one statement per line.

        ("sequence", ("assign", "minute", "60"), ("echo", ("*", "3", "minute")))

    becomes::

        minute = 60
        echo(3 * minute)
    """

    # ── Public API ─────────────────────────────────────────────

    def format(self, node: Node | None) -> str:
        return "\n".join(self.format_statement(stmt) for stmt in statements(node))

    def format_statement(self, node: Node | None) -> str:
        if is_tagged(node, "assign") and len(node) == 3:  # type: ignore[arg-type]
            _, target, value = node  # type: ignore[misc]
            return f"{self._target(target)} = {self._expr(value)}"
        return self._expr(node)

    # ── Expressions ────────────────────────────────────────────

    def _expr(self, node: Node | None) -> str:
        """Emit ``node`` in post-order: operands first, then the node itself."""
        results: list[str] = []
        # (node, minimum precedence of its context, operand count or -1)
        stack: list[tuple[Node | None, int, int]] = [(node, 0, -1)]

        while stack:
            node, min_prec, count = stack.pop()
            if count < 0:
                operands = self._operands(node)
                stack.append((node, min_prec, len(operands)))
                stack.extend((child, prec, -1) for child, prec in reversed(operands))
                continue

            parts = results[len(results) - count:]
            del results[len(results) - count:]
            text = self._combine(node, parts)
            if _precedence(node) < min_prec:
                text = f"({text})"
            results.append(text)

        return results[0]

    def _operands(self, node: Node | None) -> list[tuple[Node | None, int]]:
        """Return the operands of ``node`` with the precedence each needs."""
        if node is None:
            raise FormatError("cannot format an incomplete expression")
        if isinstance(node, str):
            return []

        if is_tagged(node, "sequence"):
            raise FormatError("a sequence cannot be used as a value")

        if is_tagged(node, "assign") and len(node) == 3:
            self._target(node[1])
            return [(node[2], 0)]

        if len(node) == 3 and node[0] in _BINARY:
            prec = _BINARY[node[0]]  # type: ignore[index]
            # left-associative: an equal operator on the right needs parens
            return [(node[1], prec), (node[2], prec + 1)]

        if len(node) == 2 and node[0] == "-":
            return [(node[1], _UNARY)]

        if len(node) == 2:
            return [(node[0], _ATOM), (node[1], 0)]

        raise FormatError(f"unsupported node {to_sexp(node)}")

    def _combine(self, node: Node | None, parts: list[str]) -> str:
        if isinstance(node, str):
            return self._atom(node)
        if is_tagged(node, "assign") and len(node) == 3:  # type: ignore[arg-type]
            return f"({self._target(node[1])} := {parts[0]})"  # type: ignore[index]
        if len(node) == 3:  # type: ignore[arg-type]
            return f"{parts[0]} {node[0]} {parts[1]}"  # type: ignore[index]
        if node[0] == "-":  # type: ignore[index]
            return f"-{parts[0]}"
        return f"{parts[0]}({parts[1]})"

    def _atom(self, atom: str) -> str:
        if _INTEGER.fullmatch(atom):
            return str(int(atom))
        if atom.isidentifier() and not keyword.iskeyword(atom):
            return atom
        raise FormatError(f"{atom!r} is not a valid Python name")

    def _target(self, node: Node | None) -> str:
        if isinstance(node, str) and not _INTEGER.fullmatch(node):
            return self._atom(node)
        raise FormatError(f"cannot assign to {to_sexp(node)}")


def _precedence(node: Node | None) -> int:
    if isinstance(node, tuple):
        if len(node) == 3 and node[0] in _BINARY:
            return _BINARY[node[0]]  # type: ignore[index]
        if len(node) == 2 and node[0] == "-":
            return _UNARY
    return _ATOM
