"""Tree-walking evaluator for the arithmetic grammar.

Numbers are integers, ``/`` is true division, and assignments persist in
``Evaluator.variables`` across statements. The only callable in scope is
``echo``.
"""

from __future__ import annotations

import operator
import re
from typing import Any, Callable

from pratt.grammar import is_tagged, statements
from pratt.tokens import Node

_BINARY: dict[str, Callable[[Any, Any], Any]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}

_INTEGER = re.compile(r"-?\d+")


class EvaluationError(ValueError):
    """The tree has no value: it is incomplete or malformed."""


class Evaluator:
    def __init__(self, echo: Callable[[Any], Any] = print) -> None:
        self.builtins: dict[str, Any] = {"echo": echo}
        self.variables: dict[str, Any] = {}

    def run(self, node: Node | None) -> Any:
        """Evaluate each statement of ``node``.

        Returns the value of the last statement, or None when it is an
        assignment.
        """
        value = None
        for stmt in statements(node):
            value = self.value(stmt)
            if is_tagged(stmt, "assign"):
                value = None
        return value

    def value(self, node: Node | None) -> Any:
        """Evaluate one expression, operands before the node itself."""
        results: list[Any] = []
        # (node, operand count or -1 before the operands are queued)
        stack: list[tuple[Node | None, int]] = [(node, -1)]

        while stack:
            node, count = stack.pop()
            if count < 0:
                operands = self._operands(node)
                stack.append((node, len(operands)))
                stack.extend((child, -1) for child in reversed(operands))
                continue

            args = results[len(results) - count:]
            del results[len(results) - count:]
            results.append(self._apply(node, args))

        return results[0]

    def _operands(self, node: Node | None) -> list[Node | None]:
        if node is None:
            raise EvaluationError("cannot evaluate an incomplete expression")
        if isinstance(node, str):
            return []
        if is_tagged(node, "sequence"):
            return list(node[1:])
        if is_tagged(node, "assign") and len(node) == 3:
            self._target(node[1])
            return [node[2]]
        if len(node) == 3 and node[0] in _BINARY:
            return [node[1], node[2]]
        if len(node) == 2:
            # negation ("-", x) or call (callee, argument)
            return list(node[1:]) if node[0] == "-" else list(node)
        raise EvaluationError(f"cannot evaluate {node!r}")

    def _apply(self, node: Node | None, args: list[Any]) -> Any:
        if isinstance(node, str):
            return self._lookup(node)
        if is_tagged(node, "sequence"):
            return args[-1] if args else None
        if is_tagged(node, "assign") and len(node) == 3:  # type: ignore[arg-type]
            self.variables[self._target(node[1])] = args[0]  # type: ignore[index]
            return args[0]
        if len(node) == 3:  # type: ignore[arg-type]
            return _BINARY[node[0]](*args)  # type: ignore[index]
        if node[0] == "-":  # type: ignore[index]
            return operator.neg(args[0])

        callee, argument = args
        if not callable(callee):
            raise TypeError(f"{callee!r} is not callable")
        return callee(argument)

    def _lookup(self, name: str) -> Any:
        if _INTEGER.fullmatch(name):
            return int(name)
        if name in self.variables:
            return self.variables[name]
        if name in self.builtins:
            return self.builtins[name]
        raise NameError(f"name {name!r} is not defined")

    def _target(self, node: Node | None) -> str:
        if isinstance(node, str) and not _INTEGER.fullmatch(node):
            return node
        raise EvaluationError(f"cannot assign to {node!r}")


def evaluate(node: Node | None, echo: Callable[[Any], Any] = print) -> dict[str, Any]:
    """Run ``node`` and return the variables it assigned."""
    evaluator = Evaluator(echo)
    evaluator.run(node)
    return evaluator.variables
