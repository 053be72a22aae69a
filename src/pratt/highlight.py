"""Pygments lexer driven by a parser's rules."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import Lexer
from pygments.token import Error, Text

from pratt.lexer import Rule
from pratt.parser import Parser


class RuleLexer(Lexer):
    """Pygments lexer that applies ``Rule`` objects in registration order.

    The text captured by a rule's group gets the ``token_type`` of the
    token kind (``Text`` if it has none); the surrounding characters the
    pattern consumed are emitted as ``Text``. Input no rule accepts is
    emitted as a single ``Error`` token.
    """

    name = "Pratt rules"
    aliases = ["pratt"]

    def __init__(self, rules: Iterable[Rule], **options: Any) -> None:
        options.setdefault("ensurenl", False)
        options.setdefault("stripnl", False)
        super().__init__(**options)
        self.rules = tuple(rules)

    def get_tokens_unprocessed(self, text: str) -> Iterator[tuple[int, Any, str]]:
        pos = 0
        while pos < len(text):
            for rule in self.rules:
                m = rule.match(text[pos:])
                if m is None:
                    continue
                ttype = getattr(rule.factory, "token_type", Text)
                if rule.pattern.groups and m.start(1) != -1:
                    start, end = m.span(1)
                else:
                    start, end = 0, m.end()
                if start > 0:
                    yield pos, Text, m.group()[:start]
                if end > start:
                    yield pos + start, ttype, m.group()[start:end]
                if m.end() > end:
                    yield pos + end, Text, m.group()[end:]
                pos += m.end()
                break
            else:
                yield pos, Error, text[pos:]
                return


def highlight(parser: Parser, source: str) -> str:
    """Return ``source`` colored for a terminal according to ``parser``."""
    return pygments_highlight(source, RuleLexer(parser.rules), TerminalFormatter())
