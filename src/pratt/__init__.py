"""A top-down operator precedence (Pratt) parsing engine."""

from pratt.errors import GrammarError, ParseError
from pratt.lexer import Lexer, Rule, tokenize
from pratt.parser import ParseContext, Parser, ParseResult
from pratt.tokens import EndToken, Token

__version__ = "0.1.0"

__all__ = [
    "EndToken",
    "GrammarError",
    "Lexer",
    "ParseContext",
    "ParseError",
    "ParseResult",
    "Parser",
    "Rule",
    "Token",
    "tokenize",
]
