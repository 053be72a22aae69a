"""Tests for s-expression and Python output."""

from __future__ import annotations

import sys

import pytest

from pratt.formatter import FormatError, PythonFormatter, to_sexp

# well past the interpreter recursion limit
DEEP = sys.getrecursionlimit() * 5


def sexp(parser, source: str) -> str:
    return to_sexp(parser.parse(source))


def python(parser, source: str) -> str:
    return PythonFormatter().format(parser.parse(source))


class TestSexp:
    def test_atom(self):
        assert to_sexp("a") == "a"

    def test_nested(self):
        assert to_sexp(("*", ("+", "2", "3"), "12")) == "(* (+ 2 3) 12)"

    def test_failed_subtree(self):
        assert to_sexp(("+", "1", None)) == "(+ 1 <error>)"

    def test_from_parser(self, parser):
        assert sexp(parser, "1 + 2") == "(+ 1 2)"
        assert sexp(parser, "1 + 2 * 3") == "(+ 1 (* 2 3))"
        assert sexp(parser, "a = 1") == "(assign a 1)"
        assert sexp(parser, "1 + 2; 3 + 4") == "(sequence (+ 1 2) (+ 3 4))"
        assert sexp(parser, "(1 + 2) * 3") == "(* (+ 1 2) 3)"

    def test_right_deep_tree(self):
        node = "x"
        for _ in range(DEEP):
            node = ("-", node)
        assert to_sexp(node) == "(- " * DEEP + "x" + ")" * DEEP

    def test_left_deep_tree_from_parser(self, parser):
        node = parser.parse(" + ".join(["1"] * DEEP))
        out = to_sexp(node)
        assert out.startswith("(+ " * (DEEP - 1) + "1 1)")
        assert out.count("(") == DEEP - 1

    def test_empty_tuple(self):
        assert to_sexp(()) == "()"


class TestPythonFormatter:
    def test_statements(self, parser):
        assert python(parser, "a = 1; b = 2") == "a = 1\nb = 2"

    def test_call(self, parser):
        assert python(parser, "echo(1 + 2)") == "echo(1 + 2)"

    def test_keeps_precedence(self, parser):
        assert python(parser, "1 + 2 * 3") == "1 + 2 * 3"
        assert python(parser, "(1 + 2) * 3") == "(1 + 2) * 3"

    def test_left_associativity(self, parser):
        assert python(parser, "(1 - 2) - 3") == "1 - 2 - 3"
        assert python(parser, "1 - (2 - 3)") == "1 - (2 - 3)"
        assert python(parser, "8 / (4 * 2)") == "8 / (4 * 2)"

    def test_negation(self, parser):
        assert python(parser, "-(a + b)") == "-(a + b)"
        assert python(parser, "-a * b") == "-a * b"
        assert python(parser, "-10 + 10") == "-10 + 10"

    def test_assignment_as_value(self, parser):
        assert python(parser, "b = (a = 1)") == "b = (a := 1)"

    def test_leading_zeros(self, parser):
        assert python(parser, "007") == "7"

    def test_call_on_expression(self):
        assert PythonFormatter().format((("+", "f", "g"), "x")) == "(f + g)(x)"

    def test_cannot_assign_to_number(self, parser):
        with pytest.raises(FormatError, match="cannot assign"):
            python(parser, "1 = 2")

    def test_sequence_as_argument(self, parser):
        with pytest.raises(FormatError, match="sequence"):
            python(parser, "f(a; b)")

    def test_keyword_name(self, parser):
        with pytest.raises(FormatError, match="not a valid Python name"):
            python(parser, "if")

    def test_incomplete_tree(self, lenient):
        with pytest.raises(FormatError, match="incomplete"):
            PythonFormatter().format(lenient.parse("1 +"))


    def test_left_deep_tree_from_parser(self, parser):
        node = parser.parse(" + ".join(["1"] * DEEP))
        assert PythonFormatter().format(node) == " + ".join(["1"] * DEEP)

    def test_right_deep_tree(self):
        node = "1"
        for _ in range(DEEP):
            node = ("+", "1", node)
        out = PythonFormatter().format(node)
        assert out == "1 + (" * (DEEP - 1) + "1 + 1" + ")" * (DEEP - 1)

    def test_deep_negation(self):
        node = "x"
        for _ in range(DEEP):
            node = ("-", node)
        assert PythonFormatter().format(node) == "-" * DEEP + "x"
