"""Tests for the pratt CLI, config and error rendering."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from pratt.cli import main
from pratt.config import PrattConfig, build_parser, find_config, load_config
from pratt.errors import (
    Diagnostic,
    DiagnosticRenderer,
    GrammarError,
    ParseError,
    Severity,
)
from pratt.grammar import NumberToken, PlusToken


@pytest.fixture
def runner(tmp_path, monkeypatch):
    # keep config discovery away from any pratt.toml above the test cwd
    monkeypatch.chdir(tmp_path)
    return CliRunner()


@pytest.fixture
def lenient_config(tmp_path):
    toml = tmp_path / "pratt.toml"
    toml.write_text("[parser]\nstrict = false\n[output]\ncolor = false\n")
    return toml


@pytest.fixture
def numbers_config(tmp_path):
    """Only numbers and +, in that order."""
    toml = tmp_path / "pratt.toml"
    toml.write_text(
        "[output]\ncolor = false\n"
        "[[rules]]\npattern = '\\s*(\\d+)\\s*'\ntoken = \"number\"\n"
        "[[rules]]\npattern = '\\s*(\\+)\\s*'\ntoken = \"plus\"\n"
    )
    return toml


# --- CLI tests ---


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "parse" in result.output
        assert "compile" in result.output
        assert "eval" in result.output
        assert "tokens" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_parse(self, runner):
        result = runner.invoke(main, ["parse", "1 + 2 * 3"])
        assert result.exit_code == 0
        assert result.output == "(+ 1 (* 2 3))\n"

    def test_parse_error(self, runner):
        result = runner.invoke(main, ["parse", "(1 + 2"])
        assert result.exit_code == 1
        assert "error[E201]" in result.output
        assert "= note: to close the group opened by '('" in result.output

    def test_parse_long_sum(self, runner):
        result = runner.invoke(main, ["parse", " + ".join(["1"] * 3000)])
        assert result.exit_code == 0
        assert result.output.startswith("(+ (+ ")

    def test_parse_nested_too_deeply(self, runner):
        expr = "(" * 5000 + "1" + ")" * 5000
        result = runner.invoke(main, ["parse", expr])
        assert result.exit_code == 1
        assert "nested too deeply" in result.output

    def test_compile(self, runner):
        result = runner.invoke(main, ["compile", "a = 1; b = 2"])
        assert result.exit_code == 0
        assert result.output == "a = 1\nb = 2\n"

    def test_compile_error(self, runner):
        result = runner.invoke(main, ["compile", "1 = 2"])
        assert result.exit_code == 1
        assert "cannot assign" in result.output

    def test_eval_echo(self, runner):
        result = runner.invoke(main, ["eval", "echo(1 + 2)"])
        assert result.exit_code == 0
        assert result.output == "3\n"

    def test_eval_value(self, runner):
        result = runner.invoke(main, ["eval", "a = 10; b = 20; a * b"])
        assert result.exit_code == 0
        assert result.output == "200\n"

    def test_eval_runtime_error(self, runner):
        result = runner.invoke(main, ["eval", "1 / 0"])
        assert result.exit_code == 1
        assert "division by zero" in result.output

    def test_eval_unknown_name(self, runner):
        result = runner.invoke(main, ["eval", "x + 1"])
        assert result.exit_code == 1
        assert "'x' is not defined" in result.output

    def test_eval_trailing_assignment_prints_nothing(self, runner):
        result = runner.invoke(main, ["eval", "a = 1"])
        assert result.exit_code == 0
        assert result.output == ""

    def test_tokens(self, runner):
        result = runner.invoke(main, ["tokens", "1 + x"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 4
        assert lines[0].split() == ["number", "'1'"]
        assert lines[-1].split() == ["(end)", "'(end)'"]

    def test_tokens_untokenizable(self, runner):
        result = runner.invoke(main, ["tokens", "1 $"])
        assert result.exit_code == 1
        assert "E100" in result.output

    def test_tokens_highlight(self, runner):
        result = runner.invoke(main, ["tokens", "--highlight", "1 + x"], color=True)
        assert result.exit_code == 0
        assert "\x1b[" in result.output


class TestCLIConfig:
    def test_discovered_lenient_config(self, runner, lenient_config):
        result = runner.invoke(main, ["parse", ")"])
        assert result.exit_code == 0
        assert "error[E200]" in result.output
        assert "<error>" in result.output

    def test_explicit_config(self, runner, numbers_config):
        result = runner.invoke(main, ["--config", str(numbers_config), "parse", "1+2"])
        assert result.exit_code == 0
        assert result.output == "(+ 1 2)\n"

    def test_rules_from_config(self, runner, numbers_config):
        result = runner.invoke(main, ["parse", "a"])
        assert result.exit_code == 1
        assert "error[E100]: unable to tokenize 'a'" in result.output

    def test_unknown_token_kind(self, runner, tmp_path):
        (tmp_path / "pratt.toml").write_text("[[rules]]\npattern = 'x'\ntoken = \"nope\"\n")
        result = runner.invoke(main, ["parse", "x"])
        assert result.exit_code == 1
        assert "unknown token kind 'nope'" in result.output

    def test_invalid_toml(self, runner, tmp_path):
        (tmp_path / "pratt.toml").write_text("[parser\n")
        result = runner.invoke(main, ["parse", "1"])
        assert result.exit_code == 1
        assert "error:" in result.output


# --- Config tests ---


class TestConfig:
    def test_defaults(self):
        config = PrattConfig()
        assert config.parser.strict is True
        assert config.output.color is True
        assert config.rules == []

    def test_load(self, numbers_config):
        config = load_config(numbers_config)
        assert config.output.color is False
        assert [r.token for r in config.rules] == ["number", "plus"]
        assert config.rules[0].pattern == r"\s*(\d+)\s*"

    def test_build_parser_keeps_order(self, numbers_config):
        parser = build_parser(load_config(numbers_config))
        assert [r.factory for r in parser.rules] == [NumberToken, PlusToken]
        assert parser.parse("1 + 2") == ("+", "1", "2")

    def test_build_default_parser(self, lenient_config):
        parser = build_parser(load_config(lenient_config))
        assert parser.strict is False
        assert parser.parse("a = 1") == ("assign", "a", "1")

    def test_rule_missing_key(self, tmp_path):
        toml = tmp_path / "pratt.toml"
        toml.write_text("[[rules]]\ntoken = \"number\"\n")
        with pytest.raises(GrammarError, match="rule #1"):
            load_config(toml)

    def test_find_config_walks_up(self, numbers_config, tmp_path):
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == numbers_config

    def test_find_config_from_file(self, numbers_config):
        assert find_config(numbers_config) == numbers_config

    def test_find_config_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            find_config(tmp_path)


# --- Diagnostic rendering ---


class TestDiagnostics:
    def test_render_plain(self):
        diag = Diagnostic(
            severity=Severity.ERROR,
            code="E100",
            message="unable to tokenize '$'",
            notes=["rules are tried in registration order"],
        )
        out = DiagnosticRenderer(color=False).render(diag)
        assert out == (
            "error[E100]: unable to tokenize '$'\n"
            "  = note: rules are tried in registration order"
        )

    def test_render_color(self):
        diag = Diagnostic(severity=Severity.WARNING, code="W001", message="m")
        out = DiagnosticRenderer(color=True).render(diag)
        assert "\033[1;33m" in out
        assert "warning[W001]" in out

    def test_parse_error_message(self):
        err = ParseError([
            Diagnostic(Severity.ERROR, "E200", "first"),
            Diagnostic(Severity.ERROR, "E201", "second"),
        ])
        assert str(err) == "2 error(s): first; second"
        assert len(err.diagnostics) == 2
