"""Shared pytest fixtures for the pratt test suite."""

from __future__ import annotations

import pytest

from pratt.grammar import arithmetic_parser


@pytest.fixture
def parser():
    return arithmetic_parser()


@pytest.fixture
def lenient():
    """Arithmetic parser that returns degraded trees instead of raising."""
    return arithmetic_parser(strict=False)
