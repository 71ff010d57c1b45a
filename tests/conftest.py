"""Configuration file for pytest containing shared fixtures.

- registry: the default resolved rule registry
- runner: a Typer CLI test runner
"""

import pytest
from typer.testing import CliRunner

from uilint.kernel.linting.registry import RuleRegistry, resolve


@pytest.fixture(scope="session")
def registry() -> RuleRegistry:
    """Fixture providing the default resolved rule registry."""
    return resolve()


@pytest.fixture
def runner() -> CliRunner:
    """Fixture providing a Typer CLI test runner."""
    return CliRunner()
