from collections.abc import Callable, Sequence
from typing import Any

import pytest

from angelscript_mcp.core.context import ReadinessGate, SearchContext
from tests.fakes import FakeProvider


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration/e2e tests that exercise the real MCP session layer.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers", "integration: requires runtime services or user configuration"
    )
    config.addinivalue_line("markers", "e2e: end-to-end runtime tests")
    config.addinivalue_line("markers", "property: property-based deterministic tests")


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: Sequence[pytest.Item],
) -> None:
    run_integration = config.getoption("--run-integration")
    skip_integration = pytest.mark.skip(
        reason="integration/e2e is opt-in; rerun with --run-integration"
    )

    for item in items:
        if "tests/e2e/" in item.nodeid:
            item.add_marker("integration")
            item.add_marker("e2e")
        if (
            item.get_closest_marker("integration") or item.get_closest_marker("e2e")
        ) and not run_integration:
            item.add_marker(skip_integration)


@pytest.fixture
def ready_context() -> Callable[..., SearchContext]:
    """Build a SearchContext around a provider with the gate already open."""

    def _build(provider: FakeProvider, **kwargs: Any) -> SearchContext:
        gate = ReadinessGate()
        gate.resolve()
        return SearchContext(provider=provider, gate=gate, **kwargs)

    return _build
