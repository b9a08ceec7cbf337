"""Pytest configuration and test categorization.

Tests live in a flat `tests/` layout and are categorized into `unit`,
`regression`, and `e2e` via markers so CI can run targeted subsets.
"""

from __future__ import annotations

import logging
import pathlib

import pytest


def pytest_configure(config: pytest.Config) -> None:
    for name in ("unit", "regression", "e2e"):
        config.addinivalue_line("markers", f"{name}: {name} tests")


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Auto-apply test category markers based on filename conventions."""
    for item in items:
        path = pathlib.Path(str(item.fspath))
        name = path.name.lower()

        if "e2e" in name or "end_to_end" in name:
            item.add_marker(pytest.mark.e2e)
            continue

        if "regression" in name:
            item.add_marker(pytest.mark.regression)
            continue

        item.add_marker(pytest.mark.unit)


@pytest.fixture
def clean_logger():
    """Detach handlers added to the package logger during a test."""
    logger = logging.getLogger("bigbatch_sgd")
    saved = list(logger.handlers)
    logger.handlers = []
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = saved
