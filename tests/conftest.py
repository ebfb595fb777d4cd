"""Root conftest.py for the catalog test suite.

This file contains project-wide fixtures and pytest configuration.
"""

from collections.abc import Generator
from datetime import date
from typing import Any

import pytest
from loguru import logger

from catalog.domain.products import ProductRecord


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture
def log_records() -> Generator[list[dict[str, Any]]]:
    """Capture Loguru records emitted during a test.

    Returns:
        list[dict[str, Any]]: Raw Loguru record dicts, in emission order.
    """
    records: list[dict[str, Any]] = []
    handler_id = logger.add(
        lambda message: records.append(message.record), level="DEBUG"
    )
    yield records
    logger.remove(handler_id)


@pytest.fixture
def sample_products() -> list[ProductRecord]:
    """Two persisted products ordered by ID."""
    return [
        ProductRecord(
            id=1,
            name="Notebook",
            category="Stationery",
            price="12.90",
            quantity=10,
            created_date=date(2024, 5, 1),
        ),
        ProductRecord(
            id=2,
            name="Desk Lamp",
            category="Lighting",
            price="89.00",
            quantity=3,
            created_date=date(2024, 5, 2),
        ),
    ]
