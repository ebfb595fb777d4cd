"""Shared fixtures for database layer tests."""

from datetime import date
from typing import cast

import pytest
from pytest_mock import MockerFixture, MockType
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from catalog.infrastructure.database.models import ProductModel
from catalog.infrastructure.database.repository import ProductRepository


@pytest.fixture
def mock_session(mocker: MockerFixture) -> MockType:
    """Create a properly mocked async session."""
    return cast("MockType", mocker.AsyncMock(spec=AsyncSession))


@pytest.fixture
def repository(mock_session: MockType) -> ProductRepository:
    return ProductRepository(mock_session)


@pytest.fixture
def product_row() -> ProductModel:
    """A persisted product row."""
    return ProductModel(
        id=7,
        name="Notebook",
        category="Stationery",
        price="12.90",
        quantity=10,
        created_date=date(2024, 5, 1),
    )


@pytest.fixture
def mock_async_engine(mocker: MockerFixture) -> MockType:
    """Mock AsyncEngine whose connect() answers SELECT 1.

    Returns:
        MockType: Mock AsyncEngine with connect and dispose methods.
    """
    engine = mocker.Mock(spec=AsyncEngine)
    engine.dispose = mocker.AsyncMock()

    connection = mocker.AsyncMock()
    connection.__aenter__ = mocker.AsyncMock(return_value=connection)
    connection.__aexit__ = mocker.AsyncMock(return_value=None)

    result = mocker.Mock()
    result.scalar = mocker.Mock(return_value=1)
    connection.execute = mocker.AsyncMock(return_value=result)

    engine.connect = mocker.Mock(return_value=connection)

    return cast("MockType", engine)
