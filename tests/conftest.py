"""
Pytest configuration and shared fixtures for the calculator tests.
"""

import os
from unittest.mock import patch

import pytest

from moneylab import create_app
from moneylab.config import reset_global_settings
from moneylab.models.projection import CalculatorInputs, IncomeExpenseEntry
from moneylab.models.time_grid import ProjectionCalendar


@pytest.fixture(autouse=True)
def test_environment():
    """Run every test against a clean, known environment."""
    reset_global_settings()
    with patch.dict(
        os.environ,
        {"SECRET_KEY": "test-secret-key-123", "APP_ENV": "testing"},
        clear=True,
    ):
        yield
    reset_global_settings()


@pytest.fixture
def app():
    """Create a Flask application for testing."""
    return create_app("testing")


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def calendar():
    """Projection anchored at January 2025."""
    return ProjectionCalendar(start_year=2025, start_month=1)


@pytest.fixture
def accumulation_inputs():
    """Age 40, 100k at 6%, 5k/month income and 3k/month expenses to 100."""
    return CalculatorInputs(
        current_age=40,
        net_worth=100000,
        interest_rate=6,
        incomes=[
            IncomeExpenseEntry(
                amount=5000, frequency="monthly", start_age=40, end_age=100
            )
        ],
        expenses=[
            IncomeExpenseEntry(
                amount=3000, frequency="monthly", start_age=40, end_age=100
            )
        ],
    )
