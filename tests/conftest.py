"""
Pytest Fixtures for REST-Nodes Tests

Provides mock clients and test utilities.
"""

import pytest
from unittest.mock import Mock

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from restnodes.context import ExecutionContext
from restnodes.result import Item


@pytest.fixture
def mock_ocilion():
    """Create a mock Ocilion client."""
    client = Mock()

    # Mock login - returns the session cookie
    client.login.return_value = "ocilion_session=abc123"

    # Mock request - returns empty object by default
    client.request.return_value = {}

    return client


@pytest.fixture
def mock_odoo_rest():
    """Create a mock Odoo REST client."""
    client = Mock()
    client.request.return_value = {}
    return client


@pytest.fixture
def mock_logger():
    """Create a mock NodeLogger."""
    logger = Mock()

    logger.debug.return_value = None
    logger.error.return_value = None
    logger.item_failed.return_value = None
    logger.node_started.return_value = None
    logger.node_completed.return_value = None
    logger.node_failed.return_value = None

    return logger


@pytest.fixture
def test_context():
    """Create a test ExecutionContext (errors abort the batch)."""
    return ExecutionContext(
        request_id="test-request-123",
        node_name="test_node",
        triggered_by="test",
        continue_on_fail=False,
    )


@pytest.fixture
def continue_context():
    """Create a continue-on-fail ExecutionContext."""
    return ExecutionContext(
        request_id="cof-request-456",
        node_name="test_node",
        triggered_by="test",
        continue_on_fail=True,
    )


@pytest.fixture
def three_items():
    """Three input items with distinct ids."""
    return [
        Item(json={"customer_id": "c-1", "name": "Alpha"}),
        Item(json={"customer_id": "c-2", "name": "Beta"}),
        Item(json={"customer_id": "c-3", "name": "Gamma"}),
    ]


@pytest.fixture
def sample_partner_page():
    """Sample Odoo REST search response."""
    return {
        "count": 2,
        "data": [
            {"id": 7, "name": "Azure Interior", "is_company": True},
            {"id": 9, "name": "Deco Addict", "is_company": True},
        ],
    }
