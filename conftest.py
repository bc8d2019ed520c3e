"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Isolation from a developer's SKETCH_* settings
- Deterministic identifier sources and node factories
- Sample design configs
"""

from __future__ import annotations

import random
from typing import Any

import pytest
from dotenv import load_dotenv

from sketch_mcp.codec import IdentifierSource
from sketch_mcp.config import EnvVar
from sketch_mcp.model import NodeFactory

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path_factory) -> None:
    """Reset registry variables so tests see defaults.

    Exports default to a per-test temporary root instead of the home directory.
    """
    for var in EnvVar:
        monkeypatch.delenv(var.value.name, raising=False)
    monkeypatch.setenv(
        EnvVar.SKETCH_OUTPUT_DIR.value.name, str(tmp_path_factory.mktemp("output"))
    )


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def id_source() -> IdentifierSource:
    """Identifier source seeded for reproducible graphs."""
    return IdentifierSource(random.Random(42))


@pytest.fixture
def node_factory(id_source: IdentifierSource) -> NodeFactory:
    """Node factory drawing from the seeded identifier source."""
    return NodeFactory(id_source)


@pytest.fixture
def sample_config() -> dict[str, Any]:
    """Mobile order-list screen using several module types.

    Returns:
        Design config dict in the camelCase form JSON clients send.
    """
    return {
        "pageName": "Orders",
        "artboardSize": {"width": 393, "height": 852},
        "theme": "light",
        "filename": "orders",
        "modules": [
            {"type": "header", "title": "我的订单", "height": 56},
            {"type": "orderHeader", "title": "Order #1024", "subtitle": "2 items", "status": "Shipped"},
            {
                "type": "collapsiblePanel",
                "title": "Delivery",
                "fields": [{"label": "Address", "value": "1 Main St"}, {"label": "ETA"}],
                "height": 160,
            },
            {"type": "actionButtons", "buttons": [{"text": "Cancel"}, {"text": "Track", "primary": True}]},
            {"type": "bottomNav", "items": ["Home", "Orders", "Me"], "height": 83},
        ],
    }


@pytest.fixture
def dashboard_config() -> dict[str, Any]:
    """Desktop admin screen with a data table, in the dark theme."""
    return {
        "pageName": "Admin",
        "artboardSize": {"width": 1440, "height": 900},
        "theme": "dark",
        "colors": {"primary": "#0A84FF"},
        "modules": [
            {"type": "header", "title": "Customers"},
            {
                "type": "dataTable",
                "title": "客户列表",
                "columns": [{"name": "ID", "width": 80}, {"name": "Name"}, {"name": "Email"}],
                "rows": [["1", "Ada", "ada@example.com"], ["2", "Lin", "lin@example.com"]],
                "hasCheckbox": True,
                "hasActions": True,
                "height": 320,
            },
        ],
    }
