"""
REST-Nodes Core Module

Workflow nodes for the Ocilion API and the Odoo REST gateway.
"""

from restnodes.context import ExecutionContext
from restnodes.config import Settings, get_settings
from restnodes.result import Item, NodeResult

__all__ = [
    "ExecutionContext",
    "Settings",
    "get_settings",
    "Item",
    "NodeResult",
]
