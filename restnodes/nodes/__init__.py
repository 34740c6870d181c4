"""
REST-Nodes Nodes Module

Node framework with registry and base classes.
"""

from restnodes.nodes.registry import register_node, get_node, list_nodes, NODE_REGISTRY
from restnodes.nodes.base import ApiRequest, BaseNode

# Import nodes to register them
from restnodes.nodes import ocilion  # noqa: F401
from restnodes.nodes import odoo_rest  # noqa: F401

__all__ = [
    "register_node",
    "get_node",
    "list_nodes",
    "NODE_REGISTRY",
    "ApiRequest",
    "BaseNode",
]
