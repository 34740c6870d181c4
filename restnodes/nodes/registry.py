"""
Node Registry

Decorator-based node registration system.
"""

import logging
import re
from typing import Optional, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from restnodes.nodes.base import BaseNode

logger = logging.getLogger(__name__)

# Global node registry
NODE_REGISTRY: dict[str, Type["BaseNode"]] = {}


def register_node(
    name: Optional[str] = None,
    description: str = "",
    tags: Optional[list[str]] = None,
):
    """
    Decorator to register a node class.

    Usage:
        @register_node(
            name="odoo_rest",
            description="Odoo REST gateway",
            tags=["odoo", "rest"],
        )
        class OdooRestNode(BaseNode):
            ...

    The node's request builders must cover every member of its operation
    enum; an incomplete node raises TypeError at import time.

    Args:
        name: Node name (defaults to class name in snake_case)
        description: Human-readable description
        tags: Optional tags for categorization

    Returns:
        Decorator function
    """
    def decorator(cls: Type["BaseNode"]) -> Type["BaseNode"]:
        node_name = name or _to_snake_case(cls.__name__)

        missing = [op.value for op in cls.operations if op not in cls.builders]
        if missing:
            raise TypeError(
                f"Node {node_name} has no request builder for: {', '.join(missing)}"
            )

        # Store metadata on the class
        cls._node_name = node_name
        cls._node_description = description
        cls._node_tags = tags or []

        if node_name not in NODE_REGISTRY:
            NODE_REGISTRY[node_name] = cls
            logger.debug(f"Registered node: {node_name}")

        return cls

    return decorator


def get_node(name: str) -> Optional[Type["BaseNode"]]:
    """
    Get a node class by name.

    Args:
        name: Node name

    Returns:
        Node class or None if not found
    """
    return NODE_REGISTRY.get(name)


def list_nodes(
    tags: Optional[list[str]] = None,
    include_schema: bool = False,
) -> list[dict]:
    """
    List all registered nodes with optional filtering.

    Args:
        tags: Filter by tags (any match)
        include_schema: Include operations and parameter schema in output

    Returns:
        List of node info dicts
    """
    nodes = []
    for name, cls in sorted(NODE_REGISTRY.items()):
        node_tags = getattr(cls, "_node_tags", [])

        if tags and not any(t in node_tags for t in tags):
            continue

        if include_schema:
            nodes.append(cls.describe())
        else:
            nodes.append({
                "name": name,
                "description": getattr(cls, "_node_description", ""),
                "tags": node_tags,
            })

    return nodes


def _to_snake_case(name: str) -> str:
    """Convert CamelCase to snake_case."""
    # Remove 'Node' suffix if present
    if name.endswith("Node"):
        name = name[:-4]
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()
