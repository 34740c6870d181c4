"""
REST-Nodes Logging Module

Structured logging bound to a node execution.
"""

from restnodes.logging.node_logger import NodeLogger, get_logger

__all__ = [
    "NodeLogger",
    "get_logger",
]
