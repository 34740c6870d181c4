"""
REST-Nodes Adapters Module

Transport layer adapters for HTTP.
"""

# HTTP adapter functions are imported lazily to avoid the Flask dependency
# when running CLI commands that don't need HTTP

__all__ = [
    "handle_request",
    "handle_health",
    "handle_nodes",
    "handle_execute",
]


def __getattr__(name):
    """Lazy import HTTP handlers to avoid Flask dependency in CLI mode."""
    if name in __all__:
        from adapters.http import (
            handle_request,
            handle_health,
            handle_nodes,
            handle_execute,
        )
        return locals()[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
