"""
HTTP Adapter

Routes HTTP requests to the appropriate handlers.
"""

import logging
from typing import Callable, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from flask import Request

from restnodes.context import ExecutionContext
from restnodes.errors import NodeError, ParameterError
from restnodes.nodes import get_node, list_nodes

logger = logging.getLogger(__name__)

# Type alias for HTTP response
HttpResponse = Tuple[dict, int]


def handle_request(request: "Request") -> HttpResponse:
    """
    Main HTTP request router.

    Routes:
        /health - Health check
        /nodes - List available nodes with their parameter schema
        /execute - Execute a node over a batch of items

    Args:
        request: Flask request object

    Returns:
        Tuple of (response_dict, status_code)
    """
    path = request.path.rstrip("/")

    routes: dict[str, Callable[["Request"], HttpResponse]] = {
        "/health": handle_health,
        "/nodes": handle_nodes,
        "/execute": handle_execute,
    }

    # Also handle root path
    if path == "" or path == "/":
        return handle_health(request)

    handler = routes.get(path)
    if handler:
        return handler(request)

    return {"error": f"Unknown path: {path}", "available": list(routes.keys())}, 404


def handle_health(request: "Request") -> HttpResponse:
    """
    Health check endpoint.

    Returns:
        Health status and available nodes
    """
    nodes = list_nodes()
    return {
        "status": "healthy",
        "service": "rest-nodes",
        "nodes_available": len(nodes),
        "nodes": [n["name"] for n in nodes],
    }, 200


def handle_nodes(request: "Request") -> HttpResponse:
    """
    List available nodes endpoint.

    Returns:
        Registered nodes with operations and parameter schema
    """
    nodes = list_nodes(include_schema=True)
    return {
        "nodes": nodes,
        "count": len(nodes),
    }, 200


def handle_execute(request: "Request") -> HttpResponse:
    """
    Execute a node endpoint.

    Request body:
        {
            "node": "odoo_rest",
            "parameters": {"resource": "res.partner", "operation": "get", "id": "7"},
            "items": [{"json": {...}}, ...],
            "continue_on_fail": true/false
        }

    Returns:
        Node execution result with output items
    """
    try:
        data = request.get_json(force=True) or {}
    except Exception:
        return {"error": "Invalid JSON body"}, 400
    if not isinstance(data, dict):
        return {"error": "Request body must be a JSON object"}, 400

    node_name = data.get("node")
    if not node_name:
        return {"error": "Missing 'node' field"}, 400

    node_class = get_node(node_name)
    if not node_class:
        available = [n["name"] for n in list_nodes()]
        return {
            "error": f"Unknown node: {node_name}",
            "available_nodes": available,
        }, 404

    parameters = data.get("parameters", {})
    items = data.get("items", [{}])
    if not isinstance(parameters, dict) or not isinstance(items, list):
        return {"error": "'parameters' must be an object and 'items' a list"}, 400

    ctx = ExecutionContext.for_http(
        node_name=node_name,
        continue_on_fail=bool(data.get("continue_on_fail", False)),
        user_id=data.get("user_id"),
        correlation_id=data.get("correlation_id"),
    )

    logger.info(f"Executing node: {node_name} ({len(items)} items)")

    try:
        node = node_class(ctx)
        result = node.execute(items, parameters)

        return {
            "success": True,
            "node": node_name,
            "request_id": ctx.request_id,
            "result": result.to_dict(),
        }, 200

    except ParameterError as e:
        return {
            "success": False,
            "node": node_name,
            "request_id": ctx.request_id,
            "error": str(e),
        }, 400

    except NodeError as e:
        return {
            "success": False,
            "node": node_name,
            "request_id": ctx.request_id,
            "error": str(e),
            "details": e.to_dict(),
        }, 500

    except Exception as e:
        logger.exception(f"Node execution failed: {node_name}")
        return {
            "success": False,
            "node": node_name,
            "request_id": ctx.request_id,
            "error": str(e),
        }, 500
