"""
JSON payload helpers.

Request bodies arrive as free text typed by the user and responses arrive as
decoded JSON. These helpers are the only places text becomes JSON values and
back, plus the response split applied by every node.
"""

import json
from typing import Any, Union

from restnodes.errors import MalformedBodyError
from restnodes.result import Item

# Any value json.loads can return
JsonValue = Union[None, bool, int, float, str, list, dict]


def parse_request_body(body: str) -> JsonValue:
    """
    Parse a user-supplied request body.

    Args:
        body: Free-text JSON; empty or whitespace-only means an empty object

    Returns:
        Parsed JSON value

    Raises:
        MalformedBodyError: If the text is not valid JSON (message names the text)
    """
    if body is None or not str(body).strip():
        return {}
    if not isinstance(body, str):
        # Already structured (e.g. resolved from an item placeholder)
        return body
    try:
        return json.loads(body)
    except ValueError:
        raise MalformedBodyError(body)


def serialize_body(value: JsonValue) -> str:
    """Serialize a JSON value back to compact text."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def split_response(payload: Any, split: bool, field: str = "data") -> list[Item]:
    """
    Map an API response onto output items.

    When split is set and payload[field] is a list, emits one item per
    element in upstream order. Otherwise emits one item holding the whole
    payload.

    Args:
        payload: Decoded response body
        split: Split the array field into separate items
        field: Name of the array-valued field

    Returns:
        Output items
    """
    if split and isinstance(payload, dict) and isinstance(payload.get(field), list):
        return [_to_item(element) for element in payload[field]]
    return [_to_item(payload)]


def _to_item(value: Any) -> Item:
    # Item json must be a mapping
    if isinstance(value, dict):
        return Item(json=value)
    return Item(json={"value": value})
