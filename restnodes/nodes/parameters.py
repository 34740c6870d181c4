"""
Node Parameters

Static parameter schema declarations and per-item resolution.

A node declares its parameters as a list of NodeProperty. Raw values come
from the host (JSON) and may reference the current item with
"{{ $json.path.to.field }}" placeholders. resolve_parameters() turns them
into plain Python values validated against the schema, which each node then
loads into its typed parameters dataclass.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from restnodes.errors import ParameterError

# {{ $json }} or {{ $json.a.b.0 }}
PLACEHOLDER_RE = re.compile(r"\{\{\s*\$json((?:\.[A-Za-z0-9_\-]+)*)\s*\}\}")

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


@dataclass
class NodeProperty:
    """
    One declared node parameter.

    Attributes:
        name: Parameter key as sent by the host
        display_name: Label shown to users
        type: "options", "string", "number" or "boolean"
        default: Value used when the parameter is not set or not shown
        description: Help text
        options: (display name, value) pairs for "options" parameters
        show_for: Operations the parameter applies to (empty = all)
        per_item: Resolve per input item (False = once per batch, from item 0)
        attribute: Typed dataclass field the value is loaded into (default: name)
    """
    name: str
    display_name: str
    type: str = "string"
    default: Any = ""
    description: str = ""
    options: list[tuple[str, str]] = field(default_factory=list)
    show_for: list[str] = field(default_factory=list)
    per_item: bool = True
    attribute: str = ""

    @property
    def field_name(self) -> str:
        return self.attribute or self.name

    @property
    def option_values(self) -> list[str]:
        return [value for _, value in self.options]

    def applies_to(self, operation: Optional[str]) -> bool:
        return not self.show_for or operation in self.show_for

    def to_dict(self) -> dict:
        """Convert to dict for schema discovery."""
        data = {
            "name": self.name,
            "displayName": self.display_name,
            "type": self.type,
            "default": self.default,
            "description": self.description,
        }
        if self.options:
            data["options"] = [{"name": n, "value": v} for n, v in self.options]
        if self.show_for:
            data["displayOptions"] = {"show": {"operation": list(self.show_for)}}
        return data

    def coerce(self, value: Any, node_name: str = "") -> Any:
        """
        Convert a resolved value to this parameter's type.

        Raises:
            ParameterError: If the value does not fit the declared type/options
        """
        if self.type == "options":
            value = "" if value is None else str(value)
            if value not in self.option_values:
                raise ParameterError(
                    f"Invalid value {value!r} for parameter '{self.name}'. "
                    f"Expected one of: {', '.join(self.option_values)}",
                    node_name=node_name,
                )
            return value

        if self.type == "boolean":
            if isinstance(value, bool):
                return value
            if value is None:
                return bool(self.default)
            text = str(value).strip().lower()
            if text in _TRUE_STRINGS:
                return True
            if text in _FALSE_STRINGS:
                return False
            raise ParameterError(
                f"Invalid boolean {value!r} for parameter '{self.name}'",
                node_name=node_name,
            )

        if self.type == "number":
            if value is None or value == "":
                return self.default
            if isinstance(value, bool):
                raise ParameterError(
                    f"Invalid number {value!r} for parameter '{self.name}'",
                    node_name=node_name,
                )
            if isinstance(value, (int, float)):
                return value
            try:
                number = float(str(value).strip())
            except ValueError:
                raise ParameterError(
                    f"Invalid number {value!r} for parameter '{self.name}'",
                    node_name=node_name,
                )
            return int(number) if number.is_integer() else number

        # string: structured values (from a placeholder) are kept as-is
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


def lookup_path(data: Any, path: str) -> Any:
    """
    Follow a dotted path into nested dicts/lists.

    Returns None when any segment is missing.
    """
    current = data
    for segment in [s for s in path.split(".") if s]:
        if isinstance(current, dict):
            current = current.get(segment)
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def resolve_value(value: Any, item_json: dict) -> Any:
    """
    Substitute "{{ $json... }}" placeholders against an item's JSON.

    A value that is exactly one placeholder resolves to the raw referenced
    value; placeholders embedded in text are substituted as strings.
    """
    if not isinstance(value, str) or "{{" not in value:
        return value

    whole = PLACEHOLDER_RE.fullmatch(value.strip())
    if whole:
        return lookup_path(item_json, whole.group(1))

    def _substitute(match: "re.Match") -> str:
        found = lookup_path(item_json, match.group(1))
        if found is None:
            return ""
        if isinstance(found, (dict, list, bool)):
            return json.dumps(found)
        return str(found)

    return PLACEHOLDER_RE.sub(_substitute, value)


def resolve_parameters(
    properties: list[NodeProperty],
    raw: dict,
    item_json: dict,
    operation: Optional[str] = None,
    per_item: Optional[bool] = None,
    node_name: str = "",
) -> dict:
    """
    Resolve raw parameter values for one item.

    Parameters not shown for the operation get their defaults. Keys that no
    declared parameter carries are rejected.

    Args:
        properties: Declared node parameters
        raw: Raw parameter values from the host
        item_json: JSON payload of the item used for placeholders
        operation: Selected operation (None = resolve every parameter)
        per_item: Only resolve parameters with this per_item flag (None = all)
        node_name: Node name for error messages

    Returns:
        Dict of dataclass field name -> typed value

    Raises:
        ParameterError: On an unknown key or a value that does not fit its type
    """
    unknown = sorted(set(raw) - {prop.name for prop in properties})
    if unknown:
        raise ParameterError(
            f"Unknown parameter(s): {', '.join(unknown)}. "
            f"Expected one of: {', '.join(prop.name for prop in properties)}",
            node_name=node_name,
        )

    resolved = {}
    for prop in properties:
        if per_item is not None and prop.per_item != per_item:
            continue
        if operation is not None and not prop.applies_to(operation):
            resolved[prop.field_name] = prop.default
            continue
        value = resolve_value(raw.get(prop.name, prop.default), item_json)
        resolved[prop.field_name] = prop.coerce(value, node_name=node_name)
    return resolved
