"""
Result types for items and node executions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from restnodes.context import ExecutionContext


class ResultStatus(str, Enum):
    """Status of a node execution."""
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"
    SKIPPED = "skipped"


@dataclass
class Item:
    """
    One unit of data flowing through the host pipeline.

    Attributes:
        json: JSON payload of the item
        binary: Binary attachments keyed by property name (always empty on output)
    """
    json: dict[str, Any] = field(default_factory=dict)
    binary: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to the host's item shape."""
        return {"json": self.json, "binary": self.binary}

    @classmethod
    def from_dict(cls, data: Any) -> "Item":
        """
        Build an item from host input.

        Accepts either the full item shape ({"json": ..., "binary": ...})
        or a bare JSON object, which becomes the item's payload.
        """
        if isinstance(data, dict) and "json" in data and isinstance(data["json"], dict):
            return cls(json=data["json"], binary=data.get("binary") or {})
        if isinstance(data, dict):
            return cls(json=data)
        return cls(json={"value": data})

    @classmethod
    def error(cls, message: str) -> "Item":
        """Create an error item (continue-on-fail output)."""
        return cls(json={"error": message})


@dataclass
class NodeResult:
    """
    Result of one node execution batch.

    Attributes:
        status: Overall execution status
        node_name: Name of the node
        operation: Operation that was run
        started_at: When the execution started
        completed_at: When the execution completed
        items_in: Number of input items
        items: Output items, in order
        errors: Error messages of failed items
        request_id: Unique identifier for this execution
        triggered_by: Source of the trigger (cli, http, test)
        parameters: Raw parameters used for this execution
    """
    status: ResultStatus
    node_name: str = ""
    operation: str = ""
    started_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None
    items_in: int = 0
    items: list[Item] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    request_id: str = ""
    triggered_by: str = ""
    parameters: Optional[dict] = None

    @property
    def items_out(self) -> int:
        return len(self.items)

    def add_item(self, item: Item) -> None:
        self.items.append(item)

    def add_error(self, message: str) -> None:
        """Record a failed input item and emit its error item."""
        self.errors.append(message)
        self.items.append(Item.error(message))

    def complete(self) -> None:
        """Mark the execution as complete and derive its status."""
        self.completed_at = datetime.utcnow()

        if self.errors:
            if len(self.errors) < self.items_in:
                self.status = ResultStatus.PARTIAL
            else:
                self.status = ResultStatus.FAILURE
        elif self.items_in == 0:
            self.status = ResultStatus.SKIPPED
        else:
            self.status = ResultStatus.SUCCESS

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get execution duration in seconds."""
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def output(self) -> list[dict]:
        """Output items in the host's shape."""
        return [item.to_dict() for item in self.items]

    def to_dict(self, include_items: bool = True) -> dict:
        """Convert to dict for logging/serialization."""
        result = {
            "status": self.status.value,
            "node_name": self.node_name,
            "operation": self.operation,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "items_in": self.items_in,
            "items_out": self.items_out,
            "error_count": len(self.errors),
            "errors": self.errors[:10],  # Limit errors in output
        }
        if include_items:
            result["items"] = self.output()
        return result

    @classmethod
    def from_context(
        cls,
        ctx: "ExecutionContext",
        operation: str = "",
        items_in: int = 0,
        parameters: Optional[dict] = None,
    ) -> "NodeResult":
        """
        Create a new node result from an ExecutionContext.

        Args:
            ctx: Execution context
            operation: Operation selected for the batch
            items_in: Number of input items
            parameters: Raw node parameters
        """
        return cls(
            status=ResultStatus.SUCCESS,  # Will be updated on complete()
            node_name=ctx.node_name,
            operation=operation,
            items_in=items_in,
            request_id=ctx.request_id,
            triggered_by=ctx.triggered_by,
            parameters=parameters,
        )
