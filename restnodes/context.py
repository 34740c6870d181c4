"""
Execution Context for threading audit information through a node run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import uuid


@dataclass
class ExecutionContext:
    """
    Context object that flows through one node execution batch.

    Attributes:
        request_id: Unique identifier for this execution
        node_name: Name of the node being executed
        triggered_by: Source of the trigger (http, cli, test)
        triggered_at: Timestamp when execution was initiated
        continue_on_fail: If True, per-item errors become error items
        user_id: Optional user ID if available
        correlation_id: Optional ID for correlating related requests
    """
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    node_name: str = ""
    triggered_by: str = "unknown"
    triggered_at: datetime = field(default_factory=datetime.utcnow)
    continue_on_fail: bool = False
    user_id: Optional[str] = None
    correlation_id: Optional[str] = None

    def to_audit_dict(self) -> dict:
        """Convert context to dict for logging."""
        return {
            "request_id": self.request_id,
            "node_name": self.node_name,
            "triggered_by": self.triggered_by,
            "triggered_at": self.triggered_at.isoformat(),
            "continue_on_fail": self.continue_on_fail,
            "user_id": self.user_id,
            "correlation_id": self.correlation_id,
        }

    @classmethod
    def for_http(cls, node_name: str, continue_on_fail: bool = False, **kwargs) -> "ExecutionContext":
        """Create context for HTTP request."""
        return cls(
            node_name=node_name,
            triggered_by="http",
            continue_on_fail=continue_on_fail,
            **kwargs
        )

    @classmethod
    def for_cli(cls, node_name: str, continue_on_fail: bool = False, **kwargs) -> "ExecutionContext":
        """Create context for CLI invocation."""
        return cls(
            node_name=node_name,
            triggered_by="cli",
            continue_on_fail=continue_on_fail,
            **kwargs
        )
