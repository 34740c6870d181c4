"""
Node Logger

Structured console logging prefixed with the execution request id.
"""

import logging
from typing import Optional

from restnodes.context import ExecutionContext


class NodeLogger:
    """
    Structured logger bound to one node execution.

    Usage:
        log = NodeLogger(ctx)
        log.node_started(data={"items": 3})
        log.item_failed(item_index=1, error="Request body is not valid JSON: {bad")
    """

    def __init__(
        self,
        ctx: ExecutionContext,
        name: str = "restnodes",
        level: Optional[str] = None,
    ):
        self.ctx = ctx
        self._logger = logging.getLogger(name)

        # Own handler, not propagated to root
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            self._logger.addHandler(handler)
            self._logger.setLevel(logging.INFO)
            self._logger.propagate = False
        if level:
            self._logger.setLevel(level.upper())

    def _log(
        self,
        level: int,
        message: str,
        item_index: Optional[int] = None,
        data: Optional[dict] = None,
    ) -> None:
        """Internal log method."""
        prefix = f"[{self.ctx.request_id[:8]}]"
        if self.ctx.node_name:
            prefix += f" [{self.ctx.node_name}]"
        if item_index is not None:
            prefix += f" [item={item_index}]"

        full_message = f"{prefix} {message}"
        if data:
            full_message += f" {data}"
        self._logger.log(level, full_message)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, message, **kwargs)

    def error(
        self,
        message: str,
        error: Optional[str] = None,
        **kwargs
    ) -> None:
        """Log error message."""
        if error:
            message = f"{message}: {error}"
        self._log(logging.ERROR, message, **kwargs)

    def item_failed(self, item_index: int, error: str, recorded: bool = True) -> None:
        """Log a failed item, noting whether it became an error item."""
        outcome = "emitted error item" if recorded else "aborting batch"
        self._log(
            logging.WARNING if recorded else logging.ERROR,
            f"FAILED ({outcome}): {error}",
            item_index=item_index,
        )

    def node_started(self, data: Optional[dict] = None) -> None:
        """Log node execution start."""
        self._log(logging.INFO, f"Node started: {self.ctx.node_name}", data=data)

    def node_completed(self, data: Optional[dict] = None) -> None:
        """Log node execution completion."""
        self._log(logging.INFO, f"Node completed: {self.ctx.node_name}", data=data)

    def node_failed(self, error: str, data: Optional[dict] = None) -> None:
        """Log node execution failure."""
        self._log(
            logging.ERROR,
            f"Node failed: {self.ctx.node_name} - {error}",
            data=data,
        )


def get_logger(ctx: ExecutionContext) -> NodeLogger:
    """
    Create a NodeLogger for the given context.

    Args:
        ctx: Execution context

    Returns:
        Configured NodeLogger
    """
    from restnodes.config import get_settings

    return NodeLogger(ctx, level=get_settings().log_level)
