"""
Node error types.

Every error raised while executing a node derives from NodeError so the
execute loop can decide between aborting the batch and emitting an error item.
"""

from typing import Optional


class NodeError(Exception):
    """Base error for node execution."""

    def __init__(
        self,
        message: str,
        node_name: str = "",
        item_index: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.node_name = node_name
        self.item_index = item_index

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        """Convert to dict for logging/serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "node_name": self.node_name,
            "item_index": self.item_index,
        }


class ParameterError(NodeError):
    """A node parameter is missing or has a value outside its options."""


class MalformedBodyError(NodeError):
    """The free-text request body is not valid JSON."""

    def __init__(self, body: str, **kwargs):
        super().__init__(f"Request body is not valid JSON: {body}", **kwargs)
        self.body = body


class ApiRequestError(NodeError):
    """HTTP or network failure talking to the remote API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_text: str = "",
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.response_text = response_text[:500]

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class AuthenticationError(ApiRequestError):
    """Credentials were rejected or no session could be established."""
