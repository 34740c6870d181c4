"""
Base Node Class

Foundation for all REST nodes: parameter resolution, the per-item execute
loop and continue-on-fail handling.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Type

from restnodes.context import ExecutionContext
from restnodes.errors import NodeError, ParameterError
from restnodes.logging.node_logger import NodeLogger, get_logger
from restnodes.nodes.parameters import NodeProperty, resolve_parameters
from restnodes.payload import JsonValue, split_response
from restnodes.result import Item, NodeResult

logger = logging.getLogger(__name__)


@dataclass
class ApiRequest:
    """
    One HTTP request built for one input item.

    Attributes:
        method: HTTP method
        endpoint: Path relative to the API base URL
        body: JSON body (None = no body)
        query: Query string parameters
        split: Split the response's data array into separate items
    """
    method: str
    endpoint: str
    body: Optional[JsonValue] = None
    query: dict[str, str] = field(default_factory=dict)
    split: bool = False


class BaseNode(ABC):
    """
    Base class for all nodes.

    Provides:
    - Batch-level and per-item parameter resolution against the schema
    - Operation dispatch through the `builders` table
    - Per-item error handling (abort, or error item with continue-on-fail)

    Subclasses declare:
        operations: Enum of supported operations
        properties: list of NodeProperty
        parameters_class: dataclass the resolved values are loaded into
        builders: operation -> name of the method building its ApiRequest

    Usage:
        @register_node(name="my_node", description="Talks to My API")
        class MyNode(BaseNode):
            operations = MyOperation
            properties = MY_PROPERTIES
            parameters_class = MyParameters
            builders = {MyOperation.GET: "build_get"}

            def build_get(self, params) -> ApiRequest: ...
            def send(self, request) -> Any: ...
    """

    # Set by @register_node decorator
    _node_name: str = ""
    _node_description: str = ""
    _node_tags: list[str] = []

    operations: Type[Enum]
    properties: list[NodeProperty] = []
    parameters_class: type = dict
    builders: dict = {}

    # Response field holding the array to split
    split_field: str = "data"

    def __init__(
        self,
        ctx: ExecutionContext,
        client: Any = None,
        log: Optional[NodeLogger] = None,
    ):
        """
        Initialize node with dependencies.

        Args:
            ctx: Execution context (required)
            client: API client (auto-created from settings if not provided)
            log: Logger (auto-created if not provided)
        """
        self.ctx = ctx
        self._client = client
        self._log = log

    @property
    def name(self) -> str:
        """Get node name."""
        return self._node_name or self.__class__.__name__

    @property
    def client(self) -> Any:
        """Get API client (lazy-loaded)."""
        if self._client is None:
            self._client = self.create_client()
        return self._client

    @property
    def log(self) -> NodeLogger:
        """Get logger (lazy-loaded)."""
        if self._log is None:
            self._log = get_logger(self.ctx)
        return self._log

    @classmethod
    def describe(cls) -> dict:
        """Node metadata and parameter schema for discovery."""
        return {
            "name": cls._node_name,
            "description": cls._node_description,
            "tags": cls._node_tags,
            "operations": [op.value for op in cls.operations],
            "properties": [prop.to_dict() for prop in cls.properties],
        }

    # --- Parameter resolution ---

    def resolve_batch(self, raw: dict, first_item: Item) -> dict:
        """Resolve batch-level parameters (resource, operation) against item 0."""
        return resolve_parameters(
            self.properties,
            raw,
            first_item.json,
            per_item=False,
            node_name=self.name,
        )

    def resolve_item(self, raw: dict, item: Item, batch: dict, operation: Enum) -> Any:
        """Resolve per-item parameters and load them into the typed parameters."""
        values = dict(batch)
        values.update(resolve_parameters(
            self.properties,
            raw,
            item.json,
            operation=operation.value,
            per_item=True,
            node_name=self.name,
        ))
        values["operation"] = operation
        return self.parameters_class(**values)

    def _operation(self, value: str) -> Enum:
        try:
            return self.operations(value)
        except ValueError:
            raise ParameterError(
                f"Unsupported operation {value!r} for node {self.name}",
                node_name=self.name,
            )

    # --- Execution ---

    def build_request(self, params: Any) -> ApiRequest:
        """Build the request for one item via the operation's builder."""
        builder = getattr(self, self.builders[params.operation])
        return builder(params)

    def process_item(self, params: Any) -> list[Item]:
        """Build, send and map the request for one item."""
        request = self.build_request(params)
        self.log.debug(
            f"{request.method} {request.endpoint}",
            data={"query": request.query} if request.query else None,
        )
        response = self.send(request)
        return split_response(response, request.split, field=self.split_field)

    def execute(self, items: list, parameters: dict) -> NodeResult:
        """
        Execute the node over a batch of input items.

        Items are processed sequentially. A failing item either aborts the
        batch (error re-raised) or, with ctx.continue_on_fail, is replaced by
        an {"error": message} item and processing continues.

        Args:
            items: Input items (Item instances or host dicts)
            parameters: Raw node parameters

        Returns:
            NodeResult with output items
        """
        items = [i if isinstance(i, Item) else Item.from_dict(i) for i in items]
        self.log.node_started(data={"items": len(items), **self.ctx.to_audit_dict()})

        try:
            batch = self.resolve_batch(parameters, items[0] if items else Item())
            operation = self._operation(batch.pop("operation"))
            result = NodeResult.from_context(
                self.ctx,
                operation=operation.value,
                items_in=len(items),
                parameters=parameters,
            )

            if items and not self._setup_batch(result, len(items)):
                result.complete()
                self.log.node_completed(data=result.to_dict(include_items=False))
                return result

            for index, item in enumerate(items):
                try:
                    params = self.resolve_item(parameters, item, batch, operation)
                    for output in self.process_item(params):
                        result.add_item(output)
                except Exception as e:
                    if isinstance(e, NodeError):
                        e.node_name = e.node_name or self.name
                        e.item_index = index
                    if self.ctx.continue_on_fail:
                        self.log.item_failed(index, str(e))
                        result.add_error(str(e))
                        continue
                    self.log.item_failed(index, str(e), recorded=False)
                    raise

            result.complete()
            self.log.node_completed(data=result.to_dict(include_items=False))
            return result

        except Exception as e:
            logger.exception(f"Node {self.name} failed")
            self.log.node_failed(str(e))
            raise

    def _setup_batch(self, result: NodeResult, item_count: int) -> bool:
        """
        Run setup() once for the batch.

        Returns False when setup failed under continue-on-fail; every input
        item then gets the setup error as its error item.
        """
        try:
            self.setup()
        except NodeError as e:
            e.node_name = e.node_name or self.name
            if not self.ctx.continue_on_fail:
                raise
            self.log.error("Batch setup failed", error=str(e))
            for index in range(item_count):
                self.log.item_failed(index, str(e))
                result.add_error(str(e))
            return False
        return True

    def setup(self) -> None:
        """
        Setup phase before the item loop (e.g. authentication).

        Default implementation does nothing.
        """
        pass

    @abstractmethod
    def create_client(self) -> Any:
        """Create the API client from settings."""
        raise NotImplementedError

    @abstractmethod
    def send(self, request: ApiRequest) -> Any:
        """Send one request and return the decoded JSON response."""
        raise NotImplementedError
