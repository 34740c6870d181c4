"""
Ocilion Node

CRUD operations against the Ocilion API, authenticated with a session
cookie obtained once per batch.

Endpoints are built as {worldId}/{resource}[/{id}].
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from restnodes.clients.ocilion import OcilionClient, get_ocilion_client
from restnodes.context import ExecutionContext
from restnodes.logging.node_logger import NodeLogger
from restnodes.nodes.base import ApiRequest, BaseNode
from restnodes.nodes.parameters import NodeProperty
from restnodes.nodes.registry import register_node
from restnodes.payload import parse_request_body, serialize_body

logger = logging.getLogger(__name__)

DEFAULT_WORLD_ID = "280bf646-c09a-4d67-a0d5-21ecf0f2e114"
DEFAULT_FILTER = '[{"property":"","value":"","op":"="}]'


class OcilionOperation(str, Enum):
    CREATE = "create"
    GET = "get"
    GET_ALL = "getAll"
    UPDATE = "update"


PROPERTIES = [
    NodeProperty(
        name="resource",
        display_name="Resource",
        type="options",
        options=[("Customers", "customers"), ("Devices", "devices")],
        default="customers",
        description="Resource to use",
        per_item=False,
    ),
    NodeProperty(
        name="subresource",
        display_name="Sub-Resource",
        type="options",
        options=[
            ("None", "none"),
            ("Profiles", "profiles"),
            ("Devices", "devices"),
            ("Subscriptions", "subscriptons"),
            ("Subscriptions Change", "subscriptonchange"),
            ("Billing", "billing"),
        ],
        default="none",
        description="Sub-Resource to use",
        per_item=False,
    ),
    NodeProperty(
        name="operation",
        display_name="Operation",
        type="options",
        options=[
            ("Create", OcilionOperation.CREATE.value),
            ("Get", OcilionOperation.GET.value),
            ("GetAll", OcilionOperation.GET_ALL.value),
            ("Update", OcilionOperation.UPDATE.value),
        ],
        default=OcilionOperation.GET.value,
        description="Operation to perform",
        per_item=False,
    ),
    NodeProperty(
        name="worldId",
        attribute="world_id",
        display_name="WorldId",
        default=DEFAULT_WORLD_ID,
        description="World Id of resource",
    ),
    NodeProperty(
        name="id",
        display_name="Id",
        description="Id of resource",
        show_for=["get", "create", "update"],
    ),
    NodeProperty(
        name="subid",
        attribute="sub_id",
        display_name="SUB-Id",
        description="Id of sub-resource",
        show_for=["get", "create", "update"],
    ),
    NodeProperty(
        name="filter",
        display_name="Filter",
        default=DEFAULT_FILTER,
        description="Filter to apply",
        show_for=["getAll"],
    ),
    NodeProperty(
        name="split",
        display_name="Retrieve and Split Data Items",
        type="boolean",
        default=True,
        description="Retrieve and split the data array into separate items",
        show_for=["getAll"],
    ),
    NodeProperty(
        name="body",
        display_name="Body",
        description="Request body",
        show_for=["create", "update"],
    ),
]


@dataclass
class OcilionParameters:
    """Resolved Ocilion parameters for one item."""
    operation: OcilionOperation
    resource: str = "customers"
    # subresource and sub_id are declared but do not shape the request
    subresource: str = "none"
    world_id: str = DEFAULT_WORLD_ID
    id: str = ""
    sub_id: str = ""
    filter: str = DEFAULT_FILTER
    split: bool = True
    body: Any = ""

    @property
    def collection_endpoint(self) -> str:
        return f"{self.world_id}/{self.resource}"

    @property
    def record_endpoint(self) -> str:
        return f"{self.world_id}/{self.resource}/{self.id}"


@register_node(
    name="ocilion",
    description="Ocilion API: customers and devices",
    tags=["ocilion", "rest"],
)
class OcilionNode(BaseNode):
    """
    Ocilion API node.

    Operations:
    - get: GET {world}/{resource}/{id}
    - getAll: GET {world}/{resource}?filter=..., optionally split on "data"
    - create: POST {world}/{resource}[/{id}] with the JSON body
    - update: PUT {world}/{resource}/{id} with the JSON body
    """

    operations = OcilionOperation
    properties = PROPERTIES
    parameters_class = OcilionParameters
    builders = {
        OcilionOperation.GET: "build_get",
        OcilionOperation.GET_ALL: "build_get_all",
        OcilionOperation.CREATE: "build_create",
        OcilionOperation.UPDATE: "build_update",
    }

    def __init__(
        self,
        ctx: ExecutionContext,
        client: Optional[OcilionClient] = None,
        log: Optional[NodeLogger] = None,
    ):
        super().__init__(ctx, client=client, log=log)
        self._cookie = ""

    def create_client(self) -> OcilionClient:
        return get_ocilion_client()

    def setup(self) -> None:
        """Log in once; the cookie is reused for every item of the batch."""
        self._cookie = self.client.login()
        self.log.debug("Obtained Ocilion session cookie")

    def send(self, request: ApiRequest) -> Any:
        return self.client.request(
            request.method,
            request.endpoint,
            body=request.body,
            query=request.query,
            cookie=self._cookie,
        )

    # --- Request builders ---

    def build_get(self, params: OcilionParameters) -> ApiRequest:
        return ApiRequest("GET", params.record_endpoint)

    def build_get_all(self, params: OcilionParameters) -> ApiRequest:
        # A filter resolved from an item placeholder may already be structured
        filter_text = params.filter
        if not isinstance(filter_text, str):
            filter_text = serialize_body(filter_text)
        query = {"filter": filter_text} if filter_text else {}
        return ApiRequest(
            "GET",
            params.collection_endpoint,
            query=query,
            split=params.split,
        )

    def build_create(self, params: OcilionParameters) -> ApiRequest:
        endpoint = params.record_endpoint if params.id else params.collection_endpoint
        return ApiRequest("POST", endpoint, body=parse_request_body(params.body))

    def build_update(self, params: OcilionParameters) -> ApiRequest:
        return ApiRequest("PUT", params.record_endpoint, body=parse_request_body(params.body))
