"""
Odoo REST Node

Search/CRUD/execute/schema operations against an Odoo REST gateway.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from restnodes.clients.odoo_rest import OdooRestClient, get_odoo_rest_client
from restnodes.nodes.base import ApiRequest, BaseNode
from restnodes.nodes.parameters import NodeProperty
from restnodes.nodes.registry import register_node
from restnodes.payload import parse_request_body, serialize_body

logger = logging.getLogger(__name__)


class OdooRestOperation(str, Enum):
    SEARCH = "search"
    GET = "get"
    UPDATE = "update"
    DELETE = "delete"
    CREATE = "create"
    EXECUTE = "execute"
    SCHEMA = "schema"


# (display name, model)
RESOURCES = [
    ("Partner", "res.partner"),
    ("Installation", "res.partner.installation"),
    ("User", "res.users"),
    ("Project Task", "project.task"),
    ("Project Task Type", "project.task.type"),
    ("Sale Order", "sale.order"),
    ("Sale Order Line", "sale.order.line"),
    ("Sale Order Line Dynamic Info", "sale.product.dynamic.info"),
    ("Helpdesk", "helpdesk.ticket"),
    ("Phone Number", "phone.number.info"),
    ("Domains", "web.domain.info"),
    ("CPE", "cpe.dynamic.info"),
    ("Set-Top-Box", "settop.dynamic.info"),
    ("E-Mail", "email.dynamic.info"),
    ("E-Mail Alias", "emailalias.dynamic.info"),
    ("SLA-PIN", "slapin.dynamic.info"),
    ("Bank Statement", "account.bank.statement"),
    ("Bank Statement Lines", "account.bank.statement.line"),
    ("Domain Handle", "domain.contact.handle"),
    ("Domain Documentation", "domain.domain.registry"),
    ("Domain Registrars", "domain.registrar"),
    ("Domain Nameserver", "domain.nameserver"),
    ("Webserver Subscriptions", "webserver.subscriptions"),
    ("Webserver Config", "webserver.config"),
    ("StadwerkBilling", "stadwerk.billing"),
    ("StadwerkBillingLine", "stadwerk.billing.line"),
    ("Employee", "hr.employee"),
    ("Attendance", "hr.attendance"),
    ("LogNote", "mail.message"),
]

PROPERTIES = [
    NodeProperty(
        name="resource",
        display_name="Resource",
        type="options",
        options=RESOURCES,
        default="res.partner",
        description="Object model to use",
        per_item=False,
    ),
    NodeProperty(
        name="operation",
        display_name="Operation",
        type="options",
        options=[
            ("Search", OdooRestOperation.SEARCH.value),
            ("Get", OdooRestOperation.GET.value),
            ("Update", OdooRestOperation.UPDATE.value),
            ("Delete", OdooRestOperation.DELETE.value),
            ("Create", OdooRestOperation.CREATE.value),
            ("Execute", OdooRestOperation.EXECUTE.value),
            ("Schema", OdooRestOperation.SCHEMA.value),
        ],
        default=OdooRestOperation.GET.value,
        description="Operation to perform",
        per_item=False,
    ),
    NodeProperty(
        name="id",
        display_name="Id",
        description="Id of the record",
        show_for=["get", "update", "delete"],
    ),
    NodeProperty(
        name="body",
        display_name="Body",
        description="Request body",
        show_for=["create", "update", "execute"],
    ),
    NodeProperty(
        name="domain",
        display_name="Domain",
        description="Search domain",
        show_for=["search"],
    ),
    NodeProperty(
        name="fields",
        display_name="Fields",
        description="Fields to retrieve",
        show_for=["search"],
    ),
    NodeProperty(
        name="limit",
        display_name="Limit",
        type="number",
        default=10,
        description="Limit the records retrieved",
        show_for=["search"],
    ),
    NodeProperty(
        name="split",
        display_name="Retrieve and Split Data Items",
        type="boolean",
        default=True,
        description="Retrieve and split the data array into separate items",
        show_for=["get", "search", "schema"],
    ),
]


@dataclass
class OdooRestParameters:
    """Resolved Odoo REST parameters for one item."""
    operation: OdooRestOperation
    resource: str = "res.partner"
    id: str = ""
    body: Any = ""
    domain: Any = ""
    fields: Any = ""
    limit: int = 10
    split: bool = True

    @property
    def record_endpoint(self) -> str:
        return f"{self.resource}/{self.id}"

    def action_endpoint(self, action: str) -> str:
        return f"{self.resource}/{action}"


def _as_query_text(value: Any) -> str:
    # Domains/fields may resolve to structured values from item placeholders
    if isinstance(value, str):
        return value
    return serialize_body(value)


@register_node(
    name="odoo_rest",
    description="Odoo REST gateway: search, CRUD, execute_kw and schema",
    tags=["odoo", "rest"],
)
class OdooRestNode(BaseNode):
    """
    Odoo REST gateway node.

    Operations:
    - search: GET {model}/search?domain=&fields=&limit=, optionally split on "data"
    - get: GET {model}/{id}, optionally split on "data"
    - update: PUT {model}/{id} with the JSON body
    - delete: DELETE {model}/{id}
    - create: POST {model}/create with the JSON body
    - execute: POST {model}/execute_kw with the JSON body
    - schema: GET {model}/schema, optionally split on "data"
    """

    operations = OdooRestOperation
    properties = PROPERTIES
    parameters_class = OdooRestParameters
    builders = {
        OdooRestOperation.SEARCH: "build_search",
        OdooRestOperation.GET: "build_get",
        OdooRestOperation.UPDATE: "build_update",
        OdooRestOperation.DELETE: "build_delete",
        OdooRestOperation.CREATE: "build_create",
        OdooRestOperation.EXECUTE: "build_execute",
        OdooRestOperation.SCHEMA: "build_schema",
    }

    def create_client(self) -> OdooRestClient:
        return get_odoo_rest_client()

    def send(self, request: ApiRequest) -> Any:
        return self.client.request(
            request.method,
            request.endpoint,
            body=request.body,
            query=request.query,
        )

    # --- Request builders ---

    def build_search(self, params: OdooRestParameters) -> ApiRequest:
        query = {
            "domain": _as_query_text(params.domain),
            "fields": _as_query_text(params.fields),
            "limit": str(params.limit),
        }
        return ApiRequest(
            "GET",
            params.action_endpoint("search"),
            query=query,
            split=params.split,
        )

    def build_get(self, params: OdooRestParameters) -> ApiRequest:
        return ApiRequest("GET", params.record_endpoint, split=params.split)

    def build_update(self, params: OdooRestParameters) -> ApiRequest:
        return ApiRequest("PUT", params.record_endpoint, body=parse_request_body(params.body))

    def build_delete(self, params: OdooRestParameters) -> ApiRequest:
        return ApiRequest("DELETE", params.record_endpoint)

    def build_create(self, params: OdooRestParameters) -> ApiRequest:
        return ApiRequest(
            "POST",
            params.action_endpoint("create"),
            body=parse_request_body(params.body),
        )

    def build_execute(self, params: OdooRestParameters) -> ApiRequest:
        return ApiRequest(
            "POST",
            params.action_endpoint("execute_kw"),
            body=parse_request_body(params.body),
        )

    def build_schema(self, params: OdooRestParameters) -> ApiRequest:
        return ApiRequest("GET", params.action_endpoint("schema"), split=params.split)
