"""
REST-Nodes Clients Module

HTTP clients for the Ocilion API and the Odoo REST gateway.
"""

from restnodes.clients.ocilion import OcilionClient, get_ocilion_client
from restnodes.clients.odoo_rest import OdooRestClient, get_odoo_rest_client

__all__ = [
    "OcilionClient",
    "get_ocilion_client",
    "OdooRestClient",
    "get_odoo_rest_client",
]
