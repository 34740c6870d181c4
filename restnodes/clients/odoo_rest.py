"""
Odoo REST Gateway Client

API-key authenticated client for the Odoo REST addon.
"""

import logging
from typing import Any, Optional

import requests

from restnodes.config import Settings, get_settings
from restnodes.errors import ApiRequestError, AuthenticationError

logger = logging.getLogger(__name__)


class OdooRestClient:
    """
    Odoo REST gateway client.

    Endpoints are relative to the gateway base URL and start with the
    model name, e.g. "res.partner/search" or "sale.order/42".

    Usage:
        client = OdooRestClient(url, api_key)
        partners = client.request(
            "GET",
            "res.partner/search",
            query={"domain": "[('is_company','=',True)]", "limit": "10"},
        )
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        db: str = "",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.db = db
        self.timeout = timeout
        self._session = session or requests.Session()

    def _headers(self) -> dict:
        headers = {
            "Accept": "application/json",
            "api-key": self.api_key,
        }
        if self.db:
            headers["db"] = self.db
        return headers

    def request(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        query: Optional[dict] = None,
    ) -> Any:
        """
        Issue one API request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: Path relative to the gateway base URL
            body: JSON body (None = no body; any other JSON value is sent)
            query: Query string parameters

        Returns:
            Decoded JSON response ({} for an empty body)

        Raises:
            AuthenticationError: If the API key is rejected (401/403)
            ApiRequestError: On network failure, other non-2xx status or non-JSON body
        """
        url = f"{self.url}/{endpoint.lstrip('/')}"

        logger.debug(f"Odoo REST {method.upper()} {url} qs={query}")
        try:
            response = self._session.request(
                method.upper(),
                url,
                json=body,
                params=query or None,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Odoo REST request error: {method.upper()} {url} - {e}")
            raise ApiRequestError(f"Could not connect to Odoo REST gateway: {e}")

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Odoo REST gateway rejected the API key (status {response.status_code})",
                status_code=response.status_code,
                response_text=response.text,
            )
        if not response.ok:
            logger.error(
                f"Odoo REST returned error status {response.status_code}: "
                f"{method.upper()} {url} - Response: {response.text[:200]}"
            )
            raise ApiRequestError(
                f"Odoo REST error {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
                response_text=response.text,
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            raise ApiRequestError(
                f"Odoo REST returned a non-JSON response for {endpoint}: {response.text[:200]}",
                status_code=response.status_code,
                response_text=response.text,
            )


def _error_detail(response: requests.Response) -> str:
    """Best-effort error message from an Odoo error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] or response.reason or "unknown error"
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            return str(error.get("message") or error)
        return str(error or data.get("message") or data)
    return str(data)


def get_odoo_rest_client(settings: Optional[Settings] = None) -> OdooRestClient:
    """
    Create an Odoo REST client from settings.

    Args:
        settings: Optional settings (uses get_settings() if not provided)

    Returns:
        Configured OdooRestClient instance
    """
    if settings is None:
        settings = get_settings()

    return OdooRestClient(
        timeout=settings.request_timeout,
        **settings.get_odoo_rest_credentials(),
    )
