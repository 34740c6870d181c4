"""
Ocilion REST Client

Session-cookie authenticated client for the Ocilion API.
"""

import logging
from typing import Any, Optional

import requests

from restnodes.config import Settings, get_settings
from restnodes.errors import ApiRequestError, AuthenticationError

logger = logging.getLogger(__name__)


class OcilionClient:
    """
    Ocilion API client.

    A session cookie is obtained once via login() and passed explicitly to
    every request, so one cookie serves a whole execution batch.

    Usage:
        client = OcilionClient(url, username, password)
        cookie = client.login()
        customer = client.request("GET", f"{world_id}/customers/42", cookie=cookie)
    """

    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        login_path: str = "login",
        cookie_name: str = "",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url.rstrip("/")
        self.username = username
        self.password = password
        self.login_path = login_path.strip("/")
        self.cookie_name = cookie_name
        self.timeout = timeout
        self._session = session or requests.Session()

    def _url(self, endpoint: str) -> str:
        return f"{self.url}/{endpoint.lstrip('/')}"

    def login(self) -> str:
        """
        Exchange the stored credentials for a session cookie.

        Returns:
            Cookie header value ("name=value")

        Raises:
            AuthenticationError: If the login is rejected or sets no cookie
        """
        url = self._url(self.login_path)
        try:
            response = self._session.post(
                url,
                json={"username": self.username, "password": self.password},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Ocilion login request failed: {e}")
            raise AuthenticationError(f"Ocilion login failed: {e}")

        if not response.ok:
            logger.error(f"Ocilion login rejected with status {response.status_code}")
            raise AuthenticationError(
                f"Ocilion login failed for user {self.username} on {self.url} "
                f"(status {response.status_code})",
                status_code=response.status_code,
                response_text=response.text,
            )

        cookies = response.cookies
        if self.cookie_name:
            value = cookies.get(self.cookie_name)
            name = self.cookie_name
        else:
            first = next(iter(cookies), None)
            name, value = (first.name, first.value) if first is not None else ("", None)

        if not value:
            raise AuthenticationError(
                f"Ocilion login for user {self.username} returned no session cookie",
                status_code=response.status_code,
            )

        logger.info(f"Authenticated with Ocilion as {self.username}")
        return f"{name}={value}"

    def request(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        query: Optional[dict] = None,
        cookie: str = "",
    ) -> Any:
        """
        Issue one API request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: Path relative to the base URL
            body: JSON body (None = no body; any other JSON value is sent)
            query: Query string parameters
            cookie: Session cookie from login()

        Returns:
            Decoded JSON response ({} for an empty body)

        Raises:
            ApiRequestError: On network failure, non-2xx status or non-JSON body
        """
        url = self._url(endpoint)
        headers = {"Accept": "application/json"}
        if cookie:
            headers["Cookie"] = cookie

        logger.debug(f"Ocilion {method.upper()} {url} qs={query}")
        try:
            response = self._session.request(
                method.upper(),
                url,
                json=body,
                params=query or None,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            text = e.response.text if e.response is not None else ""
            logger.error(f"Ocilion API returned error status {status}: {method.upper()} {url}")
            raise ApiRequestError(
                f"Ocilion API error {status}: {text[:200] or e}",
                status_code=status,
                response_text=text,
            )
        except requests.RequestException as e:
            logger.error(f"Ocilion API request error: {method.upper()} {url} - {e}")
            raise ApiRequestError(f"Could not connect to Ocilion: {e}")

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            raise ApiRequestError(
                f"Ocilion API returned a non-JSON response for {endpoint}",
                status_code=response.status_code,
                response_text=response.text,
            )


def get_ocilion_client(settings: Optional[Settings] = None) -> OcilionClient:
    """
    Create an Ocilion client from settings.

    Args:
        settings: Optional settings (uses get_settings() if not provided)

    Returns:
        Configured OcilionClient instance
    """
    if settings is None:
        settings = get_settings()

    return OcilionClient(
        timeout=settings.request_timeout,
        **settings.get_ocilion_credentials(),
    )
