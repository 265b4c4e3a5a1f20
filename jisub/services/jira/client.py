"""
Jira HTTP client for API requests with bearer authentication.
"""
import logging
import time
from typing import Dict, Any, Optional

import httpx

from jisub.models.jira import (
    JiraConfigurationError,
    JiraProtocolError,
    JiraRemoteError,
    JiraTransportError
)

logger = logging.getLogger(__name__)


class JiraClient:
    """Synchronous HTTP client for the Jira REST API."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize the Jira client.

        Args:
            base_url: API root (e.g. 'https://jira.example.com/rest/api/2')
            token: Optional bearer token; unauthenticated when empty
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used to substitute the network
        """
        if not base_url:
            raise JiraConfigurationError("missing jira.url value")

        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._http = httpx.Client(timeout=timeout, transport=transport)

        if not self.token:
            logger.warning("Jira bearer token not configured, requests are unauthenticated")

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Release pooled connections."""
        self._http.close()

    def _get_headers(self, with_body: bool) -> Dict[str, str]:
        """Get request headers, including authentication when configured."""
        headers = {"Accept": "application/json"}
        if with_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _build_api_url(self, endpoint: str) -> str:
        """Build full API URL for given endpoint."""
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def make_request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        """
        Make HTTP request to Jira API.

        Args:
            method: HTTP method (GET, POST, PUT)
            endpoint: API endpoint (without base URL)
            payload: Optional JSON payload

        Returns:
            HTTP response object

        Raises:
            JiraTransportError: If the request could not be completed
        """
        url = self._build_api_url(endpoint)
        headers = self._get_headers(with_body=payload is not None)

        start_time = time.time()

        try:
            logger.info(f"JIRA API → {method} {endpoint}")
            response = self._http.request(method, url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            duration = time.time() - start_time
            logger.error(f"JIRA API ← {method} {endpoint} - TIMEOUT - {duration:.3f}s")
            raise JiraTransportError(f"Request timeout for {method} {endpoint}: {e}") from e
        except httpx.RequestError as e:
            duration = time.time() - start_time
            logger.error(f"JIRA API ← {method} {endpoint} - ERROR - {duration:.3f}s - {e}")
            raise JiraTransportError(f"Request error for {method} {endpoint}: {e}") from e

        duration = time.time() - start_time
        logger.info(f"JIRA API ← {method} {endpoint} - {response.status_code} - {duration:.3f}s")
        return response

    def handle_response(
        self,
        response: httpx.Response,
        operation: str,
        expect_body: bool = True
    ) -> Optional[Any]:
        """
        Classify an HTTP response and decode its JSON body.

        Args:
            response: HTTP response object
            operation: Description of the operation for error messages
            expect_body: Whether a 2xx body should be decoded

        Returns:
            Parsed JSON, or None for 204 and for calls not expecting a body

        Raises:
            JiraRemoteError: If the status is outside the 2xx range
            JiraProtocolError: If a 2xx body is not valid JSON
        """
        status_code = response.status_code

        if status_code == 204:
            return None

        if status_code < 200 or status_code >= 300:
            error_msg = f"{operation} failed: response error {status_code} {response.text}"
            logger.error(error_msg)
            raise JiraRemoteError(error_msg, status_code=status_code, response_text=response.text)

        if not expect_body:
            return None

        try:
            return response.json()
        except ValueError as e:
            error_msg = f"{operation} returned invalid JSON (status {status_code}): {e}"
            logger.error(error_msg)
            raise JiraProtocolError(error_msg) from e
