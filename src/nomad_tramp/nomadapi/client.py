"""Nomad HTTP API client.

Provides a read-only HTTP client with optional ACL token authentication,
a bounded request timeout and response validation using Pydantic models.
"""

import time
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx
import pydantic
import structlog

from ..errors import ParseError, TransportError
from .types import RawAllocation

logger = structlog.get_logger(__name__)

DEFAULT_ADDRESS = "http://localhost:4646"

# The API itself never times out a blocked request.
DEFAULT_TIMEOUT = 10.0


class NomadApiClient:
    """HTTP client for the Nomad HTTP API.

    Lightweight client that handles authentication, makes HTTP requests,
    validates responses, and returns Pydantic-validated data objects.
    Address resolution and completion logic live in their own modules.

    Can be used as a context manager for automatic cleanup.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_ADDRESS,
        token_file: str | Path | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the API client.

        Args:
            base_url: Base URL for the Nomad API (e.g., "http://localhost:4646").
            token_file: Path to file containing an ACL token.
            timeout: Request timeout in seconds (default: 10.0).
            transport: Optional httpx transport, used to serve canned responses.

        Raises:
            ValueError: If base_url is empty or not a valid URL, or timeout is
                not positive.
            FileNotFoundError: If token_file is specified but doesn't exist.
        """
        if not base_url:
            msg = "base_url cannot be empty"
            raise ValueError(msg)
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
        try:
            httpx.URL(base_url)
        except httpx.InvalidURL as e:
            msg = f"Invalid base_url {base_url!r}: {e}"
            raise ValueError(msg) from e

        self.base_url = base_url.rstrip("/")
        self.token: str | None = None
        self._timeout = timeout
        self._transport = transport

        self._headers = {"Accept": "application/json"}

        # Read token from file if provided
        if token_file:
            token_path = Path(token_file)
            if not token_path.exists():
                msg = f"Token file not found: {token_file}"
                raise FileNotFoundError(msg)
            self.token = token_path.read_text().strip()
            self._headers["X-Nomad-Token"] = self.token

        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or lazily create the underlying httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self):
        """Close the HTTP client if open."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()

    def _make_request(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make a GET request to the Nomad API and decode the JSON body.

        Args:
            endpoint: API endpoint path (e.g., "/v1/allocations").
            params: Optional query parameters.

        Returns:
            Decoded JSON response.

        Raises:
            TransportError: If the request fails, times out or returns non-2xx.
            ParseError: If the body is not valid JSON.
        """
        start_time = time.time()
        params = params or {}

        try:
            logger.debug(
                "Making API request",
                method="GET",
                endpoint=endpoint,
                params=params,
            )
            response = self.client.get(endpoint, params=params)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(
                "API request timed out",
                endpoint=endpoint,
                timeout_seconds=self._timeout,
            )
            msg = f"Nomad API at {self.base_url} timed out after {self._timeout}s"
            raise TransportError(msg) from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "API returned error status",
                endpoint=endpoint,
                status_code=e.response.status_code,
            )
            msg = (
                f"Nomad API returned HTTP {e.response.status_code} "
                f"for {endpoint}: {e.response.text.strip()}"
            )
            raise TransportError(msg) from e
        except httpx.HTTPError as e:
            logger.error("API request failed", endpoint=endpoint, error=str(e))
            msg = f"Nomad API at {self.base_url} is unreachable: {e}"
            raise TransportError(msg) from e

        duration = time.time() - start_time
        logger.debug("API request completed", duration_seconds=round(duration, 3))

        try:
            return response.json()
        except ValueError as e:
            msg = f"Nomad API returned malformed JSON for {endpoint}"
            raise ParseError(msg) from e

    def _parse_allocations(self, data: Any, endpoint: str) -> list[RawAllocation]:
        if not isinstance(data, list):
            msg = (
                f"Expected a JSON array from {endpoint}, "
                f"got {type(data).__name__}"
            )
            raise ParseError(msg)

        try:
            return [RawAllocation.model_validate(alloc) for alloc in data]
        except pydantic.ValidationError as e:
            msg = f"Unexpected allocation shape from {endpoint}: {e}"
            raise ParseError(msg) from e

    def get_allocations(self, namespace: str = "*") -> list[RawAllocation]:
        """Fetch allocations across namespaces.

        Args:
            namespace: Namespace filter, ``*`` for all namespaces.

        Returns:
            List of validated RawAllocation objects in API order.

        Raises:
            TransportError: If the HTTP request fails.
            ParseError: If the response is malformed.
        """
        endpoint = "/v1/allocations"
        data = self._make_request(endpoint=endpoint, params={"namespace": namespace})
        return self._parse_allocations(data, endpoint)

    def get_job_allocations(
        self,
        job: str,
        namespace: str | None = None,
    ) -> list[RawAllocation]:
        """Fetch the allocations of a single job.

        Args:
            job: Job name (ID). Escaped before being placed in the path.
            namespace: Optional namespace; the agent default is used if None.

        Returns:
            List of validated RawAllocation objects in API order.

        Raises:
            TransportError: If the HTTP request fails.
            ParseError: If the response is malformed.
        """
        endpoint = f"/v1/job/{quote(job, safe='')}/allocations"
        params = {}
        if namespace is not None:
            params["namespace"] = namespace

        data = self._make_request(endpoint=endpoint, params=params)
        return self._parse_allocations(data, endpoint)
