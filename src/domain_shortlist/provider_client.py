"""
Availability provider client.

This module wraps the Domainr status API (served through RapidAPI) with an
async httpx client. A lookup for `name.tld` yields the provider's status
summary, which is then classified as available, taken or unknown.

The API key and host are resolved from the environment on every call, so a
missing RAPIDAPI_KEY is not fatal: the lookup simply reports a
`missing_credentials` failure and the caller falls back to DNS.
"""

from dataclasses import dataclass
from typing import Any, Optional
import time

import httpx

from .config import ProviderConfig
from .enums import Availability, ProviderErrorCode
from .exceptions import ProviderError


# Status summaries that mean nobody holds the name
AVAILABLE_SUMMARIES = frozenset({"inactive", "undelegated", "unknown"})

STATUS_PATH = "/v2/status"


def map_status_summary(summary: Optional[str]) -> Availability:
    """
    Map a provider status summary to tri-state availability.

    'inactive', 'undelegated' and 'unknown' mean available; every other
    summary ('active', 'parked', 'redirect', ...) means taken. No summary
    at all means unknown.
    """
    if not summary:
        return Availability.UNKNOWN
    if summary.strip().lower() in AVAILABLE_SUMMARIES:
        return Availability.AVAILABLE
    return Availability.TAKEN


@dataclass
class ProviderFailure:
    """Error information from a provider lookup."""

    code: ProviderErrorCode
    message: str
    http_status_code: Optional[int] = None


@dataclass
class ProviderResponse:
    """Complete provider lookup response."""

    domain: str
    summary: Optional[str]
    http_status_code: int
    error: Optional[ProviderFailure]
    raw_response: Optional[Any] = None
    response_time_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def availability(self) -> Availability:
        return map_status_summary(self.summary)


class AvailabilityProviderClient:
    """
    Async client for the external availability provider.

    `query()` never raises for network or HTTP problems; failures are
    returned as a ProviderResponse carrying a ProviderFailure.
    """

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        simulation_mode: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the provider client.

        Args:
            config: Provider configuration (key, host, timeout)
            simulation_mode: If True, no real network requests are made
            transport: Optional httpx transport (used by tests)
        """
        self._config = config or ProviderConfig()
        self._simulation_mode = simulation_mode
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "AvailabilityProviderClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def timeout_seconds(self) -> float:
        return self._config.timeout_seconds

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=True,
                timeout=httpx.Timeout(self._config.timeout_seconds),
                transport=self._transport,
            )
        return self._client

    def _parse_summary(self, json_data: Any) -> Optional[str]:
        """Extract `status[0].summary`, or None when it is not usable."""
        if not isinstance(json_data, dict):
            return None
        statuses = json_data.get("status")
        if not isinstance(statuses, list) or not statuses:
            return None
        first = statuses[0]
        if not isinstance(first, dict):
            return None
        summary = first.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            return None
        return summary.strip().lower()

    async def _fetch_status(self, domain: str) -> tuple[int, Any]:
        """
        Perform the HTTP request.

        Raises:
            ProviderError: On missing credentials, transport errors,
                timeouts, non-2xx responses or undecodable bodies
        """
        api_key = self._config.resolve_api_key()
        if not api_key:
            raise ProviderError(
                code=ProviderErrorCode.MISSING_CREDENTIALS.value,
                message="RAPIDAPI_KEY not configured",
            )
        api_host = self._config.resolve_api_host()
        url = f"https://{api_host}{STATUS_PATH}"

        client = self._ensure_client()
        try:
            response = await client.get(
                url,
                params={"domain": domain},
                headers={
                    "x-rapidapi-key": api_key,
                    "x-rapidapi-host": api_host,
                },
            )
        except httpx.TimeoutException as e:
            raise ProviderError(
                code=ProviderErrorCode.TIMEOUT.value,
                message=f"Provider request timed out after {self._config.timeout_seconds}s",
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(
                code=ProviderErrorCode.NETWORK_ERROR.value,
                message=f"Connection error: {e}",
            ) from e

        if response.status_code == 429:
            raise ProviderError(
                code=ProviderErrorCode.RATE_LIMITED.value,
                message="Rate limited by provider",
                details={"http_status_code": 429},
            )
        if not response.is_success:
            raise ProviderError(
                code=ProviderErrorCode.HTTP_ERROR.value,
                message=f"Unexpected HTTP status: {response.status_code}",
                details={"http_status_code": response.status_code},
            )

        try:
            return response.status_code, response.json()
        except ValueError as e:
            raise ProviderError(
                code=ProviderErrorCode.PARSE_ERROR.value,
                message=f"Failed to parse provider response: {e}",
                details={"http_status_code": response.status_code},
            ) from e

    async def query(self, domain: str) -> ProviderResponse:
        """
        Look up one fully qualified name, e.g. 'nordicai.com'.

        Args:
            domain: The name.tld to look up

        Returns:
            ProviderResponse with the status summary or a failure
        """
        start_time = time.perf_counter()

        if self._simulation_mode:
            return ProviderResponse(
                domain=domain,
                summary=None,
                http_status_code=0,
                error=ProviderFailure(
                    code=ProviderErrorCode.SIMULATION,
                    message="Simulation mode: provider not contacted",
                ),
                response_time_ms=self._elapsed_ms(start_time),
            )

        try:
            status_code, json_data = await self._fetch_status(domain)
        except ProviderError as e:
            return ProviderResponse(
                domain=domain,
                summary=None,
                http_status_code=e.details.get("http_status_code", 0),
                error=ProviderFailure(
                    code=ProviderErrorCode(e.code),
                    message=e.message,
                    http_status_code=e.details.get("http_status_code"),
                ),
                response_time_ms=self._elapsed_ms(start_time),
            )

        return ProviderResponse(
            domain=domain,
            summary=self._parse_summary(json_data),
            http_status_code=status_code,
            error=None,
            raw_response=json_data,
            response_time_ms=self._elapsed_ms(start_time),
        )

    def _elapsed_ms(self, start_time: float) -> float:
        """Calculate elapsed time in milliseconds."""
        return (time.perf_counter() - start_time) * 1000

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
