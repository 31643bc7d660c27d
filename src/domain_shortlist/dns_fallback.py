"""
DNS fallback checker.

Secondary availability signal used when the provider is unreachable or
unconfigured. Resolves the A record of `name.tld` through a public
DNS-over-HTTPS JSON endpoint (Google's `dns.google/resolve` by default).

Classification:
- at least one answer record   -> taken
- resolution ok, no answers    -> available (weak signal: registered names
  without an A record, e.g. mail-only domains, are reported as available)
- resolution failed            -> unknown
"""

from dataclasses import dataclass
from typing import Optional
import time

import httpx

from .config import DNSFallbackConfig
from .enums import Availability, DNSErrorCode
from .exceptions import DNSLookupError


# DNS response codes that still count as a completed resolution
RCODE_NOERROR = 0
RCODE_NXDOMAIN = 3


@dataclass
class DNSFailure:
    """Error information from a DNS lookup."""

    code: DNSErrorCode
    message: str


@dataclass
class DNSResponse:
    """Result of a DNS fallback lookup."""

    domain: str
    availability: Availability
    answer_count: int
    error: Optional[DNSFailure] = None
    http_status_code: int = 0
    response_time_ms: float = 0.0


class DNSFallbackChecker:
    """Async DNS-over-HTTPS checker; `check()` never raises."""

    def __init__(
        self,
        config: Optional[DNSFallbackConfig] = None,
        simulation_mode: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the DNS fallback checker.

        Args:
            config: Resolver URL and timeout
            simulation_mode: If True, no real network requests are made
            transport: Optional httpx transport (used by tests)
        """
        self._config = config or DNSFallbackConfig()
        self._simulation_mode = simulation_mode
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "DNSFallbackChecker":
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

    async def _resolve_answers(self, domain: str) -> tuple[int, int]:
        """
        Query the resolver for A records.

        Returns:
            Tuple of (http_status_code, answer_count)

        Raises:
            DNSLookupError: If the resolution itself failed
        """
        client = self._ensure_client()
        try:
            response = await client.get(
                self._config.resolver_url,
                params={"name": domain, "type": "A"},
                headers={"Accept": "application/dns-json"},
            )
        except httpx.TimeoutException as e:
            raise DNSLookupError(
                code=DNSErrorCode.TIMEOUT.value,
                message=f"DNS lookup timed out after {self._config.timeout_seconds}s",
            ) from e
        except httpx.HTTPError as e:
            raise DNSLookupError(
                code=DNSErrorCode.NETWORK_ERROR.value,
                message=f"DNS lookup failed: {e}",
            ) from e

        if not response.is_success:
            raise DNSLookupError(
                code=DNSErrorCode.NETWORK_ERROR.value,
                message=f"Resolver returned HTTP {response.status_code}",
                details={"http_status_code": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DNSLookupError(
                code=DNSErrorCode.PARSE_ERROR.value,
                message=f"Failed to parse resolver response: {e}",
                details={"http_status_code": response.status_code},
            ) from e

        if not isinstance(data, dict):
            raise DNSLookupError(
                code=DNSErrorCode.PARSE_ERROR.value,
                message="Resolver response is not a JSON object",
                details={"http_status_code": response.status_code},
            )

        rcode = data.get("Status", RCODE_NOERROR)
        if rcode not in (RCODE_NOERROR, RCODE_NXDOMAIN):
            raise DNSLookupError(
                code=DNSErrorCode.NETWORK_ERROR.value,
                message=f"Resolver reported DNS status {rcode}",
                details={"http_status_code": response.status_code},
            )

        answers = data.get("Answer")
        answer_count = len(answers) if isinstance(answers, list) else 0
        return response.status_code, answer_count

    async def check(self, domain: str) -> DNSResponse:
        """
        Classify one fully qualified name, e.g. 'nordicai.com'.

        Args:
            domain: The name.tld to resolve

        Returns:
            DNSResponse with tri-state availability
        """
        start_time = time.perf_counter()

        if self._simulation_mode:
            return DNSResponse(
                domain=domain,
                availability=Availability.UNKNOWN,
                answer_count=0,
                error=DNSFailure(
                    code=DNSErrorCode.SIMULATION,
                    message="Simulation mode: resolver not contacted",
                ),
                response_time_ms=self._elapsed_ms(start_time),
            )

        try:
            status_code, answer_count = await self._resolve_answers(domain)
        except DNSLookupError as e:
            return DNSResponse(
                domain=domain,
                availability=Availability.UNKNOWN,
                answer_count=0,
                error=DNSFailure(code=DNSErrorCode(e.code), message=e.message),
                http_status_code=e.details.get("http_status_code", 0),
                response_time_ms=self._elapsed_ms(start_time),
            )

        return DNSResponse(
            domain=domain,
            availability=Availability.TAKEN if answer_count > 0 else Availability.AVAILABLE,
            answer_count=answer_count,
            http_status_code=status_code,
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
