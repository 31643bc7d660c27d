"""
Property-based tests for the DNS fallback checker.

The DNS-over-HTTPS resolver is replaced by httpx.MockTransport.
"""

import asyncio
from typing import Callable

import httpx
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_shortlist.config import DNSFallbackConfig
from domain_shortlist.dns_fallback import DNSFallbackChecker, DNSResponse
from domain_shortlist.enums import Availability, DNSErrorCode


RESOLVER_URL = "https://dns.example/resolve"


def make_checker(
    handler: Callable[[httpx.Request], httpx.Response],
    simulation_mode: bool = False,
) -> DNSFallbackChecker:
    return DNSFallbackChecker(
        config=DNSFallbackConfig(resolver_url=RESOLVER_URL),
        simulation_mode=simulation_mode,
        transport=httpx.MockTransport(handler),
    )


def run_check(checker: DNSFallbackChecker, domain: str = "nordicai.com") -> DNSResponse:
    async def check() -> DNSResponse:
        async with checker:
            return await checker.check(domain)

    return asyncio.run(check())


def a_record(name: str, address: str) -> dict:
    return {"name": f"{name}.", "type": 1, "TTL": 300, "data": address}


class TestDNSClassification:
    """Answer records decide taken versus available."""

    @given(answers=st.integers(min_value=1, max_value=5))
    @settings(max_examples=20)
    def test_any_answer_means_taken(self, answers: int) -> None:
        body = {
            "Status": 0,
            "Answer": [a_record("nordicai.com", f"192.0.2.{i}") for i in range(answers)],
        }
        response = run_check(make_checker(lambda r: httpx.Response(200, json=body)))

        assert response.availability is Availability.TAKEN
        assert response.answer_count == answers
        assert response.error is None

    def test_nxdomain_means_available(self) -> None:
        response = run_check(make_checker(lambda r: httpx.Response(200, json={"Status": 3})))
        assert response.availability is Availability.AVAILABLE
        assert response.error is None

    def test_no_address_record_means_available(self) -> None:
        """Names registered without an A record are reported as available."""
        body = {"Status": 0, "Answer": []}
        response = run_check(make_checker(lambda r: httpx.Response(200, json=body)))
        assert response.availability is Availability.AVAILABLE

    def test_request_asks_for_a_records(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"Status": 3})

        run_check(make_checker(handler), "fjordlabs.se")

        assert str(seen[0].url).startswith(RESOLVER_URL)
        assert seen[0].url.params["name"] == "fjordlabs.se"
        assert seen[0].url.params["type"] == "A"


class TestDNSFailures:
    """Failed resolutions are unknown and never raise."""

    @given(rcode=st.sampled_from([1, 2, 4, 5]))
    @settings(max_examples=10)
    def test_server_failure_codes_are_unknown(self, rcode: int) -> None:
        response = run_check(make_checker(lambda r: httpx.Response(200, json={"Status": rcode})))
        assert response.availability is Availability.UNKNOWN
        assert response.error is not None

    @given(status_code=st.sampled_from([400, 403, 500, 502, 503]))
    @settings(max_examples=10)
    def test_http_errors_are_unknown(self, status_code: int) -> None:
        response = run_check(make_checker(lambda r: httpx.Response(status_code, text="error")))
        assert response.availability is Availability.UNKNOWN
        assert response.http_status_code == status_code

    def test_undecodable_body_is_unknown(self) -> None:
        response = run_check(make_checker(lambda r: httpx.Response(200, content=b"not json")))
        assert response.availability is Availability.UNKNOWN
        assert response.error.code is DNSErrorCode.PARSE_ERROR

    def test_non_object_body_is_unknown(self) -> None:
        response = run_check(make_checker(lambda r: httpx.Response(200, json=[1, 2])))
        assert response.availability is Availability.UNKNOWN
        assert response.error.code is DNSErrorCode.PARSE_ERROR

    def test_connection_error_is_unknown(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        response = run_check(make_checker(handler))
        assert response.availability is Availability.UNKNOWN
        assert response.error.code is DNSErrorCode.NETWORK_ERROR

    def test_timeout_is_unknown(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("slow", request=request)

        response = run_check(make_checker(handler))
        assert response.availability is Availability.UNKNOWN
        assert response.error.code is DNSErrorCode.TIMEOUT

    def test_simulation_mode_never_resolves(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"Status": 3})

        response = run_check(make_checker(handler, simulation_mode=True))

        assert calls == []
        assert response.availability is Availability.UNKNOWN
        assert response.error.code is DNSErrorCode.SIMULATION
