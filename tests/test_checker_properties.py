"""
Property-based tests for the Domain Checker.

Provider and DNS fallback are replaced by in-memory fakes; pacing runs on a
fake clock whose sleep only records the requested delay.
"""

import asyncio
from io import StringIO
from typing import Optional

from hypothesis import given, settings
from hypothesis import strategies as st

from domain_shortlist.audit_logger import AuditLogger
from domain_shortlist.checker import DomainChecker, normalize_tlds
from domain_shortlist.config import PacingConfig, SystemConfig
from domain_shortlist.dns_fallback import DNSFailure, DNSResponse
from domain_shortlist.enums import (
    Availability,
    DNSErrorCode,
    LogLevel,
    LookupSource,
    ProviderErrorCode,
)
from domain_shortlist.provider_client import ProviderFailure, ProviderResponse


class FakeClock:
    """Clock that only moves when something sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeProvider:
    """Serves fixed summaries; names without an entry fail like an outage."""

    def __init__(self, summaries: Optional[dict] = None, error: Optional[Exception] = None) -> None:
        self.summaries = summaries or {}
        self.error = error
        self.queries: list[str] = []
        self.closed = False

    async def query(self, domain: str) -> ProviderResponse:
        self.queries.append(domain)
        if self.error is not None:
            raise self.error
        if domain in self.summaries:
            return ProviderResponse(domain=domain, summary=self.summaries[domain], http_status_code=200, error=None)
        return ProviderResponse(
            domain=domain,
            summary=None,
            http_status_code=503,
            error=ProviderFailure(code=ProviderErrorCode.HTTP_ERROR, message="Unexpected HTTP status: 503"),
        )

    async def close(self) -> None:
        self.closed = True


class FakeDNS:
    """Answers from a fixed table; names without an entry fail to resolve."""

    def __init__(self, answers: Optional[dict] = None) -> None:
        self.answers = answers or {}
        self.lookups: list[str] = []
        self.closed = False

    async def check(self, domain: str) -> DNSResponse:
        self.lookups.append(domain)
        if domain not in self.answers:
            return DNSResponse(
                domain=domain,
                availability=Availability.UNKNOWN,
                answer_count=0,
                error=DNSFailure(code=DNSErrorCode.NETWORK_ERROR, message="DNS lookup failed"),
            )
        count = self.answers[domain]
        return DNSResponse(
            domain=domain,
            availability=Availability.TAKEN if count else Availability.AVAILABLE,
            answer_count=count,
        )

    async def close(self) -> None:
        self.closed = True


def make_checker(provider=None, dns=None, logger=None):
    clock = FakeClock()
    checker = DomainChecker(
        config=SystemConfig(),
        provider=provider or FakeProvider(),
        dns_checker=dns or FakeDNS(),
        logger=logger,
        clock=clock,
        sleep=clock.sleep,
    )
    return checker, clock


name_strategy = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789-", min_size=1, max_size=12)
tld_list_strategy = st.lists(st.sampled_from(["com", "ai", "se", "no", "io"]), max_size=5)


class TestSingleLookup:
    """Provider first, DNS second, unknown last."""

    def test_provider_summaries_decide_directly(self) -> None:
        provider = FakeProvider({"nordicai.com": "active", "nordicai.ai": "inactive"})
        dns = FakeDNS()
        checker, _ = make_checker(provider, dns)

        result = asyncio.run(checker.check_domain_availability("nordicai", ["com", "ai"]))

        assert result.domain == "nordicai"
        assert result.availability == {"com": Availability.TAKEN, "ai": Availability.AVAILABLE}
        assert result.to_dict()["availability"] == {"com": False, "ai": True}
        assert [c.source for c in result.checks] == [LookupSource.PROVIDER, LookupSource.PROVIDER]
        assert dns.lookups == []

    def test_provider_failure_falls_back_to_dns(self) -> None:
        dns = FakeDNS({"nordicai.se": 1, "nordicai.no": 0})
        checker, _ = make_checker(FakeProvider(), dns)

        result = asyncio.run(checker.check_domain_availability("nordicai", ["se", "no"]))

        assert result.availability == {"se": Availability.TAKEN, "no": Availability.AVAILABLE}
        assert all(c.source is LookupSource.DNS for c in result.checks)
        assert dns.lookups == ["nordicai.se", "nordicai.no"]

    def test_both_sources_failing_is_unknown(self) -> None:
        checker, _ = make_checker(FakeProvider(), FakeDNS())

        check = asyncio.run(checker.check_single_domain("nordicai", "com"))

        assert check.availability is Availability.UNKNOWN
        assert check.error == "DNS lookup failed"

    def test_unexpected_exception_becomes_unknown(self) -> None:
        output = StringIO()
        logger = AuditLogger(output_stream=output, min_level=LogLevel.DEBUG)
        checker, _ = make_checker(FakeProvider(error=RuntimeError("boom")), FakeDNS(), logger)

        check = asyncio.run(checker.check_single_domain("nordicai", "com"))

        assert check.availability is Availability.UNKNOWN
        assert check.source is LookupSource.NONE
        assert check.error == "boom"
        assert any(e.level is LogLevel.ERROR for e in logger.entries)

    def test_missing_credentials_fallback_is_quiet(self) -> None:
        class UnconfiguredProvider(FakeProvider):
            async def query(self, domain: str) -> ProviderResponse:
                return ProviderResponse(
                    domain=domain,
                    summary=None,
                    http_status_code=0,
                    error=ProviderFailure(
                        code=ProviderErrorCode.MISSING_CREDENTIALS,
                        message="RAPIDAPI_KEY not configured",
                    ),
                )

        logger = AuditLogger(output_stream=StringIO(), min_level=LogLevel.DEBUG)
        checker, _ = make_checker(UnconfiguredProvider(), FakeDNS({"nordicai.com": 2}), logger)

        check = asyncio.run(checker.check_single_domain("nordicai", "com"))

        assert check.availability is Availability.TAKEN
        assert not any(e.level is LogLevel.WARN for e in logger.entries)

    def test_simulation_mode_is_quiet(self) -> None:
        logger = AuditLogger(output_stream=StringIO(), min_level=LogLevel.DEBUG)
        checker = DomainChecker(
            config=SystemConfig(simulation_mode=True),
            logger=logger,
            clock=FakeClock(),
        )

        check = asyncio.run(checker.check_single_domain("nordicai", "com"))

        assert check.availability is Availability.UNKNOWN
        assert check.source is LookupSource.DNS
        assert not any(e.level is LogLevel.WARN for e in logger.entries)


class TestResultShapeProperty:
    """Exactly one entry per TLD and one result per name."""

    @given(tlds=tld_list_strategy)
    @settings(max_examples=50)
    def test_one_entry_per_distinct_tld(self, tlds: list[str]) -> None:
        checker, _ = make_checker()

        result = asyncio.run(checker.check_domain_availability("nordicai", tlds))

        assert list(result.availability) == normalize_tlds(tlds)
        assert len(result.checks) == len(set(tlds))

    @given(names=st.lists(name_strategy, max_size=6), tlds=tld_list_strategy)
    @settings(max_examples=50)
    def test_bulk_output_matches_input_order(self, names: list[str], tlds: list[str]) -> None:
        checker, _ = make_checker()

        results = asyncio.run(checker.check_bulk_domains(names, tlds))

        assert [r.domain for r in results] == names

    def test_empty_tld_list_gives_empty_availability(self) -> None:
        checker, clock = make_checker()

        result = asyncio.run(checker.check_domain_availability("nordicai", []))

        assert result.availability == {}
        assert clock.sleeps == []

    def test_tld_spelling_is_normalized(self) -> None:
        assert normalize_tlds([".COM", "ai", "com", " se ", ""]) == ["com", "ai", "se"]


class TestPacingProperty:
    """1.5s between TLDs of a name, 2s between names, nothing after the last."""

    @given(tld_count=st.integers(min_value=0, max_value=4))
    @settings(max_examples=20)
    def test_tld_gaps_within_one_name(self, tld_count: int) -> None:
        checker, clock = make_checker()
        tlds = ["com", "ai", "se", "no"][:tld_count]

        asyncio.run(checker.check_domain_availability("nordicai", tlds))

        assert clock.sleeps == [1.5] * max(tld_count - 1, 0)

    @given(
        name_count=st.integers(min_value=0, max_value=4),
        tld_count=st.integers(min_value=1, max_value=4),
    )
    @settings(max_examples=30)
    def test_total_pacing_for_a_batch(self, name_count: int, tld_count: int) -> None:
        checker, clock = make_checker()
        names = [f"name{i}" for i in range(name_count)]
        tlds = ["com", "ai", "se", "no"][:tld_count]

        asyncio.run(checker.check_bulk_domains(names, tlds))

        assert clock.sleeps.count(2.0) == max(name_count - 1, 0)
        assert clock.sleeps.count(1.5) == name_count * (tld_count - 1)
        assert len(clock.sleeps) == max(name_count - 1, 0) + name_count * (tld_count - 1)

    def test_each_batch_starts_without_waiting(self) -> None:
        checker, clock = make_checker()

        asyncio.run(checker.check_bulk_domains(["alpha", "beta"], ["com"]))
        asyncio.run(checker.check_bulk_domains(["gamma", "delta"], ["com"]))

        assert clock.sleeps == [2.0, 2.0]

    def test_tld_gap_does_not_carry_over_to_the_next_name(self) -> None:
        clock = FakeClock()
        checker = DomainChecker(
            config=SystemConfig(pacing=PacingConfig(tld_delay_seconds=3.0, domain_delay_seconds=0.0)),
            provider=FakeProvider(),
            dns_checker=FakeDNS(),
            clock=clock,
            sleep=clock.sleep,
        )

        asyncio.run(checker.check_bulk_domains(["alpha", "beta"], ["com", "ai"]))

        assert clock.sleeps == [3.0, 3.0]

    def test_lookups_run_in_input_order(self) -> None:
        provider = FakeProvider()
        checker, _ = make_checker(provider)

        asyncio.run(checker.check_bulk_domains(["alpha", "beta"], ["com", "ai"]))

        assert provider.queries == ["alpha.com", "alpha.ai", "beta.com", "beta.ai"]

    def test_reverify_is_a_bulk_check(self) -> None:
        provider = FakeProvider({"alpha.com": "undelegated"})
        checker, clock = make_checker(provider)

        results = asyncio.run(checker.reverify_domains(["alpha", "beta"], ["com"]))

        assert [r.availability["com"] for r in results] == [Availability.AVAILABLE, Availability.UNKNOWN]
        assert clock.sleeps == [2.0]


class TestCheckerLifecycle:
    def test_close_releases_both_clients(self) -> None:
        provider, dns = FakeProvider(), FakeDNS()
        checker, _ = make_checker(provider, dns)

        async def use() -> None:
            async with checker:
                pass

        asyncio.run(use())

        assert provider.closed and dns.closed
