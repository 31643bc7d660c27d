"""
Domain Checker for the domain shortlist system.

This module coordinates the availability lookups for candidate names:
- One lookup per name.tld, provider first, DNS fallback second
- Strictly sequential work: TLDs of one name, then names of one batch
- Fixed pacing between lookups to respect the provider's quota
- No failure of a single lookup ever aborts a batch
"""

from typing import Iterable, Optional

from .audit_logger import AuditLogger
from .config import SystemConfig
from .dns_fallback import DNSFallbackChecker
from .enums import Availability, DNSErrorCode, LookupSource, ProviderErrorCode
from .models import DomainResult, TLDCheck, utc_now_iso
from .provider_client import AvailabilityProviderClient
from .rate_limiter import Clock, RateLimiter, Sleep


COMPONENT = "DomainChecker"

# Provider failures that are expected configuration states, not incidents
QUIET_FALLBACK_CODES = frozenset({
    ProviderErrorCode.MISSING_CREDENTIALS,
    ProviderErrorCode.SIMULATION,
})

QUIET_DNS_FAILURE_CODES = frozenset({DNSErrorCode.SIMULATION})


def normalize_tlds(tlds: Iterable[str]) -> list[str]:
    """Lowercase, drop leading dots and duplicates, keep input order."""
    seen, out = set(), []
    for tld in tlds:
        value = str(tld).strip().lstrip(".").lower()
        if value and value not in seen:
            out.append(value)
            seen.add(value)
    return out


class DomainChecker:
    """
    Orchestrates availability checks for base names across TLDs.

    All checks run one after another; the two rate limiters insert the
    configured gaps between TLDs of one name and between names of a batch,
    never after the last item.
    """

    def __init__(
        self,
        config: Optional[SystemConfig] = None,
        provider: Optional[AvailabilityProviderClient] = None,
        dns_checker: Optional[DNSFallbackChecker] = None,
        logger: Optional[AuditLogger] = None,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleep] = None,
    ) -> None:
        """
        Initialize the domain checker.

        Args:
            config: System configuration
            provider: Optional provider client (built from config if omitted)
            dns_checker: Optional DNS fallback (built from config if omitted)
            logger: Optional audit logger
            clock: Optional clock shared by both rate limiters
            sleep: Optional sleep coroutine shared by both rate limiters
        """
        self._config = config or SystemConfig()
        self._logger = logger

        self._provider = provider or AvailabilityProviderClient(
            config=self._config.provider,
            simulation_mode=self._config.simulation_mode,
        )
        self._dns = dns_checker or DNSFallbackChecker(
            config=self._config.dns,
            simulation_mode=self._config.simulation_mode,
        )

        self._tld_limiter = RateLimiter(
            self._config.pacing.tld_delay_seconds, name="tld", clock=clock, sleep=sleep
        )
        self._domain_limiter = RateLimiter(
            self._config.pacing.domain_delay_seconds, name="domain", clock=clock, sleep=sleep
        )

    async def __aenter__(self) -> "DomainChecker":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._provider.close()
        await self._dns.close()

    @property
    def tld_limiter(self) -> RateLimiter:
        return self._tld_limiter

    @property
    def domain_limiter(self) -> RateLimiter:
        return self._domain_limiter

    async def check_single_domain(self, domain: str, tld: str) -> TLDCheck:
        """
        Resolve the availability of one name.tld.

        Provider success decides directly; any provider failure falls back
        to DNS. Unexpected exceptions are converted to an unknown result
        with an error description.

        Args:
            domain: Base name without extension
            tld: Extension without leading dot

        Returns:
            TLDCheck for this name.tld
        """
        full_domain = f"{domain}.{tld}"

        try:
            response = await self._provider.query(full_domain)
            if response.succeeded:
                self._log_debug(
                    f"{full_domain} - status: {response.summary}",
                    {"domain": full_domain, "summary": response.summary},
                )
                return TLDCheck(
                    domain=full_domain,
                    tld=tld,
                    availability=response.availability,
                    source=LookupSource.PROVIDER,
                )

            failure = response.error
            fallback_data = {
                "domain": full_domain,
                "code": failure.code.value,
                "reason": failure.message,
            }
            if failure.code in QUIET_FALLBACK_CODES:
                self._log_debug(f"Using DNS fallback for {full_domain}", fallback_data)
            else:
                self._log_warn(f"Provider failed, falling back to DNS for {full_domain}", fallback_data)

            dns_response = await self._dns.check(full_domain)
            if dns_response.error is not None and dns_response.error.code not in QUIET_DNS_FAILURE_CODES:
                self._log_warn(
                    f"DNS fallback failed for {full_domain}",
                    {"domain": full_domain, "reason": dns_response.error.message},
                )
            return TLDCheck(
                domain=full_domain,
                tld=tld,
                availability=dns_response.availability,
                source=LookupSource.DNS,
                error=dns_response.error.message if dns_response.error else None,
            )
        except Exception as e:
            if self._logger:
                self._logger.log_error(
                    COMPONENT,
                    f"Lookup failed for {full_domain}",
                    error=e,
                    additional_data={"domain": full_domain},
                )
            return TLDCheck(
                domain=full_domain,
                tld=tld,
                availability=Availability.UNKNOWN,
                source=LookupSource.NONE,
                error=str(e) or "Unable to verify",
            )

    async def check_domain_availability(self, domain: str, tlds: Iterable[str]) -> DomainResult:
        """
        Check one base name across TLDs, one TLD at a time.

        Args:
            domain: Base name without extension
            tlds: Extensions to check

        Returns:
            DomainResult with exactly one entry per distinct TLD and a
            timestamp taken after the last lookup
        """
        availability: dict[str, Availability] = {}
        checks: list[TLDCheck] = []

        self._tld_limiter.reset()
        for tld in normalize_tlds(tlds):
            async with self._tld_limiter.acquire():
                check = await self.check_single_domain(domain, tld)
            availability[tld] = check.availability
            checks.append(check)

        return DomainResult(
            domain=domain,
            availability=availability,
            timestamp=utc_now_iso(),
            checks=checks,
        )

    async def check_bulk_domains(
        self, domains: Iterable[str], tlds: Iterable[str]
    ) -> list[DomainResult]:
        """
        Check several base names, one name at a time.

        Args:
            domains: Base names without extension
            tlds: Extensions to check for every name

        Returns:
            One DomainResult per input name, in input order
        """
        domains = list(domains)
        tlds = normalize_tlds(tlds)
        results: list[DomainResult] = []

        self._log_info(
            f"Checking {len(domains)} domains across {len(tlds)} TLDs",
            {"domains": len(domains), "tlds": tlds},
        )

        self._domain_limiter.reset()
        for index, domain in enumerate(domains):
            async with self._domain_limiter.acquire() as waited:
                if waited:
                    self._log_debug(f"Waited {waited:.2f}s before next domain", {"domain": domain})
                self._log_debug(f"Checking domain {index + 1}/{len(domains)}: {domain}", {"domain": domain})
                results.append(await self.check_domain_availability(domain, tlds))

        self._log_info(f"Completed checking {len(domains)} domains", {"domains": len(domains)})
        return results

    async def reverify_domains(
        self, domains: Iterable[str], tlds: Iterable[str]
    ) -> list[DomainResult]:
        """Re-run the bulk check for names that are already stored."""
        domains = list(domains)
        self._log_info(f"Re-verifying {len(domains)} domains", {"domains": len(domains)})
        return await self.check_bulk_domains(domains, tlds)

    def _log_debug(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.debug(COMPONENT, message, data)

    def _log_info(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.info(COMPONENT, message, data)

    def _log_warn(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.warn(COMPONENT, message, data)
