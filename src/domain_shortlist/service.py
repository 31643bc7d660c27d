"""
Shortlist flows shared by the HTTP handlers and the CLI.

`check_and_add` is the only way records are created; `reverify_favorites`
refreshes availability of favorited records in place.
"""

from typing import Iterable, Optional

from .audit_logger import AuditLogger
from .checker import DomainChecker, normalize_tlds
from .config import SystemConfig
from .domain_store import DomainStore, JSONFileDomainStore
from .enums import Availability
from .exceptions import ValidationError
from .models import DomainResult, DomainSuggestion, availability_to_json, utc_now_iso
from .normalizer import DomainNormalizer, NormalizationResult


COMPONENT = "ShortlistService"


class ShortlistService:
    """Coordinates the checker, the store and name normalization."""

    def __init__(
        self,
        checker: DomainChecker,
        store: DomainStore,
        normalizer: Optional[DomainNormalizer] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._checker = checker
        self._store = store
        self._normalizer = normalizer or DomainNormalizer()
        self._logger = logger

    @property
    def checker(self) -> DomainChecker:
        return self._checker

    @property
    def store(self) -> DomainStore:
        return self._store

    @property
    def normalizer(self) -> DomainNormalizer:
        return self._normalizer

    async def check_domain(self, raw_domain: str, tlds: Iterable[str]) -> DomainResult:
        """Check a single name without storing anything."""
        name = self._normalizer.normalize_or_raise(raw_domain)
        return await self._checker.check_domain_availability(name, tlds)

    async def check_domains(
        self, raw_domains: Iterable[str], tlds: Iterable[str]
    ) -> list[DomainResult]:
        """
        Check several names without storing anything.

        A name that normalizes to nothing does not abort the batch; it gets
        an entry with unknown availability for every TLD and an error.

        Returns:
            One DomainResult per input, in input order
        """
        tlds = normalize_tlds(tlds)
        normalized = [self._normalizer.normalize(raw) for raw in raw_domains]
        self._log_skipped(normalized)

        checked = iter(await self._checker.check_bulk_domains(
            [n.name for n in normalized if n.valid], tlds
        ))
        return [
            next(checked) if n.valid else unusable_result(n, tlds)
            for n in normalized
        ]

    async def check_and_add(
        self, raw_domains: Iterable[str], tlds: Iterable[str]
    ) -> list[DomainSuggestion]:
        """
        Check names and prepend one new record per name.

        Names that normalize to nothing are skipped, as in `check_domains`,
        but produce no record.

        Raises:
            ValidationError: If no usable name remains

        Returns:
            The full list after the insert
        """
        raw_domains = list(raw_domains)
        normalized = [self._normalizer.normalize(raw) for raw in raw_domains]
        self._log_skipped(normalized)
        names = [n.name for n in normalized if n.valid]
        if raw_domains and not names:
            raise ValidationError(
                code="invalid_domains",
                message="No valid domain names supplied",
                details={"raw_input": raw_domains},
            )

        results = await self._checker.check_bulk_domains(names, tlds)
        new_records = [DomainSuggestion.from_result(result) for result in results]
        return self._store.add_domains(new_records)

    async def reverify_favorites(self, tlds: Iterable[str]) -> list[DomainSuggestion]:
        """
        Re-check favorited names and merge the results by name.

        Returns:
            The full list; unchanged when there are no favorites
        """
        all_domains = self._store.get_all_domains()
        favorite_names = list(dict.fromkeys(d.domain for d in all_domains if d.is_favorite))
        if not favorite_names:
            return all_domains

        results = await self._checker.reverify_domains(favorite_names, tlds)
        updates = {
            result.domain: {
                "availability": availability_to_json(result.availability),
                "lastChecked": result.timestamp,
            }
            for result in results
        }
        if self._logger:
            self._logger.info(
                COMPONENT,
                f"Re-verified {len(updates)} favorites",
                {"domains": list(updates)},
            )
        return self._store.update_multiple_domains(updates)

    def _log_skipped(self, normalized: list[NormalizationResult]) -> None:
        skipped = [n.raw for n in normalized if not n.valid]
        if skipped and self._logger:
            self._logger.warn(COMPONENT, f"Skipping {len(skipped)} unusable names", {"names": skipped})


def unusable_result(normalized: NormalizationResult, tlds: list[str]) -> DomainResult:
    """Entry for a name that could not be checked at all."""
    return DomainResult(
        domain=normalized.raw.strip(),
        availability={tld: Availability.UNKNOWN for tld in tlds},
        timestamp=utc_now_iso(),
        error=normalized.error,
    )


def build_service(config: SystemConfig, logger: Optional[AuditLogger] = None) -> ShortlistService:
    """Wire the default checker, file store and normalizer from configuration."""
    store = JSONFileDomainStore(config.persistence.file_path, logger=logger)
    checker = DomainChecker(config, logger=logger)
    normalizer = DomainNormalizer(config.default_tlds)
    return ShortlistService(checker, store, normalizer=normalizer, logger=logger)
