"""
Data models for the domain shortlist system.

This module defines the persisted DomainSuggestion record, the per-domain
DomainResult produced by the checker, and the per-TLD TLDCheck outcome,
together with their JSON (camelCase) representations.
"""

import random
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from .enums import Availability, LookupSource


AvailabilityMap = dict[str, Availability]


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_suggestion_id(domain: str) -> str:
    """Build an opaque id from the name, creation time and a random part."""
    return f"{domain}-{int(time.time() * 1000)}-{random.random()}"


def availability_to_json(availability: AvailabilityMap) -> dict[str, Optional[bool]]:
    return {tld: value.to_json() for tld, value in availability.items()}


def availability_from_json(data: object) -> AvailabilityMap:
    if not isinstance(data, dict):
        return {}
    return {str(tld): Availability.from_json(value) for tld, value in data.items()}


@dataclass
class TLDCheck:
    """Outcome of checking one name.tld."""

    domain: str  # Full name, e.g. 'nordicai.com'
    tld: str
    availability: Availability
    source: LookupSource
    error: Optional[str] = None


@dataclass
class DomainResult:
    """Availability of one base name across a set of TLDs."""

    domain: str
    availability: AvailabilityMap
    timestamp: str
    checks: list[TLDCheck] = field(default_factory=list)
    error: Optional[str] = None  # Set when the name itself could not be checked

    def to_dict(self) -> dict:
        data = {
            "domain": self.domain,
            "availability": availability_to_json(self.availability),
            "timestamp": self.timestamp,
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class DomainSuggestion:
    """A persisted shortlist record."""

    id: str
    domain: str
    availability: AvailabilityMap
    timestamp: str
    last_checked: str
    is_favorite: bool = False

    @classmethod
    def from_result(cls, result: DomainResult) -> "DomainSuggestion":
        """Create a new, non-favorite record from a fresh check result."""
        return cls(
            id=generate_suggestion_id(result.domain),
            domain=result.domain,
            availability=dict(result.availability),
            timestamp=result.timestamp,
            last_checked=result.timestamp,
            is_favorite=False,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "domain": self.domain,
            "availability": availability_to_json(self.availability),
            "timestamp": self.timestamp,
            "isFavorite": self.is_favorite,
            "lastChecked": self.last_checked,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DomainSuggestion":
        """
        Rebuild a record from its stored form.

        Raises:
            KeyError: If `id` or `domain` is missing
        """
        timestamp = data.get("timestamp") or ""
        return cls(
            id=str(data["id"]),
            domain=str(data["domain"]),
            availability=availability_from_json(data.get("availability")),
            timestamp=timestamp,
            last_checked=data.get("lastChecked") or timestamp,
            is_favorite=bool(data.get("isFavorite", False)),
        )
