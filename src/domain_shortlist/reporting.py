"""
Presentation helpers for stored suggestions: filtering, labels, CSV export.
"""

import csv
import io
from datetime import datetime
from typing import Iterable, Optional

from .enums import Availability
from .i18n import get_message
from .models import DomainSuggestion


def filter_suggestions(
    records: Iterable[DomainSuggestion],
    search_text: str = "",
    only_available: bool = False,
    tlds: Optional[Iterable[str]] = None,
    only_favorites: bool = False,
) -> list[DomainSuggestion]:
    """
    Filter records the way the shortlist view does.

    Args:
        records: Records to filter
        search_text: Case-insensitive substring of the base name
        only_available: Keep records available under at least one of `tlds`
        tlds: TLDs considered by `only_available` (all checked TLDs if None)
        only_favorites: Keep favorites only

    Returns:
        Matching records in their original order
    """
    needle = search_text.strip().lower()
    tld_list = list(tlds) if tlds is not None else None
    out = []
    for record in records:
        if needle and needle not in record.domain.lower():
            continue
        if only_favorites and not record.is_favorite:
            continue
        if only_available:
            considered = tld_list if tld_list is not None else list(record.availability)
            if not any(record.availability.get(t) is Availability.AVAILABLE for t in considered):
                continue
        out.append(record)
    return out


def status_label(availability: Optional[Availability], language: Optional[str] = None) -> str:
    """Human label for a tri-state value; unchecked TLDs read as unknown."""
    state = availability or Availability.UNKNOWN
    return get_message(f"status.{state.value}", language)


def format_timestamp(iso_timestamp: str) -> str:
    """Format an ISO timestamp for tables, falling back to the raw text."""
    try:
        dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return iso_timestamp
    return dt.strftime("%Y-%m-%d %H:%M")


def export_csv(
    records: Iterable[DomainSuggestion],
    tlds: Iterable[str],
    language: Optional[str] = None,
) -> str:
    """
    Render records as CSV: name, one column per TLD, creation time.

    Args:
        records: Records to export
        tlds: TLD columns, in order
        language: Label language

    Returns:
        CSV text with a header row
    """
    tld_list = list(tlds)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(
        [get_message("export.column.domain", language)]
        + [f".{tld}" for tld in tld_list]
        + [get_message("export.column.added", language)]
    )
    for record in records:
        writer.writerow(
            [record.domain]
            + [status_label(record.availability.get(tld), language) for tld in tld_list]
            + [format_timestamp(record.timestamp)]
        )
    return buffer.getvalue()
