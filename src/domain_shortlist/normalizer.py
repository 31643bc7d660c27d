"""
Domain name normalization module.

Turns user input into the base names stored on the shortlist: lowercase,
only ASCII letters, digits and hyphens, with a known extension removed.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import DEFAULT_TLDS
from .exceptions import ValidationError


# Everything outside the stored alphabet is dropped
INVALID_CHARS_PATTERN = re.compile(r"[^a-z0-9-]")


@dataclass
class NormalizationResult:
    """Result of normalizing a single input line."""

    valid: bool
    name: Optional[str]
    raw: str
    error: Optional[str] = None


class DomainNormalizer:
    """
    Normalizes candidate names to their stored base form.

    Handles:
    - Trimming surrounding whitespace
    - Removing one trailing known extension (e.g. 'NordicAI.com' -> 'nordicai')
    - Lowercasing and dropping characters outside [a-z0-9-]
    """

    def __init__(self, known_tlds: Optional[Iterable[str]] = None) -> None:
        """
        Initialize normalizer with the extensions that get stripped.

        Args:
            known_tlds: TLDs to strip from input (defaults to the standard set)
        """
        tlds = sorted(
            {t.lstrip(".").lower() for t in (known_tlds or DEFAULT_TLDS) if t.strip(".")},
            key=len,
            reverse=True,
        )
        self._known_tlds = tlds
        self._suffix_pattern = (
            re.compile(r"\.(" + "|".join(re.escape(t) for t in tlds) + r")$", re.IGNORECASE)
            if tlds
            else None
        )

    @property
    def known_tlds(self) -> list[str]:
        return list(self._known_tlds)

    def normalize(self, raw: str) -> NormalizationResult:
        """
        Normalize one candidate name.

        Args:
            raw: The user-supplied name

        Returns:
            NormalizationResult with the base name, or an error when nothing
            usable remains
        """
        if not isinstance(raw, str) or not raw.strip():
            return NormalizationResult(
                valid=False,
                name=None,
                raw=raw if isinstance(raw, str) else "",
                error="Domain name is empty",
            )

        name = raw.strip()
        if self._suffix_pattern is not None:
            name = self._suffix_pattern.sub("", name)
        name = INVALID_CHARS_PATTERN.sub("", name.lower())

        if not name:
            return NormalizationResult(
                valid=False,
                name=None,
                raw=raw,
                error=f"Domain name '{raw}' contains no usable characters",
            )

        return NormalizationResult(valid=True, name=name, raw=raw)

    def normalize_or_raise(self, raw: str) -> str:
        """
        Normalize one name, raising on unusable input.

        Raises:
            ValidationError: If the name is empty after normalization
        """
        result = self.normalize(raw)
        if not result.valid:
            raise ValidationError(
                code="invalid_domain",
                message=result.error or "Invalid domain name",
                details={"raw_input": result.raw},
            )
        return result.name

    def normalize_many(self, raw_names: Iterable[str]) -> list[str]:
        """Normalize a batch, silently dropping names that end up empty."""
        names = []
        for raw in raw_names:
            result = self.normalize(raw)
            if result.valid:
                names.append(result.name)
        return names
