"""
Property-based tests for the Domain Normalizer module.

Uses Hypothesis to verify that any input either normalizes to a stored
base name or is rejected.
"""

import re

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_shortlist.exceptions import ValidationError
from domain_shortlist.normalizer import DomainNormalizer


STORED_NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")


class TestNormalizationExamples:
    """Concrete inputs from everyday use."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("nordicai", "nordicai"),
            ("NordicAI.com", "nordicai"),
            ("  fjord-labs.SE  ", "fjord-labs"),
            ("my domain!.no", "mydomain"),
            ("example.co.uk", "examplecouk"),
            ("brand.ai.com", "brandai"),
            ("xn--bcher-kva", "xn--bcher-kva"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        result = DomainNormalizer().normalize(raw)
        assert result.valid
        assert result.name == expected

    @pytest.mark.parametrize("raw", ["", "   ", "!!!", ".com", "äöü"])
    def test_unusable_input_is_rejected(self, raw: str) -> None:
        normalizer = DomainNormalizer()
        result = normalizer.normalize(raw)

        assert not result.valid
        assert result.name is None
        with pytest.raises(ValidationError) as exc_info:
            normalizer.normalize_or_raise(raw)
        assert exc_info.value.code == "invalid_domain"

    def test_custom_known_tlds(self) -> None:
        normalizer = DomainNormalizer(["dev", ".io"])
        assert normalizer.normalize("tool.dev").name == "tool"
        assert normalizer.normalize("tool.io").name == "tool"
        assert normalizer.normalize("tool.com").name == "toolcom"


class TestNormalizationProperties:
    """Invariants over arbitrary input."""

    @given(raw=st.text(max_size=60))
    @settings(max_examples=200)
    def test_output_uses_stored_alphabet(self, raw: str) -> None:
        """Valid names only contain lowercase letters, digits and hyphens."""
        result = DomainNormalizer().normalize(raw)
        if result.valid:
            assert STORED_NAME_PATTERN.match(result.name)
        else:
            assert result.error

    @given(raw=st.text(max_size=60))
    @settings(max_examples=200)
    def test_normalization_is_idempotent(self, raw: str) -> None:
        normalizer = DomainNormalizer()
        first = normalizer.normalize(raw)
        if first.valid:
            assert normalizer.normalize(first.name).name == first.name

    @given(
        name=st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789-", min_size=1, max_size=20),
        tld=st.sampled_from(["com", "ai", "se", "no"]),
        upper=st.booleans(),
    )
    @settings(max_examples=100)
    def test_known_extension_is_stripped(self, name: str, tld: str, upper: bool) -> None:
        raw = f"{name}.{tld}"
        if upper:
            raw = raw.upper()
        assert DomainNormalizer().normalize(raw).name == name

    @given(raws=st.lists(st.text(max_size=20), max_size=10))
    @settings(max_examples=100)
    def test_normalize_many_keeps_only_valid_names(self, raws: list[str]) -> None:
        normalizer = DomainNormalizer()
        expected = [r.name for r in map(normalizer.normalize, raws) if r.valid]
        assert normalizer.normalize_many(raws) == expected

