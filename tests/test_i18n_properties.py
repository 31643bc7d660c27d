"""
Property-based tests for internationalization (i18n) module.

Uses Hypothesis to verify translation coverage and fallback behaviour.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from domain_shortlist.i18n import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    TRANSLATIONS,
    get_message,
    get_missing_translations,
)


class TestTranslationCoverageProperty:
    """Both languages translate every message."""

    def test_no_language_is_missing_keys(self) -> None:
        assert TRANSLATIONS
        for language in SUPPORTED_LANGUAGES:
            assert get_missing_translations(language) == set()

    @given(key=st.sampled_from(list(TRANSLATIONS.keys())))
    @settings(max_examples=50)
    def test_every_key_has_non_empty_text(self, key: str) -> None:
        for language in SUPPORTED_LANGUAGES:
            assert TRANSLATIONS[key][language].strip()

    def test_status_labels_exist_for_every_state(self) -> None:
        for state in ("available", "taken", "unknown"):
            assert f"status.{state}" in TRANSLATIONS


class TestMessageLookup:
    """Lookup, formatting and fallbacks."""

    def test_english_and_german_differ(self) -> None:
        assert get_message("status.taken", "en") == "Taken"
        assert get_message("status.taken", "de") == "Vergeben"

    @given(language=st.one_of(st.none(), st.text(max_size=5).filter(lambda s: s not in SUPPORTED_LANGUAGES)))
    @settings(max_examples=50)
    def test_unsupported_language_falls_back(self, language) -> None:
        assert get_message("status.available", language) == TRANSLATIONS["status.available"][DEFAULT_LANGUAGE]

    @given(key=st.text(min_size=1, max_size=20).filter(lambda k: k not in TRANSLATIONS))
    @settings(max_examples=50)
    def test_unknown_key_returns_key(self, key: str) -> None:
        assert get_message(key, "en") == key

    def test_placeholders_are_formatted(self) -> None:
        assert get_message("cli.removed", "en", id="abc") == "Record removed: abc"
        assert get_message("cli.checking", "de", count=2, tlds="com, ai") == "Prüfe 2 Domain(s) für: com, ai"

    def test_missing_placeholder_returns_template(self) -> None:
        assert get_message("cli.removed", "en", other="x") == "Record removed: {id}"
