"""
Internationalization (i18n) module for the domain shortlist system.

Provides translations for all user-facing messages in German (de) and
English (en).
"""

from typing import Optional


# Supported languages
SUPPORTED_LANGUAGES = frozenset({"de", "en"})
DEFAULT_LANGUAGE = "en"


# Translation dictionary with all messages
# Structure: {message_key: {language_code: translated_message}}
TRANSLATIONS: dict[str, dict[str, str]] = {
    # Availability status labels
    "status.available": {
        "de": "Verfügbar",
        "en": "Available",
    },
    "status.taken": {
        "de": "Vergeben",
        "en": "Taken",
    },
    "status.unknown": {
        "de": "Unbekannt",
        "en": "Unknown",
    },

    # Export
    "export.column.domain": {
        "de": "Domain",
        "en": "Domain",
    },
    "export.column.added": {
        "de": "Hinzugefügt",
        "en": "Added",
    },
    "export.written": {
        "de": "Export geschrieben nach: {path}",
        "en": "Export written to: {path}",
    },

    # CLI messages
    "cli.checking": {
        "de": "Prüfe {count} Domain(s) für: {tlds}",
        "en": "Checking {count} domain(s) across: {tlds}",
    },
    "cli.no_domains": {
        "de": "Keine gültigen Domainnamen angegeben.",
        "en": "No valid domain names supplied.",
    },
    "cli.empty_list": {
        "de": "Die Liste ist leer.",
        "en": "The list is empty.",
    },
    "cli.added": {
        "de": "{count} Domain(s) hinzugefügt. Gesamt: {total}",
        "en": "Added {count} domain(s). Total: {total}",
    },
    "cli.favorite_toggled": {
        "de": "Favorit umgeschaltet: {domain} ({state})",
        "en": "Favorite toggled: {domain} ({state})",
    },
    "cli.not_found": {
        "de": "Kein Eintrag mit ID: {id}",
        "en": "No record with id: {id}",
    },
    "cli.removed": {
        "de": "Eintrag entfernt: {id}",
        "en": "Record removed: {id}",
    },
    "cli.no_favorites": {
        "de": "Keine Favoriten zum erneuten Prüfen.",
        "en": "No favorites to re-verify.",
    },
    "cli.reverified": {
        "de": "{count} Favorit(en) erneut geprüft.",
        "en": "Re-verified {count} favorite(s).",
    },
    "cli.cleared": {
        "de": "Alle Domains gelöscht.",
        "en": "All domains cleared.",
    },
    "cli.clear_failed": {
        "de": "Löschen fehlgeschlagen.",
        "en": "Failed to clear domains.",
    },
    "cli.serving": {
        "de": "Server läuft auf {host}:{port}",
        "en": "Server is running on {host}:{port}",
    },

    # Simulation mode
    "simulation.enabled": {
        "de": "🔧 Simulationsmodus aktiv - keine echten Netzwerkanfragen",
        "en": "🔧 Simulation mode active - no real network requests",
    },
}


def get_message(
    key: str,
    language: Optional[str] = None,
    **kwargs,
) -> str:
    """
    Get a translated message by key.

    Args:
        key: The message key (e.g., 'status.available')
        language: Language code ('de' or 'en'). Defaults to DEFAULT_LANGUAGE.
        **kwargs: Format arguments for the message template

    Returns:
        The translated and formatted message string.
        If the key is not found, returns the key itself.
        If the language is not found, falls back to DEFAULT_LANGUAGE.

    Examples:
        >>> get_message('status.available', 'en')
        'Available'
        >>> get_message('cli.removed', 'de', id='abc')
        'Eintrag entfernt: abc'
    """
    if language is None or language not in SUPPORTED_LANGUAGES:
        language = DEFAULT_LANGUAGE

    translations = TRANSLATIONS.get(key)
    if translations is None:
        return key

    message = translations.get(language) or translations.get(DEFAULT_LANGUAGE)
    if message is None:
        return key

    if kwargs:
        try:
            message = message.format(**kwargs)
        except KeyError:
            # If formatting fails, return the unformatted message
            pass

    return message


def get_missing_translations(language: str) -> set[str]:
    """
    Get all message keys that are missing translations for a language.

    Args:
        language: The language code to check

    Returns:
        Set of message keys missing translations for the specified language.
    """
    return {key for key, translations in TRANSLATIONS.items() if language not in translations}
