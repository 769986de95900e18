"""Locale Catalog — resolves message tables for the active locale.

Invariants:
    - Built once at startup from Environment.app.locale
    - Unknown locale tags raise ConfigurationError (startup aborts)
    - Tables returned are merged over English: a missing translation never
      surfaces as a KeyError at request time
    - Returned tables are copies; callers cannot mutate the catalog
"""

from types import MappingProxyType
from typing import Mapping

from harmonia.core import language_strings
from harmonia.core.domain_types import Locale
from harmonia.core.errors import ConfigurationError


def parse_locale(tag: str) -> Locale:
    """Map a config tag (case-insensitive, '_' or '-') to a Locale."""
    normalized = tag.strip().replace("_", "-").lower()
    for locale in Locale:
        if locale.value.lower() == normalized:
            return locale
    raise ConfigurationError(
        f"Unsupported locale '{tag}'. "
        f"Expected one of: {', '.join(l.value for l in Locale)}",
    )


class LocaleCatalog:
    """Message tables for one locale, with English fallback."""

    def __init__(self, locale: Locale | str):
        self.locale = locale if isinstance(locale, Locale) else parse_locale(locale)
        self._tables: dict[str, Mapping[str, str]] = {
            ns: MappingProxyType(self._merge(ns))
            for ns in language_strings.namespaces()
        }

    def _merge(self, namespace: str) -> dict[str, str]:
        table = language_strings.get_table(namespace, Locale.EN)
        if self.locale is not Locale.EN:
            table.update(language_strings.get_table(namespace, self.locale))
        return table

    def get_table(self, namespace: str) -> dict[str, str]:
        """Full message table for a namespace (copy)."""
        if namespace not in self._tables:
            raise KeyError(f"Unknown message namespace '{namespace}'")
        return dict(self._tables[namespace])

    def text(self, namespace: str, key: str, **params) -> str:
        template = self._tables[namespace].get(key, key)
        return template.format(**params) if params else template
