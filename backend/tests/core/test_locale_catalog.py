"""Locale Catalog — tag parsing, English fallback, copy semantics."""

import pytest

from harmonia.core import language_strings
from harmonia.core.domain_types import Locale
from harmonia.core.errors import ConfigurationError
from harmonia.core.locale_catalog import LocaleCatalog, parse_locale


@pytest.mark.parametrize("tag,locale", [
    ("en", Locale.EN),
    ("EN", Locale.EN),
    ("pt-BR", Locale.PT_BR),
    ("pt_br", Locale.PT_BR),
    (" pt-br ", Locale.PT_BR),
])
def test_parse_locale(tag, locale):
    assert parse_locale(tag) is locale


def test_unknown_locale_is_configuration_error():
    with pytest.raises(ConfigurationError) as info:
        LocaleCatalog("xx-YY")
    assert "xx-YY" in info.value.message


def test_missing_translation_falls_back_to_english():
    catalog = LocaleCatalog(Locale.PT_BR)
    table = catalog.get_table(language_strings.VALIDATION)

    assert table["json.base"] == '"{label}" must be valid JSON'
    assert table["any.required"] == '"{label}" é obrigatório'


def test_get_table_returns_copy():
    catalog = LocaleCatalog(Locale.EN)
    catalog.get_table(language_strings.APP)["ssl_off"] = "changed"

    assert catalog.get_table(language_strings.APP)["ssl_off"] == "[SSL_OFF]\tNOT SECURE (!)"


def test_unknown_namespace():
    with pytest.raises(KeyError):
        LocaleCatalog(Locale.EN).get_table("emails")


def test_text_formats_parameters():
    catalog = LocaleCatalog("pt-BR")
    assert catalog.text(language_strings.DATASTORE, "connect.failed", name="main") == (
        "não foi possível conectar ao banco 'main'"
    )
