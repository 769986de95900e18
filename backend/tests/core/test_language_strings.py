"""Language Strings tests — pure data tables for validator, datastore and status text.

Tests cover:
    - English is complete for every namespace
    - Non-English tables only use keys English defines
    - Placeholders format with the parameters their consumers pass
    - get_table returns copies (mutation never leaks back)
"""

import pytest

from harmonia.core import language_strings
from harmonia.core.domain_types import Locale


# --- Coverage -----------------------------------------------------------------


@pytest.mark.parametrize("namespace", language_strings.namespaces())
def test_english_table_is_non_empty(namespace):
    table = language_strings.get_table(namespace, Locale.EN)
    assert table
    assert all(isinstance(v, str) and v for v in table.values())


@pytest.mark.parametrize("namespace", language_strings.namespaces())
def test_translations_never_add_keys(namespace):
    english = set(language_strings.get_table(namespace, Locale.EN))
    for locale in Locale:
        assert set(language_strings.get_table(namespace, locale)) <= english


def test_pt_br_translates_every_datastore_message():
    english = language_strings.get_table(language_strings.DATASTORE, Locale.EN)
    pt = language_strings.get_table(language_strings.DATASTORE, Locale.PT_BR)
    assert set(pt) == set(english)


# --- Placeholders -------------------------------------------------------------


def test_validation_messages_format_with_label_and_limit():
    table = language_strings.get_table(language_strings.VALIDATION, Locale.EN)
    assert table["string.max"].format(label="name", limit=50) == (
        '"name" length must be less than or equal to 50 characters long'
    )


def test_listening_line_formats():
    table = language_strings.get_table(language_strings.APP, Locale.EN)
    assert table["listening"].format(name="Harmonia API", host="0.0.0.0", port=8000) == (
        "Harmonia API on at 0.0.0.0:8000"
    )


def test_connect_timeout_formats():
    table = language_strings.get_table(language_strings.DATASTORE, Locale.PT_BR)
    text = table["connect.timeout"].format(name="main", seconds=5)
    assert "main" in text and "5s" in text


# --- Purity -------------------------------------------------------------------


def test_get_table_returns_copy():
    table = language_strings.get_table(language_strings.APP, Locale.EN)
    table["ssl_on"] = "tampered"
    assert language_strings.get_table(language_strings.APP, Locale.EN)["ssl_on"] != "tampered"
