"""Domain Types — verifies enum vocabularies.

Tests:
    - Enums have expected members and serialize to string
    - LifecycleState has exactly 7 members (the startup stages plus FAILED)
"""

import json

from harmonia.core.domain_types import CourseLevel, LifecycleState, Locale, Profile


def test_profile_has_four_modes():
    assert {p.value for p in Profile} == {
        "development", "test", "staging", "production",
    }


def test_locale_values_are_config_tags():
    assert Locale("en") is Locale.EN
    assert Locale("pt-BR") is Locale.PT_BR


def test_lifecycle_state_has_seven_members():
    assert len(LifecycleState) == 7
    assert LifecycleState.FAILED in set(LifecycleState)


def test_enums_serialize_as_strings():
    payload = json.dumps({"state": LifecycleState.SERVING, "level": CourseLevel.ADVANCED})
    assert payload == '{"state": "serving", "level": "advanced"}'
