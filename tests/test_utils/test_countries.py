"""
Unit tests for country display names.
"""

from trendscope.utils.countries import country_name, scope_name


def test_country_name_known_codes():
    assert country_name("US") == "United States"
    assert country_name("fr") == "France"


def test_country_name_unknown_code():
    assert country_name("ZZ") == "ZZ"


def test_scope_name():
    assert scope_name("global", ("all", "global")) == "Global"
    assert scope_name("all", ("all", "global")) == "Global"
    assert scope_name("DE", ("all", "global")) == "Germany"
