"""
Country display names for dropdowns and chart titles.
"""

import pycountry

GLOBAL_LABEL = "Global"
GLOBAL_OPTION_LABEL = "Global (All Countries)"


def country_name(code: str) -> str:
    """
    Display name for an ISO alpha-2 code.

    Prefers pycountry's common name ("South Korea" style) when it has one,
    and falls back to the code itself for anything pycountry does not know.
    """
    if not isinstance(code, str):
        return str(code)
    try:
        country = pycountry.countries.get(alpha_2=code.upper().strip())
    except LookupError:
        country = None
    if country is None:
        return code
    return getattr(country, "common_name", None) or country.name


def scope_name(scope: str, all_scopes) -> str:
    """Title for a country scope argument ("global"/"all" -> Global)."""
    return GLOBAL_LABEL if scope in all_scopes else country_name(scope)
