"""Display formats for facilities.

Pure functions, no catalog access. ``format_canonical`` output resolves
back to the same facility through its trailing ``(CODE)`` group, even
when the name itself contains a parenthesised word, as long as no
other active facility shares the code.
"""

from __future__ import annotations

from ..domain.models import Facility, FacilityCategory


def format_canonical(facility: Facility) -> str:
    """Canonical format: ``"Antwerp (ANR), Belgium"``."""
    text = f"{facility.name} ({facility.code.upper()})"
    if facility.country:
        text += f", {facility.country}"
    return text


def format_short(facility: Facility) -> str:
    """Short format: ``"Antwerp (ANR)"``."""
    return f"{facility.name} ({facility.code.upper()})"


def display_name(facility: Facility) -> str:
    """Label with a facility-type indicator, for pickers and reports."""
    if facility.category is FacilityCategory.AIRPORT and facility.iata_code:
        return f"{facility.name} – Airport ({facility.iata_code})"
    if facility.category is FacilityCategory.SEA_PORT:
        return f"{facility.name} – Seaport"
    return format_canonical(facility)
