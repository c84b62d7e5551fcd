"""
Location resolver
=================

Incidents carry a 2-letter country code; the map and the region table work
with 3-letter codes. The ISO2 -> ISO3 table is built once from `pycountry`
and is read-only afterwards.

The same module cross-references GeoJSON country features, whose identifying
property differs between map datasets.
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Any, Mapping, Optional

import pycountry


def _build_iso2_to_iso3() -> Mapping[str, str]:
    table = {c.alpha_2: c.alpha_3 for c in pycountry.countries}
    return MappingProxyType(table)


ISO2_TO_ISO3: Mapping[str, str] = _build_iso2_to_iso3()

# Natural Earth uses -99 when a feature has no official code
_PLACEHOLDER_CODES = {"-99", "-1", ""}


def resolve_location(code: Optional[str]) -> Optional[str]:
    """Return the ISO3 code for a 2-letter location code, or None if unresolvable.

    Lookup is case-insensitive. Empty or missing input is unresolvable.
    """
    if not code:
        return None
    return ISO2_TO_ISO3.get(str(code).upper())


def feature_iso3(feature: Mapping[str, Any]) -> Optional[str]:
    """Pick the ISO3 identifier of a GeoJSON country feature.

    Tries ISO_A3, ADM0_A3, ISO3166-1-Alpha-3 and finally the feature id.
    """
    props = feature.get("properties") or {}
    for candidate in (
        props.get("ISO_A3"),
        props.get("ADM0_A3"),
        props.get("ISO3166-1-Alpha-3"),
        feature.get("id"),
    ):
        if candidate is None:
            continue
        text = str(candidate).strip().upper()
        if text not in _PLACEHOLDER_CODES:
            return text
    return None


def feature_name(feature: Mapping[str, Any]) -> str:
    props = feature.get("properties") or {}
    return props.get("name_en") or props.get("ADMIN") or "Unknown"
