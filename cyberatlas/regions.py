"""
Region index
============

Static mapping from a macro-region name to its member ISO3 codes. The order of
regions and of members is significant: the selection resolver concatenates
country buckets in exactly this order.

Member sets are disjoint, so rolling countries up into a region never
duplicates an incident.
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

# Pseudo-region shown next to the real regions; selecting it clears the selection.
WORLD = "World"

_REGION_COUNTRIES: Dict[str, Tuple[str, ...]] = {
    "Europe": (
        "FRA", "DEU", "GBR", "ITA", "ESP", "POL", "ROU", "NLD", "BEL", "GRC",
        "CZE", "PRT", "HUN", "SWE", "AUT", "BGR", "DNK", "FIN", "SVK", "IRL",
        "HRV", "LTU", "SVN", "LVA", "EST", "CYP", "LUX", "MLT", "NOR", "CHE",
        "ISL", "ALB", "MKD", "SRB", "BIH", "MNE", "UKR", "BLR", "MDA",
    ),
    "North America": (
        "USA", "CAN", "MEX", "GTM", "CUB", "HTI", "DOM", "HND", "NIC", "SLV",
        "CRI", "PAN", "JAM", "TTO", "BHS", "BRB",
    ),
    "South America": (
        "BRA", "ARG", "COL", "PER", "VEN", "CHL", "ECU", "BOL", "PRY", "URY",
        "GUY", "SUR",
    ),
    "Africa": (
        "NGA", "ETH", "EGY", "COD", "TZA", "ZAF", "KEN", "UGA", "DZA", "SDN",
        "MAR", "AGO", "GHA", "MOZ", "MDG", "CMR", "CIV", "NER", "BFA", "MLI",
        "MWI", "ZMB", "SOM", "SEN", "TCD", "ZWE", "GIN", "RWA", "BEN", "TUN",
        "BDI", "SSD", "TGO", "SLE", "LBY", "LBR", "MRT", "CAF", "ERI", "GMB",
        "BWA", "NAM", "GAB", "LSO", "GNB", "GNQ", "MUS", "SWZ", "DJI", "COM",
        "CPV", "STP", "SYC",
    ),
    "Oceania": (
        "AUS", "PNG", "NZL", "FJI", "SLB", "NCL", "PYF", "VUT", "WSM", "KIR",
        "TON", "FSM", "PLW", "MHL", "TUV", "NRU",
    ),
    "South Asia": ("IND", "PAK", "BGD", "AFG", "NPL", "LKA", "BTN", "MDV"),
    "East Asia": (
        "CHN", "JPN", "KOR", "TWN", "MNG", "PRK", "HKG", "MAC", "VNM", "THA",
        "MMR", "KHM", "LAO", "MYS", "SGP", "IDN", "PHL", "BRN", "TLS",
    ),
}

REGION_INDEX: Mapping[str, Tuple[str, ...]] = MappingProxyType(_REGION_COUNTRIES)


def region_names(index: Mapping[str, Tuple[str, ...]] = REGION_INDEX) -> List[str]:
    return list(index.keys())


def find_region(name: str, index: Mapping[str, Tuple[str, ...]] = REGION_INDEX) -> Optional[str]:
    """Case-insensitive lookup of a region name. Returns the canonical name or None."""
    wanted = name.strip().lower()
    for region in index:
        if region.lower() == wanted:
            return region
    return None


def region_of(iso3: str, index: Mapping[str, Tuple[str, ...]] = REGION_INDEX) -> Optional[str]:
    """Return the region a country belongs to, or None."""
    for region, members in index.items():
        if iso3 in members:
            return region
    return None
