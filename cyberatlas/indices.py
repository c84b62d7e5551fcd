"""
Indices (country aggregation + attack-type filter)
==================================================

The aggregator groups incidents into buckets keyed by ISO3 country code.

Example:
- `by_country["USA"]` gives the incidents located in the United States,
  in dataset order.
- `by_type["Ransomware"]` gives every resolvable incident of that attack type.

The buckets are rebuilt from scratch whenever the dataset changes; nothing here
updates them incrementally. Incidents whose location cannot be resolved are
left out (and only counted in `unresolved`).
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import AbstractSet, Dict, Iterable, List, Mapping, Sequence

from .locations import resolve_location
from .models import Incident

logger = logging.getLogger(__name__)

CountryBuckets = Dict[str, List[Incident]]


@dataclass
class Indices:
    """Container of the per-dataset aggregations."""
    by_country: CountryBuckets
    by_type: Dict[str, List[Incident]]
    unresolved: int = 0

    @property
    def resolved(self) -> int:
        return sum(len(b) for b in self.by_country.values())


def build_country_index(incidents: Iterable[Incident]) -> CountryBuckets:
    """Group incidents by resolved ISO3 code, preserving encounter order."""
    by_country: CountryBuckets = {}
    dropped = 0
    for inc in incidents:
        iso3 = resolve_location(inc.event.primary_location)
        if iso3 is None:
            dropped += 1
            logger.debug("Incident %s has unresolvable location %r", inc.id, inc.event.primary_location)
            continue
        by_country.setdefault(iso3, []).append(inc)
    if dropped:
        logger.info("Skipped %d incident(s) without a resolvable country", dropped)
    return by_country


def build_indices(incidents: Sequence[Incident]) -> Indices:
    """Build indices from the loaded dataset.

    Returns:
        Indices object with by_country, by_type and the unresolved count.
    """
    by_country = build_country_index(incidents)
    by_type: Dict[str, List[Incident]] = {}
    for bucket in by_country.values():
        for inc in bucket:
            by_type.setdefault(inc.attack.type, []).append(inc)
    resolved = sum(len(b) for b in by_country.values())
    return Indices(by_country=by_country, by_type=by_type, unresolved=len(incidents) - resolved)


def filter_by_attack_types(by_country: CountryBuckets, types: AbstractSet[str]) -> CountryBuckets:
    """Keep only incidents whose attack type is in `types`.

    An empty `types` set means no filtering: the input mapping itself is returned.
    Countries left without incidents are dropped from the result.
    """
    if not types:
        return by_country
    out: CountryBuckets = {}
    for iso3, bucket in by_country.items():
        kept = [inc for inc in bucket if inc.attack.type in types]
        if kept:
            out[iso3] = kept
    return out


def country_counts(by_country: Mapping[str, Sequence[Incident]]) -> Dict[str, int]:
    return {iso3: len(bucket) for iso3, bucket in by_country.items()}


def flatten(by_country: Mapping[str, Sequence[Incident]]) -> List[Incident]:
    """Concatenate every bucket in the mapping's iteration order."""
    out: List[Incident] = []
    for bucket in by_country.values():
        out.extend(bucket)
    return out
