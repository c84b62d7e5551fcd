"""
Selection resolver
==================

Turns the current `SelectionState` and the (attack-filtered) country buckets
into the flat list of incidents shown on the timeline, plus the panel title.

State transitions are plain functions returning new values. Selecting a country
always clears the region and vice versa; `SelectionState` refuses to hold both.
"""

from __future__ import annotations
from typing import Iterable, List, Mapping, Sequence, Tuple

from .indices import flatten
from .models import FilterState, Incident, SelectionState
from .regions import REGION_INDEX, WORLD

GLOBAL_TITLE = "Global Incidents Timeline"


# ---------------- Transitions ----------------
def select_country(state: SelectionState, iso3: str) -> SelectionState:
    return SelectionState(country=iso3.strip().upper())


def select_region(state: SelectionState, region: str) -> SelectionState:
    if region == WORLD:
        return SelectionState()
    return SelectionState(region=region)


def clear_selection(state: SelectionState) -> SelectionState:
    return SelectionState()


def toggle_attack_type(filters: FilterState, attack_type: str) -> FilterState:
    if attack_type in filters.types:
        return FilterState(types=filters.types - {attack_type})
    return FilterState(types=filters.types | {attack_type})


def clear_filters(filters: FilterState) -> FilterState:
    return FilterState()


def select_all_types(filters: FilterState, known_types: Iterable[str]) -> FilterState:
    return FilterState.of(known_types)


# ---------------- Resolution ----------------
def resolve_incidents(
    state: SelectionState,
    by_country: Mapping[str, Sequence[Incident]],
    regions: Mapping[str, Tuple[str, ...]] = REGION_INDEX,
) -> List[Incident]:
    """Return the incidents to display for the given selection.

    - country selected: that country's bucket (empty if absent)
    - region selected: member buckets concatenated in region-table order
      (a region missing from the table falls back to the global list)
    - nothing selected: every bucket in mapping order
    """
    if state.country:
        return list(by_country.get(state.country, []))
    if state.region and state.region in regions:
        out: List[Incident] = []
        for iso3 in regions[state.region]:
            bucket = by_country.get(iso3)
            if bucket:
                out.extend(bucket)
        return out
    return flatten(by_country)


def title_for(state: SelectionState) -> str:
    if state.country:
        return f"Incidents Timeline - {state.country}"
    if state.region:
        return f"Incidents Timeline - {state.region}"
    return GLOBAL_TITLE


def count_label(n: int) -> str:
    return f"({n} incident{'s' if n > 1 else ''})"
