"""
Core engine (Atlas)
===================

Atlas ties the pipeline stages together for the rendering layer:

1) Load dataset -> list of Incident records (immutable)
2) Build indices -> incidents grouped by ISO3 country and by attack type
3) Hold the current SelectionState and FilterState (immutable values)
4) On every read, derive filtered buckets -> displayed incidents -> timeline layout
5) Export or report on what is currently displayed

The engine never mutates a bucket. Interactions replace the state values and
push the previous pair onto an undo stack.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import csv
import json
import logging
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, TypeVar

from . import selection as sel
from .config import AtlasConfig, DEFAULT_CONFIG
from .indices import Indices, country_counts, filter_by_attack_types
from .locations import feature_iso3, feature_name
from .models import FilterState, Incident, SelectionState, TimelineLayout
from .regions import REGION_INDEX, WORLD, find_region
from .severity import classify, severity_color
from .timeline import build_layout

logger = logging.getLogger(__name__)

_Snapshot = Tuple[SelectionState, FilterState]

# Entries kept per derived-view cache before it is emptied
CACHE_LIMIT = 32


@dataclass
class CountrySummary:
    """What a map renderer needs for one country polygon."""
    iso3: Optional[str]
    name: str
    count: int
    severity: str
    color: str


@dataclass
class Atlas:
    """Cyber incident atlas engine.

    The engine stores:
    - incidents: all Incident records
    - idx: per-dataset aggregations
    - selection / filters: the current interaction state

    Filters and selections replace `selection`/`filters` only.
    """
    incidents: List[Incident]
    idx: Indices
    regions: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: REGION_INDEX)
    config: AtlasConfig = DEFAULT_CONFIG
    dataset_path: Optional[str] = None
    # Stores CLI commands (for reproducibility in reports)
    command_log: List[str] = field(default_factory=list)

    selection: SelectionState = field(default_factory=SelectionState)
    filters: FilterState = field(default_factory=FilterState)

    _undo: List[_Snapshot] = field(default_factory=list, init=False, repr=False)
    _redo: List[_Snapshot] = field(default_factory=list, init=False, repr=False)
    # filter set -> read-only filtered country buckets
    _filtered_cache: Dict[FrozenSet[str], Mapping[str, Tuple[Incident, ...]]] = field(default_factory=dict, init=False, repr=False)
    # (selection, filters) -> timeline layout of the displayed incidents
    _layout_cache: Dict[_Snapshot, TimelineLayout] = field(default_factory=dict, init=False, repr=False)

    # ---------------- History (Stacks) ----------------
    def _push_history(self) -> None:
        self._undo.append((self.selection, self.filters))
        self._redo.clear()

    def _apply(self, selection: SelectionState, filters: FilterState) -> None:
        if (selection, filters) == (self.selection, self.filters):
            return
        self._push_history()
        self.selection = selection
        self.filters = filters

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append((self.selection, self.filters))
        self.selection, self.filters = self._undo.pop()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append((self.selection, self.filters))
        self.selection, self.filters = self._redo.pop()
        return True

    # ---------------- Interaction ----------------
    def select_country(self, iso3: str) -> None:
        self._apply(sel.select_country(self.selection, iso3), self.filters)

    def select_region(self, region: str) -> None:
        """Select a region by name (case-insensitive). 'World' clears the selection."""
        if region.strip().lower() == WORLD.lower():
            name = WORLD
        else:
            name = find_region(region, self.regions)
            if name is None:
                raise ValueError(f"Unknown region {region!r}. Known: {', '.join(self.regions)}")
        self._apply(sel.select_region(self.selection, name), self.filters)

    def clear_selection(self) -> None:
        self._apply(sel.clear_selection(self.selection), self.filters)

    def toggle_type(self, attack_type: str) -> None:
        self._apply(self.selection, sel.toggle_attack_type(self.filters, attack_type))

    def clear_filters(self) -> None:
        self._apply(self.selection, sel.clear_filters(self.filters))

    def select_all_types(self) -> None:
        self._apply(self.selection, sel.select_all_types(self.filters, self.attack_types()))

    def reset(self) -> None:
        """Clear both the selection and the filters."""
        self._apply(SelectionState(), FilterState())

    # ---------------- Derived views ----------------
    def attack_types(self) -> List[str]:
        return sorted(self.idx.by_type.keys())

    def filtered_buckets(self) -> Mapping[str, Tuple[Incident, ...]]:
        """Attack-filtered country buckets for the current filters (read-only view)."""
        key = self.filters.types
        cached = self._filtered_cache.get(key)
        if cached is None:
            filtered = filter_by_attack_types(self.idx.by_country, key)
            cached = MappingProxyType({iso3: tuple(b) for iso3, b in filtered.items()})
            _store(self._filtered_cache, key, cached)
            logger.debug("Filtered buckets for %s: %d countries", sorted(key) or "all types", len(cached))
        return cached

    def displayed_incidents(self) -> List[Incident]:
        return sel.resolve_incidents(self.selection, self.filtered_buckets(), self.regions)

    def title(self) -> str:
        return sel.title_for(self.selection)

    def timeline_layout(self, incidents: Optional[Iterable[Incident]] = None) -> TimelineLayout:
        """Lay out `incidents` (default: the displayed incidents) on the time axis.

        The default layout is cached per (selection, filters) pair.
        """
        if incidents is not None:
            return build_layout(list(incidents), self.config)
        key = (self.selection, self.filters)
        cached = self._layout_cache.get(key)
        if cached is None:
            cached = build_layout(self.displayed_incidents(), self.config)
            _store(self._layout_cache, key, cached)
        return cached

    def country_count(self, iso3: str) -> int:
        return len(self.idx.by_country.get(iso3.upper(), ()))

    def color_for_country(self, iso3: Optional[str]) -> str:
        """Severity bucket of a country, from its unfiltered incident count."""
        count = self.country_count(iso3) if iso3 else 0
        return classify(count, self.config)

    def country_counts(self) -> Dict[str, int]:
        return country_counts(self.idx.by_country)

    def country_summaries(self, features: Iterable[Mapping[str, Any]]) -> List[CountrySummary]:
        """Fill/popup data for each GeoJSON country feature."""
        out: List[CountrySummary] = []
        for feature in features:
            iso3 = feature_iso3(feature)
            count = self.country_count(iso3) if iso3 else 0
            level = classify(count, self.config)
            out.append(CountrySummary(
                iso3=iso3,
                name=feature_name(feature),
                count=count,
                severity=level,
                color=severity_color(level),
            ))
        return out

    # ---------------- Output operations ----------------
    def export_csv(self, path: str) -> int:
        """Write the current timeline layout to CSV. Returns the row count."""
        layout = self.timeline_layout()
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["id", "name", "date", "country", "attack_type", "position"])
            for entry in layout.entries:
                inc = entry.incident
                w.writerow([inc.id, inc.event.name, entry.when.isoformat(),
                            inc.event.primary_location, inc.attack_label(), f"{entry.position:.4f}"])
        return len(layout)

    def export_json(self, path: str) -> int:
        """Write the current timeline layout (entries plus axis bounds) to JSON."""
        layout = self.timeline_layout()
        payload = {
            "title": self.title(),
            "range_start": layout.range_start.isoformat() if layout.range_start else None,
            "range_end": layout.range_end.isoformat() if layout.range_end else None,
            "entries": [
                {
                    "id": e.incident.id,
                    "name": e.incident.event.name,
                    "date": e.when.isoformat(),
                    "country": e.incident.event.primary_location,
                    "attack_type": e.incident.attack_label(),
                    "position": e.position,
                }
                for e in layout.entries
            ],
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        return len(layout)


K = TypeVar("K")
V = TypeVar("V")


def _store(cache: Dict[K, V], key: K, value: V) -> None:
    # Bounded: a full cache is emptied rather than grown past CACHE_LIMIT.
    if len(cache) >= CACHE_LIMIT:
        cache.clear()
    cache[key] = value
