"""
Data model (Incident + state values)
====================================

Each object in the incidents JSON file is converted into an `Incident`.
We keep records immutable (`frozen=True`) so that:
- incidents cannot be accidentally modified after loading, and
- aggregation/filter/selection stages build new views instead of editing data.

Selection and filter state are immutable values too. A state change produces a
new value that is passed into the next recomputation.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, FrozenSet, Iterable, Optional, Tuple


@dataclass(frozen=True)
class EventInfo:
    date: str = ""
    start_date: str = ""
    name: str = ""
    description: str = ""
    # raw 2-letter country code, resolved later by `locations.resolve_location`
    primary_location: str = ""
    primary_city: str = ""
    trust_level: str = ""


@dataclass(frozen=True)
class Impact:
    cia: str = ""
    type: str = ""
    description: str = ""


@dataclass(frozen=True)
class AttackInfo:
    type: str = ""
    vector: str = ""
    impact: Impact = field(default_factory=Impact)
    harmed_group: str = ""


@dataclass(frozen=True)
class SourceInfo:
    name: str = ""
    url: str = ""


@dataclass(frozen=True)
class Incident:
    """One cyber incident record.

    Only `event` and `attack.type` are read by the engine. The remaining
    fields are carried through for renderers and exports.
    """
    id: str
    event: EventInfo = field(default_factory=EventInfo)
    attack: AttackInfo = field(default_factory=AttackInfo)
    source: SourceInfo = field(default_factory=SourceInfo)
    organization: str = ""
    reported_by: str = ""
    inserted_at: str = ""
    status: str = ""
    target_name_embed: Tuple[Any, ...] = ()
    threat_actor_name_embed: Tuple[Any, ...] = ()
    tags: Tuple[str, ...] = ()

    def timeline_date(self) -> str:
        """Return the date string used on the timeline (startDate wins over date)."""
        return self.event.start_date or self.event.date

    def attack_label(self) -> str:
        return self.attack.type or "Unknown"


@dataclass(frozen=True)
class SelectionState:
    """At most one of `country` (ISO3) or `region` (region name) is set."""
    country: Optional[str] = None
    region: Optional[str] = None

    def __post_init__(self) -> None:
        if self.country and self.region:
            raise ValueError("A selection is either a country or a region, not both")

    @property
    def is_empty(self) -> bool:
        return not self.country and not self.region


@dataclass(frozen=True)
class FilterState:
    """Selected attack types. Empty means "no filter" (show everything)."""
    types: FrozenSet[str] = frozenset()

    @classmethod
    def of(cls, types: Iterable[str]) -> "FilterState":
        return cls(types=frozenset(types))

    @property
    def is_active(self) -> bool:
        return bool(self.types)


@dataclass(frozen=True)
class TimelineEntry:
    incident: Incident
    # parsed timeline date (UTC)
    when: datetime
    # horizontal placement in percent, 0..100
    position: float


@dataclass(frozen=True)
class TimelineLayout:
    """Positioned incidents plus the padded axis bounds.

    `range_start`/`range_end` are None when no incident survived validation.
    """
    entries: Tuple[TimelineEntry, ...] = ()
    range_start: Optional[datetime] = None
    range_end: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries
