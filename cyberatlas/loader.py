"""
Dataset loader (JSON -> Incident list)
======================================

This module reads the incidents JSON export (a list of nested objects) and
converts each object into an immutable `Incident`.

Key ideas:
- `pandas.json_normalize` flattens the nested objects into dotted columns
  (`event.startDate`, `attack.impact.cia`, ...), so missing keys simply become
  NaN cells instead of KeyErrors.
- Conversion helpers (_to_str/_to_tuple) handle blanks safely.
- Only `id` is required. Every other field falls back to an empty value.
"""

from __future__ import annotations
import json
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from .models import AttackInfo, EventInfo, Impact, Incident, SourceInfo

logger = logging.getLogger(__name__)


def _is_missing(x: Any) -> bool:
    if x is None:
        return True
    if isinstance(x, (list, tuple, dict)):
        return False
    try:
        return bool(pd.isna(x))
    except (TypeError, ValueError):
        return False


def _to_str(x: Any) -> str:
    if _is_missing(x):
        return ""
    if isinstance(x, float) and x.is_integer():
        return str(int(x))
    return str(x).strip()


def _to_tuple(x: Any) -> Tuple[Any, ...]:
    if _is_missing(x):
        return ()
    if isinstance(x, (list, tuple)):
        return tuple(x)
    return (x,)


def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())


def _col(df: pd.DataFrame, *names: str) -> Optional[str]:
    """Find a column by exact name first, then by a normalized comparison."""
    cols = list(df.columns)
    for n in names:
        if n in cols:
            return n
    norm_map = {_norm(c): c for c in cols}
    for n in names:
        nn = _norm(n)
        if nn in norm_map:
            return norm_map[nn]
    return None


def incidents_from_records(records: Iterable[Mapping[str, Any]]) -> List[Incident]:
    """Convert raw incident dicts (as found in the JSON export) to `Incident` objects."""
    rows = list(records)
    if not rows:
        return []
    if not all(isinstance(r, Mapping) for r in rows):
        raise ValueError("Incident dataset must be a list of JSON objects")

    df = pd.json_normalize(rows)
    id_col = _col(df, "id")
    if id_col is None:
        raise KeyError(f"Missing required column 'id'. Available={list(df.columns)}")

    cols: Dict[str, Optional[str]] = {
        "date": _col(df, "event.date"),
        "start_date": _col(df, "event.startDate", "event.start_date"),
        "name": _col(df, "event.name"),
        "description": _col(df, "event.description"),
        "location": _col(df, "event.primaryLocation", "event.primary_location"),
        "city": _col(df, "event.primaryCity", "event.primary_city"),
        "trust": _col(df, "event.eventTrustLevel"),
        "type": _col(df, "attack.type"),
        "vector": _col(df, "attack.vector"),
        "cia": _col(df, "attack.impact.cia"),
        "impact_type": _col(df, "attack.impact.type"),
        "impact_desc": _col(df, "attack.impact.description"),
        "harmed": _col(df, "attack.harms.groupName"),
        "source_name": _col(df, "source.name"),
        "source_url": _col(df, "source.url"),
        "organization": _col(df, "organization"),
        "reported_by": _col(df, "reported_by"),
        "inserted_at": _col(df, "inserted_at"),
        "status": _col(df, "status"),
        "targets": _col(df, "target_name_embed"),
        "actors": _col(df, "threat_actor_name_embed"),
        "tags": _col(df, "tags"),
    }

    def cell(row: pd.Series, key: str) -> Any:
        c = cols[key]
        return row[c] if c else None

    incidents: List[Incident] = []
    for _, row in df.iterrows():
        incidents.append(Incident(
            id=_to_str(row[id_col]),
            event=EventInfo(
                date=_to_str(cell(row, "date")),
                start_date=_to_str(cell(row, "start_date")),
                name=_to_str(cell(row, "name")),
                description=_to_str(cell(row, "description")),
                primary_location=_to_str(cell(row, "location")),
                primary_city=_to_str(cell(row, "city")),
                trust_level=_to_str(cell(row, "trust")),
            ),
            attack=AttackInfo(
                type=_to_str(cell(row, "type")),
                vector=_to_str(cell(row, "vector")),
                impact=Impact(
                    cia=_to_str(cell(row, "cia")),
                    type=_to_str(cell(row, "impact_type")),
                    description=_to_str(cell(row, "impact_desc")),
                ),
                harmed_group=_to_str(cell(row, "harmed")),
            ),
            source=SourceInfo(
                name=_to_str(cell(row, "source_name")),
                url=_to_str(cell(row, "source_url")),
            ),
            organization=_to_str(cell(row, "organization")),
            reported_by=_to_str(cell(row, "reported_by")),
            inserted_at=_to_str(cell(row, "inserted_at")),
            status=_to_str(cell(row, "status")),
            target_name_embed=_to_tuple(cell(row, "targets")),
            threat_actor_name_embed=_to_tuple(cell(row, "actors")),
            tags=tuple(str(t) for t in _to_tuple(cell(row, "tags"))),
        ))
    return incidents


def load_incidents_json(path: str) -> List[Incident]:
    """Load the incidents JSON export from disk."""
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, list):
        raise ValueError(f"{path}: expected a JSON list of incidents, got {type(payload).__name__}")
    incidents = incidents_from_records(payload)
    logger.info("Loaded %d incident(s) from %s", len(incidents), path)
    return incidents


def load_country_features(path: str) -> List[Dict[str, Any]]:
    """Load the `features` list of a GeoJSON FeatureCollection."""
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict) and payload.get("type") == "FeatureCollection":
        features = payload.get("features") or []
    elif isinstance(payload, list):
        features = payload
    else:
        raise ValueError(f"{path}: expected a GeoJSON FeatureCollection")
    logger.info("Loaded %d country feature(s) from %s", len(features), path)
    return list(features)
