"""
Timeline layout engine
======================

Places incidents along a horizontal time axis:

1) keep incidents with a parseable date whose year lies in the configured bound
2) sort them chronologically (stable, startDate preferred over date)
3) pad the [min, max] range by 10% of its width, or by 7 days when it is zero
4) map each date to a percentage of the padded range

Invalid dates are dropped from the timeline only. They still count on the map.
"""

from __future__ import annotations
from datetime import datetime, timedelta
import logging
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from .config import AtlasConfig, DEFAULT_CONFIG
from .models import Incident, TimelineEntry, TimelineLayout

logger = logging.getLogger(__name__)


# Words pandas resolves to the current wall-clock time; they are not calendar dates.
_RELATIVE_WORDS = {"now", "today", "tomorrow", "yesterday"}


def _date_text(value: Optional[str]) -> Optional[str]:
    text = str(value).strip() if value is not None else ""
    if not text or text.lower() in _RELATIVE_WORDS:
        return None
    return text


def parse_dates(values: Sequence[Optional[str]]) -> List[Optional[datetime]]:
    """Parse date strings to UTC datetimes in one vectorised pass.

    ISO 8601 strings go through the fast path; anything else gets a second,
    per-element attempt. Unparseable values come back as None. Naive values are
    read as UTC.
    """
    if not values:
        return []
    texts = pd.Series([_date_text(v) for v in values], dtype="object")
    parsed = pd.to_datetime(texts, utc=True, errors="coerce", format="ISO8601")
    retry = parsed.isna() & texts.notna()
    if retry.any():
        parsed[retry] = pd.to_datetime(texts[retry], utc=True, errors="coerce", format="mixed")
    return [None if pd.isna(ts) else ts.to_pydatetime() for ts in parsed]


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse one date string to a UTC datetime, or None if it is not a real date."""
    return parse_dates([value])[0]


def _in_bounds(when: Optional[datetime], cfg: AtlasConfig) -> bool:
    return when is not None and cfg.min_year <= when.year <= cfg.max_year


def incident_date(inc: Incident, config: Optional[AtlasConfig] = None) -> Optional[datetime]:
    """Return the timeline date of an incident if it is valid for the timeline."""
    when = parse_date(inc.timeline_date())
    return when if _in_bounds(when, config or DEFAULT_CONFIG) else None


def sorted_valid(incidents: Sequence[Incident], config: Optional[AtlasConfig] = None) -> List[Tuple[datetime, Incident]]:
    """Validate and sort incidents; returns (date, incident) pairs in ascending order.

    Dates are parsed once per call for the whole list. The sort is stable, so
    incidents on the same instant keep their input order.
    """
    cfg = config or DEFAULT_CONFIG
    dates = parse_dates([inc.timeline_date() for inc in incidents])
    pairs = [(when, inc) for when, inc in zip(dates, incidents) if _in_bounds(when, cfg)]
    dropped = len(incidents) - len(pairs)
    if dropped:
        logger.debug("Left %d of %d incident(s) off the timeline", dropped, len(incidents))
    return sorted(pairs, key=lambda p: p[0])


def padded_range(min_date: datetime, max_date: datetime, config: Optional[AtlasConfig] = None) -> Tuple[datetime, datetime]:
    cfg = config or DEFAULT_CONFIG
    raw = max_date - min_date
    padding = raw * cfg.padding_ratio if raw > timedelta(0) else cfg.min_padding
    return min_date - padding, max_date + padding


def position_of(when: datetime, range_start: datetime, range_end: datetime) -> float:
    """Percentage (0..100) of `when` along [range_start, range_end]; 50 on a zero-width range."""
    span = (range_end - range_start).total_seconds()
    if span == 0:
        return 50.0
    return (when - range_start).total_seconds() / span * 100.0


def build_layout(incidents: Sequence[Incident], config: Optional[AtlasConfig] = None) -> TimelineLayout:
    """Compute the sorted, positioned timeline for a list of incidents."""
    pairs = sorted_valid(incidents, config)
    if not pairs:
        return TimelineLayout()

    # pairs are sorted, so the extremes sit at both ends
    start, end = padded_range(pairs[0][0], pairs[-1][0], config)
    entries = tuple(
        TimelineEntry(incident=inc, when=when, position=position_of(when, start, end))
        for when, inc in pairs
    )
    return TimelineLayout(entries=entries, range_start=start, range_end=end)


def axis_label(when: Optional[datetime]) -> str:
    """Short month/year label used at both ends of the axis (e.g. 'Jan 2020')."""
    if when is None:
        return ""
    return when.strftime("%b %Y")
