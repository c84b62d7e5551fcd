"""
Configuration knobs for the engine
==================================

All thresholds live in one frozen dataclass so that the pipeline functions can
take an explicit `config` argument instead of reading module globals.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class AtlasConfig:
    """Bounds and thresholds used by the timeline and severity stages."""
    # Timeline sanity bound (inclusive). Incidents outside it are dropped from
    # the timeline only; a corpus reaching past 2030 will silently lose rows here.
    min_year: int = 2000
    max_year: int = 2030

    # Axis padding: a share of the raw range, or a fixed width when all
    # incidents fall on the same instant.
    padding_ratio: float = 0.1
    min_padding: timedelta = timedelta(days=7)

    # Inclusive lower bounds of the severity buckets
    critical_threshold: int = 50
    medium_threshold: int = 20
    low_threshold: int = 1


DEFAULT_CONFIG = AtlasConfig()
