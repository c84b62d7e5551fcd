"""Severity buckets for choropleth coloring, and marker colors per attack type."""

from __future__ import annotations
from typing import Dict, Optional

from .config import AtlasConfig, DEFAULT_CONFIG

CRITICAL = "critical"
MEDIUM = "medium"
LOW = "low"
NONE = "none"

SEVERITY_LEVELS = (CRITICAL, MEDIUM, LOW, NONE)

SEVERITY_COLORS: Dict[str, str] = {
    CRITICAL: "#e04d4dff",
    MEDIUM: "#ffae16ff",
    LOW: "#ffe064ff",
    NONE: "#ffffffff",
}

SEVERITY_CAPTIONS: Dict[str, str] = {
    CRITICAL: "50+ incidents",
    MEDIUM: "20-49 incidents",
    LOW: "1-19 incidents",
    NONE: "no incidents",
}

# substring (lower-case) -> marker color; first match wins
ATTACK_COLORS = (
    ("phishing", "#ff6b6b"),
    ("ddos", "#4ecdc4"),
    ("malware", "#45b7d1"),
    ("ransomware", "#96ceb4"),
    ("data breach", "#feca57"),
)
DEFAULT_ATTACK_COLOR = "#778ca3"


def classify(count: int, config: Optional[AtlasConfig] = None) -> str:
    """Map an incident count to a severity bucket.

    Lower bounds are inclusive: exactly 50 is critical, exactly 20 is medium.
    """
    cfg = config or DEFAULT_CONFIG
    if count >= cfg.critical_threshold:
        return CRITICAL
    if count >= cfg.medium_threshold:
        return MEDIUM
    if count >= cfg.low_threshold:
        return LOW
    return NONE


def severity_color(level: str) -> str:
    return SEVERITY_COLORS.get(level, SEVERITY_COLORS[NONE])


def attack_color(attack_type: str) -> str:
    t = (attack_type or "").lower()
    for needle, color in ATTACK_COLORS:
        if needle in t:
            return color
    return DEFAULT_ATTACK_COLOR
