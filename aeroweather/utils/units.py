"""Unit conversion and visibility helpers for METAR display values.

Upstream visibility arrives either as a bare number of meters (``9999``) or as
a statute-mile coded string (``"10SM"``, ``"1 1/2SM"``, ``"6+"``). Everything
here resolves that union once into plain numbers/labels so the display layer
never has to look at the raw shape again.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Iterable, NamedTuple, Optional, Union

from aeroweather.utils.labels import DEFAULT_LANGUAGE, label

KNOTS_TO_MS = 0.514444
FEET_TO_METERS = 0.3048
STATUTE_MILE_METERS = 1609

VisibilityValue = Union[int, float, str, None]

_MIXED_FRACTION = re.compile(r"^(\d+)\s+(\d+)/(\d+)")
_FRACTION = re.compile(r"^(\d+)/(\d+)")
_NUMBER = re.compile(r"^[PM]?(\d+(?:\.\d+)?)")


class VisibilityTier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    MARGINAL = "marginal"
    POOR = "poor"
    UNKNOWN = "unknown"


class VisibilityClass(NamedTuple):
    tier: VisibilityTier
    color_hint: str


_TIER_COLORS = {
    VisibilityTier.EXCELLENT: "emerald",
    VisibilityTier.GOOD: "green",
    VisibilityTier.MARGINAL: "yellow",
    VisibilityTier.POOR: "red",
    VisibilityTier.UNKNOWN: "slate",
}


def knots_to_ms(knots: Optional[float]) -> Optional[str]:
    if knots is None:
        return None
    return f"{knots * KNOTS_TO_MS:.1f}"


def feet_to_meters(feet: Optional[float]) -> Optional[int]:
    if feet is None:
        return None
    # half-up, not banker's rounding
    return int(math.floor(feet * FEET_TO_METERS + 0.5))


def _leading_number(text: str) -> Optional[float]:
    text = text.strip()
    m = _MIXED_FRACTION.match(text)
    if m:
        whole, num, den = (int(g) for g in m.groups())
        return whole + num / den if den else None
    m = _FRACTION.match(text)
    if m:
        num, den = (int(g) for g in m.groups())
        return num / den if den else None
    m = _NUMBER.match(text)
    if m:
        return float(m.group(1))
    return None


def visibility_meters(value: VisibilityValue) -> Optional[float]:
    """Resolve a raw visibility value to meters; None when it can't be read."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip().upper()
    if not text:
        return None
    if text == "10SM":
        return 16000.0
    if text.endswith("SM"):
        miles = _leading_number(text[:-2])
        return None if miles is None else miles * STATUTE_MILE_METERS
    if text.endswith("+"):
        # aviationweather.gov JSON uses "6+" / "10+" for "statute miles or more"
        miles = _leading_number(text[:-1])
        return None if miles is None else miles * STATUTE_MILE_METERS
    return _leading_number(text)


def classify_visibility(value: VisibilityValue) -> VisibilityClass:
    meters = visibility_meters(value)
    if meters is None:
        tier = VisibilityTier.UNKNOWN
    elif meters >= 10000:
        tier = VisibilityTier.EXCELLENT
    elif meters >= 5000:
        tier = VisibilityTier.GOOD
    elif meters >= 2000:
        tier = VisibilityTier.MARGINAL
    else:
        tier = VisibilityTier.POOR
    return VisibilityClass(tier=tier, color_hint=_TIER_COLORS[tier])


def _plain_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def format_visibility_value(value: VisibilityValue, language: str = DEFAULT_LANGUAGE) -> str:
    if value is None:
        return label("placeholder", language)
    if value == 9999 or value == "9999":
        return label("ten_km_plus", language)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return label("meters", language).format(value=_plain_number(value))
    if isinstance(value, str) and value.endswith("SM"):
        return label("miles", language).format(value=value[:-2].strip())
    return str(value)


def wind_direction_label(direction: Union[int, float, str, None], language: str = DEFAULT_LANGUAGE) -> str:
    if direction is None:
        return label("not_available", language)
    if isinstance(direction, str):
        if direction.strip().upper() == "VRB":
            return label("wind_variable", language)
        return direction
    return f"{_plain_number(direction)}°"


def cloud_description(cover: str, language: str = DEFAULT_LANGUAGE) -> str:
    return label("clouds", language).get(cover, cover)


def clouds_summary(layers: Iterable, language: str = DEFAULT_LANGUAGE) -> str:
    """One-line description of all cloud layers, e.g. 'Broken at 914 m (CB)'."""
    parts = []
    for layer in layers:
        desc = cloud_description(str(layer.cover), language)
        height = feet_to_meters(layer.base)
        suffix = f" ({layer.type})" if layer.type else ""
        if height:
            parts.append(label("cloud_at", language).format(desc=desc, height=height) + suffix)
        else:
            parts.append(desc + suffix)
    if not parts:
        return label("sky_clear", language)
    return ", ".join(parts)


_NAME_NOISE = [
    re.compile(r"(International)?\s?Airport", re.IGNORECASE),
    re.compile(r"Intl", re.IGNORECASE),
    re.compile(r"Air Base", re.IGNORECASE),
]


def clean_station_name(name: Optional[str]) -> str:
    if not name:
        return ""
    for pattern in _NAME_NOISE:
        name = pattern.sub("", name, count=1)
    return name.strip()
