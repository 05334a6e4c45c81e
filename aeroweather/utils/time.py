"""Time helpers: observation timestamps and the AI-supplied local time.

aviationweather.gov hands out ``obsTime``/``issueTime`` in several shapes:
epoch seconds, epoch milliseconds (numbers or numeric strings) and ISO-like
strings with or without a zone. ``resolve_instant`` turns all of them into a
``ParsedInstant``; nothing in here raises on bad input.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from aeroweather.utils.labels import DEFAULT_LANGUAGE, label

# Below this an epoch value is taken as seconds, otherwise milliseconds.
EPOCH_MS_THRESHOLD = 10_000_000_000

# The model writes this into local_time when it can't work the date out.
UNRESOLVED_MARKER = "XX"

_NUMERIC = re.compile(r"^\d+(\.\d+)?$")


@dataclass(frozen=True)
class ParsedInstant:
    instant: Optional[datetime]
    display: str
    relative: str = ""

    @property
    def resolved(self) -> bool:
        return self.instant is not None


@dataclass(frozen=True)
class LocalTime:
    date: str
    time: str


@dataclass(frozen=True)
class TimeDisplay:
    date: str
    time: str
    sub_label: str
    is_local: bool
    utc_label: str


def _unresolved(display: str) -> ParsedInstant:
    return ParsedInstant(instant=None, display=display, relative="")


def _parse_epoch(text: str) -> Optional[datetime]:
    ts = float(text)
    if ts < EPOCH_MS_THRESHOLD:
        ts *= 1000
    try:
        return datetime.fromtimestamp(ts / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _parse_datetime_string(text: str) -> Optional[datetime]:
    candidate = text.replace(" ", "T", 1)
    if candidate[-1:] in ("z", "Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        # upstream timestamps without a zone are UTC
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def relative_age(instant: datetime, now: Optional[datetime] = None, language: str = DEFAULT_LANGUAGE) -> str:
    now = now or datetime.now(timezone.utc)
    diff_mins = math.floor((now - instant).total_seconds() / 60)

    if -60 < diff_mins < 0:
        return label("just_now", language)
    if diff_mins < 0:
        return ""
    if diff_mins < 60:
        return label("minutes_ago", language).format(n=diff_mins)
    if diff_mins < 1440:
        return label("hours_ago", language).format(n=diff_mins // 60)
    return label("days_ago", language).format(n=diff_mins // 1440)


def resolve_instant(value: Any, now: Optional[datetime] = None, language: str = DEFAULT_LANGUAGE) -> ParsedInstant:
    """Resolve an observation/issue time of unknown shape.

    Numeric values (no ``:`` and no ``-``) are epoch timestamps, seconds when
    below ``EPOCH_MS_THRESHOLD`` and milliseconds otherwise. Anything else is
    read as an ISO-like date/time, UTC unless it carries a zone. Unparseable
    input comes back verbatim as the display value with no relative label.
    """
    placeholder = label("placeholder", language)
    if value is None or isinstance(value, bool):
        return _unresolved(placeholder)

    text = str(value).strip()
    if not text:
        return _unresolved(placeholder)

    if isinstance(value, (int, float)) or (_NUMERIC.match(text) and ":" not in text and "-" not in text):
        try:
            instant = _parse_epoch(text)
        except ValueError:
            instant = None
    else:
        instant = _parse_datetime_string(text)

    if instant is None:
        return _unresolved(text)

    display = f"{instant:%d.%m %H:%M} UTC"
    return ParsedInstant(instant=instant, display=display, relative=relative_age(instant, now, language))


def parse_local_time(value: Optional[str], language: str = DEFAULT_LANGUAGE) -> Optional[LocalTime]:
    """Parse the model's ``DD.MM HH:MM`` local time.

    Returns None when there is nothing usable (absent, blank, or carrying the
    unresolved marker), so callers fall back to the UTC display.
    """
    if not value or not value.strip() or UNRESOLVED_MARKER in value:
        return None

    parts = value.split(" ")
    if len(parts) != 2:
        return LocalTime(date=value, time="")

    date_part, time_part = parts
    day, _, month = date_part.partition(".")
    months = label("months", language)
    try:
        month_name = months[int(month) - 1] if 1 <= int(month) <= 12 else month
    except ValueError:
        month_name = month
    try:
        day = str(int(day))
    except ValueError:
        pass
    return LocalTime(date=f"{day} {month_name}".strip(), time=time_part)


def build_time_display(
    observed: ParsedInstant,
    local_time: Optional[str] = None,
    language: str = DEFAULT_LANGUAGE,
) -> TimeDisplay:
    overlay = parse_local_time(local_time, language)
    if overlay is not None:
        return TimeDisplay(
            date=overlay.date,
            time=overlay.time,
            sub_label=label("local_time", language),
            is_local=True,
            utc_label=observed.display,
        )

    parts = observed.display.split(" ")
    return TimeDisplay(
        date=parts[0] or "--.--",
        time=parts[1] if len(parts) > 1 else "--:--",
        sub_label=observed.relative,
        is_local=False,
        utc_label=observed.display,
    )
