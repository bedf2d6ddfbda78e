from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import time
from typing import Any, Iterable

DAY_TOKENS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(?::[0-5]\d)?$")

_DAY_ALIASES = {
    "mon": "Mon",
    "monday": "Mon",
    "tue": "Tue",
    "tues": "Tue",
    "tuesday": "Tue",
    "wed": "Wed",
    "weds": "Wed",
    "wednesday": "Wed",
    "thu": "Thu",
    "thur": "Thu",
    "thurs": "Thu",
    "thursday": "Thu",
    "fri": "Fri",
    "friday": "Fri",
    "sat": "Sat",
    "saturday": "Sat",
    "sun": "Sun",
    "sunday": "Sun",
}

_DAY_ORDER = {token: index for index, token in enumerate(DAY_TOKENS)}


def normalize_day(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return _DAY_ALIASES.get(value.strip().lower())


def normalize_days(value: Any) -> tuple[str, ...]:
    """Canonicalize a day-set encoding into ordered weekday tokens.

    Accepts a list/tuple/set of tokens, a JSON-encoded list, a comma-separated
    string or None. Unknown, blank and non-string tokens are dropped and
    duplicates collapse, so legacy rows never break a caller.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return ()
        try:
            decoded = json.loads(stripped)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, list):
            items: Iterable[Any] = decoded
        elif isinstance(decoded, str):
            items = decoded.split(",")
        else:
            items = stripped.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        return ()

    seen: set[str] = set()
    for item in items:
        token = normalize_day(item)
        if token is not None:
            seen.add(token)
    return tuple(sorted(seen, key=_DAY_ORDER.__getitem__))


def day_overlap(days_a: Any, days_b: Any) -> bool:
    return bool(set(normalize_days(days_a)) & set(normalize_days(days_b)))


def parse_time_to_minutes(value: str | time) -> int:
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    match = TIME_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ValueError("Time must be in HH:MM 24-hour format")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(value: int) -> str:
    hours = value // 60
    minutes = value % 60
    return f"{hours:02d}:{minutes:02d}"


def normalize_time(value: str | time) -> str:
    return minutes_to_time(parse_time_to_minutes(value))


def times_overlap(
    start_a: str | time,
    end_a: str | time,
    start_b: str | time,
    end_b: str | time,
    buffer_minutes: int = 0,
) -> bool:
    """Half-open overlap test on [start, end) with symmetric buffer padding.

    The buffer widens both intervals on each side and is clamped to the day,
    so padding never wraps past midnight.
    """
    a0 = parse_time_to_minutes(start_a)
    a1 = parse_time_to_minutes(end_a)
    b0 = parse_time_to_minutes(start_b)
    b1 = parse_time_to_minutes(end_b)

    buffer = max(0, int(buffer_minutes or 0))
    if buffer > 0:
        a0 = max(0, a0 - buffer)
        a1 = min(MINUTES_PER_DAY, a1 + buffer)
        b0 = max(0, b0 - buffer)
        b1 = min(MINUTES_PER_DAY, b1 + buffer)

    return a0 < b1 and b0 < a1


@dataclass(frozen=True)
class TimeBlock:
    days: tuple[str, ...]
    starts_at: str
    ends_at: str

    @classmethod
    def build(cls, days: Any, starts_at: str | time, ends_at: str | time) -> "TimeBlock":
        return cls(
            days=normalize_days(days),
            starts_at=normalize_time(starts_at),
            ends_at=normalize_time(ends_at),
        )

    @property
    def start_minute(self) -> int:
        return parse_time_to_minutes(self.starts_at)

    @property
    def end_minute(self) -> int:
        return parse_time_to_minutes(self.ends_at)

    @property
    def duration_minutes(self) -> int:
        return max(0, self.end_minute - self.start_minute)

    @property
    def day_count(self) -> int:
        return len(self.days)

    @property
    def weekly_minutes(self) -> int:
        return self.duration_minutes * self.day_count

    @property
    def days_label(self) -> str:
        return ",".join(self.days)

    @property
    def time_label(self) -> str:
        return f"{self.starts_at}-{self.ends_at}"

    def overlaps(self, other: "TimeBlock", buffer_minutes: int = 0) -> bool:
        return blocks_overlap(self, other, buffer_minutes)


def blocks_overlap(a: TimeBlock, b: TimeBlock, buffer_minutes: int = 0) -> bool:
    if not set(a.days) & set(b.days):
        return False
    return times_overlap(a.starts_at, a.ends_at, b.starts_at, b.ends_at, buffer_minutes)
