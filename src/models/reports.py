"""
Data models for client rules and weekly hours reports.

All report structures are frozen: they are built once by the aggregator
and only read afterwards.
"""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ClientRule:
    """
    One client in the taxonomy with the keywords that identify it.

    Keywords are lowercased, de-duplicated and blank ones dropped. The client
    name itself is always the first keyword.
    """

    name: str
    keywords: tuple[str, ...] = ()

    def __post_init__(self):
        normalized: list[str] = []
        for keyword in (self.name, *self.keywords):
            lowered = (keyword or "").lower()
            if lowered and lowered not in normalized:
                normalized.append(lowered)
        object.__setattr__(self, "keywords", tuple(normalized))


@dataclass(frozen=True)
class Rollup:
    """Accumulated hours and event count at one grouping level."""

    hours: float = 0.0
    count: int = 0

    def add(self, other: "Rollup") -> "Rollup":
        return Rollup(hours=self.hours + other.hours, count=self.count + other.count)


@dataclass(frozen=True)
class SummaryRollup:
    summary: str
    hours: float
    count: int


@dataclass(frozen=True)
class ClientBucket:
    """Hours for one client in one week, broken down by event title."""

    client: str
    week_start: date
    hours: float
    count: int
    summaries: tuple[SummaryRollup, ...]


@dataclass(frozen=True)
class WeekReport:
    week_start: date
    clients: tuple[ClientBucket, ...]


# Weeks ordered newest first
Report = tuple[WeekReport, ...]
