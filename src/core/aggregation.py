"""
Weekly hours aggregation by client and event title.

Events are accumulated under composite (week_start, client) keys, then
turned into an ordered Report: weeks newest first, clients in taxonomy
order with "Other" last, titles alphabetical within each client.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date

from core.classification import classify_client
from core.config import OTHER_CLIENT, UNTITLED_SUMMARY
from core.durations import event_duration_hours, event_start, week_start
from models.reports import (
    ClientBucket,
    ClientRule,
    Report,
    Rollup,
    SummaryRollup,
    WeekReport,
)

BucketKey = tuple[date, str]


@dataclass
class HoursAccumulator:
    """
    Running totals keyed by (week_start, client).

    Two accumulators built from disjoint event shards can be combined with
    merge(); the result matches accumulating all events at once.
    """

    buckets: dict[BucketKey, Rollup] = field(default_factory=dict)
    summaries: dict[BucketKey, dict[str, Rollup]] = field(default_factory=dict)

    def add(self, week: date, client: str, summary: str, hours: float) -> None:
        key = (week, client)
        entry = Rollup(hours=hours, count=1)
        self.buckets[key] = self.buckets.get(key, Rollup()).add(entry)
        titles = self.summaries.setdefault(key, {})
        titles[summary] = titles.get(summary, Rollup()).add(entry)

    def add_event(self, event: Mapping, rules: Sequence[ClientRule]) -> bool:
        """Accumulate one event. Returns False if it was excluded."""
        hours = event_duration_hours(event)
        if hours <= 0:
            return False
        start = event_start(event)
        if start is None:
            return False

        title = event.get("summary")
        client = classify_client(title, rules)
        summary = title if title is not None else UNTITLED_SUMMARY
        self.add(week_start(start), client, str(summary), hours)
        return True

    def merge(self, other: "HoursAccumulator") -> "HoursAccumulator":
        merged = HoursAccumulator()
        for source in (self, other):
            for key, rollup in source.buckets.items():
                merged.buckets[key] = merged.buckets.get(key, Rollup()).add(rollup)
            for key, titles in source.summaries.items():
                target = merged.summaries.setdefault(key, {})
                for summary, rollup in titles.items():
                    target[summary] = target.get(summary, Rollup()).add(rollup)
        return merged

    def build_report(self, rules: Sequence[ClientRule]) -> Report:
        client_order = _client_order(rules)
        weeks: dict[date, list[str]] = {}
        for week, client in self.buckets:
            weeks.setdefault(week, []).append(client)

        report = []
        for week in sorted(weeks, reverse=True):
            present = set(weeks[week])
            clients = tuple(
                self._bucket(week, client) for client in client_order if client in present
            )
            report.append(WeekReport(week_start=week, clients=clients))
        return tuple(report)

    def _bucket(self, week: date, client: str) -> ClientBucket:
        key = (week, client)
        rollup = self.buckets[key]
        titles = self.summaries.get(key, {})
        return ClientBucket(
            client=client,
            week_start=week,
            hours=rollup.hours,
            count=rollup.count,
            summaries=tuple(
                SummaryRollup(summary=title, hours=titles[title].hours, count=titles[title].count)
                for title in sorted(titles)
            ),
        )


def _client_order(rules: Iterable[ClientRule]) -> list[str]:
    order: list[str] = []
    for rule in rules:
        if rule.name not in order:
            order.append(rule.name)
    if OTHER_CLIENT not in order:
        order.append(OTHER_CLIENT)
    return order


def accumulate_events(
    events: Iterable[Mapping], rules: Sequence[ClientRule]
) -> HoursAccumulator:
    """Accumulate a batch of events, silently skipping unusable ones."""
    accumulator = HoursAccumulator()
    for event in events:
        if isinstance(event, Mapping):
            accumulator.add_event(event, rules)
    return accumulator


def aggregate_weekly_hours(events: Iterable[Mapping], rules: Sequence[ClientRule]) -> Report:
    """
    Group events into per-week, per-client hour totals.

    Events with no usable start/end or a non-positive duration are left out
    of every total. An empty event list gives an empty report.
    """
    rules = tuple(rules)
    return accumulate_events(events, rules).build_report(rules)
