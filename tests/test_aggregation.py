"""Tests for weekly hours aggregation."""

import random
from datetime import date

from core.aggregation import accumulate_events, aggregate_weekly_hours
from core.taxonomy import build_client_rules
from core.durations import event_duration_hours, event_start, week_start


def _event(summary, start, end):
    return {"summary": summary, "start": start, "end": end}


def test_acme_and_other_in_one_week(sample_events, rules):
    report = aggregate_weekly_hours(sample_events, rules)

    assert len(report) == 1
    week = report[0]
    assert week.week_start == date(2024, 1, 1)
    assert [(b.client, b.hours, b.count) for b in week.clients] == [
        ("Acme", 1.0, 1),
        ("Other", 0.5, 1),
    ]


def test_case_insensitive_classification(rules):
    report = aggregate_weekly_hours(
        [_event("ACME check-in", "2024-01-02T09:00:00Z", "2024-01-02T09:30:00Z")], rules
    )
    assert report[0].clients[0].client == "Acme"


def test_event_missing_end_excluded(rules, sample_event):
    events = [sample_event, _event("Acme planning", "2024-01-02T09:00:00Z", None)]
    report = aggregate_weekly_hours(events, rules)
    (bucket,) = report[0].clients
    assert bucket.count == 1
    assert [s.summary for s in bucket.summaries] == ["Acme sync"]


def test_malformed_events_skipped_without_error(rules, sample_event):
    events = [
        None,
        "not an event",
        {},
        _event("Acme backwards", "2024-01-01T10:00:00Z", "2024-01-01T09:00:00Z"),
        _event("Acme garbage", "yesterday", "today"),
        sample_event,
    ]
    report = aggregate_weekly_hours(events, rules)
    assert [(b.client, b.count) for b in report[0].clients] == [("Acme", 1)]


def test_empty_events_give_empty_report(rules):
    assert aggregate_weekly_hours([], rules) == ()


def test_summaries_accumulate_per_title(rules):
    events = [
        _event("Acme sync", "2024-01-01T09:00:00Z", "2024-01-01T10:00:00Z"),
        _event("Acme sync", "2024-01-03T09:00:00Z", "2024-01-03T09:30:00Z"),
        _event("Acme design", "2024-01-04T09:00:00Z", "2024-01-04T11:00:00Z"),
    ]
    (bucket,) = aggregate_weekly_hours(events, rules)[0].clients
    assert bucket.hours == 3.5
    assert bucket.count == 3
    assert [(s.summary, s.hours, s.count) for s in bucket.summaries] == [
        ("Acme design", 2.0, 1),
        ("Acme sync", 1.5, 2),
    ]


def test_summaries_sorted_case_sensitive(rules):
    events = [
        _event(title, "2024-01-01T09:00:00Z", "2024-01-01T10:00:00Z")
        for title in ["acme b", "Acme c", "Acme a"]
    ]
    (bucket,) = aggregate_weekly_hours(events, rules)[0].clients
    assert [s.summary for s in bucket.summaries] == ["Acme a", "Acme c", "acme b"]


def test_untitled_events_keyed_untitled(rules):
    events = [_event(None, "2024-01-01T09:00:00Z", "2024-01-01T10:00:00Z")]
    (bucket,) = aggregate_weekly_hours(events, rules)[0].clients
    assert bucket.client == "Other"
    assert bucket.summaries[0].summary == "(untitled)"


def test_clients_follow_taxonomy_then_other():
    rules = build_client_rules({"Zeta": [], "Alpha": []})
    events = [
        _event("random", "2024-01-01T08:00:00Z", "2024-01-01T09:00:00Z"),
        _event("Alpha kickoff", "2024-01-01T09:00:00Z", "2024-01-01T10:00:00Z"),
        _event("Zeta review", "2024-01-01T10:00:00Z", "2024-01-01T11:00:00Z"),
    ]
    week = aggregate_weekly_hours(events, rules)[0]
    assert [b.client for b in week.clients] == ["Zeta", "Alpha", "Other"]


def test_weeks_newest_first(rules):
    events = [
        _event("Acme", "2024-01-02T09:00:00Z", "2024-01-02T10:00:00Z"),
        _event("Acme", "2024-01-16T09:00:00Z", "2024-01-16T10:00:00Z"),
        _event("Acme", "2024-01-09T09:00:00Z", "2024-01-09T10:00:00Z"),
    ]
    report = aggregate_weekly_hours(events, rules)
    assert [w.week_start for w in report] == [date(2024, 1, 15), date(2024, 1, 8), date(2024, 1, 1)]


def test_sunday_belongs_to_previous_monday(rules):
    events = [_event("Acme", "2024-01-07T22:00:00Z", "2024-01-07T23:00:00Z")]
    assert aggregate_weekly_hours(events, rules)[0].week_start == date(2024, 1, 1)


def test_all_day_events_counted(rules):
    events = [_event("Acme offsite", "2024-01-03", "2024-01-04")]
    (bucket,) = aggregate_weekly_hours(events, rules)[0].clients
    assert bucket.hours == 24.0


def _random_events(seed, count=200):
    rng = random.Random(seed)
    titles = ["Acme sync", "beta review", "Lunch", None, "ACME demo", "Beta/Acme joint"]
    events = []
    for _ in range(count):
        day = rng.randint(1, 60)
        start_hour = rng.randint(0, 22)
        length = rng.choice([-1, 0, 1, 2])
        start = f"2024-{1 + (day - 1) // 30:02d}-{1 + (day - 1) % 30:02d}T{start_hour:02d}:00:00Z"
        end = f"2024-{1 + (day - 1) // 30:02d}-{1 + (day - 1) % 30:02d}T{min(23, max(0, start_hour + length)):02d}:00:00Z"
        events.append(_event(rng.choice(titles), start, rng.choice([end, end, end, None])))
    return events


def test_idempotent(rules):
    events = _random_events(7)
    assert aggregate_weekly_hours(events, rules) == aggregate_weekly_hours(events, rules)


def test_week_count_matches_included_events(rules):
    events = _random_events(11)
    report = aggregate_weekly_hours(events, rules)

    expected: dict[date, int] = {}
    for event in events:
        if event_duration_hours(event) > 0:
            key = week_start(event_start(event))
            expected[key] = expected.get(key, 0) + 1

    assert {w.week_start: sum(b.count for b in w.clients) for w in report} == expected


def test_ordering_invariants(rules):
    report = aggregate_weekly_hours(_random_events(3), rules)
    weeks = [w.week_start for w in report]
    assert weeks == sorted(weeks, reverse=True)
    for week in report:
        names = [b.client for b in week.clients]
        if "Other" in names:
            assert names[-1] == "Other"
        for bucket in week.clients:
            titles = [s.summary for s in bucket.summaries]
            assert titles == sorted(titles)


def test_bucket_totals_equal_summary_totals(rules):
    for week in aggregate_weekly_hours(_random_events(5), rules):
        for bucket in week.clients:
            assert bucket.count == sum(s.count for s in bucket.summaries)
            assert abs(bucket.hours - sum(s.hours for s in bucket.summaries)) < 1e-9


def test_merged_shards_match_single_pass(rules):
    events = _random_events(21)
    shard_a, shard_b = events[::2], events[1::2]

    merged = accumulate_events(shard_a, rules).merge(accumulate_events(shard_b, rules))
    reverse = accumulate_events(shard_b, rules).merge(accumulate_events(shard_a, rules))
    single = aggregate_weekly_hours(events, rules)

    for report in (merged.build_report(rules), reverse.build_report(rules)):
        assert len(report) == len(single)
        for got, want in zip(report, single):
            assert got.week_start == want.week_start
            assert [(b.client, b.count) for b in got.clients] == [(b.client, b.count) for b in want.clients]
            for got_bucket, want_bucket in zip(got.clients, want.clients):
                assert abs(got_bucket.hours - want_bucket.hours) < 1e-9
                assert [s.summary for s in got_bucket.summaries] == [s.summary for s in want_bucket.summaries]


def test_client_named_other_not_duplicated():
    rules = build_client_rules({"Other": ["misc"], "Acme": []})
    events = [
        _event("misc admin", "2024-01-01T09:00:00Z", "2024-01-01T10:00:00Z"),
        _event("Acme", "2024-01-01T10:00:00Z", "2024-01-01T11:00:00Z"),
        _event("lunch", "2024-01-01T12:00:00Z", "2024-01-01T13:00:00Z"),
    ]
    week = aggregate_weekly_hours(events, rules)[0]
    assert [(b.client, b.count) for b in week.clients] == [("Other", 2), ("Acme", 1)]
