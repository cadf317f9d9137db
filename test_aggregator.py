#!/usr/bin/env python3
"""
Tests for the language, contributor and commit activity aggregation
"""

import random
from collections import Counter
from datetime import date

import pytest

from aggregator import (
    aggregate_commit_activity,
    aggregate_contributors,
    aggregate_languages,
    build_metadata,
    commit_timestamp,
)
from models import LanguageEntry, RepositoryRef


def _commit(author_date=None, committer_date=None):
    commit = {}
    if author_date is not None:
        commit["author"] = {"name": "a", "date": author_date}
    if committer_date is not None:
        commit["committer"] = {"name": "c", "date": committer_date}
    return {"sha": "abc", "commit": commit}


class TestLanguages:
    def test_percentages(self):
        entries = aggregate_languages({"JavaScript": 80, "CSS": 20})
        assert entries == [
            LanguageEntry("JavaScript", 80, 80.0),
            LanguageEntry("CSS", 20, 20.0),
        ]

    @pytest.mark.parametrize("mapping", [
        {"Python": 16490, "Jinja": 9398, "TeX": 88449, "Markdown": 1687, "LaTeX": 2443, "Other": 313},
        {"A": 1, "B": 1, "C": 1},
        {"Go": 7},
    ])
    def test_percentages_sum_to_hundred(self, mapping):
        entries = aggregate_languages(mapping)
        total = sum(entry.percentage for entry in entries)
        # one decimal of rounding per entry
        assert abs(total - 100.0) <= 0.05 * len(entries) + 1e-9
        assert {entry.name for entry in entries} == set(mapping)

    def test_zero_total(self):
        entries = aggregate_languages({"Python": 0, "Shell": 0})
        assert [entry.percentage for entry in entries] == [0.0, 0.0]

    def test_empty_and_malformed_input(self):
        assert aggregate_languages({}) == []
        assert aggregate_languages(None) == []
        assert aggregate_languages(["Python"]) == []

    def test_unusable_byte_counts_count_as_zero(self):
        entries = aggregate_languages({"Python": "lots", "C": -5, "Rust": 50})
        by_name = {entry.name: entry for entry in entries}
        assert by_name["Python"].bytes == 0
        assert by_name["C"].bytes == 0
        assert by_name["Rust"].percentage == 100.0


class TestContributors:
    def test_order_and_defaults(self):
        records = [
            {"login": "alice", "contributions": 5, "avatar_url": "https://avatars/alice"},
            {"name": "Bob Anonymous", "contributions": 3, "type": "Anonymous"},
            {"contributions": 1},
            {"login": "carol"},
        ]
        contributors = aggregate_contributors(records)
        assert [(c.identity, c.contributions) for c in contributors] == [
            ("alice", 5),
            ("Bob Anonymous", 3),
            ("anon", 1),
            ("carol", 0),
        ]
        assert contributors[0].avatar_url == "https://avatars/alice"
        assert contributors[1].avatar_url is None

    def test_order_is_not_resorted(self):
        records = [{"login": "low", "contributions": 1}, {"login": "high", "contributions": 100}]
        assert [c.identity for c in aggregate_contributors(records)] == ["low", "high"]

    def test_non_object_records_are_skipped(self):
        records = ["garbage", None, 42, {"login": "alice", "contributions": 2}]
        contributors = aggregate_contributors(records)
        assert [c.identity for c in contributors] == ["alice"]

    def test_non_list_payload(self):
        assert aggregate_contributors({"message": "Not Found"}) == []


class TestCommitActivity:
    def test_buckets_by_day(self):
        records = [
            _commit("2024-01-01T09:00:00Z"),
            _commit("2024-01-01T12:30:00Z"),
            _commit("2024-01-01T23:59:59Z"),
            _commit("2024-01-02T00:00:00Z"),
        ]
        series = aggregate_commit_activity(records)
        assert [(p.day, p.count) for p in series] == [
            (date(2024, 1, 1), 3),
            (date(2024, 1, 2), 1),
        ]

    def test_committer_date_fallback_and_unparseable_dates(self):
        records = [
            _commit(committer_date="2024-03-05T10:00:00Z"),
            _commit(author_date="not a date", committer_date="2024-03-05T11:00:00Z"),
            _commit(author_date="yesterday"),
            _commit(),
            {"sha": "no-commit-key"},
            "garbage",
        ]
        series = aggregate_commit_activity(records)
        assert [(p.day, p.count) for p in series] == [(date(2024, 3, 5), 2)]

    def test_offsets_are_converted_to_utc(self):
        # 23:30 at -02:00 is already the next day in UTC
        assert commit_timestamp(_commit("2024-01-01T23:30:00-02:00")).date() == date(2024, 1, 2)

    @pytest.mark.parametrize("stamp, microsecond", [
        ("2024-01-01T10:00:00.5Z", 500000),
        ("2024-01-01T10:00:00.12Z", 120000),
        ("2024-01-01T10:00:00.1234567+00:00", 123456),
    ])
    def test_fractional_seconds_of_any_precision(self, stamp, microsecond):
        parsed = commit_timestamp(_commit(stamp))
        assert parsed is not None
        assert parsed.date() == date(2024, 1, 1)
        assert parsed.microsecond == microsecond

    def test_empty_input(self):
        assert aggregate_commit_activity([]) == []
        assert aggregate_commit_activity(None) == []

    def test_reordering_does_not_change_the_series(self):
        rng = random.Random(1234)
        days = [f"2024-02-{day:02d}T{hour:02d}:00:00Z" for day in range(1, 20) for hour in (1, 13)]
        records = [_commit(rng.choice(days)) for _ in range(200)]
        records += [_commit("bogus")] * 5

        expected = aggregate_commit_activity(records)
        for _ in range(5):
            shuffled = list(records)
            rng.shuffle(shuffled)
            assert aggregate_commit_activity(shuffled) == expected

        # unique, ascending days whose counts match the input
        assert len({p.day for p in expected}) == len(expected)
        assert [p.day for p in expected] == sorted(p.day for p in expected)
        counts = Counter(commit_timestamp(r).date() for r in records if commit_timestamp(r))
        assert {p.day: p.count for p in expected} == dict(counts)


class TestMetadata:
    def test_fields_and_defaults(self):
        ref = RepositoryRef("octocat", "Hello-World")
        raw = {
            "name": "Hello-World",
            "full_name": "octocat/Hello-World",
            "description": "My first repository",
            "stargazers_count": 80,
            "forks_count": 9,
            "size": 2048,
            "default_branch": "master",
            "owner": {"login": "octocat", "avatar_url": "https://avatars/octocat"},
        }
        metadata = build_metadata(raw, ref)
        assert metadata.default_branch == "master"
        assert metadata.stars == 80
        assert metadata.size_mb == 2
        assert metadata.owner_avatar_url == "https://avatars/octocat"
        assert metadata.raw == raw

    def test_missing_fields(self):
        ref = RepositoryRef("octocat", "Hello-World")
        metadata = build_metadata({}, ref, fallback_branch="main")
        assert metadata.full_name == "octocat/Hello-World"
        assert metadata.default_branch == "main"
        assert metadata.description is None
        assert metadata.stars == 0
