"""
Repository Statistics Aggregator Module

This module turns raw GitHub API payloads into the derived metrics shown to
the user: the language percentage table, the normalized contributor list
and the per-day commit activity series.

Every transform is total. Missing fields fall back to defaults, and records
that cannot be used at all are dropped (logged at debug level) instead of
failing the whole aggregation.
"""

from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from console import logger
from exceptions import PartialDataError
from models import (
    CommitActivityPoint,
    Contributor,
    LanguageEntry,
    RepositoryMetadata,
    RepositoryRef,
)
from utilities import parse_timestamp

ANONYMOUS_IDENTITY = "anon"


def _non_negative_int(value: Any) -> int:
    """Coerce a count from an API payload; anything unusable counts as 0"""
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value > 0:
        return value
    return 0


def _optional_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _log_dropped(error: PartialDataError) -> None:
    logger.debug(str(error))


def aggregate_languages(languages: Any) -> List[LanguageEntry]:
    """
    Build the language percentage table.

    Args:
        languages: Mapping of language name to byte count, as returned by
            the languages endpoint

    Returns:
        One entry per language in source order, percentages rounded to one
        decimal place; all percentages are 0 when the total is 0
    """
    if not isinstance(languages, Mapping):
        return []

    byte_counts: Dict[str, int] = {
        str(name): _non_negative_int(count) for name, count in languages.items()
    }
    total = sum(byte_counts.values())

    entries = []
    for name, count in byte_counts.items():
        percentage = round(count / total * 100, 1) if total else 0.0
        entries.append(LanguageEntry(name=name, bytes=count, percentage=percentage))
    return entries


def _contributor_from_record(record: Any) -> Contributor:
    if not isinstance(record, Mapping):
        raise PartialDataError("contributor", f"expected an object, got {type(record).__name__}")

    identity = (_optional_str(record.get("login"))
                or _optional_str(record.get("name"))
                or ANONYMOUS_IDENTITY)
    return Contributor(
        identity=identity,
        contributions=_non_negative_int(record.get("contributions")),
        avatar_url=_optional_str(record.get("avatar_url")),
    )


def aggregate_contributors(records: Any) -> List[Contributor]:
    """
    Normalize contributor records, keeping the order the API returned them in.

    Login is preferred over name (anonymous contributors only carry a name);
    records with neither are reported as ``anon``.
    """
    if not isinstance(records, list):
        return []

    contributors = []
    for record in records:
        try:
            contributors.append(_contributor_from_record(record))
        except PartialDataError as e:
            _log_dropped(e)
    return contributors


def commit_timestamp(record: Any) -> Optional[datetime]:
    """
    Extract the author date of a commit record, falling back to the committer date.

    Returns:
        The timestamp in UTC, or None when neither date parses
    """
    if not isinstance(record, Mapping):
        return None
    commit = record.get("commit")
    if not isinstance(commit, Mapping):
        return None

    for role in ("author", "committer"):
        person = commit.get(role)
        if isinstance(person, Mapping):
            parsed = parse_timestamp(person.get("date"))
            if parsed is not None:
                return parsed
    return None


def aggregate_commit_activity(records: Any) -> List[CommitActivityPoint]:
    """
    Bucket commits by UTC calendar day.

    Returns:
        One point per day that has at least one commit, ascending by day.
        Commits without a usable date are skipped.
    """
    if not isinstance(records, list):
        return []

    buckets: Counter = Counter()
    for record in records:
        timestamp = commit_timestamp(record)
        if timestamp is None:
            _log_dropped(PartialDataError("commit", "no parseable author or committer date"))
            continue
        buckets[timestamp.date()] += 1

    return [CommitActivityPoint(day=day, count=count) for day, count in sorted(buckets.items())]


def build_metadata(raw: Any, ref: RepositoryRef, fallback_branch: str = "main") -> RepositoryMetadata:
    """
    Lift the fields the analysis needs out of a repository payload.

    Args:
        raw: Payload of the repository endpoint
        ref: Reference the payload was requested for, used for missing names
        fallback_branch: Branch used when the payload names no default branch

    Returns:
        RepositoryMetadata with defaults for every missing field
    """
    payload: Dict[str, Any] = dict(raw) if isinstance(raw, Mapping) else {}
    owner = payload.get("owner")
    owner_avatar = _optional_str(owner.get("avatar_url")) if isinstance(owner, Mapping) else None

    return RepositoryMetadata(
        name=_optional_str(payload.get("name")) or ref.name,
        full_name=_optional_str(payload.get("full_name")) or ref.full_name,
        default_branch=_optional_str(payload.get("default_branch")) or fallback_branch,
        description=_optional_str(payload.get("description")),
        stars=_non_negative_int(payload.get("stargazers_count")),
        forks=_non_negative_int(payload.get("forks_count")),
        size_kb=_non_negative_int(payload.get("size")),
        owner_avatar_url=owner_avatar,
        html_url=_optional_str(payload.get("html_url")),
        raw=payload,
    )
