"""
Data Models for GitAnalyzer

This module defines the data structures produced by one repository analysis
run. Everything here is created fresh by the orchestrator for each run and
is never shared between runs.

Key components:
- RepositoryRef: Canonical owner/name pair produced by the resolver
- RepositoryMetadata: Repository record as returned by the GitHub API
- LanguageEntry, Contributor, CommitActivityPoint: Aggregated metrics
- AnalysisResult: Composition of the above for one successful run
- RunState / AnalysisSession: Orchestrator state shared with the caller
- ExportArtifact: Named byte payload produced by the exporter
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from exceptions import AnalysisError


@dataclass(frozen=True)
class RepositoryRef:
    """Canonical reference to a repository on the remote host."""
    owner: str
    name: str

    def __post_init__(self) -> None:
        for part in (self.owner, self.name):
            if not part or "/" in part:
                raise ValueError(f"Invalid repository reference part: {part!r}")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class RepositoryMetadata:
    """
    Repository metadata as reported by the GitHub API.

    Only the fields the analysis needs are lifted out; the full payload is
    kept in ``raw`` so exports carry the complete repository record.
    """
    name: str
    full_name: str
    default_branch: str
    description: Optional[str] = None
    stars: int = 0
    forks: int = 0
    size_kb: int = 0
    owner_avatar_url: Optional[str] = None
    html_url: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def size_mb(self) -> int:
        """Approximate repository size in megabytes"""
        return round(self.size_kb / 1024)


@dataclass(frozen=True)
class LanguageEntry:
    name: str
    bytes: int
    percentage: float


@dataclass(frozen=True)
class Contributor:
    identity: str
    contributions: int = 0
    avatar_url: Optional[str] = None


@dataclass(frozen=True)
class CommitActivityPoint:
    day: date
    count: int


@dataclass
class AnalysisResult:
    """
    Aggregated statistics for one repository.

    Produced atomically at the end of a successful run; a result is never
    published with only some of its parts filled in.
    """
    ref: RepositoryRef
    metadata: RepositoryMetadata
    languages: List[LanguageEntry] = field(default_factory=list)
    contributors: List[Contributor] = field(default_factory=list)
    commits: List[CommitActivityPoint] = field(default_factory=list)

    @property
    def primary_language(self) -> Optional[str]:
        """Language with the most bytes, or None when no language data exists"""
        if not self.languages:
            return None
        return max(self.languages, key=lambda entry: entry.bytes).name

    @property
    def total_commits(self) -> int:
        return sum(point.count for point in self.commits)


class RunState(Enum):
    """States of a single orchestrator run"""
    IDLE = "idle"
    RESOLVING = "resolving"
    FETCHING_METADATA = "fetching_metadata"
    FETCHING_LANGUAGES = "fetching_languages"
    FETCHING_CONTRIBUTORS_AND_COMMITS = "fetching_contributors_and_commits"
    AGGREGATING = "aggregating"
    DONE = "done"
    FAILED = "failed"


@dataclass
class AnalysisSession:
    """
    Caller-owned state for a sequence of analysis runs.

    Holds the current input and credential together with whatever the most
    recent live run published. ``generation`` is bumped by every new run;
    a run only publishes while its generation is still the current one.
    """
    raw_input: str = ""
    credential: Optional[str] = None
    state: RunState = RunState.IDLE
    generation: int = 0
    result: Optional[AnalysisResult] = None
    error: Optional[AnalysisError] = None


@dataclass(frozen=True)
class ExportArtifact:
    """A downloadable export: file name, media type and encoded payload."""
    filename: str
    media_type: str
    payload: bytes

    @property
    def text(self) -> str:
        return self.payload.decode("utf-8")
