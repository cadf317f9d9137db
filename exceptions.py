"""
Error taxonomy for GitAnalyzer.

InputError and ApiError are the failures a run can surface. PartialDataError
describes a single malformed record inside an API payload; the aggregator
drops such records and never lets the error escape. AnalysisError is what the
orchestrator publishes to the caller when a run fails.
"""

from typing import Optional

STAGE_RESOLVE = "resolve"
STAGE_METADATA = "metadata"
STAGE_LANGUAGES = "languages"
STAGE_CONTRIBUTORS = "contributors"
STAGE_COMMITS = "commits"


class GitAnalyzerError(Exception):
    """Base class for all GitAnalyzer errors"""


class InputError(GitAnalyzerError):
    """The repository identifier could not be parsed"""

    def __init__(self, raw_input: str):
        self.raw_input = raw_input
        super().__init__(
            "Please provide a valid GitHub repository URL or owner/repo (e.g. facebook/react)."
        )


class ApiError(GitAnalyzerError):
    """
    A remote API call failed.

    Exactly one of ``status_code`` (the server answered with an error status)
    or ``transport_failure`` (no usable response at all) describes the cause.
    """

    def __init__(self, stage: str, status_code: Optional[int] = None,
                 transport_failure: bool = False, reason: Optional[str] = None):
        self.stage = stage
        self.status_code = status_code
        self.transport_failure = transport_failure
        self.reason = reason
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.status_code is not None:
            return f"Failed to fetch {self.stage}: {self.status_code}"
        detail = f" ({self.reason})" if self.reason else ""
        return f"Failed to fetch {self.stage}: network error{detail}"


class PartialDataError(GitAnalyzerError):
    """A single record inside an API payload is unusable"""

    def __init__(self, kind: str, detail: str):
        self.kind = kind
        self.detail = detail
        super().__init__(f"Skipped malformed {kind} record: {detail}")


class AnalysisError(GitAnalyzerError):
    """Failure published by the orchestrator: a user-facing message and the failing stage"""

    def __init__(self, stage: str, message: str, status_code: Optional[int] = None):
        self.stage = stage
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def from_error(cls, error: GitAnalyzerError) -> "AnalysisError":
        if isinstance(error, ApiError):
            return cls(error.stage, str(error), error.status_code)
        return cls(STAGE_RESOLVE, str(error))

    def __repr__(self) -> str:
        return f"AnalysisError(stage={self.stage!r}, message={self.message!r})"
