"""
Analysis Orchestrator Module

This module provides the main interface for analyzing a repository. It
coordinates the resolver, the API gateway and the aggregator for one run
and publishes either an AnalysisResult or an AnalysisError into the
caller's AnalysisSession.

Run order: resolve -> metadata -> languages -> contributors and commits
(concurrently) -> aggregate -> publish.
"""

import concurrent.futures
from typing import Optional, Union

from aggregator import (
    aggregate_commit_activity,
    aggregate_contributors,
    aggregate_languages,
    build_metadata,
)
from config import DEFAULT_CONFIG, Configuration
from console import logger
from exceptions import AnalysisError, ApiError, InputError
from gateway import GithubGateway
from models import AnalysisResult, AnalysisSession, RepositoryRef, RunState
from resolver import resolve


class AnalysisOrchestrator:
    """
    Sequences one analysis run per call to ``run``.

    The orchestrator itself holds no result state: everything a run
    produces is published into the AnalysisSession it was given, and only
    while that run is still the session's current generation.
    """

    def __init__(self, gateway: Optional[GithubGateway] = None,
                 config: Optional[Configuration] = None) -> None:
        self.config = DEFAULT_CONFIG.copy()
        if config:
            self.config.update(config)

        self.gateway = gateway or GithubGateway(self.config)
        self.max_workers = max(1, self.config["MAX_WORKERS"])

    def _start_run(self, session: AnalysisSession) -> int:
        """Supersede any previous run and discard what it published"""
        session.generation += 1
        session.state = RunState.IDLE
        session.result = None
        session.error = None
        return session.generation

    @staticmethod
    def _is_current(session: AnalysisSession, generation: int) -> bool:
        return session.generation == generation

    def _advance(self, session: AnalysisSession, generation: int, state: RunState) -> None:
        # A superseded run keeps going but no longer touches the session
        if self._is_current(session, generation):
            session.state = state
            logger.debug(f"Run {generation}: {state.value}")

    def _publish_result(self, session: AnalysisSession, generation: int,
                        result: AnalysisResult) -> Optional[AnalysisResult]:
        if self._is_current(session, generation):
            session.result = result
            session.state = RunState.DONE
            # A newer run may have started between the check and the writes
            if self._is_current(session, generation):
                logger.info(f"Analysis of {result.ref} complete")
                return result
            self._retract(session, result)
        logger.info(f"Discarding result for {result.ref}: run {generation} was superseded")
        return None

    def _publish_error(self, session: AnalysisSession, generation: int,
                       error: AnalysisError) -> Optional[AnalysisError]:
        if self._is_current(session, generation):
            session.error = error
            session.state = RunState.FAILED
            if self._is_current(session, generation):
                logger.error(f"Analysis failed at stage '{error.stage}': {error.message}")
                return error
            self._retract(session, error)
        logger.info(f"Discarding error from superseded run {generation}: {error.message}")
        return None

    @staticmethod
    def _retract(session: AnalysisSession, outcome: Union[AnalysisResult, AnalysisError]) -> None:
        """Undo a stale publication unless the newer run has already replaced it"""
        if session.result is outcome:
            session.result = None
        if session.error is outcome:
            session.error = None

    def run(self, session: AnalysisSession) -> Union[AnalysisResult, AnalysisError, None]:
        """
        Analyze the repository named by ``session.raw_input``.

        Args:
            session: Caller-owned session holding the input and optional credential

        Returns:
            The published AnalysisResult or AnalysisError, or None when a newer
            run superseded this one before it finished
        """
        generation = self._start_run(session)
        raw_input = session.raw_input
        credential = session.credential

        self._advance(session, generation, RunState.RESOLVING)
        ref = resolve(raw_input)
        if ref is None:
            return self._publish_error(session, generation, AnalysisError.from_error(InputError(raw_input)))

        try:
            result = self._collect(session, generation, ref, credential)
        except ApiError as e:
            return self._publish_error(session, generation, AnalysisError.from_error(e))

        return self._publish_result(session, generation, result)

    def analyze(self, raw_input: str, credential: Optional[str] = None) -> Union[AnalysisResult, AnalysisError, None]:
        """Convenience wrapper running a single analysis in a fresh session"""
        return self.run(AnalysisSession(raw_input=raw_input, credential=credential))

    def _collect(self, session: AnalysisSession, generation: int,
                 ref: RepositoryRef, credential: Optional[str]) -> AnalysisResult:
        """
        Fetch and aggregate everything for one repository.

        Raises:
            ApiError: From the first stage that fails; later stages are not started
        """
        logger.info(f"Analyzing repository: {ref}")

        self._advance(session, generation, RunState.FETCHING_METADATA)
        metadata = build_metadata(
            self.gateway.fetch_metadata(ref, credential),
            ref,
            fallback_branch=self.config["DEFAULT_BRANCH"],
        )

        self._advance(session, generation, RunState.FETCHING_LANGUAGES)
        languages = aggregate_languages(self.gateway.fetch_languages(ref, credential))
        logger.info(f"Found {len(languages)} languages in {ref}")

        self._advance(session, generation, RunState.FETCHING_CONTRIBUTORS_AND_COMMITS)
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            contributors_future = executor.submit(self.gateway.fetch_contributors, ref, credential)
            commits_future = executor.submit(self.gateway.fetch_commits, ref, metadata.default_branch, credential)
            # Wait for both so neither call outlives the run that started it
            concurrent.futures.wait([contributors_future, commits_future])
            raw_contributors = contributors_future.result()
            raw_commits = commits_future.result()

        self._advance(session, generation, RunState.AGGREGATING)
        contributors = aggregate_contributors(raw_contributors)
        commits = aggregate_commit_activity(raw_commits)
        logger.info(f"Aggregated {len(contributors)} contributors and "
                    f"{sum(point.count for point in commits)} commits over {len(commits)} days")

        return AnalysisResult(
            ref=ref,
            metadata=metadata,
            languages=languages,
            contributors=contributors,
            commits=commits,
        )
