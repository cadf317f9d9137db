"""
GitHub API Gateway Module

This module issues the four read-only REST calls an analysis run needs
(repository metadata, languages, contributors and commits) and maps every
transport or HTTP failure to an ApiError carrying the failing stage.

Calls are made exactly once: there is no retry and no caching here.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from config import DEFAULT_CONFIG, Configuration
from console import logger
from exceptions import (
    ApiError,
    STAGE_COMMITS,
    STAGE_CONTRIBUTORS,
    STAGE_LANGUAGES,
    STAGE_METADATA,
)
from models import RepositoryRef


class GithubGateway:
    """
    Thin client for the GitHub REST API v3.

    A single requests.Session is reused for connection pooling; the
    credential is attached per request so one gateway can serve both
    anonymous and authenticated runs.
    """

    def __init__(self, config: Optional[Configuration] = None,
                 session: Optional[requests.Session] = None) -> None:
        self.config = DEFAULT_CONFIG.copy()
        if config:
            self.config.update(config)

        self.base_url = self.config["API_BASE_URL"].rstrip("/")
        self.timeout = self.config["REQUEST_TIMEOUT"]
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': self.config["USER_AGENT"],
        })

    def __enter__(self) -> "GithubGateway":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    @staticmethod
    def build_headers(credential: Optional[str] = None) -> Dict[str, str]:
        """Per-request headers; Authorization only for a non-blank credential"""
        headers = {}
        if credential and credential.strip():
            headers['Authorization'] = f'Bearer {credential.strip()}'
        return headers

    def _repo_url(self, ref: RepositoryRef, resource: str = "") -> str:
        # Each part is one path segment; "?" or "#" in a name must not end the path
        url = f"{self.base_url}/repos/{quote(ref.owner, safe='')}/{quote(ref.name, safe='')}"
        return f"{url}/{resource}" if resource else url

    def _get_json(self, stage: str, url: str, credential: Optional[str] = None,
                  params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Perform a single GET request and decode its JSON body.

        Raises:
            ApiError: On an error status, a network failure or an undecodable body
        """
        logger.debug(f"GET {url} params={params}")
        try:
            response = self.session.get(
                url,
                params=params,
                headers=self.build_headers(credential),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Network error while fetching {stage}: {e}")
            raise ApiError(stage, transport_failure=True, reason=type(e).__name__) from e

        if response.status_code >= 400:
            logger.error(f"GitHub API returned {response.status_code} for {stage} ({url})")
            raise ApiError(stage, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Response for {stage} is not valid JSON: {e}")
            raise ApiError(stage, transport_failure=True, reason="invalid JSON body") from e

    def fetch_metadata(self, ref: RepositoryRef, credential: Optional[str] = None) -> Any:
        """Fetch the repository record (description, counts, default branch, owner)"""
        return self._get_json(STAGE_METADATA, self._repo_url(ref), credential)

    def fetch_languages(self, ref: RepositoryRef, credential: Optional[str] = None) -> Any:
        """Fetch the language name -> byte count mapping"""
        return self._get_json(STAGE_LANGUAGES, self._repo_url(ref, "languages"), credential)

    def fetch_contributors(self, ref: RepositoryRef, credential: Optional[str] = None) -> Any:
        """Fetch the first page of contributors, anonymous contributors included"""
        params = {'per_page': self.config["CONTRIBUTORS_PER_PAGE"], 'anon': 1}
        return self._get_json(STAGE_CONTRIBUTORS, self._repo_url(ref, "contributors"), credential, params)

    def fetch_commits(self, ref: RepositoryRef, branch: str, credential: Optional[str] = None) -> Any:
        """Fetch the most recent page of commits on ``branch``"""
        params = {'per_page': self.config["COMMITS_PER_PAGE"], 'sha': branch}
        return self._get_json(STAGE_COMMITS, self._repo_url(ref, "commits"), credential, params)
