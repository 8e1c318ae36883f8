"""
GitHub API Client - Low-level HTTP client for the GitHub REST API.

Read-only: the sync never writes to GitHub, so there is no dry-run switch.
The GitHubAdapter uses this to implement the SourceTrackerPort.
"""

import logging
from typing import Any, Optional

import requests

from ...core.exceptions import (
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    TrackerError,
    TransientError,
)
from ...core.ports.clock import Clock, SystemClock
from ...core.ports.config_provider import DEFAULT_TIMEOUT
from ..retry import call_with_backoff


class GitHubApiClient:
    """
    Low-level GitHub REST API client.

    Handles token authentication, pagination, retries and error handling.
    """

    DEFAULT_API_URL = "https://api.github.com"
    ITEMS_PER_PAGE = 100

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Optional[Clock] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the GitHub client.

        Args:
            token: Personal access token
            api_url: API root, for GitHub Enterprise installations
            timeout: Seconds to keep retrying a failing request
            clock: Clock for retry delays and rate-limit resets
            session: Pre-built session, mainly for tests
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.clock = clock or SystemClock()
        self.logger = logging.getLogger("GitHubApiClient")

        self.headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

        self._session = session or requests.Session()
        self._session.headers.update(self.headers)

    # -------------------------------------------------------------------------
    # Core Request Methods
    # -------------------------------------------------------------------------

    def get(self, endpoint: str, params: Optional[dict] = None) -> Any:
        """GET a single resource."""
        response = self._request(f"{self.api_url}/{endpoint}", params)
        return _decode(response) if response.text else {}

    def get_paginated(self, endpoint: str, params: Optional[dict] = None) -> list[Any]:
        """
        GET a collection, following `Link: rel="next"` headers to the end.

        Returns:
            Items from every page, in API order
        """
        params = dict(params or {})
        params.setdefault("per_page", self.ITEMS_PER_PAGE)

        items: list[Any] = []
        url: Optional[str] = f"{self.api_url}/{endpoint}"

        while url:
            response = self._request(url, params)
            items.extend(_decode(response))

            url = response.links.get("next", {}).get("url")
            # The next URL already carries the query string
            params = None

        return items

    def _request(self, url: str, params: Optional[dict]) -> requests.Response:
        return call_with_backoff(
            lambda: self._request_once(url, params),
            timeout=self.timeout,
            clock=self.clock,
            logger=self.logger,
            description=f"GET {url}",
        )

    def _request_once(self, url: str, params: Optional[dict]) -> requests.Response:
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.ConnectionError as e:
            raise TransientError(f"Connection failed: {e}", cause=e) from e
        except requests.exceptions.Timeout as e:
            raise TransientError(f"Request timed out: {e}", cause=e) from e
        except (requests.exceptions.ChunkedEncodingError, requests.exceptions.ContentDecodingError) as e:
            raise TransientError(f"Response was cut off: {e}", cause=e) from e
        except requests.exceptions.RequestException as e:
            raise TrackerError(f"Request failed: {e}", cause=e) from e

        self._check_response(response, url)
        return response

    # -------------------------------------------------------------------------
    # Response Handling
    # -------------------------------------------------------------------------

    def _check_response(self, response: requests.Response, url: str) -> None:
        """Raise the matching TrackerError for a failed response."""
        if response.ok:
            return

        status = response.status_code
        error_body = response.text[:500] if response.text else ""

        if status in (403, 429) and self._is_rate_limited(response):
            raise RateLimitError(
                f"GitHub rate limit exhausted for {url}",
                retry_after=self._seconds_until_reset(response),
            )

        if status == 401:
            raise AuthenticationError("Authentication failed. Check the GitHub token.")

        if status == 403:
            raise ForbiddenError(f"Permission denied for {url}")

        if status == 404:
            raise NotFoundError(f"Not found: {url}")

        if status >= 500:
            raise TransientError(f"Server error {status}: {error_body}")

        raise TrackerError(f"API error {status}: {error_body}")

    @staticmethod
    def _is_rate_limited(response: requests.Response) -> bool:
        return response.status_code == 429 or response.headers.get("X-RateLimit-Remaining") == "0"

    def _seconds_until_reset(self, response: requests.Response) -> Optional[float]:
        retry_after = response.headers.get("Retry-After")
        if retry_after and retry_after.isdigit():
            return float(retry_after)

        reset = response.headers.get("X-RateLimit-Reset")
        if reset and reset.isdigit():
            return max(0.0, float(reset) - self.clock.now().timestamp())
        return None

    # -------------------------------------------------------------------------
    # Convenience Methods
    # -------------------------------------------------------------------------

    def list_issues(self, owner: str, repo: str, since: Optional[str] = None) -> list[dict[str, Any]]:
        """List every issue and pull request of a repository, oldest first."""
        params = {"state": "all", "sort": "created", "direction": "asc"}
        if since:
            params["since"] = since
        return self.get_paginated(f"repos/{owner}/{repo}/issues", params)

    def list_comments(
        self,
        owner: str,
        repo: str,
        number: int,
        since: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """List the comments of an issue; GitHub returns them oldest first."""
        params = {}
        if since:
            params["since"] = since
        return self.get_paginated(f"repos/{owner}/{repo}/issues/{number}/comments", params)

    def get_user(self, login: str) -> dict[str, Any]:
        """Get a user's public profile."""
        return self.get(f"users/{login}")


def _decode(response: requests.Response) -> Any:
    try:
        return response.json()
    except requests.exceptions.JSONDecodeError as e:
        raise TrackerError(
            f"Response from {response.url} is not JSON: {response.text[:200]}",
            cause=e,
        ) from e
