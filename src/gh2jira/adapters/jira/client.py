"""
Jira API Client - Low-level HTTP client for Jira REST API.

This handles the raw HTTP communication with Jira.
The JiraAdapter uses this to implement the IssueTrackerPort.

REST API version 2 is used throughout: descriptions and comment bodies are
plain wiki-markup strings, which is what mirrored comment headers rely on.
"""

import logging
from typing import Any, Optional

import requests

from ...core.ports.clock import Clock, SystemClock
from ...core.ports.config_provider import DEFAULT_TIMEOUT
from ...core.ports.issue_tracker import (
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    TrackerError,
    TransientError,
)
from ..retry import call_with_backoff


class JiraApiClient:
    """
    Low-level Jira REST API client.

    Handles authentication, request/response, retries and error handling.
    """

    API_VERSION = "2"

    # Upper bound Jira accepts for a single search page.
    MAX_SEARCH_RESULTS = 1000

    def __init__(
        self,
        base_url: str,
        user: str,
        api_token: str,
        dry_run: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Optional[Clock] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the Jira client.

        Args:
            base_url: Jira instance URL (e.g., https://company.atlassian.net)
            user: User name or email for authentication
            api_token: API token or password
            dry_run: If True, don't make write operations
            timeout: Seconds to keep retrying a failing request
            clock: Clock for retry delays
            session: Pre-built session, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/rest/api/{self.API_VERSION}"
        self.auth = (user, api_token)
        self.dry_run = dry_run
        self.timeout = timeout
        self.clock = clock or SystemClock()
        self.logger = logging.getLogger("JiraApiClient")

        self.headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

        self._session = session or requests.Session()
        self._session.auth = self.auth
        self._session.headers.update(self.headers)

    # -------------------------------------------------------------------------
    # Core Request Methods
    # -------------------------------------------------------------------------

    def request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> Any:
        """
        Make an authenticated request to Jira API, retrying transient failures.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (e.g., 'issue/PROJ-123')
            **kwargs: Additional arguments for requests

        Returns:
            Decoded JSON response

        Raises:
            TrackerError: On API errors
        """
        return call_with_backoff(
            lambda: self._request_once(method, endpoint, **kwargs),
            timeout=self.timeout,
            clock=self.clock,
            logger=self.logger,
            description=f"{method} {endpoint}",
        )

    def _request_once(self, method: str, endpoint: str, **kwargs) -> Any:
        url = f"{self.api_url}/{endpoint}"
        kwargs.setdefault("timeout", self.timeout)

        try:
            response = self._session.request(method, url, **kwargs)
        except requests.exceptions.ConnectionError as e:
            raise TransientError(f"Connection failed: {e}", cause=e) from e
        except requests.exceptions.Timeout as e:
            raise TransientError(f"Request timed out: {e}", cause=e) from e
        except (requests.exceptions.ChunkedEncodingError, requests.exceptions.ContentDecodingError) as e:
            raise TransientError(f"Response was cut off: {e}", cause=e) from e
        except requests.exceptions.RequestException as e:
            raise TrackerError(f"Request failed: {e}", cause=e) from e

        return self._handle_response(response, endpoint)

    def get(self, endpoint: str, **kwargs) -> Any:
        """GET request."""
        return self.request("GET", endpoint, **kwargs)

    def post(self, endpoint: str, json: Optional[dict] = None, **kwargs) -> Any:
        """POST request (checks dry_run for mutations)."""
        if self.dry_run and not endpoint.endswith("search/jql"):
            self.logger.info(f"[DRY-RUN] Would POST to {endpoint}")
            return {}
        return self.request("POST", endpoint, json=json, **kwargs)

    def put(self, endpoint: str, json: Optional[dict] = None, **kwargs) -> Any:
        """PUT request (checks dry_run)."""
        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would PUT to {endpoint}")
            return {}
        return self.request("PUT", endpoint, json=json, **kwargs)

    # -------------------------------------------------------------------------
    # Response Handling
    # -------------------------------------------------------------------------

    def _handle_response(
        self,
        response: requests.Response,
        endpoint: str
    ) -> Any:
        """Handle API response and errors."""
        if response.ok:
            if not response.text:
                return {}
            try:
                return response.json()
            except requests.exceptions.JSONDecodeError as e:
                raise TrackerError(
                    f"Response from {endpoint} is not JSON: {response.text[:200]}",
                    issue_key=endpoint,
                    cause=e,
                ) from e

        # Handle specific error codes
        status = response.status_code
        error_body = response.text[:500] if response.text else ""

        if status == 401:
            raise AuthenticationError(
                "Authentication failed. Check the Jira user and API token."
            )

        if status == 403:
            raise ForbiddenError(
                f"Permission denied for {endpoint}",
                issue_key=endpoint
            )

        if status == 404:
            raise NotFoundError(
                f"Not found: {endpoint}",
                issue_key=endpoint
            )

        if status == 429:
            raise RateLimitError(
                f"Rate limited on {endpoint}",
                retry_after=_retry_after(response),
                issue_key=endpoint,
            )

        if status >= 500:
            raise TransientError(
                f"Server error {status}: {error_body}",
                issue_key=endpoint
            )

        # Generic error
        raise TrackerError(
            f"API error {status}: {error_body}",
            issue_key=endpoint
        )

    # -------------------------------------------------------------------------
    # Convenience Methods
    # -------------------------------------------------------------------------

    def get_fields(self) -> list[dict[str, Any]]:
        """Get metadata for every field, system and custom."""
        return self.get("field")

    def get_project(self, project_key: str) -> dict[str, Any]:
        """Get a project by key."""
        return self.get(f"project/{project_key}")

    def search_jql(
        self,
        jql: str,
        fields: list[str],
        max_results: int = MAX_SEARCH_RESULTS,
    ) -> list[dict[str, Any]]:
        """
        Execute a JQL search, following pagination to the end.

        Returns:
            Raw issue objects from every page
        """
        issues: list[dict[str, Any]] = []
        next_page_token: Optional[str] = None

        while True:
            payload: dict[str, Any] = {
                "jql": jql,
                "maxResults": max_results,
                "fields": fields,
            }
            if next_page_token:
                payload["nextPageToken"] = next_page_token

            data = self.post("search/jql", json=payload)
            issues.extend(data.get("issues", []))

            next_page_token = data.get("nextPageToken")
            if data.get("isLast", True) or not next_page_token:
                break

        self.logger.debug(f"JQL search returned {len(issues)} issues: {jql}")
        return issues


def _retry_after(response: requests.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if value and value.strip().isdigit():
        return float(value)
    return None
