"""Tests for the low-level Jira REST client."""

import json
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import requests

from gh2jira.adapters.jira import JiraApiClient
from gh2jira.core.exceptions import (
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    TrackerError,
    TransientError,
)
from gh2jira.core.ports.clock import FrozenClock


def make_response(status=200, payload=None, headers=None):
    response = Mock()
    response.status_code = status
    response.ok = status < 400
    response.text = json.dumps(payload) if payload is not None else ""
    response.json.return_value = payload
    response.headers = headers or {}
    return response


class TestJiraApiClient:
    """Tests for JiraApiClient."""

    @pytest.fixture
    def session(self):
        session = Mock()
        session.request.return_value = make_response(payload={"key": "PROJ-1"})
        return session

    @pytest.fixture
    def clock(self):
        return FrozenClock(datetime(2020, 1, 1, tzinfo=timezone.utc))

    @pytest.fixture
    def client(self, session, clock):
        return JiraApiClient(
            base_url="https://jira.example.com/",
            user="bot@example.com",
            api_token="secret",
            dry_run=False,
            clock=clock,
            session=session,
        )

    def test_get(self, client, session):
        assert client.get("issue/PROJ-1") == {"key": "PROJ-1"}

        session.request.assert_called_once_with(
            "GET", "https://jira.example.com/rest/api/2/issue/PROJ-1", timeout=30.0
        )
        assert session.auth == ("bot@example.com", "secret")

    def test_empty_response_body(self, client, session):
        session.request.return_value = make_response(status=204)

        assert client.put("issue/PROJ-1", json={"fields": {}}) == {}

    @pytest.mark.parametrize("status, error", [
        (401, AuthenticationError),
        (403, ForbiddenError),
        (404, NotFoundError),
        (400, TrackerError),
    ])
    def test_error_statuses(self, client, session, status, error):
        session.request.return_value = make_response(status=status, payload={"errors": {}})

        with pytest.raises(error):
            client.get("issue/PROJ-1")

        assert session.request.call_count == 1

    def test_bad_request_is_not_transient(self, client, session):
        session.request.return_value = make_response(status=400, payload={"errors": {}})

        with pytest.raises(TrackerError) as exc_info:
            client.get("issue/PROJ-1")

        assert not isinstance(exc_info.value, TransientError)
        assert "400" in str(exc_info.value)

    def test_server_error_is_retried(self, client, session, clock):
        session.request.side_effect = [
            make_response(status=503),
            make_response(payload={"key": "PROJ-1"}),
        ]

        assert client.get("issue/PROJ-1") == {"key": "PROJ-1"}
        assert clock.sleeps == [0.5]

    def test_rate_limit_honours_retry_after(self, client, session, clock):
        session.request.side_effect = [
            make_response(status=429, headers={"Retry-After": "2"}),
            make_response(payload={"key": "PROJ-1"}),
        ]

        client.get("issue/PROJ-1")

        assert clock.sleeps == [2.0]

    def test_connection_error_is_retried_until_timeout(self, session, clock):
        session.request.side_effect = requests.exceptions.ConnectionError("refused")
        client = JiraApiClient(
            base_url="https://jira.example.com",
            user="bot",
            api_token="secret",
            dry_run=False,
            timeout=2.0,
            clock=clock,
            session=session,
        )

        with pytest.raises(TransientError):
            client.get("myself")

        assert clock.sleeps == [0.5, 0.75]

    def test_dry_run_skips_writes(self, session, clock):
        client = JiraApiClient(
            base_url="https://jira.example.com",
            user="bot",
            api_token="secret",
            dry_run=True,
            clock=clock,
            session=session,
        )

        assert client.post("issue", json={"fields": {}}) == {}
        assert client.put("issue/PROJ-1", json={"fields": {}}) == {}
        session.request.assert_not_called()

    def test_dry_run_still_searches(self, session, clock):
        session.request.return_value = make_response(payload={"issues": [], "isLast": True})
        client = JiraApiClient(
            base_url="https://jira.example.com",
            user="bot",
            api_token="secret",
            dry_run=True,
            clock=clock,
            session=session,
        )

        assert client.search_jql("project='PROJ'", ["summary"]) == []
        session.request.assert_called_once()

    def test_search_follows_pages(self, client, session):
        session.request.side_effect = [
            make_response(payload={"issues": [{"key": "PROJ-1"}], "nextPageToken": "abc", "isLast": False}),
            make_response(payload={"issues": [{"key": "PROJ-2"}], "isLast": True}),
        ]

        issues = client.search_jql("project='PROJ'", ["summary"])

        assert [issue["key"] for issue in issues] == ["PROJ-1", "PROJ-2"]
        first = session.request.call_args_list[0].kwargs["json"]
        second = session.request.call_args_list[1].kwargs["json"]
        assert first == {"jql": "project='PROJ'", "maxResults": 1000, "fields": ["summary"]}
        assert second["nextPageToken"] == "abc"

    def test_non_json_success_body(self, client, session):
        response = make_response()
        response.text = "<html>maintenance</html>"
        response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", response.text, 0)
        session.request.return_value = response

        with pytest.raises(TrackerError) as exc_info:
            client.get("issue/PROJ-1")

        assert "not JSON" in str(exc_info.value)
        assert session.request.call_count == 1

    def test_broken_response_stream_is_retried(self, client, session, clock):
        session.request.side_effect = [
            requests.exceptions.ChunkedEncodingError("connection broken"),
            make_response(payload={"key": "PROJ-1"}),
        ]

        assert client.get("issue/PROJ-1") == {"key": "PROJ-1"}
        assert clock.sleeps == [0.5]

    def test_other_request_failures_become_tracker_errors(self, client, session):
        session.request.side_effect = requests.exceptions.InvalidURL("bad url")

        with pytest.raises(TrackerError) as exc_info:
            client.get("issue/PROJ-1")

        assert not isinstance(exc_info.value, TransientError)
        assert session.request.call_count == 1
