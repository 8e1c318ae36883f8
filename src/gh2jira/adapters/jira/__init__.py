"""
Jira Adapter - Implementation of IssueTrackerPort for Atlassian Jira.
"""

from .adapter import JiraAdapter, build_jql
from .client import JiraApiClient
from .fields import FieldResolver

__all__ = [
    "JiraAdapter",
    "JiraApiClient",
    "FieldResolver",
    "build_jql",
]
