"""
Exit Codes - Process exit statuses of the gh2jira command.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit statuses returned by main()."""

    SUCCESS = 0
    SYNC_ERROR = 1
    CONFIG_ERROR = 2
    SIGINT = 130
