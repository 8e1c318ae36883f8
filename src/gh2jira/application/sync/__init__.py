"""
Sync Module - Orchestration of GitHub to Jira synchronization.
"""

from .orchestrator import SyncOrchestrator, SyncResult
from .state import StateStore

__all__ = [
    "SyncOrchestrator",
    "SyncResult",
    "StateStore",
]
