"""
Application Layer - Reconciliation rules and sync orchestration.

This layer contains:
- reconcile/: Pure comparison of GitHub and Jira snapshots
- sync/: Synchronization orchestrator and state persistence
"""

from .sync import StateStore, SyncOrchestrator, SyncResult

__all__ = [
    "SyncOrchestrator",
    "SyncResult",
    "StateStore",
]
