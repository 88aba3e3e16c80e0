"""
Background refresh of the property snapshot.
"""

from .poller import PropertyRefresher, RefreshOutcome, RefreshResult

__all__ = ["PropertyRefresher", "RefreshOutcome", "RefreshResult"]
