"""
Usage Stats Repository
======================
Tracks installations, reviewed repositories and the number of reviewed
pull requests.

The webhook layer receives a repository instance through dependency
injection, so the review core never touches module-level counters.
InMemoryUsageStatsRepository is the default; state lives for the process
lifetime only.
"""
import logging
import threading
from typing import Dict, Set

logger = logging.getLogger(__name__)


class UsageStatsRepository:
    """Interface for usage counters."""

    def add_installation(self, installation_id: str) -> None:
        raise NotImplementedError

    def remove_installation(self, installation_id: str) -> None:
        raise NotImplementedError

    def add_repository(self, full_name: str) -> None:
        raise NotImplementedError

    def record_pull_request_reviewed(self) -> None:
        raise NotImplementedError

    def snapshot(self) -> Dict[str, int]:
        raise NotImplementedError


class InMemoryUsageStatsRepository(UsageStatsRepository):
    """Process-local counters guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._installations: Set[str] = set()
        self._repositories: Set[str] = set()
        self._pull_requests_reviewed = 0

    def add_installation(self, installation_id: str) -> None:
        with self._lock:
            self._installations.add(installation_id)
        logger.info("New installation: %s", installation_id)

    def remove_installation(self, installation_id: str) -> None:
        with self._lock:
            self._installations.discard(installation_id)
        logger.info("Uninstalled: %s", installation_id)

    def add_repository(self, full_name: str) -> None:
        with self._lock:
            self._repositories.add(full_name)

    def record_pull_request_reviewed(self) -> None:
        with self._lock:
            self._pull_requests_reviewed += 1

    def snapshot(self) -> Dict[str, int]:
        """Counts in the shape returned by GET /stats."""
        with self._lock:
            return {
                "installations": len(self._installations),
                "pullRequestsReviewed": self._pull_requests_reviewed,
                "repositories": len(self._repositories),
            }
