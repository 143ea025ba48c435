"""
Scan state for the findimagedupes web API.

Holds the status, progress and results of the current background scan.
State lives in memory only and is discarded when the server stops.
"""

import threading
from datetime import datetime
from typing import Optional

from .models import Cluster, SourceRecord


class ScanState:
    """
    Manages the current state of a background scan.

    Status values: idle, scanning, fingerprinting, comparing, complete,
    error, cancelled.
    """

    ACTIVE_STATUSES = ('scanning', 'fingerprinting', 'comparing')

    def __init__(self):
        self._cancel_requested = False
        self._lock = threading.Lock()
        self.reset()

    def reset(self):
        """Reset state to initial values."""
        with self._lock:
            self._cancel_requested = False

        self.status = 'idle'
        self.progress = 0
        self.message = ''
        self.directories: list[str] = []
        self.total_files = 0
        self.analyzed = 0
        self.clusters: list[Cluster] = []
        self.error_records: list[SourceRecord] = []
        self.settings: dict = {}
        self.started_at: Optional[str] = None
        self.last_updated: Optional[str] = None

    @property
    def is_active(self) -> bool:
        """Whether a scan is currently running."""
        return self.status in self.ACTIVE_STATUSES

    @property
    def cancel_requested(self) -> bool:
        """Check if cancel has been requested."""
        with self._lock:
            return self._cancel_requested

    def request_cancel(self):
        """Request cancellation of the current scan."""
        with self._lock:
            self._cancel_requested = True

    def update(self, **fields):
        """Set several fields at once and stamp the update time."""
        for name, value in fields.items():
            setattr(self, name, value)
        self.last_updated = datetime.now().isoformat()

    def to_status_dict(self) -> dict:
        """Return current status for API response."""
        return {
            'status': self.status,
            'progress': self.progress,
            'message': self.message,
            'directories': self.directories,
            'total_files': self.total_files,
            'analyzed': self.analyzed,
            'has_results': len(self.clusters) > 0,
            'cluster_count': len(self.clusters),
            'error_count': len(self.error_records),
            'settings': self.settings,
            'started_at': self.started_at,
            'last_updated': self.last_updated,
            'cancel_requested': self.cancel_requested,
        }

    def to_clusters_dict(self) -> dict:
        """Return cluster data for API response."""
        return {
            'clusters': [c.to_dict() for c in self.clusters],
            'directories': self.directories,
            'error_images': [r.to_dict() for r in self.error_records],
            'settings': self.settings,
        }


# Global state instance for the application
scan_state = ScanState()
