"""
Per-endpoint call counters.

Every orchestrated call records its outcome and elapsed time here. Latency is
kept as a histogram of fixed-width buckets (``HISTOGRAM_BUCKET_MS`` wide), so
bucket ``n`` holds calls that took ``[n * 10ms, (n + 1) * 10ms)``.
"""

import threading
from dataclasses import dataclass, field
from typing import Dict

from shippingapi.constants import HISTOGRAM_BUCKET_MS


@dataclass
class CounterEntry:
    """Counters for a single endpoint URI."""
    call_count: int = 0
    error_count: int = 0
    call_histogram: Dict[int, int] = field(default_factory=dict)

    def copy(self) -> "CounterEntry":
        return CounterEntry(
            call_count=self.call_count,
            error_count=self.error_count,
            call_histogram=dict(self.call_histogram),
        )


def histogram_bucket(elapsed: float) -> int:
    """Map an elapsed time in seconds to its histogram bucket index."""
    return int(elapsed * 1000 // HISTOGRAM_BUCKET_MS)


class Counters:
    """
    Thread-safe map of endpoint URI to ``CounterEntry``.

    Entries are never evicted; the key space is the fixed set of endpoint
    paths the client calls.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[str, CounterEntry] = {}

    def record(self, uri: str, success: bool, elapsed: float) -> None:
        """
        Record the outcome of one call.

        Args:
            uri: Endpoint URI the call was made to
            success: Whether the final response was successful
            elapsed: Elapsed wall-clock time in seconds
        """
        bucket = histogram_bucket(elapsed)
        with self._lock:
            entry = self._entries.setdefault(uri, CounterEntry())
            entry.call_count += 1
            if not success:
                entry.error_count += 1
            entry.call_histogram[bucket] = entry.call_histogram.get(bucket, 0) + 1

    def get(self, uri: str) -> CounterEntry:
        """Return a copy of the counters for ``uri`` (zeroed if never called)."""
        with self._lock:
            entry = self._entries.get(uri)
            return entry.copy() if entry else CounterEntry()

    def snapshot(self) -> Dict[str, CounterEntry]:
        """Return a copy of all counters keyed by URI."""
        with self._lock:
            return {uri: entry.copy() for uri, entry in self._entries.items()}

    def __contains__(self, uri: str) -> bool:
        with self._lock:
            return uri in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
