"""
Export utilities.

Building blocks of an index dump: output sinks, NDJSON encoding,
point-in-time snapshots, page fetching and cursor tracking.
"""

from .sink import Sink, StdoutSink, FileSink, MemorySink, open_sink
from .record_encoder import RecordEncoder
from .snapshot import SnapshotSession
from .page_fetcher import PageFetcher, build_search_body
from .cursor import CursorTracker, next_cursor, is_sort_anomaly

__all__ = [
    "Sink",
    "StdoutSink",
    "FileSink",
    "MemorySink",
    "open_sink",
    "RecordEncoder",
    "SnapshotSession",
    "PageFetcher",
    "build_search_body",
    "CursorTracker",
    "next_cursor",
    "is_sort_anomaly",
]
