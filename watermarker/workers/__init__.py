"""
Workers Module - Threaded Compositing
=====================================
Runs the compositing pass across a thread pool.

Components:
- CompositeWorker: Band-partitioned compositing with progress reporting
"""

from .composite_worker import (
    CompositeConfig,
    CompositeResult,
    CompositeWorker,
    default_workers,
    split_rows,
)

__all__ = [
    "CompositeWorker",
    "CompositeConfig",
    "CompositeResult",
    "default_workers",
    "split_rows",
]
