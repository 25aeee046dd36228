"""
Composite Worker - Threaded Compositing
=======================================
Runs the compositor over disjoint row bands on a thread pool.

Workflow:
1. Allocate the output buffer once
2. Split the base image rows into contiguous bands
3. Composite each band on a worker thread; a band only writes its own rows
4. Report progress after each finished band
5. Return the filled buffer

Any exception raised inside a band is re-raised to the caller.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from watermarker.core.compositor import allocate_output, composite_band
from watermarker.core.models import (
    BlendWeight,
    ImageData,
    NoSpecialTransparency,
    PlacementMode,
    TransparencyPolicy,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


def default_workers() -> int:
    """Leave a core free for the system."""
    n = os.cpu_count() or 2
    return max(1, n - 1)


def split_rows(height: int, parts: int) -> List[Tuple[int, int]]:
    """
    Split [0, height) into at most `parts` contiguous, non-empty bands.

    Band sizes differ by at most one row.
    """
    if height <= 0:
        return []
    parts = max(1, min(parts, height))
    step, extra = divmod(height, parts)
    bands = []
    start = 0
    for index in range(parts):
        stop = start + step + (1 if index < extra else 0)
        bands.append((start, stop))
        start = stop
    return bands


@dataclass
class CompositeConfig:
    """Complete configuration for one compositing pass."""
    base: ImageData
    watermark: ImageData
    placement: PlacementMode
    policy: TransparencyPolicy = NoSpecialTransparency()
    weight: BlendWeight = 100
    workers: int = 1


@dataclass
class CompositeResult:
    """Outcome of a compositing pass."""
    pixels: np.ndarray
    bands: int = 0
    elapsed: float = 0.0


class CompositeWorker:
    """
    Composites a watermark into a base image using a pool of threads.

    Args:
        config: CompositeConfig with images and blend settings.
        progress: Optional callback receiving (bands_done, bands_total, label).
    """

    def __init__(self, config: CompositeConfig, progress: Optional[ProgressCallback] = None):
        self.config = config
        self._progress = progress

    def _emit_progress(self, done: int, total: int, band: Tuple[int, int]):
        if self._progress is not None:
            self._progress(done, total, f"rows {band[0]}-{band[1] - 1}")

    def _run_band(self, band: Tuple[int, int], out: np.ndarray):
        cfg = self.config
        composite_band(
            cfg.base, cfg.watermark, cfg.policy, cfg.weight, cfg.placement,
            band[0], band[1], out
        )

    def run(self) -> CompositeResult:
        cfg = self.config
        started = time.perf_counter()
        out = allocate_output(cfg.base)
        bands = split_rows(cfg.base.height, cfg.workers)
        total = len(bands)

        logger.debug(
            "Compositing %dx%d with %d band(s), placement=%r, policy=%r, weight=%d",
            cfg.base.width, cfg.base.height, total, cfg.placement, cfg.policy, cfg.weight
        )

        if cfg.workers <= 1 or total <= 1:
            for done, band in enumerate(bands, start=1):
                self._run_band(band, out)
                self._emit_progress(done, total, band)
        else:
            with ThreadPoolExecutor(max_workers=min(cfg.workers, total)) as pool:
                futures = {pool.submit(self._run_band, band, out): band for band in bands}
                for done, future in enumerate(as_completed(futures), start=1):
                    future.result()
                    self._emit_progress(done, total, futures[future])

        elapsed = time.perf_counter() - started
        logger.debug("Compositing finished in %.3fs", elapsed)
        return CompositeResult(pixels=out, bands=total, elapsed=elapsed)
