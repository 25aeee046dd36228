"""
Application Configuration
=========================
Prompt labels and run settings passed explicitly into the controller.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from watermarker.core.validator import ALLOWED_OUTPUT_EXTENSIONS
from watermarker.workers import default_workers

logger = logging.getLogger(__name__)

ENV_WORKERS = "WATERMARKER_WORKERS"
ENV_LOG_LEVEL = "WATERMARKER_LOG_LEVEL"


@dataclass(frozen=True)
class PromptLabels:
    """Names used in prompts and diagnostics."""
    image: str = "image"
    watermark: str = "watermark"
    output: str = "output"


@dataclass
class AppConfig:
    """Complete configuration for a run."""
    labels: PromptLabels = field(default_factory=PromptLabels)
    workers: int = field(default_factory=default_workers)
    log_level: str = "WARNING"
    output_extensions: Tuple[str, ...] = ALLOWED_OUTPUT_EXTENSIONS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """
        Build a config from environment variables.

        WATERMARKER_WORKERS: positive integer thread count.
        WATERMARKER_LOG_LEVEL: logging level name.
        """
        environ = os.environ if environ is None else environ
        config = cls()

        raw_workers = environ.get(ENV_WORKERS)
        if raw_workers:
            try:
                workers = int(raw_workers)
            except ValueError:
                workers = 0
            if workers > 0:
                config.workers = workers
            else:
                logger.warning(
                    "Ignoring %s=%r, using %d worker(s)", ENV_WORKERS, raw_workers, config.workers
                )

        raw_level = environ.get(ENV_LOG_LEVEL)
        if raw_level:
            config.log_level = raw_level.strip().upper()

        return config
