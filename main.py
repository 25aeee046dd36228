"""
Watermarker - Main Entry Point
==============================
A console application that blends a watermark image into a base image.

Usage:
    python main.py
    python main.py --workers 4 --verbose
    python main.py --info photo.png logo.png

Architecture:
    - Model: watermarker/core/ (pure algorithms)
    - View: watermarker/ui/ (console prompts)
    - Controller: This file (prompt sequence, error reporting, exit status)

Features:
    - Weighted color blend with a 0-100 watermark weight
    - Watermark alpha channel or a single key color as transparency
    - Single placement at an offset, or grid tiling over the whole image
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from watermarker.config import AppConfig
from watermarker.core.errors import WatermarkError
from watermarker.core.policy import resolve_policy
from watermarker.core.validator import validate_fit, validate_format
from watermarker.io import decode, describe_image, encode
from watermarker.ui import ConsolePrompter
from watermarker.workers import CompositeConfig, CompositeResult, CompositeWorker

logger = logging.getLogger(__name__)


class WatermarkController:
    """
    Drives one watermark run from the first prompt to the written file.

    Responsibilities:
    - Ask each question in order and validate the answer immediately
    - Hand the resolved settings to the composite worker
    - Write the result and report its path

    Every failure surfaces as a WatermarkError; reporting it and choosing the
    exit status is left to main().
    """

    def __init__(self, config: AppConfig, prompter: ConsolePrompter):
        """
        Initialize the controller.

        Args:
            config: Run configuration.
            prompter: Console prompter used for every question.
        """
        self.config = config
        self.prompter = prompter

    def _on_progress(self, current: int, total: int, label: str):
        logger.debug("Band %d/%d done (%s)", current, total, label)

    def run(self) -> Path:
        """
        Run the full prompt sequence and write the output image.

        Returns:
            Path of the written image.
        """
        labels = self.config.labels
        prompter = self.prompter

        base = decode(prompter.ask_filename(labels.image))
        validate_format(base, labels.image)

        watermark = decode(prompter.ask_filename(f"{labels.watermark} {labels.image}"))
        validate_format(watermark, labels.watermark)

        validate_fit(base, watermark, labels.watermark)

        policy = resolve_policy(
            watermark.transparency,
            ask_use_alpha=prompter.ask_use_alpha,
            ask_key_color=prompter.ask_key_color,
        )
        weight = prompter.ask_blend_weight()
        placement = prompter.ask_placement(base, watermark)
        output_path = prompter.ask_output_path()

        worker = CompositeWorker(
            CompositeConfig(
                base=base,
                watermark=watermark,
                placement=placement,
                policy=policy,
                weight=weight,
                workers=self.config.workers,
            ),
            progress=self._on_progress,
        )
        result: CompositeResult = worker.run()

        encode(result.pixels, output_path)
        prompter.say(f"The watermarked image {output_path} has been created.")
        return output_path


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="watermarker",
        description="Blend a watermark image into a base image, answering prompts on stdin.",
    )
    parser.add_argument(
        "--workers", type=int, default=None, help="Threads used for compositing"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument(
        "--info",
        nargs="+",
        type=Path,
        metavar="PATH",
        help="Print image metadata and exit",
    )
    return parser.parse_args(argv)


def print_image_info(paths: List[Path]):
    for path in paths:
        try:
            lines = describe_image(path)
        except WatermarkError:
            print(f"The file {path} doesn't exist.")
            continue
        for line in lines:
            print(line)


def main(argv: Optional[Sequence[str]] = None, prompter: Optional[ConsolePrompter] = None) -> int:
    """Application entry point. Returns the process exit status."""
    args = parse_cli_args(argv)

    config = AppConfig.from_env()
    if args.workers is not None and args.workers > 0:
        config.workers = args.workers
    if args.verbose:
        config.log_level = "DEBUG"

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.info:
        print_image_info(args.info)
        return 0

    if prompter is None:
        prompter = ConsolePrompter(
            labels=config.labels, output_extensions=config.output_extensions
        )

    controller = WatermarkController(config, prompter)
    try:
        controller.run()
    except WatermarkError as e:
        logger.debug("Run failed", exc_info=True)
        prompter.say(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
