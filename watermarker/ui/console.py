"""
Console Prompter
================
Line-based interactive prompts. Each answer is parsed as soon as it is read;
a malformed answer raises the matching WatermarkError and the run stops.
There is no retry loop.
"""

import sys
from pathlib import Path
from typing import Iterable, Optional, TextIO

from watermarker.config import PromptLabels
from watermarker.core.errors import ParseError
from watermarker.core.models import BlendWeight, Color, ImageData, PlacementMode
from watermarker.core.policy import (
    parse_blend_weight,
    parse_key_color,
    parse_position,
    parse_position_method,
    parse_yes_no,
    placement_for,
)
from watermarker.core.validator import (
    ALLOWED_OUTPUT_EXTENSIONS,
    placement_bounds,
    validate_output_extension,
)


class ConsolePrompter:
    """
    Asks the run's questions on a text stream pair.

    Args:
        labels: Names used in prompt texts.
        stdin: Stream answers are read from (default: sys.stdin).
        stdout: Stream prompts are written to (default: sys.stdout).
        output_extensions: Accepted output file extensions.
    """

    def __init__(
            self,
            labels: Optional[PromptLabels] = None,
            stdin: Optional[TextIO] = None,
            stdout: Optional[TextIO] = None,
            output_extensions: Iterable[str] = ALLOWED_OUTPUT_EXTENSIONS
    ):
        self.labels = labels or PromptLabels()
        self.output_extensions = tuple(output_extensions)
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout

    def say(self, message: str):
        print(message, file=self._stdout, flush=True)

    def ask(self, prompt: str) -> str:
        self.say(prompt)
        line = self._stdin.readline()
        if not line:
            raise ParseError("No input available.")
        return line.rstrip("\r\n")

    def ask_filename(self, label: str) -> Path:
        return Path(self.ask(f"Input the {label} filename:").strip())

    def ask_use_alpha(self) -> bool:
        return parse_yes_no(self.ask("Do you want to use the watermark's Alpha channel?"))

    def ask_key_color(self) -> Optional[Color]:
        """Key color chosen by the user, or None when they don't want one."""
        if not parse_yes_no(self.ask("Do you want to set a transparency color?")):
            return None
        return parse_key_color(self.ask("Input a transparency color ([Red] [Green] [Blue]):"))

    def ask_blend_weight(self) -> BlendWeight:
        return parse_blend_weight(
            self.ask(f"Input the {self.labels.watermark} transparency percentage (Integer 0-100):")
        )

    def ask_placement(self, base: ImageData, watermark: ImageData) -> PlacementMode:
        method = parse_position_method(self.ask("Choose the position method (single, grid):"))
        if method == "grid":
            return placement_for(method)

        max_x, max_y = placement_bounds(base, watermark)
        position = parse_position(
            self.ask(f"Input the {self.labels.watermark} position ([x 0-{max_x}] [y 0-{max_y}]):"),
            base,
            watermark,
        )
        return placement_for(method, position)

    def ask_output_path(self) -> Path:
        path = Path(self.ask(
            f"Input the {self.labels.output} image filename (jpg or png extension):"
        ).strip())
        validate_output_extension(path, self.output_extensions)
        return path
