"""
Transparency Policy Resolver
============================
Decides which rule governs transparent watermark pixels, and turns the raw
text of each console answer into a typed value.

Technical Notes:
- Exactly one policy is active per run
- The alpha question is only asked for translucent watermarks
- The color-key question is asked when no alpha policy was chosen, both for
  watermarks without translucency and when the user declines the alpha channel
- Parsers raise ParseError for malformed text and RangeError for values
  outside their domain; nothing here prints or exits
"""

import logging
import re
from typing import Callable, List, Optional

from .errors import ParseError, RangeError
from .models import (
    BlendWeight,
    Color,
    ColorKey,
    GridPlacement,
    ImageData,
    NoSpecialTransparency,
    PlacementMode,
    SinglePlacement,
    Transparency,
    TransparencyPolicy,
    UseWatermarkAlpha,
)
from .validator import validate_blend_weight, validate_key_color, validate_placement

logger = logging.getLogger(__name__)

POSITION_METHODS = ("single", "grid")

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def resolve_policy(
        transparency: Transparency,
        ask_use_alpha: Callable[[], bool],
        ask_key_color: Callable[[], Optional[Color]]
) -> TransparencyPolicy:
    """
    Pick the transparency policy for the run.

    Args:
        transparency: Classification of the watermark's color model.
        ask_use_alpha: Asks whether to honour the watermark alpha channel.
                       Only called for translucent watermarks.
        ask_key_color: Asks for an optional key color; returns None when the
                       user does not want one.

    Returns:
        UseWatermarkAlpha, ColorKey or NoSpecialTransparency.
    """
    if transparency is Transparency.TRANSLUCENT and ask_use_alpha():
        logger.debug("Using the watermark alpha channel")
        return UseWatermarkAlpha()

    key = ask_key_color()
    if key is not None:
        logger.debug("Using color key %s", key.rgb)
        return ColorKey(key)

    return NoSpecialTransparency()


# =============================================================================
# ANSWER PARSERS
# =============================================================================

def parse_yes_no(text: str) -> bool:
    """Only "yes" (any case) means yes; every other answer means no."""
    return text.strip().lower() == "yes"


def parse_int(text: str, message: str) -> int:
    """Exact integer text; surrounding whitespace is not accepted."""
    if not _INTEGER_RE.fullmatch(text):
        raise ParseError(message)
    return int(text)


def parse_int_list(text: str, message: str) -> List[int]:
    """
    Parse integers separated by single spaces.

    Doubled spaces, tabs and leading or trailing blanks leave an empty or
    malformed token and raise ParseError.
    """
    return [parse_int(token, message) for token in text.split(" ")]


def parse_blend_weight(text: str) -> BlendWeight:
    weight = parse_int(text, "The transparency percentage isn't an integer number.")
    validate_blend_weight(weight)
    return weight


def parse_key_color(text: str) -> Color:
    """Parse "R G B" into a key color; malformed and out of range input share one message."""
    values = parse_int_list(text, "The transparency color input is invalid.")
    return validate_key_color(values)


def parse_position_method(text: str) -> str:
    method = text.strip()
    if method not in POSITION_METHODS:
        raise ParseError("The position method input is invalid.")
    return method


def parse_position(text: str, base: ImageData, watermark: ImageData) -> SinglePlacement:
    """
    Parse "X Y" into a single placement inside the valid origin bounds.

    Raises:
        ParseError: If a token is not an integer.
        RangeError: If there are not exactly two values or either is out of bounds.
    """
    values = parse_int_list(text, "The position input is invalid.")
    if len(values) != 2:
        raise RangeError("The position input is out of range.")
    placement = SinglePlacement(origin_x=values[0], origin_y=values[1])
    validate_placement(placement, base, watermark)
    return placement


def placement_for(method: str, position: Optional[SinglePlacement] = None) -> PlacementMode:
    """Build the placement mode for a parsed position method."""
    if method == "grid":
        return GridPlacement()
    if position is None:
        raise ValueError("single placement needs a position")
    return position
