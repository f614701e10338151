"""
Background pattern recolouring for the client theme.
"""
import base64
import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_PATTERN_COLOR = "#d4af37"

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_DEFAULT_COLOR_RE = re.compile(re.escape(DEFAULT_PATTERN_COLOR), re.IGNORECASE)


def is_hex_color(value: Optional[str]) -> bool:
    return bool(value) and bool(_HEX_COLOR.match(value))


def recolor_pattern(svg_text: str, color: Optional[str]) -> str:
    """Replace the default gold in the SVG with color; invalid colors leave it unchanged."""
    if not color:
        return svg_text
    if not is_hex_color(color):
        logger.warning(f"Ignoring invalid theme color: {color!r}")
        return svg_text
    return _DEFAULT_COLOR_RE.sub(color, svg_text)


def pattern_data_uri(svg_text: str, color: Optional[str] = None) -> str:
    """Recoloured pattern as a base64 data:image/svg+xml URI."""
    encoded = base64.b64encode(recolor_pattern(svg_text, color).encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"
