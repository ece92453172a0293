from __future__ import annotations

import re
from typing import Any

BLUR_STRENGTH = 500

_NAMED_EFFECTS = {
    "grayscale": "grayscale",
    "sepia": "sepia",
    "blur": f"blur:{BLUR_STRENGTH}",
}

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


class TransformationError(ValueError):
    pass


def _parse_leading_int(value: str) -> int | None:
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else None


def parse_transformation(tag: str | None) -> dict[str, Any]:
    """
    Map a transformation tag to provider options.

    Named effects are matched exactly and win over dimensions. Any other tag
    containing `x` is read as `<width>x<height>` and resized with a fill crop.
    Everything else maps to no options at all (a plain re-upload).

    Raises TransformationError when a dimension tag has no usable integers.
    """

    if not tag:
        return {}
    if tag in _NAMED_EFFECTS:
        return {"effect": _NAMED_EFFECTS[tag]}
    if "x" not in tag:
        return {}

    parts = tag.split("x")
    width = _parse_leading_int(parts[0])
    height = _parse_leading_int(parts[1])
    if width is None or height is None or width <= 0 or height <= 0:
        raise TransformationError(f"Invalid transformation dimensions {tag!r}; expected <width>x<height>, e.g. 200x300")
    return {"width": width, "height": height, "crop": "fill"}
