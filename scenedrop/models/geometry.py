"""Module: geometry.py

Date: 2026-10-19

Immutable 2D value types used by hit-testing, indicator and reflow code.

Rect.contains is half-open (left/top inclusive, right/bottom exclusive), so
two touching siblings never both contain the same point.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scenedrop.models.scene_node import EdgePadding


@dataclass(frozen=True, slots=True)
class Vector2:
    """Point or offset in 2D space."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def distance_to(self, other: Vector2) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)



@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle stored as left/top/width/height."""

    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_ltrb(cls, left: float, top: float, right: float, bottom: float) -> Rect:
        return cls(left, top, right - left, bottom - top)

    @classmethod
    def from_center(cls, center: Vector2, width: float, height: float) -> Rect:
        return cls(center.x - width / 2, center.y - height / 2, width, height)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> Vector2:
        return Vector2(self.left + self.width / 2, self.top + self.height / 2)

    @property
    def is_empty(self) -> bool:
        """True when either dimension is zero or negative."""
        return self.width <= 0 or self.height <= 0

    def contains(self, point: Vector2) -> bool:
        return self.left <= point.x < self.right and self.top <= point.y < self.bottom

    def shift(self, offset: Vector2) -> Rect:
        return Rect(self.left + offset.x, self.top + offset.y, self.width, self.height)

    def inflate(self, delta: float) -> Rect:
        return Rect.from_ltrb(
            self.left - delta, self.top - delta, self.right + delta, self.bottom + delta
        )

    def inset(self, padding: EdgePadding) -> Rect:
        """Content box of this rect after removing ``padding`` (may be empty)."""
        return Rect.from_ltrb(
            self.left + padding.left,
            self.top + padding.top,
            self.right - padding.right,
            self.bottom - padding.bottom,
        )

    def intersect(self, other: Rect) -> Rect | None:
        """Overlap of two rects, None when they do not overlap."""
        left = max(self.left, other.left)
        top = max(self.top, other.top)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        if right <= left or bottom <= top:
            return None
        return Rect.from_ltrb(left, top, right, bottom)

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.left, self.top, self.width, self.height)


class LayoutAxis(Enum):
    """Main axis of an auto-layout container.

    Rows lay children out horizontally, columns vertically.
    """

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @classmethod
    def from_direction(cls, direction: str) -> LayoutAxis:
        """Accept ``row``/``column`` as well as the enum values."""
        aliases = {"row": cls.HORIZONTAL, "column": cls.VERTICAL}
        if direction in aliases:
            return aliases[direction]
        return cls(direction)

    def main(self, point: Vector2) -> float:
        return point.x if self is LayoutAxis.HORIZONTAL else point.y

    def main_start(self, rect: Rect) -> float:
        return rect.left if self is LayoutAxis.HORIZONTAL else rect.top

    def main_end(self, rect: Rect) -> float:
        return rect.right if self is LayoutAxis.HORIZONTAL else rect.bottom

    def main_extent(self, rect: Rect) -> float:
        return rect.width if self is LayoutAxis.HORIZONTAL else rect.height

    def main_center(self, rect: Rect) -> float:
        return self.main(rect.center)

    def offset(self, amount: float) -> Vector2:
        """Vector of ``amount`` along the main axis, zero on the cross axis."""
        if self is LayoutAxis.HORIZONTAL:
            return Vector2(amount, 0.0)
        return Vector2(0.0, amount)

    @property
    def indicator_axis(self) -> IndicatorAxis:
        """Orientation of an insertion line for this layout (perpendicular)."""
        if self is LayoutAxis.HORIZONTAL:
            return IndicatorAxis.VERTICAL
        return IndicatorAxis.HORIZONTAL


class IndicatorAxis(Enum):
    """Orientation of the insertion line drawn by the overlay."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
