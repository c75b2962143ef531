"""Screen geometry used by drag hit-testing."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in screen coordinates (y grows downwards)."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point(self.left + self.width / 2, self.top + self.height / 2)

    def is_usable(self) -> bool:
        """False for zero-area, negative or non-finite rectangles."""
        values = (self.left, self.top, self.width, self.height)
        if not all(math.isfinite(v) for v in values):
            return False
        return self.width > 0 and self.height > 0

    def contains(self, point: Point) -> bool:
        """Edges count as inside."""
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom
