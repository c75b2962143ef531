"""Pick the drop target under the pointer."""

import math
from collections.abc import Mapping

from tabgroup_tree.models.geometry import Point, Rect


def pointer_within(pointer: Point, rects: Mapping[str, Rect]) -> list[str]:
    """Ids whose rectangle contains the pointer, smallest area first.

    Nested folders overlap their children, so the smallest match is the most
    specific one. Equal areas keep the mapping's order.
    """
    hits = [(rect.area, index, target_id) for index, (target_id, rect) in enumerate(rects.items())
            if rect.contains(pointer)]
    return [target_id for _area, _index, target_id in sorted(hits)]


def closest_center(pointer: Point, rects: Mapping[str, Rect]) -> str | None:
    """Id whose rectangle center is nearest to the pointer (first wins on ties)."""
    best_id: str | None = None
    best_distance = math.inf
    for target_id, rect in rects.items():
        distance = pointer.distance_to(rect.center)
        if distance < best_distance:
            best_id, best_distance = target_id, distance
    return best_id


def detect_collision(
    pointer: Point | None,
    rects: Mapping[str, Rect],
    *,
    exclude: str | None = None,
) -> str | None:
    """Return the single target the pointer is over, or None.

    Exact containment wins. When the pointer sits outside every rectangle
    (fast movement, gaps between rows) the nearest center is used instead.
    Unusable rectangles and a missing pointer degrade to no target.
    """
    if pointer is None or not (math.isfinite(pointer.x) and math.isfinite(pointer.y)):
        return None

    candidates = {
        target_id: rect
        for target_id, rect in rects.items()
        if target_id != exclude and rect.is_usable()
    }
    if not candidates:
        return None

    within = pointer_within(pointer, candidates)
    if within:
        return within[0]
    return closest_center(pointer, candidates)
