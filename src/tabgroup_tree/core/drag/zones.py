"""Classify a pointer position over a target into a drop zone."""

import math

from loguru import logger

from tabgroup_tree.config import FOLDER_BOTTOM_BAND, FOLDER_INSIDE_X, FOLDER_TOP_BAND, GROUP_SPLIT
from tabgroup_tree.models.geometry import Point, Rect
from tabgroup_tree.models.node import DropZone, Node


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def relative_position(rect: Rect | None, pointer: Point | None) -> tuple[float, float] | None:
    """Pointer position inside ``rect`` as (rx, ry), each clamped to [0, 1].

    Returns None when the geometry cannot be used (zero-area rectangle,
    missing pointer), which happens transiently while the layout changes.
    """
    if rect is None or pointer is None or not rect.is_usable():
        return None
    rx = (pointer.x - rect.left) / rect.width
    ry = (pointer.y - rect.top) / rect.height
    if math.isnan(rx) or math.isnan(ry):
        return None
    return _clamp(rx), _clamp(ry)


def zone_for_group(ry: float) -> DropZone:
    """Plain groups only split into top and bottom halves."""
    return DropZone.BEFORE if ry < GROUP_SPLIT else DropZone.AFTER


def zone_for_folder(rx: float, ry: float) -> DropZone:
    """Folders get a wide "inside" area with thin before/after bands.

    The pointer is inside when it is in the central vertical band, or far
    enough to the right to be over the folder's label regardless of height.
    """
    inside_by_vertical = FOLDER_TOP_BAND <= ry <= FOLDER_BOTTOM_BAND
    inside_by_horizontal = rx >= FOLDER_INSIDE_X
    if inside_by_vertical or inside_by_horizontal:
        return DropZone.INSIDE
    if ry < FOLDER_TOP_BAND:
        return DropZone.BEFORE
    return DropZone.AFTER


def classify_drop_zone(target: Node, rect: Rect | None, pointer: Point | None) -> DropZone | None:
    """Decide whether a drop on ``target`` means before, after or inside.

    Returns None for malformed geometry; the move then falls back to
    appending after the target's siblings.
    """
    relative = relative_position(rect, pointer)
    if relative is None:
        logger.debug("No usable geometry for target {}", target.id)
        return None

    rx, ry = relative
    zone = zone_for_folder(rx, ry) if target.is_folder else zone_for_group(ry)
    logger.debug("Drag over {} (folder={}) rx={:.2f} ry={:.2f} -> {}", target.id, target.is_folder, rx, ry, zone)
    return zone
