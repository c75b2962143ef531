"""Configuration constants for tabgroup-tree."""

import os
from pathlib import Path

# API token location. First file found is used; TABGROUP_API_TOKEN wins over files.
API_TOKEN_FILES: list[Path] = [
    Path("~/.config/tabgroup-tree-token.txt").expanduser(),
    Path("~/.config/secret/tabgroup-tree-token.txt").expanduser(),
]
API_TOKEN_ENV: str = "TABGROUP_API_TOKEN"

API_BASE_URL: str = os.environ.get("TABGROUP_API_URL", "http://localhost:8788/api").rstrip("/")

# Page size used while walking the tab-group listing cursor.
API_PAGE_SIZE: int = 100

# Seconds before a single HTTP request is abandoned.
API_TIMEOUT: float = 15.0

# Tag that marks a node as locked (not draggable).
LOCKED_TAG: str = "__locked__"

# Pointer travel in pixels before a press turns into a drag.
DRAG_ACTIVATION_DISTANCE: float = 8.0

# Drop zone thresholds, as fractions of the target rectangle.
GROUP_SPLIT: float = 0.5
FOLDER_TOP_BAND: float = 0.15
FOLDER_BOTTOM_BAND: float = 0.85
FOLDER_INSIDE_X: float = 0.45
