"""
Persistence for layout state that survives between passes.

Stores manually placed node positions per viewer, and the viewer's layout
preferences, as small JSON files in a directory. Stored data is untrusted:
anything that does not look like a valid position or preference is dropped
on load instead of failing the layout pass.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Optional

from .config import LayoutConfig
from .models import Position

logger = logging.getLogger(__name__)

NODE_POSITIONS_KEY = "graph-node-positions"
LAYOUT_DIRECTION_KEY = "graph-layout-direction"
EDGE_STYLE_KEY = "graph-edge-style"
TIER_SPACING_KEY = "graph-tier-spacing"
LATENCY_THRESHOLD_KEY = "graph-latency-threshold"

NodePositions = Dict[str, Position]


def _is_coordinate(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


class LayoutStorage:
    """
    File-backed store for node positions and layout preferences.

    Attributes:
        directory: Directory holding one JSON file per key.
    """

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def _read(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable layout data in %s", path)
            return None

    def _write(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(json.dumps(value), encoding="utf-8")

    # -- node positions -----------------------------------------------------

    def save_node_positions(self, viewer_id: str, positions: NodePositions) -> None:
        """Persist positions of manually moved nodes for a viewer."""
        self._write(
            f"{NODE_POSITIONS_KEY}-{viewer_id}",
            {node_id: {"x": p.x, "y": p.y} for node_id, p in positions.items()},
        )

    def load_node_positions(self, viewer_id: str) -> NodePositions:
        """
        Load stored positions for a viewer.

        Entries without finite numeric x and y are skipped. Missing, corrupt
        or non-object data loads as an empty mapping.
        """
        raw = self._read(f"{NODE_POSITIONS_KEY}-{viewer_id}")
        if not isinstance(raw, dict):
            return {}

        positions: NodePositions = {}
        for node_id, value in raw.items():
            if not isinstance(value, dict):
                continue
            x, y = value.get("x"), value.get("y")
            if _is_coordinate(x) and _is_coordinate(y):
                positions[node_id] = Position(x, y)
        return positions

    def clear_node_positions(self, viewer_id: str) -> None:
        """Remove stored positions for a viewer. Safe to call when none exist."""
        self._path(f"{NODE_POSITIONS_KEY}-{viewer_id}").unlink(missing_ok=True)

    # -- preferences ----------------------------------------------------------

    def save_preferences(self, config: LayoutConfig) -> None:
        """Persist direction, edge style, tier spacing and latency threshold."""
        self._write(LAYOUT_DIRECTION_KEY, config.direction.value)
        self._write(EDGE_STYLE_KEY, config.edge_style.value)
        self._write(TIER_SPACING_KEY, config.tier_spacing)
        self._write(LATENCY_THRESHOLD_KEY, config.latency_threshold)

    def load_preferences(self) -> LayoutConfig:
        """
        Load stored preferences into a LayoutConfig.

        Values that are missing or invalid fall back to the defaults.
        """
        settings: Dict[str, Any] = {}

        direction = self._read(LAYOUT_DIRECTION_KEY)
        if direction in ("TB", "LR"):
            settings["direction"] = direction

        edge_style = self._read(EDGE_STYLE_KEY)
        if edge_style in ("orthogonal", "bezier"):
            settings["edge_style"] = edge_style

        tier_spacing = self._read(TIER_SPACING_KEY)
        if _is_coordinate(tier_spacing):
            settings["tier_spacing"] = tier_spacing

        threshold = self._read(LATENCY_THRESHOLD_KEY)
        if _is_coordinate(threshold):
            settings["latency_threshold"] = threshold

        # LayoutConfig clamps out-of-range spacing and thresholds
        return LayoutConfig(**settings)
