"""
Route nodes and stop sign association.

Detections are matched to route nodes by the distance between the node
position and the detection's bounding-box origin. Both are taken to be in
the same coordinate frame; no image-to-map transform is applied.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

import yaml

from .config import MatchingConfig
from .detectors.base import Detection


logger = logging.getLogger(__name__)


@dataclass
class RouteNode:
    """Point on the route, e.g. an intersection."""
    x: float
    y: float
    has_stop: bool = False


def distance_to_sign(node: RouteNode, detection: Detection) -> float:
    """Euclidean distance from the node to the detection's top-left corner."""
    dx = node.x - float(detection.bounding_box.x)
    dy = node.y - float(detection.bounding_box.y)
    return math.hypot(dx, dy)


class RouteAnnotator:
    """
    Flags route nodes that lie near a detected stop sign.

    Flags only ever go False -> True, so annotating twice with the same
    detections gives the same result as annotating once.
    """

    def __init__(self, config: Optional[MatchingConfig] = None):
        self.config = config or MatchingConfig()

    def annotate(
        self, route: List[RouteNode], detections: Sequence[Detection]
    ) -> List[RouteNode]:
        """Update has_stop in place and return the same list."""
        threshold = self.config.proximity_threshold
        newly_marked = 0

        for i, node in enumerate(route):
            if not (math.isfinite(node.x) and math.isfinite(node.y)):
                logger.warning(f"Node {i} has non-finite position ({node.x}, {node.y}), skipping")
                continue
            for sign in detections:
                if distance_to_sign(node, sign) < threshold:
                    if not node.has_stop:
                        newly_marked += 1
                    node.has_stop = True

        if newly_marked:
            logger.info(f"Marked {newly_marked} route node(s) as stop-controlled")
        return route


def update_route_with_stop_signs(
    route: List[RouteNode],
    detections: Sequence[Detection],
    config: Optional[MatchingConfig] = None,
) -> List[RouteNode]:
    """Convenience wrapper around RouteAnnotator.annotate."""
    return RouteAnnotator(config).annotate(route, detections)


def load_route(route_path: str) -> List[RouteNode]:
    """
    Load route nodes from YAML.

    Expected layout:
        nodes:
          - {x: 100.0, y: 150.0}
          - {x: 200.0, y: 250.0, has_stop: true}
    """
    path = Path(route_path)
    if not path.exists():
        logger.warning(f"{route_path} not found, using empty route")
        return []

    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{route_path}: expected a mapping with 'nodes', got {type(data).__name__}")

    return [
        RouteNode(
            x=float(n["x"]),
            y=float(n["y"]),
            has_stop=bool(n.get("has_stop", False)),
        )
        for n in data.get("nodes") or []
    ]


def save_route(route: Sequence[RouteNode], path: str) -> None:
    """Save route nodes to YAML."""
    data = {
        "nodes": [
            {"x": node.x, "y": node.y, "has_stop": node.has_stop}
            for node in route
        ]
    }
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
