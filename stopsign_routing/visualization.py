"""Drawing and console output for detections and routes."""

from typing import List, Sequence

import cv2
import numpy as np

from .detectors.base import Detection
from .route import RouteNode


BOX_COLOR = (0, 255, 0)       # BGR green
POLYGON_COLOR = (255, 0, 0)   # BGR blue


def draw_detections(image: np.ndarray, detections: Sequence[Detection]) -> np.ndarray:
    """Return a copy of `image` with boxes and outlines drawn on it."""
    vis = image.copy()
    for sign in detections:
        b = sign.bounding_box
        cv2.rectangle(vis, (b.x, b.y), (b.x + b.width, b.y + b.height), BOX_COLOR, 3)
        cv2.polylines(vis, [sign.as_contour()], True, POLYGON_COLOR, 2)
    return vis


def format_route(route: Sequence[RouteNode]) -> List[str]:
    lines = ["Route:"]
    for i, node in enumerate(route):
        lines.append(
            f" Node {i}: (x={node.x:g}, y={node.y:g}), "
            f"hasStop={'true' if node.has_stop else 'false'}"
        )
    return lines
