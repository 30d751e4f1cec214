"""Detector base protocol and shared data types."""

from dataclasses import dataclass
from typing import List, Protocol, Tuple

import numpy as np


Point = Tuple[int, int]


class InvalidImage(ValueError):
    """Raised when a detector is handed an empty or malformed image."""


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle, top-left origin, pixel units."""
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Detection:
    """Single detected sign."""
    bounding_box: BoundingBox
    polygon: Tuple[Point, ...]        # approximated outline, image coordinates

    def __post_init__(self):
        if len(self.polygon) < 3:
            raise ValueError(
                f"Detection polygon needs at least 3 points, got {len(self.polygon)}"
            )

    def as_contour(self) -> np.ndarray:
        """Polygon as an OpenCV contour array (N, 1, 2), int32."""
        return np.array(self.polygon, dtype=np.int32).reshape(-1, 1, 2)


class DetectorBase(Protocol):
    """
    Interface that all detectors must implement.

    To add a new detector:
      1. Create stopsign_routing/detectors/<name>_detector.py
      2. Implement the detect() method
      3. Register it in stopsign_routing/detectors/__init__.py DETECTORS dict
    """

    def detect(self, color_image: np.ndarray) -> List[Detection]:
        """
        Run detection on a color image (BGR, uint8).

        Returns list of Detection objects (may be empty).
        """
        ...
