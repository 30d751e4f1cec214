"""
HSV color + shape based stop sign detector.

Thresholds red in HSV, cleans the mask with an opening, finds external
contours and keeps those whose approximated polygon is a large octagon.
Each stage is a plain function so it can be exercised on its own.
"""

import logging
from typing import List, Optional, Sequence

import cv2
import numpy as np

from ..config import DetectorConfig, HSVRange
from .base import BoundingBox, Detection, InvalidImage


logger = logging.getLogger(__name__)

OCTAGON_VERTICES = 8


def validate_image(image) -> None:
    """Reject anything that is not a non-empty 3-channel uint8 image."""
    if image is None:
        raise InvalidImage("No image given")
    if not isinstance(image, np.ndarray):
        raise InvalidImage(f"Expected numpy array, got {type(image).__name__}")
    if image.size == 0:
        raise InvalidImage(f"Empty image, shape {image.shape}")
    if image.ndim != 3 or image.shape[2] != 3:
        raise InvalidImage(f"Expected (H, W, 3) BGR image, got shape {image.shape}")
    if image.dtype != np.uint8:
        raise InvalidImage(f"Expected uint8 image, got {image.dtype}")


def to_hsv(image: np.ndarray) -> np.ndarray:
    """BGR -> HSV (hue 0-179)."""
    return cv2.cvtColor(image, cv2.COLOR_BGR2HSV)


def red_mask(hsv: np.ndarray, ranges: Sequence[HSVRange]) -> np.ndarray:
    """OR of one inRange mask per HSV band, 0/255 uint8."""
    mask = np.zeros(hsv.shape[:2], dtype=np.uint8)
    for r in ranges:
        band = cv2.inRange(hsv, np.array(r.low), np.array(r.high))
        mask = cv2.bitwise_or(mask, band)
    return mask


def clean_mask(mask: np.ndarray, kernel_size: int = 3, iterations: int = 2) -> np.ndarray:
    """Erode then dilate to drop specks without changing blob scale."""
    kernel = np.ones((kernel_size, kernel_size), np.uint8)
    mask = cv2.erode(mask, kernel, iterations=iterations)
    return cv2.dilate(mask, kernel, iterations=iterations)


def find_external_contours(mask: np.ndarray) -> List[np.ndarray]:
    """Outermost contours only; holes and nested blobs are ignored."""
    contours, _ = cv2.findContours(
        mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE
    )
    return list(contours)


def approximate_polygon(contour: np.ndarray, epsilon_ratio: float = 0.02) -> np.ndarray:
    """Douglas-Peucker with tolerance proportional to the closed perimeter."""
    perimeter = cv2.arcLength(contour, True)
    return cv2.approxPolyDP(contour, epsilon_ratio * perimeter, True)


def is_stop_sign_shape(polygon: np.ndarray, min_area: float = 1000.0) -> bool:
    """Octagon with area strictly above min_area."""
    if len(polygon) != OCTAGON_VERTICES:
        return False
    return cv2.contourArea(polygon) > min_area


def to_detection(polygon: np.ndarray) -> Detection:
    x, y, w, h = cv2.boundingRect(polygon)
    points = tuple((int(p[0]), int(p[1])) for p in polygon.reshape(-1, 2))
    return Detection(
        bounding_box=BoundingBox(x=int(x), y=int(y), width=int(w), height=int(h)),
        polygon=points,
    )


class StopSignDetector:
    """
    Detects red octagons in a BGR image.

    Holds only its configuration, so one instance can be reused across
    images. Detections come back in contour discovery order, which is
    stable for a given image and configuration.
    """

    def __init__(self, config: Optional[DetectorConfig] = None):
        self.config = config or DetectorConfig()

    def build_mask(self, color_image: np.ndarray) -> np.ndarray:
        """Cleaned binary red mask for a validated image."""
        hsv = to_hsv(color_image)
        mask = red_mask(hsv, self.config.red_ranges)
        return clean_mask(
            mask, self.config.morph_kernel_size, self.config.morph_iterations
        )

    def detect(self, color_image: np.ndarray) -> List[Detection]:
        """Detect stop signs in a BGR image."""
        validate_image(color_image)

        mask = self.build_mask(color_image)
        contours = find_external_contours(mask)

        detections = []
        for idx, cnt in enumerate(contours):
            approx = approximate_polygon(cnt, self.config.epsilon_ratio)
            if not is_stop_sign_shape(approx, self.config.min_area):
                logger.debug(
                    f"Contour {idx} rejected: {len(approx)} vertices, "
                    f"area {cv2.contourArea(approx):.1f}"
                )
                continue
            detections.append(to_detection(approx))

        logger.debug(f"{len(detections)} of {len(contours)} contours accepted")
        return detections
