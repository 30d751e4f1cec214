"""Single image -> detections -> annotated route."""

from typing import List, Optional

import numpy as np

from .config import Config
from .detectors import create_detector
from .detectors.base import Detection
from .route import RouteAnnotator, RouteNode


def process_image(
    image: np.ndarray,
    route: List[RouteNode],
    config: Optional[Config] = None,
) -> List[Detection]:
    """
    Detect stop signs in `image` and flag nearby nodes of `route` in place.

    Raises InvalidImage before touching the route if the image is unusable.
    """
    config = config or Config()
    detector = create_detector("stop_sign", config=config.detector)
    detections = detector.detect(image)
    RouteAnnotator(config.matching).annotate(route, detections)
    return detections
