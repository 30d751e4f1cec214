from .config import Config, DetectorConfig, HSVRange, MatchingConfig, load_config, save_config
from .detectors import BoundingBox, Detection, InvalidImage, StopSignDetector, create_detector
from .pipeline import process_image
from .route import (
    RouteAnnotator,
    RouteNode,
    load_route,
    save_route,
    update_route_with_stop_signs,
)
