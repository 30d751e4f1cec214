#!/usr/bin/env python3
"""
Detect stop signs in an image and flag nearby route nodes.

Usage:
  detect-stop-signs --image stop_sign_sample.jpg --route config/sample_route.yaml --show

Prints the annotated route. With --show, displays the detections until a
key is pressed; with --output, writes the annotated image to disk.
"""

import argparse
import logging
import os
import sys

import cv2

from stopsign_routing.config import load_config
from stopsign_routing.pipeline import process_image
from stopsign_routing.route import load_route
from stopsign_routing.visualization import draw_detections, format_route


logger = logging.getLogger("stopsign_routing.detect_stop_signs")

_WIN = "Stop Sign Detection"
_SAMPLE_ROUTE = "sample_route.yaml"


def default_route_path(cwd=None, prefix=None) -> str:
    """Sample route from ./config if present, else from the installed share directory."""
    local = os.path.join(cwd or os.getcwd(), "config", _SAMPLE_ROUTE)
    if os.path.exists(local):
        return local
    return os.path.join(prefix or sys.prefix, "share", "stopsign_routing", "config", _SAMPLE_ROUTE)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Stop sign detection with route annotation")
    parser.add_argument("--image", required=True, help="Input image path")
    parser.add_argument("--config", default=None, help="Detector/matching YAML config")
    parser.add_argument("--route", default=None, help="Route YAML (default: bundled sample route)")
    parser.add_argument("--output", default=None, help="Save annotated image here")
    parser.add_argument("--show", action="store_true", help="Display the annotated image")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='[%(name)s] %(levelname)s: %(message)s',
    )

    frame = cv2.imread(args.image)
    if frame is None:
        logger.error(f"Error loading image {args.image}. Make sure the image path is correct.")
        raise SystemExit(1)

    config = load_config(args.config)
    route = load_route(args.route or default_route_path())

    signs = process_image(frame, route, config)
    logger.info(f"Detected {len(signs)} stop sign(s)")

    print("\n".join(format_route(route)))

    if args.output or args.show:
        vis = draw_detections(frame, signs)
        if args.output:
            cv2.imwrite(args.output, vis)
            logger.info(f"Saved annotated image to {args.output}")
        if args.show:
            cv2.imshow(_WIN, vis)
            cv2.waitKey(0)
            cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
