from __future__ import annotations

import math
import os
import tempfile
import unittest

from stopsign_routing.config import MatchingConfig
from stopsign_routing.detectors.base import BoundingBox, Detection
from stopsign_routing.route import (
    RouteAnnotator,
    RouteNode,
    distance_to_sign,
    load_route,
    save_route,
    update_route_with_stop_signs,
)

SAMPLE_ROUTE = os.path.join(os.path.dirname(__file__), os.pardir, "config", "sample_route.yaml")


def sign_at(x: int, y: int) -> Detection:
    return Detection(
        bounding_box=BoundingBox(x=x, y=y, width=40, height=40),
        polygon=((x + 12, y), (x + 28, y), (x + 40, y + 12), (x + 40, y + 28),
                 (x + 28, y + 40), (x + 12, y + 40), (x, y + 28), (x, y + 12)),
    )


def sample_route() -> list:
    return [RouteNode(100.0, 150.0), RouteNode(200.0, 250.0), RouteNode(300.0, 350.0)]


class TestRouteAnnotator(unittest.TestCase):
    def test_scenario_marks_only_nearby_node(self) -> None:
        route = sample_route()
        sign = sign_at(110, 160)

        self.assertAlmostEqual(distance_to_sign(route[0], sign), math.hypot(10, 10))
        result = RouteAnnotator().annotate(route, [sign])

        self.assertIs(result, route)
        self.assertEqual([n.has_stop for n in route], [True, False, False])

    def test_threshold_is_strict(self) -> None:
        sign = sign_at(0, 0)
        route = [RouteNode(49.9, 0.0), RouteNode(50.0, 0.0), RouteNode(50.1, 0.0)]

        update_route_with_stop_signs(route, [sign])

        self.assertEqual([n.has_stop for n in route], [True, False, False])

    def test_threshold_is_configurable(self) -> None:
        route = sample_route()
        RouteAnnotator(MatchingConfig(proximity_threshold=130.0)).annotate(route, [sign_at(110, 160)])
        self.assertEqual([n.has_stop for n in route], [True, True, False])

    def test_annotation_is_idempotent(self) -> None:
        signs = [sign_at(110, 160), sign_at(305, 340)]
        once = sample_route()
        twice = sample_route()
        annotator = RouteAnnotator()

        annotator.annotate(once, signs)
        annotator.annotate(twice, signs)
        annotator.annotate(twice, signs)

        self.assertEqual(once, twice)
        self.assertEqual([n.has_stop for n in once], [True, False, True])

    def test_flags_are_never_cleared(self) -> None:
        route = sample_route()
        route[1].has_stop = True

        RouteAnnotator().annotate(route, [sign_at(110, 160)])
        RouteAnnotator().annotate(route, [])

        self.assertEqual([n.has_stop for n in route], [True, True, False])

    def test_empty_inputs_are_noops(self) -> None:
        route = sample_route()
        RouteAnnotator().annotate(route, [])
        self.assertEqual([n.has_stop for n in route], [False, False, False])
        self.assertEqual(RouteAnnotator().annotate([], [sign_at(0, 0)]), [])

    def test_route_order_and_identity_preserved(self) -> None:
        route = sample_route()
        nodes = list(route)
        RouteAnnotator().annotate(route, [sign_at(300, 350), sign_at(100, 150)])
        self.assertEqual(len(route), 3)
        for a, b in zip(route, nodes):
            self.assertIs(a, b)

    def test_non_finite_nodes_do_not_match(self) -> None:
        route = [RouteNode(float("nan"), 0.0), RouteNode(0.0, float("inf")), RouteNode(5.0, 5.0)]

        with self.assertLogs("stopsign_routing.route", level="WARNING"):
            RouteAnnotator().annotate(route, [sign_at(0, 0)])

        self.assertEqual([n.has_stop for n in route], [False, False, True])


class TestRouteFiles(unittest.TestCase):
    def test_load_sample_route(self) -> None:
        route = load_route(SAMPLE_ROUTE)
        self.assertEqual(route, sample_route())

    def test_missing_route_file_gives_empty_route(self) -> None:
        with self.assertLogs("stopsign_routing.route", level="WARNING"):
            self.assertEqual(load_route("/nonexistent/route.yaml"), [])

    def test_empty_nodes_section_gives_empty_route(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "route.yaml")
            with open(path, "w") as f:
                f.write("nodes:\n")
            self.assertEqual(load_route(path), [])

    def test_non_mapping_route_file_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "route.yaml")
            with open(path, "w") as f:
                f.write("- {x: 1.0, y: 2.0}\n")
            with self.assertRaises(ValueError):
                load_route(path)

    def test_save_then_load(self) -> None:
        route = sample_route()
        route[2].has_stop = True
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "route.yaml")
            save_route(route, path)
            self.assertEqual(load_route(path), route)


if __name__ == "__main__":
    unittest.main()
