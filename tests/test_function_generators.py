# Copyright 2024 Gergely Bencsik
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#     http://www.apache.org/licenses/LICENSE-2.0
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import math
import numpy as np
import pytest as pytest
from gearprofiles.defs import *
from gearprofiles.coordinates import Coordinate
import gearprofiles.function_generators as fg


def test_root_binary_search_sqrt2():
    root = fg.root_binary_search(lambda x: x * x - 2, 0.0, 2.0, 1e-9)
    assert root == pytest.approx(math.sqrt(2), abs=1e-9)


@pytest.mark.parametrize("delta", [0, -1e-3])
def test_root_binary_search_rejects_bad_delta(delta):
    with pytest.raises(ValueError):
        fg.root_binary_search(lambda x: x - 1, 0.0, 2.0, delta)


def test_root_binary_search_needs_sign_change():
    with pytest.raises(ValueError):
        fg.root_binary_search(lambda x: x * x + 1, -1.0, 1.0, 1e-6)


@pytest.mark.parametrize("start", [0.0, -1.3, 2.0])
@pytest.mark.parametrize("span", [0.05, 1.0, 3.7])
@pytest.mark.parametrize("step", [0.01, 0.3])
def test_circle_points_end_exactly(start, span, step):
    centre = Coordinate(1.5, -2.0)
    points = fg.circle_points(start, start + span, step, 2.5, centre)
    expected_end = centre + Coordinate.from_polar(2.5, start + span)
    assert tuple(points[-1]) == pytest.approx(tuple(expected_end))
    assert tuple(points[0]) == pytest.approx(
        tuple(centre + Coordinate.from_polar(2.5, start))
    )
    for p in points:
        assert p.distance(centre) == pytest.approx(2.5)
    # no gap larger than one step anywhere along the arc
    arr = fg.points_to_array(points)
    gaps = np.linalg.norm(np.diff(arr, axis=0), axis=1)
    assert np.all(gaps <= 2.5 * step + 1e-9)


def test_circle_points_counts():
    points = fg.circle_points(0, 1.0, 0.3, 2.0)
    assert len(points) == 5


@pytest.mark.parametrize("step,radius", [(0, 1), (-0.1, 1), (0.1, -1)])
def test_circle_points_rejects_degenerate(step, radius):
    with pytest.raises(ValueError):
        fg.circle_points(0, 1, step, radius)


def test_linear_reduction_corner():
    points = [Coordinate(i, 0) for i in range(11)] + [
        Coordinate(10, j) for j in range(1, 11)
    ]
    reduced = fg.linear_reduction(points, 0.01)
    assert reduced == [Coordinate(0, 0), Coordinate(10, 0), Coordinate(10, 10)]
    assert fg.linear_reduction(reduced, 0.01) == reduced


@pytest.mark.parametrize("max_error", [0.001, 0.01, 0.1])
def test_linear_reduction_deviation(max_error):
    points = fg.circle_points(0, 2.5, 0.002, 10.0)
    reduced = fg.linear_reduction(points, max_error)
    assert reduced[0] == points[0]
    assert reduced[-1] == points[-1]
    assert len(reduced) < len(points)
    indices = [points.index(p) for p in reduced]
    assert indices == sorted(indices)
    for i0, i1 in zip(indices[:-1], indices[1:]):
        for p in points[i0 + 1 : i1]:
            assert fg.perpendicular_distance(p, points[i0], points[i1]) <= max_error


def test_linear_reduction_short_lists():
    assert fg.linear_reduction([], 0.1) == []
    two = [Coordinate(0, 0), Coordinate(1, 1)]
    assert fg.linear_reduction(two, 0.1) == two


def test_closest_point_stops_at_first_minimum():
    xs = list(range(10, -1, -1))
    line = [Coordinate(x, 0.0) for x in xs]
    # separation dips to 0.5 at x=7, then rises before falling to zero
    ys = [3, 2, 1, 0.5, 1, 2, 0, 0, 0, 0, 0]
    other = [Coordinate(x, y) for x, y in zip(xs, ys)]
    p = fg.closest_point(line, other)
    assert p.x == pytest.approx(7)
    assert p.y == pytest.approx(0)


def test_intersection_of_crossing_lines():
    xs = np.linspace(4, 0, 9)
    rising = [Coordinate(x, x) for x in xs]
    falling = [Coordinate(x, 2 - x) for x in xs]
    p = fg.intersection(rising, falling)
    assert tuple(p) == pytest.approx((1, 1))


def test_circle_centres():
    c1, c2 = fg.circle_centres(Coordinate(0, 0), Coordinate(2, 0), math.sqrt(2))
    assert tuple(c1) == pytest.approx((1, -1))
    assert tuple(c2) == pytest.approx((1, 1))
    with pytest.raises(ValueError):
        fg.circle_centres(Coordinate(0, 0), Coordinate(5, 0), 1.0)
    with pytest.raises(ValueError):
        fg.circle_centres(Coordinate(1, 1), Coordinate(1, 1), 1.0)


def test_point_in_circle_is_strict():
    assert fg.point_in_circle(Coordinate(0.5, 0), Coordinate(), 1.0)
    assert not fg.point_in_circle(Coordinate(1, 0), Coordinate(), 1.0)


def test_circle_line_intersection():
    points = fg.circle_line_intersection(0.0, 1.0, Coordinate(), math.sqrt(2))
    assert [tuple(p) for p in points] == [
        pytest.approx((-1, 1)),
        pytest.approx((1, 1)),
    ]
    assert fg.circle_line_intersection(0.0, 5.0, Coordinate(), 1.0) == []


def test_line_intersection():
    assert tuple(fg.line_intersection(1, 0, -1, 2)) == pytest.approx((1, 1))
    assert fg.line_intersection(1, 0, 1, 2) is None


def test_segment_intersection():
    p = fg.segment_intersection(
        Coordinate(0, 0), Coordinate(2, 2), Coordinate(0, 2), Coordinate(2, 0)
    )
    assert tuple(p) == pytest.approx((1, 1))
    assert (
        fg.segment_intersection(
            Coordinate(0, 0), Coordinate(1, 1), Coordinate(3, 0), Coordinate(4, -1)
        )
        is None
    )


@pytest.mark.parametrize("radius", [5.0, 20.0])
@pytest.mark.parametrize("phi", [0.0, 0.3, 1.2])
def test_involute_radius(radius, phi):
    p = fg.involute_plus_offset(radius, 0, 0, phi)
    assert p.magnitude == pytest.approx(radius * math.sqrt(1 + phi * phi))


@pytest.mark.parametrize("radius,locus", [(10.0, 2.5), (5.0, 2.0)])
def test_epicycloid_apex(radius, locus):
    assert tuple(fg.epicycloid(radius, locus, 0)) == pytest.approx((radius, 0))
    apex = PI * locus / radius
    p = fg.epicycloid(radius, locus, apex)
    assert p.magnitude == pytest.approx(radius + 2 * locus)
    assert p.phase == pytest.approx(apex)


@pytest.mark.parametrize("phi", np.linspace(0, 1.5, 5))
def test_hypocycloid_half_radius_is_straight(phi):
    p = fg.hypocycloid(10.0, 5.0, phi)
    assert p.y == pytest.approx(0, abs=1e-12)
    assert p.x == pytest.approx(10 * math.cos(phi))


def test_rotate_points():
    points = fg.rotate_points([Coordinate(1, 0), Coordinate(0, 2)], PI / 2)
    assert tuple(points[0]) == pytest.approx((0, 1), abs=1e-12)
    assert tuple(points[1]) == pytest.approx((-2, 0), abs=1e-12)
    assert fg.rotate_points([], 1.0) == []


@pytest.mark.parametrize("angle,expected", [(-PI / 2, 1.5 * PI), (5 * PI, PI), (0.5, 0.5)])
def test_normalise_angle(angle, expected):
    assert fg.normalise_angle(angle) == pytest.approx(expected)


def test_interpolate_extrapolates():
    xp = np.array([0.0, 1.0, 2.0])
    fp = np.array([0.0, 2.0, 3.0])
    y = fg.interpolate([-1.0, 0.5, 3.0], xp, fp)
    assert y == pytest.approx([-2.0, 1.0, 4.0])


def test_bezier_end_points():
    control = np.array([[0.0, 0.0], [1.0, 2.0], [3.0, 2.0], [4.0, 0.0]])
    out = fg.bezier([0.0, 0.5, 1.0], control)
    assert out[0] == pytest.approx(control[0])
    assert out[-1] == pytest.approx(control[-1])
    assert out[1] == pytest.approx([2.0, 1.5])


@pytest.mark.parametrize("order", [3, 5])
def test_involute_bezier_points_follow_involute(order):
    module, teeth, pa = 1.0, 20, 20 * DEG2RAD
    control = fg.involute_bezier_points(module, teeth, pa, order, -1.0, 1.0)
    assert len(control) == order + 1
    base_radius = module * teeth / 2 * math.cos(pa)
    curve = fg.bezier(np.linspace(0, 1, 21), fg.points_to_array(control))
    for x, y in curve:
        r = math.hypot(x, y)
        # angle of the involute point at this radius
        phi = math.sqrt(max(r * r / base_radius**2 - 1, 0))
        expected = fg.involute_plus_offset(base_radius, 0, 0, phi)
        assert r == pytest.approx(expected.magnitude, rel=1e-3)
        assert math.atan2(y, x) == pytest.approx(expected.phase, abs=2e-3)
