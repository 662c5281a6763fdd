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

import dataclasses
import math
import gearprofiles.curve as crv
from gearprofiles.defs import *
from gearprofiles.coordinates import Coordinate
from gearprofiles.function_generators import (
    circle_centres,
    circle_line_intersection,
    circle_points,
    normalise_angle,
    point_in_circle,
)


@dataclasses.dataclass(frozen=True)
class CutterRootData:
    """Root of a tooth gap as the cutter actually leaves it.

    Attributes
    ----------
    points : tuple of Coordinate
        Root outline from the gap centre line up to the end of the flank
        segment that was passed in.
    dedendum_radius : float
        Distance from the gear center to the deepest point of the cut.
    cutter_centre : Coordinate
    """

    points: tuple
    dedendum_radius: float
    cutter_centre: Coordinate


def cutter_centre_below(p1: Coordinate, p2: Coordinate, radius: float) -> Coordinate:
    """Centre of the cutter touching both points from the empty side of a
    lower tooth flank, which is the one with the lower Y value."""
    return min(circle_centres(p1, p2, radius), key=lambda c: c.y)


def last_reachable_index(points, cutter_radius: float) -> int:
    """Walk a root curve from the bottom of the gap upwards.

    For each pair of points the cutter circle through them is found; while
    the next point lies inside that circle the curve is tighter than the
    cutter. Returns the index of the first pair whose successor is outside,
    0 when the cutter follows the whole curve.
    """
    for i in range(len(points) - 2):
        centre = cutter_centre_below(points[i], points[i + 1], cutter_radius)
        if not point_in_circle(points[i + 2], centre, cutter_radius):
            return i
    return max(len(points) - 3, 0)


def _sweep_through(a_start: float, a_end: float, a_via: float) -> float:
    """Signed sweep from a_start to a_end that passes a_via."""
    sweep = normalise_angle(a_end - a_start)
    if normalise_angle(a_via - a_start) > sweep:
        sweep -= 2 * PI
    return sweep


def compensate_root(
    points,
    cutter_radius: float,
    gap_angle: float,
    angle_step: float,
):
    """Replace the part of a lower flank root that the cutter cannot reach.

    Parameters
    ----------
    points : list of Coordinate
        The root curve of a lower flank (gap below), ordered from the bottom
        of the gap towards the flank.
    cutter_radius : float
        Radius of the end mill.
    gap_angle : float
        Polar angle of the gap centre line, the root is mirrored there.
    angle_step : float
        Angular sampling of the generated arcs.

    Returns
    -------
    CutterRootData or None
        None if the cutter follows the whole curve.
    """
    if cutter_radius <= 0 or len(points) < 3:
        return None
    k = last_reachable_index(points, cutter_radius)
    if k == 0:
        return None
    centre = cutter_centre_below(points[k], points[k + 1], cutter_radius)
    dedendum_radius = centre.magnitude - cutter_radius

    # the arc starts at the deepest point of the cutter, or where it
    # crosses the gap centre line if the cutter reaches past it
    start = Coordinate.from_polar(dedendum_radius, centre.phase)
    root_arc = []
    if centre.phase < gap_angle:
        crossings = circle_line_intersection(
            math.tan(gap_angle), 0.0, centre, cutter_radius
        )
        crossings = [p for p in crossings if p.x > 0]
        if crossings:
            start = min(crossings, key=lambda p: p.magnitude)
    else:
        root_arc = circle_points(gap_angle, centre.phase, angle_step, dedendum_radius)[
            :-1
        ]

    a_start = (start - centre).phase
    a_end = (points[k + 1] - centre).phase
    a_via = (points[k] - centre).phase
    sweep = _sweep_through(a_start, a_end, a_via)
    arc = crv.CircularArc(
        centre, cutter_radius, a_start, a_start + sweep, anticlockwise=sweep >= 0
    )
    cut = arc.points(angle_step)[:-1]
    return CutterRootData(
        points=tuple(root_arc + cut + list(points[k + 1 :])),
        dedendum_radius=dedendum_radius,
        cutter_centre=centre,
    )


def root_fillet(
    flank_angle: float,
    dedendum_radius: float,
    cutter_radius: float,
    gap_angle: float,
    angle_step: float,
):
    """Fillet left by the cutter between a radial lower flank and the
    dedendum circle.

    Returns the fillet points from the dedendum circle to the flank and the
    radius at which the fillet meets the flank, or None if the cutter does
    not fit between the flank and the gap centre line.
    """
    centre_distance = dedendum_radius + cutter_radius
    centre_angle = flank_angle - math.asin(cutter_radius / centre_distance)
    if centre_angle < gap_angle:
        return None
    centre = Coordinate.from_polar(centre_distance, centre_angle)
    flank_radius = math.sqrt(centre_distance**2 - cutter_radius**2)
    # from pointing at the gear center, turn clockwise until square to the flank
    a_start = centre_angle + PI
    sweep = flank_angle + PI / 2 - a_start
    arc = crv.CircularArc(
        centre, cutter_radius, a_start, a_start + sweep, anticlockwise=sweep >= 0
    )
    return arc.points(angle_step), flank_radius
