"""
Copyright 2024 Gergely Bencsik
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at
    http://www.apache.org/licenses/LICENSE-2.0
Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import dataclasses
import math
import numpy as np
from gearprofiles.defs import *
from gearprofiles.coordinates import Coordinate, Rectangle, BoundsTracker
from gearprofiles.function_generators import (
    array_to_points,
    bezier,
    normalise_angle,
    points_to_array,
)


class Curve:
    """
    Base of the drawable curve segments.

    Every segment has a start and an end point, bounds, and transforms that
    return a new segment of the same kind. Segments are immutable.
    """

    @property
    def start(self) -> Coordinate:
        raise NotImplementedError

    @property
    def end(self) -> Coordinate:
        raise NotImplementedError

    @property
    def bounds(self) -> Rectangle:
        tracker = BoundsTracker()
        tracker.track_all(self._bounding_points())
        return tracker.bounds

    def _bounding_points(self):
        return [self.start, self.end]

    def points(self, angle_step: float = DEFAULT_RESOLUTION.angle_step):
        """Sample the segment into Coordinates, first and last point
        exactly at start and end."""
        return [self.start, self.end]

    def reversed(self) -> "Curve":
        raise NotImplementedError

    def reflect_y(self) -> "Curve":
        raise NotImplementedError

    def rotated_by(self, phi: float, pivot: Coordinate = Coordinate()) -> "Curve":
        raise NotImplementedError

    def translated(self, offset: Coordinate) -> "Curve":
        raise NotImplementedError


@dataclasses.dataclass(frozen=True)
class Line(Curve):
    p0: Coordinate = Coordinate()
    p1: Coordinate = Coordinate(1, 0)

    @property
    def start(self):
        return self.p0

    @property
    def end(self):
        return self.p1

    def reversed(self):
        return Line(self.p1, self.p0)

    def reflect_y(self):
        return Line(self.p0.conjugate, self.p1.conjugate)

    def rotated_by(self, phi, pivot=Coordinate()):
        return Line(self.p0.rotate_about(pivot, phi), self.p1.rotate_about(pivot, phi))

    def translated(self, offset):
        return Line(self.p0 + offset, self.p1 + offset)


@dataclasses.dataclass(frozen=True)
class CircularArc(Curve):
    """Arc of a circle. Start and end points are derived from the centre,
    radius and angles, so they can never get out of step with them."""

    centre: Coordinate = Coordinate()
    radius: float = 1.0
    start_angle: float = 0.0
    end_angle: float = PI / 2
    anticlockwise: bool = True

    @classmethod
    def circle(cls, radius: float, centre: Coordinate = Coordinate()):
        """Full circle as a closed path of two arcs."""
        return DrawablePath(
            (
                cls(centre, radius, 0, PI),
                cls(centre, radius, PI, 2 * PI),
            ),
            closed=True,
        )

    @property
    def start(self):
        return self.centre + Coordinate.from_polar(self.radius, self.start_angle)

    @property
    def end(self):
        return self.centre + Coordinate.from_polar(self.radius, self.end_angle)

    @property
    def sweep(self) -> float:
        """Signed angle travelled from start to end."""
        if self.anticlockwise:
            return normalise_angle(self.end_angle - self.start_angle)
        return -normalise_angle(self.start_angle - self.end_angle)

    def _bounding_points(self):
        result = [self.start, self.end]
        sweep = self.sweep
        for k in range(4):
            axis_angle = k * PI / 2
            if sweep >= 0:
                offset = normalise_angle(axis_angle - self.start_angle)
            else:
                offset = normalise_angle(self.start_angle - axis_angle)
            if offset < abs(sweep):
                result.append(
                    self.centre + Coordinate.from_polar(self.radius, axis_angle)
                )
        return result

    def points(self, angle_step=DEFAULT_RESOLUTION.angle_step):
        sweep = self.sweep
        n = max(int(np.ceil(abs(sweep) / angle_step)), 1)
        angles = self.start_angle + np.linspace(0, sweep, n + 1)
        arr = np.stack([np.cos(angles), np.sin(angles)], axis=-1) * self.radius
        result = array_to_points(arr[1:-1] + self.centre.as_array())
        return [self.start] + result + [self.end]

    def reversed(self):
        return CircularArc(
            self.centre,
            self.radius,
            self.end_angle,
            self.start_angle,
            not self.anticlockwise,
        )

    def reflect_y(self):
        return CircularArc(
            self.centre.conjugate,
            self.radius,
            -self.start_angle,
            -self.end_angle,
            not self.anticlockwise,
        )

    def rotated_by(self, phi, pivot=Coordinate()):
        return CircularArc(
            self.centre.rotate_about(pivot, phi),
            self.radius,
            self.start_angle + phi,
            self.end_angle + phi,
            self.anticlockwise,
        )

    def translated(self, offset):
        return dataclasses.replace(self, centre=self.centre + offset)


@dataclasses.dataclass(frozen=True)
class PolyLine(Curve):
    vertices: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "vertices", tuple(self.vertices))
        if len(self.vertices) < 2:
            raise ValueError("A polyline needs at least two vertices")

    @property
    def start(self):
        return self.vertices[0]

    @property
    def end(self):
        return self.vertices[-1]

    def _bounding_points(self):
        return list(self.vertices)

    def points(self, angle_step=DEFAULT_RESOLUTION.angle_step):
        return list(self.vertices)

    def reversed(self):
        return PolyLine(self.vertices[::-1])

    def reflect_y(self):
        return PolyLine(p.conjugate for p in self.vertices)

    def rotated_by(self, phi, pivot=Coordinate()):
        return PolyLine(p.rotate_about(pivot, phi) for p in self.vertices)

    def translated(self, offset):
        return PolyLine(p + offset for p in self.vertices)


@dataclasses.dataclass(frozen=True)
class _Spline(Curve):
    control_points: tuple = ()
    # number of sampling intervals used by points()
    samples: int = 16

    _degree = 0

    def __post_init__(self):
        object.__setattr__(self, "control_points", tuple(self.control_points))
        if len(self.control_points) != self._degree + 1:
            raise ValueError(
                f"{type(self).__name__} needs {self._degree + 1} control points"
            )

    @property
    def start(self):
        return self.control_points[0]

    @property
    def end(self):
        return self.control_points[-1]

    def _bounding_points(self):
        # one de Casteljau subdivision at t=0.5, the control polygons
        # of the two halves enclose the curve
        left = [self.control_points[0]]
        right = [self.control_points[-1]]
        pts = list(self.control_points)
        while len(pts) > 1:
            pts = [
                Coordinate((a.x + b.x) / 2, (a.y + b.y) / 2)
                for a, b in zip(pts[:-1], pts[1:])
            ]
            left.append(pts[0])
            right.append(pts[-1])
        return left + right

    def points(self, angle_step=DEFAULT_RESOLUTION.angle_step):
        t = np.linspace(0, 1, self.samples + 1)[1:-1]
        inner = array_to_points(bezier(t, points_to_array(self.control_points)))
        return [self.start] + inner + [self.end]

    def _with_points(self, points):
        return dataclasses.replace(self, control_points=tuple(points))

    def reversed(self):
        return self._with_points(self.control_points[::-1])

    def reflect_y(self):
        return self._with_points(p.conjugate for p in self.control_points)

    def rotated_by(self, phi, pivot=Coordinate()):
        return self._with_points(p.rotate_about(pivot, phi) for p in self.control_points)

    def translated(self, offset):
        return self._with_points(p + offset for p in self.control_points)


@dataclasses.dataclass(frozen=True)
class QuadraticSpline(_Spline):
    _degree = 2


@dataclasses.dataclass(frozen=True)
class CubicSpline(_Spline):
    _degree = 3


@dataclasses.dataclass(frozen=True)
class DrawablePath:
    """Ordered curve segments, the end of each segment being the start of
    the next one."""

    curves: tuple = ()
    closed: bool = False

    def __post_init__(self):
        object.__setattr__(self, "curves", tuple(self.curves))

    def __len__(self):
        return len(self.curves)

    def __iter__(self):
        return iter(self.curves)

    def __getitem__(self, index):
        return self.curves[index]

    @property
    def start(self) -> Coordinate:
        return self.curves[0].start

    @property
    def end(self) -> Coordinate:
        return self.curves[-1].end

    @property
    def bounds(self) -> Rectangle:
        tracker = BoundsTracker()
        for c in self.curves:
            tracker.track_rectangle(c.bounds)
        return tracker.bounds

    def is_contiguous(self, tolerance: float = DELTA) -> bool:
        """Check that consecutive segments join up, and that a closed
        path ends where it starts."""
        pairs = list(zip(self.curves[:-1], self.curves[1:]))
        if self.closed and self.curves:
            pairs.append((self.curves[-1], self.curves[0]))
        return all(a.end.distance(b.start) <= tolerance for a, b in pairs)

    def points(self, angle_step: float = DEFAULT_RESOLUTION.angle_step):
        """Sampled points with each joint emitted once. A closed path does
        not repeat its first point at the end."""
        result = []
        for c in self.curves:
            pts = c.points(angle_step)
            if result and result[-1].distance(pts[0]) <= DELTA:
                pts = pts[1:]
            result.extend(pts)
        if self.closed and len(result) > 1 and result[-1].distance(result[0]) <= DELTA:
            result.pop()
        return result

    def _map(self, func):
        return DrawablePath(tuple(func(c) for c in self.curves), self.closed)

    def reversed(self):
        return DrawablePath(tuple(c.reversed() for c in self.curves[::-1]), self.closed)

    def reflect_y(self):
        return self._map(lambda c: c.reflect_y())

    def rotated_by(self, phi, pivot=Coordinate()):
        return self._map(lambda c: c.rotated_by(phi, pivot))

    def translated(self, offset):
        return self._map(lambda c: c.translated(offset))


@dataclasses.dataclass(frozen=True)
class DrawableSet:
    paths: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "paths", tuple(self.paths))

    def __len__(self):
        return len(self.paths)

    def __iter__(self):
        return iter(self.paths)

    def __add__(self, other: "DrawableSet") -> "DrawableSet":
        return DrawableSet(self.paths + other.paths)

    @property
    def bounds(self) -> Rectangle:
        tracker = BoundsTracker()
        for p in self.paths:
            if len(p):
                tracker.track_rectangle(p.bounds)
        return tracker.bounds

    def rotated_by(self, phi, pivot=Coordinate()):
        return DrawableSet(p.rotated_by(phi, pivot) for p in self.paths)

    def translated(self, offset):
        return DrawableSet(p.translated(offset) for p in self.paths)
