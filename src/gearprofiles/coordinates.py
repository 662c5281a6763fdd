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
import numpy as np
from gearprofiles.defs import *


@dataclasses.dataclass(frozen=True)
class Coordinate:
    """Immutable 2D point in millimetres. Equality is exact."""

    x: float = 0.0
    y: float = 0.0

    def __post_init__(self):
        # numpy scalars from sampled parameters become plain floats
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    @classmethod
    def from_polar(cls, radius: float, angle: float) -> "Coordinate":
        return cls(radius * math.cos(angle), radius * math.sin(angle))

    @classmethod
    def from_array(cls, arr) -> "Coordinate":
        return cls(float(arr[0]), float(arr[1]))

    def as_array(self) -> np.ndarray:
        return np.array((self.x, self.y))

    def __iter__(self):
        yield self.x
        yield self.y

    def __add__(self, other: "Coordinate") -> "Coordinate":
        return Coordinate(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Coordinate") -> "Coordinate":
        return Coordinate(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Coordinate":
        return Coordinate(-self.x, -self.y)

    def __mul__(self, scale: float) -> "Coordinate":
        return Coordinate(self.x * scale, self.y * scale)

    __rmul__ = __mul__

    def __truediv__(self, scale: float) -> "Coordinate":
        return Coordinate(self.x / scale, self.y / scale)

    def offset(self, dx: float, dy: float) -> "Coordinate":
        return Coordinate(self.x + dx, self.y + dy)

    def scale(self, factor: float) -> "Coordinate":
        return Coordinate(self.x * factor, self.y * factor)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def phase(self) -> float:
        return math.atan2(self.y, self.x)

    @property
    def conjugate(self) -> "Coordinate":
        """Reflection in the X axis."""
        return Coordinate(self.x, -self.y)

    @property
    def gradient(self) -> float:
        """Slope of the line from the origin to this point."""
        if self.x == 0:
            return math.copysign(np.finfo(float).max, self.y)
        return self.y / self.x

    def distance(self, other: "Coordinate") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def rotate(self, angle: float) -> "Coordinate":
        c = math.cos(angle)
        s = math.sin(angle)
        return Coordinate(self.x * c - self.y * s, self.x * s + self.y * c)

    def rotate_about(self, pivot: "Coordinate", angle: float) -> "Coordinate":
        return (self - pivot).rotate(angle) + pivot


@dataclasses.dataclass(frozen=True)
class Angle:
    """Angle stored as a unit vector, so that composing rotations
    and reading trig ratios needs no further trig calls."""

    cos: float = 1.0
    sin: float = 0.0

    @classmethod
    def from_radians(cls, radians: float) -> "Angle":
        return cls(math.cos(radians), math.sin(radians))

    @classmethod
    def from_degrees(cls, degrees: float) -> "Angle":
        return cls.from_radians(degrees * DEG2RAD)

    @classmethod
    def atan(cls, im: float, re: float = 1.0) -> "Angle":
        length = math.hypot(im, re)
        if length == 0:
            raise ValueError("Angle of a zero length vector is undefined")
        return cls(re / length, im / length)

    @classmethod
    def acos(cls, value: float) -> "Angle":
        if value < -1 or value > 1:
            raise ValueError(f"acos argument out of range: {value}")
        return cls(value, math.sqrt(1 - value * value))

    @classmethod
    def asin(cls, value: float) -> "Angle":
        if value < -1 or value > 1:
            raise ValueError(f"asin argument out of range: {value}")
        return cls(math.sqrt(1 - value * value), value)

    @classmethod
    def acot(cls, value: float) -> "Angle":
        return cls.atan(1.0, value)

    @classmethod
    def asec(cls, value: float) -> "Angle":
        if value == 0:
            raise ValueError("asec argument must be non-zero")
        return cls.acos(1 / value)

    @classmethod
    def acosec(cls, value: float) -> "Angle":
        if value == 0:
            raise ValueError("acosec argument must be non-zero")
        return cls.asin(1 / value)

    @property
    def radians(self) -> float:
        return math.atan2(self.sin, self.cos)

    @property
    def degrees(self) -> float:
        return self.radians * RAD2DEG

    @property
    def tan(self) -> float:
        return self.sin / self.cos

    @property
    def cot(self) -> float:
        return self.cos / self.sin

    @property
    def sec(self) -> float:
        return 1 / self.cos

    @property
    def cosec(self) -> float:
        return 1 / self.sin

    def __neg__(self) -> "Angle":
        return Angle(self.cos, -self.sin)

    def __add__(self, other: "Angle") -> "Angle":
        return Angle(
            self.cos * other.cos - self.sin * other.sin,
            self.sin * other.cos + self.cos * other.sin,
        )

    def __sub__(self, other: "Angle") -> "Angle":
        return self + (-other)

    def rotate(self, point: Coordinate) -> Coordinate:
        return Coordinate(
            point.x * self.cos - point.y * self.sin,
            point.x * self.sin + point.y * self.cos,
        )


@dataclasses.dataclass(frozen=True)
class Rectangle:
    """Axis aligned rectangle. Location is the corner with the smallest
    coordinates, width and height are never negative."""

    location: Coordinate = Coordinate()
    width: float = 0.0
    height: float = 0.0

    def __post_init__(self):
        # normalise negative extents
        x, y = self.location.x, self.location.y
        w, h = self.width, self.height
        if w < 0:
            x, w = x + w, -w
        if h < 0:
            y, h = y + h, -h
        object.__setattr__(self, "location", Coordinate(x, y))
        object.__setattr__(self, "width", w)
        object.__setattr__(self, "height", h)

    @classmethod
    def from_corners(cls, p0: Coordinate, p1: Coordinate) -> "Rectangle":
        return cls(p0, p1.x - p0.x, p1.y - p0.y)

    @property
    def left(self) -> float:
        return self.location.x

    @property
    def right(self) -> float:
        return self.location.x + self.width

    @property
    def bottom(self) -> float:
        return self.location.y

    @property
    def top(self) -> float:
        return self.location.y + self.height

    def union(self, other: "Rectangle") -> "Rectangle":
        return Rectangle.from_corners(
            Coordinate(min(self.left, other.left), min(self.bottom, other.bottom)),
            Coordinate(max(self.right, other.right), max(self.top, other.top)),
        )

    def inflate(self, dx: float, dy: float) -> "Rectangle":
        return Rectangle(
            self.location.offset(-dx, -dy), self.width + 2 * dx, self.height + 2 * dy
        )

    def offset(self, dx: float, dy: float) -> "Rectangle":
        return Rectangle(self.location.offset(dx, dy), self.width, self.height)

    def surrounds(self, point: Coordinate) -> bool:
        return (
            self.left <= point.x <= self.right and self.bottom <= point.y <= self.top
        )


class BoundsTracker:
    """Accumulates the bounding rectangle of points and rectangles."""

    def __init__(self):
        self.min_x = math.inf
        self.min_y = math.inf
        self.max_x = -math.inf
        self.max_y = -math.inf

    def track(self, point: Coordinate):
        if math.isnan(point.x) or math.isnan(point.y):
            raise ValueError("Cannot track bounds of a point with NaN coordinates")
        self.min_x = min(self.min_x, point.x)
        self.min_y = min(self.min_y, point.y)
        self.max_x = max(self.max_x, point.x)
        self.max_y = max(self.max_y, point.y)

    def track_all(self, points):
        for p in points:
            self.track(p)

    def track_rectangle(self, rect: Rectangle):
        self.track(rect.location)
        self.track(Coordinate(rect.right, rect.top))

    @property
    def is_empty(self) -> bool:
        return self.min_x > self.max_x

    @property
    def bounds(self) -> Rectangle:
        if self.is_empty:
            return Rectangle()
        return Rectangle.from_corners(
            Coordinate(self.min_x, self.min_y), Coordinate(self.max_x, self.max_y)
        )
