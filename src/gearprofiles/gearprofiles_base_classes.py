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
import gearprofiles.curve as crv
from gearprofiles.defs import *
from gearprofiles.coordinates import Coordinate
from gearprofiles.function_generators import rotate_points

# If a dataclass tends to be user input, it should be named param.
# If it is produced by the synthesis functions, it is a profile.


def require_positive(name: str, value):
    if value is None or not value > 0:
        raise ValueError(f"{name} must be positive, got {value}")


def require_non_negative(name: str, value):
    if value is None or not value >= 0:
        raise ValueError(f"{name} must not be negative, got {value}")


def require_tooth_count(name: str, value, minimum: int = 1):
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")


@dataclasses.dataclass(frozen=True)
class GearProfileParam:
    """Parameters shared by every gear family.

    Attributes
    ----------
    max_error : float
        Tolerance of the point reduction in mm.
    cut_diameter : float
        Diameter of the end mill used to cut the profile, 0 for none.
    resolution : Resolution
        Angular sampling of the point generators.
    """

    max_error: float = 0.01
    cut_diameter: float = 0.0
    resolution: Resolution = DEFAULT_RESOLUTION

    def __post_init__(self):
        require_non_negative("max_error", self.max_error)
        require_non_negative("cut_diameter", self.cut_diameter)
        if not isinstance(self.resolution, Resolution):
            raise TypeError("resolution must be a Resolution")

    @property
    def angle_step(self) -> float:
        return self.resolution.angle_step


@dataclasses.dataclass(frozen=True)
class GearProfile:
    """Outline of a gear family member, computed once and then frozen.

    ``tooth_points`` holds the outline of one tooth, which is rotated to
    produce the others. When ``errors`` is non-empty the profile is unusable
    and every outline generator yields nothing.

    Attributes
    ----------
    short_name : str
        Identifier encoding the parameters, stable for equal parameters.
    information : str
        Human readable summary and non-fatal warnings.
    errors : str
        Non-empty when the profile could not be constructed.
    tooth_count : int
    module : float
    max_error : float
    inner_diameter : float
    cut_diameter : float
        The cutter diameter actually used, may be zeroed during synthesis.
    tooth_points : tuple of Coordinate
    """

    short_name: str = ""
    information: str = ""
    errors: str = ""
    tooth_count: int = 1
    module: float = 1.0
    max_error: float = 0.0
    inner_diameter: float = 0.0
    cut_diameter: float = 0.0
    tooth_points: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "tooth_points", tuple(self.tooth_points))

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def tooth_angle(self) -> float:
        """Angle occupied by one tooth and one gap."""
        return 2 * PI / self.tooth_count

    def _rotated(self, points, index: int):
        return rotate_points(points, (index % self.tooth_count) * self.tooth_angle)

    def tooth_profile(self, index: int):
        """Points of one tooth rotated anticlockwise by index tooth angles."""
        if not self.is_valid:
            return []
        return self._rotated(self.tooth_points, index)

    def _replicate(self, points):
        if not self.is_valid or len(points) == 0:
            return
        for i in range(self.tooth_count):
            tooth = self._rotated(points, i)
            next_start = self._rotated(points[:1], i + 1)[0]
            # the joint with the next tooth is emitted once, by that tooth
            if len(tooth) > 1 and tooth[-1].distance(next_start) <= DELTA:
                tooth = tooth[:-1]
            yield from tooth

    def generate_complete_gear_path(self):
        """Lazily generate the points of the whole outline, tooth by tooth.
        Points shared by adjacent teeth appear once.

        Returns a generator, which can be consumed only once.
        """
        return self._replicate(self.tooth_points)

    def _replicated_curves(self, points) -> crv.DrawablePath:
        """One polyline per tooth. Each polyline ends on the first point of
        the next one, so the joints are shared exactly."""
        if not self.is_valid or len(points) < 2:
            return crv.DrawablePath((), closed=True)
        teeth = [self._rotated(points, i) for i in range(self.tooth_count)]
        polylines = []
        for i, tooth in enumerate(teeth):
            next_start = teeth[(i + 1) % self.tooth_count][0]
            vertices = list(tooth)
            if vertices[-1].distance(next_start) <= DELTA:
                vertices[-1] = next_start
            else:
                vertices.append(next_start)
            polylines.append(crv.PolyLine(vertices))
        return crv.DrawablePath(polylines, closed=True)

    def generate_gear_curves(self) -> crv.DrawableSet:
        """The outline as drawable curves, empty when construction failed."""
        path = self._replicated_curves(self.tooth_points)
        return crv.DrawableSet((path,) if len(path) else ())


def conjugate_points(points):
    return [p.conjugate for p in points]


def dedupe_points(points):
    """Drop consecutive duplicates, which appear where curve segments meet."""
    result = []
    for p in points:
        if not result or result[-1].distance(p) > DELTA:
            result.append(p)
    return result
