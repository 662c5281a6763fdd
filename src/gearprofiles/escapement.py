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
import logging
import math
import time
from gearprofiles.defs import *
from gearprofiles.coordinates import Coordinate
from gearprofiles.function_generators import circle_points, linear_reduction
from gearprofiles.gearprofiles_base_classes import (
    GearProfile,
    GearProfileParam,
    dedupe_points,
    require_non_negative,
    require_positive,
    require_tooth_count,
)


@dataclasses.dataclass(frozen=True)
class EscapeWheelParam(GearProfileParam):
    """Escape wheel with oblique, sharp teeth.

    Attributes
    ----------
    tooth_count : int
    module : float
        Pitch circle diameter per tooth. The pitch circle of an escape
        wheel passes through the tooth tips.
    undercut_angle : float
        Angle in radians between the radial through a tooth tip and the
        tooth face, leaning back under the tooth.
    tooth_face_length : float
        Length of the flat face from the tip to the relief curve.
    tip_pitch : float
        Width of the flat tooth tip measured along the pitch circle.
    cut_diameter : float
        Diameter of the relief curve between the face of one tooth and the
        back of the next. Must not be smaller than the cutter used.
    """

    tooth_count: int = 30
    module: float = 1.0
    undercut_angle: float = 12 * DEG2RAD
    tooth_face_length: float = 1.0
    tip_pitch: float = 0.2
    cut_diameter: float = 0.8

    def __post_init__(self):
        super().__post_init__()
        require_tooth_count("tooth_count", self.tooth_count, 3)
        require_positive("module", self.module)
        require_positive("tooth_face_length", self.tooth_face_length)
        require_non_negative("tip_pitch", self.tip_pitch)
        require_positive("cut_diameter", self.cut_diameter)
        if not 0 <= self.undercut_angle < PI / 2:
            raise ValueError(
                f"undercut_angle must be in [0, pi/2), got {self.undercut_angle}"
            )

    @property
    def pitch_circle_diameter(self) -> float:
        return self.module * self.tooth_count

    @property
    def tooth_angle(self) -> float:
        return 2 * PI / self.tooth_count

    @property
    def tip_angle(self) -> float:
        """Angle subtended by the flat tip of a tooth."""
        return 2 * self.tip_pitch / self.pitch_circle_diameter

    @property
    def gap_angle(self) -> float:
        return self.tooth_angle - self.tip_angle


@dataclasses.dataclass(frozen=True)
class EscapeWheelProfile(GearProfile):
    param: EscapeWheelParam = None
    pitch_circle_diameter: float = 0.0
    face_end: Coordinate = None
    undercut_centre: Coordinate = None
    back_tip: Coordinate = None


def escape_wheel_short_name(param: EscapeWheelParam) -> str:
    return (
        f"t{param.tooth_count}m{param.module:.2f}u{param.undercut_angle * RAD2DEG:.1f}"
        f"f{param.tooth_face_length:.2f}e{param.max_error:.2f}"
        f"p{param.tip_pitch:.2f}c{param.cut_diameter:.2f}"
    )


def generate_escape_wheel_profile(param: EscapeWheelParam) -> EscapeWheelProfile:
    """One pitch of an escape wheel: the face of the tooth whose tip lies on
    the X axis, the relief curve, the back of the next tooth and its tip.

    The back of the next tooth is the tangent from its tip corner to the
    relief circle, so the root diameter is a result of the geometry.
    """
    start = time.time()
    short_name = escape_wheel_short_name(param)
    information = (
        f"{param.tooth_count} teeth, module = {param.module}mm, "
        f"undercut angle = {param.undercut_angle * RAD2DEG:.1f}°\n"
        f"tooth face = {param.tooth_face_length}mm, precision = {param.max_error}mm\n"
        f"tip width = {param.tip_pitch}mm, tooth gap diameter = {param.cut_diameter}mm\n"
    )
    base = dict(
        short_name=short_name,
        tooth_count=param.tooth_count,
        module=param.module,
        max_error=param.max_error,
        cut_diameter=param.cut_diameter,
        param=param,
        pitch_circle_diameter=param.pitch_circle_diameter,
    )
    if param.gap_angle <= 0:
        return EscapeWheelProfile(
            information=information,
            errors="Tooth tip is wider than the tooth pitch",
            **base,
        )

    radius = param.pitch_circle_diameter / 2
    relief_radius = param.cut_diameter / 2
    u = param.undercut_angle
    tooth_tip = Coordinate(radius, 0.0)
    face_end = tooth_tip - Coordinate.from_polar(param.tooth_face_length, u)
    # relief circle touches the face at its end, on the gap side
    undercut_centre = face_end + Coordinate.from_polar(relief_radius, u + PI / 2)
    back_tip = Coordinate.from_polar(radius, param.gap_angle)
    inner_diameter = 2 * undercut_centre.magnitude - param.cut_diameter
    base.update(
        face_end=face_end,
        undercut_centre=undercut_centre,
        back_tip=back_tip,
        inner_diameter=inner_diameter,
    )

    tip_to_centre = back_tip - undercut_centre
    if tip_to_centre.magnitude <= relief_radius or inner_diameter <= 0:
        return EscapeWheelProfile(
            information=information,
            errors="Relief curve does not fit between the teeth, reduce the tooth gap diameter",
            **base,
        )

    # back face is the tangent from the back tip to the relief circle
    back_angle = (
        tip_to_centre.phase + PI / 2 - math.asin(relief_radius / tip_to_centre.magnitude)
    )
    face_angle = u - PI / 2
    while back_angle > face_angle + 2 * PI:
        back_angle -= 2 * PI
    while back_angle < face_angle:
        back_angle += 2 * PI

    step = param.angle_step
    relief = circle_points(
        back_angle, face_angle + 2 * PI, step, relief_radius, undercut_centre
    )[::-1]
    tip_arc = circle_points(param.gap_angle, param.tooth_angle, step, radius)
    points = dedupe_points([tooth_tip, face_end] + relief + [back_tip] + tip_arc)
    points = linear_reduction(points, param.max_error)
    logging.info(f"{short_name} generated in {time.time()-start:.5f} seconds")
    return EscapeWheelProfile(
        information=information,
        tooth_points=tuple(points),
        **base,
    )
