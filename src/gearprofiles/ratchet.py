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
import numpy as np
from gearprofiles.defs import *
from gearprofiles.coordinates import Coordinate
from gearprofiles.function_generators import circle_points, linear_reduction
from gearprofiles.gearprofiles_base_classes import (
    GearProfile,
    GearProfileParam,
    dedupe_points,
    require_positive,
    require_tooth_count,
)


@dataclasses.dataclass(frozen=True)
class RatchetParam(GearProfileParam):
    """Ratchet wheel whose teeth ramp from the inner diameter out to the
    pitch diameter over one tooth angle, then drop back radially."""

    tooth_count: int = 24
    module: float = 1.0
    inner_diameter: float = 20.0

    def __post_init__(self):
        super().__post_init__()
        require_tooth_count("tooth_count", self.tooth_count, 3)
        require_positive("module", self.module)
        require_positive("inner_diameter", self.inner_diameter)
        if self.inner_diameter >= self.pitch_circle_diameter:
            raise ValueError(
                f"inner_diameter {self.inner_diameter} must be smaller than "
                f"the pitch circle diameter {self.pitch_circle_diameter}"
            )

    @property
    def pitch_circle_diameter(self) -> float:
        return self.module * self.tooth_count

    @property
    def tooth_angle(self) -> float:
        return 2 * PI / self.tooth_count

    @property
    def tooth_depth(self) -> float:
        return (self.pitch_circle_diameter - self.inner_diameter) / 2


@dataclasses.dataclass(frozen=True)
class RatchetProfile(GearProfile):
    param: RatchetParam = None
    actual_inner_diameter: float = 0.0
    actual_outer_diameter: float = 0.0


def ratchet_short_name(param: RatchetParam) -> str:
    return (
        f"Rt{param.tooth_count}m{param.module:.2f}e{param.max_error:.2f}"
        f"i{param.inner_diameter:.2f}"
    )


def ramp_point(param: RatchetParam, angle: float) -> Coordinate:
    """Point on the tooth ramp, the radius growing linearly with angle."""
    radius = param.inner_diameter / 2 + param.tooth_depth * angle / param.tooth_angle
    return Coordinate.from_polar(radius, angle)


def generate_ratchet_profile(param: RatchetParam) -> RatchetProfile:
    """One ratchet tooth: the catch at the start of the ramp, relieved by
    the cutter, followed by the ramp.

    When the cutter is too big to leave a catch at right angles to the
    direction of rotation the ratchet would slip under load. The cutter
    diameter is then reset to zero and no tooth is produced.
    """
    start = time.time()
    short_name = ratchet_short_name(param)
    information = (
        f"Ratchet: {param.tooth_count} teeth, module = {param.module}mm\n"
        f"precision = {param.max_error}mm, inner diameter = {param.inner_diameter}mm\n"
    )
    base = dict(
        short_name=short_name,
        tooth_count=param.tooth_count,
        module=param.module,
        max_error=param.max_error,
        inner_diameter=param.inner_diameter,
        param=param,
    )
    inner_radius = param.inner_diameter / 2
    cutter_radius = param.cut_diameter / 2
    tooth_angle = param.tooth_angle

    # cutter centre sits on the ramp direction at the foot of the catch
    slope = -param.tooth_depth / (inner_radius * tooth_angle)
    xs = math.sqrt(cutter_radius**2 / (1 + slope**2))
    ys = slope * xs
    cutter_centre = Coordinate(inner_radius + xs, ys)
    centre_radius = cutter_centre.magnitude
    centre_angle = math.asin(-ys / centre_radius)
    # where the cutter becomes tangent to a radial
    tangent_angle = centre_angle + math.asin(cutter_radius / centre_radius)

    catch_top = ramp_point(param, tooth_angle - tangent_angle).rotate(-tooth_angle)
    relief = circle_points(
        PI - math.atan2(-ys, xs),
        3 * PI / 2 - tangent_angle,
        param.angle_step,
        cutter_radius,
        cutter_centre,
    )[::-1]

    actual_inner_diameter = 2 * (centre_radius - cutter_radius)
    actual_outer_diameter = 2 * catch_top.magnitude
    if relief[0].magnitude > catch_top.magnitude:
        message = "Cutter diameter too great for locking ratchet. Setting it to zero."
        logging.warning(message)
        return RatchetProfile(
            information=information + message + "\n",
            cut_diameter=0.0,
            **base,
        )

    angles = np.arange(0, tooth_angle - tangent_angle, param.angle_step)
    ramp = [ramp_point(param, a) for a in angles]
    points = dedupe_points([catch_top] + relief + ramp)
    points = linear_reduction(points, param.max_error)
    information += (
        f"Actual inner diameter: {actual_inner_diameter:.2f}, "
        f"actual outer diameter: {actual_outer_diameter:.2f}\n"
    )
    logging.info(f"{short_name} generated in {time.time()-start:.5f} seconds")
    return RatchetProfile(
        information=information,
        cut_diameter=param.cut_diameter,
        tooth_points=tuple(points),
        actual_inner_diameter=actual_inner_diameter,
        actual_outer_diameter=actual_outer_diameter,
        **base,
    )
