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
import warnings
import numpy as np
from gearprofiles.defs import *
from gearprofiles.coordinates import Angle, Coordinate
from gearprofiles.function_generators import (
    circle_points,
    closest_point,
    involute_plus_offset,
    linear_reduction,
)
from gearprofiles.gearprofiles_base_classes import (
    GearProfile,
    GearProfileParam,
    conjugate_points,
    dedupe_points,
    require_non_negative,
    require_positive,
    require_tooth_count,
)
from gearprofiles.cutter import compensate_root


def involute_angle(alpha):
    """The involute function, tan(alpha)-alpha."""
    return np.tan(alpha) - alpha


@dataclasses.dataclass(frozen=True)
class InvoluteParam(GearProfileParam):
    """Parameters of an involute spur gear.

    Attributes
    ----------
    tooth_count : int
    module : float
        Pitch circle diameter per tooth in mm.
    pressure_angle : float
        In radians.
    profile_shift : float
        Radial shift of the generating rack, in modules. May be negative.
    backlash : float
        Tooth thinning along the pitch circle, in modules.
    tooth_limits : ToothLimitParam
        Addendum and dedendum heights of the generating rack, in modules.
    """

    tooth_count: int = 12
    module: float = 1.0
    pressure_angle: float = 20 * DEG2RAD
    profile_shift: float = 0.0
    backlash: float = 0.0
    tooth_limits: ToothLimitParam = ToothLimitParam()

    def __post_init__(self):
        super().__post_init__()
        require_tooth_count("tooth_count", self.tooth_count, 3)
        require_positive("module", self.module)
        if not 0 < self.pressure_angle < PI / 2:
            raise ValueError(
                f"pressure_angle must be between 0 and pi/2, got {self.pressure_angle}"
            )
        require_non_negative("backlash", self.backlash)

    @property
    def pitch_circle_diameter(self) -> float:
        return self.module * self.tooth_count

    @property
    def pitch_radius(self) -> float:
        return self.pitch_circle_diameter / 2

    @property
    def base_circle_diameter(self) -> float:
        return self.pitch_circle_diameter * math.cos(self.pressure_angle)

    @property
    def base_circle_pitch(self) -> float:
        """Distance between teeth along the line of action."""
        return PI * self.module * math.cos(self.pressure_angle)

    @property
    def tooth_angle(self) -> float:
        return 2 * PI / self.tooth_count

    @property
    def half_tooth_angle(self) -> float:
        """Half the angle subtended by a tooth at the pitch circle, thinned by
        the backlash and widened by the profile shift."""
        return (
            PI / 2 + 2 * self.profile_shift * math.tan(self.pressure_angle) - self.backlash
        ) / self.tooth_count

    @property
    def tooth_base_offset(self) -> float:
        """Angle from the tooth center line to where the flank leaves the
        base circle."""
        return self.half_tooth_angle + involute_angle(self.pressure_angle)

    @property
    def addendum_circle_diameter(self) -> float:
        return self.pitch_circle_diameter + 2 * self.module * (
            self.tooth_limits.h_a + self.profile_shift
        )

    @property
    def dedendum_circle_diameter(self) -> float:
        return self.pitch_circle_diameter - 2 * self.module * (
            self.tooth_limits.h_d - self.profile_shift
        )

    def can_mesh_with(self, other: "InvoluteParam") -> bool:
        return (
            self.module == other.module and self.pressure_angle == other.pressure_angle
        )

    def contact_ratio_with(self, other: "InvoluteParam") -> float:
        """Average number of tooth pairs in contact when meshing with other.

        Length of the path of contact between the two addendum circles,
        divided by the base circle pitch.
        """
        if not self.can_mesh_with(other):
            raise ValueError(
                "Gears can only mesh if their module and pressure angle are equal"
            )
        pa = Angle.from_radians(self.pressure_angle)

        def approach(g):
            return 0.5 * math.sqrt(
                g.addendum_circle_diameter**2 - g.base_circle_diameter**2
            )

        path = (
            approach(self)
            + approach(other)
            - pa.sin * (self.pitch_circle_diameter + other.pitch_circle_diameter) / 2
        )
        return path / self.base_circle_pitch


@dataclasses.dataclass(frozen=True)
class InvoluteProfile(GearProfile):
    """Outline of an involute gear with its derived dimensions."""

    param: InvoluteParam = None
    pitch_circle_diameter: float = 0.0
    base_circle_diameter: float = 0.0
    addendum_circle_diameter: float = 0.0
    dedendum_circle_diameter: float = 0.0
    cutter_adjusted_dedendum_circle_diameter: float = 0.0
    undercut_radius: float = 0.0
    tooth_gap_at_undercut: float = 0.0

    def contact_ratio_with(self, other: "InvoluteProfile") -> float:
        return self.param.contact_ratio_with(other.param)


def involute_short_name(param: InvoluteParam) -> str:
    return (
        f"It{param.tooth_count}m{param.module:.2f}a{param.pressure_angle * RAD2DEG:.1f}"
        f"s{param.profile_shift:.2f}e{param.max_error:.2f}"
        f"b{param.backlash * param.module:.2f}c{param.cut_diameter:.2f}"
    )


def involute_information(param: InvoluteParam) -> str:
    return (
        f"Involute: {param.tooth_count} teeth, module = {param.module}mm, "
        f"pressure angle = {param.pressure_angle * RAD2DEG:.1f}°\n"
        f"profile shift = {param.profile_shift * 100:.1f}%, "
        f"precision = {param.max_error}mm\n"
        f"backlash = {param.backlash * param.module:.3f}mm, "
        f"cutter diameter = {param.cut_diameter}mm\n"
        f"pitch circle diameter = {param.pitch_circle_diameter:.3f}mm, "
        f"base circle diameter = {param.base_circle_diameter:.3f}mm\n"
    )


def _parameter_range(start: float, stop: float, step: float):
    """Sample parameters from start to stop inclusive, in either direction."""
    direction = 1 if stop >= start else -1
    values = start + direction * np.arange(0, abs(stop - start), step)
    return np.append(values, stop)


def generate_involute_flank(param: InvoluteParam):
    """Lower flank of the tooth on the X axis, base circle to addendum."""
    rb = param.base_circle_diameter / 2
    ra = param.addendum_circle_diameter / 2
    phi_a = math.sqrt((ra / rb) ** 2 - 1)
    return [
        involute_plus_offset(rb, 0, 0, phi, -param.tooth_base_offset)
        for phi in _parameter_range(0, phi_a, param.angle_step)
    ]


def generate_undercut(param: InvoluteParam):
    """Trochoid cut by the tip corner of the generating rack.

    The rack pitch line rolls on the pitch circle, its tip corner lies
    below the rolling line by the dedendum and is set back along the rack
    by the flank slope. Returned from the bottom of the gap up to the
    addendum circle.
    """
    rp = param.pitch_radius
    ra = param.addendum_circle_diameter / 2
    depth = param.pitch_radius - param.dedendum_circle_diameter / 2
    off_x = -depth
    off_y = -depth * math.tan(param.pressure_angle)
    # rolling angle where the tip corner is deepest
    phi_d = off_y / rp
    phi_end = (off_y - math.sqrt(ra**2 - (rp - depth) ** 2)) / rp
    return [
        involute_plus_offset(rp, off_x, off_y, phi, -param.half_tooth_angle)
        for phi in _parameter_range(phi_d, phi_end, param.angle_step)
    ]


def _trim_at_x_axis(flank):
    """Cut a flank rising towards the X axis where it reaches it."""
    for i, p in enumerate(flank):
        if p.y >= 0:
            if i == 0:
                return [Coordinate(p.x, 0.0)]
            q = flank[i - 1]
            x = q.x + (p.x - q.x) * (0 - q.y) / (p.y - q.y)
            return flank[:i] + [Coordinate(x, 0.0)]
    return flank


def generate_involute_profile(param: InvoluteParam) -> InvoluteProfile:
    """Build one tooth of an involute gear, from the gap center below the
    X axis to the gap center above it.

    The involute flank and the undercut trochoid are generated separately
    and trimmed where they meet. The root is then rewritten where the
    cutter cannot follow it, and the half tooth is mirrored in the X axis.
    """
    start = time.time()
    short_name = involute_short_name(param)
    information = involute_information(param)
    base = dict(
        short_name=short_name,
        tooth_count=param.tooth_count,
        module=param.module,
        max_error=param.max_error,
        cut_diameter=param.cut_diameter,
        param=param,
        pitch_circle_diameter=param.pitch_circle_diameter,
        base_circle_diameter=param.base_circle_diameter,
        addendum_circle_diameter=param.addendum_circle_diameter,
        dedendum_circle_diameter=param.dedendum_circle_diameter,
    )

    rd = param.dedendum_circle_diameter / 2
    ra = param.addendum_circle_diameter / 2
    if rd <= 0:
        return InvoluteProfile(
            information=information,
            errors="Too few teeth for the dedendum of the generating rack",
            **base,
        )
    if ra <= param.base_circle_diameter / 2:
        return InvoluteProfile(
            information=information,
            errors="Addendum circle lies inside the base circle",
            **base,
        )

    step = param.angle_step
    gap_angle = -PI / param.tooth_count

    # lists sorted by decreasing X for the crossing search
    involute = generate_involute_flank(param)
    undercut = generate_undercut(param)
    crossing = closest_point(involute[::-1], undercut[::-1])
    flank = [crossing] + [p for p in involute if p.x > crossing.x]
    undercut = [p for p in undercut if p.x < crossing.x] + [crossing]
    undercut_radius = crossing.magnitude
    if undercut_radius > param.pitch_radius:
        information += "Undercut extends beyond the pitch circle, use more teeth\n"

    flank = _trim_at_x_axis(flank)
    if flank[-1].y == 0:
        information += "Teeth are pointed, the addendum is never reached\n"
        addendum = []
    else:
        tip_angle = flank[-1].phase
        addendum = circle_points(tip_angle, -tip_angle, step, ra)

    tooth_gap = 2 * undercut_radius * math.sin(crossing.phase - gap_angle)

    # root of the gap, from the gap centre line to the undercut
    adjusted_rd = rd
    if undercut[0].phase < gap_angle:
        root = [p for p in undercut if p.phase >= gap_angle]
        information += "Rack tip is wider than the tooth gap\n"
    else:
        root = circle_points(gap_angle, undercut[0].phase, step, rd) + undercut[1:]

    if param.cut_diameter > 0:
        compensated = compensate_root(
            [p for p in undercut if p.phase >= gap_angle],
            param.cut_diameter / 2,
            gap_angle,
            step,
        )
        if compensated is not None:
            root = list(compensated.points)
            adjusted_rd = compensated.dedendum_radius
            information += (
                f"Cutter compensation: dedendum diameter {2 * rd:.3f}mm "
                f"adjusted to {2 * adjusted_rd:.3f}mm\n"
            )
        if param.cut_diameter > tooth_gap:
            message = (
                f"Cutter diameter {param.cut_diameter}mm exceeds the tooth gap "
                f"at the undercut {tooth_gap:.3f}mm"
            )
            information += message + "\n"
            logging.warning(message)
            warnings.warn(message, RuntimeWarning, stacklevel=2)

    half = dedupe_points(root + flank + addendum)
    mirrored = conjugate_points(dedupe_points(root + flank))[::-1]
    tooth = dedupe_points(half + mirrored)
    tooth = linear_reduction(tooth, param.max_error)

    information += (
        f"undercut diameter = {2 * undercut_radius:.3f}mm, "
        f"tooth gap at undercut = {tooth_gap:.3f}mm\n"
    )
    logging.info(f"{short_name} generated in {time.time()-start:.5f} seconds")
    return InvoluteProfile(
        information=information,
        inner_diameter=2 * adjusted_rd,
        tooth_points=tuple(tooth),
        cutter_adjusted_dedendum_circle_diameter=2 * adjusted_rd,
        undercut_radius=undercut_radius,
        tooth_gap_at_undercut=tooth_gap,
        **base,
    )
