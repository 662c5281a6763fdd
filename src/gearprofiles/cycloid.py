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
from gearprofiles.function_generators import (
    circle_points,
    epicycloid,
    hypocycloid,
    linear_reduction,
    rotate_points,
    root_binary_search,
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
from gearprofiles.cutter import root_fillet


@dataclasses.dataclass(frozen=True)
class CycloidParam(GearProfileParam):
    """Parameters of one of a pair of cycloidal gears (clock toothing).

    Attributes
    ----------
    tooth_count : int
        Teeth on this gear.
    opposing_tooth_count : int
        Teeth on the gear it meshes with.
    blunting : float
        Fraction of the pointed tooth tip cut off, 0 leaves the teeth
        pointed, 1 truncates them at the pitch circle.
    opposing_blunting : float
        Blunting of the opposing gear.
    module : float
    backlash : float
        Tooth thinning along the pitch circle, in modules.
    """

    tooth_count: int = 12
    opposing_tooth_count: int = 48
    blunting: float = 0.0
    opposing_blunting: float = 0.0
    module: float = 1.0
    backlash: float = 0.0

    def __post_init__(self):
        super().__post_init__()
        require_tooth_count("tooth_count", self.tooth_count, 3)
        require_tooth_count("opposing_tooth_count", self.opposing_tooth_count, 3)
        require_positive("module", self.module)
        require_non_negative("backlash", self.backlash)
        for name in ("blunting", "opposing_blunting"):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")

    @property
    def pitch_radius(self) -> float:
        return self.tooth_count * self.module / 2

    @property
    def opposing_pitch_radius(self) -> float:
        return self.opposing_tooth_count * self.module / 2

    @property
    def tooth_angle(self) -> float:
        return 2 * PI / self.tooth_count


@dataclasses.dataclass(frozen=True)
class CycloidProfile(GearProfile):
    param: CycloidParam = None
    opposing_tooth_count: int = 0
    pressure_angle: float = 0.0
    contact_ratio: float = 0.0
    addendum_diameter: float = 0.0
    dedendum_diameter: float = 0.0


def addendum_roll_angle(
    radius: float,
    locus_radius: float,
    half_tooth_angle: float,
    blunting: float,
    delta: float = DELTA,
) -> float:
    """Rolling angle at which an epicycloidal flank reaches the blunted tip.

    The flank starts on the pitch circle half_tooth_angle away from the
    tooth center. A pointed tooth (blunting 0) has its flank reach the
    center line, a fully blunted one stops on the pitch circle.
    """
    target = (1 - blunting) * half_tooth_angle
    if target <= 0:
        return 0.0
    # apex of the epicycloid, beyond it the flank turns back
    upper = PI * locus_radius / radius

    # polar angle measured from the contact point, so that it does not wrap
    # when the arch spans more than a half turn
    def angle_past_target(phi):
        lag = epicycloid(radius, locus_radius, phi).rotate(-phi).phase
        return phi + lag - target

    if angle_past_target(upper) < 0:
        return upper
    return root_binary_search(angle_past_target, 0.0, upper, delta)


def cycloid_short_name(param: CycloidParam) -> str:
    return (
        f"Ct{param.tooth_count}o{param.opposing_tooth_count}m{param.module:.2f}"
        f"p{param.blunting:.2f}q{param.opposing_blunting:.2f}e{param.max_error:.2f}"
        f"b{param.backlash * param.module:.2f}c{param.cut_diameter:.2f}"
    )


def generate_cycloid_profile(param: CycloidParam) -> CycloidProfile:
    """Build one tooth of a cycloidal gear.

    Each gear gets epicycloidal addenda rolled by a circle of half the
    other gear's pitch radius, and radial dedenda, so that the addenda of
    one gear roll on the radial flanks of the other. The tip of each
    gear's addendum is found from its blunting, and this gear's dedendum
    circle is set to clear the opposing addendum exactly.
    """
    start = time.time()
    short_name = cycloid_short_name(param)
    information = (
        f"Cycloid: {param.tooth_count}/{param.opposing_tooth_count} teeth, "
        f"module = {param.module}mm\n"
        f"blunting = {param.blunting * 100:.0f}%/{param.opposing_blunting * 100:.0f}%, "
        f"precision = {param.max_error}mm\n"
        f"backlash = {param.backlash * param.module:.3f}mm, "
        f"cutter diameter = {param.cut_diameter}mm\n"
    )
    base = dict(
        short_name=short_name,
        tooth_count=param.tooth_count,
        module=param.module,
        max_error=param.max_error,
        cut_diameter=param.cut_diameter,
        param=param,
        opposing_tooth_count=param.opposing_tooth_count,
    )

    rp = param.pitch_radius
    rw = param.opposing_pitch_radius
    psi = (PI / 2 - param.backlash) / param.tooth_count
    psi_w = (PI / 2 - param.backlash) / param.opposing_tooth_count
    if psi <= 0:
        return CycloidProfile(
            information=information,
            errors="Backlash leaves no tooth thickness",
            **base,
        )

    phi_a = addendum_roll_angle(rp, rw / 2, psi, param.blunting)
    phi_w = addendum_roll_angle(rw, rp / 2, psi_w, param.opposing_blunting)
    addendum_radius = epicycloid(rp, rw / 2, phi_a).magnitude
    opposing_addendum_radius = epicycloid(rw, rp / 2, phi_w).magnitude
    dedendum_radius = rp + rw - opposing_addendum_radius

    # the contact point runs along each rolling circle while the gear turns
    # by the roll angle of the tip that is in contact
    contact_ratio = (phi_a + phi_w * rw / rp) / param.tooth_angle
    pressure_angle = max(phi_a * rp / rw, phi_w * rw / rp)
    information += (
        f"pressure angle = {pressure_angle * RAD2DEG:.1f}°, "
        f"contact ratio = {contact_ratio:.3f}\n"
    )
    base.update(
        pressure_angle=pressure_angle,
        contact_ratio=contact_ratio,
        addendum_diameter=2 * addendum_radius,
        dedendum_diameter=2 * dedendum_radius,
        inner_diameter=2 * dedendum_radius,
    )
    if contact_ratio < 1:
        return CycloidProfile(
            information=information,
            errors=(
                f"Contact ratio {contact_ratio:.3f} is below 1, "
                "reduce the blunting or use more teeth"
            ),
            **base,
        )

    step = param.angle_step
    gap_angle = -PI / param.tooth_count

    # lower flank of the tooth on the X axis
    epi = [
        epicycloid(rp, rw / 2, phi) for phi in np.append(np.arange(0, phi_a, step), phi_a)
    ]
    epi = rotate_points(epi, -psi)
    phi_d = math.acos(min(dedendum_radius / rp, 1.0))
    hypo = [
        hypocycloid(rp, rp / 2, phi)
        for phi in np.append(phi_d - np.arange(0, phi_d, step), 0.0)
    ]
    hypo = rotate_points(hypo, -psi)

    root = circle_points(gap_angle, -psi, step, dedendum_radius)
    if param.cut_diameter > 0:
        fillet = root_fillet(
            -psi, dedendum_radius, param.cut_diameter / 2, gap_angle, step
        )
        if fillet is None or fillet[1] > rp:
            message = "Cutter diameter too large for the tooth gap, root left sharp"
            information += message + "\n"
            logging.warning(message)
        else:
            fillet_points, flank_radius = fillet
            root = (
                circle_points(
                    gap_angle, fillet_points[0].phase, step, dedendum_radius
                )
                + fillet_points
            )
            hypo = [p for p in hypo if p.magnitude > flank_radius]

    tip_angle = epi[-1].phase
    if tip_angle >= -DELTA:
        # pointed tooth, the flanks meet on the X axis
        epi[-1] = Coordinate(epi[-1].magnitude, 0.0)
        addendum = []
    else:
        addendum = circle_points(tip_angle, -tip_angle, step, addendum_radius)
    half = dedupe_points(root + hypo + epi)
    tooth = dedupe_points(half + addendum + conjugate_points(half)[::-1])
    tooth = linear_reduction(tooth, param.max_error)

    logging.info(f"{short_name} generated in {time.time()-start:.5f} seconds")
    return CycloidProfile(
        information=information,
        tooth_points=tuple(tooth),
        **base,
    )
