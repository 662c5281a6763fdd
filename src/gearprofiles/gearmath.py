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

import io
import math
import numpy as np
from gearprofiles.defs import *
from gearprofiles.involute import InvoluteParam, generate_involute_profile

PROFILE_SHIFTS = np.arange(0, 0.211, 0.03)


def matched_pairs(numerator: int, denominator: int, min_teeth: int, max_teeth: int):
    """Two stage gear trains with the given overall ratio whose stages have
    the same centre distance, so that both stages can share a pair of
    parallel shafts.

    Returns tuples (wheel1, pinion1, wheel2, pinion2) where
    wheel1 * wheel2 / (pinion1 * pinion2) == numerator / denominator and
    wheel1 + pinion1 == wheel2 + pinion2.
    """
    if numerator <= 0 or denominator <= 0:
        raise ValueError("Gear ratio terms must be positive")
    if min_teeth < 1 or max_teeth < min_teeth:
        raise ValueError(f"Invalid tooth count range {min_teeth}..{max_teeth}")
    g = math.gcd(numerator, denominator)
    numerator //= g
    denominator //= g
    teeth = range(min_teeth, max_teeth + 1)
    pairs = []
    for w1 in teeth:
        for p1 in teeth:
            for p2 in teeth:
                w2 = w1 + p1 - p2
                if w2 < min_teeth or w2 > max_teeth:
                    continue
                if w1 * w2 * denominator == p1 * p2 * numerator:
                    # each train once, the larger first stage ratio first
                    if w1 * p2 >= w2 * p1:
                        pairs.append((w1, p1, w2, p2))
    return pairs


def _row(label: str, values) -> str:
    return label + "".join(f"{v:7.3f} " for v in values) + "\n"


def gear_table(
    pressure_angles,
    teeth,
    module: float = 1.0,
    cutter_diameter: float = 0.0,
    resolution: Resolution = DEFAULT_RESOLUTION,
) -> str:
    """Text tables of involute gear dimensions and contact ratios.

    For every pressure angle (in degrees) and profile shift from 0 to 21%
    in 3% steps, prints the tooth gap at the undercut and the base,
    dedendum, cutter adjusted, undercut, pitch and addendum diameters of
    each tooth count, followed by the upper triangle of contact ratios
    between every pair of tooth counts.
    """
    out = io.StringIO()
    for pa in pressure_angles:
        out.write(f"PRESSURE ANGLE {pa:.1f} DEGREES\n")
        out.write(f"MODULE {module:.2f}mm, CUTTER DIAMETER {cutter_diameter:.2f}mm\n")
        for shift in PROFILE_SHIFTS:
            out.write(
                f"CONTACT RATIO FOR PROFILE SHIFTS {shift * 100:.0f}% + {shift * 100:.0f}%\n"
            )
            out.write("TEETH" + "".join(f"{t:3d}     " for t in teeth) + "\n")
            gears = [
                generate_involute_profile(
                    InvoluteParam(
                        tooth_count=t,
                        module=module,
                        pressure_angle=pa * DEG2RAD,
                        profile_shift=float(shift),
                        cut_diameter=cutter_diameter,
                        resolution=resolution,
                    )
                )
                for t in teeth
            ]
            out.write(_row("GAP ", [g.tooth_gap_at_undercut for g in gears]))
            out.write(_row("Db  ", [g.base_circle_diameter for g in gears]))
            out.write(_row("Dd  ", [g.dedendum_circle_diameter for g in gears]))
            out.write(_row("Dc  ", [g.inner_diameter for g in gears]))
            out.write(_row("Du  ", [2 * g.undercut_radius for g in gears]))
            out.write(_row("Dp  ", [g.pitch_circle_diameter for g in gears]))
            out.write(_row("Da  ", [g.addendum_circle_diameter for g in gears]))
            for i, gi in enumerate(gears):
                out.write(f"{teeth[i]:3d} ")
                for j, gj in enumerate(gears):
                    if j < i:
                        out.write(".       ")
                    else:
                        out.write(f"{gi.contact_ratio_with(gj):7.3f} ")
                out.write("\n")
            out.write("\n")
    return out.getvalue()
