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
import gearprofiles.curve as crv
from gearprofiles.defs import *
from gearprofiles.coordinates import Coordinate
from gearprofiles.gearprofiles_base_classes import (
    GearProfile,
    require_non_negative,
)

# spoke design constants, in modules
CORNER_RADIUS = 1.0
SPOKE_THICKNESS = 2.0
MIN_HUB_DIAMETER = 8.0
DOWEL_RADIUS = 3.0


@dataclasses.dataclass(frozen=True)
class CutoutParam:
    """Dimensions of the holes cut into the body of a gear.

    Attributes
    ----------
    spindle_diameter : float
        Hole for the shaft, 0 for none.
    inlay_diameter : float
        Recess for a bearing or a bush, 0 for none.
    inlay_depth : float
    thickness : float
        Material thickness, the inlay must be shallower.
    key_flat_width : float
        Distance across the flats of a hexagonal key hole, 0 for none.
    hole_diameter : float
        Diameter of the dowel holes that key stacked gears together.
    hole_count : int
    """

    spindle_diameter: float = 0.0
    inlay_diameter: float = 0.0
    inlay_depth: float = 0.0
    thickness: float = 0.0
    key_flat_width: float = 0.0
    hole_diameter: float = 0.0
    hole_count: int = 0

    def __post_init__(self):
        for field in dataclasses.fields(self):
            require_non_negative(field.name, getattr(self, field.name))
        if self.inlay_depth > 0 and self.inlay_depth >= self.thickness:
            raise ValueError("Inlay depth too deep for material thickness")
        if self.hole_count and not self.hole_diameter:
            raise ValueError("hole_diameter must be given when hole_count is set")


def spoke_count(tooth_count: int) -> int:
    """One spoke per eight teeth, or none when that gives fewer than three."""
    spokes = 1 + (tooth_count - 1) // 8
    return spokes if spokes >= 3 else 0


def hub_diameter(module: float, spokes: int) -> float:
    """Smallest hub round which the spokes and their corners fit."""
    corner_radius = CORNER_RADIUS * module
    spoke_thickness = SPOKE_THICKNESS * module
    diameter = (spoke_thickness + 2 * corner_radius) / math.sin(
        PI / spokes
    ) - corner_radius
    return max(diameter, MIN_HUB_DIAMETER * module)


def calculate_spoke_cutouts(gear: GearProfile):
    """Closed paths of the gaps between the spokes.

    One gap is built next to a spoke lying along the positive X axis, then
    rotated round for the others. The list is empty when the gear has too
    few teeth for three spokes, or too little room between hub and rim.
    """
    spokes = spoke_count(gear.tooth_count)
    if spokes == 0:
        return []
    corner_radius = CORNER_RADIUS * gear.module
    spoke_thickness = SPOKE_THICKNESS * gear.module
    hub = hub_diameter(gear.module, spokes)
    rim = gear.inner_diameter - 2 * spoke_thickness
    if rim < hub + 4 * corner_radius:
        return []

    spoke_angle = 2 * PI / spokes
    corner_y = spoke_thickness / 2 + corner_radius
    rim_corner_centre = Coordinate(
        math.sqrt((rim / 2 - corner_radius) ** 2 - corner_y**2), corner_y
    )
    angle_at_rim = rim_corner_centre.phase
    outer_corner = crv.CircularArc(
        rim_corner_centre, corner_radius, -PI / 2, angle_at_rim
    )
    hub_corner_centre = Coordinate(
        math.sqrt((hub / 2 + corner_radius) ** 2 - corner_y**2), corner_y
    )
    angle_at_hub = hub_corner_centre.phase
    inner_corner = crv.CircularArc(
        hub_corner_centre, corner_radius, PI + angle_at_hub, 1.5 * PI
    )
    rim_arc = crv.CircularArc(
        Coordinate(), rim / 2, angle_at_rim, spoke_angle - angle_at_rim
    )
    hub_arc = crv.CircularArc(
        Coordinate(), hub / 2, angle_at_hub, spoke_angle - angle_at_hub
    )

    # far side of the gap is the near side mirrored onto the next spoke
    far_outer = outer_corner.reflect_y().rotated_by(spoke_angle).reversed()
    far_inner = inner_corner.reflect_y().rotated_by(spoke_angle).reversed()
    gap = crv.DrawablePath(
        (
            inner_corner,
            crv.Line(inner_corner.end, outer_corner.start),
            outer_corner,
            rim_arc,
            far_outer,
            crv.Line(far_outer.end, far_inner.start),
            far_inner,
            hub_arc.reversed(),
        ),
        closed=True,
    )
    return [gap.rotated_by(i * spoke_angle) for i in range(spokes)]


def calculate_hex_key(key_flat_width: float, cut_diameter: float) -> crv.DrawablePath:
    """Hexagonal key hole with corners rounded to the cutter radius."""
    face = key_flat_width / 2
    corner_radius = cut_diameter / 2
    if corner_radius >= face:
        raise ValueError(
            f"Cutter diameter {cut_diameter} too large for a {key_flat_width} hex key"
        )
    corner_centre = Coordinate(face - corner_radius, (face - corner_radius) / math.sqrt(3))
    next_face = Coordinate(face, 0.0).rotate(PI / 3)
    if corner_radius > 0:
        corner = crv.CircularArc(corner_centre, corner_radius, 0.0, PI / 3)
        sixth = [
            crv.Line(Coordinate(face, 0.0), corner.start),
            corner,
            crv.Line(corner.end, next_face),
        ]
    else:
        sixth = [
            crv.Line(Coordinate(face, 0.0), corner_centre),
            crv.Line(corner_centre, next_face),
        ]
    curves = []
    for i in range(6):
        curves.extend(c.rotated_by(i * PI / 3) for c in sixth)
    return crv.DrawablePath(curves, closed=True)


def calculate_dowel_holes(module: float, hole_diameter: float, hole_count: int):
    """Holes evenly spaced on a circle of three modules radius."""
    return [
        crv.CircularArc.circle(
            hole_diameter / 2,
            Coordinate.from_polar(DOWEL_RADIUS * module, 2 * PI * i / hole_count),
        )
        for i in range(hole_count)
    ]


class Cutouts:
    """Cutouts and mounting holes for one gear.

    All the shapes are computed when the object is created. The only later
    change allowed is add_plot, used for extra features like the recess
    groove of a sprocket.
    """

    def __init__(self, gear: GearProfile, param: CutoutParam = CutoutParam()):
        if gear is None:
            raise ValueError("No gear specified for cut out")
        if not isinstance(gear, GearProfile):
            raise TypeError(f"Expected a GearProfile, got {type(gear).__name__}")
        self.gear = gear
        self.param = param
        self.spoke_count = spoke_count(gear.tooth_count)
        self.cutouts = tuple(calculate_spoke_cutouts(gear))

        information = ""
        if self.cutouts:
            information += (
                f"{len(self.cutouts)} spokes, hub diameter = "
                f"{hub_diameter(gear.module, self.spoke_count):.2f}mm\n"
            )
        elif self.spoke_count == 0:
            information += "No spoke cutouts, too few teeth for three spokes\n"
        else:
            information += "No spoke cutouts, too little room between hub and rim\n"

        self.spindle = (
            crv.CircularArc.circle(param.spindle_diameter / 2)
            if param.spindle_diameter > 0
            else None
        )
        self.inlay = (
            crv.CircularArc.circle(param.inlay_diameter / 2)
            if param.inlay_diameter > 0
            else None
        )
        self.hex_key = None
        if param.key_flat_width > 0:
            if gear.cut_diameter / 2 < param.key_flat_width / 2:
                self.hex_key = calculate_hex_key(param.key_flat_width, gear.cut_diameter)
            else:
                message = "Cutter too large for the hex key, key omitted"
                information += message + "\n"
                logging.warning(message)
        self.dowel_holes = tuple(
            calculate_dowel_holes(gear.module, param.hole_diameter, param.hole_count)
        )
        self.information = information
        self._plots = []

    def add_plot(self, path: crv.DrawablePath):
        """Attach an extra closed path to be cut with the others."""
        if not isinstance(path, crv.DrawablePath):
            raise TypeError(f"Expected a DrawablePath, got {type(path).__name__}")
        self._plots.append(path)

    @property
    def extra_plots(self):
        return tuple(self._plots)

    def drawable_set(self) -> crv.DrawableSet:
        """Every cutout path, for export together with the gear outline."""
        paths = list(self.cutouts)
        for path in (self.spindle, self.inlay, self.hex_key):
            if path is not None:
                paths.append(path)
        paths.extend(self.dowel_holes)
        paths.extend(self._plots)
        return crv.DrawableSet(paths)
