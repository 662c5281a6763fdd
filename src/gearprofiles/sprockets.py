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

"""Sprockets for roller chain and for welded link chain.

In both cases the teeth are what is left around the chain, so the profiles
are built from arcs that hug the rollers or links rather than from a
projecting tooth curve.
"""

import dataclasses
import logging
import math
import time
from gearprofiles.defs import *
from gearprofiles.coordinates import Coordinate
import gearprofiles.curve as crv
from gearprofiles.function_generators import circle_points, linear_reduction
from gearprofiles.gearprofiles_base_classes import (
    GearProfile,
    GearProfileParam,
    conjugate_points,
    dedupe_points,
    require_non_negative,
    require_positive,
    require_tooth_count,
)


@dataclasses.dataclass(frozen=True)
class RollerSprocketParam(GearProfileParam):
    """Sprocket for roller chain.

    Attributes
    ----------
    tooth_count : int
    pitch : float
        Distance between adjacent roller centres.
    roller_diameter : float
    backlash : float
        Added to the roller diameter when sizing the roller seats.
    chain_width : float
        Height of the chain side plates, sets the inner diameter.
    """

    tooth_count: int = 12
    pitch: float = 8.0
    roller_diameter: float = 5.0
    backlash: float = 0.1
    chain_width: float = 7.0

    def __post_init__(self):
        super().__post_init__()
        require_tooth_count("tooth_count", self.tooth_count, 3)
        require_positive("pitch", self.pitch)
        require_positive("roller_diameter", self.roller_diameter)
        require_non_negative("backlash", self.backlash)
        require_non_negative("chain_width", self.chain_width)

    @property
    def pitch_radius(self) -> float:
        return self.pitch / (2 * math.sin(PI / self.tooth_count))

    @property
    def roller_radius(self) -> float:
        return (self.roller_diameter + self.backlash) / 2


@dataclasses.dataclass(frozen=True)
class RollerSprocketProfile(GearProfile):
    param: RollerSprocketParam = None
    pitch_radius: float = 0.0
    outer_diameter: float = 0.0

    def generate_inner_gear_path(self):
        """Circle at the inner diameter, clearing the chain side plates."""
        if not self.is_valid:
            return []
        return circle_points(
            0, 2 * PI, self.param.angle_step, self.inner_diameter / 2
        )[:-1]


def roller_sprocket_short_name(param: RollerSprocketParam) -> str:
    return (
        f"RSt{param.tooth_count}p{param.pitch:.2f}e{param.max_error:.2f}"
        f"r{param.roller_diameter:.2f}b{param.backlash:.2f}w{param.chain_width:.2f}"
    )


def _roller_addendum_angle(param: RollerSprocketParam) -> float:
    """Angle from the X axis to the tooth tip on the outer circle.

    The tooth flank is an arc centred on the neighbouring roller, wide
    enough to let a roller swing out of its seat without snagging.
    """
    pitch_radius = param.pitch_radius
    addendum_radius = pitch_radius + param.roller_radius
    flank_radius = param.pitch - param.roller_radius
    cos_angle = (pitch_radius**2 + addendum_radius**2 - flank_radius**2) / (
        2 * pitch_radius * addendum_radius
    )
    return math.acos(cos_angle) - PI / param.tooth_count


def generate_roller_sprocket_profile(param: RollerSprocketParam) -> RollerSprocketProfile:
    """One tooth of a roller chain sprocket, centred on the X axis with the
    roller seats at either side."""
    start = time.time()
    short_name = roller_sprocket_short_name(param)
    information = (
        f"Roller sprocket: {param.tooth_count} teeth, pitch = {param.pitch}mm\n"
        f"precision = {param.max_error}mm, roller dia = {param.roller_diameter}mm\n"
        f"backlash = {param.backlash}mm, side plate = {param.chain_width:.2f}\n"
    )
    pitch_radius = param.pitch_radius
    roller_radius = param.roller_radius
    base = dict(
        short_name=short_name,
        tooth_count=param.tooth_count,
        module=2 * pitch_radius / param.tooth_count,
        max_error=param.max_error,
        cut_diameter=param.cut_diameter,
        inner_diameter=2 * pitch_radius - param.chain_width,
        param=param,
        pitch_radius=pitch_radius,
        outer_diameter=2 * (pitch_radius + roller_radius),
    )
    if roller_radius < param.cut_diameter / 2:
        message = "Roller radius too small for cutter diameter"
        logging.warning(message)
        return RollerSprocketProfile(information=information + message + "\n", **base)
    if param.pitch <= 2 * roller_radius:
        return RollerSprocketProfile(
            information=information,
            errors="Rollers are wider than the chain pitch",
            **base,
        )

    step = param.angle_step
    # centre of the roller seat above the X axis
    jy = param.pitch / 2
    jx = jy / math.tan(PI / param.tooth_count)
    seat = circle_points(
        PI * (1 + 1 / param.tooth_count),
        1.5 * PI,
        step,
        roller_radius,
        Coordinate(jx, jy),
    )

    addendum_angle = _roller_addendum_angle(param)
    tip = Coordinate.from_polar(pitch_radius + roller_radius, addendum_angle)
    # flank is centred on the roller below the X axis
    flank_start = (tip - Coordinate(jx, -jy)).phase
    flank = circle_points(
        flank_start, PI / 2, step, param.pitch - roller_radius, Coordinate(jx, -jy)
    )
    rim = circle_points(0, addendum_angle, step, pitch_radius + roller_radius)

    points = (
        conjugate_points(seat)
        + conjugate_points(flank[::-1])
        + conjugate_points(rim)[::-1]
        + rim
        + flank
        + seat[::-1]
    )
    points = linear_reduction(dedupe_points(points), param.max_error)
    logging.info(f"{short_name} generated in {time.time()-start:.5f} seconds")
    return RollerSprocketProfile(
        information=information,
        tooth_points=tuple(points),
        **base,
    )


@dataclasses.dataclass(frozen=True)
class ChainSprocketParam(GearProfileParam):
    """Sprocket for welded link chain, as used on hoists and clocks.

    Links alternate between lying flat in the plane of the sprocket and
    standing perpendicular to it, so the outline differs between the rim,
    the shoulder the flat links rest on and the base under the pins.

    Attributes
    ----------
    tooth_count : int
        Number of flat links around the sprocket.
    wire_thickness : float
    inner_link_length : float
        Inside length of one link.
    outer_link_width : float
        Outside width of one link.
    backlash : float
    """

    tooth_count: int = 8
    wire_thickness: float = 1.0
    inner_link_length: float = 8.0
    outer_link_width: float = 4.0
    backlash: float = 0.1

    def __post_init__(self):
        super().__post_init__()
        require_tooth_count("tooth_count", self.tooth_count, 3)
        require_positive("wire_thickness", self.wire_thickness)
        require_positive("inner_link_length", self.inner_link_length)
        require_positive("outer_link_width", self.outer_link_width)
        require_non_negative("backlash", self.backlash)
        if self.outer_link_width <= 2 * self.wire_thickness:
            raise ValueError("outer_link_width must exceed twice the wire_thickness")


@dataclasses.dataclass(frozen=True)
class ChainSprocketProfile(GearProfile):
    param: ChainSprocketParam = None
    link_radius: float = 0.0
    groove_points: tuple = ()

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "groove_points", tuple(self.groove_points))

    def generate_inner_gear_path(self):
        """Outline of the shoulder on which the flat links rest."""
        return self._replicate(self.groove_points)

    def generate_pin_path(self):
        """Outline of the base under the standing links, the inner circle
        assembled from one arc per tooth."""
        if not self.is_valid:
            return iter(())
        half = self.tooth_angle / 2
        arc = circle_points(-half, half, self.param.angle_step, self.inner_diameter / 2)
        return self._replicate(arc[:-1])

    def generate_layer_curves(self) -> crv.DrawableSet:
        """Rim, shoulder and pin layers, each a closed path."""
        if not self.is_valid:
            return crv.DrawableSet()
        half = self.tooth_angle / 2
        arc = circle_points(-half, half, self.param.angle_step, self.inner_diameter / 2)
        paths = [
            self._replicated_curves(self.tooth_points),
            self._replicated_curves(self.groove_points),
            self._replicated_curves(arc),
        ]
        return crv.DrawableSet(p for p in paths if len(p))


def chain_sprocket_short_name(param: ChainSprocketParam) -> str:
    return (
        f"St{param.tooth_count}w{param.wire_thickness:.2f}e{param.max_error:.2f}"
        f"i{param.inner_link_length:.2f}o{param.outer_link_width:.2f}"
    )


def _mirror_tooth(profile):
    """Whole tooth from the half on the positive Y side."""
    return conjugate_points(profile[1:])[::-1] + list(profile)


def generate_chain_sprocket_profile(param: ChainSprocketParam) -> ChainSprocketProfile:
    """Rim and shoulder profiles of one tooth of a link chain sprocket.

    The chain wraps the sprocket as a polygon with alternating sides, the
    long side spanning a flat link and the short side a standing one. The
    tooth is centred on a flat link lying across the X axis.
    """
    start = time.time()
    short_name = chain_sprocket_short_name(param)
    information = (
        f"Sprocket: {param.tooth_count} teeth, link thickness = {param.wire_thickness}mm\n"
        f"precision = {param.max_error}mm, inner length = {param.inner_link_length}mm\n"
        f"outer width = {param.outer_link_width}mm\n"
    )
    base = dict(
        short_name=short_name,
        tooth_count=param.tooth_count,
        max_error=param.max_error,
        cut_diameter=param.cut_diameter,
        param=param,
    )
    n = param.tooth_count
    wire = param.wire_thickness
    width = param.outer_link_width
    r = width / 2 - wire
    a = param.inner_link_length + 2 * r
    b = param.inner_link_length - 2 * r
    if b <= 0:
        return ChainSprocketProfile(
            information=information,
            errors="Links are wider than they are long",
            **base,
        )

    # cosine rule across adjacent link ends
    corner = PI * (n - 1) / n
    link_span = math.sqrt(a**2 + b**2 - 2 * a * b * math.cos(corner))
    radius = link_span / (2 * math.sin(PI / n))
    sin_tooth = math.sin(PI / n)
    cos_tooth = math.cos(PI / n)

    # centre of the semicircular end of the flat link
    t = Coordinate(math.sqrt(radius**2 - (b / 2) ** 2), b / 2)
    c = Coordinate(
        t.x - (r - wire / 2) * sin_tooth, t.y + (r - wire / 2) * cos_tooth
    )
    u = Coordinate(c.x, c.y - wire / 2)
    if u.y < width / 2:
        return ChainSprocketProfile(
            information=information,
            errors="Links are too short for their width, the rim would overlap itself",
            **base,
        )
    oz = math.sqrt(radius**2 - (a / 2) ** 2) - wire / 2
    z = Coordinate.from_polar(oz, PI / n)

    if wire >= param.cut_diameter:
        arc_radius = wire / 2
        arc_angle = PI * (0.5 - 1 / n)
        convex_centre = c
    else:
        arc_radius = param.cut_diameter / 2
        convex_centre = Coordinate(u.x, u.y + arc_radius)
        # distance from the cutter centre to the face under the standing link
        c_perp = u.x * cos_tooth - oz + sin_tooth * (u.y + arc_radius)
        if abs(c_perp) > arc_radius:
            return ChainSprocketProfile(
                information=information,
                errors="Cutter diameter too large for the link spacing",
                **base,
            )
        arc_angle = math.acos(c_perp / arc_radius) + PI / 2 - PI / n

    step = param.angle_step
    upper_centre = Coordinate(t.x, u.y - width / 2)
    outer = (
        [Coordinate(t.x + width / 2, 0.0)]
        + circle_points(0, PI / 2, step, width / 2, upper_centre)
        + circle_points(1.5 * PI - arc_angle, 1.5 * PI, step, arc_radius, convex_centre)[
            ::-1
        ]
        + [z]
    )

    inner_diameter = 2 * t.x - width
    groove_start = PI * (1 + n) / n - math.acos(wire / width)
    groove_centre = Coordinate(
        t.x - param.backlash * sin_tooth, t.y + param.backlash * cos_tooth
    )
    groove = (
        [Coordinate(inner_diameter / 2 - param.backlash * sin_tooth, 0.0)]
        + circle_points(groove_start, PI, step, width / 2, groove_centre)[::-1]
        + [z]
    )

    outer = linear_reduction(dedupe_points(outer), param.max_error)
    groove = linear_reduction(dedupe_points(groove), param.max_error)
    logging.info(f"{short_name} generated in {time.time()-start:.5f} seconds")
    return ChainSprocketProfile(
        information=information,
        module=inner_diameter / n,
        inner_diameter=inner_diameter,
        link_radius=radius,
        tooth_points=tuple(_mirror_tooth(outer)),
        groove_points=tuple(_mirror_tooth(groove)),
        **base,
    )
