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
import pytest as pytest
import shapely as shp
from gearprofiles.defs import *
from gearprofiles.coordinates import Coordinate
from gearprofiles.function_generators import points_to_array
import gearprofiles.curve as crv
from gearprofiles.involute import InvoluteParam, generate_involute_profile
from gearprofiles.cutouts import (
    CutoutParam,
    Cutouts,
    calculate_dowel_holes,
    calculate_hex_key,
    calculate_spoke_cutouts,
    hub_diameter,
    spoke_count,
)

COARSE = Resolution(720)


def involute(num_teeth, module=1.0, cut=0.0):
    return generate_involute_profile(
        InvoluteParam(
            tooth_count=num_teeth, module=module, cut_diameter=cut, resolution=COARSE
        )
    )


@pytest.mark.parametrize(
    "num_teeth, expected",
    [(8, 0), (16, 0), (17, 3), (24, 3), (25, 4), (40, 5), (100, 13)],
)
def test_spoke_count(num_teeth, expected):
    assert spoke_count(num_teeth) == expected


def test_hub_diameter_minimum():
    assert hub_diameter(1.0, 3) == pytest.approx(8.0)
    assert hub_diameter(2.0, 5) == pytest.approx(16.0)
    many = hub_diameter(1.0, 20)
    assert many == pytest.approx(4 / math.sin(PI / 20) - 1)


def test_no_cutouts_without_room():
    assert calculate_spoke_cutouts(involute(17)) == []
    assert calculate_spoke_cutouts(involute(12)) == []


@pytest.mark.parametrize("num_teeth", [40, 64])
@pytest.mark.parametrize("module", [0.5, 1.0])
def test_spoke_cutouts(num_teeth, module):
    gear = involute(num_teeth, module)
    cutouts = calculate_spoke_cutouts(gear)
    assert len(cutouts) == spoke_count(num_teeth)
    rim = gear.inner_diameter - 4 * module
    for path in cutouts:
        assert path.closed
        assert path.is_contiguous()
        polygon = shp.Polygon(points_to_array(path.points(COARSE.angle_step)))
        assert polygon.is_valid
        assert polygon.area > 0
        for p in path.points(COARSE.angle_step):
            assert p.magnitude <= rim / 2 + 1e-6
            assert p.magnitude >= hub_diameter(module, len(cutouts)) / 2 - 1e-6
    # gaps do not overlap each other
    first = shp.Polygon(points_to_array(cutouts[0].points(COARSE.angle_step)))
    second = shp.Polygon(points_to_array(cutouts[1].points(COARSE.angle_step)))
    assert first.intersection(second).area == pytest.approx(0.0, abs=1e-9)


@pytest.mark.parametrize("width", [4.0, 6.0])
@pytest.mark.parametrize("cut", [0.0, 1.0])
def test_hex_key(width, cut):
    key = calculate_hex_key(width, cut)
    assert len(key) == (18 if cut > 0 else 12)
    assert key.closed
    assert key.is_contiguous()
    assert key.bounds.width == pytest.approx(width)
    polygon = shp.Polygon(points_to_array(key.points(COARSE.angle_step)))
    assert polygon.is_valid


def test_hex_key_cutter_too_large():
    with pytest.raises(ValueError):
        calculate_hex_key(4.0, 4.0)


def test_dowel_holes():
    holes = calculate_dowel_holes(2.0, 1.0, 4)
    assert len(holes) == 4
    for i, hole in enumerate(holes):
        assert hole.is_contiguous()
        centre = hole[0].centre
        assert centre.magnitude == pytest.approx(6.0)
        assert centre.distance(Coordinate.from_polar(6.0, i * PI / 2)) == pytest.approx(
            0.0, abs=1e-9
        )
        assert hole.bounds.width == pytest.approx(1.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(spindle_diameter=-1.0),
        dict(inlay_depth=3.0, thickness=3.0),
        dict(inlay_depth=1.0),
        dict(hole_count=3),
    ],
)
def test_invalid_parameters_raise(kwargs):
    with pytest.raises(ValueError):
        CutoutParam(**kwargs)


def test_cutouts_need_a_gear():
    with pytest.raises(ValueError):
        Cutouts(None)
    with pytest.raises(TypeError):
        Cutouts("gear")


def test_cutouts_collect_everything():
    gear = involute(40, cut=0.5)
    cutouts = Cutouts(
        gear,
        CutoutParam(
            spindle_diameter=3.0,
            inlay_diameter=6.0,
            inlay_depth=1.0,
            thickness=3.0,
            key_flat_width=4.0,
            hole_diameter=1.0,
            hole_count=3,
        ),
    )
    assert cutouts.spoke_count == 5
    assert len(cutouts.cutouts) == 5
    assert cutouts.spindle.bounds.width == pytest.approx(3.0)
    assert cutouts.inlay.bounds.width == pytest.approx(6.0)
    assert cutouts.hex_key is not None
    assert len(cutouts.dowel_holes) == 3
    assert "5 spokes" in cutouts.information
    assert len(cutouts.drawable_set()) == 5 + 3 + 3


def test_cutouts_small_gear():
    cutouts = Cutouts(involute(12))
    assert cutouts.spoke_count == 0
    assert cutouts.cutouts == ()
    assert "too few teeth" in cutouts.information
    assert cutouts.spindle is None
    assert len(cutouts.drawable_set()) == 0


def test_cutouts_report_missing_room():
    cutouts = Cutouts(involute(17))
    assert cutouts.spoke_count == 3
    assert cutouts.cutouts == ()
    assert "too little room between hub and rim" in cutouts.information
    assert "too few teeth" not in cutouts.information


def test_key_omitted_for_large_cutter():
    gear = dataclasses.replace(involute(40), cut_diameter=5.0)
    cutouts = Cutouts(gear, CutoutParam(key_flat_width=4.0))
    assert cutouts.hex_key is None
    assert "key omitted" in cutouts.information


def test_add_plot():
    cutouts = Cutouts(involute(40))
    extra = crv.CircularArc.circle(2.0, Coordinate(5.0, 0.0))
    cutouts.add_plot(extra)
    assert cutouts.extra_plots == (extra,)
    assert cutouts.drawable_set().paths[-1] is extra
    with pytest.raises(TypeError):
        cutouts.add_plot([Coordinate(0, 0)])
