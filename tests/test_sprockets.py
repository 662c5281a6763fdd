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

import math
import numpy as np
import pytest as pytest
import shapely as shp
from gearprofiles.defs import *
from gearprofiles.function_generators import points_to_array
from gearprofiles.sprockets import (
    ChainSprocketParam,
    RollerSprocketParam,
    generate_chain_sprocket_profile,
    generate_roller_sprocket_profile,
)

COARSE = Resolution(720)


def test_roller_pitch_radius():
    param = RollerSprocketParam(tooth_count=12, pitch=8.0)
    assert param.pitch_radius == pytest.approx(4.0 / math.sin(PI / 12))
    assert param.roller_radius == pytest.approx(2.55)


@pytest.mark.parametrize("num_teeth", [9, 12, 25])
@pytest.mark.parametrize("cut", [0.0, 3.0])
def test_roller_sprocket_outline(num_teeth, cut):
    gear = generate_roller_sprocket_profile(
        RollerSprocketParam(tooth_count=num_teeth, cut_diameter=cut, resolution=COARSE)
    )
    assert gear.is_valid, gear.errors
    path = gear.generate_gear_curves().paths[0]
    assert path.is_contiguous()
    points = path.points()
    assert shp.Polygon(points_to_array(points)).is_valid
    radii = np.linalg.norm(points_to_array(points), axis=1)
    assert radii.max() == pytest.approx(gear.outer_diameter / 2)
    assert radii.min() == pytest.approx(gear.pitch_radius - gear.param.roller_radius)
    assert gear.inner_diameter == pytest.approx(2 * gear.pitch_radius - 7.0)
    inner = points_to_array(gear.generate_inner_gear_path())
    assert np.linalg.norm(inner, axis=1) == pytest.approx(gear.inner_diameter / 2)


def test_roller_too_small_for_cutter():
    gear = generate_roller_sprocket_profile(
        RollerSprocketParam(roller_diameter=2.0, cut_diameter=3.0)
    )
    assert gear.is_valid
    assert "Roller radius too small" in gear.information
    assert gear.tooth_points == ()


def test_rollers_wider_than_pitch():
    gear = generate_roller_sprocket_profile(
        RollerSprocketParam(pitch=8.0, roller_diameter=8.0)
    )
    assert not gear.is_valid
    assert len(gear.generate_gear_curves()) == 0
    assert gear.generate_inner_gear_path() == []


@pytest.mark.parametrize("num_teeth", [5, 8, 12])
def test_chain_sprocket_layers(num_teeth):
    gear = generate_chain_sprocket_profile(
        ChainSprocketParam(tooth_count=num_teeth, resolution=COARSE)
    )
    assert gear.is_valid, gear.errors
    layers = gear.generate_layer_curves()
    assert len(layers) == 3
    for path in layers:
        assert path.closed
        assert path.is_contiguous()
        assert shp.Polygon(points_to_array(path.points())).is_valid
    assert gear.module == pytest.approx(gear.inner_diameter / num_teeth)
    pins = points_to_array(list(gear.generate_pin_path()))
    assert np.linalg.norm(pins, axis=1) == pytest.approx(gear.inner_diameter / 2)
    # adjacent teeth share their end points
    assert len(list(gear.generate_inner_gear_path())) == num_teeth * (
        len(gear.groove_points) - 1
    )


def test_chain_default_dimensions():
    gear = generate_chain_sprocket_profile(ChainSprocketParam(resolution=COARSE))
    assert gear.link_radius == pytest.approx(20.53, abs=0.01)
    assert gear.inner_diameter == pytest.approx(36.62, abs=0.01)


@pytest.mark.parametrize(
    "length, message",
    [
        (2.0, "wider than they are long"),
        (5.0, "too short for their width"),
    ],
)
def test_chain_link_proportions(length, message):
    gear = generate_chain_sprocket_profile(
        ChainSprocketParam(inner_link_length=length, resolution=COARSE)
    )
    assert not gear.is_valid
    assert message in gear.errors
    assert len(gear.generate_layer_curves()) == 0
    assert list(gear.generate_pin_path()) == []


def test_chain_with_cutter():
    gear = generate_chain_sprocket_profile(
        ChainSprocketParam(cut_diameter=1.5, resolution=COARSE)
    )
    assert gear.is_valid, gear.errors
    assert gear.cut_diameter == 1.5
    for path in gear.generate_layer_curves():
        assert path.is_contiguous()


def test_chain_link_width():
    with pytest.raises(ValueError):
        ChainSprocketParam(wire_thickness=2.0, outer_link_width=4.0)
