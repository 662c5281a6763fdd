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

import pytest as pytest
import shapely as shp
from gearprofiles.defs import *
from gearprofiles.function_generators import points_to_array
from gearprofiles.ratchet import RatchetParam, generate_ratchet_profile, ramp_point

COARSE = Resolution(720)


def test_ramp_spans_one_tooth():
    param = RatchetParam(tooth_count=24, module=1.0, inner_diameter=20.0)
    assert ramp_point(param, 0.0).magnitude == pytest.approx(10.0)
    assert ramp_point(param, param.tooth_angle).magnitude == pytest.approx(12.0)
    assert ramp_point(param, param.tooth_angle).phase == pytest.approx(
        param.tooth_angle
    )


@pytest.mark.parametrize("cut", [0.0, 0.5, 1.0])
@pytest.mark.parametrize("num_teeth", [12, 24, 40])
def test_outline_is_valid(cut, num_teeth):
    param = RatchetParam(
        tooth_count=num_teeth,
        inner_diameter=num_teeth - 4.0,
        cut_diameter=cut,
        resolution=COARSE,
    )
    gear = generate_ratchet_profile(param)
    assert gear.is_valid
    assert gear.cut_diameter == cut
    assert len(gear.tooth_points) > 0
    path = gear.generate_gear_curves().paths[0]
    assert path.is_contiguous()
    assert shp.Polygon(points_to_array(path.points())).is_valid
    assert gear.actual_outer_diameter <= param.pitch_circle_diameter + 1e-9
    assert gear.actual_inner_diameter <= param.inner_diameter + 1e-9


def test_oversized_cutter_is_dropped():
    gear = generate_ratchet_profile(
        RatchetParam(tooth_count=24, inner_diameter=20.0, cut_diameter=6.0)
    )
    assert gear.is_valid
    assert gear.cut_diameter == 0.0
    assert gear.tooth_points == ()
    assert "Setting it to zero" in gear.information
    assert len(gear.generate_gear_curves()) == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(inner_diameter=24.0),
        dict(inner_diameter=30.0),
        dict(inner_diameter=0.0),
        dict(module=0.0),
        dict(cut_diameter=-1.0),
    ],
)
def test_invalid_parameters_raise(kwargs):
    with pytest.raises(ValueError):
        RatchetParam(**kwargs)
