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

from gearprofiles.gearprofiles_base_classes import GearProfile, GearProfileParam
from gearprofiles.involute import InvoluteParam, generate_involute_profile
from gearprofiles.cycloid import CycloidParam, generate_cycloid_profile
from gearprofiles.escapement import EscapeWheelParam, generate_escape_wheel_profile
from gearprofiles.ratchet import RatchetParam, generate_ratchet_profile
from gearprofiles.sprockets import (
    ChainSprocketParam,
    RollerSprocketParam,
    generate_chain_sprocket_profile,
    generate_roller_sprocket_profile,
)

GENERATORS = {
    InvoluteParam: generate_involute_profile,
    CycloidParam: generate_cycloid_profile,
    EscapeWheelParam: generate_escape_wheel_profile,
    RatchetParam: generate_ratchet_profile,
    RollerSprocketParam: generate_roller_sprocket_profile,
    ChainSprocketParam: generate_chain_sprocket_profile,
}


def synthesize(param: GearProfileParam) -> GearProfile:
    """Build the profile for any of the gear families from its parameters."""
    try:
        generator = GENERATORS[type(param)]
    except KeyError:
        raise TypeError(
            f"No profile generator for {type(param).__name__}"
        ) from None
    return generator(param)
