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

from gearprofiles import *
import matplotlib.pyplot as plt
import logging

# These examples are meant to showcase the functionality of the library,
# and serve as manual testing templates for the developer.

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)


def plot_set(ax, drawables, **kwargs):
    for path in drawables:
        arr = points_to_array(path.points())
        ax.plot(arr[:, 0], arr[:, 1], **kwargs)


def involute_pair():
    gear1 = synthesize(InvoluteParam(tooth_count=12, profile_shift=0.3, cut_diameter=0.4))
    gear2 = synthesize(InvoluteParam(tooth_count=41, cut_diameter=0.4))
    print(gear1.information)
    print(f"contact ratio: {gear1.contact_ratio_with(gear2):.3f}")
    centre_distance = (gear1.pitch_circle_diameter + gear2.pitch_circle_diameter) / 2
    # turn the wheel so that a gap faces the pinion
    wheel = gear2.generate_gear_curves().rotated_by(PI + PI / 41)
    return gear1.generate_gear_curves() + wheel.translated(Coordinate(centre_distance, 0))


def cycloid_pair():
    param = CycloidParam(
        tooth_count=10, opposing_tooth_count=60, blunting=0.3, opposing_blunting=0.4
    )
    pinion = synthesize(param)
    print(pinion.information)
    wheel = synthesize(
        CycloidParam(
            tooth_count=60,
            opposing_tooth_count=10,
            blunting=0.4,
            opposing_blunting=0.3,
        )
    )
    centre_distance = (10 + 60) * param.module / 2
    return pinion.generate_gear_curves() + wheel.generate_gear_curves().translated(
        Coordinate(centre_distance, 0)
    )


def escape_wheel_with_spokes():
    wheel = synthesize(EscapeWheelParam(tooth_count=30, module=2.0, tooth_face_length=2.0))
    cutouts = Cutouts(wheel, CutoutParam(spindle_diameter=3.0, hole_diameter=1.5, hole_count=3))
    print(cutouts.information)
    return wheel.generate_gear_curves() + cutouts.drawable_set()


def chain_sprocket_layers():
    sprocket = synthesize(ChainSprocketParam(tooth_count=8, cut_diameter=1.2))
    cutouts = Cutouts(sprocket, CutoutParam(key_flat_width=6.0))
    layers = sprocket.generate_layer_curves()
    cutouts.add_plot(layers.paths[1])
    return layers + cutouts.drawable_set()


if __name__ == "__main__":
    fig, axes = plt.subplots(2, 2)
    for ax, example in zip(
        axes.flat,
        [involute_pair, cycloid_pair, escape_wheel_with_spokes, chain_sprocket_layers],
    ):
        plot_set(ax, example(), linewidth=0.7)
        ax.set_title(example.__name__)
        ax.axis("equal")
    plt.show()
