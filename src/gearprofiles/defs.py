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
import numpy as np

DEG2RAD = np.pi / 180
RAD2DEG = 180 / np.pi
PI = np.pi

# numerical 'small step', also the default tolerance of path adjacency checks
DELTA = 1e-6

# Points are 2D row vectors, shape(2). Arrays of points are shape (n, 2).
VSHAPE = 2

POINTS_PER_ROTATION = 7200


@dataclasses.dataclass(frozen=True)
class Resolution:
    """Angular sampling used by all point generators.

    Passed explicitly to the generators so that coarse values can be used
    where speed matters and fine values where accuracy matters.
    """

    points_per_rotation: int = POINTS_PER_ROTATION

    def __post_init__(self):
        if self.points_per_rotation <= 0:
            raise ValueError(
                f"points_per_rotation must be positive, got {self.points_per_rotation}"
            )

    @property
    def angle_step(self) -> float:
        return 2 * PI / self.points_per_rotation


DEFAULT_RESOLUTION = Resolution()


@dataclasses.dataclass(frozen=True)
class ToothLimitParam:
    """Radial tooth limits of involute teeth, in modules."""

    h_a: float = 1.0
    h_d: float = 1.25
