# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Systems
=======

Transfer-function algebra and the water reservoir loop built on it.

>>> from reservoir_control.systems import TransferFunction, compute_tf, compute_tf_analytical
>>>
>>> T, T_fwd = compute_tf(10, 0, 5, True)
>>> T_analytical = compute_tf_analytical(10, 0, 5, True)
"""

from .transfer_function import TransferFunction, feedback, series
from .water_reservoir import (
    WATER_RESERVOIR_PLANT,
    ControllerGains,
    PlantConstants,
    compute_tf,
    compute_tf_analytical,
    controller_tf,
    motor_tf,
    sensor_tf,
)

__all__ = [
    # Transfer function algebra
    "TransferFunction",
    "series",
    "feedback",
    # Water reservoir model
    "PlantConstants",
    "WATER_RESERVOIR_PLANT",
    "ControllerGains",
    "controller_tf",
    "motor_tf",
    "sensor_tf",
    "compute_tf",
    "compute_tf_analytical",
]
