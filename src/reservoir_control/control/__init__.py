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
Control System Analysis
=======================

Step-response evaluation, transfer-function verification and
frequency/pole analysis for SISO transfer functions.

Step Response
-------------
>>> from reservoir_control.control import step_response, step_info
>>>
>>> t, y = step_response(T)
>>> info = step_info(T)
>>> print(f"Settling time: {info['settling_time']:.2f} s")

Verification
------------
>>> from reservoir_control.control import tf_matches, extract_stepinfo_data
>>>
>>> match, info, info_analytical = tf_matches(T, T_analytical)
>>> row = extract_stepinfo_data(T)

Frequency and Pole Analysis
---------------------------
>>> from reservoir_control.control import frequency_response, root_locus, analyze_stability
>>>
>>> bode = frequency_response(T_fwd)
>>> locus = root_locus(T_fwd)
>>> stability = analyze_stability(T)

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

from .step_response import (
    NonSettlingResponseWarning,
    settled_final_value,
    shared_time_grid,
    simulation_horizon,
    step_characteristics,
    step_info,
    step_response,
    time_grid,
)
from .system_analysis import (
    analyze_stability,
    default_frequency_grid,
    frequency_response,
    root_locus,
)
from .verification import extract_stepinfo_data, metric_matches, tf_matches

__all__ = [
    # Step response
    "NonSettlingResponseWarning",
    "simulation_horizon",
    "time_grid",
    "shared_time_grid",
    "step_response",
    "settled_final_value",
    "step_characteristics",
    "step_info",
    # Verification
    "metric_matches",
    "tf_matches",
    "extract_stepinfo_data",
    # Frequency and pole analysis
    "analyze_stability",
    "default_frequency_grid",
    "frequency_response",
    "root_locus",
]
