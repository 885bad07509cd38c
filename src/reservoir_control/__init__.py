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
Reservoir Control
=================

Closed-loop analysis of a pump-driven water reservoir under PID control.

Building the Loop
-----------------
>>> from reservoir_control import compute_tf, compute_tf_analytical
>>>
>>> T, T_fwd = compute_tf(12, 15, 3, True)
>>> T_analytical = compute_tf_analytical(12, 15, 3, True)

Verifying and Tabulating
------------------------
>>> from reservoir_control import tf_matches, extract_stepinfo_data
>>>
>>> match, info, info_analytical = tf_matches(T, T_analytical)
>>> row = extract_stepinfo_data(T)

Running the Study
-----------------
>>> from reservoir_control import run_scenarios, build_step_info_table
>>>
>>> results = run_scenarios()
>>> rows = build_step_info_table(results)

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

__version__ = "0.1.0"

from .config import DEFAULT_SIMULATION_CONFIG, DEFAULT_TOLERANCE, SimulationConfig
from .control import (
    NonSettlingResponseWarning,
    analyze_stability,
    extract_stepinfo_data,
    frequency_response,
    root_locus,
    step_info,
    step_response,
    tf_matches,
)
from .scenarios import (
    RESERVOIR_SCENARIOS,
    ControllerScenario,
    build_step_info_table,
    evaluate_scenario,
    format_step_info_table,
    run_scenarios,
)
from .systems import (
    WATER_RESERVOIR_PLANT,
    ControllerGains,
    PlantConstants,
    TransferFunction,
    compute_tf,
    compute_tf_analytical,
    feedback,
    series,
)
from .types import StepInfo, StepInfoRow

__all__ = [
    "__version__",
    # Configuration
    "SimulationConfig",
    "DEFAULT_SIMULATION_CONFIG",
    "DEFAULT_TOLERANCE",
    # Systems
    "TransferFunction",
    "series",
    "feedback",
    "PlantConstants",
    "WATER_RESERVOIR_PLANT",
    "ControllerGains",
    "compute_tf",
    "compute_tf_analytical",
    # Analysis
    "NonSettlingResponseWarning",
    "step_response",
    "step_info",
    "tf_matches",
    "extract_stepinfo_data",
    "frequency_response",
    "root_locus",
    "analyze_stability",
    # Scenarios
    "ControllerScenario",
    "RESERVOIR_SCENARIOS",
    "evaluate_scenario",
    "run_scenarios",
    "build_step_info_table",
    "format_step_info_table",
    # Types
    "StepInfo",
    "StepInfoRow",
]
