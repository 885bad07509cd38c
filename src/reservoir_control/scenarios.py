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
Controller Scenarios

The seven controller configurations of the reservoir study and the
helpers that evaluate them into a step info table.

Usage
-----
>>> from reservoir_control.scenarios import (
...     build_step_info_table,
...     format_step_info_table,
...     run_scenarios,
... )
>>>
>>> results = run_scenarios()
>>> rows = build_step_info_table(results)
>>> print(format_step_info_table(rows, [r['label'] for r in results]))
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
from typing_extensions import TypedDict

from reservoir_control.config import DEFAULT_TOLERANCE, SimulationConfig
from reservoir_control.control.verification import extract_stepinfo_data, tf_matches
from reservoir_control.systems.transfer_function import TransferFunction
from reservoir_control.systems.water_reservoir import (
    WATER_RESERVOIR_PLANT,
    ControllerGains,
    PlantConstants,
    compute_tf,
    compute_tf_analytical,
)
from reservoir_control.types.control_classical import StepInfoRow


@dataclass(frozen=True)
class ControllerScenario:
    """A labeled controller configuration."""

    label: str
    gains: ControllerGains


RESERVOIR_SCENARIOS = (
    ControllerScenario("No PID", ControllerGains(has_pid=False)),
    ControllerScenario("Kp = 5", ControllerGains(kp=5)),
    ControllerScenario("Kp = 10", ControllerGains(kp=10)),
    ControllerScenario("Kp=Ki=10", ControllerGains(kp=10, ki=10)),
    ControllerScenario("Kp=10, Kd=5", ControllerGains(kp=10, kd=5)),
    ControllerScenario("Kp=12, Ki=15, Kd=3", ControllerGains(kp=12, ki=15, kd=3)),
    ControllerScenario("Kp=9, Ki=15, Kd=2", ControllerGains(kp=9, ki=15, kd=2)),
)


class ScenarioResult(TypedDict, total=False):
    """
    Evaluation of one scenario.

    Fields
    ------
    label : str
        Scenario label
    gains : ControllerGains
        Controller configuration
    closed_loop : TransferFunction
        T(s) from block composition
    open_loop : TransferFunction
        C(s) P(s) G(s)
    step_info : StepInfoRow
        Step info table row of the closed loop
    analytical : TransferFunction
        Independently derived T(s) (only when verified)
    matches : bool
        Whether both derivations agree (only when verified)
    """

    label: str
    gains: ControllerGains
    closed_loop: TransferFunction
    open_loop: TransferFunction
    step_info: StepInfoRow
    analytical: TransferFunction
    matches: bool


def evaluate_scenario(
    scenario: ControllerScenario,
    verify: bool = True,
    plant: PlantConstants = WATER_RESERVOIR_PLANT,
    tolerance: float = DEFAULT_TOLERANCE,
    config: Optional[SimulationConfig] = None,
) -> ScenarioResult:
    """
    Build, optionally verify, and tabulate one scenario.

    Parameters
    ----------
    scenario : ControllerScenario
        Controller configuration
    verify : bool
        If True, also build the analytical transfer function and compare
    plant : PlantConstants
        Physical parameters
    tolerance : float
        Comparison tolerance
    config : Optional[SimulationConfig]
        Simulation settings
    """
    gains = scenario.gains
    closed_loop, open_loop = compute_tf(gains.kp, gains.ki, gains.kd, gains.has_pid, plant=plant)
    result = ScenarioResult(
        label=scenario.label,
        gains=gains,
        closed_loop=closed_loop,
        open_loop=open_loop,
        step_info=extract_stepinfo_data(closed_loop, config=config),
    )
    if verify:
        analytical = compute_tf_analytical(gains.kp, gains.ki, gains.kd, gains.has_pid, plant=plant)
        result["analytical"] = analytical
        result["matches"], _, _ = tf_matches(
            closed_loop, analytical, tolerance=tolerance, config=config
        )
    return result


def run_scenarios(
    scenarios: Sequence[ControllerScenario] = RESERVOIR_SCENARIOS,
    verify: bool = True,
    plant: PlantConstants = WATER_RESERVOIR_PLANT,
    config: Optional[SimulationConfig] = None,
) -> List[ScenarioResult]:
    """Evaluate scenarios in order."""
    return [evaluate_scenario(s, verify=verify, plant=plant, config=config) for s in scenarios]


def build_step_info_table(results: Sequence[ScenarioResult]) -> List[StepInfoRow]:
    """Step info table: one row per result, in order."""
    return [result["step_info"] for result in results]


def format_step_info_table(rows: Sequence[StepInfoRow], labels: Sequence[str]) -> str:
    """
    Render the step info table as aligned text.

    Raises
    ------
    ValueError
        If rows and labels differ in length
    """
    if len(rows) != len(labels):
        raise ValueError(f"got {len(rows)} rows but {len(labels)} labels")

    headers = ["Scenario", "RiseTime", "SettlingTime", "Overshoot", "SSValue", "SSError"]
    label_width = max([len(headers[0])] + [len(label) for label in labels])
    lines = [
        headers[0].ljust(label_width) + "".join(h.rjust(14) for h in headers[1:]),
    ]
    for label, row in zip(labels, rows):
        cells = "".join(
            (f"{value:14.4f}" if np.isfinite(value) else f"{value!s:>14}") for value in row
        )
        lines.append(label.ljust(label_width) + cells)
    return "\n".join(lines)


__all__ = [
    "ControllerScenario",
    "RESERVOIR_SCENARIOS",
    "ScenarioResult",
    "evaluate_scenario",
    "run_scenarios",
    "build_step_info_table",
    "format_step_info_table",
]
