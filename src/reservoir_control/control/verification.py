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
Transfer Function Verification

Compare two transfer functions through their step responses, and reduce
a single transfer function to a row of the step info table.

Two transfer functions "match" when each of the eight step
characteristics differs by strictly less than the tolerance. A
characteristic that is NaN or inf on either side never matches, so two
non-settling systems are reported as a mismatch rather than as equal.

Usage
-----
>>> from reservoir_control.control.verification import tf_matches, extract_stepinfo_data
>>>
>>> T, _ = compute_tf(12, 15, 3, True)
>>> match, info, info_analytical = tf_matches(T, compute_tf_analytical(12, 15, 3, True))
>>> row = extract_stepinfo_data(T)
"""

from typing import Optional, Tuple

import numpy as np

from reservoir_control.config import DEFAULT_SIMULATION_CONFIG, DEFAULT_TOLERANCE, SimulationConfig
from reservoir_control.control.step_response import (
    settled_final_value,
    shared_time_grid,
    step_characteristics,
    step_response,
)
from reservoir_control.systems.transfer_function import TransferFunction
from reservoir_control.types.control_classical import STEP_INFO_FIELDS, StepInfo, StepInfoRow


def metric_matches(a: float, b: float, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """True if both values are finite and |a - b| < tolerance."""
    if not (np.isfinite(a) and np.isfinite(b)):
        return False
    return bool(abs(a - b) < tolerance)


def tf_matches(
    T_1: TransferFunction,
    T_2: TransferFunction,
    tolerance: float = DEFAULT_TOLERANCE,
    plot: bool = False,
    plotter=None,
    config: Optional[SimulationConfig] = None,
) -> Tuple[bool, StepInfo, StepInfo]:
    """
    Decide whether two transfer functions have the same step response.

    Both systems are simulated on one shared time grid (long enough for
    the slower of the two), so the result is symmetric in T_1 and T_2.

    Parameters
    ----------
    T_1, T_2 : TransferFunction
        Systems to compare
    tolerance : float
        Absolute tolerance per characteristic, default 1e-3
    plot : bool
        If True, overlay both step responses with the plotter and show
        the figure. Does not affect the result.
    plotter : Optional[ControlPlotter]
        Plotting collaborator, default ControlPlotter()
    config : Optional[SimulationConfig]
        Simulation settings

    Returns
    -------
    Tuple[bool, StepInfo, StepInfo]
        (match, characteristics of T_1, characteristics of T_2)

    Raises
    ------
    ValueError
        If tolerance is not positive

    Examples
    --------
    >>> T, _ = compute_tf(5, 0, 0, True)
    >>> match, _, _ = tf_matches(T, compute_tf_analytical(5, 0, 0, True))
    >>> match
    True
    """
    if not tolerance > 0:
        raise ValueError(f"tolerance must be positive, got {tolerance}")
    config = config or DEFAULT_SIMULATION_CONFIG

    t = shared_time_grid(T_1, T_2, config=config)
    _, y_1 = step_response(T_1, t=t, config=config)
    _, y_2 = step_response(T_2, t=t, config=config)
    info_1 = step_characteristics(t, y_1, settled_final_value(T_1, config), config)
    info_2 = step_characteristics(t, y_2, settled_final_value(T_2, config), config)

    checks = [metric_matches(info_1[field], info_2[field], tolerance) for field in STEP_INFO_FIELDS]
    match = all(checks)

    if plot:
        if plotter is None:
            from reservoir_control.visualization.control_plots import ControlPlotter

            plotter = ControlPlotter()
        fig = plotter.plot_step_comparison(
            t,
            y_1,
            y_2,
            labels=("T_1", "T_2"),
            title="System Verification Using Step Response",
        )
        fig.show()

    return match, info_1, info_2


def extract_stepinfo_data(
    T: TransferFunction,
    config: Optional[SimulationConfig] = None,
) -> StepInfoRow:
    """
    Step info table row for one transfer function.

    Rise time, settling time and overshoot come from the same
    characteristics used by ``tf_matches``. The steady-state value is
    the last sample of the simulated response, and the steady-state
    error is its distance to the unit reference.

    Parameters
    ----------
    T : TransferFunction
        Closed-loop transfer function
    config : Optional[SimulationConfig]
        Simulation settings

    Returns
    -------
    StepInfoRow
        (rise_time, settling_time, overshoot, steady_state_value,
        steady_state_error). Non-settling systems give a partially
        defined row (settling_time = inf).

    Examples
    --------
    >>> T, _ = compute_tf(10, 0, 0, True)
    >>> row = extract_stepinfo_data(T)
    >>> round(row.steady_state_value, 3)
    0.833
    """
    config = config or DEFAULT_SIMULATION_CONFIG
    t, y = step_response(T, config=config)
    info = step_characteristics(t, y, settled_final_value(T, config), config)

    steady_state_value = float(y[-1])
    return StepInfoRow(
        rise_time=info["rise_time"],
        settling_time=info["settling_time"],
        overshoot=info["overshoot"],
        steady_state_value=steady_state_value,
        steady_state_error=abs(1.0 - steady_state_value),
    )


__all__ = [
    "metric_matches",
    "tf_matches",
    "extract_stepinfo_data",
]
