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
Classical Control Analysis Types

Result types for single-input single-output transfer-function analysis:
- Step-response characteristics (comparison tuple and table row)
- Frequency response (Bode data)
- Root locus (pole migration versus loop gain)
- Pole-based stability classification

These types provide structured return values from the analysis functions
in ``reservoir_control.control``.

Mathematical Background
----------------------
For a unit step applied to T(s) with initial output y0 and final value
y_final = T(0):

    amplitude   = y_final - y0
    RiseTime    = t(90%) - t(10%)
    SettlingTime: last time |y - y_final| > 2% of |amplitude|
    Overshoot   = 100 * max(0, (max y - y_final) / amplitude)
    Undershoot  = 100 * max(0, -(min y - y0) / amplitude)

Usage
-----
>>> from reservoir_control.types.control_classical import StepInfo, StepInfoRow
>>>
>>> info: StepInfo = step_info(T)
>>> print(info['rise_time'], info['settling_time'])
>>>
>>> row: StepInfoRow = extract_stepinfo_data(T)
>>> print(row.steady_state_error)
"""

from typing import NamedTuple, Optional

import numpy as np
from typing_extensions import TypedDict

from .core import FrequencyVector, GainVector, RootVector

# ============================================================================
# Step Response Types
# ============================================================================

STEP_INFO_FIELDS = (
    "rise_time",
    "settling_time",
    "settling_min",
    "settling_max",
    "overshoot",
    "undershoot",
    "peak",
    "peak_time",
)
"""Fixed field order of the step-response characteristics."""


class StepInfo(TypedDict):
    """
    Step-response characteristics of one transfer function.

    All eight fields are compared field by field when checking whether
    two transfer functions describe the same input-output behavior.

    Fields
    ------
    rise_time : float
        Time from 10% to 90% of the step amplitude (s).
        NaN for non-settling systems, inf if 90% is never reached.
    settling_time : float
        Time after which the error stays within 2% of the amplitude (s).
        inf if the response does not settle within the simulation horizon.
    settling_min : float
        Minimum output once the response has risen (after the 90% crossing)
    settling_max : float
        Maximum output once the response has risen
    overshoot : float
        Percent overshoot above the final value
    undershoot : float
        Percent undershoot below the initial value
    peak : float
        Peak absolute output, inf for unstable systems
    peak_time : float
        Time at which the peak is first reached, inf for unstable systems

    Examples
    --------
    >>> info: StepInfo = step_info(T)
    >>> if np.isfinite(info['settling_time']):
    ...     print(f"Settles in {info['settling_time']:.2f} s")
    """

    rise_time: float
    settling_time: float
    settling_min: float
    settling_max: float
    overshoot: float
    undershoot: float
    peak: float
    peak_time: float


class StepInfoRow(NamedTuple):
    """
    One row of the step info table.

    Field order is fixed so rows can be stacked directly into a table
    (``np.array(rows)`` gives an (n_rows, 5) array).

    Fields
    ------
    rise_time : float
        Rise time (s)
    settling_time : float
        Settling time (s)
    overshoot : float
        Percent overshoot
    steady_state_value : float
        Last sample of the simulated unit-step response
    steady_state_error : float
        |1 - steady_state_value|
    """

    rise_time: float
    settling_time: float
    overshoot: float
    steady_state_value: float
    steady_state_error: float


# ============================================================================
# Frequency Domain Types
# ============================================================================


class FrequencyResponse(TypedDict):
    """
    Frequency response H(jw) of a transfer function.

    Fields
    ------
    frequencies : FrequencyVector
        Angular frequencies (rad/s), shape (n_freq,)
    response : np.ndarray
        Complex response H(jw), shape (n_freq,)
    magnitude_db : np.ndarray
        20*log10(|H(jw)|)
    phase_deg : np.ndarray
        Unwrapped phase of H(jw) in degrees

    Examples
    --------
    >>> bode: FrequencyResponse = frequency_response(T_fwd)
    >>> fig = plotter.plot_frequency_response({'Kp = 5': bode})
    """

    frequencies: FrequencyVector
    response: np.ndarray
    magnitude_db: np.ndarray
    phase_deg: np.ndarray


class RootLocusData(TypedDict):
    """
    Closed-loop pole locations as the loop gain k varies.

    For an open-loop transfer function num(s)/den(s), the closed-loop
    poles at gain k are the roots of den(s) + k*num(s).

    Fields
    ------
    gains : GainVector
        Loop gains, shape (n_gains,), first entry 0
    poles : np.ndarray
        Closed-loop poles, shape (n_gains, n_poles), columns are branches
    zeros : RootVector
        Open-loop zeros (branch end points)
    open_loop_poles : RootVector
        Open-loop poles (branch start points)
    """

    gains: GainVector
    poles: np.ndarray
    zeros: RootVector
    open_loop_poles: RootVector


# ============================================================================
# Stability Analysis Types
# ============================================================================


class StabilityInfo(TypedDict):
    """
    Pole-based stability classification of a continuous-time transfer function.

    Poles and zeros are reported after common pole/zero cancellation.

    Fields
    ------
    poles : RootVector
        Poles of the reduced transfer function
    zeros : RootVector
        Zeros of the reduced transfer function
    max_real_part : Optional[float]
        Largest real part among the poles (None for a static gain)
    is_stable : bool
        True if every pole satisfies Re(p) < 0
    is_marginally_stable : bool
        True if no pole is in the right half-plane but some lie on the
        imaginary axis
    is_unstable : bool
        True if any pole has Re(p) > 0
    """

    poles: RootVector
    zeros: RootVector
    max_real_part: Optional[float]
    is_stable: bool
    is_marginally_stable: bool
    is_unstable: bool


# ============================================================================
# Export All
# ============================================================================

__all__ = [
    "STEP_INFO_FIELDS",
    "StepInfo",
    "StepInfoRow",
    "FrequencyResponse",
    "RootLocusData",
    "StabilityInfo",
]
