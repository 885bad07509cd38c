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
Step Response Evaluation

Pure stateless functions that simulate the unit-step response of a
transfer function and extract its standard characteristics.

**Simulation:**
- Common poles and zeros are cancelled first (``minreal``), so a
  structurally redundant factor such as s/s neither affects the time
  scale nor introduces a spurious integrator.
- The reduced system is simulated with ``scipy.signal.step`` (exact
  zero-order-hold discretization of the state-space realization) on a
  uniform grid [0, horizon].
- The horizon is horizon_factor / sigma where sigma is the slowest decay
  rate among the poles, clipped to [min_horizon, max_horizon]. Unstable
  systems use their fastest growth rate instead, so every call
  terminates on a bounded grid.

**Characteristics** come from ``control.step_info`` (python-control's
``stepinfo``) on the simulated samples, with the final value fixed to
the DC gain of the reduced transfer function rather than the last
simulated sample:
    RiseTime     : 10% -> 90% of the final value
    SettlingTime : end of the last excursion outside the 2% band
    SettlingMin  : min of y from the 90% crossing on
    SettlingMax  : max of y from the 90% crossing on
    Overshoot    : percent above the final value
    Undershoot   : percent of opposite sign to the final value
    Peak         : max |y|
    PeakTime     : first time max |y| is reached

Non-settling responses (unstable or marginal poles, or a band exit at the
end of the horizon) are not errors: a ``NonSettlingResponseWarning`` is
emitted and the undefined characteristics are NaN or inf.

Usage
-----
>>> from reservoir_control.control.step_response import step_info, step_response
>>>
>>> t, y = step_response(T)
>>> info = step_info(T)
>>> print(f"Rise time: {info['rise_time']:.3f} s")
"""

import warnings
from typing import Optional, Tuple

import control as ct
import numpy as np
from scipy import signal

from reservoir_control.config import DEFAULT_SIMULATION_CONFIG, SimulationConfig
from reservoir_control.systems.transfer_function import TransferFunction
from reservoir_control.types.control_classical import StepInfo
from reservoir_control.types.core import ResponseVector, TimeVector


class NonSettlingResponseWarning(UserWarning):
    """Step response does not settle to a finite final value within the horizon."""


# ============================================================================
# Reduction and Time Grid
# ============================================================================


def _reduce(tf: TransferFunction, config: SimulationConfig) -> TransferFunction:
    if not isinstance(tf, TransferFunction):
        raise TypeError(f"expected TransferFunction, got {type(tf).__name__}")
    if not tf.is_proper:
        raise ValueError(
            f"step response requires a proper transfer function, got numerator degree "
            f"{len(tf.num) - 1} > denominator degree {tf.order}"
        )
    return tf.minreal(config.cancellation_tolerance)


def _is_decaying(reduced: TransferFunction, config: SimulationConfig) -> bool:
    poles = reduced.poles()
    return bool(np.all(np.real(poles) < -config.stability_tolerance))


def simulation_horizon(
    tf: TransferFunction,
    config: Optional[SimulationConfig] = None,
) -> float:
    """
    Simulation end time for the unit-step response of tf.

    Parameters
    ----------
    tf : TransferFunction
        System to simulate (cancelled internally)
    config : Optional[SimulationConfig]
        Horizon settings, default DEFAULT_SIMULATION_CONFIG

    Returns
    -------
    float
        Horizon in seconds, within [min_horizon, max_horizon]

    Examples
    --------
    >>> # slowest pole at s = -2 -> 12 / 2 = 6 s
    >>> simulation_horizon(TransferFunction([20], [1, 12, 20]))
    6.0
    """
    config = config or DEFAULT_SIMULATION_CONFIG
    reduced = _reduce(tf, config)
    real_parts = np.real(reduced.poles())

    if real_parts.size == 0:
        horizon = config.default_horizon
    elif np.any(real_parts >= -config.stability_tolerance):
        growth = float(np.max(real_parts))
        if growth > config.stability_tolerance:
            horizon = config.horizon_factor / growth
        else:
            horizon = config.default_horizon
    else:
        horizon = config.horizon_factor / float(np.min(np.abs(real_parts)))

    return float(np.clip(horizon, config.min_horizon, config.max_horizon))


def time_grid(horizon: float, config: Optional[SimulationConfig] = None) -> TimeVector:
    """Uniform grid of config.n_points samples on [0, horizon]."""
    config = config or DEFAULT_SIMULATION_CONFIG
    if not np.isfinite(horizon) or horizon <= 0:
        raise ValueError(f"horizon must be positive and finite, got {horizon}")
    return np.linspace(0.0, horizon, config.n_points)


def shared_time_grid(
    *tfs: TransferFunction,
    config: Optional[SimulationConfig] = None,
) -> TimeVector:
    """
    One time grid long enough for every system given.

    Used when responses must be compared sample by sample.
    """
    if not tfs:
        raise ValueError("shared_time_grid() requires at least one transfer function")
    config = config or DEFAULT_SIMULATION_CONFIG
    horizon = max(simulation_horizon(tf, config) for tf in tfs)
    return time_grid(horizon, config)


def _validate_time_grid(t) -> TimeVector:
    t = np.asarray(t, dtype=float)
    if t.ndim != 1 or t.size < 2:
        raise ValueError(f"time grid must be 1-D with at least 2 samples, got shape {t.shape}")
    if not np.all(np.isfinite(t)):
        raise ValueError("time grid must be finite")
    if t[0] != 0.0:
        raise ValueError(f"time grid must start at 0, got {t[0]}")
    dt = np.diff(t)
    if np.any(dt <= 0):
        raise ValueError("time grid must be strictly increasing")
    if not np.allclose(dt, dt[0], rtol=1e-6, atol=0.0):
        raise ValueError("time grid must be uniformly spaced")
    return t


# ============================================================================
# Simulation
# ============================================================================


def step_response(
    tf: TransferFunction,
    t: Optional[TimeVector] = None,
    config: Optional[SimulationConfig] = None,
) -> Tuple[TimeVector, ResponseVector]:
    """
    Unit-step response of a transfer function.

    Parameters
    ----------
    tf : TransferFunction
        Proper transfer function
    t : Optional[TimeVector]
        Uniform grid starting at 0. If None, [0, simulation_horizon(tf)]
        with config.n_points samples.
    config : Optional[SimulationConfig]
        Simulation settings

    Returns
    -------
    Tuple[TimeVector, ResponseVector]
        (t, y) with y[k] the output at t[k]

    Raises
    ------
    ValueError
        If tf is improper or t is not a valid uniform grid

    Examples
    --------
    >>> T, _ = compute_tf(10, 10, 0, True)
    >>> t, y = step_response(T)
    >>> abs(y[-1] - 1.0) < 1e-3
    True
    """
    config = config or DEFAULT_SIMULATION_CONFIG
    reduced = _reduce(tf, config)
    if t is None:
        t = time_grid(simulation_horizon(reduced, config), config)
    else:
        t = _validate_time_grid(t)

    if reduced.is_zero:
        return t, np.zeros_like(t)
    if reduced.order == 0:
        return t, np.full_like(t, reduced.num[0] / reduced.den[0])

    _, y = signal.step((reduced.num, reduced.den), T=t)
    return t, np.asarray(y, dtype=float)


def settled_final_value(
    tf: TransferFunction,
    config: Optional[SimulationConfig] = None,
) -> Optional[float]:
    """
    Final value of the step response, or None if it never settles.

    The final value is the DC gain of the reduced transfer function and
    exists only when every remaining pole decays.
    """
    config = config or DEFAULT_SIMULATION_CONFIG
    reduced = _reduce(tf, config)
    if not _is_decaying(reduced, config):
        return None
    return reduced.dc_gain()


# ============================================================================
# Characteristics
# ============================================================================


def _non_settling_info() -> StepInfo:
    return StepInfo(
        rise_time=np.nan,
        settling_time=np.inf,
        settling_min=np.nan,
        settling_max=np.nan,
        overshoot=np.nan,
        undershoot=np.nan,
        peak=np.inf,
        peak_time=np.inf,
    )


def _peak(t: TimeVector, y: ResponseVector) -> Tuple[float, float]:
    peak_index = int(np.argmax(np.abs(y)))
    return float(np.abs(y[peak_index])), float(t[peak_index])


def _warn_not_settled(t: TimeVector) -> None:
    warnings.warn(
        f"Step response has not settled within the simulation horizon "
        f"({t[-1]:.3g} s); increase max_horizon or horizon_factor",
        NonSettlingResponseWarning,
        stacklevel=3,
    )


def step_characteristics(
    t: TimeVector,
    y: ResponseVector,
    final_value: Optional[float],
    config: Optional[SimulationConfig] = None,
) -> StepInfo:
    """
    Step characteristics of a sampled response.

    The metrics come from ``control.step_info`` evaluated on the sampled
    data with ``yfinal=final_value``; this function only maps its result
    onto ``StepInfo`` and replaces the cases the library leaves
    undefined with fixed sentinels.

    Parameters
    ----------
    t : TimeVector
        Time grid, shape (T,)
    y : ResponseVector
        Sampled step response, shape (T,)
    final_value : Optional[float]
        Steady-state value; None marks a non-settling system
    config : Optional[SimulationConfig]
        Rise-time limits and settling threshold

    Returns
    -------
    StepInfo
        The eight characteristics. For a non-settling system rise_time and
        the settling/overshoot fields are NaN, settling_time, peak and
        peak_time are inf. A stable response still outside the settling
        band at the end of the grid has settling_time = inf, and
        rise_time = inf if it never reached the upper rise limit.

    Raises
    ------
    ValueError
        If t and y are not 1-D arrays of equal length

    Warns
    -----
    NonSettlingResponseWarning
        If final_value is None or the response has not settled by the
        end of the grid
    """
    config = config or DEFAULT_SIMULATION_CONFIG
    t = np.asarray(t, dtype=float)
    y = np.asarray(y, dtype=float)
    if t.shape != y.shape or t.ndim != 1 or t.size < 2:
        raise ValueError(f"t and y must be 1-D of equal length, got {t.shape} and {y.shape}")

    if final_value is None or not np.isfinite(final_value) or not np.all(np.isfinite(y)):
        warnings.warn(
            "Step response does not settle (non-decaying poles); "
            "characteristics are reported as NaN/inf",
            NonSettlingResponseWarning,
            stacklevel=2,
        )
        return _non_settling_info()

    peak, peak_time = _peak(t, y)
    if final_value == 0:
        # Relative characteristics are undefined without a step amplitude
        return StepInfo(
            rise_time=np.nan,
            settling_time=np.nan,
            settling_min=float(np.min(y)),
            settling_max=float(np.max(y)),
            overshoot=np.nan,
            undershoot=np.nan,
            peak=peak,
            peak_time=peak_time,
        )

    high = config.rise_time_limits[1]
    if not np.any(np.sign(final_value) * (y - high * final_value) >= 0):
        _warn_not_settled(t)
        return StepInfo(
            rise_time=np.inf,
            settling_time=np.inf,
            settling_min=np.nan,
            settling_max=np.nan,
            overshoot=np.nan,
            undershoot=np.nan,
            peak=peak,
            peak_time=peak_time,
        )

    info = ct.step_info(
        y,
        T=t,
        yfinal=final_value,
        SettlingTimeThreshold=config.settling_time_threshold,
        RiseTimeLimits=config.rise_time_limits,
    )

    settling_time = info["SettlingTime"]
    if np.isnan(settling_time):
        _warn_not_settled(t)
        settling_time = np.inf

    return StepInfo(
        rise_time=float(info["RiseTime"]),
        settling_time=float(settling_time),
        settling_min=float(info["SettlingMin"]),
        settling_max=float(info["SettlingMax"]),
        overshoot=float(info["Overshoot"]),
        undershoot=float(info["Undershoot"]),
        peak=float(info["Peak"]),
        peak_time=float(info["PeakTime"]),
    )


def step_info(
    tf: TransferFunction,
    t: Optional[TimeVector] = None,
    config: Optional[SimulationConfig] = None,
) -> StepInfo:
    """
    Step-response characteristics of a transfer function.

    Parameters
    ----------
    tf : TransferFunction
        Proper transfer function
    t : Optional[TimeVector]
        Time grid to simulate on (see ``step_response``)
    config : Optional[SimulationConfig]
        Simulation settings

    Returns
    -------
    StepInfo
        Rise time, settling time, settling min/max, overshoot,
        undershoot, peak and peak time

    Examples
    --------
    >>> T, _ = compute_tf(10, 0, 0, True)
    >>> info = step_info(T)
    >>> info['overshoot'] > 0
    True
    """
    config = config or DEFAULT_SIMULATION_CONFIG
    t, y = step_response(tf, t=t, config=config)
    return step_characteristics(t, y, settled_final_value(tf, config), config)


__all__ = [
    "NonSettlingResponseWarning",
    "simulation_horizon",
    "time_grid",
    "shared_time_grid",
    "step_response",
    "settled_final_value",
    "step_characteristics",
    "step_info",
]
