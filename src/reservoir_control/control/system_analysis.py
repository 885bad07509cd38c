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
Frequency and Pole Analysis

Pure functions producing the numeric data behind Bode plots, root loci
and pole-location checks:

- ``analyze_stability``: pole-based classification after cancellation
- ``frequency_response``: H(jw) with magnitude in dB and unwrapped phase
- ``root_locus``: closed-loop poles of den(s) + k num(s) over a gain sweep

Stability:
    Continuous: All Re(p) < 0 (left half-plane)

Usage
-----
>>> from reservoir_control.control.system_analysis import frequency_response, root_locus
>>>
>>> _, T_fwd = compute_tf(5, 0, 0, True)
>>> bode = frequency_response(T_fwd)
>>> locus = root_locus(T_fwd)
>>> locus['poles'].shape
(301, 4)
"""

from typing import Optional

import control as ct
import numpy as np

from reservoir_control.config import DEFAULT_SIMULATION_CONFIG
from reservoir_control.systems.transfer_function import TransferFunction
from reservoir_control.types.control_classical import (
    FrequencyResponse,
    RootLocusData,
    StabilityInfo,
)
from reservoir_control.types.core import FrequencyVector, GainVector

# ============================================================================
# Stability
# ============================================================================


def analyze_stability(
    tf: TransferFunction,
    tolerance: Optional[float] = None,
) -> StabilityInfo:
    """
    Classify a transfer function by the location of its poles.

    Poles and zeros that cancel are removed first, so s/s does not count
    as a pole at the origin.

    Parameters
    ----------
    tf : TransferFunction
        System to analyze
    tolerance : Optional[float]
        Half-width of the band around the imaginary axis treated as
        marginal, default config stability_tolerance

    Returns
    -------
    StabilityInfo
        Reduced poles and zeros with stability flags

    Examples
    --------
    >>> T, _ = compute_tf(12, 15, 3, True)
    >>> analyze_stability(T)['is_stable']
    True
    """
    if tolerance is None:
        tolerance = DEFAULT_SIMULATION_CONFIG.stability_tolerance
    reduced = tf.minreal(DEFAULT_SIMULATION_CONFIG.cancellation_tolerance)
    poles = reduced.poles()
    zeros = reduced.zeros()

    if poles.size == 0:
        return StabilityInfo(
            poles=poles,
            zeros=zeros,
            max_real_part=None,
            is_stable=True,
            is_marginally_stable=False,
            is_unstable=False,
        )

    max_real = float(np.max(np.real(poles)))
    is_unstable = max_real > tolerance
    is_stable = max_real < -tolerance
    return StabilityInfo(
        poles=poles,
        zeros=zeros,
        max_real_part=max_real,
        is_stable=is_stable,
        is_marginally_stable=not is_stable and not is_unstable,
        is_unstable=is_unstable,
    )


# ============================================================================
# Frequency Response
# ============================================================================


def default_frequency_grid(tf: TransferFunction, n_points: int = 1000) -> FrequencyVector:
    """
    Log-spaced grid covering every break frequency of tf.

    Spans one decade below the smallest to one decade above the largest
    nonzero pole/zero magnitude; 1e-2..1e2 rad/s when there is none.
    """
    breaks = np.abs(np.concatenate([tf.poles(), tf.zeros()]))
    breaks = breaks[breaks > 1e-12]
    if breaks.size:
        low = np.floor(np.log10(np.min(breaks))) - 1
        high = np.ceil(np.log10(np.max(breaks))) + 1
    else:
        low, high = -2.0, 2.0
    return np.logspace(low, high, n_points)


def frequency_response(
    tf: TransferFunction,
    omega: Optional[FrequencyVector] = None,
    n_points: int = 1000,
) -> FrequencyResponse:
    """
    Frequency response H(jw) for Bode analysis.

    Parameters
    ----------
    tf : TransferFunction
        Usually the open-loop transfer function
    omega : Optional[FrequencyVector]
        Angular frequencies (rad/s), positive. Default from
        ``default_frequency_grid``.
    n_points : int
        Grid size when omega is None

    Returns
    -------
    FrequencyResponse
        Frequencies, complex response, magnitude (dB), phase (deg)

    Raises
    ------
    ValueError
        If omega is not 1-D, empty, or contains non-positive values
    """
    if omega is None:
        omega = default_frequency_grid(tf, n_points)
    omega = np.asarray(omega, dtype=float)
    if omega.ndim != 1 or omega.size == 0:
        raise ValueError(f"omega must be a non-empty 1-D array, got shape {omega.shape}")
    if np.any(omega <= 0) or not np.all(np.isfinite(omega)):
        raise ValueError("omega must contain positive finite frequencies")

    response = tf.evaluate(1j * omega)
    with np.errstate(divide="ignore"):
        magnitude_db = 20.0 * np.log10(np.abs(response))
    phase_deg = np.degrees(np.unwrap(np.angle(response)))

    return FrequencyResponse(
        frequencies=omega,
        response=response,
        magnitude_db=magnitude_db,
        phase_deg=phase_deg,
    )


# ============================================================================
# Root Locus
# ============================================================================


def root_locus(
    open_loop: TransferFunction,
    gains: Optional[GainVector] = None,
) -> RootLocusData:
    """
    Closed-loop pole locations of k * open_loop under unity feedback.

    The sweep itself is ``control.root_locus_map``, which finds the roots
    of den(s) + k num(s) for each gain and orders them so that each
    column follows one branch.

    Parameters
    ----------
    open_loop : TransferFunction
        Proper open-loop transfer function num(s)/den(s)
    gains : Optional[GainVector]
        Loop gains to evaluate. Default: 0 followed by 300 log-spaced
        values in [1e-3, 1e3].

    Returns
    -------
    RootLocusData
        Gains, pole branches (n_gains, order), open-loop zeros and poles.
        Poles that escape to infinity (characteristic degree drop) are NaN.

    Raises
    ------
    ValueError
        If open_loop is improper or gains is empty / non-finite
    """
    if not open_loop.is_proper:
        raise ValueError("root locus requires a proper open-loop transfer function")
    if gains is None:
        gains = np.concatenate([[0.0], np.logspace(-3, 3, 300)])
    gains = np.asarray(gains, dtype=float)
    if gains.ndim != 1 or gains.size == 0 or not np.all(np.isfinite(gains)):
        raise ValueError("gains must be a non-empty 1-D array of finite values")

    rldata = ct.root_locus_map(ct.tf(open_loop.num, open_loop.den), gains=gains)
    branches = np.asarray(rldata.loci, dtype=complex).reshape(gains.size, open_loop.order)
    branches[~np.isfinite(branches)] = np.nan + 1j * np.nan

    return RootLocusData(
        gains=gains,
        poles=branches,
        zeros=np.asarray(rldata.zeros, dtype=complex),
        open_loop_poles=np.asarray(rldata.poles, dtype=complex),
    )


__all__ = [
    "analyze_stability",
    "default_frequency_grid",
    "frequency_response",
    "root_locus",
]
