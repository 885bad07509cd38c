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
Water Reservoir Closed-Loop Model

A reservoir whose level is regulated by a motor-driven pump. The forward
path is a PID controller C(s), the motor P(s) and the reservoir/sensor
block G(s) in series, closed with unity feedback:

    r --->(+)---> C(s) ---> P(s) ---> G(s) ---+---> h
           ^-                                 |
           +----------------------------------+

Blocks
------
    C(s) = (Kd s^2 + Kp s + Ki) / s                  (1 when bypassed)
    P(s) = Kt / (J L s^2 + (b L + J R) s + b R)      (armature-controlled motor)
    G(s) = (Rf / Kf) / (A Rf s + 1)                  (reservoir with outlet resistance)

Two independent derivations of the closed-loop transfer function are
provided so that each can be used to check the other:

- ``compute_tf``: composes the blocks with rational-function algebra
- ``compute_tf_analytical``: writes the closed-loop polynomials directly
  from hand-derived coefficient formulas

Usage
-----
>>> from reservoir_control.systems.water_reservoir import compute_tf, compute_tf_analytical
>>>
>>> T, T_fwd = compute_tf(12, 15, 3, True)
>>> T_analytical = compute_tf_analytical(12, 15, 3, True)
>>> T.order, T_analytical.order
(4, 4)
"""

import math
from dataclasses import dataclass
from typing import Tuple

from reservoir_control.systems.transfer_function import TransferFunction, feedback, series
from reservoir_control.types.core import ScalarLike

# ============================================================================
# Parameters
# ============================================================================


@dataclass(frozen=True)
class PlantConstants:
    """
    Physical parameters of the pump motor and the reservoir.

    Attributes
    ----------
    J : float
        Rotor moment of inertia (kg m^2)
    b : float
        Viscous friction coefficient (N m s)
    Kt : float
        Motor torque constant (N m / A)
    R : float
        Armature resistance (Ohm)
    L : float
        Armature inductance (H)
    A : float
        Reservoir cross-sectional area (m^2)
    Rf : float
        Outlet flow resistance
    Kf : float
        Level sensor gain

    Raises
    ------
    ValueError
        If any value is not finite, or Kf is zero
    """

    J: float = 0.01
    b: float = 0.1
    Kt: float = 0.1
    R: float = 1.0
    L: float = 0.5
    A: float = 0.5
    Rf: float = 0.5
    Kf: float = 1.0

    def __post_init__(self):
        for name in ("J", "b", "Kt", "R", "L", "A", "Rf", "Kf"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"plant constant {name} must be finite, got {value}")
        if self.Kf == 0:
            raise ValueError("sensor gain Kf must be nonzero")


WATER_RESERVOIR_PLANT = PlantConstants()
"""Reference reservoir used by every scenario."""


@dataclass(frozen=True)
class ControllerGains:
    """
    PID gains and the flag that enables the controller block.

    When ``has_pid`` is False the controller is replaced by a unity gain
    and kp, ki, kd have no effect.

    Examples
    --------
    >>> ControllerGains(kp=10, ki=10)               # PI
    >>> ControllerGains(has_pid=False)              # no controller
    """

    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0
    has_pid: bool = True

    def __post_init__(self):
        if not isinstance(self.has_pid, bool):
            raise TypeError(f"has_pid must be bool, got {type(self.has_pid).__name__}")
        for name in ("kp", "ki", "kd"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                try:
                    value = float(value)
                except (TypeError, ValueError) as exc:
                    raise TypeError(f"{name} must be a real number, got {value!r}") from exc
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")


# ============================================================================
# Blocks
# ============================================================================


def controller_tf(gains: ControllerGains) -> TransferFunction:
    """PID block C(s) = (Kd s^2 + Kp s + Ki) / s, or unity when bypassed."""
    if not gains.has_pid:
        return TransferFunction.static_gain(1.0)
    return TransferFunction([gains.kd, gains.kp, gains.ki], [1.0, 0.0])


def motor_tf(plant: PlantConstants = WATER_RESERVOIR_PLANT) -> TransferFunction:
    """Motor block P(s) = Kt / (J L s^2 + (b L + J R) s + b R)."""
    J, b, Kt, R, L = plant.J, plant.b, plant.Kt, plant.R, plant.L
    return TransferFunction([Kt], [J * L, b * L + J * R, b * R])


def sensor_tf(plant: PlantConstants = WATER_RESERVOIR_PLANT) -> TransferFunction:
    """Reservoir/sensor block G(s) = (Rf / Kf) / (A Rf s + 1)."""
    return TransferFunction([plant.Rf / plant.Kf], [plant.A * plant.Rf, 1.0])


# ============================================================================
# Transfer Function Builders
# ============================================================================


def compute_tf(
    kp: ScalarLike,
    ki: ScalarLike,
    kd: ScalarLike,
    has_pid: bool,
    plant: PlantConstants = WATER_RESERVOIR_PLANT,
) -> Tuple[TransferFunction, TransferFunction]:
    """
    Closed-loop and open-loop transfer functions by block composition.

    The open loop is the series product C(s) P(s) G(s); the closed loop
    is its unity negative feedback. No pole/zero cancellation is
    performed, so the closed-loop denominator has degree 4 with the
    controller and 3 without.

    Parameters
    ----------
    kp, ki, kd : ScalarLike
        Proportional, integral and derivative gains
    has_pid : bool
        False replaces the controller by a unity gain (gains ignored)
    plant : PlantConstants
        Physical parameters, default WATER_RESERVOIR_PLANT

    Returns
    -------
    Tuple[TransferFunction, TransferFunction]
        (T, T_fwd): closed-loop and open-loop transfer functions

    Raises
    ------
    ValueError
        If a gain is not finite or the loop is ill-formed

    Examples
    --------
    >>> T, T_fwd = compute_tf(10, 10, 0, True)
    >>> T.order
    4
    """
    gains = ControllerGains(kp=kp, ki=ki, kd=kd, has_pid=has_pid)
    open_loop = series(controller_tf(gains), motor_tf(plant), sensor_tf(plant))
    closed_loop = feedback(open_loop)
    return closed_loop, open_loop


def compute_tf_analytical(
    kp: ScalarLike,
    ki: ScalarLike,
    kd: ScalarLike,
    has_pid: bool,
    plant: PlantConstants = WATER_RESERVOIR_PLANT,
) -> TransferFunction:
    """
    Closed-loop transfer function from hand-derived coefficients.

    With the controller, multiplying numerator and denominator of
    C P G / (1 + C P G) by s Kf (motor denominator) (A Rf s + 1) gives

        T(s) = Kt Rf (Kd s^2 + Kp s + Ki) / (a4 s^4 + a3 s^3 + a2 s^2 + a1 s + a0)

        a4 = Kf A Rf J L
        a3 = Kf (A Rf (b L + J R) + J L)
        a2 = Kf A Rf b R + Kf b L + Kf J R + Kt Rf Kd
        a1 = Kf b R + Kt Rf Kp
        a0 = Kt Rf Ki

    Without the controller the loop is third order:

        T(s) = (Kt Rf / Kf) / (A Rf J L s^3 + (A Rf b L + A Rf J R + J L) s^2
                               + (A Rf b R + b L + J R) s + b R + Kt Rf / Kf)

    Parameters
    ----------
    kp, ki, kd : ScalarLike
        Proportional, integral and derivative gains
    has_pid : bool
        False drops the controller polynomial (gains ignored)
    plant : PlantConstants
        Physical parameters, default WATER_RESERVOIR_PLANT

    Returns
    -------
    TransferFunction
        Closed-loop transfer function

    Raises
    ------
    ValueError
        If a gain is not finite or the denominator vanishes
    """
    gains = ControllerGains(kp=kp, ki=ki, kd=kd, has_pid=has_pid)
    J, b, Kt, R, L = plant.J, plant.b, plant.Kt, plant.R, plant.L
    A, Rf, Kf = plant.A, plant.Rf, plant.Kf

    if gains.has_pid:
        a4 = Kf * A * Rf * J * L
        a3 = Kf * (A * Rf * (b * L + J * R) + J * L)
        a2 = Kf * A * Rf * b * R + Kf * b * L + Kf * J * R + Kt * Rf * gains.kd
        a1 = Kf * b * R + Kt * Rf * gains.kp
        a0 = Kt * Rf * gains.ki
        num = [Kt * Rf * gains.kd, Kt * Rf * gains.kp, Kt * Rf * gains.ki]
        return TransferFunction(num, [a4, a3, a2, a1, a0])

    den = [
        A * Rf * J * L,
        A * Rf * b * L + A * Rf * J * R + J * L,
        A * Rf * b * R + b * L + J * R,
        b * R + Kt * Rf / Kf,
    ]
    return TransferFunction([Kt * Rf / Kf], den)


__all__ = [
    "PlantConstants",
    "WATER_RESERVOIR_PLANT",
    "ControllerGains",
    "controller_tf",
    "motor_tf",
    "sensor_tf",
    "compute_tf",
    "compute_tf_analytical",
]
