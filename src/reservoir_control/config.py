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
Simulation Configuration

Numeric settings for step-response simulation and transfer-function
comparison. Every function that simulates accepts an optional
``config`` argument and falls back to ``DEFAULT_SIMULATION_CONFIG``.

Usage
-----
>>> from reservoir_control.config import SimulationConfig
>>>
>>> # 5% settling band and a finer time grid
>>> config = SimulationConfig(settling_time_threshold=0.05, n_points=20001)
>>> info = step_info(T, config=config)
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

DEFAULT_TOLERANCE = 1e-3
"""Absolute tolerance used when comparing step-response characteristics."""


@dataclass(frozen=True)
class SimulationConfig:
    """
    Settings for unit-step simulation and step characteristics.

    Attributes
    ----------
    rise_time_limits : Tuple[float, float]
        Fractions of the step amplitude bounding the rise-time interval
    settling_time_threshold : float
        Settling band as a fraction of the step amplitude
    horizon_factor : float
        Simulation horizon is horizon_factor / sigma, sigma being the
        slowest decay rate |Re(p)| among the reduced poles
    min_horizon : float
        Lower bound on the simulation horizon (s)
    max_horizon : float
        Hard cap on the simulation horizon (s). Guarantees termination
        for unstable or very slow systems.
    default_horizon : float
        Horizon used when no pole provides a time scale (s)
    n_points : int
        Number of samples on the uniform time grid
    stability_tolerance : float
        Poles with Re(p) >= -stability_tolerance do not decay
    cancellation_tolerance : float
        Relative distance under which a pole and a zero cancel
    """

    rise_time_limits: Tuple[float, float] = (0.1, 0.9)
    settling_time_threshold: float = 0.02
    horizon_factor: float = 12.0
    min_horizon: float = 1.0
    max_horizon: float = 100.0
    default_horizon: float = 10.0
    n_points: int = 5001
    stability_tolerance: float = 1e-9
    cancellation_tolerance: float = float(np.sqrt(np.finfo(float).eps))

    def __post_init__(self):
        low, high = self.rise_time_limits
        if not 0.0 <= low < high <= 1.0:
            raise ValueError(
                f"rise_time_limits must satisfy 0 <= low < high <= 1, got {self.rise_time_limits}"
            )
        if not 0.0 < self.settling_time_threshold < 1.0:
            raise ValueError(
                f"settling_time_threshold must be in (0, 1), got {self.settling_time_threshold}"
            )
        for name in ("horizon_factor", "min_horizon", "max_horizon", "default_horizon"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.min_horizon > self.max_horizon:
            raise ValueError(
                f"min_horizon ({self.min_horizon}) exceeds max_horizon ({self.max_horizon})"
            )
        if self.n_points < 2:
            raise ValueError(f"n_points must be at least 2, got {self.n_points}")
        if self.stability_tolerance < 0 or self.cancellation_tolerance < 0:
            raise ValueError("tolerances must be non-negative")


DEFAULT_SIMULATION_CONFIG = SimulationConfig()


__all__ = [
    "DEFAULT_TOLERANCE",
    "SimulationConfig",
    "DEFAULT_SIMULATION_CONFIG",
]
