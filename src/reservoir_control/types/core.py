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
Core Type Definitions

Semantic aliases for the arrays that flow through transfer-function
construction, step-response simulation and frequency analysis.

Design Principles
-----------------
- **Semantic Clarity**: Names convey the signal or quantity they hold
- **NumPy Native**: Every array is a ``np.ndarray`` at runtime
- **Type Safety**: Enable static type checking

Usage
-----
>>> from reservoir_control.types.core import Coefficients, TimeVector
>>>
>>> def dc_value(num: Coefficients, den: Coefficients) -> float:
...     return num[-1] / den[-1]
"""

from typing import Sequence, Union

import numpy as np

# ============================================================================
# Basic Array Types
# ============================================================================

NumpyArray = np.ndarray
"""Pure NumPy array."""

ScalarLike = Union[float, int, np.number]
"""
Real scalar value.

Examples
--------
>>> kp: ScalarLike = 10
>>> tolerance: ScalarLike = 1e-3
"""

# ============================================================================
# Polynomial Types
# ============================================================================

Coefficients = Union[Sequence[float], np.ndarray]
"""
Polynomial coefficients, highest degree first.

``[a_n, ..., a_1, a_0]`` represents a_n*s^n + ... + a_1*s + a_0, the same
ordering used by ``np.polyval`` and ``np.roots``.

Examples
--------
>>> # 0.005 s^2 + 0.06 s + 0.1
>>> den: Coefficients = [0.005, 0.06, 0.1]
"""

RootVector = np.ndarray
"""
Complex roots of a polynomial (poles or zeros), shape (n,).
"""

# ============================================================================
# Signal Types
# ============================================================================

TimeVector = np.ndarray
"""
Uniform simulation time grid, shape (T,), starting at 0.

Examples
--------
>>> t: TimeVector = np.linspace(0.0, 10.0, 5001)
"""

ResponseVector = np.ndarray
"""
Scalar output sampled on a time grid, shape (T,).
"""

FrequencyVector = np.ndarray
"""
Angular frequencies in rad/s, shape (n_freq,).
"""

GainVector = np.ndarray
"""
Loop gains swept by a root locus, shape (n_gains,).
"""


# ============================================================================
# Export All
# ============================================================================

__all__ = [
    "NumpyArray",
    "ScalarLike",
    "Coefficients",
    "RootVector",
    "TimeVector",
    "ResponseVector",
    "FrequencyVector",
    "GainVector",
]
