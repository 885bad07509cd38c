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
Type Definitions
================

Array aliases and structured result types shared across the package.

>>> from reservoir_control.types import StepInfo, StepInfoRow, Coefficients
"""

from .control_classical import (
    STEP_INFO_FIELDS,
    FrequencyResponse,
    RootLocusData,
    StabilityInfo,
    StepInfo,
    StepInfoRow,
)
from .core import (
    Coefficients,
    FrequencyVector,
    GainVector,
    NumpyArray,
    ResponseVector,
    RootVector,
    ScalarLike,
    TimeVector,
)

__all__ = [
    # Result types
    "STEP_INFO_FIELDS",
    "StepInfo",
    "StepInfoRow",
    "FrequencyResponse",
    "RootLocusData",
    "StabilityInfo",
    # Array aliases
    "Coefficients",
    "FrequencyVector",
    "GainVector",
    "NumpyArray",
    "ResponseVector",
    "RootVector",
    "ScalarLike",
    "TimeVector",
]
