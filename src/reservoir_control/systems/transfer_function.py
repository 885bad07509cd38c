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
Rational Transfer Functions

A small rational-polynomial abstraction for continuous-time SISO systems:

    T(s) = num(s) / den(s)

with both polynomials stored as real coefficient arrays, highest degree
first (``np.polyval`` ordering).

Block algebra
-------------
- Series composition:   G1 * G2          -> num1*num2 / den1*den2
- Sum:                  G1 + G2          -> (num1*den2 + num2*den1) / den1*den2
- Feedback (negative):  G / (1 + G*H)    -> num_G*den_H / (den_G*den_H + num_G*num_H)

No operation simplifies its result. Pole/zero cancellation is explicit
through ``minreal()``, so the degree of a composed system is always the
sum of its block degrees.

Usage
-----
>>> from reservoir_control.systems.transfer_function import TransferFunction, feedback
>>>
>>> s = TransferFunction.s()
>>> C = (3 * s**2 + 12 * s + 15) / s
>>> P = TransferFunction([0.1], [0.005, 0.06, 0.1])
>>> T = feedback(C * P)
>>> T.order
3
"""

from functools import reduce
from typing import Optional

import numpy as np
import sympy as sp

from reservoir_control.types.core import Coefficients, RootVector, ScalarLike

# ============================================================================
# Polynomial Utilities (Internal)
# ============================================================================


def _trim(coefficients: np.ndarray) -> np.ndarray:
    """Strip leading zeros, keeping at least one coefficient."""
    nonzero = np.flatnonzero(coefficients)
    if nonzero.size == 0:
        return np.zeros(1)
    return np.array(coefficients[nonzero[0] :], dtype=float)


def _trailing_zeros(coefficients: np.ndarray) -> int:
    """Multiplicity of the root at s = 0 (coefficients must be nonzero)."""
    nonzero = np.flatnonzero(coefficients)
    return len(coefficients) - 1 - int(nonzero[-1])


def _as_coefficients(values: Coefficients, name: str) -> np.ndarray:
    """
    Validate and normalize a coefficient sequence.

    Raises
    ------
    TypeError
        If the values are not real numbers
    ValueError
        If the sequence is empty, not 1-D, or contains non-finite values
    """
    if isinstance(values, TransferFunction):
        raise TypeError(f"{name} must be a coefficient sequence, got TransferFunction")
    try:
        arr = np.atleast_1d(np.asarray(values, dtype=float))
    except (TypeError, ValueError) as exc:
        raise TypeError(f"{name} coefficients must be real numbers, got {values!r}") from exc

    if arr.ndim != 1:
        raise ValueError(f"{name} coefficients must be 1-D, got shape {arr.shape}")
    if arr.size == 0:
        raise ValueError(f"{name} coefficients must not be empty")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} coefficients must be finite, got {arr.tolist()}")
    return _trim(arr)


def _format_polynomial(coefficients: np.ndarray, variable: str = "s") -> str:
    """Render coefficients as 'a s^2 + b s + c'."""
    degree = len(coefficients) - 1
    terms = []
    for power, c in zip(range(degree, -1, -1), coefficients):
        if c == 0 and degree > 0:
            continue
        magnitude = abs(c)
        if power == 0:
            body = f"{magnitude:.4g}"
        else:
            body = "" if magnitude == 1 else f"{magnitude:.4g} "
            body += variable if power == 1 else f"{variable}^{power}"
        if not terms:
            terms.append(f"-{body}" if c < 0 else body)
        else:
            terms.append(f"- {body}" if c < 0 else f"+ {body}")
    return " ".join(terms) if terms else "0"


# ============================================================================
# Transfer Function
# ============================================================================


class TransferFunction:
    """
    Continuous-time SISO transfer function num(s)/den(s).

    Instances are immutable: every operation returns a new object.
    Equality is structural (identical coefficient arrays), so two
    mathematically equal transfer functions with different raw
    polynomials compare unequal.

    Parameters
    ----------
    num : Coefficients
        Numerator coefficients, highest degree first
    den : Coefficients
        Denominator coefficients, highest degree first. Must not be the
        zero polynomial.

    Raises
    ------
    ValueError
        If either sequence is empty or non-finite, or den is zero
    TypeError
        If the coefficients are not real numbers

    Examples
    --------
    >>> P = TransferFunction([0.1], [0.005, 0.06, 0.1])
    >>> P.poles()
    array([-10., -2.])
    >>> P.dc_gain()
    1.0
    """

    def __init__(self, num: Coefficients, den: Coefficients):
        self._num = _as_coefficients(num, "numerator")
        self._den = _as_coefficients(den, "denominator")
        if not np.any(self._den):
            raise ValueError("denominator must not be the zero polynomial")

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def s(cls) -> "TransferFunction":
        """The Laplace variable s as a transfer function."""
        return cls([1.0, 0.0], [1.0])

    @classmethod
    def static_gain(cls, gain: ScalarLike) -> "TransferFunction":
        """Constant transfer function k/1."""
        return cls([gain], [1.0])

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def num(self) -> np.ndarray:
        """Numerator coefficients (copy)."""
        return self._num.copy()

    @property
    def den(self) -> np.ndarray:
        """Denominator coefficients (copy)."""
        return self._den.copy()

    @property
    def order(self) -> int:
        """Degree of the denominator."""
        return len(self._den) - 1

    @property
    def is_proper(self) -> bool:
        """True if deg(num) <= deg(den)."""
        return len(self._num) <= len(self._den)

    @property
    def is_zero(self) -> bool:
        """True if the numerator is the zero polynomial."""
        return not np.any(self._num)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce(other):
        if isinstance(other, TransferFunction):
            return other
        if isinstance(other, (int, float, np.number)) and not isinstance(other, bool):
            return TransferFunction.static_gain(other)
        return NotImplemented

    def __mul__(self, other) -> "TransferFunction":
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return TransferFunction(
            np.polymul(self._num, other._num),
            np.polymul(self._den, other._den),
        )

    __rmul__ = __mul__

    def __add__(self, other) -> "TransferFunction":
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        num = np.polyadd(np.polymul(self._num, other._den), np.polymul(other._num, self._den))
        return TransferFunction(num, np.polymul(self._den, other._den))

    __radd__ = __add__

    def __neg__(self) -> "TransferFunction":
        return TransferFunction(-self._num, self._den)

    def __sub__(self, other) -> "TransferFunction":
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other) -> "TransferFunction":
        return (-self) + other

    def __truediv__(self, other) -> "TransferFunction":
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        if other.is_zero:
            raise ZeroDivisionError("division by a zero transfer function")
        return TransferFunction(
            np.polymul(self._num, other._den),
            np.polymul(self._den, other._num),
        )

    def __rtruediv__(self, other) -> "TransferFunction":
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other / self

    def __pow__(self, exponent: int) -> "TransferFunction":
        if not isinstance(exponent, (int, np.integer)) or isinstance(exponent, bool):
            return NotImplemented
        if exponent < 0:
            return TransferFunction.static_gain(1.0) / (self ** (-exponent))
        result = TransferFunction.static_gain(1.0)
        for _ in range(exponent):
            result = result * self
        return result

    def __eq__(self, other) -> bool:
        if not isinstance(other, TransferFunction):
            return NotImplemented
        return np.array_equal(self._num, other._num) and np.array_equal(self._den, other._den)

    __hash__ = None

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def evaluate(self, s):
        """Evaluate T(s) at one or more complex points."""
        return np.polyval(self._num, s) / np.polyval(self._den, s)

    __call__ = evaluate

    def poles(self) -> RootVector:
        """Roots of the denominator (no cancellation)."""
        return np.roots(self._den)

    def zeros(self) -> RootVector:
        """Roots of the numerator (no cancellation)."""
        if self.is_zero:
            return np.array([], dtype=complex)
        return np.roots(self._num)

    def dc_gain(self) -> float:
        """
        Steady-state gain T(0) after pole/zero cancellation.

        Returns +/-inf when a pole at the origin remains (integrating
        system).
        """
        reduced = self.minreal()
        n0, d0 = reduced._num[-1], reduced._den[-1]
        if d0 == 0:
            return float(np.sign(n0) * np.inf)
        return float(n0 / d0)

    def minreal(self, tol: Optional[float] = None) -> "TransferFunction":
        """
        Cancel common poles and zeros.

        Factors of s shared by numerator and denominator are removed
        exactly. Remaining pole/zero pairs closer than
        tol * max(1, |z|) are cancelled and the polynomials are rebuilt
        from the surviving roots with the original leading-coefficient
        ratio.

        Parameters
        ----------
        tol : Optional[float]
            Relative cancellation tolerance, default sqrt(machine eps)

        Returns
        -------
        TransferFunction
            Reduced transfer function (self's coefficients if nothing cancels)
        """
        if tol is None:
            tol = float(np.sqrt(np.finfo(float).eps))
        if self.is_zero:
            return TransferFunction([0.0], [1.0])

        num, den = self._num, self._den
        shift = min(_trailing_zeros(num), _trailing_zeros(den))
        if shift:
            num, den = num[:-shift], den[:-shift]

        zeros = np.roots(num)
        poles = list(np.roots(den))
        kept_zeros = []
        for z in zeros:
            if poles:
                distance = np.abs(np.asarray(poles) - z)
                j = int(np.argmin(distance))
                if distance[j] <= tol * max(1.0, abs(z)):
                    poles.pop(j)
                    continue
            kept_zeros.append(z)

        if len(kept_zeros) == len(zeros):
            return TransferFunction(num, den)

        gain = num[0] / den[0]
        new_num = gain * np.real(np.poly(kept_zeros)) if kept_zeros else [gain]
        new_den = np.real(np.poly(poles)) if poles else [1.0]
        return TransferFunction(new_num, new_den)

    def normalized(self) -> "TransferFunction":
        """Same transfer function with a monic denominator."""
        lead = self._den[0]
        return TransferFunction(self._num / lead, self._den / lead)

    def to_sympy(self, symbol: Optional[sp.Symbol] = None, rational: bool = False) -> sp.Expr:
        """
        Symbolic rational expression in s.

        Parameters
        ----------
        symbol : Optional[sp.Symbol]
            Laplace variable, default Symbol('s')
        rational : bool
            If True, convert float coefficients to exact rationals
            (0.005 -> 1/200) so symbolic identities hold exactly

        Examples
        --------
        >>> T.to_sympy(rational=True)
        1/(s**2 + 12*s + 20)
        """
        s = sp.Symbol("s") if symbol is None else symbol

        def convert(c):
            return sp.nsimplify(float(c), rational=True) if rational else sp.Float(float(c))

        num = sp.Poly([convert(c) for c in self._num], s).as_expr()
        den = sp.Poly([convert(c) for c in self._den], s).as_expr()
        return num / den

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return f"TransferFunction(num={self._num.tolist()}, den={self._den.tolist()})"

    def __str__(self) -> str:
        num = _format_polynomial(self._num)
        den = _format_polynomial(self._den)
        width = max(len(num), len(den))
        return f"{num.center(width)}\n{'-' * width}\n{den.center(width)}"


# ============================================================================
# Block Diagram Algebra
# ============================================================================


def series(*blocks: TransferFunction) -> TransferFunction:
    """
    Series (cascade) composition of blocks.

    Examples
    --------
    >>> L = series(C, P, G)   # C(s) * P(s) * G(s)
    """
    if not blocks:
        raise ValueError("series() requires at least one block")
    for block in blocks:
        if not isinstance(block, TransferFunction):
            raise TypeError(f"blocks must be TransferFunction, got {type(block).__name__}")
    return reduce(lambda a, b: a * b, blocks)


def feedback(
    forward: TransferFunction,
    sensor: Optional[TransferFunction] = None,
    sign: int = -1,
) -> TransferFunction:
    """
    Close a feedback loop around a forward path.

    T(s) = G(s) / (1 - sign * G(s) H(s)), unity feedback when sensor is None.

    For G = N/D and H = 1 the result is N / (D + N): the closed-loop
    denominator keeps the degree of the forward-path denominator and no
    common factor is introduced or removed.

    Parameters
    ----------
    forward : TransferFunction
        Forward path G(s)
    sensor : Optional[TransferFunction]
        Feedback path H(s), default unity
    sign : int
        -1 for negative feedback (default), +1 for positive

    Raises
    ------
    ValueError
        If sign is not +/-1, or the characteristic polynomial is
        identically zero (ill-formed loop)
    """
    if sign not in (-1, 1):
        raise ValueError(f"sign must be -1 or +1, got {sign}")
    if not isinstance(forward, TransferFunction):
        raise TypeError(f"forward must be TransferFunction, got {type(forward).__name__}")
    h = TransferFunction.static_gain(1.0) if sensor is None else sensor

    num = np.polymul(forward._num, h._den)
    den = np.polyadd(
        np.polymul(forward._den, h._den),
        -sign * np.polymul(forward._num, h._num),
    )
    if not np.any(den):
        raise ValueError(
            "closed-loop characteristic polynomial is identically zero; "
            "the feedback loop is ill-formed"
        )
    return TransferFunction(num, den)


__all__ = [
    "TransferFunction",
    "series",
    "feedback",
]
