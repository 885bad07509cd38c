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
Unit Tests for the Water Reservoir Loop

Tests cover:
- Plant constants and controller gain validation
- Individual blocks (controller, motor, reservoir/sensor)
- Block-composition builder (compute_tf)
- Hand-derived builder (compute_tf_analytical)
- Agreement of both builders, numerically and symbolically

Test Structure:
- TestParameters: PlantConstants and ControllerGains
- TestBlocks: controller_tf, motor_tf, sensor_tf
- TestComputeTF: Closed/open loop by block composition
- TestComputeTFAnalytical: Closed loop from coefficient formulas
- TestBuilderAgreement: Both derivations describe the same system
"""

import unittest
from dataclasses import FrozenInstanceError

import numpy as np
import sympy as sp
from numpy.testing import assert_allclose

from reservoir_control.systems.water_reservoir import (
    WATER_RESERVOIR_PLANT,
    ControllerGains,
    PlantConstants,
    compute_tf,
    compute_tf_analytical,
    controller_tf,
    motor_tf,
    sensor_tf,
)

# ============================================================================
# Test Fixtures and Utilities
# ============================================================================

# (kp, ki, kd) of the controlled scenarios
PID_GAINS = [
    (5, 0, 0),
    (10, 0, 0),
    (10, 10, 0),
    (10, 0, 5),
    (12, 15, 3),
    (9, 15, 2),
]


class ReservoirTestCase(unittest.TestCase):
    """Base class with the expected closed-loop polynomials."""

    def setUp(self):
        # Monic closed-loop denominators after cancellation: s when Ki = 0,
        # and for Kp=10, Kd=5 also the PD zero 5s + 10 against the motor
        # pole at s = -2 (s^3 + 16s^2 + 268s + 480 = (s + 2)(s^2 + 14s + 240))
        self.expected_den = {
            None: [1.0, 16.0, 68.0, 120.0],
            (5, 0, 0): [1.0, 16.0, 68.0, 280.0],
            (10, 0, 0): [1.0, 16.0, 68.0, 480.0],
            (10, 10, 0): [1.0, 16.0, 68.0, 480.0, 400.0],
            (10, 0, 5): [1.0, 14.0, 240.0],
            (12, 15, 3): [1.0, 16.0, 188.0, 560.0, 600.0],
            (9, 15, 2): [1.0, 16.0, 148.0, 440.0, 600.0],
        }
        self.rtol = 1e-9

    def assert_same_system(self, tf_1, tf_2):
        """Assert equal monic polynomials after cancellation."""
        reduced_1 = tf_1.minreal().normalized()
        reduced_2 = tf_2.minreal().normalized()
        assert_allclose(reduced_1.num, reduced_2.num, rtol=self.rtol, atol=1e-9)
        assert_allclose(reduced_1.den, reduced_2.den, rtol=self.rtol, atol=1e-9)


# ============================================================================
# Parameters
# ============================================================================


class TestParameters(ReservoirTestCase):
    """PlantConstants and ControllerGains."""

    def test_reference_plant_values(self):
        plant = WATER_RESERVOIR_PLANT
        self.assertEqual(
            (plant.J, plant.b, plant.Kt, plant.R, plant.L, plant.A, plant.Rf, plant.Kf),
            (0.01, 0.1, 0.1, 1.0, 0.5, 0.5, 0.5, 1.0),
        )

    def test_plant_is_immutable(self):
        with self.assertRaises(FrozenInstanceError):
            WATER_RESERVOIR_PLANT.J = 1.0

    def test_plant_validation(self):
        with self.assertRaises(ValueError):
            PlantConstants(Kf=0.0)
        with self.assertRaises(ValueError):
            PlantConstants(R=np.nan)

    def test_gain_defaults(self):
        gains = ControllerGains()
        self.assertEqual((gains.kp, gains.ki, gains.kd, gains.has_pid), (0.0, 0.0, 0.0, True))

    def test_non_finite_gain_raises(self):
        with self.assertRaises(ValueError):
            ControllerGains(kp=np.inf)
        with self.assertRaises(ValueError):
            compute_tf(1.0, np.nan, 0.0, True)
        with self.assertRaises(ValueError):
            compute_tf_analytical(1.0, 0.0, -np.inf, True)

    def test_non_numeric_gain_raises(self):
        with self.assertRaises(TypeError):
            ControllerGains(kp="fast")

    def test_has_pid_must_be_bool(self):
        with self.assertRaises(TypeError):
            ControllerGains(has_pid="yes")

    def test_numpy_scalars_accepted(self):
        gains = ControllerGains(kp=np.float64(2.0), ki=np.int64(1))
        self.assertEqual(gains.kp, 2.0)


# ============================================================================
# Blocks
# ============================================================================


class TestBlocks(ReservoirTestCase):
    """controller_tf, motor_tf, sensor_tf."""

    def test_pid_block(self):
        pid = controller_tf(ControllerGains(kp=12, ki=15, kd=3))
        assert_allclose(pid.num, [3.0, 12.0, 15.0])
        assert_allclose(pid.den, [1.0, 0.0])

    def test_bypassed_controller_is_unity(self):
        bypass = controller_tf(ControllerGains(kp=7, ki=3, kd=1, has_pid=False))
        assert_allclose(bypass.num, [1.0])
        assert_allclose(bypass.den, [1.0])

    def test_motor_block(self):
        motor = motor_tf()
        assert_allclose(motor.num, [0.1])
        assert_allclose(motor.den, [0.005, 0.06, 0.1])
        assert_allclose(np.sort(motor.poles().real), [-10.0, -2.0])

    def test_sensor_block(self):
        sensor = sensor_tf()
        assert_allclose(sensor.num, [0.5])
        assert_allclose(sensor.den, [0.25, 1.0])

    def test_sensor_scales_with_kf(self):
        sensor = sensor_tf(PlantConstants(Kf=2.0))
        assert_allclose(sensor.num, [0.25])


# ============================================================================
# Block-Composition Builder
# ============================================================================


class TestComputeTF(ReservoirTestCase):
    """Closed/open loop by block composition."""

    def test_without_controller(self):
        closed, open_loop = compute_tf(0, 0, 0, False)
        self.assertEqual(closed.order, 3)
        self.assertEqual(open_loop.order, 3)
        assert_allclose(closed.normalized().den, self.expected_den[None], rtol=self.rtol)
        self.assertAlmostEqual(closed.dc_gain(), 1.0 / 3.0)

    def test_gains_ignored_without_controller(self):
        reference, reference_open = compute_tf(0, 0, 0, False)
        for kp, ki, kd in PID_GAINS:
            closed, open_loop = compute_tf(kp, ki, kd, False)
            self.assertEqual(closed, reference)
            self.assertEqual(open_loop, reference_open)

    def test_with_controller_is_fourth_order(self):
        for kp, ki, kd in PID_GAINS:
            closed, open_loop = compute_tf(kp, ki, kd, True)
            self.assertEqual(closed.order, 4)
            self.assertEqual(open_loop.order, 4)

    def test_closed_loop_denominators(self):
        for gains in PID_GAINS:
            closed, _ = compute_tf(*gains, True)
            den = closed.minreal().normalized().den
            assert_allclose(den, self.expected_den[gains], rtol=self.rtol, err_msg=str(gains))

    def test_pd_zero_cancels_motor_pole(self):
        closed, _ = compute_tf(10, 0, 5, True)
        # Unreduced: s (s + 2)(s^2 + 14s + 240)
        assert_allclose(
            closed.normalized().den, [1.0, 16.0, 268.0, 480.0, 0.0], rtol=self.rtol, atol=1e-9
        )
        reduced = closed.minreal()
        self.assertEqual(reduced.order, 2)
        assert_allclose(np.sort(reduced.poles().real), [-7.0, -7.0], atol=1e-9)
        self.assertAlmostEqual(reduced.dc_gain(), 400.0 / 480.0)

    def test_open_loop_is_series_product(self):
        closed, open_loop = compute_tf(12, 15, 3, True)
        expected = controller_tf(ControllerGains(12, 15, 3)) * motor_tf() * sensor_tf()
        self.assertEqual(open_loop, expected)
        # T = L / (1 + L)
        assert_allclose(closed.den, np.polyadd(open_loop.den, open_loop.num))

    def test_integral_action_gives_unit_dc_gain(self):
        for gains in [(10, 10, 0), (12, 15, 3), (9, 15, 2)]:
            closed, _ = compute_tf(*gains, True)
            self.assertAlmostEqual(closed.dc_gain(), 1.0, places=12)

    def test_proportional_dc_gain(self):
        closed, _ = compute_tf(10, 0, 0, True)
        self.assertAlmostEqual(closed.dc_gain(), 400.0 / 480.0)

    def test_closed_loop_is_stable(self):
        for gains in PID_GAINS:
            closed, _ = compute_tf(*gains, True)
            poles = closed.minreal().poles()
            self.assertTrue(np.all(poles.real < 0), f"{gains}: {poles}")

    def test_defaults_are_not_mutated(self):
        before = WATER_RESERVOIR_PLANT
        compute_tf(12, 15, 3, True, plant=PlantConstants(A=2.0))
        self.assertEqual(WATER_RESERVOIR_PLANT, before)
        self.assertEqual(WATER_RESERVOIR_PLANT.A, 0.5)


# ============================================================================
# Analytical Builder
# ============================================================================


class TestComputeTFAnalytical(ReservoirTestCase):
    """Closed loop from coefficient formulas."""

    def test_pid_coefficients(self):
        tf = compute_tf_analytical(12, 15, 3, True)
        assert_allclose(tf.num, [0.15, 0.6, 0.75], rtol=self.rtol)
        assert_allclose(tf.den, [0.00125, 0.02, 0.235, 0.7, 0.75], rtol=self.rtol)

    def test_without_controller(self):
        tf = compute_tf_analytical(0, 0, 0, False)
        self.assertEqual(tf.order, 3)
        assert_allclose(tf.num, [0.05], rtol=self.rtol)
        assert_allclose(tf.den, [0.00125, 0.02, 0.085, 0.15], rtol=self.rtol)

    def test_gains_ignored_without_controller(self):
        reference = compute_tf_analytical(0, 0, 0, False)
        self.assertEqual(compute_tf_analytical(12, 15, 3, False), reference)

    def test_zero_integral_gain_leaves_common_origin_factor(self):
        tf = compute_tf_analytical(10, 0, 0, True)
        self.assertEqual(tf.num[-1], 0.0)
        self.assertEqual(tf.den[-1], 0.0)
        self.assertEqual(tf.minreal().order, 3)

    def test_all_gains_zero_gives_zero_system(self):
        tf = compute_tf_analytical(0, 0, 0, True)
        self.assertTrue(tf.is_zero)


# ============================================================================
# Agreement of Both Builders
# ============================================================================


class TestBuilderAgreement(ReservoirTestCase):
    """Both derivations describe the same system."""

    def test_without_controller(self):
        closed, _ = compute_tf(0, 0, 0, False)
        self.assert_same_system(closed, compute_tf_analytical(0, 0, 0, False))

    def test_all_controlled_scenarios(self):
        for gains in PID_GAINS:
            closed, _ = compute_tf(*gains, True)
            self.assert_same_system(closed, compute_tf_analytical(*gains, True))

    def test_raw_polynomials_agree_with_unit_sensor_gain(self):
        closed, _ = compute_tf(9, 15, 2, True)
        analytical = compute_tf_analytical(9, 15, 2, True)
        assert_allclose(closed.num, analytical.num, rtol=self.rtol)
        assert_allclose(closed.den, analytical.den, rtol=self.rtol)

    def test_agreement_with_other_plant(self):
        plant = PlantConstants(J=0.02, b=0.2, Kt=0.3, R=2.0, L=0.1, A=1.5, Rf=0.8, Kf=2.0)
        for gains in [(5, 0, 0), (12, 15, 3)]:
            closed, _ = compute_tf(*gains, True, plant=plant)
            self.assert_same_system(closed, compute_tf_analytical(*gains, True, plant=plant))
        closed, _ = compute_tf(0, 0, 0, False, plant=plant)
        self.assert_same_system(closed, compute_tf_analytical(0, 0, 0, False, plant=plant))

    def test_symbolic_derivation(self):
        # Closed loop derived symbolically from the block definitions
        s = sp.Symbol("s")
        J, b, Kt = sp.Rational(1, 100), sp.Rational(1, 10), sp.Rational(1, 10)
        R, L = 1, sp.Rational(1, 2)
        A, Rf, Kf = sp.Rational(1, 2), sp.Rational(1, 2), 1
        Kp, Ki, Kd = 12, 15, 3

        C = (Kd * s**2 + Kp * s + Ki) / s
        P = Kt / ((J * s + b) * (L * s + R))
        G = (Rf / Kf) / (A * Rf * s + 1)
        num, den = sp.fraction(sp.cancel(C * P * G / (1 + C * P * G)))

        den_coeffs = [float(c) for c in sp.Poly(den, s).all_coeffs()]
        num_coeffs = [float(c) for c in sp.Poly(num, s).all_coeffs()]
        lead = den_coeffs[0]

        for tf in (compute_tf(Kp, Ki, Kd, True)[0], compute_tf_analytical(Kp, Ki, Kd, True)):
            normalized = tf.normalized()
            assert_allclose(normalized.den, np.array(den_coeffs) / lead, rtol=self.rtol)
            assert_allclose(normalized.num, np.array(num_coeffs) / lead, rtol=self.rtol)


if __name__ == "__main__":
    unittest.main(verbosity=2)
