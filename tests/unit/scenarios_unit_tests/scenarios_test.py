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
Unit Tests for Controller Scenarios

Tests cover:
- Scenario catalogue order and gains
- Evaluation with and without verification
- Step info table construction and text rendering

Test Structure:
- TestScenarioCatalogue: RESERVOIR_SCENARIOS
- TestEvaluateScenario: evaluate_scenario, run_scenarios
- TestStepInfoTable: build_step_info_table, format_step_info_table
"""

import unittest

import numpy as np

from reservoir_control.scenarios import (
    RESERVOIR_SCENARIOS,
    ControllerScenario,
    build_step_info_table,
    evaluate_scenario,
    format_step_info_table,
    run_scenarios,
)
from reservoir_control.systems.water_reservoir import ControllerGains
from reservoir_control.types.control_classical import StepInfoRow

EXPECTED_LABELS = [
    "No PID",
    "Kp = 5",
    "Kp = 10",
    "Kp=Ki=10",
    "Kp=10, Kd=5",
    "Kp=12, Ki=15, Kd=3",
    "Kp=9, Ki=15, Kd=2",
]


class TestScenarioCatalogue(unittest.TestCase):
    """RESERVOIR_SCENARIOS."""

    def test_order_and_labels(self):
        self.assertEqual([s.label for s in RESERVOIR_SCENARIOS], EXPECTED_LABELS)

    def test_only_first_scenario_bypasses_controller(self):
        self.assertFalse(RESERVOIR_SCENARIOS[0].gains.has_pid)
        self.assertTrue(all(s.gains.has_pid for s in RESERVOIR_SCENARIOS[1:]))

    def test_gains(self):
        gains = RESERVOIR_SCENARIOS[5].gains
        self.assertEqual((gains.kp, gains.ki, gains.kd), (12, 15, 3))


class TestEvaluateScenario(unittest.TestCase):
    """evaluate_scenario and run_scenarios."""

    @classmethod
    def setUpClass(cls):
        cls.results = run_scenarios()

    def test_one_result_per_scenario(self):
        self.assertEqual(len(self.results), 7)
        self.assertEqual([r["label"] for r in self.results], EXPECTED_LABELS)

    def test_all_derivations_agree(self):
        for result in self.results:
            self.assertTrue(result["matches"], result["label"])

    def test_closed_loop_order(self):
        orders = [r["closed_loop"].order for r in self.results]
        self.assertEqual(orders, [3, 4, 4, 4, 4, 4, 4])

    def test_without_verification(self):
        result = evaluate_scenario(RESERVOIR_SCENARIOS[1], verify=False)
        self.assertNotIn("matches", result)
        self.assertNotIn("analytical", result)
        self.assertIsInstance(result["step_info"], StepInfoRow)

    def test_custom_scenario(self):
        scenario = ControllerScenario("Kp = 2", ControllerGains(kp=2))
        result = evaluate_scenario(scenario)
        self.assertTrue(result["matches"])
        # DC gain 80 / (80 + 80)
        self.assertAlmostEqual(result["step_info"].steady_state_value, 0.5, places=3)


class TestStepInfoTable(unittest.TestCase):
    """build_step_info_table and format_step_info_table."""

    @classmethod
    def setUpClass(cls):
        cls.results = run_scenarios(verify=False)
        cls.rows = build_step_info_table(cls.results)

    def test_rows_in_order(self):
        self.assertEqual(len(self.rows), 7)
        for row, result in zip(self.rows, self.results):
            self.assertIsInstance(row, StepInfoRow)
            self.assertEqual(row, result["step_info"])

    def test_no_pid_row(self):
        row = self.rows[0]
        self.assertAlmostEqual(row.steady_state_value, 1.0 / 3.0, places=3)
        self.assertAlmostEqual(row.steady_state_error, 2.0 / 3.0, places=3)

    def test_integral_action_removes_offset(self):
        for index in (3, 5, 6):
            self.assertLess(self.rows[index].steady_state_error, 0.01)
        for index in (1, 2, 4):
            self.assertGreater(self.rows[index].steady_state_error, 0.1)

    def test_all_rows_settle(self):
        for row in self.rows:
            self.assertTrue(np.isfinite(row.settling_time))

    def test_format(self):
        text = format_step_info_table(self.rows, EXPECTED_LABELS)
        lines = text.splitlines()
        self.assertEqual(len(lines), 8)
        self.assertEqual(lines[0].split(), [
            "Scenario", "RiseTime", "SettlingTime", "Overshoot", "SSValue", "SSError",
        ])
        for label, line in zip(EXPECTED_LABELS, lines[1:]):
            self.assertTrue(line.startswith(label))
        self.assertEqual(len({len(line) for line in lines}), 1)

    def test_format_non_finite(self):
        row = StepInfoRow(np.nan, np.inf, np.nan, 2.0, 1.0)
        text = format_step_info_table([row], ["unstable"])
        self.assertIn("inf", text)
        self.assertIn("nan", text)

    def test_format_length_mismatch(self):
        with self.assertRaises(ValueError):
            format_step_info_table(self.rows, EXPECTED_LABELS[:3])


if __name__ == "__main__":
    unittest.main(verbosity=2)
