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
Visual Test Suite for the Reservoir Scenarios

Runs the seven controller scenarios, verifies each block-composed
transfer function against its analytical counterpart, prints the step
info table and writes HTML figures for visual inspection.

Usage:
    python visual_test_reservoir_scenarios.py

Output:
    Creates HTML files in ./visual_tests/reservoir_scenarios/
"""

from pathlib import Path

from reservoir_control.control import frequency_response, root_locus, step_response
from reservoir_control.scenarios import (
    build_step_info_table,
    format_step_info_table,
    run_scenarios,
)
from reservoir_control.visualization import ControlPlotter

# Scenario groups plotted together, by label
SCENARIO_GROUPS = {
    "proportional": ["No PID", "Kp = 5", "Kp = 10"],
    "pi_pd": ["Kp = 10", "Kp=Ki=10", "Kp=10, Kd=5"],
    "pid": ["Kp=12, Ki=15, Kd=3", "Kp=9, Ki=15, Kd=2"],
}


def setup_output_directory():
    """Create output directory for visual tests."""
    output_dir = Path("visual_tests/reservoir_scenarios")
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def report_verification(results):
    """Print the block-composition vs analytical check for every scenario."""
    print("Verifying transfer functions...")
    for result in results:
        status = "✓ match" if result["matches"] else "✗ MISMATCH"
        print(f"  {status}: {result['label']}")
    print()


def figure_step_groups(results, plotter, output_dir):
    """Step responses, one figure per scenario group."""
    print("Generating step response figures...")
    by_label = {result["label"]: result for result in results}

    for index, (group, labels) in enumerate(SCENARIO_GROUPS.items(), start=1):
        responses = {label: step_response(by_label[label]["closed_loop"]) for label in labels}
        metrics = {label: by_label[label]["step_info"] for label in labels}
        fig = plotter.plot_step_responses(
            responses,
            metrics=metrics,
            title=f"Closed-Loop Step Response ({group.replace('_', '/').upper()})",
        )
        filename = f"{index:02d}_step_{group}.html"
        fig.write_html(output_dir / filename)
        print(f"  ✓ Saved: {filename}")


def figure_verification(results, plotter, output_dir):
    """Block-composed vs analytical step response for the first PID scenario."""
    print("Generating verification figure...")
    result = next(r for r in results if r["label"] == "Kp=12, Ki=15, Kd=3")
    t, y_1 = step_response(result["closed_loop"])
    _, y_2 = step_response(result["analytical"], t=t)

    fig = plotter.plot_step_comparison(
        t,
        y_1,
        y_2,
        labels=("compute_tf", "compute_tf_analytical"),
        title=f"System Verification Using Step Response ({result['label']})",
    )
    fig.write_html(output_dir / "04_verification.html")
    print("  ✓ Saved: 04_verification.html")


def figure_bode(results, plotter, output_dir):
    """Open-loop Bode plot of every controlled scenario."""
    print("Generating Bode figure...")
    responses = {
        result["label"]: frequency_response(result["open_loop"])
        for result in results
        if result["gains"].has_pid
    }
    fig = plotter.plot_frequency_response(responses, title="Open-Loop Frequency Response")
    fig.write_html(output_dir / "05_bode.html")
    print("  ✓ Saved: 05_bode.html")


def figure_root_locus(results, plotter, output_dir):
    """Root locus of the open loop, one figure per scenario group."""
    print("Generating root locus figures...")
    by_label = {result["label"]: result for result in results}

    for index, (group, labels) in enumerate(SCENARIO_GROUPS.items(), start=6):
        loci = {label: root_locus(by_label[label]["open_loop"]) for label in labels}
        fig = plotter.plot_root_locus(
            loci,
            title=f"Root Locus ({group.replace('_', '/').upper()})",
        )
        filename = f"{index:02d}_root_locus_{group}.html"
        fig.write_html(output_dir / filename)
        print(f"  ✓ Saved: {filename}")


def main():
    """Run the scenario study and generate all figures."""
    print("=" * 70)
    print("Water Reservoir PID Scenarios")
    print("=" * 70)
    print()

    output_dir = setup_output_directory()
    print(f"Output directory: {output_dir.absolute()}\n")

    results = run_scenarios()
    report_verification(results)

    rows = build_step_info_table(results)
    print(format_step_info_table(rows, [result["label"] for result in results]))
    print()

    plotter = ControlPlotter()
    figure_step_groups(results, plotter, output_dir)
    figure_verification(results, plotter, output_dir)
    figure_bode(results, plotter, output_dir)
    figure_root_locus(results, plotter, output_dir)

    print("\n" + "=" * 70)
    print("✓ All visual tests generated successfully!")
    print("=" * 70)


if __name__ == "__main__":
    main()
