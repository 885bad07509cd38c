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
Control Plotter - Reservoir Loop Visualizations

Interactive Plotly figures for the closed-loop study. The plotter only
draws: every number it shows is computed by ``reservoir_control.control``
and passed in.

Main Class
----------
ControlPlotter : Control analysis visualization
    plot_step_responses() : Overlay of labeled step responses
    plot_step_comparison() : Two responses overlaid (verification view)
    plot_frequency_response() : Overlaid Bode magnitude and phase
    plot_root_locus() : One or more labeled root loci

Usage
-----
>>> from reservoir_control.visualization import ControlPlotter
>>>
>>> plotter = ControlPlotter()
>>> responses = {r['label']: step_response(r['closed_loop']) for r in results}
>>> fig = plotter.plot_step_responses(responses, theme='publication')
>>> fig.write_html('step.html')
"""

from typing import List, Mapping, Optional, Sequence, Tuple

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from reservoir_control.types.control_classical import (
    FrequencyResponse,
    RootLocusData,
    StepInfoRow,
)
from reservoir_control.visualization.themes import (
    ColorSchemes,
    PlotThemes,
    lighten_color,
    to_rgba,
)


class ControlPlotter:
    """
    Control system analysis visualization.

    Attributes
    ----------
    default_theme : str
        Theme applied when a method is called with theme=None
    color_scheme : str
        Palette used when a method is called with color_scheme=None

    Examples
    --------
    >>> plotter = ControlPlotter(default_theme='publication')
    >>> fig = plotter.plot_root_locus({'Kp = 5': root_locus(T_fwd)})
    >>> fig.show()
    """

    def __init__(self, default_theme: str = "default", color_scheme: str = "plotly"):
        """
        Initialize control plotter.

        Parameters
        ----------
        default_theme : str
            'default', 'publication', 'dark' or 'presentation'
        color_scheme : str
            'plotly', 'd3', 'colorblind_safe' or 'tableau'
        """
        PlotThemes.get_theme(default_theme)
        ColorSchemes.get_colors(color_scheme)
        self.default_theme = default_theme
        self.color_scheme = color_scheme

    # =========================================================================
    # Time Domain
    # =========================================================================

    def plot_step_responses(
        self,
        responses: Mapping[str, Tuple[np.ndarray, np.ndarray]],
        reference: float = 1.0,
        metrics: Optional[Mapping[str, StepInfoRow]] = None,
        title: str = "Step Response",
        theme: Optional[str] = None,
        color_scheme: Optional[str] = None,
    ) -> go.Figure:
        """
        Overlay step responses of several systems.

        Parameters
        ----------
        responses : Mapping[str, Tuple[np.ndarray, np.ndarray]]
            Label -> (t, y), e.g. from ``step_response``
        reference : float
            Step height, drawn as a dashed line
        metrics : Optional[Mapping[str, StepInfoRow]]
            Label -> step info row; when given, a metrics box is added
        title : str
            Plot title
        theme : Optional[str]
            Theme name, default self.default_theme
        color_scheme : Optional[str]
            Palette name, default self.color_scheme

        Returns
        -------
        go.Figure
            Step response overlay

        Raises
        ------
        ValueError
            If responses is empty or a (t, y) pair has mismatched lengths

        Examples
        --------
        >>> rows = {label: extract_stepinfo_data(T) for label, T in systems.items()}
        >>> fig = plotter.plot_step_responses(responses, metrics=rows)
        """
        if not responses:
            raise ValueError("responses must contain at least one series")
        theme = theme or self.default_theme
        colors = ColorSchemes.get_colors(color_scheme or self.color_scheme, len(responses))

        fig = go.Figure()
        t_max = 0.0
        for color, (label, (t, y)) in zip(colors, responses.items()):
            t_np, y_np = self._to_numpy(t), self._to_numpy(y)
            if t_np.shape != y_np.shape:
                raise ValueError(
                    f"'{label}': t and y shapes differ ({t_np.shape} vs {y_np.shape})"
                )
            t_max = max(t_max, float(t_np[-1]))
            fig.add_trace(
                go.Scatter(
                    x=t_np,
                    y=y_np,
                    mode="lines",
                    name=label,
                    line=dict(color=color, width=2),
                ),
            )

        fig.add_trace(
            go.Scatter(
                x=[0.0, t_max],
                y=[reference, reference],
                mode="lines",
                name="Reference",
                line=dict(color="gray", width=2, dash="dash"),
            ),
        )

        if metrics:
            fig.add_annotation(
                text=self._metrics_text(metrics),
                xref="paper",
                yref="paper",
                x=0.98,
                y=0.02,
                xanchor="right",
                yanchor="bottom",
                align="left",
                showarrow=False,
                bgcolor="rgba(255, 255, 255, 0.8)",
                bordercolor="black",
                borderwidth=1,
            )

        fig.update_layout(
            title=title,
            xaxis_title="Time (s)",
            yaxis_title="Water level",
            width=900,
            height=550,
            showlegend=True,
        )
        return PlotThemes.apply_theme(fig, theme=theme)

    def plot_step_comparison(
        self,
        t: np.ndarray,
        y_1: np.ndarray,
        y_2: np.ndarray,
        labels: Sequence[str] = ("T_1", "T_2"),
        title: str = "System Verification Using Step Response",
        theme: Optional[str] = None,
    ) -> go.Figure:
        """
        Overlay two step responses sampled on the same grid.

        The second response is dashed so that coincident curves stay
        distinguishable. A lower subplot shows y_1 - y_2.

        Raises
        ------
        ValueError
            If the arrays differ in length or labels does not have two entries
        """
        theme = theme or self.default_theme
        t_np, y1_np, y2_np = self._to_numpy(t), self._to_numpy(y_1), self._to_numpy(y_2)
        if not (t_np.shape == y1_np.shape == y2_np.shape):
            raise ValueError(
                f"t, y_1 and y_2 must share a shape, got {t_np.shape}, "
                f"{y1_np.shape}, {y2_np.shape}"
            )
        if len(labels) != 2:
            raise ValueError(f"labels must have two entries, got {len(labels)}")

        colors = ColorSchemes.get_colors(self.color_scheme, 2)
        fig = make_subplots(
            rows=2,
            cols=1,
            row_heights=[0.75, 0.25],
            subplot_titles=("Step Response", "Difference"),
            vertical_spacing=0.12,
            shared_xaxes=True,
        )
        fig.add_trace(
            go.Scatter(
                x=t_np,
                y=y1_np,
                mode="lines",
                name=labels[0],
                line=dict(color=colors[0], width=2),
            ),
            row=1,
            col=1,
        )
        fig.add_trace(
            go.Scatter(
                x=t_np,
                y=y2_np,
                mode="lines",
                name=labels[1],
                line=dict(color=colors[1], width=2, dash="dash"),
            ),
            row=1,
            col=1,
        )
        fig.add_trace(
            go.Scatter(
                x=t_np,
                y=y1_np - y2_np,
                mode="lines",
                name=f"{labels[0]} - {labels[1]}",
                line=dict(color=lighten_color(colors[0], -0.4), width=1),
                showlegend=False,
            ),
            row=2,
            col=1,
        )

        fig.update_xaxes(title_text="Time (s)", row=2, col=1)
        fig.update_yaxes(title_text="Output", row=1, col=1)
        fig.update_yaxes(title_text="Error", row=2, col=1)
        fig.update_layout(title=title, width=900, height=650, showlegend=True)
        return PlotThemes.apply_theme(fig, theme=theme)

    # =========================================================================
    # Frequency Domain
    # =========================================================================

    def plot_frequency_response(
        self,
        responses: Mapping[str, FrequencyResponse],
        title: str = "Frequency Response (Bode Plot)",
        show_margins: bool = True,
        theme: Optional[str] = None,
        color_scheme: Optional[str] = None,
    ) -> go.Figure:
        """
        Overlaid Bode plot (magnitude and phase subplots).

        Parameters
        ----------
        responses : Mapping[str, FrequencyResponse]
            Label -> output of ``frequency_response``
        title : str
            Plot title
        show_margins : bool
            If True, mark the first gain crossover (0 dB) and phase
            crossover (-180 deg) of each curve
        theme : Optional[str]
            Theme name, default self.default_theme
        color_scheme : Optional[str]
            Palette name, default self.color_scheme

        Returns
        -------
        go.Figure
            Bode plot with magnitude and phase subplots

        Notes
        -----
        - Phase margin = 180 deg + phase at the gain crossover
        - Gain margin = -magnitude (dB) at the phase crossover
        """
        if not responses:
            raise ValueError("responses must contain at least one series")
        theme = theme or self.default_theme
        colors = ColorSchemes.get_colors(color_scheme or self.color_scheme, len(responses))

        fig = make_subplots(
            rows=2,
            cols=1,
            subplot_titles=("Magnitude", "Phase"),
            vertical_spacing=0.12,
            shared_xaxes=True,
        )

        for color, (label, data) in zip(colors, responses.items()):
            freq = self._to_numpy(data["frequencies"])
            mag = self._to_numpy(data["magnitude_db"])
            phase = self._to_numpy(data["phase_deg"])

            fig.add_trace(
                go.Scatter(
                    x=freq,
                    y=mag,
                    mode="lines",
                    name=label,
                    legendgroup=label,
                    line=dict(color=color, width=2),
                ),
                row=1,
                col=1,
            )
            fig.add_trace(
                go.Scatter(
                    x=freq,
                    y=phase,
                    mode="lines",
                    name=label,
                    legendgroup=label,
                    line=dict(color=color, width=2),
                    showlegend=False,
                ),
                row=2,
                col=1,
            )

            if show_margins:
                self._mark_margins(fig, freq, mag, phase, color)

        fig.add_hline(y=0, line_dash="dash", line_color="gray", row=1, col=1, opacity=0.5)
        fig.add_hline(y=-180, line_dash="dash", line_color="gray", row=2, col=1, opacity=0.5)

        fig.update_xaxes(title_text="Frequency (rad/s)", type="log", showgrid=True, row=2, col=1)
        fig.update_xaxes(type="log", showgrid=True, row=1, col=1)
        fig.update_yaxes(title_text="Magnitude (dB)", showgrid=True, row=1, col=1)
        fig.update_yaxes(title_text="Phase (deg)", showgrid=True, row=2, col=1)

        fig.update_layout(title=title, width=900, height=750, showlegend=True)
        return PlotThemes.apply_theme(fig, theme=theme)

    # =========================================================================
    # Root Locus
    # =========================================================================

    def plot_root_locus(
        self,
        loci: Mapping[str, RootLocusData],
        title: str = "Root Locus",
        show_grid: bool = True,
        theme: Optional[str] = None,
        color_scheme: Optional[str] = None,
    ) -> go.Figure:
        """
        Plot closed-loop pole branches as the loop gain varies.

        Each locus gets one color; its branches share a legend group.
        Open-loop poles are marked 'x' and open-loop zeros 'o'.

        Parameters
        ----------
        loci : Mapping[str, RootLocusData]
            Label -> output of ``root_locus``
        title : str
            Plot title
        show_grid : bool
            If True, shade the stable and unstable half-planes
        theme : Optional[str]
            Theme name, default self.default_theme
        color_scheme : Optional[str]
            Palette name, default self.color_scheme

        Returns
        -------
        go.Figure
            Root locus plot

        Raises
        ------
        ValueError
            If loci is empty or a poles array is not 2-D
        """
        if not loci:
            raise ValueError("loci must contain at least one root locus")
        theme = theme or self.default_theme
        colors = ColorSchemes.get_colors(color_scheme or self.color_scheme, len(loci))

        fig = go.Figure()
        real_parts: List[np.ndarray] = []

        for color, (label, data) in zip(colors, loci.items()):
            poles = self._to_numpy(data["poles"])
            if poles.ndim != 2:
                raise ValueError(
                    f"'{label}': poles must be 2D (n_gains, n_poles), got {poles.shape}"
                )

            for branch in range(poles.shape[1]):
                fig.add_trace(
                    go.Scatter(
                        x=np.real(poles[:, branch]),
                        y=np.imag(poles[:, branch]),
                        mode="lines",
                        name=label,
                        legendgroup=label,
                        showlegend=(branch == 0),
                        line=dict(color=color, width=2),
                    ),
                )

            open_loop_poles = self._to_numpy(data["open_loop_poles"])
            fig.add_trace(
                go.Scatter(
                    x=np.real(open_loop_poles),
                    y=np.imag(open_loop_poles),
                    mode="markers",
                    name=f"{label} poles",
                    legendgroup=label,
                    showlegend=False,
                    marker=dict(color=color, size=10, symbol="x"),
                ),
            )

            zeros = self._to_numpy(data["zeros"])
            if zeros.size:
                fig.add_trace(
                    go.Scatter(
                        x=np.real(zeros),
                        y=np.imag(zeros),
                        mode="markers",
                        name=f"{label} zeros",
                        legendgroup=label,
                        showlegend=False,
                        marker=dict(color=color, size=10, symbol="circle-open"),
                    ),
                )

            real_parts.append(np.real(poles[np.isfinite(poles)]))
            real_parts.append(np.real(open_loop_poles))

        if show_grid:
            reals = np.concatenate(real_parts)
            extent = float(np.max(np.abs(reals))) if reals.size else 1.0
            self._draw_stability_region(fig, 1.1 * max(extent, 1.0))

        fig.update_layout(
            title=title,
            xaxis_title="Real Part",
            yaxis_title="Imaginary Part",
            width=900,
            height=750,
            showlegend=True,
        )
        fig.update_yaxes(scaleanchor="x", scaleratio=1)
        return PlotThemes.apply_theme(fig, theme=theme)

    # =========================================================================
    # Helper Methods (Internal)
    # =========================================================================

    @staticmethod
    def _to_numpy(arr) -> np.ndarray:
        return np.asarray(arr)

    @staticmethod
    def _metrics_text(metrics: Mapping[str, StepInfoRow]) -> str:
        lines = ["<b>Performance Metrics:</b>"]
        for label, row in metrics.items():
            lines.append(
                f"{label}: Tr={row.rise_time:.3f} s, Ts={row.settling_time:.3f} s, "
                f"OS={row.overshoot:.2f}%, SS err={row.steady_state_error:.3f}"
            )
        return "<br>".join(lines)

    @staticmethod
    def _first_crossing(x: np.ndarray, level: float) -> Optional[int]:
        """Index i such that x crosses level between samples i and i + 1."""
        sign = np.sign(x - level)
        idx = np.where(np.diff(sign) != 0)[0]
        return int(idx[0]) if idx.size else None

    def _mark_margins(
        self,
        fig: go.Figure,
        freq: np.ndarray,
        mag: np.ndarray,
        phase: np.ndarray,
        color: str,
    ) -> None:
        idx_gc = self._first_crossing(mag, 0.0)
        if idx_gc is not None:
            phase_margin = 180.0 + phase[idx_gc]
            fig.add_annotation(
                x=np.log10(freq[idx_gc]),
                y=0,
                text=f"ω_gc = {freq[idx_gc]:.2f} rad/s<br>PM = {phase_margin:.1f}°",
                showarrow=True,
                arrowhead=2,
                arrowcolor=color,
                font=dict(color=color),
                ax=0,
                ay=-40,
                row=1,
                col=1,
            )

        idx_pc = self._first_crossing(phase, -180.0)
        if idx_pc is not None:
            gain_margin = -mag[idx_pc]
            fig.add_annotation(
                x=np.log10(freq[idx_pc]),
                y=-180,
                text=f"ω_pc = {freq[idx_pc]:.2f} rad/s<br>GM = {gain_margin:.1f} dB",
                showarrow=True,
                arrowhead=2,
                arrowcolor=color,
                font=dict(color=color),
                ax=0,
                ay=40,
                row=2,
                col=1,
            )

    def _draw_stability_region(self, fig: go.Figure, extent: float) -> None:
        """Shade Re(s) < 0 green and Re(s) > 0 red out to +/- extent."""
        fig.add_vline(
            x=0,
            line_width=2,
            line_color="black",
            annotation_text="Stability Boundary",
            annotation_position="top",
        )
        fig.add_vrect(
            x0=-extent,
            x1=0,
            fillcolor=to_rgba("#00CC96", 0.1),
            layer="below",
            line_width=0,
            annotation_text="Stable",
            annotation_position="top left",
        )
        fig.add_vrect(
            x0=0,
            x1=extent,
            fillcolor=to_rgba("#EF553B", 0.1),
            layer="below",
            line_width=0,
            annotation_text="Unstable",
            annotation_position="top right",
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    @staticmethod
    def list_available_themes() -> List[str]:
        """
        List available plot themes.

        Examples
        --------
        >>> ControlPlotter.list_available_themes()
        ['default', 'publication', 'dark', 'presentation']
        """
        return PlotThemes.available()

    @staticmethod
    def list_available_color_schemes() -> List[str]:
        """
        List available color schemes.

        Examples
        --------
        >>> ControlPlotter.list_available_color_schemes()
        ['plotly', 'd3', 'colorblind_safe', 'tableau']
        """
        return ColorSchemes.available()


__all__ = [
    "ControlPlotter",
]
