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
Unit Tests for Plotting Themes Module

Tests color schemes, plot themes, and color manipulation utilities.
"""

import re

import plotly.graph_objects as go
import pytest

from reservoir_control.visualization.themes import (
    ColorSchemes,
    PlotThemes,
    hex_to_rgb,
    lighten_color,
    rgb_to_hex,
    to_rgba,
)

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


@pytest.fixture
def figure():
    """Figure with one line trace of default width."""
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=[0, 1], y=[0, 1], mode="lines", line=dict(width=2)))
    return fig


# ============================================================================
# ColorSchemes Tests
# ============================================================================


class TestColorSchemes:
    """Test ColorSchemes class functionality."""

    def test_palette_sizes(self):
        assert len(ColorSchemes.PLOTLY) == 10
        assert len(ColorSchemes.D3) == 10
        assert len(ColorSchemes.COLORBLIND_SAFE) == 8
        assert len(ColorSchemes.TABLEAU) == 10

    def test_colors_are_valid_hex(self):
        for scheme in ColorSchemes.available():
            for color in ColorSchemes.get_colors(scheme):
                assert HEX_COLOR.match(color), f"{scheme}: {color}"

    def test_get_colors_returns_copy(self):
        colors = ColorSchemes.get_colors("plotly")
        colors[0] = "#000000"
        assert ColorSchemes.PLOTLY[0] == "#636EFA"

    def test_get_colors_cycles(self):
        colors = ColorSchemes.get_colors("colorblind_safe", n_colors=10)
        assert len(colors) == 10
        assert colors[8] == colors[0]

    def test_enough_colors_for_all_scenarios(self):
        assert len(set(ColorSchemes.get_colors("plotly", n_colors=7))) == 7

    def test_name_normalization_and_alias(self):
        assert ColorSchemes.get_colors("Colorblind-Safe") == ColorSchemes.COLORBLIND_SAFE
        assert ColorSchemes.get_colors("wong") == ColorSchemes.COLORBLIND_SAFE

    def test_unknown_scheme_raises(self):
        with pytest.raises(ValueError, match="Unknown color scheme"):
            ColorSchemes.get_colors("rainbow")


# ============================================================================
# PlotThemes Tests
# ============================================================================


class TestPlotThemes:
    """Test PlotThemes class functionality."""

    def test_available(self):
        assert PlotThemes.available() == ["default", "publication", "dark", "presentation"]

    def test_get_theme_by_name(self):
        assert PlotThemes.get_theme("Publication") is PlotThemes.PUBLICATION

    def test_get_theme_passes_dict_through(self):
        custom = {"font_size": 20}
        assert PlotThemes.get_theme(custom) is custom

    def test_unknown_theme_raises(self):
        with pytest.raises(ValueError, match="Unknown theme"):
            PlotThemes.get_theme("neon")

    def test_invalid_theme_type_raises(self):
        with pytest.raises(TypeError):
            PlotThemes.get_theme(42)

    def test_apply_publication_theme(self, figure):
        fig = PlotThemes.apply_theme(figure, theme="publication")
        assert fig is figure
        assert fig.layout.font.family == "Times New Roman, serif"
        assert fig.layout.font.size == 14
        assert fig.layout.showlegend is True

    def test_line_width_scaled(self, figure):
        PlotThemes.apply_theme(figure, theme="presentation")
        assert figure.data[0].line.width == pytest.approx(3.0)

    def test_default_theme_keeps_line_width(self, figure):
        PlotThemes.apply_theme(figure, theme="default")
        assert figure.data[0].line.width == pytest.approx(2.0)

    def test_custom_theme(self, figure):
        PlotThemes.apply_theme(figure, theme={"font_size": 20})
        assert figure.layout.font.size == 20

    def test_line_styles(self):
        styles = PlotThemes.get_line_styles()
        assert styles[0] == "solid"
        assert "dash" in styles


# ============================================================================
# Color Utilities Tests
# ============================================================================


class TestColorUtilities:
    """Test color manipulation helpers."""

    def test_hex_rgb_round_trip(self):
        assert hex_to_rgb("#FF8000") == (255, 128, 0)
        assert rgb_to_hex(255, 128, 0) == "#ff8000"

    def test_hex_to_rgb_rejects_short_codes(self):
        with pytest.raises(ValueError):
            hex_to_rgb("#FFF")

    def test_to_rgba(self):
        assert to_rgba("#FF0000", 0.2) == "rgba(255, 0, 0, 0.2)"

    def test_lighten_and_darken(self):
        assert lighten_color("#000000", 0.5) == "#7f7f7f"
        assert lighten_color("#FFFFFF", -0.5) == "#7f7f7f"
        assert lighten_color("#123456", 0.0) == "#123456"

    def test_lighten_factor_clamped(self):
        assert lighten_color("#000000", 5.0) == "#ffffff"
        assert lighten_color("#FFFFFF", -5.0) == "#000000"
