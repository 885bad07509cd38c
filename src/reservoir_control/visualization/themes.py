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
Plotting Themes and Color Schemes

Palettes and layout presets shared by the reservoir plots.

Main Classes
------------
ColorSchemes : Named categorical palettes
    PLOTLY : Default Plotly colors
    D3 : D3.js categorical colors
    COLORBLIND_SAFE : Wong palette (colorblind accessible)
    TABLEAU : Tableau 10 palette

PlotThemes : Layout presets
    DEFAULT : Standard Plotly white theme
    PUBLICATION : Serif fonts, colorblind-safe palette
    DARK : Dark mode theme
    PRESENTATION : Large fonts and thick lines

Usage
-----
>>> from reservoir_control.visualization.themes import ColorSchemes, PlotThemes
>>>
>>> colors = ColorSchemes.get_colors('colorblind_safe', n_colors=7)
>>> fig = PlotThemes.apply_theme(fig, theme='publication')
"""

from typing import Dict, List, Optional, Tuple, Union

import plotly.graph_objects as go


class ColorSchemes:
    """
    Categorical palettes, one color per scenario.

    Examples
    --------
    >>> ColorSchemes.PLOTLY[0]
    '#636EFA'
    >>> len(ColorSchemes.get_colors('tableau', n_colors=12))   # cycles
    12
    """

    PLOTLY = [
        "#636EFA",
        "#EF553B",
        "#00CC96",
        "#AB63FA",
        "#FFA15A",
        "#19D3F3",
        "#FF6692",
        "#B6E880",
        "#FF97FF",
        "#FECB52",
    ]

    D3 = [
        "#1f77b4",
        "#ff7f0e",
        "#2ca02c",
        "#d62728",
        "#9467bd",
        "#8c564b",
        "#e377c2",
        "#7f7f7f",
        "#bcbd22",
        "#17becf",
    ]

    # Wong (2011)
    COLORBLIND_SAFE = [
        "#0173B2",
        "#DE8F05",
        "#029E73",
        "#CC78BC",
        "#CA9161",
        "#949494",
        "#ECE133",
        "#56B4E9",
    ]

    TABLEAU = [
        "#4E79A7",
        "#F28E2B",
        "#E15759",
        "#76B7B2",
        "#59A14F",
        "#EDC948",
        "#B07AA1",
        "#FF9DA7",
        "#9C755F",
        "#BAB0AC",
    ]

    @classmethod
    def available(cls) -> List[str]:
        """Names accepted by ``get_colors``."""
        return list(cls._palettes())

    @classmethod
    def _palettes(cls) -> Dict[str, List[str]]:
        return {
            "plotly": cls.PLOTLY,
            "d3": cls.D3,
            "colorblind_safe": cls.COLORBLIND_SAFE,
            "tableau": cls.TABLEAU,
        }

    @classmethod
    def get_colors(cls, scheme: str = "plotly", n_colors: Optional[int] = None) -> List[str]:
        """
        Get a palette by name.

        Parameters
        ----------
        scheme : str
            'plotly', 'd3', 'colorblind_safe' (alias 'wong') or 'tableau'.
            Case, hyphens and spaces are ignored.
        n_colors : Optional[int]
            Number of colors; the palette is cycled if more are needed.
            None returns a copy of the whole palette.

        Returns
        -------
        List[str]
            Hex color codes

        Raises
        ------
        ValueError
            If the scheme name is not recognized
        """
        key = scheme.lower().replace("-", "_").replace(" ", "_")
        if key == "wong":
            key = "colorblind_safe"
        palettes = cls._palettes()
        if key not in palettes:
            raise ValueError(
                f"Unknown color scheme '{scheme}'. Available: {', '.join(palettes)}"
            )
        palette = palettes[key]
        if n_colors is None:
            return palette.copy()
        return [palette[i % len(palette)] for i in range(n_colors)]


class PlotThemes:
    """
    Layout presets applied after a figure is built.

    A theme is a dict with any of the keys ``template``, ``font_family``,
    ``font_size``, ``line_width`` and ``showlegend``. Presets are looked
    up by name; a custom dict may be passed instead.

    Examples
    --------
    >>> custom = dict(PlotThemes.DEFAULT, font_size=16)
    >>> fig = PlotThemes.apply_theme(fig, theme=custom)
    """

    DEFAULT = {
        "color_scheme": "plotly",
        "template": "plotly_white",
        "font_family": "Arial, sans-serif",
        "font_size": 12,
        "line_width": 2,
    }

    PUBLICATION = {
        "color_scheme": "colorblind_safe",
        "template": "simple_white",
        "font_family": "Times New Roman, serif",
        "font_size": 14,
        "line_width": 2.5,
        "showlegend": True,
    }

    DARK = {
        "color_scheme": "plotly",
        "template": "plotly_dark",
        "font_family": "Arial, sans-serif",
        "font_size": 12,
        "line_width": 2,
    }

    PRESENTATION = {
        "color_scheme": "tableau",
        "template": "plotly_white",
        "font_family": "Arial, sans-serif",
        "font_size": 18,
        "line_width": 3,
    }

    @classmethod
    def available(cls) -> List[str]:
        """Names accepted by ``get_theme``."""
        return ["default", "publication", "dark", "presentation"]

    @classmethod
    def get_theme(cls, theme: Union[str, dict] = "default") -> dict:
        """
        Resolve a theme name or dict to a theme dict.

        Raises
        ------
        ValueError
            If the theme name is not recognized
        TypeError
            If theme is neither str nor dict
        """
        if isinstance(theme, dict):
            return theme
        if not isinstance(theme, str):
            raise TypeError("theme must be str or dict")
        key = theme.lower()
        if key not in cls.available():
            raise ValueError(
                f"Unknown theme '{theme}'. Available: {', '.join(cls.available())}"
            )
        return getattr(cls, key.upper())

    @classmethod
    def apply_theme(cls, fig: go.Figure, theme: Union[str, dict] = "default") -> go.Figure:
        """
        Apply template, fonts and line widths to a figure in place.

        Traces whose line width was set explicitly to something other
        than the default (e.g. reference lines) are scaled rather than
        overwritten, so relative emphasis is kept.

        Returns
        -------
        go.Figure
            The same figure, for chaining
        """
        config = cls.get_theme(theme)

        if "template" in config:
            fig.update_layout(template=config["template"])

        font = {}
        if "font_family" in config:
            font["family"] = config["font_family"]
        if "font_size" in config:
            font["size"] = config["font_size"]
        if font:
            fig.update_layout(font=font)

        if "showlegend" in config:
            fig.update_layout(showlegend=config["showlegend"])

        if "line_width" in config:
            scale = config["line_width"] / cls.DEFAULT["line_width"]
            for trace in fig.data:
                line = getattr(trace, "line", None)
                if line is not None and line.width is not None:
                    line.width = line.width * scale

        return fig

    @staticmethod
    def get_line_styles() -> List[str]:
        """Plotly dash patterns, in the order used for overlaid series."""
        return ["solid", "dot", "dash", "longdash", "dashdot", "longdashdot"]


# ============================================================================
# Color Manipulation Utilities
# ============================================================================


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """
    Convert a '#RRGGBB' color to an (r, g, b) tuple in [0, 255].

    Raises
    ------
    ValueError
        If hex_color is not a 6-digit hex code
    """
    digits = hex_color.lstrip("#")
    if len(digits) != 6:
        raise ValueError(f"expected a '#RRGGBB' color, got {hex_color!r}")
    return tuple(int(digits[i : i + 2], 16) for i in (0, 2, 4))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB values in [0, 255] to a lowercase '#rrggbb' code."""
    return f"#{r:02x}{g:02x}{b:02x}"


def to_rgba(hex_color: str, alpha: float) -> str:
    """
    Plotly 'rgba(r, g, b, a)' string, used for translucent fills.

    Examples
    --------
    >>> to_rgba('#FF0000', 0.2)
    'rgba(255, 0, 0, 0.2)'
    """
    r, g, b = hex_to_rgb(hex_color)
    return f"rgba({r}, {g}, {b}, {alpha})"


def lighten_color(hex_color: str, factor: float = 0.2) -> str:
    """
    Move a color toward white (factor > 0) or black (factor < 0).

    factor is clamped to [-1, 1].
    """
    factor = max(-1.0, min(1.0, factor))
    r, g, b = hex_to_rgb(hex_color)
    if factor > 0:
        r, g, b = (int(c + (255 - c) * factor) for c in (r, g, b))
    else:
        r, g, b = (int(c * (1 + factor)) for c in (r, g, b))
    return rgb_to_hex(r, g, b)


__all__ = [
    "ColorSchemes",
    "PlotThemes",
    "hex_to_rgb",
    "rgb_to_hex",
    "to_rgba",
    "lighten_color",
]
