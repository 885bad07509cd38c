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
Visualization Tools
===================

Plotly figures for the reservoir study: step responses, verification
overlays, Bode plots and root loci.

Plotting Classes
----------------
>>> from reservoir_control.visualization import ControlPlotter
>>>
>>> plotter = ControlPlotter()
>>> fig = plotter.plot_frequency_response({'Kp = 5': frequency_response(T_fwd)})
>>> fig.show()

Themes and Styling
------------------
>>> from reservoir_control.visualization import ColorSchemes, PlotThemes
>>>
>>> colors = ColorSchemes.get_colors('colorblind_safe', n_colors=7)
>>> fig = PlotThemes.apply_theme(fig, theme='publication')

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

# Plotters
from .control_plots import ControlPlotter

# Themes and styling
from .themes import (
    ColorSchemes,
    PlotThemes,
    hex_to_rgb,
    lighten_color,
    rgb_to_hex,
    to_rgba,
)

# Export public API
__all__ = [
    # Plotters
    "ControlPlotter",
    # Themes and styling
    "ColorSchemes",
    "PlotThemes",
    "hex_to_rgb",
    "rgb_to_hex",
    "to_rgba",
    "lighten_color",
]
