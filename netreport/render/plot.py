"""
Bar chart drawing shared by every histogram on the report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence
import math

from netreport.formatting import comma_number_string
from netreport.render.surface import Bounds, Surface


@dataclass
class PlotStyle:
    """Titles, labels and font sizes for one chart."""
    title: str = ""
    subtitle: str = ""
    x_label: str = ""
    y_label: str = ""
    pad_left_factor: float = 0.15
    pad_right_factor: float = 0.02
    title_font_size: float = 8.0
    subtitle_font_size: float = 6.0
    x_tick_font_size: float = 5.0
    y_tick_font_size: float = 5.0
    x_axis_font_size: float = 6.0
    bar_color: tuple[float, float, float] = (0.45, 0.55, 0.75)
    overlay_color: tuple[float, float, float] = (0.15, 0.25, 0.5)
    y_tick_formatter: Callable[[float], str] = field(default=lambda v: comma_number_string(int(v)))


def _draw_centered(surface: Surface, text: str, font_size: float, center_x: float, top: float) -> float:
    """Draw text horizontally centered below top; returns the line height used."""
    surface.set_font_size(font_size)
    extents = surface.measure_text(text)
    surface.draw_text(text, center_x - extents.width / 2.0, top + extents.height)
    return extents.height * 1.5


def draw_bar_chart(
    surface: Surface,
    bounds: Bounds,
    style: PlotStyle,
    values: Sequence[float],
    labels: Sequence[str] | None = None,
    overlay: Sequence[float] | None = None,
) -> float:
    """
    Draw a bar chart filling bounds.

    overlay, when given, is drawn over values in a darker color (it must
    not exceed values bar by bar to stay readable). Returns the height
    actually used, which is always bounds.height.
    """
    center_x = bounds.x + bounds.width / 2.0
    top = bounds.y
    if style.title:
        top += _draw_centered(surface, style.title, style.title_font_size, center_x, top)
    if style.subtitle:
        top += _draw_centered(surface, style.subtitle, style.subtitle_font_size, center_x, top)

    bottom = bounds.bottom - style.x_tick_font_size * 1.5
    if style.x_label:
        surface.set_font_size(style.x_axis_font_size)
        extents = surface.measure_text(style.x_label)
        surface.draw_text(style.x_label, center_x - extents.width / 2.0, bounds.bottom)
        bottom -= extents.height * 1.5

    left = bounds.x + bounds.width * style.pad_left_factor
    right = bounds.right - bounds.width * style.pad_right_factor
    plot_width = max(right - left, 0.0)
    plot_height = max(bottom - top, 0.0)

    surface.set_color(0.0, 0.0, 0.0)
    surface.draw_line(left, top, left, bottom)
    surface.draw_line(left, bottom, right, bottom)

    max_value = max(values) if len(values) else 0
    if max_value <= 0 or plot_width <= 0 or plot_height <= 0:
        surface.set_font_size(style.x_tick_font_size)
        extents = surface.measure_text("no data")
        surface.draw_text("no data", left + (plot_width - extents.width) / 2.0,
                          top + (plot_height + extents.height) / 2.0)
        return bounds.height

    # y ticks: zero and the maximum
    surface.set_font_size(style.y_tick_font_size)
    for tick_value, tick_y in ((0, bottom), (max_value, top)):
        text = style.y_tick_formatter(tick_value)
        extents = surface.measure_text(text)
        surface.draw_text(text, left - extents.width - 2.0, tick_y + extents.height / 2.0)
    if style.y_label:
        surface.draw_text(style.y_label, bounds.x, top - 2.0)

    slot = plot_width / len(values)
    bar_width = slot * 0.8
    for series, color in ((values, style.bar_color), (overlay, style.overlay_color)):
        if series is None:
            continue
        surface.set_color(*color)
        for i, value in enumerate(series):
            if value <= 0:
                continue
            height = plot_height * (float(value) / float(max_value))
            surface.draw_rect(left + slot * i + (slot - bar_width) / 2.0, bottom - height,
                              bar_width, height)
    surface.set_color(0.0, 0.0, 0.0)

    if labels:
        surface.set_font_size(style.x_tick_font_size)
        widest = max(surface.measure_text(label).width for label in labels)
        step = max(1, math.ceil(len(labels) * (widest + 4.0) / plot_width))
        for i in range(0, len(labels), step):
            extents = surface.measure_text(labels[i])
            x = left + slot * i + (slot - extents.width) / 2.0
            surface.draw_text(labels[i], x, bottom + extents.height * 1.25)

    return bounds.height
