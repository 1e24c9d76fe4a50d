"""Rendering helpers for the flight view."""

from .assets import FontBook, get_text_surface, load_font
from .camera import PerspectiveProjector, Projection
from .draw import (
    draw_body,
    draw_crosshair,
    draw_label,
    draw_orbit_ring,
    draw_scene,
    draw_starfield,
    generate_starfield,
    orbit_ring_points,
    visible_runs,
)
from .ui import (
    HELP_LINES,
    body_info_lines,
    build_text_panel,
    draw_help_overlay,
    draw_hud,
    flight_lines,
)

__all__ = [
    "FontBook",
    "HELP_LINES",
    "PerspectiveProjector",
    "Projection",
    "body_info_lines",
    "build_text_panel",
    "draw_body",
    "draw_crosshair",
    "draw_help_overlay",
    "draw_hud",
    "draw_label",
    "draw_orbit_ring",
    "draw_scene",
    "draw_starfield",
    "flight_lines",
    "generate_starfield",
    "get_text_surface",
    "load_font",
    "orbit_ring_points",
    "visible_runs",
]
