from __future__ import annotations

import math
import textwrap
from typing import Sequence, TYPE_CHECKING

import pygame

from cosmos_drift.core.units import format_distance, format_speed

from .assets import Color, get_text_surface

if TYPE_CHECKING:  # pragma: no cover
    from cosmos_drift.controls.arbiter import FrameReport
    from cosmos_drift.core.config import RenderCfg
    from cosmos_drift.core.model import CelestialBody


HELP_LINES: tuple[str, ...] = (
    "Click            capture pointer",
    "Mouse            look around",
    "W A S D          move",
    "E / Q            up / down",
    "Shift            boost",
    "F                focus nearest body",
    "G                return to free flight",
    "Esc              release pointer / quit",
    "P                pause orbits",
    "H                toggle this help",
    "F11              toggle fullscreen",
)


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (14, 14),
    min_width: int = 0,
) -> pygame.Surface:
    if not lines:
        raise ValueError("lines must not be empty")
    padding_x, padding_y = padding
    line_height = font.get_linesize()
    width = max(min_width, max(font.size(text)[0] for text, _ in lines) + padding_x * 2)
    height = line_height * len(lines) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(
        panel_surface,
        background_color,
        panel_surface.get_rect(),
        border_radius=12,
    )
    for idx, (text, color) in enumerate(lines):
        if not text:
            continue
        text_surf = get_text_surface(font, text, color)
        panel_surface.blit(text_surf, (padding_x, padding_y + idx * line_height))
    return panel_surface


def flight_lines(report: "FrameReport", render_cfg: "RenderCfg") -> list[tuple[str, tuple[int, int, int]]]:
    """Speed/mode/target/distance rows for the navigation panel."""

    text = render_cfg.hud_text_color
    accent = render_cfg.hud_accent_color
    muted = render_cfg.hud_muted_color
    heading = math.degrees(-report.yaw) % 360.0
    lines = [
        (f"MODE      {report.mode}", accent if report.focused else text),
        (f"SPEED     {format_speed(report.speed)}", text),
        (f"HEADING   {heading:05.1f}°  PITCH {math.degrees(report.pitch):+05.1f}°", muted),
    ]
    if report.target is not None:
        lines.append((f"TARGET    {report.target.name}", accent))
        lines.append((f"DISTANCE  {format_distance(report.distance)}", text))
    else:
        lines.append(("TARGET    None", muted))
        lines.append(("DISTANCE  --", muted))
    if not report.locked and not report.focused:
        lines.append(("Click to capture pointer", muted))
    return lines


def body_info_lines(body: "CelestialBody", render_cfg: "RenderCfg", wrap: int = 44) -> list[tuple[str, tuple[int, int, int]]]:
    lines = [
        (body.name.upper(), render_cfg.hud_accent_color),
        (f"Radius  {body.real_radius_km:,.1f} km (scaled in sim)", render_cfg.hud_text_color),
    ]
    if body.is_orbiting:
        lines.append((f"Period  {body.orbit_period:.2f} Earth years", render_cfg.hud_text_color))
    for chunk in textwrap.wrap(body.description, wrap):
        lines.append((chunk, render_cfg.hud_muted_color))
    return lines


def draw_hud(
    surface: pygame.Surface,
    report: "FrameReport",
    font: pygame.font.Font,
    *,
    render_cfg: "RenderCfg",
    fps: float | None = None,
) -> None:
    margin = render_cfg.hud_margin
    panel = build_text_panel(font, flight_lines(report, render_cfg), background_color=render_cfg.hud_panel_color)
    surface.blit(panel, (margin, margin))

    if report.focused and report.target is not None:
        info = build_text_panel(
            font,
            body_info_lines(report.target, render_cfg),
            background_color=render_cfg.hud_panel_color,
        )
        surface.blit(info, info.get_rect(bottomleft=(margin, surface.get_height() - margin)))

    if fps is not None:
        fps_text = get_text_surface(font, f"FPS: {fps:.1f}", render_cfg.hud_muted_color)
        surface.blit(
            fps_text,
            fps_text.get_rect(bottomright=(surface.get_width() - 10, surface.get_height() - 10)),
        )


def draw_help_overlay(
    surface: pygame.Surface,
    title_font: pygame.font.Font,
    font: pygame.font.Font,
    *,
    render_cfg: "RenderCfg",
) -> None:
    lines = [("CONTROLS", render_cfg.hud_accent_color), ("", render_cfg.hud_text_color)]
    lines.extend((line, render_cfg.hud_text_color) for line in HELP_LINES)
    panel = build_text_panel(
        font,
        lines,
        background_color=render_cfg.hud_panel_color,
        padding=(24, 20),
        min_width=360,
    )
    rect = panel.get_rect(center=surface.get_rect().center)
    surface.blit(panel, rect)
    title = get_text_surface(title_font, "COSMOS DRIFT", render_cfg.hud_text_color)
    surface.blit(title, title.get_rect(midbottom=(rect.centerx, rect.top - 10)))
