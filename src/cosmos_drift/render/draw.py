from __future__ import annotations

import math
import random
from typing import Iterable, Sequence, TYPE_CHECKING

import numpy as np
import pygame

from .assets import Color, get_text_surface
from .camera import PerspectiveProjector

if TYPE_CHECKING:  # pragma: no cover
    from cosmos_drift.core.config import RenderCfg
    from cosmos_drift.core.model import CelestialBody


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def orbit_ring_points(center: np.ndarray, radius: float, segments: int) -> np.ndarray:
    """Closed ring of world points in the horizontal plane around *center*."""

    theta = np.linspace(0.0, 2.0 * math.pi, segments + 1)
    ring = np.zeros((segments + 1, 3), dtype=float)
    ring[:, 0] = np.cos(theta) * radius
    ring[:, 2] = np.sin(theta) * radius
    return ring + np.asarray(center, dtype=float)


def visible_runs(xy: np.ndarray, visible: np.ndarray) -> list[list[tuple[int, int]]]:
    """Split a projected polyline into runs of consecutive visible points."""

    runs: list[list[tuple[int, int]]] = []
    current: list[tuple[int, int]] = []
    for (x, y), ok in zip(xy, visible):
        if ok and abs(x) < 30_000 and abs(y) < 30_000:
            current.append((int(x), int(y)))
        elif current:
            runs.append(current)
            current = []
    if current:
        runs.append(current)
    return runs


def draw_orbit_ring(
    surface: pygame.Surface,
    projector: PerspectiveProjector,
    body: "CelestialBody",
    *,
    render_cfg: "RenderCfg",
) -> None:
    if not body.is_orbiting:
        return
    center = body.parent.position if body.parent is not None else np.zeros(3)
    points = orbit_ring_points(center, body.orbit_radius, render_cfg.orbit_segments)
    xy, visible = projector.project_many(points)
    for run in visible_runs(xy, visible):
        if len(run) >= 2:
            pygame.draw.aalines(surface, render_cfg.orbit_color, False, run)


def _shade(color: tuple[int, int, int], factor: float) -> tuple[int, int, int]:
    return tuple(int(_clamp(c * factor, 0, 255)) for c in color)  # type: ignore[return-value]


def draw_body(
    surface: pygame.Surface,
    position: tuple[int, int],
    radius: int,
    color: tuple[int, int, int],
    *,
    spin_angle: float = 0.0,
    emissive: bool = False,
) -> None:
    if radius <= 0:
        return
    if emissive:
        # Past the screen diagonal the disc alone fills the view.
        if radius * 2 > math.hypot(*surface.get_size()):
            pygame.draw.circle(surface, color, position, radius)
            return
        glow_radius = radius * 2
        glow = pygame.Surface((glow_radius * 2, glow_radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(glow, (*color, 50), (glow_radius, glow_radius), glow_radius)
        pygame.draw.circle(glow, (*color, 90), (glow_radius, glow_radius), int(radius * 1.4))
        surface.blit(glow, glow.get_rect(center=position))
        pygame.draw.circle(surface, color, position, radius)
        return
    pygame.draw.circle(surface, _shade(color, 0.55), position, radius)
    lit_offset = int(radius * 0.25)
    pygame.draw.circle(
        surface,
        color,
        (position[0] - lit_offset, position[1] - lit_offset),
        max(1, int(radius * 0.75)),
    )
    if radius >= 6:
        # Meridian tick so the spin of larger bodies is visible.
        half_chord = int(radius * 0.6)
        tick_x = position[0] + int(math.cos(spin_angle) * radius * 0.8)
        pygame.draw.line(
            surface,
            _shade(color, 0.4),
            (tick_x, position[1] - half_chord),
            (tick_x, position[1] + half_chord),
            1,
        )


def draw_label(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    anchor: tuple[int, int],
    *,
    color: Color,
) -> None:
    label = get_text_surface(font, text, color)
    rect = label.get_rect(midbottom=anchor)
    surface.blit(label, rect)


def draw_scene(
    surface: pygame.Surface,
    projector: PerspectiveProjector,
    bodies: Sequence["CelestialBody"],
    *,
    render_cfg: "RenderCfg",
    label_font: pygame.font.Font,
    highlight: "CelestialBody | None" = None,
) -> None:
    """Orbit rings, then bodies far to near, then labels."""

    for body in bodies:
        draw_orbit_ring(surface, projector, body, render_cfg=render_cfg)

    projected = []
    for body in bodies:
        proj = projector.project(body.position)
        if proj is None:
            continue
        projected.append((proj, body))
    projected.sort(key=lambda item: item[0].depth, reverse=True)

    for proj, body in projected:
        radius_px = projector.projected_radius(body.radius, proj.depth)
        if radius_px > 20_000:
            continue
        radius = max(render_cfg.min_body_pixels, int(radius_px))
        draw_body(
            surface,
            proj.pixel,
            radius,
            body.color,
            spin_angle=body.spin_angle,
            emissive=body.parent is None and not body.is_orbiting,
        )

    for proj, body in projected:
        radius_px = projector.projected_radius(body.radius, proj.depth)
        x, y = proj.pixel
        anchor = (x, y - int(max(radius_px, render_cfg.min_body_pixels)) - render_cfg.label_offset_pixels // 2)
        color = render_cfg.hud_accent_color if body is highlight else render_cfg.label_color
        draw_label(surface, label_font, body.name, anchor, color=color)


def generate_starfield(
    num_stars: int,
    *,
    rng: random.Random | None = None,
) -> list[dict[str, object]]:
    """Random directions on the unit sphere with a brightness and size."""

    rng = rng or random.Random()
    stars: list[dict[str, object]] = []
    for _ in range(num_stars):
        z = rng.uniform(-1.0, 1.0)
        phi = rng.uniform(0.0, 2.0 * math.pi)
        ring = math.sqrt(1.0 - z * z)
        direction = np.array([ring * math.cos(phi), z, ring * math.sin(phi)])
        base = rng.randint(170, 240)
        color = (
            max(0, base - rng.randint(10, 25)),
            max(0, base - rng.randint(5, 15)),
            base,
        )
        stars.append({"dir": direction, "color": color, "radius": rng.choice([1, 1, 1, 2])})
    return stars


def draw_starfield(
    surface: pygame.Surface,
    projector: PerspectiveProjector,
    starfield: Iterable[dict[str, object]],
) -> None:
    width, height = surface.get_size()
    for star in starfield:
        proj = projector.project_direction(star["dir"])  # type: ignore[arg-type]
        if proj is None:
            continue
        x, y = proj.pixel
        if 0 <= x < width and 0 <= y < height:
            radius = star["radius"]  # type: ignore[index]
            if radius <= 1:
                surface.set_at((x, y), star["color"])  # type: ignore[arg-type]
            else:
                pygame.draw.circle(surface, star["color"], (x, y), radius)  # type: ignore[arg-type]


def draw_crosshair(surface: pygame.Surface, color: Color, size: int = 8) -> None:
    cx, cy = surface.get_width() // 2, surface.get_height() // 2
    pygame.draw.line(surface, color, (cx - size, cy), (cx - 3, cy))
    pygame.draw.line(surface, color, (cx + 3, cy), (cx + size, cy))
    pygame.draw.line(surface, color, (cx, cy - size), (cx, cy - 3))
    pygame.draw.line(surface, color, (cx, cy + 3), (cx, cy + size))
