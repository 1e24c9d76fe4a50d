# src/cosmos_pygame.py
"""
Cosmos Drift - fly a camera through a scaled solar system
=========================================================

Free flight: click to capture the pointer, WASD/E/Q to move, Shift to boost.
Focus: F orbits the nearest body, G returns to free flight.
"""
from __future__ import annotations

import argparse
import logging
import os
import random
import sys
from pathlib import Path

import pygame
from pygame.locals import DOUBLEBUF, FULLSCREEN, NOFRAME, RESIZABLE

from cosmos_drift.controls import (
    FocusController,
    FreeFlightController,
    InputCollector,
    ModeArbiter,
)
from cosmos_drift.core.bodies import BodyPositionUpdater
from cosmos_drift.core.config import (
    AppConfig,
    SETTINGS_PATH,
    load_user_settings,
    save_user_settings,
)
from cosmos_drift.core.logging_utils import FlightRecorder, configure_logging
from cosmos_drift.core.model import CameraState
from cosmos_drift.core.timekeeping import FrameTimer, SimulationClock
from cosmos_drift.data.solar_system import build_solar_system
from cosmos_drift.render import (
    FontBook,
    PerspectiveProjector,
    draw_crosshair,
    draw_help_overlay,
    draw_hud,
    draw_scene,
    draw_starfield,
    generate_starfield,
)

logger = logging.getLogger("cosmos_drift")

KEY_BINDINGS: dict[int, str] = {
    pygame.K_w: "forward",
    pygame.K_s: "back",
    pygame.K_a: "left",
    pygame.K_d: "right",
    pygame.K_e: "up",
    pygame.K_q: "down",
    pygame.K_LSHIFT: "boost",
    pygame.K_RSHIFT: "boost",
    pygame.K_f: "focus",
    pygame.K_g: "release",
}


class PygamePointerCapture:
    """Grabs the mouse and hides the cursor so motion arrives as relative deltas."""

    def request(self) -> bool:
        if not pygame.display.get_init() or pygame.display.get_surface() is None:
            return False
        if not pygame.key.get_focused():
            return False
        pygame.event.set_grab(True)
        pygame.mouse.set_visible(False)
        pygame.mouse.get_rel()
        if not pygame.event.get_grab():
            pygame.mouse.set_visible(True)
            return False
        return True

    def release(self) -> None:
        pygame.event.set_grab(False)
        pygame.mouse.set_visible(True)


def _set_display_mode_with_vsync(size: tuple[int, int], flags: int) -> pygame.Surface:
    try:
        return pygame.display.set_mode(size, flags, vsync=1)
    except (pygame.error, TypeError):
        return pygame.display.set_mode(size, flags)


def create_screen(fullscreen: bool, windowed_size: tuple[int, int]) -> tuple[pygame.Surface, bool]:
    """Open the preferred display mode, falling back to a window."""

    if fullscreen:
        info = pygame.display.Info()
        if info.current_w and info.current_h:
            try:
                os.environ.setdefault("SDL_VIDEO_WINDOW_POS", "0,0")
                return (
                    _set_display_mode_with_vsync((info.current_w, info.current_h), NOFRAME | DOUBLEBUF),
                    True,
                )
            except pygame.error:
                logger.warning("Borderless fullscreen unavailable, trying exclusive mode")
        try:
            return _set_display_mode_with_vsync((0, 0), FULLSCREEN | DOUBLEBUF), True
        except pygame.error:
            logger.warning("Fullscreen unavailable, falling back to a window")
    return _set_display_mode_with_vsync(windowed_size, RESIZABLE | DOUBLEBUF), False


def build_arbiter(cfg: AppConfig, recorder: FlightRecorder | None = None) -> ModeArbiter:
    camera = CameraState(position=cfg.sim.start_position.copy())
    camera.look_at((0.0, 0.0, 0.0))

    updater = BodyPositionUpdater(cfg.orbit)
    updater.register_tree(build_solar_system())

    flight = FreeFlightController(camera, PygamePointerCapture(), cfg.flight)
    focus = FocusController(camera, cfg.focus)
    clock = SimulationClock(time_scale=cfg.sim.time_scale)
    return ModeArbiter(
        camera,
        updater,
        flight,
        focus,
        clock=clock,
        recorder=recorder,
        record_every_frames=cfg.sim.record_every_frames,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fly a camera through a scaled solar system.")
    parser.add_argument("--windowed", action="store_true", help="start in a window")
    parser.add_argument("--record", action="store_true", help="record flight telemetry to CSV")
    parser.add_argument("--flights-dir", type=Path, default=None, help="where recordings go")
    parser.add_argument("--settings", type=Path, default=SETTINGS_PATH, help="settings JSON path")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    user_settings = load_user_settings(args.settings)
    cfg = AppConfig.from_settings(user_settings)

    recorder: FlightRecorder | None = None
    if args.record or cfg.sim.record_flights:
        recorder = FlightRecorder(args.flights_dir or cfg.sim.flights_dir)
        logger.info("Recording flight to %s", recorder.run_dir)

    pygame.init()
    pygame.display.set_caption("Cosmos Drift")

    fullscreen_setting = user_settings.get("fullscreen")
    fullscreen_enabled = fullscreen_setting if isinstance(fullscreen_setting, bool) else cfg.render.fullscreen
    if args.windowed:
        fullscreen_enabled = False
    try:
        screen, fullscreen_enabled = create_screen(fullscreen_enabled, cfg.render.windowed_default_size)
    except pygame.error:
        logger.exception("Could not open a display")
        pygame.quit()
        return 1

    arbiter = build_arbiter(cfg, recorder)
    flight = arbiter.flight
    flight.on_lock_error(lambda: logger.warning("Click again to retry pointer capture"))
    if recorder is not None:
        recorder.write_meta(
            {
                "angular_scale": cfg.orbit.angular_scale,
                "spin_scale": cfg.orbit.spin_scale,
                "base_speed": cfg.flight.base_speed,
                "boost_multiplier": cfg.flight.boost_multiplier,
                "orbit_radius_ratio": cfg.focus.orbit_radius_ratio,
                "transition_duration": cfg.focus.transition_duration,
                "bodies": [body.name for body in arbiter.updater.bodies],
            }
        )

    projector = PerspectiveProjector(screen.get_size(), cfg.render.fov, near=cfg.render.near_plane)
    overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
    fonts = FontBook()
    starfield = generate_starfield(cfg.render.star_count, rng=random.Random(cfg.render.star_seed))
    collector = InputCollector()
    frame_timer = FrameTimer(max_dt=cfg.sim.max_frame_dt)
    clock = pygame.time.Clock()
    show_help = False
    running = True

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    if flight.is_locked:
                        collector.press("unlock")
                    else:
                        running = False
                elif event.key == pygame.K_F11:
                    try:
                        screen, fullscreen_enabled = create_screen(
                            not fullscreen_enabled, cfg.render.windowed_default_size
                        )
                    except pygame.error:
                        logger.warning("Could not toggle fullscreen")
                elif event.key == pygame.K_h:
                    show_help = not show_help
                elif event.key == pygame.K_p:
                    paused = arbiter.clock.toggle_pause()
                    logger.info("Simulation %s", "paused" if paused else "resumed")
                elif event.key in KEY_BINDINGS and not show_help:
                    collector.press(KEY_BINDINGS[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in KEY_BINDINGS:
                    collector.release(KEY_BINDINGS[event.key])
            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1 and not flight.is_locked and not show_help:
                    collector.press("lock")
            elif event.type == pygame.MOUSEMOTION:
                if flight.is_locked:
                    collector.add_pointer_motion(*event.rel)
            elif event.type == pygame.WINDOWFOCUSLOST:
                collector.release_all()
                if flight.is_locked:
                    PygamePointerCapture().release()
                    flight.handle_capture_change(False)

        dt = frame_timer.tick()
        report = arbiter.step(dt, collector.snapshot())

        current_size = screen.get_size()
        if current_size != projector.size:
            projector.update_size(current_size)
            overlay = pygame.Surface(current_size, pygame.SRCALPHA)

        projector.set_camera(arbiter.camera)
        screen.fill(cfg.render.background_color)
        draw_starfield(screen, projector, starfield)
        overlay.fill((0, 0, 0, 0))
        draw_scene(
            overlay,
            projector,
            arbiter.updater.bodies,
            render_cfg=cfg.render,
            label_font=fonts.label,
            highlight=report.target,
        )
        screen.blit(overlay, (0, 0))
        if flight.is_locked and not report.focused:
            draw_crosshair(screen, cfg.render.crosshair_color)
        draw_hud(screen, report, fonts.hud, render_cfg=cfg.render, fps=clock.get_fps())
        if show_help:
            draw_help_overlay(screen, fonts.title, fonts.hud, render_cfg=cfg.render)

        pygame.display.flip()
        clock.tick(cfg.render.target_fps)

    user_settings["fullscreen"] = fullscreen_enabled
    save_user_settings(user_settings, args.settings)
    if recorder is not None:
        recorder.close()
        logger.info("Flight saved to %s", recorder.run_dir)
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
