"""Per-frame driving loop that hands the camera to exactly one controller."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from cosmos_drift.core.bodies import BodyPositionUpdater
from cosmos_drift.core.logging_utils import FlightRecorder
from cosmos_drift.core.model import CameraState, CelestialBody, InputState
from cosmos_drift.core.timekeeping import SimulationClock

from .flight import FreeFlightController
from .focus import FocusController

logger = logging.getLogger(__name__)

MODE_FREE_FLIGHT = "Free Flight"
MODE_FOCUS = "Focus"


@dataclass(frozen=True)
class FrameReport:
    """Display scalars derived after the driving controller has updated."""

    time: float
    mode: str
    position: np.ndarray
    yaw: float
    pitch: float
    speed: float
    target: Optional[CelestialBody]
    distance: float
    locked: bool

    @property
    def focused(self) -> bool:
        return self.mode == MODE_FOCUS

    @property
    def target_name(self) -> str:
        return self.target.name if self.target is not None else ""


class ModeArbiter:
    """Routes focus/release commands and runs the per-frame update order.

    Each :meth:`step` advances the clock, recomputes every body, updates the
    controller currently driving the camera and reports the results.
    """

    def __init__(
        self,
        camera: CameraState,
        updater: BodyPositionUpdater,
        flight: FreeFlightController,
        focus: FocusController,
        *,
        clock: SimulationClock | None = None,
        recorder: FlightRecorder | None = None,
        record_every_frames: int = 1,
    ) -> None:
        if flight.camera is not camera or focus.camera is not camera:
            raise ValueError("both controllers must drive the same camera")
        self.camera = camera
        self.updater = updater
        self.flight = flight
        self.focus = focus
        self.clock = clock or SimulationClock()
        self._recorder = recorder
        self._record_every = max(1, record_every_frames)
        self._frame = 0
        self._last_report: FrameReport | None = None

    @property
    def is_focused(self) -> bool:
        return self.focus.is_focused

    @property
    def mode(self) -> str:
        return MODE_FOCUS if self.focus.is_focused else MODE_FREE_FLIGHT

    @property
    def last_report(self) -> FrameReport | None:
        return self._last_report

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def request_focus(self) -> CelestialBody | None:
        if self.focus.is_focused:
            return self.focus.target
        self.flight.disable()
        target = self.focus.focus_on_nearest(self.updater.roots)
        if target is None:
            self.flight.enable()
            self._record_event("focus_failed")
            return None
        self._record_event("focus", target.name)
        return target

    def request_release(self) -> None:
        if not self.focus.is_focused:
            return
        name = self.focus.target.name if self.focus.target is not None else ""
        self.focus.return_to_free_flight()
        self.flight.enable()
        self._record_event("release", name)

    def request_lock(self) -> bool:
        locked = self.flight.lock()
        self._record_event("lock" if locked else "lock_failed")
        return locked

    def request_unlock(self) -> None:
        if self.flight.is_locked:
            self.flight.unlock()
            self._record_event("unlock")

    def handle_commands(self, commands) -> None:
        for command in commands:
            if command == "focus":
                self.request_focus()
            elif command == "release":
                self.request_release()
            elif command == "lock":
                self.request_lock()
            elif command == "unlock":
                self.request_unlock()
            else:
                raise KeyError(f"unknown command {command!r}")

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------
    def step(self, dt: float, input_state: InputState | None = None) -> FrameReport:
        if input_state is not None and input_state.commands:
            self.handle_commands(input_state.commands)

        sim_dt = self.clock.advance(dt)
        self.updater.update(self.clock.elapsed, sim_dt)

        if self.focus.is_focused:
            self.focus.update(dt)
            speed = self.focus.get_speed()
            distance = self.focus.get_distance_to_target()
        else:
            self.flight.update(dt, input_state)
            speed = self.flight.get_speed()
            distance = 0.0

        report = FrameReport(
            time=self.clock.elapsed,
            mode=self.mode,
            position=self.camera.position.copy(),
            yaw=self.camera.yaw,
            pitch=self.camera.pitch,
            speed=speed,
            target=self.focus.target,
            distance=distance,
            locked=self.flight.is_locked,
        )
        self._last_report = report
        self._record_frame(report, dt)
        return report

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def _record_frame(self, report: FrameReport, dt: float) -> None:
        self._frame += 1
        if self._recorder is None or self._frame % self._record_every:
            return
        x, y, z = (float(c) for c in report.position)
        self._recorder.log_ts(
            [
                report.time,
                x,
                y,
                z,
                report.yaw,
                report.pitch,
                report.speed,
                report.mode,
                report.target_name,
                report.distance,
                dt,
            ]
        )

    def _record_event(self, event_type: str, target: str = "") -> None:
        if self._recorder is None:
            return
        position = [round(float(c), 4) for c in self.camera.position]
        self._recorder.log_event(self.clock.elapsed, event_type, target, {"position": position})


__all__ = ["FrameReport", "MODE_FOCUS", "MODE_FREE_FLIGHT", "ModeArbiter"]
