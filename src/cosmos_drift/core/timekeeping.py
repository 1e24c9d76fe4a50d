"""Frame timing and the simulation clock."""
from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)
    max_dt: float | None = None

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        if self.max_dt is not None:
            dt = min(dt, self.max_dt)
        return max(dt, 0.0)

    def reset(self) -> None:
        self.last_time = time.perf_counter()


@dataclass
class SimulationClock:
    """Accumulates frame deltas into monotonic simulation time."""

    elapsed: float = 0.0
    time_scale: float = 1.0
    paused: bool = False

    def advance(self, dt: float) -> float:
        """Advance by *dt* real seconds and return the simulated delta."""

        if dt < 0.0:
            raise ValueError(f"frame delta must not be negative, got {dt!r}")
        if self.paused:
            return 0.0
        sim_dt = dt * self.time_scale
        self.elapsed += sim_dt
        return sim_dt

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused


__all__ = ["FrameTimer", "SimulationClock"]
