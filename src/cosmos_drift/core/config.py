"""Configuration dataclasses for navigation, orbits and rendering."""
from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

import numpy as np


class ConfigError(ValueError):
    """Raised when a tuning value is outside its valid range."""


def _require_positive(name: str, value: float) -> None:
    if not value > 0.0:
        raise ConfigError(f"{name} must be positive, got {value!r}")


class _CfgMixin:
    """Shared helpers for the frozen config dataclasses."""

    def validate(self) -> None:  # pragma: no cover - overridden
        return None

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, Any] | None = None):
        """Build a config from defaults updated with the known keys of *overrides*.

        Unknown keys are ignored so older settings files keep loading.
        """

        cfg = cls()
        if overrides:
            known = {f.name for f in fields(cls)}
            values = {key: value for key, value in overrides.items() if key in known}
            if values:
                cfg = replace(cfg, **values)
        cfg.validate()
        return cfg


@dataclass(frozen=True)
class FlightCfg(_CfgMixin):
    base_speed: float = 30.0
    boost_multiplier: float = 8.0
    acceleration_time: float = 0.15
    deceleration_time: float = 0.6
    mouse_sensitivity: float = 0.002
    pitch_min_deg: float = -90.0
    pitch_max_deg: float = 90.0

    @property
    def pitch_min(self) -> float:
        return math.radians(self.pitch_min_deg)

    @property
    def pitch_max(self) -> float:
        return math.radians(self.pitch_max_deg)

    def validate(self) -> None:
        _require_positive("base_speed", self.base_speed)
        _require_positive("boost_multiplier", self.boost_multiplier)
        _require_positive("acceleration_time", self.acceleration_time)
        _require_positive("deceleration_time", self.deceleration_time)
        _require_positive("mouse_sensitivity", self.mouse_sensitivity)
        if self.acceleration_time >= self.deceleration_time:
            raise ConfigError("acceleration_time must be smaller than deceleration_time")
        if not -90.0 <= self.pitch_min_deg < self.pitch_max_deg <= 90.0:
            raise ConfigError(
                f"pitch bounds must satisfy -90 <= min < max <= 90, got "
                f"({self.pitch_min_deg}, {self.pitch_max_deg})"
            )


@dataclass(frozen=True)
class FocusCfg(_CfgMixin):
    orbit_radius_ratio: float = 3.0
    orbit_angular_speed: float = 0.3
    transition_duration: float = 0.5
    vertical_offset_fraction: float = 0.3
    follow_rate: float = 5.0
    rotation_rate: float = 8.0

    def validate(self) -> None:
        _require_positive("orbit_radius_ratio", self.orbit_radius_ratio)
        _require_positive("transition_duration", self.transition_duration)
        _require_positive("follow_rate", self.follow_rate)
        _require_positive("rotation_rate", self.rotation_rate)


@dataclass(frozen=True)
class OrbitCfg(_CfgMixin):
    # Radians of orbital angle per orbit_period of simulated time. Not 2*pi:
    # motion is slowed so it stays visible at interactive rates.
    angular_scale: float = 0.1
    spin_scale: float = 0.6

    def validate(self) -> None:
        _require_positive("angular_scale", self.angular_scale)
        if self.spin_scale < 0.0:
            raise ConfigError(f"spin_scale must not be negative, got {self.spin_scale!r}")


@dataclass(frozen=True)
class SimCfg(_CfgMixin):
    max_frame_dt: float = 0.1
    time_scale: float = 1.0
    start_position: np.ndarray = field(
        default_factory=lambda: np.array([0.0, 20.0, 120.0], dtype=float)
    )
    record_flights: bool = False
    flights_dir: str = "data/flights"
    record_every_frames: int = 2

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_position", np.asarray(self.start_position, dtype=float))

    def validate(self) -> None:
        _require_positive("max_frame_dt", self.max_frame_dt)
        if self.time_scale < 0.0:
            raise ConfigError(f"time_scale must not be negative, got {self.time_scale!r}")
        if self.record_every_frames < 1:
            raise ConfigError("record_every_frames must be at least 1")


@dataclass(frozen=True)
class RenderCfg(_CfgMixin):
    width: int = 1280
    height: int = 800
    windowed_default_size: tuple[int, int] = (1280, 800)
    fullscreen: bool = False
    target_fps: int = 120
    fov_deg: float = 60.0
    near_plane: float = 0.1
    background_color: tuple[int, int, int] = (2, 4, 12)
    star_count: int = 900
    star_seed: int = 7
    orbit_color: tuple[int, int, int, int] = (120, 150, 200, 70)
    orbit_segments: int = 128
    label_color: tuple[int, int, int] = (220, 230, 255)
    label_offset_pixels: int = 14
    min_body_pixels: int = 2
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_accent_color: tuple[int, int, int] = (46, 209, 195)
    hud_muted_color: tuple[int, int, int] = (150, 168, 200)
    hud_panel_color: tuple[int, int, int, int] = (10, 16, 30, 170)
    hud_margin: int = 18
    crosshair_color: tuple[int, int, int, int] = (234, 241, 255, 120)

    @property
    def fov(self) -> float:
        return math.radians(self.fov_deg)

    def validate(self) -> None:
        if not 1.0 < self.fov_deg < 179.0:
            raise ConfigError(f"fov_deg must be within (1, 179), got {self.fov_deg!r}")
        _require_positive("near_plane", self.near_plane)


FLIGHT_CFG = FlightCfg()
FOCUS_CFG = FocusCfg()
ORBIT_CFG = OrbitCfg()
SIM_CFG = SimCfg()
RENDER_CFG = RenderCfg()


SETTINGS_DIR = Path.home() / ".cosmos_drift"
SETTINGS_PATH = SETTINGS_DIR / "settings.json"


def load_user_settings(path: Path = SETTINGS_PATH) -> dict[str, object]:
    """Return persisted tuning settings if the JSON file is readable."""

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def save_user_settings(settings: dict[str, object], path: Path = SETTINGS_PATH) -> None:
    """Persist tuning settings, ignoring filesystem errors."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2, sort_keys=True)
    except OSError:
        pass


def _section(settings: Mapping[str, object], key: str) -> Mapping[str, Any] | None:
    value = settings.get(key)
    return value if isinstance(value, dict) else None


@dataclass(frozen=True)
class AppConfig:
    flight: FlightCfg = FLIGHT_CFG
    focus: FocusCfg = FOCUS_CFG
    orbit: OrbitCfg = ORBIT_CFG
    sim: SimCfg = SIM_CFG
    render: RenderCfg = RENDER_CFG

    @classmethod
    def from_settings(cls, settings: Mapping[str, object]) -> "AppConfig":
        """Apply the ``flight``/``focus``/``orbit``/``sim``/``render`` sections."""

        return cls(
            flight=FlightCfg.from_mapping(_section(settings, "flight")),
            focus=FocusCfg.from_mapping(_section(settings, "focus")),
            orbit=OrbitCfg.from_mapping(_section(settings, "orbit")),
            sim=SimCfg.from_mapping(_section(settings, "sim")),
            render=RenderCfg.from_mapping(_section(settings, "render")),
        )


__all__ = [
    "AppConfig",
    "ConfigError",
    "FLIGHT_CFG",
    "FOCUS_CFG",
    "FlightCfg",
    "FocusCfg",
    "ORBIT_CFG",
    "OrbitCfg",
    "RENDER_CFG",
    "RenderCfg",
    "SETTINGS_PATH",
    "SIM_CFG",
    "SimCfg",
    "load_user_settings",
    "save_user_settings",
]
