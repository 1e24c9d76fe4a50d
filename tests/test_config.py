from __future__ import annotations

import json
import math

import numpy as np
import pytest

from cosmos_drift.core.config import (
    AppConfig,
    ConfigError,
    FlightCfg,
    FocusCfg,
    OrbitCfg,
    RenderCfg,
    SimCfg,
    load_user_settings,
    save_user_settings,
)


def test_defaults_are_valid():
    for cls in (FlightCfg, FocusCfg, OrbitCfg, SimCfg, RenderCfg):
        cls().validate()


def test_acceleration_must_be_quicker_than_deceleration():
    with pytest.raises(ConfigError):
        FlightCfg.from_mapping({"acceleration_time": 1.0, "deceleration_time": 0.5})


def test_pitch_bounds_are_checked():
    with pytest.raises(ConfigError):
        FlightCfg.from_mapping({"pitch_max_deg": 120.0})
    cfg = FlightCfg.from_mapping({"pitch_min_deg": -45.0})
    assert cfg.pitch_min == pytest.approx(-math.pi / 4.0)


@pytest.mark.parametrize(
    "cls, key",
    [
        (FlightCfg, "base_speed"),
        (FocusCfg, "transition_duration"),
        (OrbitCfg, "angular_scale"),
        (SimCfg, "max_frame_dt"),
        (RenderCfg, "near_plane"),
    ],
)
def test_non_positive_values_are_rejected(cls, key):
    with pytest.raises(ConfigError):
        cls.from_mapping({key: 0.0})


def test_config_error_is_a_value_error():
    assert issubclass(ConfigError, ValueError)


def test_from_mapping_ignores_unknown_keys():
    cfg = OrbitCfg.from_mapping({"angular_scale": 0.5, "legacy_option": True})
    assert cfg.angular_scale == 0.5
    assert cfg.spin_scale == OrbitCfg().spin_scale


def test_sim_start_position_is_coerced_to_array():
    cfg = SimCfg.from_mapping({"start_position": [1, 2, 3]})
    assert isinstance(cfg.start_position, np.ndarray)
    np.testing.assert_allclose(cfg.start_position, [1.0, 2.0, 3.0])


def test_app_config_reads_sections():
    cfg = AppConfig.from_settings(
        {
            "flight": {"base_speed": 12.0},
            "focus": {"orbit_radius_ratio": 4.0},
            "orbit": {"angular_scale": 0.2},
            "render": "not a section",
            "fullscreen": True,
        }
    )
    assert cfg.flight.base_speed == 12.0
    assert cfg.focus.orbit_radius_ratio == 4.0
    assert cfg.orbit.angular_scale == 0.2
    assert cfg.render.fov_deg == RenderCfg().fov_deg


def test_settings_round_trip(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    save_user_settings({"fullscreen": False, "flight": {"base_speed": 20.0}}, path)
    assert load_user_settings(path) == {"fullscreen": False, "flight": {"base_speed": 20.0}}


def test_unreadable_settings_fall_back_to_empty(tmp_path):
    assert load_user_settings(tmp_path / "missing.json") == {}
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_user_settings(broken) == {}
    listing = tmp_path / "list.json"
    listing.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert load_user_settings(listing) == {}
