"""Unit conversions for the scaled solar system model."""
from __future__ import annotations

AU_TO_SIMULATION = 50.0
KM_TO_SIMULATION = 0.00001
KM_PER_AU = 149_597_870.7

# Planets are scaled up for visibility and orbits pulled in for exploration.
PLANET_RADIUS_SCALE = 2.5
ORBIT_RADIUS_SCALE = 0.85


def au_to_simulation(au: float) -> float:
    return au * AU_TO_SIMULATION * ORBIT_RADIUS_SCALE


def km_to_simulation(km: float) -> float:
    return km * KM_TO_SIMULATION * PLANET_RADIUS_SCALE


def format_distance(simulation_units: float) -> str:
    """Human readable distance: kilometres up close, AU far away."""

    au = simulation_units / (AU_TO_SIMULATION * ORBIT_RADIUS_SCALE)
    if au < 0.01:
        km = simulation_units / (KM_TO_SIMULATION * PLANET_RADIUS_SCALE)
        return f"{km:.0f} km"
    if au < 1.0:
        return f"{au * KM_PER_AU:.0f} km"
    return f"{au:.2f} AU"


def format_speed(simulation_units_per_second: float) -> str:
    km_per_second = simulation_units_per_second / KM_TO_SIMULATION
    if km_per_second < 1.0:
        return f"{km_per_second * 1000:.0f} m/s"
    return f"{km_per_second:.1f} km/s"


__all__ = [
    "AU_TO_SIMULATION",
    "KM_TO_SIMULATION",
    "ORBIT_RADIUS_SCALE",
    "PLANET_RADIUS_SCALE",
    "au_to_simulation",
    "format_distance",
    "format_speed",
    "km_to_simulation",
]
