"""Scaled solar system catalog used as the flyable scene.

Radii and orbit radii are in simulation units (see :mod:`cosmos_drift.core.units`);
orbit periods are in Earth years and rotation periods in Earth days. Moon
orbits are pulled in further so they stay visible next to their planets.
"""
from __future__ import annotations

from dataclasses import dataclass

from cosmos_drift.core.model import CelestialBody
from cosmos_drift.core.units import au_to_simulation, km_to_simulation


@dataclass(frozen=True)
class BodySpec:
    name: str
    real_radius_km: float
    orbit_radius: float
    orbit_period: float
    rotation_period: float
    tilt: float
    color: tuple[int, int, int]
    description: str
    moons: tuple["BodySpec", ...] = ()

    def build(self) -> CelestialBody:
        body = CelestialBody(
            name=self.name,
            radius=km_to_simulation(self.real_radius_km),
            orbit_radius=self.orbit_radius,
            orbit_period=self.orbit_period,
            rotation_period=self.rotation_period,
            tilt=self.tilt,
            real_radius_km=self.real_radius_km,
            color=self.color,
            description=self.description,
        )
        for moon in self.moons:
            body.add_satellite(moon.build())
        return body


SUN = BodySpec(
    name="Sun",
    real_radius_km=696_000.0,
    orbit_radius=0.0,
    orbit_period=0.0,
    rotation_period=25.4,
    tilt=7.25,
    color=(255, 204, 102),
    description="The star at the centre of the solar system, holding 99.8% of its mass.",
)

PLANET_DEFINITIONS: tuple[BodySpec, ...] = (
    BodySpec(
        name="Mercury",
        real_radius_km=2439.7,
        orbit_radius=au_to_simulation(0.39),
        orbit_period=0.24,
        rotation_period=58.6,
        tilt=0.03,
        color=(140, 134, 128),
        description="The smallest planet and closest to the Sun, with no atmosphere to hold heat.",
    ),
    BodySpec(
        name="Venus",
        real_radius_km=6051.8,
        orbit_radius=au_to_simulation(0.72),
        orbit_period=0.62,
        rotation_period=-243.0,
        tilt=177.4,
        color=(232, 155, 60),
        description="The hottest planet; a thick CO2 atmosphere traps heat at 465 C.",
    ),
    BodySpec(
        name="Earth",
        real_radius_km=6371.0,
        orbit_radius=au_to_simulation(1.0),
        orbit_period=1.0,
        rotation_period=1.0,
        tilt=23.5,
        color=(70, 130, 220),
        description="Our home planet and the only known world with liquid surface water.",
        moons=(
            BodySpec(
                name="Moon",
                real_radius_km=1737.4,
                orbit_radius=km_to_simulation(384_400.0) * 0.3,
                orbit_period=27.3 / 365.25,
                rotation_period=27.3,
                tilt=6.7,
                color=(190, 190, 190),
                description="Earth's only natural satellite; it stabilizes Earth's axial tilt.",
            ),
        ),
    ),
    BodySpec(
        name="Mars",
        real_radius_km=3389.5,
        orbit_radius=au_to_simulation(1.52),
        orbit_period=1.88,
        rotation_period=1.03,
        tilt=25.2,
        color=(193, 68, 14),
        description="The Red Planet, home of Olympus Mons and traces of ancient rivers.",
        moons=(
            BodySpec(
                name="Phobos",
                real_radius_km=11.2,
                orbit_radius=km_to_simulation(9376.0) * 0.5,
                orbit_period=0.32 / 365.25,
                rotation_period=0.32,
                tilt=0.0,
                color=(107, 93, 82),
                description="The larger, closer moon of Mars, slowly spiralling inward.",
            ),
            BodySpec(
                name="Deimos",
                real_radius_km=6.2,
                orbit_radius=km_to_simulation(23_460.0) * 0.5,
                orbit_period=1.26 / 365.25,
                rotation_period=1.26,
                tilt=0.0,
                color=(139, 122, 106),
                description="The smaller, more distant moon of Mars.",
            ),
        ),
    ),
    BodySpec(
        name="Jupiter",
        real_radius_km=69_911.0,
        orbit_radius=au_to_simulation(5.2),
        orbit_period=11.86,
        rotation_period=0.41,
        tilt=3.1,
        color=(200, 139, 90),
        description="The largest planet; its Great Red Spot is a centuries-old storm.",
        moons=(
            BodySpec(
                name="Io",
                real_radius_km=1821.6,
                orbit_radius=km_to_simulation(421_700.0) * 0.15,
                orbit_period=1.77 / 365.25,
                rotation_period=1.77,
                tilt=0.0,
                color=(255, 204, 51),
                description="The most volcanically active body in the solar system.",
            ),
        ),
    ),
    BodySpec(
        name="Saturn",
        real_radius_km=58_232.0,
        orbit_radius=au_to_simulation(9.54),
        orbit_period=29.46,
        rotation_period=0.45,
        tilt=26.7,
        color=(250, 213, 165),
        description="Known for its ring system of ice and rock; less dense than water.",
        moons=(
            BodySpec(
                name="Titan",
                real_radius_km=2574.7,
                orbit_radius=km_to_simulation(1_221_870.0) * 0.12,
                orbit_period=15.95 / 365.25,
                rotation_period=15.95,
                tilt=0.0,
                color=(255, 165, 0),
                description="Saturn's largest moon, with a thick atmosphere and methane lakes.",
            ),
        ),
    ),
    BodySpec(
        name="Uranus",
        real_radius_km=25_362.0,
        orbit_radius=au_to_simulation(19.19),
        orbit_period=84.01,
        rotation_period=-0.72,
        tilt=97.8,
        color=(79, 208, 224),
        description="The coldest planet, rotating on its side after an ancient collision.",
    ),
    BodySpec(
        name="Neptune",
        real_radius_km=24_622.0,
        orbit_radius=au_to_simulation(30.07),
        orbit_period=164.8,
        rotation_period=0.67,
        tilt=28.3,
        color=(65, 102, 245),
        description="The windiest planet, with supersonic storms.",
    ),
    BodySpec(
        name="Pluto",
        real_radius_km=1188.0,
        orbit_radius=au_to_simulation(39.48),
        orbit_period=248.0,
        rotation_period=-6.39,
        tilt=122.5,
        color=(201, 165, 128),
        description="A dwarf planet with a heart-shaped nitrogen glacier and five moons.",
    ),
)

PLANET_DISPLAY_ORDER: list[str] = [spec.name for spec in PLANET_DEFINITIONS]


def build_solar_system(include_sun: bool = True) -> list[CelestialBody]:
    """Fresh top-level bodies (and their moons) ready for registration."""

    roots = [SUN.build()] if include_sun else []
    roots.extend(spec.build() for spec in PLANET_DEFINITIONS)
    return roots


__all__ = [
    "BodySpec",
    "PLANET_DEFINITIONS",
    "PLANET_DISPLAY_ORDER",
    "SUN",
    "build_solar_system",
]
