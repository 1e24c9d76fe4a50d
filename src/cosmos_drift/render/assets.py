from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]

HUD_FONT_NAMES = ("consolas", "dejavusansmono", "menlo", "couriernew")
TITLE_FONT_NAMES = ("segoeui", "helvetica", "arial", "dejavusans")


def load_font(preferred_names: Iterable[str], size: int, *, bold: bool = False) -> pygame.font.Font:
    names = list(preferred_names)
    for name in names:
        try:
            match = pygame.font.match_font(name, bold=bold)
        except (OSError, ValueError):
            match = None
        if match:
            return pygame.font.Font(match, size)
    return pygame.font.SysFont(names[0] if names else None, size, bold=bold)


class FontBook:
    """Lazily loaded fonts for the HUD, labels and overlays."""

    def __init__(self, scale: float = 1.0) -> None:
        self._scale = scale
        self._fonts: dict[str, pygame.font.Font] = {}

    def _get(self, key: str, names: Iterable[str], size: int, bold: bool = False) -> pygame.font.Font:
        font = self._fonts.get(key)
        if font is None:
            font = load_font(names, max(8, int(size * self._scale)), bold=bold)
            self._fonts[key] = font
        return font

    @property
    def hud(self) -> pygame.font.Font:
        return self._get("hud", HUD_FONT_NAMES, 16)

    @property
    def label(self) -> pygame.font.Font:
        return self._get("label", HUD_FONT_NAMES, 13)

    @property
    def title(self) -> pygame.font.Font:
        return self._get("title", TITLE_FONT_NAMES, 22, bold=True)


_TEXT_SURFACE_CACHE_MAX_SIZE = 256
_TEXT_SURFACE_CACHE: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Return a cached rendered surface; callers must not mutate it."""

    key = (id(font), text, color)
    cached = _TEXT_SURFACE_CACHE.get(key)
    if cached is not None:
        _TEXT_SURFACE_CACHE.move_to_end(key)
        return cached
    rendered = font.render(text, True, color)
    _TEXT_SURFACE_CACHE[key] = rendered
    if len(_TEXT_SURFACE_CACHE) > _TEXT_SURFACE_CACHE_MAX_SIZE:
        _TEXT_SURFACE_CACHE.popitem(last=False)
    return rendered
