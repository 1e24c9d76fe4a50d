"""Camera controllers and the mode arbiter."""

from .arbiter import FrameReport, MODE_FOCUS, MODE_FREE_FLIGHT, ModeArbiter
from .flight import FreeFlightController, NullPointerCapture, PointerCapture, local_direction
from .focus import FocusController, FocusState, orbit_offset
from .input import InputCollector

__all__ = [
    "FocusController",
    "FocusState",
    "FrameReport",
    "FreeFlightController",
    "InputCollector",
    "MODE_FOCUS",
    "MODE_FREE_FLIGHT",
    "ModeArbiter",
    "NullPointerCapture",
    "PointerCapture",
    "local_direction",
    "orbit_offset",
]
