"""Treasure Hunt: a deterministic, turn-based grid exploration simulator.

The three core operations are :func:`parse_map`, :func:`run_to_completion`
and :func:`serialize_map`; the world they thread through is a plain
:class:`World`.
"""

from .codec import parse_map, read_map, serialize_map, write_map
from .engine import SimulationEngine, SimulationReport, run_to_completion
from .errors import MapInitializationError, SettingsError, TreasureHuntError
from .geometry import Dimension, Position
from .models import Adventurer, Instruction, Mountain, Orientation, TreasureMap, World

__all__ = [
    "parse_map",
    "read_map",
    "serialize_map",
    "write_map",
    "SimulationEngine",
    "SimulationReport",
    "run_to_completion",
    "MapInitializationError",
    "SettingsError",
    "TreasureHuntError",
    "Dimension",
    "Position",
    "Adventurer",
    "Instruction",
    "Mountain",
    "Orientation",
    "TreasureMap",
    "World",
]

__version__ = "0.1.0"
