from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

DEFAULT_HEALTH = 200
DEFAULT_ATTACK = 3
CALIBRATION_START = 4


class Coord(NamedTuple):
    """Grid coordinate. Tuple ordering is reading order: row, then column."""
    row: int
    col: int

    def __str__(self):
        return f"({self.row},{self.col})"


class Faction(Enum):
    """The two opposing unit kinds"""
    ELF = "E"
    GOBLIN = "G"

    @property
    def enemy(self) -> "Faction":
        return Faction.GOBLIN if self is Faction.ELF else Faction.ELF


class Tile(Enum):
    """One cell of an input grid"""
    WALL = "#"
    OPEN = "."
    ELF = "E"
    GOBLIN = "G"

    @property
    def faction(self) -> Optional[Faction]:
        if self is Tile.ELF:
            return Faction.ELF
        if self is Tile.GOBLIN:
            return Faction.GOBLIN
        return None


Grid = List[List[Tile]]


class SimulationError(RuntimeError):
    """Base class for failures inside a simulation run."""


class InvariantViolation(SimulationError):
    """Board and registry disagree, or a dead unit was asked to act."""


class StalledSimulation(SimulationError):
    """The battle can no longer reach a decision."""


class CalibrationError(SimulationError):
    """No attack strength keeps the protected faction loss-free."""


@dataclass
class Unit:
    id: int
    kind: Faction
    pos: Coord
    health: int
    attack: int

    @property
    def alive(self) -> bool:
        return self.health > 0


@dataclass
class Event:
    kind: str
    round: int
    data: Dict


@dataclass
class State:
    completed_rounds: int = 0
    units: List[Unit] = field(default_factory=list)
    live: Dict[Faction, int] = field(default_factory=lambda: {f: 0 for f in Faction})
    initial: Dict[Faction, int] = field(default_factory=lambda: {f: 0 for f in Faction})


@dataclass
class Outcome:
    """Result of a run. `winner` is None while the battle is undecided."""
    winner: Optional[Faction]
    completed_rounds: int
    remaining_health: int
    survivors: Dict[Faction, int]
    losses: Dict[Faction, int]
    decided: bool = True

    @property
    def score(self) -> int:
        return self.remaining_health * self.completed_rounds
