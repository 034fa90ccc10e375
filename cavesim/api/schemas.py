from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from cavesim.engine.board import validate_grid
from cavesim.engine.model import (CALIBRATION_START, DEFAULT_ATTACK, DEFAULT_HEALTH,
                                  Grid, Outcome, Tile)


def _tiles(rows: List[str]) -> Grid:
    try:
        return [[Tile(ch) for ch in row] for row in rows]
    except ValueError as exc:
        raise ValueError(f"unknown cell symbol: {exc}") from exc


class GridRequest(BaseModel):
    """Grid rows made of '#', '.', 'E' and 'G'."""
    grid: List[str]
    health: int = Field(default=DEFAULT_HEALTH, gt=0)
    fast_forward: bool = True

    @field_validator('grid')
    def check_grid(cls, v):
        validate_grid(_tiles(v))
        return v

    def tiles(self) -> Grid:
        return _tiles(self.grid)


class BattleRequest(GridRequest):
    """Fixed-strength battle request schema."""
    elf_attack: int = Field(default=DEFAULT_ATTACK, gt=0)
    goblin_attack: int = Field(default=DEFAULT_ATTACK, gt=0)


class CalibrationRequest(GridRequest):
    """Strength search request schema."""
    protected: Literal["E", "G"] = "E"
    start_attack: int = Field(default=CALIBRATION_START, gt=0)
    opponent_attack: int = Field(default=DEFAULT_ATTACK, gt=0)


class OutcomeOut(BaseModel):
    winner: Optional[Literal["E", "G"]]
    completed_rounds: int
    remaining_health: int
    score: int
    survivors: Dict[str, int]
    losses: Dict[str, int]

    @classmethod
    def from_outcome(cls, out: Outcome) -> "OutcomeOut":
        return cls(
            winner=out.winner.value if out.winner else None,
            completed_rounds=out.completed_rounds,
            remaining_health=out.remaining_health,
            score=out.score,
            survivors={f.value: n for f, n in out.survivors.items()},
            losses={f.value: n for f, n in out.losses.items()},
        )


class CalibrationOut(BaseModel):
    protected: Literal["E", "G"]
    attack: int
    attempts: int
    outcome: OutcomeOut
