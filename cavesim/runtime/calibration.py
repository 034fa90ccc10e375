"""Attack-strength search: find the weakest strength at which a faction loses nobody."""

import logging
from dataclasses import dataclass
from typing import Optional

from cavesim.engine.engine import Engine
from cavesim.engine.model import (CALIBRATION_START, DEFAULT_ATTACK, DEFAULT_HEALTH,
                                  CalibrationError, Faction, Grid, Outcome)
from .eventlog import EventLog

log = logging.getLogger(__name__)


@dataclass
class Calibration:
    faction: Faction
    attack: int
    attempts: int
    outcome: Outcome

    @property
    def score(self) -> int:
        return self.outcome.score


def simulate(grid: Grid, elf_attack: int = DEFAULT_ATTACK, goblin_attack: int = DEFAULT_ATTACK,
             health: int = DEFAULT_HEALTH, fast_forward: bool = True,
             event_log: Optional[EventLog] = None) -> Outcome:
    """Run one battle with fixed strengths to its decision."""
    eng = Engine(grid, {Faction.ELF: elf_attack, Faction.GOBLIN: goblin_attack},
                 health=health, fast_forward=fast_forward)
    return eng.run(event_log=event_log)


def calibrate(grid: Grid, protected: Faction = Faction.ELF, start: int = CALIBRATION_START,
              opponent_attack: int = DEFAULT_ATTACK, health: int = DEFAULT_HEALTH,
              fast_forward: bool = True) -> Calibration:
    """
    Raise the protected faction's attack one point at a time until it wins
    without a single loss.

    Every attempt is a fresh engine. An attempt is abandoned at the protected
    faction's first death, since its verdict is already known. Any strength
    of `health` or more kills in one hit, so it is the last one worth trying.
    """
    if start <= 0:
        raise ValueError(f"start strength must be positive, got {start}")
    ceiling = max(start, health)
    opponent = protected.enemy
    attempts = 0
    for strength in range(start, ceiling + 1):
        attempts += 1
        eng = Engine(grid, {protected: strength, opponent: opponent_attack},
                     health=health, fast_forward=fast_forward)
        outcome = eng.run(stop=lambda e: e.losses(protected) > 0)
        if outcome.decided and outcome.losses[protected] == 0 and outcome.survivors[opponent] == 0:
            log.info("%s need attack %d: score %d after %d rounds",
                     protected.name, strength, outcome.score, outcome.completed_rounds)
            return Calibration(faction=protected, attack=strength, attempts=attempts, outcome=outcome)
        log.debug("Attack %d: %s lost %d units", strength, protected.name, outcome.losses[protected])
    raise CalibrationError(
        f"{protected.name} take losses even at attack {ceiling}, which kills in one hit")
