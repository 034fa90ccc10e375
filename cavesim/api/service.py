import logging

from cavesim.engine.model import Faction
from cavesim.runtime.calibration import calibrate, simulate
from .schemas import (BattleRequest, CalibrationOut, CalibrationRequest,
                      OutcomeOut)

log = logging.getLogger(__name__)


def run_battle(req: BattleRequest) -> OutcomeOut:
    """Run a fixed-strength battle to its decision."""
    log.info("Battle on %dx%d grid, attack E=%d G=%d",
             len(req.grid), len(req.grid[0]), req.elf_attack, req.goblin_attack)
    out = simulate(req.tiles(), elf_attack=req.elf_attack, goblin_attack=req.goblin_attack,
                   health=req.health, fast_forward=req.fast_forward)
    return OutcomeOut.from_outcome(out)


def run_calibration(req: CalibrationRequest) -> CalibrationOut:
    """Find the weakest attack that keeps the protected faction loss-free."""
    protected = Faction(req.protected)
    log.info("Calibrating %s from attack %d against %d",
             protected.name, req.start_attack, req.opponent_attack)
    result = calibrate(req.tiles(), protected=protected, start=req.start_attack,
                       opponent_attack=req.opponent_attack, health=req.health,
                       fast_forward=req.fast_forward)
    return CalibrationOut(
        protected=req.protected,
        attack=result.attack,
        attempts=result.attempts,
        outcome=OutcomeOut.from_outcome(result.outcome),
    )
