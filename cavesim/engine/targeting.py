from typing import Optional, Sequence

from .model import Coord, Faction
from .registry import UnitRegistry


def select_target(registry: UnitRegistry, origin: Coord, faction: Faction,
                  health: Optional[Sequence[int]] = None) -> Optional[int]:
    """Pick the adjacent enemy with the lowest health, reading order on ties.

    `health` overrides current unit health by id (used for dry runs).
    """
    best = None
    best_hp = 0
    # Neighbours arrive in reading order, so a strict comparison keeps the
    # earliest one on a tie.
    for n in registry.board.neighbors(origin):
        uid = registry.enemy_at(n, faction)
        if uid is None:
            continue
        hp = int(health[uid]) if health is not None else registry.units[uid].health
        if best is None or hp < best_hp:
            best, best_hp = uid, hp
    return best
