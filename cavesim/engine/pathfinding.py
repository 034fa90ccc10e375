"""Breadth-first movement toward the nearest reachable enemy."""

from typing import Dict, Optional

from .model import Coord, Faction
from .registry import UnitRegistry


def _touches_enemy(registry: UnitRegistry, cell: Coord, faction: Faction) -> bool:
    return any(registry.enemy_at(n, faction) is not None for n in registry.board.neighbors(cell))


def find_step(registry: UnitRegistry, origin: Coord, faction: Faction) -> Optional[Coord]:
    """
    Return the cell a unit at origin should step into this turn, or None.

    None means an enemy is already adjacent or no enemy can be reached through
    empty cells. Otherwise the destination is the nearest empty cell next to
    an enemy, lowest in reading order on a distance tie, and the step is the
    lowest first move among all shortest paths to it.
    """
    board = registry.board
    frontier: Dict[Coord, Coord] = {}  # cell -> best first move reaching it
    for n in board.neighbors(origin):
        if registry.enemy_at(n, faction) is not None:
            return None
        if board.is_empty(n):
            frontier[n] = n

    seen = set(frontier)
    seen.add(origin)
    while frontier:
        reached = [cell for cell in frontier if _touches_enemy(registry, cell, faction)]
        if reached:
            return frontier[min(reached)]

        layer: Dict[Coord, Coord] = {}
        for cell, first in frontier.items():
            for n in board.neighbors(cell):
                if n in seen or not board.is_empty(n):
                    continue
                if n not in layer or first < layer[n]:
                    layer[n] = first
        seen.update(layer)
        frontier = layer
    return None
