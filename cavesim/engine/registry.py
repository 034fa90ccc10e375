from typing import Dict, List, Mapping, Optional

from .board import Board, validate_grid
from .model import Coord, Faction, Grid, InvariantViolation, State, Unit


class UnitRegistry:
    """Unit arena plus position index, kept in lockstep with the board.

    Units are addressed by their index in `state.units` for their whole
    lifetime. Only `move` and `retire` touch positions, and both update the
    board and the index together.
    """

    def __init__(self, board: Board, state: State):
        self.board = board
        self.state = state
        self._by_pos: Dict[Coord, int] = {}

    @classmethod
    def from_grid(cls, grid: Grid, attack: Mapping[Faction, int], health: int) -> "UnitRegistry":
        validate_grid(grid)
        reg = cls(Board.from_grid(grid), State())
        for r, row in enumerate(grid):
            for c, tile in enumerate(row):
                if tile.faction is not None:
                    reg._add(tile.faction, Coord(r, c), health, attack[tile.faction])
        reg.state.initial = dict(reg.state.live)
        return reg

    def _add(self, kind: Faction, pos: Coord, health: int, attack: int) -> Unit:
        unit = Unit(id=len(self.state.units), kind=kind, pos=pos, health=health, attack=attack)
        self.state.units.append(unit)
        self._by_pos[pos] = unit.id
        self.board.place(pos, unit.id)
        self.state.live[kind] += 1
        return unit

    @property
    def units(self) -> List[Unit]:
        return self.state.units

    def at(self, coord: Coord) -> Optional[int]:
        return self._by_pos.get(coord)

    def enemy_at(self, coord: Coord, faction: Faction) -> Optional[int]:
        """Id of the unit at coord if it fights for the other side."""
        uid = self.board.occupant(coord)
        if uid is None or self.state.units[uid].kind is faction:
            return None
        return uid

    def alive_in_reading_order(self) -> List[int]:
        return [self._by_pos[pos] for pos in sorted(self._by_pos)]

    def remaining_health(self) -> int:
        return sum(u.health for u in self.state.units if u.alive)

    def move(self, uid: int, dst: Coord) -> None:
        unit = self.state.units[uid]
        if not unit.alive:
            raise InvariantViolation(f"dead unit {uid} cannot move")
        if self._by_pos.get(unit.pos) != uid or self.board.occupant(unit.pos) != uid:
            raise InvariantViolation(f"unit {uid} is not where the board says it is ({unit.pos})")
        if not self.board.is_empty(dst):
            raise InvariantViolation(f"unit {uid} cannot move into occupied cell {dst}")
        del self._by_pos[unit.pos]
        self.board.clear(unit.pos)
        self._by_pos[dst] = uid
        self.board.place(dst, uid)
        unit.pos = dst

    def retire(self, uid: int) -> None:
        """Remove a unit whose health reached 0 from the board and the index."""
        unit = self.state.units[uid]
        if unit.alive:
            raise InvariantViolation(f"unit {uid} retired with {unit.health} health left")
        if self._by_pos.get(unit.pos) != uid or self.board.occupant(unit.pos) != uid:
            raise InvariantViolation(f"unit {uid} already gone from {unit.pos}")
        del self._by_pos[unit.pos]
        self.board.clear(unit.pos)
        self.state.live[unit.kind] -= 1
