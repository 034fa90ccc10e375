import logging
from typing import Callable, List, Mapping, Optional, Tuple

import numpy as np

from .combat import resolve_attack
from .model import (DEFAULT_ATTACK, DEFAULT_HEALTH, Event, Faction, Grid,
                    Outcome, StalledSimulation, State)
from .pathfinding import find_step
from .registry import UnitRegistry
from .targeting import select_target

log = logging.getLogger(__name__)


class Engine:
    """Pure, deterministic simulation engine."""

    def __init__(self, grid: Grid, attack: Optional[Mapping[Faction, int]] = None,
                 health: int = DEFAULT_HEALTH, fast_forward: bool = True,
                 round_limit: Optional[int] = None):
        strengths = {f: DEFAULT_ATTACK for f in Faction}
        if attack:
            strengths.update(attack)
        for faction, value in strengths.items():
            if value <= 0:
                raise ValueError(f"attack strength for {faction.name} must be positive, got {value}")
        if health <= 0:
            raise ValueError(f"health must be positive, got {health}")

        self.registry = UnitRegistry.from_grid(grid, strengths, health)
        self.state: State = self.registry.state
        self.fast_forward = fast_forward
        board = self.registry.board
        self.round_limit = round_limit if round_limit is not None else board.rows * board.cols * health
        self.decided = False

    def losses(self, faction: Faction) -> int:
        return self.state.initial[faction] - self.state.live[faction]

    def _eliminated(self) -> bool:
        return any(n == 0 for n in self.state.live.values())

    def _take_turn(self, uid: int) -> Tuple[List[Event], bool, bool]:
        """Move then attack for one unit. Returns (events, moved, killed)."""
        evts: List[Event] = []
        unit = self.registry.units[uid]
        moved = killed = False
        rnd = self.state.completed_rounds

        step = find_step(self.registry, unit.pos, unit.kind)
        if step is not None:
            src = unit.pos
            self.registry.move(uid, step)
            moved = True
            evts.append(Event("UnitMoved", rnd,
                              {"unit_id": uid, "from": list(src), "to": list(step)}))

        target = select_target(self.registry, unit.pos, unit.kind)
        if target is not None:
            evts += self._attack(uid, target)
            killed = not self.registry.units[target].alive
        return evts, moved, killed

    def _attack(self, attacker_id: int, defender_id: int) -> List[Event]:
        evts: List[Event] = []
        rnd = self.state.completed_rounds
        died = resolve_attack(self.registry, attacker_id, defender_id)
        defender = self.registry.units[defender_id]
        evts.append(Event("Attack", rnd,
                          {"attacker": attacker_id, "defender": defender_id,
                           "damage": self.registry.units[attacker_id].attack, "hp": defender.health}))
        if died:
            evts.append(Event("Destroyed", rnd,
                              {"unit_id": defender_id, "kind": defender.kind.value, "killer": attacker_id}))
        return evts

    def _complete_round(self) -> List[Event]:
        self.state.completed_rounds += 1
        if self.state.completed_rounds > self.round_limit:
            raise StalledSimulation(f"no decision after {self.round_limit} rounds")
        return [Event("RoundCompleted", self.state.completed_rounds,
                      {"live": {f.value: n for f, n in self.state.live.items()}})]

    def _decide(self) -> List[Event]:
        self.decided = True
        out = self.outcome()
        log.debug("Battle decided after %d rounds: winner=%s score=%d",
                  out.completed_rounds, out.winner, out.score)
        return [Event("Decided", self.state.completed_rounds,
                      {"winner": out.winner.value if out.winner else None, "score": out.score})]

    def _attack_pairs(self) -> List[Tuple[int, int]]:
        """Attacker -> defender pairs for a board where nobody will move."""
        pairs: List[Tuple[int, int]] = []
        for uid in self.registry.alive_in_reading_order():
            unit = self.registry.units[uid]
            target = select_target(self.registry, unit.pos, unit.kind)
            if target is not None:
                pairs.append((uid, target))
        return pairs

    def _fast_forward(self) -> List[Event]:
        """Replay a stable round's attacks until the next one would kill.

        Nothing moves and nothing dies, so the board is frozen and only health
        changes. Each round is dry-run on scratch health first. If the dry run
        kills a unit, or a pair's target would no longer be the selector's
        choice, the round is left for the next `step()` to play normally.
        """
        evts: List[Event] = []
        pairs = self._attack_pairs()
        units = self.registry.units
        start = self.state.completed_rounds
        while True:
            scratch = np.array([u.health for u in units], dtype=np.int64)
            for attacker_id, defender_id in pairs:
                attacker = units[attacker_id]
                # A target switch must play out exactly as a normal round would.
                if select_target(self.registry, attacker.pos, attacker.kind, scratch) != defender_id:
                    break
                scratch[defender_id] -= attacker.attack
                if scratch[defender_id] <= 0:
                    break
            else:
                for attacker_id, defender_id in pairs:
                    evts += self._attack(attacker_id, defender_id)
                evts += self._complete_round()
                continue
            break
        if self.state.completed_rounds > start:
            log.debug("Fast-forwarded rounds %d..%d over %d attack pairs",
                      start + 1, self.state.completed_rounds, len(pairs))
        return evts

    def step(self) -> List[Event]:
        """Play one round, then fast-forward through any stalemate it reveals."""
        if self.decided:
            return []
        evts: List[Event] = []
        moved = killed = attacked = False
        for uid in self.registry.alive_in_reading_order():
            # Elimination is checked before the dead-unit skip, so a round
            # whose remaining queue holds only fallen units does not count.
            if self._eliminated():
                return evts + self._decide()
            if not self.registry.units[uid].alive:
                continue
            turn, unit_moved, unit_killed = self._take_turn(uid)
            evts += turn
            moved = moved or unit_moved
            killed = killed or unit_killed
            attacked = attacked or any(e.kind == "Attack" for e in turn)
        evts += self._complete_round()

        if not moved and not killed:
            if not attacked:
                raise StalledSimulation(
                    f"round {self.state.completed_rounds} had no moves and no attacks; "
                    "the factions cannot reach each other")
            if self.fast_forward:
                evts += self._fast_forward()
        return evts

    def run(self, event_log=None, stop: Optional[Callable[["Engine"], bool]] = None) -> Outcome:
        """Step until decided, or until `stop(engine)` is true after a round."""
        while not self.decided:
            evts = self.step()
            if event_log is not None:
                event_log.append_many(evts)
            if stop is not None and stop(self):
                break
        return self.outcome()

    def outcome(self) -> Outcome:
        live = self.state.live
        winner = None
        if self._eliminated():
            standing = [f for f, n in live.items() if n > 0]
            winner = standing[0] if standing else None
        return Outcome(
            winner=winner,
            completed_rounds=self.state.completed_rounds,
            remaining_health=self.registry.remaining_health(),
            survivors=dict(live),
            losses={f: self.losses(f) for f in Faction},
            decided=self.decided,
        )
