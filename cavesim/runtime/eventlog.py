from bisect import bisect_left
from typing import List, Optional

from cavesim.engine.model import Event


class EventLog:
    """Battle events in play order, readable one span of rounds at a time.

    Engine events carry non-decreasing round numbers, so a span of rounds is
    always a contiguous slice of the log.
    """

    def __init__(self):
        self._events: List[Event] = []
        self._rounds: List[int] = []

    def __len__(self):
        return len(self._events)

    def append_many(self, evts: List[Event]) -> int:
        """Record events and return the last round they touch."""
        for e in evts:
            if self._rounds and e.round < self._rounds[-1]:
                raise ValueError(f"event for round {e.round} after round {self._rounds[-1]}")
            self._events.append(e)
            self._rounds.append(e.round)
        return self.last_round

    @property
    def last_round(self) -> int:
        return self._rounds[-1] if self._rounds else 0

    def events(self) -> List[Event]:
        return list(self._events)

    def rounds(self, first: int, count: int = 1) -> List[Event]:
        """Events of rounds first .. first + count - 1."""
        lo = bisect_left(self._rounds, first)
        hi = bisect_left(self._rounds, first + count)
        return self._events[lo:hi]

    def of_kind(self, kind: str, round: Optional[int] = None) -> List[Event]:
        pool = self._events if round is None else self.rounds(round)
        return [e for e in pool if e.kind == kind]
