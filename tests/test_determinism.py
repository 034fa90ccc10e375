"""Test that the engine produces deterministic results."""
import pytest

from cavesim.engine.engine import Engine
from cavesim.engine.model import Faction
from cavesim.runtime.eventlog import EventLog
from boards import EXAMPLES, make_grid


def run_logged(text: str, elf_attack: int = 3):
    log = EventLog()
    eng = Engine(make_grid(text), {Faction.ELF: elf_attack})
    out = eng.run(event_log=log)
    return out, log.events()


def test_engine_determinism():
    """Same grid and strengths should produce identical results."""
    out1, events1 = run_logged(EXAMPLES[5])
    out2, events2 = run_logged(EXAMPLES[5])

    assert out1 == out2
    assert len(events1) == len(events2)
    for e1, e2 in zip(events1, events2):
        assert e1.kind == e2.kind
        assert e1.round == e2.round
        assert e1.data == e2.data


def test_repeated_runs_share_one_score():
    scores = {Engine(make_grid(EXAMPLES[1])).run().score for _ in range(5)}
    assert scores == {36334}


def test_different_strengths_produce_different_results():
    """Raising one side's attack should change the battle."""
    out1, events1 = run_logged(EXAMPLES[0], elf_attack=3)
    out2, events2 = run_logged(EXAMPLES[0], elf_attack=15)

    assert out1.winner is Faction.GOBLIN
    assert out2.winner is Faction.ELF
    assert events1 != events2


def test_event_log_pages_by_round():
    _, events = run_logged(EXAMPLES[0])
    log = EventLog()
    assert log.append_many(events) == 47
    assert len(log) == len(events)

    assert log.rounds(10, count=5) == [e for e in events if 10 <= e.round < 15]
    first = log.rounds(0)
    assert first and all(e.round == 0 for e in first)
    assert log.rounds(100) == []
    assert log.of_kind("Decided", round=47)[0].data["winner"] == "G"


def test_event_log_rejects_rounds_out_of_order():
    _, events = run_logged(EXAMPLES[0])
    log = EventLog()
    log.append_many(events[-1:])
    with pytest.raises(ValueError):
        log.append_many(events[:1])
