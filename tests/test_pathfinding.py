"""Test movement choice and target selection."""
from cavesim.engine.model import Coord, Faction
from cavesim.engine.pathfinding import find_step
from cavesim.engine.registry import UnitRegistry
from cavesim.engine.targeting import select_target
from boards import make_grid


def make_registry(text: str) -> UnitRegistry:
    return UnitRegistry.from_grid(make_grid(text), {Faction.ELF: 3, Faction.GOBLIN: 3}, 200)


def test_adjacent_unit_does_not_move():
    """A goblin is next door, so the elf stays put instead of chasing the other one."""
    reg = make_registry("#######\n#EG...#\n#.....#\n#....G#\n#######")
    assert find_step(reg, Coord(1, 1), Faction.ELF) is None


def test_unreachable_enemy_gives_no_move():
    reg = make_registry("#######\n#E.#.G#\n#######")
    assert find_step(reg, Coord(1, 1), Faction.ELF) is None


def test_nearest_destination_lowest_in_reading_order():
    reg = make_registry("#######\n#E..G.#\n#...#.#\n#.G.#G#\n#######")
    # (1,3), (2,2) and (3,1) are all two steps away; (1,3) reads first.
    assert find_step(reg, Coord(1, 1), Faction.ELF) == Coord(1, 2)


def test_first_step_tie_prefers_reading_order():
    reg = make_registry("#######\n#.E...#\n#.....#\n#...G.#\n#######")
    # (1,3) and (2,2) both start a shortest path to (2,4).
    assert find_step(reg, Coord(1, 2), Faction.ELF) == Coord(1, 3)


def test_first_step_tie_uses_all_shortest_paths():
    """Both corridors reach (6,5) in 11 steps. The path entering from above starts
    down at (2,3), the one entering from the left starts left at (1,2), and the
    left start wins on reading order."""
    text = "\n".join([
        "#########",
        "#..E#####",
        "#.#.....#",
        "#.#####.#",
        "#.###...#",
        "#.###.###",
        "#.....###",
        "#####G###",
        "#########",
    ])
    reg = make_registry(text)
    assert find_step(reg, Coord(1, 3), Faction.ELF) == Coord(1, 2)


def test_allies_block_but_are_not_targets():
    reg = make_registry("#######\n#EE..G#\n#######")
    assert find_step(reg, Coord(1, 1), Faction.ELF) is None
    assert find_step(reg, Coord(1, 2), Faction.ELF) == Coord(1, 3)


def make_surrounded():
    return make_registry("#####\n##G##\n#GEG#\n##G##\n#####")


def test_target_equal_health_uses_reading_order():
    reg = make_surrounded()
    assert select_target(reg, Coord(2, 2), Faction.ELF) == 0


def test_target_lowest_health_beats_reading_order():
    reg = make_surrounded()
    reg.units[4].health = 5
    reg.units[1].health = 10
    assert select_target(reg, Coord(2, 2), Faction.ELF) == 4


def test_target_health_tie_falls_back_to_reading_order():
    reg = make_surrounded()
    reg.units[4].health = 5
    reg.units[3].health = 5
    assert select_target(reg, Coord(2, 2), Faction.ELF) == 3


def test_target_with_scratch_health():
    reg = make_surrounded()
    scratch = [u.health for u in reg.units]
    scratch[3] = 1
    assert select_target(reg, Coord(2, 2), Faction.ELF, scratch) == 3
    assert select_target(reg, Coord(2, 2), Faction.ELF) == 0


def test_no_adjacent_enemy_no_target():
    reg = make_registry("######\n#E..G#\n######")
    assert select_target(reg, Coord(1, 1), Faction.ELF) is None
    assert select_target(reg, Coord(1, 4), Faction.GOBLIN) is None
