from .model import InvariantViolation
from .registry import UnitRegistry


def resolve_attack(registry: UnitRegistry, attacker_id: int, defender_id: int) -> bool:
    """Apply one hit. Returns True when the defender dies from it."""
    attacker = registry.units[attacker_id]
    defender = registry.units[defender_id]
    if not attacker.alive or not defender.alive:
        raise InvariantViolation(f"attack {attacker_id}->{defender_id} involves a dead unit")
    if attacker.kind is defender.kind:
        raise InvariantViolation(f"unit {attacker_id} attacked its own side ({defender_id})")

    defender.health = max(0, defender.health - attacker.attack)
    if defender.health == 0:
        registry.retire(defender_id)
        return True
    return False
