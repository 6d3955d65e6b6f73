import itertools

from battle_calc.battle_state import BattleState
from battle_calc.outcome import (
    Preference,
    attackers_are_better,
    defender_is_better,
    state_is_better,
    unit_is_better,
)
from battle_calc.units import Unit


def unit(health=10.0, frozen=False, converted=False) -> Unit:
    return Unit(
        unit_id="warrior",
        display_name="Warrior",
        max_health=10,
        health=health,
        attack=2,
        defence=2,
        defence_with_bonus=2,
        can_retaliate=True,
        frozen=frozen,
        converted=converted,
    )


def state(defender: Unit, attacker_health=(10.0,)) -> BattleState:
    return BattleState(attackers=[unit(health=h) for h in attacker_health], defender=defender)


def test_unit_health_decides_first():
    assert unit_is_better(unit(health=6, frozen=True), unit(health=5)) is Preference.BETTER
    assert unit_is_better(unit(health=5), unit(health=6, frozen=True)) is Preference.WORSE


def test_unit_frozen_breaks_health_ties():
    assert unit_is_better(unit(), unit(frozen=True)) is Preference.BETTER
    assert unit_is_better(unit(frozen=True), unit()) is Preference.WORSE
    assert unit_is_better(unit(frozen=True), unit(frozen=True)) is Preference.INDETERMINATE


def test_unit_comparison_is_antisymmetric():
    units = [unit(health=h, frozen=f) for h, f in itertools.product((-2, 0, 5), (False, True))]
    for a, b in itertools.product(units, units):
        forward = unit_is_better(a, b)
        backward = unit_is_better(b, a)
        assert backward is forward.negate()
        indeterminate = a.health == b.health and a.frozen == b.frozen
        assert (forward is Preference.INDETERMINATE) == indeterminate


def test_conversion_dominates_health():
    converted = state(unit(health=1, converted=True))
    fresh = state(unit(health=-5))
    assert defender_is_better(converted, fresh) is Preference.BETTER
    assert defender_is_better(fresh, converted) is Preference.WORSE


def test_both_converted_prefers_healthier_defender():
    high = state(unit(health=8, converted=True))
    low = state(unit(health=3, converted=True))
    assert defender_is_better(high, low) is Preference.BETTER
    assert defender_is_better(low, high) is Preference.WORSE


def test_neither_converted_prefers_weaker_defender():
    high = state(unit(health=8))
    low = state(unit(health=3))
    assert defender_is_better(low, high) is Preference.BETTER
    assert defender_is_better(high, low) is Preference.WORSE
    frozen = state(unit(health=3, frozen=True))
    assert defender_is_better(frozen, low) is Preference.BETTER


def test_identical_defenders_are_indeterminate():
    assert defender_is_better(state(unit()), state(unit())) is Preference.INDETERMINATE


def test_fewer_dead_attackers_wins():
    one_dead = state(unit(), attacker_health=(-1, 4))
    none_dead = state(unit(), attacker_health=(0, 4))
    assert attackers_are_better(none_dead, one_dead) is True
    assert attackers_are_better(one_dead, none_dead) is False


def test_attacker_tie_favours_second_state():
    a = state(unit(), attacker_health=(9, 9))
    b = state(unit(), attacker_health=(1, 1))
    assert attackers_are_better(a, b) is False
    assert attackers_are_better(b, a) is False


def test_state_falls_back_to_attackers():
    a = state(unit(), attacker_health=(3,))
    b = state(unit(), attacker_health=(-3,))
    assert state_is_better(a, b) is True
    assert state_is_better(b, a) is False


def test_state_uses_defender_when_determinate():
    a = state(unit(health=-4), attacker_health=(-1, -1))
    b = state(unit(health=2), attacker_health=(10, 10))
    assert state_is_better(a, b) is True
