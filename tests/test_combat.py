import pytest

from battle_calc.battle_state import BattleState
from battle_calc.combat import (
    DegenerateForceError,
    resolve_attack,
    resolve_encounter,
    resolve_sequence,
    round_half_away,
    should_retaliate,
)
from battle_calc.units import RetaliationOverride, Unit


def unit(attack=2.0, defence=2.0, health=10.0, max_health=10.0, **kwargs) -> Unit:
    params = dict(
        unit_id=kwargs.pop("unit_id", "test"),
        display_name="Test",
        max_health=max_health,
        health=health,
        attack=attack,
        defence=defence,
        defence_with_bonus=kwargs.pop("defence_with_bonus", defence),
        can_retaliate=(attack != 0) and (defence != 0),
    )
    params.update(kwargs)
    return Unit(**params)


def test_round_half_away_from_zero():
    assert round_half_away(4.5) == 5
    assert round_half_away(11.25) == 11
    assert round_half_away(-4.5) == -5
    assert round_half_away(0.49) == 0


def test_worked_example_kills_defender_without_retaliation():
    attacker = unit(attack=5, defence=1)
    defender = unit(attack=1, defence=5)
    outcome = resolve_attack(attacker, defender)
    assert outcome.damage == 11
    assert defender.health == -1
    assert outcome.retaliated is False
    assert attacker.health == 10


def test_melee_exchange_rounds_half_up_and_retaliates():
    attacker = unit()
    defender = unit()
    outcome = resolve_attack(attacker, defender)
    # 2 * 2 * (4.5 / 4) = 4.5 rounds to 5 both ways
    assert defender.health == 5
    assert attacker.health == 5
    assert outcome.retaliation == 5


def test_retaliation_uses_base_defence_and_pre_attack_force():
    attacker = unit()
    defender = unit(defence=2, defence_with_bonus=8)
    resolve_attack(attacker, defender)
    # defence force 8, total force 4.5 / 10
    assert defender.health == 10 - round_half_away(2 * 2 * 0.45)
    assert attacker.health == 10 - round_half_away(8 * 2 * 0.45)


def test_ranged_attacker_escapes_melee_defender():
    archer = unit(ranged=True)
    assert should_retaliate(archer, unit()) is False
    assert should_retaliate(archer, unit(ranged=True)) is True
    assert should_retaliate(unit(), unit(ranged=True)) is True


def test_incapacitated_defenders_never_retaliate():
    attacker = unit(forced_retaliation=RetaliationOverride.FORCE_YES)
    assert should_retaliate(attacker, unit(frozen=True)) is False
    assert should_retaliate(attacker, unit(converted=True)) is False
    assert should_retaliate(attacker, unit(health=0)) is False
    assert should_retaliate(attacker, unit(defence=0)) is False


def test_attacker_override_beats_defender_override():
    yes = RetaliationOverride.FORCE_YES
    no = RetaliationOverride.FORCE_NO
    assert should_retaliate(unit(ranged=True, forced_retaliation=yes), unit(forced_retaliation=no)) is True
    assert should_retaliate(unit(forced_retaliation=no), unit(forced_retaliation=yes)) is False
    assert should_retaliate(unit(ranged=True), unit(forced_retaliation=yes)) is True
    assert should_retaliate(unit(), unit(forced_retaliation=no)) is False


def test_degenerate_forces_deal_no_damage():
    attacker = unit(attack=4, health=0)
    defender = unit(attack=4, defence=0)
    outcome = resolve_attack(attacker, defender)
    assert outcome.degenerate is True
    assert outcome.damage == 0
    assert defender.health == 10
    assert attacker.health == 0


def test_degenerate_forces_raise_in_strict_mode():
    attacker = unit(attack=4, health=0)
    defender = unit(attack=4, defence=0)
    with pytest.raises(DegenerateForceError):
        resolve_attack(attacker, defender, strict=True)


def test_converter_without_attack_converts():
    bender = unit(attack=0, defence=1, can_convert=True)
    defender = unit()
    assert resolve_encounter(bender, defender) is None
    assert defender.converted is True
    assert defender.health == 10
    assert bender.health == 10


def test_converted_defender_is_out_of_the_fight():
    defender = unit()
    state = BattleState(
        attackers=[unit(attack=0, defence=1, can_convert=True), unit(), unit(can_freeze=True)],
        defender=defender,
    )
    outcomes = resolve_sequence(state)
    assert outcomes == [None, None, None]
    assert defender.health == 10
    assert defender.frozen is False
    assert [a.health for a in state.attackers] == [10, 10, 10]


def test_freezer_freezes_and_stops_later_retaliation():
    defender = unit(health=20, max_health=20)
    state = BattleState(attackers=[unit(can_freeze=True), unit()], defender=defender)
    resolve_sequence(state)
    assert defender.frozen is True
    assert defender.converted is False
    assert defender.health == 10
    # second attacker is not hit back
    assert state.attackers[0].health == 5
    assert state.attackers[1].health == 10


def test_dead_attacker_applies_no_status():
    attacker = unit(attack=4, defence=3, health=1, max_health=30, can_freeze=True)
    defender = unit(attack=5, defence=4, health=40, max_health=40)
    resolve_encounter(attacker, defender)
    assert attacker.health < 0
    assert defender.frozen is False


def test_sequence_is_cumulative():
    state = BattleState(attackers=[unit(), unit()], defender=unit())
    resolve_sequence(state)
    assert [a.health for a in state.attackers] == [5, 10]
    assert state.defender.health == -1
    assert state.to_dict() == {
        "attackers": [5, 10],
        "defender": {"health": -1, "frozen": False, "converted": False},
    }
