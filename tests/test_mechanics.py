"""Tests for round resolution, consumables and the battle loop."""

import pytest

from rpsim.mechanics import (
    apply_damage_and_shield,
    classify_round,
    compute_round_outcome,
    get_heal_amount,
    maybe_use_consumable,
    resolve_round,
    simulate_battle,
    OUTCOME_TIE,
    OUTCOME_PLAYER,
    OUTCOME_ENEMY,
)
from rpsim.rng import RandomSource
from rpsim.state import ConsumableItem, RpsMove


class TestClassifyRound:

    @pytest.mark.parametrize("player_move,enemy_move,expected", [
        (RpsMove.ROCK, RpsMove.ROCK, OUTCOME_TIE),
        (RpsMove.ROCK, RpsMove.SCISSOR, OUTCOME_PLAYER),
        (RpsMove.SCISSOR, RpsMove.PAPER, OUTCOME_PLAYER),
        (RpsMove.PAPER, RpsMove.ROCK, OUTCOME_PLAYER),
        (RpsMove.SCISSOR, RpsMove.ROCK, OUTCOME_ENEMY),
        (RpsMove.PAPER, RpsMove.SCISSOR, OUTCOME_ENEMY),
        (RpsMove.ROCK, RpsMove.PAPER, OUTCOME_ENEMY),
    ])
    def test_precedence(self, player_move, enemy_move, expected):
        assert classify_round(player_move, enemy_move) == expected


class TestComputeRoundOutcome:

    @pytest.fixture
    def pair(self, combatant_factory):
        player = combatant_factory("P", rock=(10, 2, 3), paper=(1, 8, 3), scissor=(4, 4, 3))
        enemy = combatant_factory("E", rock=(5, 1, 3), paper=(3, 3, 3), scissor=(6, 0, 3))
        return player, enemy

    def test_tie_both_sides_apply(self, pair):
        player, enemy = pair
        out = compute_round_outcome(player, enemy, RpsMove.ROCK, RpsMove.ROCK)
        assert out["dmg_to_enemy"] == 10
        assert out["shield_gain_player"] == 2
        assert out["dmg_to_player"] == 5
        assert out["shield_gain_enemy"] == 1

    def test_player_win_only_player_applies(self, pair):
        player, enemy = pair
        out = compute_round_outcome(player, enemy, RpsMove.ROCK, RpsMove.SCISSOR)
        assert out["outcome"] == OUTCOME_PLAYER
        assert (out["dmg_to_enemy"], out["shield_gain_player"]) == (10, 2)
        assert (out["dmg_to_player"], out["shield_gain_enemy"]) == (0, 0)

    def test_enemy_win_only_enemy_applies(self, pair):
        player, enemy = pair
        out = compute_round_outcome(player, enemy, RpsMove.PAPER, RpsMove.SCISSOR)
        assert out["outcome"] == OUTCOME_ENEMY
        assert (out["dmg_to_enemy"], out["shield_gain_player"]) == (0, 0)
        assert (out["dmg_to_player"], out["shield_gain_enemy"]) == (6, 0)


class TestApplyDamageAndShield:

    def test_shield_absorbs_before_hp(self, combatant_factory):
        attacker = combatant_factory("A")
        defender = combatant_factory("D", hp=20, shield=4)
        info = apply_damage_and_shield(7, 0, attacker, defender)
        assert defender.shield.current == 0
        assert defender.health.current == 17
        assert info["absorbed"] == 4
        assert info["hp_damage"] == 3

    def test_shield_gain_capped_at_max(self, combatant_factory):
        attacker = combatant_factory("A", shield=3, shield_max=5)
        defender = combatant_factory("D")
        apply_damage_and_shield(0, 10, attacker, defender)
        assert attacker.shield.current == 5

    def test_hp_floors_at_zero(self, combatant_factory):
        attacker = combatant_factory("A")
        defender = combatant_factory("D", hp=3)
        apply_damage_and_shield(50, 0, attacker, defender)
        assert defender.health.current == 0


class TestConsumables:

    @pytest.mark.parametrize("level,amount", [(3, 20), (2, 8), (1, 4), (7, 4)])
    def test_heal_table(self, level, amount):
        assert get_heal_amount(level) == amount

    def test_low_hp_triggers_heal(self, combatant_factory):
        player = combatant_factory(hp=20)
        player.health.current = 2
        items = [ConsumableItem(kind="heal", level=2, quantity=1)]
        used = []

        healed = maybe_use_consumable(player, items, used)

        assert healed == 8
        assert player.health.current == 10
        assert items[0].quantity == 0
        assert used == ["Used heal(lv2) +8HP"]

    def test_heal_capped_at_max(self, combatant_factory):
        player = combatant_factory(hp=20)
        player.health.current = 5
        items = [ConsumableItem(kind="heal", level=3, quantity=1)]
        maybe_use_consumable(player, items, [])
        assert player.health.current == 20

    def test_threshold_is_strict(self, combatant_factory):
        player = combatant_factory(hp=20)
        player.health.current = 6
        items = [ConsumableItem(kind="heal", level=2, quantity=1)]
        assert maybe_use_consumable(player, items, []) is None
        assert items[0].quantity == 1

    def test_other_kinds_are_inert(self, combatant_factory):
        player = combatant_factory(hp=20)
        player.health.current = 1
        items = [ConsumableItem(kind="damage", level=3, quantity=2)]
        assert maybe_use_consumable(player, items, []) is None
        assert items[0].quantity == 2

    def test_empty_items_skipped_and_one_per_call(self, combatant_factory):
        player = combatant_factory(hp=20)
        player.health.current = 1
        items = [
            ConsumableItem(kind="heal", level=3, quantity=0),
            ConsumableItem(kind="heal", level=1, quantity=1),
            ConsumableItem(kind="heal", level=2, quantity=1),
        ]
        maybe_use_consumable(player, items, [])
        assert player.health.current == 5
        assert [i.quantity for i in items] == [0, 0, 1]


class TestResolveRound:

    def test_tie_hits_both_sides(self, combatant_factory, scripted):
        player = combatant_factory("P", hp=20, rock=(5, 0, 3), paper=(0, 0, 0), scissor=(0, 0, 0))
        enemy = combatant_factory("E", hp=20, rock=(5, 0, 3), paper=(0, 0, 0), scissor=(0, 0, 0))

        info = resolve_round(player, enemy, scripted([0.0, 0.0]))

        assert info["outcome"] == OUTCOME_TIE
        assert player.health.current == 15
        assert enemy.health.current == 15
        assert player.rock.current_charges == 2
        assert enemy.rock.current_charges == 2

    def test_heal_fires_before_damage(self, combatant_factory, scripted):
        player = combatant_factory("P", hp=20, rock=(1, 0, 3))
        player.health.current = 2
        enemy = combatant_factory("E", hp=20)
        items = [ConsumableItem(kind="heal", level=2, quantity=1)]
        used = []

        info = resolve_round(player, enemy, scripted([0.0, 0.0]), items, used)

        assert info["healed"] == 8
        assert player.health.current == 10
        assert items[0].quantity == 0
        assert len(used) == 1

    def test_records_last_move(self, combatant_factory, scripted):
        player = combatant_factory("P")
        enemy = combatant_factory("E")
        resolve_round(player, enemy, scripted([0.0, 0.99]))
        assert player.last_move == "rock"
        assert enemy.last_move == "scissor"
        assert player.this_player_win


class TestSimulateBattle:

    def test_mutual_knockout_is_a_loss(self, combatant_factory, scripted):
        player = combatant_factory("P", hp=5, rock=(10, 0, 3), paper=(0, 0, 0), scissor=(0, 0, 0))
        enemy = combatant_factory("E", hp=5, rock=(10, 0, 3), paper=(0, 0, 0), scissor=(0, 0, 0))

        won = simulate_battle(player, enemy, scripted([0.0, 0.0]))

        assert won is False
        assert player.health.current == 0
        assert enemy.health.current == 0

    def test_player_wins(self, combatant_factory, scripted):
        player = combatant_factory("P", rock=(10, 2, 3), paper=(0, 0, 0), scissor=(0, 0, 0))
        enemy = combatant_factory("E", hp=5)
        assert simulate_battle(player, enemy, scripted([0.0, 0.99])) is True
        assert enemy.health.current == 0

    def test_max_rounds_truncates(self, combatant_factory):
        player = combatant_factory("P")
        enemy = combatant_factory("E")
        assert simulate_battle(player, enemy, RandomSource(3), max_rounds=10) is False

    @pytest.mark.parametrize("seed", range(10))
    def test_pools_and_charges_stay_in_bounds(self, combatant_factory, seed):
        player = combatant_factory("P", hp=30, shield=2, shield_max=6,
                                   rock=(6, 2, 3), paper=(2, 5, 3), scissor=(4, 3, 3))
        enemy = combatant_factory("E", hp=30, shield=3, shield_max=5,
                                  rock=(5, 1, 3), paper=(3, 4, 3), scissor=(5, 2, 3))
        rng = RandomSource(seed)

        for _ in range(200):
            if not (player.is_alive and enemy.is_alive):
                break
            resolve_round(player, enemy, rng)
            for c in (player, enemy):
                assert 0 <= c.health.current <= c.health.current_max
                assert 0 <= c.shield.current <= c.shield.current_max
                for stats in (c.rock, c.paper, c.scissor):
                    assert -1 <= stats.current_charges <= stats.max_charges
