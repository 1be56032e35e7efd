"""
Round Resolution Mechanics.

Resolves one rock/paper/scissors round between the player and an enemy,
applies damage and shield gain, fires heal consumables and drives a
battle to completion. All randomness comes from the injected source.
"""

from typing import Dict, List, Optional

from rpsim.charges import pick_move, update_charges
from rpsim.state import Combatant, ConsumableItem, RpsMove, BEATS
from reporting.narrator import Narrator, SILENT

HEAL_THRESHOLD = 0.30

# consumable level -> HP restored
HEAL_AMOUNTS = {3: 20, 2: 8}
DEFAULT_HEAL_AMOUNT = 4

OUTCOME_TIE = "tie"
OUTCOME_PLAYER = "player"
OUTCOME_ENEMY = "enemy"


def get_heal_amount(level: int) -> int:
    return HEAL_AMOUNTS.get(level, DEFAULT_HEAL_AMOUNT)


def classify_round(player_move: RpsMove, enemy_move: RpsMove) -> str:
    """Return which side won the exchange, or a tie."""
    if player_move is enemy_move:
        return OUTCOME_TIE
    if BEATS[player_move] is enemy_move:
        return OUTCOME_PLAYER
    return OUTCOME_ENEMY


def compute_round_outcome(
    player: Combatant,
    enemy: Combatant,
    player_move: RpsMove,
    enemy_move: RpsMove
) -> Dict:
    """
    Compute damage and shield gain for both sides.

    On a tie both sides apply their own move's ATK/DEF. Otherwise only the
    winner does; the loser deals nothing and gains nothing.
    """
    p_stats = player.move_stats(player_move)
    e_stats = enemy.move_stats(enemy_move)
    outcome = classify_round(player_move, enemy_move)

    result = {
        "outcome": outcome,
        "dmg_to_enemy": 0,
        "dmg_to_player": 0,
        "shield_gain_player": 0,
        "shield_gain_enemy": 0,
    }

    if outcome in (OUTCOME_TIE, OUTCOME_PLAYER):
        result["dmg_to_enemy"] = p_stats.current_atk
        result["shield_gain_player"] = p_stats.current_def
    if outcome in (OUTCOME_TIE, OUTCOME_ENEMY):
        result["dmg_to_player"] = e_stats.current_atk
        result["shield_gain_enemy"] = e_stats.current_def

    return result


def apply_damage_and_shield(
    damage: int,
    shield_gain: int,
    attacker: Combatant,
    defender: Combatant,
    narrator: Narrator = SILENT
) -> Dict:
    """
    Raise the attacker's shield, then hit the defender.

    The defender's shield absorbs damage before HP is reduced. Returns info
    about what happened.
    """
    old_shield = attacker.shield.current
    attacker.shield.current = min(attacker.shield.current + shield_gain, attacker.shield.current_max)
    if shield_gain > 0:
        narrator.info(f"Attacker shield: {old_shield} -> {attacker.shield.current} (+{shield_gain})")

    remaining = damage
    absorbed = 0
    if defender.shield.current > 0 and remaining > 0:
        absorbed = min(defender.shield.current, remaining)
        defender.shield.current -= absorbed
        remaining -= absorbed
        narrator.info(f"Defender shield absorbed {absorbed} dmg.")

    old_hp = defender.health.current
    if remaining > 0:
        defender.health.current = max(0, old_hp - remaining)
        narrator.info(f"Defender HP: {old_hp} -> {defender.health.current}")

    return {
        "absorbed": absorbed,
        "hp_damage": old_hp - defender.health.current,
        "shield_gained": attacker.shield.current - old_shield,
    }


def maybe_use_consumable(
    player: Combatant,
    consumables: List[ConsumableItem],
    used_log: List[str],
    narrator: Narrator = SILENT
) -> Optional[int]:
    """
    Use one heal item when HP is below the threshold.

    Returns the heal amount, or None when nothing was used.
    """
    if player.health.current_max <= 0:
        return None
    ratio = player.health.current / player.health.current_max
    if ratio >= HEAL_THRESHOLD:
        return None

    heal_item = next((c for c in consumables if c.kind == "heal" and c.quantity > 0), None)
    if heal_item is None:
        return None

    heal_item.quantity -= 1
    amount = get_heal_amount(heal_item.level)
    old_hp = player.health.current
    player.health.restore(amount)
    used_log.append(f"Used heal(lv{heal_item.level}) +{amount}HP")
    narrator.info(f"Consumable used -> heal(lv{heal_item.level}), HP {old_hp} -> {player.health.current}")
    return amount


def resolve_round(
    player: Combatant,
    enemy: Combatant,
    rng,
    consumables: List[ConsumableItem] = None,
    used_log: List[str] = None,
    narrator: Narrator = SILENT
) -> Dict:
    """
    Play one round in place.

    Both hits are applied unconditionally, player first, so a round can
    bring both sides to 0 HP. Charges update after all damage.
    """
    consumables = consumables if consumables is not None else []
    used_log = used_log if used_log is not None else []

    player_move = pick_move(player, rng)
    enemy_move = pick_move(enemy, rng)
    narrator.moves(player_move, player.move_stats(player_move), enemy_move, enemy.move_stats(enemy_move))

    healed = maybe_use_consumable(player, consumables, used_log, narrator)

    outcome = compute_round_outcome(player, enemy, player_move, enemy_move)

    apply_damage_and_shield(outcome["dmg_to_enemy"], outcome["shield_gain_player"], player, enemy, narrator)
    apply_damage_and_shield(outcome["dmg_to_player"], outcome["shield_gain_enemy"], enemy, player, narrator)

    update_charges(player, player_move, narrator)
    update_charges(enemy, enemy_move, narrator)

    player.last_move = player_move.value
    enemy.last_move = enemy_move.value
    player.this_player_win = outcome["outcome"] == OUTCOME_PLAYER
    player.other_player_win = outcome["outcome"] == OUTCOME_ENEMY

    outcome.update({
        "player_move": player_move.value,
        "enemy_move": enemy_move.value,
        "healed": healed,
    })
    return outcome


def simulate_battle(
    player: Combatant,
    enemy: Combatant,
    rng,
    consumables: List[ConsumableItem] = None,
    used_log: List[str] = None,
    narrator: Narrator = SILENT,
    logger=None,
    max_rounds: Optional[int] = None
) -> bool:
    """
    Fight until one side reaches 0 HP.

    Returns True if the player won. Player death is checked first, so a
    mutual knockout counts as a loss. Hitting ``max_rounds`` (if given)
    also counts as a loss.
    """
    round_count = 0

    while player.is_alive and enemy.is_alive:
        if max_rounds is not None and round_count >= max_rounds:
            narrator.warn(f"Battle truncated after {round_count} rounds.")
            return False
        round_count += 1
        narrator.round_header(round_count, player, enemy)

        info = resolve_round(player, enemy, rng, consumables, used_log, narrator)

        if logger:
            logger.log_round(round_count, info, player, enemy)

        if not player.is_alive:
            narrator.warn("Player HP dropped to 0 => death.")
            return False
        if not enemy.is_alive:
            narrator.info("Enemy HP 0 => victory this battle!")
            return True

    return player.is_alive
