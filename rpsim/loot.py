"""
Loot Phase.

Draws a weighted sample of distinct options from the loot pool, picks one
of them uniformly and applies it to the player.
"""

from typing import Callable, List, Optional

from rpsim.rng import pick_index
from rpsim.state import Combatant, LootOption, BoonKind, UPGRADE_TARGETS
from reporting.narrator import Narrator, SILENT

LOOT_SAMPLE_SIZE = 3

# rarity tier -> sampling weight (common options show up more often)
RARITY_WEIGHTS = {
    0: 40,
    1: 20,
    2: 10,
    3: 5,
    4: 2,
}


def rarity_weight(loot: LootOption) -> float:
    """Weight function keyed on the option's rarity tier."""
    return RARITY_WEIGHTS.get(loot.rarity, 1)


def pick_random_loots(
    loot_pool: List[LootOption],
    count: int,
    rng,
    weight_fn: Callable[[LootOption], float] = None
) -> List[LootOption]:
    """
    Weighted sample of up to ``count`` options without replacement.

    Each draw scales a uniform value to the remaining total weight and
    takes the first option whose running sum reaches it.
    """
    remaining = [(loot, weight_fn(loot) if weight_fn else 1) for loot in loot_pool]
    picked = []

    while remaining and len(picked) < count:
        total = sum(w for _, w in remaining)
        r = rng.random() * total

        pick = 0
        running = 0
        for j, (_, weight) in enumerate(remaining):
            running += weight
            if r <= running:
                pick = j
                break

        picked.append(remaining.pop(pick)[0])

    return picked


def apply_loot_effect(player: Combatant, loot: LootOption, narrator: Narrator = SILENT) -> None:
    """Apply a boon to the player. Unknown boons do nothing."""
    narrator.info(f"Applying boon: {loot.boon.value} +{loot.value1}|{loot.value2}")

    if loot.boon in UPGRADE_TARGETS:
        stats = player.move_stats(UPGRADE_TARGETS[loot.boon])
        stats.current_atk += loot.value1
        stats.current_def += loot.value2
    elif loot.boon is BoonKind.HEAL:
        player.health.restore(loot.value1)
    elif loot.boon is BoonKind.ADD_MAX_ARMOR:
        player.shield.current_max += loot.value1


def choose_loot(
    player: Combatant,
    loot_pool: List[LootOption],
    rng,
    weight_fn: Callable[[LootOption], float] = None,
    sample_size: int = LOOT_SAMPLE_SIZE,
    narrator: Narrator = SILENT
) -> Optional[LootOption]:
    """
    Run one loot phase against ``player``.

    Returns the chosen option, or None if the pool is empty.
    """
    if not loot_pool:
        return None

    proposed = pick_random_loots(loot_pool, sample_size, rng, weight_fn)
    if not proposed:
        return None

    chosen = proposed[pick_index(rng, len(proposed))]
    narrator.info(f"Chosen loot => {chosen.boon.value} +{chosen.value1}|{chosen.value2}")
    apply_loot_effect(player, chosen, narrator)
    return chosen
