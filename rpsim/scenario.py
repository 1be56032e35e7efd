"""
Scenario Loading.

Builds RunConfig objects from JSON payloads shaped like the game API's
player, enemy and loot records, plus a built-in example scenario.
"""

import json
from pathlib import Path
from typing import Dict, List, Union

from rpsim.loot import rarity_weight
from rpsim.rng import check_seed
from rpsim.state import (
    Combatant,
    ConsumableItem,
    EnemyDefinition,
    LootOption,
    MoveStats,
    Pool,
    BoonKind,
    RunConfig,
)


def scenario_from_dict(d: Dict) -> RunConfig:
    """
    Build a RunConfig from a scenario dict.

    Keys: player (required), enemies, consumables, loot_pool, max_enemies,
    seed, use_rarity_weights.
    """
    if not isinstance(d, dict) or not d.get("player"):
        raise ValueError("scenario needs a 'player' entry")

    return RunConfig(
        player=Combatant.from_dict(d["player"]),
        enemies=[EnemyDefinition.from_dict(e) for e in _list_entry(d, "enemies")],
        consumables=[ConsumableItem.from_dict(c) for c in _list_entry(d, "consumables")],
        loot_pool=[LootOption.from_dict(l) for l in _list_entry(d, "loot_pool")],
        loot_weight_fn=rarity_weight if d.get("use_rarity_weights", True) else None,
        max_enemies=d.get("max_enemies"),
        seed=check_seed(d.get("seed")),
        max_rounds=d.get("max_rounds"),
    )


def _list_entry(d: Dict, key: str) -> List[Dict]:
    """List under ``key``; missing or null is empty."""
    value = d.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"scenario '{key}' must be a list, got {type(value).__name__}")
    return value


def load_scenario(path: Union[str, Path]) -> RunConfig:
    """Load a scenario JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"scenario not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return scenario_from_dict(data)


def create_example_scenario(seed: int = None) -> RunConfig:
    """
    Small scenario for demos and smoke tests.

    Rock-heavy player, three enemies, one heal potion and a four-item
    loot pool weighted by rarity.
    """
    player = Combatant(
        id="0xUserPlayer",
        rock=MoveStats.fresh(10, 2),
        paper=MoveStats.fresh(0, 8),
        scissor=MoveStats.fresh(2, 2),
        health=Pool(current=14, current_max=14, starting=12, starting_max=12),
        shield=Pool(current=4, current_max=6, starting=2, starting_max=2),
        doc_id="user_player_1",
    )

    enemies = [
        EnemyDefinition(enemy_id="1", name="Red Robe", move_stats=[4, 0, 0, 4, 2, 2, 4, 2], doc_id="Enemy#1"),
        EnemyDefinition(enemy_id="2", name="Grey Hood", move_stats=[3, 1, 3, 1, 3, 1, 8, 2], doc_id="Enemy#2"),
        EnemyDefinition(enemy_id="3", name="Black Knight", move_stats=[6, 2, 2, 6, 4, 4, 12, 4], doc_id="Enemy#3"),
    ]

    consumables = [
        ConsumableItem(kind="heal", level=2, quantity=1),
        ConsumableItem(kind="damage", level=1, quantity=1),
    ]

    loot_pool = [
        LootOption(loot_id="loot_upRock", rarity=1, boon=BoonKind.UPGRADE_ROCK, value1=1, value2=0),
        LootOption(loot_id="loot_upPaper", rarity=0, boon=BoonKind.UPGRADE_PAPER, value1=2, value2=0),
        LootOption(loot_id="loot_heal", rarity=0, boon=BoonKind.HEAL, value1=6, value2=0),
        LootOption(loot_id="loot_addMaxArmor", rarity=1, boon=BoonKind.ADD_MAX_ARMOR, value1=3, value2=0),
    ]

    return RunConfig(
        player=player,
        enemies=enemies,
        consumables=consumables,
        loot_pool=loot_pool,
        loot_weight_fn=rarity_weight,
        seed=seed,
    )
