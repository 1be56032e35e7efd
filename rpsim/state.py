"""
Pure Python Combat State Containers.

Defines combatants, per-move stats, loot and run records used by the
simulator. Parsing accepts both the remote game API payload keys and
snake_case keys.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Any, Optional
import copy


class RpsMove(str, Enum):
    ROCK = "rock"
    PAPER = "paper"
    SCISSOR = "scissor"


ALL_MOVES = (RpsMove.ROCK, RpsMove.PAPER, RpsMove.SCISSOR)

# move -> the move it defeats
BEATS = {
    RpsMove.ROCK: RpsMove.SCISSOR,
    RpsMove.SCISSOR: RpsMove.PAPER,
    RpsMove.PAPER: RpsMove.ROCK,
}


class BoonKind(str, Enum):
    UPGRADE_ROCK = "UpgradeRock"
    UPGRADE_PAPER = "UpgradePaper"
    UPGRADE_SCISSOR = "UpgradeScissor"
    HEAL = "Heal"
    ADD_MAX_ARMOR = "AddMaxArmor"
    NONE = "None"

    @classmethod
    def parse(cls, value) -> "BoonKind":
        """Parse a boon string; anything unrecognized is the no-op kind."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


UPGRADE_TARGETS = {
    BoonKind.UPGRADE_ROCK: RpsMove.ROCK,
    BoonKind.UPGRADE_PAPER: RpsMove.PAPER,
    BoonKind.UPGRADE_SCISSOR: RpsMove.SCISSOR,
}


def _num(d: Dict, *keys, default: int = 0) -> int:
    """First present, non-null key among ``keys`` as an int."""
    for key in keys:
        value = d.get(key)
        if value is not None:
            return int(value)
    return default


@dataclass
class MoveStats:
    """ATK/DEF and charge record for one move."""
    starting_atk: int = 0
    starting_def: int = 0
    current_atk: int = 0
    current_def: int = 0
    current_charges: int = 3
    max_charges: int = 3

    def to_dict(self) -> Dict:
        return {
            "startingATK": self.starting_atk,
            "startingDEF": self.starting_def,
            "currentATK": self.current_atk,
            "currentDEF": self.current_def,
            "currentCharges": self.current_charges,
            "maxCharges": self.max_charges,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "MoveStats":
        d = d or {}
        current_atk = _num(d, "currentATK", "current_atk")
        current_def = _num(d, "currentDEF", "current_def")
        return cls(
            starting_atk=_num(d, "startingATK", "starting_atk", default=current_atk),
            starting_def=_num(d, "startingDEF", "starting_def", default=current_def),
            current_atk=current_atk,
            current_def=current_def,
            current_charges=_num(d, "currentCharges", "current_charges"),
            max_charges=_num(d, "maxCharges", "max_charges"),
        )

    @classmethod
    def fresh(cls, atk: int, defense: int, charges: int = 3) -> "MoveStats":
        return cls(
            starting_atk=atk,
            starting_def=defense,
            current_atk=atk,
            current_def=defense,
            current_charges=charges,
            max_charges=charges,
        )


@dataclass
class Pool:
    """Health or shield pool."""
    current: int = 0
    current_max: int = 0
    starting: int = 0
    starting_max: int = 0

    def to_dict(self) -> Dict:
        return {
            "current": self.current,
            "currentMax": self.current_max,
            "starting": self.starting,
            "startingMax": self.starting_max,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "Pool":
        d = d or {}
        current = _num(d, "current")
        current_max = _num(d, "currentMax", "current_max", default=current)
        return cls(
            current=current,
            current_max=current_max,
            starting=_num(d, "starting", default=current),
            starting_max=_num(d, "startingMax", "starting_max", default=current_max),
        )

    @classmethod
    def full(cls, value: int) -> "Pool":
        return cls(current=value, current_max=value, starting=value, starting_max=value)

    def restore(self, amount: int) -> int:
        """Add up to ``amount``, capped at the current max. Returns the gain."""
        old = self.current
        self.current = min(self.current_max, self.current + amount)
        return self.current - old


# health and shield share one shape
HealthPool = Pool
ShieldPool = Pool


@dataclass
class Combatant:
    """Player or enemy taking part in a battle."""
    id: str = "Combatant"
    rock: MoveStats = field(default_factory=MoveStats)
    paper: MoveStats = field(default_factory=MoveStats)
    scissor: MoveStats = field(default_factory=MoveStats)
    health: HealthPool = field(default_factory=HealthPool)
    shield: ShieldPool = field(default_factory=ShieldPool)
    # display only
    equipment: List[Dict] = field(default_factory=list)
    last_move: str = ""
    this_player_win: bool = False
    other_player_win: bool = False
    doc_id: str = ""

    @property
    def is_alive(self) -> bool:
        return self.health.current > 0

    def move_stats(self, move: RpsMove) -> MoveStats:
        if move is RpsMove.ROCK:
            return self.rock
        if move is RpsMove.PAPER:
            return self.paper
        return self.scissor

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "rock": self.rock.to_dict(),
            "paper": self.paper.to_dict(),
            "scissor": self.scissor.to_dict(),
            "health": self.health.to_dict(),
            "shield": self.shield.to_dict(),
            "equipment": copy.deepcopy(self.equipment),
            "lastMove": self.last_move,
            "thisPlayerWin": self.this_player_win,
            "otherPlayerWin": self.other_player_win,
            "_id": self.doc_id,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "Combatant":
        return cls(
            id=str(d.get("id", "Combatant")),
            rock=MoveStats.from_dict(d.get("rock")),
            paper=MoveStats.from_dict(d.get("paper")),
            scissor=MoveStats.from_dict(d.get("scissor")),
            health=Pool.from_dict(d.get("health")),
            shield=Pool.from_dict(d.get("shield")),
            equipment=copy.deepcopy(d.get("equipment", [])),
            last_move=d.get("lastMove", d.get("last_move", "")) or "",
            this_player_win=bool(d.get("thisPlayerWin", False)),
            other_player_win=bool(d.get("otherPlayerWin", False)),
            doc_id=str(d.get("_id", d.get("doc_id", ""))),
        )

    def copy(self) -> "Combatant":
        """Create a deep copy of the combatant."""
        return copy.deepcopy(self)


@dataclass
class EnemyDefinition:
    """
    Static enemy data.

    ``move_stats`` is laid out as
    [rockATK, rockDEF, paperATK, paperDEF, scissorATK, scissorDEF, HP, Shield].
    """
    enemy_id: str = ""
    name: str = ""
    move_stats: List[Optional[int]] = field(default_factory=list)
    doc_id: str = ""

    def stat(self, idx: int) -> int:
        if idx >= len(self.move_stats):
            return 0
        return int(self.move_stats[idx] or 0)

    def to_combatant(self) -> Combatant:
        """Build a fresh combatant with full charges on every move."""
        hp = self.stat(6)
        shield = self.stat(7)
        return Combatant(
            id=f"Enemy#{self.enemy_id} ({self.name})",
            rock=MoveStats.fresh(self.stat(0), self.stat(1)),
            paper=MoveStats.fresh(self.stat(2), self.stat(3)),
            scissor=MoveStats.fresh(self.stat(4), self.stat(5)),
            health=Pool.full(hp),
            shield=Pool.full(shield),
            doc_id=self.doc_id,
        )

    @classmethod
    def from_dict(cls, d: Dict) -> "EnemyDefinition":
        stats = d.get("MOVE_STATS_CID_array", d.get("move_stats", []))
        return cls(
            enemy_id=str(d.get("ID_CID", d.get("enemy_id", ""))),
            name=str(d.get("NAME_CID", d.get("name", ""))),
            move_stats=list(stats) if isinstance(stats, list) else [],
            doc_id=str(d.get("docId", d.get("doc_id", ""))),
        )


@dataclass
class ConsumableItem:
    """Carried consumable. Only the ``heal`` kind has an effect."""
    kind: str = "heal"
    level: int = 1
    quantity: int = 1

    @classmethod
    def from_dict(cls, d: Dict) -> "ConsumableItem":
        return cls(
            kind=str(d.get("name", d.get("kind", ""))),
            level=_num(d, "level", default=1),
            quantity=_num(d, "quantity"),
        )


@dataclass
class LootOption:
    """One entry of the loot pool."""
    loot_id: str = ""
    rarity: int = 0
    boon: BoonKind = BoonKind.NONE
    value1: int = 0
    value2: int = 0

    def to_dict(self) -> Dict:
        return {
            "docId": self.loot_id,
            "RARITY_CID": self.rarity,
            "boonTypeString": self.boon.value,
            "selectedVal1": self.value1,
            "selectedVal2": self.value2,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "LootOption":
        return cls(
            loot_id=str(d.get("docId", d.get("loot_id", ""))),
            rarity=_num(d, "RARITY_CID", "rarity"),
            boon=BoonKind.parse(d.get("boonTypeString", d.get("boon"))),
            value1=_num(d, "selectedVal1", "value1"),
            value2=_num(d, "selectedVal2", "value2"),
        )


@dataclass
class RunConfig:
    """Inputs for one simulated run."""
    player: Combatant
    enemies: List[EnemyDefinition] = field(default_factory=list)
    consumables: List[ConsumableItem] = field(default_factory=list)
    loot_pool: List[LootOption] = field(default_factory=list)
    loot_weight_fn: Optional[Callable[[LootOption], float]] = None
    max_enemies: Optional[int] = None
    seed: Optional[int] = None
    sample_size: int = 3
    max_rounds: Optional[int] = None

    def enemy_limit(self) -> int:
        """Number of battles a run will attempt."""
        # a cap of 0 (or None) means the whole roster
        if self.max_enemies:
            return min(self.max_enemies, len(self.enemies))
        return len(self.enemies)


@dataclass
class RunResult:
    """Outcome of one simulated run."""
    enemies_defeated: int = 0
    survived: bool = False
    final_player: Optional[Combatant] = None
    used_consumables: List[str] = field(default_factory=list)
    loot_picked: List[LootOption] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enemies_defeated": self.enemies_defeated,
            "survived": self.survived,
            "final_player": self.final_player.to_dict() if self.final_player else None,
            "used_consumables": list(self.used_consumables),
            "loot_picked": [loot.to_dict() for loot in self.loot_picked],
        }
