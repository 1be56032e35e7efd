"""
JSONL Run Logger.

Logs per-round transitions and run outcomes for offline analysis.
"""

import json
import os
from datetime import datetime
from typing import Dict, Optional
import numpy as np


def convert_numpy(obj):
    """Convert numpy types to Python native types for JSON serialization."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, dict):
        return {k: convert_numpy(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_numpy(v) for v in obj]
    return obj


class RunLogger:
    """
    Logger for simulated runs in JSONL format.
    """

    def __init__(self, log_dir: str = None, enabled: bool = True):
        """
        Initialize run logger.

        Args:
            log_dir: Directory to write logs. Defaults to data/run_logs/
            enabled: Whether logging is active
        """
        self.enabled = enabled

        if log_dir is None:
            base_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
            log_dir = os.path.join(base_path, "data", "run_logs")

        self.log_dir = log_dir
        self.current_file: Optional[str] = None
        self.current_run_id: Optional[str] = None
        self.battle_idx = 0
        self.seed = None

        if self.enabled:
            os.makedirs(self.log_dir, exist_ok=True)

    def _write(self, entry: Dict):
        if self.current_file is None:
            return
        try:
            with open(self.current_file, "a") as f:
                f.write(json.dumps(convert_numpy(entry)) + "\n")
        except OSError as e:
            print(f"Warning: Failed to write log entry: {e}")

    def start_run(self, seed: int = None, run_id: str = None):
        """Start a new run."""
        if not self.enabled:
            return

        self.seed = seed
        self.battle_idx = 0

        if run_id is None:
            run_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.current_run_id = run_id

        # one file per session; runs within it share the file
        if self.current_file is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.current_file = os.path.join(self.log_dir, f"runs_{timestamp}.jsonl")

    def start_battle(self, battle_idx: int, enemy_id: str):
        if not self.enabled:
            return
        self.battle_idx = battle_idx
        self._write({
            "timestamp": datetime.now().isoformat(),
            "type": "battle_start",
            "run_id": self.current_run_id,
            "battle_idx": battle_idx,
            "enemy_id": enemy_id,
        })

    def log_round(self, round_num: int, info: Dict, player, enemy):
        """
        Log a single resolved round.

        Args:
            round_num: 1-based round number within the battle
            info: Round info returned by resolve_round
            player: Player combatant after the round
            enemy: Enemy combatant after the round
        """
        if not self.enabled:
            return

        self._write({
            "timestamp": datetime.now().isoformat(),
            "type": "round",
            "seed": self.seed,
            "run_id": self.current_run_id,
            "battle_idx": self.battle_idx,
            "round": round_num,
            "player_move": info.get("player_move"),
            "enemy_move": info.get("enemy_move"),
            "outcome": info.get("outcome"),
            "healed": info.get("healed"),
            "player": {"hp": player.health.current, "shield": player.shield.current},
            "enemy": {"hp": enemy.health.current, "shield": enemy.shield.current},
        })

    def log_loot(self, loot):
        if not self.enabled or loot is None:
            return
        self._write({
            "timestamp": datetime.now().isoformat(),
            "type": "loot",
            "run_id": self.current_run_id,
            "battle_idx": self.battle_idx,
            "loot": loot.to_dict(),
        })

    def end_run(self, result=None):
        """End current run."""
        if not self.enabled:
            return

        if result is not None:
            self._write({
                "timestamp": datetime.now().isoformat(),
                "type": "run_end",
                "run_id": self.current_run_id,
                "seed": self.seed,
                "enemies_defeated": result.enemies_defeated,
                "survived": result.survived,
                "used_consumables": list(result.used_consumables),
                "loot_picked": [loot.loot_id for loot in result.loot_picked],
            })

        self.current_run_id = None
        self.battle_idx = 0
