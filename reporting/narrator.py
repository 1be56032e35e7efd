"""
Console Narration.

Human-readable progress output for battles and runs. A disabled narrator
prints nothing and never changes simulation state.
"""

from typing import List, Any


class Narrator:
    """Print-based reporter with a single on/off switch."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def _emit(self, line: str):
        if self.enabled:
            print(line)

    def info(self, msg: str):
        self._emit(f"[INFO] {msg}")

    def warn(self, msg: str):
        self._emit(f"[WARN] {msg}")

    def error(self, msg: str):
        self._emit(f"[ERROR] {msg}")

    def success(self, msg: str):
        self._emit(f"[SUCCESS] {msg}")

    def separator(self):
        self._emit("-" * 60)

    def newline(self):
        self._emit("")

    def table(self, headers: List[str], rows: List[List[Any]]):
        """Print a simple fixed-width table."""
        if not self.enabled:
            return
        cells = [[str(c) for c in row] for row in rows]
        widths = [len(h) for h in headers]
        for row in cells:
            for i, c in enumerate(row):
                widths[i] = max(widths[i], len(c))

        border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
        print(border)
        print("| " + " | ".join(h.ljust(w) for h, w in zip(headers, widths)) + " |")
        print(border)
        for row in cells:
            print("| " + " | ".join(c.rjust(w) for c, w in zip(row, widths)) + " |")
        print(border)

    # Domain helpers

    def combatant_overview(self, title: str, combatant):
        """HP, shield and each move's stats."""
        if not self.enabled:
            return
        self.newline()
        self.info(
            f"[{title}] HP: {combatant.health.current}/{combatant.health.current_max}, "
            f"Shield: {combatant.shield.current}/{combatant.shield.current_max}"
        )
        for name in ("rock", "paper", "scissor"):
            stats = getattr(combatant, name)
            self.info(
                f"{name.capitalize()}(ATK={stats.current_atk}, DEF={stats.current_def}, "
                f"c={stats.current_charges})"
            )

    def round_header(self, round_num: int, player, enemy):
        if not self.enabled:
            return
        self.newline()
        self.info(
            f"[Round #{round_num}] Player HP={player.health.current}, Shield={player.shield.current} | "
            f"Enemy HP={enemy.health.current}, Shield={enemy.shield.current}"
        )

    def moves(self, player_move, player_stats, enemy_move, enemy_stats):
        if not self.enabled:
            return
        self.info(f"Moves => {move_label(player_move, player_stats)} vs. {move_label(enemy_move, enemy_stats)}")


def move_label(move, stats) -> str:
    """Label like ``Rock(10|2)``."""
    name = getattr(move, "value", str(move))
    return f"{name.capitalize()}({stats.current_atk}|{stats.current_def})"


# Shared disabled instance
SILENT = Narrator(enabled=False)
