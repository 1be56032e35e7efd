"""
Per-move charge tracking.

A move's charges deplete when played and regenerate while idle. Using the
last charge locks the move at -1 for one round before it drops to 0.
"""

from typing import List

from rpsim.rng import pick_index
from rpsim.state import Combatant, RpsMove, ALL_MOVES

SPAM_PENALTY = -1

# played when nothing has a positive charge
FALLBACK_MOVE = RpsMove.ROCK


def available_moves(combatant: Combatant) -> List[RpsMove]:
    """Moves with at least one charge, in rock/paper/scissor order."""
    return [m for m in ALL_MOVES if combatant.move_stats(m).current_charges > 0]


def pick_move(combatant: Combatant, rng) -> RpsMove:
    """
    Pick uniformly among charged moves.

    With every move at 0 or -1 the fallback move is returned without
    consuming a random draw.
    """
    candidates = available_moves(combatant)
    if not candidates:
        return FALLBACK_MOVE
    return candidates[pick_index(rng, len(candidates))]


def update_charges(combatant: Combatant, move_used: RpsMove, narrator=None) -> None:
    """Apply depletion to the played move and recovery to the others."""
    used = combatant.move_stats(move_used)
    if used.current_charges > 1:
        used.current_charges -= 1
    elif used.current_charges == 1:
        used.current_charges = SPAM_PENALTY
        if narrator:
            narrator.warn(f"Move {move_used.value} => spam penalty => now -1 charges.")

    for move in ALL_MOVES:
        if move is move_used:
            continue
        stats = combatant.move_stats(move)
        if stats.current_charges == SPAM_PENALTY:
            stats.current_charges = 0
            if narrator:
                narrator.info(f"Move {move.value} from -1 to 0 after using a different move.")
        elif 0 <= stats.current_charges < stats.max_charges:
            stats.current_charges += 1
