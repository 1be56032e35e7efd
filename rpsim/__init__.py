# Rock/paper/scissors run simulator
# This module provides:
# - rng.py: injectable random source
# - state.py: combatant, loot and run containers
# - charges.py: per-move charge tracking and move selection
# - mechanics.py: round resolution, consumables, battle loop
# - loot.py: weighted loot sampling and loot effects
# - scenario.py: scenario loading and the built-in example
# - runner.py: single and multi-run orchestration

__version__ = "0.1.0"
