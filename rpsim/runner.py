"""
Headless Run Simulator.

Plays a player through an ordered enemy roster with loot phases between
victories, and aggregates many runs into summary statistics.
"""

import argparse
import copy
import sys
import time
from typing import Dict

import numpy as np

from rpsim.loot import choose_loot
from rpsim.mechanics import simulate_battle
from rpsim.rng import RandomSource, check_seed
from rpsim.scenario import load_scenario, create_example_scenario
from rpsim.state import RunConfig, RunResult
from reporting.logger import RunLogger
from reporting.narrator import Narrator, SILENT


def simulate_run(
    config: RunConfig,
    rng=None,
    narrator: Narrator = SILENT,
    logger: RunLogger = None
) -> RunResult:
    """
    Run a single simulation.

    Args:
        config: Run configuration. Never mutated.
        rng: Random source. Defaults to a RandomSource seeded with config.seed
        narrator: Progress narration (silent by default)
        logger: Optional JSONL run logger

    Returns:
        RunResult for this run
    """
    if rng is None:
        rng = RandomSource(config.seed)

    enemies = [e.to_combatant() for e in config.enemies]
    player = config.player.copy()
    consumables = copy.deepcopy(config.consumables)
    result = RunResult(final_player=player)

    if logger:
        logger.start_run(seed=getattr(rng, "seed", config.seed))

    limit = config.enemy_limit()

    for i in range(limit):
        enemy = enemies[i]
        narrator.separator()
        narrator.info(f"BATTLE #{i + 1} vs {enemy.id}")
        narrator.combatant_overview("Player", player)
        narrator.combatant_overview(f"Enemy #{i + 1}", enemy)

        if logger:
            logger.start_battle(i, enemy.id)

        won = simulate_battle(
            player,
            enemy,
            rng,
            consumables=consumables,
            used_log=result.used_consumables,
            narrator=narrator,
            logger=logger,
            max_rounds=config.max_rounds,
        )
        if not won:
            narrator.warn(f"Player was defeated by enemy #{i + 1}.")
            result.survived = False
            if logger:
                logger.end_run(result)
            return result

        result.enemies_defeated += 1

        # loot only if another enemy is coming
        if i < limit - 1:
            narrator.info(f"Victory in BATTLE #{i + 1}, picking loot...")
            chosen = choose_loot(
                player,
                config.loot_pool,
                rng,
                weight_fn=config.loot_weight_fn,
                sample_size=config.sample_size,
                narrator=narrator,
            )
            if chosen is not None:
                result.loot_picked.append(chosen)
                if logger:
                    logger.log_loot(chosen)

    narrator.newline()
    narrator.success(f"Run complete: Player survived all {result.enemies_defeated}/{limit} battles.")

    result.survived = True
    if logger:
        logger.end_run(result)
    return result


def simulate_multiple_runs(
    config: RunConfig,
    n_runs: int = 10,
    base_seed: int = None,
    detailed: bool = False,
    narrator: Narrator = None,
    logger: RunLogger = None
) -> Dict:
    """
    Run several independent simulations and aggregate statistics.

    Run ``i`` is seeded with ``base_seed + i`` (base_seed falls back to
    config.seed); without any seed every run is unseeded.

    Returns:
        Aggregated statistics dict
    """
    if narrator is None:
        narrator = Narrator(enabled=True)
    run_narrator = narrator if detailed else SILENT

    if base_seed is None:
        base_seed = config.seed

    all_results = []
    for i in range(max(0, n_runs)):
        seed = base_seed + i if base_seed is not None else None
        if detailed:
            narrator.separator()
            narrator.info(f"SIM RUN #{i + 1} (seed={seed})")

        result = simulate_run(config, rng=RandomSource(seed), narrator=run_narrator, logger=logger)
        all_results.append(result)

    if all_results:
        defeated = [r.enemies_defeated for r in all_results]
        avg_defeated = float(np.mean(defeated))
        std_defeated = float(np.std(defeated))
        survival_rate = sum(1 for r in all_results if r.survived) / len(all_results)
    else:
        avg_defeated = 0.0
        std_defeated = 0.0
        survival_rate = 0.0

    summary = {
        "n_runs": len(all_results),
        "avg_enemies_defeated": avg_defeated,
        "std_enemies_defeated": std_defeated,
        "survival_rate": survival_rate,
        "survival_pct": survival_rate * 100,
        "all_results": all_results,
    }

    narrator.separator()
    print_summary(summary, narrator)
    return summary


def print_summary(summary: Dict, narrator: Narrator):
    """Print the multi-run summary table."""
    narrator.table(
        ["Runs", "Avg Enemies Defeated", "Survival %"],
        [[
            summary["n_runs"],
            f"{summary['avg_enemies_defeated']:.2f}",
            f"{summary['survival_pct']:.2f}",
        ]],
    )


def main(argv=None):
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Simulate rock/paper/scissors dungeon runs")
    parser.add_argument("--scenario", type=str, default=None, help="Path to a scenario JSON file")
    parser.add_argument("--runs", type=int, default=1, help="Number of runs to simulate")
    parser.add_argument("--seed", type=int, default=None, help="Base random seed")
    parser.add_argument("--max-enemies", type=int, default=None, help="Only fight the first N enemies")
    parser.add_argument("--max-rounds", type=int, default=None, help="Count a battle as lost after N rounds")
    parser.add_argument("--detailed", action="store_true", help="Narrate every round")
    parser.add_argument("--log", action="store_true", help="Write JSONL run logs")
    parser.add_argument("--log-dir", type=str, default=None, help="Directory for JSONL logs")

    args = parser.parse_args(argv)
    narrator = Narrator(enabled=True)

    try:
        config = load_scenario(args.scenario) if args.scenario else create_example_scenario()
        if args.seed is not None:
            config.seed = check_seed(args.seed)
    except (OSError, ValueError) as e:
        narrator.error(f"could not load scenario: {e}")
        return 1

    if args.max_enemies is not None:
        config.max_enemies = args.max_enemies
    if args.max_rounds is not None:
        config.max_rounds = args.max_rounds

    logger = RunLogger(log_dir=args.log_dir, enabled=True) if args.log else None

    print("=" * 60)
    print("RPS Run Simulator")
    print("=" * 60)

    start_time = time.time()

    if args.runs == 1:
        result = simulate_run(
            config,
            narrator=narrator if args.detailed else SILENT,
            logger=logger,
        )
        print(f"\nEnemies defeated: {result.enemies_defeated}")
        print(f"Player survived all fights? {result.survived}")
        print(f"Used consumables: {result.used_consumables}")
        print(f"Chosen loot: {[loot.boon.value for loot in result.loot_picked]}")
    else:
        simulate_multiple_runs(
            config,
            n_runs=args.runs,
            detailed=args.detailed,
            narrator=narrator,
            logger=logger,
        )

    print(f"\nDone ({time.time() - start_time:.2f}s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
