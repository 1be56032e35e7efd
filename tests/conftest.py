"""Shared fixtures for simulator tests."""

import pytest

from rpsim.state import Combatant, MoveStats, Pool


class ScriptedRandom:
    """Replays a fixed sequence of [0, 1) values."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        if not self.values:
            raise AssertionError("scripted random source exhausted")
        self.calls += 1
        return self.values.pop(0)


def make_combatant(
    name="Tester",
    hp=20,
    shield=0,
    shield_max=None,
    rock=(0, 0, 3),
    paper=(0, 0, 3),
    scissor=(0, 0, 3),
):
    """Combatant with (atk, def, charges) per move; max charges equal start."""
    def move(spec):
        atk, defense, charges = spec
        return MoveStats.fresh(atk, defense, charges)

    return Combatant(
        id=name,
        rock=move(rock),
        paper=move(paper),
        scissor=move(scissor),
        health=Pool.full(hp),
        shield=Pool(
            current=shield,
            current_max=shield if shield_max is None else shield_max,
            starting=shield,
            starting_max=shield if shield_max is None else shield_max,
        ),
    )


@pytest.fixture
def scripted():
    """Factory for scripted random sources."""
    return ScriptedRandom


@pytest.fixture
def combatant_factory():
    return make_combatant
