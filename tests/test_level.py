import random

import pytest

import tesourim.level as level_module
from tesourim.graph import can_reach, generate_graph
from tesourim.level import (
    GenerationExhausted,
    generate_traps,
    generate_treasure,
    level_setup,
    trap_budget,
)


def test_trap_budget():
    assert trap_budget(6, 1) == 16
    assert trap_budget(6, 2) == 21
    assert trap_budget(6, 3) == 27
    assert trap_budget(7, 1) == 22
    assert trap_budget(10, 1) == 45


def test_treasure_in_range():
    rng = random.Random(1)
    for _ in range(200):
        assert 0 <= generate_treasure(6, rng) < 36


@pytest.mark.parametrize("difficulty", [1, 2, 3])
def test_traps_avoid_treasure(difficulty):
    rng = random.Random(difficulty)
    for _ in range(100):
        treasure = generate_treasure(7, rng)
        traps = generate_traps(7, treasure, difficulty, rng)
        assert treasure not in traps
        assert len(traps) == trap_budget(7, difficulty)
        assert all(0 <= t < 49 for t in traps)


def test_traps_never_empty(monkeypatch):
    monkeypatch.setattr(level_module, "trap_budget", lambda size, difficulty: 0)
    traps = generate_traps(6, 0, 1, random.Random(3))
    assert len(traps) == 1
    assert 0 not in traps


def test_tiny_grid():
    traps = generate_traps(2, 3, 1, random.Random(0))
    assert traps and 3 not in traps


@pytest.mark.parametrize("size,difficulty", [(6, 1), (6, 2), (6, 3), (8, 2), (10, 3)])
def test_generated_levels_are_reachable(size, difficulty):
    graph = generate_graph(size)
    for seed in range(20):
        level = level_setup(size, difficulty, random.Random(seed))
        assert level.size == size
        assert level.target not in level.traps
        assert any(can_reach(graph, level.traps, start, level.target) for start in range(size))


def test_generation_gives_up(monkeypatch):
    monkeypatch.setattr(level_module, "can_reach", lambda *args: False)
    with pytest.raises(GenerationExhausted):
        level_setup(6, 1, random.Random(0), max_attempts=5)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        level_setup(1, 1)
    with pytest.raises(ValueError):
        level_setup(6, 4)
