import pytest

from tesourim.controller import Action, GameController
from tesourim.entities import Level

from tests.helpers import press


@pytest.fixture
def level6():
    """
    6x6 layout, rows counted from the bottom:
    treasure at (2, 2) = node 14, traps at (1, 0), (2, 1) and (2, 3)
    """
    return Level(size=6, target=14, traps=frozenset({1, 8, 20}))


@pytest.fixture
def game(level6):
    return GameController(grid_size=6, difficulty=1, level=level6, seed=0)


@pytest.fixture
def playing(game):
    press(game, Action.ADVANCE)
    return game


@pytest.fixture
def level7():
    """7x7 layout with one enemy; column 3 is free of traps"""
    return Level(size=7, target=48, traps=frozenset({10, 22}))


@pytest.fixture
def armed(level7):
    """Playing on a 7x7 grid with a single, parked enemy"""
    game = GameController(grid_size=7, difficulty=1, level=level7, seed=0)
    press(game, Action.ADVANCE)
    enemy = game.squad.enemies[0]
    enemy.mode_timer = 10_000
    enemy.shot_cooldown = 10_000
    return game
