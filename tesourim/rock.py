"""
Thrown rocks: reveal the aimed cell on throw, then fly toward it
"""

import math

from .config import ROCK_ARRIVAL, ROCK_MAX_CELLS, ROCK_SPEED
from .entities import Rock
from .utils import normalize


def throw_rock(player_x: int, player_y: int, aim_x: int, aim_y: int,
               grid_size: int, cell_size: int) -> Rock:
    """
    Create a rock flying from the player's cell to the aimed cell.

    Positions are in pixel units measured from the top-left of the grid,
    so y = (grid_size - 1 - row) * cell_size. The aimed node is revealed
    right away.
    """
    rock = Rock(
        x=float(player_x * cell_size),
        y=float((grid_size - 1 - player_y) * cell_size),
        target_x=aim_x * cell_size,
        target_y=(grid_size - 1 - aim_y) * cell_size,
    )
    rock.revealed.add(aim_y * grid_size + aim_x)
    return rock


def update_rock(rock: Rock, cell_size: int):
    """Move one frame toward the target; deactivate once within reach."""
    if not rock.active:
        return

    dx = rock.target_x - rock.x
    dy = rock.target_y - rock.y
    length = math.hypot(dx, dy)
    if length < ROCK_ARRIVAL:
        rock.active = False
        return

    max_distance = float(ROCK_MAX_CELLS * cell_size)
    if length > max_distance:
        dx, dy = dx * max_distance / length, dy * max_distance / length

    ux, uy = normalize(dx, dy)
    rock.x += ux * ROCK_SPEED
    rock.y += uy * ROCK_SPEED
