"""
Level generation: treasure and trap placement, validated for reachability
"""

import logging
import random

from typing import Set

from .config import (
    DIFFICULTIES,
    DIFFICULTY_TRAP_PERCENT,
    MAX_GENERATION_ATTEMPTS,
    TRAP_DENSITY_PERCENT,
)
from .entities import Level
from .graph import can_reach, generate_graph

logger = logging.getLogger(__name__)


class GenerationExhausted(RuntimeError):
    """No reachable layout was found within the attempt budget"""


def _check_args(size: int, difficulty: int):
    if size < 2:
        raise ValueError(f"grid size must be at least 2, got {size}")
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"difficulty must be one of {DIFFICULTIES}, got {difficulty}")


def trap_budget(size: int, difficulty: int) -> int:
    """floor(0.75 * size^2 * factor) in integer arithmetic"""
    return (size * size * TRAP_DENSITY_PERCENT * DIFFICULTY_TRAP_PERCENT[difficulty]) // 10_000


def generate_treasure(size: int, rng=random) -> int:
    return rng.randrange(size * size)


def generate_traps(size: int, treasure: int, difficulty: int, rng=random) -> Set[int]:
    """
    Sample trap nodes without replacement, never on the treasure.

    At least one trap is always placed, even when the budget rounds to zero.
    """
    _check_args(size, difficulty)
    candidates = [node for node in range(size * size) if node != treasure]
    budget = max(1, trap_budget(size, difficulty))
    return set(rng.sample(candidates, min(budget, len(candidates))))


def level_setup(size: int, difficulty: int = 1, rng=random,
                max_attempts: int = MAX_GENERATION_ATTEMPTS) -> Level:
    """
    Build a level whose treasure is reachable from at least one cell of
    the bottom row without crossing a trap.

    Every failed attempt throws the whole layout away and resamples.
    """
    _check_args(size, difficulty)
    graph = generate_graph(size)

    for attempt in range(1, max_attempts + 1):
        target = generate_treasure(size, rng)
        traps = generate_traps(size, target, difficulty, rng)
        if any(can_reach(graph, traps, start, target) for start in range(size)):
            logger.debug("Level %dx%d (difficulty %d) generated after %d attempt(s)",
                         size, size, difficulty, attempt)
            return Level(size=size, target=target, traps=frozenset(traps))

    logger.error("No reachable %dx%d level after %d attempts", size, size, max_attempts)
    raise GenerationExhausted(
        f"could not generate a reachable {size}x{size} level in {max_attempts} attempts"
    )
