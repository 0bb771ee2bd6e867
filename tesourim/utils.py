"""
Utility functions for game mechanics
"""

from __future__ import annotations
import math
import random
from typing import Tuple, Optional
import numpy as np


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def normalize(x: float, y: float, eps: float = 1e-8) -> Tuple[float, float]:
    """Normalize a vector to unit length"""
    l = math.hypot(x, y)
    if l < eps:
        return 0.0, 0.0
    return x / l, y / l


def grid_round(v: float) -> int:
    """Round to the nearest cell, halves away from zero"""
    return int(math.copysign(math.floor(abs(v) + 0.5), v))


def coin_flip(rng=random) -> bool:
    return rng.randrange(2) == 0


def russian_roulette(difficulty: int, rng=random) -> bool:
    """Roll a six-sided die; the harder the level, the more faces fire"""
    roll = rng.randint(1, 6)
    if difficulty == 3:
        return roll != 6
    if difficulty == 2:
        return roll % 2 == 0
    if difficulty == 1:
        return roll < 3
    return True


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
