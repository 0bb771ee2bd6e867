"""
Game entity dataclasses
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Set


class GameState(Enum):
    MEMORIZING = "memorizing"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class EnemyMode(Enum):
    WANDER = "wander"
    PURSUIT = "pursuit"  # "killer mode"


class CellView(Enum):
    """What the player can currently see of a grid cell"""
    HIDDEN = "hidden"
    EMPTY = "empty"
    TRAP = "trap"
    TREASURE = "treasure"
    FALLEN = "fallen"


@dataclass(frozen=True)
class Level:
    """A validated layout: the treasure is reachable from the bottom row"""
    size: int
    target: int
    traps: FrozenSet[int]


@dataclass
class Bullet:
    """Enemy projectile. `y` counts rows from the top of the grid."""
    x: float
    y: float
    owner: int  # index into the squad's enemy list
    dy: float = 1.0
    active: bool = True
    reflected: bool = False


@dataclass
class Enemy:
    """Enemy that patrols above the grid and shoots down columns"""
    x: float
    target_x: float
    mode: EnemyMode = EnemyMode.WANDER
    err_acum: float = 0.0
    prev_err: float = 0.0
    shot_cooldown: int = 0
    mode_timer: int = 0
    alive: bool = True
    bullets: List[Bullet] = field(default_factory=list)


@dataclass
class Rock:
    """Thrown rock, in pixel units of the current cell size"""
    x: float
    y: float
    target_x: int
    target_y: int
    active: bool = True
    revealed: Set[int] = field(default_factory=set)
