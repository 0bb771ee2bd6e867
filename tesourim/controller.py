"""
GameController - the turn-based state machine of the treasure hunt
-----------------------------------------------------------------

- Memorizing: the whole grid is shown while a countdown runs
- Playing: the grid is hidden; the player walks one cell per input edge,
  dodges (or reflects) enemy bullets and may throw rocks to reveal cells
- Won: the treasure was reached; CONFIRM levels up
- Lost: timeout or out of lives; RESTART replays the same layout

The controller is advanced with `update()` once per 60 Hz frame. All input
for a frame arrives as one `InputSnapshot` of just-pressed actions.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, FrozenSet, List, Optional, Set

from .config import (
    AIM_RADIUS,
    DIFFICULTIES,
    END_GAME_FRAMES,
    FPS,
    GAME_FRAMES,
    GRID_PIXELS,
    MAX_ENEMIES,
    MAX_GRID_SIZE,
    MAX_KILLERS,
    MEMORIZE_FRAMES,
    REFLECT_TOLERANCE,
    START_GRID_SIZE,
    START_LIVES,
    START_ROCKS,
    TIME_BONUS_FRAMES,
)
from .enemy import EnemySquad
from .entities import CellView, GameState, Level, Rock
from .level import level_setup
from .rock import throw_rock, update_rock
from .utils import clamp, grid_round

logger = logging.getLogger(__name__)


class Action(IntEnum):
    NOOP = 0
    LEFT = 1
    RIGHT = 2
    UP = 3
    DOWN = 4
    UP_LEFT = 5
    UP_RIGHT = 6
    DOWN_LEFT = 7
    DOWN_RIGHT = 8
    REFLECT = 9
    AIM = 10
    THROW = 11
    ADVANCE = 12
    CONFIRM = 13
    RESTART = 14
    EXIT = 15


# (dx, dy) with dy > 0 toward higher rows
MOVES = {
    Action.LEFT: (-1, 0),
    Action.RIGHT: (1, 0),
    Action.UP: (0, 1),
    Action.DOWN: (0, -1),
    Action.UP_LEFT: (-1, 1),
    Action.UP_RIGHT: (1, 1),
    Action.DOWN_LEFT: (-1, -1),
    Action.DOWN_RIGHT: (1, -1),
}
AIM_MOVES = {a: MOVES[a] for a in (Action.LEFT, Action.RIGHT, Action.UP, Action.DOWN)}

EVENT_KEYS = ("trap", "hit", "reflect", "kill", "throw")


@dataclass(frozen=True)
class InputSnapshot:
    """Actions whose key went down this frame"""
    pressed: FrozenSet[Action] = frozenset()

    @classmethod
    def of(cls, *actions: Action) -> "InputSnapshot":
        return cls(frozenset(actions))

    def __contains__(self, action) -> bool:
        return action in self.pressed


class GameController:
    """Owns the level, the enemies and the rocks, and advances them frame by frame."""

    def __init__(
        self,
        grid_size: int = START_GRID_SIZE,
        difficulty: int = 1,
        max_grid_size: int = MAX_GRID_SIZE,
        memorize_frames: int = MEMORIZE_FRAMES,
        game_frames: int = GAME_FRAMES,
        lives: int = START_LIVES,
        rocks: int = START_ROCKS,
        max_enemies: int = MAX_ENEMIES,
        max_killers: int = MAX_KILLERS,
        grid_pixels: int = GRID_PIXELS,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        level: Optional[Level] = None,
    ):
        if difficulty not in DIFFICULTIES:
            raise ValueError(f"difficulty must be one of {DIFFICULTIES}, got {difficulty}")
        if not 2 <= grid_size <= max_grid_size:
            raise ValueError(f"grid size must be in [2, {max_grid_size}], got {grid_size}")

        self.rng = rng if rng is not None else random.Random(seed)

        # Progression
        self.grid_size = grid_size
        self.difficulty = difficulty
        self.max_grid_size = max_grid_size
        self.memorize_frames = memorize_frames
        self.game_frames = game_frames
        self.base_lives = lives
        self.start_rocks = rocks
        self.max_enemies = max_enemies
        self.max_killers = max_killers
        self.grid_pixels = grid_pixels

        if level is not None and level.size != grid_size:
            raise ValueError(f"level is {level.size}x{level.size}, grid is {grid_size}x{grid_size}")
        self.level = level if level is not None else level_setup(grid_size, difficulty, self.rng)
        self.fallen_traps: Set[int] = set()

        self.finished = False
        self.quit_requested = False
        self.end_timer = 0
        self.events: Dict[str, int] = dict.fromkeys(EVENT_KEYS, 0)

        self._reset_round()

    # ----------------------------
    # Views
    # ----------------------------

    @property
    def cell_size(self) -> int:
        return self.grid_pixels // self.grid_size

    @property
    def revealed_nodes(self) -> Set[int]:
        revealed = set()
        for rock in self.thrown_rocks:
            revealed |= rock.revealed
        return revealed

    def cell_view(self, node: int) -> CellView:
        """What the player currently sees at `node`."""
        if node in self.fallen_traps:
            return CellView.FALLEN
        if self.state is GameState.MEMORIZING or node in self.revealed_nodes:
            if node in self.level.traps:
                return CellView.TRAP
            if node == self.level.target:
                return CellView.TREASURE
            return CellView.EMPTY
        return CellView.HIDDEN

    def grid_view(self) -> List[CellView]:
        return [self.cell_view(node) for node in range(self.grid_size * self.grid_size)]

    # ----------------------------
    # Frame update
    # ----------------------------

    def update(self, inputs: Optional[InputSnapshot] = None):
        """Advance the game by one frame."""
        inputs = inputs if inputs is not None else InputSnapshot()
        self.events = dict.fromkeys(EVENT_KEYS, 0)

        if Action.EXIT in inputs:
            self.quit_requested = True
            return

        if self.finished:
            self._update_end_game()
            return

        if self.state is GameState.MEMORIZING:
            self._update_memorizing(inputs)
            return

        if self.state is GameState.PLAYING:
            self._update_playing(inputs)

        if Action.RESTART in inputs:
            self.restart()

        if Action.CONFIRM in inputs and self.state is GameState.WON:
            self.advance_level()

    def _update_memorizing(self, inputs: InputSnapshot):
        self.timer -= 1
        if self.timer <= 0 or Action.ADVANCE in inputs:
            self._start_playing()
        else:
            self.message = f"Memorize in {self.timer // FPS} seconds! Press SPACE to start"

    def _update_playing(self, inputs: InputSnapshot):
        self.game_timer -= 1
        if self.game_timer <= 0:
            self._lose("Time's up! Press R to try again")
            return
        if self.lives <= 0:
            self._lose("Hit! Press R to restart")
            return

        self.events["kill"] += self.squad.update(self.player_x)
        self._resolve_bullets(inputs)
        if self.state is not GameState.PLAYING:
            return

        self._update_aiming(inputs)
        for rock in self.thrown_rocks:
            update_rock(rock, self.cell_size)
        if self.state is not GameState.PLAYING or self.aiming:
            return

        for action, (dx, dy) in MOVES.items():
            if action in inputs:
                self.try_move(dx, dy)
                if self.state is not GameState.PLAYING:
                    break

    def _update_end_game(self):
        self.message = "Congratulations! You beat the game!"
        self.end_timer -= 1
        if self.end_timer <= 0:
            self.quit_requested = True

    # ----------------------------
    # Bullets
    # ----------------------------

    def _resolve_bullets(self, inputs: InputSnapshot):
        """Reflect at most one bullet per REFLECT edge, then apply hits."""
        reflect = Action.REFLECT in inputs
        for enemy, bullet in self.squad.bullets():
            if not (bullet.active and enemy.alive):
                continue
            col = grid_round(bullet.x)
            row = self.grid_size - 1 - grid_round(bullet.y)

            if (reflect and not bullet.reflected and col == self.player_x
                    and abs(row - self.player_y) <= REFLECT_TOLERANCE):
                bullet.dy = -1.0
                bullet.reflected = True
                reflect = False
                self.events["reflect"] += 1
                continue

            # The staging row is out of the line of fire
            if (not bullet.reflected and self.player_y >= 0
                    and col == self.player_x and row == self.player_y):
                self.lives -= 1
                bullet.active = False
                self.events["hit"] += 1
                if self.lives <= 0:
                    self._lose("Hit! Press R to try again")
                    return

    # ----------------------------
    # Aiming and rocks
    # ----------------------------

    def _update_aiming(self, inputs: InputSnapshot):
        if Action.AIM in inputs and self.rocks > 0:
            self.aiming = not self.aiming
            last = self.grid_size - 1
            self.aim_x = int(clamp(self.player_x, 0, last))
            self.aim_y = int(clamp(self.player_y, 0, last))

        if not self.aiming:
            return

        for action, (dx, dy) in AIM_MOVES.items():
            if action in inputs:
                self.move_aim(dx, dy)

        if Action.THROW in inputs:
            self.throw()

    def move_aim(self, dx: int, dy: int):
        """Move the crosshair, keeping it on the grid and within reach."""
        last = self.grid_size - 1
        self.aim_x = int(clamp(self.aim_x + dx, 0, last))
        self.aim_y = int(clamp(self.aim_y + dy, 0, last))

        ox, oy = self.aim_x - self.player_x, self.aim_y - self.player_y
        if math.hypot(ox, oy) > AIM_RADIUS:
            angle = math.atan2(oy, ox)
            self.aim_x = int(clamp(self.player_x + int(AIM_RADIUS * math.cos(angle)), 0, last))
            self.aim_y = int(clamp(self.player_y + int(AIM_RADIUS * math.sin(angle)), 0, last))

    def throw(self) -> Optional[Rock]:
        """Throw a rock at the crosshair, revealing that cell at once."""
        if self.rocks <= 0:
            return None
        self.rocks -= 1
        rock = throw_rock(self.player_x, self.player_y, self.aim_x, self.aim_y,
                          self.grid_size, self.cell_size)
        self.thrown_rocks.append(rock)
        self.aiming = False
        self.events["throw"] += 1

        for node in rock.revealed:
            if node == self.level.target:
                self._win("You found the treasure! Press ENTER to continue")
            elif node in self.level.traps:
                self.fallen_traps.add(node)
        return rock

    # ----------------------------
    # Movement
    # ----------------------------

    def try_move(self, dx: int, dy: int) -> bool:
        """
        Step one cell. The staging row (y == -1) is allowed, fallen traps
        are not. Returns whether the player moved.
        """
        nx, ny = self.player_x + dx, self.player_y + dy
        node = ny * self.grid_size + nx
        if not (0 <= nx < self.grid_size and -1 <= ny < self.grid_size):
            return False
        if ny >= 0 and node in self.fallen_traps:
            return False

        self.player_x, self.player_y = nx, ny
        if ny < 0:
            return True

        if node in self.level.traps:
            self.fallen_traps.add(node)
            self.player_x, self.player_y = 0, -1
            self.aiming = False
            self.events["trap"] += 1
            self.message = "Trap! Back to the start"
            logger.debug("Trap at node %d, player sent back to staging", node)
        elif node == self.level.target:
            self._win("You won! Press ENTER to advance")
        return True

    # ----------------------------
    # Transitions
    # ----------------------------

    def _start_playing(self):
        self.state = GameState.PLAYING
        self.message = ""
        logger.info("Playing %dx%d, difficulty %d", self.grid_size, self.grid_size, self.difficulty)

    def _win(self, message: str):
        self.state = GameState.WON
        self.aiming = False
        self.message = message
        logger.info("Treasure found at node %d", self.level.target)

    def _lose(self, message: str):
        self.state = GameState.LOST
        self.aiming = False
        self.fallen_traps.clear()
        self.message = message
        logger.info("Lost: %s", message)

    def restart(self):
        """
        While playing, send the player back to staging. After a loss, replay
        the same layout from the memorizing phase.
        """
        if self.state is GameState.PLAYING:
            self.player_x, self.player_y = 0, -1
            self.aiming = False
            self.message = ""
        elif self.state is GameState.LOST:
            logger.debug("Restarting the %dx%d level", self.grid_size, self.grid_size)
            self._reset_round()

    def advance_level(self):
        """Level up after a win and lay out a fresh grid."""
        if self.state is not GameState.WON:
            return
        self._level_up()
        if self.finished:
            self.end_timer = END_GAME_FRAMES
            self.message = "Congratulations! You beat the game!"
            logger.info("Reached the %dx%d grid, game complete", self.grid_size, self.grid_size)
            return
        self.level = level_setup(self.grid_size, self.difficulty, self.rng)
        self._reset_round()

    def _level_up(self):
        self.difficulty += 1
        if self.difficulty > max(DIFFICULTIES):
            self.difficulty = min(DIFFICULTIES)
            self.game_frames += TIME_BONUS_FRAMES
            self.grid_size += 1
            if self.grid_size % 2 == 0:
                self.base_lives += 1
        if self.grid_size >= self.max_grid_size:
            self.finished = True
        logger.debug("Level up: grid %d, difficulty %d", self.grid_size, self.difficulty)

    def _reset_round(self):
        self.state = GameState.MEMORIZING
        self.player_x, self.player_y = 0, -1
        self.timer = self.memorize_frames
        self.game_timer = self.game_frames
        self.lives = self.base_lives
        self.rocks = self.start_rocks
        self.thrown_rocks: List[Rock] = []
        self.aiming = False
        self.aim_x, self.aim_y = 0, 0
        self.fallen_traps.clear()
        self.squad = EnemySquad(
            self.grid_size,
            difficulty=self.difficulty,
            max_enemies=self.max_enemies,
            max_killers=self.max_killers,
            rng=self.rng,
        )
        self.message = f"Memorize in {self.timer // FPS} seconds!"
