"""
Enemy AI and bullet simulation

Enemies patrol a row above the grid. Each one either wanders between
random columns or, in pursuit ("killer") mode, chases the player's column
with a PID controller. When lined up with the player they shoot bullets
straight down the column.
"""

from __future__ import annotations

import logging
import random
from typing import Iterator, List, Tuple

from .config import (
    BULLET_SPEED,
    ENEMY_Y,
    MAX_ENEMIES,
    MAX_KILLERS,
    MODE_SWITCH_FRAMES,
    PID_GAINS,
    SHOT_COOLDOWN_FRAMES,
    WANDER_ARRIVAL,
    WANDER_SPEED,
)
from .entities import Bullet, Enemy, EnemyMode
from .utils import clamp, coin_flip, grid_round, russian_roulette

logger = logging.getLogger(__name__)


def calculate_pid(setpoint: float, current: float, difficulty: int,
                  err_acum: float, prev_err: float) -> Tuple[float, float, float]:
    """
    One PID step toward `setpoint`.

    Returns (output, new accumulated error, error) where output is clamped
    to [-1, 1].
    """
    kp, ki, kd = PID_GAINS[difficulty]
    err = setpoint - current
    err_acum += err
    derivative = err - prev_err
    output = kp * err + ki * err_acum + kd * derivative
    return clamp(output, -1.0, 1.0), err_acum, err


def wander_step(current: float, target: float, rng=random) -> float:
    """
    Movement delta toward `target`: a capped step, or a random jump in
    [-1, 1] once the target has been reached.
    """
    if abs(current - target) < WANDER_ARRIVAL:
        return rng.uniform(-1.0, 1.0)

    direction = target - current
    if abs(direction) > WANDER_SPEED:
        return WANDER_SPEED if direction > 0 else -WANDER_SPEED
    return direction


def random_column(grid_size: int, rng=random) -> float:
    return rng.random() * (grid_size - 1)


def enemy_count(grid_size: int, max_enemies: int = MAX_ENEMIES) -> int:
    """One enemy from grid 7 onward, one more per size, capped."""
    return max(0, min(grid_size - 6, max_enemies))


class EnemySquad:
    """Owns the enemies of a level and the bullets they fire."""

    def __init__(self, grid_size: int, difficulty: int = 1,
                 max_enemies: int = MAX_ENEMIES, max_killers: int = MAX_KILLERS,
                 rng=random):
        self.grid_size = grid_size
        self.difficulty = difficulty
        self.max_killers = max_killers
        self.rng = rng

        n = enemy_count(grid_size, max_enemies)
        spacing = grid_size / (n + 1)
        self.enemies: List[Enemy] = [
            Enemy(x=spacing * (i + 1), target_x=random_column(grid_size, rng))
            for i in range(n)
        ]

    def __len__(self):
        return len(self.enemies)

    @property
    def killers_count(self) -> int:
        return sum(1 for e in self.enemies if e.alive and e.mode is EnemyMode.PURSUIT)

    def set_mode(self, enemy: Enemy, mode: EnemyMode) -> bool:
        """
        Switch an enemy's mode. Entering pursuit is refused once
        `max_killers` enemies are already chasing.
        """
        if mode is enemy.mode:
            return True
        if mode is EnemyMode.PURSUIT:
            if self.killers_count >= self.max_killers:
                return False
            enemy.err_acum = 0.0
            enemy.prev_err = 0.0
        enemy.mode = mode
        return True

    def bullets(self) -> Iterator[Tuple[Enemy, Bullet]]:
        for enemy in self.enemies:
            for bullet in enemy.bullets:
                yield enemy, bullet

    # ----------------------------
    # Per-frame update
    # ----------------------------

    def update(self, player_x: int) -> int:
        """Advance every living enemy one frame. Returns the number of kills."""
        kills = 0
        for index, enemy in enumerate(self.enemies):
            if not enemy.alive:
                continue
            self._update_mode(enemy)
            self._move(enemy, player_x)
            self._try_fire(enemy, index, player_x)
            kills += self._update_bullets(enemy)
        return kills

    def _update_mode(self, enemy: Enemy):
        if enemy.mode_timer == 0:
            enemy.mode_timer = MODE_SWITCH_FRAMES
            wanted = EnemyMode.PURSUIT if coin_flip(self.rng) else EnemyMode.WANDER
            self.set_mode(enemy, wanted)
            if enemy.mode is EnemyMode.WANDER:
                enemy.target_x = random_column(self.grid_size, self.rng)
        else:
            enemy.mode_timer -= 1

    def _move(self, enemy: Enemy, player_x: int):
        if enemy.mode is EnemyMode.WANDER:
            arrived = abs(enemy.x - enemy.target_x) < WANDER_ARRIVAL
            enemy.x += wander_step(enemy.x, enemy.target_x, self.rng)
            if arrived:
                enemy.target_x = random_column(self.grid_size, self.rng)
            # Re-pick if the step itself landed on the target
            if abs(enemy.x - enemy.target_x) < WANDER_ARRIVAL:
                enemy.target_x = random_column(self.grid_size, self.rng)
        else:
            output, enemy.err_acum, enemy.prev_err = calculate_pid(
                float(player_x), enemy.x, self.difficulty, enemy.err_acum, enemy.prev_err
            )
            enemy.x += output

        enemy.x = clamp(enemy.x, 0.0, float(self.grid_size - 1))

    def _try_fire(self, enemy: Enemy, index: int, player_x: int):
        if enemy.shot_cooldown > 0:
            enemy.shot_cooldown -= 1
        if enemy.shot_cooldown != 0 or abs(player_x - enemy.x) >= 0.5:
            return

        # Two independent rolls: a live round and a dud can both come out
        if russian_roulette(self.difficulty, self.rng):
            enemy.bullets.append(Bullet(x=enemy.x, y=ENEMY_Y, owner=index))
        if not russian_roulette(self.difficulty, self.rng):
            enemy.bullets.append(Bullet(x=enemy.x, y=ENEMY_Y, owner=index, active=False))
        enemy.shot_cooldown = SHOT_COOLDOWN_FRAMES

    def _update_bullets(self, enemy: Enemy) -> int:
        kills = 0
        for bullet in enemy.bullets:
            if not bullet.active:
                continue
            bullet.y += bullet.dy * BULLET_SPEED

            owner = self.enemies[bullet.owner]
            if bullet.reflected and owner.alive:
                if (grid_round(bullet.x) == grid_round(owner.x)
                        and grid_round(bullet.y) == grid_round(ENEMY_Y)):
                    owner.alive = False
                    bullet.active = False
                    kills += 1
                    logger.debug("Enemy %d at x=%.2f killed by its own reflected bullet",
                                 bullet.owner, owner.x)

            if bullet.y < ENEMY_Y - 1 or bullet.y >= self.grid_size:
                bullet.active = False

        enemy.bullets = [b for b in enemy.bullets if b.active]
        return kills
