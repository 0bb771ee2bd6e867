"""
TesourimEnv - the treasure hunt as a Gymnasium environment
----------------------------------------------------------
- One episode is one level: memorize the grid, then reach the treasure
- Discrete action space: one logical input edge per step (see `Action`)
- Vector observation: visible grid + player/aim state + nearest bullets
- Reward shaping from win/loss, traps, bullet hits, reflects and kills

Quick test:
    python -m tesourim.env
"""

from __future__ import annotations

import random
import time
from typing import Any, Dict, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import (
    CELL_COLORS,
    COLORS,
    GAME_FRAMES,
    MAX_GRID_SIZE,
    MEMORIZE_FRAMES,
    START_LIVES,
    START_ROCKS,
)
from .controller import Action, GameController, InputSnapshot
from .entities import CellView, GameState
from .utils import clamp, grid_round, seed_everything

CELL_CODES = {
    CellView.HIDDEN: 0.0,
    CellView.EMPTY: 0.25,
    CellView.FALLEN: 0.5,
    CellView.TRAP: -0.5,
    CellView.TREASURE: 1.0,
}
OUTSIDE_CODE = -1.0

PHASES = (GameState.MEMORIZING, GameState.PLAYING, GameState.WON, GameState.LOST)

DEFAULT_REWARDS = {
    "R_WIN": 10.0,
    "R_LOSS": 5.0,
    "R_TRAP": 1.0,
    "R_HIT": 1.0,
    "R_REFLECT": 0.2,
    "R_KILL": 1.0,
    "R_TIME": 0.001,
}


class TesourimEnv(gym.Env):
    """Single-level treasure hunt environment"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        grid_size: int = 6,
        difficulty: int = 1,
        max_steps: int = 3600,
        memorize_frames: int = MEMORIZE_FRAMES,
        game_frames: int = GAME_FRAMES,
        k_bullets: int = 5,
        k_enemies: int = 3,
        reward_config: Optional[Dict[str, float]] = None,
        cell_pixels: int = 20,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode

        self.grid_size = grid_size
        self.difficulty = difficulty
        self.max_steps = max_steps
        self.memorize_frames = memorize_frames
        self.game_frames = game_frames
        self.k_bullets = k_bullets
        self.k_enemies = k_enemies
        self.rewards = dict(DEFAULT_REWARDS, **(reward_config or {}))
        self.cell_pixels = cell_pixels

        # Every action except EXIT
        self.action_space = spaces.Discrete(len(Action) - 1)

        # Grid: MAX_GRID_SIZE^2 cell codes
        # Player pos(2) aim pos(2) aiming(1) phase(4) lives(1) rocks(1) timers(2)
        # Each bullet: rel pos(2) reflected(1)
        # Each enemy: rel x(1) alive(1)
        obs_dim = (MAX_GRID_SIZE * MAX_GRID_SIZE + 2 + 2 + 1 + 4 + 1 + 1 + 2
                   + self.k_bullets * 3 + self.k_enemies * 2)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._window = None
        self._rng: Optional[random.Random] = None
        self.game: GameController = None  # type: ignore
        self._step_count = 0

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)
        if seed is not None or self._rng is None:
            self._rng = random.Random(seed)

        self._step_count = 0
        self.game = GameController(
            grid_size=self.grid_size,
            difficulty=self.difficulty,
            max_grid_size=MAX_GRID_SIZE,
            memorize_frames=self.memorize_frames,
            game_frames=self.game_frames,
            rng=self._rng,
        )
        if self._window is not None:
            self._window.game = self.game

        return self._get_obs(), self._get_info()

    def step(self, action):
        action = Action(int(action))
        self.game.update(InputSnapshot.of(action))

        reward = self._compute_reward()
        terminated = self.game.state in (GameState.WON, GameState.LOST)
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        game = self.game
        size = game.grid_size

        grid = np.full((MAX_GRID_SIZE, MAX_GRID_SIZE), OUTSIDE_CODE, dtype=np.float32)
        for node, view in enumerate(game.grid_view()):
            row, col = divmod(node, size)
            grid[row, col] = CELL_CODES[view]

        def col_code(x: float) -> float:
            return clamp(x / max(1, size - 1) * 2 - 1, -1, 1)

        def row_code(y: float) -> float:
            # Staging row -1 maps to -1, top row to +1
            return clamp((y + 1) / size * 2 - 1, -1, 1)

        obs_parts = list(grid.ravel())
        obs_parts += [col_code(game.player_x), row_code(game.player_y)]
        obs_parts += [col_code(game.aim_x), row_code(game.aim_y), 1.0 if game.aiming else -1.0]
        obs_parts += [1.0 if game.state is phase else 0.0 for phase in PHASES]
        obs_parts += [
            clamp(game.lives / max(1, START_LIVES * 2) * 2 - 1, -1, 1),
            clamp(game.rocks / max(1, START_ROCKS) * 2 - 1, -1, 1),
            clamp(game.timer / max(1, game.memorize_frames) * 2 - 1, -1, 1),
            clamp(game.game_timer / max(1, game.game_frames) * 2 - 1, -1, 1),
        ]

        # Bullets: top-K nearest to the player
        live = []
        for enemy, bullet in game.squad.bullets():
            if not (bullet.active and enemy.alive):
                continue
            dx = grid_round(bullet.x) - game.player_x
            dy = (size - 1 - grid_round(bullet.y)) - game.player_y
            live.append((dx * dx + dy * dy, dx, dy, bullet.reflected))
        live.sort(key=lambda b: b[0])
        for i in range(self.k_bullets):
            if i < len(live):
                _, dx, dy, reflected = live[i]
                obs_parts += [clamp(dx / size, -1, 1), clamp(dy / size, -1, 1),
                              1.0 if reflected else -1.0]
            else:
                obs_parts += [0.0, 0.0, 0.0]

        for i in range(self.k_enemies):
            if i < len(game.squad.enemies):
                e = game.squad.enemies[i]
                obs_parts += [clamp((e.x - game.player_x) / size, -1, 1), 1.0 if e.alive else -1.0]
            else:
                obs_parts += [0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self) -> float:
        r = self.rewards
        events = self.game.events

        reward = 0.0
        reward -= r["R_TRAP"] * events.get("trap", 0)
        reward -= r["R_HIT"] * events.get("hit", 0)
        reward += r["R_REFLECT"] * events.get("reflect", 0)
        reward += r["R_KILL"] * events.get("kill", 0)
        reward -= r["R_TIME"]

        if self.game.state is GameState.WON:
            reward += r["R_WIN"]
        elif self.game.state is GameState.LOST:
            reward -= r["R_LOSS"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "state": self.game.state.value,
            "lives": self.game.lives,
            "rocks": self.game.rocks,
            "game_timer": self.game.game_timer,
            "fallen_traps": len(self.game.fallen_traps),
            "num_enemies": sum(1 for e in self.game.squad.enemies if e.alive),
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self.render_mode == "human":
            if self._window is None:
                # arcade needs a display, only pull it in when a window is wanted
                from .window import TesourimWindow
                self._window = TesourimWindow(self.game)
            # Keep the window responsive, then show the frame
            self._window.dispatch_events()
            self._window.on_draw()
            self._window.flip()
            return None
        return self._render_rgb_array()

    def _render_rgb_array(self) -> np.ndarray:
        """Top-down picture: two enemy rows, the grid, then the staging row."""
        game = self.game
        size = game.grid_size
        cp = self.cell_pixels
        rows = size + 3
        frame = np.zeros((rows * cp, size * cp, 3), dtype=np.uint8)
        frame[:] = COLORS["background"]

        def paint(row: int, col: int, color, inset: int = 0):
            if 0 <= row < rows and 0 <= col < size:
                frame[row * cp + inset:(row + 1) * cp - inset,
                      col * cp + inset:(col + 1) * cp - inset] = color

        for node, view in enumerate(game.grid_view()):
            row, col = divmod(node, size)
            paint(2 + size - 1 - row, col, CELL_COLORS[view], inset=1)

        for enemy in game.squad.enemies:
            if enemy.alive:
                paint(0, grid_round(enemy.x), COLORS["enemy"], inset=2)
            for bullet in enemy.bullets:
                if bullet.active and enemy.alive:
                    color = COLORS["reflected"] if bullet.reflected else COLORS["bullet"]
                    paint(2 + grid_round(bullet.y), grid_round(bullet.x), color, inset=cp // 3)

        paint(2 + size - 1 - game.player_y, game.player_x, COLORS["player"], inset=3)
        return frame

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: int = 42):
    """Run a random episode for testing"""
    env = TesourimEnv(render_mode="human" if render else None, memorize_frames=60)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode... Press ESC or close window to exit early.")

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

        if render:
            time.sleep(1 / 60)

    print(f"Random episode return: {total:.3f} ({info['state']} after {info['step']} steps)")
    env.close()


if __name__ == "__main__":
    run_random_episode(render=True)
