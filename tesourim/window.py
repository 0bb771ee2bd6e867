"""
Arcade window: draws the controller's state and feeds it key edges
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Set

import arcade

from .config import CELL_COLORS, COLORS, ENEMY_Y, FPS, GRID_PIXELS
from .controller import Action, GameController, InputSnapshot
from .entities import GameState

logger = logging.getLogger(__name__)

KEY_ACTIONS = {
    arcade.key.LEFT: (Action.LEFT,),
    arcade.key.A: (Action.LEFT,),
    arcade.key.RIGHT: (Action.RIGHT,),
    arcade.key.D: (Action.RIGHT,),
    arcade.key.UP: (Action.UP,),
    arcade.key.W: (Action.UP,),
    arcade.key.DOWN: (Action.DOWN,),
    arcade.key.S: (Action.DOWN,),
    arcade.key.Q: (Action.UP_LEFT,),
    arcade.key.E: (Action.UP_RIGHT,),
    arcade.key.Z: (Action.DOWN_LEFT,),
    arcade.key.C: (Action.DOWN_RIGHT,),
    arcade.key.V: (Action.REFLECT,),
    arcade.key.LCTRL: (Action.AIM,),
    arcade.key.RCTRL: (Action.AIM,),
    arcade.key.SPACE: (Action.ADVANCE, Action.THROW),
    arcade.key.ENTER: (Action.CONFIRM,),
    arcade.key.R: (Action.RESTART,),
    arcade.key.ESCAPE: (Action.EXIT,),
}

SPRITE_FILES = {
    "player_idle": "player_idle.png",
    "player_aiming": "player_aiming.png",
    "enemy": "enemy.png",
}


class AssetError(RuntimeError):
    """A required asset could not be loaded"""


def load_font(path: str):
    """Register the HUD font. Without it the game cannot start."""
    try:
        arcade.load_font(path)
    except Exception as exc:
        raise AssetError(f"could not load font {path!r}: {exc}") from exc


def load_sprite(path: str) -> Optional[arcade.Texture]:
    """Load an optional sprite; missing or broken files fall back to shapes."""
    try:
        return arcade.load_texture(path)
    except Exception as exc:
        logger.warning("Sprite %s unavailable (%s), drawing rectangles instead", path, exc)
        return None


class TesourimWindow(arcade.Window):
    """Arcade window for playing (or watching) the treasure hunt"""

    def __init__(self, game: GameController, width: int = 900, height: int = 1000,
                 fullscreen: bool = False, font_path: Optional[str] = None,
                 font_name: Optional[str] = None, sprites_dir: Optional[str] = None):
        super().__init__(width, height, "Tesourim", fullscreen=fullscreen, update_rate=1 / FPS)
        self.game = game
        self._pressed: Set[Action] = set()

        if font_path:
            load_font(font_path)
        self.font_name = font_name or ("calibri", "arial")

        self.sprites = {}
        if sprites_dir:
            for name, filename in SPRITE_FILES.items():
                self.sprites[name] = load_sprite(os.path.join(sprites_dir, filename))

    # ----------------------------
    # Input
    # ----------------------------

    def on_key_press(self, symbol: int, modifiers: int):
        self._pressed.update(KEY_ACTIONS.get(symbol, ()))

    def on_update(self, delta_time: float):
        snapshot = InputSnapshot(frozenset(self._pressed))
        self._pressed.clear()
        self.game.update(snapshot)
        if self.game.quit_requested:
            self.close()

    # ----------------------------
    # Layout
    # ----------------------------

    @property
    def cell(self) -> int:
        return self.game.cell_size

    @property
    def origin(self):
        """Bottom-left corner of row 0"""
        return (self.width - GRID_PIXELS) // 2, (self.height - GRID_PIXELS) // 2

    def cell_rect(self, col: float, row: float):
        ox, oy = self.origin
        left = ox + col * self.cell
        bottom = oy + row * self.cell
        return left, left + self.cell, bottom, bottom + self.cell

    # ----------------------------
    # Drawing
    # ----------------------------

    def _draw_texture(self, name: str, col: float, row: float, fallback):
        left, right, bottom, top = self.cell_rect(col, row)
        texture = self.sprites.get(name)
        if texture is None:
            arcade.draw_lrbt_rectangle_filled(left, right, bottom, top, fallback)
        else:
            arcade.draw_texture_rect(texture, arcade.LBWH(left, bottom, self.cell, self.cell))

    def on_draw(self):
        """Draw the current game state"""
        self.clear(COLORS["background"])
        game = self.game

        self._draw_header()
        self._draw_grid()
        self._draw_player()
        if game.aiming:
            self._draw_crosshair()
        self._draw_rocks()
        if game.state is GameState.PLAYING:
            self._draw_hud()
            self._draw_enemies()

        if game.message:
            arcade.draw_text(game.message, self.width / 2, self.height / 2, COLORS["message"],
                             24, anchor_x="center", font_name=self.font_name)

    def _draw_header(self):
        ox, oy = self.origin
        top = oy + GRID_PIXELS + self.cell * 2
        arcade.draw_text("Tesourim", self.width / 2, min(top + 20, self.height - 40),
                         COLORS["text"], 30, anchor_x="center", font_name=self.font_name)
        instructions = (f"ESC quit | WASD/arrows move | QEZC diagonals | V reflect | "
                        f"CTRL aim | level: {self.game.grid_size - 5}")
        arcade.draw_text(instructions, ox, 12, COLORS["text"], 11, font_name=self.font_name)

    def _draw_grid(self):
        game = self.game
        for node, view in enumerate(game.grid_view()):
            row, col = divmod(node, game.grid_size)
            left, right, bottom, top = self.cell_rect(col, row)
            arcade.draw_lrbt_rectangle_filled(left, right, bottom, top, CELL_COLORS[view])
            arcade.draw_lrbt_rectangle_outline(left, right, bottom, top, COLORS["grid_line"])

    def _draw_player(self):
        game = self.game
        name = "player_aiming" if game.aiming else "player_idle"
        self._draw_texture(name, game.player_x, game.player_y, COLORS["player"])

    def _draw_crosshair(self):
        left, right, bottom, top = self.cell_rect(self.game.aim_x, self.game.aim_y)
        cx, cy = (left + right) / 2, (bottom + top) / 2
        arcade.draw_line(cx - 10, cy, cx + 10, cy, COLORS["crosshair"], 2)
        arcade.draw_line(cx, cy - 10, cx, cy + 10, COLORS["crosshair"], 2)

    def _draw_rocks(self):
        ox, oy = self.origin
        grid_h = self.game.grid_size * self.cell
        for rock in self.game.thrown_rocks:
            if rock.active:
                x = ox + rock.x + self.cell / 2
                y = oy + grid_h - rock.y - self.cell / 2
                arcade.draw_circle_filled(x, y, 5, COLORS["rock"])

    def _draw_enemies(self):
        last = self.game.grid_size - 1
        for enemy in self.game.squad.enemies:
            if not enemy.alive:
                continue
            self._draw_texture("enemy", enemy.x, last - ENEMY_Y, COLORS["enemy"])
            for bullet in enemy.bullets:
                if not bullet.active:
                    continue
                left, right, bottom, top = self.cell_rect(bullet.x, last - bullet.y)
                color = COLORS["reflected"] if bullet.reflected else COLORS["bullet"]
                arcade.draw_circle_filled((left + right) / 2, (bottom + top) / 2, 12, color)

    def _draw_hud(self):
        game = self.game
        y = self.height - 40
        arcade.draw_text(f"Time: {game.game_timer // FPS}", self.width - 180, y,
                         COLORS["text"], 20, font_name=self.font_name)
        arcade.draw_text(f"Lives: {game.lives}", 30, y, COLORS["text"], 20, font_name=self.font_name)
        for i in range(game.lives):
            arcade.draw_circle_filled(60 + i * 20, y - 15, 8, COLORS["heart"])
        arcade.draw_text(f"Rocks: {game.rocks}", 30, y - 50, COLORS["text"], 20,
                         font_name=self.font_name)
        for i in range(game.rocks):
            arcade.draw_circle_filled(60 + i * 20, y - 65, 8, COLORS["rock_icon"])
