"""
Centralized configuration for the treasure hunt game.

All timers are expressed in frames of a fixed 60 Hz tick.
"""

from .entities import CellView

# -------- Timing --------
FPS = 60
MEMORIZE_FRAMES = 30 * FPS
GAME_FRAMES = 15 * FPS
TIME_BONUS_FRAMES = 2 * FPS     # Extra play time every time the grid grows
END_GAME_FRAMES = 3 * FPS       # How long the final message stays up

# -------- Grid --------
GRID_PIXELS = 600               # Side of the square play area
START_GRID_SIZE = 6
MAX_GRID_SIZE = 13

# -------- Player --------
START_LIVES = 2
START_ROCKS = 5
REFLECT_TOLERANCE = 1.4         # Rows between bullet and player that still allow a reflect
AIM_RADIUS = 5.0                # Cells

# -------- Level generation --------
TRAP_DENSITY_PERCENT = 75
DIFFICULTY_TRAP_PERCENT = {1: 60, 2: 80, 3: 100}
MAX_GENERATION_ATTEMPTS = 10_000

# -------- Enemies --------
MAX_ENEMIES = 3
MAX_KILLERS = 3                 # Enemies allowed in pursuit mode at once
MODE_SWITCH_FRAMES = 6 * FPS
SHOT_COOLDOWN_FRAMES = 90
ENEMY_Y = -1.6                  # Enemy row in bullet coordinates (rows counted from the top)
BULLET_SPEED = 0.18
WANDER_SPEED = 0.05
WANDER_ARRIVAL = 0.1

# (kp, ki, kd) per difficulty
PID_GAINS = {
    1: (0.3, 0.0, 0.0),
    2: (0.3, 0.1, 0.0),
    3: (0.3, 0.1, 0.05),
}

# -------- Rocks --------
ROCK_SPEED = 0.2
ROCK_MAX_CELLS = 5
ROCK_ARRIVAL = 0.1

DIFFICULTIES = (1, 2, 3)

# Keyword arguments for GameController
GAME_CONFIG = {
    "grid_size": START_GRID_SIZE,
    "difficulty": 1,
    "max_grid_size": MAX_GRID_SIZE,
    "memorize_frames": MEMORIZE_FRAMES,
    "game_frames": GAME_FRAMES,
    "lives": START_LIVES,
    "rocks": START_ROCKS,
    "max_enemies": MAX_ENEMIES,
    "max_killers": MAX_KILLERS,
    "grid_pixels": GRID_PIXELS,
}

# -------- Colors (RGB) --------
COLORS = {
    "background": (18, 18, 22),
    "cell": (200, 200, 200),
    "trap": (255, 0, 0),
    "treasure": (0, 255, 0),
    "fallen": (128, 128, 128),
    "grid_line": (0, 0, 0),
    "player": (0, 0, 255),
    "enemy": (255, 0, 0),
    "bullet": (255, 255, 0),
    "reflected": (0, 0, 255),
    "rock": (139, 69, 19),
    "crosshair": (255, 0, 0),
    "heart": (255, 0, 0),
    "rock_icon": (128, 128, 128),
    "text": (255, 255, 255),
    "message": (255, 0, 255),
}

# Grid cell fill per visible state
CELL_COLORS = {
    CellView.HIDDEN: COLORS["cell"],
    CellView.EMPTY: COLORS["cell"],
    CellView.TRAP: COLORS["trap"],
    CellView.TREASURE: COLORS["treasure"],
    CellView.FALLEN: COLORS["fallen"],
}
