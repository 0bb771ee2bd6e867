"""
Environment and reward configuration for agents playing Tesourim
"""

# Environment parameters
ENV_CONFIG = {
    "grid_size": 6,
    "difficulty": 1,
    "max_steps": 3600,        # 60 seconds at 60 FPS
    "memorize_frames": 120,   # 2 seconds; the default 30 s mostly burns steps
    "game_frames": 15 * 60,
    "k_bullets": 5,
    "k_enemies": 3,
}

# Reward shaping
REWARD_CONFIG = {
    "R_WIN": 10.0,       # Reaching (or revealing) the treasure
    "R_LOSS": 5.0,       # Timeout or out of lives
    "R_TRAP": 1.0,       # Stepping on a trap
    "R_HIT": 1.0,        # Taking a bullet
    "R_REFLECT": 0.2,    # Reflecting a bullet
    "R_KILL": 1.0,       # Enemy killed by its own reflected bullet
    "R_TIME": 0.001,     # Small time penalty
}
