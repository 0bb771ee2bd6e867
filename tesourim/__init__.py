"""Tesourim - memorize the grid, dodge the bullets, find the treasure"""

from .controller import Action, GameController, InputSnapshot
from .env import TesourimEnv, run_random_episode
from .entities import Bullet, CellView, Enemy, EnemyMode, GameState, Level, Rock
from .graph import can_reach, generate_graph
from .level import GenerationExhausted, generate_traps, generate_treasure, level_setup

__all__ = [
    'Action', 'GameController', 'InputSnapshot',
    'Bullet', 'CellView', 'Enemy', 'EnemyMode', 'GameState', 'Level', 'Rock',
    'TesourimEnv', 'run_random_episode',
    'can_reach', 'generate_graph',
    'GenerationExhausted', 'generate_traps', 'generate_treasure', 'level_setup',
]
