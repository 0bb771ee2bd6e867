"""
Play the treasure hunt in an arcade window

    python -m tesourim.play --seed 7
"""

import argparse
import logging
import sys

import arcade

from .config import GAME_CONFIG
from .controller import GameController
from .window import AssetError, TesourimWindow


def main(argv=None):
    parser = argparse.ArgumentParser(description="Memorize the grid, then find the treasure")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for level layout and enemies (default: random)",
    )
    parser.add_argument(
        "--grid-size",
        type=int,
        default=GAME_CONFIG["grid_size"],
        help=f"Starting grid size (default: {GAME_CONFIG['grid_size']})",
    )
    parser.add_argument(
        "--difficulty",
        type=int,
        default=GAME_CONFIG["difficulty"],
        choices=[1, 2, 3],
        help="Starting difficulty (default: 1)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Open the window fullscreen",
    )
    parser.add_argument(
        "--font",
        type=str,
        default=None,
        help="Path to a TTF font for the HUD",
    )
    parser.add_argument(
        "--sprites",
        type=str,
        default=None,
        help="Directory holding player_idle.png, player_aiming.png and enemy.png",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log game events to stderr",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config = dict(GAME_CONFIG, grid_size=args.grid_size, difficulty=args.difficulty)
    game = GameController(seed=args.seed, **config)

    try:
        TesourimWindow(game, fullscreen=args.fullscreen, font_path=args.font, sprites_dir=args.sprites)
    except AssetError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Starting on a {game.grid_size}x{game.grid_size} grid, difficulty {game.difficulty}")
    arcade.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
