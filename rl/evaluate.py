"""
Evaluate a random policy on the Tesourim environment
"""

import argparse
from typing import Optional

import numpy as np

from tesourim.env import TesourimEnv
from rl.configs.tesourim_config import ENV_CONFIG, REWARD_CONFIG


def evaluate_random(
    n_episodes: int = 10,
    render: bool = False,
    seed: Optional[int] = None,
    max_steps: Optional[int] = None,
):
    """
    Roll out uniformly random actions

    Args:
        n_episodes: Number of episodes to run
        render: Whether to open the arcade window
        seed: Random seed for the first episode
        max_steps: Override the episode step limit
    """
    config = dict(ENV_CONFIG)
    if max_steps is not None:
        config["max_steps"] = max_steps

    env = TesourimEnv(
        render_mode="human" if render else None,
        reward_config=REWARD_CONFIG,
        **config,
    )
    env.action_space.seed(seed)

    episode_rewards = []
    episode_lengths = []
    wins = 0

    for episode in range(n_episodes):
        obs, info = env.reset(seed=seed if episode == 0 else None)
        done = False
        total_reward = 0.0
        steps = 0

        while not done:
            action = env.action_space.sample()
            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += reward
            steps += 1
            done = terminated or truncated

        if info["state"] == "won":
            wins += 1
        episode_rewards.append(total_reward)
        episode_lengths.append(steps)
        print(f"Episode {episode + 1}: Reward = {total_reward:.2f}, Length = {steps}, "
              f"Result = {info['state']}")

    env.close()

    mean_reward = np.mean(episode_rewards)
    std_reward = np.std(episode_rewards)
    mean_length = np.mean(episode_lengths)
    win_rate = wins / max(1, n_episodes)

    print(f"\nRandom Policy Results ({n_episodes} episodes):")
    print(f"Mean Reward: {mean_reward:.2f} ± {std_reward:.2f}")
    print(f"Mean Episode Length: {mean_length:.1f}")
    print(f"Win Rate: {win_rate:.0%}")

    return {
        "mean_reward": mean_reward,
        "std_reward": std_reward,
        "mean_length": mean_length,
        "win_rate": win_rate,
    }


def main(argv=None):
    parser = argparse.ArgumentParser(description="Evaluate a random policy on Tesourim")
    parser.add_argument(
        "--n-episodes",
        type=int,
        default=10,
        help="Number of evaluation episodes (default: 10)",
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Open the arcade window",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed (default: 42)",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help=f"Episode step limit (default: {ENV_CONFIG['max_steps']})",
    )

    args = parser.parse_args(argv)

    evaluate_random(
        n_episodes=args.n_episodes,
        render=args.render,
        seed=args.seed,
        max_steps=args.max_steps,
    )


if __name__ == "__main__":
    main()
