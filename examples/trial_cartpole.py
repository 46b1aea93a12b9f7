"""
CartPole Problem Implementation

This module evolves fixed-topology networks for the classic CartPole balancing
task from Gymnasium. It stands in for the driving simulation the library was
written for: the environment produces a sensor vector at every step, the network
turns it into an action, and the accumulated reward is the network's fitness.

The CartPole Problem:
    State Space (4 continuous values, the network inputs):
        - Cart position, cart velocity, pole angle, pole angular velocity

    Action Space (2 discrete actions):
        0 - Push cart to the left
        1 - Push cart to the right

    The network has a single 'tanh' output; a positive output pushes right.

Fitness Function:
    Fitness = avg(total_reward - position_penalty_coeff * |final_position|)

Classes:
    Trial_CartPole: Trial for the CartPole balancing task

Usage:
    config = Config("config_cartpole.ini")
    trial = Trial_CartPole(config)
    trial.run(num_jobs=-1)
"""

import gymnasium as gym    # type: ignore
import sys
from pathlib    import Path
from statistics import mean

from evodrive import Config, Network, Trial

class Trial_CartPole(Trial):
    """
    Trial for the CartPole-v1 balancing task.

    Fitness combines episode duration (reward) with a penalty
    for ending far from the center of the track.
    """

    def __init__(self,
                 config                : Config,
                 num_episodes          : int   = 3,
                 position_penalty_coeff: float = 1.0,
                 suppress_output       : bool  = False,
                 save_dir              : str | Path | None = None):
        """
        Initialize the trial.

        Parameters:
            config:                 Configuration parameters
            num_episodes:           Number of episodes the fitness is averaged over
            position_penalty_coeff: Penalty per unit of distance from the center at the end of an episode
            suppress_output:        Whether to suppress output during training
            save_dir:               Directory for the weight files and the training log
        """
        super().__init__(config, suppress_output, save_dir)
        self._num_episodes           = num_episodes
        self._position_penalty_coeff = position_penalty_coeff

        # The network's input size must match the observation returned by the environment
        env = gym.make("CartPole-v1")
        self._config.topology = [env.observation_space.shape[0]] + list(self._config.topology[1:-1]) + [1]
        env.close()

    def _evaluate_fitness(self, network: Network) -> float:
        """
        Run the environment for a few episodes and average the reward,
        adjusted by the distance from the center at the end of each episode.
        """
        env = gym.make("CartPole-v1")
        rewards_adj = []
        for episode in range(self._num_episodes):
            observation, _ = env.reset(seed=episode)
            total_reward = 0.0
            done = False
            while not done:
                action = 1 if network.forward_pass(observation)[0] > 0.0 else 0
                observation, reward, terminated, truncated, _ = env.step(action)
                total_reward += reward
                done = terminated or truncated

            # NOTE: observation[0] is the cart position, between -2.4 and +2.4
            rewards_adj.append(total_reward - self._position_penalty_coeff * abs(observation[0]))
        env.close()

        return mean(rewards_adj)

if __name__ == "__main__":
    config_file = sys.argv[1] if len(sys.argv) > 1 else str(Path(__file__).parent / "config_cartpole.ini")
    trial = Trial_CartPole(Config(config_file), save_dir="results")
    trial.run(num_jobs=-1)
