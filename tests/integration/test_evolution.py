"""
Integration tests: evolving networks end to end.

These tests wire the pieces together the way a simulation would: networks are
evaluated, their genomes exported, evolved, and written back.
"""

import numpy as np
import pytest
from evodrive import Config, Network, Population, Trial
from evodrive.genotype.codec import export_population, import_population, to_genome
from evodrive.run.storage import load_weights, save_training_log, save_weights


# Steering target: turn away from the nearest obstacle
SENSOR_INPUTS = np.array([[1.0, 0.2, 1.0],
                          [0.2, 1.0, 1.0],
                          [1.0, 1.0, 0.2],
                          [0.5, 0.5, 0.5]])
STEERING      = np.array([0.0, 0.8, -0.8, 0.0])


def steering_fitness(network: Network) -> float:
    outputs = np.array([network.forward_pass(x)[0] for x in SENSOR_INPUTS])
    return 4.0 - float(np.sum((outputs - STEERING) ** 2))


class SteeringTrial(Trial):

    def _evaluate_fitness(self, network: Network) -> float:
        return steering_fitness(network)


@pytest.fixture
def config():
    config = Config()
    config.topology = [3, 6, 1]
    config.population_size = 20
    config.elite_count = 2
    config.max_number_generations = 40
    config.seed = 2024
    return config


class TestManualLoop:
    """Drive the Population by hand, as an external simulation would."""

    def test_scenario_four_genomes(self):
        """Test the four-genome scenario: fitness 10 and 5 survive unchanged."""
        config = Config()
        config.topology = [3, 2, 1]
        config.population_size = 4
        config.elite_count = 2
        rng = np.random.default_rng(0)
        networks = [Network(config.topology, rng=rng) for _ in range(4)]
        genomes = export_population(networks)

        new_genomes = Population(config, rng).spawn_next_generation(genomes, [10.0, 5.0, 1.0, 0.0])
        import_population(networks, new_genomes)

        current = [to_genome(n) for n in networks]
        assert sum(np.array_equal(g, genomes[0]) for g in current) >= 1
        assert sum(np.array_equal(g, genomes[1]) for g in current) >= 1
        assert all(len(g) == 11 for g in current)

    def test_manual_loop_improves(self, config):
        """Test that repeated steps improve the best fitness."""
        rng = np.random.default_rng(config.seed)
        networks = [Network(config.topology, config.activation, rng) for _ in range(config.population_size)]
        population = Population(config, rng)

        for _ in range(config.max_number_generations):
            fitnesses = [steering_fitness(n) for n in networks]
            import_population(networks, population.spawn_next_generation(export_population(networks), fitnesses))

        history = population.state.best_fitness_history
        assert len(history) == config.max_number_generations
        assert all(b >= a for a, b in zip(history, history[1:]))
        assert history[-1] > history[0]


class TestTrialEndToEnd:
    """Run a full Trial and persist its results."""

    def test_trial_and_storage(self, config, tmp_path):
        """Test that the best genome and the training log can be saved and reloaded."""
        trial = SteeringTrial(config, suppress_output=True)
        trial.run()

        weights_path = tmp_path / "best_weights.json"
        save_weights(trial.best_genome, weights_path)
        save_training_log(trial.population.state, tmp_path / "training_log.csv")

        network = Network(config.topology, config.activation)
        from_file = load_weights(weights_path)
        import_population([network], [from_file])

        assert steering_fitness(network) == pytest.approx(trial.best_fitness)
        lines = (tmp_path / "training_log.csv").read_text().strip().splitlines()
        assert len(lines) == config.max_number_generations + 1
