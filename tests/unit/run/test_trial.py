"""
Unit tests for the Trial base class.
"""

import pytest
import numpy as np
from evodrive.run.config import Config
from evodrive.run.trial import Trial
from evodrive.genotype.codec import from_genome, to_genome
from evodrive.phenotype.network import Network
from evodrive.run.storage import load_weights


class CountingTrial(Trial):
    """Trial whose fitness is the first output for a fixed input, counting evaluations."""

    def __init__(self, config, suppress_output=True, save_dir=None):
        super().__init__(config, suppress_output, save_dir)
        self.evaluations = 0

    def _reset(self):
        super()._reset()
        self.evaluations = 0

    def _evaluate_fitness(self, network: Network) -> float:
        self.evaluations += 1
        return float(network.forward_pass(np.ones(network.num_inputs))[0])


@pytest.fixture
def config():
    config = Config()
    config.topology = [3, 4, 1]
    config.population_size = 6
    config.elite_count = 1
    config.max_number_generations = 4
    config.seed = 7
    return config


class TestTrialRun:
    """Test the evaluate / evolve loop."""

    def test_cannot_instantiate_abstract(self, config):
        """Test that Trial requires '_evaluate_fitness'."""
        with pytest.raises(TypeError):
            Trial(config)

    def test_generations_and_evaluations(self, config):
        """Test that every network is evaluated once per generation, initial included."""
        trial = CountingTrial(config)
        trial.run()

        assert trial.population.state.generation == 4
        assert trial.evaluations == 6 * 5

    def test_networks_created_once(self, config):
        """Test that the trial keeps one network per slot with the configured topology."""
        trial = CountingTrial(config)
        trial.run()

        assert len(trial.networks) == 6
        assert all(n.topology == (3, 4, 1) for n in trial.networks)

    def test_zero_generations(self, config):
        """Test that with no generations only the initial population is evaluated."""
        config.max_number_generations = 0
        trial = CountingTrial(config)
        trial.run()

        assert trial.population.state.generation == 0
        assert trial.evaluations == 6

    def test_best_genome_tracked(self, config):
        """Test that the best genome reproduces the best fitness."""
        trial = CountingTrial(config)
        trial.run()

        network = Network(config.topology, config.activation)
        from_genome(network, trial.best_genome)
        assert network.forward_pass(np.ones(3))[0] == pytest.approx(trial.best_fitness)

    def test_best_fitness_never_decreases(self, config):
        """Test that elitism keeps the best fitness from one generation to the next."""
        config.max_number_generations = 10
        trial = CountingTrial(config)
        trial.run()

        history = trial.population.state.best_fitness_history
        assert all(b >= a for a, b in zip(history, history[1:]))

    def test_run_twice_resets(self, config):
        """Test that a second run starts from scratch."""
        trial = CountingTrial(config)
        trial.run()
        trial.run()

        assert trial.evaluations == 6 * 5
        assert trial.population.state.generation == 4

    def test_reproducible(self, config):
        """Test that the same seed gives the same final networks."""
        trial1 = CountingTrial(config)
        trial1.run()
        trial2 = CountingTrial(config)
        trial2.run()

        for n1, n2 in zip(trial1.networks, trial2.networks):
            np.testing.assert_array_equal(to_genome(n1), to_genome(n2))

    def test_parallel_matches_serial(self, config):
        """Test that threaded evaluation gives the same results as serial evaluation."""
        serial = CountingTrial(config)
        serial.run(num_jobs=1)
        parallel = CountingTrial(config)
        parallel.run(num_jobs=2, prefer="threads")

        assert parallel.population.state.best_fitness_history == serial.population.state.best_fitness_history

    def test_reports_printed(self, config, capsys):
        """Test that progress and final reports are printed unless suppressed."""
        config.max_number_generations = 1
        CountingTrial(config, suppress_output=False).run()

        out = capsys.readouterr().out
        assert "Gen   0" in out
        assert "Gen   1" in out
        assert "Best fitness" in out

    def test_reports_suppressed(self, config, capsys):
        """Test that suppress_output silences the reports."""
        CountingTrial(config, suppress_output=True).run()

        assert capsys.readouterr().out == ""


class TestTrialSaving:
    """Test the weight files and training log written to 'save_dir'."""

    def test_nothing_written_without_save_dir(self, config, tmp_path, monkeypatch):
        """Test that a trial without 'save_dir' writes no files."""
        monkeypatch.chdir(tmp_path)
        CountingTrial(config).run()

        assert list(tmp_path.iterdir()) == []

    def test_files_written_every_generation(self, config, tmp_path):
        """Test that every evaluated generation gets a weight file, plus the overall best and the log."""
        CountingTrial(config, save_dir=tmp_path / "out").run()

        names = {path.name for path in (tmp_path / "out").iterdir()}
        expected = {f"gen_{n}_best.json" for n in range(config.max_number_generations + 1)}
        assert names == expected | {"best_weights.json", "training_log.csv"}

    def test_best_weights_match_best_genome(self, config, tmp_path):
        """Test that 'best_weights.json' holds the fittest genome of the run."""
        trial = CountingTrial(config, save_dir=tmp_path)
        trial.run()

        np.testing.assert_array_equal(load_weights(tmp_path / "best_weights.json"), trial.best_genome)

    def test_generation_file_holds_generation_best(self, config, tmp_path):
        """Test that the last generation file holds the fittest genome of the last generation."""
        trial = CountingTrial(config, save_dir=tmp_path)
        trial.run()

        fitnesses = [float(n.forward_pass(np.ones(n.num_inputs))[0]) for n in trial.networks]
        best_network = trial.networks[int(np.argmax(fitnesses))]
        saved = load_weights(tmp_path / f"gen_{config.max_number_generations}_best.json")
        np.testing.assert_array_equal(saved, to_genome(best_network))

    def test_training_log_has_row_per_step(self, config, tmp_path):
        """Test that the training log has a header and one row per evolutionary step."""
        CountingTrial(config, save_dir=tmp_path).run()

        lines = (tmp_path / "training_log.csv").read_text().splitlines()
        assert lines[0] == "Generation,BestFitness,AvgFitness,Diversity"
        assert len(lines) == config.max_number_generations + 1
