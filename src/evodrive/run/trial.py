"""
Trial Module

This module defines the abstract base class for trials with built-in support
for CPU-based parallelization of the fitness evaluation using joblib.

A trial represents one independent run of the genetic algorithm: a fixed set of
networks (one per agent) is evaluated, evolved and evaluated again, generation
after generation, until the termination condition is met. The networks are
created once and reused; each generation only their parameters are replaced.
"""

import numpy as np
from abc        import ABC, abstractmethod
from joblib     import Parallel, delayed
from pathlib    import Path
from statistics import mean

from evodrive.genotype.codec    import export_population, import_population, to_genome
from evodrive.phenotype.network import Network
from evodrive.pool.population   import Population
from evodrive.run.config        import Config
from evodrive.run.storage       import save_training_log, save_weights

class Trial(ABC):
    """
    Abstract base class for implementing a trial.

    Subclasses must implement:
    - _evaluate_fitness(network): Evaluate fitness for a single network

    Subclasses can override:
    - _reset():           Reset trial-specific state (call super()._reset())
    - _report_progress(): Display progress after each generation
    - _final_report():    Display final results
    - _terminate():       Custom termination logic (default: max generations)

    When a 'save_dir' is given, the best genome of every evaluated generation is
    written to 'gen_{n}_best.json', the best genome so far to 'best_weights.json',
    and at the end of the run the training history to 'training_log.csv'.

    Public Attributes:
        networks:     The networks being evolved, one per agent
        population:   The Population driving the evolution
        best_genome:  Genome of the fittest network evaluated so far
        best_fitness: Fitness of 'best_genome'

    Public Methods:
        run(): Execute a complete trial

    Parallelization of fitness evaluation for networks:
        num_jobs=1:  Serial evaluation (no parallelization)
        num_jobs>1:  Use specified number of parallel workers
        num_jobs=-1: Use all available CPU cores
    """

    def __init__(self, config: Config, suppress_output: bool = False, save_dir: str | Path | None = None):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            suppress_output: If True, suppress progress and final reports
            save_dir:        Directory for the weight files and the training log;
                             if None, nothing is written
        """
        self._config            : Config              = config
        self._generation_counter: int                 = 0
        self._suppress_output   : bool                = suppress_output
        self._save_dir          : Path | None         = Path(save_dir) if save_dir is not None else None
        self._fitnesses         : list[float]         = []
        self.networks           : list[Network]       = []
        self.population         : Population | None   = None
        self.best_genome        : np.ndarray | None   = None
        self.best_fitness       : float | None        = None

    def run(self, num_jobs: int = 1, prefer: str | None = None):
        """
        Run the trial.

        Resets the trial state and runs the evolutionary
        algorithm until the terminate condition is met.

        Parameters:
            num_jobs: Number of parallel workers for fitness evaluation
                      1 = serial (no parallelization)
                     -1 = use all available CPU cores
                     >1 = use specified number of workers
            prefer:   joblib backend preference ('processes' or 'threads'),
                      None for joblib's default
        """
        self._reset()

        # Create one network per agent, and the population that evolves them
        rng = np.random.default_rng(self._config.seed)
        self.networks   = [Network(self._config.topology, self._config.activation, rng)
                           for _ in range(self._config.population_size)]
        self.population = Population(self._config, rng)

        self._evaluate_fitness_all(num_jobs, prefer)
        self._save_generation()
        if not self._suppress_output:
            self._report_progress()

        # Evolution loop
        while not self._terminate():
            self._generation_counter += 1

            genomes = export_population(self.networks)
            new_genomes = self.population.spawn_next_generation(genomes, self._fitnesses)
            import_population(self.networks, new_genomes)

            self._evaluate_fitness_all(num_jobs, prefer)
            self._save_generation()
            if not self._suppress_output:
                self._report_progress()

        if self._save_dir is not None:
            save_training_log(self.population.state, self._save_dir / "training_log.csv")
        if not self._suppress_output:
            self._final_report()

    def _reset(self):
        """
        Reset the trial state before starting a new run.

        Subclasses should call super()._reset() and then
        initialize their problem-specific data.
        """
        self._generation_counter = 0
        self._fitnesses   = []
        self.best_genome  = None
        self.best_fitness = None

    @abstractmethod
    def _evaluate_fitness(self, network: Network) -> float:
        """
        Evaluate and return the fitness of a network.

        This method should drive the agent powered by the network through the
        environment and return its accumulated score. Higher is better; the
        fitness may be negative.

        Parameters:
            network: The Network to evaluate

        Returns:
            float: Fitness score for the network
        """
        pass

    def _evaluate_fitness_all(self, num_jobs: int, prefer: str | None = None):
        """
        Evaluate fitness for all networks.

        Each network owns its parameters and activation buffers, so the
        evaluations are independent and can run in parallel.

        Parameters:
            num_jobs: Number of parallel workers for fitness evaluation
            prefer:   joblib backend preference
        """
        if num_jobs == 1:
            fitnesses = [self._evaluate_fitness(network) for network in self.networks]
        else:
            fitnesses = Parallel(num_jobs, prefer=prefer)(delayed(self._evaluate_fitness)(n) for n in self.networks)
        self._fitnesses = [float(fitness) for fitness in fitnesses]

        best_index = int(np.argmax(self._fitnesses))
        if self.best_fitness is None or self._fitnesses[best_index] > self.best_fitness:
            self.best_fitness = self._fitnesses[best_index]
            self.best_genome  = to_genome(self.networks[best_index])

    def _save_generation(self):
        """Write the best genome of the current generation, and the best genome so far, to 'save_dir'."""
        if self._save_dir is None:
            return

        best_index = int(np.argmax(self._fitnesses))
        save_weights(to_genome(self.networks[best_index]), self._save_dir / f"gen_{self._generation_counter}_best.json")
        save_weights(self.best_genome, self._save_dir / "best_weights.json")

    def _report_progress(self):
        """Print the fitness of the most recently evaluated generation."""
        print(f"Gen {self._generation_counter:3d}: "
              f"Best={max(self._fitnesses):.2f}, Avg={mean(self._fitnesses):.2f}, "
              f"Mutation={self.population.mutation_rate:.3f}, "
              f"NoImprove={self.population.state.stagnation_counter}")

    def _final_report(self):
        print(f"\nTrial finished after {self._generation_counter} generations")
        print(f"Best fitness: {self.best_fitness:.4f}")

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial after a maximum number
        of generations. Subclasses can override this method for custom
        termination logic.

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        return self._generation_counter >= self._config.max_number_generations
