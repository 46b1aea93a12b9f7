"""
Population Module

This module implements the Population class, the orchestrator of the genetic
algorithm. At every generation boundary it receives the genomes of all agents
together with the fitness each one achieved in the environment, and returns
the genomes of the next generation.

Classes:
    Population: Generational evolutionary coordinator
"""

import numpy as np
from loguru import logger
from statistics import mean
from typing import Sequence

from evodrive.exceptions            import EmptyPopulationError, ShapeMismatchError
from evodrive.genotype              import operators
from evodrive.pool.evolution_state  import EvolutionState, GenerationStatistics
from evodrive.run.config            import Config

class Population:
    """
    Generational genetic algorithm over fixed-length genomes.

    The Population does not own the genomes it evolves: the caller hands over
    the current genomes and their fitness values, and writes the returned
    genomes back into its networks. What the Population keeps across calls is
    the EvolutionState (generation counter, histories, stagnation counter and
    the current mutation rate).

    Public Attributes:
        state: The EvolutionState of this session

    Public Properties:
        mutation_rate: The mutation rate that the next step will use

    Public Methods:
        spawn_next_generation(genomes, fitnesses): Perform one evolutionary step
    """

    def __init__(self, config: Config, rng: np.random.Generator | None = None):
        """
        Initialize the population's evolution state.

        Parameters:
            config: Stores configuration parameters
            rng:    Random generator used by all genetic operators; if None, a
                    generator seeded with 'config.seed' is created
        """
        config.validate()

        self._config = config
        self._rng    = rng if rng is not None else np.random.default_rng(config.seed)
        self.state   = EvolutionState(mutation_rate=config.mutation_rate)

    @property
    def mutation_rate(self) -> float:
        return self.state.mutation_rate

    def spawn_next_generation(self,
                              genomes  : Sequence[np.ndarray],
                              fitnesses: Sequence[float]) -> list[np.ndarray]:
        """
        Create the genomes of the next generation.

        Step 1: Ranking
        - Sort the individuals by decreasing fitness; the sort is stable, so
          individuals with equal fitness keep their original relative order

        Step 2: Elitism
        - Copy the 'elite_count' top-ranked genomes unchanged into the next generation

        Step 3: Reproduction
        - Fill every remaining slot with a child: two parents are chosen by
          tournament selection over the whole ranked population (elites
          included), combined by a crossover operator chosen at random
          according to the configured weights, and the child is mutated
          with the current mutation rate and strength

        Step 4: Statistics and stagnation
        - Record best and mean fitness and diversity of the evaluated population
        - Count the generations without strict improvement of the best fitness

        Step 5: Mutation schedule
        - With adaptive mutation enabled, recompute the mutation rate for the new
          generation index, and boost it if the population is stagnating

        Parameters:
            genomes:   The genomes of the current generation
            fitnesses: The fitness of each genome, in the same order

        Returns:
            The genomes of the next generation, as many as were passed in
        """
        # The config is shared with the caller and may have been edited since construction
        self._config.validate()

        genomes, fitnesses = self._check_population(genomes, fitnesses)
        population_size    = len(genomes)

        # Rank the individuals; 'sorted' is stable also with 'reverse=True'
        order            = sorted(range(population_size), key=lambda i: fitnesses[i], reverse=True)
        ranked_genomes   = [genomes[i]   for i in order]
        ranked_fitnesses = [fitnesses[i] for i in order]

        # Elites are copied, so that no array is shared with the caller or between slots
        elite_count    = min(self._config.elite_count, population_size)
        new_population = [ranked_genomes[i].copy() for i in range(elite_count)]

        # Fill the remaining slots with offspring
        while len(new_population) < population_size:
            new_population.append(self._spawn_child(ranked_genomes, ranked_fitnesses))

        # Record statistics of the population that was just evaluated
        statistics = GenerationStatistics(generation   = self.state.generation,
                                          best_fitness = ranked_fitnesses[0],
                                          mean_fitness = mean(fitnesses),
                                          diversity    = operators.population_diversity(genomes),
                                          best_index   = order[0])
        self.state.record(statistics)

        logger.info(f"[population] Gen {statistics.generation}: "
                    f"Best={statistics.best_fitness:.2f}, Avg={statistics.mean_fitness:.2f}, "
                    f"Diversity={statistics.diversity:.2f}, NoImprove={self.state.stagnation_counter}")

        if self._config.adaptive_mutation:
            self.state.mutation_rate = self._next_mutation_rate(self.state.generation + 1)

        self.state.generation += 1
        return new_population

    def _check_population(self, genomes, fitnesses) -> tuple[list[np.ndarray], list[float]]:
        """Validate the arguments of 'spawn_next_generation' and convert them to arrays and floats."""
        if len(genomes) == 0:
            raise EmptyPopulationError("Cannot spawn a generation from an empty population")
        if len(fitnesses) != len(genomes):
            raise ShapeMismatchError("Number of fitness values", len(genomes), len(fitnesses))

        genomes = [np.asarray(genome, dtype=np.float64) for genome in genomes]
        genome_length = genomes[0].shape
        for genome in genomes:
            if genome.ndim != 1 or genome.shape != genome_length:
                raise ShapeMismatchError("Genome length", genome_length[0], genome.shape[0] if genome.ndim == 1 else genome.shape)

        return genomes, [float(fitness) for fitness in fitnesses]

    def _spawn_child(self, ranked_genomes: list[np.ndarray], ranked_fitnesses: list[float]) -> np.ndarray:
        """Create one offspring through tournament selection, crossover and mutation."""
        tournament_size = self._config.tournament_size
        parent1 = operators.tournament_selection(ranked_genomes, ranked_fitnesses, self._rng, tournament_size)
        parent2 = operators.tournament_selection(ranked_genomes, ranked_fitnesses, self._rng, tournament_size)

        method = self._choose_crossover()
        if method == 'single_point':
            child = operators.single_point_crossover(parent1, parent2, self._rng)
        elif method == 'two_point':
            child = operators.two_point_crossover(parent1, parent2, self._rng)
        elif method == 'blend':
            child = operators.blend_crossover(parent1, parent2, self._rng,
                                              alpha    = self._config.blend_alpha,
                                              gene_min = self._config.min_gene,
                                              gene_max = self._config.max_gene)
        else:
            child = operators.uniform_crossover(parent1, parent2, self._rng)

        return operators.mutate(child,
                                rate     = self.state.mutation_rate,
                                strength = self._config.mutation_strength,
                                rng      = self._rng,
                                gene_min = self._config.min_gene,
                                gene_max = self._config.max_gene)

    def _choose_crossover(self) -> str:
        """
        Draw a single uniform value and map it onto the cumulative crossover
        weights. With equal weights for single-point, two-point and blend
        crossover this picks single-point below 1/3, two-point below 2/3 and
        blend otherwise.
        """
        weights = {name: weight for name, weight in self._config.crossover_weights.items() if weight > 0.0}
        total   = sum(weights.values())
        draw    = self._rng.random()

        cumulative = 0.0
        for name, weight in weights.items():
            cumulative += weight
            if draw < cumulative / total:
                return name
        return name  # draw rounded up against the last threshold

    def _next_mutation_rate(self, generation: int) -> float:
        """
        Mutation rate from the linear decay schedule, multiplied by the stagnation
        boost (and capped) once the population has not improved for half of the
        stagnation period.
        """
        rate = operators.adaptive_mutation_rate(generation,
                                                initial_rate      = self._config.mutation_rate,
                                                final_rate        = self._config.final_mutation_rate,
                                                decay_generations = self._config.mutation_decay_generations)

        if self.state.stagnation_counter >= self._config.max_stagnation_period // 2:
            rate = min(rate * self._config.stagnation_boost, self._config.max_mutation_rate)
            logger.info(f"[population] Stagnation detected! Increasing mutation to {rate:.3f}")

        return rate
