"""
Evolution State Module

This module holds the bookkeeping that survives from one generation to the
next: the generation counter, the fitness and diversity histories, the
stagnation counter and the current mutation rate.

Classes:
    GenerationStatistics: Summary of the population handed to one evolutionary step
    EvolutionState:       Session-wide state updated by every evolutionary step
"""

from dataclasses import dataclass, field

@dataclass(frozen=True)
class GenerationStatistics:
    """Best and mean fitness, and diversity, of the population of one generation."""

    generation  : int
    best_fitness: float
    mean_fitness: float
    diversity   : float
    best_index  : int

@dataclass
class EvolutionState:
    """
    State of an evolution session.

    Created once when the session starts and updated in place by each call to
    'Population.spawn_next_generation()'; it is never reset.

    Attributes:
        generation:             Number of evolutionary steps performed so far
        mutation_rate:          Per-gene mutation probability used for the next step
        stagnation_counter:     Generations since the best fitness last strictly improved
        best_fitness_history:   Best fitness of each evaluated generation
        mean_fitness_history:   Mean fitness of each evaluated generation
        diversity_history:      Population diversity of each evaluated generation
        last_statistics:        Statistics of the most recent generation (None before the first step)
    """

    mutation_rate       : float
    generation          : int = 0
    stagnation_counter  : int = 0
    best_fitness_history: list[float] = field(default_factory=list)
    mean_fitness_history: list[float] = field(default_factory=list)
    diversity_history   : list[float] = field(default_factory=list)
    last_statistics     : GenerationStatistics | None = None

    @property
    def previous_best_fitness(self) -> float | None:
        """Best fitness of the last recorded generation, or None if nothing was recorded."""
        return self.best_fitness_history[-1] if self.best_fitness_history else None

    def record(self, statistics: GenerationStatistics):
        """
        Append the statistics of a generation to the histories and update the
        stagnation counter: it is incremented unless the best fitness strictly
        improved on the previous generation's, in which case it is reset to 0.
        """
        previous_best = self.previous_best_fitness
        if previous_best is not None and statistics.best_fitness <= previous_best:
            self.stagnation_counter += 1
        else:
            self.stagnation_counter = 0

        self.best_fitness_history.append(statistics.best_fitness)
        self.mean_fitness_history.append(statistics.mean_fitness)
        self.diversity_history.append(statistics.diversity)
        self.last_statistics = statistics
