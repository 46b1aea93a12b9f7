"""
Genetic Operators Module

This module implements the genetic operators of the algorithm as plain functions
over genomes (1D float arrays) and fitness values. Operators never modify their
inputs; each one returns a new array. All randomness comes from the generator
passed in as 'rng', so that a seeded generator makes every operator reproducible.

Functions:
    tournament_selection:   Pick a parent by sampling a few individuals and keeping the fittest
    single_point_crossover: Child takes a prefix from one parent and the rest from the other
    two_point_crossover:    Child takes a segment from the second parent and the rest from the first
    blend_crossover:        BLX-alpha, each gene sampled from the parents' extended interval
    uniform_crossover:      Each gene taken from either parent with equal probability
    mutate:                 Perturb genes at random and clamp them
    genetic_distance:       Mean absolute per-gene difference between two genomes
    population_diversity:   Mean genetic distance over all pairs of genomes
    adaptive_mutation_rate: Linear decay of the mutation rate over the generations
"""

import numpy as np
from typing import Sequence

from evodrive.exceptions import EmptyPopulationError, InvalidConfigurationError, ShapeMismatchError

GENE_MIN = -10.0
GENE_MAX =  10.0

def _check_parents(parent1: np.ndarray, parent2: np.ndarray):
    if parent1.shape != parent2.shape:
        raise ShapeMismatchError("Parent genome length", parent1.shape[0], parent2.shape[0])
    if parent1.size == 0:
        raise ShapeMismatchError("Parent genome length", "at least 1", 0)

def tournament_selection(genomes    : Sequence[np.ndarray],
                         fitnesses  : Sequence[float],
                         rng        : np.random.Generator,
                         tournament_size: int = 3) -> np.ndarray:
    """
    Sample 'tournament_size' individuals uniformly at random (with replacement)
    and return the genome of the fittest one among them.

    The comparison is strict, so when several sampled individuals share the best
    fitness the one drawn first wins.

    Parameters:
        genomes:         The genomes of the population
        fitnesses:       The fitness of each genome (higher is better)
        rng:             Random generator
        tournament_size: Number of individuals drawn

    Returns:
        The winning genome (not a copy)
    """
    if len(genomes) == 0:
        raise EmptyPopulationError("Tournament selection needs a non-empty population")
    if len(genomes) != len(fitnesses):
        raise ShapeMismatchError("Number of fitness values", len(genomes), len(fitnesses))
    if tournament_size < 1:
        raise InvalidConfigurationError(f"Tournament size must be at least 1, got {tournament_size}")

    best_index   = None
    best_fitness = -np.inf
    for _ in range(tournament_size):
        index = int(rng.integers(0, len(genomes)))
        if best_index is None or fitnesses[index] > best_fitness:
            best_index   = index
            best_fitness = fitnesses[index]

    return genomes[best_index]

def single_point_crossover(parent1: np.ndarray, parent2: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """
    Choose a cut point uniformly in [0, len); the child takes the genes before
    the cut from 'parent1' and the genes from the cut onward from 'parent2'.
    """
    parent1, parent2 = np.asarray(parent1, dtype=np.float64), np.asarray(parent2, dtype=np.float64)
    _check_parents(parent1, parent2)

    cut = int(rng.integers(0, parent1.size))
    return np.concatenate((parent1[:cut], parent2[cut:]))

def two_point_crossover(parent1: np.ndarray, parent2: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """
    Choose 'point1' uniformly in [0, len) and then 'point2' uniformly in
    [point1, len); the child takes the genes in [point1, point2) from 'parent2'
    and all the others from 'parent1'.
    """
    parent1, parent2 = np.asarray(parent1, dtype=np.float64), np.asarray(parent2, dtype=np.float64)
    _check_parents(parent1, parent2)

    point1 = int(rng.integers(0, parent1.size))
    point2 = int(rng.integers(point1, parent1.size))
    child  = parent1.copy()
    child[point1:point2] = parent2[point1:point2]
    return child

def blend_crossover(parent1: np.ndarray,
                    parent2: np.ndarray,
                    rng    : np.random.Generator,
                    alpha  : float = 0.5,
                    gene_min: float = GENE_MIN,
                    gene_max: float = GENE_MAX) -> np.ndarray:
    """
    BLX-alpha crossover.

    For each gene, with lo/hi the smaller/larger of the parents' values and
    range = hi - lo, the child's gene is drawn uniformly from
    [lo - alpha*range, hi + alpha*range] and then clamped to [gene_min, gene_max].
    """
    parent1, parent2 = np.asarray(parent1, dtype=np.float64), np.asarray(parent2, dtype=np.float64)
    _check_parents(parent1, parent2)

    lo    = np.minimum(parent1, parent2)
    hi    = np.maximum(parent1, parent2)
    span  = hi - lo
    child = rng.uniform(lo - alpha * span, hi + alpha * span)
    return np.clip(child, gene_min, gene_max)

def uniform_crossover(parent1: np.ndarray, parent2: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Each gene of the child is copied from either parent with probability 1/2."""
    parent1, parent2 = np.asarray(parent1, dtype=np.float64), np.asarray(parent2, dtype=np.float64)
    _check_parents(parent1, parent2)

    from_parent1 = rng.random(parent1.size) < 0.5
    return np.where(from_parent1, parent1, parent2)

def mutate(genome  : np.ndarray,
           rate    : float,
           strength: float,
           rng     : np.random.Generator,
           gene_min: float = GENE_MIN,
           gene_max: float = GENE_MAX) -> np.ndarray:
    """
    Return a mutated copy of a genome.

    Each gene is mutated with probability 'rate' by adding a value drawn uniformly
    from [-strength, strength]; a mutated gene is then clamped to [gene_min, gene_max].

    Parameters:
        genome:   The genome to mutate (left unchanged)
        rate:     Per-gene mutation probability
        strength: Maximum absolute perturbation
        rng:      Random generator

    Returns:
        The mutated genome, as a new array
    """
    mutated = np.array(genome, dtype=np.float64)
    mask    = rng.random(mutated.size) < rate
    deltas  = rng.uniform(-strength, strength, size=mutated.size)
    mutated[mask] = np.clip(mutated[mask] + deltas[mask], gene_min, gene_max)
    return mutated

def genetic_distance(genome1: np.ndarray, genome2: np.ndarray) -> float:
    """Mean absolute difference between the genes of two genomes."""
    genome1, genome2 = np.asarray(genome1, dtype=np.float64), np.asarray(genome2, dtype=np.float64)
    if genome1.shape != genome2.shape:
        raise ShapeMismatchError("Genome length", genome1.shape[0], genome2.shape[0])
    if genome1.size == 0:
        return 0.0
    return float(np.mean(np.abs(genome1 - genome2)))

def population_diversity(genomes: Sequence[np.ndarray]) -> float:
    """
    Mean genetic distance over all unordered pairs of genomes.

    This is quadratic in the population size, which is acceptable only because
    populations are small. Returns 0.0 for fewer than two genomes.
    """
    if len(genomes) < 2:
        return 0.0

    total = 0.0
    pairs = 0
    for i in range(len(genomes) - 1):
        for j in range(i + 1, len(genomes)):
            total += genetic_distance(genomes[i], genomes[j])
            pairs += 1
    return total / pairs

def adaptive_mutation_rate(generation       : int,
                           initial_rate     : float,
                           final_rate       : float = 0.01,
                           decay_generations: int = 100) -> float:
    """
    Interpolate linearly from 'initial_rate' (generation 0) to 'final_rate'
    (generation 'decay_generations'); the rate stays at 'final_rate' afterward.
    """
    if decay_generations < 1:
        raise InvalidConfigurationError(f"'decay_generations' must be at least 1, got {decay_generations}")

    progress = min(max(generation / decay_generations, 0.0), 1.0)
    return initial_rate * (1.0 - progress) + final_rate * progress
