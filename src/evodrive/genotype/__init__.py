"""
Genotype Package

This package implements the genetic representation of a network: its genome, the
flat vector of all weights followed by all biases, and the genetic operators that
act on genomes.

Modules:
    codec:     Conversion between networks and genomes
    operators: Selection, crossover, mutation and diversity functions
"""

from evodrive.genotype.codec import (
    to_genome,
    from_genome,
    export_population,
    import_population
)
from evodrive.genotype.operators import (
    tournament_selection,
    single_point_crossover,
    two_point_crossover,
    blend_crossover,
    uniform_crossover,
    mutate,
    genetic_distance,
    population_diversity,
    adaptive_mutation_rate
)

__all__ = ['to_genome',
           'from_genome',
           'export_population',
           'import_population',
           'tournament_selection',
           'single_point_crossover',
           'two_point_crossover',
           'blend_crossover',
           'uniform_crossover',
           'mutate',
           'genetic_distance',
           'population_diversity',
           'adaptive_mutation_rate']
