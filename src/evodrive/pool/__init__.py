"""
Pool Package

This package coordinates the evolutionary process at the population level.

Modules:
    evolution_state: Generation counter, histories, stagnation and mutation rate
    population:      Top-level population management and evolution

Exported Classes:
    EvolutionState:       State of an evolution session
    GenerationStatistics: Summary of one evaluated generation
    Population:           Top-level evolutionary coordinator
"""

from evodrive.pool.evolution_state import EvolutionState, GenerationStatistics
from evodrive.pool.population      import Population

__all__ = [
    'EvolutionState',
    'GenerationStatistics',
    'Population',
]
