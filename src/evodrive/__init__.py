"""
evodrive - Neuroevolution of fixed-topology feedforward networks.

This package evolves the weights of small feedforward neural networks with a
genetic algorithm. The fitness of each network is supplied by an external
simulation (for example a car driving around a track); the package covers the
network itself, the encoding of its parameters as a genome, the genetic
operators, and the generational loop that turns fitness scores into the
genomes of the next generation.

Main components:
- phenotype:   The fixed-topology feedforward network
- genotype:    Genome codec and genetic operators
- pool:        Evolution state and the Population orchestrator
- run:         Configuration, storage and the Trial framework
- activations: Activation functions for hidden layers

Example:
    >>> from evodrive import Config, Trial
    >>> config = Config("config.ini")
    >>> class MyTrial(Trial):
    ...     def _evaluate_fitness(self, network):
    ...         # Drive the agent and return its score
    ...         pass
    >>> trial = MyTrial(config)
    >>> trial.run()
"""

__version__ = "0.1.0"

from evodrive.exceptions import (
    EvodriveError,
    ShapeMismatchError,
    EmptyPopulationError,
    InvalidConfigurationError
)
from evodrive.run.config        import Config
from evodrive.run.trial         import Trial
from evodrive.phenotype.network import Network
from evodrive.genotype.codec    import to_genome, from_genome
from evodrive.pool.population   import Population
from evodrive.pool.evolution_state import EvolutionState, GenerationStatistics

__all__ = [
    "Config",
    "Trial",
    "Network",
    "Population",
    "EvolutionState",
    "GenerationStatistics",
    "to_genome",
    "from_genome",
    "EvodriveError",
    "ShapeMismatchError",
    "EmptyPopulationError",
    "InvalidConfigurationError",
]
