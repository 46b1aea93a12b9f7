"""
Phenotype Package

This package implements the neural network that powers an agent: a fully-connected
feedforward network with a fixed topology, whose parameters are set from a genome.

Modules:
    network: Network class and topology helpers

Exported:
    Network:           Fixed-topology feedforward neural network
    genome_length:     Number of parameters of a network with a given topology
    validate_topology: Check a topology and return it as a tuple
"""

from evodrive.phenotype.network import Network, genome_length, validate_topology

__all__ = ['Network',
           'genome_length',
           'validate_topology']
