"""
Genome Codec Module

This module converts between a Network's parameters and its genome, the flat
vector of real numbers on which the genetic operators act.

Genome layout (all layer transitions in order, from the first hidden layer to
the output layer):
    1. all weights, layer by layer; within a layer neuron-major, so the
       incoming weights of each destination neuron are contiguous
    2. all biases, layer by layer, one per destination neuron

Other tooling (weight files, displays) depends on this layout, so it must not change.

Functions:
    to_genome(network):                   Flatten a network's parameters into a genome
    from_genome(network, genome):         Overwrite a network's parameters from a genome
    export_population(networks):          Genomes of a list of networks, in order
    import_population(networks, genomes): Write a list of genomes into a list of networks
"""

import numpy as np
from typing import Sequence

from evodrive.exceptions        import ShapeMismatchError
from evodrive.phenotype.network import Network

def to_genome(network: Network) -> np.ndarray:
    """
    Flatten the parameters of a network into a genome.

    Parameters:
        network: The network to encode

    Returns:
        A new float64 array of length 'network.num_parameters'
    """
    weights = [w.ravel() for w in network.weights]  # row-major => neuron-major
    return np.concatenate(weights + list(network.biases)).astype(np.float64, copy=True)

def from_genome(network: Network, genome: Sequence[float]):
    """
    Overwrite the parameters of a network, in place, with the values of a genome.

    Parameters:
        network: The network to update; its topology is unchanged
        genome:  Flat parameter vector laid out as produced by 'to_genome'
    """
    genome = np.asarray(genome, dtype=np.float64)
    expected = network.num_parameters
    if genome.ndim != 1 or genome.shape[0] != expected:
        raise ShapeMismatchError("Genome length", expected,
                                 genome.shape[0] if genome.ndim == 1 else genome.shape)

    index = 0
    for w in network.weights:
        w[...] = genome[index:index + w.size].reshape(w.shape)
        index += w.size
    for b in network.biases:
        b[...] = genome[index:index + b.size]
        index += b.size

def export_population(networks: Sequence[Network]) -> list[np.ndarray]:
    """Return the genome of each network, in the same order."""
    return [to_genome(network) for network in networks]

def import_population(networks: Sequence[Network], genomes: Sequence[Sequence[float]]):
    """
    Write each genome into the network at the same position.

    Parameters:
        networks: Networks to update in place
        genomes:  One genome per network
    """
    if len(networks) != len(genomes):
        raise ShapeMismatchError("Number of genomes", len(networks), len(genomes))
    for network, genome in zip(networks, genomes):
        from_genome(network, genome)
