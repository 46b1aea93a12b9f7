"""
Network Module

This module implements the fixed-topology feedforward neural network that powers
an agent. The network maps a vector of sensor readings to a vector of actions;
its parameters (one weight matrix and one bias vector per layer transition) are
replaced every generation by the genetic algorithm, while its topology never
changes after construction.

Classes:
    Network: Fully-connected feedforward neural network with a fixed topology
"""

import numpy as np
from typing import Sequence

from evodrive.activations import activations, rectifier_activations, tanh_activation
from evodrive.exceptions  import InvalidConfigurationError, ShapeMismatchError

# Inputs and weighted sums are clipped to this magnitude so that the matrix
# products cannot overflow to inf (and inf - inf to nan) for extreme finite
# inputs. tanh saturates long before this bound.
ACTIVATION_BOUND = 1e100

def validate_topology(topology: Sequence[int]) -> tuple[int, ...]:
    """
    Check that a topology describes a usable network and return it as a tuple.

    Parameters:
        topology: Layer sizes, from the input layer to the output layer

    Returns:
        The topology as an immutable tuple of ints
    """
    topology = tuple(topology)
    if len(topology) < 2:
        raise InvalidConfigurationError(f"Topology needs at least 2 layers, got {len(topology)}: {list(topology)}")
    for size in topology:
        if isinstance(size, bool) or int(size) != size or size < 1:
            raise InvalidConfigurationError(f"Layer sizes must be positive integers, got {list(topology)}")
    return tuple(int(size) for size in topology)

def genome_length(topology: Sequence[int]) -> int:
    """Number of parameters (weights plus biases) of a network with the given topology."""
    topology = validate_topology(topology)
    return sum(n_in * n_out + n_out for n_in, n_out in zip(topology[:-1], topology[1:]))

class Network:
    """
    Fully-connected feedforward neural network with a fixed topology.

    Layer 'i' (for i >= 1) receives the activations of layer 'i-1'. Hidden layers
    use the configured activation function; the output layer always uses 'tanh',
    so every output lies in [-1, 1] and can be used directly as a control signal.

    Public Attributes:
        weights: List of weight matrices, weights[i-1][j, k] connects neuron 'k'
                 of layer 'i-1' to neuron 'j' of layer 'i'
        biases:  List of bias vectors, biases[i-1][j] is the bias of neuron 'j' of layer 'i'

    Public Properties:
        topology:       Layer sizes (immutable)
        activation:     Name of the hidden-layer activation function
        num_inputs:     Size of the input layer
        num_outputs:    Size of the output layer
        num_parameters: Total number of weights and biases

    Public Methods:
        forward_pass(inputs): Propagate one input vector and return the output vector
        copy():               Create an independent network with the same parameters
    """

    def __init__(self,
                 topology  : Sequence[int],
                 activation: str = 'leaky_relu',
                 rng       : np.random.Generator | None = None):
        """
        Build the network and initialize its parameters at random.

        The weights of each neuron are drawn uniformly from [-scale, scale], where
        scale = sqrt(2/fan_in) for rectifier activations (He initialization) and
        scale = sqrt(1/fan_in) otherwise (Xavier initialization). Biases are drawn
        uniformly from [-0.1, 0.1].

        Parameters:
            topology:   Layer sizes, from the input layer to the output layer
            activation: Hidden-layer activation ('tanh', 'relu', 'leaky_relu', 'sigmoid')
            rng:        Random generator used for initialization
        """
        if activation not in activations:
            raise InvalidConfigurationError(f"Unknown activation '{activation}', "
                                            f"expected one of {sorted(activations)}")

        self._topology  : tuple[int, ...] = validate_topology(topology)
        self._activation: str             = activation
        self._hidden_fn                   = activations[activation]

        if rng is None:
            rng = np.random.default_rng()

        self.weights: list[np.ndarray] = []
        self.biases : list[np.ndarray] = []
        for n_in, n_out in zip(self._topology[:-1], self._topology[1:]):
            if activation in rectifier_activations:
                scale = np.sqrt(2.0 / n_in)
            else:
                scale = np.sqrt(1.0 / n_in)
            self.weights.append(rng.uniform(-scale, scale, size=(n_out, n_in)))
            self.biases.append(rng.uniform(-0.1, 0.1, size=n_out))

        # Per-layer activations of the most recent forward pass
        self._neurons = [np.zeros(size, dtype=np.float64) for size in self._topology]

    @property
    def topology(self) -> tuple[int, ...]:
        """Layer sizes, from the input layer to the output layer."""
        return self._topology

    @property
    def activation(self) -> str:
        """Name of the hidden-layer activation function."""
        return self._activation

    @property
    def num_inputs(self) -> int:
        return self._topology[0]

    @property
    def num_outputs(self) -> int:
        return self._topology[-1]

    @property
    def num_parameters(self) -> int:
        """Total number of weights and biases (the genome length)."""
        return genome_length(self._topology)

    def forward_pass(self, inputs: Sequence[float]) -> np.ndarray:
        """
        Propagate an input vector through the network.

        Parameters:
            inputs: Sensor readings, one per input neuron

        Returns:
            Output vector with one value in [-1, 1] per output neuron
        """
        inputs = np.asarray(inputs, dtype=np.float64)
        if inputs.ndim != 1 or inputs.shape[0] != self.num_inputs:
            raise ShapeMismatchError("Input vector length", self.num_inputs,
                                     inputs.shape[0] if inputs.ndim == 1 else inputs.shape)

        self._neurons[0][:] = np.clip(inputs, -ACTIVATION_BOUND, ACTIVATION_BOUND)
        last_layer = len(self._topology) - 1
        for i in range(1, len(self._topology)):
            z = self.weights[i - 1] @ self._neurons[i - 1] + self.biases[i - 1]
            z = np.clip(z, -ACTIVATION_BOUND, ACTIVATION_BOUND)
            activation_fn = tanh_activation if i == last_layer else self._hidden_fn
            self._neurons[i][:] = activation_fn(z)

        return self._neurons[-1].copy()

    def copy(self) -> 'Network':
        """Create an independent network with the same topology, activation and parameters."""
        clone = Network.__new__(Network)
        clone._topology   = self._topology
        clone._activation = self._activation
        clone._hidden_fn  = self._hidden_fn
        clone.weights     = [w.copy() for w in self.weights]
        clone.biases      = [b.copy() for b in self.biases]
        clone._neurons    = [np.zeros(size, dtype=np.float64) for size in self._topology]
        return clone

    def __str__(self):
        layers = " -> ".join(str(size) for size in self._topology)
        return f"Network [{layers}], hidden activation '{self._activation}', {self.num_parameters} parameters"

    def __repr__(self):
        return f"Network(topology={list(self._topology)}, activation={self._activation!r})"
