"""
Activations Package

This package provides the activation functions available to hidden layers.
The output layer of a network always uses 'tanh'.

Exported:
    activations:           Dictionary mapping activation function names to functions
    rectifier_activations: Names of the activations initialized with the He scheme
    Individual activation functions: tanh_activation, relu_activation,
                                     leaky_relu_activation, sigmoid_activation
"""

from evodrive.activations.basic_activations import (
    activations,
    rectifier_activations,
    tanh_activation,
    relu_activation,
    leaky_relu_activation,
    sigmoid_activation
)

__all__ = [
    'activations',
    'rectifier_activations',
    'tanh_activation',
    'relu_activation',
    'leaky_relu_activation',
    'sigmoid_activation'
]
