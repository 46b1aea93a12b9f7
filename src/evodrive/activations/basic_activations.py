import numpy as np

def tanh_activation(z):
    return np.tanh(z)

def relu_activation(z):
    return np.maximum(0.0, z)

def leaky_relu_activation(z):
    return np.where(z > 0, z, 0.01 * z)

def sigmoid_activation(z):
    # Clip to keep np.exp from overflowing for large negative inputs
    return 1.0 / (1.0 + np.exp(-np.clip(z, -500.0, 500.0)))

activations = {
    "tanh"      : tanh_activation,
    "relu"      : relu_activation,
    "leaky_relu": leaky_relu_activation,
    "sigmoid"   : sigmoid_activation
    }

# Activations that take He initialization; every other one uses Xavier
rectifier_activations = {"relu", "leaky_relu"}
