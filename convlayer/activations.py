"""
Activation Functions
====================

Element-wise non-linearities for the layers of this library. Each activation
implements a forward pass and its derivative.

The convolutional layer accepts an activation selector at construction
(resolved through get_activation) but its forward pass is currently fixed
to the rectifier.
"""

import numpy as np


class Activation:
    """Base class for all activation functions."""

    def forward(self, x):
        """Apply activation function."""
        raise NotImplementedError

    def backward(self, x):
        """Compute derivative of activation w.r.t. input."""
        raise NotImplementedError

    def __call__(self, x):
        return self.forward(x)

    def __repr__(self):
        return f"{type(self).__name__}()"


class ReLU(Activation):
    """
    Rectified Linear Unit: f(x) = max(0, x)

    Derivative:
        f'(x) = 1 if x > 0 else 0
    """

    def forward(self, x):
        return np.maximum(0.0, x)

    def backward(self, x):
        return (np.asarray(x) > 0).astype(np.float64)


class Sigmoid(Activation):
    """
    Sigmoid: f(x) = 1 / (1 + exp(-x))

    Derivative:
        f'(x) = f(x) * (1 - f(x))
    """

    def forward(self, x):
        # Clip for numerical stability
        x_clipped = np.clip(x, -500, 500)
        return 1.0 / (1.0 + np.exp(-x_clipped))

    def backward(self, x):
        s = self.forward(x)
        return s * (1 - s)


class Tanh(Activation):
    """
    Hyperbolic Tangent, output range (-1, 1).

    Derivative:
        f'(x) = 1 - tanh(x)^2
    """

    def forward(self, x):
        return np.tanh(x)

    def backward(self, x):
        t = np.tanh(x)
        return 1 - t ** 2


class Linear(Activation):
    """Identity activation: f(x) = x. Selected by 'none'."""

    def forward(self, x):
        return x

    def backward(self, x):
        return np.ones_like(x, dtype=np.float64)


# ====================================
# Activation Registry
# ====================================

ACTIVATIONS = {
    'relu': ReLU,
    'sigmoid': Sigmoid,
    'tanh': Tanh,
    'linear': Linear,
    'none': Linear,
}


def get_activation(name):
    """
    Get activation function by name.

    Args:
        name: String name ('relu', 'tanh', etc.), None, or Activation instance

    Returns:
        Activation instance

    Example:
        >>> act = get_activation('relu')
        >>> act(np.array([-1.0, 0.0, 1.0]))
        array([0., 0., 1.])
    """
    if isinstance(name, Activation):
        return name

    if name is None:
        return Linear()

    name_lower = str(name).lower().replace('-', '_')
    if name_lower not in ACTIVATIONS:
        available = ', '.join(ACTIVATIONS.keys())
        raise ValueError(f"Unknown activation '{name}'. Available: {available}")

    return ACTIVATIONS[name_lower]()
