"""
Loss Functions
==============

Loss functions measure how far the layer output is from a target map and
provide the output gradients that start backpropagation.

Each loss implements:
- forward(predictions, targets): Compute loss value
- backward(predictions, targets): Compute gradient for backpropagation
"""

import numpy as np


class Loss:
    """Base class for loss functions."""

    def forward(self, predictions, targets):
        """Compute loss value."""
        raise NotImplementedError

    def backward(self, predictions, targets):
        """Compute gradient of loss w.r.t. predictions."""
        raise NotImplementedError

    def __call__(self, predictions, targets):
        return self.forward(predictions, targets)


class MSELoss(Loss):
    """
    Mean Squared Error over every element of the output map.

    Formula: L = (1/n) * sum((y_pred - y_true)^2)

    Gradient: dL/dy_pred = (2/n) * (y_pred - y_true)
    """

    def forward(self, predictions, targets):
        """Compute mean squared error."""
        return float(np.mean((np.asarray(predictions) - targets) ** 2))

    def backward(self, predictions, targets):
        """Compute gradient of MSE."""
        predictions = np.asarray(predictions, dtype=np.float64)
        return 2 * (predictions - targets) / predictions.size


# ============================================================================
# Loss Registry
# ============================================================================

LOSSES = {
    'mse': MSELoss,
    'mean_squared_error': MSELoss,
}


def get_loss(name):
    """
    Get loss function by name.

    Args:
        name: String name or Loss instance

    Returns:
        Loss instance
    """
    if isinstance(name, Loss):
        return name

    name_lower = str(name).lower().replace('-', '_').replace(' ', '_')
    if name_lower not in LOSSES:
        available = ', '.join(sorted(set(LOSSES.keys())))
        raise ValueError(f"Unknown loss '{name}'. Available: {available}")

    return LOSSES[name_lower]()
