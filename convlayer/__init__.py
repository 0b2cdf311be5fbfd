"""
convlayer
=========

A trainable 2D convolution layer implemented with NumPy.

- Same-padded cross-correlation with a single square kernel and shared bias
- Forward pass, backward pass (kernel, bias and input gradients)
- Plain gradient descent updates
- Helpers to fit the layer to target maps and to plot its state
"""

from .activations import ReLU, Sigmoid, Tanh, Linear, get_activation
from .layers import Layer, ConvLayer
from .functional import pad_same, crop_same, correlate_same, correlate_backward, ConvGradients
from .losses import MSELoss, get_loss
from .trainer import fit, evaluate, predict
from .utils import get_initializer, set_random_seed
from . import visualizations

__version__ = "1.0.0"
__all__ = [
    # Activations
    'ReLU', 'Sigmoid', 'Tanh', 'Linear', 'get_activation',
    # Layers
    'Layer', 'ConvLayer',
    # Kernels
    'pad_same', 'crop_same', 'correlate_same', 'correlate_backward', 'ConvGradients',
    # Losses
    'MSELoss', 'get_loss',
    # Training
    'fit', 'evaluate', 'predict',
    # Utilities
    'get_initializer', 'set_random_seed',
]
