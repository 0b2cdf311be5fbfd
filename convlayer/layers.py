"""
Layers
======

Every layer implements the same capability contract (``Layer``):

- ``input_size`` / ``output_size``: side lengths of the square input/output
- ``output``: result of the most recent feedforward
- ``input_gradients``: gradients w.r.t. the input from the most recent
  backpropagate, to hand to the previous layer
- ``feedforward(input)``, ``backpropagate(output_gradients)``,
  ``optimize(learning_rate)``: return True on success, False (with state
  left untouched) when an argument is rejected

A training step is feedforward -> backpropagate -> optimize, once per sample.

Layers implemented:
- ConvLayer: single-kernel, same-padded 2D cross-correlation with ReLU
"""

import numpy as np

from .activations import ReLU, get_activation
from .functional import pad_same, crop_same, correlate_same, correlate_backward
from .utils import (init_matrix, to_matrix, is_matrix_square, match_dimensions,
                    check_learning_rate, get_initializer)


def _read_only(matrix):
    view = matrix.view()
    view.flags.writeable = False
    return view


class Layer:
    """Base class for all layers."""

    def __init__(self):
        self.params = {}    # Trainable parameters
        self.grads = {}     # Gradients of parameters

    @property
    def input_size(self):
        raise NotImplementedError

    @property
    def output_size(self):
        raise NotImplementedError

    @property
    def output(self):
        raise NotImplementedError

    @property
    def input_gradients(self):
        raise NotImplementedError

    def feedforward(self, input):
        """Forward pass."""
        raise NotImplementedError

    def backpropagate(self, output_gradients):
        """Backward pass."""
        raise NotImplementedError

    def optimize(self, learning_rate):
        """Gradient descent step."""
        raise NotImplementedError

    def num_params(self):
        """Number of trainable scalars."""
        return sum(np.size(param) for param in self.params.values())


class ConvLayer(Layer):
    """
    Convolutional layer with a single square kernel and "same" zero-padding.

    The input is padded by kernel_size // 2 zeros on every side so that the
    output has the same size as the input. The kernel is slid over the
    padded input without flipping (cross-correlation) and a single shared
    bias is added at every position before the rectifier.

    Args:
        input_size: Side length N of the square input (and output)
        kernel_size: Side length K of the kernel, 1 <= K <= 11 and K <= N
        act_func: Activation selector ('relu', 'tanh', None, ...). Validated
            and stored, but the forward pass always applies ReLU.
        weight_init: Initializer name or callable (shape, fan_in) -> array,
            used for both kernel and bias (default: 'uniform')

    Raises:
        TypeError: If a size is not an integer
        ValueError: If the sizes are out of range, or act_func/weight_init
            are not recognized

    Parameters:
        params['weight']: kernel, shape (K, K)
        params['bias']: bias, float

    Gradients (filled by backpropagate, kept until the next call):
        grads['weight']: shape (K, K)
        grads['bias']: float

    Note:
        backpropagate treats output_gradients as gradients w.r.t. the
        pre-activation sum; the ReLU derivative is not applied.
    """

    MIN_KERNEL_SIZE = 1
    MAX_KERNEL_SIZE = 11

    def __init__(self, input_size, kernel_size, act_func=None, weight_init='uniform'):
        super().__init__()

        for name, value in (('input_size', input_size), ('kernel_size', kernel_size)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise TypeError(f"{name} must be an integer, got {type(value).__name__}")

        if input_size <= 0:
            raise ValueError(f"Invalid input size {input_size}: input size must be greater than 0!")
        if not self.MIN_KERNEL_SIZE <= kernel_size <= self.MAX_KERNEL_SIZE:
            raise ValueError(f"Invalid kernel size {kernel_size}: kernel size must be in range "
                             f"[{self.MIN_KERNEL_SIZE}, {self.MAX_KERNEL_SIZE}]!")
        if kernel_size > input_size:
            raise ValueError("Failed to create convolutional layer: "
                             "kernel size cannot be greater than input size!")

        self.act_func = get_activation(act_func)
        self._relu = ReLU()

        self._input_size = int(input_size)
        self._kernel_size = int(kernel_size)
        self._pad_offset = self._kernel_size // 2
        self._padded_size = self._input_size + 2 * self._pad_offset

        self._input_padded = init_matrix(self._padded_size)
        self._input_gradients_padded = init_matrix(self._padded_size)
        self._input_gradients = init_matrix(self._input_size)
        self._output = init_matrix(self._input_size)

        self.params['weight'] = init_matrix(self._kernel_size)
        self.params['bias'] = 0.0
        self.grads['weight'] = init_matrix(self._kernel_size)
        self.grads['bias'] = 0.0

        self._init_params(get_initializer(weight_init))

    def _init_params(self, initializer):
        shape = (self._kernel_size, self._kernel_size)
        fan_in = self._kernel_size * self._kernel_size

        weight = np.asarray(initializer(shape, fan_in), dtype=np.float64)
        if weight.shape != shape:
            raise ValueError(f"Initializer returned shape {weight.shape} for kernel, expected {shape}")
        bias = np.asarray(initializer((), fan_in), dtype=np.float64)
        if bias.size != 1:
            raise ValueError(f"Initializer returned shape {bias.shape} for bias, expected ()")

        self.params['weight'][...] = weight
        self.params['bias'] = float(bias.reshape(()))

    @property
    def input_size(self):
        return self._input_size

    @property
    def output_size(self):
        return self._output.shape[0]

    @property
    def kernel_size(self):
        return self._kernel_size

    @property
    def pad_offset(self):
        return self._pad_offset

    @property
    def padded_size(self):
        return self._padded_size

    @property
    def output(self):
        """Output of the most recent feedforward, shape (N, N), read-only."""
        return _read_only(self._output)

    @property
    def input_gradients(self):
        """Gradients w.r.t. the unpadded input, shape (N, N), read-only."""
        return _read_only(self._input_gradients)

    @property
    def input_padded(self):
        """Zero-padded copy of the most recent input, read-only."""
        return _read_only(self._input_padded)

    def _check_matrix(self, data, op_name):
        matrix = to_matrix(data, op_name)
        if matrix is None or not is_matrix_square(matrix, op_name):
            return None
        if not match_dimensions(self.output_size, matrix.shape[0], op_name):
            return None
        return matrix

    def feedforward(self, input):
        """
        Forward pass.

        Args:
            input: Square matrix, shape (N, N)

        Returns:
            True on success, False if input has the wrong shape
        """
        x = self._check_matrix(input, 'feedforward in convolutional layer')
        if x is None:
            return False

        pad_same(x, self._pad_offset, out=self._input_padded)
        correlate_same(self._input_padded, self.params['weight'], self.params['bias'],
                       self._input_size, out=self._output)
        self._output[...] = self._relu(self._output)
        return True

    def backpropagate(self, output_gradients):
        """
        Backward pass.

        Resets and recomputes grads['weight'], grads['bias'] and the input
        gradients from the input captured by the last feedforward. Nothing
        checks that a feedforward actually happened.

        Args:
            output_gradients: Gradients from the next layer, shape (N, N)

        Returns:
            True on success, False if output_gradients has the wrong shape
        """
        deltas = self._check_matrix(output_gradients, 'backpropagation in convolutional layer')
        if deltas is None:
            return False

        gradients = correlate_backward(self._input_padded, self.params['weight'], deltas,
                                       kernel_out=self.grads['weight'],
                                       input_padded_out=self._input_gradients_padded)
        self.grads['bias'] = gradients.bias

        # Border cells are constant zero padding, their gradients are dropped.
        crop_same(self._input_gradients_padded, self._pad_offset, self._input_size,
                  out=self._input_gradients)
        return True

    def optimize(self, learning_rate):
        """
        Apply one plain gradient descent step to kernel and bias.

        Args:
            learning_rate: Step size, finite and greater than 0

        Returns:
            True on success, False for an invalid learning rate
        """
        if not check_learning_rate(learning_rate, 'optimization in convolutional layer'):
            return False

        learning_rate = float(learning_rate)
        self.params['bias'] -= learning_rate * self.grads['bias']
        self.params['weight'] -= learning_rate * self.grads['weight']
        return True

    def __repr__(self):
        return (f"ConvLayer(input_size={self._input_size}, "
                f"kernel_size={self._kernel_size}, act_func={self.act_func!r})")
