"""
Convolution Kernels
===================

Pure NumPy implementations of the same-padded 2D cross-correlation and its
gradients. The layer in layers.py keeps its buffers between calls and passes
them in through the ``out`` arguments; called without them, every function
allocates and returns fresh arrays and has no side effects.

Forward (no kernel flip):
    out[i, j] = bias + sum_{ki, kj} x_padded[i + ki, j + kj] * kernel[ki, kj]

Backward, for deltas d = dL/d(out):
    dL/dbias             = sum_{i, j} d[i, j]
    dL/dkernel[ki, kj]   = sum_{i, j} x_padded[i + ki, j + kj] * d[i, j]
    dL/dx_padded[p, q]  += kernel[ki, kj] * d[i, j]   where p = i + ki, q = j + kj
"""

from collections import namedtuple

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view


ConvGradients = namedtuple('ConvGradients', ['kernel', 'bias', 'input_padded'])


def pad_same(x, pad_offset, out=None):
    """
    Zero-pad a square matrix by pad_offset cells on every side.

    Args:
        x: Input, shape (N, N)
        pad_offset: Border width
        out: Optional buffer of shape (N + 2p, N + 2p), overwritten

    Returns:
        Padded matrix
    """
    n = x.shape[0]
    padded_size = n + 2 * pad_offset

    if out is None:
        out = np.zeros((padded_size, padded_size), dtype=np.float64)
    else:
        out.fill(0.0)

    out[pad_offset:pad_offset + n, pad_offset:pad_offset + n] = x
    return out


def crop_same(x_padded, pad_offset, size, out=None):
    """Extract the interior size x size region, dropping the padding border."""
    interior = x_padded[pad_offset:pad_offset + size, pad_offset:pad_offset + size]

    if out is None:
        return interior.copy()

    out[...] = interior
    return out


def _windows(x_padded, kernel_size, size):
    # (size, size, K, K) view of every kernel-sized patch, no copy.
    # Even kernels leave one extra row/column of windows which is never used.
    return sliding_window_view(x_padded, (kernel_size, kernel_size))[:size, :size]


def correlate_same(x_padded, kernel, bias, size, out=None):
    """
    Cross-correlate a padded input with the kernel and add the bias.

    Args:
        x_padded: Zero-padded input, shape (N + 2p, N + 2p)
        kernel: Weights, shape (K, K)
        bias: Scalar added at every position
        size: Output side length N
        out: Optional (N, N) buffer, overwritten

    Returns:
        Pre-activation output, shape (N, N)
    """
    windows = _windows(x_padded, kernel.shape[0], size)
    result = np.einsum('ijkl,kl->ij', windows, kernel) + bias

    if out is None:
        return result

    out[...] = result
    return out


def correlate_backward(x_padded, kernel, output_gradients,
                       kernel_out=None, input_padded_out=None):
    """
    Gradients of the same-padded cross-correlation.

    The padded input gradient includes the border cells; callers crop it with
    crop_same to get the gradient w.r.t. the unpadded input.

    Args:
        x_padded: Padded input captured by the forward pass
        kernel: Weights used in the forward pass, shape (K, K)
        output_gradients: Deltas w.r.t. the output, shape (N, N)
        kernel_out: Optional (K, K) buffer, overwritten
        input_padded_out: Optional buffer shaped like x_padded, overwritten

    Returns:
        ConvGradients(kernel, bias, input_padded)
    """
    size = output_gradients.shape[0]
    kernel_size = kernel.shape[0]

    bias_grad = float(np.sum(output_gradients))

    windows = _windows(x_padded, kernel_size, size)
    kernel_grad = np.einsum('ijkl,ij->kl', windows, output_gradients)
    if kernel_out is not None:
        kernel_out[...] = kernel_grad
        kernel_grad = kernel_out

    if input_padded_out is None:
        input_padded_grad = np.zeros_like(x_padded, dtype=np.float64)
    else:
        input_padded_grad = input_padded_out
        input_padded_grad.fill(0.0)

    # Scatter each kernel weight over every padded cell it touched in the
    # forward pass; overlapping windows accumulate.
    for ki in range(kernel_size):
        for kj in range(kernel_size):
            input_padded_grad[ki:ki + size, kj:kj + size] += kernel[ki, kj] * output_gradients

    return ConvGradients(kernel_grad, bias_grad, input_padded_grad)
