"""
Training Helpers
================

Fit a single layer to a set of (input, target) map pairs by repeating the
layer's training cycle once per sample:

    layer.feedforward(x)
    layer.backpropagate(loss.backward(layer.output, y))
    layer.optimize(learning_rate)

Example:
    >>> from convlayer import ConvLayer, fit
    >>> layer = ConvLayer(input_size=8, kernel_size=3)
    >>> history = fit(layer, X_train, Y_train, epochs=20, learning_rate=0.01)
    >>> print(f"Final loss: {history['loss'][-1]:.4f}")
"""

import numpy as np
from tqdm import tqdm

from .losses import get_loss
from .utils import iterate_samples


def _check_dataset(layer, X, Y):
    X = np.asarray(X, dtype=np.float64)
    Y = np.asarray(Y, dtype=np.float64)

    expected = (layer.input_size, layer.input_size)
    if X.ndim != 3 or X.shape[1:] != expected:
        raise ValueError(f"Inputs must have shape (M, {expected[0]}, {expected[1]}), got {X.shape}")
    if Y.shape != X.shape:
        raise ValueError(f"Targets must have the same shape as inputs {X.shape}, got {Y.shape}")
    if len(X) == 0:
        raise ValueError("Cannot train on an empty dataset")

    return X, Y


def fit(layer, X, Y, epochs=10, learning_rate=0.01, loss='mse', shuffle=True, verbose=True):
    """
    Train a layer with per-sample gradient descent.

    Args:
        layer: Layer to train (e.g. ConvLayer)
        X: Inputs, shape (M, N, N)
        Y: Targets, shape (M, N, N)
        epochs: Number of passes over the data
        learning_rate: Step size passed to layer.optimize
        loss: Loss name or Loss instance (default: 'mse')
        shuffle: Visit samples in random order each epoch
        verbose: Show a progress bar and per-epoch summary

    Returns:
        History dict with the mean training loss of each epoch under 'loss'

    Raises:
        ValueError: If the data does not match the layer size
        RuntimeError: If the layer rejects a training step
    """
    X, Y = _check_dataset(layer, X, Y)
    loss_fn = get_loss(loss)

    history = {'loss': []}

    for epoch in range(epochs):
        epoch_loss = 0.0
        n_samples = 0

        samples = iterate_samples(X, Y, shuffle=shuffle)
        if verbose:
            samples = tqdm(samples, total=len(X), desc=f"Epoch {epoch+1}/{epochs}")

        for x, y in samples:
            if not layer.feedforward(x):
                raise RuntimeError("Layer rejected the training input")

            epoch_loss += loss_fn(layer.output, y)
            n_samples += 1

            if not layer.backpropagate(loss_fn.backward(layer.output, y)):
                raise RuntimeError("Layer rejected the output gradients")
            if not layer.optimize(learning_rate):
                raise RuntimeError(f"Layer rejected learning rate {learning_rate}")

            if verbose and hasattr(samples, 'set_postfix'):
                samples.set_postfix({'loss': f'{epoch_loss/n_samples:.4f}'})

        avg_loss = epoch_loss / n_samples
        history['loss'].append(avg_loss)

        if verbose:
            print(f"Epoch {epoch+1}/{epochs} - Loss: {avg_loss:.6f}")

    return history


def evaluate(layer, X, Y, loss='mse'):
    """
    Mean loss of the layer over a dataset, without updating it.

    Returns:
        Mean loss as float
    """
    X, Y = _check_dataset(layer, X, Y)
    loss_fn = get_loss(loss)

    total = 0.0
    for x, y in zip(X, Y):
        if not layer.feedforward(x):
            raise RuntimeError("Layer rejected the evaluation input")
        total += loss_fn(layer.output, y)

    return total / len(X)


def predict(layer, x):
    """
    Run one sample through the layer.

    Returns:
        Copy of the layer output, shape (N, N)
    """
    if not layer.feedforward(x):
        raise ValueError(f"Input does not fit layer of size {layer.input_size}")
    return np.array(layer.output)
