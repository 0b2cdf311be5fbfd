"""
Utility Functions for the Convolutional Layer
=============================================

Helper functions for:
- Square matrix allocation and conversion
- Argument validation (shapes, learning rate)
- Weight initialization
- Sample iteration for training

Matrices are plain 2D float64 NumPy arrays. The validation helpers never
raise: they print the reason to stderr and return False, so the layer can
report a recoverable failure to its caller.
"""

import sys

import numpy as np


# ====================================
# Square matrices
# ====================================

def init_matrix(size):
    """Allocate a zero-filled size x size matrix."""
    return np.zeros((size, size), dtype=np.float64)


def to_matrix(data, op_name):
    """
    Convert array-like data to a float64 matrix.

    Args:
        data: ndarray or nested sequence
        op_name: Operation name used in the error message

    Returns:
        float64 ndarray, or None if data is not numeric/rectangular
    """
    try:
        matrix = np.asarray(data)
        if np.iscomplexobj(matrix):
            print(f"Invalid matrix for {op_name}: complex values are not supported!",
                  file=sys.stderr)
            return None
        return matrix.astype(np.float64, copy=False)
    except (TypeError, ValueError) as e:
        print(f"Invalid matrix for {op_name}: {e}", file=sys.stderr)
        return None


def is_matrix_square(matrix, op_name):
    """Check that matrix is two-dimensional with as many rows as columns."""
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        print(f"Matrix for {op_name} must be square, got shape {matrix.shape}!",
              file=sys.stderr)
        return False
    return True


def match_dimensions(expected, actual, op_name):
    """Check that two sizes agree."""
    if expected != actual:
        print(f"Dimension mismatch for {op_name}: expected {expected}, got {actual}!",
              file=sys.stderr)
        return False
    return True


def check_learning_rate(learning_rate, op_name):
    """Learning rate must be a finite number greater than zero."""
    if isinstance(learning_rate, (bool, np.bool_)) or \
            not isinstance(learning_rate, (int, float, np.integer, np.floating)):
        print(f"Invalid learning rate for {op_name}: {learning_rate!r} is not a number!",
              file=sys.stderr)
        return False

    try:
        value = float(learning_rate)
    except (OverflowError, TypeError, ValueError):
        print(f"Invalid learning rate for {op_name}: {learning_rate!r} does not fit a float!",
              file=sys.stderr)
        return False

    if not np.isfinite(value) or value <= 0:
        print(f"Invalid learning rate for {op_name}: {learning_rate} "
              f"(must be finite and greater than 0)!", file=sys.stderr)
        return False
    return True


# ====================================
# Weight initialization
# ====================================

def uniform_init(shape, fan_in):
    """Uniform random values in [0, 1)."""
    return np.random.uniform(0.0, 1.0, size=shape)


def he_init(shape, fan_in):
    """He initialization, suited to ReLU: N(0, 2 / fan_in)."""
    return np.random.randn(*shape) * np.sqrt(2.0 / fan_in)


def xavier_init(shape, fan_in):
    """Xavier initialization: N(0, 1 / fan_in)."""
    return np.random.randn(*shape) * np.sqrt(1.0 / fan_in)


def zeros_init(shape, fan_in):
    return np.zeros(shape, dtype=np.float64)


INITIALIZERS = {
    'uniform': uniform_init,
    'random': uniform_init,
    'he': he_init,
    'kaiming': he_init,
    'xavier': xavier_init,
    'glorot': xavier_init,
    'zeros': zeros_init,
}


def get_initializer(name):
    """
    Get weight initializer by name.

    Args:
        name: String name ('uniform', 'he', ...) or a callable taking
            (shape, fan_in) and returning an array of that shape

    Returns:
        Initializer callable
    """
    if callable(name):
        return name

    name_lower = str(name).lower().replace('-', '_').replace(' ', '_')
    if name_lower not in INITIALIZERS:
        available = ', '.join(INITIALIZERS.keys())
        raise ValueError(f"Unknown initializer '{name}'. Available: {available}")

    return INITIALIZERS[name_lower]


def set_random_seed(seed):
    """Set random seed for reproducibility."""
    np.random.seed(seed)
    print(f"Random seed set to {seed}")


# ====================================
# Training data
# ====================================

def iterate_samples(X, Y, shuffle=True):
    """
    Iterate over (input, target) pairs one sample at a time.

    Args:
        X: Inputs, shape (M, N, N)
        Y: Targets, shape (M, N, N)
        shuffle: Whether to visit samples in random order

    Yields:
        (x, y) tuples of N x N matrices
    """
    n_samples = len(X)

    if shuffle:
        indices = np.random.permutation(n_samples)
    else:
        indices = np.arange(n_samples)

    for idx in indices:
        yield X[idx], Y[idx]
