"""
Visualization Utilities
=======================

Functions for visualizing:
- Training progress (loss curve)
- The kernel of a convolutional layer
- The layer's padded input, output and input gradients
"""

import numpy as np
import matplotlib.pyplot as plt


def _finish(fig, save_path, show, what):
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"{what} saved to {save_path}")

    if show:
        plt.show()
    return fig


def plot_training_history(history, figsize=(8, 5), save_path=None, show=True):
    """
    Plot the training loss curve.

    Args:
        history: Dictionary with 'loss' (as returned by fit)
        figsize: Figure size
        save_path: Path to save figure
        show: Whether to call plt.show()
    """
    fig, ax = plt.subplots(figsize=figsize)

    epochs = range(1, len(history['loss']) + 1)
    ax.plot(epochs, history['loss'], 'b-', label='Training Loss', linewidth=2)
    ax.set_xlabel('Epoch', fontsize=12)
    ax.set_ylabel('Loss', fontsize=12)
    ax.set_title('Training Loss', fontsize=14)
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)

    return _finish(fig, save_path, show, "Training history plot")


def visualize_kernel(layer, figsize=(5, 5), annotate=True, save_path=None, show=True):
    """
    Show the kernel weights of a convolutional layer as a heat map.

    Args:
        layer: ConvLayer
        figsize: Figure size
        annotate: Write each weight into its cell
        save_path: Path to save figure
        show: Whether to call plt.show()
    """
    kernel = np.asarray(layer.params['weight'])

    fig, ax = plt.subplots(figsize=figsize)
    limit = np.max(np.abs(kernel)) + 1e-8
    im = ax.imshow(kernel, cmap='coolwarm', vmin=-limit, vmax=limit)
    fig.colorbar(im, ax=ax)

    if annotate:
        for i in range(kernel.shape[0]):
            for j in range(kernel.shape[1]):
                ax.text(j, i, f'{kernel[i, j]:.2f}', ha='center', va='center', fontsize=8)

    ax.set_title(f"Kernel {kernel.shape[0]}x{kernel.shape[1]} (bias {layer.params['bias']:.3f})",
                 fontsize=12)
    ax.axis('off')

    return _finish(fig, save_path, show, "Kernel visualization")


def visualize_feature_maps(layer, figsize=(12, 4), save_path=None, show=True):
    """
    Show the padded input, output and input gradients of a layer side by side.

    Args:
        layer: ConvLayer after feedforward (and optionally backpropagate)
        figsize: Figure size
        save_path: Path to save figure
        show: Whether to call plt.show()
    """
    maps = [
        ('Padded Input', layer.input_padded),
        ('Output', layer.output),
        ('Input Gradients', layer.input_gradients),
    ]

    fig, axes = plt.subplots(1, len(maps), figsize=figsize)

    for ax, (title, data) in zip(axes, maps):
        ax.imshow(data, cmap='viridis')
        ax.set_title(title, fontsize=10)
        ax.axis('off')

    fig.suptitle('Feature Maps', fontsize=14)

    return _finish(fig, save_path, show, "Feature maps")
