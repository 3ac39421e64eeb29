"""
Utility functions for the seamless texture tools.

This module provides helpers for loading and saving images and for
visualizing a texture next to its source and tiling preview.
"""

import os
import numpy as np
import matplotlib.pyplot as plt
from PIL import Image


def load_texture(path: str) -> np.ndarray:
    """Loads an image from a file path into a NumPy array (RGB).

    Args:
        path: Path to the image file.

    Returns:
        Image as a NumPy array (H, W, 3), RGB format.

    Raises:
        ValueError: If the image cannot be loaded.
    """
    try:
        with Image.open(path) as image:
            return np.array(image.convert('RGB'))
    except (OSError, ValueError) as e:
        raise ValueError(f"Could not load texture from {path}: {e}") from e


def save_image(image: np.ndarray, path: str):
    """Saves a NumPy image array to a file.

    Args:
        image: NumPy array representing the image (H, W), (H, W, 3) or (H, W, 4).
        path: Output file path.

    Raises:
        ValueError: If the image cannot be saved.
    """
    try:
        if image.dtype != np.uint8:
            image = np.clip(image, 0, 255).astype(np.uint8)

        dir_path = os.path.dirname(path)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)

        Image.fromarray(image).save(path)
    except (OSError, ValueError, KeyError) as e:
        raise ValueError(f"Could not save image to {path}: {e}") from e


def save_bytes(data: bytes, path: str):
    """Writes already encoded image bytes, creating the directory if needed."""
    dir_path = os.path.dirname(path)
    if dir_path:
        os.makedirs(dir_path, exist_ok=True)
    with open(path, 'wb') as f:
        f.write(data)


def visualize_results(original: np.ndarray, seamless: np.ndarray, preview: np.ndarray,
                      title: str = None, save_path: str = None) -> np.ndarray:
    """Shows the source, the seamless texture and its tiling preview side by side.

    Args:
        original: The source image.
        seamless: The seamless texture.
        preview: The tiled preview.
        title: Optional title for the entire visualization.
        save_path: Optional path to save the visualization image.

    Returns:
        A NumPy array representing the visualization image (RGB).
    """
    fig = plt.figure(figsize=(18, 6))

    panels = [(original, 'Original Image'), (seamless, 'Seamless Texture'),
              (preview, 'Tiling Preview')]
    for i, (image, label) in enumerate(panels, start=1):
        plt.subplot(1, 3, i)
        plt.imshow(image)
        plt.title(label)
        plt.axis('off')

    if title:
        plt.suptitle(title, fontsize=16)

    plt.tight_layout()

    if save_path:
        save_dir = os.path.dirname(save_path)
        if save_dir:
            os.makedirs(save_dir, exist_ok=True)
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    fig.canvas.draw()
    img = np.asarray(fig.canvas.buffer_rgba())[..., :3].copy()

    plt.close(fig)
    return img
