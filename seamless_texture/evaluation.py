"""
Quality measures for seamless textures.
"""

import numpy as np
import cv2
from skimage.metrics import structural_similarity as ssim

from .surface import Surface


def _rgb(image) -> np.ndarray:
    if isinstance(image, Surface):
        return image.rgb()
    image = np.asarray(image)
    if image.ndim == 2:
        return np.stack([image, image, image], axis=2)
    return image[..., :3]


def wrap_seam_error(texture):
    """
    Compare the jump across the wrap seams with typical neighbour differences.

    Parameters:
    -----------
    texture : ndarray or Surface
        Texture to check

    Returns:
    --------
    float
        Mean absolute difference across the left/right and top/bottom wrap
        seams divided by the mean difference between interior neighbours.
        Values around 1 or below mean the seam is indistinguishable from the
        texture itself. 0.0 for flat images.
    """
    img = _rgb(texture).astype(np.float64)

    seam_x = np.abs(img[:, 0] - img[:, -1]).mean()
    seam_y = np.abs(img[0, :] - img[-1, :]).mean()
    seam = (seam_x + seam_y) / 2

    interior_x = np.abs(np.diff(img, axis=1)).mean() if img.shape[1] > 1 else 0.0
    interior_y = np.abs(np.diff(img, axis=0)).mean() if img.shape[0] > 1 else 0.0
    interior = (interior_x + interior_y) / 2

    if interior == 0:
        return 0.0 if seam == 0 else float('inf')
    return float(seam / interior)


def compute_ssim_patches(original, texture, patch_size=64, num_patches=20, rng=None):
    """
    Compute SSIM between random patches from the original and the texture.

    Parameters:
    -----------
    original : ndarray or Surface
        Source image
    texture : ndarray or Surface
        Seamless texture
    patch_size : int
        Size of patches to compare
    num_patches : int
        Number of random patches to sample
    rng : numpy.random.Generator, optional
        Random generator for patch positions

    Returns:
    --------
    float
        Average SSIM value, 0.0 when the images are too small to compare
    """
    original = _rgb(original)
    texture = _rgb(texture)
    rng = rng if rng is not None else np.random.default_rng()

    h_orig, w_orig = original.shape[:2]
    h_tex, w_tex = texture.shape[:2]
    patch_size = min(patch_size, h_orig, w_orig, h_tex, w_tex)

    if patch_size < 8:  # Minimum reasonable patch size
        return 0.0

    win_size = min(7, patch_size // 2 * 2 - 1)
    ssim_values = []
    for _ in range(num_patches):
        i_orig = rng.integers(0, h_orig - patch_size, endpoint=True)
        j_orig = rng.integers(0, w_orig - patch_size, endpoint=True)
        patch_orig = original[i_orig:i_orig + patch_size, j_orig:j_orig + patch_size]

        i_tex = rng.integers(0, h_tex - patch_size, endpoint=True)
        j_tex = rng.integers(0, w_tex - patch_size, endpoint=True)
        patch_tex = texture[i_tex:i_tex + patch_size, j_tex:j_tex + patch_size]

        ssim_values.append(ssim(patch_orig, patch_tex, data_range=255,
                                win_size=win_size, channel_axis=2))

    return float(np.mean(ssim_values))


def _chi_square(hist_a, hist_b):
    return 0.5 * np.sum((hist_a - hist_b) ** 2 / (hist_a + hist_b + 1e-10), axis=-1)


def _channel_histograms(image, bins=64):
    """Normalised per-channel histograms, shape (3, bins)."""
    image = np.ascontiguousarray(_rgb(image))
    hists = [cv2.calcHist([image], [c], None, [bins], [0, 256]).flatten() for c in range(3)]
    hists = np.stack(hists)
    return hists / hists.sum(axis=1, keepdims=True)


def _wrap_strips(texture, strip):
    """Pairs of strips that touch across the wrap seams: (right, left) and (bottom, top)."""
    img = _rgb(texture)
    k_x = max(1, min(strip, img.shape[1] // 2))
    k_y = max(1, min(strip, img.shape[0] // 2))
    return [(img[:, -k_x:], img[:, :k_x]), (img[-k_y:], img[:k_y])]


def compute_histogram_distance(original, texture):
    """
    Chi-square distance between 64-bin colour histograms, averaged over channels.
    """
    return float(np.mean(_chi_square(_channel_histograms(original),
                                     _channel_histograms(texture))))


def compute_border_histogram_distance(texture, strip=8):
    """
    Chi-square distance between the colour histograms of the strips meeting
    at the horizontal and the vertical wrap seams. A lighting or colour jump
    across a seam shows up here even when the seam pixels line up.
    """
    distances = [np.mean(_chi_square(_channel_histograms(a), _channel_histograms(b)))
                 for a, b in _wrap_strips(texture, strip)]
    return float(np.mean(distances))


def compute_edge_ssim(texture, strip=8):
    """
    SSIM between the opposite edge strips that become neighbours once the
    texture is wrapped (last columns vs first columns, last rows vs first rows).

    Returns:
    --------
    float
        Average of the two SSIM values, 0.0 when the strips are too small
        for a 3x3 window
    """
    values = []
    for a, b in _wrap_strips(texture, strip):
        smallest = min(a.shape[:2])
        win_size = min(7, smallest if smallest % 2 else smallest - 1)
        if win_size < 3:
            return 0.0
        values.append(ssim(a, b, data_range=255, win_size=win_size, channel_axis=2))
    return float(np.mean(values))


def evaluate_seamlessness(original, texture, verbose=True, rng=None):
    """
    Evaluate how well a texture tiles and how close it stays to its source.

    Returns:
    --------
    dict
        wrap_seam_error, edge_ssim, border_histogram_distance (seam measures)
        and ssim, histogram_distance (similarity to the source)
    """
    results = {
        'wrap_seam_error': wrap_seam_error(texture),
        'edge_ssim': compute_edge_ssim(texture),
        'border_histogram_distance': compute_border_histogram_distance(texture),
        'ssim': compute_ssim_patches(original, texture, rng=rng),
        'histogram_distance': compute_histogram_distance(original, texture),
    }

    if verbose:
        print("\n" + "=" * 50)
        print("SEAMLESS TEXTURE EVALUATION")
        print("=" * 50)
        print(f"Wrap Seam Error:      {results['wrap_seam_error']:.4f} (lower is better, ~1 is invisible)")
        print(f"Edge SSIM:            {results['edge_ssim']:.4f} (higher is better)")
        print(f"Border Hist Distance: {results['border_histogram_distance']:.4f} (lower is better)")
        print(f"SSIM vs Source:       {results['ssim']:.4f} (higher is better)")
        print(f"Histogram Distance:   {results['histogram_distance']:.4f} (lower is better)")
        print("=" * 50)

    return results
