import numpy as np
import pytest

from seamless_texture import scattered
from seamless_texture.evaluation import (compute_border_histogram_distance, compute_edge_ssim,
                                         compute_histogram_distance, compute_ssim_patches,
                                         evaluate_seamlessness, wrap_seam_error)

from conftest import make_uniform


def test_flat_image_has_no_seam():
    assert wrap_seam_error(make_uniform(10, 10, (5, 5, 5))) == 0.0


def test_scattered_reduces_seam_error(gradient):
    assert wrap_seam_error(scattered(gradient)) < wrap_seam_error(gradient)


def test_wrap_seam_error_accepts_arrays(gradient):
    assert wrap_seam_error(gradient.rgb()) == pytest.approx(wrap_seam_error(gradient))


def test_histogram_distance_identical_is_zero(noise):
    assert compute_histogram_distance(noise, noise) == pytest.approx(0.0, abs=1e-9)


def test_histogram_distance_differs():
    black = make_uniform(16, 16, (0, 0, 0))
    white = make_uniform(16, 16, (255, 255, 255))
    assert compute_histogram_distance(black, white) > 0.9


def test_ssim_uniform_images():
    a = make_uniform(32, 32, (80, 90, 100))
    assert compute_ssim_patches(a, a, patch_size=16, num_patches=3,
                                rng=np.random.default_rng(0)) == pytest.approx(1.0)


def test_ssim_too_small():
    a = make_uniform(4, 4, (1, 2, 3))
    assert compute_ssim_patches(a, a) == 0.0


def test_evaluate_seamlessness(noise, capsys):
    results = evaluate_seamlessness(noise, scattered(noise), verbose=True,
                                    rng=np.random.default_rng(0))
    assert set(results) == {'wrap_seam_error', 'edge_ssim', 'border_histogram_distance',
                            'ssim', 'histogram_distance'}
    assert -1.0 <= results['edge_ssim'] <= 1.0
    assert "SEAMLESS TEXTURE EVALUATION" in capsys.readouterr().out


def periodic_texture():
    """64x48 texture built from an 8x8 block, so opposite edge strips are identical."""
    block = np.random.default_rng(5).integers(0, 256, (8, 8, 3), dtype=np.uint8)
    return np.tile(block, (6, 8, 1))


def test_edge_ssim_periodic_texture():
    assert compute_edge_ssim(periodic_texture()) == pytest.approx(1.0)


def test_edge_ssim_drops_for_mismatched_edges(noise):
    assert compute_edge_ssim(noise) < 0.5


def test_edge_ssim_too_small():
    assert compute_edge_ssim(make_uniform(2, 2, (9, 9, 9))) == 0.0


def test_border_histogram_distance():
    assert compute_border_histogram_distance(periodic_texture()) == pytest.approx(0.0, abs=1e-9)

    halves = np.zeros((32, 32, 3), dtype=np.uint8)
    halves[:, 16:] = 255
    # left strip black, right strip white: maximal distance across the vertical seam
    assert compute_border_histogram_distance(halves) > 0.4
