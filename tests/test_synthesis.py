import numpy as np
import pytest

from seamless_texture import (SeamlessMethod, generate_seamless, mirrored, patch_based,
                              scattered)
from seamless_texture.synthesis import (PATCH_EDGE_MARGIN, SYNTHESIS_METHODS, scatter_region,
                                        torus_shift)

from conftest import make_noise, make_uniform


def rolled(surface):
    """Reference torus shift of a surface's pixels."""
    w, h = surface.size
    return np.roll(surface.pixels, (h - h // 2, w - w // 2), axis=(0, 1))


@pytest.mark.parametrize("fixture", ["noise", "odd_noise"])
def test_mirrored_edges_reflect_exactly(fixture, request):
    source = request.getfixturevalue(fixture)
    out = mirrored(source).pixels
    assert out.shape == source.pixels.shape
    assert np.array_equal(out[:, 0], out[:, -1])
    assert np.array_equal(out[0, :], out[-1, :])
    # the whole texture is symmetric about both centre lines
    assert np.array_equal(out, out[:, ::-1])
    assert np.array_equal(out, out[::-1, :])


def test_mirrored_uniform_stays_uniform():
    out = mirrored(make_uniform(100, 100, (255, 0, 0)))
    assert (out.pixels == [255, 0, 0, 255]).all()


def test_mirrored_tiny_images():
    for w, h in [(1, 1), (1, 5), (2, 3)]:
        assert mirrored(make_noise(w, h)).size == (w, h)


@pytest.mark.parametrize("fixture", ["noise", "odd_noise"])
def test_torus_shift_matches_wraparound(fixture, request):
    source = request.getfixturevalue(fixture)
    assert np.array_equal(torus_shift(source).pixels, rolled(source))


def test_scattered_keeps_shifted_border(noise):
    out = scattered(noise).pixels
    reference = rolled(noise)
    x, y, w, h = scatter_region(*noise.size)
    assert np.array_equal(out[:, :x], reference[:, :x])
    assert np.array_equal(out[:, x + w:], reference[:, x + w:])
    assert np.array_equal(out[:y], reference[:y])
    assert np.array_equal(out[y + h:], reference[y + h:])


def test_scattered_covers_centre_with_original(noise):
    out = scattered(noise).pixels
    cy, cx = noise.height // 2, noise.width // 2
    assert np.array_equal(out[cy - 2:cy + 3, cx - 2:cx + 3], noise.pixels[cy - 2:cy + 3, cx - 2:cx + 3])


def test_scattered_wrap_seam_continues_source(gradient):
    out = scattered(gradient).rgb().astype(int)
    # columns on either side of the wrap seam were neighbours in the source
    assert (np.abs(out[:, 0] - out[:, -1]) == 4).all()
    assert np.array_equal(out[0], out[-1])


def test_scattered_odd_size(odd_noise):
    out = scattered(odd_noise)
    assert out.size == (37, 23)
    assert np.array_equal(out.pixels[:, 0], rolled(odd_noise)[:, 0])


def test_strategies_do_not_modify_input(noise):
    before = noise.to_array()
    for strategy in (mirrored, scattered, patch_based):
        strategy(noise)
        assert np.array_equal(noise.pixels, before)


def test_patch_based_border_matches_scattered(noise):
    base = scattered(noise).pixels
    out = patch_based(noise, seed=7).pixels
    m = PATCH_EDGE_MARGIN
    assert np.array_equal(out[:, :m], base[:, :m])
    assert np.array_equal(out[:, -m:], base[:, -m:])
    assert np.array_equal(out[:m], base[:m])
    assert np.array_equal(out[-m:], base[-m:])


def test_patch_based_runs_share_border():
    source = make_noise(120, 90, seed=3)
    first = patch_based(source).pixels
    second = patch_based(source).pixels
    m = PATCH_EDGE_MARGIN
    assert np.array_equal(first[:, :m], second[:, :m])
    assert np.array_equal(first[:, -m:], second[:, -m:])
    assert np.array_equal(first[:m], second[:m])
    assert np.array_equal(first[-m:], second[-m:])


def test_patch_based_seed_is_reproducible(noise):
    a = patch_based(noise, seed=11)
    b = patch_based(noise, rng=np.random.default_rng(11))
    assert np.array_equal(a.pixels, b.pixels)


def test_patch_based_changes_interior(noise):
    assert not np.array_equal(patch_based(noise, seed=1).pixels, scattered(noise).pixels)


def test_patch_based_small_image_degenerates_to_scattered():
    source = make_noise(20, 20)
    assert np.array_equal(patch_based(source, seed=0).pixels, scattered(source).pixels)


def test_dispatch_table_covers_every_method():
    assert set(SYNTHESIS_METHODS) == set(SeamlessMethod)


@pytest.mark.parametrize("method", ["mirrored", SeamlessMethod.SCATTERED])
def test_generate_seamless_dispatches(noise, method):
    expected = SYNTHESIS_METHODS[SeamlessMethod(method)](noise)
    assert np.array_equal(generate_seamless(noise, method).pixels, expected.pixels)


def test_generate_seamless_passes_rng_to_patch_based(noise):
    out = generate_seamless(noise, 'patch_based', rng=np.random.default_rng(5))
    assert np.array_equal(out.pixels, patch_based(noise, seed=5).pixels)


def test_generate_seamless_unknown_method(noise):
    with pytest.raises(ValueError):
        generate_seamless(noise, 'kaleidoscope')


@pytest.mark.parametrize("size", range(1, 20))
def test_scattered_narrow_images_keep_wrap_edges(size):
    for source in (make_noise(size, 40, seed=size), make_noise(40, size, seed=size)):
        out = scattered(source).pixels
        reference = rolled(source)
        assert np.array_equal(out[:, 0], reference[:, 0])
        assert np.array_equal(out[:, -1], reference[:, -1])
        assert np.array_equal(out[0], reference[0])
        assert np.array_equal(out[-1], reference[-1])


@pytest.mark.parametrize("width,height", [(3, 3), (4, 9), (5, 5), (64, 48), (37, 23)])
def test_scatter_region_stays_inside_border(width, height):
    x, y, w, h = scatter_region(width, height)
    assert x >= 1 and y >= 1
    assert x + w <= width - 1 and y + h <= height - 1
    assert w >= 1 and h >= 1


def test_scatter_region_none_for_two_pixel_images():
    assert scatter_region(2, 50) is None
    assert scatter_region(50, 1) is None
