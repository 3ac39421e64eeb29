import io

import matplotlib
import numpy as np
import pytest
from PIL import Image

from seamless_texture import Surface

matplotlib.use('Agg')


def make_noise(width, height, seed=0):
    rng = np.random.default_rng(seed)
    return Surface.from_array(rng.integers(0, 256, (height, width, 3), dtype=np.uint8))


def make_uniform(width, height, color):
    return Surface.from_array(np.full((height, width, 3), color, dtype=np.uint8))


def encode_png(array):
    buffer = io.BytesIO()
    Image.fromarray(array).save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def noise():
    """64x48 image where almost every pixel is distinct."""
    return make_noise(64, 48)


@pytest.fixture
def odd_noise():
    return make_noise(37, 23, seed=1)


@pytest.fixture
def gradient():
    """Horizontal ramp: column x has value 4 * x in every channel."""
    ramp = np.tile((np.arange(64) * 4).astype(np.uint8), (48, 1))
    return Surface.from_array(ramp)


@pytest.fixture
def red_png():
    return encode_png(np.full((100, 100, 3), (255, 0, 0), dtype=np.uint8))
