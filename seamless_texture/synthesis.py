"""
Seamless texture synthesis strategies.

Each strategy takes a working surface of size (W, H) and returns a new
seamless surface of the same size without modifying its input:

- mirrored: four flipped half-size copies; exact seams, symmetric content.
- scattered: torus shift by half the size, with the resulting centre cross
  hidden under a feathered patch from the original centre.
- patch_based: scattered, then 30 random feathered patches splattered away
  from the borders.
"""

from typing import Callable, Dict, Optional, Tuple

import numpy as np
from tqdm import tqdm

from .models import SeamlessMethod
from .surface import Rect, Surface, feather_stops

# Scattered: size of the centre patch relative to the image, and where its feather starts
SCATTER_BLEND_FRACTION = 0.7
SCATTER_FEATHER_START = 0.5

# Patch based
PATCH_COUNT = 30
PATCH_MIN_FRACTION = 0.2
PATCH_MAX_FRACTION = 0.5
PATCH_FEATHER_START = 0.6
PATCH_EDGE_MARGIN = 10


def mirrored(surface: Surface) -> Surface:
    """Mirror tile: the whole image squashed into each quadrant, flipped per quadrant.

    With odd sizes the two halves share their middle row/column, so every
    quadrant is drawn at the same (rounded up) size and the edges still
    reflect exactly.
    """
    w, h = surface.size
    quad_w, quad_h = (w + 1) // 2, (h + 1) // 2
    right, bottom = w - quad_w, h - quad_h
    output = Surface.allocate(w, h)

    placements = [
        (0, 0, False, False),
        (right, 0, True, False),
        (0, bottom, False, True),
        (right, bottom, True, True),
    ]
    for x, y, flip_x, flip_y in placements:
        output.blit(surface, surface.bounds(), Rect(x, y, quad_w, quad_h),
                    flip_x=flip_x, flip_y=flip_y)
    return output.freeze()


def torus_shift(surface: Surface) -> Surface:
    """Swaps the four quadrants so the original image edges meet at the centre lines.

    Half sizes are floored; the right and bottom source quadrants absorb the
    odd remainder so the four blits tile the output exactly.
    """
    w, h = surface.size
    half_w, half_h = w // 2, h // 2
    output = Surface.allocate(w, h)

    # (source quadrant, destination origin)
    quadrants = [
        (Rect(0, 0, half_w, half_h), (w - half_w, h - half_h)),
        (Rect(half_w, 0, w - half_w, half_h), (0, h - half_h)),
        (Rect(0, half_h, half_w, h - half_h), (w - half_w, 0)),
        (Rect(half_w, half_h, w - half_w, h - half_h), (0, 0)),
    ]
    for src_rect, (dx, dy) in quadrants:
        # 1-pixel wide or tall images have empty quadrants
        if src_rect.width <= 0 or src_rect.height <= 0:
            continue
        output.blit(surface, src_rect, Rect(dx, dy, src_rect.width, src_rect.height))
    return output


def _feathered_patch(surface: Surface, rect: Rect, feather_start: float) -> Surface:
    patch = surface.crop(rect)
    mask = Surface.radial_gradient_mask(rect.width, rect.height, feather_stops(feather_start))
    return patch.composite_mask(mask)


def _blend_span(size: int) -> Optional[Tuple[int, int]]:
    # Images under 3px have no interior between the two wrap edges
    if size < 3:
        return None
    length = int(round(size * SCATTER_BLEND_FRACTION))
    offset = max(1, (size - length) // 2)
    return offset, min(length, size - 2 * offset)


def scatter_region(width: int, height: int) -> Optional[Rect]:
    """Centred rectangle covered by the scattered patch, or None for 1-2px wide/tall images.

    The rectangle never includes the first or last row/column.
    """
    span_x = _blend_span(width)
    span_y = _blend_span(height)
    if span_x is None or span_y is None:
        return None
    return Rect(span_x[0], span_y[0], span_x[1], span_y[1])


def scattered(surface: Surface) -> Surface:
    """Torus shift, then cover the centre cross with a soft patch of the original centre.

    The patch spans 70% of each dimension and is centred, so the outer 15%
    on every side keeps the exact wrap produced by the shift.
    """
    output = torus_shift(surface)
    region = scatter_region(*surface.size)
    if region is not None:
        patch = _feathered_patch(surface, region, SCATTER_FEATHER_START)
        output.draw_over(patch, region.x, region.y)
    return output.freeze()


def patch_based(surface: Surface, rng: Optional[np.random.Generator] = None,
                seed: Optional[int] = None, patch_count: int = PATCH_COUNT,
                verbose: bool = False) -> Surface:
    """Scattered base with randomly placed feathered patches on top.

    Args:
        surface: Working surface to sample patches from.
        rng: Random generator; takes precedence over seed.
        seed: Seed for a new generator when rng is not given. With neither,
              placement differs on every call.
        patch_count: Number of patches to splatter.
        verbose: Show a progress bar.

    Returns:
        The seamless surface. Patches stay PATCH_EDGE_MARGIN pixels away from
        every edge, so the border is identical to the scattered result.
    """
    if rng is None:
        rng = np.random.default_rng(seed)

    w, h = surface.size
    output = scattered(surface).copy()
    short_side = min(w, h)
    margin = PATCH_EDGE_MARGIN

    for _ in tqdm(range(patch_count), desc="Splatting patches", disable=not verbose):
        size = int(rng.uniform(PATCH_MIN_FRACTION * short_side,
                               PATCH_MAX_FRACTION * short_side))
        if size < 1 or w - size - 2 * margin <= 0 or h - size - 2 * margin <= 0:
            continue

        sx = int(rng.integers(0, w - size, endpoint=True))
        sy = int(rng.integers(0, h - size, endpoint=True))
        dx = int(rng.integers(margin, w - size - margin, endpoint=True))
        dy = int(rng.integers(margin, h - size - margin, endpoint=True))

        patch = _feathered_patch(surface, Rect(sx, sy, size, size), PATCH_FEATHER_START)
        output.draw_over(patch, dx, dy)

    return output.freeze()


SYNTHESIS_METHODS: Dict[SeamlessMethod, Callable[..., Surface]] = {
    SeamlessMethod.MIRRORED: mirrored,
    SeamlessMethod.SCATTERED: scattered,
    SeamlessMethod.PATCH_BASED: patch_based,
}


def generate_seamless(surface: Surface, method=SeamlessMethod.SCATTERED,
                      rng: Optional[np.random.Generator] = None,
                      verbose: bool = False) -> Surface:
    """Runs the strategy selected by method (an enum member or its string value)."""
    method = SeamlessMethod(method)
    strategy = SYNTHESIS_METHODS[method]
    if verbose:
        print(f"Synthesizing {surface.width}x{surface.height} texture ({method.value})...")
    if method is SeamlessMethod.PATCH_BASED:
        return strategy(surface, rng=rng, verbose=verbose)
    return strategy(surface)
