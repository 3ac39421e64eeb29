"""
End-to-end processing: decode -> crop -> average -> synthesize -> tile -> encode.
"""

import itertools
import threading
import time
from typing import Optional

import cv2
import numpy as np

from .codec import decode_image, encode_surface
from .exceptions import ProcessingError, SeamlessTextureError
from .models import (AveragingSettings, CropSettings, OutputSpec, ProcessResult,
                     SeamlessMethod, TileFormat)
from .preprocess import average, crop
from .surface import Surface
from .synthesis import generate_seamless
from .tiling import assemble_preview


def _as_surface(source) -> Surface:
    if isinstance(source, Surface):
        return source
    if isinstance(source, np.ndarray):
        return Surface.from_array(source)
    return decode_image(source)


def process_texture(source, method=SeamlessMethod.SCATTERED, tile_format=TileFormat.TWO,
                    mark_seams: bool = False, crop_settings: Optional[CropSettings] = None,
                    averaging: Optional[AveragingSettings] = None,
                    output: Optional[OutputSpec] = None,
                    rng: Optional[np.random.Generator] = None,
                    verbose: bool = False) -> ProcessResult:
    """Turns a source image into an encoded seamless texture and tiling preview.

    Args:
        source: Encoded image bytes, a path, a binary file object, an already
                decoded Surface or an image array.
        method: Synthesis strategy (SeamlessMethod or its string value).
        tile_format: Preview grid size N (1, 2 or 3).
        mark_seams: Outline each preview cell.
        crop_settings: Edge crop; a crop leaving no pixels is skipped.
        averaging: Lighting flattening; intensity 0 disables it.
        output: Encoding of both returned images.
        rng: Random generator for the patch-based strategy.
        verbose: Print stage summaries.

    Returns:
        ProcessResult with the width/height of the seamless texture.

    Raises:
        ValueError: For an unknown method or tile format.
        ProcessingError: If any stage fails. No partial result is returned.
    """
    method = SeamlessMethod(method)
    tile_format = TileFormat(tile_format)
    crop_settings = crop_settings or CropSettings()
    averaging = averaging or AveragingSettings()
    output = output or OutputSpec()

    start_time = time.time()
    try:
        working = _as_surface(source)
        if verbose:
            print(f"Source image: {working.width}x{working.height}")
        working = crop(working, crop_settings, verbose=verbose)
        working = average(working, averaging, verbose=verbose)

        seamless = generate_seamless(working, method, rng=rng, verbose=verbose)
        preview = assemble_preview(seamless, tile_format, mark_seams)

        seamless_bytes = encode_surface(seamless, output)
        preview_bytes = encode_surface(preview, output)
    except (SeamlessTextureError, MemoryError, cv2.error) as e:
        raise ProcessingError(f"An error occurred while processing the image: {e}") from e

    if verbose:
        print(f"Processing completed in {time.time() - start_time:.2f} seconds")

    return ProcessResult(
        seamless_image=seamless_bytes,
        preview_image=preview_bytes,
        width=seamless.width,
        height=seamless.height,
        mime_type=output.format.mime_type,
    )


class ProcessingSession:
    """Hands out generation tokens so only the newest invocation's result is kept.

    Invocations are not cancelled; a run whose token has been superseded by
    the time it finishes returns None instead of its result.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._latest = 0

    def begin(self) -> int:
        with self._lock:
            self._latest = next(self._counter)
            return self._latest

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest

    def run(self, source, **options) -> Optional[ProcessResult]:
        """Runs process_texture under a new token; None if a newer run started meanwhile."""
        token = self.begin()
        result = process_texture(source, **options)
        if not self.is_current(token):
            return None
        return result
