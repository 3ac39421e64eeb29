"""Decoding source images and encoding surfaces with Pillow."""

import io
import os

import numpy as np
from PIL import Image

from .exceptions import DecodeFailure
from .models import OutputSpec
from .surface import Surface


def decode_image(source) -> Surface:
    """Decodes an encoded image into an RGBA surface.

    Args:
        source: Encoded bytes, a file path, or a binary file object.

    Returns:
        The decoded surface.

    Raises:
        DecodeFailure: If the source cannot be read or is not a valid image.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        source = io.BytesIO(bytes(source))
    elif isinstance(source, os.PathLike):
        source = os.fspath(source)
    elif hasattr(source, 'seek'):
        source.seek(0)

    try:
        with Image.open(source) as image:
            rgba = np.array(image.convert('RGBA'))
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeFailure(f"Could not decode image: {e}") from e
    return Surface.from_array(rgba)


def encode_surface(surface: Surface, spec: OutputSpec) -> bytes:
    """Encodes surface as JPEG (alpha dropped, spec.quality) or lossless PNG."""
    image = Image.fromarray(surface.to_array())
    buffer = io.BytesIO()
    if spec.format.pil_format == 'JPEG':
        image.convert('RGB').save(buffer, format='JPEG', quality=int(spec.quality))
    else:
        image.save(buffer, format='PNG')
    return buffer.getvalue()
