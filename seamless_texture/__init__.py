"""Seamless Texture Generation.

This package turns a photograph into a texture that tiles without visible
seams (mirrored, scattered or patch-based synthesis) and renders an N x N
tiling preview for inspecting the seams.

Core classes and functions are exposed for use.
"""

__version__ = '0.1.0'

from .exceptions import (
    SeamlessTextureError,
    DecodeFailure,
    InvalidDimensions,
    AllocationFailure,
    ProcessingError
)
from .models import (
    SeamlessMethod,
    TileFormat,
    OutputFormat,
    CropSettings,
    AveragingSettings,
    OutputSpec,
    ProcessResult
)
from .surface import Rect, Surface
from .preprocess import crop, average
from .synthesis import mirrored, scattered, patch_based, generate_seamless
from .tiling import assemble_preview
from .codec import decode_image, encode_surface
from .pipeline import process_texture, ProcessingSession

# Public API exposed by `from seamless_texture import *`
__all__ = [
    'SeamlessTextureError',
    'DecodeFailure',
    'InvalidDimensions',
    'AllocationFailure',
    'ProcessingError',
    'SeamlessMethod',
    'TileFormat',
    'OutputFormat',
    'CropSettings',
    'AveragingSettings',
    'OutputSpec',
    'ProcessResult',
    'Rect',
    'Surface',
    'crop',
    'average',
    'mirrored',
    'scattered',
    'patch_based',
    'generate_seamless',
    'assemble_preview',
    'decode_image',
    'encode_surface',
    'process_texture',
    'ProcessingSession'
]
