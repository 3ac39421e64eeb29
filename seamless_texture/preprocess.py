"""
Pre-processing applied to the source image before synthesis:
edge cropping and luminance flattening (averaging).
"""

from .exceptions import InvalidDimensions
from .models import AveragingSettings, CropSettings
from .surface import Rect, Surface


def crop(surface: Surface, settings: CropSettings, verbose: bool = False) -> Surface:
    """Removes settings.top/bottom/left/right pixels from the edges of surface.

    A crop that would leave no pixels is skipped and the input surface is
    returned unchanged.
    """
    if settings.is_empty:
        return surface

    new_width = surface.width - settings.left - settings.right
    new_height = surface.height - settings.top - settings.bottom
    try:
        cropped = Surface.allocate(new_width, new_height)
    except InvalidDimensions as e:
        if verbose:
            print(f"Skipping crop: {e}")
        return surface

    cropped.blit(surface, Rect(settings.left, settings.top, new_width, new_height),
                 Rect(0, 0, new_width, new_height))
    if verbose:
        print(f"Cropped {surface.width}x{surface.height} -> {new_width}x{new_height}")
    return cropped.freeze()


def average(surface: Surface, settings: AveragingSettings, verbose: bool = False) -> Surface:
    """Flattens local lighting by pulling each pixel toward its blurred neighbourhood.

    The blurred copy is blended over the original with alpha = intensity / 100,
    so intensity 100 yields exactly the blurred image and 0 disables the stage.
    """
    if settings.intensity <= 0:
        return surface

    blurred = surface.gaussian_blur(settings.radius)
    output = surface.copy()
    output.alpha_blend(blurred, settings.intensity / 100.0)
    if verbose:
        print(f"Averaged lighting (intensity {settings.intensity}%, radius {settings.radius}px)")
    return output.freeze()
