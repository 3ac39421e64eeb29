"""
Raster surface: an RGBA pixel buffer with the drawing primitives the
synthesis strategies are built from.

A surface wraps a ``(H, W, 4)`` ``uint8`` NumPy array. Every primitive
writes only into the surface it is called on; sources and masks are read
but never modified.
"""

from typing import NamedTuple, Optional, Sequence, Tuple

import cv2
import numpy as np

from .exceptions import AllocationFailure, InvalidDimensions

# Largest buffer a single surface may hold (width * height)
MAX_PIXELS = 100_000_000


class Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int


def _check_rect(rect: Rect, width: int, height: int) -> Rect:
    """Validates that rect has a positive extent and fits in a width x height buffer."""
    x, y, w, h = (int(v) for v in rect)
    if w <= 0 or h <= 0:
        raise InvalidDimensions(f"Rectangle {tuple(rect)} has a non-positive extent.")
    if x < 0 or y < 0 or x + w > width or y + h > height:
        raise InvalidDimensions(
            f"Rectangle {tuple(rect)} lies outside a {width}x{height} buffer.")
    return Rect(x, y, w, h)


def feather_stops(opaque_until: float) -> Tuple[Tuple[float, float], ...]:
    """Gradient stops that stay opaque up to `opaque_until` then fade to transparent at 1."""
    return ((0.0, 1.0), (opaque_until, 1.0), (1.0, 0.0))


class Surface:
    """Addressable 2D RGBA pixel buffer."""

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.dtype != np.uint8:
            raise ValueError("Surface pixels must be a (H, W, 4) uint8 array.")
        self.pixels = pixels

    @classmethod
    def allocate(cls, width: int, height: int) -> 'Surface':
        """Creates a fully transparent width x height surface."""
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise InvalidDimensions(f"Cannot allocate a {width}x{height} surface.")
        if width * height > MAX_PIXELS:
            raise AllocationFailure(
                f"A {width}x{height} surface exceeds the {MAX_PIXELS} pixel limit.")
        try:
            pixels = np.zeros((height, width, 4), dtype=np.uint8)
        except MemoryError as e:
            raise AllocationFailure(f"Could not allocate a {width}x{height} surface.") from e
        return cls(pixels)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'Surface':
        """Builds a surface from a grayscale, RGB or RGBA array (copied, promoted to RGBA)."""
        array = np.asarray(array)
        if array.dtype != np.uint8:
            array = np.clip(array, 0, 255).astype(np.uint8)
        if array.ndim == 2:
            array = np.stack([array, array, array], axis=2)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise InvalidDimensions(f"Unsupported image array shape {array.shape}.")
        h, w = array.shape[:2]
        surface = cls.allocate(w, h)
        surface.pixels[..., :array.shape[2]] = array
        if array.shape[2] == 3:
            surface.pixels[..., 3] = 255
        return surface

    @classmethod
    def radial_gradient_mask(cls, width: int, height: int,
                             stops: Sequence[Tuple[float, float]]) -> 'Surface':
        """Creates a mask whose alpha follows a centred radial gradient.

        Args:
            width: Mask width.
            height: Mask height.
            stops: ``(offset, opacity)`` pairs with offsets in [0, 1] relative to
                   the radius ``min(width, height) / 2``. Beyond the last stop the
                   last opacity is kept.

        Returns:
            A surface with black colour channels and the gradient in alpha.
        """
        mask = cls.allocate(width, height)
        radius = min(width, height) / 2
        ys, xs = np.mgrid[0:height, 0:width].astype(np.float32)
        # Distances are measured from pixel centres
        dist = np.hypot(xs + 0.5 - width / 2, ys + 0.5 - height / 2) / radius
        offsets = [s[0] for s in stops]
        opacities = [s[1] for s in stops]
        alpha = np.interp(dist, offsets, opacities)
        mask.pixels[..., 3] = np.rint(alpha * 255).astype(np.uint8)
        return mask

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def bounds(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    def copy(self) -> 'Surface':
        return Surface(self.pixels.copy())

    def freeze(self) -> 'Surface':
        """Marks the buffer read-only; returns self."""
        self.pixels.flags.writeable = False
        return self

    def to_array(self) -> np.ndarray:
        return self.pixels.copy()

    def rgb(self) -> np.ndarray:
        return self.pixels[..., :3].copy()

    def crop(self, rect: Rect) -> 'Surface':
        x, y, w, h = _check_rect(rect, self.width, self.height)
        return Surface(self.pixels[y:y + h, x:x + w].copy())

    def blit(self, src: 'Surface', src_rect: Optional[Rect] = None,
             dst_rect: Optional[Rect] = None, flip_x: bool = False,
             flip_y: bool = False, interpolation: int = cv2.INTER_LINEAR) -> 'Surface':
        """Copies a region of src into a region of this surface.

        The region is rescaled when the two rectangles differ in size, then
        flipped. Pixels are replaced, not composited.
        """
        sx, sy, sw, sh = _check_rect(src_rect or src.bounds(), src.width, src.height)
        if dst_rect is None:
            dst_rect = Rect(0, 0, sw, sh)
        dx, dy, dw, dh = _check_rect(dst_rect, self.width, self.height)

        region = src.pixels[sy:sy + sh, sx:sx + sw]
        if (sw, sh) != (dw, dh):
            region = cv2.resize(region.copy(), (dw, dh), interpolation=interpolation)
        if flip_x:
            region = region[:, ::-1]
        if flip_y:
            region = region[::-1, :]
        self.pixels[dy:dy + dh, dx:dx + dw] = region
        return self

    def composite_mask(self, mask: 'Surface') -> 'Surface':
        """Multiplies this surface's alpha by the mask's alpha (destination-in)."""
        if mask.size != self.size:
            raise InvalidDimensions(
                f"Mask size {mask.size} does not match surface size {self.size}.")
        alpha = self.pixels[..., 3].astype(np.float32) * mask.pixels[..., 3] / 255.0
        self.pixels[..., 3] = np.rint(alpha).astype(np.uint8)
        return self

    def alpha_blend(self, src: 'Surface', alpha: float) -> 'Surface':
        """Linearly interpolates every channel toward src by alpha in [0, 1]."""
        if src.size != self.size:
            raise InvalidDimensions(
                f"Blend source size {src.size} does not match surface size {self.size}.")
        alpha = float(np.clip(alpha, 0.0, 1.0))
        blended = (self.pixels.astype(np.float32) * (1.0 - alpha)
                   + src.pixels.astype(np.float32) * alpha)
        self.pixels[...] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
        return self

    def draw_over(self, src: 'Surface', x: int = 0, y: int = 0,
                  opacity: float = 1.0) -> 'Surface':
        """Source-over composites src with its top-left corner at (x, y)."""
        x, y, w, h = _check_rect(Rect(x, y, src.width, src.height), self.width, self.height)
        dst = self.pixels[y:y + h, x:x + w].astype(np.float32) / 255.0
        top = src.pixels.astype(np.float32) / 255.0

        src_a = top[..., 3:] * opacity
        dst_a = dst[..., 3:]
        out_a = src_a + dst_a * (1.0 - src_a)
        premultiplied = top[..., :3] * src_a + dst[..., :3] * dst_a * (1.0 - src_a)
        out_rgb = np.divide(premultiplied, out_a, out=np.zeros_like(premultiplied),
                            where=out_a > 0)

        out = np.concatenate([out_rgb, out_a], axis=2) * 255.0
        self.pixels[y:y + h, x:x + w] = np.clip(np.rint(out), 0, 255).astype(np.uint8)
        return self

    def stroke_rects(self, rects: Sequence[Rect], color: Tuple[int, int, int],
                     opacity: float, thickness: int = 1) -> 'Surface':
        """Draws translucent rectangle outlines along the inner border of each rect."""
        outline = np.zeros((self.height, self.width), dtype=np.uint8)
        for rect in rects:
            x, y, w, h = _check_rect(rect, self.width, self.height)
            cv2.rectangle(outline, (x, y), (x + w - 1, y + h - 1), 255, thickness)

        overlay = Surface.allocate(self.width, self.height)
        overlay.pixels[..., :3] = color
        overlay.pixels[..., 3] = outline
        return self.draw_over(overlay, 0, 0, opacity=opacity)

    def gaussian_blur(self, radius: float) -> 'Surface':
        """Returns a blurred copy; radius is used as the Gaussian standard deviation."""
        blurred = cv2.GaussianBlur(self.pixels.astype(np.float32), (0, 0),
                                   sigmaX=float(radius), borderType=cv2.BORDER_REFLECT)
        return Surface(np.clip(np.rint(blurred), 0, 255).astype(np.uint8))

    def __repr__(self):
        return f"Surface({self.width}x{self.height})"
