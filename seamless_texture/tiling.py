"""Tiling preview: repeats a seamless texture over an N x N grid."""

from .models import TileFormat
from .surface import Rect, Surface

SEAM_COLOR = (255, 0, 0)
SEAM_OPACITY = 0.5


def assemble_preview(seamless: Surface, tile_format=TileFormat.TWO,
                     mark_seams: bool = False) -> Surface:
    """Blits seamless unscaled into every cell of an N x N grid.

    With mark_seams, a 1px translucent red outline is drawn around each cell
    once all cells are in place.
    """
    n = int(TileFormat(tile_format))
    w, h = seamless.size
    preview = Surface.allocate(w * n, h * n)

    cells = [Rect(col * w, row * h, w, h) for row in range(n) for col in range(n)]
    for cell in cells:
        preview.blit(seamless, seamless.bounds(), cell)

    if mark_seams:
        preview.stroke_rects(cells, SEAM_COLOR, SEAM_OPACITY)
    return preview.freeze()
