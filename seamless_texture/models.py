"""Settings records and result types passed through the pipeline."""

import base64
from dataclasses import dataclass
from enum import Enum, IntEnum


class SeamlessMethod(str, Enum):
    """Synthesis strategy used to make a texture tile."""
    MIRRORED = 'mirrored'
    SCATTERED = 'scattered'
    PATCH_BASED = 'patch_based'


class TileFormat(IntEnum):
    """Grid dimension N of the N x N tiling preview."""
    ONE = 1
    TWO = 2
    THREE = 3


class OutputFormat(Enum):
    JPEG = 'image/jpeg'
    PNG = 'image/png'

    @classmethod
    def parse(cls, value) -> 'OutputFormat':
        """Accepts an OutputFormat, a MIME type or a short name ('jpeg', 'jpg', 'png')."""
        if isinstance(value, cls):
            return value
        name = str(value).lower()
        aliases = {'jpeg': cls.JPEG, 'jpg': cls.JPEG, 'png': cls.PNG}
        if name in aliases:
            return aliases[name]
        return cls(name)

    @property
    def mime_type(self) -> str:
        return self.value

    @property
    def pil_format(self) -> str:
        return 'JPEG' if self is OutputFormat.JPEG else 'PNG'

    @property
    def extension(self) -> str:
        return '.jpg' if self is OutputFormat.JPEG else '.png'


@dataclass(frozen=True)
class CropSettings:
    """Pixels removed from each edge before synthesis."""
    top: int = 0
    bottom: int = 0
    left: int = 0
    right: int = 0

    def __post_init__(self):
        for name in ('top', 'bottom', 'left', 'right'):
            if getattr(self, name) < 0:
                raise ValueError(f"Crop {name} must be non-negative.")

    @property
    def is_empty(self) -> bool:
        return not (self.top or self.bottom or self.left or self.right)


@dataclass(frozen=True)
class AveragingSettings:
    """Luminance flattening strength (0-100 %) and blur radius (1-20 px)."""
    intensity: float = 0
    radius: float = 5

    def __post_init__(self):
        if not (0 <= self.intensity <= 100):
            raise ValueError("Averaging intensity must be between 0 and 100.")
        if not (1 <= self.radius <= 20):
            raise ValueError("Averaging radius must be between 1 and 20.")


@dataclass(frozen=True)
class OutputSpec:
    """Encoding of the returned images; quality only applies to JPEG."""
    format: OutputFormat = OutputFormat.JPEG
    quality: int = 92

    def __post_init__(self):
        # frozen dataclass, so normalise through object.__setattr__
        object.__setattr__(self, 'format', OutputFormat.parse(self.format))
        if not (1 <= self.quality <= 100):
            raise ValueError("Output quality must be between 1 and 100.")


@dataclass(frozen=True)
class ProcessResult:
    """Encoded seamless texture and tiled preview.

    ``width`` and ``height`` describe the seamless texture, not the preview.
    """
    seamless_image: bytes
    preview_image: bytes
    width: int
    height: int
    mime_type: str = OutputFormat.JPEG.mime_type

    def _data_url(self, data: bytes) -> str:
        encoded = base64.b64encode(data).decode('ascii')
        return f"data:{self.mime_type};base64,{encoded}"

    def seamless_data_url(self) -> str:
        return self._data_url(self.seamless_image)

    def preview_data_url(self) -> str:
        return self._data_url(self.preview_image)
