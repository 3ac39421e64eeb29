"""Exception hierarchy for seamless texture generation."""


class SeamlessTextureError(Exception):
    """Base class for every error raised by this package."""


class DecodeFailure(SeamlessTextureError):
    """The source bytes are not a decodable raster image."""


class InvalidDimensions(SeamlessTextureError):
    """A rectangle lies outside a buffer or has a non-positive extent."""


class AllocationFailure(SeamlessTextureError):
    """A pixel buffer could not be allocated."""


class ProcessingError(SeamlessTextureError):
    """Generic failure of a whole pipeline run.

    The cause is available through ``__cause__``; callers are only expected
    to report the failure and let the user retry.
    """
