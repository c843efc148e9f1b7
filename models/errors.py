"""Error taxonomy for pixel operations, history and view state."""


class PixelForgeError(Exception):
    """Base class for errors reported to the caller."""


class InvalidParameterError(PixelForgeError, ValueError):
    """Parameter rejected before any computation; buffer untouched."""


class OperationInProgressError(PixelForgeError):
    """A processing request arrived while another one is outstanding."""


class EmptyHistoryError(PixelForgeError):
    """Undo requested with no snapshots on the stack."""


class NoImageError(PixelForgeError):
    """Operation requested before an image was loaded."""


class DimensionMismatchError(AssertionError):
    """Pixel data length disagrees with width*height*4.

    Indicates upstream corruption; never recovered from, so it sits outside
    the PixelForgeError hierarchy that callers report to the user.
    """
