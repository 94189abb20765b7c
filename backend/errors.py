"""Error taxonomy for slice requests.

Every request-time failure is a ``SliceError`` carrying the HTTP status it maps
to; the app's exception handler turns it into ``{"error": ...}`` at the
request boundary.
"""

from __future__ import annotations


class SliceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidParameter(SliceError):
    status_code = 400

    def __init__(self, param: str, detail: str = "must be a non-negative integer"):
        super().__init__(f"Invalid or missing parameter '{param}': {detail}")
        self.param = param


class OutOfBounds(SliceError):
    status_code = 400

    def __init__(self, param: str, index: int, size: int):
        super().__init__(f"Parameter '{param}' out of bounds: {index} (size {size})")
        self.param = param
        self.index = index
        self.size = size


class MissingVariable(SliceError):
    def __init__(self, name: str):
        super().__init__(f"Variable '{name}' not found in dataset")
        self.name = name


class DimensionNotFound(SliceError):
    def __init__(self, name: str):
        super().__init__(f"Dimension '{name}' not found in dataset")
        self.name = name


class EmptySlice(SliceError):
    def __init__(self):
        super().__init__("Slice has no values; cannot normalize an empty grid")


class FileFormatError(Exception):
    """Raised at startup when the data file cannot be opened as NetCDF."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot open gridded file {path}: {reason}")
        self.path = path
        self.reason = reason
