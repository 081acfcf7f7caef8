class FontResolutionError(LookupError):
    """No usable font family: requested, fallback and installed all failed."""


class InvalidRangeError(ValueError):
    """Malformed row/column bounds passed to a sizing operation."""
