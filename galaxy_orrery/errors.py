class InvalidArgument(ValueError):
    """Raised when scene generation is given a bad count, style or randomness source."""
