# planet_generator/errors.py

class ConfigurationError(ValueError):
    """Raised at construction time when a parameter would produce degenerate output."""


class OctreeBoundsError(ValueError):
    """Raised when a point outside the octree's root cube is inserted."""
