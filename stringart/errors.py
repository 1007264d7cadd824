class StringArtError(Exception):
    """Base class for everything the generator raises on purpose."""


class InvalidConfiguration(StringArtError, ValueError):
    pass


class OutOfBounds(StringArtError, IndexError):
    pass


class BuildCancelled(StringArtError):
    pass


class ImageLoadError(StringArtError):
    pass
