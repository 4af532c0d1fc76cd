"""Exception types raised by animgraph."""


class AnimGraphError(Exception):
    """Base class for animgraph errors."""
    pass


class InvalidDocument(AnimGraphError, ValueError):
    """Raised when a document has no usable root entry or cannot be parsed."""
    pass
