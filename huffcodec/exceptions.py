"""
exceptions.py

Errors raised by huffcodec. All of them derive from ValueError so callers that
already guard codec calls with ``except ValueError`` keep working.
"""


class HuffmanCodecError(ValueError):
    """Base class for every error raised by the codec."""


class EmptyInputError(HuffmanCodecError):
    """Raised when there are no symbols to compress."""


class InvalidBitError(HuffmanCodecError):
    """Raised when something other than 0 or 1 is written to a bit stream."""


class MalformedArtifactError(HuffmanCodecError):
    """Raised when a compressed artifact or its header cannot be interpreted."""


class TruncatedArtifactError(HuffmanCodecError):
    """Raised when the data ends before the declared number of symbols is decoded."""
