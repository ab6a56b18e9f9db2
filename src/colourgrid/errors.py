class ColourGridError(Exception):
    """Base class for failures reported by colourgrid."""


class DecodeError(ColourGridError, ValueError):
    """The input image could not be decoded."""


class ParseError(ColourGridError, ValueError):
    """A colour file record could not be read as three floats."""


class EmptyColourSetError(ParseError):
    """There are no colours to choose from."""


class EncodeError(ColourGridError, ValueError):
    """The output image could not be written."""
