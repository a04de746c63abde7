"""Errors raised while decoding a simfile.

Every structural failure aborts the whole parse with one of these. Metadata
and radar values that fail to parse are not errors; they degrade to ``None``
or ``0.0`` instead.
"""


class ParseError(ValueError):
    """Base error for simfile decoding."""


class BufReadError(ParseError):
    """The underlying stream could not be read or decoded."""


class BPMListParseError(ParseError):
    """A BPMS entry is not a ``beat=bpm`` pair of numbers."""


class StopListParseError(ParseError):
    """A STOPS entry is not a ``beat=seconds`` pair of numbers."""


class TooManyDisplayBPMValuesError(ParseError):
    """DISPLAYBPM has more than two ``:``-separated values."""


class DisplayBPMParseError(ParseError):
    """A DISPLAYBPM range bound is not a number."""


class EmptyNotesSectionError(ParseError):
    """A NOTES directive has no value."""


class InvalidChartFormatError(ParseError):
    """A NOTES value does not have exactly six ``:``-separated fields."""


class UnknownChartDifficultyError(ParseError):
    """A chart names a difficulty outside Beginner..Edit."""


class ChartMeterParseError(ParseError):
    """A chart meter is not a non-negative integer."""


class UnsupportedNoteTypeError(ParseError):
    """Reserved: unknown note characters decode to ``NoteType.INVALID_NOTE``."""


class RadarValuesParseError(ParseError):
    """Reserved: unparsable radar values decode to ``0.0``."""


class InvalidBgChangeFormatError(ParseError):
    """A BGCHANGES entry is malformed."""


class InvalidFgChangeFormatError(ParseError):
    """An FGCHANGES entry is malformed."""
