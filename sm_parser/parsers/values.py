"""Parsers for scalar and list directive values.

Scalars (OFFSET, SELECTABLE, ...) are best effort: anything unparsable
becomes ``None``. Timing lists are strict, since silently dropping a BPM
change or stop would shift every note after it.
"""

from sm_parser.errors import (
    BPMListParseError,
    DisplayBPMParseError,
    ParseError,
    StopListParseError,
    TooManyDisplayBPMValuesError,
)
from sm_parser.schemas.simfile import (
    BPM,
    DisplayBPM,
    RandomDisplayBPM,
    RangeDisplayBPM,
    SingleDisplayBPM,
    Stop,
)


def to_float(text: str) -> float:
    """``float()`` without underscore digit separators.

    Raises:
        ValueError: If *text* is not a plain number.
    """
    if "_" in text:
        raise ValueError(f"could not convert string to float: {text!r}")
    return float(text)


def to_int(text: str) -> int:
    """``int()`` without underscore digit separators."""
    if "_" in text:
        raise ValueError(f"invalid literal for int(): {text!r}")
    return int(text)


def parse_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return to_float(value)
    except ValueError:
        return None


def parse_bool(value: str | None) -> bool | None:
    if value == "YES":
        return True
    if value == "NO":
        return False
    return None


def parse_key_value_list(
    value: str | None, error_cls: type[ParseError] = ParseError
) -> list[tuple[float, float]]:
    """Parse a ``key=value,key=value`` list of floats.

    Args:
        value: Directive value, or ``None`` if the directive was empty.
        error_cls: Error raised for any malformed entry.

    Returns:
        ``(key, value)`` pairs in the order they appear.
    """
    if value is None:
        return []

    pairs: list[tuple[float, float]] = []
    for entry in value.split(","):
        parts = entry.split("=")
        if len(parts) != 2:
            raise error_cls(f"Expected 'key=value', got {entry.strip()!r}")
        try:
            pairs.append((to_float(parts[0]), to_float(parts[1])))
        except ValueError as exc:
            raise error_cls(f"Non-numeric entry {entry.strip()!r}") from exc
    return pairs


def parse_bpms(value: str | None) -> list[BPM]:
    return [
        BPM(beat=beat, bpm=bpm)
        for beat, bpm in parse_key_value_list(value, BPMListParseError)
    ]


def parse_stops(value: str | None) -> list[Stop]:
    return [
        Stop(beat=beat, seconds=seconds)
        for beat, seconds in parse_key_value_list(value, StopListParseError)
    ]


def parse_display_bpm(value: str | None) -> DisplayBPM | None:
    """Parse a DISPLAYBPM value.

    ``"150"`` gives a single value, ``"100:200"`` a range and any
    non-numeric single token (conventionally ``*``) a random display.

    Raises:
        TooManyDisplayBPMValuesError: More than two values are given.
        DisplayBPMParseError: A range bound is not a number.
    """
    if value is None:
        return None

    tokens = value.split(":")
    if len(tokens) == 1:
        single = parse_float(tokens[0])
        if single is None:
            return RandomDisplayBPM()
        return SingleDisplayBPM(value=single)

    if len(tokens) == 2:
        low = parse_float(tokens[0])
        high = parse_float(tokens[1])
        if low is None or high is None:
            raise DisplayBPMParseError(f"Invalid DISPLAYBPM range {value!r}")
        return RangeDisplayBPM(low=low, high=high)

    raise TooManyDisplayBPMValuesError(
        f"DISPLAYBPM takes at most two values, got {len(tokens)}"
    )
