"""Parse BGCHANGES and FGCHANGES lists.

Entries are comma-separated; each entry is an ``=``-separated tuple::

    beat=file=play rate=crossfade=stretch rewind=stretch no loop[=extended...]

Foreground changes use the same layout but only the beat and file are kept.
"""

from sm_parser.errors import InvalidBgChangeFormatError, InvalidFgChangeFormatError
from sm_parser.parsers.normalizer import strip_comment
from sm_parser.parsers.values import to_float, to_int
from sm_parser.schemas.simfile import BgChange, FgChange

BG_CHANGE_MIN_FIELDS = 6
FG_CHANGE_MIN_FIELDS = 2


def _split_entries(value: str) -> list[str]:
    return value.replace("\r", "").replace("\n", "").split(",")


def parse_bg_change(entry: str) -> BgChange:
    """Parse a single BGCHANGES entry.

    Components beyond the sixth are accepted but left undecoded.
    """
    parts = strip_comment(entry).split("=")
    if len(parts) < BG_CHANGE_MIN_FIELDS:
        raise InvalidBgChangeFormatError(
            f"Expected at least {BG_CHANGE_MIN_FIELDS} fields, got {len(parts)}: {entry!r}"
        )
    try:
        return BgChange(
            beat=to_float(parts[0]),
            path=parts[1],
            play_rate=to_float(parts[2]),
            crossfade=to_int(parts[3]),
            stretch_rewind=to_int(parts[4]),
            stretch_no_loop=to_int(parts[5]),
        )
    except ValueError as exc:
        raise InvalidBgChangeFormatError(f"Invalid BGCHANGES entry {entry!r}") from exc


def parse_bg_changes(value: str | None) -> list[BgChange]:
    """Parse a BGCHANGES value; the first bad entry rejects the whole list."""
    if value is None:
        return []
    return [parse_bg_change(entry) for entry in _split_entries(value)]


def parse_fg_change(entry: str) -> FgChange:
    parts = strip_comment(entry).split("=")
    if len(parts) < FG_CHANGE_MIN_FIELDS:
        raise InvalidFgChangeFormatError(f"Invalid FGCHANGES entry {entry!r}")
    try:
        beat = to_float(parts[0])
    except ValueError as exc:
        raise InvalidFgChangeFormatError(f"Invalid FGCHANGES entry {entry!r}") from exc
    return FgChange(beat=beat, path=parts[1])


def parse_fg_changes(value: str | None) -> list[FgChange]:
    if value is None:
        return []
    return [parse_fg_change(entry) for entry in _split_entries(value)]
