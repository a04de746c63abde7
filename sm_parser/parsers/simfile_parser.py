"""Top-level orchestrator: decode a whole ``.sm`` stream into a Simfile."""

import io
import logging
from collections.abc import Callable, Iterator
from typing import IO, Any

from sm_parser.parsers.bgchange_parser import parse_bg_changes, parse_fg_changes
from sm_parser.parsers.chart_parser import parse_chart
from sm_parser.parsers.normalizer import normalize
from sm_parser.parsers.values import (
    parse_bool,
    parse_bpms,
    parse_display_bpm,
    parse_float,
    parse_stops,
)
from sm_parser.schemas.simfile import Simfile

logger = logging.getLogger(__name__)

SECTION_TERMINATOR = ";"

# Directive key -> Simfile attribute, grouped by how the value is decoded.
_STRING_FIELDS = {
    "TITLE": "title",
    "SUBTITLE": "subtitle",
    "ARTIST": "artist",
    "TITLETRANSLIT": "title_translit",
    "SUBTITLETRANSLIT": "subtitle_translit",
    "ARTISTTRANSLIT": "artist_translit",
    "GENRE": "genre",
    "CREDIT": "credit",
    "BANNER": "banner_path",
    "JACKET": "jacket_path",
    "BACKGROUND": "background_path",
    "PREVIEWVID": "preview_video_path",
    "LYRICSPATH": "lyrics_path",
    "CDTITLE": "cd_title_path",
    "MUSIC": "music_path",
}

_VALUE_PARSERS: dict[str, tuple[str, Callable[[str | None], Any]]] = {
    "OFFSET": ("offset", parse_float),
    "SAMPLESTART": ("sample_start", parse_float),
    "SAMPLELENGTH": ("sample_length", parse_float),
    "SELECTABLE": ("selectable", parse_bool),
    "BPMS": ("bpms", parse_bpms),
    "DISPLAYBPM": ("display_bpm", parse_display_bpm),
    "STOPS": ("stops", parse_stops),
    "BGCHANGES": ("bg_changes", parse_bg_changes),
    "FGCHANGES": ("fg_changes", parse_fg_changes),
}


def iter_sections(buffer: str) -> Iterator[str]:
    """Yield chunks of *buffer* up to and including each ``;``.

    Text after the final terminator is yielded as a last chunk.
    """
    position = 0
    while position < len(buffer):
        end = buffer.find(SECTION_TERMINATOR, position)
        end = len(buffer) if end == -1 else end + 1
        yield buffer[position:end]
        position = end


def split_section(section: str) -> tuple[str, str | None] | None:
    """Split a section into ``(key, value)``.

    Returns ``None`` when the section has no ``#KEY:`` header. An empty or
    whitespace-only value is returned as ``None``.
    """
    hash_index = section.find("#")
    if hash_index == -1:
        return None
    colon_index = section.find(":", hash_index + 1)
    if colon_index == -1:
        return None

    key = section[hash_index + 1:colon_index]
    value = section[colon_index + 1:]
    if value.endswith(SECTION_TERMINATOR):
        value = value[:-1]
    value = value.strip()
    return key, value or None


def apply_directive(simfile: Simfile, key: str, value: str | None) -> None:
    """Decode one directive into *simfile*.

    Unrecognized keys are ignored. Errors from the value parsers propagate.
    """
    if key in _STRING_FIELDS:
        setattr(simfile, _STRING_FIELDS[key], value)
    elif key in _VALUE_PARSERS:
        attr, parse_value = _VALUE_PARSERS[key]
        setattr(simfile, attr, parse_value(value))
    elif key == "NOTES":
        simfile.charts.append(parse_chart(value))
    else:
        logger.debug("Ignoring unrecognized directive #%s", key)


def parse(source: IO, encoding: str = "utf-8") -> Simfile:
    """Parse a simfile from a readable text or binary stream.

    Args:
        source: Object with a ``readline()`` method.
        encoding: Used to decode lines when *source* yields bytes.

    Returns:
        The decoded Simfile.

    Raises:
        ParseError: On the first structural error; no partial result is
            returned.
    """
    buffer = normalize(source, encoding=encoding)

    simfile = Simfile()
    for section in iter_sections(buffer):
        directive = split_section(section)
        if directive is None:
            continue
        key, value = directive
        apply_directive(simfile, key, value)

    logger.debug(
        "Parsed simfile %r: %d charts, %d BPM changes",
        simfile.title, len(simfile.charts), len(simfile.bpms),
    )
    return simfile


def parse_string(data: str | bytes, encoding: str = "utf-8") -> Simfile:
    """Parse a simfile held in memory."""
    if isinstance(data, bytes):
        return parse(io.BytesIO(data), encoding=encoding)
    return parse(io.StringIO(data), encoding=encoding)
