"""Parse NOTES directives into charts.

A NOTES value has six colon-separated fields::

    chart type : author : difficulty : meter : radar values : note grid

The note grid is a comma-separated list of measures, each a block of rows
with one character per column.
"""

import logging

from sm_parser.errors import (
    ChartMeterParseError,
    EmptyNotesSectionError,
    InvalidChartFormatError,
    UnknownChartDifficultyError,
)
from sm_parser.parsers.normalizer import strip_comment
from sm_parser.parsers.values import to_float
from sm_parser.schemas.simfile import NOTE_CODES, Chart, ChartDifficulty, NoteType

logger = logging.getLogger(__name__)

CHART_FIELD_COUNT = 6
MAX_METER = 65535


def parse_radar_values(text: str) -> list[float]:
    """Parse comma-separated radar values; unparsable entries become 0.0."""
    if not text:
        return []

    values: list[float] = []
    for entry in text.split(","):
        try:
            values.append(to_float(entry))
        except ValueError:
            logger.debug("Unparsable radar value %r, using 0.0", entry)
            values.append(0.0)
    return values


def parse_measure(text: str) -> list[NoteType]:
    """Decode one measure into note cells, skipping whitespace."""
    cells: list[NoteType] = []
    for char in strip_comment(text):
        if char.isspace():
            continue
        cells.append(NOTE_CODES.get(char, NoteType.INVALID_NOTE))
    return cells


def parse_note_data(text: str) -> list[list[NoteType]]:
    measures = [parse_measure(measure) for measure in text.split(",")]

    invalid = sum(cell is NoteType.INVALID_NOTE for m in measures for cell in m)
    if invalid:
        logger.debug("Note grid contains %d invalid cells", invalid)
    return measures


def parse_chart(value: str | None) -> Chart:
    """Parse the value of a NOTES directive.

    Raises:
        EmptyNotesSectionError: The directive has no value.
        InvalidChartFormatError: The value does not have six fields.
        UnknownChartDifficultyError: The difficulty name is not recognized.
        ChartMeterParseError: The meter is not an integer in 0..MAX_METER.
    """
    if value is None:
        raise EmptyNotesSectionError("NOTES directive has no value")

    parts = [part.strip() for part in value.strip().split(":")]
    if len(parts) != CHART_FIELD_COUNT:
        raise InvalidChartFormatError(
            f"Expected {CHART_FIELD_COUNT} fields in NOTES, got {len(parts)}"
        )
    chart_type, author, difficulty_name, meter_text, radar_text, grid_text = parts

    try:
        difficulty = ChartDifficulty(difficulty_name)
    except ValueError as exc:
        raise UnknownChartDifficultyError(
            f"Unknown chart difficulty {difficulty_name!r}"
        ) from exc

    if not (meter_text.isascii() and meter_text.isdecimal()) or int(meter_text) > MAX_METER:
        raise ChartMeterParseError(f"Invalid chart meter {meter_text!r}")

    return Chart(
        chart_type=chart_type,
        author=author or None,
        difficulty=difficulty,
        meter=int(meter_text),
        radar_values=parse_radar_values(radar_text),
        note_data=parse_note_data(grid_text),
    )
