"""Decoded StepMania simfile data format.

Dataclasses that represent everything the parser extracts from a ``.sm``
file: song metadata, timing lists, background/foreground changes and the
note charts. The parser builds one ``Simfile`` per input and hands it to the
caller; nothing here holds a reference back to its owner.
"""

import enum
from dataclasses import dataclass, field


@dataclass
class BPM:
    """A tempo change at a given beat."""

    beat: float
    bpm: float


@dataclass
class Stop:
    """A pause of ``seconds`` length at a given beat."""

    beat: float
    seconds: float


@dataclass(frozen=True)
class SingleDisplayBPM:
    value: float


@dataclass(frozen=True)
class RangeDisplayBPM:
    low: float
    high: float


@dataclass(frozen=True)
class RandomDisplayBPM:
    """Display BPM that cycles randomly (written as ``*``)."""


DisplayBPM = SingleDisplayBPM | RangeDisplayBPM | RandomDisplayBPM


@dataclass
class BgChange:
    """One entry of a BGCHANGES list."""

    beat: float
    path: str  # file or folder name
    play_rate: float
    crossfade: int
    stretch_rewind: int
    stretch_no_loop: int
    # Extended fields (7th component onwards); not decoded yet.
    effect: str | None = None
    second_effect: str | None = None
    transition: str | None = None
    color1: str | None = None
    color2: str | None = None


@dataclass
class FgChange:
    """One entry of an FGCHANGES list."""

    beat: float
    path: str


class ChartDifficulty(enum.Enum):
    BEGINNER = "Beginner"
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    CHALLENGE = "Challenge"
    EDIT = "Edit"


class NoteType(enum.Enum):
    NONE = "none"
    NORMAL = "normal"
    HOLD_HEAD = "hold_head"
    HOLD_OR_ROLL_TAIL = "hold_or_roll_tail"
    ROLL_HEAD = "roll_head"
    MINE = "mine"
    AUTOMATIC_KEYSOUND = "automatic_keysound"
    LIFT_NOTE = "lift_note"
    FAKE_NOTE = "fake_note"
    INVALID_NOTE = "invalid_note"


# Single-character note codes as they appear in a note grid.
NOTE_CODES: dict[str, NoteType] = {
    "0": NoteType.NONE,
    "1": NoteType.NORMAL,
    "2": NoteType.HOLD_HEAD,
    "3": NoteType.HOLD_OR_ROLL_TAIL,
    "4": NoteType.ROLL_HEAD,
    "M": NoteType.MINE,
    "K": NoteType.AUTOMATIC_KEYSOUND,
    "L": NoteType.LIFT_NOTE,
    "F": NoteType.FAKE_NOTE,
}


@dataclass
class Chart:
    """A single playable chart (one NOTES directive)."""

    chart_type: str  # e.g. "dance-single", "dance-double"
    author: str | None
    difficulty: ChartDifficulty
    meter: int  # numeric difficulty rating, >= 0
    radar_values: list[float] = field(default_factory=list)
    # One list per measure; cells are laid out row by row, column by column.
    note_data: list[list[NoteType]] = field(default_factory=list)


@dataclass
class Simfile:
    """Complete parsed result for one ``.sm`` file.

    Every scalar is ``None`` unless its directive appeared with a non-empty
    value. Lists keep the order in which entries appear in the file.
    """

    title: str | None = None
    subtitle: str | None = None
    artist: str | None = None
    title_translit: str | None = None
    subtitle_translit: str | None = None
    artist_translit: str | None = None
    genre: str | None = None
    credit: str | None = None
    # Asset paths, relative to the song directory
    banner_path: str | None = None
    jacket_path: str | None = None
    background_path: str | None = None
    preview_video_path: str | None = None
    lyrics_path: str | None = None
    cd_title_path: str | None = None
    music_path: str | None = None
    offset: float | None = None  # seconds
    sample_start: float | None = None
    sample_length: float | None = None
    selectable: bool | None = None
    bpms: list[BPM] = field(default_factory=list)
    display_bpm: DisplayBPM | None = None
    stops: list[Stop] = field(default_factory=list)
    bg_changes: list[BgChange] = field(default_factory=list)
    fg_changes: list[FgChange] = field(default_factory=list)
    charts: list[Chart] = field(default_factory=list)
