"""Tests for normalization, section splitting, dispatch and file reading."""

import gzip
import io
from pathlib import Path

import pytest

from sm_parser import parse, parse_string
from sm_parser.errors import (
    BPMListParseError,
    BufReadError,
    EmptyNotesSectionError,
    InvalidBgChangeFormatError,
    InvalidChartFormatError,
    TooManyDisplayBPMValuesError,
)
from sm_parser.parsers.file_reader import read_simfile
from sm_parser.parsers.normalizer import normalize
from sm_parser.parsers.simfile_parser import iter_sections, split_section
from sm_parser.schemas.simfile import (
    BPM,
    ChartDifficulty,
    NoteType,
    RangeDisplayBPM,
    Simfile,
    Stop,
)

FIXTURES = Path(__file__).parent / "fixtures"


class _FailingStream:
    def __init__(self, lines):
        self._lines = list(lines)

    def readline(self):
        if not self._lines:
            raise OSError("device not ready")
        return self._lines.pop(0)


class TestNormalize:
    def test_strips_comments_and_whitespace(self):
        source = io.StringIO("  #TITLE:Song; // trailing\n// whole line\n\t#ARTIST:Me;  \n")
        assert normalize(source) == "#TITLE:Song;\r\n\r\n#ARTIST:Me;\r\n"

    def test_binary_stream(self):
        source = io.BytesIO("#TITLE:Café;\n".encode("utf-8"))
        assert normalize(source) == "#TITLE:Café;\r\n"

    def test_binary_stream_custom_encoding(self):
        source = io.BytesIO("#TITLE:Café;\n".encode("latin-1"))
        assert normalize(source, encoding="latin-1") == "#TITLE:Café;\r\n"

    def test_read_failure(self):
        with pytest.raises(BufReadError):
            normalize(_FailingStream(["#TITLE:A;\n"]))

    def test_decode_failure(self):
        with pytest.raises(BufReadError):
            normalize(io.BytesIO(b"#TITLE:\xff\xfe;\n"))


class TestSections:
    def test_iter_sections(self):
        assert list(iter_sections("#A:1;#B:2;\r\n")) == ["#A:1;", "#B:2;", "\r\n"]

    def test_iter_sections_empty(self):
        assert list(iter_sections("")) == []

    def test_split_section(self):
        assert split_section("\r\n#TITLE: My Song \r\n;") == ("TITLE", "My Song")

    def test_split_section_value_keeps_colons(self):
        assert split_section("#DISPLAYBPM:1:2;") == ("DISPLAYBPM", "1:2")

    def test_empty_value_is_none(self):
        assert split_section("#TITLE:;") == ("TITLE", None)
        assert split_section("#TITLE: \r\n ;") == ("TITLE", None)

    def test_noise_is_discarded(self):
        assert split_section("garbage;") is None
        assert split_section("#TITLE;") is None


class TestParse:
    def test_no_directives(self):
        assert parse_string("just some text\nwith no directives\n") == Simfile()

    def test_empty_input(self):
        sim = parse(io.StringIO(""))
        assert sim.title is None
        assert sim.bpms == []
        assert sim.charts == []

    def test_title(self):
        assert parse_string("#TITLE:;").title is None
        assert parse_string("#TITLE:X;").title == "X"
        assert parse_string("#TITLE:   ;").title is None

    def test_unknown_keys_ignored(self):
        sim = parse_string("#FOO:bar;\n#title:lowercase;\n#TITLE:Real;")
        assert sim.title == "Real"

    def test_malformed_numeric_metadata_tolerated(self):
        sim = parse_string("#OFFSET:abc;\n#SAMPLESTART:1.5;\n#SELECTABLE:MAYBE;")
        assert sim.offset is None
        assert sim.sample_start == 1.5
        assert sim.selectable is None

    def test_bpms(self):
        sim = parse_string("#BPMS:0.000=132.000,237.000=33.000;")
        assert sim.bpms == [BPM(beat=0.0, bpm=132.0), BPM(beat=237.0, bpm=33.0)]

    def test_digit_separators_not_numbers(self):
        assert parse_string("#OFFSET:1_5;").offset is None
        assert parse_string("#SAMPLELENGTH:1_0;").sample_length is None

    @pytest.mark.parametrize("text", ["#BPMS:AA=1.0;", "#BPMS:1=2=3;", "#BPMS:1_0=12_0;"])
    def test_bad_bpms_abort(self, text):
        with pytest.raises(BPMListParseError):
            parse_string("#TITLE:A;\n" + text)

    def test_display_bpm_errors_propagate(self):
        with pytest.raises(TooManyDisplayBPMValuesError):
            parse_string("#DISPLAYBPM:1:2:3;")

    def test_notes_errors_propagate(self):
        with pytest.raises(EmptyNotesSectionError):
            parse_string("#NOTES:;")
        with pytest.raises(InvalidChartFormatError):
            parse_string("#NOTES:dance-single:a:Hard:1:0000;")

    def test_bgchanges_errors_propagate(self):
        with pytest.raises(InvalidBgChangeFormatError):
            parse_string("#BGCHANGES:1.0=a.png;")

    def test_comment_hides_directive(self):
        assert parse_string("// #TITLE:Hidden;\n#ARTIST:Shown;").title is None

    def test_asset_paths(self):
        sim = parse_string("#JACKET:jk.png;#PREVIEWVID:pv.mp4;#CDTITLE:cd.png;#LYRICSPATH:l.lrc;")
        assert sim.jacket_path == "jk.png"
        assert sim.preview_video_path == "pv.mp4"
        assert sim.cd_title_path == "cd.png"
        assert sim.lyrics_path == "l.lrc"

    def test_charts_appended_in_order(self):
        sim = parse_string(
            "#NOTES:dance-single::Easy:1::1000;\n"
            "#NOTES:dance-single::Hard:8::0001;\n"
        )
        assert [c.difficulty for c in sim.charts] == [ChartDifficulty.EASY, ChartDifficulty.HARD]

    def test_deterministic(self):
        data = (FIXTURES / "goin_under.sm").read_bytes()
        assert parse_string(data) == parse_string(data)


class TestFixture:
    def test_parse_fixture(self):
        with open(FIXTURES / "goin_under.sm", "rb") as f:
            sim = parse(f)

        assert sim.title == "Goin' Under"
        assert sim.subtitle is None
        assert sim.artist == "NegaRen"
        assert sim.genre == "Raggacore"
        assert sim.credit is None
        assert sim.banner_path == "bn.png"
        assert sim.background_path == "bg.png"
        assert sim.music_path == "Goin' Under.ogg"
        assert sim.offset == 0.0
        assert sim.sample_start == pytest.approx(45.714001)
        assert sim.sample_length == pytest.approx(13.714)
        assert sim.selectable is True
        assert sim.display_bpm == RangeDisplayBPM(low=105.0, high=210.0)
        assert sim.bpms == [BPM(beat=0.0, bpm=210.0), BPM(beat=64.0, bpm=105.0)]
        assert sim.stops == [
            Stop(beat=32.0, seconds=0.285714),
            Stop(beat=96.0, seconds=0.142857),
        ]
        assert [c.path for c in sim.bg_changes] == ["intro.avi", "loop.avi"]
        assert sim.bg_changes[1].play_rate == 0.5

    def test_fixture_charts(self):
        sim = read_simfile(FIXTURES / "goin_under.sm")
        assert len(sim.charts) == 2

        easy, challenge = sim.charts
        assert easy.chart_type == "dance-single"
        assert easy.author == "NegaRen"
        assert easy.difficulty is ChartDifficulty.EASY
        assert easy.meter == 3
        assert easy.radar_values == pytest.approx([0.214, 0.126, 0.0, 0.0, 0.0])
        assert [len(m) for m in easy.note_data] == [16, 16]
        assert easy.note_data[1][0] is NoteType.HOLD_HEAD
        assert easy.note_data[1][8] is NoteType.HOLD_OR_ROLL_TAIL
        assert easy.note_data[1][13] is NoteType.MINE

        assert challenge.chart_type == "dance-double"
        assert challenge.author is None
        assert challenge.difficulty is ChartDifficulty.CHALLENGE
        assert challenge.meter == 12
        assert len(challenge.note_data) == 1
        assert len(challenge.note_data[0]) == 32


class TestFileReader:
    def test_read_plain(self, tmp_path):
        path = tmp_path / "song.sm"
        path.write_text("#TITLE:Plain;\n", encoding="utf-8")
        assert read_simfile(path).title == "Plain"

    def test_read_gzip(self, tmp_path):
        path = tmp_path / "song.sm.gz"
        path.write_bytes(gzip.compress(b"#TITLE:Zipped;\n"))
        assert read_simfile(path).title == "Zipped"

    def test_read_with_encoding(self, tmp_path):
        path = tmp_path / "song.sm"
        path.write_bytes("#ARTIST:Señor;\n".encode("cp1252"))
        assert read_simfile(path, encoding="cp1252").artist == "Señor"
