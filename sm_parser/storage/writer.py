"""Write parsed simfile note data to Parquet files and JSON metadata."""

import json
import logging
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from sm_parser.config import DEFAULT_MAX_FILE_BYTES
from sm_parser.pipeline.processor import ParsedSimfile
from sm_parser.schemas.simfile import NoteType

logger = logging.getLogger(__name__)

# --- Arrow schemas -----------------------------------------------------------

NOTES_SCHEMA = pa.schema(
    [
        pa.field("song_hash", pa.string()),
        pa.field("chart_index", pa.int16()),
        pa.field("chart_type", pa.string()),
        pa.field("difficulty", pa.string()),
        pa.field("meter", pa.int32()),
        pa.field("measure", pa.int32()),
        pa.field("cell", pa.int32()),  # position within the measure
        pa.field("measure_cells", pa.int32()),
        pa.field("note_type", pa.string()),
    ]
)


# --- Public API --------------------------------------------------------------


def _write_tables_chunked(
    tables_by_hash: dict[str, pa.Table],
    output_dir: Path,
    prefix: str,
    schema: pa.Schema,
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
) -> list[Path]:
    """Write Arrow tables as one-row-group-per-song files, splitting at *max_file_bytes*.

    Returns the list of written file paths.
    """
    written: list[Path] = []
    file_idx = 0
    writer: pq.ParquetWriter | None = None
    current_path: Path | None = None

    def _open_writer() -> tuple[pq.ParquetWriter, Path]:
        nonlocal file_idx
        p = output_dir / f"{prefix}_{file_idx:04d}.parquet"
        w = pq.ParquetWriter(p, schema, compression="snappy")
        file_idx += 1
        return w, p

    for _hash, table in sorted(tables_by_hash.items()):
        if table.num_rows == 0:
            continue

        if writer is None:
            writer, current_path = _open_writer()

        writer.write_table(table)

        assert current_path is not None
        current_size = current_path.stat().st_size
        if current_size >= max_file_bytes:
            writer.close()
            written.append(current_path)
            logger.debug("Closed %s (%d bytes)", current_path.name, current_size)
            writer, current_path = None, None

    if writer is not None:
        writer.close()
        assert current_path is not None
        written.append(current_path)

    return written


def _chart_summary(chart) -> dict:
    cells = [cell for measure in chart.note_data for cell in measure]
    return {
        "chart_type": chart.chart_type,
        "author": chart.author,
        "difficulty": chart.difficulty.value,
        "meter": chart.meter,
        "radar_values": chart.radar_values,
        "measures": len(chart.note_data),
        "note_count": sum(cell is not NoteType.NONE for cell in cells),
        "invalid_count": sum(cell is NoteType.INVALID_NOTE for cell in cells),
    }


def write_parquet(
    parsed: list[ParsedSimfile],
    output_dir: Path,
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
) -> list[Path]:
    """Write parsed simfiles to Parquet note tables and a JSON metadata file.

    Only non-empty cells become rows. Each song gets its own row group; when
    a file exceeds *max_file_bytes* a new numbered file is started.

    Produces inside *output_dir*:
      - notes_NNNN.parquet  (one or more)
      - metadata.json

    Returns the list of written Parquet files.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    notes_by_hash: dict[str, dict[str, list]] = {}
    metadata_by_hash: dict[str, dict] = {}

    for item in parsed:
        song_hash = item.hash
        sim = item.simfile
        if song_hash in metadata_by_hash:
            logger.debug("Skipping duplicate simfile %s", item.path)
            continue

        cols = notes_by_hash[song_hash] = {k: [] for k in NOTES_SCHEMA.names}
        for chart_index, chart in enumerate(sim.charts):
            for measure_index, measure in enumerate(chart.note_data):
                for cell_index, cell in enumerate(measure):
                    if cell is NoteType.NONE:
                        continue
                    cols["song_hash"].append(song_hash)
                    cols["chart_index"].append(chart_index)
                    cols["chart_type"].append(chart.chart_type)
                    cols["difficulty"].append(chart.difficulty.value)
                    cols["meter"].append(chart.meter)
                    cols["measure"].append(measure_index)
                    cols["cell"].append(cell_index)
                    cols["measure_cells"].append(len(measure))
                    cols["note_type"].append(cell.value)

        metadata_by_hash[song_hash] = {
            "hash": song_hash,
            "path": str(item.path),
            "title": sim.title,
            "artist": sim.artist,
            "offset": sim.offset,
            "bpms": [[b.beat, b.bpm] for b in sim.bpms],
            "stops": [[s.beat, s.seconds] for s in sim.stops],
            "charts": [_chart_summary(chart) for chart in sim.charts],
        }

    notes_tables = {
        h: pa.table(cols, schema=NOTES_SCHEMA)
        for h, cols in notes_by_hash.items()
    }
    notes_files = _write_tables_chunked(
        notes_tables, output_dir, "notes", NOTES_SCHEMA, max_file_bytes,
    )
    logger.info("Wrote %d notes files to %s", len(notes_files), output_dir)

    with open(output_dir / "metadata.json", "w", encoding="utf-8") as f:
        json.dump(list(metadata_by_hash.values()), f, indent=2)

    return notes_files


def read_notes_parquet(path: Path) -> pa.Table:
    """Read notes Parquet file(s) and return a single Arrow table.

    Accepts either a single ``.parquet`` file or a directory containing
    ``notes_*.parquet`` files.
    """
    path = Path(path)
    if not path.is_dir():
        return pq.read_table(path)

    files = sorted(path.glob("notes_*.parquet"))
    if not files:
        raise FileNotFoundError(f"No notes_*.parquet files in {path}")
    return pa.concat_tables([pq.read_table(f) for f in files])
