"""Strip comments and stray whitespace from raw simfile text.

Comments are removed per physical line, before any directive splitting,
because a directive value (BPM lists, note grids) may span many lines.
"""

from typing import IO

from sm_parser.errors import BufReadError

COMMENT_MARKER = "//"
LINE_TERMINATOR = "\r\n"


def strip_comment(text: str) -> str:
    """Drop everything from the first ``//`` onwards."""
    index = text.find(COMMENT_MARKER)
    if index == -1:
        return text
    return text[:index]


def normalize(source: IO, encoding: str = "utf-8") -> str:
    """Read *source* line by line into one canonical buffer.

    Each line is cut at its comment marker, trimmed and terminated with
    ``\\r\\n``. Works with text and binary streams; binary lines are decoded
    with *encoding*.

    Raises:
        BufReadError: If reading or decoding any line fails.
    """
    parts: list[str] = []
    while True:
        try:
            line = source.readline()
            if isinstance(line, bytes):
                line = line.decode(encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise BufReadError(f"Failed to read simfile: {exc}") from exc

        if not line:
            break
        parts.append(strip_comment(line).strip())
        parts.append(LINE_TERMINATOR)

    return "".join(parts)
