"""Decode StepMania .sm simfiles into plain Python data structures."""

from sm_parser.errors import ParseError
from sm_parser.parsers.simfile_parser import parse, parse_string
from sm_parser.schemas.simfile import Simfile

__all__ = ["ParseError", "Simfile", "parse", "parse_string"]
