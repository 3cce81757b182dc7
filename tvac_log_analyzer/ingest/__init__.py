"""Ingest package - turns a TVAC diagnostic log into sample records.

This package handles:
- Splitting log lines into words and numeric measurements (fields)
- Recognizing phase-transition marker lines (classifier)
- Cutting the line stream into fixed-length blocks per phase (framer)
- Mapping blocks to typed records through per-phase field tables (interpreters)
- Persisting blocks that fail to parse and resynchronizing (recovery)
- Driving the whole loop over one log (session)

Design principle:
- A record is produced fully formed or not at all
- A bad block costs that block only; the run continues
"""
from .classifier import classify_marker
from .fields import measurement_from_word, word_as_number
from .framer import LineSource, PacketFramer
from .interpreters import FIELD_TABLES, FieldSpec, interpret_block, interpret_lines
from .recovery import DirectoryArtifactSink, FailedBlock, MemoryArtifactSink, RecoveryController
from .session import ParseResult, SessionDriver, SessionState, parse_lines, parse_log_file

__all__ = [
    "classify_marker",
    "measurement_from_word",
    "word_as_number",
    "LineSource",
    "PacketFramer",
    "FIELD_TABLES",
    "FieldSpec",
    "interpret_block",
    "interpret_lines",
    "DirectoryArtifactSink",
    "FailedBlock",
    "MemoryArtifactSink",
    "RecoveryController",
    "ParseResult",
    "SessionDriver",
    "SessionState",
    "parse_lines",
    "parse_log_file",
]
