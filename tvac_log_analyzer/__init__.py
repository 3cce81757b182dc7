"""TVAC Log Analyzer -- typed sample records from thermal-vacuum functional-test logs.

The test rig writes a line-oriented diagnostic log: an opaque self-test
preamble, then one fixed-size block of monitoring lines per sample. The rig
cycles through three phases (payload-off, pinpuller activation, emission),
announced by exact marker lines; each phase has its own block length and
field layout.

This package provides tools for:
- Tracking the active phase from marker lines
- Framing fixed-length blocks and extracting numeric measurements
- Mapping blocks to typed sample records through per-phase field tables
- Persisting blocks that fail to parse without aborting the run
- Exporting the records as a fixed-width table (pandas / CSV)

Key principles:
- All-or-nothing records: a block yields a complete record or none
- Units are validated, never converted
- A malformed block never aborts the run; only an unreadable preamble does

Main subpackages:
- ingest: Field extraction, phase classification, framing, interpretation, recovery, session
- models: Phases, sample records, parser profile
- export: Output table
- scripts: Command-line entry point
"""

__all__ = []
