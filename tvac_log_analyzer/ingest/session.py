from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from tvac_log_analyzer.errors import HeaderUnreadable, StreamExhausted, TvacLogError
from tvac_log_analyzer.ingest.classifier import classify_marker
from tvac_log_analyzer.ingest.framer import LineSource, PacketFramer
from tvac_log_analyzer.ingest.interpreters import interpret_block
from tvac_log_analyzer.ingest.recovery import (
    ArtifactSink,
    DirectoryArtifactSink,
    FailedBlock,
    RecoveryController,
)
from tvac_log_analyzer.models.phases import Phase
from tvac_log_analyzer.models.profile import ParserProfile
from tvac_log_analyzer.models.records import SampleRecord

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of one parse run.

    Notes
    - ``records`` are in stream order; failed blocks never contribute a record.
    - ``failed`` indices are contiguous from 0.
    - ``warnings`` are human-readable diagnostics (also sent to logging).
    """
    records: Tuple[SampleRecord, ...]
    failed: Tuple[FailedBlock, ...]
    warnings: Tuple[str, ...] = ()
    blocks_framed: int = 0
    lines_read: int = 0
    final_phase: Phase = Phase.PAYLOAD_OFF

    @property
    def n_records(self) -> int:
        return len(self.records)

    @property
    def n_failed(self) -> int:
        return len(self.failed)


class SessionDriver:
    """
    Runs the parse loop over one line stream.

    Loop: skip blank lines -> consume a phase marker if present -> frame one
    block for the current phase -> interpret it -> keep the record, or hand
    the block to the recovery controller. The loop ends when the framer runs
    out of lines.
    """

    def __init__(
        self,
        lines: Iterable[str],
        recovery: RecoveryController,
        profile: Optional[ParserProfile] = None,
    ):
        self.profile = profile or ParserProfile()
        self.source = LineSource(lines)
        self.framer = PacketFramer(self.source)
        self.recovery = recovery
        self.phase: Phase = self.profile.initial_phase
        self.state = SessionState.IDLE

    def _skip_preamble(self) -> None:
        n = int(self.profile.preamble_lines)
        got = len(self.source.take(n))
        if got < n:
            raise HeaderUnreadable(n, got)

    def run(self) -> ParseResult:
        if self.state is not SessionState.IDLE:
            raise RuntimeError(f"SessionDriver.run() called in state {self.state.value}; use a new driver per run.")

        self._skip_preamble()
        self.state = SessionState.RUNNING
        logger.info("Self-test preamble skipped (%d lines); starting in %s phase", self.profile.preamble_lines, self.phase.value)

        records: List[SampleRecord] = []
        warnings: List[str] = []
        blocks_framed = 0

        while not self.source.exhausted:
            if self.framer.skip_blank():
                continue

            descriptor = classify_marker(self.source.peek())
            if descriptor is not None:
                self.source.next()
                if descriptor.phase is not self.phase:
                    logger.debug("Line %d: %s -> %s", self.source.lines_read, self.phase.value, descriptor.phase.value)
                self.phase = descriptor.phase

            try:
                block = self.framer.frame(self.phase)
            except StreamExhausted as e:
                collected = int(e.context.get("collected", 0))
                if collected:
                    msg = (
                        f"Trailing {self.phase.value} block truncated: {collected} of "
                        f"{self.phase.block_length} lines before end of stream; dropped."
                    )
                    logger.warning(msg)
                    warnings.append(msg)
                break

            blocks_framed += 1
            try:
                record = interpret_block(block)
            except TvacLogError as e:
                fb = self.recovery.recover(block, e, self.framer)
                warnings.append(f"block at line {fb.first_line_no} -> artifact {fb.index}: {e.describe()}")
                continue
            records.append(record)

        self.state = SessionState.DONE
        result = ParseResult(
            records=tuple(records),
            failed=self.recovery.failed,
            warnings=tuple(warnings),
            blocks_framed=blocks_framed,
            lines_read=self.source.lines_read,
            final_phase=self.phase,
        )
        logger.info(
            "Parsed %d records from %d blocks (%d failed), %d lines read",
            result.n_records,
            blocks_framed,
            result.n_failed,
            result.lines_read,
        )
        return result


def parse_lines(
    lines: Iterable[str],
    profile: Optional[ParserProfile] = None,
    sink: Optional[ArtifactSink] = None,
) -> ParseResult:
    """Parse an in-memory line sequence. Failed blocks go to ``sink`` (default: profile directory)."""
    profile = profile or ParserProfile()
    if sink is None:
        sink = DirectoryArtifactSink(
            Path(profile.failed_block_dir),
            prefix=profile.failed_block_prefix,
            suffix=profile.failed_block_suffix,
        )
    return SessionDriver(lines, RecoveryController(sink), profile).run()


def parse_log_file(
    path: str | Path,
    profile: Optional[ParserProfile] = None,
    sink: Optional[ArtifactSink] = None,
) -> ParseResult:
    """Open the log at ``path`` and parse it."""
    profile = profile or ParserProfile()
    p = Path(path).expanduser()
    logger.info("Reading %s", p)
    with p.open("r", encoding=profile.encoding, errors="replace", newline="") as fh:
        return parse_lines(fh, profile=profile, sink=sink)
