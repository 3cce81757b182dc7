from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple

from tvac_log_analyzer.errors import TvacLogError
from tvac_log_analyzer.ingest.framer import PacketFramer
from tvac_log_analyzer.models.phases import RawBlock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FailedBlock:
    """One block that failed interpretation, as persisted by the recovery controller."""
    index: int
    phase: str
    first_line_no: int
    error: TvacLogError
    location: Optional[str] = None
    discarded_lines: int = 0

    @property
    def kind(self):
        return self.error.kind


class ArtifactSink(Protocol):
    def write(self, index: int, text: str) -> Optional[str]:
        """Persist ``text`` as artifact ``index``; return where it went (or None)."""
        ...


@dataclass
class DirectoryArtifactSink:
    """
    Writes each failed block to ``<directory>/<prefix><index><suffix>``.

    The directory is created on first write. Existing files with the same
    name are overwritten (indices restart at 0 on every run).
    """
    directory: Path
    prefix: str = "chunk"
    suffix: str = ".txt"
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        self.directory = Path(self.directory).expanduser()

    def path_for(self, index: int) -> Path:
        return self.directory / f"{self.prefix}{index}{self.suffix}"

    def write(self, index: int, text: str) -> Optional[str]:
        self.directory.mkdir(parents=True, exist_ok=True)
        p = self.path_for(index)
        p.write_text(text, encoding=self.encoding)
        return str(p)


@dataclass
class MemoryArtifactSink:
    """Keeps artifacts in memory, keyed by index."""
    artifacts: Dict[int, str] = field(default_factory=dict)

    def write(self, index: int, text: str) -> Optional[str]:
        if index in self.artifacts:
            raise ValueError(f"artifact {index} already written")
        self.artifacts[index] = text
        return f"memory:{index}"


class RecoveryController:
    """
    Persists blocks that failed to parse and resynchronizes the framer.

    The controller owns the failed-block counter: indices start at 0 and
    increase by one per failed block, independently of successful blocks.
    Use one controller per run.
    """

    def __init__(self, sink: ArtifactSink):
        self.sink = sink
        self._next_index = 0
        self._failed: List[FailedBlock] = []

    @property
    def next_index(self) -> int:
        return self._next_index

    @property
    def failed(self) -> Tuple[FailedBlock, ...]:
        return tuple(self._failed)

    def recover(self, block: RawBlock, error: TvacLogError, framer: PacketFramer) -> FailedBlock:
        """
        Persist ``block`` verbatim, then skip to the next blank-separated block.

        An ``OSError`` from the sink is logged and leaves ``location`` None;
        the index is still consumed and the framer still resyncs.
        """
        if not error.is_block_level:
            raise error
        index = self._next_index
        self._next_index += 1
        try:
            location = self.sink.write(index, block.text)
        except OSError as e:
            # A lost artifact is reported but does not end the run.
            logger.warning("Cannot write failed block %d: %s", index, e)
            location = None
        logger.warning(
            "Failed to parse %s block at line %d: %s. Block written to %s.",
            block.phase.value,
            block.first_line_no,
            error.describe(),
            location or "(not written)",
        )
        discarded = framer.resync()
        if discarded > 1:
            logger.debug("Resync discarded %d lines after failed block %d", discarded, index)
        fb = FailedBlock(
            index=index,
            phase=block.phase.value,
            first_line_no=block.first_line_no,
            error=error,
            location=location,
            discarded_lines=discarded,
        )
        self._failed.append(fb)
        return fb
