from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from tvac_log_analyzer.errors import BlockLengthMismatch


class Phase(str, Enum):
    """Operating phase of the rig. The value is the tag written to the output table."""

    PAYLOAD_OFF = "PayloadOff"
    DEPLOYMENT = "Deployment"
    EMISSION = "Emission"

    @property
    def block_length(self) -> int:
        return BLOCK_LENGTHS[self]

    @property
    def descriptor(self) -> "PhaseDescriptor":
        return PHASE_DESCRIPTORS[self]

    @classmethod
    def from_tag(cls, tag: str) -> "Phase":
        """Accept the table tag ("PayloadOff") or the member name ("PAYLOAD_OFF")."""
        for phase in cls:
            if tag in (phase.value, phase.name):
                return phase
        raise ValueError(f"Unknown phase tag: {tag!r}")


BLOCK_LENGTHS: Dict[Phase, int] = {
    Phase.PAYLOAD_OFF: 11,
    Phase.DEPLOYMENT: 13,
    Phase.EMISSION: 33,
}


@dataclass(frozen=True)
class PhaseDescriptor:
    """A phase together with the number of lines one sample block occupies."""
    phase: Phase
    block_length: int


PHASE_DESCRIPTORS: Dict[Phase, PhaseDescriptor] = {p: PhaseDescriptor(p, n) for p, n in BLOCK_LENGTHS.items()}

# Exact whole-line markers announcing a phase transition.
PHASE_MARKERS: Dict[str, Phase] = {
    "ENTERING EMISSION PHASE": Phase.EMISSION,
    "ENTERING PINPULLER ACTIVATION PHASE": Phase.DEPLOYMENT,
    "ENTERING PAYLOAD-OFF PHASE": Phase.PAYLOAD_OFF,
}


@dataclass(frozen=True)
class RawBlock:
    """
    The lines framed for one sample under a given phase.

    Construction validates the line count against the phase, so an interpreter
    never sees a block of the wrong size.
    """
    phase: Phase
    lines: Tuple[str, ...]
    first_line_no: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(self.lines))
        expected = self.phase.block_length
        if len(self.lines) != expected:
            raise BlockLengthMismatch(self.phase.value, expected, len(self.lines))

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> str:
        return self.lines[index]

    @property
    def text(self) -> str:
        """Verbatim block text, lines joined with newlines."""
        return "\n".join(self.lines)
