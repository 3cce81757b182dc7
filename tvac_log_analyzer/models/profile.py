"""Parser profile -- bundles every setting that affects a parse run.

A ParserProfile groups the run configuration into one frozen dataclass.
It can be:

- Used as-is (defaults match the TVAC functional-test rig)
- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict, or loaded from a JSON file
"""

from __future__ import annotations

import codecs
import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict

from tvac_log_analyzer.models.phases import Phase


@dataclass(frozen=True)
class ParserProfile:
    """Frozen configuration for one parse run.

    Fields
    ------
    preamble_lines : int
        Length of the opaque self-test header skipped before the first block.
    initial_phase : Phase
        Phase assumed until the first marker line.
    failed_block_dir : str
        Directory receiving one artifact file per block that failed to parse.
    failed_block_prefix, failed_block_suffix : str
        Artifact file name is ``<prefix><index><suffix>``.
    output_path : str
        Destination of the output table (CSV).
    encoding : str
        Text encoding of the input log. Undecodable bytes are replaced.
    """

    preamble_lines: int = 221
    initial_phase: Phase = Phase.PAYLOAD_OFF
    failed_block_dir: str = "failed_chunks"
    failed_block_prefix: str = "chunk"
    failed_block_suffix: str = ".txt"
    output_path: str = "out.csv"
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "preamble_lines", int(self.preamble_lines))
        except (TypeError, ValueError) as e:
            raise ValueError(f"preamble_lines must be an integer, got {self.preamble_lines!r}") from e
        if self.preamble_lines < 0:
            raise ValueError(f"preamble_lines must be >= 0, got {self.preamble_lines}")
        try:
            codecs.lookup(self.encoding)
        except (LookupError, TypeError) as e:
            raise ValueError(f"Unknown encoding: {self.encoding!r}") from e
        if not isinstance(self.initial_phase, Phase):
            object.__setattr__(self, "initial_phase", Phase.from_tag(str(self.initial_phase)))

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict (the phase becomes its tag)."""
        d = asdict(self)
        d["initial_phase"] = self.initial_phase.value
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> ParserProfile:
        """Reconstruct from a dict. Unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"Unknown profile keys: {unknown}")
        d = dict(d)
        if "initial_phase" in d and not isinstance(d["initial_phase"], Phase):
            d["initial_phase"] = Phase.from_tag(str(d["initial_phase"]))
        return cls(**d)


def load_profile(path: str | Path) -> ParserProfile:
    """Read a ParserProfile from a JSON object file."""
    p = Path(path).expanduser()
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Profile file {p} must contain a JSON object.")
    return ParserProfile.from_dict(data)
