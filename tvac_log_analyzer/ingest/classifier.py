from __future__ import annotations

from typing import Optional

from tvac_log_analyzer.models.phases import PHASE_MARKERS, PhaseDescriptor


def classify_marker(line: str) -> Optional[PhaseDescriptor]:
    """
    Return the descriptor of the phase announced by ``line``, or None.

    Matching is exact and case-sensitive on the whole line: surrounding
    whitespace or a different case is not a marker.
    """
    phase = PHASE_MARKERS.get(line)
    if phase is None:
        return None
    return phase.descriptor
