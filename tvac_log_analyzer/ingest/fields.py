from __future__ import annotations

from typing import Dict, Optional, Union
import re

import numpy as np

from tvac_log_analyzer.errors import field_missing, numeric_parse_failure, unit_mismatch


# Width of the "[ OK ] " / "[FAIL] " status prefix on measurement lines.
STATUS_PREFIX_LEN = 7

# Integer kinds are range-checked against the rig's integer widths.
INTEGER_KINDS: Dict[str, np.dtype] = {
    "u16": np.dtype(np.uint16),
    "u32": np.dtype(np.uint32),
    "i16": np.dtype(np.int16),
    "i32": np.dtype(np.int32),
}
FLOAT_KINDS = frozenset({"f32"})

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

Number = Union[int, float]


def _ascii_words(line: str) -> list[str]:
    # str.split() also breaks on non-ASCII whitespace; the log format only uses ASCII.
    return [w for w in re.split(r"[ \t\n\r\f\v]+", line) if w]


def nth_word(line: str, n: int, **context) -> str:
    """Return the 0-indexed whitespace-separated word ``n`` of ``line``."""
    words = _ascii_words(line)
    if n < 0 or n >= len(words):
        raise field_missing(line, n, **context)
    return words[n]


def parse_number(token: str, kind: str, *, line: str = "", word_index: int = -1, **context) -> Number:
    """
    Parse ``token`` as the numeric ``kind`` ("u16", "u32", "i16", "i32" or "f32").

    Integers must be plain decimal literals (optional sign) that fit the width.
    """
    if kind in INTEGER_KINDS:
        if not _INT_RE.fullmatch(token):
            raise numeric_parse_failure(line, word_index, token, kind, **context)
        value = int(token)
        info = np.iinfo(INTEGER_KINDS[kind])
        if value < info.min or value > info.max:
            raise numeric_parse_failure(line, word_index, token, kind, **context)
        return value
    if kind in FLOAT_KINDS:
        if not _FLOAT_RE.fullmatch(token):
            raise numeric_parse_failure(line, word_index, token, kind, **context)
        value = float(token)
        if abs(value) > float(np.finfo(np.float32).max):
            raise numeric_parse_failure(line, word_index, token, kind, **context)
        return value
    raise ValueError(f"Unsupported numeric kind: {kind!r}")


def word_as_number(line: str, n: int, kind: str = "i32", **context) -> Number:
    """Given a line like ``LMS emitter: 78``, return word ``n`` (here 2) as a number."""
    token = nth_word(line, n, **context)
    return parse_number(token, kind, line=line, word_index=n, **context)


def strip_status_prefix(line: str) -> str:
    """Drop the fixed-width status prefix; lines shorter than it become empty."""
    return line[STATUS_PREFIX_LEN:]


def measurement_from_word(line: str, n: int, unit: str, kind: str = "i32", **context) -> Number:
    """
    Given a line like ``[ OK ] Measured output voltage: 259372mV``, return 259372
    for ``n=3, unit="mV"``.

    The unit must be an exact literal suffix of the word; it is removed, not converted.
    """
    cropped = strip_status_prefix(line)
    token = nth_word(cropped, n, unit=unit, **_with_line(context, line))
    if not unit or not token.endswith(unit):
        raise unit_mismatch(line, n, unit, token, **context)
    payload = token[: len(token) - len(unit)]
    return parse_number(payload, kind, line=line, word_index=n, unit=unit, **context)


def _with_line(context: dict, line: str) -> dict:
    # nth_word reports the cropped text; keep the original line for diagnostics.
    out = dict(context)
    out.setdefault("source_line", line)
    return out


def extract(line: str, word_index: int, unit: Optional[str], kind: str, **context) -> Number:
    """Dispatch to :func:`measurement_from_word` when a unit is given, else :func:`word_as_number`."""
    if unit is None:
        return word_as_number(line, word_index, kind, **context)
    return measurement_from_word(line, word_index, unit, kind, **context)
