"""Error kinds raised while parsing a TVAC diagnostic log.

Every failure carries an :class:`ErrorKind` plus a structured ``context``
mapping (line text, word index, expected unit, ...) so callers and tests can
dispatch on the kind instead of matching message text.

Severity
--------
- ``HEADER_UNREADABLE`` is the only run-level fatal condition.
- ``STREAM_EXHAUSTED`` ends a run normally.
- Everything else is per-block: the session hands it to the recovery
  controller and continues with the next block.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorKind(str, Enum):
    STREAM_EXHAUSTED = "stream_exhausted"
    HEADER_UNREADABLE = "header_unreadable"
    FIELD_MISSING = "field_missing"
    UNIT_MISMATCH = "unit_mismatch"
    NUMERIC_PARSE_FAILURE = "numeric_parse_failure"
    BLOCK_LENGTH_MISMATCH = "block_length_mismatch"


# Kinds confined to a single block; they never abort a run.
BLOCK_LEVEL_KINDS = frozenset(
    {
        ErrorKind.FIELD_MISSING,
        ErrorKind.UNIT_MISMATCH,
        ErrorKind.NUMERIC_PARSE_FAILURE,
        ErrorKind.BLOCK_LENGTH_MISMATCH,
    }
)


class TvacLogError(Exception):
    """Base class of all parser errors."""

    kind: ErrorKind

    def __init__(self, kind: ErrorKind, message: str, **context: Any) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.context: Dict[str, Any] = dict(context)

    @property
    def is_block_level(self) -> bool:
        return self.kind in BLOCK_LEVEL_KINDS

    def with_context(self, **extra: Any) -> "TvacLogError":
        """Attach more context in place (existing keys are kept) and return self."""
        for key, value in extra.items():
            self.context.setdefault(key, value)
        return self

    def describe(self) -> str:
        """One-line diagnostic: kind, message and the most useful context keys."""
        parts = [f"{self.kind.value}: {self.message}"]
        for key in ("phase", "field", "line_offset"):
            if key in self.context:
                parts.append(f"{key}={self.context[key]}")
        return " ".join(parts)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class StreamExhausted(TvacLogError):
    """The line source ended before a full block could be framed."""

    def __init__(self, needed: int, collected: int, **context: Any) -> None:
        super().__init__(
            ErrorKind.STREAM_EXHAUSTED,
            f"line source ran out after {collected} of {needed} lines",
            needed=needed,
            collected=collected,
            **context,
        )


class HeaderUnreadable(TvacLogError):
    """The self-test preamble is shorter than expected."""

    def __init__(self, expected: int, available: int) -> None:
        super().__init__(
            ErrorKind.HEADER_UNREADABLE,
            f"failed to read self-test preamble: expected {expected} lines, got {available}",
            expected=expected,
            available=available,
        )


class FieldError(TvacLogError):
    """Field extraction failure (missing token, wrong unit or unparseable number)."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        line: str,
        word_index: int,
        unit: Optional[str] = None,
        token: Optional[str] = None,
        **context: Any,
    ) -> None:
        super().__init__(kind, message, line=line, word_index=word_index, unit=unit, token=token, **context)


class BlockLengthMismatch(TvacLogError):
    """A raw block does not hold exactly the number of lines its phase requires."""

    def __init__(self, phase: str, expected: int, actual: int) -> None:
        super().__init__(
            ErrorKind.BLOCK_LENGTH_MISMATCH,
            f"{phase} block needs {expected} lines, got {actual}",
            phase=phase,
            expected=expected,
            actual=actual,
        )


def field_missing(line: str, word_index: int, **context: Any) -> FieldError:
    return FieldError(
        ErrorKind.FIELD_MISSING,
        f"no word {word_index} in {line!r}",
        line=line,
        word_index=word_index,
        **context,
    )


def unit_mismatch(line: str, word_index: int, unit: str, token: str, **context: Any) -> FieldError:
    return FieldError(
        ErrorKind.UNIT_MISMATCH,
        f"failed to strip unit {unit!r} from {token!r}",
        line=line,
        word_index=word_index,
        unit=unit,
        token=token,
        **context,
    )


def numeric_parse_failure(line: str, word_index: int, token: str, numeric_kind: str, **context: Any) -> FieldError:
    return FieldError(
        ErrorKind.NUMERIC_PARSE_FAILURE,
        f"failed to parse {token!r} as {numeric_kind}",
        line=line,
        word_index=word_index,
        token=token,
        numeric_kind=numeric_kind,
        **context,
    )


def context_summary(context: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``context`` with non-scalar values stringified (for logs and JSON)."""
    out: Dict[str, Any] = {}
    for key, value in context.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            out[key] = value
        else:
            out[key] = str(value)
    return out
