"""Aggregated verification results."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Tuple

from .errors import ValidationError

logger = logging.getLogger(__name__)


class _Absent:
    def __repr__(self) -> str:
        return "<absent>"


# Expected or actual side of a record/header that does not exist
ABSENT = _Absent()


def clip(text: str, limit: int) -> str:
    if limit and len(text) > limit:
        return text[:limit] + "..."
    return text


@dataclass(frozen=True)
class Mismatch:
    field: str
    expected: Any
    actual: Any

    def describe(self, limit: int = 0) -> str:
        return f"{self.field}: expected {clip(repr(self.expected), limit)}, got {clip(repr(self.actual), limit)}"


class VerificationReport:
    """Ordered mismatches of one verification.

    Entries are kept in the order they were found; nothing is merged or
    reordered. An empty report means success.
    """

    def __init__(self, subject: str, excerpt: int = 200):
        self.subject = subject
        self.excerpt = excerpt
        self._mismatches: List[Mismatch] = []

    def add(self, field: str, expected: Any, actual: Any) -> None:
        self._mismatches.append(Mismatch(field, expected, actual))

    @property
    def mismatches(self) -> Tuple[Mismatch, ...]:
        return tuple(self._mismatches)

    @property
    def ok(self) -> bool:
        return not self._mismatches

    def __len__(self) -> int:
        return len(self._mismatches)

    def lines(self) -> List[str]:
        return [mismatch.describe(self.excerpt) for mismatch in self._mismatches]

    def message(self) -> str:
        header = f"{self.subject}: {len(self._mismatches)} incorrect"
        return "\n".join([header] + [f"  - {line}" for line in self.lines()])

    def check(self) -> None:
        """Log every mismatch and raise one ValidationError if any."""
        if self.ok:
            return
        for line in self.lines():
            logger.error(f"{self.subject}: {line}")
        raise ValidationError(self)
