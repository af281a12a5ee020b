"""Write-only diagnostic channel for recoverable data conditions.

Nothing in the locator aborts on bad or missing data. Instead the condition
is reported here once per key (usually ``"<Kind>:<location name>"``) and the
caller gets a sentinel value back.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Protocol, Set, Tuple

logger = logging.getLogger(__name__)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class DiagnosticKind(str, Enum):
    UNKNOWN_LOCATION = "UnknownLocation"
    UNRESOLVED_ROOT = "UnresolvedRoot"
    DEGENERATE_BRACKET = "DegenerateBracket"

    def key(self, location_name: Optional[str]) -> str:
        return f"{self.value}:{location_name}"


class DiagnosticSink(Protocol):
    def report(self, severity: str, message: str, key: Optional[str] = None) -> None:
        ...


class AlertLog:
    """Deduplicating sink backed by ``logging``.

    Messages reported with a key are emitted only the first time that key is
    seen; messages without a key are always emitted.
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._logger = log or logger
        self._flags: Set[str] = set()
        self.records: List[Tuple[str, str]] = []

    def report(self, severity: str, message: str, key: Optional[str] = None) -> None:
        if key is not None:
            if key in self._flags:
                return
            self._flags.add(key)
        self.records.append((severity, message))
        self._logger.log(_LEVELS.get(severity, logging.INFO), message)

    def has_flag(self, key: str) -> bool:
        return key in self._flags

    def clear(self) -> None:
        self._flags.clear()
        self.records.clear()


class NullSink:
    """Sink that drops everything; usable in tests."""

    def report(self, severity: str, message: str, key: Optional[str] = None) -> None:
        return
