"""Explicit outcome types shared by the scanner, classifiers and queries.

Every classification step answers with one of three values instead of
raising:

``Found(value)``
    The step produced something worth keeping.
``NOT_APPLICABLE``
    Nothing to do here.  Absence is a normal outcome, e.g. a module that
    declares no controller or a source whose ``load`` hook opted out.
``Error(kind, detail)``
    Something was misconfigured.  :class:`ErrorKind` carries the scope and
    severity so callers can tell a skipped candidate from a rejected family.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")

__all__ = [
    "Error",
    "ErrorKind",
    "Found",
    "NOT_APPLICABLE",
    "NotApplicable",
    "Outcome",
    "Severity",
]


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"


class ErrorKind(Enum):
    """Failure taxonomy.  Values are ``(label, scope, severity)``."""

    INVALID_SOURCE = ("invalid-source", "candidate", Severity.WARNING)
    AMBIGUOUS_CAPABILITY = ("ambiguous-capability", "candidate", Severity.WARNING)
    CONSTRUCTION_FAILED = ("construction-failed", "candidate", Severity.ERROR)
    MISSING_RESOURCE = ("missing-resource", "candidate", Severity.ERROR)
    DUPLICATE_DECLARATION = ("duplicate-declaration", "family", Severity.ERROR)
    ORPHANED_SOURCES = ("orphaned-sources", "module", Severity.WARNING)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def scope(self) -> str:
        return self.value[1]

    @property
    def severity(self) -> Severity:
        return self.value[2]

    @property
    def fatal(self) -> bool:
        return self.severity is Severity.ERROR


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T

    def __bool__(self) -> bool:
        return True

    def unwrap_or(self, default: Any) -> T:
        return self.value


class NotApplicable:
    """Singleton marker for an absent result."""

    _instance: Optional["NotApplicable"] = None

    def __new__(cls) -> "NotApplicable":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_APPLICABLE"

    def unwrap_or(self, default: T) -> T:
        return default


NOT_APPLICABLE = NotApplicable()


@dataclass(frozen=True)
class Error:
    """A diagnosed misconfiguration scoped to a module, family or candidate."""

    kind: ErrorKind
    detail: str
    module: str = ""
    capability: Optional[str] = None
    candidate: Optional[str] = None

    def __bool__(self) -> bool:
        return False

    @property
    def fatal(self) -> bool:
        return self.kind.fatal

    def unwrap_or(self, default: T) -> T:
        return default

    def describe(self) -> str:
        scope = self.module or "<unknown>"
        if self.capability:
            scope = f"{scope}/{self.capability}"
        if self.candidate:
            scope = f"{scope} [{self.candidate}]"
        return f"{self.kind.label}: {scope}: {self.detail}"


Outcome = Union[Found[T], NotApplicable, Error]
