"""Failures raised inside a reconciler and the outcome handed to the host.

Helpers raise ToolFailure / VerificationFailure; every reconciler operation
catches them and records an error diagnostic. Conflicts with invariants the
site enforces itself (one active theme) become warnings, and a resource that
no longer exists is a Result with removed=True.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, Sequence, TypeVar

ERROR = "error"
WARNING = "warning"
SUCCESS = "success"


class ReconcileError(Exception):
    pass


class ToolFailure(ReconcileError):
    """wp-cli exited non-zero."""

    def __init__(self, argv: Sequence[str], output: str):
        self.argv = list(argv)
        self.output = output or ""
        super().__init__(f"wp {self.argv} failed: {self.output.strip()}")


class VerificationFailure(ReconcileError):
    """wp-cli reported success but the expected postcondition is not true."""

    def __init__(self, message: str, output: str = ""):
        self.output = output or ""
        detail = message
        if self.output.strip():
            detail = f"{message}\nOutput: {self.output.strip()}"
        super().__init__(detail)


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    summary: str
    detail: str = ""


@dataclass
class Diagnostics:
    items: list[Diagnostic] = field(default_factory=list)

    def add_error(self, summary: str, detail: Any = "") -> None:
        self.items.append(Diagnostic(ERROR, summary, str(detail)))
        logging.error("%s: %s", summary, detail)

    def add_warning(self, summary: str, detail: Any = "") -> None:
        self.items.append(Diagnostic(WARNING, summary, str(detail)))
        logging.warning("%s: %s", summary, detail)

    def has_error(self) -> bool:
        return any(d.severity == ERROR for d in self.items)

    def has_warning(self) -> bool:
        return any(d.severity == WARNING for d in self.items)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity == ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity == WARNING]

    @property
    def outcome(self) -> str:
        if self.has_error():
            return ERROR
        if self.has_warning():
            return WARNING
        return SUCCESS


S = TypeVar("S")


@dataclass
class Result(Generic[S]):
    """Observed state plus diagnostics for one lifecycle call.

    removed=True tells the host to drop the resource from tracked state.
    """

    state: Optional[S]
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    removed: bool = False

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error()

    @property
    def outcome(self) -> str:
        return self.diagnostics.outcome
