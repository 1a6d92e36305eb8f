"""
Findings and reports shared by the auditor and the structure check.

Checks never raise on a rule violation. They append a Finding to a report
so a single run surfaces every problem at once.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import typing as _typing

import skillkeeper.constants as constants


class Severity(_enum.Enum):
    """How a finding affects the exit code."""

    ERROR = "error"
    """Always fails the run."""

    WARNING = "warning"
    """Fails the run only in strict mode."""


@_dataclasses.dataclass(frozen=True)
class Finding:
    """A single rule violation."""

    subject: str
    """What the finding is about: a skill name, `skill/file` or `CLAUDE.md`."""

    message: str
    severity: Severity = Severity.ERROR

    def __str__(self) -> str:
        return f"{self.subject}: {self.message}"

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {
            "subject": self.subject,
            "message": self.message,
            "severity": self.severity.value,
        }


@_dataclasses.dataclass
class AuditReport:
    """Ordered findings plus the number of skills that were checked."""

    findings: list[Finding] = _dataclasses.field(default_factory=list)
    checked: int = 0
    """Number of skills the checks ran against."""

    def error(self, subject: str, message: str) -> None:
        """Record an error."""
        self.findings.append(Finding(subject, message, Severity.ERROR))

    def warning(self, subject: str, message: str) -> None:
        """Record a warning."""
        self.findings.append(Finding(subject, message, Severity.WARNING))

    @property
    def errors(self) -> list[Finding]:
        """Error findings, in the order they were recorded."""
        return [f for f in self.findings if f.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Finding]:
        """Warning findings, in the order they were recorded."""
        return [f for f in self.findings if f.severity is Severity.WARNING]

    def failed(self, strict: bool = False) -> bool:
        """Whether the run fails: any error, or any warning in strict mode."""
        if self.errors:
            return True
        return strict and bool(self.warnings)

    def exit_code(self, strict: bool = False) -> int:
        """Process exit code for this report."""
        return constants.EXIT_FAILURE if self.failed(strict) else constants.EXIT_SUCCESS

    def messages(self, severity: Severity | None = None) -> list[str]:
        """Rendered `subject: message` lines, optionally filtered by severity."""
        return [
            str(f) for f in self.findings if severity is None or f.severity is severity
        ]

    def to_dict(self, strict: bool = False) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "checked": self.checked,
            "strict": strict,
            "passed": not self.failed(strict),
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "errors": [f.to_dict() for f in self.errors],
            "warnings": [f.to_dict() for f in self.warnings],
        }
