"""
Validation runner - runs the shell commands from a skill's validations.yaml.

Commands run from the project root through the shell. The exit code
decides the outcome:
- Exit 0: passed
- Exit non-zero: failed, reported with the validation's message

The skill name and directory are exported as SKILLKEEPER_SKILL and
SKILLKEEPER_SKILL_DIR so commands can locate their own files.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import logging as _logging
import os as _os
import pathlib as _pathlib
import subprocess as _subprocess
import typing as _typing

import skillkeeper.constants as constants
import skillkeeper.skills.documents as documents
import skillkeeper.skills.skill as skill_module

_logger = _logging.getLogger(__name__)

MODE_ON_STOP = "on-stop"
MODE_ALL = "all"
MODES = (MODE_ON_STOP, MODE_ALL)

SUPPORTED_TYPE = "command"


class SkillNotFoundError(LookupError):
    """The requested skill directory does not exist."""

    def __init__(self, name: str, skills_dir: _pathlib.Path) -> None:
        self.name = name
        self.skills_dir = skills_dir
        super().__init__(f"Skill not found: {name} (looked in {skills_dir})")


class OutcomeStatus(_enum.Enum):
    """Result of a single validation."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"


@_dataclasses.dataclass
class ValidationOutcome:
    """What happened when one validation id was processed."""

    id: str
    status: OutcomeStatus
    name: str = ""
    command: str = ""
    message: str = ""
    returncode: int | None = None
    output: str = ""

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "status": self.status.value,
            "name": self.name,
            "command": self.command,
            "message": self.message,
            "returncode": self.returncode,
        }


@_dataclasses.dataclass
class ValidationRun:
    """All outcomes of one `validate` invocation."""

    skill: str
    mode: str
    outcomes: list[ValidationOutcome] = _dataclasses.field(default_factory=list)
    note: str | None = None
    """Set when nothing ran (no validations.yaml, empty on_stop)."""

    @property
    def failed(self) -> list[str]:
        """Ids of failed validations, in run order."""
        return [o.id for o in self.outcomes if o.status is OutcomeStatus.FAILED]

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def exit_code(self) -> int:
        return constants.EXIT_SUCCESS if self.ok else constants.EXIT_FAILURE

    def summary(self) -> str:
        """Final line printed after the run."""
        if self.note is not None:
            return self.note
        if self.failed:
            return f"FAILED: {len(self.failed)} validation(s): {', '.join(self.failed)}"
        return f"=== {self.skill}: OK ==="

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "skill": self.skill,
            "mode": self.mode,
            "ok": self.ok,
            "failed": self.failed,
            "note": self.note,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


def _discard(_line: str) -> None:
    pass


class ValidationRunner:
    """
    Runs a skill's validations.

    Each validation's heading and command line are handed to `echo`
    before the command starts; the command's own output is captured and
    echoed after it exits.
    """

    def __init__(
        self,
        skills_dir: _pathlib.Path,
        project_root: _pathlib.Path,
        *,
        echo: _typing.Callable[[str], None] | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            skills_dir: Directory holding one folder per skill.
            project_root: Working directory for the commands.
            echo: Receives each progress line (discarded when None).
            timeout: Per-command timeout in seconds (None waits forever).
        """
        self._skills_dir = skills_dir
        self._project_root = project_root
        self._echo = echo or _discard
        self._timeout = timeout

    def select(
        self,
        validations: documents.Validations,
        mode: str,
    ) -> list[str]:
        """
        Ids to run for a mode.

        on-stop runs the ids listed in on_stop, in that order; all runs
        every validation that has an id, in declaration order.
        """
        if mode == MODE_ON_STOP:
            return list(validations.on_stop)
        if mode == MODE_ALL:
            return validations.ids
        raise ValueError(f"Invalid mode: {mode}. Must be one of: {', '.join(MODES)}")

    def run(self, skill_name: str, mode: str = MODE_ON_STOP) -> ValidationRun:
        """
        Run the validations of one skill.

        Raises:
            SkillNotFoundError: If the skill directory does not exist.
            SkillFileError: If validations.yaml is malformed.
            ValueError: If the mode is unknown.
        """
        if mode not in MODES:
            raise ValueError(f"Invalid mode: {mode}. Must be one of: {', '.join(MODES)}")

        skill_dir = self._skills_dir / skill_name
        if not skill_dir.is_dir():
            raise SkillNotFoundError(skill_name, self._skills_dir)

        skill = skill_module.Skill(path=skill_dir)
        run = ValidationRun(skill=skill_name, mode=mode)

        validations = skill.load_validations()
        if validations is None or not validations.ids:
            _logger.debug("No validations found for %s", skill_name)
            run.note = f"No validations.yaml for {skill_name}"
            self._echo(run.note)
            return run

        to_run = self.select(validations, mode)
        if not to_run:
            run.note = f"No on_stop validations for {skill_name}"
            self._echo(run.note)
            return run

        self._echo(f"=== Validating {skill_name} (mode={mode}) ===")
        for validation_id in to_run:
            validation = validations.get(validation_id)
            if validation is None:
                self._echo(f"  [{validation_id}] WARNING: validation not found")
                run.outcomes.append(
                    ValidationOutcome(id=validation_id, status=OutcomeStatus.NOT_FOUND)
                )
                continue
            run.outcomes.append(self.run_validation(skill, validation))

        self._echo("")
        self._echo(run.summary())
        return run

    def run_validation(
        self,
        skill: skill_module.Skill,
        validation: documents.Validation,
    ) -> ValidationOutcome:
        """Run a single validation command."""
        outcome = ValidationOutcome(
            id=validation.id,
            status=OutcomeStatus.SKIPPED,
            name=validation.name or validation.id,
            command=validation.command,
        )

        if validation.type != SUPPORTED_TYPE:
            self._echo(f"  [{validation.id}] SKIP: type={validation.type} not supported")
            return outcome

        if not validation.command:
            _logger.debug("%s: validation %s has no command", skill.name, validation.id)
            return outcome

        self._echo(f"  [{validation.id}] {outcome.name}")
        self._echo(f"    Running: {validation.command}")

        env = _os.environ.copy()
        env["SKILLKEEPER_SKILL"] = skill.name
        env["SKILLKEEPER_SKILL_DIR"] = str(skill.path)

        try:
            result = _subprocess.run(
                validation.command,
                shell=True,
                cwd=self._project_root,
                env=env,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except _subprocess.TimeoutExpired:
            outcome.status = OutcomeStatus.FAILED
            outcome.message = f"{validation.failure_message} (timed out after {self._timeout}s)"
            self._echo(f"    FAILED: {outcome.message}")
            return outcome

        outcome.returncode = result.returncode
        outcome.output = (result.stdout or "") + (result.stderr or "")
        for line in outcome.output.rstrip("\n").splitlines():
            self._echo(f"    {line}")

        if result.returncode != 0:
            outcome.status = OutcomeStatus.FAILED
            outcome.message = validation.failure_message
            self._echo(f"    FAILED: {outcome.message}")
        else:
            outcome.status = OutcomeStatus.PASSED
            self._echo("    OK")
        return outcome
